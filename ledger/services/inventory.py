"""Remaining producible bags, derived from every material purchase minus every bag sold.

Each bag consumes one unit of sachet film and one unit of packing nylon, so the
scarcer material bounds what can still be produced. History is never windowed.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional

from django.db import DatabaseError
from django.db.models import Sum

from pricing.models import MATERIAL_PACKING_NYLON, MATERIAL_SACHET_ROLL
from pricing.services import get_settings

from ..models import MaterialPurchase, Sale

logger = logging.getLogger(__name__)


@dataclass
class MaterialStock:
    units: int = 0
    bags_per_unit: int = 0
    capacity: int = 0
    used_bags: int = 0
    remaining_bags: int = 0


@dataclass
class InventoryStatus:
    sachet_rolls: MaterialStock = field(default_factory=MaterialStock)
    packing_nylon: MaterialStock = field(default_factory=MaterialStock)
    total_bags_sold: int = 0
    effective_capacity: int = 0
    total_remaining_bags: int = 0
    needs_restock: bool = True
    threshold: int = 0

    def as_dict(self) -> dict:
        return asdict(self)


def _stock(units: int, bags_per_unit: int, total_bags_sold: int) -> MaterialStock:
    capacity = units * bags_per_unit
    used = min(total_bags_sold, capacity)
    return MaterialStock(units=units, bags_per_unit=bags_per_unit, capacity=capacity,
                         used_bags=used, remaining_bags=max(0, capacity - used))


def reconcile(sachet_rolls: int, packing_nylon: int, total_bags_sold: int,
              bags_per_roll: int, bags_per_package: int, threshold: int) -> InventoryStatus:
    """Pure arithmetic behind the inventory status."""
    sachet = _stock(sachet_rolls, bags_per_roll, total_bags_sold)
    nylon = _stock(packing_nylon, bags_per_package, total_bags_sold)
    effective = min(sachet.capacity, nylon.capacity)
    remaining = max(0, effective - total_bags_sold)
    return InventoryStatus(
        sachet_rolls=sachet,
        packing_nylon=nylon,
        total_bags_sold=total_bags_sold,
        effective_capacity=effective,
        total_remaining_bags=remaining,
        needs_restock=remaining < threshold,
        threshold=threshold,
    )


def _units_by_type() -> Dict[str, int]:
    rows = MaterialPurchase.objects.values('type').annotate(units=Sum('quantity'))
    return {row['type']: row['units'] or 0 for row in rows}


def _total_bags_sold() -> int:
    return Sale.objects.aggregate(total=Sum('bags_sold'))['total'] or 0


def get_inventory_status(threshold: Optional[int] = None) -> InventoryStatus:
    """Current stock position. Never raises: a failed read yields an all-zero status flagged for restock."""
    try:
        settings = get_settings()
        if threshold is None:
            threshold = settings.inventory_low_threshold
        units = _units_by_type()
        return reconcile(
            units.get(MATERIAL_SACHET_ROLL, 0),
            units.get(MATERIAL_PACKING_NYLON, 0),
            _total_bags_sold(),
            settings.sachet_roll_bags_per_roll,
            settings.packing_nylon_bags_per_package,
            threshold,
        )
    except DatabaseError:
        logger.exception('Inventory status unavailable, reporting empty stock')
        return InventoryStatus(needs_restock=True, threshold=threshold or 0)


def get_inventory_breakdown() -> dict:
    """Purchases grouped per material with capacity and usage. Errors propagate."""
    settings = get_settings()
    total_bags_sold = _total_bags_sold()
    purchases: Dict[str, List[MaterialPurchase]] = {MATERIAL_SACHET_ROLL: [], MATERIAL_PACKING_NYLON: []}
    for purchase in MaterialPurchase.objects.order_by('date', 'pk'):
        purchases.setdefault(purchase.type, []).append(purchase)

    sachet = _stock(sum(p.quantity for p in purchases[MATERIAL_SACHET_ROLL]),
                    settings.sachet_roll_bags_per_roll, total_bags_sold)
    nylon = _stock(sum(p.quantity for p in purchases[MATERIAL_PACKING_NYLON]),
                   settings.packing_nylon_bags_per_package, total_bags_sold)
    return {
        'sachet_rolls': {'purchases': purchases[MATERIAL_SACHET_ROLL], **asdict(sachet)},
        'packing_nylon': {'purchases': purchases[MATERIAL_PACKING_NYLON], **asdict(nylon)},
        'total_bags_sold': total_bags_sold,
        'effective_capacity': min(sachet.capacity, nylon.capacity),
    }
