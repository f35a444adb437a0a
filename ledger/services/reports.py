"""Profit and loss over a date window, and the trailing trend series built from it.

Two material figures are carried side by side: `material_costs` is cash spent
on purchases in the window (shown as the Materials line), while
`material_cost_allocated` charges each bag sold with its material cost and is
the one that enters `total_expenses`.
"""
from __future__ import annotations

import calendar
import logging
from dataclasses import asdict, dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import List, Optional, Tuple

from django.db import DatabaseError
from django.db.models import Max, Sum
from django.utils import timezone

from pricing.services import get_settings, material_cost_per_bag
from sachetworks.errors import DomainValidationError
from sachetworks.money import ZERO, to_money
from sachetworks.wire import filter_date_range

from ..models import (DRIVER_EXPENSE_TYPES, FUEL_EXPENSE_TYPES, OTHER_EXPENSE_TYPES, Expense, MaterialPurchase,
                      PackerEntry, SalaryPayment, Sale)

logger = logging.getLogger(__name__)

PERIODS = ('daily', 'weekly', 'monthly', 'quarterly', 'yearly')
TREND_POINTS = 7


@dataclass
class FinancialReport:
    period: str
    start_date: Optional[date]
    end_date: Optional[date]
    total_revenue: Decimal = ZERO
    total_expenses: Decimal = ZERO
    total_salaries: Decimal = ZERO
    material_costs: Decimal = ZERO
    material_cost_allocated: Decimal = ZERO
    fuel_costs: Decimal = ZERO
    driver_payments: Decimal = ZERO
    other_expenses: Decimal = ZERO
    uncategorized_expenses: Decimal = ZERO
    total_bags_sold: int = 0
    profit: Decimal = ZERO
    profit_margin: Decimal = ZERO
    partial: bool = False

    def as_dict(self) -> dict:
        return asdict(self)


def _sum(queryset, field: str) -> Decimal:
    return to_money(queryset.aggregate(total=Sum(field))['total'])


def _allocated_material_cost(sales) -> Tuple[int, Decimal]:
    default_sachet, default_nylon = material_cost_per_bag(get_settings())
    bags = 0
    allocated = ZERO
    for sale in sales:
        sachet = sale.sachet_roll_price.cost_per_bag if sale.sachet_roll_price else default_sachet
        nylon = sale.packing_nylon_price.cost_per_bag if sale.packing_nylon_price else default_nylon
        bags += sale.bags_sold
        # rounded per sale so reports over adjacent windows add up to the combined window
        allocated += to_money(sale.bags_sold * (sachet + nylon))
    return bags, allocated


def _build(period: str, start: Optional[date], end: Optional[date]) -> FinancialReport:
    sales = filter_date_range(
        Sale.objects.select_related('sachet_roll_price', 'packing_nylon_price'), 'date', start, end)
    expenses = filter_date_range(Expense.objects.all(), 'date', start, end)
    purchases = filter_date_range(MaterialPurchase.objects.all(), 'date', start, end)
    salaries = filter_date_range(SalaryPayment.objects.all(), 'paid_date', start, end)

    report = FinancialReport(period=period, start_date=start, end_date=end)
    report.total_revenue = _sum(sales, 'total_amount')

    known = FUEL_EXPENSE_TYPES + DRIVER_EXPENSE_TYPES + OTHER_EXPENSE_TYPES
    report.fuel_costs = _sum(expenses.filter(type__in=FUEL_EXPENSE_TYPES), 'amount')
    report.driver_payments = _sum(expenses.filter(type__in=DRIVER_EXPENSE_TYPES), 'amount')
    report.other_expenses = _sum(expenses.filter(type__in=OTHER_EXPENSE_TYPES), 'amount')
    report.uncategorized_expenses = _sum(expenses.exclude(type__in=known), 'amount')

    report.material_costs = _sum(purchases, 'cost')
    report.total_bags_sold, report.material_cost_allocated = _allocated_material_cost(sales)
    report.total_salaries = _sum(salaries, 'total_amount')

    report.total_expenses = (report.fuel_costs + report.driver_payments + report.other_expenses
                             + report.uncategorized_expenses + report.material_cost_allocated
                             + report.total_salaries)
    report.profit = report.total_revenue - report.total_expenses
    if report.total_revenue > 0:
        report.profit_margin = to_money(report.profit / report.total_revenue * 100)
    return report


def generate_report(period: str, start: Optional[date], end: Optional[date]) -> FinancialReport:
    """Report for the inclusive window `[start, end]`.

    A failed read does not raise; the caller gets a zero-valued report with
    `partial=True` and the failure is logged.
    """
    try:
        return _build(period, start, end)
    except DatabaseError:
        logger.exception('Report %s %s..%s could not be built', period, start, end)
        return FinancialReport(period=period, start_date=start, end_date=end, partial=True)


def _add_months(d: date, months: int) -> date:
    index = d.year * 12 + (d.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def _month_end(d: date) -> date:
    return date(d.year, d.month, calendar.monthrange(d.year, d.month)[1])


def period_bounds(period: str, anchor: date) -> Tuple[date, date]:
    """Inclusive calendar period of the given granularity containing `anchor`. Weeks start on Sunday."""
    if period == 'daily':
        return anchor, anchor
    if period == 'weekly':
        start = anchor - timedelta(days=(anchor.weekday() + 1) % 7)
        return start, start + timedelta(days=6)
    if period == 'monthly':
        start = anchor.replace(day=1)
        return start, _month_end(start)
    if period == 'quarterly':
        start = date(anchor.year, 3 * ((anchor.month - 1) // 3) + 1, 1)
        return start, _month_end(_add_months(start, 2))
    if period == 'yearly':
        return date(anchor.year, 1, 1), date(anchor.year, 12, 31)
    raise DomainValidationError(f'Unknown period: {period}')


def _shift(period: str, start: date, steps: int) -> date:
    if period == 'daily':
        return start + timedelta(days=steps)
    if period == 'weekly':
        return start + timedelta(weeks=steps)
    return _add_months(start, steps * {'monthly': 1, 'quarterly': 3, 'yearly': 12}[period])


def period_label(period: str, start: date) -> str:
    if period == 'daily':
        return f"{start:%b} {start.day}"
    if period == 'yearly':
        return f"{start:%Y}"
    return f"{start:%b %Y}"


def trend_series(period: str, anchor: date, count: int = TREND_POINTS) -> List[dict]:
    """`count` consecutive periods ending with the one containing `anchor`, oldest first."""
    current_start, _ = period_bounds(period, anchor)
    points = []
    for back in range(count - 1, -1, -1):
        start, end = period_bounds(period, _shift(period, current_start, -back))
        report = generate_report(period, start, end)
        points.append({
            'period_label': period_label(period, start),
            'start_date': start,
            'end_date': end,
            'revenue': report.total_revenue,
            'expenses': report.total_expenses,
            'profit': report.profit,
            'partial': report.partial,
        })
    return points


def default_report_date() -> date:
    """Latest date carrying any activity, never later than today."""
    today = timezone.localdate()
    candidates = [
        Sale.objects.aggregate(latest=Max('date'))['latest'],
        Expense.objects.aggregate(latest=Max('date'))['latest'],
        MaterialPurchase.objects.aggregate(latest=Max('date'))['latest'],
        PackerEntry.objects.aggregate(latest=Max('date'))['latest'],
        SalaryPayment.objects.aggregate(latest=Max('paid_date'))['latest'],
    ]
    found = [d for d in candidates if d is not None]
    if not found:
        return today
    return min(max(found), today)
