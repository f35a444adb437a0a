"""Settings provider and unit-cost helpers shared by the reporting code."""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional, Tuple

from django.db import DatabaseError, transaction

from sachetworks.wire import bind_form

from .forms import SettingsForm
from .models import Settings
from .serializers import SETTINGS_FIELDS

logger = logging.getLogger(__name__)


def get_settings() -> Settings:
    """Current settings, re-read on every call; defaults when no row exists or it can't be read."""
    try:
        return Settings.load()
    except DatabaseError:
        logger.exception('Could not read settings, falling back to defaults')
        return Settings()


def update_settings(changes: dict) -> Settings:
    """Apply a partial update (model field names), creating the row on first save."""
    with transaction.atomic():
        current = Settings.objects.select_for_update().order_by('pk').first() or Settings()
        form = bind_form(SettingsForm, changes, SETTINGS_FIELDS, instance=current)
        saved = form.save()
    logger.info('Settings updated: %s', ', '.join(sorted(changes)) or 'no changes')
    return saved


def material_cost_per_bag(settings: Optional[Settings] = None) -> Tuple[Decimal, Decimal]:
    """Return `(sachet_cost_per_bag, nylon_cost_per_bag)`, unrounded."""
    settings = settings or get_settings()
    sachet = Decimal(settings.sachet_roll_cost) / settings.sachet_roll_bags_per_roll
    nylon = Decimal(settings.packing_nylon_cost) / settings.packing_nylon_bags_per_package
    return sachet, nylon
