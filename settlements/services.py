"""Cash settlement of receptionist sales.

A settlement's `settled_amount`, `remaining_balance` and `is_settled` are never
written directly: after every change to its payments they are re-derived from
the payment rows by `recompute_settlement`, inside the same transaction and
with the settlement row locked. Overpayment leaves a negative balance.
"""
from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Tuple

from django.db import transaction
from django.db.models import Sum
from django.utils import timezone

from sachetworks.errors import ConflictError, DomainValidationError, NotFoundError
from sachetworks.money import to_money

from .models import ReceptionistSale, Settlement, SettlementPayment

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ('date', 'expected_amount', 'notes', 'settled_at')


def _lock(settlement_id: int) -> Settlement:
    settlement = Settlement.objects.select_for_update().filter(pk=settlement_id).first()
    if settlement is None:
        raise NotFoundError('Settlement not found')
    return settlement


def recompute_settlement(settlement: Settlement) -> Settlement:
    """Re-derive the aggregates of `settlement` from its payment rows and save them."""
    with transaction.atomic():
        locked = _lock(settlement.pk)
        settled = to_money(locked.payments.aggregate(total=Sum('amount'))['total'])
        if settled < 0:
            raise DomainValidationError('Settled amount cannot be negative')
        locked.settled_amount = settled
        locked.remaining_balance = to_money(locked.expected_amount) - settled
        locked.is_settled = locked.remaining_balance <= 0
        if locked.is_settled and locked.settled_at is None:
            locked.settled_at = timezone.now()
        elif not locked.is_settled:
            locked.settled_at = None
        locked.save(update_fields=['settled_amount', 'remaining_balance', 'is_settled', 'settled_at', 'updated_at'])
    return locked


def create_settlement(settlement_date: Optional[date], receptionist_sale_id: int, expected_amount,
                      initial_settled_amount, settled_by: int, notes: str = '') -> Settlement:
    expected = to_money(expected_amount)
    initial = to_money(initial_settled_amount)
    if expected < 0:
        raise DomainValidationError('Expected amount cannot be negative')
    if initial < 0:
        raise DomainValidationError('Settled amount cannot be negative')

    with transaction.atomic():
        sale = ReceptionistSale.objects.select_for_update().filter(pk=receptionist_sale_id).first()
        if sale is None:
            raise NotFoundError('Receptionist sale not found')
        if Settlement.objects.filter(receptionist_sale=sale).exists():
            raise ConflictError('This receptionist sale already has a settlement')
        settlement = Settlement.objects.create(
            date=settlement_date or timezone.localdate(),
            receptionist_sale=sale,
            expected_amount=expected,
            remaining_balance=expected,
            settled_by=settled_by,
            notes=notes or '',
        )
        if initial > 0:
            # the opening amount is a payment like any other, so the sum invariant holds from the start
            SettlementPayment.objects.create(settlement=settlement, amount=initial, paid_by=settled_by,
                                             notes='Initial settlement')
        settlement = recompute_settlement(settlement)
    logger.info('Settlement #%s created for receptionist sale #%s: expected %s, settled %s',
                settlement.pk, sale.pk, settlement.expected_amount, settlement.settled_amount)
    return settlement


def record_payment(settlement_id: int, amount, paid_by: int, paid_at: Optional[datetime] = None,
                   notes: str = '') -> Tuple[SettlementPayment, Settlement]:
    amount = to_money(amount)
    if amount <= 0:
        raise DomainValidationError('Payment amount must be greater than 0')
    with transaction.atomic():
        settlement = _lock(settlement_id)
        payment = SettlementPayment.objects.create(settlement=settlement, amount=amount, paid_by=paid_by,
                                                   paid_at=paid_at or timezone.now(), notes=notes or '')
        settlement = recompute_settlement(settlement)
    logger.info('Payment #%s of %s recorded on settlement #%s, remaining %s',
                payment.pk, amount, settlement.pk, settlement.remaining_balance)
    return payment, settlement


def delete_payment(payment_id: int) -> Settlement:
    with transaction.atomic():
        payment = SettlementPayment.objects.filter(pk=payment_id).first()
        if payment is None:
            raise NotFoundError('Settlement payment not found')
        settlement = _lock(payment.settlement_id)
        payment.delete()
        settlement = recompute_settlement(settlement)
    logger.info('Payment #%s deleted from settlement #%s, remaining %s',
                payment_id, settlement.pk, settlement.remaining_balance)
    return settlement


def update_settlement(settlement_id: int, changes: dict) -> Settlement:
    """Edit the user-owned fields, then re-derive the aggregates."""
    unknown = set(changes) - set(EDITABLE_FIELDS)
    if unknown:
        raise DomainValidationError(f"Cannot change {', '.join(sorted(unknown))} directly")
    if changes.get('expected_amount') is not None and Decimal(changes['expected_amount']) < 0:
        raise DomainValidationError('Expected amount cannot be negative')
    with transaction.atomic():
        settlement = _lock(settlement_id)
        for name, value in changes.items():
            if name == 'expected_amount':
                if value is None:
                    raise DomainValidationError('Expected amount is required')
                value = to_money(value)
            elif name == 'date' and value is None:
                raise DomainValidationError('Date is required')
            elif name == 'notes':
                value = value or ''
            setattr(settlement, name, value)
        settlement.save()
        settlement = recompute_settlement(settlement)
    logger.info('Settlement #%s updated (%s)', settlement.pk, ', '.join(sorted(changes)) or 'no changes')
    return settlement
