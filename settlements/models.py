from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

SALE_TYPE_CHOICES = [
    ('driver', 'Driver'),
    ('general', 'General'),
    ('mini_store', 'Mini store'),
]

ENTRY_TYPE_CHOICES = [
    ('driver_pickup', 'Driver pickup'),
    ('general_sales', 'General sales'),
    ('packer_production', 'Packer production'),
    ('ministore_pickup', 'Mini store pickup'),
]

MONEY = dict(max_digits=12, decimal_places=2)


# Front-desk record of bags sold, awaiting cash settlement.
class ReceptionistSale(models.Model):
    date = models.DateField(default=timezone.localdate)
    driver = models.ForeignKey('ledger.Employee', null=True, blank=True, on_delete=models.SET_NULL,
                               related_name='receptionist_sales')
    driver_name = models.CharField(max_length=120, blank=True, default='')
    sale_type = models.CharField(max_length=12, choices=SALE_TYPE_CHOICES, default='driver')
    bags_at_price_1 = models.PositiveIntegerField(default=0)
    bags_at_price_2 = models.PositiveIntegerField(default=0)
    total_bags = models.PositiveIntegerField(default=0)
    # [{"priceId": int, "amount": decimal, "bags": int}, ...]
    price_breakdown = models.JSONField(default=list, blank=True)
    expected_amount = models.DecimalField(default=Decimal('0.00'), validators=[MinValueValidator(Decimal('0'))],
                                          **MONEY)
    submitted_by = models.BigIntegerField(help_text="Id of the user who recorded the sale.")
    is_submitted = models.BooleanField(default=False)
    submitted_at = models.DateTimeField(null=True, blank=True)
    notes = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-date', '-pk']

    def __str__(self):
        return f"Receptionist sale #{self.pk} {self.total_bags} bags on {self.date}"


# Warehouse-side movement of bags, cross-checked against receptionist sales by people.
class StorekeeperEntry(models.Model):
    date = models.DateField(default=timezone.localdate)
    entry_type = models.CharField(max_length=20, choices=ENTRY_TYPE_CHOICES)
    driver = models.ForeignKey('ledger.Employee', null=True, blank=True, on_delete=models.SET_NULL,
                               related_name='storekeeper_pickups')
    driver_name = models.CharField(max_length=120, blank=True, default='')
    packer = models.ForeignKey('ledger.Employee', null=True, blank=True, on_delete=models.SET_NULL,
                               related_name='storekeeper_production')
    packer_name = models.CharField(max_length=120, blank=True, default='')
    bags_count = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    submitted_by = models.BigIntegerField()
    is_submitted = models.BooleanField(default=False)
    notes = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-date', '-pk']
        verbose_name_plural = 'storekeeper entries'

    def __str__(self):
        return f"{self.get_entry_type_display()} {self.bags_count} bags on {self.date}"


class Settlement(models.Model):
    date = models.DateField(default=timezone.localdate)
    receptionist_sale = models.OneToOneField(ReceptionistSale, on_delete=models.CASCADE, related_name='settlement')
    expected_amount = models.DecimalField(validators=[MinValueValidator(Decimal('0'))], **MONEY)
    # settled_amount, remaining_balance and is_settled are derived from the payments; see services.recompute_settlement
    settled_amount = models.DecimalField(default=Decimal('0.00'), **MONEY)
    remaining_balance = models.DecimalField(default=Decimal('0.00'), **MONEY)
    is_settled = models.BooleanField(default=False)
    settled_by = models.BigIntegerField()
    settled_at = models.DateTimeField(null=True, blank=True)
    notes = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-date', '-pk']

    def __str__(self):
        return f"Settlement #{self.pk} ({self.settled_amount}/{self.expected_amount})"


class SettlementPayment(models.Model):
    settlement = models.ForeignKey(Settlement, on_delete=models.CASCADE, related_name='payments')
    amount = models.DecimalField(validators=[MinValueValidator(Decimal('0.01'))], **MONEY)
    paid_by = models.BigIntegerField()
    paid_at = models.DateTimeField(default=timezone.now)
    notes = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['paid_at', 'pk']

    def __str__(self):
        return f"Payment {self.amount} on settlement #{self.settlement_id}"
