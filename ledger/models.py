from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from pricing.models import MATERIAL_TYPE_CHOICES

SALARY_FIXED = 'fixed'
SALARY_COMMISSION = 'commission'
SALARY_BOTH = 'both'
SALARY_TYPE_CHOICES = [
    (SALARY_FIXED, 'Fixed'),
    (SALARY_COMMISSION, 'Commission'),
    (SALARY_BOTH, 'Fixed + commission'),
]

# Expense categories. The last two are legacy spellings still accepted on input.
EXPENSE_TYPE_CHOICES = [
    ('fuel', 'Fuel'),
    ('driver_fuel', 'Driver fuel'),
    ('other', 'Other'),
    ('generator_fuel', 'Generator fuel (legacy)'),
    ('driver_payment', 'Driver payment (legacy)'),
]
FUEL_EXPENSE_TYPES = ('fuel', 'generator_fuel')
DRIVER_EXPENSE_TYPES = ('driver_fuel', 'driver_payment')
OTHER_EXPENSE_TYPES = ('other',)

SALARY_PERIOD_CHOICES = [
    ('daily', 'Daily'),
    ('weekly', 'Weekly'),
    ('monthly', 'Monthly'),
    ('first_half', 'First half of month'),
    ('second_half', 'Second half of month'),
]

MONEY = dict(max_digits=12, decimal_places=2)


class Employee(models.Model):
    name = models.CharField(max_length=120)
    email = models.EmailField(unique=True)
    phone = models.CharField(max_length=30, blank=True, default='')
    role = models.CharField(max_length=40, help_text="Driver, Packers, Manager, General, ...")
    salary_type = models.CharField(max_length=12, choices=SALARY_TYPE_CHOICES, default=SALARY_COMMISSION)
    fixed_salary = models.DecimalField(null=True, blank=True, validators=[MinValueValidator(Decimal('0'))], **MONEY)
    # Flat amount per bag, not a percentage.
    commission_rate = models.DecimalField(null=True, blank=True, validators=[MinValueValidator(Decimal('0'))],
                                          help_text="Commission per bag.", **MONEY)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name', 'pk']

    def __str__(self):
        return f"{self.name} ({self.role})"

    @property
    def is_packer(self) -> bool:
        return self.role.strip().lower() in ('packer', 'packers')


class Sale(models.Model):
    driver_name = models.CharField(max_length=120)
    driver_email = models.EmailField(blank=True, default='')
    employee = models.ForeignKey(Employee, null=True, blank=True, on_delete=models.SET_NULL, related_name='sales')
    bags_sold = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    price_per_bag = models.DecimalField(validators=[MinValueValidator(Decimal('0'))], **MONEY)
    total_amount = models.DecimalField(validators=[MinValueValidator(Decimal('0'))],
                                       help_text="bags_sold x price_per_bag unless overridden.", **MONEY)
    date = models.DateField(default=timezone.localdate)
    notes = models.TextField(blank=True, default='')
    # Material prices in effect when the sale was made; used to allocate material cost.
    sachet_roll_price = models.ForeignKey('pricing.MaterialPrice', null=True, blank=True,
                                          on_delete=models.SET_NULL, related_name='+')
    packing_nylon_price = models.ForeignKey('pricing.MaterialPrice', null=True, blank=True,
                                            on_delete=models.SET_NULL, related_name='+')
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-date', '-pk']
        indexes = [models.Index(fields=['date'], name='sale_date_idx')]

    def __str__(self):
        return f"Sale #{self.pk} {self.driver_name} {self.bags_sold} bags on {self.date}"


class Expense(models.Model):
    type = models.CharField(max_length=20, choices=EXPENSE_TYPE_CHOICES)
    description = models.CharField(max_length=255, blank=True, default='')
    amount = models.DecimalField(validators=[MinValueValidator(Decimal('0.01'))], **MONEY)
    date = models.DateField(default=timezone.localdate)
    reference = models.CharField(max_length=100, blank=True, default='')
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['-date', '-pk']
        indexes = [models.Index(fields=['date'], name='expense_date_idx')]

    def __str__(self):
        return f"{self.get_type_display()} {self.amount} on {self.date}"


class MaterialPurchase(models.Model):
    type = models.CharField(max_length=20, choices=MATERIAL_TYPE_CHOICES)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    cost = models.DecimalField(validators=[MinValueValidator(Decimal('0.01'))], **MONEY)
    date = models.DateField(default=timezone.localdate)
    notes = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['-date', '-pk']
        indexes = [models.Index(fields=['date'], name='material_purchase_date_idx')]

    def __str__(self):
        return f"{self.quantity} x {self.get_type_display()} on {self.date}"


class PackerEntry(models.Model):
    packer_name = models.CharField(max_length=120)
    packer_email = models.EmailField(blank=True, default='')
    employee = models.ForeignKey(Employee, null=True, blank=True, on_delete=models.SET_NULL,
                                 related_name='packer_entries')
    bags_packed = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    date = models.DateField(default=timezone.localdate)
    notes = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['-date', '-pk']
        verbose_name_plural = 'packer entries'

    def __str__(self):
        return f"{self.packer_name} packed {self.bags_packed} on {self.date}"


class SalaryPayment(models.Model):
    employee = models.ForeignKey(Employee, on_delete=models.PROTECT, related_name='salary_payments')
    employee_name = models.CharField(max_length=120, blank=True, default='')
    fixed_amount = models.DecimalField(null=True, blank=True, validators=[MinValueValidator(Decimal('0'))], **MONEY)
    commission_amount = models.DecimalField(null=True, blank=True, validators=[MinValueValidator(Decimal('0'))],
                                            **MONEY)
    total_amount = models.DecimalField(validators=[MinValueValidator(Decimal('0'))], **MONEY)
    period = models.CharField(max_length=12, choices=SALARY_PERIOD_CHOICES)
    period_start = models.DateField()
    period_end = models.DateField()
    paid_date = models.DateField(default=timezone.localdate)
    notes = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['-paid_date', '-pk']
        indexes = [models.Index(fields=['paid_date'], name='salary_payment_paid_date_idx')]

    def __str__(self):
        return f"Salary {self.total_amount} to {self.employee_name or self.employee_id} ({self.period})"


# Append-only change trail; nothing reads it except the audit views.
class AuditLog(models.Model):
    entity_type = models.CharField(max_length=50)
    entity_id = models.BigIntegerField()
    action = models.CharField(max_length=30)
    field = models.CharField(max_length=60, blank=True, default='')
    old_value = models.TextField(blank=True, default='')
    new_value = models.TextField(blank=True, default='')
    changed_by = models.BigIntegerField()
    changed_at = models.DateTimeField(default=timezone.now)
    reason = models.TextField(blank=True, default='')
    ip_address = models.GenericIPAddressField(null=True, blank=True)

    class Meta:
        ordering = ['-changed_at', '-pk']
        indexes = [models.Index(fields=['entity_type', 'entity_id'], name='audit_log_entity_idx')]

    def __str__(self):
        return f"{self.action} {self.entity_type}#{self.entity_id} by {self.changed_by}"
