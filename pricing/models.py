from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

# Defaults used whenever no Settings row has been saved yet.
DEFAULT_SACHET_ROLL_COST = Decimal('31000.00')
DEFAULT_SACHET_ROLL_BAGS_PER_ROLL = 450
DEFAULT_PACKING_NYLON_COST = Decimal('100000.00')
DEFAULT_PACKING_NYLON_BAGS_PER_PACKAGE = 10000
DEFAULT_SALES_PRICE_1 = Decimal('250.00')
DEFAULT_SALES_PRICE_2 = Decimal('270.00')
DEFAULT_INVENTORY_LOW_THRESHOLD = 4000

MATERIAL_SACHET_ROLL = 'sachet_roll'
MATERIAL_PACKING_NYLON = 'packing_nylon'
MATERIAL_TYPE_CHOICES = [
    (MATERIAL_SACHET_ROLL, 'Sachet roll'),
    (MATERIAL_PACKING_NYLON, 'Packing nylon'),
]


# Singleton holding the current unit economics. Only the first row is ever read.
class Settings(models.Model):
    sachet_roll_cost = models.DecimalField(max_digits=12, decimal_places=2, default=DEFAULT_SACHET_ROLL_COST,
                                           validators=[MinValueValidator(Decimal('0'))],
                                           help_text="Cost of one sachet roll.")
    sachet_roll_bags_per_roll = models.PositiveIntegerField(default=DEFAULT_SACHET_ROLL_BAGS_PER_ROLL,
                                                            validators=[MinValueValidator(1)],
                                                            help_text="Bags produced from one sachet roll.")
    packing_nylon_cost = models.DecimalField(max_digits=12, decimal_places=2, default=DEFAULT_PACKING_NYLON_COST,
                                             validators=[MinValueValidator(Decimal('0'))],
                                             help_text="Cost of one packing nylon package.")
    packing_nylon_bags_per_package = models.PositiveIntegerField(default=DEFAULT_PACKING_NYLON_BAGS_PER_PACKAGE,
                                                                 validators=[MinValueValidator(1)],
                                                                 help_text="Bags packed from one nylon package.")
    # Legacy two-tier pricing, superseded by BagPrice but still used to price receptionist sales without a breakdown.
    sales_price_1 = models.DecimalField(max_digits=10, decimal_places=2, default=DEFAULT_SALES_PRICE_1,
                                        validators=[MinValueValidator(Decimal('0'))])
    sales_price_2 = models.DecimalField(max_digits=10, decimal_places=2, default=DEFAULT_SALES_PRICE_2,
                                        validators=[MinValueValidator(Decimal('0'))])
    inventory_low_threshold = models.PositiveIntegerField(default=DEFAULT_INVENTORY_LOW_THRESHOLD,
                                                          help_text="Remaining bags below which a restock is flagged.")
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'settings'
        verbose_name_plural = 'settings'

    def __str__(self):
        return f"Settings (roll {self.sachet_roll_cost}/{self.sachet_roll_bags_per_roll}, nylon {self.packing_nylon_cost}/{self.packing_nylon_bags_per_package})"

    @classmethod
    def load(cls):
        """Return the stored row, or an unsaved instance carrying the defaults."""
        return cls.objects.order_by('pk').first() or cls()


class BagPrice(models.Model):
    amount = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(Decimal('0.01'))])
    label = models.CharField(max_length=100, blank=True, default='')
    sort_order = models.IntegerField(default=0)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['sort_order', 'pk']

    def __str__(self):
        return self.label or f"{self.amount}"


class MaterialPrice(models.Model):
    type = models.CharField(max_length=20, choices=MATERIAL_TYPE_CHOICES)
    cost = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(Decimal('0'))])
    bags_per_unit = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    label = models.CharField(max_length=100, blank=True, default='')
    sort_order = models.IntegerField(default=0)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['type', 'sort_order', 'pk']

    def __str__(self):
        return f"{self.get_type_display()}: {self.cost} / {self.bags_per_unit} bags"

    @property
    def cost_per_bag(self) -> Decimal:
        return self.cost / self.bags_per_unit
