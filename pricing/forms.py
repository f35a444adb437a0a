from sachetworks.forms import PayloadModelForm

from .models import BagPrice, MaterialPrice, Settings


class SettingsForm(PayloadModelForm):
    class Meta:
        model = Settings
        fields = [
            'sachet_roll_cost', 'sachet_roll_bags_per_roll',
            'packing_nylon_cost', 'packing_nylon_bags_per_package',
            'sales_price_1', 'sales_price_2', 'inventory_low_threshold',
        ]


class BagPriceForm(PayloadModelForm):
    class Meta:
        model = BagPrice
        fields = ['amount', 'label', 'sort_order', 'is_active']


class MaterialPriceForm(PayloadModelForm):
    class Meta:
        model = MaterialPrice
        fields = ['type', 'cost', 'bags_per_unit', 'label', 'sort_order', 'is_active']
