from sachetworks.wire import FieldMap

SETTINGS_FIELDS = FieldMap(
    {
        'sachetRollCost': 'sachet_roll_cost',
        'sachetRollBagsPerRoll': 'sachet_roll_bags_per_roll',
        'packingNylonCost': 'packing_nylon_cost',
        'packingNylonBagsPerPackage': 'packing_nylon_bags_per_package',
        'salesPrice1': 'sales_price_1',
        'salesPrice2': 'sales_price_2',
        'inventoryLowThreshold': 'inventory_low_threshold',
    },
    read_only={'id': 'id', 'updatedAt': 'updated_at'},
)

BAG_PRICE_FIELDS = FieldMap(
    {
        'amount': 'amount',
        'label': 'label',
        'sortOrder': 'sort_order',
        'isActive': 'is_active',
    },
    read_only={'id': 'id', 'createdAt': 'created_at', 'updatedAt': 'updated_at'},
)

MATERIAL_PRICE_FIELDS = FieldMap(
    {
        'type': 'type',
        'cost': 'cost',
        'bagsPerUnit': 'bags_per_unit',
        'label': 'label',
        'sortOrder': 'sort_order',
        'isActive': 'is_active',
    },
    read_only={'id': 'id', 'createdAt': 'created_at', 'updatedAt': 'updated_at'},
)
