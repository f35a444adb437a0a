from sachetworks.wire import FieldMap

RECEPTIONIST_SALE_FIELDS = FieldMap(
    {
        'date': 'date',
        'driverId': 'driver',
        'driverName': 'driver_name',
        'saleType': 'sale_type',
        'bagsAtPrice1': 'bags_at_price_1',
        'bagsAtPrice2': 'bags_at_price_2',
        'priceBreakdown': 'price_breakdown',
        'expectedAmount': 'expected_amount',
        'submittedBy': 'submitted_by',
        'isSubmitted': 'is_submitted',
        'notes': 'notes',
    },
    read_only={'id': 'id', 'totalBags': 'total_bags', 'submittedAt': 'submitted_at',
               'createdAt': 'created_at', 'updatedAt': 'updated_at'},
)

STOREKEEPER_ENTRY_FIELDS = FieldMap(
    {
        'date': 'date',
        'entryType': 'entry_type',
        'driverId': 'driver',
        'driverName': 'driver_name',
        'packerId': 'packer',
        'packerName': 'packer_name',
        'bagsCount': 'bags_count',
        'submittedBy': 'submitted_by',
        'isSubmitted': 'is_submitted',
        'notes': 'notes',
    },
    read_only={'id': 'id', 'createdAt': 'created_at', 'updatedAt': 'updated_at'},
)

SETTLEMENT_FIELDS = FieldMap(
    {
        'date': 'date',
        'expectedAmount': 'expected_amount',
        'settledAt': 'settled_at',
        'notes': 'notes',
    },
    read_only={
        'id': 'id',
        'receptionistSaleId': 'receptionist_sale',
        'settledAmount': 'settled_amount',
        'remainingBalance': 'remaining_balance',
        'isSettled': 'is_settled',
        'settledBy': 'settled_by',
        'createdAt': 'created_at',
        'updatedAt': 'updated_at',
    },
)

# Creation takes the opening amount already collected as `settledAmount`.
SETTLEMENT_CREATE_FIELDS = FieldMap(
    {
        'date': 'date',
        'receptionistSaleId': 'receptionist_sale_id',
        'expectedAmount': 'expected_amount',
        'settledAmount': 'initial_settled_amount',
        'settledBy': 'settled_by',
        'notes': 'notes',
    },
)

SETTLEMENT_PAYMENT_FIELDS = FieldMap(
    {
        'settlementId': 'settlement',
        'amount': 'amount',
        'paidBy': 'paid_by',
        'paidAt': 'paid_at',
        'notes': 'notes',
    },
    read_only={'id': 'id', 'createdAt': 'created_at'},
)
