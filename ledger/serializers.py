from sachetworks.wire import FieldMap, to_json_value

EMPLOYEE_FIELDS = FieldMap(
    {
        'name': 'name',
        'email': 'email',
        'phone': 'phone',
        'role': 'role',
        'salaryType': 'salary_type',
        'fixedSalary': 'fixed_salary',
        'commissionRate': 'commission_rate',
    },
    read_only={'id': 'id', 'createdAt': 'created_at', 'updatedAt': 'updated_at'},
)

SALE_FIELDS = FieldMap(
    {
        'driverName': 'driver_name',
        'driverEmail': 'driver_email',
        'employeeId': 'employee',
        'bagsSold': 'bags_sold',
        'pricePerBag': 'price_per_bag',
        'totalAmount': 'total_amount',
        'date': 'date',
        'notes': 'notes',
        'sachetRollPriceId': 'sachet_roll_price',
        'packingNylonPriceId': 'packing_nylon_price',
    },
    read_only={'id': 'id', 'createdAt': 'created_at', 'updatedAt': 'updated_at'},
)

EXPENSE_FIELDS = FieldMap(
    {
        'type': 'type',
        'description': 'description',
        'amount': 'amount',
        'date': 'date',
        'reference': 'reference',
    },
    read_only={'id': 'id', 'createdAt': 'created_at'},
)

MATERIAL_PURCHASE_FIELDS = FieldMap(
    {
        'type': 'type',
        'quantity': 'quantity',
        'cost': 'cost',
        'date': 'date',
        'notes': 'notes',
    },
    read_only={'id': 'id', 'createdAt': 'created_at'},
)

PACKER_ENTRY_FIELDS = FieldMap(
    {
        'packerName': 'packer_name',
        'packerEmail': 'packer_email',
        'employeeId': 'employee',
        'bagsPacked': 'bags_packed',
        'date': 'date',
        'notes': 'notes',
    },
    read_only={'id': 'id', 'createdAt': 'created_at'},
)

SALARY_PAYMENT_FIELDS = FieldMap(
    {
        'employeeId': 'employee',
        'employeeName': 'employee_name',
        'fixedAmount': 'fixed_amount',
        'commissionAmount': 'commission_amount',
        'totalAmount': 'total_amount',
        'period': 'period',
        'periodStart': 'period_start',
        'periodEnd': 'period_end',
        'paidDate': 'paid_date',
        'notes': 'notes',
    },
    read_only={'id': 'id', 'createdAt': 'created_at'},
)

AUDIT_LOG_FIELDS = FieldMap(
    {
        'entityType': 'entity_type',
        'entityId': 'entity_id',
        'action': 'action',
        'field': 'field',
        'oldValue': 'old_value',
        'newValue': 'new_value',
        'changedBy': 'changed_by',
        'reason': 'reason',
    },
    read_only={'id': 'id', 'changedAt': 'changed_at', 'ipAddress': 'ip_address'},
)

# Derived results (read-only).

MATERIAL_STOCK_FIELDS = FieldMap({}, read_only={
    'units': 'units',
    'bagsPerUnit': 'bags_per_unit',
    'totalBagsCapacity': 'capacity',
    'usedBags': 'used_bags',
    'remainingBags': 'remaining_bags',
})

FINANCIAL_REPORT_FIELDS = FieldMap({}, read_only={
    'period': 'period',
    'startDate': 'start_date',
    'endDate': 'end_date',
    'totalRevenue': 'total_revenue',
    'totalExpenses': 'total_expenses',
    'totalSalaries': 'total_salaries',
    'materialCosts': 'material_costs',
    'materialCostAllocated': 'material_cost_allocated',
    'fuelCosts': 'fuel_costs',
    'driverPayments': 'driver_payments',
    'otherExpenses': 'other_expenses',
    'uncategorizedExpenses': 'uncategorized_expenses',
    'totalBagsSold': 'total_bags_sold',
    'profit': 'profit',
    'profitMargin': 'profit_margin',
    'partial': 'partial',
})

COMMISSION_FIELDS = FieldMap({}, read_only={
    'employeeId': 'employee_id',
    'employeeName': 'employee_name',
    'role': 'role',
    'source': 'source',
    'totalBags': 'total_bags',
    'commission': 'commission',
    'error': 'error',
})


def dump_inventory_status(status) -> dict:
    return {
        'sachetRolls': MATERIAL_STOCK_FIELDS.dump(status.sachet_rolls),
        'packingNylon': MATERIAL_STOCK_FIELDS.dump(status.packing_nylon),
        'totalBagsSold': status.total_bags_sold,
        'effectiveCapacity': status.effective_capacity,
        'totalRemainingBags': status.total_remaining_bags,
        'needsRestock': status.needs_restock,
        'restockThreshold': status.threshold,
    }


def dump_inventory_breakdown(breakdown: dict) -> dict:
    def material(part):
        return {
            'purchases': [MATERIAL_PURCHASE_FIELDS.dump(p) for p in part['purchases']],
            'units': part['units'],
            'bagsPerUnit': part['bags_per_unit'],
            'totalBagsCapacity': part['capacity'],
            'usedBags': part['used_bags'],
            'remainingBags': part['remaining_bags'],
        }

    return {
        'sachetRolls': material(breakdown['sachet_rolls']),
        'packingNylon': material(breakdown['packing_nylon']),
        'totalBagsSold': breakdown['total_bags_sold'],
        'effectiveCapacity': breakdown['effective_capacity'],
    }


def dump_commission(result, with_rows: bool = True) -> dict:
    data = COMMISSION_FIELDS.dump(result)
    if with_rows:
        row_fields = PACKER_ENTRY_FIELDS if result.source == 'packer' else SALE_FIELDS
        data['sales' if result.source == 'sales' else 'entries'] = [row_fields.dump(r) for r in result.rows]
    return data


def dump_trend_point(point: dict) -> dict:
    return {
        'periodLabel': point['period_label'],
        'startDate': to_json_value(point['start_date']),
        'endDate': to_json_value(point['end_date']),
        'revenue': to_json_value(point['revenue']),
        'expenses': to_json_value(point['expenses']),
        'profit': to_json_value(point['profit']),
        'partial': point['partial'],
    }
