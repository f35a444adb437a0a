"""Per-bag commission and salary projections.

Commission is a flat amount per bag attributed to the employee through the
numeric employee foreign key; names on the rows are never matched.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from django.db import DatabaseError

from sachetworks.errors import DomainValidationError
from sachetworks.money import ZERO, to_money
from sachetworks.wire import filter_date_range

from ..models import SALARY_BOTH, SALARY_COMMISSION, SALARY_FIXED, Employee, PackerEntry, Sale

logger = logging.getLogger(__name__)

SOURCE_SALES = 'sales'
SOURCE_PACKER = 'packer'

# Share of a monthly fixed salary paid for each period.
PERIOD_DIVISORS = {
    'daily': 30,
    'weekly': 4,
    'monthly': 1,
    'first_half': 2,
    'second_half': 2,
}


@dataclass
class CommissionResult:
    employee_id: int
    source: str
    total_bags: int = 0
    commission: Decimal = ZERO
    rows: List = field(default_factory=list)
    error: Optional[str] = None
    employee_name: str = ''
    role: str = ''


def _commission_rate(employee_id: int) -> Decimal:
    employee = Employee.objects.filter(pk=employee_id).first()
    if employee is None or employee.salary_type == SALARY_FIXED or not employee.commission_rate:
        return ZERO
    return employee.commission_rate


def _attributed(queryset, employee_id, bags_field, start, end, source) -> CommissionResult:
    rows = list(filter_date_range(queryset.filter(employee_id=employee_id), 'date', start, end))
    total_bags = sum(getattr(r, bags_field) for r in rows)
    commission = to_money(total_bags * _commission_rate(employee_id))
    return CommissionResult(employee_id=employee_id, source=source, total_bags=total_bags,
                            commission=commission, rows=rows)


def calculate_commission_from_sales(employee_id: int, start: Optional[date] = None,
                                    end: Optional[date] = None) -> CommissionResult:
    """Commission on bags sold; `start`/`end` are inclusive, None means unbounded."""
    return _attributed(Sale.objects.order_by('date', 'pk'), employee_id, 'bags_sold', start, end, SOURCE_SALES)


def calculate_commission_from_packer_entries(employee_id: int, start: Optional[date] = None,
                                             end: Optional[date] = None) -> CommissionResult:
    return _attributed(PackerEntry.objects.order_by('date', 'pk'), employee_id, 'bags_packed', start, end,
                       SOURCE_PACKER)


def calculate_employee_salary(employee: Employee, bags_sold: int, period: str) -> Decimal:
    """Projected pay for one period. Display only; nothing is recorded."""
    if period not in PERIOD_DIVISORS:
        raise DomainValidationError(f'Unknown salary period: {period}')
    total = Decimal('0')
    if employee.salary_type in (SALARY_FIXED, SALARY_BOTH) and employee.fixed_salary:
        total += Decimal(employee.fixed_salary) / PERIOD_DIVISORS[period]
    if employee.salary_type in (SALARY_COMMISSION, SALARY_BOTH) and employee.commission_rate:
        total += bags_sold * Decimal(employee.commission_rate)
    return to_money(total)


def commission_for(employee: Employee, start: Optional[date] = None, end: Optional[date] = None) -> CommissionResult:
    if employee.is_packer:
        return calculate_commission_from_packer_entries(employee.pk, start, end)
    return calculate_commission_from_sales(employee.pk, start, end)


def commission_summary(start: Optional[date] = None, end: Optional[date] = None) -> List[CommissionResult]:
    """One result per employee. A failing employee gets a zero result instead of sinking the whole summary."""
    summary = []
    for employee in Employee.objects.order_by('name', 'pk'):
        source = SOURCE_PACKER if employee.is_packer else SOURCE_SALES
        try:
            result = commission_for(employee, start, end)
        except (DatabaseError, InvalidOperation, TypeError, ValueError) as exc:
            logger.exception('Commission for employee #%s failed', employee.pk)
            result = CommissionResult(employee_id=employee.pk, source=source, error=str(exc) or exc.__class__.__name__)
        result.employee_name = employee.name
        result.role = employee.role
        summary.append(result)
    return summary
