import logging

from django.db import transaction
from django.views.decorators.http import require_GET, require_POST

from sachetworks.errors import DomainValidationError, NotFoundError
from sachetworks.resources import Resource
from sachetworks.wire import bind_form, ok, parse_date, parse_date_range, parse_int, parse_json

from .forms import (AuditLogForm, EmployeeForm, ExpenseForm, MaterialPurchaseForm, PackerEntryForm,
                    SalaryPaymentForm, SaleForm)
from .models import AuditLog, Employee, Expense, MaterialPurchase, PackerEntry, SalaryPayment, Sale
from .serializers import (AUDIT_LOG_FIELDS, EMPLOYEE_FIELDS, EXPENSE_FIELDS, FINANCIAL_REPORT_FIELDS,
                          MATERIAL_PURCHASE_FIELDS, PACKER_ENTRY_FIELDS, SALARY_PAYMENT_FIELDS, SALE_FIELDS,
                          dump_commission, dump_inventory_breakdown, dump_inventory_status, dump_trend_point)
from .services.commissions import (PERIOD_DIVISORS, SOURCE_PACKER, SOURCE_SALES,
                                   calculate_commission_from_packer_entries, calculate_commission_from_sales,
                                   calculate_employee_salary, commission_for, commission_summary)
from .services.inventory import get_inventory_breakdown, get_inventory_status
from .services.reports import PERIODS, default_report_date, generate_report, period_bounds, trend_series

logger = logging.getLogger(__name__)


def _by_employee(request, qs):
    employee_id = parse_int(request.GET.get('employeeId'), 'employeeId')
    if employee_id is not None:
        qs = qs.filter(employee_id=employee_id)
    return qs


def _by_type(request, qs):
    kind = request.GET.get('type')
    return qs.filter(type=kind) if kind else qs


def _by_entity(request, qs):
    entity_type = request.GET.get('entityType')
    entity_id = parse_int(request.GET.get('entityId'), 'entityId')
    if entity_type:
        qs = qs.filter(entity_type=entity_type)
    if entity_id is not None:
        qs = qs.filter(entity_id=entity_id)
    return qs


employees = Resource(Employee, EmployeeForm, EMPLOYEE_FIELDS, 'Employee', ordering=('name', 'pk'))
sales = Resource(Sale, SaleForm, SALE_FIELDS, 'Sale', date_field='date', ordering=('-date', '-pk'),
                 filter_queryset=_by_employee)
expenses = Resource(Expense, ExpenseForm, EXPENSE_FIELDS, 'Expense', date_field='date', ordering=('-date', '-pk'),
                    filter_queryset=_by_type)
material_purchases = Resource(MaterialPurchase, MaterialPurchaseForm, MATERIAL_PURCHASE_FIELDS, 'Material purchase',
                              date_field='date', ordering=('-date', '-pk'), filter_queryset=_by_type)
packer_entries = Resource(PackerEntry, PackerEntryForm, PACKER_ENTRY_FIELDS, 'Packer entry', date_field='date',
                          ordering=('-date', '-pk'), filter_queryset=_by_employee)
salary_payments = Resource(SalaryPayment, SalaryPaymentForm, SALARY_PAYMENT_FIELDS, 'Salary payment',
                           date_field='paid_date', ordering=('-paid_date', '-pk'), filter_queryset=_by_employee,
                           allow_update=False)


class AuditLogResource(Resource):
    def create(self, request):
        changes = self.fields.load(parse_json(request))
        form = bind_form(self.form_class, changes, self.fields)
        entry = form.save(commit=False)
        entry.ip_address = request.META.get('REMOTE_ADDR') or None
        entry.save()
        return ok(self.fields.dump(entry), 'Audit entry recorded', status=201)


audit_logs = AuditLogResource(AuditLog, AuditLogForm, AUDIT_LOG_FIELDS, 'Audit entry', date_field='changed_at__date',
                              ordering=('-changed_at', '-pk'), filter_queryset=_by_entity, allow_update=False)


@require_POST
def expense_batch(request):
    """Create several expenses at once; one invalid row rejects the whole submission."""
    payload = parse_json(request)
    rows = payload.get('expenses')
    if not isinstance(rows, list) or not rows:
        raise DomainValidationError('expenses must be a non-empty list')
    created = []
    with transaction.atomic():
        for index, row in enumerate(rows):
            try:
                form = bind_form(ExpenseForm, EXPENSE_FIELDS.load(row), EXPENSE_FIELDS)
            except DomainValidationError as exc:
                raise DomainValidationError(f'expenses[{index}]: {exc.message}')
            created.append(form.save())
    logger.info('Recorded %d expenses in one batch', len(created))
    return ok([EXPENSE_FIELDS.dump(e) for e in created], f'{len(created)} expenses created successfully', status=201)


@require_GET
def inventory_status(request):
    threshold = parse_int(request.GET.get('threshold'), 'threshold')
    return ok(dump_inventory_status(get_inventory_status(threshold)))


@require_GET
def inventory_breakdown(request):
    return ok(dump_inventory_breakdown(get_inventory_breakdown()))


def _get_employee(employee_id):
    employee = Employee.objects.filter(pk=employee_id).first()
    if employee is None:
        raise NotFoundError('Employee not found')
    return employee


@require_GET
def employee_commission(request, employee_id):
    employee = _get_employee(employee_id)
    start, end = parse_date_range(request)
    source = request.GET.get('source')
    if source == SOURCE_SALES:
        result = calculate_commission_from_sales(employee.pk, start, end)
    elif source == SOURCE_PACKER:
        result = calculate_commission_from_packer_entries(employee.pk, start, end)
    elif source:
        raise DomainValidationError('source must be sales or packer')
    else:
        result = commission_for(employee, start, end)
    result.employee_name, result.role = employee.name, employee.role
    return ok(dump_commission(result))


@require_GET
def commissions_summary(request):
    start, end = parse_date_range(request)
    return ok([dump_commission(r, with_rows=False) for r in commission_summary(start, end)])


@require_GET
def salary_projection(request, employee_id):
    employee = _get_employee(employee_id)
    bags = parse_int(request.GET.get('bags'), 'bags') or 0
    if bags < 0:
        raise DomainValidationError('bags must not be negative')
    period = request.GET.get('period') or 'monthly'
    if period not in PERIOD_DIVISORS:
        raise DomainValidationError(f'period must be one of {", ".join(PERIOD_DIVISORS)}')
    amount = calculate_employee_salary(employee, bags, period)
    return ok({'employeeId': employee.pk, 'bags': bags, 'period': period, 'projectedSalary': float(amount)})


def _report_period(request):
    period = request.GET.get('period') or 'daily'
    if period not in PERIODS + ('custom',):
        raise DomainValidationError(f'period must be one of {", ".join(PERIODS)} or custom')
    return period


@require_GET
def financial_report(request):
    period = _report_period(request)
    start, end = parse_date_range(request)
    if start is None and end is None:
        start, end = period_bounds('daily' if period == 'custom' else period, default_report_date())
    return ok(FINANCIAL_REPORT_FIELDS.dump(generate_report(period, start, end)))


@require_GET
def report_trend(request):
    period = _report_period(request)
    if period == 'custom':
        raise DomainValidationError('Trend needs a calendar period')
    anchor = parse_date(request.GET.get('date'), 'date') or default_report_date()
    count = parse_int(request.GET.get('count'), 'count')
    if count is None:
        count = 7
    if not 1 <= count <= 60:
        raise DomainValidationError('count must be between 1 and 60')
    return ok([dump_trend_point(p) for p in trend_series(period, anchor, count)])


@require_GET
def report_default_date(request):
    return ok({'date': default_report_date().isoformat()})
