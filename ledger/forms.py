from django import forms

from pricing.models import MATERIAL_PACKING_NYLON, MATERIAL_SACHET_ROLL
from sachetworks.errors import ConflictError
from sachetworks.forms import PayloadModelForm
from sachetworks.money import to_money

from .models import SALARY_COMMISSION, AuditLog, Employee, Expense, MaterialPurchase, PackerEntry, SalaryPayment, Sale


class EmployeeForm(PayloadModelForm):
    class Meta:
        model = Employee
        fields = ['name', 'email', 'phone', 'role', 'salary_type', 'fixed_salary', 'commission_rate']

    def clean_email(self):
        email = self.cleaned_data['email']
        taken = Employee.objects.filter(email__iexact=email).exclude(pk=self.instance.pk)
        if taken.exists():
            # a duplicate is a conflict, not a malformed payload
            raise ConflictError('An employee with this email already exists')
        return email

    def clean(self):
        cleaned = super().clean()
        salary_type = cleaned.get('salary_type')
        if salary_type and salary_type != SALARY_COMMISSION and cleaned.get('fixed_salary') is None:
            self.add_error('fixed_salary', 'Required unless the salary type is commission.')
        return cleaned


class SaleForm(PayloadModelForm):
    total_amount = forms.DecimalField(max_digits=12, decimal_places=2, required=False)

    class Meta:
        model = Sale
        fields = ['driver_name', 'driver_email', 'employee', 'bags_sold', 'price_per_bag', 'total_amount',
                  'date', 'notes', 'sachet_roll_price', 'packing_nylon_price']

    def clean(self):
        cleaned = super().clean()
        bags, price = cleaned.get('bags_sold'), cleaned.get('price_per_bag')
        if bags is None or price is None:
            return cleaned
        explicit = 'total_amount' in self.supplied and cleaned.get('total_amount') is not None
        repriced = bool(self.supplied & {'bags_sold', 'price_per_bag'})
        if not explicit and (self.instance.pk is None or repriced or cleaned.get('total_amount') is None):
            cleaned['total_amount'] = to_money(bags * price)
        self._check_material_price('sachet_roll_price', MATERIAL_SACHET_ROLL)
        self._check_material_price('packing_nylon_price', MATERIAL_PACKING_NYLON)
        return cleaned

    def _check_material_price(self, field, material_type):
        price = self.cleaned_data.get(field)
        if price is not None and price.type != material_type:
            self.add_error(field, f'Must reference a {material_type} price.')


class ExpenseForm(PayloadModelForm):
    class Meta:
        model = Expense
        fields = ['type', 'description', 'amount', 'date', 'reference']


class MaterialPurchaseForm(PayloadModelForm):
    class Meta:
        model = MaterialPurchase
        fields = ['type', 'quantity', 'cost', 'date', 'notes']


class PackerEntryForm(PayloadModelForm):
    packer_name = forms.CharField(max_length=120, required=False)

    class Meta:
        model = PackerEntry
        fields = ['packer_name', 'packer_email', 'employee', 'bags_packed', 'date', 'notes']

    def clean(self):
        cleaned = super().clean()
        if not cleaned.get('packer_name'):
            employee = cleaned.get('employee')
            if employee is not None:
                cleaned['packer_name'] = employee.name
            else:
                self.add_error('packer_name', 'This field is required.')
        return cleaned


class SalaryPaymentForm(PayloadModelForm):
    total_amount = forms.DecimalField(max_digits=12, decimal_places=2, required=False)

    class Meta:
        model = SalaryPayment
        fields = ['employee', 'employee_name', 'fixed_amount', 'commission_amount', 'total_amount',
                  'period', 'period_start', 'period_end', 'paid_date', 'notes']

    def clean(self):
        cleaned = super().clean()
        start, end = cleaned.get('period_start'), cleaned.get('period_end')
        if start and end and end < start:
            self.add_error('period_end', 'Must not be before the period start.')
        if cleaned.get('total_amount') is None:
            cleaned['total_amount'] = to_money(cleaned.get('fixed_amount')) + to_money(cleaned.get('commission_amount'))
        employee = cleaned.get('employee')
        if employee is not None and not cleaned.get('employee_name'):
            cleaned['employee_name'] = employee.name
        return cleaned


class AuditLogForm(PayloadModelForm):
    class Meta:
        model = AuditLog
        fields = ['entity_type', 'entity_id', 'action', 'field', 'old_value', 'new_value', 'changed_by', 'reason']
