import tempfile
from datetime import date, timedelta
from decimal import Decimal
from io import StringIO
from pathlib import Path
from unittest import mock

from django.core.management import call_command
from django.db import DatabaseError
from django.test import TestCase
from django.urls import reverse
from django.utils import timezone

from pricing.models import MaterialPrice, Settings
from sachetworks.errors import DomainValidationError

from .models import Employee, Expense, MaterialPurchase, PackerEntry, SalaryPayment, Sale
from .services import commissions as commission_service
from .services.commissions import (calculate_commission_from_packer_entries, calculate_commission_from_sales,
                                   calculate_employee_salary, commission_summary)
from .services.inventory import get_inventory_breakdown, get_inventory_status, reconcile
from .services.reports import default_report_date, generate_report, period_bounds, trend_series

D1 = date(2024, 3, 11)
D2 = date(2024, 3, 12)
D3 = date(2024, 3, 13)


def _employee(name='Emeka', role='Driver', salary_type='commission', rate='15', fixed=None, email=None):
    return Employee.objects.create(
        name=name, email=email or f'{name.lower()}@example.com', role=role,
        salary_type=salary_type, commission_rate=Decimal(rate) if rate is not None else None,
        fixed_salary=Decimal(fixed) if fixed is not None else None,
    )


def _sale(bags, price='250', day=D1, employee=None, total=None, **extra):
    price = Decimal(price)
    return Sale.objects.create(
        driver_name=employee.name if employee else 'Walk-in', employee=employee, bags_sold=bags,
        price_per_bag=price, total_amount=Decimal(total) if total is not None else bags * price, date=day, **extra,
    )


def _purchase(material, quantity, cost='1000', day=D1):
    return MaterialPurchase.objects.create(type=material, quantity=quantity, cost=Decimal(cost), date=day)


def _exact_settings():
    # 100 + 10 per bag, so allocated material cost never needs rounding
    return Settings.objects.create(sachet_roll_cost=Decimal('45000'), sachet_roll_bags_per_roll=450,
                                   packing_nylon_cost=Decimal('100000'), packing_nylon_bags_per_package=10000)


class InventoryTests(TestCase):
    def test_two_rolls_one_nylon_package_800_sold(self):
        _purchase('sachet_roll', 2)
        _purchase('packing_nylon', 1)
        _sale(500)
        _sale(300)
        status = get_inventory_status()
        self.assertEqual(status.sachet_rolls.capacity, 900)
        self.assertEqual(status.packing_nylon.capacity, 10000)
        self.assertEqual(status.effective_capacity, 900)
        self.assertEqual(status.total_remaining_bags, 100)
        self.assertEqual(status.threshold, 4000)
        self.assertTrue(status.needs_restock)
        self.assertEqual(status.sachet_rolls.used_bags, 800)
        self.assertEqual(status.packing_nylon.used_bags, 800)

    def test_history_is_not_windowed(self):
        _purchase('sachet_roll', 30, day=date(2020, 1, 1))
        _purchase('packing_nylon', 2, day=date(2020, 1, 1))
        _sale(1000, day=date(2020, 6, 1))
        status = get_inventory_status(threshold=100)
        self.assertEqual(status.total_remaining_bags, 13500 - 1000)
        self.assertFalse(status.needs_restock)

    def test_remaining_never_negative_and_usage_capped(self):
        status = reconcile(1, 1, total_bags_sold=5000, bags_per_roll=450, bags_per_package=10000, threshold=10)
        self.assertEqual(status.total_remaining_bags, 0)
        self.assertEqual(status.sachet_rolls.used_bags, 450)
        self.assertEqual(status.sachet_rolls.remaining_bags, 0)
        self.assertEqual(status.packing_nylon.used_bags, 5000)

    def test_monotonic_in_purchases_and_sales(self):
        previous = -1
        for rolls in range(0, 6):
            remaining = reconcile(rolls, 1, 600, 450, 10000, 0).total_remaining_bags
            self.assertGreaterEqual(remaining, previous)
            previous = remaining
        previous = None
        for sold in range(0, 3000, 250):
            remaining = reconcile(5, 1, sold, 450, 10000, 0).total_remaining_bags
            if previous is not None:
                self.assertLessEqual(remaining, previous)
            previous = remaining

    def test_configured_threshold_used_by_default(self):
        Settings.objects.create(inventory_low_threshold=50)
        _purchase('sachet_roll', 1)
        _purchase('packing_nylon', 1)
        status = get_inventory_status()
        self.assertEqual(status.total_remaining_bags, 450)
        self.assertFalse(status.needs_restock)

    def test_read_failure_fails_safe(self):
        with mock.patch('ledger.services.inventory._units_by_type', side_effect=DatabaseError('disk I/O error')):
            with self.assertLogs('ledger.services.inventory', level='ERROR'):
                status = get_inventory_status()
        self.assertEqual(status.total_remaining_bags, 0)
        self.assertEqual(status.effective_capacity, 0)
        self.assertTrue(status.needs_restock)

    def test_breakdown_groups_purchases(self):
        _purchase('sachet_roll', 1, day=D1)
        _purchase('sachet_roll', 2, day=D2)
        _purchase('packing_nylon', 1)
        _sale(100)
        breakdown = get_inventory_breakdown()
        self.assertEqual(len(breakdown['sachet_rolls']['purchases']), 2)
        self.assertEqual(breakdown['sachet_rolls']['units'], 3)
        self.assertEqual(breakdown['sachet_rolls']['capacity'], 1350)
        self.assertEqual(breakdown['packing_nylon']['remaining_bags'], 9900)
        self.assertEqual(breakdown['effective_capacity'], 1350)
        self.assertEqual(breakdown['total_bags_sold'], 100)

    def test_breakdown_propagates_errors(self):
        with mock.patch('ledger.services.inventory._total_bags_sold', side_effect=DatabaseError('gone')):
            with self.assertRaises(DatabaseError):
                get_inventory_breakdown()

    def test_status_endpoint(self):
        _purchase('sachet_roll', 2)
        _purchase('packing_nylon', 1)
        _sale(800)
        resp = self.client.get(reverse('inventory_status'), {'threshold': 50})
        self.assertEqual(resp.status_code, 200)
        data = resp.json()['data']
        self.assertEqual(data['totalRemainingBags'], 100)
        self.assertEqual(data['restockThreshold'], 50)
        self.assertFalse(data['needsRestock'])
        self.assertEqual(data['sachetRolls']['totalBagsCapacity'], 900)

        resp = self.client.get(reverse('inventory_breakdown'))
        self.assertEqual(resp.json()['data']['sachetRolls']['purchases'][0]['quantity'], 2)


class CommissionTests(TestCase):
    def test_commission_from_sales_without_range(self):
        e1 = _employee(rate='15')
        _sale(50, day=D1, employee=e1)
        _sale(30, day=D2, employee=e1)
        result = calculate_commission_from_sales(e1.pk)
        self.assertEqual(result.total_bags, 80)
        self.assertEqual(result.commission, Decimal('1200.00'))
        self.assertEqual(len(result.rows), 2)

    def test_only_the_foreign_key_attributes_sales(self):
        e1 = _employee(name='Emeka')
        _sale(50, employee=e1)
        # same driver name, but not linked to the employee
        Sale.objects.create(driver_name='Emeka', bags_sold=70, price_per_bag=Decimal('250'),
                            total_amount=Decimal('17500'), date=D1)
        self.assertEqual(calculate_commission_from_sales(e1.pk).total_bags, 50)

    def test_disjoint_windows_add_up(self):
        e1 = _employee(rate='12.50')
        _sale(10, day=D1, employee=e1)
        _sale(20, day=D2, employee=e1)
        _sale(40, day=D3, employee=e1)
        first = calculate_commission_from_sales(e1.pk, D1, D1)
        rest = calculate_commission_from_sales(e1.pk, D2, D3)
        whole = calculate_commission_from_sales(e1.pk, D1, D3)
        self.assertEqual(first.commission + rest.commission, whole.commission)
        self.assertEqual(whole.commission, Decimal('875.00'))

    def test_no_commission_for_fixed_or_rate_less_or_unknown(self):
        fixed = _employee(name='Ada', salary_type='fixed', fixed='50000', rate='15')
        no_rate = _employee(name='Bola', rate=None)
        _sale(10, employee=fixed)
        _sale(10, employee=no_rate)
        self.assertEqual(calculate_commission_from_sales(fixed.pk).commission, Decimal('0'))
        self.assertEqual(calculate_commission_from_sales(no_rate.pk).commission, Decimal('0'))
        unknown = calculate_commission_from_sales(9999)
        self.assertEqual((unknown.total_bags, unknown.commission), (0, Decimal('0')))

    def test_commission_from_packer_entries(self):
        packer = _employee(name='Chidi', role='Packers', rate='4')
        PackerEntry.objects.create(packer_name='Chidi', employee=packer, bags_packed=300, date=D1)
        PackerEntry.objects.create(packer_name='Chidi', employee=packer, bags_packed=200, date=D3)
        result = calculate_commission_from_packer_entries(packer.pk, D1, D2)
        self.assertEqual(result.total_bags, 300)
        self.assertEqual(result.commission, Decimal('1200.00'))

    def test_salary_projection(self):
        both = Employee(name='X', email='x@example.com', role='Driver', salary_type='both',
                        fixed_salary=Decimal('60000'), commission_rate=Decimal('10'))
        self.assertEqual(calculate_employee_salary(both, 100, 'first_half'), Decimal('31000.00'))
        self.assertEqual(calculate_employee_salary(both, 0, 'daily'), Decimal('2000.00'))
        self.assertEqual(calculate_employee_salary(both, 0, 'weekly'), Decimal('15000.00'))
        self.assertEqual(calculate_employee_salary(both, 5, 'monthly'), Decimal('60050.00'))
        commission_only = Employee(salary_type='commission', fixed_salary=Decimal('60000'),
                                   commission_rate=Decimal('15'))
        self.assertEqual(calculate_employee_salary(commission_only, 80, 'monthly'), Decimal('1200.00'))
        with self.assertRaises(DomainValidationError):
            calculate_employee_salary(both, 1, 'fortnightly')

    def test_summary_survives_one_failing_employee(self):
        good = _employee(name='Ada', rate='10')
        bad = _employee(name='Bola', rate='10')
        _sale(5, employee=good)
        real = commission_service.commission_for

        def flaky(employee, start=None, end=None):
            if employee.pk == bad.pk:
                raise DatabaseError('row is corrupt')
            return real(employee, start, end)

        with mock.patch.object(commission_service, 'commission_for', side_effect=flaky):
            with self.assertLogs('ledger.services.commissions', level='ERROR'):
                summary = commission_summary()
        by_id = {r.employee_id: r for r in summary}
        self.assertEqual(by_id[good.pk].commission, Decimal('50.00'))
        self.assertEqual(by_id[bad.pk].commission, Decimal('0'))
        self.assertEqual(by_id[bad.pk].error, 'row is corrupt')

    def test_summary_uses_packer_entries_for_packers(self):
        packer = _employee(name='Chidi', role='packer', rate='4')
        PackerEntry.objects.create(packer_name='Chidi', employee=packer, bags_packed=100, date=D1)
        _sale(50, employee=packer)
        row = commission_summary()[0]
        self.assertEqual(row.source, 'packer')
        self.assertEqual(row.total_bags, 100)

    def test_commission_endpoints(self):
        e1 = _employee(rate='15')
        _sale(50, day=D1, employee=e1)
        _sale(30, day=D2, employee=e1)
        resp = self.client.get(reverse('employee_commission', args=[e1.pk]),
                               {'startDate': '2024-03-11', 'endDate': '2024-03-12'})
        data = resp.json()['data']
        self.assertEqual(data['totalBags'], 50)
        self.assertEqual(data['commission'], 750.0)
        self.assertEqual(len(data['sales']), 1)

        resp = self.client.get(reverse('commissions_summary'))
        self.assertEqual(resp.json()['data'][0]['commission'], 1200.0)

        resp = self.client.get(reverse('salary_projection', args=[e1.pk]), {'bags': 10, 'period': 'weekly'})
        self.assertEqual(resp.json()['data']['projectedSalary'], 150.0)

        self.assertEqual(self.client.get(reverse('employee_commission', args=[999])).status_code, 404)
        resp = self.client.get(reverse('employee_commission', args=[e1.pk]), {'source': 'bonus'})
        self.assertEqual(resp.status_code, 400)


class FinancialReportTests(TestCase):
    def test_single_day_report(self):
        driver = _employee()
        _sale(100, price='170', day=D1)
        _sale(50, price='170', day=D1)
        Expense.objects.create(type='fuel', amount=Decimal('5000'), date=D1)
        Expense.objects.create(type='driver_fuel', amount=Decimal('2000'), date=D1)
        SalaryPayment.objects.create(employee=driver, total_amount=Decimal('3000'), period='daily',
                                     period_start=D1, period_end=D1, paid_date=D1)
        _purchase('sachet_roll', 1, cost='31000', day=D1)

        report = generate_report('daily', D1, D1)
        self.assertEqual(report.total_revenue, Decimal('25500.00'))
        self.assertEqual(report.fuel_costs, Decimal('5000.00'))
        self.assertEqual(report.driver_payments, Decimal('2000.00'))
        self.assertEqual(report.other_expenses, Decimal('0.00'))
        self.assertEqual(report.total_salaries, Decimal('3000.00'))
        self.assertEqual(report.material_cost_allocated, Decimal('11833.33'))
        self.assertEqual(report.total_expenses, Decimal('21833.33'))
        self.assertEqual(report.profit, Decimal('3666.67'))
        self.assertEqual(report.profit_margin, Decimal('14.38'))
        # cash spent on materials is reported separately and does not enter total_expenses
        self.assertEqual(report.material_costs, Decimal('31000.00'))
        self.assertFalse(report.partial)

    def test_legacy_expense_types_are_synonyms(self):
        Expense.objects.create(type='generator_fuel', amount=Decimal('100'), date=D1)
        Expense.objects.create(type='driver_payment', amount=Decimal('40'), date=D1)
        Expense.objects.create(type='other', amount=Decimal('7'), date=D1)
        report = generate_report('daily', D1, D1)
        self.assertEqual(report.fuel_costs, Decimal('100.00'))
        self.assertEqual(report.driver_payments, Decimal('40.00'))
        self.assertEqual(report.other_expenses, Decimal('7.00'))
        self.assertEqual(report.total_expenses, Decimal('147.00'))
        self.assertEqual(report.profit_margin, Decimal('0'))

    def test_sale_material_price_overrides_settings(self):
        roll = MaterialPrice.objects.create(type='sachet_roll', cost=Decimal('90000'), bags_per_unit=450)
        _exact_settings()
        _sale(10, day=D1, sachet_roll_price=roll)
        _sale(10, day=D1)
        report = generate_report('daily', D1, D1)
        # 10 bags at 200 + 10 per bag, 10 bags at 100 + 10 per bag
        self.assertEqual(report.material_cost_allocated, Decimal('3200.00'))

    def test_adjacent_days_add_up(self):
        _exact_settings()
        employee = _employee()
        for day, bags in ((D1, 40), (D2, 70)):
            _sale(bags, day=day)
            Expense.objects.create(type='fuel', amount=Decimal('333.33'), date=day)
            SalaryPayment.objects.create(employee=employee, total_amount=Decimal('1000'), period='daily',
                                         period_start=day, period_end=day, paid_date=day)
        first = generate_report('daily', D1, D1)
        second = generate_report('daily', D2, D2)
        both = generate_report('custom', D1, D2)
        self.assertEqual(first.total_revenue + second.total_revenue, both.total_revenue)
        self.assertEqual(first.total_expenses + second.total_expenses, both.total_expenses)

    def test_adjacent_days_add_up_with_default_material_prices(self):
        # 31000/450 per roll does not divide evenly, so every sale carries a fraction of a cent
        _sale(4, day=D1)
        _sale(1, day=D2)
        first = generate_report('daily', D1, D1)
        second = generate_report('daily', D2, D2)
        both = generate_report('custom', D1, D2)
        self.assertEqual(first.material_cost_allocated, Decimal('315.56'))
        self.assertEqual(second.material_cost_allocated, Decimal('78.89'))
        self.assertEqual(both.material_cost_allocated, Decimal('394.45'))
        self.assertEqual(first.total_expenses + second.total_expenses, both.total_expenses)
        self.assertEqual(first.profit + second.profit, both.profit)

    def test_read_failure_returns_partial_zero_report(self):
        with mock.patch('ledger.services.reports._build', side_effect=DatabaseError('locked')):
            with self.assertLogs('ledger.services.reports', level='ERROR'):
                report = generate_report('daily', D1, D1)
        self.assertTrue(report.partial)
        self.assertEqual(report.total_revenue, Decimal('0'))
        self.assertEqual(report.start_date, D1)

    def test_period_bounds(self):
        self.assertEqual(period_bounds('weekly', D3), (date(2024, 3, 10), date(2024, 3, 16)))
        self.assertEqual(period_bounds('weekly', date(2024, 3, 10)), (date(2024, 3, 10), date(2024, 3, 16)))
        self.assertEqual(period_bounds('monthly', date(2024, 2, 14)), (date(2024, 2, 1), date(2024, 2, 29)))
        self.assertEqual(period_bounds('quarterly', date(2024, 5, 20)), (date(2024, 4, 1), date(2024, 6, 30)))
        self.assertEqual(period_bounds('yearly', D1), (date(2024, 1, 1), date(2024, 12, 31)))
        with self.assertRaises(DomainValidationError):
            period_bounds('hourly', D1)

    def test_trend_series(self):
        _sale(10, price='100', day=D3)
        _sale(10, price='100', day=date(2024, 3, 7))
        daily = trend_series('daily', D3)
        self.assertEqual([p['period_label'] for p in daily],
                         ['Mar 7', 'Mar 8', 'Mar 9', 'Mar 10', 'Mar 11', 'Mar 12', 'Mar 13'])
        self.assertEqual(daily[0]['revenue'], Decimal('1000.00'))
        self.assertEqual(daily[-1]['revenue'], Decimal('1000.00'))
        self.assertEqual(daily[3]['revenue'], Decimal('0.00'))

        weekly = trend_series('weekly', D3)
        self.assertEqual(weekly[0]['start_date'], date(2024, 1, 28))
        self.assertEqual(weekly[-1]['start_date'], date(2024, 3, 10))
        self.assertEqual(weekly[-2]['revenue'], Decimal('1000.00'))

        monthly = trend_series('monthly', D3)
        self.assertEqual(monthly[0]['period_label'], 'Sep 2023')
        self.assertEqual(monthly[-1]['period_label'], 'Mar 2024')
        self.assertEqual(monthly[-1]['revenue'], Decimal('2000.00'))

        yearly = trend_series('yearly', D3, count=3)
        self.assertEqual([p['period_label'] for p in yearly], ['2022', '2023', '2024'])

    def test_default_report_date(self):
        today = timezone.localdate()
        self.assertEqual(default_report_date(), today)
        Expense.objects.create(type='fuel', amount=Decimal('1'), date=date(2024, 1, 5))
        _sale(1, day=date(2024, 1, 3))
        self.assertEqual(default_report_date(), date(2024, 1, 5))
        _sale(1, day=today + timedelta(days=3))
        self.assertEqual(default_report_date(), today)

    def test_report_endpoints(self):
        _sale(100, price='250', day=D1)
        _sale(100, price='250', day=D2)
        resp = self.client.get(reverse('financial_report'),
                               {'period': 'daily', 'startDate': '2024-03-11', 'endDate': '2024-03-12'})
        data = resp.json()['data']
        self.assertEqual(data['totalRevenue'], 25000.0)
        self.assertEqual(data['startDate'], '2024-03-11')
        self.assertEqual(data['endDate'], '2024-03-11')
        self.assertIn('materialCostAllocated', data)

        resp = self.client.get(reverse('report_trend'), {'period': 'daily', 'date': '2024-03-12', 'count': 2})
        points = resp.json()['data']
        self.assertEqual([p['periodLabel'] for p in points], ['Mar 11', 'Mar 12'])
        self.assertEqual(points[1]['revenue'], 25000.0)

        for count in (0, 61):
            resp = self.client.get(reverse('report_trend'), {'period': 'daily', 'count': count})
            self.assertEqual(resp.status_code, 400)
        resp = self.client.get(reverse('report_trend'), {'period': 'daily', 'date': '2024-03-12'})
        self.assertEqual(len(resp.json()['data']), 7)

        resp = self.client.get(reverse('report_default_date'))
        self.assertEqual(resp.json()['data']['date'], '2024-03-12')

        self.assertEqual(self.client.get(reverse('financial_report'), {'period': 'hourly'}).status_code, 400)


class SaleApiTests(TestCase):
    def _post(self, name, payload):
        return self.client.post(reverse(name), data=payload, content_type='application/json')

    def test_total_defaults_to_bags_times_price(self):
        resp = self._post('sales', {'driverName': 'Emeka', 'bagsSold': 100, 'pricePerBag': 250, 'date': '2024-03-11'})
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()['data']['totalAmount'], 25000.0)

    def test_explicit_total_overrides(self):
        resp = self._post('sales', {'driverName': 'Emeka', 'bagsSold': 100, 'pricePerBag': 250,
                                    'totalAmount': 24000, 'date': '2024-03-11'})
        self.assertEqual(resp.json()['data']['totalAmount'], 24000.0)

    def test_update_recomputes_total_only_when_repriced(self):
        sale = _sale(100)
        url = reverse('sale_detail', args=[sale.pk])
        resp = self.client.put(url, data={'notes': 'late'}, content_type='application/json')
        self.assertEqual(resp.json()['data']['totalAmount'], 25000.0)
        resp = self.client.put(url, data={'bagsSold': 10}, content_type='application/json')
        self.assertEqual(resp.json()['data']['totalAmount'], 2500.0)
        self.assertEqual(Sale.objects.get(pk=sale.pk).total_amount, Decimal('2500.00'))

    def test_validation(self):
        resp = self._post('sales', {'driverName': 'Emeka', 'bagsSold': 0, 'pricePerBag': 250})
        self.assertEqual(resp.status_code, 400)
        self.assertIn('bagsSold', resp.json()['message'])
        resp = self._post('sales', {'driverName': 'Emeka', 'bagsSold': 1, 'pricePerBag': 250, 'employeeId': 999})
        self.assertEqual(resp.status_code, 400)
        self.assertIn('employeeId', resp.json()['message'])
        nylon = MaterialPrice.objects.create(type='packing_nylon', cost=Decimal('1'), bags_per_unit=1)
        resp = self._post('sales', {'driverName': 'Emeka', 'bagsSold': 1, 'pricePerBag': 250,
                                    'sachetRollPriceId': nylon.pk})
        self.assertEqual(resp.status_code, 400)
        self.assertFalse(Sale.objects.exists())

    def test_end_date_is_exclusive(self):
        for day in (D1, D2, D3):
            _sale(1, day=day)
        resp = self.client.get(reverse('sales'), {'startDate': '2024-03-11', 'endDate': '2024-03-13'})
        self.assertEqual(sorted(s['date'] for s in resp.json()['data']), ['2024-03-11', '2024-03-12'])
        resp = self.client.get(reverse('sales'), {'startDate': '2024-03-13', 'endDate': '2024-03-11'})
        self.assertEqual(resp.status_code, 400)

    def test_filter_by_employee(self):
        e1 = _employee()
        _sale(5, employee=e1)
        _sale(7)
        data = self.client.get(reverse('sales'), {'employeeId': e1.pk}).json()['data']
        self.assertEqual([s['bagsSold'] for s in data], [5])
        self.assertEqual(data[0]['employeeId'], e1.pk)


class LedgerApiTests(TestCase):
    def _post(self, name, payload):
        return self.client.post(reverse(name), data=payload, content_type='application/json')

    def test_employee_rules(self):
        resp = self._post('employees', {'name': 'Ada', 'email': 'ada@example.com', 'role': 'Manager',
                                        'salaryType': 'fixed'})
        self.assertEqual(resp.status_code, 400)
        self.assertIn('fixedSalary', resp.json()['message'])

        resp = self._post('employees', {'name': 'Ada', 'email': 'ada@example.com', 'role': 'Manager',
                                        'salaryType': 'fixed', 'fixedSalary': 80000})
        self.assertEqual(resp.status_code, 201)
        resp = self._post('employees', {'name': 'Ada 2', 'email': 'ADA@example.com', 'role': 'Driver',
                                        'salaryType': 'commission', 'commissionRate': 15})
        self.assertEqual(resp.status_code, 409)

    def test_employee_with_salary_history_cannot_be_deleted(self):
        employee = _employee()
        SalaryPayment.objects.create(employee=employee, total_amount=Decimal('100'), period='daily',
                                     period_start=D1, period_end=D1, paid_date=D1)
        resp = self.client.delete(reverse('employee_detail', args=[employee.pk]))
        self.assertEqual(resp.status_code, 409)
        self.assertTrue(Employee.objects.filter(pk=employee.pk).exists())

    def test_expense_batch_is_all_or_nothing(self):
        resp = self._post('expense_batch', {'expenses': [
            {'type': 'fuel', 'amount': 5000, 'date': '2024-03-11'},
            {'type': 'driver_fuel', 'amount': 0, 'date': '2024-03-11'},
        ]})
        self.assertEqual(resp.status_code, 400)
        self.assertIn('expenses[1]', resp.json()['message'])
        self.assertFalse(Expense.objects.exists())

        resp = self._post('expense_batch', {'expenses': [
            {'type': 'fuel', 'amount': 5000, 'date': '2024-03-11'},
            {'type': 'driver_fuel', 'amount': 2000, 'date': '2024-03-11'},
            {'type': 'other', 'amount': 150, 'description': 'Nylon tape', 'date': '2024-03-11'},
        ]})
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(Expense.objects.count(), 3)

    def test_expense_type_must_be_known(self):
        resp = self._post('expenses', {'type': 'lunch', 'amount': 10})
        self.assertEqual(resp.status_code, 400)

    def test_salary_payment_totals_and_no_update(self):
        employee = _employee(salary_type='both', fixed='60000')
        resp = self._post('salary_payments', {'employeeId': employee.pk, 'fixedAmount': 30000,
                                              'commissionAmount': 1200, 'period': 'first_half',
                                              'periodStart': '2024-03-01', 'periodEnd': '2024-03-15',
                                              'paidDate': '2024-03-15'})
        self.assertEqual(resp.status_code, 201)
        data = resp.json()['data']
        self.assertEqual(data['totalAmount'], 31200.0)
        self.assertEqual(data['employeeName'], employee.name)
        resp = self.client.put(reverse('salary_payment_detail', args=[data['id']]), data={'notes': 'x'},
                               content_type='application/json')
        self.assertEqual(resp.status_code, 405)

        resp = self._post('salary_payments', {'employeeId': employee.pk, 'totalAmount': 10, 'period': 'daily',
                                              'periodStart': '2024-03-15', 'periodEnd': '2024-03-01'})
        self.assertEqual(resp.status_code, 400)
        self.assertIn('periodEnd', resp.json()['message'])

    def test_packer_entry_name_from_employee(self):
        packer = _employee(name='Chidi', role='Packers', rate='4')
        resp = self._post('packer_entries', {'employeeId': packer.pk, 'bagsPacked': 120, 'date': '2024-03-11'})
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()['data']['packerName'], 'Chidi')
        resp = self._post('packer_entries', {'bagsPacked': 120})
        self.assertEqual(resp.status_code, 400)

    def test_material_purchase_validation(self):
        resp = self._post('material_purchases', {'type': 'sachet_roll', 'quantity': 0, 'cost': 31000})
        self.assertEqual(resp.status_code, 400)
        resp = self._post('material_purchases', {'type': 'sachet_roll', 'quantity': 2, 'cost': 62000,
                                                 'date': '2024-03-11'})
        self.assertEqual(resp.status_code, 201)

    def test_audit_log_is_append_only(self):
        resp = self._post('audit_logs', {'entityType': 'sale', 'entityId': 4, 'action': 'update',
                                         'field': 'bagsSold', 'oldValue': '10', 'newValue': '12', 'changedBy': 1})
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()['data']['ipAddress'], '127.0.0.1')
        self._post('audit_logs', {'entityType': 'expense', 'entityId': 1, 'action': 'delete', 'changedBy': 1})
        data = self.client.get(reverse('audit_logs'), {'entityType': 'sale'}).json()['data']
        self.assertEqual(len(data), 1)
        self.assertEqual(data[0]['newValue'], '12')


class CommandTests(TestCase):
    def test_inventory_status_command(self):
        _purchase('sachet_roll', 2)
        _purchase('packing_nylon', 1)
        _sale(800)
        out = StringIO()
        call_command('inventory_status', stdout=out)
        self.assertIn('Remaining bags: 100', out.getvalue())
        self.assertIn('restock needed', out.getvalue())

    def test_build_report_command(self):
        _sale(100, day=D1)
        out = StringIO()
        call_command('build_report', '--start', '2024-03-11', '--end', '2024-03-11', stdout=out)
        self.assertIn('25000.00', out.getvalue())

    def test_backup_database_prunes(self):
        with tempfile.TemporaryDirectory() as tmp:
            for _ in range(3):
                call_command('backup_database', '--outdir', tmp, '--keep', '2', stdout=StringIO())
            self.assertEqual(len(list(Path(tmp).glob('sachetworks-*.sqlite3'))), 2)
