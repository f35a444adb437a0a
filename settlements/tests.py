from datetime import date
from decimal import Decimal
from io import StringIO

from django.core.management import call_command
from django.test import TestCase
from django.urls import reverse

from ledger.models import Employee
from pricing.models import Settings
from sachetworks.errors import ConflictError, DomainValidationError, NotFoundError
from sachetworks.ratelimit import get_rate_limiter

from .models import ReceptionistSale, Settlement, SettlementPayment, StorekeeperEntry
from .services import create_settlement, delete_payment, record_payment, recompute_settlement, update_settlement

DAY = date(2024, 3, 11)
RECEPTIONIST = 7
ADMIN = 1


def _receptionist_sale(expected='10000', **extra):
    return ReceptionistSale.objects.create(date=DAY, submitted_by=RECEPTIONIST, expected_amount=Decimal(expected),
                                           bags_at_price_1=40, total_bags=40, **extra)


class SettlementEngineTests(TestCase):
    def setUp(self):
        self.sale = _receptionist_sale()

    def assertConsistent(self, settlement):
        settlement.refresh_from_db()
        paid = sum((p.amount for p in settlement.payments.all()), Decimal('0'))
        self.assertEqual(settlement.settled_amount, paid)
        self.assertEqual(settlement.remaining_balance, settlement.expected_amount - paid)
        self.assertEqual(settlement.is_settled, settlement.remaining_balance <= 0)

    def test_partial_payments_until_settled(self):
        settlement = create_settlement(DAY, self.sale.pk, Decimal('10000'), Decimal('0'), ADMIN)
        self.assertEqual(settlement.remaining_balance, Decimal('10000.00'))
        self.assertFalse(settlement.is_settled)
        self.assertIsNone(settlement.settled_at)

        _, settlement = record_payment(settlement.pk, Decimal('4000'), ADMIN)
        self.assertEqual(settlement.settled_amount, Decimal('4000.00'))
        self.assertEqual(settlement.remaining_balance, Decimal('6000.00'))
        self.assertFalse(settlement.is_settled)

        _, settlement = record_payment(settlement.pk, Decimal('6000'), ADMIN)
        self.assertEqual(settlement.settled_amount, Decimal('10000.00'))
        self.assertEqual(settlement.remaining_balance, Decimal('0.00'))
        self.assertTrue(settlement.is_settled)
        self.assertIsNotNone(settlement.settled_at)

    def test_deleting_a_payment_reopens_the_settlement(self):
        settlement = create_settlement(DAY, self.sale.pk, Decimal('10000'), Decimal('0'), ADMIN)
        first, _ = record_payment(settlement.pk, Decimal('4000'), ADMIN)
        record_payment(settlement.pk, Decimal('6000'), ADMIN)

        settlement = delete_payment(first.pk)
        self.assertEqual(settlement.settled_amount, Decimal('6000.00'))
        self.assertEqual(settlement.remaining_balance, Decimal('4000.00'))
        self.assertFalse(settlement.is_settled)
        self.assertIsNone(settlement.settled_at)
        self.assertConsistent(settlement)

    def test_invariant_holds_after_every_step(self):
        settlement = create_settlement(DAY, self.sale.pk, Decimal('10000'), Decimal('1500'), ADMIN)
        self.assertConsistent(settlement)
        payments = []
        for amount in ('2500', '0.01', '3999.99', '2000'):
            payment, _ = record_payment(settlement.pk, Decimal(amount), ADMIN)
            payments.append(payment)
            self.assertConsistent(settlement)
        for payment in payments[::2]:
            delete_payment(payment.pk)
            self.assertConsistent(settlement)

    def test_initial_amount_is_recorded_as_a_payment(self):
        settlement = create_settlement(DAY, self.sale.pk, Decimal('10000'), Decimal('2500'), ADMIN, notes='cash')
        self.assertEqual(settlement.payments.count(), 1)
        self.assertEqual(settlement.settled_amount, Decimal('2500.00'))
        self.assertEqual(settlement.remaining_balance, Decimal('7500.00'))

    def test_overpayment_is_kept_negative(self):
        settlement = create_settlement(DAY, self.sale.pk, Decimal('10000'), Decimal('0'), ADMIN)
        _, settlement = record_payment(settlement.pk, Decimal('10500'), ADMIN)
        self.assertEqual(settlement.remaining_balance, Decimal('-500.00'))
        self.assertTrue(settlement.is_settled)

    def test_rejects_bad_amounts(self):
        with self.assertRaises(DomainValidationError):
            create_settlement(DAY, self.sale.pk, Decimal('-1'), Decimal('0'), ADMIN)
        with self.assertRaises(DomainValidationError):
            create_settlement(DAY, self.sale.pk, Decimal('100'), Decimal('-5'), ADMIN)
        settlement = create_settlement(DAY, self.sale.pk, Decimal('100'), Decimal('0'), ADMIN)
        for amount in ('0', '-10'):
            with self.assertRaises(DomainValidationError):
                record_payment(settlement.pk, Decimal(amount), ADMIN)
        self.assertFalse(SettlementPayment.objects.exists())

    def test_one_settlement_per_receptionist_sale(self):
        create_settlement(DAY, self.sale.pk, Decimal('100'), Decimal('0'), ADMIN)
        with self.assertRaises(ConflictError):
            create_settlement(DAY, self.sale.pk, Decimal('100'), Decimal('0'), ADMIN)
        with self.assertRaises(NotFoundError):
            create_settlement(DAY, 9999, Decimal('100'), Decimal('0'), ADMIN)
        with self.assertRaises(NotFoundError):
            record_payment(9999, Decimal('1'), ADMIN)
        with self.assertRaises(NotFoundError):
            delete_payment(9999)

    def test_update_recomputes_against_new_expected_amount(self):
        settlement = create_settlement(DAY, self.sale.pk, Decimal('10000'), Decimal('8000'), ADMIN)
        settlement = update_settlement(settlement.pk, {'expected_amount': Decimal('8000'), 'notes': 'recounted'})
        self.assertTrue(settlement.is_settled)
        self.assertEqual(settlement.remaining_balance, Decimal('0.00'))
        self.assertEqual(settlement.notes, 'recounted')
        with self.assertRaises(DomainValidationError):
            update_settlement(settlement.pk, {'settled_amount': Decimal('1')})

    def test_editing_the_sale_does_not_touch_the_settlement(self):
        settlement = create_settlement(DAY, self.sale.pk, Decimal('10000'), Decimal('0'), ADMIN)
        self.sale.expected_amount = Decimal('12000')
        self.sale.save()
        settlement.refresh_from_db()
        self.assertEqual(settlement.expected_amount, Decimal('10000.00'))

    def test_recompute_repairs_drift(self):
        settlement = create_settlement(DAY, self.sale.pk, Decimal('10000'), Decimal('3000'), ADMIN)
        Settlement.objects.filter(pk=settlement.pk).update(settled_amount=Decimal('0'), is_settled=True)

        out = StringIO()
        call_command('recompute_settlements', '--dry-run', stdout=out)
        self.assertIn('1 settlement(s) would be fixed', out.getvalue())
        settlement.refresh_from_db()
        self.assertTrue(settlement.is_settled)

        call_command('recompute_settlements', stdout=StringIO())
        self.assertConsistent(settlement)
        self.assertEqual(recompute_settlement(settlement).settled_amount, Decimal('3000.00'))

    def test_payments_cascade_with_settlement(self):
        settlement = create_settlement(DAY, self.sale.pk, Decimal('10000'), Decimal('3000'), ADMIN)
        settlement.delete()
        self.assertFalse(SettlementPayment.objects.exists())


class SettlementApiTests(TestCase):
    def setUp(self):
        get_rate_limiter().reset()
        self.sale = _receptionist_sale()

    def _post(self, name, payload):
        return self.client.post(reverse(name), data=payload, content_type='application/json')

    def test_full_flow(self):
        resp = self._post('settlements', {'date': '2024-03-11', 'receptionistSaleId': self.sale.pk,
                                          'expectedAmount': 10000, 'settledAmount': 0, 'settledBy': ADMIN})
        self.assertEqual(resp.status_code, 201)
        settlement = resp.json()['data']
        self.assertEqual(settlement['remainingBalance'], 10000.0)
        self.assertFalse(settlement['isSettled'])

        resp = self._post('settlement_payments', {'settlementId': settlement['id'], 'amount': 4000, 'paidBy': ADMIN,
                                                  'paidAt': '2024-03-11T17:00:00Z'})
        self.assertEqual(resp.status_code, 201)
        first_payment = resp.json()['data']['payment']['id']
        resp = self._post('settlement_payments', {'settlementId': settlement['id'], 'amount': 6000, 'paidBy': ADMIN,
                                                  'paidAt': '2024-03-11T18:30:00Z'})
        self.assertTrue(resp.json()['data']['settlement']['isSettled'])

        resp = self.client.get(reverse('settlement_payments_for_settlement', args=[settlement['id']]))
        self.assertEqual([p['amount'] for p in resp.json()['data']], [4000.0, 6000.0])

        resp = self.client.delete(reverse('settlement_payment_detail', args=[first_payment]))
        self.assertEqual(resp.status_code, 200)
        after = resp.json()['data']['settlement']
        self.assertEqual(after['settledAmount'], 6000.0)
        self.assertEqual(after['remainingBalance'], 4000.0)
        self.assertFalse(after['isSettled'])

        detail = self.client.get(reverse('settlement_detail', args=[settlement['id']])).json()['data']
        self.assertEqual(len(detail['payments']), 1)

    def test_derived_fields_cannot_be_written(self):
        resp = self._post('settlements', {'receptionistSaleId': self.sale.pk, 'expectedAmount': 500,
                                          'settledBy': ADMIN})
        pk = resp.json()['data']['id']
        resp = self.client.put(reverse('settlement_detail', args=[pk]),
                               data={'settledAmount': 500, 'isSettled': True, 'notes': 'checked'},
                               content_type='application/json')
        self.assertEqual(resp.status_code, 200)
        data = resp.json()['data']
        self.assertEqual(data['settledAmount'], 0.0)
        self.assertFalse(data['isSettled'])
        self.assertEqual(data['notes'], 'checked')

    def test_validation_and_conflicts(self):
        resp = self._post('settlements', {'receptionistSaleId': self.sale.pk, 'expectedAmount': -1, 'settledBy': ADMIN})
        self.assertEqual(resp.status_code, 400)
        self.assertIn('expectedAmount', resp.json()['message'])
        resp = self._post('settlements', {'receptionistSaleId': self.sale.pk, 'expectedAmount': 10, 'settledBy': ADMIN})
        self.assertEqual(resp.status_code, 201)
        settlement_id = resp.json()['data']['id']
        resp = self._post('settlements', {'receptionistSaleId': self.sale.pk, 'expectedAmount': 10, 'settledBy': ADMIN})
        self.assertEqual(resp.status_code, 409)
        self.assertFalse(resp.json()['success'])
        resp = self._post('settlement_payments', {'settlementId': settlement_id, 'amount': 0, 'paidBy': ADMIN})
        self.assertEqual(resp.status_code, 400)
        resp = self._post('settlement_payments', {'settlementId': 424242, 'amount': 5, 'paidBy': ADMIN})
        self.assertEqual(resp.status_code, 404)

    def test_payment_creation_is_rate_limited(self):
        settlement = create_settlement(DAY, self.sale.pk, Decimal('100000'), Decimal('0'), ADMIN)
        for _ in range(5):
            resp = self._post('settlement_payments', {'settlementId': settlement.pk, 'amount': 1, 'paidBy': ADMIN})
            self.assertEqual(resp.status_code, 201)
        resp = self._post('settlement_payments', {'settlementId': settlement.pk, 'amount': 1, 'paidBy': ADMIN})
        self.assertEqual(resp.status_code, 429)
        self.assertEqual(resp.json()['message'], 'Too many requests. Please try again later.')
        self.assertEqual(SettlementPayment.objects.count(), 5)

    def test_list_filters_by_date(self):
        other = _receptionist_sale()
        create_settlement(date(2024, 3, 10), self.sale.pk, Decimal('1'), Decimal('0'), ADMIN)
        create_settlement(date(2024, 3, 12), other.pk, Decimal('1'), Decimal('0'), ADMIN)
        data = self.client.get(reverse('settlements'), {'startDate': '2024-03-11', 'endDate': '2024-03-13'}).json()
        self.assertEqual([s['date'] for s in data['data']], ['2024-03-12'])


class ReceptionistSaleTests(TestCase):
    def _post(self, payload):
        return self.client.post(reverse('receptionist_sales'), data=payload, content_type='application/json')

    def test_expected_amount_from_breakdown(self):
        resp = self._post({'date': '2024-03-11', 'submittedBy': RECEPTIONIST, 'saleType': 'general',
                           'priceBreakdown': [{'priceId': 1, 'amount': 250, 'bags': 30},
                                              {'priceId': 2, 'amount': 270, 'bags': 10}]})
        self.assertEqual(resp.status_code, 201)
        data = resp.json()['data']
        self.assertEqual(data['totalBags'], 40)
        self.assertEqual(data['expectedAmount'], 10200.0)

    def test_expected_amount_from_legacy_tiers(self):
        Settings.objects.create(sales_price_1=Decimal('200'), sales_price_2=Decimal('220'))
        resp = self._post({'submittedBy': RECEPTIONIST, 'bagsAtPrice1': 10, 'bagsAtPrice2': 5})
        data = resp.json()['data']
        self.assertEqual(data['totalBags'], 15)
        self.assertEqual(data['expectedAmount'], 3100.0)
        self.assertEqual(data['priceBreakdown'], [])

    def test_explicit_positive_expected_amount_wins(self):
        resp = self._post({'submittedBy': RECEPTIONIST, 'bagsAtPrice1': 10, 'expectedAmount': 2400})
        self.assertEqual(resp.json()['data']['expectedAmount'], 2400.0)
        resp = self._post({'submittedBy': RECEPTIONIST, 'bagsAtPrice1': 10, 'expectedAmount': 0})
        self.assertEqual(resp.json()['data']['expectedAmount'], 2500.0)

    def test_new_breakdown_on_update_rederives(self):
        sale = self._post({'submittedBy': RECEPTIONIST, 'bagsAtPrice1': 10}).json()['data']
        url = reverse('receptionist_sale_detail', args=[sale['id']])
        resp = self.client.put(url, data={'notes': 'late'}, content_type='application/json')
        self.assertEqual(resp.json()['data']['expectedAmount'], 2500.0)
        resp = self.client.put(url, data={'priceBreakdown': [{'priceId': 3, 'amount': 300, 'bags': 4}]},
                               content_type='application/json')
        self.assertEqual(resp.json()['data']['expectedAmount'], 1200.0)
        self.assertEqual(resp.json()['data']['totalBags'], 4)

    def test_submission_is_stamped(self):
        sale = self._post({'submittedBy': RECEPTIONIST, 'bagsAtPrice1': 1}).json()['data']
        self.assertIsNone(sale['submittedAt'])
        resp = self.client.put(reverse('receptionist_sale_detail', args=[sale['id']]), data={'isSubmitted': True},
                               content_type='application/json')
        self.assertIsNotNone(resp.json()['data']['submittedAt'])
        self.assertTrue(ReceptionistSale.objects.get(pk=sale['id']).is_submitted)

    def test_bad_breakdown_rejected(self):
        resp = self._post({'submittedBy': RECEPTIONIST, 'priceBreakdown': [{'amount': 'abc', 'bags': 1}]})
        self.assertEqual(resp.status_code, 400)
        self.assertIn('priceBreakdown', resp.json()['message'])
        resp = self._post({'submittedBy': RECEPTIONIST, 'saleType': 'wholesale'})
        self.assertEqual(resp.status_code, 400)


class StorekeeperEntryTests(TestCase):
    def test_names_filled_from_employees_and_filtering(self):
        driver = Employee.objects.create(name='Emeka', email='emeka@example.com', role='Driver')
        resp = self.client.post(reverse('storekeeper_entries'),
                                data={'date': '2024-03-11', 'entryType': 'driver_pickup', 'driverId': driver.pk,
                                      'bagsCount': 200, 'submittedBy': 3},
                                content_type='application/json')
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()['data']['driverName'], 'Emeka')
        StorekeeperEntry.objects.create(date=DAY, entry_type='packer_production', packer_name='Chidi', bags_count=50,
                                        submitted_by=3)
        data = self.client.get(reverse('storekeeper_entries'), {'entryType': 'packer_production'}).json()['data']
        self.assertEqual([e['packerName'] for e in data], ['Chidi'])

    def test_entry_type_and_bags_validated(self):
        resp = self.client.post(reverse('storekeeper_entries'),
                                data={'entryType': 'theft', 'bagsCount': 0, 'submittedBy': 3},
                                content_type='application/json')
        self.assertEqual(resp.status_code, 400)
