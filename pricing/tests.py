from decimal import Decimal

from django.test import TestCase
from django.urls import reverse

from sachetworks.errors import DomainValidationError
from sachetworks.ratelimit import get_rate_limiter

from .models import BagPrice, MaterialPrice, Settings
from .services import get_settings, material_cost_per_bag, update_settings


class SettingsProviderTests(TestCase):
    def test_defaults_when_no_row(self):
        s = get_settings()
        self.assertIsNone(s.pk)
        self.assertEqual(s.sachet_roll_cost, Decimal('31000.00'))
        self.assertEqual(s.sachet_roll_bags_per_roll, 450)
        self.assertEqual(s.packing_nylon_cost, Decimal('100000.00'))
        self.assertEqual(s.packing_nylon_bags_per_package, 10000)
        self.assertEqual(s.inventory_low_threshold, 4000)

    def test_update_creates_row_then_patches_it(self):
        first = update_settings({'inventory_low_threshold': 1500})
        self.assertIsNotNone(first.pk)
        self.assertEqual(first.sachet_roll_bags_per_roll, 450)

        second = update_settings({'sales_price_1': '300'})
        self.assertEqual(second.pk, first.pk)
        self.assertEqual(second.inventory_low_threshold, 1500)
        self.assertEqual(second.sales_price_1, Decimal('300'))
        self.assertEqual(Settings.objects.count(), 1)

    def test_bags_per_unit_must_be_positive(self):
        with self.assertRaises(DomainValidationError) as ctx:
            update_settings({'sachet_roll_bags_per_roll': 0})
        self.assertIn('sachetRollBagsPerRoll', ctx.exception.message)
        self.assertFalse(Settings.objects.exists())

    def test_material_cost_per_bag(self):
        Settings.objects.create(sachet_roll_cost=Decimal('45000'), sachet_roll_bags_per_roll=450,
                                packing_nylon_cost=Decimal('100000'), packing_nylon_bags_per_package=10000)
        sachet, nylon = material_cost_per_bag()
        self.assertEqual(sachet, Decimal('100'))
        self.assertEqual(nylon, Decimal('10'))


class SettingsApiTests(TestCase):
    def setUp(self):
        get_rate_limiter().reset()

    def test_get_returns_defaults(self):
        resp = self.client.get(reverse('settings'))
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertTrue(body['success'])
        self.assertEqual(body['data']['sachetRollCost'], 31000.0)
        self.assertEqual(body['data']['inventoryLowThreshold'], 4000)

    def test_put_partial_update(self):
        resp = self.client.put(reverse('settings'), data={'packingNylonBagsPerPackage': 8000},
                               content_type='application/json')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()['data']['packingNylonBagsPerPackage'], 8000)
        self.assertEqual(Settings.load().packing_nylon_bags_per_package, 8000)

    def test_put_rejects_invalid_value(self):
        resp = self.client.put(reverse('settings'), data={'packingNylonBagsPerPackage': 0},
                               content_type='application/json')
        self.assertEqual(resp.status_code, 400)
        self.assertFalse(resp.json()['success'])

    def test_put_is_rate_limited(self):
        for _ in range(5):
            resp = self.client.put(reverse('settings'), data={'inventoryLowThreshold': 100},
                                   content_type='application/json')
            self.assertEqual(resp.status_code, 200)
        resp = self.client.put(reverse('settings'), data={'inventoryLowThreshold': 100},
                               content_type='application/json')
        self.assertEqual(resp.status_code, 429)
        # reads are not charged
        self.assertEqual(self.client.get(reverse('settings')).status_code, 200)


class PriceListApiTests(TestCase):
    def test_bag_price_crud(self):
        resp = self.client.post(reverse('bag_prices'), data={'amount': 250, 'label': 'Standard', 'sortOrder': 1},
                                content_type='application/json')
        self.assertEqual(resp.status_code, 201)
        pk = resp.json()['data']['id']
        self.assertTrue(resp.json()['data']['isActive'])

        resp = self.client.put(reverse('bag_price_detail', args=[pk]), data={'isActive': False},
                               content_type='application/json')
        self.assertEqual(resp.status_code, 200)
        self.assertFalse(BagPrice.objects.get(pk=pk).is_active)
        self.assertEqual(BagPrice.objects.get(pk=pk).label, 'Standard')

        self.assertEqual(self.client.get(reverse('bag_prices')).json()['data'], [])
        listed = self.client.get(reverse('bag_prices'), {'includeInactive': 'true'}).json()['data']
        self.assertEqual([p['id'] for p in listed], [pk])

        resp = self.client.delete(reverse('bag_price_detail', args=[pk]))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self.client.get(reverse('bag_price_detail', args=[pk])).status_code, 404)

    def test_bag_price_amount_must_be_positive(self):
        resp = self.client.post(reverse('bag_prices'), data={'amount': 0}, content_type='application/json')
        self.assertEqual(resp.status_code, 400)
        self.assertIn('amount', resp.json()['message'])

    def test_material_prices_ordered_and_filtered(self):
        MaterialPrice.objects.create(type='sachet_roll', cost=Decimal('32000'), bags_per_unit=450, sort_order=2)
        MaterialPrice.objects.create(type='sachet_roll', cost=Decimal('31000'), bags_per_unit=450, sort_order=1)
        MaterialPrice.objects.create(type='packing_nylon', cost=Decimal('100000'), bags_per_unit=10000)

        data = self.client.get(reverse('material_prices'), {'type': 'sachet_roll'}).json()['data']
        self.assertEqual([p['cost'] for p in data], [31000.0, 32000.0])

    def test_material_price_rejects_unknown_type(self):
        resp = self.client.post(reverse('material_prices'),
                                data={'type': 'bottle', 'cost': 10, 'bagsPerUnit': 1},
                                content_type='application/json')
        self.assertEqual(resp.status_code, 400)
        self.assertIn('type', resp.json()['message'])

    def test_cost_per_bag(self):
        price = MaterialPrice(type='packing_nylon', cost=Decimal('100000'), bags_per_unit=10000)
        self.assertEqual(price.cost_per_bag, Decimal('10'))
