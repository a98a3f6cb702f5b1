"""
Test suite for Logistics module
Tests: Evri courier rates, list normalisation, CSV import/template, quotes
"""
from decimal import Decimal

from django.test import TestCase, override_settings
from rest_framework import status

from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient, make_response, mock_backend
from backend.logistics import shipping


class EvriShippingTests(TestCase):
    """Test courier weight tiers and charges"""

    def test_uk_weight_tiers(self):
        """Test UK courier weight tiers"""
        self.assertEqual(shipping.uk_weight_tier(Decimal('0.5')), ('Under 1kg', Decimal('3.90')))
        self.assertEqual(shipping.uk_weight_tier(1), ('1-2kg', Decimal('5.78')))
        self.assertEqual(shipping.uk_weight_tier(2), ('1-2kg', Decimal('5.78')))
        self.assertEqual(shipping.uk_weight_tier(10), ('5-10kg', Decimal('7.49')))
        self.assertEqual(shipping.uk_weight_tier(12), ('10-15kg', Decimal('10.99')))

    def test_billable_weight_uses_heavier_measure(self):
        """Test billable weight"""
        small_heavy = {'length': 10, 'width': 10, 'height': 10, 'weight': 2}
        self.assertEqual(shipping.billable_weight(small_heavy), Decimal('2'))
        large_light = {'length': 50, 'width': 40, 'height': 10, 'weight': 1}
        self.assertEqual(shipping.billable_weight(large_light), Decimal('4'))

    def test_weight_capped_at_fifteen_kg(self):
        """Test courier weight cap"""
        items = [{'length': 1, 'width': 1, 'height': 1, 'weight': 10}] * 2
        self.assertEqual(shipping.total_billable_weight(items), Decimal('15'))

    def test_international_cost(self):
        """Test international courier cost"""
        items = [{'length': 10, 'width': 10, 'height': 10, 'weight': 2}]
        self.assertEqual(shipping.shipping_invoice_cost(items, 'outside_uk', 'France'), Decimal('89.10'))
        self.assertEqual(shipping.shipping_invoice_cost(items, 'outside_uk', 'Peru'), Decimal('150.00'))

    def test_uk_invoice_cost_with_packaging(self):
        """Test UK invoice cost with packaging"""
        item = shipping.packaged_item_from_inches(10, 10, 10, 1)
        self.assertEqual(item['length'], Decimal('30.48'))
        self.assertEqual(shipping.shipping_invoice_cost([item], 'within_uk'), Decimal('37.45'))

    def test_packaging_dimensions(self):
        """Test packaging dimensions"""
        self.assertEqual(shipping.packaging_dimensions(10, 10, 10),
                         {'length': Decimal('15.08'), 'width': Decimal('15.08'), 'height': Decimal('15.08')})


@override_settings(BACKEND_API_URL='http://backend.test')
class LogisticsAPITests(TestCase):
    """Test Logistics API endpoints"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user())

    def test_list_normalised(self):
        """Test logistics list normalisation"""
        payload = {'success': True, 'data': [{'id': '1'}], 'pagination': TestDataFactory.pagination(1)}
        with mock_backend(make_response(200, payload)) as mock_request:
            response = self.client.get('/api/v1/logistics/?status=pending')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['logistics'], [{'id': '1'}])
        self.assertEqual(response.data['pagination']['total'], 1)
        self.assertEqual(mock_request.call_args[1]['params'], {'status': 'pending'})

    def test_create_validates_destination(self):
        """Test destination type choices"""
        body = {'reference_number': 'LOG-1', 'height_inches': 1, 'width_inches': 1, 'length_inches': 1,
                'weight_kg': 1, 'destination_type': 'mars'}
        response = self.client.post('/api/v1/logistics/', body, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_template_header(self):
        """Test logistics CSV template header"""
        response = self.client.get('/api/v1/logistics/template/csv/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        lines = response.content.decode().splitlines()
        self.assertEqual(lines[0], 'Reference Number,Description,Height (in),Width (in),Length (in),Weight (kg),'
                                   'Destination Type,Country,Address,Item Value,Status,Tracking Number')
        self.assertEqual(len(lines), 3)

    def test_import_maps_friendly_headers(self):
        """Test logistics CSV header mapping"""
        csv_text = 'Reference Number,Height (in),Country,Notes\nLOG-1,24,France,fragile\n'
        with mock_backend(make_response(200, {'imported': 1, 'errors': []})) as mock_request:
            response = self.client.post('/api/v1/logistics/import/csv/', {'csv_data': csv_text}, format='json')
        self.assertEqual(response.data['imported'], 1)
        self.assertEqual(mock_request.call_args[1]['json'], {'csvData': [{
            'reference_number': 'LOG-1', 'height_inches': '24', 'destination_country': 'France', 'notes': 'fragile',
        }]})

    def test_calculate_requires_all_params(self):
        """Test shipping calculation parameters"""
        response = self.client.get('/api/v1/logistics/calculate/?height_inches=10')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_shipping_quote_international(self):
        """Test international shipping quote"""
        body = {
            'packages': [{'length_inches': '1', 'width_inches': '1', 'height_inches': '1', 'weight_kg': '3'}],
            'destination_type': 'outside_uk',
            'country': 'USA',
            'include_packaging': False,
        }
        response = self.client.post('/api/v1/logistics/shipping-quote/', body, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['courier_cost'], Decimal('41.16'))
        self.assertEqual(response.data['shipping_charge'], Decimal('205.80'))
        self.assertIsNone(response.data['tier'])

    def test_shipping_quote_needs_country_abroad(self):
        """Test international quote needs a country"""
        body = {'packages': [{'length_inches': 1, 'width_inches': 1, 'height_inches': 1}],
                'destination_type': 'outside_uk'}
        response = self.client.post('/api/v1/logistics/shipping-quote/', body, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
