"""
Test suite for Invoices module
Tests: pricing rules, invoice proxy endpoints, local quotes
"""
from decimal import Decimal

from django.test import TestCase, override_settings
from rest_framework import status

from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient, make_response, mock_backend
from backend.invoices import pricing


class PricingTests(TestCase):
    """Test premium, VAT, insurance and shipping calculations"""

    def test_buyers_premium_tiers(self):
        """Test buyer's premium tiers"""
        self.assertEqual(pricing.calculate_buyers_premium(1000), Decimal('250'))
        self.assertEqual(pricing.calculate_buyers_premium(100000), Decimal('25000'))
        self.assertEqual(pricing.calculate_buyers_premium(150000), Decimal('32500'))
        self.assertEqual(pricing.calculate_buyers_premium(0), Decimal('0'))

    def test_client_specific_premium_rate(self):
        """Test client premium rate"""
        self.assertEqual(pricing.calculate_buyers_premium(1000, premium_rate=0.2), Decimal('200'))

    def test_live_auctioneer_commission(self):
        """Test Live Auctioneer commission"""
        self.assertEqual(pricing.calculate_live_auctioneer_commission(1000), Decimal('50'))

    def test_vat_codes(self):
        """Test VAT by code"""
        for code in ['M', 'N', 'Z', 'E']:
            self.assertEqual(pricing.calculate_vat(100, code), (Decimal('0'), Decimal('0')))
        self.assertEqual(pricing.calculate_vat(100, 'V')[0], Decimal('20'))
        self.assertEqual(pricing.calculate_vat(100, 'W')[0], Decimal('5'))
        self.assertEqual(pricing.calculate_vat(100, 'X')[0], Decimal('20'))
        self.assertEqual(pricing.calculate_vat(100, None)[0], Decimal('20'))

    def test_insurance_tiers(self):
        """Test insurance tiers"""
        self.assertEqual(pricing.calculate_insurance_cost(500, 'UK'), Decimal('20'))
        self.assertEqual(pricing.calculate_insurance_cost(1000, 'UK'), Decimal('20'))
        self.assertEqual(pricing.calculate_insurance_cost(3000, 'UK'), Decimal('35'))
        self.assertEqual(pricing.calculate_insurance_cost(50000, 'UK'), Decimal('60'))
        self.assertEqual(pricing.calculate_insurance_cost(20000, 'International'), Decimal('60'))
        self.assertEqual(pricing.calculate_insurance_cost(60000, 'UK'), Decimal('0'))
        self.assertEqual(pricing.calculate_insurance_cost(100, 'Mars'), Decimal('0'))

    def test_parse_dimensions(self):
        """Test dimension parsing"""
        self.assertEqual(pricing.parse_dimensions('12 x 8 inches'), (Decimal('12'), Decimal('8')))
        self.assertEqual(pricing.parse_dimensions('12×8'), (Decimal('12'), Decimal('8')))
        self.assertEqual(pricing.parse_dimensions('10.5X4'), (Decimal('10.5'), Decimal('4')))
        self.assertIsNone(pricing.parse_dimensions('large'))
        self.assertIsNone(pricing.parse_dimensions(None))

    def test_shipping_cost(self):
        """Test dimensional shipping cost"""
        self.assertEqual(pricing.calculate_shipping_cost('within_uk', [(10, 8)]), Decimal('62.00'))
        self.assertEqual(pricing.calculate_shipping_cost('international', [(10, 8)]), Decimal('93.00'))
        self.assertEqual(pricing.calculate_shipping_cost('within_uk', [(10, 8), (20, 20)]), Decimal('110.40'))

    def test_item_total(self):
        """Test invoice line total"""
        item = {'hammer_price': 1000, 'vat_code': 'M', 'shipping_cost': 50}
        self.assertEqual(pricing.calculate_item_total(item), Decimal('1350'))

    def test_format_currency(self):
        """Test GBP formatting"""
        self.assertEqual(pricing.format_currency(1234.5), '£1,234.50')
        self.assertEqual(pricing.format_currency(-5), '-£5.00')


@override_settings(BACKEND_API_URL='http://backend.test')
class InvoiceAPITests(TestCase):
    """Test Invoice API endpoints"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user())

    def test_list_invoices(self):
        """Test invoice list filters"""
        with mock_backend(make_response(200, {'success': True, 'data': {'invoices': []}})) as mock_request:
            response = self.client.get('/api/v1/invoices/?auction_id=3&type=buyer')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(mock_request.call_args[1]['params'], {'auction_id': '3', 'type': 'buyer'})

    def test_update_rejects_unknown_status(self):
        """Test invoice status choices"""
        response = self.client.put('/api/v1/invoices/4/', {'status': 'refunded'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_generate_unwraps_data(self):
        """Test invoice generation unwraps data"""
        with mock_backend(make_response(200, {'success': True, 'data': {'id': 9}})) as mock_request:
            response = self.client.post('/api/v1/invoices/generate/', {'auction_id': 3}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data, {'id': 9})
        self.assertEqual(mock_request.call_args[1]['json'], {'auction_id': 3})

    def test_pdf_download(self):
        """Test invoice PDF download"""
        with mock_backend(make_response(200, content=b'%PDF', content_type='application/pdf')) as mock_request:
            response = self.client.post('/api/v1/invoices/4/pdf/', {'type': 'internal', 'brand_id': 1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('invoice-4.pdf', response['Content-Disposition'])
        self.assertEqual(mock_request.call_args[1]['json'], {'type': 'internal', 'brand_id': 1})

    def test_shipping_payment_link_requires_amount(self):
        """Test shipping payment link needs an amount"""
        response = self.client.post('/api/v1/invoices/4/shipping-payment-link/', {'shippingAmount': 0}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_shipping_payment_link(self):
        """Test shipping payment link"""
        body = {'success': True, 'paymentLink': 'https://pay.test/x'}
        with mock_backend(make_response(200, body)) as mock_request:
            response = self.client.post('/api/v1/invoices/4/shipping-payment-link/',
                                        {'shippingAmount': 45.5, 'customerEmail': 'b@test.com'}, format='json')
        self.assertEqual(response.data['paymentLink'], 'https://pay.test/x')
        self.assertEqual(mock_request.call_args[0],
                         ('POST', 'http://backend.test/api/invoices/4/create-shipping-payment-link'))

    def test_payment_status_error(self):
        """Test payment status backend error"""
        with mock_backend(make_response(500, {'message': 'Xero unavailable'})):
            response = self.client.get('/api/v1/invoices/4/payment-status/')
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data, {'error': 'Xero unavailable'})

    def test_quote(self):
        """Test local invoice quote"""
        response = self.client.post('/api/v1/invoices/quote/', {
            'items': [{'hammer_price': '1000', 'vat_code': 'M', 'dimensions': '10 x 8'}],
            'destination': 'within_uk',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['items'][0]['buyers_premium'], Decimal('250'))
        self.assertEqual(response.data['items'][0]['premium_vat'], Decimal('50'))
        self.assertEqual(response.data['shipping'], Decimal('62'))
        self.assertEqual(response.data['insurance'], Decimal('35'))
        self.assertEqual(response.data['total'], Decimal('1397'))
        self.assertEqual(response.data['formatted_total'], '£1,397.00')

    def test_quote_platform_commission(self):
        """Test LiveAuctioneers lots carry the platform commission outside the total"""
        response = self.client.post('/api/v1/invoices/quote/', {
            'items': [
                {'hammer_price': '1000', 'vat_code': 'M', 'platform': 'liveauctioneers'},
                {'hammer_price': '1000', 'vat_code': 'M', 'platform': 'easylive'},
            ],
            'include_insurance': False,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['items'][0]['platform_commission'], Decimal('50'))
        self.assertNotIn('platform_commission', response.data['items'][1])
        self.assertEqual(response.data['items'][0]['total'], Decimal('1300'))

    def test_quote_rejects_unknown_vat_code(self):
        """Test quote VAT code choices"""
        response = self.client.post('/api/v1/invoices/quote/', {'items': [{'hammer_price': '10', 'vat_code': 'Q'}]},
                                    format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
