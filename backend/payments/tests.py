"""
Test suite for Payments module
Tests: Stripe/Xero passthrough, invoice payment links with fallback
"""
from django.test import TestCase, override_settings
from rest_framework import status

from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient, make_response, mock_backend
from backend.payments.views import format_amount


class FormatAmountTests(TestCase):

    def test_trailing_zeros_dropped(self):
        """Test fallback amount formatting"""
        self.assertEqual(format_amount(150.0), '150')
        self.assertEqual(format_amount(99.5), '99.5')
        self.assertEqual(format_amount(1000), '1000')


@override_settings(BACKEND_API_URL='http://backend.test', PUBLIC_BASE_URL='https://shop.test')
class PaymentAPITests(TestCase):
    """Test Payments API endpoints"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user(role='admin'))

    def test_stripe_credentials(self):
        """Test Stripe credentials passthrough"""
        with mock_backend(make_response(200, {'configured': True})) as mock_request:
            response = self.client.get('/api/v1/payments/stripe/credentials/4/')
        self.assertEqual(response.data, {'configured': True})
        self.assertEqual(mock_request.call_args[0], ('GET', 'http://backend.test/api/stripe-payments/credentials/4'))

    def test_stripe_save_credentials_requires_admin(self):
        """Test saving Stripe credentials needs admin access"""
        client = AuthenticatedAPIClient()
        client.authenticate_user(TestDataFactory.create_user(role='user'))
        body = {'brandId': '4', 'publishableKey': 'pk_test', 'secretKey': 'sk_test'}
        response = client.post('/api/v1/payments/stripe/credentials/', body, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_stripe_payment_link(self):
        """Test Stripe payment link"""
        body = {'brandId': '4', 'amount': 25, 'title': 'Catalogue'}
        with mock_backend(make_response(200, {'success': True, 'paymentLink': {'url': 'https://buy.test'}})) as m:
            response = self.client.post('/api/v1/payments/stripe/payment-links/', body, format='json')
        self.assertEqual(response.data['paymentLink']['url'], 'https://buy.test')
        self.assertEqual(m.call_args[1]['json'], {'brandId': '4', 'amount': 25.0, 'title': 'Catalogue'})

    def test_xero_refresh_token(self):
        """Test Xero token refresh"""
        with mock_backend(make_response(200, {'success': True})) as mock_request:
            self.client.post('/api/v1/payments/xero/refresh-token/4/')
        self.assertEqual(mock_request.call_args[0], ('POST', 'http://backend.test/api/xero-payments/refresh-token/4'))

    def test_invoice_payment_link_requires_customer(self):
        """Test invoice payment link needs a customer"""
        response = self.client.post('/api/v1/payments/invoice-payment-link/',
                                    {'invoiceNumber': 'INV-1', 'amount': 150}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_invoice_payment_link_via_xero(self):
        """Test invoice payment link through Xero"""
        responses = [
            make_response(200, {'invoice': {'invoiceId': 'x1', 'invoiceNumber': 'INV-1'}}),
            make_response(200, {'paymentLink': {'paymentUrl': 'https://in.xero.com/abc'}}),
        ]
        body = {'invoiceNumber': 'INV-1', 'amount': 150, 'customerName': 'Jane Buyer'}
        with mock_backend(*responses) as mock_request:
            response = self.client.post('/api/v1/payments/invoice-payment-link/', body, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['paymentLink'], {
            'paymentUrl': 'https://in.xero.com/abc', 'invoiceNumber': 'INV-1', 'xeroInvoiceId': 'x1',
        })
        first, second = mock_request.call_args_list
        invoice = first[1]['json']
        self.assertEqual(first[0], ('POST', 'http://backend.test/api/xero/invoices'))
        self.assertEqual(invoice['currency'], 'GBP')
        self.assertEqual(invoice['reference'], 'Invoice INV-1')
        self.assertEqual(invoice['lineItems'], [{
            'description': 'Payment for Invoice INV-1', 'quantity': 1, 'unitAmount': 150.0,
            'accountCode': '200', 'taxType': 'NONE',
        }])
        self.assertEqual(second[0], ('POST', 'http://backend.test/api/xero/invoices/x1/payment-link'))

    def test_invoice_payment_link_fallback(self):
        """Test invoice payment link fallback"""
        body = {'invoiceNumber': 'INV-1', 'amount': 150, 'customerName': 'Jane Buyer',
                'customerEmail': 'jane@test.com', 'dueDate': '2024-12-31'}
        with mock_backend(make_response(500, {'error': 'Xero not connected'})):
            response = self.client.post('/api/v1/payments/invoice-payment-link/', body, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        link = response.data['paymentLink']
        self.assertTrue(link['fallback'])
        self.assertEqual(link['status'], 'pending')
        self.assertEqual(link['paymentUrl'],
                         'https://shop.test/payment/INV-1?amount=150&email=jane%40test.com&due=2024-12-31')
        self.assertEqual(response.data['warning'], 'Using fallback payment system')
