"""
Test suite for Banking module
Tests: default date window, list normalisation, edit/reconcile calls, account lookup caching
"""
from datetime import timedelta
from unittest import mock

from django.test import TestCase, override_settings
from django.utils import timezone
from rest_framework import status

from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient, make_response, mock_backend


@override_settings(BACKEND_API_URL='http://backend.test')
class BankingAPITests(TestCase):
    """Test Banking API endpoints"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user())

    def test_list_defaults_to_last_30_days(self):
        """Test banking list defaults to the last 30 days"""
        today = timezone.localdate()
        with mock_backend(make_response(200, {'success': True, 'data': [], 'pagination': None})) as mock_request:
            response = self.client.get('/api/v1/banking/?status=pending')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        params = mock_request.call_args[1]['params']
        self.assertEqual(params['date_from'], (today - timedelta(days=30)).isoformat())
        self.assertEqual(params['date_to'], today.isoformat())
        self.assertEqual(params['status'], 'pending')

    def test_list_keeps_explicit_dates(self):
        """Test explicit banking dates are kept"""
        with mock_backend(make_response(200, [])) as mock_request:
            self.client.get('/api/v1/banking/?date_from=2024-01-01&date_to=2024-01-31')
        params = mock_request.call_args[1]['params']
        self.assertEqual((params['date_from'], params['date_to']), ('2024-01-01', '2024-01-31'))

    def test_list_normalises_standard_envelope(self):
        """Test banking list from a standard envelope"""
        transaction = TestDataFactory.create_banking_transaction()
        payload = {'success': True, 'data': [transaction], 'pagination': TestDataFactory.pagination(1)}
        with mock_backend(make_response(200, payload)):
            response = self.client.get('/api/v1/banking/')
        self.assertEqual(response.data['transactions'], [transaction])
        self.assertEqual(response.data['pagination']['total'], 1)

    def test_list_normalises_bare_list(self):
        """Test banking list from a bare list"""
        transactions = [TestDataFactory.create_banking_transaction(), TestDataFactory.create_banking_transaction()]
        with mock_backend(make_response(200, transactions)):
            response = self.client.get('/api/v1/banking/')
        self.assertEqual(len(response.data['transactions']), 2)
        self.assertEqual(response.data['pagination'], {'page': 1, 'limit': 2, 'total': 2, 'pages': 1})

    def test_edit_sends_put_with_edited_fields(self):
        """Test banking edit sends a PUT"""
        edited = {'description': 'Corrected deposit', 'amount': 300.0, 'status': 'cleared'}
        updated = dict(TestDataFactory.create_banking_transaction(amount=300.0), **edited)
        with mock_backend(make_response(200, updated)) as mock_request:
            response = self.client.put('/api/v1/banking/42/', edited, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        args, kwargs = mock_request.call_args
        self.assertEqual(args, ('PUT', 'http://backend.test/api/banking/42'))
        self.assertEqual(kwargs['json'], edited)

    def test_edit_rejects_invalid_status(self):
        """Test banking status choices"""
        with mock_backend(make_response(200, {})) as mock_request:
            response = self.client.put('/api/v1/banking/42/', {'status': 'bounced'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        mock_request.assert_not_called()

    def test_create_requires_amount(self):
        """Test banking amount is required"""
        response = self.client.post('/api/v1/banking/', {
            'type': 'deposit', 'description': 'x', 'payment_method': 'cash', 'transaction_date': '2024-01-01',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('amount', response.data)

    def test_create(self):
        """Test creating a banking transaction"""
        body = {'type': 'deposit', 'description': 'Lot 4 payment', 'amount': 120, 'payment_method': 'stripe',
                'transaction_date': '2024-01-15', 'currency': 'gbp', 'client_id': '7'}
        with mock_backend(make_response(201, {'id': '1'})) as mock_request:
            response = self.client.post('/api/v1/banking/', body, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        sent = mock_request.call_args[1]['json']
        self.assertEqual(sent['currency'], 'GBP')
        self.assertEqual(sent['client_id'], '7')

    def test_reconcile(self):
        """Test banking reconciliation"""
        with mock_backend(make_response(200, {'id': '42', 'is_reconciled': True})) as mock_request:
            response = self.client.put('/api/v1/banking/42/reconcile/',
                                       {'reconciled_balance': 1500.25, 'notes': 'Matched statement'}, format='json')
        self.assertTrue(response.data['is_reconciled'])
        args, kwargs = mock_request.call_args
        self.assertEqual(args, ('PUT', 'http://backend.test/api/banking/42/reconcile'))
        self.assertEqual(kwargs['json'], {'reconciled_balance': 1500.25, 'notes': 'Matched statement'})

    def test_stats_uses_default_window(self):
        """Test banking stats date window"""
        with mock_backend(make_response(200, {'total_transactions': 3})) as mock_request:
            response = self.client.get('/api/v1/banking/stats/?bank_account=Main')
        self.assertEqual(response.data['total_transactions'], 3)
        params = mock_request.call_args[1]['params']
        self.assertIn('date_from', params)
        self.assertEqual(params['bank_account'], 'Main')

    def test_accounts_are_cached(self):
        """Test bank accounts are cached"""
        with mock_backend(make_response(200, ['Main', 'Stripe'])) as mock_request:
            first = self.client.get('/api/v1/banking/accounts/')
            second = self.client.get('/api/v1/banking/accounts/')
        self.assertEqual(first.data, ['Main', 'Stripe'])
        self.assertEqual(second.data, ['Main', 'Stripe'])
        self.assertEqual(mock_request.call_count, 1)

    def test_backend_error_surfaces(self):
        """Test banking backend errors"""
        with mock.patch('backend.banking.views.normalize_list_payload') as normalize:
            with mock_backend(make_response(403, {'error': 'Insufficient permissions'})):
                response = self.client.get('/api/v1/banking/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data, {'error': 'Insufficient permissions'})
        normalize.assert_not_called()
