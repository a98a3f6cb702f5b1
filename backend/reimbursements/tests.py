"""
Test suite for Reimbursements module
Tests: brand scoping, tax calculation, approval stages, payment completion
"""
from django.test import TestCase, override_settings
from rest_framework import status

from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient, make_response, mock_backend

EMPTY_LIST = {'success': True, 'data': [], 'pagination': {'page': 1, 'limit': 25, 'total': 0, 'pages': 0}}

CLAIM = {
    'title': 'Courier to Heathrow',
    'description': 'Taxi with two crated lots',
    'total_amount': 120,
    'category': 'internal_logistics',
    'payment_method': 'card',
    'payment_date': '2024-03-01',
    'purpose': 'Lot delivery',
}


@override_settings(BACKEND_API_URL='http://backend.test', DEFAULT_BRAND_CODE='MSABER')
class ReimbursementAPITests(TestCase):
    """Test Reimbursement API endpoints"""

    def client_for(self, **user_fields):
        client = AuthenticatedAPIClient()
        client.authenticate_user(TestDataFactory.create_user(**user_fields))
        return client

    def test_list_scoped_and_normalised(self):
        """Test list is brand scoped and keyed by reimbursements"""
        client = self.client_for(role='admin', brand_code='AURUM')
        with mock_backend(make_response(200, EMPTY_LIST)) as mock_request:
            response = client.get('/api/v1/reimbursements/?category=fuel&approval_stage=director1&bogus=1')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(mock_request.call_args[0], ('GET', 'http://backend.test/api/reimbursements'))
        self.assertEqual(mock_request.call_args[1]['params'],
                         {'category': 'fuel', 'approval_stage': 'director1', 'brand_code': 'AURUM'})
        self.assertEqual(response.data, {'reimbursements': [], 'pagination': EMPTY_LIST['pagination']})

    def test_create_computes_tax_and_net(self):
        """Test tax and net amounts are filled from the default rate"""
        client = self.client_for(role='user', brand_code='METSAB')
        with mock_backend(make_response(201, {'success': True, 'data': {'id': 1}})) as mock_request:
            response = client.post('/api/v1/reimbursements/', CLAIM, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        sent = mock_request.call_args[1]['json']
        self.assertEqual(sent['tax_rate'], 0.2)
        self.assertEqual(sent['tax_amount'], 24.0)
        self.assertEqual(sent['net_amount'], 96.0)
        self.assertEqual(sent['payment_date'], '2024-03-01')
        self.assertEqual(sent['brand_code'], 'METSAB')

    def test_create_keeps_given_tax(self):
        """Test an explicit tax amount is kept"""
        client = self.client_for()
        with mock_backend(make_response(201, {'success': True, 'data': {'id': 1}})) as mock_request:
            client.post('/api/v1/reimbursements/', {**CLAIM, 'tax_rate': 0, 'tax_amount': 5.5}, format='json')
        sent = mock_request.call_args[1]['json']
        self.assertEqual(sent['tax_amount'], 5.5)
        self.assertEqual(sent['net_amount'], 114.5)

    def test_create_requires_fields(self):
        """Test required claim fields"""
        client = self.client_for()
        response = client.post('/api/v1/reimbursements/', {'title': 'Lunch'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        for field in ['description', 'total_amount', 'category', 'payment_method', 'payment_date', 'purpose']:
            self.assertIn(field, response.data)

    def test_create_rejects_unknown_category(self):
        """Test category choices"""
        client = self.client_for()
        response = client.post('/api/v1/reimbursements/', {**CLAIM, 'category': 'gifts'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('category', response.data)

    def test_tax_above_total_rejected(self):
        """Test tax cannot exceed the total"""
        client = self.client_for()
        response = client.post('/api/v1/reimbursements/', {**CLAIM, 'tax_amount': 500}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_partial_update_leaves_amounts(self):
        """Test updates without a total are forwarded as given"""
        client = self.client_for()
        with mock_backend(make_response(200, {'success': True, 'data': {'id': 4}})) as mock_request:
            client.put('/api/v1/reimbursements/4/', {'priority': 'urgent'}, format='json')
        self.assertEqual(mock_request.call_args[0], ('PUT', 'http://backend.test/api/reimbursements/4'))
        self.assertEqual(mock_request.call_args[1]['json'], {'priority': 'urgent'})

    def test_pending_approvals(self):
        """Test pending approvals passthrough"""
        client = self.client_for()
        payload = {'success': True, 'data': [{'id': 2, 'approval_stage': 'director2'}]}
        with mock_backend(make_response(200, payload)) as mock_request:
            response = client.get('/api/v1/reimbursements/pending-approvals/')
        self.assertEqual(response.data, payload)
        self.assertEqual(mock_request.call_args[0], ('GET', 'http://backend.test/api/reimbursements/pending-approvals'))

    def test_approve_stage(self):
        """Test each approval stage maps to its backend endpoint"""
        client = self.client_for(role='admin')
        for stage in ['director1', 'director2', 'accountant']:
            with mock_backend(make_response(200, {'success': True})) as mock_request:
                response = client.put(f'/api/v1/reimbursements/7/approve-{stage}/',
                                      {'approved': True, 'comments': 'ok'}, format='json')
            self.assertEqual(response.status_code, status.HTTP_200_OK)
            self.assertEqual(mock_request.call_args[0],
                             ('PUT', f'http://backend.test/api/reimbursements/7/approve-{stage}'))
            self.assertEqual(mock_request.call_args[1]['json'], {'approved': True, 'comments': 'ok'})

    def test_approve_unknown_stage(self):
        """Test unknown approval stages return 404"""
        client = self.client_for(role='admin')
        with mock_backend() as mock_request:
            response = client.put('/api/v1/reimbursements/7/approve-ceo/', {'approved': True}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        mock_request.assert_not_called()

    def test_approve_requires_admin(self):
        """Test approvals need admin access"""
        client = self.client_for(role='user')
        response = client.put('/api/v1/reimbursements/7/approve-director1/', {'approved': True}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_complete_payment(self):
        """Test payment completion needs a reference"""
        client = self.client_for(role='admin')
        response = client.put('/api/v1/reimbursements/7/complete-payment/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        with mock_backend(make_response(200, {'success': True})) as mock_request:
            response = client.put('/api/v1/reimbursements/7/complete-payment/',
                                  {'payment_reference': 'BACS-991'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(mock_request.call_args[1]['json'], {'payment_reference': 'BACS-991'})

    def test_stats_scoped(self):
        """Test stats filters and brand scope"""
        client = self.client_for(role='admin', brand_code='AURUM')
        with mock_backend(make_response(200, {'success': True, 'data': {'total_requests': 0}})) as mock_request:
            client.get('/api/v1/reimbursements/stats/?category=travel&date_from=2024-01-01&status=pending')
        self.assertEqual(mock_request.call_args[1]['params'],
                         {'category': 'travel', 'date_from': '2024-01-01', 'brand_code': 'AURUM'})
