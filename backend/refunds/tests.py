"""
Test suite for Refunds module
Tests: brand scoping, list normalisation, approval permissions
"""
from django.test import TestCase, override_settings
from rest_framework import status

from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient, make_response, mock_backend

EMPTY_LIST = {'success': True, 'data': [], 'pagination': {'page': 1, 'limit': 25, 'total': 0, 'pages': 0}}


@override_settings(BACKEND_API_URL='http://backend.test', DEFAULT_BRAND_CODE='MSABER')
class RefundAPITests(TestCase):
    """Test Refund API endpoints"""

    def client_for(self, **user_fields):
        client = AuthenticatedAPIClient()
        client.authenticate_user(TestDataFactory.create_user(**user_fields))
        return client

    def test_staff_list_scoped_to_own_brand(self):
        """Test staff list is scoped to their brand"""
        client = self.client_for(role='admin', brand_code='AURUM')
        with mock_backend(make_response(200, EMPTY_LIST)) as mock_request:
            response = client.get('/api/v1/refunds/?status=pending')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(mock_request.call_args[1]['params'], {'status': 'pending', 'brand_code': 'AURUM'})
        self.assertEqual(response.data, {'refunds': [], 'pagination': EMPTY_LIST['pagination']})

    def test_staff_without_brand_gets_default(self):
        """Test staff without a brand get the default"""
        client = self.client_for(role='user', brand_code=None)
        with mock_backend(make_response(200, EMPTY_LIST)) as mock_request:
            client.get('/api/v1/refunds/')
        self.assertEqual(mock_request.call_args[1]['params']['brand_code'], 'MSABER')

    def test_brand_header_wins_over_user_brand(self):
        """Test brand header overrides the user brand"""
        client = self.client_for(role='admin', brand_code='AURUM')
        with mock_backend(make_response(200, EMPTY_LIST)) as mock_request:
            client.get('/api/v1/refunds/', HTTP_X_BRAND_CODE='METSAB')
        self.assertEqual(mock_request.call_args[1]['params']['brand_code'], 'METSAB')

    def test_super_admin_sees_all_brands(self):
        """Test super admins are not scoped"""
        client = self.client_for(role='super_admin', brand_code='AURUM')
        with mock_backend(make_response(200, EMPTY_LIST)) as mock_request:
            client.get('/api/v1/refunds/')
        self.assertNotIn('brand_code', mock_request.call_args[1]['params'])

    def test_legacy_list_payload(self):
        """Test bare refund list"""
        client = self.client_for()
        with mock_backend(make_response(200, {'refunds': [{'id': '1'}], 'pagination': None})):
            response = client.get('/api/v1/refunds/')
        self.assertEqual(response.data['refunds'], [{'id': '1'}])

    def test_create_adds_brand(self):
        """Test refund creation adds the brand"""
        client = self.client_for(role='admin', brand_code='AURUM')
        body = {'type': 'overpayment', 'reason': 'Paid twice', 'amount': 50, 'refund_method': 'bank_transfer'}
        with mock_backend(make_response(201, {'id': '1'})) as mock_request:
            response = client.post('/api/v1/refunds/', body, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(mock_request.call_args[1]['json']['brand_code'], 'AURUM')

    def test_create_rejects_zero_amount(self):
        """Test zero refund amount"""
        client = self.client_for()
        body = {'type': 'overpayment', 'reason': 'x', 'amount': 0, 'refund_method': 'cash'}
        response = client.post('/api/v1/refunds/', body, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_approve_requires_admin(self):
        """Test refund approval needs admin access"""
        client = self.client_for(role='user')
        response = client.put('/api/v1/refunds/3/approve/', {'comments': 'ok'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_approve(self):
        """Test refund approval"""
        client = self.client_for(role='admin')
        with mock_backend(make_response(200, {'id': '3', 'status': 'approved'})) as mock_request:
            response = client.put('/api/v1/refunds/3/approve/', {'comments': 'ok'}, format='json')
        self.assertEqual(response.data['status'], 'approved')
        self.assertEqual(mock_request.call_args[0], ('PUT', 'http://backend.test/api/refunds/3/approve'))

    def test_process_status_choices(self):
        """Test refund process status choices"""
        client = self.client_for(role='admin')
        response = client.put('/api/v1/refunds/3/process/', {'status': 'approved'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_stats_scoped(self):
        """Test refund stats brand scope"""
        client = self.client_for(role='admin', brand_code='METSAB')
        with mock_backend(make_response(200, {'total_refunds': 2})) as mock_request:
            response = client.get('/api/v1/refunds/stats/')
        self.assertEqual(response.data['total_refunds'], 2)
        self.assertEqual(mock_request.call_args[1]['params'], {'brand_code': 'METSAB'})
