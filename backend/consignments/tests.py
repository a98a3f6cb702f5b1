"""
Test suite for Consignments module
Tests: CRUD proxying, artwork membership, CSV import/template, PDF passthrough
"""
from django.test import TestCase, override_settings
from rest_framework import status
from rest_framework.test import APIClient

from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient, make_response, mock_backend

PDF_BYTES = b'%PDF-1.4 test'


@override_settings(BACKEND_API_URL='http://backend.test')
class ConsignmentAPITests(TestCase):
    """Test Consignment API endpoints"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user(role='admin'))

    def test_list_consignments(self):
        """Test consignment list filters"""
        payload = {'success': True, 'data': [], 'pagination': TestDataFactory.pagination(0),
                   'counts': {'active': 0, 'pending': 0}}
        with mock_backend(make_response(200, payload)) as mock_request:
            response = self.client.get('/api/v1/consignments/?status=active&client_id=4')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(mock_request.call_args[1]['params'], {'status': 'active', 'client_id': '4'})

    def test_create_requires_client(self):
        """Test consignment client is required"""
        response = self.client.post('/api/v1/consignments/', {'status': 'active'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('client_id', response.data)

    def test_commission_range(self):
        """Test consignment commission range"""
        response = self.client.post('/api/v1/consignments/', {'client_id': 3, 'default_vendor_commission': 150},
                                    format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_add_artworks(self):
        """Test adding artworks to a consignment"""
        with mock_backend(make_response(200, {'success': True})) as mock_request:
            response = self.client.post('/api/v1/consignments/8/artworks/', {'artwork_ids': [1, 2]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        args, kwargs = mock_request.call_args
        self.assertEqual(args, ('POST', 'http://backend.test/api/consignments/8/add-artworks'))
        self.assertEqual(kwargs['json'], {'artwork_ids': [1, 2]})

    def test_remove_artworks_sends_body_with_delete(self):
        """Test removing artworks sends a DELETE body"""
        with mock_backend(make_response(204)) as mock_request:
            response = self.client.delete('/api/v1/consignments/8/artworks/', {'artwork_ids': [2]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        args, kwargs = mock_request.call_args
        self.assertEqual(args, ('DELETE', 'http://backend.test/api/consignments/8/remove-artworks'))
        self.assertEqual(kwargs['json'], {'artwork_ids': [2]})

    def test_template(self):
        """Test consignment CSV template"""
        response = self.client.get('/api/v1/consignments/template/csv/')
        lines = response.content.decode().splitlines()
        self.assertEqual(lines[0], 'client_email,specialist_id,online_valuation_reference,default_vendor_commission,status')

    def test_import_csv_from_text(self):
        """Test consignment CSV import from text"""
        text = 'Client Email,Status\nclient@example.com,active\n'
        with mock_backend(make_response(200, {'results': {'success': 1, 'errors': []}})) as mock_request:
            response = self.client.post('/api/v1/consignments/import/csv/', {'csv_data': text}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(mock_request.call_args[1]['json'],
                         {'csv_data': [{'client_email': 'client@example.com', 'status': 'active'}]})

    def test_receipt_pdf(self):
        """Test consignment receipt PDF"""
        with mock_backend(make_response(200, content=PDF_BYTES, content_type='application/pdf')):
            response = self.client.post('/api/v1/consignments/8/receipt-pdf/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.content, PDF_BYTES)
        self.assertEqual(response['Content-Type'], 'application/pdf')
        self.assertIn('consignment-receipt-8.pdf', response['Content-Disposition'])

    def test_presale_invoice_for_auction(self):
        """Test presale invoice for one auction"""
        with mock_backend(make_response(200, content=PDF_BYTES, content_type='application/pdf')) as mock_request:
            response = self.client.post('/api/v1/consignments/8/presale-invoice-pdf/3/',
                                        {'sale_details': {'sale_name': 'Spring'}}, format='json')
        self.assertIn('presale-invoice-8-auction-3.pdf', response['Content-Disposition'])
        args, kwargs = mock_request.call_args
        self.assertEqual(args, ('POST', 'http://backend.test/api/consignments/8/presale-invoice-pdf/3'))
        self.assertEqual(kwargs['json'], {'sale_details': {'sale_name': 'Spring'}})

    def test_collection_receipt_requires_items(self):
        """Test collection receipt needs items"""
        response = self.client.post('/api/v1/consignments/8/collection-receipt-pdf/', {'returned_items': []},
                                    format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_custom_report_uses_user_role(self):
        """Test custom report sends the user role"""
        with mock_backend(make_response(200, content=PDF_BYTES, content_type='application/pdf')) as mock_request:
            response = self.client.post('/api/v1/consignments/custom-report-pdf/',
                                        {'consignments': [{'id': 1}], 'template': 'financial'}, format='json')
        self.assertIn('consignment-financial-report.pdf', response['Content-Disposition'])
        self.assertEqual(mock_request.call_args[1]['json']['userRole'], 'admin')

    def test_pdf_error_is_json(self):
        """Test PDF errors come back as JSON"""
        with mock_backend(make_response(404, {'error': 'Consignment not found'})):
            response = self.client.post('/api/v1/consignments/99/receipt-pdf/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data, {'error': 'Consignment not found'})

    def test_public_pdf_without_token(self):
        """Test public PDFs are fetched without a token"""
        with mock_backend(make_response(200, content=PDF_BYTES, content_type='application/pdf')) as mock_request:
            response = APIClient().post('/api/v1/public/consignments/8/collection-receipt/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        args, kwargs = mock_request.call_args
        self.assertEqual(args, ('POST', 'http://backend.test/api/public/consignments/8/collection-receipt-pdf'))
        self.assertNotIn('Authorization', kwargs['headers'])
