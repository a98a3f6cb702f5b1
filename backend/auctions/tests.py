"""
Test suite for Auctions module
Tests: CRUD proxying, CSV import/template, EOA passthrough, platform exports
"""
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, override_settings
from rest_framework import status

from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient, make_response, mock_backend


@override_settings(BACKEND_API_URL='http://backend.test')
class AuctionAPITests(TestCase):
    """Test Auction API endpoints"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user())

    def test_list_auctions(self):
        """Test auction list filters"""
        payload = {'auctions': [{'id': 1, 'short_name': 'Spring'}], 'pagination': TestDataFactory.pagination(1)}
        with mock_backend(make_response(200, payload)) as mock_request:
            response = self.client.get('/api/v1/auctions/?status=planned&brand_id=2&foo=bar')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['auctions'][0]['short_name'], 'Spring')
        self.assertEqual(mock_request.call_args[1]['params'], {'status': 'planned', 'brand_id': '2'})

    def test_create_auction_validates_type(self):
        """Test auction type choices"""
        response = self.client.post('/api/v1/auctions/', {
            'short_name': 'Spring', 'long_name': 'Spring Sale', 'type': 'online', 'settlement_date': '2024-12-31',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('type', response.data)

    def test_create_auction(self):
        """Test creating an auction"""
        body = {'short_name': 'Spring', 'long_name': 'Spring Sale', 'type': 'timed',
                'settlement_date': '2024-12-31', 'auction_days': [{'day': 1}]}
        with mock_backend(make_response(201, {'id': 3, **body})) as mock_request:
            response = self.client.post('/api/v1/auctions/', body, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(mock_request.call_args[1]['json']['auction_days'], [{'day': 1}])

    def test_status_counts(self):
        """Test auction status counts"""
        with mock_backend(make_response(200, {'success': True, 'counts': {'future': 2, 'present': 1, 'past': 9}})) as mock_request:
            response = self.client.get('/api/v1/auctions/counts/status/?brand_id=1')
        self.assertEqual(response.data['counts']['past'], 9)
        self.assertEqual(mock_request.call_args[0], ('GET', 'http://backend.test/api/auctions/counts/status'))

    def test_bulk_action(self):
        """Test auction bulk action payload"""
        with mock_backend(make_response(200, {'success': True})) as mock_request:
            self.client.post('/api/v1/auctions/bulk-action/', {'action': 'archive', 'ids': ['4']}, format='json')
        self.assertEqual(mock_request.call_args[1]['json'], {'action': 'archive', 'auction_ids': ['4']})

    def test_template_header(self):
        """Test auction CSV template header"""
        response = self.client.get('/api/v1/auctions/template/csv/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        lines = response.content.decode().splitlines()
        self.assertEqual(lines[0], 'id,short_name,long_name,type,target_reserve,settlement_date,description,status')
        self.assertEqual(len(lines), 3)
        self.assertIn('auctions_template.csv', response['Content-Disposition'])

    def test_import_csv_upload(self):
        """Test auction CSV rows are posted as JSON"""
        csv_file = SimpleUploadedFile(
            'auctions.csv',
            b'ID,Short Name,Long Name\n,Spring,Spring Sale\n7,Autumn,Autumn Sale\n',
            content_type='text/csv',
        )
        with mock_backend(make_response(200, {'success': 2, 'errors': []})) as mock_request:
            response = self.client.post('/api/v1/auctions/import/csv/', {'file': csv_file}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        args, kwargs = mock_request.call_args
        self.assertEqual(args, ('POST', 'http://backend.test/api/auctions/upload/csv'))
        self.assertEqual(kwargs['json'], {'csv_data': [
            {'id': '', 'short_name': 'Spring', 'long_name': 'Spring Sale'},
            {'id': '7', 'short_name': 'Autumn', 'long_name': 'Autumn Sale'},
        ]})

    def test_import_csv_rejects_header_only(self):
        """Test auction CSV without rows"""
        response = self.client.post('/api/v1/auctions/import/csv/', {'csv_data': 'id,short_name\n'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('error', response.data)

    def test_import_eoa_passthrough(self):
        """Test EOA file is forwarded"""
        eoa = SimpleUploadedFile('eoa.csv', b'lot,price\n1,100\n', content_type='text/csv')
        with mock_backend(make_response(200, {'success': True, 'data': {'imported_count': 1}})) as mock_request:
            response = self.client.post('/api/v1/auctions/import-eoa/',
                                        {'file': eoa, 'auction_id': '5', 'platform': 'liveauctioneers'},
                                        format='multipart')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        kwargs = mock_request.call_args[1]
        self.assertEqual(kwargs['data'], {'auction_id': '5', 'platform': 'liveauctioneers'})
        self.assertEqual(kwargs['files'][0][0], 'file')
        self.assertEqual(kwargs['files'][0][1][0], 'eoa.csv')
        self.assertNotIn('Content-Type', kwargs['headers'])

    def test_generate_passed_requires_subtype(self):
        """Test passed auction needs a subtype"""
        response = self.client.post('/api/v1/auctions/5/generate-passed/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_export_platform(self):
        """Test platform export download"""
        with mock_backend(make_response(200, content=b'LotNum,Title\n', content_type='text/csv')) as mock_request:
            response = self.client.get('/api/v1/auctions/5/export/liveauctioneers/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('auction_5_liveauctioneers_export', response['Content-Disposition'])
        self.assertEqual(mock_request.call_args[0], ('GET', 'http://backend.test/api/auctions/5/export/liveauctioneers'))

    def test_export_platform_unknown(self):
        """Test unknown export platform"""
        response = self.client.get('/api/v1/auctions/5/export/ebay/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_export_eoa_csv_posts(self):
        """Test EOA CSV export request"""
        with mock_backend(make_response(200, content=b'a,b\n', content_type='text/csv')) as mock_request:
            response = self.client.post('/api/v1/auctions/5/export-eoa-csv/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(mock_request.call_args[0], ('POST', 'http://backend.test/api/invoices/export-eoa-csv/5'))
