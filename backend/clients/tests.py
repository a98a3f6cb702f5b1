"""
Test suite for Clients module
Tests: list filters, form rules, display ids, lookup, bulk actions, CSV import/export
"""
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, override_settings
from rest_framework import status

from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient, make_response, mock_backend
from backend.clients.views import CLIENT_CSV_HEADERS, format_client_display, client_display_name


class ClientDisplayTests(TestCase):
    """Test display id and display name formatting"""

    def test_display_id_uses_brand_prefix(self):
        """Test display id from brand code and padded id"""
        self.assertEqual(format_client_display({'id': 7, 'brand_code': 'aurum'}), 'AUR-007')
        self.assertEqual(format_client_display({'id': 1234, 'brand': 'METSAB'}), 'MET-1234')

    def test_display_id_default_prefix(self):
        """Test display id without a brand"""
        self.assertEqual(format_client_display({'id': 12}), 'MSA-012')
        self.assertEqual(format_client_display({'id': 12, 'brand_code': '  '}), 'MSA-012')

    def test_display_id_without_id(self):
        """Test clients without an id"""
        self.assertEqual(format_client_display({'first_name': 'Ada'}), 'Unknown')

    def test_display_name_with_company(self):
        """Test display name includes the company"""
        client = {'first_name': 'Ada', 'last_name': 'Lovelace', 'company_name': 'Engines Ltd'}
        self.assertEqual(client_display_name(client), 'Ada Lovelace (Engines Ltd)')
        self.assertEqual(client_display_name({'first_name': 'Ada', 'last_name': ''}), 'Ada')


@override_settings(BACKEND_API_URL='http://backend.test', DEFAULT_BRAND_CODE='MSABER')
class ClientAPITests(TestCase):
    """Test Client API endpoints"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user(role='admin', brand_code='AURUM'))

    def test_list_forwards_filters_and_adds_display_ids(self):
        """Test list filters are forwarded and rows get display ids"""
        payload = {'success': True, 'data': [{'id': 5, 'brand_code': 'AURUM', 'first_name': 'Ada', 'last_name': 'L'}],
                   'pagination': TestDataFactory.pagination(1)}
        with mock_backend(make_response(200, payload)) as mock_request:
            response = self.client.get('/api/v1/clients/?client_type=buyer&registration_date=30days&bogus=1')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        args, kwargs = mock_request.call_args
        self.assertEqual(args, ('GET', 'http://backend.test/api/clients'))
        self.assertEqual(kwargs['params'], {'client_type': 'buyer', 'registration_date': '30days'})
        self.assertEqual(response.data['data'][0]['display_id'], 'AUR-005')
        self.assertEqual(response.data['data'][0]['display_name'], 'Ada L')
        self.assertEqual(response.data['pagination']['total'], 1)

    def test_create_requires_names(self):
        """Test first and last name are required"""
        response = self.client.post('/api/v1/clients/', {'first_name': '  ', 'email': 'ada@test.com'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('first_name', response.data)
        self.assertIn('last_name', response.data)

    def test_create_rejects_bad_email(self):
        """Test invalid emails are rejected"""
        response = self.client.post('/api/v1/clients/', {'first_name': 'Ada', 'last_name': 'Lovelace',
                                                         'email': 'not-an-email'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('email', response.data)

    def test_create_client(self):
        """Test creating a client in the caller's brand"""
        body = {
            'first_name': ' Ada ', 'last_name': 'Lovelace', 'client_type': 'buyer_vendor', 'instagram_url': '',
            'shipping_same_as_billing': True, 'billing_address1': '1 Analytical Way', 'billing_city': 'London',
            'paddle_no': '42',
        }
        created = {'success': True, 'data': {'id': 3, 'brand_code': 'AURUM', 'first_name': 'Ada', 'last_name': 'Lovelace'}}
        with mock_backend(make_response(201, created)) as mock_request:
            response = self.client.post('/api/v1/clients/', body, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        sent = mock_request.call_args[1]['json']
        self.assertEqual(sent['first_name'], 'Ada')
        self.assertEqual(sent['brand_code'], 'AURUM')
        self.assertIsNone(sent['instagram_url'])
        self.assertEqual(sent['shipping_address1'], '1 Analytical Way')
        self.assertEqual(sent['shipping_city'], 'London')
        self.assertEqual(sent['paddle_no'], '42')
        self.assertEqual(response.data['data']['display_id'], 'AUR-003')

    def test_partial_update(self):
        """Test updates do not require names"""
        with mock_backend(make_response(200, {'success': True, 'data': {'id': 3, 'status': 'suspended'}})) as mock_request:
            response = self.client.put('/api/v1/clients/3/', {'status': 'suspended'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(mock_request.call_args[0], ('PUT', 'http://backend.test/api/clients/3'))
        self.assertEqual(mock_request.call_args[1]['json'], {'status': 'suspended'})

    def test_update_rejects_unknown_status(self):
        """Test status choices on update"""
        response = self.client.put('/api/v1/clients/3/', {'status': 'banned'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_hard_delete(self):
        """Test hard delete flag is forwarded"""
        with mock_backend(make_response(200, {'success': True, 'message': 'Deleted'})) as mock_request:
            response = self.client.delete('/api/v1/clients/9/?hard_delete=true')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        args, kwargs = mock_request.call_args
        self.assertEqual(args, ('DELETE', 'http://backend.test/api/clients/9'))
        self.assertEqual(kwargs['params'], {'hard_delete': 'true'})

    def test_overview(self):
        """Test client overview passthrough"""
        payload = {'success': True, 'data': {'client': {'id': 9}, 'purchases': [], 'consignments': [],
                                             'invoices': [], 'logistics': []}}
        with mock_backend(make_response(200, payload)) as mock_request:
            response = self.client.get('/api/v1/clients/9/overview/')
        self.assertEqual(response.data, payload)
        self.assertEqual(mock_request.call_args[0], ('GET', 'http://backend.test/api/clients/9/overview'))

    def test_lookup_by_display_id(self):
        """Test lookup parses the numeric id from a display id"""
        payload = {'success': True, 'data': {'id': 123, 'brand_code': 'MSABER', 'first_name': 'Ada', 'last_name': 'L'}}
        with mock_backend(make_response(200, payload)) as mock_request:
            response = self.client.get('/api/v1/clients/lookup/MSA-123/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(mock_request.call_args[0], ('GET', 'http://backend.test/api/clients/123'))
        self.assertEqual(response.data['data']['display_id'], 'MSA-123')

    def test_lookup_falls_back_to_search(self):
        """Test lookup searches active clients for free text"""
        payload = {'success': True, 'data': [{'id': 4, 'first_name': 'Ada', 'last_name': 'Lovelace'}]}
        with mock_backend(make_response(200, payload)) as mock_request:
            response = self.client.get('/api/v1/clients/lookup/Lovelace/')
        self.assertEqual(response.data['data']['id'], 4)
        self.assertEqual(mock_request.call_args[1]['params'], {'search': 'Lovelace', 'limit': '1', 'status': 'active'})

    def test_lookup_not_found(self):
        """Test lookup with no match"""
        with mock_backend(make_response(200, {'success': True, 'data': []})):
            response = self.client.get('/api/v1/clients/lookup/Nobody/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_bulk_update_status(self):
        """Test bulk status updates send integer client ids"""
        with mock_backend(make_response(200, {'success': True, 'affected_count': 2})) as mock_request:
            response = self.client.post('/api/v1/clients/bulk-action/',
                                        {'action': 'update_status', 'ids': ['1', '2'], 'data': {'status': 'archived'}},
                                        format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(mock_request.call_args[1]['json'],
                         {'action': 'update_status', 'client_ids': [1, 2], 'data': {'status': 'archived'}})

    def test_bulk_update_requires_valid_status(self):
        """Test bulk status updates need a known status"""
        response = self.client.post('/api/v1/clients/bulk-action/',
                                    {'action': 'update_status', 'ids': [1], 'data': {'status': 'gone'}}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_bulk_rejects_unknown_action(self):
        """Test unknown bulk actions are rejected"""
        response = self.client.post('/api/v1/clients/bulk-action/', {'action': 'merge', 'ids': [1]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_export_csv(self):
        """Test CSV export is streamed back as an attachment"""
        body = b'id,first_name\n1,Ada\n'
        with mock_backend(make_response(200, content=body, content_type='text/csv')) as mock_request:
            response = self.client.get('/api/v1/clients/export/csv/?status=active')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.content, body)
        self.assertIn('clients-export-', response['Content-Disposition'])
        self.assertEqual(mock_request.call_args[1]['params'], {'status': 'active'})

    def test_import_csv_text(self):
        """Test CSV text is sent to the backend import"""
        text = 'id,full_name,brand,platform\n1,Ada Lovelace,MSABER,Private\n'
        result = {'success': True, 'imported_count': 1, 'errors': [], 'existing_emails': [], 'duplicate_emails': []}
        with mock_backend(make_response(200, result)) as mock_request:
            response = self.client.post('/api/v1/clients/import/csv/', {'csv_data': text}, format='json')
        self.assertEqual(response.data['imported_count'], 1)
        self.assertEqual(mock_request.call_args[0], ('POST', 'http://backend.test/api/clients/upload-csv'))
        self.assertEqual(mock_request.call_args[1]['json'], {'csv_data': text})

    def test_import_csv_file_validate_only(self):
        """Test an uploaded file can be validated without importing"""
        upload = SimpleUploadedFile('clients.csv', b'id,full_name\n1,Ada Lovelace\n', content_type='text/csv')
        with mock_backend(make_response(200, {'success': True, 'validation_result': {'total_rows': 1}})) as mock_request:
            response = self.client.post('/api/v1/clients/import/csv/', {'file': upload, 'validate_only': 'true'},
                                        format='multipart')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(mock_request.call_args[0], ('POST', 'http://backend.test/api/clients/validate-csv'))
        self.assertEqual(mock_request.call_args[1]['json'], {'csv_data': 'id,full_name\n1,Ada Lovelace\n'})

    def test_import_requires_csv(self):
        """Test import without CSV data"""
        response = self.client.post('/api/v1/clients/import/csv/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_csv_template(self):
        """Test the client CSV template"""
        response = self.client.get('/api/v1/clients/template/csv/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        lines = response.content.decode().splitlines()
        self.assertEqual(lines[0], ','.join(CLIENT_CSV_HEADERS))
        self.assertTrue(lines[1].startswith('1,Adnan Amjad,MSABER,Private'))
        self.assertEqual(len(lines), 3)
