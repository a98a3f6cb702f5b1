"""
Test suite for Galleries module
"""
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, override_settings
from rest_framework import status

from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient, make_response, mock_backend


@override_settings(BACKEND_API_URL='http://backend.test')
class GalleryAPITests(TestCase):
    """Test Gallery API endpoints"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user())

    def test_list_galleries(self):
        """Test gallery list filters"""
        payload = {'success': True, 'data': [{'id': '1', 'name': 'Tate'}], 'pagination': TestDataFactory.pagination(1)}
        with mock_backend(make_response(200, payload)) as mock_request:
            response = self.client.get('/api/v1/galleries/?gallery_type=museum&location=London&bogus=1')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(mock_request.call_args[0], ('GET', 'http://backend.test/api/galleries'))
        self.assertEqual(mock_request.call_args[1]['params'], {'gallery_type': 'museum', 'location': 'London'})

    def test_create_gallery(self):
        """Test creating a gallery"""
        with mock_backend(make_response(201, {'success': True, 'data': {'id': '2'}})) as mock_request:
            response = self.client.post('/api/v1/galleries/', {'name': ' Tate ', 'gallery_type': 'museum',
                                                                'website': 'https://tate.org.uk'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(mock_request.call_args[1]['json']['name'], 'Tate')

    def test_blank_name_rejected(self):
        """Test gallery name is required"""
        response = self.client.post('/api/v1/galleries/', {'name': '  '}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unknown_type_rejected(self):
        """Test gallery type choices"""
        response = self.client.post('/api/v1/galleries/', {'name': 'Tate', 'gallery_type': 'pop-up'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('gallery_type', response.data)

    def test_bad_email_rejected(self):
        """Test gallery email is validated"""
        response = self.client.put('/api/v1/galleries/2/', {'email': 'tate'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_delete_gallery(self):
        """Test deleting a gallery"""
        with mock_backend(make_response(204)) as mock_request:
            response = self.client.delete('/api/v1/galleries/3/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(mock_request.call_args[0], ('DELETE', 'http://backend.test/api/galleries/3'))
        self.assertTrue(response.data['success'])

    def test_bulk_action(self):
        """Test bulk actions send ids as given"""
        with mock_backend(make_response(200, {'success': True})) as mock_request:
            self.client.post('/api/v1/galleries/bulk/', {'action': 'delete', 'ids': ['1', '2']}, format='json')
        self.assertEqual(mock_request.call_args[0], ('POST', 'http://backend.test/api/galleries/bulk'))
        self.assertEqual(mock_request.call_args[1]['json'], {'action': 'delete', 'ids': ['1', '2'], 'data': None})

    def test_generate_ai(self):
        """Test AI drafting with a location"""
        with mock_backend(make_response(200, {'success': True, 'data': {'country': 'UK'}})) as mock_request:
            response = self.client.post('/api/v1/galleries/generate-ai/', {'name': 'Tate', 'location': 'London'},
                                        format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(mock_request.call_args[1]['json'], {'name': 'Tate', 'location': 'London'})

    def test_export_csv(self):
        """Test gallery CSV export"""
        body = b'id,name\n1,Tate\n'
        with mock_backend(make_response(200, content=body, content_type='text/csv')):
            response = self.client.get('/api/v1/galleries/export/csv/')
        self.assertEqual(response.content, body)
        self.assertIn('galleries-export-', response['Content-Disposition'])

    def test_import_csv_forwards_file(self):
        """Test the uploaded CSV is forwarded as multipart"""
        upload = SimpleUploadedFile('galleries.csv', b'name\nTate\n', content_type='text/csv')
        with mock_backend(make_response(200, {'success': True, 'imported': 1})) as mock_request:
            response = self.client.post('/api/v1/galleries/import/csv/', {'file': upload}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(mock_request.call_args[0], ('POST', 'http://backend.test/api/galleries/import/csv'))
        self.assertEqual(mock_request.call_args[1]['files'], [('file', ('galleries.csv', b'name\nTate\n', 'text/csv'))])

    def test_import_requires_file(self):
        """Test import without a file"""
        response = self.client.post('/api/v1/galleries/import/csv/', {}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
