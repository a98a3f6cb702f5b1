"""
Test suite for Artists module
Tests: listing with filters, create/update validation, bulk actions, CSV export
"""
from django.test import TestCase, override_settings
from rest_framework import status

from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient, make_response, mock_backend


@override_settings(BACKEND_API_URL='http://backend.test')
class ArtistAPITests(TestCase):
    """Test Artist API endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_list_artists_passes_filters(self):
        """Test artist list forwards filters"""
        artist = TestDataFactory.create_artist()
        payload = {'success': True, 'data': [artist], 'pagination': TestDataFactory.pagination(1),
                   'counts': {'active': 1, 'inactive': 0, 'archived': 0}}
        with mock_backend(make_response(200, payload)) as mock_request:
            response = self.client.get('/api/v1/artists/?status=active&search=&page=2&unknown=x')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data'][0]['name'], artist['name'])
        args, kwargs = mock_request.call_args
        self.assertEqual(args, ('GET', 'http://backend.test/api/artists'))
        self.assertEqual(kwargs['params'], {'status': 'active', 'page': '2'})

    def test_create_artist(self):
        """Test creating an artist"""
        with mock_backend(make_response(201, {'success': True, 'data': {'id': '1', 'name': 'J. Turner'}})) as mock_request:
            response = self.client.post('/api/v1/artists/', {'name': ' J. Turner ', 'birth_year': 1775, 'biography': 'Painter'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        sent = mock_request.call_args[1]['json']
        self.assertEqual(sent['name'], 'J. Turner')
        self.assertEqual(sent['biography'], 'Painter')

    def test_create_artist_requires_name(self):
        """Test artist name is required"""
        response = self.client.post('/api/v1/artists/', {'nationality': 'British'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('name', response.data)

    def test_death_before_birth_rejected(self):
        """Test death year before birth year is rejected"""
        response = self.client.post('/api/v1/artists/', {'name': 'A', 'birth_year': 1900, 'death_year': 1850}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_artist_partial(self):
        """Test partial artist update"""
        with mock_backend(make_response(200, {'success': True, 'data': {'id': '7', 'status': 'archived'}})) as mock_request:
            response = self.client.put('/api/v1/artists/7/', {'status': 'archived'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        args, kwargs = mock_request.call_args
        self.assertEqual(args, ('PUT', 'http://backend.test/api/artists/7'))
        self.assertEqual(kwargs['json'], {'status': 'archived'})

    def test_missing_artist_returns_backend_error(self):
        """Test backend 404 is passed through"""
        with mock_backend(make_response(404, {'error': 'Artist not found'})):
            response = self.client.get('/api/v1/artists/999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error'], 'Artist not found')

    def test_bulk_action(self):
        """Test artist bulk action payload"""
        with mock_backend(make_response(200, {'success': True, 'message': 'Archived 2 artists'})) as mock_request:
            response = self.client.post('/api/v1/artists/bulk/', {'action': 'archive', 'ids': ['1', '2']}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(mock_request.call_args[1]['json'], {'action': 'archive', 'artist_ids': ['1', '2'], 'data': None})

    def test_bulk_action_requires_ids(self):
        """Test bulk action without ids"""
        response = self.client.post('/api/v1/artists/bulk/', {'action': 'archive', 'ids': []}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_export_csv_download(self):
        """Test artist CSV export download"""
        csv_body = b'id,name\n1,Turner\n'
        with mock_backend(make_response(200, content=csv_body, content_type='text/csv')):
            response = self.client.get('/api/v1/artists/export/csv/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.content, csv_body)
        self.assertIn('artists-export-', response['Content-Disposition'])
