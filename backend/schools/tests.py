"""
Test suite for Schools module
"""
from django.test import TestCase, override_settings
from rest_framework import status

from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient, make_response, mock_backend


@override_settings(BACKEND_API_URL='http://backend.test')
class SchoolAPITests(TestCase):
    """Test School API endpoints"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user())

    def test_list_schools(self):
        """Test school list filters"""
        payload = {'success': True, 'data': [{'id': '1', 'name': 'Slade'}], 'pagination': TestDataFactory.pagination(1)}
        with mock_backend(make_response(200, payload)) as mock_request:
            response = self.client.get('/api/v1/schools/?country=UK&school_type=academy')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(mock_request.call_args[1]['params'], {'country': 'UK', 'school_type': 'academy'})

    def test_closed_before_founded_rejected(self):
        """Test closed year before founded year is rejected"""
        response = self.client.post('/api/v1/schools/', {'name': 'Slade', 'founded_year': 1871, 'closed_year': 1800}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_blank_name_rejected(self):
        """Test school name is required"""
        response = self.client.post('/api/v1/schools/', {'name': '   '}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_delete_school(self):
        """Test deleting a school"""
        with mock_backend(make_response(204)) as mock_request:
            response = self.client.delete('/api/v1/schools/3/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(mock_request.call_args[0], ('DELETE', 'http://backend.test/api/schools/3'))
        self.assertTrue(response.data['success'])

    def test_generate_ai(self):
        """Test school AI generation"""
        with mock_backend(make_response(200, {'success': True, 'data': {'country': 'UK'}})) as mock_request:
            response = self.client.post('/api/v1/schools/generate-ai/', {'name': 'Slade'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(mock_request.call_args[1]['json'], {'name': 'Slade'})
