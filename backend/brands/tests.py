"""
Test suite for Brands module
Tests: cached brand list, compliance updates, logos, platform credentials
"""
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, override_settings
from rest_framework import status

from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient, make_response, mock_backend

BRANDS = [{'id': 1, 'name': 'Metsab', 'code': 'METSAB'}, {'id': 2, 'name': 'Aurum', 'code': 'AURUM'}]


@override_settings(BACKEND_API_URL='http://backend.test')
class BrandAPITests(TestCase):
    """Test Brand API endpoints"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user(role='admin'))

    def test_brand_list_cached(self):
        """Test brand list is cached"""
        with mock_backend(make_response(200, {'success': True, 'data': BRANDS})) as mock_request:
            first = self.client.get('/api/v1/brands/')
            second = self.client.get('/api/v1/brands/')
        self.assertEqual(first.data, {'success': True, 'data': BRANDS})
        self.assertEqual(second.data['data'], BRANDS)
        self.assertEqual(mock_request.call_count, 1)

    def test_brand_by_code_uppercased(self):
        """Test brand code lookup is uppercased"""
        with mock_backend(make_response(200, {'success': True, 'data': BRANDS[0]})) as mock_request:
            self.client.get('/api/v1/brands/by-code/metsab/')
        self.assertEqual(mock_request.call_args[0], ('GET', 'http://backend.test/api/brands/by-code/METSAB'))

    def test_compliance_update_requires_admin(self):
        """Test compliance update needs admin access"""
        client = AuthenticatedAPIClient()
        client.authenticate_user(TestDataFactory.create_user(role='user'))
        response = client.put('/api/v1/brands/1/compliance/', {'vat_number': 'GB123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_compliance_update(self):
        """Test brand compliance update"""
        body = {'vat_number': 'GB123', 'buyer_terms_and_conditions': 'Payment within 7 days'}
        with mock_backend(make_response(200, {'success': True, 'data': {'id': 1}})) as mock_request:
            response = self.client.put('/api/v1/brands/1/compliance/', body, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(mock_request.call_args[1]['json'], body)

    def test_compliance_rejects_bad_email(self):
        """Test compliance email validation"""
        response = self.client.put('/api/v1/brands/1/compliance/', {'contact_email': 'nope'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_logo_upload(self):
        """Test brand logo upload"""
        logo = SimpleUploadedFile('logo.png', b'\x89PNG', content_type='image/png')
        with mock_backend(make_response(200, {'success': True, 'logo_url': 'https://cdn.test/logo.png'})) as m:
            response = self.client.post('/api/v1/brand-logos/1/upload/', {'logo': logo}, format='multipart')
        self.assertEqual(response.data['logo_url'], 'https://cdn.test/logo.png')
        self.assertEqual(m.call_args[1]['files'], [('logo', ('logo.png', b'\x89PNG', 'image/png'))])

    def test_logo_upload_rejects_non_image(self):
        """Test logo upload rejects non images"""
        doc = SimpleUploadedFile('logo.pdf', b'%PDF', content_type='application/pdf')
        response = self.client.post('/api/v1/brand-logos/1/upload/', {'logo': doc}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_platform_credentials_need_brand(self):
        """Test platform credentials need a brand"""
        response = self.client.get('/api/v1/platform-credentials/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_save_platform_credentials(self):
        """Test saving platform credentials"""
        body = {'brand_code': 'METSAB', 'platform': 'liveauctioneers', 'key_id': 'k', 'secret_value': 's'}
        with mock_backend(make_response(200, {'success': True})) as mock_request:
            response = self.client.post('/api/v1/platform-credentials/', body, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(mock_request.call_args[1]['json'], body)
