"""
Tests for the core gateway pieces: upstream client, authentication, CSV helpers
"""
import os
import tempfile
from io import StringIO
from unittest import mock

import requests
from django.core.cache import cache
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase, override_settings
from rest_framework import status
from rest_framework.test import APIClient

from backend.core.constants import AUCTION_PLATFORMS, choice_label
from backend.core.csv_utils import build_csv, parse_csv_text
from backend.core.exceptions import CSVParseError
from backend.core.proxy import default_date_range, normalize_list_payload
from backend.core.test_utils import (
    TestDataFactory, AuthenticatedAPIClient, make_response, mock_backend,
)
from backend.core.upstream import BackendClient, UpstreamError, clean_params


@override_settings(BACKEND_API_URL='http://backend.test')
class BackendClientTests(TestCase):
    """Test error translation and request building"""

    def test_clean_params_drops_empty_values(self):
        """Test empty query params are dropped"""
        params = clean_params({'status': 'active', 'search': '', 'page': 2, 'nationality': None, 'is_reconciled': False})
        self.assertEqual(params, {'status': 'active', 'page': '2', 'is_reconciled': 'false'})

    def test_bearer_token_sent(self):
        """Test bearer token header"""
        with mock_backend(make_response(200, {'ok': True})) as mock_request:
            BackendClient(token='abc').get('/api/artists', params={'page': 1})
        args, kwargs = mock_request.call_args
        self.assertEqual(args, ('GET', 'http://backend.test/api/artists'))
        self.assertEqual(kwargs['headers']['Authorization'], 'Bearer abc')
        self.assertEqual(kwargs['params'], {'page': '1'})

    def test_error_message_from_body(self):
        """Test error message from the response body"""
        with mock_backend(make_response(404, {'error': 'Artist not found'})):
            with self.assertRaises(UpstreamError) as ctx:
                BackendClient(token='abc').get('/api/artists/9')
        self.assertEqual(ctx.exception.status_code, 404)
        self.assertEqual(ctx.exception.message, 'Artist not found')

    def test_error_without_json_body(self):
        """Test error without a JSON body"""
        with mock_backend(make_response(500, content=b'<html>boom</html>', content_type='text/html')):
            with self.assertRaises(UpstreamError) as ctx:
                BackendClient().get('/api/artists')
        self.assertEqual(ctx.exception.message, 'HTTP 500')

    def test_network_failure(self):
        """Test network failure maps to 502"""
        with mock.patch.object(requests.Session, 'request', side_effect=requests.exceptions.ConnectionError('refused')):
            with self.assertRaises(UpstreamError) as ctx:
                BackendClient().get('/api/health')
        self.assertEqual(ctx.exception.status_code, 502)

    def test_timeout(self):
        """Test timeout maps to 504"""
        with mock.patch.object(requests.Session, 'request', side_effect=requests.exceptions.Timeout()):
            with self.assertRaises(UpstreamError) as ctx:
                BackendClient().get('/api/health')
        self.assertEqual(ctx.exception.status_code, 504)

    def test_invalid_json(self):
        """Test invalid JSON maps to 502"""
        with mock_backend(make_response(200, content=b'not json', content_type='text/plain')):
            with self.assertRaises(UpstreamError) as ctx:
                BackendClient().get('/api/health')
        self.assertEqual(ctx.exception.status_code, 502)

    def test_empty_body_returns_none(self):
        """Test empty body returns None"""
        with mock_backend(make_response(204)):
            self.assertIsNone(BackendClient().delete('/api/artists/1'))


class AuthenticationTests(TestCase):
    """Test bearer token verification"""

    def setUp(self):
        cache.clear()

    def test_missing_token_rejected(self):
        """Test requests without a token"""
        response = APIClient().get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_token_verified_with_backend_and_cached(self):
        """Test token verification is cached"""
        user = TestDataFactory.create_user(role='super_admin')
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION='Bearer fresh-token')
        with mock_backend(make_response(200, {'valid': True, 'user': user})) as mock_request:
            first = client.get('/api/v1/auth/me/')
            second = client.get('/api/v1/auth/me/')
        self.assertEqual(first.status_code, status.HTTP_200_OK)
        self.assertEqual(second.status_code, status.HTTP_200_OK)
        self.assertTrue(first.data['is_super_admin'])
        self.assertEqual(mock_request.call_count, 1)

    def test_rejected_token(self):
        """Test token rejected by the backend"""
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION='Bearer bad-token')
        with mock_backend(make_response(401, {'error': 'Invalid token'})):
            response = client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_inactive_user_rejected(self):
        """Test inactive users are rejected"""
        client = AuthenticatedAPIClient()
        client.authenticate_user(TestDataFactory.create_user(is_active=False))
        response = client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_login_passthrough(self):
        """Test login passthrough"""
        payload = {'user': TestDataFactory.create_user(), 'token': 'jwt', 'error': None}
        with mock_backend(make_response(200, payload)) as mock_request:
            response = APIClient().post('/api/v1/auth/login/', {'email': 'a@test.com', 'password': 'pw'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['token'], 'jwt')
        self.assertEqual(mock_request.call_args[1]['json'], {'email': 'a@test.com', 'password': 'pw', 'remember': False})

    def test_login_requires_email(self):
        """Test login needs an email"""
        response = APIClient().post('/api/v1/auth/login/', {'password': 'pw'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_health_reports_backend_error(self):
        """Test health check with the backend down"""
        with mock_backend(make_response(503, {'error': 'Database offline'})):
            response = APIClient().get('/api/v1/health/')
        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        self.assertEqual(response.data, {'error': 'Database offline'})


class CSVUtilsTests(TestCase):
    """Test CSV parsing and templates"""

    def test_parse_with_mapping(self):
        """Test CSV parsing with a header mapping"""
        text = 'Reference Number,"Country"\nLOG-1,France\n\nLOG-2,Spain\n'
        rows = parse_csv_text(text, field_mapping={'reference number': 'reference_number', 'country': 'destination_country'})
        self.assertEqual(rows, [
            {'reference_number': 'LOG-1', 'destination_country': 'France'},
            {'reference_number': 'LOG-2', 'destination_country': 'Spain'},
        ])

    def test_mismatched_rows_skipped(self):
        """Test mismatched CSV rows are skipped"""
        rows = parse_csv_text('a,b\n1,2\n3\n4,5,6\n')
        self.assertEqual(rows, [{'a': '1', 'b': '2'}])

    def test_header_only_rejected(self):
        """Test CSV with only a header"""
        with self.assertRaises(CSVParseError):
            parse_csv_text('a,b\n')

    def test_build_csv(self):
        """Test building CSV text"""
        text = build_csv(['id', 'name'], [{'id': 1, 'name': 'Lot'}, ['2', 'Other']])
        self.assertEqual(text, 'id,name\n1,Lot\n2,Other\n')


class ProxyHelperTests(TestCase):
    """Test list normalisation and default date windows"""

    def test_standard_envelope(self):
        """Test standard list envelope"""
        payload = {'success': True, 'data': [{'id': 1}], 'pagination': {'page': 1, 'limit': 10, 'total': 1, 'pages': 1}}
        self.assertEqual(normalize_list_payload(payload, 'transactions')['transactions'], [{'id': 1}])

    def test_legacy_list(self):
        """Test bare list payload"""
        result = normalize_list_payload([{'id': 1}, {'id': 2}], 'refunds')
        self.assertEqual(result['pagination'], {'page': 1, 'limit': 2, 'total': 2, 'pages': 1})

    def test_default_date_range_keeps_given_bound(self):
        """Test date range keeps a given bound"""
        filters = default_date_range({'date_from': '2024-01-01'})
        self.assertEqual(filters['date_from'], '2024-01-01')
        self.assertIn('date_to', filters)

    def test_choice_label_falls_back(self):
        """Test choice label fallback"""
        self.assertEqual(choice_label(AUCTION_PLATFORMS, 'LiveAuctioneers'), 'LiveAuctioneers')
        self.assertEqual(choice_label(AUCTION_PLATFORMS, 'easylive'), 'Easy Live Auction')
        self.assertEqual(choice_label(AUCTION_PLATFORMS, 'unknown'), 'unknown')


@override_settings(BACKEND_API_URL='http://backend.test')
class ExceptionHandlerTests(TestCase):
    """Test rendering and logging of backend failures"""

    def test_backend_error_logged_with_request_path(self):
        """Test backend errors are logged with the failing request path"""
        client = AuthenticatedAPIClient()
        client.authenticate_user(TestDataFactory.create_user())
        with mock_backend(make_response(500, {'error': 'Boom'})):
            with self.assertLogs('backend.core.exceptions', level='ERROR') as logs:
                response = client.get('/api/v1/artists/')
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data, {'error': 'Boom'})
        self.assertIn('GET /api/v1/artists/', logs.output[0])
        self.assertNotIn('WrappedAPIView', logs.output[0])


@override_settings(BACKEND_API_URL='http://backend.test', BACKEND_API_TOKEN='service-token')
class CSVCommandTests(TestCase):
    """Test the import_csv and export_csv management commands"""

    def write_csv(self, text):
        handle, path = tempfile.mkstemp(suffix='.csv')
        with os.fdopen(handle, 'w', encoding='utf-8') as f:
            f.write(text)
        self.addCleanup(os.remove, path)
        return path

    def test_import_auctions(self):
        """Test auction import command"""
        path = self.write_csv('Short Name,Long Name\nSpring,Spring Sale\n')
        out = StringIO()
        with mock_backend(make_response(200, {'success': 1, 'errors': []})) as mock_request:
            call_command('import_csv', 'auctions', path, stdout=out)
        args, kwargs = mock_request.call_args
        self.assertEqual(args, ('POST', 'http://backend.test/api/auctions/upload/csv'))
        self.assertEqual(kwargs['json'], {'csv_data': [{'short_name': 'Spring', 'long_name': 'Spring Sale'}]})
        self.assertEqual(kwargs['headers']['Authorization'], 'Bearer service-token')
        self.assertIn('Rows parsed: 1', out.getvalue())
        self.assertIn('Completed without errors', out.getvalue())

    def test_import_items_sends_raw_text(self):
        """Test item import sends raw text"""
        path = self.write_csv('title,low_est\nVase,100\n')
        with mock_backend(make_response(200, {'imported': 1})) as mock_request:
            call_command('import_csv', 'items', path, '--platform', 'liveauctioneers', stdout=StringIO())
        self.assertEqual(mock_request.call_args[1]['json'], {
            'csvData': 'title,low_est\nVase,100\n', 'platform': 'liveauctioneers', 'validateOnly': False,
        })

    def test_import_clients_validate_only(self):
        """Test client CSV validation sends the raw text to the validation endpoint"""
        path = self.write_csv('id,full_name,brand,platform\n1,Ada Lovelace,MSABER,Private\n')
        out = StringIO()
        with mock_backend(make_response(200, {'success': True, 'validation_result': {'total_rows': 1}})) as mock_request:
            call_command('import_csv', 'clients', path, '--validate-only', stdout=out)
        args, kwargs = mock_request.call_args
        self.assertEqual(args, ('POST', 'http://backend.test/api/clients/validate-csv'))
        self.assertEqual(kwargs['json'], {'csv_data': 'id,full_name,brand,platform\n1,Ada Lovelace,MSABER,Private\n'})
        self.assertNotIn('Rows parsed', out.getvalue())

    def test_import_clients_reports_count(self):
        """Test client imports report the imported count"""
        path = self.write_csv('id,full_name,brand,platform\n1,Ada Lovelace,MSABER,Private\n')
        out = StringIO()
        with mock_backend(make_response(200, {'success': True, 'imported_count': 1, 'errors': []})) as mock_request:
            call_command('import_csv', 'clients', path, stdout=out)
        self.assertEqual(mock_request.call_args[0], ('POST', 'http://backend.test/api/clients/upload-csv'))
        self.assertIn('Imported Count: 1', out.getvalue())

    def test_import_missing_file(self):
        """Test import with a missing file"""
        with self.assertRaises(CommandError):
            call_command('import_csv', 'auctions', '/nonexistent/file.csv', stdout=StringIO())

    def test_import_backend_error(self):
        """Test import backend failure"""
        path = self.write_csv('short_name\nSpring\n')
        with mock_backend(make_response(400, {'error': 'Invalid rows'})):
            with self.assertRaises(CommandError) as ctx:
                call_command('import_csv', 'auctions', path, stdout=StringIO())
        self.assertIn('Invalid rows', str(ctx.exception))

    def test_export_writes_file(self):
        """Test export command writes a file"""
        handle, path = tempfile.mkstemp(suffix='.csv')
        os.close(handle)
        self.addCleanup(os.remove, path)
        out = StringIO()
        content = b'id,name\n1,Turner\n2,Constable\n'
        with mock_backend(make_response(200, content=content, content_type='text/csv')) as mock_request:
            call_command('export_csv', 'artists', '--output', path, '--filter', 'status=active', stdout=out)
        self.assertEqual(mock_request.call_args[1]['params'], {'status': 'active'})
        with open(path, 'rb') as f:
            self.assertEqual(f.read(), content)
        self.assertIn('Exported 2 artists rows', out.getvalue())

    def test_export_rejects_bad_filter(self):
        """Test export with a malformed filter"""
        with self.assertRaises(CommandError):
            call_command('export_csv', 'artists', '--filter', 'status', stdout=StringIO())
