"""
Test suite for Items module
Tests: item proxy endpoints, CSV templates, local duplicate image detection
"""
import io
import socket
import threading
from unittest import mock

import requests
from django.core.management import call_command
from django.test import TestCase, override_settings
from PIL import Image
from rest_framework import status

from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient, make_response, mock_backend
from backend.items.image_comparison import (
    ImageFetchError, check_public_url, common_dimensions, compare_image_data, compare_images, image_brightness_hash,
    normalize_image_url, quick_image_hash, validate_image_url, batch_compare_images,
)


def make_image(size=(20, 20), color=(255, 255, 255), block=None, block_color=(0, 0, 0)):
    """Solid RGB image, optionally with a filled rectangle (left, top, right, bottom)"""
    image = Image.new('RGB', size, color)
    if block:
        image.paste(block_color, block)
    return image


def png_response(image):
    buffer = io.BytesIO()
    image.save(buffer, format='PNG')
    return make_response(200, content=buffer.getvalue(), content_type='image/png')


PUBLIC_ADDRESS = [(socket.AF_INET, socket.SOCK_STREAM, socket.IPPROTO_TCP, '', ('93.184.216.34', 0))]
PRIVATE_ADDRESS = [(socket.AF_INET, socket.SOCK_STREAM, socket.IPPROTO_TCP, '', ('10.0.0.5', 0))]


def resolve_publicly(testcase):
    """Make every image host resolve to a public address for the rest of the test"""
    patcher = mock.patch('backend.items.image_comparison.socket.getaddrinfo', return_value=PUBLIC_ADDRESS)
    patcher.start()
    testcase.addCleanup(patcher.stop)


class ImageUrlTests(TestCase):
    """Test Drive URL normalisation"""

    def test_drive_file_url(self):
        """Test /file/d/ share links"""
        url = 'https://drive.google.com/file/d/1AbC_d-9/view?usp=sharing'
        self.assertEqual(normalize_image_url(url), 'https://lh3.googleusercontent.com/d/1AbC_d-9')

    def test_drive_open_url(self):
        """Test open?id= share links"""
        self.assertEqual(
            normalize_image_url('https://drive.google.com/open?id=XYZ123'),
            'https://lh3.googleusercontent.com/d/XYZ123',
        )

    def test_docs_uc_url(self):
        """Test docs.google.com uc links"""
        self.assertEqual(
            normalize_image_url('https://docs.google.com/uc?export=view&id=QWE'),
            'https://lh3.googleusercontent.com/d/QWE',
        )

    def test_other_urls_unchanged(self):
        """Test non-Drive URLs pass through"""
        url = 'https://cdn.example.com/lot-1.jpg'
        self.assertEqual(normalize_image_url(url), url)

    def test_empty_input(self):
        """Test empty and non-string input"""
        self.assertEqual(normalize_image_url(''), '')
        self.assertEqual(normalize_image_url(None), '')
        self.assertEqual(normalize_image_url(42), '')


class ImageComparisonTests(TestCase):
    """Test pixel comparison of decoded images"""

    def test_identical_images_are_duplicates(self):
        """Test identical images"""
        image = make_image(block=(5, 5, 10, 10))
        result = compare_image_data(image, image.copy())
        self.assertTrue(result['is_duplicate'])
        self.assertEqual(result['similarity'], 100)
        self.assertEqual(result['pixel_difference'], 0)
        self.assertEqual(result['total_pixels'], 400)

    def test_images_differing_by_more_than_five_percent(self):
        """Test a 25% difference is not a duplicate"""
        # 10x10 black block on a 20x20 white image
        result = compare_image_data(make_image(), make_image(block=(0, 0, 10, 10)))
        self.assertFalse(result['is_duplicate'])
        self.assertEqual(result['pixel_difference'], 100)
        self.assertEqual(result['similarity'], 75)

    def test_exactly_ninety_five_percent_is_duplicate(self):
        """Test the cutoff itself counts as a duplicate"""
        # one full row of 20 pixels out of 400
        result = compare_image_data(make_image(), make_image(block=(0, 0, 20, 1)))
        self.assertEqual(result['pixel_difference'], 20)
        self.assertEqual(result['similarity'], 95.0)
        self.assertTrue(result['is_duplicate'])

    def test_just_below_ninety_five_percent_is_not_duplicate(self):
        """Test one pixel past the cutoff is not a duplicate"""
        changed = make_image(block=(0, 0, 20, 1))
        changed.putpixel((10, 10), (0, 0, 0))
        result = compare_image_data(make_image(), changed)
        self.assertEqual(result['pixel_difference'], 21)
        self.assertAlmostEqual(result['similarity'], 94.75)
        self.assertFalse(result['is_duplicate'])

    def test_slight_tint_within_threshold(self):
        """Test small colour shifts stay within tolerance"""
        result = compare_image_data(make_image(color=(255, 255, 255)), make_image(color=(250, 250, 250)))
        self.assertTrue(result['is_duplicate'])

    def test_resized_copy_is_duplicate(self):
        """Test a scaled copy is resized and matched"""
        result = compare_image_data(make_image(size=(40, 20), color=(200, 30, 30)),
                                    make_image(size=(20, 10), color=(200, 30, 30)))
        self.assertTrue(result['is_duplicate'])
        self.assertEqual(result['total_pixels'], 200)

    def test_dimension_mismatch_without_resize(self):
        """Test different sizes without resizing give an error result"""
        result = compare_image_data(make_image(size=(10, 10)), make_image(size=(20, 10)), resize_to_same_size=False)
        self.assertFalse(result['is_duplicate'])
        self.assertEqual(result['similarity'], 0)
        self.assertEqual(result['pixel_difference'], 100)
        self.assertEqual(result['total_pixels'], 200)
        self.assertIn('error', result)

    def test_common_dimensions(self):
        """Test the common resize box"""
        self.assertEqual(common_dimensions((40, 20), (20, 10), 512), (20, 10))
        self.assertEqual(common_dimensions((1000, 500), (800, 800), 512), (512, 512))
        self.assertEqual(common_dimensions((600, 1200), (300, 600), 512), (256, 512))

    def test_brightness_hash(self):
        """Test brightness hash of a white image"""
        digest = image_brightness_hash(make_image(size=(8, 8)))
        self.assertEqual(digest, 'ff' * 32)


class ImageUrlGuardTests(TestCase):
    """Test which image URLs the server will fetch"""

    def test_non_http_scheme_rejected(self):
        """Test file and ftp URLs are refused"""
        for url in ['file:///etc/passwd', 'ftp://cdn.test/a.png', 'no-scheme.png']:
            with self.assertRaises(ImageFetchError):
                check_public_url(url)

    def test_loopback_literal_rejected(self):
        """Test loopback addresses are refused"""
        with self.assertRaises(ImageFetchError):
            check_public_url('http://127.0.0.1:8000/admin.png')

    def test_host_resolving_to_private_address_rejected(self):
        """Test hosts resolving to private networks are refused"""
        with mock.patch('backend.items.image_comparison.socket.getaddrinfo', return_value=PRIVATE_ADDRESS):
            with self.assertRaises(ImageFetchError):
                check_public_url('https://intranet.test/a.png')

    def test_public_host_allowed(self):
        """Test public hosts pass"""
        with mock.patch('backend.items.image_comparison.socket.getaddrinfo', return_value=PUBLIC_ADDRESS):
            check_public_url('https://cdn.test/a.png')

    def test_compare_with_internal_url_never_fetches(self):
        """Test refused URLs come back as an error result without a request"""
        with mock_backend(png_response(make_image())) as mock_request:
            result = compare_images('http://127.0.0.1/a.png', 'http://169.254.169.254/latest/meta-data')
        mock_request.assert_not_called()
        self.assertFalse(result['is_duplicate'])
        self.assertIn('not allowed', result['error'])

    def test_redirect_to_private_host_refused(self):
        """Test redirects are checked against the same rules"""
        redirect = make_response(302, content=b'')
        redirect.headers['Location'] = 'http://intranet.test/secret.png'
        addresses = mock.patch('backend.items.image_comparison.socket.getaddrinfo',
                               side_effect=[PUBLIC_ADDRESS, PRIVATE_ADDRESS])
        with addresses, mock_backend(redirect) as mock_request:
            self.assertFalse(validate_image_url('https://cdn.test/a.png'))
        self.assertEqual(mock_request.call_count, 1)


class ImageFetchTests(TestCase):
    """Test comparisons that download images (requests mocked)"""

    def setUp(self):
        resolve_publicly(self)

    def test_compare_urls_identical(self):
        """Test two downloads of the same image"""
        with mock_backend(png_response(make_image(block=(2, 2, 6, 6)))):
            result = compare_images('https://cdn.test/a.png', 'https://cdn.test/b.png')
        self.assertTrue(result['is_duplicate'])

    def test_compare_urls_different(self):
        """Test two different downloads"""
        responses = [png_response(make_image()), png_response(make_image(block=(0, 0, 20, 10)))]
        with mock_backend(*responses):
            result = compare_images('https://cdn.test/a.png', 'https://cdn.test/b.png')
        self.assertFalse(result['is_duplicate'])
        self.assertEqual(result['similarity'], 50)

    def test_images_fetched_concurrently(self):
        """Test both images of a pair are downloaded at the same time"""
        barrier = threading.Barrier(2, timeout=5)

        def respond(*args, **kwargs):
            barrier.wait()
            return png_response(make_image())

        with mock.patch.object(requests.Session, 'request', side_effect=respond):
            result = compare_images('https://cdn.test/a.png', 'https://cdn.test/b.png')
        self.assertTrue(result['is_duplicate'])

    def test_fetch_failure_is_returned_not_raised(self):
        """Test HTTP errors come back as an error result"""
        with mock_backend(make_response(404, content=b'missing', content_type='text/plain')):
            result = compare_images('https://cdn.test/a.png', 'https://cdn.test/b.png')
        self.assertFalse(result['is_duplicate'])
        self.assertEqual(result['similarity'], 0)
        self.assertIn('404', result['error'])

    def test_non_image_content_type(self):
        """Test non-image responses come back as an error result"""
        with mock_backend(make_response(200, content=b'<html></html>', content_type='text/html')):
            result = compare_images('https://cdn.test/a', 'https://cdn.test/b')
        self.assertIn('Invalid content type', result['error'])

    def test_decompression_bomb_is_returned_not_raised(self):
        """Test images over Pillow's pixel limit come back as an error result"""
        with mock.patch.object(Image, 'MAX_IMAGE_PIXELS', 100), mock_backend(png_response(make_image())):
            result = compare_images('https://cdn.test/a.png', 'https://cdn.test/b.png')
        self.assertFalse(result['is_duplicate'])
        self.assertIn('Failed to decode image', result['error'])

    @override_settings(DUPLICATE_IMAGE_MAX_BYTES=10)
    def test_oversized_download_is_returned_not_raised(self):
        """Test downloads past the byte limit are abandoned"""
        with mock_backend(png_response(make_image())):
            result = compare_images('https://cdn.test/a.png', 'https://cdn.test/b.png')
        self.assertFalse(result['is_duplicate'])
        self.assertIn('larger than 10 bytes', result['error'])

    def test_batch_results_keyed_by_pair_id(self):
        """Test batch results are keyed by pair id"""
        pairs = [('p1', 'https://cdn.test/1.png', 'https://cdn.test/2.png'),
                 ('p2', 'https://cdn.test/3.png', 'https://cdn.test/4.png')]
        with mock_backend(png_response(make_image())):
            results = batch_compare_images(pairs, concurrency=2)
        self.assertEqual(set(results), {'p1', 'p2'})
        self.assertTrue(all(result['is_duplicate'] for result in results.values()))

    def test_batch_rejects_duplicate_pair_ids(self):
        """Test two pairs sharing an id are refused instead of overwriting each other"""
        pairs = [('0', 'https://cdn.test/1.png', 'https://cdn.test/2.png'),
                 ('0', 'https://cdn.test/3.png', 'https://cdn.test/4.png')]
        with mock_backend(png_response(make_image())) as mock_request:
            with self.assertRaises(ValueError):
                batch_compare_images(pairs)
        mock_request.assert_not_called()

    def test_batch_keeps_other_results_when_one_pair_fails(self):
        """Test a bad pair does not lose the rest of the batch"""
        pairs = [('good', 'https://cdn.test/1.png', 'https://cdn.test/2.png'),
                 ('bad', 'file:///etc/passwd', 'https://cdn.test/4.png')]
        with mock_backend(png_response(make_image())):
            results = batch_compare_images(pairs, concurrency=1)
        self.assertTrue(results['good']['is_duplicate'])
        self.assertIn('not allowed', results['bad']['error'])

    def test_quick_hash_failure_gives_empty_string(self):
        """Test quick hash of an unreachable image"""
        with mock_backend(make_response(500, content=b'', content_type='text/plain')):
            self.assertEqual(quick_image_hash('https://cdn.test/a.png'), '')

    def test_validate_image_url(self):
        """Test HEAD validation of image URLs"""
        with mock_backend(make_response(200, content=b'', content_type='image/jpeg')) as mock_request:
            self.assertTrue(validate_image_url('https://cdn.test/a.jpg'))
        self.assertEqual(mock_request.call_args[0], ('HEAD', 'https://cdn.test/a.jpg'))
        with mock_backend(make_response(200, content=b'', content_type='text/html')):
            self.assertFalse(validate_image_url('https://cdn.test/a'))
        self.assertFalse(validate_image_url(''))


@override_settings(BACKEND_API_URL='http://backend.test')
class ItemAPITests(TestCase):
    """Test Item API endpoints"""

    def setUp(self):
        resolve_publicly(self)
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_list_items_forwards_filters(self):
        """Test list filters are forwarded"""
        payload = {'success': True, 'data': [], 'pagination': TestDataFactory.pagination(0)}
        with mock_backend(make_response(200, payload)) as mock_request:
            response = self.client.get('/api/v1/items/?auction_id=12&status=active')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        args, kwargs = mock_request.call_args
        self.assertEqual(args, ('GET', 'http://backend.test/api/items'))
        self.assertEqual(kwargs['params'], {'auction_id': '12', 'status': 'active'})

    def test_create_item_validates_estimates(self):
        """Test high estimate below low estimate is rejected"""
        response = self.client.post('/api/v1/items/', {'title': 'Vase', 'low_est': 500, 'high_est': 100}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('high_est', response.data)

    def test_create_item(self):
        """Test creating an item keeps extra fields"""
        with mock_backend(make_response(201, {'success': True, 'data': {'id': '5'}})) as mock_request:
            response = self.client.post('/api/v1/items/', {'title': 'Vase', 'low_est': 100, 'high_est': 200,
                                                           'materials': 'Porcelain'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(mock_request.call_args[1]['json']['materials'], 'Porcelain')

    def test_hard_delete(self):
        """Test hard delete flag is forwarded"""
        with mock_backend(make_response(200, {'success': True, 'message': 'Deleted'})) as mock_request:
            response = self.client.delete('/api/v1/items/9/?hard_delete=true')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        args, kwargs = mock_request.call_args
        self.assertEqual(args, ('DELETE', 'http://backend.test/api/items/9'))
        self.assertEqual(kwargs['params'], {'hard_delete': 'true'})

    def test_bulk_action_uses_item_ids(self):
        """Test bulk actions send item_ids"""
        with mock_backend(make_response(200, {'success': True, 'affected_count': 2})) as mock_request:
            response = self.client.post('/api/v1/items/bulk-action/',
                                        {'action': 'update_status', 'ids': ['1', '2'], 'data': {'status': 'sold'}},
                                        format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(mock_request.call_args[1]['json'],
                         {'action': 'update_status', 'item_ids': ['1', '2'], 'data': {'status': 'sold'}})

    def test_template_rejects_unknown_platform(self):
        """Test unknown template platforms are rejected"""
        response = self.client.get('/api/v1/items/templates/import/?platform=ebay')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_template_download(self):
        """Test template download is streamed back"""
        body = b'LotNum,Title,Description\n'
        with mock_backend(make_response(200, content=body, content_type='text/csv')) as mock_request:
            response = self.client.get('/api/v1/items/templates/export/?platform=liveauctioneers')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.content, body)
        args, kwargs = mock_request.call_args
        self.assertEqual(args, ('GET', 'http://backend.test/api/items/export/template'))
        self.assertEqual(kwargs['params'], {'platform': 'liveauctioneers'})

    def test_upload_csv_validate_only(self):
        """Test CSV upload in validate-only mode"""
        with mock_backend(make_response(200, {'success': True, 'validation_result': {'total_rows': 1}})) as mock_request:
            response = self.client.post('/api/v1/items/upload/csv/',
                                        {'csvData': 'Title\nVase\n', 'validateOnly': True}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        sent = mock_request.call_args[1]['json']
        self.assertTrue(sent['validateOnly'])
        self.assertEqual(sent['platform'], 'database')

    def test_ai_analyze_requires_file(self):
        """Test AI analysis needs an image file"""
        response = self.client.post('/api/v1/items/ai-analyze/', {}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_detect_duplicates_status(self):
        """Test duplicate detection task status"""
        with mock_backend(make_response(200, {'success': True, 'status': 'running', 'progress': 40})) as mock_request:
            response = self.client.get('/api/v1/items/detect-duplicates/status/task-1/')
        self.assertEqual(response.data['progress'], 40)
        self.assertEqual(mock_request.call_args[0], ('GET', 'http://backend.test/api/items/detect-duplicates/status/task-1'))

    def test_compare_images_single_pair(self):
        """Test comparing a single pair"""
        with mock_backend(png_response(make_image())):
            response = self.client.post('/api/v1/items/compare-images/',
                                        {'url1': 'https://cdn.test/a.png', 'url2': 'https://cdn.test/b.png'},
                                        format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['result']['is_duplicate'])

    def test_compare_images_batch(self):
        """Test comparing a batch of pairs"""
        pairs = [{'id': 'a', 'url1': 'https://cdn.test/1.png', 'url2': 'https://cdn.test/2.png'}]
        with mock_backend(png_response(make_image())):
            response = self.client.post('/api/v1/items/compare-images/', {'pairs': pairs}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['duplicates'], ['a'])

    def test_compare_images_rejects_duplicate_ids(self):
        """Test pairs sharing an id are rejected"""
        pairs = [{'id': 'a', 'url1': 'https://cdn.test/1.png', 'url2': 'https://cdn.test/2.png'},
                 {'id': 'a', 'url1': 'https://cdn.test/3.png', 'url2': 'https://cdn.test/4.png'}]
        response = self.client.post('/api/v1/items/compare-images/', {'pairs': pairs}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('pairs', response.data)

    def test_compare_images_generated_ids_do_not_collide(self):
        """Test pairs without an id get ids distinct from explicit ones"""
        pairs = [{'url1': 'https://cdn.test/1.png', 'url2': 'https://cdn.test/2.png'},
                 {'id': 'pair-0', 'url1': 'https://cdn.test/3.png', 'url2': 'https://cdn.test/4.png'},
                 {'id': '2', 'url1': 'https://cdn.test/5.png', 'url2': 'https://cdn.test/6.png'}]
        with mock_backend(png_response(make_image())):
            response = self.client.post('/api/v1/items/compare-images/', {'pairs': pairs}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['results']), 3)
        self.assertIn('pair-0', response.data['results'])
        self.assertIn('2', response.data['results'])

    def test_compare_images_internal_url_gives_error_result(self):
        """Test internal addresses are not fetched through the endpoint"""
        with mock.patch('backend.items.image_comparison.socket.getaddrinfo', return_value=PRIVATE_ADDRESS):
            response = self.client.post('/api/v1/items/compare-images/',
                                        {'url1': 'http://intranet.test/a.png', 'url2': 'https://cdn.test/b.png'},
                                        format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('not allowed', response.data['result']['error'])

    def test_compare_images_requires_urls(self):
        """Test a single comparison needs both URLs"""
        response = self.client.post('/api/v1/items/compare-images/', {'url1': 'https://cdn.test/a.png'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_form_options_loads_lookups(self):
        """Test artist and school lookups for the item form"""
        payload = {'success': True, 'data': [{'id': '1', 'name': 'Turner'}]}
        with mock_backend(make_response(200, payload)) as mock_request:
            response = self.client.get('/api/v1/items/form-options/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['artists'], payload['data'])
        self.assertEqual(response.data['schools'], payload['data'])
        self.assertEqual(mock_request.call_count, 2)


class DetectDuplicateImagesCommandTests(TestCase):
    """Test the detect_duplicate_images management command"""

    def setUp(self):
        resolve_publicly(self)

    def test_explicit_urls(self):
        """Test comparing explicit URLs"""
        out = io.StringIO()
        with mock_backend(png_response(make_image())):
            call_command('detect_duplicate_images', '--urls', 'https://cdn.test/1.png', 'https://cdn.test/2.png',
                         '--concurrency', '1', stdout=out)
        self.assertIn('Duplicates Found: 1', out.getvalue())

    def test_needs_two_images(self):
        """Test a single image is reported and skipped"""
        out = io.StringIO()
        with mock.patch('backend.items.management.commands.detect_duplicate_images.batch_compare_images') as batch:
            call_command('detect_duplicate_images', '--urls', 'https://cdn.test/1.png', stdout=out)
        batch.assert_not_called()
        self.assertIn('Need at least two images', out.getvalue())
