"""
Duplicate image detection for artwork photos.

Images are fetched, decoded with Pillow, brought to a common size and compared
pixel by pixel with pixelmatch. A pair counts as a duplicate when at least
DUPLICATE_SIMILARITY_CUTOFF percent of pixels match.
"""
import io
import ipaddress
import logging
import math
import re
import socket
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, Iterable, Optional, Tuple
from urllib.parse import urljoin, urlparse

import requests
from django.conf import settings
from PIL import Image
from pixelmatch.contrib.PIL import pixelmatch

logger = logging.getLogger(__name__)

DUPLICATE_SIMILARITY_CUTOFF = 95
DEFAULT_THRESHOLD = 0.1
DEFAULT_MAX_DIMENSION = 512
DEFAULT_CONCURRENCY = 3
FETCH_TIMEOUT = 20
DEFAULT_MAX_BYTES = 20 * 1024 * 1024
MAX_REDIRECTS = 5
ALLOWED_SCHEMES = ('http', 'https')
USER_AGENT = 'Mozilla/5.0 (compatible; DuplicateDetection/1.0)'

DRIVE_FILE_ID_PATTERNS = [
    re.compile(r'/file/d/([a-zA-Z0-9_-]+)'),
    re.compile(r'/open\?id=([a-zA-Z0-9_-]+)'),
    re.compile(r'id=([a-zA-Z0-9_-]+)'),
]


class ImageFetchError(Exception):
    """Image could not be downloaded or is not an image."""


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def is_drive_url(url: str) -> bool:
    return bool(url) and ('drive.google.com' in url or 'docs.google.com' in url)


def extract_drive_file_id(url: str) -> Optional[str]:
    if not url:
        return None
    for pattern in DRIVE_FILE_ID_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1)
    return None


def normalize_image_url(url) -> str:
    """
    Rewrite Google Drive share links to their direct image form.

    Other URLs are returned unchanged; empty or non-string input gives ''.
    """
    if not url or not isinstance(url, str):
        return ''
    if is_drive_url(url):
        file_id = extract_drive_file_id(url)
        if file_id:
            return f"https://lh3.googleusercontent.com/d/{file_id}"
    return url


def check_public_url(url: str):
    """
    Reject URLs the server must not fetch on a caller's behalf.

    Only http(s) is allowed, and hosts resolving to loopback, private,
    link-local or otherwise reserved addresses are refused.

    Raises:
        ImageFetchError: when the URL is not allowed
    """
    parsed = urlparse(url)
    if parsed.scheme not in ALLOWED_SCHEMES or not parsed.hostname:
        raise ImageFetchError(f"URL not allowed: {url}")
    try:
        addresses = socket.getaddrinfo(parsed.hostname, parsed.port or None, proto=socket.IPPROTO_TCP)
    except (socket.gaierror, UnicodeError):
        # Unresolvable hosts fail later at connect time
        return
    for address in addresses:
        ip = ipaddress.ip_address(address[4][0].split('%', 1)[0])
        if (ip.is_private or ip.is_loopback or ip.is_link_local or ip.is_reserved
                or ip.is_multicast or ip.is_unspecified):
            raise ImageFetchError(f"URL not allowed: {url} resolves to {ip}")


def _request_public(method: str, url: str, **kwargs) -> requests.Response:
    """Send a request, following redirects only to allowed hosts."""
    for _ in range(MAX_REDIRECTS + 1):
        check_public_url(url)
        try:
            response = requests.request(method, url, headers={'User-Agent': USER_AGENT}, timeout=FETCH_TIMEOUT,
                                        allow_redirects=False, **kwargs)
        except requests.exceptions.RequestException as e:
            raise ImageFetchError(f"Failed to fetch image {url}: {str(e)}")
        if not response.is_redirect:
            return response
        url = urljoin(url, response.headers['Location'])
        response.close()
    raise ImageFetchError(f"Failed to fetch image {url}: too many redirects")


def _read_limited(response: requests.Response, url: str, max_bytes: int) -> bytes:
    content_length = response.headers.get('Content-Length')
    if content_length and content_length.isdigit() and int(content_length) > max_bytes:
        raise ImageFetchError(f"Image {url} is larger than {max_bytes} bytes")
    body = bytearray()
    for chunk in response.iter_content(chunk_size=64 * 1024):
        body.extend(chunk)
        if len(body) > max_bytes:
            raise ImageFetchError(f"Image {url} is larger than {max_bytes} bytes")
    return bytes(body)


def fetch_image(url: str) -> Image.Image:
    """
    Download an image and decode it to RGBA.

    The body is streamed and abandoned past DUPLICATE_IMAGE_MAX_BYTES.

    Raises:
        ImageFetchError: on disallowed URLs, HTTP errors, oversized or
            non-image content, undecodable bytes and decompression bombs
    """
    normalized_url = normalize_image_url(url)
    max_bytes = getattr(settings, 'DUPLICATE_IMAGE_MAX_BYTES', DEFAULT_MAX_BYTES)

    with _request_public('GET', normalized_url, stream=True) as response:
        if not response.ok:
            raise ImageFetchError(f"Failed to fetch image {normalized_url}: HTTP {response.status_code}: {response.reason}")

        content_type = response.headers.get('Content-Type', '')
        if not content_type.startswith('image/'):
            raise ImageFetchError(f"Failed to fetch image {normalized_url}: Invalid content type: {content_type or None}")

        try:
            body = _read_limited(response, normalized_url, max_bytes)
        except requests.exceptions.RequestException as e:
            raise ImageFetchError(f"Failed to fetch image {normalized_url}: {str(e)}")

    try:
        image = Image.open(io.BytesIO(body))
        image.load()
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise ImageFetchError(f"Failed to decode image {normalized_url}: {str(e)}")

    return image.convert('RGBA')


def common_dimensions(size1: Tuple[int, int], size2: Tuple[int, int], max_dimension: int) -> Tuple[int, int]:
    """
    Target box for two images of different sizes.

    Uses the smaller aspect ratio of the pair, the smaller width capped at
    max_dimension, and caps the height at max_dimension as well.
    """
    width1, height1 = size1
    width2, height2 = size2
    base_aspect_ratio = min(width1 / height1, width2 / height2)

    target_width = min(width1, width2, max_dimension)
    target_height = _round_half_up(target_width / base_aspect_ratio)

    if target_height > max_dimension:
        target_height = max_dimension
        target_width = _round_half_up(target_height * base_aspect_ratio)

    return max(target_width, 1), max(target_height, 1)


def comparison_result(is_duplicate=False, similarity=0.0, pixel_difference=0, total_pixels=0, error=None) -> Dict:
    result = {
        'is_duplicate': is_duplicate,
        'similarity': similarity,
        'pixel_difference': pixel_difference,
        'total_pixels': total_pixels,
    }
    if error:
        result['error'] = error
    return result


def compare_image_data(image1: Image.Image, image2: Image.Image, threshold: float = DEFAULT_THRESHOLD,
                       resize_to_same_size: bool = True, max_dimension: int = DEFAULT_MAX_DIMENSION) -> Dict:
    """
    Compare two decoded images.

    Args:
        image1, image2: Pillow images (any mode, converted to RGBA)
        threshold: Per-pixel colour distance tolerance (0-1)
        resize_to_same_size: Resize both images to a common box when sizes differ
        max_dimension: Upper bound for the common box

    Returns:
        Dict with is_duplicate, similarity (percent), pixel_difference, total_pixels
        and error when the images could not be compared
    """
    image1 = image1.convert('RGBA')
    image2 = image2.convert('RGBA')

    if resize_to_same_size and image1.size != image2.size:
        target = common_dimensions(image1.size, image2.size, max_dimension)
        image1 = image1.resize(target, Image.Resampling.BILINEAR)
        image2 = image2.resize(target, Image.Resampling.BILINEAR)

    if image1.size != image2.size:
        area1 = image1.size[0] * image1.size[1]
        area2 = image2.size[0] * image2.size[1]
        return comparison_result(
            pixel_difference=abs(area1 - area2),
            total_pixels=max(area1, area2),
            error='Images have different dimensions and could not be resized for comparison',
        )

    width, height = image1.size
    total_pixels = width * height
    pixel_difference = pixelmatch(image1, image2, threshold=threshold)

    similarity = ((total_pixels - pixel_difference) / total_pixels) * 100
    return comparison_result(
        is_duplicate=similarity >= DUPLICATE_SIMILARITY_CUTOFF,
        similarity=similarity,
        pixel_difference=pixel_difference,
        total_pixels=total_pixels,
    )


def compare_images(url1: str, url2: str, threshold: Optional[float] = None,
                   resize_to_same_size: bool = True, max_dimension: Optional[int] = None) -> Dict:
    """
    Fetch two images concurrently and compare them.

    Failures never raise; they come back as a non-duplicate result with error set.
    """
    if threshold is None:
        threshold = getattr(settings, 'DUPLICATE_IMAGE_THRESHOLD', DEFAULT_THRESHOLD)
    if max_dimension is None:
        max_dimension = getattr(settings, 'DUPLICATE_IMAGE_MAX_DIMENSION', DEFAULT_MAX_DIMENSION)

    try:
        with ThreadPoolExecutor(max_workers=2) as executor:
            future1 = executor.submit(fetch_image, url1)
            future2 = executor.submit(fetch_image, url2)
            image1, image2 = future1.result(), future2.result()
        return compare_image_data(
            image1, image2,
            threshold=threshold,
            resize_to_same_size=resize_to_same_size,
            max_dimension=max_dimension,
        )
    except (ImageFetchError, ValueError, OSError) as e:
        logger.warning(f"Image comparison failed for {url1} / {url2}: {str(e)}")
        return comparison_result(error=str(e))


def batch_compare_images(pairs: Iterable[Tuple[str, str, str]], concurrency: Optional[int] = None, **options) -> Dict[str, Dict]:
    """
    Compare many (id, url1, url2) pairs with at most `concurrency` running at once.

    Returns:
        Dict mapping pair id to its comparison result

    Raises:
        ValueError: when two pairs share an id
    """
    pairs = list(pairs)
    pair_ids = [pair_id for pair_id, _, _ in pairs]
    duplicate_ids = sorted({pair_id for pair_id in pair_ids if pair_ids.count(pair_id) > 1})
    if duplicate_ids:
        raise ValueError(f"Duplicate pair ids: {', '.join(duplicate_ids)}")

    if concurrency is None:
        concurrency = getattr(settings, 'DUPLICATE_IMAGE_CONCURRENCY', DEFAULT_CONCURRENCY)
    concurrency = max(1, concurrency)
    results = {}

    logger.info(f"Comparing {len(pairs)} image pairs with concurrency {concurrency}")

    with ThreadPoolExecutor(max_workers=concurrency) as executor:
        futures = {
            executor.submit(compare_images, url1, url2, **options): pair_id
            for pair_id, url1, url2 in pairs
        }
        for future in as_completed(futures):
            pair_id = futures[future]
            try:
                results[pair_id] = future.result()
            except Exception as e:
                logger.exception(f"Unexpected failure comparing pair {pair_id}")
                results[pair_id] = comparison_result(error=str(e))
            if len(results) % 5 == 0:
                logger.info(f"Compared {len(results)}/{len(pairs)} image pairs")

    logger.info(f"Completed comparing {len(results)} image pairs")
    return results


def image_brightness_hash(image: Image.Image) -> str:
    """Brightness of roughly 64 sampled pixels, two hex digits each."""
    pixels = image.convert('RGBA').tobytes()
    step = max(1, int(math.floor(math.sqrt(len(pixels) / 64))))
    parts = []
    for i in range(0, len(pixels), step * 4):
        r, g, b = pixels[i], pixels[i + 1], pixels[i + 2]
        parts.append(f"{_round_half_up((r + g + b) / 3):02x}")
    return ''.join(parts)


def quick_image_hash(url: str) -> str:
    """Cheap fingerprint for pre-filtering; '' when the image cannot be fetched."""
    try:
        return image_brightness_hash(fetch_image(url))
    except ImageFetchError as e:
        logger.warning(f"Failed to create quick hash for {url}: {str(e)}")
        return ''


def validate_image_url(url: str) -> bool:
    """True when a HEAD request to an allowed host succeeds with an image content type."""
    normalized_url = normalize_image_url(url)
    if not normalized_url:
        return False
    try:
        response = _request_public('HEAD', normalized_url)
    except ImageFetchError:
        return False
    if not response.ok:
        return False
    return response.headers.get('Content-Type', '').startswith('image/')
