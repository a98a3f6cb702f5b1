import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backend.core.cache_utils import cached_query, invalidate_brands_cache, BRANDS_CACHE_TTL
from backend.core.permissions import HasAdminAccess
from backend.core.proxy import query_filters, multipart_payload, unwrap_data
from backend.core.upstream import get_backend_client
from .serializers import BrandComplianceSerializer, PlatformCredentialSerializer, PlatformTestSerializer

logger = logging.getLogger(__name__)


@cached_query(cache_ttl=BRANDS_CACHE_TTL, key_prefix="brands_list")
def fetch_brands(token):
    return unwrap_data(get_backend_client(token=token).get('/api/brands'))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def brand_list(request):
    """All brands, cached for ten minutes"""
    return Response({'success': True, 'data': fetch_brands(request.auth) or []})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def brand_by_code(request, code):
    client = get_backend_client(request)
    return Response(client.get(f'/api/brands/by-code/{code.upper()}'))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def brand_detail(request, pk):
    client = get_backend_client(request)
    return Response(client.get(f'/api/brands/{pk}'))


@api_view(['GET', 'PUT'])
@permission_classes([IsAuthenticated])
def brand_compliance(request, pk):
    """
    Legal and banking details printed on invoices.

    Updates need admin access and drop the cached brand list.
    """
    client = get_backend_client(request)
    if request.method == 'GET':
        return Response(client.get(f'/api/brands/{pk}/compliance'))

    if not HasAdminAccess().has_permission(request, None):
        return Response({'error': HasAdminAccess.message}, status=status.HTTP_403_FORBIDDEN)
    serializer = BrandComplianceSerializer(data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)
    data = client.put(f'/api/brands/{pk}/compliance', json=serializer.validated_data)
    invalidate_brands_cache()
    logger.info(f"Brand {pk} compliance updated by {request.user}")
    return Response(data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def brand_logo_list(request):
    client = get_backend_client(request)
    return Response(client.get('/api/brand-logos'))


@api_view(['POST'])
@permission_classes([HasAdminAccess])
def brand_logo_upload(request, pk):
    """Forward a logo image (field "logo") to the backend's storage"""
    upload = request.FILES.get('logo')
    if upload is None:
        return Response({'error': 'A logo file is required'}, status=status.HTTP_400_BAD_REQUEST)
    if upload.content_type and not upload.content_type.startswith('image/'):
        return Response({'error': 'Logo must be an image'}, status=status.HTTP_400_BAD_REQUEST)
    data, files = multipart_payload(request)
    client = get_backend_client(request)
    result = client.post(f'/api/brand-logos/{pk}/upload', data=data, files=files)
    invalidate_brands_cache()
    logger.info(f"Logo uploaded for brand {pk} by {request.user}: {upload.name}")
    return Response(result)


@api_view(['DELETE'])
@permission_classes([HasAdminAccess])
def brand_logo_delete(request, pk):
    client = get_backend_client(request)
    data = client.delete(f'/api/brand-logos/{pk}')
    invalidate_brands_cache()
    return Response(data or {'success': True, 'message': 'Logo deleted'})


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def platform_credentials(request):
    """Listing platform API keys per brand; saving needs admin access"""
    client = get_backend_client(request)
    if request.method == 'GET':
        filters = query_filters(request, ['brand_code', 'platform'])
        if not filters.get('brand_code'):
            return Response({'error': 'brand_code is required'}, status=status.HTTP_400_BAD_REQUEST)
        return Response(client.get('/api/platform-credentials', params=filters))

    if not HasAdminAccess().has_permission(request, None):
        return Response({'error': HasAdminAccess.message}, status=status.HTTP_403_FORBIDDEN)
    serializer = PlatformCredentialSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = client.post('/api/platform-credentials', json=serializer.validated_data)
    logger.info(f"{serializer.validated_data['platform']} credentials saved for "
                f"{serializer.validated_data['brand_code']} by {request.user}")
    return Response(data)


@api_view(['POST'])
@permission_classes([HasAdminAccess])
def platform_credentials_test(request):
    serializer = PlatformTestSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    client = get_backend_client(request)
    return Response(client.post('/api/platform-credentials/test', json=serializer.validated_data))
