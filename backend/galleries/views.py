import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backend.core.proxy import query_filters, dated_filename, file_response, multipart_payload
from backend.core.serializers import BulkActionSerializer
from backend.core.upstream import get_backend_client
from .serializers import GallerySerializer, GalleryAIGenerateSerializer

logger = logging.getLogger(__name__)

GALLERY_FILTERS = [
    'status', 'location', 'country', 'gallery_type', 'search', 'page', 'limit',
    'sort_field', 'sort_direction',
]


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def gallery_list_create(request):
    """List galleries or create a new gallery"""
    client = get_backend_client(request)
    if request.method == 'GET':
        return Response(client.get('/api/galleries', params=query_filters(request, GALLERY_FILTERS)))

    serializer = GallerySerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    return Response(client.post('/api/galleries', json=serializer.validated_data), status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
def gallery_detail(request, pk):
    client = get_backend_client(request)
    if request.method == 'GET':
        return Response(client.get(f'/api/galleries/{pk}'))
    elif request.method == 'PUT':
        serializer = GallerySerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        return Response(client.put(f'/api/galleries/{pk}', json=serializer.validated_data))
    else:  # DELETE
        data = client.delete(f'/api/galleries/{pk}')
        return Response(data or {'success': True, 'message': 'Gallery deleted'})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def gallery_generate_ai(request):
    """Ask the backend to draft gallery details from a name and location"""
    serializer = GalleryAIGenerateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    client = get_backend_client(request)
    return Response(client.post('/api/galleries/generate-ai', json=serializer.validated_data))


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def gallery_bulk_action(request):
    serializer = BulkActionSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    payload = {
        'action': serializer.validated_data['action'],
        'ids': serializer.validated_data['ids'],
        'data': serializer.validated_data.get('data'),
    }
    client = get_backend_client(request)
    data = client.post('/api/galleries/bulk', json=payload)
    logger.info(f"Gallery bulk {payload['action']} by {request.user}: {len(payload['ids'])} galleries")
    return Response(data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def gallery_export_csv(request):
    client = get_backend_client(request)
    upstream = client.download('/api/galleries/export/csv', params=query_filters(request, GALLERY_FILTERS))
    return file_response(upstream, dated_filename('galleries-export'), 'text/csv')


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def gallery_import_csv(request):
    """Forward an uploaded CSV (field "file") to the backend importer"""
    if request.FILES.get('file') is None:
        return Response({'error': 'A CSV file is required'}, status=status.HTTP_400_BAD_REQUEST)
    data, files = multipart_payload(request)
    client = get_backend_client(request)
    result = client.post('/api/galleries/import/csv', data=data, files=files)
    logger.info(f"Galleries CSV imported by {request.user}: {request.FILES['file'].name}")
    return Response(result)
