import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backend.core.proxy import query_filters, dated_filename, file_response
from backend.core.serializers import BulkActionSerializer
from backend.core.upstream import get_backend_client
from .serializers import ArtistSerializer, AIGenerateSerializer

logger = logging.getLogger(__name__)

ARTIST_FILTERS = [
    'status', 'nationality', 'art_movement', 'search', 'page', 'limit',
    'sort_field', 'sort_direction',
]


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def artist_list_create(request):
    """List artists with filters or create a new artist"""
    client = get_backend_client(request)
    if request.method == 'GET':
        return Response(client.get('/api/artists', params=query_filters(request, ARTIST_FILTERS)))

    serializer = ArtistSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = client.post('/api/artists', json=serializer.validated_data)
    logger.info(f"Artist created by {request.user}: {serializer.validated_data.get('name')}")
    return Response(data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
def artist_detail(request, pk):
    """Retrieve, update or delete an artist"""
    client = get_backend_client(request)
    if request.method == 'GET':
        return Response(client.get(f'/api/artists/{pk}'))
    elif request.method == 'PUT':
        serializer = ArtistSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        return Response(client.put(f'/api/artists/{pk}', json=serializer.validated_data))
    else:  # DELETE
        data = client.delete(f'/api/artists/{pk}')
        return Response(data or {'success': True, 'message': 'Artist deleted'})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def artist_generate_ai(request):
    """Ask the backend to draft artist details from a name"""
    serializer = AIGenerateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    client = get_backend_client(request)
    return Response(client.post('/api/artists/generate-ai', json=serializer.validated_data))


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def artist_bulk_action(request):
    """Apply one action (archive, activate, delete...) to many artists"""
    serializer = BulkActionSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    payload = {
        'action': serializer.validated_data['action'],
        'artist_ids': serializer.validated_data['ids'],
        'data': serializer.validated_data.get('data'),
    }
    client = get_backend_client(request)
    return Response(client.post('/api/artists/bulk', json=payload))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def artist_export_csv(request):
    """Download the filtered artist list as CSV"""
    client = get_backend_client(request)
    upstream = client.download('/api/artists/export/csv', params=query_filters(request, ARTIST_FILTERS))
    return file_response(upstream, dated_filename('artists-export'), 'text/csv')
