from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backend.artists.serializers import AIGenerateSerializer
from backend.core.proxy import query_filters, dated_filename, file_response
from backend.core.serializers import BulkActionSerializer
from backend.core.upstream import get_backend_client
from .serializers import SchoolSerializer

SCHOOL_FILTERS = [
    'status', 'country', 'school_type', 'search', 'page', 'limit',
    'sort_field', 'sort_direction',
]


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def school_list_create(request):
    """List schools or create a new school"""
    client = get_backend_client(request)
    if request.method == 'GET':
        return Response(client.get('/api/schools', params=query_filters(request, SCHOOL_FILTERS)))

    serializer = SchoolSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    return Response(client.post('/api/schools', json=serializer.validated_data), status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
def school_detail(request, pk):
    """Retrieve, update or delete a school"""
    client = get_backend_client(request)
    if request.method == 'GET':
        return Response(client.get(f'/api/schools/{pk}'))
    elif request.method == 'PUT':
        serializer = SchoolSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        return Response(client.put(f'/api/schools/{pk}', json=serializer.validated_data))
    else:  # DELETE
        data = client.delete(f'/api/schools/{pk}')
        return Response(data or {'success': True, 'message': 'School deleted'})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def school_generate_ai(request):
    serializer = AIGenerateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    client = get_backend_client(request)
    return Response(client.post('/api/schools/generate-ai', json=serializer.validated_data))


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def school_bulk_action(request):
    serializer = BulkActionSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    payload = {
        'action': serializer.validated_data['action'],
        'school_ids': serializer.validated_data['ids'],
        'data': serializer.validated_data.get('data'),
    }
    client = get_backend_client(request)
    return Response(client.post('/api/schools/bulk', json=payload))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def school_export_csv(request):
    client = get_backend_client(request)
    upstream = client.download('/api/schools/export/csv', params=query_filters(request, SCHOOL_FILTERS))
    return file_response(upstream, dated_filename('schools-export'), 'text/csv')
