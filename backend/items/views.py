import logging
from concurrent.futures import ThreadPoolExecutor

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backend.core.constants import ITEM_PLATFORMS
from backend.core.proxy import (
    query_filters, dated_filename, file_response, multipart_payload, unwrap_data,
)
from backend.core.serializers import BulkActionSerializer
from backend.core.upstream import get_backend_client
from .image_comparison import batch_compare_images, compare_images
from .serializers import (
    ItemSerializer, CSVUploadSerializer, DetectDuplicatesSerializer, CompareImagesSerializer,
)

logger = logging.getLogger(__name__)

TEMPLATE_KINDS = ['import', 'export']


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def item_list_create(request):
    """List items (all filters forwarded) or create a new item"""
    client = get_backend_client(request)
    if request.method == 'GET':
        return Response(client.get('/api/items', params=query_filters(request)))

    serializer = ItemSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = client.post('/api/items', json=serializer.validated_data)
    logger.info(f"Item created by {request.user}: {serializer.validated_data.get('title')}")
    return Response(data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
def item_detail(request, pk):
    """Retrieve, update or delete an item (soft delete unless hard_delete=true)"""
    client = get_backend_client(request)
    if request.method == 'GET':
        return Response(client.get(f'/api/items/{pk}'))
    elif request.method == 'PUT':
        serializer = ItemSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        return Response(client.put(f'/api/items/{pk}', json=serializer.validated_data))
    else:  # DELETE
        hard_delete = request.query_params.get('hard_delete') == 'true'
        data = client.delete(f'/api/items/{pk}', params={'hard_delete': True} if hard_delete else None)
        return Response(data or {'success': True, 'message': 'Item deleted'})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def item_bulk_action(request):
    serializer = BulkActionSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    payload = {
        'action': serializer.validated_data['action'],
        'item_ids': serializer.validated_data['ids'],
        'data': serializer.validated_data.get('data'),
    }
    client = get_backend_client(request)
    return Response(client.post('/api/items/bulk-action', json=payload))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def item_export_csv(request):
    """Download the filtered item list as CSV"""
    client = get_backend_client(request)
    upstream = client.download('/api/items/export/csv', params=query_filters(request))
    return file_response(upstream, dated_filename('items-export'), 'text/csv')


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def item_template(request, kind):
    """Import or export CSV template for one platform"""
    platform = request.query_params.get('platform', 'database')
    if kind not in TEMPLATE_KINDS:
        return Response({'error': f'Unknown template type: {kind}'}, status=status.HTTP_404_NOT_FOUND)
    if platform not in ITEM_PLATFORMS:
        return Response({'error': f'Unsupported platform: {platform}'}, status=status.HTTP_400_BAD_REQUEST)

    client = get_backend_client(request)
    upstream = client.download(f'/api/items/{kind}/template', params={'platform': platform})
    return file_response(upstream, f'{platform}-{kind}-template.csv', 'text/csv')


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def item_upload_csv(request):
    """Validate or import an items CSV; the backend maps platform columns"""
    serializer = CSVUploadSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    client = get_backend_client(request)
    data = client.post('/api/items/upload/csv', json=serializer.validated_data)
    if not serializer.validated_data['validateOnly']:
        logger.info(f"Items CSV imported by {request.user} for platform {serializer.validated_data['platform']}")
    return Response(data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def item_ai_analyze(request):
    """Forward an uploaded photo to the backend's AI analysis"""
    if not request.FILES:
        return Response({'error': 'An image file is required'}, status=status.HTTP_400_BAD_REQUEST)
    data, files = multipart_payload(request)
    client = get_backend_client(request)
    return Response(client.post('/api/items/ai-analyze', data=data, files=files))


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def item_detect_duplicates(request):
    """Start backend duplicate detection across stored items"""
    serializer = DetectDuplicatesSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    client = get_backend_client(request)
    return Response(client.post('/api/items/detect-duplicates', json=serializer.validated_data))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def item_detect_duplicates_status(request, task_id):
    client = get_backend_client(request)
    return Response(client.get(f'/api/items/detect-duplicates/status/{task_id}'))


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def item_compare_images(request):
    """
    Compare images locally.

    Body: {url1, url2} for one pair or {pairs: [{id, url1, url2}, ...]} for a batch,
    plus optional threshold, resize_to_same_size, max_dimension, concurrency.
    """
    serializer = CompareImagesSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    params = serializer.validated_data
    options = {'resize_to_same_size': params['resize_to_same_size']}
    if 'threshold' in params:
        options['threshold'] = params['threshold']
    if 'max_dimension' in params:
        options['max_dimension'] = params['max_dimension']

    if params.get('pairs'):
        explicit_ids = {pair['id'] for pair in params['pairs'] if pair.get('id')}
        pairs = []
        for index, pair in enumerate(params['pairs']):
            pair_id = pair.get('id')
            if not pair_id:
                pair_id = f"pair-{index}"
                while pair_id in explicit_ids:
                    pair_id = f"_{pair_id}"
            pairs.append((pair_id, pair['url1'], pair['url2']))
        results = batch_compare_images(pairs, concurrency=params.get('concurrency'), **options)
        duplicates = [pair_id for pair_id, result in results.items() if result['is_duplicate']]
        return Response({'success': True, 'results': results, 'duplicates': duplicates})

    result = compare_images(params['url1'], params['url2'], **options)
    return Response({'success': True, 'result': result})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def item_form_options(request):
    """Artist and school lookups for the item form, loaded in parallel"""
    token = request.auth
    lookups = {
        'artists': ('/api/artists', {'status': 'active', 'limit': 1000}),
        'schools': ('/api/schools', {'status': 'active', 'limit': 1000}),
    }

    def load(endpoint, params):
        return unwrap_data(get_backend_client(token=token).get(endpoint, params=params)) or []

    with ThreadPoolExecutor(max_workers=len(lookups)) as executor:
        futures = {key: executor.submit(load, *args) for key, args in lookups.items()}
        return Response({key: future.result() for key, future in futures.items()})
