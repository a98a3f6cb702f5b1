import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backend.core.csv_utils import build_csv, parse_csv_text, read_uploaded_csv
from backend.core.proxy import (
    query_filters, dated_filename, file_response, csv_response, multipart_payload,
)
from backend.core.serializers import BulkActionSerializer
from backend.core.upstream import get_backend_client
from .serializers import AuctionSerializer, GeneratePassedAuctionSerializer

logger = logging.getLogger(__name__)

AUCTION_FILTERS = [
    'status', 'type', 'search', 'page', 'limit', 'sort_field', 'sort_direction',
    'brand_id', 'brand_code',
]

EXPORT_PLATFORMS = ['liveauctioneers', 'easy_live', 'invaluable', 'the_saleroom']
IMAGE_EXPORT_PLATFORMS = EXPORT_PLATFORMS + ['database']

AUCTION_CSV_HEADERS = [
    'id', 'short_name', 'long_name', 'type', 'target_reserve', 'settlement_date', 'description', 'status',
]
AUCTION_CSV_SAMPLE_ROWS = [
    ['', 'Sample Auction', 'Sample Auction Long Name', 'timed', '1000', '2024-12-31', 'Sample description', 'planned'],
    ['1', 'Existing Auction', 'Update Existing Auction', 'live', '2000', '2024-12-31', 'Updated description', 'active'],
]


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def auction_list_create(request):
    """List auctions with filters or create a new auction"""
    client = get_backend_client(request)
    if request.method == 'GET':
        return Response(client.get('/api/auctions', params=query_filters(request, AUCTION_FILTERS)))

    serializer = AuctionSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = client.post('/api/auctions', json=serializer.validated_data)
    logger.info(f"Auction created by {request.user}: {serializer.validated_data.get('short_name')}")
    return Response(data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
def auction_detail(request, pk):
    """Retrieve, update or delete an auction"""
    client = get_backend_client(request)
    if request.method == 'GET':
        return Response(client.get(f'/api/auctions/{pk}'))
    elif request.method == 'PUT':
        serializer = AuctionSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        return Response(client.put(f'/api/auctions/{pk}', json=serializer.validated_data))
    else:  # DELETE
        data = client.delete(f'/api/auctions/{pk}')
        return Response(data or {'success': True, 'message': 'Auction deleted'})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def auction_status_counts(request):
    """Future / present / past auction counts, optionally for one brand"""
    client = get_backend_client(request)
    return Response(client.get('/api/auctions/counts/status', params=query_filters(request, ['brand_id'])))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def auction_brand_counts(request):
    client = get_backend_client(request)
    return Response(client.get('/api/auctions/counts/brands', params=query_filters(request, ['brand_ids'])))


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def auction_bulk_action(request):
    serializer = BulkActionSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    payload = {
        'action': serializer.validated_data['action'],
        'auction_ids': serializer.validated_data['ids'],
    }
    client = get_backend_client(request)
    return Response(client.post('/api/auctions/bulk-action', json=payload))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def auction_export_csv(request):
    client = get_backend_client(request)
    upstream = client.download('/api/auctions/export/csv', params=query_filters(request, AUCTION_FILTERS))
    return file_response(upstream, dated_filename('auctions-export'), 'text/csv')


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def auction_import_csv(request):
    """
    Import auctions from an uploaded CSV.

    Rows are parsed here (headers snake_cased) and posted as JSON; rows with an
    id update the existing auction.
    """
    rows = parse_csv_text(read_uploaded_csv(request), snake_case_headers=True)
    client = get_backend_client(request)
    data = client.post('/api/auctions/upload/csv', json={'csv_data': rows})
    logger.info(f"Auctions CSV imported by {request.user}: {len(rows)} rows")
    return Response(data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def auction_csv_template(request):
    return csv_response(build_csv(AUCTION_CSV_HEADERS, AUCTION_CSV_SAMPLE_ROWS), 'auctions_template.csv')


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def auction_invoices(request, pk):
    """Buyer or vendor invoices raised for one auction"""
    client = get_backend_client(request)
    params = query_filters(request, ['page', 'limit', 'type', 'brand_id'])
    return Response(client.get(f'/api/auctions/{pk}/invoices', params=params))


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def auction_import_eoa(request):
    """Forward an end-of-auction results file to the backend unchanged"""
    if not request.FILES:
        return Response({'error': 'An EOA file is required'}, status=status.HTTP_400_BAD_REQUEST)
    data, files = multipart_payload(request)
    client = get_backend_client(request)
    result = client.post('/api/auctions/import-eoa', data=data, files=files)
    logger.info(f"EOA imported by {request.user} for auction {data.get('auction_id')}")
    return Response(result)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def auction_export_eoa_csv(request, pk):
    client = get_backend_client(request)
    upstream = client.download(f'/api/invoices/export-eoa-csv/{pk}', method='POST')
    return file_response(upstream, dated_filename(f'auction-{pk}-eoa'), 'text/csv')


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def auction_generate_passed(request, pk):
    """Create a follow-up auction holding the unsold lots of auction `pk`"""
    serializer = GeneratePassedAuctionSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    client = get_backend_client(request)
    data = client.post(f'/api/auctions/{pk}/generate-passed', json=serializer.validated_data)
    return Response(data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def auction_export_platform(request, pk, platform):
    """Auction lots in a platform's upload CSV format"""
    if platform not in EXPORT_PLATFORMS:
        return Response({'error': f'Unsupported platform: {platform}'}, status=status.HTTP_400_BAD_REQUEST)
    client = get_backend_client(request)
    upstream = client.download(f'/api/auctions/{pk}/export/{platform}')
    return file_response(upstream, dated_filename(f'auction_{pk}_{platform}_export'), 'text/csv')


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def auction_export_images(request, pk, platform):
    """Lot images renamed for a platform, as a ZIP"""
    if platform not in IMAGE_EXPORT_PLATFORMS:
        return Response({'error': f'Unsupported platform: {platform}'}, status=status.HTTP_400_BAD_REQUEST)
    client = get_backend_client(request)
    upstream = client.download(f'/api/auctions/{pk}/export-images/{platform}', method='POST')
    return file_response(upstream, dated_filename(f'auction_{pk}_images_{platform}', 'zip'), 'application/zip')
