import logging

from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from backend.core.csv_utils import build_csv, parse_csv_text, read_uploaded_csv
from backend.core.proxy import query_filters, dated_filename, file_response, csv_response
from backend.core.serializers import BulkActionSerializer
from backend.core.upstream import get_backend_client
from .serializers import (
    ConsignmentSerializer, ArtworkIdsSerializer, PresaleInvoiceSerializer,
    CollectionReceiptSerializer, CustomReportSerializer,
)

logger = logging.getLogger(__name__)

CONSIGNMENT_FILTERS = [
    'status', 'client_id', 'specialist_id', 'search', 'page', 'limit',
    'sort_field', 'sort_direction', 'brand_code',
]

CONSIGNMENT_CSV_HEADERS = [
    'client_email', 'specialist_id', 'online_valuation_reference', 'default_vendor_commission', 'status',
]
CONSIGNMENT_CSV_SAMPLE_ROWS = [
    ['client@example.com', 'specialist1', 'REF001', '20', 'active'],
]


def pdf_response(upstream, filename):
    return file_response(upstream, filename, 'application/pdf')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def consignment_list_create(request):
    """List consignments with filters or create a new consignment"""
    client = get_backend_client(request)
    if request.method == 'GET':
        return Response(client.get('/api/consignments', params=query_filters(request, CONSIGNMENT_FILTERS)))

    serializer = ConsignmentSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = client.post('/api/consignments', json=serializer.validated_data)
    logger.info(f"Consignment created by {request.user} for client {serializer.validated_data['client_id']}")
    return Response(data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
def consignment_detail(request, pk):
    """Retrieve, update or delete a consignment"""
    client = get_backend_client(request)
    if request.method == 'GET':
        return Response(client.get(f'/api/consignments/{pk}'))
    elif request.method == 'PUT':
        serializer = ConsignmentSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        return Response(client.put(f'/api/consignments/{pk}', json=serializer.validated_data))
    else:  # DELETE
        data = client.delete(f'/api/consignments/{pk}')
        return Response(data or {'success': True, 'message': 'Consignment deleted'})


@api_view(['POST', 'DELETE'])
@permission_classes([IsAuthenticated])
def consignment_artworks(request, pk):
    """POST adds artworks to the consignment, DELETE removes them"""
    serializer = ArtworkIdsSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    client = get_backend_client(request)
    if request.method == 'POST':
        data = client.post(f'/api/consignments/{pk}/add-artworks', json=serializer.validated_data)
    else:
        data = client.request('DELETE', f'/api/consignments/{pk}/remove-artworks', json=serializer.validated_data)
    return Response(data or {'success': True})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def consignment_bulk_action(request):
    serializer = BulkActionSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    payload = {
        'action': serializer.validated_data['action'],
        'consignment_ids': serializer.validated_data['ids'],
    }
    client = get_backend_client(request)
    return Response(client.post('/api/consignments/bulk-action', json=payload))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def consignment_export_csv(request):
    client = get_backend_client(request)
    upstream = client.download('/api/consignments/export/csv', params=query_filters(request, CONSIGNMENT_FILTERS))
    return file_response(upstream, dated_filename('consignments-export'), 'text/csv')


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def consignment_import_csv(request):
    """Parse an uploaded consignments CSV and post its rows as JSON"""
    rows = parse_csv_text(read_uploaded_csv(request), snake_case_headers=True)
    client = get_backend_client(request)
    data = client.post('/api/consignments/upload/csv', json={'csv_data': rows})
    logger.info(f"Consignments CSV imported by {request.user}: {len(rows)} rows")
    return Response(data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def consignment_csv_template(request):
    return csv_response(build_csv(CONSIGNMENT_CSV_HEADERS, CONSIGNMENT_CSV_SAMPLE_ROWS), 'consignments_template.csv')


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def consignment_presale_options(request, pk):
    """Auctions the consignment's lots are entered in, with estimate totals"""
    client = get_backend_client(request)
    return Response(client.get(f'/api/consignments/{pk}/presale-options'))


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def consignment_receipt_pdf(request, pk):
    client = get_backend_client(request)
    upstream = client.download(f'/api/consignments/{pk}/receipt-pdf', method='POST', json={})
    return pdf_response(upstream, f'consignment-receipt-{pk}.pdf')


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def consignment_presale_invoice_pdf(request, pk, auction_id=None):
    """Pre-sale invoice for all unreturned lots, or only those in one auction"""
    serializer = PresaleInvoiceSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    client = get_backend_client(request)
    if auction_id:
        endpoint = f'/api/consignments/{pk}/presale-invoice-pdf/{auction_id}'
        filename = f'presale-invoice-{pk}-auction-{auction_id}.pdf'
    else:
        endpoint = f'/api/consignments/{pk}/presale-invoice-pdf'
        filename = f'presale-invoice-{pk}.pdf'
    upstream = client.download(endpoint, method='POST', json=serializer.validated_data)
    return pdf_response(upstream, filename)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def consignment_collection_receipt_pdf(request, pk):
    serializer = CollectionReceiptSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    client = get_backend_client(request)
    upstream = client.download(f'/api/consignments/{pk}/collection-receipt-pdf', method='POST',
                               json=serializer.validated_data)
    return pdf_response(upstream, f'collection-receipt-{pk}.pdf')


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def consignment_custom_report_pdf(request):
    """Report over a selection of consignments in one of the report templates"""
    serializer = CustomReportSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    payload = dict(serializer.validated_data)
    if 'userRole' not in request.data:
        payload['userRole'] = getattr(request.user, 'role', None) or 'user'
    client = get_backend_client(request)
    upstream = client.download('/api/consignments/custom-report-pdf', method='POST', json=payload)
    return pdf_response(upstream, f"consignment-{payload['template']}-report.pdf")


PUBLIC_DOCUMENTS = {
    'receipt': ('receipt-pdf', 'consignment-receipt'),
    'presale-invoice': ('presale-invoice-pdf', 'presale-invoice'),
    'collection-receipt': ('collection-receipt-pdf', 'collection-receipt'),
}


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def public_consignment_pdf(request, pk, document):
    """Client-facing PDFs; the backend checks the link, no staff token is sent"""
    if document not in PUBLIC_DOCUMENTS:
        return Response({'error': f'Unknown document: {document}'}, status=status.HTTP_404_NOT_FOUND)
    endpoint, prefix = PUBLIC_DOCUMENTS[document]
    client = get_backend_client(token='')
    upstream = client.download(f'/api/public/consignments/{pk}/{endpoint}', method='POST',
                               json=dict(request.data.items()))
    return pdf_response(upstream, f'{prefix}-{pk}.pdf')
