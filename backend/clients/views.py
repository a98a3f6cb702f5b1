import logging
import re

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backend.core.csv_utils import build_csv, read_uploaded_csv
from backend.core.proxy import query_filters, apply_brand_scope, unwrap_data, dated_filename, file_response, csv_response
from backend.core.upstream import get_backend_client
from .serializers import ClientSerializer, ClientBulkActionSerializer, ClientImportSerializer

logger = logging.getLogger(__name__)

CLIENT_FILTERS = [
    'status', 'search', 'page', 'limit', 'sort_field', 'sort_direction', 'brand_code',
    'client_type', 'tags', 'platform', 'registration_date',
]

DEFAULT_DISPLAY_PREFIX = 'MSA'
DISPLAY_ID_PATTERN = re.compile(r'^(?:[a-zA-Z]{2,4}-)?(\d+)$')

CLIENT_CSV_HEADERS = [
    'id', 'full_name', 'brand', 'platform', 'email', 'phone_number', 'company_name', 'instagram_url', 'role',
    'client_type', 'vat_number', 'tags', 'billing_country', 'billing_city', 'identity_cert', 'title',
    'salutation', 'birth_date', 'preferred_language', 'time_zone', 'has_no_email', 'vat_applicable',
    'secondary_email', 'secondary_phone_number', 'default_vat_scheme', 'default_ldl',
    'default_consignment_charges', 'billing_address1', 'billing_address2', 'billing_address3',
    'billing_post_code', 'billing_region', 'shipping_same_as_billing', 'shipping_address1', 'shipping_address2',
    'shipping_address3', 'shipping_city', 'shipping_post_code', 'shipping_country', 'shipping_region', 'paddle_no',
]

CLIENT_CSV_SAMPLE_ROWS = [
    {'id': '1', 'full_name': 'Adnan Amjad', 'brand': 'MSABER', 'platform': 'Private', 'phone_number': '92(321)2119000',
     'billing_address1': '1723 Garrison Dr Frisco, Texas 75033-7358, United states'},
    {'id': '2', 'full_name': 'Tarun Jain', 'brand': 'MSABER', 'platform': 'Private', 'phone_number': '(917)7210426',
     'billing_address1': '900 park ave suite-4E New york, new york 10075-0231 united states'},
]


def format_client_display(client):
    """
    Display id such as MSA-007: first three letters of the brand code and the
    id padded to three digits. 'Unknown' for clients without an id.
    """
    if not client.get('id'):
        return 'Unknown'
    brand = (client.get('brand_code') or client.get('brand') or '').strip()
    prefix = brand[:3].upper() if brand else DEFAULT_DISPLAY_PREFIX
    return f"{prefix}-{str(client['id']).zfill(3)}"


def client_display_name(client):
    full_name = f"{client.get('first_name') or ''} {client.get('last_name') or ''}".strip()
    if client.get('company_name'):
        return f"{full_name} ({client['company_name']})"
    return full_name


def with_display_fields(client):
    if not isinstance(client, dict):
        return client
    return {**client, 'display_id': format_client_display(client), 'display_name': client_display_name(client)}


def annotate_clients(payload):
    """Add display_id and display_name to the client(s) in a backend payload"""
    if isinstance(payload, dict) and 'data' in payload:
        data = payload['data']
        if isinstance(data, list):
            return {**payload, 'data': [with_display_fields(client) for client in data]}
        return {**payload, 'data': with_display_fields(data)}
    if isinstance(payload, list):
        return [with_display_fields(client) for client in payload]
    return payload


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def client_list_create(request):
    """
    List clients with filters or create a new client.

    New clients are created in the caller's brand unless brand_code is given.
    """
    client = get_backend_client(request)
    if request.method == 'GET':
        return Response(annotate_clients(client.get('/api/clients', params=query_filters(request, CLIENT_FILTERS))))

    serializer = ClientSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    payload = apply_brand_scope(request, serializer.validated_data)
    data = client.post('/api/clients', json=payload)
    logger.info(f"Client created by {request.user}: {payload['first_name']} {payload['last_name']}")
    return Response(annotate_clients(data), status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
def client_detail(request, pk):
    """Retrieve, update or delete a client; ?hard_delete=true removes it permanently"""
    client = get_backend_client(request)
    if request.method == 'GET':
        return Response(annotate_clients(client.get(f'/api/clients/{pk}')))
    elif request.method == 'PUT':
        serializer = ClientSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        return Response(annotate_clients(client.put(f'/api/clients/{pk}', json=serializer.validated_data)))
    else:  # DELETE
        hard_delete = request.query_params.get('hard_delete') == 'true'
        data = client.delete(f'/api/clients/{pk}', params={'hard_delete': True} if hard_delete else None)
        logger.info(f"Client {pk} deleted by {request.user} (hard={hard_delete})")
        return Response(data or {'success': True, 'message': 'Client deleted'})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def client_overview(request, pk):
    """Purchases, consignments, invoices and logistics of one client"""
    client = get_backend_client(request)
    return Response(client.get(f'/api/clients/{pk}/overview'))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def client_lookup(request, display_id):
    """
    Find a client by display id (MSA-123 or 123), falling back to a search
    over active clients.
    """
    client = get_backend_client(request)
    match = DISPLAY_ID_PATTERN.match(display_id.strip())
    if match:
        found = unwrap_data(client.get(f'/api/clients/{int(match.group(1))}'))
    else:
        results = unwrap_data(client.get('/api/clients', params={'search': display_id, 'limit': 1, 'status': 'active'}))
        found = results[0] if results else None

    if not found:
        return Response({'error': f'Client not found: {display_id}'}, status=status.HTTP_404_NOT_FOUND)
    return Response({'success': True, 'data': with_display_fields(found)})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def client_bulk_action(request):
    serializer = ClientBulkActionSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    payload = {
        'action': serializer.validated_data['action'],
        'client_ids': serializer.validated_data['ids'],
    }
    if serializer.validated_data.get('data'):
        payload['data'] = serializer.validated_data['data']
    client = get_backend_client(request)
    data = client.post('/api/clients/bulk-action', json=payload)
    logger.info(f"Client bulk {payload['action']} by {request.user}: {len(payload['client_ids'])} clients")
    return Response(data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def client_export_csv(request):
    client = get_backend_client(request)
    upstream = client.download('/api/clients/export/csv', params=query_filters(request, CLIENT_FILTERS))
    return file_response(upstream, dated_filename('clients-export'), 'text/csv')


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def client_import_csv(request):
    """
    Import clients from CSV text or an uploaded file.

    The backend splits full_name and reports existing and duplicate emails;
    validate_only asks it to check the rows without saving.
    """
    serializer = ClientImportSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    text = read_uploaded_csv(request)
    endpoint = '/api/clients/validate-csv' if serializer.validated_data['validate_only'] else '/api/clients/upload-csv'
    client = get_backend_client(request)
    data = client.post(endpoint, json={'csv_data': text})
    if not serializer.validated_data['validate_only']:
        logger.info(f"Clients CSV imported by {request.user}: {(data or {}).get('imported_count', 0)} clients")
    return Response(data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def client_csv_template(request):
    return csv_response(build_csv(CLIENT_CSV_HEADERS, CLIENT_CSV_SAMPLE_ROWS), 'clients-sample.csv')
