import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backend.core.csv_utils import build_csv, parse_csv_text, read_uploaded_csv
from backend.core.proxy import query_filters, normalize_list_payload, dated_filename, file_response, csv_response
from backend.core.serializers import BulkActionSerializer
from backend.core.upstream import get_backend_client
from . import shipping
from .serializers import LogisticsEntrySerializer, ShippingQuoteSerializer

logger = logging.getLogger(__name__)

LOGISTICS_FILTERS = [
    'status', 'destination_type', 'client_id', 'item_id', 'consignment_id', 'search',
    'page', 'limit', 'sort_field', 'sort_direction',
]
CALCULATE_PARAMS = ['height_inches', 'width_inches', 'length_inches', 'weight_kg', 'destination_type', 'item_value']

# Friendly template headers and their raw field names both map to the field
LOGISTICS_CSV_FIELD_MAPPING = {
    'reference number': 'reference_number',
    'reference_number': 'reference_number',
    'description': 'description',
    'height (in)': 'height_inches',
    'height_inches': 'height_inches',
    'width (in)': 'width_inches',
    'width_inches': 'width_inches',
    'length (in)': 'length_inches',
    'length_inches': 'length_inches',
    'weight (kg)': 'weight_kg',
    'weight_kg': 'weight_kg',
    'destination type': 'destination_type',
    'destination_type': 'destination_type',
    'country': 'destination_country',
    'destination_country': 'destination_country',
    'address': 'destination_address',
    'destination_address': 'destination_address',
    'item value': 'item_value',
    'item_value': 'item_value',
    'status': 'status',
    'tracking number': 'tracking_number',
    'tracking_number': 'tracking_number',
}

LOGISTICS_CSV_HEADERS = [
    'Reference Number', 'Description', 'Height (in)', 'Width (in)', 'Length (in)', 'Weight (kg)',
    'Destination Type', 'Country', 'Address', 'Item Value', 'Status', 'Tracking Number',
]
LOGISTICS_CSV_SAMPLE_ROWS = [
    ['LOG-2024-001', 'Sample shipment', '24', '18', '2', '5.5', 'within_uk', 'United Kingdom', 'London', '750',
     'pending', ''],
    ['LOG-2024-002', 'International shipment', '36', '24', '12', '25', 'outside_uk', 'United States', 'New York',
     '2500', 'pending', ''],
]


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def logistics_list_create(request):
    """List shipments as {logistics, pagination} or create one"""
    client = get_backend_client(request)
    if request.method == 'GET':
        payload = client.get('/api/logistics', params=query_filters(request, LOGISTICS_FILTERS))
        return Response(normalize_list_payload(payload, 'logistics'))

    serializer = LogisticsEntrySerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = client.post('/api/logistics', json=serializer.validated_data)
    logger.info(f"Logistics entry created by {request.user}: {serializer.validated_data['reference_number']}")
    return Response(data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
def logistics_detail(request, pk):
    client = get_backend_client(request)
    if request.method == 'GET':
        return Response(client.get(f'/api/logistics/{pk}'))
    elif request.method == 'PUT':
        serializer = LogisticsEntrySerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        return Response(client.put(f'/api/logistics/{pk}', json=serializer.validated_data))
    else:  # DELETE
        data = client.delete(f'/api/logistics/{pk}')
        return Response(data or {'success': True, 'message': 'Logistics entry deleted'})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logistics_bulk_action(request):
    serializer = BulkActionSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    client = get_backend_client(request)
    return Response(client.post('/api/logistics/bulk-action', json=serializer.validated_data))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def logistics_export_csv(request):
    client = get_backend_client(request)
    upstream = client.download('/api/logistics/export/csv', params=query_filters(request, LOGISTICS_FILTERS))
    return file_response(upstream, dated_filename('logistics-export'), 'text/csv')


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logistics_import_csv(request):
    """
    Import shipments from CSV.

    Accepts the template's friendly headers ("Height (in)", "Country") or the
    raw field names; unknown headers pass through lowercased.
    """
    rows = parse_csv_text(read_uploaded_csv(request), field_mapping=LOGISTICS_CSV_FIELD_MAPPING)
    client = get_backend_client(request)
    data = client.post('/api/logistics/import/csv', json={'csvData': rows})
    logger.info(f"Logistics CSV imported by {request.user}: {len(rows)} rows")
    return Response(data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def logistics_csv_template(request):
    return csv_response(build_csv(LOGISTICS_CSV_HEADERS, LOGISTICS_CSV_SAMPLE_ROWS), 'logistics_template.csv')


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def logistics_calculate(request):
    """Backend-configured shipping, insurance and VAT charges for one entry"""
    missing = [name for name in CALCULATE_PARAMS if not request.query_params.get(name)]
    if missing:
        return Response({'error': f"Missing parameters: {', '.join(missing)}"}, status=status.HTTP_400_BAD_REQUEST)
    client = get_backend_client(request)
    return Response(client.get('/api/logistics/calculate', params=query_filters(request, CALCULATE_PARAMS)))


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logistics_shipping_quote(request):
    """
    Evri courier quote computed locally.

    Each package is converted to cm (plus packaging unless disabled); the
    invoiced charge is five times the courier cost.
    """
    serializer = ShippingQuoteSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    params = serializer.validated_data

    items = []
    for package in params['packages']:
        if params['include_packaging']:
            item = shipping.packaged_item_from_inches(
                package['length_inches'], package['width_inches'], package['height_inches'], package.get('weight_kg'),
            )
        else:
            item = {
                'length': shipping.inches_to_cm(package['length_inches']),
                'width': shipping.inches_to_cm(package['width_inches']),
                'height': shipping.inches_to_cm(package['height_inches']),
                'weight': shipping.to_decimal(package.get('weight_kg')),
            }
        items.append(item)

    destination = params['destination_type']
    country = params.get('country') or None
    weight = shipping.total_billable_weight(items)
    if destination == 'within_uk':
        tier, courier_cost = shipping.uk_weight_tier(weight)
    else:
        tier, courier_cost = None, shipping.international_shipping_cost(items, country)

    return Response({
        'destination_type': destination,
        'country': country,
        'billable_weight_kg': shipping.round_money(weight),
        'tier': tier,
        'courier_cost': shipping.round_money(courier_cost),
        'shipping_charge': shipping.shipping_invoice_cost(items, destination, country),
    })
