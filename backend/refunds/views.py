import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backend.core.permissions import HasAdminAccess
from backend.core.proxy import query_filters, apply_brand_scope, normalize_list_payload
from backend.core.upstream import get_backend_client
from .serializers import RefundSerializer, ApproveRefundSerializer, ProcessRefundSerializer

logger = logging.getLogger(__name__)

REFUND_FILTERS = [
    'status', 'type', 'client_id', 'auction_id', 'search', 'page', 'limit',
    'sort_field', 'sort_direction', 'brand_code',
]


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def refund_list_create(request):
    """
    List refunds or create one.

    Staff below super admin only ever see one brand: the requested brand_code,
    else their own brand, else the default brand.
    """
    client = get_backend_client(request)
    if request.method == 'GET':
        filters = apply_brand_scope(request, query_filters(request, REFUND_FILTERS))
        payload = client.get('/api/refunds', params=filters)
        return Response(normalize_list_payload(payload, 'refunds'))

    serializer = RefundSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    payload = apply_brand_scope(request, serializer.validated_data)
    data = client.post('/api/refunds', json=payload)
    logger.info(f"Refund created by {request.user}: {payload['type']} {payload['amount']}")
    return Response(data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
def refund_detail(request, pk):
    client = get_backend_client(request)
    if request.method == 'GET':
        return Response(client.get(f'/api/refunds/{pk}'))
    elif request.method == 'PUT':
        serializer = RefundSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        return Response(client.put(f'/api/refunds/{pk}', json=serializer.validated_data))
    else:  # DELETE
        data = client.delete(f'/api/refunds/{pk}')
        return Response(data or {'success': True, 'message': 'Refund deleted'})


@api_view(['PUT'])
@permission_classes([HasAdminAccess])
def refund_approve(request, pk):
    serializer = ApproveRefundSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    client = get_backend_client(request)
    data = client.put(f'/api/refunds/{pk}/approve', json=serializer.validated_data)
    logger.info(f"Refund {pk} approved by {request.user}")
    return Response(data)


@api_view(['PUT'])
@permission_classes([HasAdminAccess])
def refund_process(request, pk):
    """Mark an approved refund as processing or completed"""
    serializer = ProcessRefundSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    client = get_backend_client(request)
    return Response(client.put(f'/api/refunds/{pk}/process', json=serializer.validated_data))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def refund_stats(request):
    client = get_backend_client(request)
    filters = apply_brand_scope(request, query_filters(request, ['brand_code', 'date_from', 'date_to']))
    return Response(client.get('/api/refunds/stats', params=filters))
