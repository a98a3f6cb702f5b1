import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backend.core.cache_utils import cached_query, LOOKUP_CACHE_TTL
from backend.core.proxy import query_filters, default_date_range, normalize_list_payload
from backend.core.upstream import get_backend_client
from .serializers import BankingTransactionSerializer, ReconcileSerializer

logger = logging.getLogger(__name__)

BANKING_FILTERS = [
    'status', 'type', 'bank_account', 'client_id', 'auction_id', 'is_reconciled', 'search',
    'page', 'limit', 'sort_field', 'sort_direction', 'date_from', 'date_to', 'brand_code',
]
STATS_FILTERS = ['bank_account', 'date_from', 'date_to', 'brand_code']


@cached_query(cache_ttl=LOOKUP_CACHE_TTL, key_prefix="bank_accounts")
def fetch_bank_accounts(token):
    return get_backend_client(token=token).get('/api/banking/accounts')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def banking_list_create(request):
    """
    List transactions or record a new one.

    Without both date bounds the list covers the last 30 days. The response is
    always {transactions, pagination}.
    """
    client = get_backend_client(request)
    if request.method == 'GET':
        filters = default_date_range(query_filters(request, BANKING_FILTERS))
        payload = client.get('/api/banking', params=filters)
        return Response(normalize_list_payload(payload, 'transactions'))

    serializer = BankingTransactionSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = client.post('/api/banking', json=serializer.validated_data)
    logger.info(f"Banking transaction recorded by {request.user}: {serializer.validated_data['type']} "
                f"{serializer.validated_data['amount']}")
    return Response(data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
def banking_detail(request, pk):
    """Retrieve, edit or delete a transaction"""
    client = get_backend_client(request)
    if request.method == 'GET':
        return Response(client.get(f'/api/banking/{pk}'))
    elif request.method == 'PUT':
        serializer = BankingTransactionSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        return Response(client.put(f'/api/banking/{pk}', json=serializer.validated_data))
    else:  # DELETE
        data = client.delete(f'/api/banking/{pk}')
        return Response(data or {'success': True, 'message': 'Transaction deleted'})


@api_view(['PUT'])
@permission_classes([IsAuthenticated])
def banking_reconcile(request, pk):
    serializer = ReconcileSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    client = get_backend_client(request)
    data = client.put(f'/api/banking/{pk}/reconcile', json=serializer.validated_data)
    logger.info(f"Banking transaction {pk} reconciled by {request.user}")
    return Response(data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def banking_stats(request):
    """Totals by status and type over the same default 30-day window"""
    client = get_backend_client(request)
    filters = default_date_range(query_filters(request, STATS_FILTERS))
    return Response(client.get('/api/banking/stats', params=filters))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def banking_accounts(request):
    return Response(fetch_bank_accounts(request.auth) or [])
