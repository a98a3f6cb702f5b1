import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backend.core.permissions import HasAdminAccess
from backend.core.proxy import query_filters, apply_brand_scope, normalize_list_payload
from backend.core.upstream import get_backend_client
from .serializers import (
    APPROVAL_STAGES, ReimbursementSerializer, ReimbursementApprovalSerializer, CompletePaymentSerializer,
)

logger = logging.getLogger(__name__)

REIMBURSEMENT_FILTERS = [
    'status', 'category', 'priority', 'requested_by', 'approval_stage', 'search', 'page', 'limit',
    'sort_field', 'sort_direction', 'date_from', 'date_to', 'brand_code',
]


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def reimbursement_list_create(request):
    """
    List staff expense claims or submit a new one.

    Listing and creation are scoped to one brand like refunds.
    """
    client = get_backend_client(request)
    if request.method == 'GET':
        filters = apply_brand_scope(request, query_filters(request, REIMBURSEMENT_FILTERS))
        payload = client.get('/api/reimbursements', params=filters)
        return Response(normalize_list_payload(payload, 'reimbursements'))

    serializer = ReimbursementSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    payload = apply_brand_scope(request, serializer.validated_data)
    data = client.post('/api/reimbursements', json=payload)
    logger.info(f"Reimbursement created by {request.user}: {payload['category']} {payload['total_amount']}")
    return Response(data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def reimbursement_pending_approvals(request):
    client = get_backend_client(request)
    return Response(client.get('/api/reimbursements/pending-approvals'))


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
def reimbursement_detail(request, pk):
    client = get_backend_client(request)
    if request.method == 'GET':
        return Response(client.get(f'/api/reimbursements/{pk}'))
    elif request.method == 'PUT':
        serializer = ReimbursementSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        return Response(client.put(f'/api/reimbursements/{pk}', json=serializer.validated_data))
    else:  # DELETE
        data = client.delete(f'/api/reimbursements/{pk}')
        return Response(data or {'success': True, 'message': 'Reimbursement deleted'})


@api_view(['PUT'])
@permission_classes([HasAdminAccess])
def reimbursement_approve(request, pk, stage):
    """
    Record one approval stage: director1, director2 or accountant.

    approved=false rejects the claim at that stage.
    """
    if stage not in APPROVAL_STAGES:
        return Response({'error': f'Unknown approval stage: {stage}'}, status=status.HTTP_404_NOT_FOUND)
    serializer = ReimbursementApprovalSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    client = get_backend_client(request)
    data = client.put(f'/api/reimbursements/{pk}/approve-{stage}', json=serializer.validated_data)
    verdict = 'approved' if serializer.validated_data['approved'] else 'rejected'
    logger.info(f"Reimbursement {pk} {verdict} at {stage} stage by {request.user}")
    return Response(data)


@api_view(['PUT'])
@permission_classes([HasAdminAccess])
def reimbursement_complete_payment(request, pk):
    serializer = CompletePaymentSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    client = get_backend_client(request)
    data = client.put(f'/api/reimbursements/{pk}/complete-payment', json=serializer.validated_data)
    logger.info(f"Reimbursement {pk} paid by {request.user}: {serializer.validated_data['payment_reference']}")
    return Response(data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def reimbursement_stats(request):
    client = get_backend_client(request)
    filters = apply_brand_scope(request, query_filters(request, ['brand_code', 'category', 'date_from', 'date_to']))
    return Response(client.get('/api/reimbursements/stats', params=filters))
