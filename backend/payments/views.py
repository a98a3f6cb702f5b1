import logging
from datetime import timedelta
from decimal import Decimal
from urllib.parse import quote

from django.conf import settings
from django.utils import timezone
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backend.core.permissions import HasAdminAccess
from backend.core.upstream import UpstreamError, get_backend_client
from .serializers import (
    StripeCredentialsSerializer, StripePaymentLinkSerializer, XeroCredentialsSerializer,
    XeroPaymentLinkSerializer, InvoicePaymentLinkSerializer,
)

logger = logging.getLogger(__name__)

XERO_ACCOUNT_CODE = '200'
XERO_TAX_TYPE = 'NONE'
PAYMENT_CURRENCY = 'GBP'
FALLBACK_LINK_DAYS = 30


# Stripe

@api_view(['GET'])
@permission_classes([IsAuthenticated])
def stripe_credentials(request, brand_id):
    """{configured, ...} for one brand; secrets are masked by the backend"""
    client = get_backend_client(request)
    return Response(client.get(f'/api/stripe-payments/credentials/{brand_id}'))


@api_view(['POST'])
@permission_classes([HasAdminAccess])
def stripe_save_credentials(request):
    serializer = StripeCredentialsSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    client = get_backend_client(request)
    data = client.post('/api/stripe-payments/save-credentials', json=serializer.validated_data)
    logger.info(f"Stripe credentials saved by {request.user} for brand {serializer.validated_data['brandId']}")
    return Response(data)


@api_view(['POST'])
@permission_classes([HasAdminAccess])
def stripe_test_connection(request, brand_id):
    client = get_backend_client(request)
    return Response(client.post(f'/api/stripe-payments/test-connection/{brand_id}'))


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def stripe_create_payment_link(request):
    serializer = StripePaymentLinkSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    client = get_backend_client(request)
    data = client.post('/api/stripe-payments/create-payment-link', json=serializer.validated_data)
    logger.info(f"Stripe payment link created by {request.user}: {serializer.validated_data['amount']}")
    return Response(data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def stripe_payment_status(request, brand_id, payment_id):
    client = get_backend_client(request)
    return Response(client.get(f'/api/stripe-payments/payment-status/{brand_id}/{payment_id}'))


# Xero

@api_view(['GET'])
@permission_classes([HasAdminAccess])
def xero_auth_url(request, brand_id):
    """OAuth consent URL to connect a brand's Xero organisation"""
    client = get_backend_client(request)
    return Response(client.get(f'/api/xero-payments/auth-url/{brand_id}'))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def xero_credentials(request, brand_id):
    client = get_backend_client(request)
    return Response(client.get(f'/api/xero-payments/credentials/{brand_id}'))


@api_view(['POST'])
@permission_classes([HasAdminAccess])
def xero_save_credentials(request):
    serializer = XeroCredentialsSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    client = get_backend_client(request)
    data = client.post('/api/xero-payments/save-credentials', json=serializer.validated_data)
    logger.info(f"Xero credentials saved by {request.user} for brand {serializer.validated_data['brandId']}")
    return Response(data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def xero_create_payment_link(request):
    serializer = XeroPaymentLinkSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    client = get_backend_client(request)
    return Response(client.post('/api/xero-payments/create-payment-link', json=serializer.validated_data))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def xero_invoice_status(request, brand_id, invoice_id):
    client = get_backend_client(request)
    return Response(client.get(f'/api/xero-payments/invoice-status/{brand_id}/{invoice_id}'))


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def xero_refresh_token(request, brand_id):
    client = get_backend_client(request)
    return Response(client.post(f'/api/xero-payments/refresh-token/{brand_id}'))


def format_amount(amount):
    """150.0 -> '150', 99.5 -> '99.5'"""
    return format(Decimal(str(amount)).normalize(), 'f')


def fallback_payment_link(invoice_number, amount, customer_email='', due_date=''):
    """Local payment page used when Xero cannot issue a link"""
    base_url = getattr(settings, 'PUBLIC_BASE_URL', 'http://localhost:3000').rstrip('/')
    payment_url = (
        f"{base_url}/payment/{quote(invoice_number)}"
        f"?amount={format_amount(amount)}&email={quote(customer_email or '', safe='')}&due={due_date or ''}"
    )
    return {
        'paymentUrl': payment_url,
        'onlineInvoiceUrl': payment_url,
        'invoiceId': invoice_number,
        'amount': amount,
        'currency': PAYMENT_CURRENCY,
        'status': 'pending',
        'expiresAt': (timezone.now() + timedelta(days=FALLBACK_LINK_DAYS)).isoformat(),
        'fallback': True,
        'error': 'Xero integration not available, using fallback payment system',
    }


def create_xero_invoice_link(client, params):
    """
    Raise a Xero invoice and fetch its online payment link.

    Raises:
        UpstreamError: if either call fails or the invoice comes back without an id
    """
    line_items = params.get('lineItems') or [{
        'description': f"Payment for Invoice {params['invoiceNumber']}",
        'quantity': 1,
        'unitAmount': params['amount'],
        'accountCode': XERO_ACCOUNT_CODE,
        'taxType': XERO_TAX_TYPE,
    }]
    invoice_data = {
        'contactName': params['customerName'],
        'contactEmail': params.get('customerEmail'),
        'invoiceNumber': params['invoiceNumber'],
        'reference': f"Invoice {params['invoiceNumber']}",
        'lineItems': line_items,
        'dueDate': params.get('dueDate'),
        'currency': PAYMENT_CURRENCY,
    }
    created = client.post('/api/xero/invoices', json=invoice_data) or {}
    invoice = created.get('invoice') or {}
    if not invoice.get('invoiceId'):
        raise UpstreamError('Xero did not return an invoice id')

    linked = client.post(f"/api/xero/invoices/{invoice['invoiceId']}/payment-link") or {}
    payment_link = dict(linked.get('paymentLink') or {})
    payment_link.update({
        'invoiceNumber': invoice.get('invoiceNumber', params['invoiceNumber']),
        'xeroInvoiceId': invoice['invoiceId'],
    })
    return payment_link


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def invoice_payment_link(request):
    """
    Payment link for an auction invoice.

    Tries Xero first (invoice, then online payment URL). When Xero is not
    available the buyer gets a link to the local payment page instead, flagged
    with fallback=true and a warning.
    """
    serializer = InvoicePaymentLinkSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    params = serializer.validated_data
    client = get_backend_client(request)

    try:
        payment_link = create_xero_invoice_link(client, params)
    except UpstreamError as e:
        logger.warning(f"Xero payment link failed for invoice {params['invoiceNumber']}, using fallback: {e}")
        return Response({
            'success': True,
            'paymentLink': fallback_payment_link(
                params['invoiceNumber'], params['amount'], params.get('customerEmail'), params.get('dueDate'),
            ),
            'warning': 'Using fallback payment system',
        })

    logger.info(f"Xero payment link created for invoice {params['invoiceNumber']} by {request.user}")
    return Response({'success': True, 'paymentLink': payment_link})
