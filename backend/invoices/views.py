import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backend.core.proxy import query_filters, file_response, unwrap_data
from backend.core.upstream import get_backend_client
from . import pricing
from .serializers import (
    InvoiceUpdateSerializer, GenerateInvoiceSerializer, InvoicePDFSerializer,
    ShippingPaymentLinkSerializer, InvoiceQuoteSerializer,
)

logger = logging.getLogger(__name__)

INVOICE_FILTERS = ['auction_id', 'client_id', 'status', 'type', 'brand_code', 'search', 'page', 'limit']


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def invoice_list(request):
    client = get_backend_client(request)
    return Response(client.get('/api/invoices', params=query_filters(request, INVOICE_FILTERS)))


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
def invoice_detail(request, pk):
    """Retrieve, update or delete an invoice"""
    client = get_backend_client(request)
    if request.method == 'GET':
        return Response(client.get(f'/api/invoices/{pk}'))
    elif request.method == 'PUT':
        serializer = InvoiceUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        return Response(client.put(f'/api/invoices/{pk}', json=serializer.validated_data))
    else:  # DELETE
        data = client.delete(f'/api/invoices/{pk}')
        return Response(data or {'success': True, 'message': 'Invoice deleted'})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def invoice_generate(request):
    """Raise invoices for an auction's sold lots"""
    serializer = GenerateInvoiceSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    client = get_backend_client(request)
    data = client.post('/api/invoices/generate', json=serializer.validated_data)
    logger.info(f"Invoices generated by {request.user} for auction {serializer.validated_data['auction_id']}")
    return Response(unwrap_data(data), status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def invoice_pdf(request, pk):
    serializer = InvoicePDFSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    client = get_backend_client(request)
    upstream = client.download(f'/api/invoices/{pk}/pdf', method='POST', json=serializer.validated_data)
    return file_response(upstream, f'invoice-{pk}.pdf', 'application/pdf')


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def invoice_public_url(request, pk):
    """Shareable link the buyer can open without logging in"""
    client = get_backend_client(request)
    return Response(client.post(f'/api/invoices/{pk}/generate-public-url'))


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def invoice_shipping_payment_link(request, pk):
    serializer = ShippingPaymentLinkSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    client = get_backend_client(request)
    data = client.post(f'/api/invoices/{pk}/create-shipping-payment-link', json=serializer.validated_data)
    logger.info(f"Shipping payment link created for invoice {pk}: {serializer.validated_data['shippingAmount']}")
    return Response(data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def invoice_payment_status(request, pk):
    client = get_backend_client(request)
    return Response(client.get(f'/api/invoices/{pk}/payment-status'))


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def invoice_quote(request):
    """
    Price a set of lots locally.

    Returns a per-lot breakdown (premium, VAT, total) plus shipping for every
    lot whose dimensions parse, and insurance on the goods total.
    """
    serializer = InvoiceQuoteSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    params = serializer.validated_data
    destination = params['destination']

    lines = []
    artworks = []
    goods_total = pricing.to_decimal(0)
    for item in params['items']:
        hammer_price = item['hammer_price']
        premium = pricing.calculate_buyers_premium(hammer_price, item.get('premium_rate'))
        premium_vat, _ = pricing.calculate_vat(premium, 'V')
        item_vat, vat_rate = pricing.calculate_vat(hammer_price, item.get('vat_code'))
        line_total = pricing.calculate_item_total({
            'hammer_price': hammer_price,
            'premium_rate': item.get('premium_rate'),
            'vat_code': item.get('vat_code'),
        })
        goods_total += line_total

        dimensions = pricing.parse_dimensions(item.get('dimensions'))
        if dimensions:
            artworks.append(dimensions)

        line = {
            'hammer_price': pricing.round_money(hammer_price),
            'buyers_premium': pricing.round_money(premium),
            'premium_vat': pricing.round_money(premium_vat),
            'vat_rate': vat_rate,
            'item_vat': pricing.round_money(item_vat),
            'total': pricing.round_money(line_total),
        }
        # Platform commission is charged to the house, not added to the buyer's total
        if item.get('platform') == 'liveauctioneers':
            line['platform_commission'] = pricing.round_money(
                pricing.calculate_live_auctioneer_commission(hammer_price)
            )
        lines.append(line)

    shipping = pricing.calculate_shipping_cost(destination, artworks) if artworks else pricing.round_money(0)
    insurance = pricing.to_decimal(0)
    if params['include_insurance']:
        region = 'UK' if destination == 'within_uk' else 'International'
        insurance = pricing.calculate_insurance_cost(goods_total, region)

    grand_total = goods_total + shipping + insurance
    return Response({
        'items': lines,
        'shipping': shipping,
        'insurance': pricing.round_money(insurance),
        'total': pricing.round_money(grand_total),
        'formatted_total': pricing.format_currency(grand_total),
    })
