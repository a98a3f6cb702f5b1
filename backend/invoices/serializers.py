from rest_framework import serializers

from backend.core.constants import AUCTION_PLATFORMS
from backend.core.serializers import PassthroughSerializer
from .pricing import VAT_CODE_RATES

INVOICE_STATUSES = ['paid', 'unpaid', 'cancelled']
INVOICE_TYPES = ['buyer', 'vendor']
PDF_TYPES = ['internal', 'final']


class InvoiceUpdateSerializer(PassthroughSerializer):
    status = serializers.ChoiceField(choices=INVOICE_STATUSES, required=False)
    type = serializers.ChoiceField(choices=INVOICE_TYPES, required=False)
    hammer_price = serializers.FloatField(required=False, allow_null=True, min_value=0)
    buyers_premium = serializers.FloatField(required=False, allow_null=True, min_value=0)
    paid_amount = serializers.FloatField(required=False, allow_null=True, min_value=0)
    buyer_email = serializers.EmailField(required=False, allow_blank=True)


class GenerateInvoiceSerializer(serializers.Serializer):
    auction_id = serializers.IntegerField(min_value=1)


class InvoicePDFSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=PDF_TYPES, default='final')
    brand_id = serializers.IntegerField(required=False, allow_null=True)


class ShippingPaymentLinkSerializer(serializers.Serializer):
    shippingAmount = serializers.FloatField(min_value=0.01)
    customerEmail = serializers.EmailField(required=False, allow_blank=True)


class QuoteItemSerializer(serializers.Serializer):
    hammer_price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    vat_code = serializers.CharField(required=False, allow_blank=True, max_length=1)
    dimensions = serializers.CharField(required=False, allow_blank=True)
    premium_rate = serializers.DecimalField(max_digits=5, decimal_places=4, required=False, allow_null=True,
                                            min_value=0, max_value=1)
    platform = serializers.ChoiceField(choices=AUCTION_PLATFORMS, required=False)

    def validate_vat_code(self, value):
        value = value.upper()
        if value and value not in VAT_CODE_RATES:
            raise serializers.ValidationError(f'Unknown VAT code: {value}')
        return value


class InvoiceQuoteSerializer(serializers.Serializer):
    """Local price breakdown for a set of lots"""
    items = QuoteItemSerializer(many=True, allow_empty=False)
    destination = serializers.ChoiceField(choices=['within_uk', 'international'], default='within_uk')
    include_insurance = serializers.BooleanField(default=True)
