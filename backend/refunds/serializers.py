from rest_framework import serializers

from backend.core.constants import BRAND_CODES
from backend.core.serializers import PassthroughSerializer

REFUND_TYPES = [
    'refund_of_artwork', 'refund_of_courier_difference', 'item_return', 'overpayment',
    'cancelled_sale', 'damaged_item', 'other',
]
REFUND_METHODS = ['bank_transfer', 'credit_card', 'cheque', 'cash', 'store_credit']
REFUND_STATUSES = ['pending', 'approved', 'processing', 'completed', 'cancelled', 'failed']


class RefundSerializer(PassthroughSerializer):
    type = serializers.ChoiceField(choices=REFUND_TYPES)
    reason = serializers.CharField()
    amount = serializers.FloatField(min_value=0.01)
    refund_method = serializers.ChoiceField(choices=REFUND_METHODS)
    status = serializers.ChoiceField(choices=REFUND_STATUSES, required=False)
    item_ids = serializers.ListField(child=serializers.CharField(), required=False)
    brand_code = serializers.ChoiceField(choices=BRAND_CODES, required=False)


class ApproveRefundSerializer(serializers.Serializer):
    comments = serializers.CharField(required=False, allow_blank=True)


class ProcessRefundSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=['processing', 'completed'])
    refund_date = serializers.CharField(required=False, allow_blank=True)
    payment_reference = serializers.CharField(required=False, allow_blank=True, max_length=255)
