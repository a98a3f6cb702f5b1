from rest_framework import serializers

from backend.core.constants import BRAND_CODES
from backend.core.serializers import PassthroughSerializer
from backend.invoices.pricing import round_money

REIMBURSEMENT_CATEGORIES = [
    'food', 'fuel', 'internal_logistics', 'international_logistics', 'stationary',
    'travel', 'accommodation', 'other',
]
REIMBURSEMENT_PAYMENT_METHODS = ['cash', 'card', 'bank_transfer', 'other']
REIMBURSEMENT_PRIORITIES = ['low', 'normal', 'high', 'urgent']
REIMBURSEMENT_STATUSES = [
    'pending', 'director1_approved', 'director2_approved', 'accountant_approved',
    'completed', 'rejected', 'cancelled',
]
APPROVAL_STAGES = ['director1', 'director2', 'accountant']

# UK VAT
DEFAULT_TAX_RATE = 0.20


class ReimbursementSerializer(PassthroughSerializer):
    title = serializers.CharField(max_length=255)
    description = serializers.CharField()
    total_amount = serializers.FloatField(min_value=0.01)
    category = serializers.ChoiceField(choices=REIMBURSEMENT_CATEGORIES)
    payment_method = serializers.ChoiceField(choices=REIMBURSEMENT_PAYMENT_METHODS)
    payment_date = serializers.DateField()
    purpose = serializers.CharField()
    tax_rate = serializers.FloatField(required=False, min_value=0, max_value=1)
    tax_amount = serializers.FloatField(required=False, min_value=0)
    priority = serializers.ChoiceField(choices=REIMBURSEMENT_PRIORITIES, required=False)
    status = serializers.ChoiceField(choices=REIMBURSEMENT_STATUSES, required=False)
    brand_code = serializers.ChoiceField(choices=BRAND_CODES, required=False)

    def validate_title(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Title is required')
        return value

    def validate(self, attrs):
        """
        Fill tax_amount from total_amount * tax_rate when it is not given, and
        net_amount as the total less tax. Partial updates without a
        total_amount are left alone.
        """
        if 'payment_date' in attrs:
            attrs['payment_date'] = attrs['payment_date'].isoformat()
        total = attrs.get('total_amount')
        if total is None:
            return attrs
        tax_rate = attrs.setdefault('tax_rate', DEFAULT_TAX_RATE)
        if attrs.get('tax_amount') is None:
            attrs['tax_amount'] = float(round_money(total * tax_rate))
        if attrs['tax_amount'] > total:
            raise serializers.ValidationError({'tax_amount': 'Tax cannot exceed the total amount'})
        attrs['net_amount'] = float(round_money(total - attrs['tax_amount']))
        return attrs


class ReimbursementApprovalSerializer(serializers.Serializer):
    approved = serializers.BooleanField()
    comments = serializers.CharField(required=False, allow_blank=True)
    payment_reference = serializers.CharField(required=False, allow_blank=True, max_length=255)


class CompletePaymentSerializer(serializers.Serializer):
    payment_reference = serializers.CharField(max_length=255)
