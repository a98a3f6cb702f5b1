from rest_framework import serializers

from backend.core.serializers import PassthroughSerializer

TRANSACTION_TYPES = ['deposit', 'withdrawal', 'transfer', 'payment', 'refund', 'fee', 'commission']
PAYMENT_METHODS = ['bank_transfer', 'credit_card', 'debit_card', 'cheque', 'cash', 'paypal', 'stripe']
TRANSACTION_STATUSES = ['pending', 'cleared', 'failed', 'cancelled', 'reconciled']


class BankingTransactionSerializer(PassthroughSerializer):
    type = serializers.ChoiceField(choices=TRANSACTION_TYPES)
    description = serializers.CharField(max_length=500)
    amount = serializers.FloatField()
    payment_method = serializers.ChoiceField(choices=PAYMENT_METHODS)
    transaction_date = serializers.CharField(max_length=30)
    currency = serializers.CharField(max_length=3, required=False)
    status = serializers.ChoiceField(choices=TRANSACTION_STATUSES, required=False)
    exchange_rate = serializers.FloatField(required=False, min_value=0)
    bank_fees = serializers.FloatField(required=False, min_value=0)
    processing_fees = serializers.FloatField(required=False, min_value=0)

    def validate_amount(self, value):
        if value == 0:
            raise serializers.ValidationError('Amount cannot be zero')
        return value

    def validate_currency(self, value):
        return value.upper()


class ReconcileSerializer(serializers.Serializer):
    reconciled_balance = serializers.FloatField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)
