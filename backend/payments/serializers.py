from rest_framework import serializers


class StripeCredentialsSerializer(serializers.Serializer):
    brandId = serializers.CharField()
    publishableKey = serializers.CharField()
    secretKey = serializers.CharField()
    webhookSecret = serializers.CharField(required=False, allow_blank=True)


class StripePaymentLinkSerializer(serializers.Serializer):
    brandId = serializers.CharField()
    amount = serializers.FloatField(min_value=0.01)
    title = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True)


class XeroCredentialsSerializer(serializers.Serializer):
    brandId = serializers.CharField()
    clientId = serializers.CharField()
    clientSecret = serializers.CharField()


class XeroPaymentLinkSerializer(serializers.Serializer):
    brandId = serializers.CharField()
    amount = serializers.FloatField(min_value=0.01)
    description = serializers.CharField()
    customerEmail = serializers.EmailField(required=False, allow_blank=True)


class XeroLineItemSerializer(serializers.Serializer):
    description = serializers.CharField()
    quantity = serializers.FloatField(min_value=0, default=1)
    unitAmount = serializers.FloatField()
    accountCode = serializers.CharField(default='200')
    taxType = serializers.CharField(default='NONE')


class InvoicePaymentLinkSerializer(serializers.Serializer):
    invoiceNumber = serializers.CharField(max_length=50)
    amount = serializers.FloatField(min_value=0.01)
    customerName = serializers.CharField(max_length=255)
    customerEmail = serializers.EmailField(required=False, allow_blank=True)
    dueDate = serializers.CharField(required=False, allow_blank=True)
    lineItems = XeroLineItemSerializer(many=True, required=False)
