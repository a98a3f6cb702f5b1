from rest_framework import serializers

from backend.core.constants import ITEM_PLATFORMS
from backend.core.serializers import PassthroughSerializer


class BankAccountSerializer(serializers.Serializer):
    account_name = serializers.CharField()
    uk_info = serializers.DictField(required=False)
    international_info = serializers.DictField(required=False)


class BrandComplianceSerializer(PassthroughSerializer):
    contact_email = serializers.EmailField(required=False, allow_blank=True)
    website_url = serializers.URLField(required=False, allow_blank=True)
    company_registration = serializers.CharField(required=False, allow_blank=True, max_length=100)
    vat_number = serializers.CharField(required=False, allow_blank=True, max_length=50)
    eori_number = serializers.CharField(required=False, allow_blank=True, max_length=50)
    bank_accounts = BankAccountSerializer(many=True, required=False)


class PlatformCredentialSerializer(serializers.Serializer):
    brand_code = serializers.CharField(max_length=20)
    platform = serializers.ChoiceField(choices=[p for p in ITEM_PLATFORMS if p != 'database'])
    key_id = serializers.CharField(required=False, allow_blank=True)
    secret_value = serializers.CharField(required=False, allow_blank=True, write_only=True)
    additional = serializers.DictField(required=False, allow_null=True)
    is_active = serializers.BooleanField(required=False)


class PlatformTestSerializer(serializers.Serializer):
    brand_code = serializers.CharField(max_length=20)
    platform = serializers.ChoiceField(choices=[p for p in ITEM_PLATFORMS if p != 'database'])
