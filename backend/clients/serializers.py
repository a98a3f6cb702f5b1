from rest_framework import serializers

from backend.core.constants import BRAND_CODES
from backend.core.serializers import PassthroughSerializer

CLIENT_TYPES = ['buyer', 'vendor', 'supplier', 'buyer_vendor']
CLIENT_STATUSES = ['active', 'suspended', 'pending', 'deleted', 'archived']
CLIENT_PLATFORMS = ['Liveauctioneer', 'The saleroom', 'Invaluable', 'Easylive auctions', 'Private', 'Others']
CLIENT_BULK_ACTIONS = ['delete', 'update_status']

ADDRESS_FIELDS = ['address1', 'address2', 'address3', 'city', 'post_code', 'country', 'region']

# Optional fields the backend rejects as empty strings
BLANK_TO_NONE_FIELDS = ['instagram_url', 'birth_date']


class ClientSerializer(PassthroughSerializer):
    first_name = serializers.CharField(max_length=100)
    last_name = serializers.CharField(max_length=100)
    email = serializers.EmailField(required=False, allow_blank=True, allow_null=True)
    secondary_email = serializers.EmailField(required=False, allow_blank=True, allow_null=True)
    client_type = serializers.ChoiceField(choices=CLIENT_TYPES, required=False)
    status = serializers.ChoiceField(choices=CLIENT_STATUSES, required=False)
    platform = serializers.ChoiceField(choices=CLIENT_PLATFORMS, required=False, allow_blank=True)
    brand_code = serializers.ChoiceField(choices=BRAND_CODES, required=False)
    buyer_premium = serializers.FloatField(required=False, allow_null=True, min_value=0, max_value=100)
    vendor_premium = serializers.FloatField(required=False, allow_null=True, min_value=0, max_value=100)
    has_no_email = serializers.BooleanField(required=False)
    shipping_same_as_billing = serializers.BooleanField(required=False)

    def validate_first_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('First name is required')
        return value

    def validate_last_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Last name is required')
        return value

    def validate(self, attrs):
        for field in BLANK_TO_NONE_FIELDS:
            if attrs.get(field) == '':
                attrs[field] = None
        if attrs.get('shipping_same_as_billing'):
            for field in ADDRESS_FIELDS:
                if f'billing_{field}' in attrs:
                    attrs[f'shipping_{field}'] = attrs[f'billing_{field}']
        return attrs


class ClientBulkActionSerializer(serializers.Serializer):
    action = serializers.ChoiceField(choices=CLIENT_BULK_ACTIONS)
    ids = serializers.ListField(child=serializers.IntegerField(min_value=1), allow_empty=False)
    data = serializers.DictField(required=False, allow_null=True)

    def validate(self, attrs):
        if attrs['action'] == 'update_status':
            new_status = (attrs.get('data') or {}).get('status')
            if new_status not in CLIENT_STATUSES:
                raise serializers.ValidationError({'data': 'A valid status is required for update_status'})
        return attrs


class ClientImportSerializer(serializers.Serializer):
    validate_only = serializers.BooleanField(default=False)
