from rest_framework import serializers

from backend.core.serializers import PassthroughSerializer

DESTINATION_TYPES = ['within_uk', 'outside_uk']
LOGISTICS_STATUSES = ['pending', 'in_transit', 'delivered', 'cancelled']


class LogisticsEntrySerializer(PassthroughSerializer):
    reference_number = serializers.CharField(max_length=100)
    description = serializers.CharField(required=False, allow_blank=True)
    height_inches = serializers.FloatField(min_value=0)
    width_inches = serializers.FloatField(min_value=0)
    length_inches = serializers.FloatField(min_value=0)
    weight_kg = serializers.FloatField(min_value=0)
    destination_type = serializers.ChoiceField(choices=DESTINATION_TYPES)
    destination_country = serializers.CharField(required=False, allow_blank=True)
    destination_address = serializers.CharField(required=False, allow_blank=True)
    item_value = serializers.FloatField(min_value=0, required=False)
    status = serializers.ChoiceField(choices=LOGISTICS_STATUSES, required=False)
    tracking_number = serializers.CharField(required=False, allow_blank=True)


class PackageSerializer(serializers.Serializer):
    length_inches = serializers.DecimalField(max_digits=8, decimal_places=2, min_value=0)
    width_inches = serializers.DecimalField(max_digits=8, decimal_places=2, min_value=0)
    height_inches = serializers.DecimalField(max_digits=8, decimal_places=2, min_value=0)
    weight_kg = serializers.DecimalField(max_digits=8, decimal_places=3, min_value=0, required=False)


class ShippingQuoteSerializer(serializers.Serializer):
    packages = PackageSerializer(many=True, allow_empty=False)
    destination_type = serializers.ChoiceField(choices=DESTINATION_TYPES)
    country = serializers.CharField(required=False, allow_blank=True)
    include_packaging = serializers.BooleanField(default=True)

    def validate(self, attrs):
        if attrs['destination_type'] == 'outside_uk' and not attrs.get('country'):
            raise serializers.ValidationError({'country': 'Country is required for international shipments.'})
        return attrs
