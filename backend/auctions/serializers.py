from rest_framework import serializers

from backend.core.constants import (
    AUCTION_TYPES, AUCTION_SUBTYPES, AUCTION_STATUSES, SORTING_MODES, ESTIMATES_VISIBILITY,
)
from backend.core.serializers import PassthroughSerializer


class AuctionSerializer(PassthroughSerializer):
    short_name = serializers.CharField(max_length=100)
    long_name = serializers.CharField(max_length=255)
    type = serializers.ChoiceField(choices=AUCTION_TYPES)
    subtype = serializers.ChoiceField(choices=AUCTION_SUBTYPES, required=False, allow_null=True)
    status = serializers.ChoiceField(choices=AUCTION_STATUSES, required=False)
    target_reserve = serializers.FloatField(required=False, allow_null=True, min_value=0)
    settlement_date = serializers.CharField(max_length=30)
    sorting_mode = serializers.ChoiceField(choices=SORTING_MODES, required=False)
    estimates_visibility = serializers.ChoiceField(choices=ESTIMATES_VISIBILITY, required=False)
    artwork_ids = serializers.ListField(child=serializers.IntegerField(), required=False)

    def validate_short_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Short name is required')
        return value


class GeneratePassedAuctionSerializer(serializers.Serializer):
    subtype = serializers.ChoiceField(choices=AUCTION_SUBTYPES)
    short_name = serializers.CharField(required=False, max_length=100)
    long_name = serializers.CharField(required=False, max_length=255)
