from rest_framework import serializers

from backend.core.constants import ITEM_PLATFORMS
from backend.core.serializers import PassthroughSerializer

ITEM_STATUSES = ['draft', 'active', 'sold', 'withdrawn', 'passed', 'returned']


class ItemSerializer(PassthroughSerializer):
    title = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True)
    lot_num = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=10)
    low_est = serializers.FloatField(required=False, allow_null=True, min_value=0)
    high_est = serializers.FloatField(required=False, allow_null=True, min_value=0)
    start_price = serializers.FloatField(required=False, allow_null=True, min_value=0)
    reserve = serializers.FloatField(required=False, allow_null=True, min_value=0)
    status = serializers.ChoiceField(choices=ITEM_STATUSES, required=False)

    def validate_title(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Title is required')
        return value

    def validate(self, attrs):
        low_est = attrs.get('low_est')
        high_est = attrs.get('high_est')
        if low_est is not None and high_est is not None and high_est < low_est:
            raise serializers.ValidationError({'high_est': 'High estimate cannot be below low estimate'})
        return attrs


class CSVUploadSerializer(serializers.Serializer):
    csvData = serializers.CharField()
    platform = serializers.ChoiceField(choices=ITEM_PLATFORMS, default='database')
    validateOnly = serializers.BooleanField(default=False)
    drive_folder_url = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class DetectDuplicatesSerializer(PassthroughSerializer):
    brand_code = serializers.CharField(required=False, allow_blank=True)
    similarity_threshold = serializers.FloatField(required=False, min_value=0, max_value=1)
    check_range = serializers.ChoiceField(
        choices=['all', 'last_30_days', 'last_7_days', 'custom'], required=False,
    )
    status_filter = serializers.ListField(child=serializers.CharField(), required=False)


class ImagePairSerializer(serializers.Serializer):
    id = serializers.CharField(required=False)
    url1 = serializers.CharField()
    url2 = serializers.CharField()


class CompareImagesSerializer(serializers.Serializer):
    """Either url1/url2 for a single comparison or `pairs` for a batch"""
    url1 = serializers.CharField(required=False)
    url2 = serializers.CharField(required=False)
    pairs = ImagePairSerializer(many=True, required=False)
    threshold = serializers.FloatField(required=False, min_value=0, max_value=1)
    resize_to_same_size = serializers.BooleanField(default=True)
    max_dimension = serializers.IntegerField(required=False, min_value=1)
    concurrency = serializers.IntegerField(required=False, min_value=1, max_value=10)

    def validate(self, attrs):
        if not attrs.get('pairs') and not (attrs.get('url1') and attrs.get('url2')):
            raise serializers.ValidationError('Provide url1 and url2, or a list of pairs')
        pair_ids = [pair['id'] for pair in attrs.get('pairs') or [] if pair.get('id')]
        if len(pair_ids) != len(set(pair_ids)):
            raise serializers.ValidationError({'pairs': 'Pair ids must be unique'})
        return attrs
