from rest_framework import serializers

from backend.core.serializers import PassthroughSerializer

GALLERY_TYPES = ['commercial', 'museum', 'institution', 'private', 'cooperative']
GALLERY_STATUSES = ['active', 'inactive', 'archived']


class GallerySerializer(PassthroughSerializer):
    name = serializers.CharField(max_length=255)
    gallery_type = serializers.ChoiceField(choices=GALLERY_TYPES, required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=GALLERY_STATUSES, required=False)
    email = serializers.EmailField(required=False, allow_blank=True, allow_null=True)
    website = serializers.URLField(required=False, allow_blank=True, allow_null=True)
    founded_year = serializers.IntegerField(required=False, allow_null=True, min_value=0, max_value=2100)

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Gallery name is required')
        return value


class GalleryAIGenerateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    location = serializers.CharField(required=False, allow_blank=True, max_length=255)
