from rest_framework import serializers

from backend.core.serializers import PassthroughSerializer

ARTIST_STATUSES = ['active', 'inactive', 'archived']


class ArtistSerializer(PassthroughSerializer):
    name = serializers.CharField(max_length=255)
    birth_year = serializers.IntegerField(required=False, allow_null=True, min_value=0, max_value=2100)
    death_year = serializers.IntegerField(required=False, allow_null=True, min_value=0, max_value=2100)
    nationality = serializers.CharField(required=False, allow_blank=True, max_length=100)
    art_movement = serializers.CharField(required=False, allow_blank=True, max_length=255)
    status = serializers.ChoiceField(choices=ARTIST_STATUSES, required=False)
    is_verified = serializers.BooleanField(required=False)

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Artist name is required')
        return value

    def validate(self, attrs):
        birth_year = attrs.get('birth_year')
        death_year = attrs.get('death_year')
        if birth_year and death_year and death_year < birth_year:
            raise serializers.ValidationError({'death_year': 'Death year cannot be before birth year'})
        return attrs


class AIGenerateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
