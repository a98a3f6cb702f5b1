from rest_framework import serializers

from backend.core.serializers import PassthroughSerializer


class SchoolSerializer(PassthroughSerializer):
    name = serializers.CharField(max_length=255)
    founded_year = serializers.IntegerField(required=False, allow_null=True, min_value=0, max_value=2100)
    closed_year = serializers.IntegerField(required=False, allow_null=True, min_value=0, max_value=2100)
    country = serializers.CharField(required=False, allow_blank=True, max_length=100)
    school_type = serializers.CharField(required=False, allow_blank=True, max_length=100)
    status = serializers.ChoiceField(choices=['active', 'inactive', 'archived'], required=False)

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('School name is required')
        return value

    def validate(self, attrs):
        founded = attrs.get('founded_year')
        closed = attrs.get('closed_year')
        if founded and closed and closed < founded:
            raise serializers.ValidationError({'closed_year': 'Closed year cannot be before founded year'})
        return attrs
