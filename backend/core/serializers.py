from rest_framework import serializers


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)
    remember = serializers.BooleanField(default=False)


class BulkActionSerializer(serializers.Serializer):
    """Bulk action over a list of ids; the id field name differs per resource"""
    action = serializers.CharField(max_length=50)
    ids = serializers.ListField(child=serializers.CharField(), allow_empty=False)
    data = serializers.DictField(required=False, allow_null=True)


class PassthroughSerializer(serializers.Serializer):
    """
    Validates declared fields and keeps every other submitted key.

    The backend owns the schema; the gateway only enforces basic form rules.
    """

    def to_internal_value(self, data):
        validated = super().to_internal_value(data)
        extras = {key: value for key, value in data.items() if key not in self.fields}
        extras.update(validated)
        return extras
