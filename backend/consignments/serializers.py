from rest_framework import serializers

from backend.core.constants import CONSIGNMENT_STATUSES
from backend.core.serializers import PassthroughSerializer

REPORT_TEMPLATES = ['summary', 'detailed', 'financial', 'custom']


class ConsignmentSerializer(PassthroughSerializer):
    client_id = serializers.IntegerField(min_value=1)
    specialist_id = serializers.IntegerField(required=False, allow_null=True)
    status = serializers.ChoiceField(choices=CONSIGNMENT_STATUSES, required=False)
    default_vendor_commission = serializers.FloatField(required=False, allow_null=True, min_value=0, max_value=100)
    reference_commission = serializers.FloatField(required=False, allow_null=True, min_value=0, max_value=100)
    is_signed = serializers.BooleanField(required=False)


class ArtworkIdsSerializer(serializers.Serializer):
    artwork_ids = serializers.ListField(child=serializers.IntegerField(), allow_empty=False)


class PresaleInvoiceSerializer(serializers.Serializer):
    sale_details = serializers.DictField(required=False, default=dict)


class CollectionReceiptSerializer(serializers.Serializer):
    returned_items = serializers.ListField(child=serializers.DictField(), allow_empty=False)
    collection_date = serializers.CharField(required=False, allow_blank=True)
    collected_by = serializers.CharField(required=False, allow_blank=True, max_length=255)
    released_by = serializers.CharField(required=False, allow_blank=True, max_length=255)


class CustomReportSerializer(serializers.Serializer):
    consignments = serializers.ListField(child=serializers.DictField(), allow_empty=False)
    template = serializers.ChoiceField(choices=REPORT_TEMPLATES, default='summary')
    customization = serializers.DictField(required=False)
    userRole = serializers.CharField(required=False, default='user')
