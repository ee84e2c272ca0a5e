"""Service requests API serializers.

Input serializers validate the admin creation form (request header plus
repair and replacement lines); output serializers render requests with
their items and reconciled totals.
"""

from rest_framework import serializers

from common.utils import generate_order_id, is_valid_phone_number, normalize_intl_phone
from service_requests.models import RequestItem, ServiceRequest
from service_requests.totals import calculate_request_totals

MAX_PRICE_PAISE = 10_000_000


# ------------------------------------ input ------------------------------------

class RequestSerializer(serializers.Serializer):
    """Request header as entered by the admin."""

    order_id = serializers.CharField(min_length=1, max_length=100, required=False, default=generate_order_id)
    bike_name = serializers.CharField(min_length=1, max_length=200)
    customer_name = serializers.CharField(min_length=1, max_length=200)
    phone_digits_intl = serializers.CharField()
    status = serializers.ChoiceField(choices=ServiceRequest.Status.choices, default=ServiceRequest.Status.SENT)
    lacarte_paise = serializers.IntegerField(
        min_value=0, max_value=MAX_PRICE_PAISE, required=False, allow_null=True, default=None
    )

    def validate_phone_digits_intl(self, value):
        if not is_valid_phone_number(value):
            raise serializers.ValidationError("Phone number must be 10 to 15 digits, digits only.")
        return normalize_intl_phone(value)


class RequestItemSerializer(serializers.Serializer):
    section = serializers.ChoiceField(choices=RequestItem.Section.choices, required=False)
    label = serializers.CharField(min_length=1, max_length=500)
    price_paise = serializers.IntegerField(min_value=1, max_value=MAX_PRICE_PAISE)
    is_suggested = serializers.BooleanField(default=True)


class CreateRequestSerializer(serializers.Serializer):
    request = RequestSerializer()
    repair_items = RequestItemSerializer(many=True, required=False, default=list)
    replacement_items = RequestItemSerializer(many=True, required=False, default=list)

    def validated_items(self, key):
        """Item dicts ready for the model (section comes from the list they were in)."""
        return [
            {k: v for k, v in item.items() if k != "section"}
            for item in self.validated_data.get(key) or []
        ]


class RequestStatusPatchSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=ServiceRequest.Status.choices)


class WhatsAppStatusSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    whatsappMessageId = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    whatsappError = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class ExportQuerySerializer(serializers.Serializer):
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    include_details = serializers.BooleanField(default=True)
    include_pricing = serializers.BooleanField(default=True)

    def validate(self, attrs):
        if attrs["start_date"] > attrs["end_date"]:
            raise serializers.ValidationError({"end_date": "End date must not be before start date."})
        return attrs


# ------------------------------------ output -----------------------------------

class RequestItemOutputSerializer(serializers.ModelSerializer):
    class Meta:
        model = RequestItem
        fields = ["id", "section", "label", "price_paise", "is_suggested", "is_selected"]


class ServiceRequestOutputSerializer(serializers.ModelSerializer):
    """Request with items; totals are reconciled against the La Carte charge.

    Pass ``lacarte_paise`` in the context to avoid reading the settings row
    once per request.
    """

    request_items = RequestItemOutputSerializer(source="items", many=True, read_only=True)
    total_items = serializers.SerializerMethodField()
    orderUrl = serializers.CharField(source="public_url", read_only=True)
    whatsappUrl = serializers.CharField(source="whatsapp_share_url", read_only=True)

    class Meta:
        model = ServiceRequest
        fields = [
            "id",
            "order_id",
            "short_slug",
            "bike_name",
            "customer_name",
            "phone_digits_intl",
            "status",
            "subtotal_paise",
            "tax_paise",
            "total_paise",
            "lacarte_paise",
            "created_at",
            "sent_at",
            "viewed_at",
            "confirmed_at",
            "whatsapp_message_id",
            "whatsapp_sent_at",
            "whatsapp_error",
            "request_items",
            "total_items",
            "orderUrl",
            "whatsappUrl",
        ]

    def get_total_items(self, obj):
        return len(obj.items.all())

    def to_representation(self, instance):
        data = super().to_representation(instance)
        fallback = self.context.get("lacarte_paise")
        if fallback is None:
            fallback = instance.effective_lacarte_paise()
        items = None if instance.status == ServiceRequest.Status.CONFIRMED else data["request_items"]
        totals = calculate_request_totals(instance, items=items, fallback_lacarte_paise=fallback)
        data["subtotal_paise"] = totals.subtotal_paise
        data["total_paise"] = totals.total_paise
        data["la_carte_applied"] = totals.la_carte_applied
        return data
