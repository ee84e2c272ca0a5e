"""Public order API serializers.

What the customer sees of a request, and the payloads of the view/confirm
and selection endpoints.
"""

from rest_framework import serializers

from service_requests.models import RequestItem, ServiceRequest
from public_orders.selection import SelectionState
from public_orders.workflow import STEPS


def _single_bundle(values):
    if len(values) > 1:
        raise serializers.ValidationError("Only one bundle can be selected.")
    return values


class CustomerOrderSerializer(serializers.Serializer):
    """Payload of POST /public/orders/<slug>/view/."""

    selected_items = serializers.ListField(child=serializers.UUIDField())
    selected_addons = serializers.ListField(child=serializers.UUIDField(), required=False, default=list)
    selected_bundles = serializers.ListField(child=serializers.UUIDField(), required=False, default=list)
    status = serializers.ChoiceField(
        choices=[ServiceRequest.Status.VIEWED, ServiceRequest.Status.CONFIRMED], required=False
    )

    def validate_selected_bundles(self, value):
        return _single_bundle(value)

    def to_state(self) -> SelectionState:
        data = self.validated_data
        bundles = data.get("selected_bundles") or []
        return SelectionState.of(data["selected_items"], data.get("selected_addons") or [], bundles[0] if bundles else None)


class SelectionUpdateSerializer(serializers.Serializer):
    """Changes the stored selection.

    ``items``, ``addons`` and ``bundle`` replace those parts outright; the
    ``toggle_*`` fields then flip single entries the way tapping a card does.
    Toggling the selected bundle clears it, toggling another one replaces it.
    """

    items = serializers.ListField(child=serializers.UUIDField(), required=False)
    addons = serializers.ListField(child=serializers.UUIDField(), required=False)
    bundle = serializers.UUIDField(required=False, allow_null=True)
    toggle_items = serializers.ListField(child=serializers.UUIDField(), required=False, default=list)
    toggle_addons = serializers.ListField(child=serializers.UUIDField(), required=False, default=list)
    toggle_bundle = serializers.UUIDField(required=False, allow_null=True, default=None)

    def apply(self, state: SelectionState) -> SelectionState:
        data = self.validated_data
        result = SelectionState.of(
            data["items"] if "items" in data else state.items,
            data["addons"] if "addons" in data else state.addons,
            data["bundle"] if "bundle" in data else state.bundle,
        )
        for item_id in data["toggle_items"]:
            result.toggle_item(item_id)
        for addon_id in data["toggle_addons"]:
            result.toggle_addon(addon_id)
        if data["toggle_bundle"] is not None:
            result.toggle_bundle(data["toggle_bundle"])
        return result


class StepQuerySerializer(serializers.Serializer):
    step = serializers.ChoiceField(choices=STEPS, default=STEPS[0])


class PublicItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = RequestItem
        fields = ["id", "section", "label", "price_paise", "is_suggested", "is_selected"]


class PublicRequestSerializer(serializers.ModelSerializer):
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
        ]
