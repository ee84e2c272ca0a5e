"""Catalog API serializers.

Serializers for add-ons, service bundles and the La Carte settings
singleton. Prices are integer paise; bundles carry an ordered list of
feature bullet points.
"""

from rest_framework import serializers

from ..models import Addon, LaCarteSettings, ServiceBundle

MAX_PRICE_PAISE = 10_000_000


# --------------------------- helpers (pure functions) ---------------------------

def _clean_bullet_points(points):
    if not isinstance(points, list):
        raise serializers.ValidationError("Must be an array of strings.")
    if any(not isinstance(p, str) for p in points):
        raise serializers.ValidationError("All bullet points must be strings.")
    cleaned = [p.strip() for p in points]
    if any(not p for p in cleaned):
        raise serializers.ValidationError("Bullet points must not be empty.")
    return cleaned


# --------------------------------- serializers ---------------------------------

class AddonSerializer(serializers.ModelSerializer):
    name = serializers.CharField(max_length=200)
    price_paise = serializers.IntegerField(min_value=0, max_value=MAX_PRICE_PAISE)

    class Meta:
        model = Addon
        fields = ["id", "name", "description", "price_paise", "is_active", "display_order", "created_at"]
        read_only_fields = ["id", "created_at"]
        extra_kwargs = {"description": {"required": False, "allow_null": True, "allow_blank": True}}


class ServiceBundleSerializer(serializers.ModelSerializer):
    """Bundle with its bullet points (order preserved)."""

    name = serializers.CharField(max_length=200)
    price_paise = serializers.IntegerField(min_value=0, max_value=MAX_PRICE_PAISE)
    bullet_points = serializers.JSONField(required=False)

    class Meta:
        model = ServiceBundle
        fields = [
            "id",
            "name",
            "description",
            "price_paise",
            "bullet_points",
            "is_active",
            "display_order",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]
        extra_kwargs = {"description": {"required": False, "allow_null": True, "allow_blank": True}}

    def validate_bullet_points(self, value):
        return _clean_bullet_points(value)


class LaCarteSettingsSerializer(serializers.ModelSerializer):
    real_price_paise = serializers.IntegerField(min_value=0, max_value=MAX_PRICE_PAISE)
    current_price_paise = serializers.IntegerField(min_value=0, max_value=MAX_PRICE_PAISE)

    class Meta:
        model = LaCarteSettings
        fields = ["id", "real_price_paise", "current_price_paise", "discount_note", "is_active", "updated_at"]
        read_only_fields = ["id", "updated_at"]
        extra_kwargs = {"discount_note": {"required": False, "allow_blank": True}}
