from rest_framework import serializers


class SendWhatsAppSerializer(serializers.Serializer):
    """Input of the webhook proxy; every field is required."""

    phone = serializers.CharField(max_length=20)
    customerName = serializers.CharField(max_length=200)
    bikeName = serializers.CharField(max_length=200)
    orderId = serializers.CharField(max_length=100)
    orderKey = serializers.CharField(max_length=100)
