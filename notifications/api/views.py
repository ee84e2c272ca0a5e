"""Notifications API views.

POST /api/webhooks/send-whatsapp/ proxies a send request to the automation
webhook and reports the classified outcome.
"""

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from notifications.services import OrderNotification, send_order_notification
from .serializers import SendWhatsAppSerializer

REQUIRED_FIELDS = "phone, customerName, bikeName, orderId, orderKey"


def delivery_response(result):
    """HTTP response for a DeliveryResult."""
    if result.success:
        return Response(
            {
                "success": True,
                "message": result.message,
                "data": {
                    "whatsappMessageId": result.message_id,
                    "whatsappStatus": result.whatsapp_status,
                    "fullResponse": result.raw,
                },
            },
            status=status.HTTP_200_OK,
        )
    body = {"error": "Failed to send WhatsApp message", "details": result.message}
    if result.http_status == status.HTTP_504_GATEWAY_TIMEOUT:
        body = {"error": "WhatsApp send timeout", "details": "The WhatsApp service took too long to respond. Please try again."}
    elif result.http_status == status.HTTP_503_SERVICE_UNAVAILABLE:
        body = {"error": "Network error", "details": result.message}
    elif result.raw:
        body["rawError"] = result.raw
    return Response(body, status=result.http_status)


class SendWhatsAppAPIView(APIView):
    def post(self, request):
        serializer = SendWhatsAppSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {"error": f"Missing required fields: {REQUIRED_FIELDS}", "details": serializer.errors},
                status=status.HTTP_400_BAD_REQUEST,
            )
        data = serializer.validated_data
        notification = OrderNotification(
            phone=data["phone"],
            customer_name=data["customerName"],
            bike_name=data["bikeName"],
            order_id=data["orderId"],
            order_key=data["orderKey"],
        )
        return delivery_response(send_order_notification(notification))
