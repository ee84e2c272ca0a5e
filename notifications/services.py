"""Order notifications over WhatsApp.

``send_order_notification`` builds the automation payload, calls the webhook
and classifies every outcome into a DeliveryResult whose ``http_status`` is
what the proxy endpoint answers with.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from django.conf import settings

from .client import WebhookClient, WebhookNotConfigured, WebhookTimeout, WebhookUnreachable, response_body
from .responses import DeliveryResult, interpret_response, upstream_error_message

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderNotification:
    phone: str
    customer_name: str
    bike_name: str
    order_id: str
    order_key: str

    @classmethod
    def for_request(cls, service_request) -> "OrderNotification":
        return cls(
            phone=service_request.phone_digits_intl,
            customer_name=service_request.customer_name,
            bike_name=service_request.bike_name,
            order_id=service_request.order_id,
            order_key=service_request.short_slug,
        )

    def payload(self) -> dict:
        phone = self.phone if self.phone.startswith("+") else f"+{self.phone}"
        return {
            "phone": phone,
            "customer_name": self.customer_name,
            "bike_name": self.bike_name,
            "order_id": self.order_id,
            "order_key": self.order_key,
            "image_url": settings.WHATSAPP_PROMO_IMAGE_URL,
        }


def send_order_notification(notification: OrderNotification, client: Optional[WebhookClient] = None) -> DeliveryResult:
    client = client or WebhookClient()
    try:
        response = client.post(notification.payload())
    except WebhookNotConfigured:
        logger.error("N8N_WEBHOOK_URL not configured; cannot send order %s", notification.order_id)
        return DeliveryResult(
            success=False,
            message="WhatsApp automation not configured. Please contact administrator.",
            http_status=500,
        )
    except WebhookTimeout:
        logger.error("WhatsApp webhook timeout (phone=%s order=%s)", notification.phone, notification.order_id)
        return DeliveryResult(
            success=False,
            message="WhatsApp send timeout",
            http_status=504,
        )
    except WebhookUnreachable as exc:
        logger.error(
            "WhatsApp webhook network error (phone=%s order=%s): %s",
            notification.phone,
            notification.order_id,
            exc,
        )
        return DeliveryResult(
            success=False,
            message="Could not reach WhatsApp service. Please check your connection.",
            http_status=503,
        )

    body = response_body(response)
    if not response.is_success:
        logger.error(
            "WhatsApp webhook failed with HTTP %s (phone=%s order=%s): %s",
            response.status_code,
            notification.phone,
            notification.order_id,
            body,
        )
        return DeliveryResult(
            success=False,
            message=upstream_error_message(body),
            raw=body,
            http_status=500,
        )

    result = interpret_response(body)
    if not result.success:
        logger.error(
            "WhatsApp API error (phone=%s order=%s): %s",
            notification.phone,
            notification.order_id,
            result.message,
        )
        return result

    logger.info(
        "WhatsApp message sent (phone=%s order=%s id=%s status=%s)",
        notification.phone,
        notification.order_id,
        result.message_id,
        result.whatsapp_status,
    )
    if not result.message_id:
        logger.warning("No message id in webhook response for order %s: %s", notification.order_id, body)
    return result
