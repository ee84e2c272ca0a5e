"""Write operations on service requests.

Views stay thin: creation with item compensation, admin status changes,
deletion and WhatsApp delivery bookkeeping all live here.
"""

import logging

from django.db import DatabaseError
from django.utils import timezone
from rest_framework import status
from rest_framework.exceptions import APIException

from notifications.services import OrderNotification, send_order_notification
from .models import RequestItem, ServiceRequest

logger = logging.getLogger(__name__)

Status = ServiceRequest.Status


class RequestCreationFailed(APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Failed to create request."
    default_code = "creation_failed"


class OrderLocked(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "This order can no longer be changed."
    default_code = "order_locked"


# ---------------------------------- create -----------------------------------

def create_service_request(request_data: dict, repair_items=(), replacement_items=()) -> ServiceRequest:
    """Insert the request row, then its items.

    If the items cannot be written the request row is removed again so no
    header without lines is left behind.
    """
    try:
        service_request = ServiceRequest.objects.create(**request_data)
    except DatabaseError:
        logger.exception("Request insert failed for order %s", request_data.get("order_id"))
        raise RequestCreationFailed("Failed to create request.")

    sections = [(RequestItem.Section.REPAIR, item) for item in repair_items] + [
        (RequestItem.Section.REPLACEMENT, item) for item in replacement_items
    ]
    items = [
        RequestItem(request=service_request, section=section, position=position, **item)
        for position, (section, item) in enumerate(sections)
    ]
    try:
        if items:
            RequestItem.objects.bulk_create(items)
        service_request.recalculate_totals()
    except DatabaseError:
        logger.exception("Item insert failed for request %s; removing request row", service_request.pk)
        ServiceRequest.objects.filter(pk=service_request.pk).delete()
        raise RequestCreationFailed("Failed to create request items.")

    logger.info(
        "Created request %s (%s) with %d items, total %s",
        service_request.order_id,
        service_request.short_slug,
        len(items),
        service_request.total_paise,
    )
    return service_request


# ---------------------------------- status -----------------------------------

def change_status(service_request: ServiceRequest, new_status: str) -> ServiceRequest:
    """Admin status change. Confirmed and cancelled orders are final."""
    if service_request.status == new_status:
        return service_request
    if service_request.is_locked:
        raise OrderLocked(f"A {service_request.status} order cannot change status.")
    if new_status == Status.CONFIRMED:
        raise OrderLocked("Orders are confirmed by the customer.")

    now = timezone.now()
    service_request.status = new_status
    fields = ["status"]
    if new_status == Status.SENT and service_request.sent_at is None:
        service_request.sent_at = now
        fields.append("sent_at")
    if new_status == Status.VIEWED and service_request.viewed_at is None:
        service_request.viewed_at = now
        fields.append("viewed_at")
    service_request.save(update_fields=fields)
    logger.info("Request %s status -> %s", service_request.order_id, new_status)
    return service_request


def delete_service_request(service_request: ServiceRequest) -> None:
    if service_request.status != Status.CANCELLED:
        raise OrderLocked("Only cancelled requests can be deleted.")
    order_id = service_request.order_id
    service_request.delete()
    logger.info("Deleted cancelled request %s", order_id)


# --------------------------------- whatsapp ----------------------------------

def apply_whatsapp_result(service_request: ServiceRequest, success: bool, message_id=None, error=None) -> ServiceRequest:
    """Record a delivery outcome: success -> sent, failure -> pending with error."""
    if service_request.status in (Status.VIEWED, Status.CONFIRMED, Status.CANCELLED):
        raise OrderLocked(f"Delivery status cannot be changed on a {service_request.status} order.")

    now = timezone.now()
    service_request.whatsapp_sent_at = now
    if success:
        service_request.status = Status.SENT
        service_request.sent_at = now
        if message_id:
            service_request.whatsapp_message_id = message_id
        service_request.whatsapp_error = None
    else:
        service_request.status = Status.PENDING
        service_request.whatsapp_error = error or "Unknown error"
        service_request.whatsapp_message_id = None
    service_request.save(
        update_fields=["status", "sent_at", "whatsapp_sent_at", "whatsapp_message_id", "whatsapp_error"]
    )
    return service_request


def send_whatsapp(service_request: ServiceRequest):
    """Send (or resend) the order link and record the outcome on the request."""
    if service_request.status in (Status.VIEWED, Status.CONFIRMED, Status.CANCELLED):
        raise OrderLocked(f"A {service_request.status} order cannot be resent.")
    result = send_order_notification(OrderNotification.for_request(service_request))
    apply_whatsapp_result(
        service_request,
        success=result.success,
        message_id=result.message_id,
        error=None if result.success else result.message,
    )
    return result
