"""Interpretation of automation-webhook responses.

The automation service answers in several shapes depending on how its flow
is configured: a raw WhatsApp Cloud API body, a custom ``messageId`` body,
wrapped ``data`` bodies, or one of a handful of error envelopes. Each shape
has one small adapter; ``interpret_response`` tries the error adapters first,
then the message-id adapters.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Optional

DEFAULT_STATUS = "sent"
WHATSAPP_ERROR_CODES = (131030, 1006, 1008)


@dataclass
class DeliveryResult:
    success: bool
    message: str
    message_id: Optional[str] = None
    whatsapp_status: Optional[str] = None
    raw: Any = field(default_factory=dict)
    http_status: int = 200


# ------------------------------- error adapters -------------------------------

def _top_level_error(body: dict) -> Optional[str]:
    error = body.get("error")
    if not error:
        return None
    if isinstance(error, dict):
        return error.get("message") or error.get("details") or "WhatsApp send failed"
    return str(error)


def _nested_data_error(body: dict) -> Optional[str]:
    data = body.get("data")
    if not isinstance(data, dict) or not data.get("error"):
        return None
    error = data["error"]
    if isinstance(error, dict):
        return error.get("message") or "WhatsApp send failed"
    return str(error)


def _success_false(body: dict) -> Optional[str]:
    if body.get("success") is not False:
        return None
    return body.get("message") or "WhatsApp send failed"


def _whatsapp_error_code(body: dict) -> Optional[str]:
    if body.get("code") not in WHATSAPP_ERROR_CODES:
        return None
    return body.get("message") or body.get("error_user_msg") or f"WhatsApp API error {body['code']}"


def _business_api_error(body: dict) -> Optional[str]:
    if not (body.get("error_data") or body.get("error_user_title") or body.get("error_user_msg")):
        return None
    return body.get("error_user_msg") or body.get("error_user_title") or "Recipient not available"


ERROR_ADAPTERS: tuple[Callable[[dict], Optional[str]], ...] = (
    _top_level_error,
    _nested_data_error,
    _success_false,
    _whatsapp_error_code,
    _business_api_error,
)


# ----------------------------- message-id adapters ----------------------------

def _cloud_api_messages(body: dict):
    messages = body.get("messages")
    if isinstance(messages, list) and messages and isinstance(messages[0], dict) and messages[0].get("id"):
        return messages[0]["id"], messages[0].get("message_status") or DEFAULT_STATUS
    return None


def _camel_message_id(body: dict):
    if body.get("messageId"):
        return body["messageId"], DEFAULT_STATUS
    return None


def _snake_messages_id(body: dict):
    if body.get("messages_id"):
        return body["messages_id"], body.get("messages_status") or DEFAULT_STATUS
    return None


def _wrapped_message_id(body: dict):
    data = body.get("data")
    if isinstance(data, dict) and data.get("messageId"):
        return data["messageId"], DEFAULT_STATUS
    return None


MESSAGE_ID_ADAPTERS = (
    _cloud_api_messages,
    _camel_message_id,
    _snake_messages_id,
    _wrapped_message_id,
)


# ---------------------------------- helpers -----------------------------------

def humanize_error(message: str) -> str:
    """Map known upstream failures to operator-friendly text."""
    text = str(message or "")
    lowered = text.lower()
    if "not in allowed list" in lowered or "131030" in text:
        return "This phone number is not registered on WhatsApp or not in your allowed list"
    if "1006" in text or "not found" in lowered:
        return "This phone number is not registered on WhatsApp"
    if "1008" in text or "invalid" in lowered:
        return "Invalid phone number format"
    if "rate limit" in lowered:
        return "Too many messages sent. Please wait a few minutes."
    return text


def extract_error(body) -> Optional[str]:
    if not isinstance(body, dict):
        return None
    for adapter in ERROR_ADAPTERS:
        message = adapter(body)
        if message:
            return message
    return None


def extract_message_id(body):
    """Return ``(message_id, whatsapp_status)``; the id is None when absent."""
    if isinstance(body, dict):
        for adapter in MESSAGE_ID_ADAPTERS:
            found = adapter(body)
            if found:
                return str(found[0]), found[1]
    return None, DEFAULT_STATUS


def interpret_response(body) -> DeliveryResult:
    """Turn a 2xx webhook body into a DeliveryResult."""
    error = extract_error(body)
    if error:
        return DeliveryResult(
            success=False,
            message=humanize_error(error),
            raw=body,
            http_status=500,
        )
    message_id, whatsapp_status = extract_message_id(body)
    return DeliveryResult(
        success=True,
        message="WhatsApp message sent successfully via n8n",
        message_id=message_id,
        whatsapp_status=whatsapp_status,
        raw=body,
    )


def upstream_error_message(body) -> str:
    """Best message from a non-2xx webhook body (JSON object or text)."""
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return error["message"]
        if body.get("message"):
            return body["message"]
    elif isinstance(body, str) and body:
        return body
    return "Failed to send WhatsApp message"
