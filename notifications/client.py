"""HTTP client for the WhatsApp automation webhook (n8n)."""

import logging
from typing import Any, Optional

import httpx
from django.conf import settings

logger = logging.getLogger(__name__)


class WebhookError(Exception):
    """Base class for failures reaching the automation webhook."""


class WebhookNotConfigured(WebhookError):
    pass


class WebhookTimeout(WebhookError):
    pass


class WebhookUnreachable(WebhookError):
    pass


class WebhookClient:
    """POSTs JSON to the configured webhook URL with a fixed timeout.

    Calls are never retried.
    """

    def __init__(self, url: Optional[str] = None, timeout: Optional[float] = None):
        self.url = settings.N8N_WEBHOOK_URL if url is None else url
        self.timeout = settings.WHATSAPP_TIMEOUT_SECONDS if timeout is None else timeout

    def post(self, payload: dict) -> httpx.Response:
        if not self.url:
            raise WebhookNotConfigured("N8N_WEBHOOK_URL is not configured")
        try:
            with httpx.Client(timeout=self.timeout) as client:
                return client.post(self.url, json=payload, headers={"Content-Type": "application/json"})
        except httpx.TimeoutException as exc:
            raise WebhookTimeout(f"no response within {self.timeout}s") from exc
        except httpx.HTTPError as exc:
            raise WebhookUnreachable(str(exc)) from exc


def response_body(response: httpx.Response) -> Any:
    """Parsed JSON body, falling back to text (or {} when empty)."""
    try:
        return response.json()
    except ValueError:
        return response.text or {}
