"""
Contact intake.

The request row is written first; the intake webhook is then notified
best-effort. A webhook failure is logged and never undoes the row.
"""

import time
from dataclasses import dataclass
from datetime import UTC, datetime

import httpx
from django.conf import settings

from apps.contact.models import ContactRequest
from apps.contact.schemas import ContactRequestCreate
from apps.core.gateway import PersistenceGateway
from apps.core.logging import get_logger

logger = get_logger(__name__)


@dataclass
class NotificationResult:
    """Outcome of one intake webhook call."""

    success: bool
    skipped: bool = False
    http_status: int | None = None
    duration_ms: int = 0
    error_message: str = ""


class ContactWebhookClient:
    """Forwards contact requests to the operator's intake webhook."""

    def __init__(self, url: str | None = None, timeout: float | None = None):
        self.url = url if url is not None else settings.CONTACT_WEBHOOK_URL
        self.timeout = timeout if timeout is not None else settings.CONTACT_WEBHOOK_TIMEOUT_SECONDS

    def notify(self, contact: ContactRequest) -> NotificationResult:
        """POST {nombre, correo, whatsapp, mensaje, timestamp}. Never raises."""
        if not self.url:
            return NotificationResult(success=False, skipped=True)

        payload = {
            "nombre": contact.nombre,
            "correo": contact.correo,
            "whatsapp": contact.whatsapp,
            "mensaje": contact.mensaje,
            "timestamp": datetime.now(UTC).isoformat(),
        }

        start_time = time.monotonic()
        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.post(self.url, json=payload)
        except httpx.TimeoutException:
            return NotificationResult(
                success=False,
                duration_ms=int((time.monotonic() - start_time) * 1000),
                error_message=f"Request timed out after {self.timeout}s",
            )
        except httpx.HTTPError as e:
            return NotificationResult(
                success=False,
                duration_ms=int((time.monotonic() - start_time) * 1000),
                error_message=str(e),
            )

        duration_ms = int((time.monotonic() - start_time) * 1000)
        if 200 <= response.status_code < 300:
            return NotificationResult(success=True, http_status=response.status_code, duration_ms=duration_ms)
        return NotificationResult(
            success=False,
            http_status=response.status_code,
            duration_ms=duration_ms,
            error_message=f"HTTP {response.status_code}",
        )


def submit_contact_request(
    data: ContactRequestCreate,
    gateway: PersistenceGateway | None = None,
    notifier: ContactWebhookClient | None = None,
) -> ContactRequest:
    """
    Store a contact request and notify the intake webhook.

    Raises:
        PersistenceError: If the row could not be written
    """
    gateway = gateway or PersistenceGateway()
    notifier = notifier or ContactWebhookClient()

    contact = gateway.insert(
        "contact_requests",
        {
            "nombre": data.nombre,
            "correo": data.correo,
            "whatsapp": data.whatsapp,
            "mensaje": data.mensaje,
            "estado": ContactRequest.Estado.PENDIENTE,
        },
    )
    logger.info("contact_request_received", contact_request_id=str(contact.id))

    result = notifier.notify(contact)
    if result.skipped:
        logger.info("contact_webhook_not_configured", contact_request_id=str(contact.id))
    elif not result.success:
        logger.warning(
            "contact_webhook_failed",
            contact_request_id=str(contact.id),
            http_status=result.http_status,
            error_message=result.error_message,
            duration_ms=result.duration_ms,
        )

    return contact
