"""
Outbound group provisioning.

POSTs {user_id, id, numeros_whatsapp} to the automation webhook. A 2xx JSON
response carrying a non-empty "JID" means the group exists; anything else
leaves the group pending. The client never raises.
"""

import time
from dataclasses import dataclass
from typing import Any

import httpx
from django.conf import settings

from apps.core.logging import get_logger

logger = get_logger(__name__)


class ErrorType:
    NOT_CONFIGURED = "not_configured"
    TIMEOUT = "timeout"
    CONNECTION_ERROR = "connection_error"
    HTTP_ERROR = "http_error"
    MISSING_JID = "missing_jid"


@dataclass
class ProvisioningResult:
    """Outcome of one provisioning call."""

    success: bool
    jid: str | None = None
    http_status: int | None = None
    duration_ms: int = 0
    error_type: str = ""
    error_message: str = ""


def _extract_jid(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    jid = body.get("JID")
    if not isinstance(jid, str) or not jid.strip():
        return None
    return jid.strip()


class ProvisioningClient:
    """Calls the group provisioning webhook."""

    def __init__(self, url: str | None = None, timeout: float | None = None):
        self.url = url if url is not None else settings.GROUP_PROVISIONING_WEBHOOK_URL
        self.timeout = timeout if timeout is not None else settings.GROUP_PROVISIONING_TIMEOUT_SECONDS

    def provision(self, user_id: Any, group_id: Any, numeros_whatsapp: list[str]) -> ProvisioningResult:
        """
        Request provisioning of a group.

        Args:
            user_id: Creator of the group
            group_id: Id of the pending grupos row
            numeros_whatsapp: Phone numbers, verbatim

        Returns:
            ProvisioningResult; success only when a JID came back
        """
        if not self.url:
            return ProvisioningResult(
                success=False,
                error_type=ErrorType.NOT_CONFIGURED,
                error_message="Provisioning webhook URL is not configured",
            )

        payload = {
            "user_id": str(user_id),
            "id": str(group_id),
            "numeros_whatsapp": list(numeros_whatsapp),
        }

        start_time = time.monotonic()
        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.post(self.url, json=payload)

            duration_ms = int((time.monotonic() - start_time) * 1000)

            if not 200 <= response.status_code < 300:
                return ProvisioningResult(
                    success=False,
                    http_status=response.status_code,
                    duration_ms=duration_ms,
                    error_type=ErrorType.HTTP_ERROR,
                    error_message=f"HTTP {response.status_code}",
                )

            jid = _extract_jid(response)
            if jid is None:
                return ProvisioningResult(
                    success=False,
                    http_status=response.status_code,
                    duration_ms=duration_ms,
                    error_type=ErrorType.MISSING_JID,
                    error_message="Response did not include a JID",
                )

            return ProvisioningResult(
                success=True,
                jid=jid,
                http_status=response.status_code,
                duration_ms=duration_ms,
            )

        except httpx.TimeoutException:
            return ProvisioningResult(
                success=False,
                duration_ms=int((time.monotonic() - start_time) * 1000),
                error_type=ErrorType.TIMEOUT,
                error_message=f"Request timed out after {self.timeout}s",
            )

        except httpx.HTTPError as e:
            return ProvisioningResult(
                success=False,
                duration_ms=int((time.monotonic() - start_time) * 1000),
                error_type=ErrorType.CONNECTION_ERROR,
                error_message=str(e),
            )
