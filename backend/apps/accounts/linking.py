"""
Device linking client.

Fetches the QR image a phone scans to link its WhatsApp session with the
messaging API.
"""

from dataclasses import dataclass

import httpx
from django.conf import settings

from apps.core.logging import get_logger

logger = get_logger(__name__)

LINK_TIMEOUT = 15


class DeviceLinkError(Exception):
    """The QR image could not be fetched."""

    pass


@dataclass
class QrImage:
    """QR image bytes as returned by the messaging API."""

    content: bytes
    content_type: str


class DeviceLinkClient:
    """HTTP client for the device-link QR endpoint."""

    def __init__(
        self,
        url: str | None = None,
        api_host: str | None = None,
        api_key: str | None = None,
        timeout: float = LINK_TIMEOUT,
    ) -> None:
        self.url = url if url is not None else settings.DEVICE_LINK_QR_URL
        self.api_host = api_host if api_host is not None else settings.DEVICE_LINK_API_HOST
        self.api_key = api_key if api_key is not None else settings.DEVICE_LINK_API_KEY
        self.timeout = timeout

    def fetch_qr(self) -> QrImage:
        """
        Fetch a fresh link QR.

        Raises:
            DeviceLinkError: On missing configuration, transport errors or non-2xx
        """
        if not self.url or not self.api_key:
            raise DeviceLinkError("Device linking is not configured")

        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.get(
                    self.url,
                    headers={"x-rapidapi-host": self.api_host, "x-rapidapi-key": self.api_key},
                )
        except httpx.HTTPError as e:
            logger.warning("device_link_qr_unreachable", error=str(e))
            raise DeviceLinkError("Could not reach the device link service") from e

        if not 200 <= response.status_code < 300:
            logger.warning("device_link_qr_failed", http_status=response.status_code)
            raise DeviceLinkError(f"Device link service returned HTTP {response.status_code}")

        return QrImage(
            content=response.content,
            content_type=response.headers.get("content-type", "image/png"),
        )
