"""
Inbound webhook utilities: signature checks and idempotent processing.

Callers sign "<timestamp>.<body>" with HMAC-SHA256 and send:
    X-Webhook-ID         unique delivery id (idempotency key)
    X-Webhook-Timestamp  unix seconds
    X-Webhook-Signature  "v1=<hex digest>"
"""

import hashlib
import hmac
import time
from collections.abc import Mapping

from django.db import IntegrityError, transaction

from apps.core.logging import get_logger
from apps.core.models import ProcessedWebhook

logger = get_logger(__name__)

SIGNATURE_VERSION = "v1"

# Clock skew tolerance in seconds (5 minutes)
CLOCK_SKEW_TOLERANCE = 300


def compute_signature(body: str, secret: str, timestamp: int) -> str:
    """Return the "v1=<hex>" signature for a body at a timestamp."""
    digest = hmac.new(
        secret.encode("utf-8"),
        f"{timestamp}.{body}".encode(),
        hashlib.sha256,
    ).hexdigest()
    return f"{SIGNATURE_VERSION}={digest}"


def signed_headers(body: str, secret: str, delivery_id: str, timestamp: int | None = None) -> dict[str, str]:
    """Headers a sender attaches to a signed delivery."""
    if timestamp is None:
        timestamp = int(time.time())
    return {
        "Content-Type": "application/json",
        "X-Webhook-ID": delivery_id,
        "X-Webhook-Timestamp": str(timestamp),
        "X-Webhook-Signature": compute_signature(body, secret, timestamp),
    }


def verify_signed_request(
    body: str,
    headers: Mapping[str, str],
    secret: str,
    tolerance: int = CLOCK_SKEW_TOLERANCE,
) -> bool:
    """
    Check the signature headers of an inbound delivery.

    Returns False for a missing or malformed header, a timestamp outside
    the tolerance window, or a signature mismatch.
    """
    if not secret:
        return False

    signature = headers.get("X-Webhook-Signature", "")
    raw_timestamp = headers.get("X-Webhook-Timestamp", "")
    try:
        timestamp = int(raw_timestamp)
    except (TypeError, ValueError):
        return False

    if abs(int(time.time()) - timestamp) > tolerance:
        return False

    expected = compute_signature(body, secret, timestamp)
    return hmac.compare_digest(expected, signature)


def mark_webhook_processed(source: str, event_id: str) -> bool:
    """
    Record an inbound delivery as processed.

    Relies on the unique constraint so concurrent duplicates lose the race.

    Returns:
        True if newly recorded, False if it was already processed
    """
    try:
        with transaction.atomic():
            ProcessedWebhook.objects.create(source=source, event_id=event_id)
        return True
    except IntegrityError:
        logger.debug("webhook_already_processed", source=source, event_id=event_id)
        return False
