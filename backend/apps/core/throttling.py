"""
Rate limiting for public and credential endpoints.

Counters live in Django's cache (database cache in deployment) so every
worker sees the same buckets.

Usage::

    throttle_client(request, "contact", max_requests=10, window_seconds=3600)

RateLimitExceeded is rendered as HTTP 429 with Retry-After by config.api.
"""

from django.core.cache import cache
from django.http import HttpRequest

from apps.core.logging import get_logger

logger = get_logger(__name__)


class RateLimitExceeded(Exception):
    """Raised when a rate limit is exceeded."""

    def __init__(self, message: str, retry_after: int) -> None:
        super().__init__(message)
        self.retry_after = retry_after


def get_client_ip(request: HttpRequest) -> str:
    """Original client IP: first X-Forwarded-For hop, else REMOTE_ADDR."""
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR") or "unknown"


def check_rate_limit(key: str, *, max_requests: int, window_seconds: int) -> None:
    """
    Count one request against a bucket.

    add() creates the bucket only when missing, incr() bumps it atomically.

    Raises:
        RateLimitExceeded: If the bucket is over its limit.
    """
    cache_key = f"rate_limit:{key}"
    cache.add(cache_key, 0, timeout=window_seconds)

    try:
        current = cache.incr(cache_key)
    except ValueError:
        # Bucket expired between add() and incr()
        cache.set(cache_key, 1, timeout=window_seconds)
        return

    if current > max_requests:
        logger.warning("rate_limit_exceeded", key=key, limit=max_requests, window=window_seconds)
        raise RateLimitExceeded(
            "Too many requests. Please try again later.",
            retry_after=window_seconds,
        )


def throttle_client(request: HttpRequest, scope: str, *, max_requests: int, window_seconds: int) -> None:
    """Rate limit a scope per client IP."""
    check_rate_limit(
        f"{scope}:{get_client_ip(request)}",
        max_requests=max_requests,
        window_seconds=window_seconds,
    )
