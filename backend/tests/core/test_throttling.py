"""
Tests for the rate limiting utility.
"""

import pytest
from django.test import RequestFactory

from apps.core.throttling import RateLimitExceeded, check_rate_limit, get_client_ip, throttle_client


@pytest.mark.django_db
class TestCheckRateLimit:
    """Tests for the check_rate_limit function."""

    def test_allows_requests_under_limit(self) -> None:
        for _ in range(5):
            check_rate_limit("test_key", max_requests=5, window_seconds=60)

    def test_blocks_requests_over_limit(self) -> None:
        for _ in range(3):
            check_rate_limit("test_key", max_requests=3, window_seconds=60)

        with pytest.raises(RateLimitExceeded) as exc_info:
            check_rate_limit("test_key", max_requests=3, window_seconds=60)

        assert exc_info.value.retry_after == 60
        assert "Too many requests" in str(exc_info.value)

    def test_separate_keys_independent(self) -> None:
        for _ in range(3):
            check_rate_limit("key_a", max_requests=3, window_seconds=60)

        check_rate_limit("key_b", max_requests=3, window_seconds=60)

        with pytest.raises(RateLimitExceeded):
            check_rate_limit("key_a", max_requests=3, window_seconds=60)


class TestGetClientIp:
    """Tests for client IP extraction."""

    def test_uses_first_forwarded_hop(self) -> None:
        request = RequestFactory().get("/", HTTP_X_FORWARDED_FOR="203.0.113.7, 10.0.0.1")

        assert get_client_ip(request) == "203.0.113.7"

    def test_falls_back_to_remote_addr(self) -> None:
        request = RequestFactory().get("/", REMOTE_ADDR="198.51.100.2")

        assert get_client_ip(request) == "198.51.100.2"


@pytest.mark.django_db
class TestThrottleClient:
    """Tests for per-IP throttling."""

    def test_buckets_per_ip(self) -> None:
        first = RequestFactory().get("/", REMOTE_ADDR="198.51.100.2")
        second = RequestFactory().get("/", REMOTE_ADDR="198.51.100.3")

        throttle_client(first, "contact", max_requests=1, window_seconds=60)
        throttle_client(second, "contact", max_requests=1, window_seconds=60)

        with pytest.raises(RateLimitExceeded):
            throttle_client(first, "contact", max_requests=1, window_seconds=60)
