"""Tests for the in-memory rate limiter."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from backend.middleware.rate_limit import RateLimiter


def test_allows_up_to_limit():
    limiter = RateLimiter()

    assert all(limiter.check_rate_limit("ip:1", max_requests=3) for _ in range(3))
    assert limiter.check_rate_limit("ip:1", max_requests=3) is False


def test_keys_are_independent():
    limiter = RateLimiter()
    limiter.check_rate_limit("ip:1", max_requests=1)

    assert limiter.check_rate_limit("ip:2", max_requests=1) is True


def test_window_slides():
    limiter = RateLimiter()
    limiter.check_rate_limit("ip:1", max_requests=1, window_minutes=1)
    limiter._requests["ip:1"][0] -= timedelta(minutes=2)

    assert limiter.check_rate_limit("ip:1", max_requests=1, window_minutes=1) is True


def test_cleanup_old_entries():
    limiter = RateLimiter()
    limiter.check_rate_limit("old", max_requests=5)
    limiter.check_rate_limit("new", max_requests=5)
    limiter._requests["old"][0] = datetime.now(UTC) - timedelta(hours=3)

    removed = limiter.cleanup_old_entries(max_age_hours=2)

    assert removed == 1
    assert "old" not in limiter._requests
    assert "new" in limiter._requests
