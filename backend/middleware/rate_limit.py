"""
In-memory rate limiting for the CLI login endpoints.

Keys are namespaced by endpoint, e.g. ``cli_login_start:<ip>`` or
``cli_login_status:<login_id>``. Process local, like the pairing store.
"""

from __future__ import annotations

import threading
from collections import defaultdict, deque
from datetime import UTC, datetime, timedelta


class RateLimiter:
    """
    Sliding-window rate limiter.

    Tracks request timestamps per key and refuses once a key has used up
    its allowance inside the window.
    """

    def __init__(self):
        # key -> timestamps of accepted requests, oldest first
        self._requests: dict[str, deque[datetime]] = defaultdict(deque)
        self._lock = threading.Lock()

    def check_rate_limit(self, key: str, max_requests: int, window_minutes: int = 60) -> bool:
        """
        Record a request for key if it is under the limit.

        Args:
            key: Identifier to rate limit (IP address or login id)
            max_requests: Maximum requests allowed in the window
            window_minutes: Time window in minutes (default 60)

        Returns:
            True if under the limit, False if limit exceeded
        """
        now = datetime.now(UTC)
        cutoff = now - timedelta(minutes=window_minutes)

        with self._lock:
            timestamps = self._requests[key]
            while timestamps and timestamps[0] <= cutoff:
                timestamps.popleft()

            if len(timestamps) >= max_requests:
                return False

            timestamps.append(now)
            return True

    def cleanup_old_entries(self, max_age_hours: int = 2) -> int:
        """
        Drop keys with no requests in the last max_age_hours.

        Returns:
            Number of keys removed
        """
        cutoff = datetime.now(UTC) - timedelta(hours=max_age_hours)
        removed = 0
        with self._lock:
            for key in list(self._requests.keys()):
                timestamps = self._requests[key]
                while timestamps and timestamps[0] <= cutoff:
                    timestamps.popleft()
                if not timestamps:
                    del self._requests[key]
                    removed += 1
        return removed

    def reset(self):
        """Forget every key."""
        with self._lock:
            self._requests.clear()


# Global rate limiter instance
rate_limiter = RateLimiter()
