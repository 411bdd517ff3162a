"""
In-memory store for CLI login pairing sessions.

Bridges the CLI login flow with the signed-in browser:

1. CLI calls /start; the store creates a pending session and hands back
   a login id, a browser token (for the login URL) and a poll token
   (kept by the CLI).
2. The browser calls /complete with the login id and browser token; the
   store marks the session completed and mints a CLI session token.
3. The CLI polls /status with the poll token; the first poll that sees the
   completed session removes it and receives the credential.

Sessions live only in this process. A restart drops every in-flight login;
the CLI recovers by starting over. Running several instances needs a shared
store honouring the same atomic consume.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, MutableMapping

from backend.config import settings
from backend.models.cli_login import (
    CompleteOutcome,
    ConsumeResult,
    CreatedSession,
    PairingResult,
    PairingSession,
)
from backend.models.user import User
from backend.utils.tokens import (
    generate_login_id,
    generate_secret,
    generate_session_token,
    tokens_match,
)

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


def _short(login_id: str) -> str:
    """Login id prefix safe for log lines."""
    return login_id[:8]


class PairingStore:
    """
    Process-wide registry of pairing sessions keyed by login id.

    Every check-then-act runs under one lock. Nothing inside the lock does
    I/O, so holding it from the event loop or a worker thread is fine.
    """

    def __init__(
        self,
        sessions: MutableMapping[str, PairingSession] | None = None,
        clock: Callable[[], int] | None = None,
        default_ttl_ms: int | None = None,
        max_ttl_ms: int | None = None,
    ):
        self._sessions: MutableMapping[str, PairingSession] = sessions if sessions is not None else {}
        self._clock = clock or _now_ms
        self._default_ttl_ms = settings.CLI_LOGIN_TTL_MS if default_ttl_ms is None else default_ttl_ms
        self._max_ttl_ms = settings.CLI_LOGIN_MAX_TTL_MS if max_ttl_ms is None else max_ttl_ms
        self._lock = threading.Lock()

    def create_session(self, ttl_ms: int | None = None) -> CreatedSession:
        """
        Create a pending session.

        Args:
            ttl_ms: Optional lifetime override, must be in (0, max_ttl_ms]

        Returns:
            The new session's identifiers and expiry

        Raises:
            ValueError: If ttl_ms is out of bounds
        """
        if ttl_ms is None:
            ttl_ms = self._default_ttl_ms
        elif isinstance(ttl_ms, bool) or not isinstance(ttl_ms, int) or ttl_ms <= 0:
            raise ValueError("ttl_ms must be a positive integer")
        elif ttl_ms > self._max_ttl_ms:
            raise ValueError(f"ttl_ms must not exceed {self._max_ttl_ms}")

        browser_token = generate_secret()
        poll_token = generate_secret()

        with self._lock:
            now = self._clock()
            self._sweep_locked(now)

            login_id = generate_login_id()
            while login_id in self._sessions:
                login_id = generate_login_id()

            session = PairingSession(
                login_id=login_id,
                browser_token=browser_token,
                poll_token=poll_token,
                created_at_ms=now,
                expires_at_ms=now + ttl_ms,
            )
            self._sessions[login_id] = session

        logger.info("CLI login %s started, expires in %ds", _short(login_id), ttl_ms // 1000)
        return CreatedSession(
            login_id=session.login_id,
            browser_token=session.browser_token,
            poll_token=session.poll_token,
            expires_at_ms=session.expires_at_ms,
        )

    def complete_session(self, login_id: str, browser_token: str, user: User) -> CompleteOutcome:
        """
        Attach the browser's identity to a pending session.

        Completion is single-shot: a second call on a completed session is
        reported as not found.
        """
        with self._lock:
            now = self._clock()
            self._sweep_locked(now)

            session = self._sessions.get(login_id)
            if session is None or session.status != "pending":
                outcome = CompleteOutcome.NOT_FOUND_OR_EXPIRED
            elif not tokens_match(session.browser_token, browser_token):
                outcome = CompleteOutcome.TOKEN_MISMATCH
            else:
                session.result = PairingResult(session_token=generate_session_token(), user=user)
                session.status = "completed"
                outcome = CompleteOutcome.SUCCESS

        if outcome is CompleteOutcome.SUCCESS:
            logger.info("CLI login %s completed by %s", _short(login_id), user.login)
        else:
            logger.info("CLI login %s completion rejected: %s", _short(login_id), outcome.value)
        return outcome

    def consume_session(self, login_id: str, poll_token: str) -> ConsumeResult:
        """
        Read the session for a poller.

        A completed session is removed in the same critical section that
        reads it, so exactly one poll ever receives the result. A wrong poll
        token looks exactly like a missing session.
        """
        with self._lock:
            now = self._clock()
            self._sweep_locked(now)

            session = self._sessions.get(login_id)
            if session is None or not tokens_match(session.poll_token, poll_token):
                return ConsumeResult(status="expired")

            if session.status == "pending":
                return ConsumeResult(status="pending")

            del self._sessions[login_id]
            result = session.result

        logger.info("CLI login %s consumed", _short(login_id))
        return ConsumeResult(status="completed", result=result)

    def sweep_expired(self) -> int:
        """Remove all sessions at or past their expiry. Returns count removed."""
        with self._lock:
            return self._sweep_locked(self._clock())

    def _sweep_locked(self, now: int) -> int:
        expired = [login_id for login_id, s in self._sessions.items() if s.is_expired(now)]
        for login_id in expired:
            del self._sessions[login_id]
        return len(expired)

    def stats(self) -> dict[str, int]:
        """Session counts for debugging and the cleanup log line."""
        with self._lock:
            sessions = list(self._sessions.values())
        return {
            "total_sessions": len(sessions),
            "pending_sessions": sum(1 for s in sessions if s.status == "pending"),
            "completed_sessions": sum(1 for s in sessions if s.status == "completed"),
        }

    def clear(self):
        """Drop every session."""
        with self._lock:
            self._sessions.clear()


# Global pairing store instance
pairing_store = PairingStore()
