"""
Pytest configuration and fixtures for Kyoto backend tests.
"""

from __future__ import annotations

import os
from datetime import UTC, datetime, timedelta

# Set test environment variables before importing config
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-testing-only")
os.environ.setdefault("WEB_URL", "http://web.test")

import httpx  # noqa: E402
import jwt  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402

from backend import config  # noqa: E402
from backend.main import app  # noqa: E402
from backend.middleware.rate_limit import rate_limiter  # noqa: E402
from backend.models.user import User  # noqa: E402
from backend.services.pairing_store import pairing_store  # noqa: E402


def create_jwt(user: User, expires_in: timedelta = timedelta(hours=24)) -> str:
    """Sign a browser session cookie the way the web app issues it."""
    now = datetime.now(UTC)
    payload = {
        "sub": user.id,
        "login": user.login,
        "name": user.name,
        "email": user.email,
        "image": user.image,
        "exp": now + expires_in,
        "iat": now,
    }
    return jwt.encode(payload, config.settings.JWT_SECRET, algorithm=config.settings.JWT_ALGORITHM)


class FakeClock:
    """Millisecond clock the tests can move forward."""

    def __init__(self, now_ms: int = 1_700_000_000_000):
        self.now_ms = now_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, ms: int):
        self.now_ms += ms


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture(autouse=True)
def reset_process_state():
    """Each test starts with an empty pairing store and rate limiter."""
    pairing_store.clear()
    rate_limiter.reset()
    yield
    pairing_store.clear()
    rate_limiter.reset()


@pytest.fixture
def test_user():
    """User claims for a signed-in browser."""
    return User(
        id="user_123",
        login="octocat",
        name="The Octocat",
        email="octocat@example.com",
        image="https://avatars.example.com/octocat.png",
    )


@pytest.fixture
def session_cookie(test_user):
    """Browser session cookie for the test user."""
    return {"session": create_jwt(test_user)}


@pytest_asyncio.fixture(loop_scope="session")
async def async_client():
    """Async HTTP client against the ASGI app."""
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client
