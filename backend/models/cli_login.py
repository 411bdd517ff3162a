"""CLI login pairing models."""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from backend.models.user import User


class _WireModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PairingResult(_WireModel):
    """Credential payload handed to the CLI once the browser confirms."""

    session_token: str
    user: User


class PairingSession(BaseModel):
    """A pairing session held in the store. Never serialized to clients."""

    login_id: str
    browser_token: str
    poll_token: str
    status: Literal["pending", "completed"] = "pending"
    created_at_ms: int
    expires_at_ms: int
    result: PairingResult | None = None

    def is_expired(self, now_ms: int) -> bool:
        return now_ms >= self.expires_at_ms


class CreatedSession(BaseModel):
    """Identifiers returned by the store when a session is created."""

    model_config = ConfigDict(frozen=True)

    login_id: str
    browser_token: str
    poll_token: str
    expires_at_ms: int


class CompleteOutcome(str, Enum):
    """Result of a browser completing a pairing session."""

    SUCCESS = "success"
    NOT_FOUND_OR_EXPIRED = "not_found_or_expired"
    TOKEN_MISMATCH = "token_mismatch"


class ConsumeResult(_WireModel):
    """What a poller sees. Also the body of the status endpoint."""

    status: Literal["pending", "completed", "expired"]
    result: PairingResult | None = None


class StartLoginRequest(_WireModel):
    """Request to start a CLI login."""

    model_config = ConfigDict(extra="forbid")

    ttl_ms: int | None = None


class StartLoginResponse(_WireModel):
    """Response from starting a CLI login."""

    login_id: str
    poll_token: str
    expires_at_ms: int
    login_url: str


class CompleteLoginRequest(_WireModel):
    """Request to complete a CLI login (browser, requires session cookie)."""

    model_config = ConfigDict(extra="forbid")

    login_id: str
    browser_token: str


class CompleteLoginResponse(BaseModel):
    """Response from completing a CLI login."""

    ok: bool = True
