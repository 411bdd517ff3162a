"""Random identifiers and secrets for the CLI login flow."""

import hmac
import re
import secrets

from backend.config import settings

# 16 random bytes rendered as lowercase hex
LOGIN_ID_LENGTH = 32
_LOGIN_ID_RE = re.compile(r"[0-9a-f]{32}")

# token_urlsafe(32) yields 43 chars; anything shorter was not issued by us
_MIN_SECRET_LENGTH = 43
_MAX_SECRET_LENGTH = 128
_SECRET_RE = re.compile(r"[A-Za-z0-9_-]+")


def generate_login_id() -> str:
    """Generate a public, unguessable login id (128 bits, hex)."""
    return secrets.token_hex(LOGIN_ID_LENGTH // 2)


def generate_secret() -> str:
    """Generate a browser or poll secret (256 bits, URL-safe base64)."""
    return secrets.token_urlsafe(32)


def generate_session_token() -> str:
    """Generate the opaque session credential handed to the CLI."""
    return f"{settings.CLI_SESSION_TOKEN_PREFIX}{secrets.token_hex(32)}"


def is_valid_login_id(value: str | None) -> bool:
    """Check login id format before any store lookup."""
    return bool(value) and _LOGIN_ID_RE.fullmatch(value) is not None


def is_valid_secret(value: str | None) -> bool:
    """Check that a browser/poll secret has the shape we issue."""
    if not value or not _MIN_SECRET_LENGTH <= len(value) <= _MAX_SECRET_LENGTH:
        return False
    return _SECRET_RE.fullmatch(value) is not None


def tokens_match(expected: str, provided: str) -> bool:
    """Constant-time secret comparison."""
    return hmac.compare_digest(expected.encode(), provided.encode())
