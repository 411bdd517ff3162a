"""CLI login pairing routes."""

from __future__ import annotations

import logging
from typing import Annotated
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, Response, status

from backend.auth import get_current_user
from backend.config import settings
from backend.middleware.rate_limit import rate_limiter
from backend.models.cli_login import (
    CompleteLoginRequest,
    CompleteLoginResponse,
    CompleteOutcome,
    ConsumeResult,
    StartLoginRequest,
    StartLoginResponse,
)
from backend.models.user import User
from backend.services.pairing_store import pairing_store
from backend.utils.tokens import is_valid_login_id, is_valid_secret

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cli/login", tags=["cli_login"])

INVALID_REQUEST = "invalid_request"
EXPIRED = "expired"
INTERNAL = "internal"

_NO_STORE_HEADERS = {"Cache-Control": "no-store", "Pragma": "no-cache"}


def _invalid_request() -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_REQUEST, headers=_NO_STORE_HEADERS)


def _expired() -> HTTPException:
    return HTTPException(status_code=status.HTTP_410_GONE, detail=EXPIRED, headers=_NO_STORE_HEADERS)


def _internal() -> HTTPException:
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=INTERNAL)


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


def build_login_url(login_id: str, browser_token: str) -> str:
    """Browser URL the CLI opens; carries the login id and browser token."""
    query = urlencode({"loginId": login_id, "browserToken": browser_token})
    return f"{settings.WEB_URL}/cli/login?{query}"


@router.post("/start")
async def start_login(
    request: Request,
    body: StartLoginRequest | None = None,
) -> StartLoginResponse:
    """
    Start a CLI login.

    Rate limited to 10 per IP per hour.
    """
    client_ip = request.client.host if request.client else "unknown"
    if not rate_limiter.check_rate_limit(
        f"cli_login_start:{client_ip}",
        max_requests=settings.CLI_LOGIN_START_RATE_LIMIT_PER_IP,
        window_minutes=60,
    ):
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many login attempts. Please try again later.",
            headers={"Retry-After": "3600"},
        )

    ttl_ms = body.ttl_ms if body else None

    try:
        created = pairing_store.create_session(ttl_ms)
    except ValueError as e:
        raise _invalid_request() from e

    return StartLoginResponse(
        login_id=created.login_id,
        poll_token=created.poll_token,
        expires_at_ms=created.expires_at_ms,
        login_url=build_login_url(created.login_id, created.browser_token),
    )


@router.post("/complete")
async def complete_login(
    body: CompleteLoginRequest,
    user: User = Depends(get_current_user),
) -> CompleteLoginResponse:
    """
    Complete a CLI login (browser, requires session cookie).

    The browser only attests; it never receives the CLI credential.
    Every store rejection is reported the same way.
    """
    if not is_valid_login_id(body.login_id) or not is_valid_secret(body.browser_token):
        raise _invalid_request()

    try:
        outcome = pairing_store.complete_session(body.login_id, body.browser_token, user)
    except Exception as e:
        logger.exception("Pairing store failed to complete CLI login")
        raise _internal() from e

    if outcome is not CompleteOutcome.SUCCESS:
        raise _expired()

    return CompleteLoginResponse()


@router.get("/status", response_model_exclude_none=True)
async def login_status(
    request: Request,
    response: Response,
    login_id: Annotated[str, Query(alias="loginId")] = "",
    authorization: Annotated[str | None, Header()] = None,
) -> ConsumeResult:
    """
    Poll a CLI login.

    The poll token must arrive as a bearer credential, never in the query.
    Rate limited to 60 per login id per client IP per minute.
    """
    response.headers.update(_NO_STORE_HEADERS)

    poll_token = _bearer_token(authorization)
    if not is_valid_login_id(login_id) or not is_valid_secret(poll_token):
        raise _invalid_request()

    client_ip = request.client.host if request.client else "unknown"
    if not rate_limiter.check_rate_limit(
        f"cli_login_status:{login_id}:{client_ip}",
        max_requests=settings.CLI_LOGIN_STATUS_RATE_LIMIT_PER_CLIENT,
        window_minutes=1,
    ):
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Polling too fast. Please slow down.",
            headers={"Retry-After": "5", **_NO_STORE_HEADERS},
        )

    try:
        result = pairing_store.consume_session(login_id, poll_token)
    except Exception as e:
        logger.exception("Pairing store failed to read CLI login")
        raise _internal() from e

    if result.status == "expired":
        raise _expired()

    return result
