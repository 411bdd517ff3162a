"""
Browser session authentication for Kyoto.

The main web app signs users in and sets an HTTP-only `session` cookie
holding a JWT with the user's identity claims. This module only verifies
that cookie; issuing it belongs to the web app.
"""

from __future__ import annotations

from typing import Annotated

import jwt
from fastapi import Cookie, HTTPException, status
from pydantic import ValidationError

from backend import config
from backend.models.user import User

NOT_AUTHENTICATED = "not_authenticated"


def decode_jwt(token: str) -> dict:
    """
    Decode and verify a JWT.

    Args:
        token: JWT string to decode

    Returns:
        Decoded payload

    Raises:
        HTTPException: If token is invalid or expired
    """
    try:
        payload = jwt.decode(token, config.settings.JWT_SECRET, algorithms=[config.settings.JWT_ALGORITHM])
        return payload
    except jwt.ExpiredSignatureError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=NOT_AUTHENTICATED,
        ) from e
    except jwt.InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=NOT_AUTHENTICATED,
        ) from e


def user_from_claims(payload: dict) -> User:
    """
    Build a User from decoded session claims.

    Raises:
        HTTPException: If the claims are missing or malformed
    """
    try:
        return User(
            id=payload["sub"],
            login=payload["login"],
            name=payload.get("name"),
            email=payload.get("email"),
            image=payload.get("image"),
        )
    except (KeyError, ValidationError) as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=NOT_AUTHENTICATED,
        ) from e


async def get_current_user(
    session: Annotated[str | None, Cookie()] = None,
) -> User:
    """
    FastAPI dependency to get the signed-in browser user.

    Args:
        session: JWT from HTTP-only session cookie

    Returns:
        Current authenticated User

    Raises:
        HTTPException: If there is no valid session
    """
    if not session:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=NOT_AUTHENTICATED,
        )

    return user_from_claims(decode_jwt(session))
