"""User identity claims carried by the browser session."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, EmailStr


class User(BaseModel):
    """Authenticated user, as asserted by the web app's session cookie."""

    model_config = ConfigDict(frozen=True)

    id: str
    login: str
    name: str | None = None
    email: EmailStr | None = None
    image: str | None = None
