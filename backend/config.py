"""
Kyoto configuration: all environment variables in one place.

Read from environment at runtime. Never hardcode secrets.
"""

from __future__ import annotations

import os


class Settings:
    """Application settings from environment variables."""

    # Auth (browser session cookie issued by the main web app)
    JWT_SECRET: str = os.environ.get("JWT_SECRET", "")
    JWT_ALGORITHM: str = "HS256"

    # CLI login pairing
    CLI_LOGIN_TTL_MINUTES: int = int(os.environ.get("CLI_LOGIN_TTL_MINUTES", "10"))
    CLI_LOGIN_MAX_TTL_MINUTES: int = 15
    CLI_SESSION_TOKEN_PREFIX: str = "kyoto_cli_"

    # Rate Limits
    CLI_LOGIN_START_RATE_LIMIT_PER_IP: int = 10  # per hour
    CLI_LOGIN_STATUS_RATE_LIMIT_PER_CLIENT: int = 60  # per login id per IP per minute

    # Application
    ENVIRONMENT: str = os.environ.get("ENVIRONMENT", "development")

    @property
    def WEB_URL(self) -> str:
        url = os.environ.get("WEB_URL")
        if url:
            return url.rstrip("/")
        return "http://localhost:3002" if self.ENVIRONMENT == "development" else "https://usekyoto.com"

    @property
    def CLI_LOGIN_TTL_MS(self) -> int:
        return self.CLI_LOGIN_TTL_MINUTES * 60 * 1000

    @property
    def CLI_LOGIN_MAX_TTL_MS(self) -> int:
        return self.CLI_LOGIN_MAX_TTL_MINUTES * 60 * 1000


# Singleton instance
settings = Settings()

if not settings.JWT_SECRET:
    raise RuntimeError("JWT_SECRET environment variable is required")
if settings.CLI_LOGIN_TTL_MINUTES > settings.CLI_LOGIN_MAX_TTL_MINUTES:
    raise RuntimeError("CLI_LOGIN_TTL_MINUTES must not exceed CLI_LOGIN_MAX_TTL_MINUTES")
