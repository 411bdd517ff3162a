"""HTTP client for the Kyoto API."""
from __future__ import annotations

from typing import Any

import httpx


class ApiClient:
    """HTTP client for the Kyoto API."""

    def __init__(self, api_url: str, token: str | None = None, timeout: float = 30.0):
        self.api_url = api_url.rstrip("/")
        self.token = token
        self.client = httpx.Client(timeout=timeout)

    def _headers(self, bearer: str | None = None) -> dict:
        """Build request headers. An explicit bearer wins over the stored token."""
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        token = bearer or self.token
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def get(self, path: str, params: dict | None = None, bearer: str | None = None) -> Any:
        """Make GET request."""
        url = f"{self.api_url}{path}"
        res = self.client.get(url, headers=self._headers(bearer), params=params or {})
        res.raise_for_status()
        return res.json()

    def post(self, path: str, data: dict | None = None) -> Any:
        """Make POST request."""
        url = f"{self.api_url}{path}"
        res = self.client.post(url, json=data or {}, headers=self._headers())
        res.raise_for_status()
        return res.json()

    def start_login(self, ttl_ms: int | None = None) -> dict:
        """
        Start a CLI login.

        Returns {"loginId": ..., "pollToken": ..., "expiresAtMs": ..., "loginUrl": ...}
        """
        body = {"ttlMs": ttl_ms} if ttl_ms is not None else {}
        return self.post("/api/cli/login/start", body)

    def login_status(self, login_id: str, poll_token: str) -> dict:
        """
        Poll a CLI login. The poll token travels only in the Authorization header.

        Returns {"status": "pending"} or {"status": "completed", "result": {...}}.
        Raises httpx.HTTPStatusError with status 410 once the login is gone.
        """
        return self.get("/api/cli/login/status", params={"loginId": login_id}, bearer=poll_token)

    def close(self):
        """Close client."""
        self.client.close()
