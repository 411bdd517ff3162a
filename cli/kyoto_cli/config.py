"""
Configuration management for the Kyoto CLI.

Credentials are stored per API URL, so you can be logged into production
and a local dev server at the same time.

  Config structure:
  {
    "environments": {
      "https://usekyoto.com": {
        "token": "kyoto_cli_...",
        "user_id": "...",
        "login": "octocat",
        "email": "octocat@example.com"
      }
    },
    "default_url": "https://usekyoto.com"
  }

Environment resolution order:
  1. KYOTO_API_URL environment variable
  2. --api-url command line flag
  3. default_url from config file
  4. Fallback: https://usekyoto.com
"""

from __future__ import annotations

import json
import os
from pathlib import Path

DEFAULT_API_URL = "https://usekyoto.com"


class Config:
    """Config manager for the Kyoto CLI with multi-environment support."""

    def __init__(self, api_url_override: str | None = None):
        """
        Initialize config.

        Args:
            api_url_override: Optional --api-url flag value
        """
        self.config_dir = Path.home() / ".kyoto"
        self.config_file = self.config_dir / "config.json"
        self._data = {}
        self._api_url_override = api_url_override
        self._load()

    def _load(self):
        """Load config from disk. A corrupt file is treated as empty."""
        if self.config_file.exists():
            try:
                with open(self.config_file) as f:
                    self._data = json.load(f)
            except (OSError, json.JSONDecodeError):
                self._data = {}

        if not isinstance(self._data, dict):
            self._data = {}
        self._data.setdefault("environments", {})

    def _save(self):
        """Save config to disk with owner-only permissions."""
        self.config_dir.mkdir(parents=True, exist_ok=True)

        with open(self.config_file, "w") as f:
            json.dump(self._data, f, indent=2)

        self.config_file.chmod(0o600)

    @property
    def api_url(self) -> str:
        """Current API URL, per the resolution order above."""
        env_url = os.environ.get("KYOTO_API_URL")
        if env_url:
            return env_url.rstrip("/")

        if self._api_url_override:
            return self._api_url_override.rstrip("/")

        return self._data.get("default_url", DEFAULT_API_URL).rstrip("/")

    def _get_env(self) -> dict:
        return self._data["environments"].get(self.api_url, {})

    def save_session(self, token: str, user: dict):
        """Store the CLI session credential and the user it belongs to."""
        self._data["environments"][self.api_url] = {
            "token": token,
            "user_id": user.get("id"),
            "login": user.get("login"),
            "email": user.get("email"),
        }
        self._save()

    @property
    def token(self) -> str | None:
        """Session token for current environment."""
        return self._get_env().get("token")

    @property
    def login(self) -> str | None:
        """User login for current environment."""
        return self._get_env().get("login")

    @property
    def email(self) -> str | None:
        """User email for current environment."""
        return self._get_env().get("email")

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def clear_environment(self, url: str | None = None):
        """
        Clear credentials for a specific environment.

        Args:
            url: Environment URL to clear. If None, clears current environment.
        """
        target_url = (url or self.api_url).rstrip("/")
        if target_url in self._data["environments"]:
            del self._data["environments"][target_url]
            self._save()

    def clear_all(self):
        """Clear all credentials and delete config file."""
        self._data = {"environments": {}}
        if self.config_file.exists():
            self.config_file.unlink()

    def list_environments(self) -> list[dict]:
        """
        List all authenticated environments.

        Returns:
            List of dicts with url, login, is_current keys.
        """
        current = self.api_url
        return [
            {"url": url, "login": env.get("login"), "is_current": url == current}
            for url, env in self._data.get("environments", {}).items()
            if env.get("token")
        ]
