"""Tests for the CLI browser login flow."""

from __future__ import annotations

import time
from unittest.mock import MagicMock, patch

import httpx
import pytest

from kyoto_cli.auth import login, logout, whoami
from kyoto_cli.config import Config

LOGIN_ID = "0" * 32
POLL_TOKEN = "p" * 43
LOGIN_URL = f"http://web.test/cli/login?loginId={LOGIN_ID}&browserToken={'b' * 43}"
RESULT = {
    "sessionToken": "kyoto_cli_" + "a" * 64,
    "user": {"id": "user_123", "login": "octocat", "email": "octocat@example.com"},
}


def _status_error(code: int) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", "http://api.test/api/cli/login/status")
    return httpx.HTTPStatusError("error", request=request, response=httpx.Response(code, request=request))


@pytest.fixture
def api():
    client = MagicMock()
    client.start_login.return_value = {
        "loginId": LOGIN_ID,
        "pollToken": POLL_TOKEN,
        "expiresAtMs": int(time.time() * 1000) + 600_000,
        "loginUrl": LOGIN_URL,
    }
    with patch("kyoto_cli.auth.ApiClient", return_value=client):
        yield client


@pytest.fixture(autouse=True)
def no_side_effects():
    with patch("kyoto_cli.auth.webbrowser.open") as open_browser, patch("kyoto_cli.auth.time.sleep"):
        yield open_browser


def test_login_success(api, no_side_effects):
    api.login_status.side_effect = [{"status": "pending"}, {"status": "completed", "result": RESULT}]
    config = Config()

    assert login(config) is True

    no_side_effects.assert_called_once_with(LOGIN_URL)
    api.login_status.assert_called_with(LOGIN_ID, POLL_TOKEN)
    assert api.login_status.call_count == 2
    api.close.assert_called_once()

    saved = Config()
    assert saved.token == RESULT["sessionToken"]
    assert saved.login == "octocat"


def test_login_expired(api):
    api.login_status.side_effect = [{"status": "pending"}, _status_error(410)]
    config = Config()

    assert login(config) is False
    assert not Config().is_authenticated


def test_login_keeps_polling_through_network_errors(api):
    api.login_status.side_effect = [
        httpx.ConnectError("connection refused"),
        _status_error(429),
        {"status": "completed", "result": RESULT},
    ]

    assert login(Config()) is True
    assert api.login_status.call_count == 3


def test_login_times_out_at_expiry(api):
    api.start_login.return_value["expiresAtMs"] = int(time.time() * 1000) - 1

    assert login(Config()) is False
    api.login_status.assert_not_called()


def test_login_start_failure(api):
    api.start_login.side_effect = httpx.ConnectError("connection refused")

    assert login(Config()) is False
    api.close.assert_called_once()


def test_login_unexpected_status_error(api):
    api.login_status.side_effect = _status_error(500)

    assert login(Config()) is False


def test_logout_current():
    config = Config()
    config.save_session("kyoto_cli_x", RESULT["user"])

    assert logout(config) is True
    assert not Config().is_authenticated


def test_logout_when_not_logged_in():
    assert logout(Config()) is False


def test_logout_all():
    Config(api_url_override="http://localhost:8000").save_session("kyoto_cli_dev", RESULT["user"])
    Config().save_session("kyoto_cli_prod", RESULT["user"])

    assert logout(Config(), logout_all=True) is True
    assert Config().list_environments() == []


def test_whoami(capsys):
    assert whoami(Config()) is False

    Config().save_session("kyoto_cli_x", RESULT["user"])

    assert whoami(Config()) is True
    assert "octocat <octocat@example.com>" in capsys.readouterr().out
