"""Browser pairing login for the Kyoto CLI."""
import time
import webbrowser

import httpx

from kyoto_cli.client import ApiClient
from kyoto_cli.config import Config

POLL_INTERVAL_SECONDS = 2.0


def _now_ms() -> int:
    return int(time.time() * 1000)


def login(config: Config, poll_interval: float = POLL_INTERVAL_SECONDS) -> bool:
    """
    Log in by pairing with a signed-in browser.

    Starts a login, opens the login URL, then polls with the poll token
    until the browser confirms or the login expires.

    Returns True if successful, False otherwise.
    """
    client = ApiClient(config.api_url)

    try:
        print("Starting browser login...")
        start_res = client.start_login()

        login_id = start_res["loginId"]
        poll_token = start_res["pollToken"]
        expires_at_ms = start_res["expiresAtMs"]
        login_url = start_res["loginUrl"]

        print(f"\nOpening browser: {login_url}")
        print("If your browser didn't open, paste the URL above into it.")
        webbrowser.open(login_url)

        print("Waiting for confirmation...", end="", flush=True)

        while _now_ms() < expires_at_ms:
            time.sleep(poll_interval)

            try:
                poll_res = client.login_status(login_id, poll_token)
            except httpx.HTTPStatusError as e:
                if e.response.status_code == 410:
                    print(" expired")
                    print("Login expired. Run 'kyoto login' again.")
                    return False
                if e.response.status_code == 429:
                    # Server asked us to slow down; the next sleep covers it
                    continue
                raise
            except httpx.TransportError as e:
                print(f"\nPoll error: {e}")
                continue

            if poll_res["status"] == "completed":
                result = poll_res["result"]
                user = result["user"]
                config.save_session(result["sessionToken"], user)

                print(" done")
                print(f"Logged in as {user['login']}")
                print(f"Credentials saved to {config.config_file}")
                return True

            # Still pending, keep polling
            print(".", end="", flush=True)

        print(" timeout")
        print("Login timed out. Run 'kyoto login' again.")
        return False

    except httpx.HTTPError as e:
        print(f"\nLogin failed: {e}")
        return False
    finally:
        client.close()


def logout(config: Config, logout_all: bool = False) -> bool:
    """
    Clear stored credentials.

    Args:
        config: Config instance
        logout_all: If True, clear all environments. If False, only current.

    Returns True if successful, False otherwise.
    """
    if logout_all:
        envs = config.list_environments()
        if not envs:
            print("No authenticated environments.")
            return True

        for env in envs:
            print(f"  Logging out of {env['url']} ({env.get('login') or 'unknown'})")

        config.clear_all()
        print("Logged out of all environments.")
        return True

    if not config.is_authenticated:
        print(f"Not logged in to {config.api_url}")
        return False

    who = config.login or "unknown"
    config.clear_environment()
    print(f"Logged out of {config.api_url} ({who})")
    return True


def whoami(config: Config) -> bool:
    """Print the user stored for the current environment."""
    if not config.is_authenticated:
        print(f"Not logged in to {config.api_url}")
        return False

    who = config.login or "unknown"
    if config.email:
        who = f"{who} <{config.email}>"
    print(f"Logged in to {config.api_url} as {who}")
    return True
