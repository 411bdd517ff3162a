"""Main entry point for the Kyoto CLI."""
from __future__ import annotations

import sys

from kyoto_cli import __version__
from kyoto_cli.auth import login, logout, whoami
from kyoto_cli.config import Config


def print_help():
    """Print help message."""
    print(f"""
Kyoto CLI v{__version__}

Usage:
  kyoto [options] <command>

Commands:
  login             Authenticate via browser
  logout            Clear stored credentials
  whoami            Show the logged-in user

Options:
  --api-url URL     Override API endpoint (default: https://usekyoto.com)
  --all             With logout: clear every environment
  -h, --help        Show this help
  -v, --version     Show version

Environment:
  KYOTO_API_URL     Override API endpoint (same as --api-url)

Examples:
  kyoto login                                    # Login to production
  kyoto login --api-url http://localhost:8000    # Login to local dev
  kyoto logout --all                             # Logout all environments
""")


def parse_args(args: list[str]) -> dict:
    """
    Parse command line arguments.

    Returns dict with:
        command: str | None (login, logout, whoami)
        api_url: str | None
        logout_all: bool
        show_help: bool
        show_version: bool
    """
    result = {
        "command": None,
        "api_url": None,
        "logout_all": False,
        "show_help": False,
        "show_version": False,
    }

    i = 0
    while i < len(args):
        arg = args[i]

        if arg in ("login", "logout", "whoami"):
            result["command"] = arg
        elif arg == "--api-url":
            if i + 1 < len(args):
                result["api_url"] = args[i + 1]
                i += 1
            else:
                print("Error: --api-url requires a URL")
                sys.exit(1)
        elif arg == "--all":
            result["logout_all"] = True
        elif arg in ("--help", "-h"):
            result["show_help"] = True
        elif arg in ("--version", "-v"):
            result["show_version"] = True
        elif arg.startswith("-"):
            print(f"Unknown option: {arg}")
            print("Run 'kyoto --help' for usage.")
            sys.exit(1)
        else:
            print(f"Unknown command: {arg}")
            print("Run 'kyoto --help' for usage.")
            sys.exit(1)

        i += 1

    return result


def main():
    """Main entry point."""
    args = parse_args(sys.argv[1:])

    if args["show_help"]:
        print_help()
        return

    if args["show_version"]:
        print(f"kyoto-cli {__version__}")
        return

    if args["command"] is None:
        print_help()
        sys.exit(1)

    config = Config(api_url_override=args["api_url"])

    if args["command"] == "login":
        success = login(config)
    elif args["command"] == "logout":
        success = logout(config, logout_all=args["logout_all"])
    else:
        success = whoami(config)

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
