"""spotauth entry point.

Changes:
  - 2026-10-19: login / refresh subcommands, token printed as JSON on stdout.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version

import httpx

from spotauth.config import get_settings
from spotauth.errors import SpotAuthError
from spotauth.flow import authenticate
from spotauth.logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _version() -> str:
    try:
        return get_version("spotauth")
    except PackageNotFoundError:
        return "unknown"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="spotauth",
        description="Spotify OAuth 2.0 Authorization Code Flow helper",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  spotauth login                                 Authorize with the default environment
  spotauth login --env prod --show-dialog        Force the consent dialog
  spotauth login --scope user-read-email --scope playlist-read-private
  spotauth refresh AQD...                        Mint a new access token
""",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (default: SPOTAUTH_LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--version",
        "-v",
        action="version",
        version=f"%(prog)s {_version()}",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    login = sub.add_parser("login", help="Authorize in the browser and exchange the code")
    login.add_argument("--env", "-e", default=None, help="Environment name")
    login.add_argument(
        "--callback-url",
        default=None,
        help="Redirect URI to listen on (default: the environment's)",
    )
    login.add_argument(
        "--scope",
        action="append",
        dest="scopes",
        default=None,
        help="Scope to request; repeat for several (default: the environment's)",
    )
    login.add_argument(
        "--state",
        default=None,
        help="Anti-forgery state value (default: random)",
    )
    login.add_argument(
        "--show-dialog",
        action="store_true",
        help="Force the consent dialog even if access was already granted",
    )
    login.add_argument(
        "--no-browser",
        action="store_true",
        help="Print the authorization URL instead of opening a browser",
    )

    refresh = sub.add_parser("refresh", help="Exchange a refresh token for a new access token")
    refresh.add_argument("refresh_token", help="Existing refresh token")
    refresh.add_argument("--env", "-e", default=None, help="Environment name")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        settings = get_settings()
        setup_logging(level=args.log_level or settings.log_level)

        if args.command == "refresh":
            token = authenticate(
                args.env, refresh_token=args.refresh_token, settings=settings
            )
        else:
            token = authenticate(
                args.env,
                callback_url=args.callback_url,
                state=args.state,
                scopes=args.scopes,
                show_dialog=args.show_dialog,
                open_browser=not args.no_browser,
                settings=settings,
            )
    except SpotAuthError as e:
        logger.error("%s", e)
        return 1
    except httpx.HTTPError as e:
        logger.error("Token request failed: %s", e)
        return 1
    except KeyboardInterrupt:
        logger.info("Authorization cancelled.")
        return 130

    print(json.dumps(token.to_dict(), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
