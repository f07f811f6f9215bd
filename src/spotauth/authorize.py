# Authorization-code acquisition: authorization URL, browser hand-off and a
# one-shot local listener that catches the redirect.
# Created: 2026-10-19

from __future__ import annotations

import html
import logging
import secrets
import urllib.parse
import webbrowser
from collections.abc import Mapping
from http.server import BaseHTTPRequestHandler, HTTPServer

from spotauth.errors import (
    AuthorizationAborted,
    AuthorizationError,
    MissingCodeError,
    ProviderError,
    StateMismatchError,
)
from spotauth.models import AuthorizationRequest

logger = logging.getLogger(__name__)

EXIT_PARAM = "Exit"

_PAGE = """<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>{title}</title></head>
<body><h1>{title}</h1><p>{message}</p></body>
</html>
"""


def new_state() -> str:
    """Generate a fresh anti-forgery state token."""
    return secrets.token_urlsafe(16)


def build_authorize_url(request: AuthorizationRequest, accounts_url: str) -> str:
    return request.authorize_url(accounts_url)


def parse_callback(query: Mapping[str, str], expected_state: str) -> str:
    """Validate redirect query parameters and return the authorization code.

    Checks run in a fixed order: exit request, state mismatch, provider
    error, missing code.

    Raises:
        AuthorizationAborted: The ``Exit`` parameter is present.
        StateMismatchError: ``state`` differs from ``expected_state``.
        ProviderError: The accounts service sent an ``error`` parameter.
        MissingCodeError: No ``code`` parameter.
    """
    if EXIT_PARAM in query:
        raise AuthorizationAborted("Authorization aborted by exit request")

    if expected_state and query.get("state") != expected_state:
        raise StateMismatchError("State parameter does not match the request")

    if "error" in query:
        raise ProviderError(query["error"] or "unknown_error")

    code = query.get("code")
    if not code:
        raise MissingCodeError("Redirect did not include an authorization code")
    return code


def _render(title: str, message: str) -> bytes:
    return _PAGE.format(title=html.escape(title), message=html.escape(message)).encode("utf-8")


class _CallbackHandler(BaseHTTPRequestHandler):
    server: _CallbackServer

    def do_GET(self) -> None:
        parsed = urllib.parse.urlparse(self.path)
        query = {
            key: values[0]
            for key, values in urllib.parse.parse_qs(parsed.query, keep_blank_values=True).items()
        }

        try:
            self.server.code = parse_callback(query, self.server.expected_state)
        except AuthorizationError as e:
            self.server.error = e
            self._respond(400, _render("Authorization failed", str(e)))
            return

        self._respond(200, _render("Authorization complete", "You can close this window."))

    def _respond(self, status: int, body: bytes) -> None:
        self.send_response(status)
        self.send_header("Content-Type", "text/html; charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        self.send_header("Connection", "close")
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format: str, *args) -> None:  # noqa: A002
        logger.debug("Callback listener: " + format, *args)


class _CallbackServer(HTTPServer):
    def __init__(self, address: tuple[str, int], expected_state: str):
        super().__init__(address, _CallbackHandler)
        self.expected_state = expected_state
        self.code: str | None = None
        self.error: AuthorizationError | None = None


class CallbackListener:
    """Single-connection HTTP listener bound to the redirect URI.

    The socket is bound on construction so the browser can be opened
    afterwards without racing the redirect.
    """

    def __init__(self, callback_url: str, expected_state: str = ""):
        parsed = urllib.parse.urlparse(callback_url)
        if not parsed.hostname:
            raise ValueError(f"Callback URL has no host: {callback_url}")
        port = parsed.port
        if port is None:
            port = 443 if parsed.scheme == "https" else 80

        self._server = _CallbackServer((parsed.hostname, port), expected_state)

    @property
    def port(self) -> int:
        return self._server.server_address[1]

    def wait(self) -> str:
        """Block until one request arrives, then stop and return the code."""
        logger.info("Waiting for authorization redirect on port %d", self.port)
        try:
            self._server.handle_request()
        finally:
            self._server.server_close()

        if self._server.error is not None:
            raise self._server.error
        if not self._server.code:
            raise MissingCodeError("Listener stopped without receiving an authorization code")
        return self._server.code

    def close(self) -> None:
        self._server.server_close()


def acquire_code(
    request: AuthorizationRequest, accounts_url: str, open_browser: bool = True
) -> str:
    """Send the user to the authorization page and wait for the redirect."""
    listener = CallbackListener(request.callback_url, request.state)
    url = build_authorize_url(request, accounts_url)

    try:
        opened = open_browser and webbrowser.open(url)
    except BaseException:
        listener.close()
        raise

    if opened:
        logger.info("Opened browser for Spotify authorization")
    else:
        logger.info("Open this URL to authorize: %s", url)

    return listener.wait()
