# Token exchange: authorization code or refresh token -> AuthenticationToken.
# Created: 2026-10-19

from __future__ import annotations

import logging
from typing import Any

import httpx

from spotauth.config import EnvironmentConfig
from spotauth.errors import TokenResponseError
from spotauth.models import AuthenticationToken

logger = logging.getLogger(__name__)


def _post_token(
    env: EnvironmentConfig, data: dict[str, str], client: httpx.Client | None
) -> dict[str, Any]:
    data = {**data, "client_id": env.client_id}
    if env.client_secret:
        data["client_secret"] = env.client_secret

    if client is None:
        with httpx.Client(timeout=env.http_timeout) as own:
            resp = own.post(env.token_url, data=data)
    else:
        resp = client.post(env.token_url, data=data)
    resp.raise_for_status()

    try:
        body = resp.json()
    except ValueError as e:
        raise TokenResponseError("Token endpoint response is not JSON") from e
    if not isinstance(body, dict):
        raise TokenResponseError("Token endpoint response is not a JSON object")
    if not body.get("access_token"):
        raise TokenResponseError("Token endpoint response has no access_token")
    return body


def _to_token(body: dict[str, Any]) -> AuthenticationToken:
    try:
        return AuthenticationToken.from_response(body)
    except (TypeError, ValueError, AttributeError) as e:
        raise TokenResponseError(f"Malformed token endpoint response: {e}") from e


def exchange_code(
    code: str,
    callback_url: str,
    env: EnvironmentConfig,
    client: httpx.Client | None = None,
) -> AuthenticationToken:
    """Exchange an authorization code for access + refresh tokens.

    Args:
        code: Authorization code from the redirect.
        callback_url: Same redirect URI used in the authorization request.
        env: Client record for the target environment.
        client: Optional HTTP client; one is created per call otherwise.

    Raises:
        httpx.HTTPError: Transport failure or non-2xx response.
        TokenResponseError: Response carried no access token.
    """
    data = _post_token(
        env,
        {
            "code": code,
            "grant_type": "authorization_code",
            "redirect_uri": callback_url,
        },
        client,
    )
    token = _to_token(data)
    logger.info("Obtained Spotify tokens (scopes: %s)", " ".join(token.scopes) or "none")
    return token


def refresh_access_token(
    refresh_token: str,
    env: EnvironmentConfig,
    client: httpx.Client | None = None,
) -> AuthenticationToken:
    """Mint a new access token from an existing refresh token.

    The returned token always carries the caller's refresh token, whatever
    the response contains.
    """
    data = _post_token(
        env,
        {"refresh_token": refresh_token, "grant_type": "refresh_token"},
        client,
    )
    token = _to_token(data)
    token.refresh_token = refresh_token
    logger.info("Refreshed Spotify access token")
    return token
