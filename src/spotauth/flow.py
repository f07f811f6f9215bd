# Flow entry point: first-time grant or refresh, then token exchange.
# Created: 2026-10-19

from __future__ import annotations

import logging

from spotauth.authorize import acquire_code, new_state
from spotauth.config import Settings, get_settings
from spotauth.errors import ConfigurationError
from spotauth.models import AuthenticationToken, AuthorizationRequest
from spotauth.token import exchange_code, refresh_access_token

logger = logging.getLogger(__name__)


def authenticate(
    environment: str | None = None,
    *,
    callback_url: str | None = None,
    state: str | None = None,
    scopes: list[str] | None = None,
    show_dialog: bool = False,
    refresh_token: str | None = None,
    open_browser: bool = True,
    settings: Settings | None = None,
) -> AuthenticationToken:
    """Obtain a Spotify token for ``environment``.

    With ``refresh_token`` the browser step is skipped and the token is
    refreshed directly. Otherwise the user authorizes in the browser and the
    redirect's code is exchanged.

    Args:
        environment: Environment name; defaults to the configured default.
        callback_url: Redirect URI; defaults to the environment's.
        state: Anti-forgery value. ``None`` generates one, ``""`` sends none.
        scopes: Scopes to request; defaults to the environment's.
        show_dialog: Force the consent dialog even if already granted.
        refresh_token: Existing refresh token (selects the refresh path).
        open_browser: Open the system browser; if False the URL is logged.
        settings: Settings to use instead of ``get_settings()``.

    Raises:
        SpotAuthError: Configuration or authorization failure.
        httpx.HTTPError: Token endpoint failure.
    """
    if settings is None:
        settings = get_settings()
    env = settings.get_environment(environment)

    if refresh_token is not None:
        if not refresh_token.strip():
            raise ConfigurationError("Refresh token is empty")
        logger.info("Refreshing access token")
        return refresh_access_token(refresh_token, env)

    request = AuthorizationRequest(
        client_id=env.client_id,
        callback_url=callback_url or env.callback_url,
        state=new_state() if state is None else state,
        scopes=list(scopes) if scopes is not None else list(env.scopes),
        show_dialog=show_dialog,
    )
    code = acquire_code(request, env.accounts_url, open_browser=open_browser)
    return exchange_code(code, request.callback_url, env)
