"""spotauth - Spotify OAuth 2.0 Authorization Code Flow helper.

Created: 2026-10-19

Opens the browser at the Spotify authorization page, catches the redirect on
a one-shot local listener and exchanges the code for tokens. An existing
refresh token skips the browser step.

Usage:
    from spotauth import authenticate

    token = authenticate("default", scopes=["user-read-playback-state"])
    later = authenticate("default", refresh_token=token.refresh_token)
"""

from spotauth.errors import (
    AuthorizationAborted,
    AuthorizationError,
    ConfigurationError,
    MissingCodeError,
    ProviderError,
    SpotAuthError,
    StateMismatchError,
    TokenResponseError,
    UnknownEnvironmentError,
)
from spotauth.flow import authenticate
from spotauth.models import AuthenticationToken, AuthorizationRequest

__all__ = [
    "AuthenticationToken",
    "AuthorizationAborted",
    "AuthorizationError",
    "AuthorizationRequest",
    "ConfigurationError",
    "MissingCodeError",
    "ProviderError",
    "SpotAuthError",
    "StateMismatchError",
    "TokenResponseError",
    "UnknownEnvironmentError",
    "authenticate",
]
