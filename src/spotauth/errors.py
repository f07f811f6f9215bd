# Exception hierarchy for the authorization flow.
# Created: 2026-10-19

from __future__ import annotations


class SpotAuthError(Exception):
    """Base class for every failure raised by spotauth."""


class ConfigurationError(SpotAuthError):
    """Environment configuration is missing or incomplete."""


class UnknownEnvironmentError(ConfigurationError):
    def __init__(self, name: str):
        super().__init__(f"Unknown environment: {name}")
        self.name = name


class AuthorizationError(SpotAuthError):
    """The browser redirect did not yield a usable authorization code."""


class AuthorizationAborted(AuthorizationError):
    """The user hit the exit URL on the local listener."""


class StateMismatchError(AuthorizationError):
    """The redirect's state does not match the one sent with the request."""


class ProviderError(AuthorizationError):
    """The accounts service reported an error on the redirect."""

    def __init__(self, error: str):
        super().__init__(f"Authorization failed: {error}")
        self.error = error


class MissingCodeError(AuthorizationError):
    """No authorization code was received."""


class TokenResponseError(SpotAuthError):
    """The token endpoint answered without an access token."""
