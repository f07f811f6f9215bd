# Authorization flow data models.
# Created: 2026-10-19

from __future__ import annotations

import time
import urllib.parse
from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass
class AuthorizationRequest:
    """Parameters of one authorization redirect, discarded after exchange."""

    client_id: str
    callback_url: str
    state: str = ""
    scopes: list[str] = field(default_factory=list)
    show_dialog: bool = False

    def authorize_url(self, accounts_url: str) -> str:
        """Render the accounts-service URL the user is sent to.

        The ``state`` parameter is only included when a non-empty state is set.
        """
        params = {
            "client_id": self.client_id,
            "response_type": "code",
            "redirect_uri": self.callback_url,
            "scope": " ".join(self.scopes),
        }
        if self.state:
            params["state"] = self.state
        params["show_dialog"] = "true" if self.show_dialog else "false"

        return f"{accounts_url.rstrip('/')}/authorize/?{urllib.parse.urlencode(params)}"


@dataclass
class AuthenticationToken:
    """Access/refresh token pair returned by the token endpoint."""

    access_token: str
    refresh_token: str | None = None
    token_type: str = "Bearer"
    expires_in: int = 3600
    expires_at: float | None = None  # Unix timestamp
    scopes: list[str] = field(default_factory=list)

    @classmethod
    def from_response(
        cls, data: dict[str, Any], now: float | None = None
    ) -> AuthenticationToken:
        raw_expires = data.get("expires_in")
        expires_in = 3600 if raw_expires is None else int(raw_expires)
        issued = time.time() if now is None else now
        return cls(
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token"),
            token_type=data.get("token_type") or "Bearer",
            expires_in=expires_in,
            expires_at=issued + expires_in,
            scopes=(data.get("scope") or "").split(),
        )

    def is_expired(self, leeway: float = 60) -> bool:
        """True once the token is within ``leeway`` seconds of expiry."""
        if self.expires_at is None:
            return False
        return self.expires_at <= time.time() + leeway

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
