"""Data types for the TickTick OAuth flow."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any

from ticktick_auth.config import CLIENT_ID_ENV, CLIENT_SECRET_ENV
from ticktick_auth.oauth.exceptions import InvalidInputError


class FlowStatus(str, Enum):
    """Lifecycle of a single authorization attempt."""

    AWAITING_CALLBACK = "awaiting_callback"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class ClientCredentials:
    """OAuth client credentials registered with TickTick.

    The secret is excluded from repr so credentials can be logged safely.
    """

    client_id: str
    client_secret: str = field(repr=False)

    @classmethod
    def from_env(cls) -> ClientCredentials:
        """Load credentials from TICKTICK_CLIENT_ID / TICKTICK_CLIENT_SECRET.

        Raises:
            InvalidInputError: If either variable is missing.
        """
        client_id = os.environ.get(CLIENT_ID_ENV)
        client_secret = os.environ.get(CLIENT_SECRET_ENV)
        if not client_id or not client_secret:
            raise InvalidInputError(
                f"TickTick client credentials not configured. "
                f"Set {CLIENT_ID_ENV} and {CLIENT_SECRET_ENV} env vars."
            )
        return cls(client_id=client_id, client_secret=client_secret)


@dataclass
class AccessToken:
    """Bearer token returned by the TickTick token endpoint.

    Any holder of this token can act as the authorizing user, so the
    token values are kept out of repr.
    """

    token: str = field(repr=False)
    expiry: datetime | None = None
    refresh_token: str | None = field(default=None, repr=False)
    token_type: str = "bearer"
    scope: str | None = None

    @classmethod
    def from_response(cls, payload: dict[str, Any], now: datetime | None = None) -> AccessToken:
        """Build a token from a token endpoint JSON payload.

        Args:
            payload: Decoded JSON body from the token endpoint.
            now: Reference time for relative expiry. Defaults to current UTC time.

        Returns:
            AccessToken with expiry resolved to an absolute UTC datetime.

        Raises:
            KeyError: If the payload has no access_token.
            ValueError: If the expiry fields are not numeric.
        """
        now = now or datetime.now(timezone.utc)

        expiry = None
        if payload.get("expires_in") is not None:
            expiry = now + timedelta(seconds=float(payload["expires_in"]))
        elif payload.get("expires_at") is not None:
            expiry = datetime.fromtimestamp(float(payload["expires_at"]), tz=timezone.utc)

        return cls(
            token=payload["access_token"],
            expiry=expiry,
            refresh_token=payload.get("refresh_token"),
            token_type=payload.get("token_type") or "bearer",
            scope=payload.get("scope"),
        )

    @property
    def is_expired(self) -> bool:
        """Check if the token is past its expiry. Tokens without expiry never expire."""
        if self.expiry is None:
            return False
        return self.expiry <= datetime.now(timezone.utc)

    def authorization_header(self) -> str:
        """Value for the HTTP Authorization header."""
        return f"Bearer {self.token}"
