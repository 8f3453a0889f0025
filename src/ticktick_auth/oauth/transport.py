"""Token endpoint transport.

The authorization flow only needs one capability from the network: POST
a form to the token endpoint and get the status and body back. Anything
implementing TokenTransport can stand in for the real HTTP client.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol

import httpx

from ticktick_auth.oauth.exceptions import TokenExchangeFailedError

logger = logging.getLogger(__name__)

TOKEN_URL = "https://ticktick.com/oauth/token"
DEFAULT_TIMEOUT = 30.0


@dataclass
class TokenResponse:
    """Raw result of a token endpoint request."""

    status_code: int
    payload: dict[str, Any] | None
    text: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class TokenTransport(Protocol):
    """Capability for sending a token request."""

    def send_token_request(self, params: dict[str, str]) -> TokenResponse: ...


class HttpxTokenTransport:
    """Token transport backed by httpx.

    Example:
        >>> with HttpxTokenTransport() as transport:
        ...     token = flow.finish_auth(secret, code, state, transport=transport)
    """

    def __init__(
        self,
        token_url: str = TOKEN_URL,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.Client | None = None,
    ):
        """Initialize the transport.

        Args:
            token_url: OAuth token endpoint.
            timeout: Request timeout in seconds.
            client: Existing httpx client. Not closed by this transport.
        """
        self.token_url = token_url
        self.timeout = timeout
        self._owns_client = client is None
        self._client = client if client is not None else httpx.Client(timeout=timeout)

    def send_token_request(self, params: dict[str, str]) -> TokenResponse:
        """POST the form-encoded token request.

        Raises:
            TokenExchangeFailedError: On timeout or any transport failure.
        """
        logger.debug(f"POST {self.token_url} (grant_type={params.get('grant_type')})")
        try:
            response = self._client.post(
                self.token_url,
                data=params,
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
        except httpx.TimeoutException as e:
            raise TokenExchangeFailedError(
                f"Token request timed out after {self.timeout}s"
            ) from e
        except httpx.HTTPError as e:
            raise TokenExchangeFailedError(f"Token request failed: {e}") from e

        try:
            payload = response.json()
        except ValueError:
            payload = None
        if not isinstance(payload, dict):
            payload = None

        return TokenResponse(
            status_code=response.status_code,
            payload=payload,
            text=response.text,
        )

    def close(self):
        """Close the HTTP client if this transport created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
