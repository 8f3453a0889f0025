"""TickTick OAuth 2.0 Authorization Code flow.

A flow is a one-shot object:
    begin_auth()  -> AuthorizationFlow (awaiting callback)
    finish_auth() -> AccessToken        (completed) or an error (failed)

Any second finish_auth on the same flow raises FlowAlreadyConsumedError,
whatever the outcome of the first call. Receiving the redirect (e.g. a
local HTTP listener) is left to the caller; the flow only consumes the
resulting code and state.

Example:
    >>> flow = begin_auth("abc123", "http://localhost:8080")
    >>> print(f"Visit: {flow.get_url()}")
    >>> redirect_url = input("Paste redirect URL: ")
    >>> token = flow.finish_from_redirect(client_secret, redirect_url)
"""

from __future__ import annotations

import hmac
import logging
import os
from collections.abc import Sequence
from urllib.parse import parse_qs, urlsplit

from authlib.common.security import generate_token
from authlib.oauth2.rfc6749.parameters import prepare_grant_uri

from ticktick_auth.config import CLIENT_ID_ENV, get_redirect_uri
from ticktick_auth.oauth.exceptions import (
    AuthorizationDeniedError,
    FlowAlreadyConsumedError,
    InvalidInputError,
    StateMismatchError,
    TokenExchangeFailedError,
)
from ticktick_auth.oauth.models import AccessToken, FlowStatus
from ticktick_auth.oauth.transport import HttpxTokenTransport, TokenResponse, TokenTransport

logger = logging.getLogger(__name__)

AUTHORIZE_URL = "https://ticktick.com/oauth/authorize"

# TickTick Open API scopes
SCOPES = {
    "tasks:read": "Read tasks and projects",
    "tasks:write": "Create, update and delete tasks and projects",
}
DEFAULT_SCOPES = ("tasks:read", "tasks:write")

STATE_LENGTH = 48


def _validate_client_id(client_id: str) -> str:
    if not isinstance(client_id, str) or not client_id:
        raise InvalidInputError("client_id must be a non-empty string")
    if client_id != client_id.strip() or any(c.isspace() for c in client_id):
        raise InvalidInputError("client_id must not contain whitespace")
    return client_id


def _validate_redirect_uri(redirect_uri: str) -> str:
    if not isinstance(redirect_uri, str) or not redirect_uri:
        raise InvalidInputError("redirect_uri must be a non-empty string")
    if any(c.isspace() for c in redirect_uri):
        raise InvalidInputError(f"redirect_uri must not contain whitespace: {redirect_uri!r}")

    try:
        parts = urlsplit(redirect_uri)
        # port is only parsed when read
        parts.port
    except ValueError as e:
        raise InvalidInputError(f"redirect_uri is malformed: {redirect_uri!r} ({e})") from e

    if not parts.scheme or not parts.netloc:
        raise InvalidInputError(
            f"redirect_uri must be an absolute URI with scheme and host: {redirect_uri!r}"
        )
    if parts.fragment:
        raise InvalidInputError(f"redirect_uri must not contain a fragment: {redirect_uri!r}")
    return redirect_uri


def _resolve_scopes(scopes: Sequence[str] | None) -> tuple[str, ...]:
    """Validate scope names against the scopes TickTick understands."""
    if scopes is None:
        return DEFAULT_SCOPES
    if isinstance(scopes, str):
        scopes = scopes.split()

    resolved = []
    for scope in scopes:
        if scope not in SCOPES:
            raise InvalidInputError(f"Unknown scope: {scope}. Use one of: {list(SCOPES.keys())}")
        if scope not in resolved:
            resolved.append(scope)
    if not resolved:
        raise InvalidInputError("At least one scope is required")
    return tuple(resolved)


def parse_callback(redirect_url: str) -> tuple[str, str]:
    """Extract the authorization code and state from a redirect URL.

    Args:
        redirect_url: The full URL the provider redirected the browser to.

    Returns:
        Tuple of (code, state), query-decoded.

    Raises:
        AuthorizationDeniedError: If the provider returned an error.
        InvalidInputError: If the URL is malformed or code or state is missing.
    """
    if not redirect_url:
        raise InvalidInputError("redirect_url must be a non-empty string")

    try:
        query = parse_qs(urlsplit(redirect_url).query, keep_blank_values=True)
    except ValueError as e:
        raise InvalidInputError(f"Redirect URL is malformed: {e}") from e

    def first(name: str) -> str | None:
        values = query.get(name)
        return values[0] if values else None

    error = first("error")
    if error:
        raise AuthorizationDeniedError(error, first("error_description"))

    code = first("code")
    state = first("state")
    if not code:
        raise InvalidInputError("Redirect URL has no 'code' parameter")
    if not state:
        raise InvalidInputError("Redirect URL has no 'state' parameter")
    return code, state


class AuthorizationFlow:
    """One TickTick OAuth authorization attempt.

    Holds the client ID, redirect URI and the CSRF state nonce issued for
    this attempt. Create it with begin_auth() rather than directly.

    A flow is single-owner and single-use; it is not safe to finish the
    same instance from several threads.
    """

    def __init__(
        self,
        client_id: str,
        redirect_uri: str,
        scopes: Sequence[str] | None = None,
    ):
        """Start a new authorization attempt.

        Args:
            client_id: OAuth client ID registered with TickTick.
            redirect_uri: Redirect URI registered with TickTick for this client.
            scopes: Scope names. Defaults to tasks:read and tasks:write.

        Raises:
            InvalidInputError: If client_id, redirect_uri or scopes are invalid.
        """
        self.client_id = _validate_client_id(client_id)
        self.redirect_uri = _validate_redirect_uri(redirect_uri)
        self.scopes = _resolve_scopes(scopes)

        self._state = generate_token(STATE_LENGTH)
        self._url = prepare_grant_uri(
            AUTHORIZE_URL,
            client_id=self.client_id,
            response_type="code",
            redirect_uri=self.redirect_uri,
            scope=" ".join(self.scopes),
            state=self._state,
        )
        self.status = FlowStatus.AWAITING_CALLBACK

        logger.info(f"Authorization flow started for client {self.client_id}")

    @classmethod
    def from_env(cls, scopes: Sequence[str] | None = None) -> AuthorizationFlow:
        """Begin a flow using TICKTICK_CLIENT_ID and TICKTICK_REDIRECT_URI."""
        client_id = os.environ.get(CLIENT_ID_ENV)
        if not client_id:
            raise InvalidInputError(
                f"TickTick client_id is required. Set {CLIENT_ID_ENV} env var."
            )
        return cls(client_id, get_redirect_uri(), scopes=scopes)

    def __repr__(self) -> str:
        return (
            f"AuthorizationFlow(client_id={self.client_id!r}, "
            f"redirect_uri={self.redirect_uri!r}, status={self.status.value!r})"
        )

    @property
    def state(self) -> str:
        """The CSRF nonce expected back in the callback."""
        return self._state

    @property
    def is_consumed(self) -> bool:
        return self.status is not FlowStatus.AWAITING_CALLBACK

    def get_url(self) -> str:
        """Get the authorization URL for the user to visit."""
        return self._url

    def finish_auth(
        self,
        client_secret: str,
        code: str,
        returned_state: str,
        transport: TokenTransport | None = None,
    ) -> AccessToken:
        """Complete the flow by exchanging the authorization code for a token.

        The flow is consumed on entry: it cannot be finished again, even if
        this call fails.

        Args:
            client_secret: OAuth client secret for the same client ID.
            code: Authorization code from the callback.
            returned_state: The state value from the same callback.
            transport: Token endpoint transport. Defaults to an httpx transport.

        Returns:
            The access token issued by TickTick.

        Raises:
            FlowAlreadyConsumedError: If this flow was already finished.
            StateMismatchError: If returned_state does not match. No request is sent.
            InvalidInputError: If client_secret or code is empty.
            TokenExchangeFailedError: If the token endpoint call or its response fails.
        """
        if self.is_consumed:
            raise FlowAlreadyConsumedError(self.status.value)
        self.status = FlowStatus.FAILED

        if not isinstance(returned_state, str) or not hmac.compare_digest(
            returned_state.encode(), self._state.encode()
        ):
            logger.warning("Rejected OAuth callback: state mismatch")
            raise StateMismatchError()

        if not client_secret:
            raise InvalidInputError("client_secret must be a non-empty string")
        if not code:
            raise InvalidInputError("code must be a non-empty string")

        params = {
            "client_id": self.client_id,
            "client_secret": client_secret,
            "code": code,
            "grant_type": "authorization_code",
            "scope": " ".join(self.scopes),
            "redirect_uri": self.redirect_uri,
        }

        if transport is None:
            with HttpxTokenTransport() as default_transport:
                response = default_transport.send_token_request(params)
        else:
            response = transport.send_token_request(params)

        token = self._parse_token_response(response)
        self.status = FlowStatus.COMPLETED
        logger.info(f"Authorization flow completed for client {self.client_id}")
        return token

    def finish_from_redirect(
        self,
        client_secret: str,
        redirect_url: str,
        transport: TokenTransport | None = None,
    ) -> AccessToken:
        """Complete the flow from the full redirect URL.

        Args:
            client_secret: OAuth client secret.
            redirect_url: The URL the provider redirected to, including query string.
            transport: Token endpoint transport.

        Returns:
            The access token issued by TickTick.

        Raises:
            AuthorizationDeniedError: If the user or provider denied access.
                The flow is marked failed.
        """
        if self.is_consumed:
            raise FlowAlreadyConsumedError(self.status.value)
        try:
            code, state = parse_callback(redirect_url)
        except AuthorizationDeniedError:
            self.status = FlowStatus.FAILED
            raise
        return self.finish_auth(client_secret, code, state, transport=transport)

    def _parse_token_response(self, response: TokenResponse) -> AccessToken:
        """Turn a token endpoint response into an AccessToken."""
        payload = response.payload or {}
        error = payload.get("error")
        description = payload.get("error_description")

        if not response.ok:
            message = f"Token endpoint returned HTTP {response.status_code}"
            if error:
                message = f"{message}: {error}"
            if description:
                message = f"{message} ({description})"
            elif not error and response.text:
                message = f"{message}: {response.text[:200]}"
            raise TokenExchangeFailedError(
                message,
                status_code=response.status_code,
                error=error,
                error_description=description,
            )

        if response.payload is None:
            raise TokenExchangeFailedError(
                "Token endpoint returned a non-JSON response",
                status_code=response.status_code,
            )

        if error:
            raise TokenExchangeFailedError(
                f"Token endpoint returned error: {error}",
                status_code=response.status_code,
                error=error,
                error_description=description,
            )

        if not payload.get("access_token"):
            raise TokenExchangeFailedError(
                "Token response has no access_token",
                status_code=response.status_code,
            )

        try:
            return AccessToken.from_response(payload)
        except (TypeError, ValueError, OverflowError) as e:
            raise TokenExchangeFailedError(
                f"Malformed token response: {e}",
                status_code=response.status_code,
            ) from e


def begin_auth(
    client_id: str,
    redirect_uri: str,
    scopes: Sequence[str] | None = None,
) -> AuthorizationFlow:
    """Begin a TickTick authorization attempt.

    No network call is made; the returned flow only carries the URL and state.
    """
    return AuthorizationFlow(client_id, redirect_uri, scopes=scopes)


def finish_auth(
    flow: AuthorizationFlow,
    client_secret: str,
    code: str,
    returned_state: str,
    transport: TokenTransport | None = None,
) -> AccessToken:
    """Finish a flow started with begin_auth. See AuthorizationFlow.finish_auth."""
    return flow.finish_auth(client_secret, code, returned_state, transport=transport)
