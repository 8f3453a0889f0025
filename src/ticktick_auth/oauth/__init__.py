"""TickTick OAuth 2.0 Authorization Code flow."""

from ticktick_auth.oauth.exceptions import (
    AuthorizationDeniedError,
    AuthorizationError,
    FlowAlreadyConsumedError,
    InvalidInputError,
    StateMismatchError,
    TokenExchangeFailedError,
)
from ticktick_auth.oauth.flow import (
    AuthorizationFlow,
    begin_auth,
    finish_auth,
    parse_callback,
)
from ticktick_auth.oauth.models import AccessToken, ClientCredentials, FlowStatus
from ticktick_auth.oauth.transport import HttpxTokenTransport, TokenResponse, TokenTransport

__all__ = [
    "AuthorizationFlow",
    "begin_auth",
    "finish_auth",
    "parse_callback",
    "AccessToken",
    "ClientCredentials",
    "FlowStatus",
    "HttpxTokenTransport",
    "TokenResponse",
    "TokenTransport",
    "AuthorizationError",
    "InvalidInputError",
    "StateMismatchError",
    "TokenExchangeFailedError",
    "FlowAlreadyConsumedError",
    "AuthorizationDeniedError",
]
