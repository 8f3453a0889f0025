"""TickTick OAuth authorization exceptions."""


class AuthorizationError(Exception):
    """Base exception for TickTick authorization errors."""

    pass


class InvalidInputError(AuthorizationError, ValueError):
    """Raised when caller-supplied flow parameters are empty or malformed."""

    pass


class StateMismatchError(AuthorizationError):
    """Raised when the callback state does not match the issued nonce.

    Signals a forged, stale or duplicated callback. The token endpoint is
    never contacted when this is raised.
    """

    def __init__(self):
        super().__init__(
            "OAuth state mismatch: the callback does not belong to this authorization flow."
        )


class TokenExchangeFailedError(AuthorizationError):
    """Raised when exchanging the authorization code for a token fails."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        error: str | None = None,
        error_description: str | None = None,
    ):
        self.status_code = status_code
        self.error = error
        self.error_description = error_description
        super().__init__(message)


class FlowAlreadyConsumedError(AuthorizationError):
    """Raised when finish_auth is called on a flow that already finished."""

    def __init__(self, status: str):
        self.status = status
        super().__init__(
            f"Authorization flow already consumed (status: {status}). "
            "Begin a new flow to retry."
        )


class AuthorizationDeniedError(AuthorizationError):
    """Raised when the provider redirects back with an error instead of a code."""

    def __init__(self, error: str, error_description: str | None = None):
        self.error = error
        self.error_description = error_description
        message = f"Authorization denied: {error}"
        if error_description:
            message = f"{message} ({error_description})"
        super().__init__(message)
