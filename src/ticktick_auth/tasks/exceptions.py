"""TickTick API exceptions."""


class TickTickError(Exception):
    """Base exception for TickTick API errors."""

    pass


class TickTickAPIError(TickTickError):
    """Raised when the TickTick API returns an error or cannot be reached."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class UnauthorizedError(TickTickAPIError):
    """Raised when the access token is rejected (HTTP 401)."""

    def __init__(self, message: str = "TickTick rejected the access token"):
        super().__init__(message, status_code=401)
