"""OAuth authorization and API client for the TickTick Open API."""

__version__ = "0.1.0"
