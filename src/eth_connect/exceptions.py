"""Exception hierarchy for eth-connect."""

from typing import Any


class ConnectError(Exception):
    """Base exception for all connection and binding errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class NetworkError(ConnectError):
    """Raised when an RPC request or transport operation fails."""

    def __init__(
        self,
        message: str,
        endpoint: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.endpoint = endpoint


class TransportUnreachable(NetworkError):
    """Raised when the liveness probe or the low-level connect fails.

    This is the only failure that makes the orchestrator fall back to the
    hosted endpoints.
    """

    pass


class FallbackExhausted(NetworkError):
    """Raised when a connection attempt fails and no retry is left."""

    def __init__(
        self,
        message: str,
        attempts: int = 0,
        endpoint: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, endpoint, details)
        self.attempts = attempts


class CoinbaseNotFound(ConnectError):
    """Raised when the node reports no coinbase account."""

    def __init__(self, value: Any | None = None):
        super().__init__(
            "[connect] setCoinbase: coinbase not found", details={"coinbase": value}
        )
        self.value = value


class ValidationError(ConnectError):
    """Raised when connection options are malformed."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.field = field
        self.value = value
