"""Exception hierarchy for the BTSE adapter."""

from typing import Any


class AdapterError(Exception):
    """Base class for every error raised by the adapter."""


class ConfigurationError(AdapterError):
    """Adapter configuration or loaded market metadata is inconsistent."""


class UnknownMarket(AdapterError):
    """Symbol is not in the loaded market registry."""

    def __init__(self, symbol: str, operation: str | None = None) -> None:
        message = f"Unknown market symbol {symbol!r}"
        if operation:
            message = f"{operation}: {message}"
        super().__init__(message)
        self.symbol = symbol
        self.operation = operation


class UnsupportedOperation(AdapterError):
    """No route exists for an operation and market type."""

    def __init__(self, operation: str, market_type: str | None = None, reason: str = "") -> None:
        message = f"{operation} is not supported"
        if market_type is not None:
            message += f" for type {market_type!r}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.operation = operation
        self.market_type = market_type


class AuthenticationError(AdapterError):
    """Credentials are missing for a private call."""


class InvalidOrder(AdapterError):
    """Order type is unsupported or a field required by the type is missing."""


class MalformedResponse(AdapterError):
    """A venue payload field cannot be decoded."""

    def __init__(
        self,
        field: str,
        value: Any,
        expected: str = "number",
        operation: str | None = None,
    ) -> None:
        super().__init__(field, value, expected)
        self.field = field
        self.value = value
        self.expected = expected
        self.operation = operation

    def __str__(self) -> str:
        message = f"Field {self.field!r} expected {self.expected}, got {self.value!r}"
        if self.operation:
            return f"{self.operation}: {message}"
        return message


class TransportError(AdapterError):
    """HTTP request failed; raised by the transport and passed through unchanged."""

    def __init__(
        self,
        message: str,
        url: str = "",
        status: int | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status = status
        self.body = body
