"""BTSE adapter - one canonical trading interface over BTSE spot and futures."""

__version__ = "0.1.0"

from btse_adapter.config import AdapterConfig
from btse_adapter.errors import (
    AdapterError,
    AuthenticationError,
    ConfigurationError,
    InvalidOrder,
    MalformedResponse,
    TransportError,
    UnknownMarket,
    UnsupportedOperation,
)
from btse_adapter.execution.btse import BTSEExchange
from btse_adapter.logging import setup_logging

__all__ = [
    "AdapterConfig",
    "AdapterError",
    "AuthenticationError",
    "BTSEExchange",
    "ConfigurationError",
    "InvalidOrder",
    "MalformedResponse",
    "TransportError",
    "UnknownMarket",
    "UnsupportedOperation",
    "__version__",
    "setup_logging",
]
