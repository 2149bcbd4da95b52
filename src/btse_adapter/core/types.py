"""Global type definitions."""

from enum import Enum


class MarketType(str, Enum):
    """Product line an operation is routed to."""

    SPOT = "spot"
    FUTURES = "futures"


class Side(str, Enum):
    """Order side."""

    BUY = "buy"
    SELL = "sell"


class OrderType(str, Enum):
    """Order type.

    LIMIT, MARKET and PEG are what the venue reports back; LIMIT, MARKET,
    STOP and TRAILING_STOP are what can be submitted.
    """

    LIMIT = "limit"
    MARKET = "market"
    PEG = "peg"
    STOP = "stop"
    TRAILING_STOP = "trailingstop"


class TimeInForce(str, Enum):
    """Time in force for orders."""

    GTC = "GTC"  # Good Till Cancel
    IOC = "IOC"  # Immediate or Cancel
    FOK = "FOK"  # Fill or Kill


class OrderStatus(str, Enum):
    """Canonical order lifecycle status."""

    CREATED = "created"
    OPEN = "open"
    CLOSED = "closed"
    CANCELED = "canceled"
    REJECTED = "rejected"


class HttpMethod(str, Enum):
    """HTTP verbs used by the venue API."""

    GET = "GET"
    POST = "POST"
    DELETE = "DELETE"
