"""Data models for market data."""

from dataclasses import dataclass, field
from typing import Any

from btse_adapter.core.types import MarketType


@dataclass(frozen=True)
class Precision:
    """Tick sizes for price and amount."""

    price: float | None = None
    amount: float | None = None


@dataclass(frozen=True)
class Limits:
    """Order size and price limits."""

    amount_min: float | None = None
    amount_max: float | None = None
    price_min: float | None = None


@dataclass(frozen=True)
class Market:
    """One tradable instrument."""

    symbol: str
    id: str
    type: MarketType
    base: str
    quote: str
    base_id: str
    quote_id: str
    active: bool | None = None
    precision: Precision = field(default_factory=Precision)
    limits: Limits = field(default_factory=Limits)
    info: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)


@dataclass(frozen=True)
class Ticker:
    """Point-in-time market snapshot."""

    symbol: str
    timestamp: int | None = None
    high: float | None = None
    low: float | None = None
    bid: float | None = None
    ask: float | None = None
    last: float | None = None
    percentage: float | None = None
    quote_volume: float | None = None
    info: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)


@dataclass(frozen=True)
class OrderBookLevel:
    """Single level in order book."""

    price: float
    quantity: float


@dataclass(frozen=True)
class OrderBook:
    """Order book snapshot.

    Bids are sorted by price descending, asks ascending. ``nonce`` is the
    venue timestamp of the snapshot.
    """

    symbol: str
    bids: tuple[OrderBookLevel, ...]
    asks: tuple[OrderBookLevel, ...]
    timestamp: int | None = None
    nonce: int | None = None

    def is_stale(self, previous: "OrderBook") -> bool:
        """Check whether this snapshot is older than a previously polled one."""
        if self.nonce is None or previous.nonce is None:
            return False
        return self.nonce < previous.nonce


@dataclass(frozen=True)
class Trade:
    """One executed fill, public or own."""

    id: str | None
    symbol: str
    price: float
    amount: float
    timestamp: int | None = None
    side: str | None = None
    order_id: str | None = None
    fee: float | None = None
    info: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)


@dataclass(frozen=True)
class Candle:
    """Candlestick/K-line data."""

    timestamp: int
    open: float | None
    high: float | None
    low: float | None
    close: float | None
    volume: float | None = None
