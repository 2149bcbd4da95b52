"""Core types and the market registry."""

from btse_adapter.core.registry import MarketRegistry
from btse_adapter.core.types import (
    HttpMethod,
    MarketType,
    OrderStatus,
    OrderType,
    Side,
    TimeInForce,
)

__all__ = [
    "HttpMethod",
    "MarketRegistry",
    "MarketType",
    "OrderStatus",
    "OrderType",
    "Side",
    "TimeInForce",
]
