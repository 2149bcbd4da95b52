"""Execution layer data models."""

from dataclasses import dataclass, field
from typing import Any

from btse_adapter.core.types import OrderStatus, OrderType


@dataclass(frozen=True)
class Order:
    """Trading order model.

    ``type`` and ``status`` hold the raw venue code when it has no canonical
    mapping.
    """

    id: str | None
    symbol: str | None
    type: OrderType | str | None
    side: str | None
    price: float | None
    amount: float | None
    filled: float | None
    remaining: float | None
    status: OrderStatus | str | None
    average: float | None = None
    cost: float | None = None
    timestamp: int | None = None
    info: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def is_open(self) -> bool:
        """Check if order is still working on the book."""
        return self.status in (OrderStatus.CREATED, OrderStatus.OPEN)

    @property
    def is_closed(self) -> bool:
        """Check if order is fully filled."""
        return self.status == OrderStatus.CLOSED


@dataclass(frozen=True)
class Balance:
    """Per-currency account snapshot."""

    currency: str
    total: float | None
    free: float | None
    used: float | None


@dataclass(frozen=True)
class BalanceSheet:
    """Aggregated balances keyed by currency code."""

    balances: dict[str, Balance]
    info: Any = field(default=None, compare=False, repr=False)

    def __getitem__(self, currency: str) -> Balance:
        return self.balances[currency]

    def __contains__(self, currency: object) -> bool:
        return currency in self.balances

    @property
    def currencies(self) -> list[str]:
        return sorted(self.balances)


@dataclass(frozen=True)
class Position:
    """Futures position model."""

    symbol: str
    side: str | None
    size: float | None
    entry_price: float | None = None
    mark_price: float | None = None
    liquidation_price: float | None = None
    unrealized_pnl: float | None = None
    info: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)
