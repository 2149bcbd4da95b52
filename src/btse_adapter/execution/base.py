"""Abstract exchange interface."""

from abc import ABC, abstractmethod
from typing import Any

from btse_adapter.core.types import OrderType, Side
from btse_adapter.data.models import Market, OrderBook, Ticker, Trade
from btse_adapter.execution.models import BalanceSheet, Order


class Exchange(ABC):
    """Canonical trading interface.

    Implementations hide venue endpoints, authentication and payload shapes
    behind these operations. Every operation accepts an optional ``type``
    ("spot" or "futures") selecting the product line.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Exchange name."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release network resources."""
        ...

    # Markets

    @abstractmethod
    async def load_markets(self, reload: bool = False) -> list[Market]:
        """Load market metadata; cached until reload is requested."""
        ...

    @abstractmethod
    async def fetch_ticker(self, symbol: str, type: str | None = None) -> Ticker:
        """Get ticker for a symbol."""
        ...

    @abstractmethod
    async def fetch_order_book(
        self, symbol: str, limit: int | None = None, type: str | None = None
    ) -> OrderBook:
        """Get order book snapshot for a symbol."""
        ...

    @abstractmethod
    async def fetch_trades(
        self,
        symbol: str,
        since: int | None = None,
        limit: int | None = None,
        type: str | None = None,
    ) -> list[Trade]:
        """Get recent public trades for a symbol."""
        ...

    # Account

    @abstractmethod
    async def fetch_balance(self, type: str | None = None) -> BalanceSheet:
        """Get balances per currency."""
        ...

    # Order management

    @abstractmethod
    async def create_order(
        self,
        symbol: str,
        order_type: str | OrderType,
        side: str | Side,
        amount: float,
        price: float | None = None,
        type: str | None = None,
        **kwargs: Any,
    ) -> Order:
        """Place a new order."""
        ...

    @abstractmethod
    async def cancel_order(
        self, order_id: str, symbol: str, type: str | None = None
    ) -> Order | dict[str, Any]:
        """Cancel an order."""
        ...

    @abstractmethod
    async def fetch_open_orders(self, symbol: str, type: str | None = None) -> list[Order]:
        """Get all open orders for a symbol."""
        ...
