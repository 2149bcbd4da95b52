"""Market registry - canonical symbol to venue id mapping."""

import logging
from collections.abc import Iterable, Iterator

from btse_adapter.core.types import MarketType
from btse_adapter.data.models import Market
from btse_adapter.errors import ConfigurationError, UnknownMarket

logger = logging.getLogger(__name__)


class MarketRegistry:
    """Loaded markets indexed by canonical symbol and by venue id.

    The registry is built in one go and never mutated afterwards; a reload
    builds a new instance.
    """

    def __init__(self, markets: Iterable[Market] = ()) -> None:
        self._by_symbol: dict[str, Market] = {}
        self._by_id: dict[str, Market] = {}
        for market in markets:
            self._add(market)

    def _add(self, market: Market) -> None:
        existing = self._by_id.get(market.id)
        if existing is not None:
            raise ConfigurationError(
                f"Venue id {market.id!r} is listed by both {existing.type.value} "
                f"and {market.type.value} market summaries"
            )
        if market.symbol in self._by_symbol:
            raise ConfigurationError(
                f"Symbol {market.symbol!r} maps to both {self._by_symbol[market.symbol].id!r} "
                f"and {market.id!r}"
            )
        self._by_symbol[market.symbol] = market
        self._by_id[market.id] = market

    def __len__(self) -> int:
        return len(self._by_symbol)

    def __iter__(self) -> Iterator[Market]:
        return iter(self._by_symbol.values())

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._by_symbol

    @property
    def symbols(self) -> list[str]:
        return sorted(self._by_symbol)

    def resolve(self, symbol: str, operation: str | None = None) -> Market:
        """Get market by canonical symbol.

        Args:
            symbol: Canonical symbol
            operation: Calling operation, named in the error

        Raises:
            UnknownMarket: If the symbol was never loaded
        """
        market = self._by_symbol.get(symbol)
        if market is None:
            raise UnknownMarket(symbol, operation)
        return market

    def lookup_by_id(self, venue_id: str) -> Market | str:
        """Get market by venue id, or the raw id if it is not registered."""
        return self._by_id.get(venue_id, venue_id)

    def symbol_for_id(self, venue_id: str) -> str:
        """Canonical symbol for a venue id, falling back to the id itself."""
        market = self.lookup_by_id(venue_id)
        if isinstance(market, Market):
            return market.symbol
        logger.debug(f"Venue id {venue_id!r} not in registry, passing through")
        return market

    def of_type(self, market_type: MarketType) -> list[Market]:
        return [m for m in self._by_symbol.values() if m.type == market_type]
