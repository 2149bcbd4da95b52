"""Tests for the market registry."""

import pytest

from btse_adapter.core.registry import MarketRegistry
from btse_adapter.core.types import MarketType
from btse_adapter.data.models import Market
from btse_adapter.errors import ConfigurationError, UnknownMarket
from btse_adapter.execution.btse.parsers import parse_market
from conftest import FUTURES_SUMMARY, SPOT_SUMMARY


def build_registry() -> MarketRegistry:
    markets = [parse_market(m, MarketType.SPOT) for m in SPOT_SUMMARY]
    markets += [parse_market(m, MarketType.FUTURES) for m in FUTURES_SUMMARY]
    return MarketRegistry(markets)


def make_market(symbol: str, market_id: str, market_type: MarketType = MarketType.SPOT) -> Market:
    return Market(
        symbol=symbol,
        id=market_id,
        type=market_type,
        base="BTC",
        quote="USD",
        base_id="BTC",
        quote_id="USD",
    )


class TestResolve:
    """Test symbol and id lookups."""

    def test_round_trip_for_every_market(self):
        """Every loaded symbol round-trips through its venue id."""
        registry = build_registry()
        assert len(registry) == 3
        for symbol in registry.symbols:
            market = registry.lookup_by_id(registry.resolve(symbol).id)
            assert isinstance(market, Market)
            assert market.symbol == symbol

    def test_spot_and_futures_symbols_do_not_collide(self):
        """Spot uses BASE/QUOTE, futures keep the product id."""
        registry = build_registry()
        assert registry.resolve("BTC/USD").id == "BTC-USD"
        assert registry.resolve("BTCPFC").type == MarketType.FUTURES
        assert [m.id for m in registry.of_type(MarketType.FUTURES)] == ["BTCPFC"]

    def test_unknown_symbol_raises(self):
        """Unloaded symbols raise UnknownMarket naming the symbol."""
        registry = build_registry()
        with pytest.raises(UnknownMarket, match="DOGE/USD"):
            registry.resolve("DOGE/USD")

    def test_unknown_symbol_names_operation(self):
        """The calling operation leads the UnknownMarket message."""
        registry = build_registry()
        with pytest.raises(UnknownMarket) as excinfo:
            registry.resolve("DOGE/USD", "fetch_ticker")
        assert str(excinfo.value) == "fetch_ticker: Unknown market symbol 'DOGE/USD'"
        assert excinfo.value.operation == "fetch_ticker"

    def test_unknown_id_passes_through(self):
        """Unknown venue ids come back unchanged instead of raising."""
        registry = build_registry()
        assert registry.lookup_by_id("DELISTED-USD") == "DELISTED-USD"
        assert registry.symbol_for_id("DELISTED-USD") == "DELISTED-USD"
        assert registry.symbol_for_id("ETH-USD") == "ETH/USD"

    def test_empty_registry(self):
        """An empty registry resolves nothing."""
        registry = MarketRegistry()
        assert len(registry) == 0
        assert "BTC/USD" not in registry
        with pytest.raises(UnknownMarket):
            registry.resolve("BTC/USD")


class TestConsistency:
    """Test rejection of inconsistent market metadata."""

    def test_duplicate_venue_id_rejected(self):
        """The same venue id on two surfaces is a configuration error."""
        with pytest.raises(ConfigurationError, match="BTC-USD"):
            MarketRegistry(
                [
                    make_market("BTC/USD", "BTC-USD"),
                    make_market("BTC-USD", "BTC-USD", MarketType.FUTURES),
                ]
            )

    def test_duplicate_symbol_rejected(self):
        """Two ids mapping to one symbol is a configuration error."""
        with pytest.raises(ConfigurationError, match="BTC/USD"):
            MarketRegistry([make_market("BTC/USD", "BTC-USD"), make_market("BTC/USD", "XBT-USD")])
