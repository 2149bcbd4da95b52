"""Market data models."""

from btse_adapter.data.models import Candle, Market, OrderBook, OrderBookLevel, Ticker, Trade

__all__ = ["Candle", "Market", "OrderBook", "OrderBookLevel", "Ticker", "Trade"]
