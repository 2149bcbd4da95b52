"""Normalization of BTSE payloads into canonical entities.

Every function here is pure: it takes a decoded JSON payload (plus the
resolved market or registry where a symbol has to be mapped) and returns a
fresh value object. Fields the venue omits stay ``None``; a field that is
present but cannot be decoded raises ``MalformedResponse``.
"""

import functools
import logging
import math
from collections.abc import Callable, Iterable
from typing import Any, TypeVar

from btse_adapter.core.registry import MarketRegistry
from btse_adapter.core.types import MarketType
from btse_adapter.data.models import (
    Candle,
    Limits,
    Market,
    OrderBook,
    OrderBookLevel,
    Precision,
    Ticker,
    Trade,
)
from btse_adapter.errors import MalformedResponse
from btse_adapter.execution.btse.states import parse_order_status, parse_order_type
from btse_adapter.execution.models import Balance, BalanceSheet, Order, Position

logger = logging.getLogger(__name__)

# Timestamps below this are in seconds rather than milliseconds.
_SECONDS_CUTOFF = 10**12

T = TypeVar("T")


def _names_operation(func: Callable[..., T]) -> Callable[..., T]:
    """Tag MalformedResponse raised while parsing with the parser name."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> T:
        try:
            return func(*args, **kwargs)
        except MalformedResponse as exc:
            if exc.operation is None:
                exc.operation = func.__name__
            raise

    return wrapper


def _is_absent(value: Any) -> bool:
    return value is None or value == ""


def to_float(value: Any, field: str) -> float | None:
    """Decode one numeric value, accepting numbers and numeric strings."""
    if _is_absent(value):
        return None
    if isinstance(value, bool):
        raise MalformedResponse(field, value)
    if not isinstance(value, (int, float, str)):
        raise MalformedResponse(field, value)
    try:
        result = float(value)
    except (ValueError, OverflowError):
        raise MalformedResponse(field, value) from None
    # NaN and infinities parse as floats but are never valid venue values.
    if not math.isfinite(result):
        raise MalformedResponse(field, value, "finite number")
    return result


def decode_float(payload: dict[str, Any], key: str) -> float | None:
    return to_float(payload.get(key), key)


def decode_int(payload: dict[str, Any], key: str) -> int | None:
    value = payload.get(key)
    if _is_absent(value):
        return None
    if isinstance(value, bool):
        raise MalformedResponse(key, value, "integer")
    if isinstance(value, int):
        return value
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise MalformedResponse(key, value, "integer") from None
    if not math.isfinite(number):
        raise MalformedResponse(key, value, "integer")
    return int(number)


def decode_str(payload: dict[str, Any], key: str) -> str | None:
    value = payload.get(key)
    if _is_absent(value):
        return None
    return str(value)


def _require_str(payload: dict[str, Any], key: str) -> str:
    value = decode_str(payload, key)
    if value is None:
        raise MalformedResponse(key, payload.get(key), "non-empty string")
    return value


def _symbol(
    raw_id: str | None,
    market: Market | None,
    registry: MarketRegistry | None,
) -> str | None:
    if market is not None:
        return market.symbol
    if raw_id is None:
        return None
    if registry is None:
        return raw_id
    return registry.symbol_for_id(raw_id)


def safe_currency_code(currency_id: str) -> str:
    return currency_id.upper()


@_names_operation
def parse_market(market: dict[str, Any], market_type: MarketType) -> Market:
    """Build a Market from one market_summary entry.

    Spot markets get ``BASE/QUOTE`` symbols; futures markets keep the venue
    product id (``BTCPFC``) so the two product lines never collide.
    """
    market_id = _require_str(market, "symbol")
    base_id = decode_str(market, "base") or ""
    quote_id = decode_str(market, "quote") or ""
    base = safe_currency_code(base_id)
    quote = safe_currency_code(quote_id)
    if market_type == MarketType.SPOT and base and quote:
        symbol = f"{base}/{quote}"
    else:
        symbol = market_id
    active = market.get("active")
    return Market(
        symbol=symbol,
        id=market_id,
        type=market_type,
        base=base,
        quote=quote,
        base_id=base_id,
        quote_id=quote_id,
        active=bool(active) if active is not None else None,
        precision=Precision(
            price=decode_float(market, "minPriceIncrement"),
            amount=decode_float(market, "minSizeIncrement"),
        ),
        limits=Limits(
            amount_min=decode_float(market, "minOrderSize"),
            amount_max=decode_float(market, "maxOrderSize"),
            price_min=decode_float(market, "minValidPrice"),
        ),
        info=market,
    )


@_names_operation
def parse_ticker(
    ticker: dict[str, Any],
    market: Market | None = None,
    registry: MarketRegistry | None = None,
    timestamp: int | None = None,
) -> Ticker:
    """Build a Ticker from a market_summary entry.

    The summary carries no timestamp, so the caller passes the receive time.
    """
    return Ticker(
        symbol=_symbol(decode_str(ticker, "symbol"), market, registry) or "",
        timestamp=timestamp,
        high=decode_float(ticker, "high24Hr"),
        low=decode_float(ticker, "low24Hr"),
        bid=decode_float(ticker, "highestBid"),
        ask=decode_float(ticker, "lowestAsk"),
        last=decode_float(ticker, "last"),
        percentage=decode_float(ticker, "percentageChange"),
        quote_volume=decode_float(ticker, "volume"),
        info=ticker,
    )


def _parse_levels(levels: Any, side: str, descending: bool) -> tuple[OrderBookLevel, ...]:
    if levels is None:
        return ()
    if not isinstance(levels, list):
        raise MalformedResponse(side, levels, "list of price levels")
    by_price: dict[float, float] = {}
    for level in levels:
        if not isinstance(level, dict):
            raise MalformedResponse(side, level, "price level object")
        price = decode_float(level, "price")
        size = decode_float(level, "size")
        if price is None or size is None:
            raise MalformedResponse(side, level, "price level with price and size")
        # Later entries for the same price replace earlier ones.
        by_price[price] = size
    return tuple(
        OrderBookLevel(price=price, quantity=size)
        for price, size in sorted(by_price.items(), reverse=descending)
    )


@_names_operation
def parse_order_book(orderbook: dict[str, Any], symbol: str) -> OrderBook:
    """Build an OrderBook snapshot from an orderbook/L2 payload.

    Args:
        orderbook: ``{buyQuote: [...], sellQuote: [...], timestamp, symbol}``
        symbol: Canonical symbol of the requested market

    Returns:
        OrderBook with sorted, deduplicated levels; nonce is the venue timestamp
    """
    timestamp = decode_int(orderbook, "timestamp")
    return OrderBook(
        symbol=symbol,
        bids=_parse_levels(orderbook.get("buyQuote"), "buyQuote", descending=True),
        asks=_parse_levels(orderbook.get("sellQuote"), "sellQuote", descending=False),
        timestamp=timestamp,
        nonce=timestamp,
    )


def _positive(payload: dict[str, Any], key: str) -> float:
    value = decode_float(payload, key)
    if value is None or value <= 0:
        raise MalformedResponse(key, payload.get(key), "positive number")
    return value


@_names_operation
def parse_trade(
    trade: dict[str, Any],
    market: Market | None = None,
    registry: MarketRegistry | None = None,
) -> Trade:
    """Build a Trade from a public trade or a trade_history entry."""
    side = decode_str(trade, "side")
    return Trade(
        id=decode_str(trade, "serialId"),
        order_id=decode_str(trade, "orderID"),
        symbol=_symbol(decode_str(trade, "symbol"), market, registry) or "",
        side=side.lower() if side else None,
        price=_positive(trade, "price"),
        amount=_positive(trade, "size"),
        fee=decode_float(trade, "feeAmount"),
        timestamp=decode_int(trade, "timestamp"),
        info=trade,
    )


@_names_operation
def parse_trades(
    trades: Iterable[dict[str, Any]],
    market: Market | None = None,
    registry: MarketRegistry | None = None,
    since: int | None = None,
    limit: int | None = None,
) -> list[Trade]:
    """Parse trades, sort by timestamp and apply since/limit."""
    result = [parse_trade(trade, market, registry) for trade in trades]
    result.sort(key=lambda t: t.timestamp or 0)
    if since is not None:
        result = [t for t in result if t.timestamp is not None and t.timestamp >= since]
    if limit is not None:
        result = result[-limit:] if limit > 0 else []
    return result


@_names_operation
def parse_order(
    order: dict[str, Any],
    market: Market | None = None,
    registry: MarketRegistry | None = None,
) -> Order:
    """Build an Order from an order, open_orders or cancel payload.

    ``remaining`` is ``amount - filled``; ``cost`` is ``filled * price`` and
    only set when something was filled at a known price.
    """
    filled = decode_float(order, "fillSize")
    amount = decode_float(order, "size")
    average = decode_float(order, "averageFillPrice")
    price = decode_float(order, "price")
    if price is None:
        price = decode_float(order, "triggerPrice")
    if price is None:
        price = average

    remaining = amount - filled if amount is not None and filled is not None else None
    cost = None
    if filled and price is not None:
        cost = filled * price

    side = decode_str(order, "side")
    return Order(
        id=decode_str(order, "orderID"),
        symbol=_symbol(decode_str(order, "symbol"), market, registry),
        type=parse_order_type(order.get("orderType")),
        side=side.lower() if side else None,
        price=price,
        amount=amount,
        filled=filled,
        remaining=remaining,
        average=average,
        cost=cost,
        status=parse_order_status(order.get("status")),
        timestamp=decode_int(order, "timestamp"),
        info=order,
    )


@_names_operation
def parse_balance(response: Any) -> BalanceSheet:
    """Aggregate user/wallet entries into a BalanceSheet keeping the raw response."""
    if not isinstance(response, list):
        raise MalformedResponse("wallet", response, "list of balances")
    balances: dict[str, Balance] = {}
    for entry in response:
        currency = decode_str(entry, "currency")
        if currency is None:
            logger.debug(f"Skipping wallet entry without currency: {entry}")
            continue
        code = safe_currency_code(currency)
        total = decode_float(entry, "total")
        free = decode_float(entry, "available")
        used = total - free if total is not None and free is not None else None
        balances[code] = Balance(currency=code, total=total, free=free, used=used)
    return BalanceSheet(balances=balances, info=response)


@_names_operation
def parse_candle(row: Any) -> Candle:
    """Build a Candle from ``[time, open, high, low, close, volume]``."""
    if not isinstance(row, (list, tuple)) or len(row) < 5:
        raise MalformedResponse("ohlcv", row, "[time, open, high, low, close, volume]")
    opened = to_float(row[0], "ohlcv.time")
    if opened is None:
        raise MalformedResponse("ohlcv.time", row[0], "timestamp")
    # Venue reports candle times in seconds.
    timestamp = int(opened * 1000) if opened < _SECONDS_CUTOFF else int(opened)
    return Candle(
        timestamp=timestamp,
        open=to_float(row[1], "ohlcv.open"),
        high=to_float(row[2], "ohlcv.high"),
        low=to_float(row[3], "ohlcv.low"),
        close=to_float(row[4], "ohlcv.close"),
        volume=to_float(row[5], "ohlcv.volume") if len(row) > 5 else None,
    )


@_names_operation
def parse_position(position: dict[str, Any], registry: MarketRegistry | None = None) -> Position:
    side = decode_str(position, "side")
    return Position(
        symbol=_symbol(decode_str(position, "symbol"), None, registry) or "",
        side=side.lower() if side else None,
        size=decode_float(position, "size"),
        entry_price=decode_float(position, "entryPrice"),
        mark_price=decode_float(position, "markPrice"),
        liquidation_price=decode_float(position, "liquidationPrice"),
        unrealized_pnl=decode_float(position, "unrealizedProfitLoss"),
        info=position,
    )
