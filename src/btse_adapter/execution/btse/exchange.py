"""BTSE venue adapter."""

import json
import logging
from collections.abc import Awaitable, Callable
from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal
from functools import partial
from typing import Any
from urllib.parse import urlencode

from btse_adapter.config import AdapterConfig
from btse_adapter.core.registry import MarketRegistry
from btse_adapter.core.types import HttpMethod, MarketType, OrderType, Side, TimeInForce
from btse_adapter.data.models import Candle, Market, OrderBook, Ticker, Trade
from btse_adapter.errors import MalformedResponse, UnsupportedOperation
from btse_adapter.execution.base import Exchange
from btse_adapter.execution.btse import parsers
from btse_adapter.execution.btse.router import (
    SURFACE_METHODS,
    EndpointRouter,
    Surface,
    base_url,
)
from btse_adapter.execution.btse.signer import RequestSigner, milliseconds
from btse_adapter.execution.btse.states import build_order_request, is_bulk_cancel_ack
from btse_adapter.execution.btse.transport import AiohttpTransport, HttpTransport
from btse_adapter.execution.models import BalanceSheet, Order, Position

logger = logging.getLogger(__name__)

Handler = Callable[[str, dict[str, Any], str], Awaitable[Any]]

# Candle resolution in minutes per timeframe.
TIMEFRAMES: dict[str, str] = {
    "1m": "1",
    "3m": "3",
    "5m": "5",
    "15m": "15",
    "30m": "30",
    "1h": "60",
    "2h": "120",
    "4h": "240",
    "6h": "360",
    "9h": "720",
    "1d": "1440",
    "1w": "10080",
    "1M": "43800",
    "1Y": "525600",
}


def _quantize_step(value: float, step: float | None, rounding: str) -> float:
    if not step or step <= 0:
        return value
    step_decimal = Decimal(str(step))
    quantized = (Decimal(str(value)) / step_decimal).to_integral_value(rounding=rounding)
    return float(quantized * step_decimal)


def amount_to_precision(market: Market, amount: float) -> float:
    return _quantize_step(amount, market.precision.amount, ROUND_DOWN)


def price_to_precision(market: Market, price: float) -> float:
    return _quantize_step(price, market.precision.price, ROUND_HALF_UP)


def _first(response: Any, operation: str) -> dict[str, Any]:
    if isinstance(response, list):
        if not response:
            raise MalformedResponse("response", response, "non-empty list", operation)
        response = response[0]
    if not isinstance(response, dict):
        raise MalformedResponse("response", response, "object", operation)
    return response


def _as_list(response: Any, operation: str) -> list[Any]:
    if response is None:
        return []
    if isinstance(response, dict):
        return [response]
    if not isinstance(response, list):
        raise MalformedResponse("response", response, "list", operation)
    return response


class BTSEExchange(Exchange):
    """BTSE implementation of the canonical trading interface.

    Routes each operation to spot v3.1 or futures v2.1, signs private calls
    and normalizes responses. Markets and the clock offset are loaded once
    and refreshed only by ``load_markets(reload=True)``.
    """

    timeframes = TIMEFRAMES

    def __init__(
        self,
        config: AdapterConfig | None = None,
        transport: HttpTransport | None = None,
        clock: Callable[[], int] = milliseconds,
    ) -> None:
        """Initialize the adapter.

        Args:
            config: Configuration snapshot (defaults to public-only spot)
            transport: HTTP transport (defaults to AiohttpTransport)
            clock: Millisecond wall clock, injectable for tests
        """
        self._config = config or AdapterConfig()
        self._transport = transport or AiohttpTransport(timeout=self._config.timeout)
        self._clock = clock
        self._router = EndpointRouter(self._config)
        self._signer = RequestSigner(
            self._config.api_key, self._config.secret, self._config.host, clock
        )
        self._registry: MarketRegistry | None = None
        self._handlers: dict[tuple[Surface, HttpMethod], Handler] = {
            (surface, method): partial(self._dispatch, surface, method)
            for surface, methods in SURFACE_METHODS.items()
            for method in methods
        }

    @property
    def name(self) -> str:
        return "BTSE"

    @property
    def config(self) -> AdapterConfig:
        return self._config

    @property
    def router(self) -> EndpointRouter:
        return self._router

    @property
    def handlers(self) -> dict[tuple[Surface, HttpMethod], Handler]:
        return dict(self._handlers)

    @property
    def markets(self) -> MarketRegistry:
        if self._registry is None:
            return MarketRegistry()
        return self._registry

    async def close(self) -> None:
        await self._transport.close()

    async def __aenter__(self) -> "BTSEExchange":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # Request plumbing

    async def _dispatch(
        self,
        surface: Surface,
        method: HttpMethod,
        path: str,
        params: dict[str, Any],
        operation: str,
    ) -> Any:
        url = f"{base_url(self._config.host, surface)}/{path}"
        query = {k: v for k, v in params.items() if v is not None}
        body: str | None = None
        if method == HttpMethod.POST:
            body = json.dumps(query)
        elif query:
            url = f"{url}?{urlencode(query)}"

        headers: dict[str, str] = {}
        if surface.is_private:
            headers = self._signer.sign(surface, method.value, url, body, operation)

        logger.debug(f"{operation}: {method.value} {url}")
        return await self._transport.send(url, method.value, headers, body)

    async def _request(
        self,
        operation: str,
        params: dict[str, Any] | None = None,
        type: str | MarketType | None = None,
    ) -> Any:
        route = self._router.route(operation, type)
        handler = self._handlers[(route.surface, route.method)]
        return await handler(route.path, params or {}, operation)

    # Markets

    async def fetch_time(self, type: str | None = None) -> int:
        """Get server time in epoch milliseconds."""
        response = await self._request("fetch_time", type=type)
        epoch = parsers.decode_float(_first(response, "fetch_time"), "epoch")
        if epoch is None:
            raise MalformedResponse("epoch", None, "server time in seconds", "fetch_time")
        return int(round(epoch * 1000))

    async def load_time_difference(self, type: str | None = None) -> int:
        """Synchronize the nonce clock with the venue.

        Returns:
            Offset in milliseconds (local - server)
        """
        server_time = await self.fetch_time(type)
        return self._signer.sync_clock(server_time)

    async def fetch_markets(self, type: str | None = None) -> list[Market]:
        """Get all markets of one product line."""
        market_type = self._router.market_type_for("fetch_markets", type)
        response = await self._request("fetch_markets", type=market_type)
        return [
            parsers.parse_market(item, market_type)
            for item in _as_list(response, "fetch_markets")
        ]

    async def load_markets(self, reload: bool = False) -> list[Market]:
        """Load spot and futures markets into the registry.

        Args:
            reload: Rebuild the registry and resync the clock

        Returns:
            All loaded markets

        Raises:
            ConfigurationError: Duplicate venue ids or symbols across surfaces
        """
        if self._registry is not None and not reload:
            return list(self._registry)

        if self._config.adjust_time_difference and self._config.has_credentials:
            await self.load_time_difference()

        spot = await self.fetch_markets(type=MarketType.SPOT)
        futures = await self.fetch_markets(type=MarketType.FUTURES)
        self._registry = MarketRegistry([*spot, *futures])
        logger.info(f"Loaded {len(spot)} spot and {len(futures)} futures markets")
        return list(self._registry)

    async def market(self, symbol: str, operation: str = "market") -> Market:
        await self.load_markets()
        return self.markets.resolve(symbol, operation)

    async def fetch_ticker(self, symbol: str, type: str | None = None) -> Ticker:
        """Get ticker for a symbol."""
        market = await self.market(symbol, "fetch_ticker")
        response = await self._request("fetch_ticker", {"symbol": market.id}, type)
        return parsers.parse_ticker(
            _first(response, "fetch_ticker"), market, timestamp=self._clock()
        )

    async def fetch_tickers(
        self, symbols: list[str] | None = None, type: str | None = None
    ) -> dict[str, Ticker]:
        """Get tickers for every market of one product line, keyed by symbol."""
        await self.load_markets()
        response = await self._request("fetch_tickers", type=type)
        received = self._clock()
        tickers = {}
        for item in _as_list(response, "fetch_tickers"):
            if parsers.decode_str(item, "symbol") is None:
                logger.debug(f"Skipping market summary without symbol: {item}")
                continue
            ticker = parsers.parse_ticker(item, registry=self.markets, timestamp=received)
            if symbols is None or ticker.symbol in symbols:
                tickers[ticker.symbol] = ticker
        return tickers

    async def fetch_order_book(
        self, symbol: str, limit: int | None = None, type: str | None = None
    ) -> OrderBook:
        """Get order book snapshot.

        Args:
            symbol: Canonical symbol
            limit: Depth per side
            type: "spot" or "futures"

        Returns:
            OrderBook with nonce set to the venue timestamp
        """
        market = await self.market(symbol, "fetch_order_book")
        request = {"symbol": market.id, "depth": limit}
        response = await self._request("fetch_order_book", request, type)
        return parsers.parse_order_book(_first(response, "fetch_order_book"), market.symbol)

    async def fetch_trades(
        self,
        symbol: str,
        since: int | None = None,
        limit: int | None = None,
        type: str | None = None,
    ) -> list[Trade]:
        """Get recent public trades."""
        market = await self.market(symbol, "fetch_trades")
        request = {"symbol": market.id, "count": limit}
        response = await self._request("fetch_trades", request, type)
        return parsers.parse_trades(
            _as_list(response, "fetch_trades"), market, since=since, limit=limit
        )

    async def fetch_ohlcv(
        self,
        symbol: str,
        timeframe: str = "1h",
        since: int | None = None,
        limit: int | None = None,
        type: str | None = None,
    ) -> list[Candle]:
        """Get candles for a symbol.

        Args:
            symbol: Canonical symbol
            timeframe: Key of ``TIMEFRAMES``
            since: Start time in epoch milliseconds
            limit: Keep only the most recent candles
            type: "spot" or "futures"
        """
        resolution = self.timeframes.get(timeframe)
        if resolution is None:
            raise UnsupportedOperation(
                "fetch_ohlcv", reason=f"timeframe {timeframe!r} not in {sorted(self.timeframes)}"
            )
        market = await self.market(symbol, "fetch_ohlcv")
        request = {
            "symbol": market.id,
            "resolution": resolution,
            "end": self._clock() // 1000,
            "start": since // 1000 if since is not None else None,
        }
        response = await self._request("fetch_ohlcv", request, type)
        candles = sorted(
            (parsers.parse_candle(row) for row in _as_list(response, "fetch_ohlcv")),
            key=lambda c: c.timestamp,
        )
        if limit is not None:
            candles = candles[-limit:] if limit > 0 else []
        return candles

    # Account

    async def fetch_balance(self, type: str | None = None) -> BalanceSheet:
        """Get wallet balances per currency."""
        await self.load_markets()
        response = await self._request("fetch_balance", type=type)
        return parsers.parse_balance(response)

    async def fetch_deposits(
        self, code: str | None = None, type: str | None = None
    ) -> list[dict[str, Any]]:
        """Get raw wallet history entries of type Deposit."""
        await self.load_markets()
        response = await self._request("fetch_deposits", type=type)
        deposits = []
        for entry in _as_list(response, "fetch_deposits"):
            if entry.get("type") != "Deposit":
                continue
            if code is not None and str(entry.get("currency", "")).upper() != code.upper():
                continue
            deposits.append(entry)
        return deposits

    async def fetch_positions(self, type: str | None = None) -> list[Position]:
        """Get open futures positions."""
        await self.load_markets()
        response = await self._request("fetch_positions", type=type)
        return [
            parsers.parse_position(item, self.markets)
            for item in _as_list(response, "fetch_positions")
        ]

    async def set_leverage(
        self, symbol: str, leverage: int, type: str | None = None
    ) -> dict[str, Any]:
        """Set futures leverage for a symbol; returns the raw venue response."""
        market = await self.market(symbol, "set_leverage")
        request = {"symbol": market.id, "leverage": leverage}
        response = await self._request("set_leverage", request, type)
        logger.info(f"Set leverage to {leverage}x for {symbol}")
        return _first(response, "set_leverage")

    # Order management

    async def create_order(
        self,
        symbol: str,
        order_type: str | OrderType,
        side: str | Side,
        amount: float,
        price: float | None = None,
        type: str | None = None,
        stop_price: float | None = None,
        trail_value: float | None = None,
        time_in_force: TimeInForce | None = None,
    ) -> Order:
        """Place a new order.

        Args:
            symbol: Canonical symbol
            order_type: LIMIT, MARKET, STOP or TRAILINGSTOP
            side: buy or sell
            amount: Order size, rounded down to the market's size increment
            price: Limit price (required for LIMIT)
            type: "spot" or "futures"
            stop_price: Trigger price for STOP (falls back to price)
            trail_value: Trail value for TRAILINGSTOP (falls back to price)
            time_in_force: Overrides the configured default

        Returns:
            Created Order

        Raises:
            InvalidOrder: Unsupported type or missing required field
        """
        market = await self.market(symbol, "create_order")

        def rounded(value: float | None) -> float | None:
            return price_to_precision(market, value) if value is not None else None

        request = build_order_request(
            market.id,
            order_type,
            side,
            amount_to_precision(market, amount),
            price=rounded(price),
            stop_price=rounded(stop_price),
            trail_value=rounded(trail_value),
            time_in_force=time_in_force or self._config.time_in_force,
        )
        logger.info(f"Placing order: {request}")
        response = await self._request("create_order", request, type)
        return parsers.parse_order(_first(response, "create_order"), market)

    async def cancel_order(
        self,
        order_id: str,
        symbol: str,
        type: str | None = None,
        client_order_id: str | None = None,
    ) -> Order | dict[str, Any]:
        """Cancel an order.

        Returns:
            Canceled Order, or the raw acknowledgment when the venue reports a
            bulk cancellation
        """
        market = await self.market(symbol, "cancel_order")
        request = {"symbol": market.id, "orderID": order_id, "clOrderID": client_order_id}
        response = await self._request("cancel_order", request, type)
        payload = _first(response, "cancel_order")
        if is_bulk_cancel_ack(payload):
            logger.info(f"Venue acknowledged cancellation of all orders for {symbol}")
            return payload
        logger.info(f"Cancelled order {order_id}")
        return parsers.parse_order(payload, market)

    async def cancel_all_orders(
        self,
        symbol: str | None = None,
        timeout: int = 60000,
        type: str | None = None,
    ) -> dict[str, Any]:
        """Arm the venue's cancel-all-after timer for every open order.

        Args:
            symbol: Not supported; per-symbol bulk cancel has no confirmed contract
            timeout: Milliseconds until the venue cancels all orders
            type: "spot" or "futures"

        Returns:
            ``result`` object of the venue response
        """
        if symbol is not None:
            raise UnsupportedOperation(
                "cancel_all_orders",
                reason=f"cancelling by symbol ({symbol!r}) has no confirmed venue contract",
            )
        await self.load_markets()
        response = await self._request("cancel_all_orders", {"timeout": timeout}, type)
        if isinstance(response, dict):
            return response.get("result") or {}
        return {}

    async def fetch_open_orders(self, symbol: str, type: str | None = None) -> list[Order]:
        """Get all open orders for a symbol."""
        market = await self.market(symbol, "fetch_open_orders")
        response = await self._request("fetch_open_orders", {"symbol": market.id}, type)
        return [
            parsers.parse_order(item, market)
            for item in _as_list(response, "fetch_open_orders")
        ]

    async def fetch_order(
        self, order_id: str, symbol: str, type: str | None = None
    ) -> Order | None:
        """Get one open order by id, or None if it is no longer open."""
        market = await self.market(symbol, "fetch_order")
        request = {"symbol": market.id, "orderID": order_id}
        response = await self._request("fetch_order", request, type)
        for item in _as_list(response, "fetch_order"):
            if parsers.decode_str(item, "orderID") == order_id:
                return parsers.parse_order(item, market)
        return None

    async def fetch_closed_orders(self, symbol: str | None = None, **kwargs: Any) -> list[Order]:
        raise UnsupportedOperation(
            "fetch_closed_orders", reason="closed order retrieval has no confirmed venue contract"
        )

    async def fetch_my_trades(
        self,
        symbol: str | None = None,
        since: int | None = None,
        limit: int | None = None,
        type: str | None = None,
    ) -> list[Trade]:
        """Get own fills, optionally for one symbol."""
        await self.load_markets()
        market = self.markets.resolve(symbol, "fetch_my_trades") if symbol is not None else None
        request = {
            "symbol": market.id if market else None,
            "startTime": since,
            "count": limit,
        }
        response = await self._request("fetch_my_trades", request, type)
        return parsers.parse_trades(
            _as_list(response, "fetch_my_trades"),
            market,
            registry=self.markets,
            since=since,
            limit=limit,
        )
