"""Endpoint routing across the BTSE spot and futures REST surfaces."""

from dataclasses import dataclass
from enum import Enum

from btse_adapter.config import AdapterConfig, parse_market_type
from btse_adapter.core.types import HttpMethod, MarketType
from btse_adapter.errors import ConfigurationError, UnsupportedOperation


class Surface(str, Enum):
    """Independent REST API versions exposed by the venue."""

    SPOT_V2 = "spotv2"
    SPOT_V3 = "spotv3"
    SPOT_V3_PRIVATE = "spotv3private"
    FUTURES_V2 = "futuresv2"
    FUTURES_V2_PRIVATE = "futuresv2private"

    @property
    def is_private(self) -> bool:
        return self.value.endswith("private")

    @property
    def product_line(self) -> str:
        """URL segment the surface lives under ("spot" or "futures")."""
        return "spot" if self.value.startswith("spot") else "futures"


_SURFACE_PATHS: dict[Surface, str] = {
    Surface.SPOT_V2: "spot/api/v2",
    Surface.SPOT_V3: "spot/api/v3.1",
    Surface.SPOT_V3_PRIVATE: "spot/api/v3.1",
    Surface.FUTURES_V2: "futures/api/v2.1",
    Surface.FUTURES_V2_PRIVATE: "futures/api/v2.1",
}

# Verbs each surface accepts; the adapter builds one handler per pair.
# Spot v2 only serves legacy fills, which back no supported operation, so it
# has a base URL but no handlers.
SURFACE_METHODS: dict[Surface, tuple[HttpMethod, ...]] = {
    Surface.SPOT_V3: (HttpMethod.GET,),
    Surface.SPOT_V3_PRIVATE: (HttpMethod.GET, HttpMethod.POST, HttpMethod.DELETE),
    Surface.FUTURES_V2: (HttpMethod.GET,),
    Surface.FUTURES_V2_PRIVATE: (HttpMethod.GET, HttpMethod.POST, HttpMethod.DELETE),
}


def base_url(host: str, surface: Surface) -> str:
    return f"{host.rstrip('/')}/{_SURFACE_PATHS[surface]}"


@dataclass(frozen=True)
class Route:
    """Concrete surface, verb and relative path serving an operation."""

    surface: Surface
    method: HttpMethod
    path: str


def _pair(
    method: HttpMethod,
    path: str,
    spot: Surface | None,
    futures: Surface | None,
) -> dict[MarketType, Route | None]:
    return {
        MarketType.SPOT: Route(spot, method, path) if spot else None,
        MarketType.FUTURES: Route(futures, method, path) if futures else None,
    }


_PUBLIC = (Surface.SPOT_V3, Surface.FUTURES_V2)
_PRIVATE = (Surface.SPOT_V3_PRIVATE, Surface.FUTURES_V2_PRIVATE)

ROUTES: dict[str, dict[MarketType, Route | None]] = {
    "fetch_time": _pair(HttpMethod.GET, "time", *_PUBLIC),
    "fetch_markets": _pair(HttpMethod.GET, "market_summary", *_PUBLIC),
    "fetch_ticker": _pair(HttpMethod.GET, "market_summary", *_PUBLIC),
    "fetch_tickers": _pair(HttpMethod.GET, "market_summary", *_PUBLIC),
    "fetch_order_book": _pair(HttpMethod.GET, "orderbook/L2", *_PUBLIC),
    "fetch_trades": _pair(HttpMethod.GET, "trades", *_PUBLIC),
    "fetch_ohlcv": _pair(HttpMethod.GET, "ohlcv", *_PUBLIC),
    "fetch_balance": _pair(HttpMethod.GET, "user/wallet", *_PRIVATE),
    "fetch_deposits": _pair(HttpMethod.GET, "user/wallet_history", *_PRIVATE),
    "fetch_open_orders": _pair(HttpMethod.GET, "user/open_orders", *_PRIVATE),
    "fetch_order": _pair(HttpMethod.GET, "user/open_orders", *_PRIVATE),
    "fetch_my_trades": _pair(HttpMethod.GET, "user/trade_history", *_PRIVATE),
    "create_order": _pair(HttpMethod.POST, "order", *_PRIVATE),
    "cancel_order": _pair(HttpMethod.DELETE, "order", *_PRIVATE),
    "cancel_all_orders": _pair(HttpMethod.POST, "order/cancelAllAfter", *_PRIVATE),
    "fetch_positions": _pair(HttpMethod.GET, "user/positions", None, Surface.FUTURES_V2_PRIVATE),
    "set_leverage": _pair(HttpMethod.POST, "leverage", None, Surface.FUTURES_V2_PRIVATE),
}


class EndpointRouter:
    """Resolves which surface and verb serve a logical operation.

    Resolution order: explicit ``type`` on the call, then the per-operation
    default from configuration, then the global default type.
    """

    def __init__(self, config: AdapterConfig) -> None:
        self._default_type = config.default_type
        self._operation_types = config.operation_types

    @property
    def operations(self) -> list[str]:
        return sorted(ROUTES)

    def market_type_for(
        self, operation: str, requested_type: str | MarketType | None = None
    ) -> MarketType:
        if requested_type is not None:
            try:
                return parse_market_type(requested_type)
            except ConfigurationError:
                raise UnsupportedOperation(
                    operation, str(requested_type), reason="type must be spot or futures"
                ) from None
        return self._operation_types.get(operation, self._default_type)

    def route(self, operation: str, requested_type: str | MarketType | None = None) -> Route:
        """Resolve an operation to its route.

        Args:
            operation: Logical operation name, e.g. "fetch_ticker"
            requested_type: Explicit "spot"/"futures" override

        Returns:
            Route naming surface, HTTP verb and path

        Raises:
            UnsupportedOperation: If the operation has no route for the type
        """
        routes = ROUTES.get(operation)
        if routes is None:
            raise UnsupportedOperation(operation, reason="unknown operation")
        market_type = self.market_type_for(operation, requested_type)
        route = routes[market_type]
        if route is None:
            raise UnsupportedOperation(operation, market_type.value)
        return route
