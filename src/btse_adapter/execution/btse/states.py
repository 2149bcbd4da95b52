"""Order status/type code tables and outbound order construction."""

import logging
from typing import Any

from btse_adapter.core.types import OrderStatus, OrderType, Side, TimeInForce
from btse_adapter.errors import InvalidOrder

logger = logging.getLogger(__name__)

CANCEL_ALL_SENTINEL = "ALL_ORDER_CANCELLED_SUCCESS"

_STATUSES: dict[str, OrderStatus] = {
    "2": OrderStatus.CREATED,
    "4": OrderStatus.CLOSED,
    "5": OrderStatus.OPEN,
    "6": OrderStatus.CANCELED,
    "9": OrderStatus.CREATED,
    "10": OrderStatus.OPEN,
    "15": OrderStatus.REJECTED,
    "16": OrderStatus.REJECTED,
}

_TYPES: dict[str, OrderType] = {
    "76": OrderType.LIMIT,
    "77": OrderType.MARKET,
    "80": OrderType.PEG,
}

SUBMIT_TYPES = (OrderType.LIMIT, OrderType.MARKET, OrderType.STOP, OrderType.TRAILING_STOP)


def _lookup(table: dict[str, Any], code: Any, kind: str) -> Any:
    if code is None:
        return None
    mapped = table.get(str(code))
    if mapped is None:
        # Unmapped codes pass through so callers see the venue value.
        logger.warning(f"Unmapped order {kind} code {code!r}, passing through")
        return code
    return mapped


def parse_order_status(code: Any) -> OrderStatus | Any:
    """Map a venue status code to OrderStatus, or return it unchanged."""
    return _lookup(_STATUSES, code, "status")


def parse_order_type(code: Any) -> OrderType | Any:
    """Map a venue order type code to OrderType, or return it unchanged."""
    return _lookup(_TYPES, code, "type")


def is_bulk_cancel_ack(payload: Any) -> bool:
    return isinstance(payload, dict) and payload.get("message") == CANCEL_ALL_SENTINEL


def _submit_type(order_type: str | OrderType) -> OrderType:
    supported = ", ".join(t.value.upper() for t in SUBMIT_TYPES)
    try:
        resolved = OrderType(str(getattr(order_type, "value", order_type)).lower())
    except ValueError:
        resolved = None
    if resolved not in SUBMIT_TYPES:
        raise InvalidOrder(
            f"create_order does not support order type {order_type!r}; "
            f"supported types are {supported}"
        )
    return resolved


def build_order_request(
    market_id: str,
    order_type: str | OrderType,
    side: str | Side,
    amount: float,
    price: float | None = None,
    stop_price: float | None = None,
    trail_value: float | None = None,
    time_in_force: TimeInForce = TimeInForce.GTC,
) -> dict[str, Any]:
    """Build the outbound order payload for one submission type.

    Args:
        market_id: Venue market id
        order_type: LIMIT, MARKET, STOP or TRAILINGSTOP (case-insensitive)
        side: buy or sell
        amount: Order size, already rounded to market precision
        price: Limit price; also used as trigger/trail value when those are absent
        stop_price: Trigger price for STOP orders
        trail_value: Trail value for TRAILINGSTOP orders
        time_in_force: Time in force sent with the order

    Returns:
        Request body for the order endpoint

    Raises:
        InvalidOrder: Unsupported type or a required field is missing
    """
    resolved = _submit_type(order_type)
    side_value = str(getattr(side, "value", side)).upper()
    if side_value not in ("BUY", "SELL"):
        raise InvalidOrder(f"create_order side must be BUY or SELL, got {side!r}")

    request: dict[str, Any] = {
        "symbol": market_id.upper(),
        "side": side_value,
        "size": amount,
        "time_in_force": getattr(time_in_force, "value", time_in_force),
    }

    if resolved == OrderType.LIMIT:
        if price is None:
            raise InvalidOrder("create_order LIMIT order requires a price, got None")
        request["type"] = "LIMIT"
        request["txType"] = "LIMIT"
        request["price"] = price
    elif resolved == OrderType.MARKET:
        request["type"] = "MARKET"
    elif resolved == OrderType.STOP:
        trigger = stop_price if stop_price is not None else price
        if trigger is None:
            raise InvalidOrder("create_order STOP order requires a stop price, got None")
        request["txType"] = "STOP"
        request["stopPrice"] = trigger
    else:
        trail = trail_value if trail_value is not None else price
        if trail is None:
            raise InvalidOrder("create_order TRAILINGSTOP order requires a trail value, got None")
        request["trailValue"] = trail

    return request
