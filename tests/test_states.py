"""Tests for order status/type tables and order request construction."""

import pytest

from btse_adapter.core.types import OrderStatus, OrderType, Side, TimeInForce
from btse_adapter.errors import InvalidOrder
from btse_adapter.execution.btse.states import (
    build_order_request,
    is_bulk_cancel_ack,
    parse_order_status,
    parse_order_type,
)

CANONICAL_STATUSES = {"created", "closed", "open", "canceled", "rejected"}


class TestOrderStatus:
    """Test status code mapping."""

    @pytest.mark.parametrize(
        "code,expected",
        [
            (2, OrderStatus.CREATED),
            (4, OrderStatus.CLOSED),
            (5, OrderStatus.OPEN),
            (6, OrderStatus.CANCELED),
            (9, OrderStatus.CREATED),
            (10, OrderStatus.OPEN),
            (15, OrderStatus.REJECTED),
            (16, OrderStatus.REJECTED),
        ],
    )
    def test_known_codes(self, code, expected):
        """Known codes map to one canonical status, as int or string."""
        assert parse_order_status(code) == expected
        assert parse_order_status(str(code)) == expected
        assert parse_order_status(code).value in CANONICAL_STATUSES

    @pytest.mark.parametrize("code", [1, 3, 7, 99, "ORDER_INSERTED"])
    def test_unknown_codes_pass_through(self, code):
        """Unknown codes are returned unchanged."""
        assert parse_order_status(code) == code

    def test_missing_status(self):
        """Absent status stays absent."""
        assert parse_order_status(None) is None


class TestOrderType:
    """Test order type code mapping."""

    def test_known_codes(self):
        """76, 77 and 80 are limit, market and peg."""
        assert parse_order_type(76) == OrderType.LIMIT
        assert parse_order_type("77") == OrderType.MARKET
        assert parse_order_type(80) == OrderType.PEG

    def test_unknown_code_passes_through(self):
        """Unknown type codes are returned unchanged."""
        assert parse_order_type(81) == 81


class TestBuildOrderRequest:
    """Test per-type outbound order payloads."""

    def test_limit(self):
        """LIMIT orders carry type, txType and price."""
        request = build_order_request("btc-usd", "limit", "buy", 0.5, price=7000.0)
        assert request == {
            "symbol": "BTC-USD",
            "side": "BUY",
            "size": 0.5,
            "time_in_force": "GTC",
            "type": "LIMIT",
            "txType": "LIMIT",
            "price": 7000.0,
        }

    def test_limit_without_price(self):
        """LIMIT without a price is rejected."""
        with pytest.raises(InvalidOrder, match="LIMIT.*price"):
            build_order_request("BTC-USD", "LIMIT", "buy", 1.0, price=None)

    def test_market(self):
        """MARKET orders need no price."""
        request = build_order_request("BTC-USD", OrderType.MARKET, Side.SELL, 1.0)
        assert request["type"] == "MARKET"
        assert request["side"] == "SELL"
        assert "price" not in request

    def test_stop_uses_stop_price(self):
        """STOP orders send the trigger as stopPrice."""
        request = build_order_request("BTC-USD", "STOP", "sell", 1.0, stop_price=6500.0)
        assert request["txType"] == "STOP"
        assert request["stopPrice"] == 6500.0

    def test_stop_falls_back_to_price(self):
        """STOP orders use price when no stop price is given."""
        request = build_order_request("BTC-USD", "stop", "sell", 1.0, price=6400.0)
        assert request["stopPrice"] == 6400.0

    def test_stop_without_trigger(self):
        """STOP without any trigger price is rejected."""
        with pytest.raises(InvalidOrder, match="STOP.*stop price"):
            build_order_request("BTC-USD", "STOP", "sell", 1.0)

    def test_trailing_stop(self):
        """TRAILINGSTOP orders send trailValue."""
        request = build_order_request(
            "BTC-USD", "TrailingStop", "buy", 1.0, trail_value=25.0, time_in_force=TimeInForce.IOC
        )
        assert request["trailValue"] == 25.0
        assert request["time_in_force"] == "IOC"

    def test_trailing_stop_without_value(self):
        """TRAILINGSTOP without a trail value is rejected."""
        with pytest.raises(InvalidOrder, match="TRAILINGSTOP"):
            build_order_request("BTC-USD", "TRAILINGSTOP", "buy", 1.0)

    @pytest.mark.parametrize("order_type", ["takeProfit", "peg", ""])
    def test_unsupported_type_names_supported_set(self, order_type):
        """Unknown types fail and list what is supported."""
        with pytest.raises(InvalidOrder, match="LIMIT, MARKET, STOP, TRAILINGSTOP"):
            build_order_request("BTC-USD", order_type, "buy", 1.0, price=1.0)

    def test_invalid_side(self):
        """Sides other than buy and sell are rejected."""
        with pytest.raises(InvalidOrder, match="side"):
            build_order_request("BTC-USD", "MARKET", "long", 1.0)


class TestBulkCancel:
    """Test the bulk cancellation acknowledgment check."""

    def test_sentinel(self):
        """Only the exact sentinel message counts."""
        assert is_bulk_cancel_ack({"message": "ALL_ORDER_CANCELLED_SUCCESS"})
        assert not is_bulk_cancel_ack({"message": "ORDER_CANCELLED"})
        assert not is_bulk_cancel_ack([{"message": "ALL_ORDER_CANCELLED_SUCCESS"}])
