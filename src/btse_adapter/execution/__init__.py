"""Execution module - exchange interface and account/order models."""

from btse_adapter.execution.base import Exchange
from btse_adapter.execution.models import Balance, BalanceSheet, Order, Position

__all__ = [
    "Balance",
    "BalanceSheet",
    "Exchange",
    "Order",
    "Position",
]
