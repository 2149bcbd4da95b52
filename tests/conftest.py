"""Pytest configuration and shared fixtures."""

from typing import Any

import pytest

from btse_adapter.config import AdapterConfig
from btse_adapter.execution.btse import BTSEExchange

NOW_MS = 1_587_680_929_683


class FixedClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, now: int = NOW_MS) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now


class FakeTransport:
    """Transport returning canned JSON by URL path suffix and recording calls."""

    def __init__(self, responses: dict[str, Any] | None = None) -> None:
        self.responses: dict[str, Any] = dict(responses or {})
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    async def send(
        self,
        url: str,
        method: str,
        headers: dict[str, str],
        body: str | None = None,
    ) -> Any:
        self.calls.append({"url": url, "method": method, "headers": headers, "body": body})
        path = url.split("?", 1)[0]
        for suffix, response in self.responses.items():
            if path.endswith(suffix):
                if isinstance(response, Exception):
                    raise response
                return response
        raise AssertionError(f"No canned response for {method} {url}")

    async def close(self) -> None:
        self.closed = True

    def calls_to(self, suffix: str) -> list[dict[str, Any]]:
        return [c for c in self.calls if c["url"].split("?", 1)[0].endswith(suffix)]


SPOT_SUMMARY = [
    {
        "symbol": "BTC-USD",
        "last": 7467.5,
        "lowestAsk": "7468.0",
        "highestBid": "7467.0",
        "percentageChange": 1.25,
        "volume": "1520394.5",
        "high24Hr": 7600.0,
        "low24Hr": 7300.0,
        "base": "BTC",
        "quote": "USD",
        "active": True,
        "minValidPrice": 0.5,
        "minPriceIncrement": 0.5,
        "minOrderSize": 0.001,
        "maxOrderSize": 2000.0,
        "minSizeIncrement": 0.001,
    },
    {
        "symbol": "ETH-USD",
        "last": 187.25,
        "lowestAsk": 187.3,
        "highestBid": 187.2,
        "base": "ETH",
        "quote": "USD",
        "active": True,
        "minPriceIncrement": 0.05,
        "minSizeIncrement": 0.01,
        "minOrderSize": 0.01,
    },
]

FUTURES_SUMMARY = [
    {
        "symbol": "BTCPFC",
        "last": 7470.0,
        "lowestAsk": 7470.5,
        "highestBid": 7469.5,
        "base": "BTC",
        "quote": "USD",
        "active": True,
        "minPriceIncrement": 0.5,
        "minSizeIncrement": 1,
        "minOrderSize": 1,
        "maxOrderSize": 1000000,
    },
]

SERVER_TIME = {"epoch": 1_587_680_929.183}


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport(
        {
            "spot/api/v3.1/time": SERVER_TIME,
            "futures/api/v2.1/time": SERVER_TIME,
            "spot/api/v3.1/market_summary": SPOT_SUMMARY,
            "futures/api/v2.1/market_summary": FUTURES_SUMMARY,
        }
    )


@pytest.fixture
def config() -> AdapterConfig:
    return AdapterConfig(api_key="test-key", secret="test-secret")


@pytest.fixture
def exchange(config: AdapterConfig, transport: FakeTransport, clock: FixedClock) -> BTSEExchange:
    return BTSEExchange(config, transport=transport, clock=clock)


@pytest.fixture
def public_exchange(transport: FakeTransport, clock: FixedClock) -> BTSEExchange:
    return BTSEExchange(AdapterConfig(), transport=transport, clock=clock)
