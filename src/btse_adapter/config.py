"""Configuration management for the BTSE adapter."""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

from dotenv import load_dotenv

from btse_adapter.core.types import MarketType, TimeInForce
from btse_adapter.errors import ConfigurationError

MAINNET_HOST = "https://api.btse.com"
TESTNET_HOST = "https://testapi.btse.io"


def parse_market_type(value: str | MarketType, source: str = "type") -> MarketType:
    """Convert a user supplied type string to MarketType.

    Raises:
        ConfigurationError: If the value is not "spot" or "futures"
    """
    if isinstance(value, MarketType):
        return value
    try:
        return MarketType(str(value).strip().lower())
    except ValueError:
        supported = ", ".join(t.value for t in MarketType)
        raise ConfigurationError(
            f"{source} must be one of {supported}, got {value!r}"
        ) from None


def parse_operation_types(raw: str) -> dict[str, MarketType]:
    """Parse ``"fetch_ticker=futures,fetch_trades=spot"`` into a mapping."""
    result: dict[str, MarketType] = {}
    for item in raw.split(","):
        item = item.strip()
        if not item:
            continue
        operation, sep, value = item.partition("=")
        if not sep or not operation.strip():
            raise ConfigurationError(f"BTSE_OPERATION_TYPES entry {item!r} is not op=type")
        result[operation.strip()] = parse_market_type(value, source=operation.strip())
    return result


@dataclass(frozen=True)
class AdapterConfig:
    """Immutable adapter configuration snapshot."""

    api_key: str = ""
    secret: str = ""
    testnet: bool = False
    default_type: MarketType = MarketType.SPOT
    operation_types: Mapping[str, MarketType] = field(default_factory=dict)
    adjust_time_difference: bool = True
    time_in_force: TimeInForce = TimeInForce.GTC
    timeout: float = 10.0  # seconds, used by the default transport

    def __post_init__(self) -> None:
        object.__setattr__(self, "default_type", parse_market_type(self.default_type))
        operation_types = {
            operation: parse_market_type(value, source=operation)
            for operation, value in self.operation_types.items()
        }
        object.__setattr__(self, "operation_types", MappingProxyType(operation_types))

    @property
    def host(self) -> str:
        return TESTNET_HOST if self.testnet else MAINNET_HOST

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key and self.secret)

    @classmethod
    def from_env(cls, env_path: Path | None = None) -> "AdapterConfig":
        """Load configuration from environment variables.

        Args:
            env_path: Path to .env file (optional)

        Returns:
            AdapterConfig populated from environment
        """
        if env_path:
            load_dotenv(env_path)
        else:
            load_dotenv()

        return cls(
            api_key=os.getenv("BTSE_API_KEY", ""),
            secret=os.getenv("BTSE_API_SECRET", ""),
            testnet=os.getenv("BTSE_TESTNET", "false").lower() in ("true", "1", "yes"),
            default_type=parse_market_type(
                os.getenv("BTSE_DEFAULT_TYPE", "spot"), source="BTSE_DEFAULT_TYPE"
            ),
            operation_types=parse_operation_types(os.getenv("BTSE_OPERATION_TYPES", "")),
            adjust_time_difference=os.getenv("BTSE_ADJUST_TIME_DIFFERENCE", "true").lower()
            in ("true", "1", "yes"),
            timeout=float(os.getenv("BTSE_TIMEOUT", "10")),
        )
