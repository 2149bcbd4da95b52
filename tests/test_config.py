"""Tests for configuration loading."""

import logging

import pytest

from btse_adapter.config import (
    MAINNET_HOST,
    TESTNET_HOST,
    AdapterConfig,
    parse_operation_types,
)
from btse_adapter.core.types import MarketType
from btse_adapter.errors import ConfigurationError
from btse_adapter.logging import PACKAGE_LOGGER, setup_logging

ENV_KEYS = (
    "BTSE_API_KEY",
    "BTSE_API_SECRET",
    "BTSE_TESTNET",
    "BTSE_DEFAULT_TYPE",
    "BTSE_OPERATION_TYPES",
    "BTSE_ADJUST_TIME_DIFFERENCE",
    "BTSE_TIMEOUT",
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for key in ENV_KEYS:
        # setenv first so monkeypatch restores the key even if load_dotenv sets it
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    return monkeypatch


class TestAdapterConfig:
    """Test the configuration snapshot."""

    def test_defaults(self):
        """Defaults are public-only spot on mainnet."""
        config = AdapterConfig()
        assert config.default_type == MarketType.SPOT
        assert config.host == MAINNET_HOST
        assert not config.has_credentials
        assert dict(config.operation_types) == {}

    def test_immutable(self):
        """Neither fields nor operation defaults can be changed."""
        config = AdapterConfig(operation_types={"fetch_ticker": "futures"})
        with pytest.raises(AttributeError):
            config.default_type = MarketType.FUTURES
        with pytest.raises(TypeError):
            config.operation_types["fetch_trades"] = MarketType.FUTURES
        assert config.operation_types["fetch_ticker"] == MarketType.FUTURES

    def test_invalid_type(self):
        """Unknown types are rejected at construction."""
        with pytest.raises(ConfigurationError, match="margin"):
            AdapterConfig(default_type="margin")


class TestFromEnv:
    """Test loading from environment variables."""

    def test_reads_environment(self, clean_env):
        """All supported variables are picked up."""
        clean_env.setenv("BTSE_API_KEY", "key")
        clean_env.setenv("BTSE_API_SECRET", "secret")
        clean_env.setenv("BTSE_TESTNET", "yes")
        clean_env.setenv("BTSE_DEFAULT_TYPE", "Futures")
        clean_env.setenv("BTSE_OPERATION_TYPES", "fetch_ticker=spot, create_order=futures")
        clean_env.setenv("BTSE_ADJUST_TIME_DIFFERENCE", "false")
        clean_env.setenv("BTSE_TIMEOUT", "2.5")

        config = AdapterConfig.from_env()

        assert config.has_credentials
        assert config.host == TESTNET_HOST
        assert config.default_type == MarketType.FUTURES
        assert config.operation_types == {
            "fetch_ticker": MarketType.SPOT,
            "create_order": MarketType.FUTURES,
        }
        assert config.adjust_time_difference is False
        assert config.timeout == 2.5

    def test_env_file(self, clean_env, tmp_path):
        """Variables can come from a .env file."""
        env_file = tmp_path / "btse.env"
        env_file.write_text("BTSE_API_KEY=from-file\nBTSE_API_SECRET=s\n")
        config = AdapterConfig.from_env(env_file)
        assert config.api_key == "from-file"

    def test_bad_operation_entry(self):
        """Entries must be op=type."""
        with pytest.raises(ConfigurationError, match="fetch_ticker"):
            parse_operation_types("fetch_ticker")


@pytest.fixture
def package_logger():
    logger = logging.getLogger(PACKAGE_LOGGER)
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


class TestLogging:
    """Test logging setup."""

    def test_setup_is_idempotent(self, package_logger):
        """Repeated setup does not stack handlers."""
        logger = setup_logging(logging.DEBUG)
        count = len(logger.handlers)
        assert logger is package_logger
        assert setup_logging(logging.WARNING) is logger
        assert len(logger.handlers) == count
        assert logger.level == logging.WARNING

    def test_module_loggers_reach_file(self, package_logger, tmp_path):
        """Records from adapter modules land in the configured file."""
        log_file = tmp_path / "logs" / "btse.log"
        setup_logging(logging.INFO, log_file=log_file)
        logging.getLogger("btse_adapter.execution.btse.exchange").info("Loaded 3 markets")
        for handler in package_logger.handlers:
            handler.flush()
        line = log_file.read_text(encoding="utf-8").strip()
        assert line.endswith("| INFO     | btse_adapter.execution.btse.exchange | Loaded 3 markets")
