"""
Test Config Module

Tests for environment-driven configuration and logging setup.
"""

import logging
import sys
from pathlib import Path

import pytest

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

import chain_sdk.config as config_module
from chain_sdk.config import (
    Config,
    LoggingConfig,
    RpcConfig,
    TxConfig,
    get_config,
    reload_config,
    setup_logging,
)
from chain_sdk.infra.rpc import RpcClientConfig


class TestEnvironmentConfig:
    """Config dataclasses read the environment at construction"""

    def test_defaults(self, monkeypatch):
        for key in ("RPC_TIMEOUT_SECONDS", "RPC_MAX_RETRIES", "RPC_COMMITMENT",
                    "TX_SKIP_PREFLIGHT", "TX_SEND_MAX_RETRIES", "TX_POLL_INTERVAL",
                    "TX_METADATA_PADDING", "TX_CONFIRMATION_TIMEOUT"):
            monkeypatch.delenv(key, raising=False)

        config = Config()

        assert config.rpc.timeout_seconds == 30.0
        assert config.rpc.max_retries == 3
        assert config.rpc.commitment == "confirmed"
        assert config.tx.skip_preflight is False
        assert config.tx.send_max_retries == 3
        assert config.tx.confirmation_timeout == 30.0
        assert config.tx.metadata_padding == 1.1

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("CHAIN_RPC_URL", "https://rpc.example.com")
        monkeypatch.setenv("RPC_MAX_RETRIES", "5")
        monkeypatch.setenv("RPC_COMMITMENT", "finalized")
        monkeypatch.setenv("TX_SKIP_PREFLIGHT", "yes")
        monkeypatch.setenv("TX_POLL_INTERVAL", "0.25")

        rpc = RpcConfig()
        tx = TxConfig()

        assert rpc.url == "https://rpc.example.com"
        assert rpc.max_retries == 5
        assert rpc.commitment == "finalized"
        assert tx.skip_preflight is True
        assert tx.poll_interval == 0.25

    def test_invalid_numbers_fall_back(self, monkeypatch):
        monkeypatch.setenv("RPC_MAX_RETRIES", "many")
        monkeypatch.setenv("TX_CONFIRMATION_TIMEOUT", "soon")

        assert RpcConfig().max_retries == 3
        assert TxConfig().confirmation_timeout == 30.0

    def test_get_config_returns_global(self):
        assert isinstance(get_config(), Config)

    def test_reload_seen_by_clients(self, monkeypatch):
        monkeypatch.setattr(config_module, "config", get_config())
        monkeypatch.setenv("RPC_COMMITMENT", "finalized")
        monkeypatch.setenv("TX_METADATA_PADDING", "1.0")

        reloaded = reload_config()

        assert get_config() is reloaded
        assert RpcClientConfig().commitment == "finalized"
        assert get_config().tx.metadata_padding == 1.0


class TestLoggingSetup:
    """setup_logging configures the package logger"""

    def test_console_only(self):
        log_config = LoggingConfig(log_file="", log_level="DEBUG", console_output=True)
        logger = setup_logging(log_config, logger_name="chain_sdk_test_console")

        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], logging.StreamHandler)

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "logs" / "sdk.log"
        log_config = LoggingConfig(log_file=str(log_file), log_level="INFO", console_output=False)
        logger = setup_logging(log_config, logger_name="chain_sdk_test_file")

        logger.info("hello")
        for handler in logger.handlers:
            handler.flush()

        assert log_file.exists()
        assert "hello" in log_file.read_text(encoding="utf-8")

        for handler in logger.handlers[:]:
            handler.close()
            logger.removeHandler(handler)

    def test_repeated_setup_replaces_handlers(self):
        log_config = LoggingConfig(log_file="", console_output=True)
        setup_logging(log_config, logger_name="chain_sdk_test_repeat")
        logger = setup_logging(log_config, logger_name="chain_sdk_test_repeat")

        assert len(logger.handlers) == 1

    def test_unknown_level_defaults_to_info(self):
        assert LoggingConfig(log_level="LOUD").level == logging.INFO


if __name__ == "__main__":
    # Run with pytest
    exit_code = pytest.main([__file__, "-v", "--tb=short"])
    sys.exit(exit_code)
