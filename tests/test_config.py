# tests/test_config.py
import logging
import logging.handlers
import os
from pathlib import Path

import pytest
import yaml

from chainwallet.exceptions import ConfigError
from chainwallet.utils.config import Config, WalletConfig
from chainwallet.utils.logger import PACKAGE_LOGGER, configure_logging


@pytest.fixture
def config_path(temp_dir):
    return os.path.join(temp_dir, "config.yaml")


def write_yaml(path, data):
    with open(path, "w") as f:
        yaml.safe_dump(data, f)


class TestWalletConfig:
    def test_defaults(self, config_path):
        config = WalletConfig(config_path, environ={})
        assert config.endpoint == Config.DEFAULT_ENDPOINT
        assert config.timeout == Config.RPC_TIMEOUT
        assert config.wallet_dir == Path(Config.WALLET_DIR)
        assert config.log_level == "WARNING"
        assert config.log_file is None

    def test_file_overrides_defaults(self, config_path):
        write_yaml(config_path, {
            "network": {"endpoint": "ledger.local:50051"},
            "logging": {"level": "debug"},
        })
        config = WalletConfig(config_path, environ={})
        assert config.endpoint == "ledger.local:50051"
        assert config.timeout == Config.RPC_TIMEOUT
        assert config.log_level == "DEBUG"

    def test_environment_overrides_file(self, config_path):
        write_yaml(config_path, {"network": {"endpoint": "ledger.local:50051", "timeout": 4}})
        config = WalletConfig(config_path, environ={
            "CHAINWALLET_ENDPOINT": "other:7000",
            "CHAINWALLET_WALLET_DIR": "/srv/wallets",
        })
        assert config.endpoint == "other:7000"
        assert config.timeout == 4.0
        assert config.wallet_dir == Path("/srv/wallets")

    def test_empty_file(self, config_path):
        open(config_path, "w").close()
        assert WalletConfig(config_path, environ={}).endpoint == Config.DEFAULT_ENDPOINT

    @pytest.mark.parametrize("content", ["network: [unclosed", "- a\n- b\n"])
    def test_invalid_file(self, config_path, content):
        with open(config_path, "w") as f:
            f.write(content)
        with pytest.raises(ConfigError):
            WalletConfig(config_path, environ={})

    @pytest.mark.parametrize("value", ["soon", 0, -1])
    def test_invalid_timeout(self, config_path, value):
        config = WalletConfig(config_path, environ={})
        config.update("network.timeout", value)
        with pytest.raises(ConfigError):
            config.timeout

    def test_update_and_get(self, config_path):
        config = WalletConfig(config_path, environ={})
        config.update("storage.wallet_dir", "~/wallets")
        assert config.get("storage.wallet_dir") == "~/wallets"
        assert config.wallet_dir == Path("~/wallets").expanduser()
        assert config.get("missing.key", "fallback") == "fallback"

    def test_update_through_scalar_section(self, config_path):
        write_yaml(config_path, {"network": "ledger"})
        config = WalletConfig(config_path, environ={})
        assert config.endpoint == Config.DEFAULT_ENDPOINT
        with pytest.raises(ConfigError):
            config.update("network.endpoint", "node:6000")

    def test_environment_over_scalar_section(self, config_path):
        write_yaml(config_path, {"network": "ledger"})
        with pytest.raises(ConfigError):
            WalletConfig(config_path, environ={"CHAINWALLET_ENDPOINT": "node:6000"})

    def test_default_path_follows_wallet_dir(self, temp_dir):
        write_yaml(os.path.join(temp_dir, "config.yaml"), {"network": {"endpoint": "found:1"}})
        config = WalletConfig(environ={"CHAINWALLET_WALLET_DIR": temp_dir})
        assert config.endpoint == "found:1"


class TestLogging:
    @pytest.fixture(autouse=True)
    def reset_logger(self):
        logger = logging.getLogger(PACKAGE_LOGGER)
        yield
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.setLevel(logging.NOTSET)

    def test_level_by_name(self):
        logger = configure_logging("debug")
        assert logger.level == logging.DEBUG

    def test_unknown_level_falls_back_to_warning(self):
        logger = configure_logging("chatty")
        assert logger.level == logging.WARNING

    def test_log_file_in_missing_directory(self, temp_dir):
        with pytest.raises(ConfigError):
            configure_logging("INFO", os.path.join(temp_dir, "missing", "wallet.log"))

    def test_file_handler_added_once(self, temp_dir):
        log_file = os.path.join(temp_dir, "wallet.log")
        configure_logging("INFO", log_file)
        logger = configure_logging("INFO", log_file)

        file_handlers = [
            h for h in logger.handlers if isinstance(h, logging.handlers.RotatingFileHandler)
        ]
        assert len(file_handlers) == 1
        logger.info("hello")
        file_handlers[0].flush()
        with open(log_file) as f:
            assert "hello" in f.read()
