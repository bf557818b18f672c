# src/chainwallet/utils/config.py
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from ..exceptions import ConfigError


class Config:
    # Network configuration
    DEFAULT_ENDPOINT = "[::1]:50051"
    RPC_TIMEOUT = 10.0  # seconds

    # Storage configuration
    WALLET_DIR = ".wallets"
    WALLET_FILE = "wallets.json"
    CONFIG_FILE = "config.yaml"
    WALLET_FILE_MODE = 0o600
    WALLET_DIR_MODE = 0o700

    # Transaction limits
    MAX_AMOUNT = 2 ** 64 - 1

    # Logging configuration
    LOG_LEVEL = "WARNING"
    LOG_MAX_SIZE = 10 * 1024 * 1024  # 10MB
    LOG_BACKUP_COUNT = 5


ENV_OVERRIDES = {
    "CHAINWALLET_ENDPOINT": "network.endpoint",
    "CHAINWALLET_TIMEOUT": "network.timeout",
    "CHAINWALLET_WALLET_DIR": "storage.wallet_dir",
    "CHAINWALLET_LOG_LEVEL": "logging.level",
}


class WalletConfig:
    """Layered settings: defaults, then the YAML file, then environment variables.

    Command-line flags are applied last by the caller through ``update``.
    """

    def __init__(
        self,
        config_path: Optional[Union[str, Path]] = None,
        environ: Optional[Dict[str, str]] = None
    ):
        self.environ = os.environ if environ is None else environ
        self.config = self._default_config()
        self._apply_env()

        if config_path is None:
            config_path = Path(self.get("storage.wallet_dir")) / Config.CONFIG_FILE
        self.config_path = Path(config_path)
        self._merge(self.config, self._load_config())
        # Environment wins over the file
        self._apply_env()

    @staticmethod
    def _default_config() -> Dict[str, Any]:
        return {
            "network": {
                "endpoint": Config.DEFAULT_ENDPOINT,
                "timeout": Config.RPC_TIMEOUT,
            },
            "storage": {
                "wallet_dir": Config.WALLET_DIR,
            },
            "logging": {
                "level": Config.LOG_LEVEL,
                "file": None,
            },
        }

    def _load_config(self) -> Dict[str, Any]:
        if not self.config_path.exists():
            return {}

        try:
            with open(self.config_path, "r") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid configuration file {self.config_path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Cannot read configuration file {self.config_path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration file {self.config_path} must contain a mapping")
        return data

    def _merge(self, base: Dict[str, Any], overrides: Dict[str, Any]) -> None:
        for key, value in overrides.items():
            if isinstance(value, dict) and isinstance(base.get(key), dict):
                self._merge(base[key], value)
            else:
                base[key] = value

    def _apply_env(self) -> None:
        for variable, key in ENV_OVERRIDES.items():
            value = self.environ.get(variable)
            if value:
                self.update(key, value)

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value."""
        try:
            keys = key.split('.')
            value = self.config
            for k in keys:
                value = value[k]
            return value
        except (KeyError, TypeError):
            return default

    def update(self, key: str, value: Any):
        """Update configuration value in memory."""
        keys = key.split('.')
        config = self.config
        for k in keys[:-1]:
            config = config.setdefault(k, {})
            if not isinstance(config, dict):
                raise ConfigError(f"Configuration section '{k}' must be a mapping")
        config[keys[-1]] = value

    @property
    def endpoint(self) -> str:
        return str(self.get("network.endpoint", Config.DEFAULT_ENDPOINT))

    @property
    def timeout(self) -> float:
        value = self.get("network.timeout", Config.RPC_TIMEOUT)
        try:
            timeout = float(value)
        except (TypeError, ValueError):
            raise ConfigError(f"Invalid network timeout: {value!r}")
        if timeout <= 0:
            raise ConfigError(f"Network timeout must be positive, got {timeout}")
        return timeout

    @property
    def wallet_dir(self) -> Path:
        return Path(self.get("storage.wallet_dir", Config.WALLET_DIR)).expanduser()

    @property
    def log_level(self) -> str:
        return str(self.get("logging.level", Config.LOG_LEVEL)).upper()

    @property
    def log_file(self) -> Optional[str]:
        return self.get("logging.file")
