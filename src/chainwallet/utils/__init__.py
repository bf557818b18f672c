# src/chainwallet/utils/__init__.py
from .logger import configure_logging, get_logger
from .config import Config, WalletConfig

__all__ = ['configure_logging', 'get_logger', 'Config', 'WalletConfig']
