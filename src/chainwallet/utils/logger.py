import logging
import logging.handlers
from typing import Optional, Union

from .config import Config
from ..exceptions import ConfigError

PACKAGE_LOGGER = "chainwallet"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """Create a logger with the given name and level"""
    logger = logging.getLogger(name)

    if not logger.handlers:  # Only add handler if none exists
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    if level is not None:
        logger.setLevel(level)
    elif not logger.level:  # Only set default level if none is set
        logger.setLevel(logging.INFO)

    return logger


def configure_logging(
    level: Union[int, str] = Config.LOG_LEVEL,
    log_file: Optional[str] = None
) -> logging.Logger:
    """Set up the package logger for a CLI run.

    Console output goes to stderr so command results on stdout stay clean.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    logger = get_logger(PACKAGE_LOGGER, level)

    if log_file and not any(
        isinstance(h, logging.handlers.RotatingFileHandler) for h in logger.handlers
    ):
        try:
            file_handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=Config.LOG_MAX_SIZE,
                backupCount=Config.LOG_BACKUP_COUNT
            )
        except OSError as e:
            raise ConfigError(f"Cannot open log file {log_file}: {e}") from e
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        file_handler.setLevel(logging.DEBUG)
        logger.addHandler(file_handler)

    return logger
