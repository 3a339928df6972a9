"""
Centralized logging configuration for the application.
"""

import logging
import os
import sys
from typing import Optional

from .config import AppConfig


def _level_name(config: Optional[AppConfig]) -> str:
    # The log level must be readable before the required service settings exist.
    if config is None:
        return os.getenv('LOG_LEVEL', 'INFO')
    return config.log_level


def setup_logging(config: Optional[AppConfig] = None) -> None:
    """
    Setup centralized logging configuration.

    Args:
        config: AppConfig instance, falls back to the LOG_LEVEL environment variable if None
    """
    logging.basicConfig(level=getattr(logging, _level_name(config).upper(), logging.INFO),
                        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                        handlers=[logging.StreamHandler(sys.stdout)])


def get_logger(name: str, config: Optional[AppConfig] = None) -> logging.Logger:
    """
    Get a logger with proper configuration.

    Args:
        name: Logger name (usually __name__)
        config: AppConfig instance, falls back to the LOG_LEVEL environment variable if None

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, _level_name(config).upper(), logging.INFO))
    return logger
