"""
Logging Configuration
Sets up the logger for the 'spatial3d' namespace.

Library modules only ever call ``logging.getLogger(__name__)``; handlers are
attached here, on request of the application.
"""
import logging
import os
import sys
from typing import Optional

LOG_LEVEL_ENV = "SPATIAL3D_LOG_LEVEL"
LOG_FILE_ENV = "SPATIAL3D_LOG_FILE"

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_log_level() -> int:
    """Get log level from environment variable (default WARNING)."""
    level_name = os.environ.get(LOG_LEVEL_ENV, "WARNING").upper()
    return getattr(logging, level_name, logging.WARNING)


def setup_logging(level: Optional[int] = None, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configures the logger for the 'spatial3d' namespace.

    Args:
        level: Logging level (e.g. logging.DEBUG). Defaults to $SPATIAL3D_LOG_LEVEL.
        log_file: Optional path to save logs to a file. Defaults to $SPATIAL3D_LOG_FILE.

    Returns:
        The configured package logger.
    """
    level = level if level is not None else get_log_level()

    logger = logging.getLogger("spatial3d")
    logger.setLevel(level)

    # Avoid duplicate output when called twice
    for handler in list(logger.handlers):
        if not isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)

    formatter = logging.Formatter(DEFAULT_FORMAT, datefmt='%H:%M:%S')

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    log_file = log_file or os.environ.get(LOG_FILE_ENV)
    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging initialized.")
    return logger
