"""Logging configuration utilities for banksim.

By default banksim is silent (a NullHandler is attached to the package
logger). Enable output explicitly:

    import banksim

    banksim.enable_console_logging(level="DEBUG")

    # or from the environment
    banksim.configure_from_env()

Environment variables:
    BANKSIM_LOGGING: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Literal

__all__ = [
    "configure_from_env",
    "disable_logging",
    "enable_console_logging",
    "set_level",
]

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOGGER_NAME = "banksim"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _get_level(level: str | int) -> int:
    """Convert a level string or int to a logging level constant."""
    if isinstance(level, int):
        return level
    return getattr(logging, level.upper(), logging.INFO)


def _get_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)


def _clear_handlers() -> None:
    """Remove and close all handlers from the banksim logger except NullHandler."""
    logger = _get_logger()
    for handler in logger.handlers[:]:
        if not isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)
            handler.close()


def enable_console_logging(
    level: LogLevel | int = "INFO",
    format: str = DEFAULT_FORMAT,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> logging.StreamHandler:
    """Enable console (stderr) logging for banksim.

    Replaces any handler previously installed by this module.

    Returns:
        The StreamHandler that was added.
    """
    _clear_handlers()
    logger = _get_logger()
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(format, datefmt=date_format))
    logger.addHandler(handler)
    logger.setLevel(_get_level(level))
    return handler


def disable_logging() -> None:
    """Remove all handlers and return to the silent default."""
    _clear_handlers()
    _get_logger().setLevel(logging.WARNING)


def set_level(level: LogLevel | int) -> None:
    """Set the level of the banksim logger without touching its handlers."""
    _get_logger().setLevel(_get_level(level))


def configure_from_env() -> None:
    """Enable console logging when BANKSIM_LOGGING is set."""
    level = os.environ.get("BANKSIM_LOGGING")
    if level:
        enable_console_logging(level=level.upper())
