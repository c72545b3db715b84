"""Structured logging configuration.

This module initializes structlog with a stable JSON event format.
Loggers are lazy proxies so a later level change applies everywhere.
"""

from __future__ import annotations

import logging
from typing import Any

import structlog

from core.constants import DEFAULT_LOG_LEVEL


def get_logger(name: str) -> Any:
    """Return a module logger instance.

    Args:
        name: Logger name, usually __name__.

    Returns:
        A structlog logger with structured output.
    """
    if not structlog.is_configured():
        configure_logging(DEFAULT_LOG_LEVEL)
    return structlog.get_logger(name)


def configure_logging(level: str) -> None:
    """Install the structured processor chain filtered at a level.

    Args:
        level: Minimum level name, e.g. "info" or "debug".
    """
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_level_number(level)),
        cache_logger_on_first_use=False,
    )


def _level_number(level: str) -> int:
    return logging.getLevelName(level.upper())
