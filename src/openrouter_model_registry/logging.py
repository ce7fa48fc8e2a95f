"""Logging utilities for the model registry.

This module provides standardized logging functionality for registry operations.
All loggers are children of the ``openrouter_model_registry`` logger, so
applications can configure the whole package through a single name.
"""

import logging
from enum import Enum
from typing import Any

ROOT_LOGGER_NAME = "openrouter_model_registry"


class LogLevel(int, Enum):
    """Log levels for the registry."""

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL


class LogEvent(str, Enum):
    """Event types for registry logging."""

    MODEL_REGISTRY = "model_registry"
    NORMALIZATION = "normalization"
    FETCH = "fetch"
    SNAPSHOT = "snapshot"
    FALLBACK = "fallback"
    CACHE = "cache"
    QUERY = "query"


def get_logger(name: str) -> logging.Logger:
    """Get a package logger.

    Args:
        name: Short name of the component (e.g. "fetcher")

    Returns:
        Logger named ``openrouter_model_registry.<name>``
    """
    if name.startswith(ROOT_LOGGER_NAME):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


_logger = get_logger("events")


def _log(level: LogLevel, event: LogEvent, message: str, **data: Any) -> None:
    """Log an event with structured data attached.

    Args:
        level: Severity level
        event: Event type
        message: Log message
        **data: Event data, rendered after the message and attached as ``extra``
    """
    if not _logger.isEnabledFor(level):
        return
    suffix = ""
    if data:
        suffix = " (" + ", ".join(f"{key}={value}" for key, value in sorted(data.items())) + ")"
    _logger.log(level, f"[{event.value}] {message}{suffix}", extra={"event": event.value, "event_data": data})


def log_debug(event: LogEvent, message: str, **data: Any) -> None:
    """Log a debug-level event."""
    _log(LogLevel.DEBUG, event, message, **data)


def log_info(event: LogEvent, message: str, **data: Any) -> None:
    """Log an info-level event."""
    _log(LogLevel.INFO, event, message, **data)


def log_warning(event: LogEvent, message: str, **data: Any) -> None:
    """Log a warning-level event."""
    _log(LogLevel.WARNING, event, message, **data)


def log_error(event: LogEvent, message: str, **data: Any) -> None:
    """Log an error-level event."""
    _log(LogLevel.ERROR, event, message, **data)
