"""Core building blocks shared by every ticker module: errors, settings, logging."""

from .errors import (
    CallbackError,
    ConfigError,
    ErrorCategory,
    ErrorContext,
    InvalidDelayError,
    InvalidRepeatCountError,
    TickerError,
    ValidationError,
)
from .logging import LogContext, configure_logging, get_logger
from .settings import TickerSettings

__all__ = [
    "CallbackError",
    "ConfigError",
    "ErrorCategory",
    "ErrorContext",
    "InvalidDelayError",
    "InvalidRepeatCountError",
    "TickerError",
    "ValidationError",
    "LogContext",
    "configure_logging",
    "get_logger",
    "TickerSettings",
]
