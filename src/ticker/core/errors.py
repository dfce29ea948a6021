"""
Structured error types for the frame ticker.

Every error raised by ticker code extends ``TickerError`` so callers get a
consistent shape: a category for routing, an explicit retry flag, a
structured context and an optional chained cause.

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────┐
        │                       TickerError                            │
        │  (category, retryable, context, cause)                      │
        ├─────────────────────────────────────────────────────────────┤
        │                                                              │
        │  ValidationError        ConfigError        CallbackError     │
        │  (VALIDATION)           (CONFIG)           (CALLBACK)        │
        │       │                                                      │
        │  InvalidDelayError                                           │
        │  InvalidRepeatCountError                                     │
        └─────────────────────────────────────────────────────────────┘

Validation errors are raised synchronously when a callback is registered,
never from inside a tick. ``CallbackError`` wraps whatever an action raised
while per-callback isolation is on, so the failure can be logged and counted
without aborting the rest of the tick.

Examples:
    >>> try:
    ...     ticker.set_timeout(print, -5)
    ... except InvalidDelayError as e:
    ...     e.to_dict()["category"]
    'VALIDATION'

    >>> err = CallbackError("boom").with_context(callback_id=10001, kind="interval")
    >>> err.context.callback_id
    10001

Guardrails:
    ❌ DON'T: Raise bare ValueError for bad delays or repeat counts
    ✅ DO: Raise InvalidDelayError / InvalidRepeatCountError

    ❌ DON'T: Swallow the exception raised by an action
    ✅ DO: Pass it as cause= so the traceback survives

Tags:
    error-handling, exception-hierarchy, validation, ticker
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """
    Standard error categories for classification and routing.

    Attributes:
        VALIDATION: Bad arguments given to a registration call
        CONFIG: Missing or invalid settings
        SCHEDULING: Lifecycle or frame source problems
        CALLBACK: An action raised while firing
        INTERNAL: Bugs, unexpected state
        UNKNOWN: Uncategorized errors
    """

    VALIDATION = "VALIDATION"
    CONFIG = "CONFIG"
    SCHEDULING = "SCHEDULING"
    CALLBACK = "CALLBACK"
    INTERNAL = "INTERNAL"
    UNKNOWN = "UNKNOWN"


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    ``to_dict()`` drops unset fields and flattens ``metadata`` so the result
    can be passed straight to a structured logger.

    Attributes:
        callback_id: Registry id of the callback involved
        kind: Registration kind (timeout, interval, counter, ...)
        frame: Frame number the error happened in
        metadata: Additional key-value pairs
    """

    callback_id: int | None = None
    kind: str | None = None
    frame: int | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["callback_id", "kind", "frame"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class TickerError(Exception):
    """
    Base exception for all ticker errors.

    Subclasses set ``default_category`` and ``default_retryable`` so the
    common case needs nothing but a message.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> TickerError:
        """
        Add context to this error (fluent API).

        Usage:
            raise CallbackError("Failed").with_context(callback_id=10003, frame=42)
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = repr(self.cause)
        return result

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class ValidationError(TickerError):
    """
    Registration argument error.

    Never retryable - the caller must pass different arguments.
    """

    default_category = ErrorCategory.VALIDATION
    default_retryable = False

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        if self.value is not None:
            result["value"] = repr(self.value)
        return result


class InvalidDelayError(ValidationError):
    """Delay is not a positive number."""

    def __init__(self, value: Any = None, message: str | None = None, **kwargs: Any):
        super().__init__(
            message or "Delay must be a positive number.",
            field="delay",
            value=value,
            **kwargs,
        )


class InvalidRepeatCountError(ValidationError):
    """Repeat count is not a positive number."""

    def __init__(self, value: Any = None, message: str | None = None, **kwargs: Any):
        super().__init__(
            message or "A callback must be executed at least once.",
            field="repeats",
            value=value,
            **kwargs,
        )


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(TickerError):
    """
    Configuration error.

    Never retryable - configuration must be fixed.
    """

    default_category = ErrorCategory.CONFIG
    default_retryable = False

    def __init__(self, message: str, *, key: str | None = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.key = key


# =============================================================================
# RUNTIME ERRORS
# =============================================================================


class CallbackError(TickerError):
    """An action raised while it was being fired."""

    default_category = ErrorCategory.CALLBACK
    default_retryable = False


def is_retryable(error: Exception) -> bool:
    """Check if an error is retryable."""
    if isinstance(error, TickerError):
        return error.retryable
    return False


def categorize_error(error: Exception) -> ErrorCategory:
    """Get the category of an error."""
    if isinstance(error, TickerError):
        return error.category
    if isinstance(error, (TypeError, ValueError)):
        return ErrorCategory.VALIDATION
    return ErrorCategory.UNKNOWN


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "TickerError",
    "ValidationError",
    "InvalidDelayError",
    "InvalidRepeatCountError",
    "ConfigError",
    "CallbackError",
    "is_retryable",
    "categorize_error",
]
