"""
Structured error types for the essentials toolkit.

Every exception raised by essentials extends ``EssentialsError`` so callers
can catch the whole family with a single ``except`` clause, and every error
carries a category, structured context and an optional chained cause.

Architecture:
    ::

        ┌──────────────────────────────────────────────────────┐
        │                   EssentialsError                     │
        │            (category, context, cause)                 │
        ├──────────────────────────────────────────────────────┤
        │  ConfigError                         OrchestrationError
        │  (CONFIG)                            (ORCHESTRATION) │
        │       │                                     │         │
        │  InvalidConfigError                  RunnerError      │
        │                                      (orchestration/  │
        │                                       exceptions.py)  │
        └──────────────────────────────────────────────────────┘

Examples:
    >>> error = OrchestrationError("Plan is broken")
    >>> error.category
    <ErrorCategory.ORCHESTRATION: 'ORCHESTRATION'>
    >>> error.with_context(step="charge").context.step
    'charge'

Note that step *failures* are not exceptions: a step reports failure by
returning ``Err(reason)`` and the runner surfaces it as data. Exceptions in
this module are reserved for programming and configuration errors.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and reporting."""

    VALIDATION = "VALIDATION"
    CONFIG = "CONFIG"
    ORCHESTRATION = "ORCHESTRATION"
    INTERNAL = "INTERNAL"
    UNKNOWN = "UNKNOWN"


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Attributes:
        runner: Identifier of the runner the error came from
        step: Step name involved in the error
        run_id: Identifier of the execution pass
        metadata: Any additional fields
    """

    runner: str | None = None
    step: str | None = None
    run_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Serialize all non-None fields, flattening metadata."""
        result = {}
        for key in ("runner", "step", "run_id"):
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class EssentialsError(Exception):
    """
    Base exception for all essentials errors.

    Subclasses set ``default_category`` to classify themselves.

    Examples:
        >>> try:
        ...     raise KeyError("timeout")
        ... except KeyError as e:
        ...     error = EssentialsError("Bad options", cause=e)
        >>> error.cause
        KeyError('timeout')
        >>> error.to_dict()["category"]
        'INTERNAL'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> EssentialsError:
        """
        Add context to this error (fluent API).

        Known fields are set directly, anything else lands in ``metadata``.
        """
        for key, value in kwargs.items():
            if key != "metadata" and hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(EssentialsError):
    """Configuration error."""

    default_category = ErrorCategory.CONFIG


class InvalidConfigError(ConfigError):
    """A configuration value was provided but is not acceptable."""

    def __init__(self, message: str, *, key: str | None = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.key = key


# =============================================================================
# ORCHESTRATION ERRORS
# =============================================================================


class OrchestrationError(EssentialsError):
    """Step plan construction or execution error."""

    default_category = ErrorCategory.ORCHESTRATION


def categorize_error(error: BaseException) -> ErrorCategory:
    """Get the category of an error."""
    if isinstance(error, EssentialsError):
        return error.category
    if isinstance(error, (ValueError, TypeError)):
        return ErrorCategory.VALIDATION
    if isinstance(error, (KeyError, AttributeError)):
        return ErrorCategory.CONFIG
    return ErrorCategory.UNKNOWN


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "EssentialsError",
    "ConfigError",
    "InvalidConfigError",
    "OrchestrationError",
    "categorize_error",
]
