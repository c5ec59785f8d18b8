"""Structured exception hierarchy for the mead tracker.

Provides specific exception types for the failure modes the application
can surface, with context for logging and troubleshooting.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

__all__ = [
    "MeadTrackerError",
    "StoreError",
    "ConfigurationError",
]


class MeadTrackerError(Exception):
    """Base exception for all mead tracker errors.

    Carries optional structured details that are kept out of the message
    text (the message is shown verbatim in the one-line status bar) but are
    available to logging through ``to_dict()``.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[Dict[str, Any]] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        self.message = message
        self.details = details or {}
        self.suggestion = suggestion
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for structured logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "suggestion": self.suggestion,
        }


class StoreError(MeadTrackerError):
    """Error raised by the persistent store.

    Wraps the underlying database exception. The string form is
    ``"<operation> failed: <cause>"`` so it can be shown to the user as-is.
    """

    def __init__(
        self,
        operation: str,
        *,
        cause: Optional[Exception] = None,
        **kwargs: Any,
    ) -> None:
        self.operation = operation
        self.cause = cause

        details = kwargs.pop("details", {})
        details["operation"] = operation
        if cause:
            details["cause"] = str(cause)
            details["cause_type"] = type(cause).__name__

        message = f"{operation} failed"
        if cause:
            message = f"{message}: {cause}"

        super().__init__(message, details=details, **kwargs)


class ConfigurationError(MeadTrackerError):
    """Error in application configuration.

    Raised when a settings value is present but unusable.
    """

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Any = None,
        **kwargs: Any,
    ) -> None:
        self.field = field
        self.value = value

        details = kwargs.pop("details", {})
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)

        super().__init__(message, details=details, **kwargs)
