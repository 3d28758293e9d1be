"""Application-level exception types.

This module defines domain errors used across the limiter, store adapters
and HTTP layer, enabling consistent error handling, logging, and responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients.

    Fields are optional so each error can carry only what applies to it.
    """

    hint: str
    operation: str
    backend: str
    error_type: str
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when input/config validation fails."""


class InvalidClientIdError(ValidationAppError):
    """Raised when a limiter call receives an empty client identifier."""


class AuthenticationAppError(AppError):
    """Raised when authentication/authorization fails."""


class StoreUnavailableError(AppError):
    """Raised when a counter store call fails (network error, timeout)."""


class StoreProtocolError(StoreUnavailableError):
    """Raised when the counter store returns a response we cannot interpret."""
