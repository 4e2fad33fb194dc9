"""Application-level exception types.

This module defines domain errors used across the store, services and the
HTTP layer, enabling consistent error handling, logging, and API responses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context returned to clients under ``error.details``."""

    hint: str
    author_id: int
    errors: list[dict[str, Any]]
    quota: str
    retry_after: int


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
    """Raised when input validation fails (e.g. name too long, bad email)."""


class AuthenticationAppError(AppError):
    """Raised when authentication/authorization fails."""


class NotFoundAppError(AppError):
    """Raised when the requested author id does not exist."""


class NotModifiedAppError(AppError):
    """Raised when a partial update carries no field to change."""


@dataclass
class RateLimitAppError(AppError):
    """Raised when a client exhausted its quota for the current window.

    Attributes:
        headers: Rate limit headers to send along with the 429 response.
    """

    headers: dict[str, str] = field(default_factory=dict)
