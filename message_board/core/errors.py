"""Application-level exception types.

This module defines domain errors raised by the services, enabling
consistent error handling, logging, and GraphQL error responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients."""

    user_id: str
    limit: int
    window_seconds: int
    retry_after: int


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message, returned verbatim to clients.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)

    @property
    def extensions(self) -> dict[str, Any]:
        """GraphQL error extensions (picked up by graphql-core)."""
        return {"code": self.code}


class NotFoundError(AppError):
    """Raised when a referenced user does not exist."""


class DuplicateEmailError(AppError):
    """Raised when creating a user with an email that is already taken."""


class RateLimitError(AppError):
    """Raised when a user exceeds the posting rate limit."""


def user_not_found(user_id: str, message: str = "User not found.") -> NotFoundError:
    return NotFoundError(
        code="user_not_found",
        message=message,
        details={"user_id": user_id},
    )


def duplicate_email() -> DuplicateEmailError:
    return DuplicateEmailError(
        code="duplicate_email",
        message="A user with this email already exists.",
    )


def rate_limit_exceeded(
    user_id: str,
    *,
    limit: int,
    window_seconds: int,
    retry_after: int | None,
) -> RateLimitError:
    details: ErrorDetails = {
        "user_id": user_id,
        "limit": limit,
        "window_seconds": window_seconds,
    }
    if retry_after is not None:
        details["retry_after"] = retry_after
    return RateLimitError(
        code="rate_limit_exceeded",
        message=(
            f"Rate limit exceeded. You can post a maximum of {limit} messages "
            f"per {_describe_window(window_seconds)}."
        ),
        details=details,
    )


def _describe_window(window_seconds: int) -> str:
    if window_seconds == 3600:
        return "hour"
    if window_seconds % 3600 == 0:
        return f"{window_seconds // 3600} hours"
    if window_seconds == 60:
        return "minute"
    if window_seconds % 60 == 0:
        return f"{window_seconds // 60} minutes"
    return f"{window_seconds} seconds"
