"""Rate limiter interfaces.

The posting workflow depends on this abstraction (not the concrete
implementation) so the storage backend can be swapped later, e.g. for a
shared cache, without touching the workflow.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitResult:
    """Result of a check-and-record operation.

    Attributes:
        allowed: Whether the event was allowed (and recorded).
        limit: Max events per window.
        remaining: Events still allowed in the window after this one.
        retry_after_seconds: Seconds until the oldest counted event leaves
            the window, when blocked.
    """

    allowed: bool
    limit: int
    remaining: int
    retry_after_seconds: int | None


class AbstractRateLimiter(ABC):
    """Interface for per-key rate limiters."""

    @property
    @abstractmethod
    def limit(self) -> int:
        raise NotImplementedError

    @property
    @abstractmethod
    def window_seconds(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def consume(self, key: str, *, now: float | None = None) -> RateLimitResult:
        """Check the budget for ``key`` and record the event when allowed.

        Must complete without yielding to the event loop: the check and the
        record form one unit.

        Args:
            key: Unique identifier (e.g., user id).
            now: Event time as UNIX seconds; defaults to the limiter's clock.

        Returns:
            RateLimitResult describing whether it was allowed.
        """
        raise NotImplementedError

    def check_and_record(self, key: str, now: float | None = None) -> bool:
        return self.consume(key, now=now).allowed

    @abstractmethod
    def sweep(self, now: float | None = None) -> int:
        """Drop keys with no event left in the window; return how many."""
        raise NotImplementedError

    @abstractmethod
    def reset(self, key: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def release(self, key: str, at: float) -> None:
        """Forget one event recorded for ``key`` at time ``at``.

        Used when the action an allowed event stood for did not happen.
        """
        raise NotImplementedError
