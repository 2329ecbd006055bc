"""In-memory sliding-window rate limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit,
  and state is lost on restart.
- Thread-safe: uses a lock around shared state, and never awaits, so the
  check and the record are atomic for asyncio tasks as well.
"""

from __future__ import annotations

import math
import threading
import time
from typing import Callable

from message_board.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult


class InMemorySlidingWindowRateLimiter(AbstractRateLimiter):
    """Count events per key within a trailing window (e.g. 10 per hour).

    Only events strictly newer than ``now - window_seconds`` count. Rejected
    events are not recorded. Expired timestamps are pruned whenever a key is
    touched; keys left empty are removed, and ``sweep`` clears keys that are
    no longer touched at all.
    """

    def __init__(
        self,
        *,
        limit: int,
        window_seconds: int,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the limiter.

        Args:
            limit: Maximum number of events per window.
            window_seconds: Size of the sliding window in seconds.
            clock: Time source returning UNIX time in seconds.

        Raises:
            ValueError: If limit or window_seconds are invalid.
        """
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")

        self._limit = limit
        self._window_seconds = window_seconds
        self._clock = clock
        self._lock = threading.RLock()
        self._events_by_key: dict[str, list[float]] = {}

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def window_seconds(self) -> int:
        return self._window_seconds

    def __len__(self) -> int:
        with self._lock:
            return len(self._events_by_key)

    def _recent(self, key: str, now: float) -> list[float]:
        cutoff = now - self._window_seconds
        return [ts for ts in self._events_by_key.get(key, ()) if ts > cutoff]

    def consume(self, key: str, *, now: float | None = None) -> RateLimitResult:
        if not key:
            raise ValueError("key must be a non-empty string")

        now = self._clock() if now is None else now

        with self._lock:
            recent = self._recent(key, now)

            if len(recent) >= self._limit:
                self._events_by_key[key] = recent
                retry_after = max(0, int(math.ceil(recent[0] + self._window_seconds - now)))
                return RateLimitResult(
                    allowed=False,
                    limit=self._limit,
                    remaining=0,
                    retry_after_seconds=retry_after,
                )

            recent.append(now)
            self._events_by_key[key] = recent
            return RateLimitResult(
                allowed=True,
                limit=self._limit,
                remaining=self._limit - len(recent),
                retry_after_seconds=None,
            )

    def sweep(self, now: float | None = None) -> int:
        now = self._clock() if now is None else now

        with self._lock:
            idle = [key for key in self._events_by_key if not self._recent(key, now)]
            for key in idle:
                del self._events_by_key[key]
            return len(idle)

    def reset(self, key: str) -> None:
        with self._lock:
            self._events_by_key.pop(key, None)

    def release(self, key: str, at: float) -> None:
        with self._lock:
            events = self._events_by_key.get(key)
            if not events or at not in events:
                return
            events.remove(at)
            if not events:
                del self._events_by_key[key]
