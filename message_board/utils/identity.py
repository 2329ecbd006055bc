"""Identifiers and creation timestamps for new users and messages."""

from __future__ import annotations

import threading
import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable


def new_id() -> str:
    """Return a new opaque identifier (UUID4 string)."""

    return str(uuid.uuid4())


def format_timestamp(moment: datetime) -> str:
    """Format an aware datetime as fixed-width ISO-8601 UTC text.

    Microsecond precision and the ``Z`` suffix keep the strings the same
    length, so lexical order in the store equals chronological order.
    """

    utc = moment.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.%fZ")


class MonotonicTimestamps:
    """Issue strictly increasing creation timestamps.

    Two calls within the clock's resolution (or after the wall clock stepped
    backwards) would otherwise yield equal or decreasing values; the later
    call is pushed one microsecond past the previous timestamp instead.
    """

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._last: datetime | None = None
        self._lock = threading.Lock()

    def next(self) -> datetime:
        with self._lock:
            current = self._clock()
            if self._last is not None and current <= self._last:
                current = self._last + timedelta(microseconds=1)
            self._last = current
            return current

    def now_iso(self) -> str:
        return format_timestamp(self.next())


_default_timestamps = MonotonicTimestamps()


def utc_now_iso() -> str:
    """Return the next process-wide creation timestamp as ISO-8601 text."""

    return _default_timestamps.now_iso()
