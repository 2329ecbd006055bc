"""Rate limiting adapters.

The posting workflow starts with an in-memory limiter; a shared store can
replace it behind ``AbstractRateLimiter`` without changing the workflow.
"""

from message_board.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from message_board.adapters.rate_limit.in_memory import InMemorySlidingWindowRateLimiter

__all__ = [
    "AbstractRateLimiter",
    "InMemorySlidingWindowRateLimiter",
    "RateLimitResult",
]
