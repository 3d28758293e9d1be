"""Rate limiting adapters.

The fixed-window limiter keeps all mutable state in a counter store, so the
same policy can run against Redis in production and an in-memory store in
tests without changing the API layer.
"""

from rate_gate.adapters.rate_limit.base import AbstractRateLimiter, RateLimitDecision, WindowUnit
from rate_gate.adapters.rate_limit.fixed_window import FixedWindowRateLimiter

__all__ = [
    "AbstractRateLimiter",
    "FixedWindowRateLimiter",
    "RateLimitDecision",
    "WindowUnit",
]
