"""Rate limiter interfaces.

The HTTP layer depends on this abstraction (not the concrete limiter), and
reads decisions through ``RateLimitDecision`` so a store outage is never
mistaken for a client that simply ran out of quota.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from rate_gate.core.errors import StoreUnavailableError


class WindowUnit(str, Enum):
    """Unit in which a window length is expressed."""

    MINUTE = "minute"
    HOUR = "hour"

    @property
    def seconds(self) -> int:
        return 60 if self is WindowUnit.MINUTE else 3600


@dataclass(frozen=True)
class RateLimitDecision:
    """Result of counting one request against the current window.

    Attributes:
        allowed: Whether the request may proceed.
        limit: Max requests per window.
        count: Post-increment count for the window (0 when the store failed).
        remaining: Requests left in the current window (0 when blocked).
        reset_after_seconds: Seconds until the window's counter expires.
        error: The store failure that forced a deny, if any.
    """

    allowed: bool
    limit: int
    count: int
    remaining: int
    reset_after_seconds: int
    error: StoreUnavailableError | None = None

    @property
    def store_failed(self) -> bool:
        return self.error is not None


class AbstractRateLimiter(ABC):
    """Interface for per-client rate limiters."""

    @property
    @abstractmethod
    def limit(self) -> int:
        """Max requests per window."""
        raise NotImplementedError

    @property
    @abstractmethod
    def window_duration_seconds(self) -> int:
        """Window length in seconds."""
        raise NotImplementedError

    @abstractmethod
    async def evaluate(self, client_id: str) -> RateLimitDecision:
        """Count one request for ``client_id`` and describe the outcome."""
        raise NotImplementedError

    @abstractmethod
    async def check_rate_limit(self, client_id: str) -> bool:
        """Count one request for ``client_id``; True if it is allowed."""
        raise NotImplementedError

    @abstractmethod
    async def get_remaining_requests(self, client_id: str) -> int:
        """Return requests left for ``client_id`` in the current window."""
        raise NotImplementedError

    @abstractmethod
    async def get_time_to_reset(self, client_id: str) -> int:
        """Return seconds until the current window's counter expires."""
        raise NotImplementedError

    @abstractmethod
    async def reset_limit_for_ip(self, client_id: str) -> None:
        """Restore full quota for ``client_id`` in the current window."""
        raise NotImplementedError

    @abstractmethod
    async def close(self) -> None:
        """Release the underlying store."""
        raise NotImplementedError
