"""Fixed-window rate limiter over a shared counter store.

Time is cut into consecutive, non-overlapping windows of equal length. Each
(client, window) pair owns one counter in the store, keyed as
``<prefix>:<client_id>:<window_index>`` with
``window_index = floor(now / window_duration_seconds)``. Every request
increments that counter and refreshes its expiry in a single atomic store
operation; the limiter itself keeps no per-client state and can be shared
freely between concurrent callers.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

from rate_gate.adapters.counter_store.base import AbstractCounterStore
from rate_gate.adapters.rate_limit.base import (
    AbstractRateLimiter,
    RateLimitDecision,
    WindowUnit,
)
from rate_gate.core.errors import InvalidClientIdError, StoreUnavailableError
from rate_gate.core.logging import hash_client_id

logger = logging.getLogger(__name__)


class FixedWindowRateLimiter(AbstractRateLimiter):
    """Allow at most ``limit`` requests per client in each fixed window.

    The request that pushes a window's count to ``limit + 1`` is the first one
    denied. Denied requests still increment the counter. When the store
    fails, the limiter fails closed: the request is denied and the failure is
    reported instead of being folded into an ordinary deny.
    """

    def __init__(
        self,
        limit: int,
        window_length: float,
        window_unit: WindowUnit | str,
        store: AbstractCounterStore,
        *,
        clock: Callable[[], float] = time.time,
        key_prefix: str = "rate_limit",
    ) -> None:
        """Initialize the limiter.

        Args:
            limit: Maximum number of requests allowed per window.
            window_length: Window length, in ``window_unit``.
            window_unit: ``"minute"`` or ``"hour"``.
            store: Shared counter store.
            clock: Time source function returning UNIX time in seconds.
            key_prefix: Namespace for window keys in the store.

        Raises:
            ValueError: If the policy is invalid.
        """
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if window_length <= 0:
            raise ValueError("window_length must be > 0")

        unit = WindowUnit(window_unit)
        # Store expiry has whole-second granularity
        duration = int(round(window_length * unit.seconds))
        if duration < 1:
            raise ValueError("window must be at least one second long")

        self._limit = limit
        self._window_length = window_length
        self._window_unit = unit
        self._window_duration = duration
        self._store = store
        self._clock = clock
        self._key_prefix = key_prefix
        self._closed = False

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def window_duration_seconds(self) -> int:
        return self._window_duration

    def window_index(self, now: float | None = None) -> int:
        """Return the index of the window containing ``now`` (default: current time)."""
        if now is None:
            now = self._clock()
        return int(now // self._window_duration)

    def window_key(self, client_id: str, now: float | None = None) -> str:
        """Build the store key for ``client_id`` in the window containing ``now``.

        Raises:
            InvalidClientIdError: If ``client_id`` is empty.
        """
        if not client_id:
            raise InvalidClientIdError(
                code="client_id_required",
                message="A non-empty client identifier is required",
            )
        return f"{self._key_prefix}:{client_id}:{self.window_index(now)}"

    async def evaluate(self, client_id: str) -> RateLimitDecision:
        """Count one request and return the decision with its quota metadata.

        Remaining quota and time to reset are derived from the same atomic
        increment that produced the decision: the increment refreshes the
        expiry, so a live window always has the full duration left.

        Raises:
            InvalidClientIdError: If ``client_id`` is empty.
        """
        key = self.window_key(client_id)

        try:
            count = await self._store.increment_with_expiry(key, self._window_duration)
        except StoreUnavailableError as exc:
            logger.error(
                "rate_limit.store_unavailable",
                extra={
                    "operation": "check_rate_limit",
                    "client_hash": hash_client_id(client_id),
                    "error_code": exc.code,
                    "error_message": exc.message,
                },
            )
            return RateLimitDecision(
                allowed=False,
                limit=self._limit,
                count=0,
                remaining=0,
                reset_after_seconds=self._window_duration,
                error=exc,
            )

        if count == 1:
            logger.info(
                "rate_limit.window_started",
                extra={
                    "client_hash": hash_client_id(client_id),
                    "window_length": self._window_length,
                    "window_unit": self._window_unit.value,
                },
            )

        return RateLimitDecision(
            allowed=count <= self._limit,
            limit=self._limit,
            count=count,
            remaining=max(0, self._limit - count),
            reset_after_seconds=self._window_duration,
        )

    async def check_rate_limit(self, client_id: str) -> bool:
        """Count one request; True if allowed, False if over the limit or the store failed."""
        decision = await self.evaluate(client_id)
        return decision.allowed

    async def get_remaining_requests(self, client_id: str) -> int:
        """Return ``max(0, limit - count)`` for the current window without counting.

        Falls back to 0 when the store cannot be read.
        """
        key = self.window_key(client_id)
        try:
            count = await self._store.get(key)
        except StoreUnavailableError as exc:
            logger.warning(
                "rate_limit.store_unavailable",
                extra={
                    "operation": "get_remaining_requests",
                    "client_hash": hash_client_id(client_id),
                    "error_code": exc.code,
                },
            )
            return 0
        return max(0, self._limit - (count or 0))

    async def get_time_to_reset(self, client_id: str) -> int:
        """Return the live TTL of the current window's counter.

        A window with no counter yet reports the full window duration, as does
        a store that cannot be read.
        """
        key = self.window_key(client_id)
        try:
            remaining = await self._store.ttl(key)
        except StoreUnavailableError as exc:
            logger.warning(
                "rate_limit.store_unavailable",
                extra={
                    "operation": "get_time_to_reset",
                    "client_hash": hash_client_id(client_id),
                    "error_code": exc.code,
                },
            )
            return self._window_duration
        if remaining is None or remaining <= 0:
            return self._window_duration
        return remaining

    async def reset_limit_for_ip(self, client_id: str) -> None:
        """Delete the current window's counter, restoring full quota.

        Raises:
            InvalidClientIdError: If ``client_id`` is empty.
            StoreUnavailableError: If the store call fails.
        """
        key = self.window_key(client_id)
        await self._store.delete(key)
        logger.info(
            "rate_limit.reset",
            extra={"client_hash": hash_client_id(client_id)},
        )

    async def close(self) -> None:
        """Close the store connection.

        Calling it again after a successful close is a no-op. If the store
        close fails, the error propagates and a later call retries.
        """
        if self._closed:
            return
        await self._store.close()
        self._closed = True
