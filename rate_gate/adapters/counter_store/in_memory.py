"""In-memory counter store.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: every operation holds a lock, so increment-and-expire is
  indivisible exactly like the Redis transaction it stands in for.
"""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable

from rate_gate.adapters.counter_store.base import AbstractCounterStore
from rate_gate.core.errors import StoreUnavailableError


@dataclass
class _Entry:
    value: int
    expires_at: float


class InMemoryCounterStore(AbstractCounterStore):
    """Counter store keeping expiring integers in a dict.

    Expired entries are dropped when touched after their deadline, and every
    increment sweeps out all expired entries so stale windows do not pile up.
    """

    def __init__(self, *, clock: Callable[[], float] = time.time) -> None:
        """Initialize the store.

        Args:
            clock: Time source function returning UNIX time in seconds.
        """
        self._clock = clock
        self._lock = threading.RLock()
        self._entries: dict[str, _Entry] = {}
        self._closed = False

    def _ensure_open(self) -> None:
        if self._closed:
            raise StoreUnavailableError(
                code="store_closed",
                message="Counter store has been closed",
                details={"backend": "memory"},
            )

    def _live_entry(self, key: str, now: float) -> _Entry | None:
        """Return the entry for key, evicting it first if it has expired."""
        entry = self._entries.get(key)
        if entry is not None and entry.expires_at <= now:
            del self._entries[key]
            return None
        return entry

    def _evict_expired_locked(self, now: float) -> None:
        expired_keys = [k for k, entry in self._entries.items() if entry.expires_at <= now]
        for key in expired_keys:
            del self._entries[key]

    async def increment_with_expiry(self, key: str, ttl_seconds: int) -> int:
        if ttl_seconds < 1:
            raise ValueError("ttl_seconds must be >= 1")

        with self._lock:
            self._ensure_open()
            now = self._clock()
            self._evict_expired_locked(now)
            entry = self._entries.get(key)
            if entry is None:
                entry = _Entry(value=0, expires_at=now)
                self._entries[key] = entry
            entry.value += 1
            entry.expires_at = now + ttl_seconds
            return entry.value

    async def get(self, key: str) -> int | None:
        with self._lock:
            self._ensure_open()
            entry = self._live_entry(key, self._clock())
            return entry.value if entry is not None else None

    async def ttl(self, key: str) -> int | None:
        with self._lock:
            self._ensure_open()
            now = self._clock()
            entry = self._live_entry(key, now)
            if entry is None:
                return None
            return int(math.ceil(entry.expires_at - now))

    async def delete(self, key: str) -> None:
        with self._lock:
            self._ensure_open()
            self._entries.pop(key, None)

    async def close(self) -> None:
        with self._lock:
            self._entries.clear()
            self._closed = True
