"""Counter store interface.

The limiter talks to its shared counters exclusively through this contract,
so any backend that can increment and expire a key atomically can be plugged
in. Implementations raise ``StoreUnavailableError`` (or its subclass
``StoreProtocolError``) when a call fails; they never return a made-up value.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class AbstractCounterStore(ABC):
    """Interface for shared counters with expiry."""

    @abstractmethod
    async def increment_with_expiry(self, key: str, ttl_seconds: int) -> int:
        """Increment ``key`` by one and reset its expiry, as one indivisible step.

        Args:
            key: Counter key. Created at 1 when absent.
            ttl_seconds: Expiry applied to the key after the increment.

        Returns:
            The post-increment value.

        Raises:
            StoreUnavailableError: If the store call fails.
        """
        raise NotImplementedError

    @abstractmethod
    async def get(self, key: str) -> int | None:
        """Return the current value of ``key``, or None if absent/expired."""
        raise NotImplementedError

    @abstractmethod
    async def ttl(self, key: str) -> int | None:
        """Return the remaining seconds-to-live of ``key``, or None if absent."""
        raise NotImplementedError

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove ``key`` if present; no-op otherwise."""
        raise NotImplementedError

    @abstractmethod
    async def close(self) -> None:
        """Release the underlying connection."""
        raise NotImplementedError
