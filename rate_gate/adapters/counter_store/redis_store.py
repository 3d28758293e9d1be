"""Redis-backed counter store.

Increment and expiry run inside one MULTI/EXEC transaction, so concurrent
requests for the same key can never interleave a read-modify-write. The
client handle is shared by every caller; redis-py's connection pool handles
concurrency, pooling and reconnection.
"""

from __future__ import annotations

import logging
from typing import Any

from redis.asyncio import Redis
from redis.exceptions import RedisError

from rate_gate.adapters.counter_store.base import AbstractCounterStore
from rate_gate.core.errors import StoreProtocolError, StoreUnavailableError

logger = logging.getLogger(__name__)


class RedisCounterStore(AbstractCounterStore):
    """Counter store on top of a ``redis.asyncio.Redis`` client."""

    def __init__(self, client: Redis) -> None:
        self._client = client

    @classmethod
    def from_url(cls, url: str, *, socket_timeout: float = 5.0) -> "RedisCounterStore":
        """Build a store with its own client. No connection is opened until first use."""
        client = Redis.from_url(
            url,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_timeout,
            decode_responses=True,
        )
        return cls(client)

    @staticmethod
    def _unavailable(operation: str, exc: RedisError) -> StoreUnavailableError:
        return StoreUnavailableError(
            code="store_unavailable",
            message=f"Counter store call failed: {operation}",
            details={
                "operation": operation,
                "backend": "redis",
                "error_type": type(exc).__name__,
            },
        )

    @staticmethod
    def _protocol_error(operation: str, reply: Any) -> StoreProtocolError:
        return StoreProtocolError(
            code="store_protocol_error",
            message=f"Unexpected reply from counter store: {operation}",
            details={
                "operation": operation,
                "backend": "redis",
                "context": {"reply_type": type(reply).__name__},
            },
        )

    async def increment_with_expiry(self, key: str, ttl_seconds: int) -> int:
        try:
            async with self._client.pipeline(transaction=True) as pipe:
                replies = await pipe.incr(key).expire(key, ttl_seconds).execute()
        except RedisError as exc:
            raise self._unavailable("increment_with_expiry", exc) from exc

        # execute() returns one reply per queued command: [INCR, EXPIRE]
        if not replies:
            raise self._protocol_error("increment_with_expiry", replies)
        count = replies[0]
        if isinstance(count, bool) or not isinstance(count, int):
            raise self._protocol_error("increment_with_expiry", count)
        return count

    async def get(self, key: str) -> int | None:
        try:
            raw = await self._client.get(key)
        except RedisError as exc:
            raise self._unavailable("get", exc) from exc

        if raw is None:
            return None
        try:
            return int(raw)
        except (TypeError, ValueError) as exc:
            raise self._protocol_error("get", raw) from exc

    async def ttl(self, key: str) -> int | None:
        try:
            remaining = await self._client.ttl(key)
        except RedisError as exc:
            raise self._unavailable("ttl", exc) from exc

        if isinstance(remaining, bool) or not isinstance(remaining, int):
            raise self._protocol_error("ttl", remaining)
        # -2: no such key, -1: key without expiry
        if remaining < 0:
            return None
        return remaining

    async def delete(self, key: str) -> None:
        try:
            await self._client.delete(key)
        except RedisError as exc:
            raise self._unavailable("delete", exc) from exc

    async def close(self) -> None:
        try:
            await self._client.aclose()
        except RedisError as exc:
            raise self._unavailable("close", exc) from exc
        logger.info("counter_store.closed", extra={"backend": "redis"})
