"""Unit tests for the Redis counter store adapter (mocked client)."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.asyncio import Redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from rate_gate.adapters.counter_store.redis_store import RedisCounterStore
from rate_gate.core.errors import StoreProtocolError, StoreUnavailableError


def _client_with_pipeline(replies=None, error: Exception | None = None) -> tuple[MagicMock, MagicMock]:
    """Build a mocked client whose transaction pipeline returns ``replies``."""
    pipe = MagicMock()
    pipe.incr.return_value = pipe
    pipe.expire.return_value = pipe
    pipe.execute = AsyncMock(return_value=replies, side_effect=error)

    client = MagicMock()
    client.pipeline.return_value.__aenter__.return_value = pipe
    client.pipeline.return_value.__aexit__.return_value = False
    return client, pipe


class TestIncrementWithExpiry:
    @pytest.mark.asyncio
    async def test_runs_incr_and_expire_in_one_transaction(self) -> None:
        client, pipe = _client_with_pipeline(replies=[3, True])
        store = RedisCounterStore(client)

        assert await store.increment_with_expiry("rate_limit:a:1", 12) == 3

        client.pipeline.assert_called_once_with(transaction=True)
        pipe.incr.assert_called_once_with("rate_limit:a:1")
        pipe.expire.assert_called_once_with("rate_limit:a:1", 12)
        pipe.execute.assert_awaited_once()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [RedisConnectionError("refused"), RedisTimeoutError("slow")])
    async def test_redis_errors_become_store_unavailable(self, error: Exception) -> None:
        client, _ = _client_with_pipeline(error=error)
        store = RedisCounterStore(client)

        with pytest.raises(StoreUnavailableError) as exc_info:
            await store.increment_with_expiry("k", 12)

        assert not isinstance(exc_info.value, StoreProtocolError)
        assert exc_info.value.code == "store_unavailable"
        assert exc_info.value.details["operation"] == "increment_with_expiry"
        assert exc_info.value.__cause__ is error

    @pytest.mark.asyncio
    @pytest.mark.parametrize("replies", [None, [], [None, True], ["3", True], [True, True]])
    async def test_uninterpretable_reply_is_protocol_error(self, replies) -> None:
        client, _ = _client_with_pipeline(replies=replies)
        store = RedisCounterStore(client)

        with pytest.raises(StoreProtocolError) as exc_info:
            await store.increment_with_expiry("k", 12)
        assert exc_info.value.code == "store_protocol_error"


class TestReads:
    @pytest.mark.asyncio
    async def test_get_parses_integer(self) -> None:
        client = MagicMock()
        client.get = AsyncMock(return_value="7")
        assert await RedisCounterStore(client).get("k") == 7

    @pytest.mark.asyncio
    async def test_get_missing_key(self) -> None:
        client = MagicMock()
        client.get = AsyncMock(return_value=None)
        assert await RedisCounterStore(client).get("k") is None

    @pytest.mark.asyncio
    async def test_get_non_integer_is_protocol_error(self) -> None:
        client = MagicMock()
        client.get = AsyncMock(return_value="not-a-number")
        with pytest.raises(StoreProtocolError):
            await RedisCounterStore(client).get("k")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(("reply", "expected"), [(9, 9), (-2, None), (-1, None)])
    async def test_ttl(self, reply: int, expected) -> None:
        client = MagicMock()
        client.ttl = AsyncMock(return_value=reply)
        assert await RedisCounterStore(client).ttl("k") == expected

    @pytest.mark.asyncio
    async def test_ttl_error(self) -> None:
        client = MagicMock()
        client.ttl = AsyncMock(side_effect=RedisConnectionError("down"))
        with pytest.raises(StoreUnavailableError):
            await RedisCounterStore(client).ttl("k")


class TestDeleteAndClose:
    @pytest.mark.asyncio
    async def test_delete(self) -> None:
        client = MagicMock()
        client.delete = AsyncMock(return_value=0)
        await RedisCounterStore(client).delete("k")
        client.delete.assert_awaited_once_with("k")

    @pytest.mark.asyncio
    async def test_delete_error(self) -> None:
        client = MagicMock()
        client.delete = AsyncMock(side_effect=RedisTimeoutError("slow"))
        with pytest.raises(StoreUnavailableError):
            await RedisCounterStore(client).delete("k")

    @pytest.mark.asyncio
    async def test_close_releases_client(self) -> None:
        client = MagicMock()
        client.aclose = AsyncMock()
        await RedisCounterStore(client).close()
        client.aclose.assert_awaited_once()


def test_from_url_builds_lazy_client() -> None:
    store = RedisCounterStore.from_url("redis://localhost:6379/0", socket_timeout=1.5)
    assert isinstance(store._client, Redis)
