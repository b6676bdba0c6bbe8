"""Unit tests for RedisAttemptStore.

Redis is mocked; the tests verify key layout, script loading, reply
parsing and fail-closed error mapping.
"""

import asyncio
from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import NoScriptError

from src.core.enums import ErrorCode
from src.core.result import Failure, Success
from src.domain.enums import RateLimitScope
from src.infrastructure.rate_limit import RedisAttemptStore
from src.infrastructure.rate_limit.redis_store import counter_key, index_key, lock_key

ID = RateLimitScope.IDENTIFIER


@pytest.fixture
def redis_client() -> AsyncMock:
    client = AsyncMock()
    client.script_load.return_value = "sha-1"
    client.evalsha.return_value = 1
    client.get.return_value = None
    client.set.return_value = True
    return client


@pytest.fixture
def store(redis_client, logger, clock) -> RedisAttemptStore:
    return RedisAttemptStore(redis_client=redis_client, logger=logger, clock=clock)


@pytest.mark.unit
class TestKeyLayout:
    def test_keys_share_a_hash_tag(self):
        assert counter_key(ID, "abc", 60) == "auth_attempt:{id:abc}:w60"
        assert index_key(ID, "abc") == "auth_attempt:{id:abc}:windows"
        assert lock_key(ID, "abc") == "auth_attempt:{id:abc}:lock"


@pytest.mark.unit
class TestIncrement:
    async def test_runs_increment_script(self, store, redis_client):
        redis_client.evalsha.return_value = 4

        result = await store.increment_counter(ID, "abc", 60)

        assert result == Success(value=4)
        redis_client.evalsha.assert_awaited_once_with(
            "sha-1", 2, counter_key(ID, "abc", 60), index_key(ID, "abc"), 60_000
        )

    async def test_script_loaded_once(self, store, redis_client):
        await store.increment_counter(ID, "abc", 60)
        await store.increment_counter(ID, "abc", 60)

        redis_client.script_load.assert_awaited_once()
        source = redis_client.script_load.await_args.args[0]
        assert "INCR" in source

    async def test_reloads_after_noscript(self, store, redis_client):
        redis_client.evalsha.side_effect = [NoScriptError("NOSCRIPT"), 2]

        result = await store.increment_counter(ID, "abc", 60)

        assert result == Success(value=2)
        assert redis_client.script_load.await_count == 2

    async def test_garbage_reply_is_unexpected(self, store, redis_client, logger):
        redis_client.evalsha.return_value = b"not-a-number"

        result = await store.increment_counter(ID, "abc", 60)

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.RATE_LIMIT_UNEXPECTED_RESULT
        assert result.error.backend == "redis"
        logger.error.assert_called_once()


@pytest.mark.unit
class TestReads:
    async def test_missing_counter_is_zero(self, store):
        assert await store.get_counter(ID, "abc", 60) == Success(value=0)

    async def test_counter_bytes_reply(self, store, redis_client):
        redis_client.get.return_value = b"7"

        assert await store.get_counter(ID, "abc", 60) == Success(value=7)

    async def test_active_lock(self, store, redis_client, clock):
        until = clock.now_ms + 30_000
        redis_client.get.return_value = str(until).encode()

        assert await store.get_lock(ID, "abc") == Success(value=until)
        redis_client.get.assert_awaited_with(lock_key(ID, "abc"))

    async def test_elapsed_lock_is_none(self, store, redis_client, clock):
        redis_client.get.return_value = str(clock.now_ms - 1).encode()

        assert await store.get_lock(ID, "abc") == Success(value=None)


@pytest.mark.unit
class TestWrites:
    async def test_set_lock_expires_at_lock_instant(self, store, redis_client, clock):
        until = clock.now_ms + 900_000

        assert await store.set_lock(ID, "abc", until) == Success(value=None)

        redis_client.set.assert_awaited_once_with(lock_key(ID, "abc"), until, pxat=until)

    async def test_reset_runs_reset_script(self, store, redis_client):
        assert await store.reset(ID, "abc") == Success(value=None)

        redis_client.evalsha.assert_awaited_once_with(
            "sha-1", 2, index_key(ID, "abc"), lock_key(ID, "abc")
        )
        source = redis_client.script_load.await_args.args[0]
        assert "SMEMBERS" in source


@pytest.mark.unit
class TestFailClosed:
    async def test_connection_error(self, store, redis_client):
        redis_client.get.side_effect = RedisConnectionError("refused")

        result = await store.get_lock(ID, "abc")

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.RATE_LIMIT_BACKEND_UNAVAILABLE
        assert result.error.operation == "get_lock"

    async def test_script_load_error(self, store, redis_client):
        redis_client.script_load.side_effect = RedisConnectionError("refused")

        result = await store.reset(ID, "abc")

        assert isinstance(result, Failure)
        assert result.error.operation == "reset"

    async def test_timeout(self, redis_client, logger, clock):
        async def hang(*_args, **_kwargs):
            await asyncio.sleep(10)

        redis_client.get.side_effect = hang
        store = RedisAttemptStore(
            redis_client=redis_client, logger=logger, timeout_seconds=0.01, clock=clock
        )

        result = await store.get_counter(ID, "abc", 60)

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.RATE_LIMIT_BACKEND_TIMEOUT
