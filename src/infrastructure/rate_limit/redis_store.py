"""Durable attempt store backed by Redis using atomic Lua scripts.

Key layout (hash tag keeps one (scope, key) pair on one cluster slot):
    auth_attempt:{<scope>:<key>}:w<window>   counter window (PEXPIRE = window)
    auth_attempt:{<scope>:<key>}:windows     index set of counter keys
    auth_attempt:{<scope>:<key>}:lock        lock instant (PXAT = lock instant)

Increment and reset run as Lua scripts (EVALSHA) so each is a single atomic
server-side operation. Expiry is enforced by Redis itself: an expired window
or lock is simply absent.

Fail-closed contract:
    Every Redis error, timeout or unexpected reply becomes
    Failure(RateLimitBackendUnavailable).
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from functools import partial
from pathlib import Path
from typing import Any

from redis.exceptions import NoScriptError

from src.core.result import Result
from src.domain.enums import RateLimitScope
from src.domain.errors import RateLimitBackendUnavailable
from src.domain.protocols import LoggerProtocol
from src.infrastructure.rate_limit.durable_store import (
    DurableAttemptStore,
    UnexpectedStoreResult,
)

KEY_PREFIX = "auth_attempt"

_SCRIPT_FILES = {
    "increment": "lua_scripts/increment_counter.lua",
    "reset": "lua_scripts/reset_attempts.lua",
}


@dataclass(slots=True)
class _LuaRefs:
    """Holds loaded Lua script SHA references."""

    shas: dict[str, str] = field(default_factory=dict)


def _base_key(scope: RateLimitScope, key: str) -> str:
    return f"{KEY_PREFIX}:{{{scope.value}:{key}}}"


def counter_key(scope: RateLimitScope, key: str, window_seconds: int) -> str:
    return f"{_base_key(scope, key)}:w{window_seconds}"


def index_key(scope: RateLimitScope, key: str) -> str:
    return f"{_base_key(scope, key)}:windows"


def lock_key(scope: RateLimitScope, key: str) -> str:
    return f"{_base_key(scope, key)}:lock"


def _to_int(reply: Any, operation: str) -> int:
    if isinstance(reply, bytes):
        reply = reply.decode("utf-8")
    try:
        return int(reply)
    except (TypeError, ValueError) as exc:
        raise UnexpectedStoreResult(f"{operation} returned {reply!r}") from exc


class RedisAttemptStore(DurableAttemptStore):
    """Attempt store persisting counters and locks in Redis.

    Args:
        redis_client: An async Redis client (redis.asyncio.Redis compatible).
        logger: Structured logger.
        timeout_seconds: Upper bound for a single operation.
        clock: Returns the current time in epoch seconds (lock comparison).
    """

    backend_name = "redis"

    def __init__(
        self,
        *,
        redis_client: Any,
        logger: LoggerProtocol,
        timeout_seconds: float = 5.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        super().__init__(logger=logger, timeout_seconds=timeout_seconds)
        self.redis = redis_client
        self._clock = clock
        self._lua = _LuaRefs()
        self._script_lock = asyncio.Lock()

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    # ---------------------------------------------------------------------
    # AttemptStoreProtocol
    # ---------------------------------------------------------------------
    async def increment_counter(
        self,
        scope: RateLimitScope,
        key: str,
        window_seconds: int,
    ) -> Result[int, RateLimitBackendUnavailable]:
        async def call() -> int:
            reply = await self._evalsha(
                "increment",
                2,
                counter_key(scope, key, window_seconds),
                index_key(scope, key),
                window_seconds * 1000,
            )
            return _to_int(reply, "increment")

        return await self._guard(
            "increment", call, scope=scope.value, window_seconds=window_seconds
        )

    async def get_counter(
        self,
        scope: RateLimitScope,
        key: str,
        window_seconds: int,
    ) -> Result[int, RateLimitBackendUnavailable]:
        async def call() -> int:
            reply = await self.redis.get(counter_key(scope, key, window_seconds))
            return 0 if reply is None else _to_int(reply, "get_counter")

        return await self._guard(
            "get_counter", call, scope=scope.value, window_seconds=window_seconds
        )

    async def set_lock(
        self,
        scope: RateLimitScope,
        key: str,
        until_epoch_ms: int,
    ) -> Result[None, RateLimitBackendUnavailable]:
        async def call() -> None:
            await self.redis.set(
                lock_key(scope, key), until_epoch_ms, pxat=until_epoch_ms
            )

        return await self._guard("set_lock", call, scope=scope.value)

    async def get_lock(
        self,
        scope: RateLimitScope,
        key: str,
    ) -> Result[int | None, RateLimitBackendUnavailable]:
        async def call() -> int | None:
            reply = await self.redis.get(lock_key(scope, key))
            if reply is None:
                return None
            until = _to_int(reply, "get_lock")
            return until if until > self._now_ms() else None

        return await self._guard("get_lock", call, scope=scope.value)

    async def reset(
        self,
        scope: RateLimitScope,
        key: str,
    ) -> Result[None, RateLimitBackendUnavailable]:
        async def call() -> None:
            await self._evalsha("reset", 2, index_key(scope, key), lock_key(scope, key))

        return await self._guard("reset", call, scope=scope.value)

    # ---------------------------------------------------------------------
    # Internal helpers
    # ---------------------------------------------------------------------
    async def _evalsha(self, script: str, numkeys: int, *args: Any) -> Any:
        """Run a loaded script, reloading once if the server lost its cache."""
        sha = await self._ensure_script(script)
        try:
            return await self.redis.evalsha(sha, numkeys, *args)
        except NoScriptError:
            self._lua.shas.pop(script, None)
            sha = await self._ensure_script(script)
            return await self.redis.evalsha(sha, numkeys, *args)

    async def _ensure_script(self, script: str) -> str:
        """Load a Lua script into Redis and cache the SHA.

        Returns:
            str: Script SHA.
        """
        if script in self._lua.shas:
            return self._lua.shas[script]
        async with self._script_lock:
            if script in self._lua.shas:
                return self._lua.shas[script]
            source = await _read_lua_script(_SCRIPT_FILES[script])
            sha: str = await self.redis.script_load(source)
            self._lua.shas[script] = sha
            return sha


def _read_lua_script_sync(path: Path) -> str:
    """Synchronous helper to read Lua script (called via run_in_executor)."""
    return path.read_text(encoding="utf-8")


async def _read_lua_script(rel_path: str) -> str:
    """Read Lua script file relative to this module.

    Uses run_in_executor to avoid blocking the event loop on file IO.
    """
    full_path = Path(__file__).parent / rel_path
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, partial(_read_lua_script_sync, full_path))
