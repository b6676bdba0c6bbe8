"""In-process attempt store.

Keyed map of counter windows and locks with lazy expiry on read. State is
per instance: it is lost on restart and not shared across processes, so the
factory refuses it in production unless explicitly allowed.

Instances are constructed explicitly (composition root or tests); there is
no module-level state.
"""

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass

from src.core.result import Result, Success
from src.domain.enums import RateLimitScope
from src.domain.errors import RateLimitBackendUnavailable


@dataclass(slots=True)
class _CounterWindow:
    count: int
    expires_at_ms: int


class MemoryAttemptStore:
    """Attempt store backed by process memory.

    Every operation runs under one asyncio.Lock, so concurrent increments on
    the same key never lose updates. Always returns Success.

    Args:
        clock: Returns the current time in epoch seconds.
    """

    backend_name = "memory"

    def __init__(self, *, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._counters: dict[tuple[str, str, int], _CounterWindow] = {}
        self._locks: dict[tuple[str, str], int] = {}
        self._lock = asyncio.Lock()

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    async def increment_counter(
        self,
        scope: RateLimitScope,
        key: str,
        window_seconds: int,
    ) -> Result[int, RateLimitBackendUnavailable]:
        async with self._lock:
            now_ms = self._now_ms()
            map_key = (scope.value, key, window_seconds)
            expires_at_ms = now_ms + window_seconds * 1000
            window = self._counters.get(map_key)
            if window is None or window.expires_at_ms <= now_ms:
                window = _CounterWindow(count=1, expires_at_ms=expires_at_ms)
                self._counters[map_key] = window
            else:
                window.count += 1
                window.expires_at_ms = expires_at_ms
            return Success(value=window.count)

    async def get_counter(
        self,
        scope: RateLimitScope,
        key: str,
        window_seconds: int,
    ) -> Result[int, RateLimitBackendUnavailable]:
        async with self._lock:
            window = self._counters.get((scope.value, key, window_seconds))
            if window is None or window.expires_at_ms <= self._now_ms():
                return Success(value=0)
            return Success(value=window.count)

    async def set_lock(
        self,
        scope: RateLimitScope,
        key: str,
        until_epoch_ms: int,
    ) -> Result[None, RateLimitBackendUnavailable]:
        async with self._lock:
            self._locks[(scope.value, key)] = until_epoch_ms
            return Success(value=None)

    async def get_lock(
        self,
        scope: RateLimitScope,
        key: str,
    ) -> Result[int | None, RateLimitBackendUnavailable]:
        async with self._lock:
            until = self._locks.get((scope.value, key))
            if until is None:
                return Success(value=None)
            if until <= self._now_ms():
                del self._locks[(scope.value, key)]
                return Success(value=None)
            return Success(value=until)

    async def reset(
        self,
        scope: RateLimitScope,
        key: str,
    ) -> Result[None, RateLimitBackendUnavailable]:
        async with self._lock:
            stale = [
                map_key
                for map_key in self._counters
                if map_key[0] == scope.value and map_key[1] == key
            ]
            for map_key in stale:
                del self._counters[map_key]
            self._locks.pop((scope.value, key), None)
            return Success(value=None)

    async def purge_expired(self) -> int:
        """Drop expired windows and locks; returns how many entries were removed."""
        async with self._lock:
            now_ms = self._now_ms()
            expired_counters = [
                map_key
                for map_key, window in self._counters.items()
                if window.expires_at_ms <= now_ms
            ]
            for map_key in expired_counters:
                del self._counters[map_key]
            expired_locks = [
                map_key for map_key, until in self._locks.items() if until <= now_ms
            ]
            for map_key in expired_locks:
                del self._locks[map_key]
            return len(expired_counters) + len(expired_locks)
