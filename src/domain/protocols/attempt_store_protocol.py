"""Attempt store protocol (port) for authentication abuse control.

Counter windows and locks live behind this port. Infrastructure adapters
provide an in-process store and durable stores (SQL, Redis).

Following hexagonal architecture:
- Domain defines the PORT (this protocol)
- Infrastructure provides ADAPTERS (MemoryAttemptStore, PostgresAttemptStore,
  RedisAttemptStore)
- Application layer (RateLimiter) uses the protocol only

Fail-closed contract:
    Every operation returns a Result. A durable adapter that cannot complete
    an operation (connection error, timeout, unexpected result shape) returns
    Failure(RateLimitBackendUnavailable), never a default value. "Not found"
    is a legitimate Success(0) / Success(None).

Usage:
    from src.domain.enums import RateLimitScope
    from src.domain.protocols import AttemptStoreProtocol

    match await store.increment_counter(RateLimitScope.IP, "203.0.113.7", 60):
        case Success(value=count):
            ...
        case Failure(error=error):
            ...  # deny with 503
"""

from typing import Protocol

from src.core.result import Result
from src.domain.enums import RateLimitScope
from src.domain.errors import RateLimitBackendUnavailable


class AttemptStoreProtocol(Protocol):
    """Protocol for attempt counter and lock persistence.

    Keys are (scope, key, window_seconds) for counters and (scope, key) for
    locks. A counter whose expiry is <= now is absent; a lock whose
    until-instant is <= now is inactive.
    """

    async def increment_counter(
        self,
        scope: RateLimitScope,
        key: str,
        window_seconds: int,
    ) -> Result[int, RateLimitBackendUnavailable]:
        """Atomically increment a counter window.

        Creates the window with count=1 when absent or expired; otherwise
        increments it and extends its expiry to now + window_seconds.

        Args:
            scope: Counter namespace.
            key: IP address or identifier hash.
            window_seconds: Window length (> 0).

        Returns:
            Success(new count) or Failure(RateLimitBackendUnavailable).
        """
        ...

    async def get_counter(
        self,
        scope: RateLimitScope,
        key: str,
        window_seconds: int,
    ) -> Result[int, RateLimitBackendUnavailable]:
        """Read a counter without mutating it.

        Returns:
            Success(count), Success(0) when absent or expired, or
            Failure(RateLimitBackendUnavailable).
        """
        ...

    async def set_lock(
        self,
        scope: RateLimitScope,
        key: str,
        until_epoch_ms: int,
    ) -> Result[None, RateLimitBackendUnavailable]:
        """Install or overwrite the lock for (scope, key).

        Args:
            scope: Lock namespace.
            key: Identifier hash.
            until_epoch_ms: Lock expiry, epoch milliseconds.
        """
        ...

    async def get_lock(
        self,
        scope: RateLimitScope,
        key: str,
    ) -> Result[int | None, RateLimitBackendUnavailable]:
        """Read the active lock.

        Returns:
            Success(until_epoch_ms) while active, Success(None) when absent or
            expired, or Failure(RateLimitBackendUnavailable).
        """
        ...

    async def reset(
        self,
        scope: RateLimitScope,
        key: str,
    ) -> Result[None, RateLimitBackendUnavailable]:
        """Remove every counter window and the lock for (scope, key)."""
        ...
