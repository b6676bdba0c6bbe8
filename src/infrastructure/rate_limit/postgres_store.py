"""Durable attempt store backed by PostgreSQL (SQLAlchemy async).

Every counter increment is one atomic INSERT ... ON CONFLICT DO UPDATE ...
RETURNING statement, so concurrent increments of the same window never lose
updates. A window whose expiry has passed restarts at 1 inside the same
statement.

Fail-closed contract:
    Driver errors, timeouts and unexpected result shapes become
    Failure(RateLimitBackendUnavailable). A missing row is a legitimate
    Success(0) / Success(None).

The upsert construct follows the engine dialect: PostgreSQL in deployment,
SQLite (same ON CONFLICT semantics) in integration tests.
"""

import time
from collections.abc import Awaitable, Callable
from typing import TypeVar

from sqlalchemy import and_, case, delete, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.core.result import Result
from src.domain.enums import RateLimitScope
from src.domain.errors import RateLimitBackendUnavailable
from src.domain.protocols import LoggerProtocol
from src.infrastructure.persistence.models import LOCK_WINDOW_SECONDS, AuthAttempt
from src.infrastructure.rate_limit.durable_store import (
    DurableAttemptStore,
    UnexpectedStoreResult,
)

T = TypeVar("T")

_table = AuthAttempt.__table__


def _insert_for(session: AsyncSession):
    """Pick the dialect-specific INSERT supporting ON CONFLICT."""
    if session.get_bind().dialect.name == "sqlite":
        return sqlite.insert
    return postgresql.insert


class PostgresAttemptStore(DurableAttemptStore):
    """Attempt store persisting counters and locks in the auth_attempts table.

    Args:
        session_factory: Async session factory bound to the database engine.
        logger: Structured logger.
        timeout_seconds: Upper bound for a single operation.
        clock: Returns the current time in epoch seconds.
    """

    backend_name = "postgres"

    def __init__(
        self,
        *,
        session_factory: async_sessionmaker[AsyncSession],
        logger: LoggerProtocol,
        timeout_seconds: float = 5.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        super().__init__(logger=logger, timeout_seconds=timeout_seconds)
        self._session_factory = session_factory
        self._clock = clock

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
        now_ms = self._now_ms()

        async def work(session: AsyncSession) -> int:
            insert = _insert_for(session)
            stmt = insert(_table).values(
                scope=scope.value,
                key=key,
                window_seconds=window_seconds,
                attempt_count=1,
                expires_at_ms=now_ms + window_seconds * 1000,
                lock_until_ms=None,
                updated_at_ms=now_ms,
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=[_table.c.scope, _table.c.key, _table.c.window_seconds],
                set_={
                    "attempt_count": case(
                        (_table.c.expires_at_ms > now_ms, _table.c.attempt_count + 1),
                        else_=1,
                    ),
                    "expires_at_ms": stmt.excluded.expires_at_ms,
                    "updated_at_ms": stmt.excluded.updated_at_ms,
                },
            ).returning(_table.c.attempt_count)
            count = (await session.execute(stmt)).scalar_one_or_none()
            if count is None:
                raise UnexpectedStoreResult("increment returned no row")
            return int(count)

        return await self._run(
            "increment", work, scope=scope.value, window_seconds=window_seconds
        )

    async def get_counter(
        self,
        scope: RateLimitScope,
        key: str,
        window_seconds: int,
    ) -> Result[int, RateLimitBackendUnavailable]:
        now_ms = self._now_ms()

        async def work(session: AsyncSession) -> int:
            stmt = select(_table.c.attempt_count).where(
                and_(
                    _table.c.scope == scope.value,
                    _table.c.key == key,
                    _table.c.window_seconds == window_seconds,
                    _table.c.expires_at_ms > now_ms,
                )
            )
            count = (await session.execute(stmt)).scalar_one_or_none()
            return 0 if count is None else int(count)

        return await self._run(
            "get_counter", work, scope=scope.value, window_seconds=window_seconds
        )

    async def set_lock(
        self,
        scope: RateLimitScope,
        key: str,
        until_epoch_ms: int,
    ) -> Result[None, RateLimitBackendUnavailable]:
        now_ms = self._now_ms()

        async def work(session: AsyncSession) -> None:
            insert = _insert_for(session)
            stmt = insert(_table).values(
                scope=scope.value,
                key=key,
                window_seconds=LOCK_WINDOW_SECONDS,
                attempt_count=0,
                expires_at_ms=until_epoch_ms,
                lock_until_ms=until_epoch_ms,
                updated_at_ms=now_ms,
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=[_table.c.scope, _table.c.key, _table.c.window_seconds],
                set_={
                    "lock_until_ms": stmt.excluded.lock_until_ms,
                    "expires_at_ms": stmt.excluded.expires_at_ms,
                    "updated_at_ms": stmt.excluded.updated_at_ms,
                },
            )
            await session.execute(stmt)

        return await self._run("set_lock", work, scope=scope.value)

    async def get_lock(
        self,
        scope: RateLimitScope,
        key: str,
    ) -> Result[int | None, RateLimitBackendUnavailable]:
        now_ms = self._now_ms()

        async def work(session: AsyncSession) -> int | None:
            stmt = select(_table.c.lock_until_ms).where(
                and_(
                    _table.c.scope == scope.value,
                    _table.c.key == key,
                    _table.c.window_seconds == LOCK_WINDOW_SECONDS,
                    _table.c.lock_until_ms > now_ms,
                )
            )
            until = (await session.execute(stmt)).scalar_one_or_none()
            return None if until is None else int(until)

        return await self._run("get_lock", work, scope=scope.value)

    async def reset(
        self,
        scope: RateLimitScope,
        key: str,
    ) -> Result[None, RateLimitBackendUnavailable]:
        async def work(session: AsyncSession) -> None:
            await session.execute(
                delete(_table).where(
                    and_(_table.c.scope == scope.value, _table.c.key == key)
                )
            )

        return await self._run("reset", work, scope=scope.value)

    async def purge_expired(self) -> Result[int, RateLimitBackendUnavailable]:
        """Delete expired windows and lock rows.

        Expired rows are already ignored on read; this only reclaims space.

        Returns:
            Success(number of deleted rows) or Failure.
        """
        now_ms = self._now_ms()

        async def work(session: AsyncSession) -> int:
            result = await session.execute(
                delete(_table).where(_table.c.expires_at_ms <= now_ms)
            )
            return int(result.rowcount or 0)

        return await self._run("purge_expired", work)

    # ---------------------------------------------------------------------
    # Internal helpers
    # ---------------------------------------------------------------------
    async def _in_transaction(self, work: Callable[[AsyncSession], Awaitable[T]]) -> T:
        async with self._session_factory() as session:
            async with session.begin():
                return await work(session)

    async def _run(
        self,
        operation: str,
        work: Callable[[AsyncSession], Awaitable[T]],
        **details: object,
    ) -> Result[T, RateLimitBackendUnavailable]:
        """Run one operation in its own transaction."""
        return await self._guard(operation, lambda: self._in_transaction(work), **details)
