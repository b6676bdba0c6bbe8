"""Attempt store factory.

Resolves the configured backend name into AttemptStoreBackend once, at
startup, and builds the matching store. Misconfiguration raises
ConfigurationError immediately instead of surfacing on the first request:

    - unknown backend name
    - durable backend without a live connection handle
    - in-process backend in production without ALLOW_MEMORY_RATE_LIMIT

Usage:
    store = create_attempt_store(
        settings.rate_limit_backend,
        environment=settings.environment,
        allow_memory=settings.allow_memory_rate_limit,
        logger=logger,
        session_factory=database.async_session,
    )
"""

import time
from collections.abc import Callable
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.core.enums import Environment
from src.core.errors import ConfigurationError
from src.domain.enums import AttemptStoreBackend
from src.domain.protocols import AttemptStoreProtocol, LoggerProtocol
from src.infrastructure.rate_limit.memory_store import MemoryAttemptStore
from src.infrastructure.rate_limit.postgres_store import PostgresAttemptStore
from src.infrastructure.rate_limit.redis_store import RedisAttemptStore


def resolve_backend(name: str | AttemptStoreBackend) -> AttemptStoreBackend:
    """Resolve a configured backend name into the closed enum.

    Raises:
        ConfigurationError: If the name is not a known backend.
    """
    if isinstance(name, AttemptStoreBackend):
        return name
    try:
        return AttemptStoreBackend(name.strip().lower())
    except ValueError:
        known = ", ".join(backend.value for backend in AttemptStoreBackend)
        raise ConfigurationError(
            f"Unknown rate limit backend {name!r} (expected one of: {known})",
            setting="RATE_LIMIT_BACKEND",
        ) from None


def create_attempt_store(
    backend: str | AttemptStoreBackend,
    *,
    environment: Environment,
    allow_memory: bool,
    logger: LoggerProtocol,
    session_factory: async_sessionmaker[AsyncSession] | None = None,
    redis_client: Any | None = None,
    timeout_seconds: float = 5.0,
    clock: Callable[[], float] = time.time,
) -> AttemptStoreProtocol:
    """Build the attempt store for the configured backend.

    Args:
        backend: Backend name or enum member.
        environment: Deployment environment.
        allow_memory: Operator override permitting the memory store in production.
        logger: Structured logger.
        session_factory: Required for the postgres backend.
        redis_client: Required for the redis backend.
        timeout_seconds: Per-operation timeout for durable stores.
        clock: Returns the current time in epoch seconds.

    Returns:
        AttemptStoreProtocol implementation.

    Raises:
        ConfigurationError: On any of the misconfigurations listed above.
    """
    resolved = resolve_backend(backend)

    match resolved:
        case AttemptStoreBackend.MEMORY:
            if environment == Environment.PRODUCTION and not allow_memory:
                raise ConfigurationError(
                    "In-memory rate limiting is not allowed in production; "
                    "configure a durable backend or set ALLOW_MEMORY_RATE_LIMIT=true",
                    setting="ALLOW_MEMORY_RATE_LIMIT",
                )
            if environment == Environment.PRODUCTION:
                logger.warning(
                    "In-memory attempt store enabled in production by override",
                    backend=resolved.value,
                )
            store: AttemptStoreProtocol = MemoryAttemptStore(clock=clock)

        case AttemptStoreBackend.POSTGRES:
            if session_factory is None:
                raise ConfigurationError(
                    "Postgres rate limit backend requires a database session factory",
                    setting="DATABASE_URL",
                )
            store = PostgresAttemptStore(
                session_factory=session_factory,
                logger=logger,
                timeout_seconds=timeout_seconds,
                clock=clock,
            )

        case AttemptStoreBackend.REDIS:
            if redis_client is None:
                raise ConfigurationError(
                    "Redis rate limit backend requires a Redis client",
                    setting="REDIS_URL",
                )
            store = RedisAttemptStore(
                redis_client=redis_client,
                logger=logger,
                timeout_seconds=timeout_seconds,
                clock=clock,
            )

    logger.info(
        "Attempt store created",
        backend=resolved.value,
        durable=resolved.is_durable,
        environment=environment.value,
    )
    return store
