"""Infrastructure dependency factories.

Application-scoped singletons for core infrastructure services:
- Logging (structlog console adapter)
- Database (PostgreSQL, durable attempt store)
- Redis client (durable attempt store)
- Attempt store (backend selected once from RATE_LIMIT_BACKEND)

Only the connection handle needed by the selected backend is created.
"""

from functools import lru_cache
from typing import TYPE_CHECKING

from src.core.config import settings
from src.core.errors import ConfigurationError
from src.infrastructure.persistence.database import Database

if TYPE_CHECKING:
    from redis.asyncio import Redis

    from src.domain.protocols.attempt_store_protocol import AttemptStoreProtocol
    from src.domain.protocols.logger_protocol import LoggerProtocol


# ============================================================================
# Application-Scoped Dependencies (Singletons)
# ============================================================================


@lru_cache()
def get_database() -> Database:
    """Get database manager singleton (app-scoped).

    Returns:
        Database manager instance.

    Raises:
        ConfigurationError: If DATABASE_URL is not set.
    """
    if not settings.database_url:
        raise ConfigurationError(
            "DATABASE_URL is required for the postgres rate limit backend",
            setting="DATABASE_URL",
        )
    return Database(
        database_url=settings.database_url,
        echo=settings.db_echo,
    )


@lru_cache()
def get_redis_client() -> "Redis":
    """Get Redis client singleton (app-scoped) with connection pooling.

    Raises:
        ConfigurationError: If REDIS_URL is not set.
    """
    from redis.asyncio import ConnectionPool, Redis

    if not settings.redis_url:
        raise ConfigurationError(
            "REDIS_URL is required for the redis rate limit backend",
            setting="REDIS_URL",
        )

    pool = ConnectionPool.from_url(
        settings.redis_url,
        max_connections=20,
        decode_responses=False,
        socket_connect_timeout=5,
        socket_timeout=5,
        retry_on_timeout=False,
        socket_keepalive=True,
    )
    return Redis(connection_pool=pool)


@lru_cache()
def get_attempt_store() -> "AttemptStoreProtocol":
    """Get attempt store singleton (app-scoped).

    Container owns backend selection (composition root). The backend name is
    resolved once here; misconfiguration raises at startup.

    Returns:
        Attempt store implementing AttemptStoreProtocol.

    Raises:
        ConfigurationError: Unknown backend, missing connection handle, or
            memory backend in production without ALLOW_MEMORY_RATE_LIMIT.
    """
    from src.domain.enums import AttemptStoreBackend
    from src.infrastructure.rate_limit.factory import (
        create_attempt_store,
        resolve_backend,
    )

    backend = resolve_backend(settings.rate_limit_backend)

    session_factory = None
    redis_client = None
    if backend is AttemptStoreBackend.POSTGRES:
        session_factory = get_database().async_session
    elif backend is AttemptStoreBackend.REDIS:
        redis_client = get_redis_client()

    return create_attempt_store(
        backend,
        environment=settings.environment,
        allow_memory=settings.allow_memory_rate_limit,
        logger=get_logger(),
        session_factory=session_factory,
        redis_client=redis_client,
        timeout_seconds=settings.rate_limit_store_timeout_seconds,
    )


# ============================================================================
# Logging (Application-Scoped)
# ============================================================================


@lru_cache()
def get_logger() -> "LoggerProtocol":
    """Return the application-scoped logger singleton.

    Adapter selection is centralized here (composition root):
    - development: ConsoleAdapter (human-readable)
    - testing/ci/production: ConsoleAdapter (JSON)

    Returns:
        LoggerProtocol: Logger instance implementing the protocol.
    """
    from src.infrastructure.logging.console_adapter import ConsoleAdapter

    return ConsoleAdapter(
        use_json=not settings.is_development,
        level=settings.log_level,
    )
