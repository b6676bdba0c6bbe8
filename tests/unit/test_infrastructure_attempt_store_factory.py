"""Unit tests for attempt store backend resolution and construction."""

from unittest.mock import MagicMock

import pytest

from src.core.enums import Environment
from src.core.errors import ConfigurationError
from src.domain.enums import AttemptStoreBackend
from src.infrastructure.rate_limit import (
    MemoryAttemptStore,
    PostgresAttemptStore,
    RedisAttemptStore,
    create_attempt_store,
    resolve_backend,
)


@pytest.mark.unit
class TestResolveBackend:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("memory", AttemptStoreBackend.MEMORY),
            (" Postgres ", AttemptStoreBackend.POSTGRES),
            ("REDIS", AttemptStoreBackend.REDIS),
            (AttemptStoreBackend.REDIS, AttemptStoreBackend.REDIS),
        ],
    )
    def test_known_names(self, name, expected):
        assert resolve_backend(name) is expected

    def test_unknown_name_raises(self):
        with pytest.raises(ConfigurationError) as exc_info:
            resolve_backend("memcached")

        assert exc_info.value.setting == "RATE_LIMIT_BACKEND"
        assert "memcached" in str(exc_info.value)


@pytest.mark.unit
class TestCreateAttemptStore:
    def test_memory_in_development(self, logger):
        store = create_attempt_store(
            "memory", environment=Environment.DEVELOPMENT, allow_memory=False, logger=logger
        )

        assert isinstance(store, MemoryAttemptStore)
        logger.info.assert_called_once()

    def test_memory_refused_in_production(self, logger):
        with pytest.raises(ConfigurationError) as exc_info:
            create_attempt_store(
                "memory", environment=Environment.PRODUCTION, allow_memory=False, logger=logger
            )

        assert exc_info.value.setting == "ALLOW_MEMORY_RATE_LIMIT"

    def test_memory_override_in_production_warns(self, logger):
        store = create_attempt_store(
            "memory", environment=Environment.PRODUCTION, allow_memory=True, logger=logger
        )

        assert isinstance(store, MemoryAttemptStore)
        logger.warning.assert_called_once()

    def test_postgres_requires_session_factory(self, logger):
        with pytest.raises(ConfigurationError) as exc_info:
            create_attempt_store(
                "postgres", environment=Environment.PRODUCTION, allow_memory=False, logger=logger
            )

        assert exc_info.value.setting == "DATABASE_URL"

    def test_postgres_store(self, logger):
        store = create_attempt_store(
            "postgres",
            environment=Environment.PRODUCTION,
            allow_memory=False,
            logger=logger,
            session_factory=MagicMock(),
        )

        assert isinstance(store, PostgresAttemptStore)
        assert store.backend_name == "postgres"

    def test_redis_requires_client(self, logger):
        with pytest.raises(ConfigurationError) as exc_info:
            create_attempt_store(
                "redis", environment=Environment.TESTING, allow_memory=False, logger=logger
            )

        assert exc_info.value.setting == "REDIS_URL"

    def test_redis_store(self, logger):
        store = create_attempt_store(
            "redis",
            environment=Environment.PRODUCTION,
            allow_memory=False,
            logger=logger,
            redis_client=MagicMock(),
        )

        assert isinstance(store, RedisAttemptStore)

    def test_unknown_backend_raises(self, logger):
        with pytest.raises(ConfigurationError):
            create_attempt_store(
                "sqlite", environment=Environment.DEVELOPMENT, allow_memory=True, logger=logger
            )
