"""Rate limit infrastructure adapters.

Attempt store implementations of AttemptStoreProtocol plus the factory that
selects one at startup.

Exports:
    MemoryAttemptStore: In-process store (single process, non-durable).
    PostgresAttemptStore: SQL store with atomic upsert-and-increment.
    RedisAttemptStore: Redis store with atomic Lua scripts.
    create_attempt_store: Backend factory (raises ConfigurationError).
"""

from src.infrastructure.rate_limit.factory import create_attempt_store, resolve_backend
from src.infrastructure.rate_limit.memory_store import MemoryAttemptStore
from src.infrastructure.rate_limit.postgres_store import PostgresAttemptStore
from src.infrastructure.rate_limit.redis_store import RedisAttemptStore

__all__ = [
    "MemoryAttemptStore",
    "PostgresAttemptStore",
    "RedisAttemptStore",
    "create_attempt_store",
    "resolve_backend",
]
