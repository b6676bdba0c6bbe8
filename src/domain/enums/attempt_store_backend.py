"""Attempt store backend variants.

Backend selection arrives as a configuration string. It is resolved into
this closed enum exactly once, when the store is created at startup;
unknown names are rejected at that point rather than per request.
"""

from enum import Enum


class AttemptStoreBackend(str, Enum):
    """Storage backends for attempt counters and locks."""

    MEMORY = "memory"
    """In-process store. Single process only; state is lost on restart."""

    POSTGRES = "postgres"
    """SQL table with atomic upsert-and-increment (durable, shared)."""

    REDIS = "redis"
    """Redis keys with TTL, incremented by an atomic Lua script (durable, shared)."""

    @property
    def is_durable(self) -> bool:
        """Whether the backend coordinates across processes."""
        return self is not AttemptStoreBackend.MEMORY
