"""Container module - Centralized dependency injection.

Re-exports all factory functions from submodules:

    from src.core.container import get_logger, get_rate_limiter, ...

The container is organized into modules by concern:
- infrastructure: Logging, database, Redis, attempt store
- rate_limit: Trust configuration, rate limiter, auth attempt guard
"""

from src.core.container.infrastructure import (
    get_attempt_store,
    get_database,
    get_logger,
    get_redis_client,
)
from src.core.container.rate_limit import (
    get_auth_attempt_guard,
    get_rate_limiter,
    get_trust_config,
)

__all__ = [
    "get_attempt_store",
    "get_auth_attempt_guard",
    "get_database",
    "get_logger",
    "get_rate_limiter",
    "get_redis_client",
    "get_trust_config",
]
