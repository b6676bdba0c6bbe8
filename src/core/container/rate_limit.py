"""Abuse-control dependency factories.

Application-scoped singletons wiring the trust boundary and the rate
limiter to the selected attempt store.
"""

from functools import lru_cache
from typing import TYPE_CHECKING

from src.core.config import settings
from src.core.container.infrastructure import get_attempt_store, get_logger

if TYPE_CHECKING:
    from src.application.services.rate_limiter import RateLimiter
    from src.domain.value_objects import TrustConfig
    from src.presentation.routers.api.middleware.auth_attempt_guard import (
        AuthAttemptGuard,
    )


@lru_cache()
def get_trust_config() -> "TrustConfig":
    """Get trust boundary configuration (app-scoped, immutable).

    Invalid entries in TRUSTED_PROXY_CIDRS are dropped here.
    """
    from src.domain.value_objects import TrustConfig

    config = TrustConfig.from_settings(settings)
    dropped = len(settings.trusted_proxy_cidr_list) - len(config.trusted_cidrs)
    if dropped:
        get_logger().warning(
            "Ignoring invalid trusted proxy CIDRs",
            dropped=dropped,
            configured=len(settings.trusted_proxy_cidr_list),
        )
    return config


@lru_cache()
def get_rate_limiter() -> "RateLimiter":
    """Get rate limiter singleton (app-scoped).

    Usage:
        # Presentation Layer (FastAPI Depends)
        limiter: RateLimiter = Depends(get_rate_limiter)
    """
    from src.application.services.rate_limiter import RateLimiter
    from src.domain.value_objects import RateLimitPolicy

    return RateLimiter(
        store=get_attempt_store(),
        logger=get_logger(),
        policy=RateLimitPolicy.from_settings(settings),
    )


@lru_cache()
def get_auth_attempt_guard() -> "AuthAttemptGuard":
    """Get the login/signup gate used by authentication routes."""
    from src.presentation.routers.api.middleware.auth_attempt_guard import (
        AuthAttemptGuard,
    )

    return AuthAttemptGuard(
        rate_limiter=get_rate_limiter(),
        trust_config=get_trust_config(),
        logger=get_logger(),
    )
