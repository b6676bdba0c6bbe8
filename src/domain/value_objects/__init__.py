"""Domain value objects with validation.

Immutable value objects that enforce abuse-control constraints.
"""

from src.domain.value_objects.cidr_block import CidrBlock
from src.domain.value_objects.rate_limit_policy import (
    IDENTIFIER_WINDOW_SECONDS,
    IP_HOUR_RETRY_SECONDS,
    IP_HOUR_WINDOW_SECONDS,
    IP_MINUTE_RETRY_SECONDS,
    IP_MINUTE_WINDOW_SECONDS,
    RateLimitPolicy,
)
from src.domain.value_objects.rate_limit_verdict import RateLimitVerdict
from src.domain.value_objects.trust_config import DEFAULT_SECRET_HEADER, TrustConfig

__all__ = [
    "CidrBlock",
    "DEFAULT_SECRET_HEADER",
    "IDENTIFIER_WINDOW_SECONDS",
    "IP_HOUR_RETRY_SECONDS",
    "IP_HOUR_WINDOW_SECONDS",
    "IP_MINUTE_RETRY_SECONDS",
    "IP_MINUTE_WINDOW_SECONDS",
    "RateLimitPolicy",
    "RateLimitVerdict",
    "TrustConfig",
]
