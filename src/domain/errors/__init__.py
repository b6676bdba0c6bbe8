"""Domain errors package.

Usage:
    from src.domain.errors import RateLimitBackendUnavailable
"""

from src.domain.errors.rate_limit_error import RateLimitBackendUnavailable

__all__ = [
    "RateLimitBackendUnavailable",
]
