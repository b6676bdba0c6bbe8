"""Domain-level error codes (machine-readable).

Error codes follow ENTITY_ACTION_REASON naming convention.
Used with Result types for railway-oriented programming.

Categories:
- Rate limit storage errors (RATE_LIMIT_*)
"""

from enum import Enum


class ErrorCode(Enum):
    """Domain-level error codes (machine-readable).

    Error codes follow ENTITY_ACTION_REASON naming convention.
    """

    # Rate limit storage errors
    RATE_LIMIT_BACKEND_UNAVAILABLE = "rate_limit_backend_unavailable"
    RATE_LIMIT_BACKEND_TIMEOUT = "rate_limit_backend_timeout"
    RATE_LIMIT_UNEXPECTED_RESULT = "rate_limit_unexpected_result"
