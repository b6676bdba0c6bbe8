"""Rate limit storage error types.

Used when an attempt store operation fails (connection loss, timeout,
unexpected result shape). Travels inside Failure results.

Usage:
    from src.core.enums import ErrorCode
    from src.core.result import Failure
    from src.domain.errors import RateLimitBackendUnavailable

    return Failure(
        error=RateLimitBackendUnavailable(
            code=ErrorCode.RATE_LIMIT_BACKEND_UNAVAILABLE,
            message="Rate limit storage unavailable during increment",
            operation="increment",
            backend="postgres",
        )
    )
"""

from dataclasses import dataclass

from src.core.errors import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class RateLimitBackendUnavailable(DomainError):
    """Attempt store failure.

    Fail-closed contract: callers MUST treat this error as "deny the
    request" (HTTP 503) and MUST NOT evaluate credentials. A denied verdict
    is NOT an error; this type is only for storage failures.

    Attributes:
        code: ErrorCode enum (RATE_LIMIT_BACKEND_UNAVAILABLE, etc.).
        message: Human-readable message.
        operation: Store operation that failed (increment, get_counter,
            set_lock, get_lock, reset).
        backend: Backend name (postgres, redis).
        details: Additional context (scope, window, driver error).
    """

    operation: str
    backend: str
