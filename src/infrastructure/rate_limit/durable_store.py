"""Shared failure mapping for durable attempt stores.

Durable stores run each operation under a timeout and convert every error
into Failure(RateLimitBackendUnavailable). Nothing here returns a default
value on error.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.errors import RateLimitBackendUnavailable
from src.domain.protocols import LoggerProtocol

T = TypeVar("T")


class UnexpectedStoreResult(Exception):
    """Store returned a result shape the operation cannot interpret."""


class DurableAttemptStore:
    """Base for attempt stores that talk to an external service.

    Args:
        logger: Structured logger.
        timeout_seconds: Upper bound for a single operation.
    """

    backend_name: str = "durable"

    def __init__(self, *, logger: LoggerProtocol, timeout_seconds: float = 5.0) -> None:
        self._logger = logger
        self._timeout_seconds = timeout_seconds

    async def _guard(
        self,
        operation: str,
        call: Callable[[], Awaitable[T]],
        **details: Any,
    ) -> Result[T, RateLimitBackendUnavailable]:
        """Await one store operation, mapping timeouts and errors to Failure."""
        try:
            value = await asyncio.wait_for(call(), timeout=self._timeout_seconds)
        except TimeoutError as exc:
            return self._failure(
                operation, ErrorCode.RATE_LIMIT_BACKEND_TIMEOUT, exc, details
            )
        except UnexpectedStoreResult as exc:
            return self._failure(
                operation, ErrorCode.RATE_LIMIT_UNEXPECTED_RESULT, exc, details
            )
        except Exception as exc:
            return self._failure(
                operation, ErrorCode.RATE_LIMIT_BACKEND_UNAVAILABLE, exc, details
            )
        return Success(value=value)

    def _failure(
        self,
        operation: str,
        code: ErrorCode,
        exc: Exception,
        details: dict[str, Any],
    ) -> Failure[RateLimitBackendUnavailable]:
        self._logger.error(
            "Attempt store call failed",
            error=exc,
            backend=self.backend_name,
            operation=operation,
            **details,
        )
        return Failure(
            error=RateLimitBackendUnavailable(
                code=code,
                message=f"Rate limit storage unavailable during {operation}",
                operation=operation,
                backend=self.backend_name,
                details={**details, "error_type": type(exc).__name__},
            )
        )
