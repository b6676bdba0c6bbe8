"""LoggerProtocol definition for structured logging.

Backend-agnostic structured logging port. Implementations MUST emit
key-value context and MUST NOT receive secrets: rate limit code logs only an
identifier hash prefix, never a raw account identifier.

Log Levels:
    - DEBUG: Store round-trips, gate decisions (dev only)
    - INFO: Lockouts installed, counters reset, backend selected
    - WARNING: Throttled attempts, private IPs rejected
    - ERROR: Attempt store unavailable (request denied with 503)
    - CRITICAL: Not used by the abuse-control path

Usage:
    from src.core.container import get_logger
    from src.domain.protocols.logger_protocol import LoggerProtocol

    logger: LoggerProtocol = get_logger()
    logger.warning("Auth attempt throttled", reason="ip", retry_after=60)

    store_logger = logger.bind(backend="postgres")
    store_logger.error("Attempt store call failed", operation="increment")
"""

from __future__ import annotations

from typing import Any, Protocol


class LoggerProtocol(Protocol):
    """Protocol for structured logging adapters.

    All logging calls are structured: message + key-value context.
    """

    def debug(self, message: str, /, **context: Any) -> None:
        """Log a debug-level message."""
        ...

    def info(self, message: str, /, **context: Any) -> None:
        """Log an info-level message."""
        ...

    def warning(self, message: str, /, **context: Any) -> None:
        """Log a warning-level message."""
        ...

    def error(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log an error-level message with optional exception details.

        Args:
            message: Human-readable message (avoid f-strings; use context).
            error: Optional exception instance; implementation includes
                error_type and error_message fields.
            **context: Structured key-value context fields.
        """
        ...

    def critical(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log a critical-level message with optional exception details."""
        ...

    def bind(self, **context: Any) -> LoggerProtocol:
        """Return new logger with permanently bound context.

        Original logger instance remains unchanged.

        Args:
            **context: Context to bind to all future logs.

        Returns:
            New logger instance with bound context.
        """
        ...
