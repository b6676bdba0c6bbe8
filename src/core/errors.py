"""Domain-level error handling with Railway-Oriented Programming.

Two families of errors live here:

DomainError (does NOT inherit from Exception)
    Flows through the system as data inside Failure results. Attempt store
    outages are DomainErrors so callers are forced to handle them
    explicitly.

ConfigurationError (an Exception)
    Raised eagerly at setup time (composition root, store factory) when the
    deployment is misconfigured. Never raised from a request path.
"""

from dataclasses import dataclass
from typing import Any

from src.core.enums import ErrorCode


@dataclass(frozen=True, slots=True, kw_only=True)
class DomainError:
    """Base domain error (does NOT inherit from Exception).

    Attributes:
        code: Machine-readable error code (enum).
        message: Human-readable error message.
        details: Optional context for debugging.
    """

    code: ErrorCode
    message: str
    details: dict[str, Any] | None = None

    def __str__(self) -> str:
        """String representation of error."""
        return f"{self.code.value}: {self.message}"


class ConfigurationError(Exception):
    """Deployment configuration is invalid.

    Raised at startup, before any request is served, e.g. when a durable
    attempt store is selected without a connection handle or the in-process
    store is selected in production without an explicit override.

    Attributes:
        setting: Name of the offending setting, if known.
    """

    def __init__(self, message: str, *, setting: str | None = None) -> None:
        super().__init__(message)
        self.setting = setting
