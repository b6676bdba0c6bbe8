"""Result types for railway-oriented programming.

Storage and policy operations return Result values instead of raising, so
that a backend failure is data the caller has to handle. A Failure can never
be mistaken for an "allowed" verdict.

Usage:
    result = await store.increment_counter(RateLimitScope.IP, "203.0.113.7", 60)
    match result:
        case Success(value=count):
            print(f"Attempts in window: {count}")
        case Failure(error=err):
            print(f"Store unavailable: {err}")
"""

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type


@dataclass(frozen=True, slots=True, kw_only=True)
class Success(Generic[T]):
    """Represents a successful operation result.

    Attributes:
        value: The successful result value.
    """

    value: T


@dataclass(frozen=True, slots=True, kw_only=True)
class Failure(Generic[E]):
    """Represents a failed operation result.

    Attributes:
        error: The error that occurred.
    """

    error: E


# Type alias for Result union
Result: TypeAlias = Success[T] | Failure[E]
