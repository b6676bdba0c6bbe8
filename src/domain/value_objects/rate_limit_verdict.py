"""Rate limit verdict value object.

Result of gating one authentication attempt. Computed per call and never
persisted.
"""

from dataclasses import dataclass

from src.domain.enums import RateLimitReason


@dataclass(frozen=True, slots=True, kw_only=True)
class RateLimitVerdict:
    """Allow/deny decision for an authentication attempt.

    Attributes:
        allowed: Whether the attempt may proceed to credential verification.
        reason: Why the attempt was denied (None when allowed).
        retry_after_seconds: Retry hint for denied attempts (None when allowed).
    """

    allowed: bool
    reason: RateLimitReason | None = None
    retry_after_seconds: int | None = None

    @classmethod
    def allow(cls) -> "RateLimitVerdict":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: RateLimitReason, retry_after_seconds: int) -> "RateLimitVerdict":
        """Deny with a reason and a retry hint of at least one second."""
        return cls(
            allowed=False,
            reason=reason,
            retry_after_seconds=max(retry_after_seconds, 1),
        )
