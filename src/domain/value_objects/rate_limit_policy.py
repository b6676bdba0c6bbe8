"""Rate limit policy value object.

Immutable thresholds for authentication attempt gating: two fixed per-IP
windows, a per-identifier soft limit with exponential backoff, and a
consecutive-failure lockout.

Usage:
    from src.domain.value_objects import RateLimitPolicy

    policy = RateLimitPolicy.from_settings(settings)
    policy.backoff_seconds(7)  # 20
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.core.config import Settings

IP_MINUTE_WINDOW_SECONDS = 60
IP_HOUR_WINDOW_SECONDS = 3600
IDENTIFIER_WINDOW_SECONDS = 60

# Retry hints returned when an IP window is exhausted.
IP_MINUTE_RETRY_SECONDS = 60
IP_HOUR_RETRY_SECONDS = 600


@dataclass(frozen=True, slots=True, kw_only=True)
class RateLimitPolicy:
    """Authentication rate limit thresholds (value object).

    State per (ip, identifier) pair:
        Open    - below every threshold, attempts are consumed
        Backoff - identifier soft limit reached, retry after backoff
        Locked  - lockout threshold reached, blocked until expiry or success

    Attributes:
        ip_per_minute: Attempts per IP in the 60s window.
        ip_per_hour: Attempts per IP in the 3600s window.
        identifier_soft_limit: Attempts per identifier per 60s before backoff.
        lockout_threshold: Consecutive failures that install a lock.
        failure_window_seconds: Window for counting consecutive failures.
        lockout_seconds: Lock duration.
        backoff_base_seconds: Backoff at the soft limit.
        max_backoff_seconds: Backoff ceiling.

    Raises:
        ValueError: If any threshold or duration is not positive, or the
            failure window equals the identifier attempt window.
    """

    ip_per_minute: int = 10
    ip_per_hour: int = 50
    identifier_soft_limit: int = 5
    lockout_threshold: int = 10
    failure_window_seconds: int = 900
    lockout_seconds: int = 900
    backoff_base_seconds: int = 5
    max_backoff_seconds: int = 900

    def __post_init__(self) -> None:
        """Validate thresholds after initialization.

        Raises:
            ValueError: If any field is <= 0, the ceiling is below the base,
                or the failure window equals the identifier attempt window.
        """
        for name in (
            "ip_per_minute",
            "ip_per_hour",
            "identifier_soft_limit",
            "lockout_threshold",
            "failure_window_seconds",
            "lockout_seconds",
            "backoff_base_seconds",
            "max_backoff_seconds",
        ):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")
        if self.max_backoff_seconds < self.backoff_base_seconds:
            raise ValueError(
                "max_backoff_seconds must be >= backoff_base_seconds, "
                f"got {self.max_backoff_seconds} < {self.backoff_base_seconds}"
            )
        # Failure and attempt counters share the identifier scope and key.
        if self.failure_window_seconds == IDENTIFIER_WINDOW_SECONDS:
            raise ValueError(
                "failure_window_seconds must differ from the "
                f"{IDENTIFIER_WINDOW_SECONDS}s identifier attempt window"
            )

    @classmethod
    def from_settings(cls, settings: "Settings") -> "RateLimitPolicy":
        """Build the policy from application settings."""
        return cls(
            ip_per_minute=settings.rate_limit_ip_per_minute,
            ip_per_hour=settings.rate_limit_ip_per_hour,
            identifier_soft_limit=settings.rate_limit_identifier_soft_limit,
            lockout_threshold=settings.rate_limit_lockout_threshold,
            failure_window_seconds=settings.rate_limit_failure_window_seconds,
            lockout_seconds=settings.rate_limit_lockout_seconds,
            backoff_base_seconds=settings.rate_limit_backoff_base_seconds,
            max_backoff_seconds=settings.rate_limit_max_backoff_seconds,
        )

    def backoff_seconds(self, attempt_count: int) -> int:
        """Exponential backoff for an identifier at or past the soft limit.

        Formula: min(2 ** (count - soft_limit) * base, max_backoff).

        Args:
            attempt_count: Current identifier count in the 60s window.

        Returns:
            Seconds the caller should wait before retrying.

        Example:
            >>> RateLimitPolicy().backoff_seconds(5)
            5
            >>> RateLimitPolicy().backoff_seconds(20)
            900
        """
        exponent = max(attempt_count - self.identifier_soft_limit, 0)
        # Large exponents always hit the ceiling.
        if exponent > 30:
            return self.max_backoff_seconds
        return min(2**exponent * self.backoff_base_seconds, self.max_backoff_seconds)
