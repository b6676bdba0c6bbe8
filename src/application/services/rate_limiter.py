"""Authentication attempt rate limiter.

Policy engine that gates login/signup attempts before credentials are
verified. Per (ip, identifier) pair it behaves as a three-state machine:

    Open    -> below all thresholds; the attempt consumes IP and identifier slots
    Backoff -> identifier soft limit reached; denied with exponential backoff
    Locked  -> consecutive failures reached the lockout threshold; denied
               until the lock expires or a success resets the identifier

Fail-closed:
    Every store call returns a Result. The first Failure is returned to the
    caller unchanged (HTTP 503 at the edge); it is never turned into an
    allow.

Ordering:
    Callers MUST call check_and_consume before verifying credentials and
    MUST NOT verify credentials when it denies or fails.

Usage:
    from src.core.container import get_rate_limiter
    from src.core.identifier import hash_identifier

    limiter = get_rate_limiter()
    match await limiter.check_and_consume(ip, hash_identifier(email)):
        case Success(value=verdict) if verdict.allowed:
            ...  # authenticate, then record_failure / record_success
        case Success(value=verdict):
            ...  # 429 with Retry-After: verdict.retry_after_seconds
        case Failure():
            ...  # 503
"""

import math
import time
from collections.abc import Callable

from src.core.result import Failure, Result, Success
from src.domain.enums import RateLimitReason, RateLimitScope
from src.domain.errors import RateLimitBackendUnavailable
from src.domain.protocols import AttemptStoreProtocol, LoggerProtocol
from src.domain.value_objects import (
    IDENTIFIER_WINDOW_SECONDS,
    IP_HOUR_RETRY_SECONDS,
    IP_HOUR_WINDOW_SECONDS,
    IP_MINUTE_RETRY_SECONDS,
    IP_MINUTE_WINDOW_SECONDS,
    RateLimitPolicy,
    RateLimitVerdict,
)

ID_PREFIX_LENGTH = 8


def _id_prefix(identifier_key: str) -> str:
    return identifier_key[:ID_PREFIX_LENGTH]


class RateLimiter:
    """Per-IP and per-identifier attempt gate.

    Stateless apart from the injected store; safe to share across requests.

    Args:
        store: Attempt store (in-process or durable).
        logger: Structured logger.
        policy: Thresholds; defaults match the documented limits.
        clock: Returns the current time in epoch seconds.
    """

    def __init__(
        self,
        *,
        store: AttemptStoreProtocol,
        logger: LoggerProtocol,
        policy: RateLimitPolicy | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._logger = logger
        self._policy = policy or RateLimitPolicy()
        self._clock = clock

    @property
    def policy(self) -> RateLimitPolicy:
        return self._policy

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    async def check_and_consume(
        self,
        ip: str | None,
        identifier_key: str,
    ) -> Result[RateLimitVerdict, RateLimitBackendUnavailable]:
        """Gate an authentication attempt and consume slots when allowed.

        Evaluation order:
            1. Active identifier lock -> deny (lockout)
            2. IP 60s / 3600s windows exhausted -> deny (ip, 60s / 600s hint)
            3. Identifier 60s window at soft limit -> deny (identifier, backoff)
               without consuming anything
            4. Increment IP windows (when ip is known) and the identifier
               window, then allow

        Args:
            ip: Resolved client IP, or None when no trustworthy IP exists.
            identifier_key: Hashed account identifier.

        Returns:
            Success(RateLimitVerdict) or the first store Failure.
        """
        match await self._store.get_lock(RateLimitScope.IDENTIFIER, identifier_key):
            case Failure() as failure:
                return failure
            case Success(value=lock_until) if lock_until is not None:
                retry_after = max(1, math.ceil((lock_until - self._now_ms()) / 1000))
                self._logger.warning(
                    "Auth attempt denied: lockout active",
                    id_prefix=_id_prefix(identifier_key),
                    retry_after=retry_after,
                )
                return Success(
                    value=RateLimitVerdict.deny(RateLimitReason.LOCKOUT, retry_after)
                )

        if ip is not None:
            ip_windows = (
                (IP_MINUTE_WINDOW_SECONDS, self._policy.ip_per_minute, IP_MINUTE_RETRY_SECONDS),
                (IP_HOUR_WINDOW_SECONDS, self._policy.ip_per_hour, IP_HOUR_RETRY_SECONDS),
            )
            for window_seconds, limit, retry_after in ip_windows:
                match await self._store.get_counter(
                    RateLimitScope.IP, ip, window_seconds
                ):
                    case Failure() as failure:
                        return failure
                    case Success(value=count) if count >= limit:
                        self._logger.warning(
                            "Auth attempt denied: IP throttled",
                            ip=ip,
                            window_seconds=window_seconds,
                            count=count,
                        )
                        return Success(
                            value=RateLimitVerdict.deny(RateLimitReason.IP, retry_after)
                        )

        match await self._store.get_counter(
            RateLimitScope.IDENTIFIER, identifier_key, IDENTIFIER_WINDOW_SECONDS
        ):
            case Failure() as failure:
                return failure
            case Success(value=count) if count >= self._policy.identifier_soft_limit:
                backoff = self._policy.backoff_seconds(count)
                self._logger.warning(
                    "Auth attempt denied: identifier backoff",
                    id_prefix=_id_prefix(identifier_key),
                    count=count,
                    backoff=backoff,
                )
                return Success(
                    value=RateLimitVerdict.deny(RateLimitReason.IDENTIFIER, backoff)
                )

        consumptions: list[tuple[RateLimitScope, str, int]] = []
        if ip is not None:
            consumptions.append((RateLimitScope.IP, ip, IP_MINUTE_WINDOW_SECONDS))
            consumptions.append((RateLimitScope.IP, ip, IP_HOUR_WINDOW_SECONDS))
        consumptions.append(
            (RateLimitScope.IDENTIFIER, identifier_key, IDENTIFIER_WINDOW_SECONDS)
        )

        for scope, key, window_seconds in consumptions:
            match await self._store.increment_counter(scope, key, window_seconds):
                case Failure() as failure:
                    return failure

        self._logger.debug(
            "Auth attempt allowed",
            id_prefix=_id_prefix(identifier_key),
            ip_known=ip is not None,
        )
        return Success(value=RateLimitVerdict.allow())

    async def record_failure(
        self,
        ip: str | None,
        identifier_key: str,
    ) -> Result[int, RateLimitBackendUnavailable]:
        """Record a failed authentication and lock the identifier at the threshold.

        IP counters are not touched; they are consumed only by the gate.

        Args:
            ip: Resolved client IP (logged only).
            identifier_key: Hashed account identifier.

        Returns:
            Success(consecutive failure count) or the first store Failure.
        """
        match await self._store.increment_counter(
            RateLimitScope.IDENTIFIER, identifier_key, self._policy.failure_window_seconds
        ):
            case Failure() as failure:
                return failure
            case Success(value=failures):
                pass

        self._logger.info(
            "Auth failure recorded",
            ip=ip,
            id_prefix=_id_prefix(identifier_key),
            consecutive_failures=failures,
        )

        if failures >= self._policy.lockout_threshold:
            lock_until = self._now_ms() + self._policy.lockout_seconds * 1000
            match await self._store.set_lock(
                RateLimitScope.IDENTIFIER, identifier_key, lock_until
            ):
                case Failure() as failure:
                    return failure
            self._logger.warning(
                "Identifier locked out",
                id_prefix=_id_prefix(identifier_key),
                lockout_seconds=self._policy.lockout_seconds,
            )

        return Success(value=failures)

    async def record_success(
        self,
        identifier_key: str,
    ) -> Result[None, RateLimitBackendUnavailable]:
        """Forgive prior failures: clear identifier counters and lock."""
        self._logger.info(
            "Auth success recorded, resetting identifier",
            id_prefix=_id_prefix(identifier_key),
        )
        return await self._store.reset(RateLimitScope.IDENTIFIER, identifier_key)
