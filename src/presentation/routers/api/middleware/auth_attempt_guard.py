"""Authentication attempt guard for login/signup handlers.

Wraps the trust boundary and the rate limiter for route handlers:

    guard = Depends(get_auth_attempt_guard)

    blocked = await guard.check(request, body.email)
    if blocked is not None:
        return blocked                      # 429 or 503, credentials untouched
    outcome = await authenticate(body.email, body.password)
    if outcome.ok:
        await guard.report_success(request, body.email)
    else:
        await guard.report_failure(request, body.email)

Responses:
    - 429 with Retry-After = verdict retry hint (60 when absent)
    - 503 with Retry-After: 60 when the attempt store is unavailable

Bodies never reveal which limit was hit or whether the account exists.
"""

from fastapi import Request
from fastapi.responses import JSONResponse

from src.application.services.client_ip_resolver import resolve_client_ip
from src.application.services.rate_limiter import RateLimiter
from src.core.identifier import hash_identifier
from src.core.result import Failure, Success
from src.domain.protocols import LoggerProtocol
from src.domain.value_objects import TrustConfig

DEFAULT_RETRY_AFTER_SECONDS = 60
UNAVAILABLE_RETRY_AFTER_SECONDS = 60


class AuthAttemptGuard:
    """Gate for credential-verifying endpoints.

    Args:
        rate_limiter: Attempt rate limiter.
        trust_config: Trusted proxy configuration.
        logger: Structured logger.
    """

    def __init__(
        self,
        *,
        rate_limiter: RateLimiter,
        trust_config: TrustConfig,
        logger: LoggerProtocol,
    ) -> None:
        self._rate_limiter = rate_limiter
        self._trust_config = trust_config
        self._logger = logger

    def resolve_client_ip(self, request: Request) -> str | None:
        """Resolve the client IP for a request across the proxy trust boundary."""
        peer_ip = request.client.host if request.client else None
        return resolve_client_ip(request.headers, peer_ip, self._trust_config)

    async def check(self, request: Request, identifier: str) -> JSONResponse | None:
        """Gate an attempt before credentials are verified.

        Args:
            request: Incoming request.
            identifier: Raw account identifier (e.g. email); hashed here.

        Returns:
            None when the attempt may proceed, otherwise a ready 429/503 response.
        """
        ip = self.resolve_client_ip(request)
        identifier_key = hash_identifier(identifier)

        match await self._rate_limiter.check_and_consume(ip, identifier_key):
            case Failure(error=error):
                self._logger.error(
                    "Rate limit backend unavailable, blocking auth attempt",
                    ip=ip,
                    id_prefix=identifier_key[:8],
                    operation=error.operation,
                    backend=error.backend,
                    path=request.url.path,
                )
                return self._unavailable_response(request)
            case Success(value=verdict) if not verdict.allowed:
                self._logger.warning(
                    "Auth attempt blocked by rate limiter",
                    ip=ip,
                    id_prefix=identifier_key[:8],
                    reason=verdict.reason.value if verdict.reason else None,
                    path=request.url.path,
                )
                return self._throttled_response(
                    request, verdict.retry_after_seconds or DEFAULT_RETRY_AFTER_SECONDS
                )
        return None

    async def report_failure(self, request: Request, identifier: str) -> None:
        """Record a failed credential check (may install a lockout)."""
        ip = self.resolve_client_ip(request)
        identifier_key = hash_identifier(identifier)
        match await self._rate_limiter.record_failure(ip, identifier_key):
            case Failure(error=error):
                self._logger.error(
                    "Could not record auth failure",
                    id_prefix=identifier_key[:8],
                    operation=error.operation,
                    backend=error.backend,
                )

    async def report_success(self, request: Request, identifier: str) -> None:
        """Record a successful credential check (resets the identifier)."""
        identifier_key = hash_identifier(identifier)
        match await self._rate_limiter.record_success(identifier_key):
            case Failure(error=error):
                self._logger.error(
                    "Could not reset identifier after auth success",
                    id_prefix=identifier_key[:8],
                    operation=error.operation,
                    backend=error.backend,
                    path=request.url.path,
                )

    @staticmethod
    def _throttled_response(request: Request, retry_after: int) -> JSONResponse:
        # RFC 7807 Problem Details
        return JSONResponse(
            status_code=429,
            content={
                "type": "/errors/too-many-attempts",
                "title": "Too Many Attempts",
                "status": 429,
                "detail": "Too many attempts. Please try again later.",
                "instance": request.url.path,
                "retry_after": retry_after,
            },
            headers={"Retry-After": str(retry_after)},
        )

    @staticmethod
    def _unavailable_response(request: Request) -> JSONResponse:
        return JSONResponse(
            status_code=503,
            content={
                "type": "/errors/service-unavailable",
                "title": "Service Unavailable",
                "status": 503,
                "detail": "Service temporarily unavailable. Please try again later.",
                "instance": request.url.path,
            },
            headers={"Retry-After": str(UNAVAILABLE_RETRY_AFTER_SECONDS)},
        )
