"""Application services for authentication abuse control."""

from src.application.services.client_ip_resolver import resolve_client_ip
from src.application.services.rate_limiter import RateLimiter

__all__ = [
    "RateLimiter",
    "resolve_client_ip",
]
