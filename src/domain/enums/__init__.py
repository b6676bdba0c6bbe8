"""Domain enums for the abuse-control subsystem.

Enums are centralized here for discoverability and maintainability.

Available Enums:
    - AttemptStoreBackend: Closed set of attempt store backends
    - RateLimitReason: Why an authentication attempt was denied
    - RateLimitScope: Namespaces for counters and locks (ip, id)
    - TrustedProxyMode: Which proxy header may be trusted (cloudflare, xff, none)
"""

from src.domain.enums.attempt_store_backend import AttemptStoreBackend
from src.domain.enums.rate_limit_reason import RateLimitReason
from src.domain.enums.rate_limit_scope import RateLimitScope
from src.domain.enums.trusted_proxy_mode import TrustedProxyMode

__all__ = [
    "AttemptStoreBackend",
    "RateLimitReason",
    "RateLimitScope",
    "TrustedProxyMode",
]
