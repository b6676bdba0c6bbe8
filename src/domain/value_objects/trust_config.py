"""Trust boundary configuration value object.

Immutable snapshot of the trusted proxy settings used to resolve a client
IP. Built from Settings once and shared across requests; never mutated
within a request.

Usage:
    from src.domain.value_objects import TrustConfig

    config = TrustConfig.from_settings(settings)
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from src.domain.enums import TrustedProxyMode
from src.domain.value_objects.cidr_block import CidrBlock

if TYPE_CHECKING:
    from src.core.config import Settings

DEFAULT_SECRET_HEADER = "x-proxy-verified"


@dataclass(frozen=True, slots=True, kw_only=True)
class TrustConfig:
    """Trusted proxy configuration.

    Attributes:
        mode: Which proxy header may be read after provenance is verified.
        trusted_hops: Trusted proxies appending to X-Forwarded-For (>= 0).
        allow_private_ips: Accept private/reserved IPs from proxy headers.
        trusted_cidrs: Proxy networks whose peer IPs establish provenance.
        shared_secret: Secret a trusted proxy sends to establish provenance.
        secret_header_name: Lower-case header name carrying the secret.

    Raises:
        ValueError: If trusted_hops is negative.
    """

    mode: TrustedProxyMode = TrustedProxyMode.NONE
    trusted_hops: int = 0
    allow_private_ips: bool = False
    trusted_cidrs: tuple[CidrBlock, ...] = field(default_factory=tuple)
    shared_secret: str | None = None
    secret_header_name: str = DEFAULT_SECRET_HEADER

    def __post_init__(self) -> None:
        """Validate configuration after initialization.

        Raises:
            ValueError: If trusted_hops is negative.
        """
        if self.trusted_hops < 0:
            raise ValueError(f"trusted_hops must be >= 0, got {self.trusted_hops}")

    @classmethod
    def from_settings(cls, settings: "Settings") -> "TrustConfig":
        """Build from application settings, discarding invalid CIDRs.

        Args:
            settings: Loaded Settings.

        Returns:
            TrustConfig: Immutable trust configuration.
        """
        return cls(
            mode=TrustedProxyMode.parse(settings.trusted_proxy_mode),
            trusted_hops=max(settings.trusted_hops, 0),
            allow_private_ips=settings.allow_private_ips,
            trusted_cidrs=CidrBlock.parse_many(settings.trusted_proxy_cidr_list),
            shared_secret=settings.trusted_proxy_secret or None,
            secret_header_name=(
                settings.trusted_proxy_secret_header.lower() or DEFAULT_SECRET_HEADER
            ),
        )

    @property
    def has_provenance_source(self) -> bool:
        """Whether any provenance check (CIDR or secret) is configured."""
        return bool(self.trusted_cidrs) or self.shared_secret is not None
