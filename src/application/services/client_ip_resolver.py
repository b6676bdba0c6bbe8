"""Client IP resolution across the proxy trust boundary.

Proxy-supplied headers (cf-connecting-ip, x-forwarded-for) are attacker
controlled unless the request provably came through a trusted proxy.
Provenance is established by EITHER:
    1. the verified peer IP falling inside a configured trusted CIDR, OR
    2. the shared-secret header matching the configured secret exactly.

Without provenance, headers are ignored and the peer IP (or None) is used.
With provenance, the configured mode decides which header is read; the
candidate is then rejected (None) if it is private/reserved unless the
operator allowed private IPs.

Resolution never raises and is a pure function of (headers, peer IP,
config), safe to call concurrently.

Usage:
    from src.application.services.client_ip_resolver import resolve_client_ip

    ip = resolve_client_ip(request.headers, request.client.host, trust_config)
"""

import hmac
from collections.abc import Mapping

from src.core.ip_address import is_private_or_reserved, parse_ip
from src.domain.enums import TrustedProxyMode
from src.domain.value_objects import TrustConfig

CF_CONNECTING_IP = "cf-connecting-ip"
CF_RAY = "cf-ray"
CF_VISITOR = "cf-visitor"
X_FORWARDED_FOR = "x-forwarded-for"


def _lower_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Case-insensitive view of request headers.

    Repeated header lines are joined with ", " (Starlette yields each line
    from ``items()``), so a forwarded chain split across lines stays whole.
    """
    lowered: dict[str, str] = {}
    for name, value in headers.items():
        key = name.lower()
        lowered[key] = f"{lowered[key]}, {value}" if key in lowered else value
    return lowered


def _valid_ip_text(value: str | None) -> str | None:
    """Return trimmed text for a valid address, else None."""
    if value is None:
        return None
    text = value.strip()
    return text if parse_ip(text) is not None else None


def is_trusted_proxy_source(
    headers: Mapping[str, str],
    peer_ip: str | None,
    config: TrustConfig,
) -> bool:
    """Check whether the request came through a trusted proxy.

    Args:
        headers: Request headers (lower-cased names).
        peer_ip: Verified connection source address.
        config: Trust configuration.

    Returns:
        True if the peer is in a trusted CIDR or the secret header matches.
    """
    if peer_ip and any(block.contains(peer_ip) for block in config.trusted_cidrs):
        return True

    if config.shared_secret is not None:
        provided = headers.get(config.secret_header_name)
        if provided is not None and hmac.compare_digest(
            provided.encode("utf-8"), config.shared_secret.encode("utf-8")
        ):
            return True

    return False


def is_cloudflare(headers: Mapping[str, str]) -> bool:
    """Check for Cloudflare-identifying headers.

    Not sufficient for trust on its own; only consulted after provenance.
    """
    return CF_RAY in headers or CF_VISITOR in headers


def extract_from_xff(xff: str, trusted_hops: int) -> str | None:
    """Pick the first address beyond the trusted proxy chain.

    Entries that are not valid addresses are discarded before indexing.

    Args:
        xff: Raw X-Forwarded-For value ("client, proxy1, proxy2").
        trusted_hops: Trusted proxies that appended entries on the right.

    Returns:
        Entry at index (count - 1 - trusted_hops), or None when out of range.

    Example:
        >>> extract_from_xff("8.8.8.8, 10.0.0.1", 1)
        '8.8.8.8'
    """
    candidates = [
        text
        for text in (_valid_ip_text(part) for part in xff.split(","))
        if text is not None
    ]
    index = len(candidates) - 1 - trusted_hops
    if index < 0 or index >= len(candidates):
        return None
    return candidates[index]


def _accept_candidate(candidate: str, config: TrustConfig) -> str | None:
    if not config.allow_private_ips and is_private_or_reserved(candidate):
        return None
    return candidate


def resolve_client_ip(
    headers: Mapping[str, str],
    peer_ip: str | None,
    config: TrustConfig,
) -> str | None:
    """Resolve the client IP used for rate limiting.

    Args:
        headers: Request headers; names are matched case-insensitively.
        peer_ip: Address of the direct connection peer, if known.
        config: Trust configuration.

    Returns:
        Client IP text, or None when no trustworthy address exists.
    """
    fallback = _valid_ip_text(peer_ip)

    if config.mode is TrustedProxyMode.NONE:
        return fallback

    lowered = _lower_headers(headers)
    if not is_trusted_proxy_source(lowered, peer_ip, config):
        return fallback

    match config.mode:
        case TrustedProxyMode.CLOUDFLARE:
            candidate = _valid_ip_text(lowered.get(CF_CONNECTING_IP))
            if candidate is None or not is_cloudflare(lowered):
                return fallback
            return _accept_candidate(candidate, config)

        case TrustedProxyMode.XFF:
            xff = lowered.get(X_FORWARDED_FOR)
            if not xff:
                return fallback
            candidate = extract_from_xff(xff, config.trusted_hops)
            if candidate is None:
                return None
            return _accept_candidate(candidate, config)

    return fallback
