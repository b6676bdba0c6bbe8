"""Trusted proxy modes for client IP resolution.

The mode names which proxy-supplied header may be consulted once the
request's provenance has been verified. Provenance is always required;
the mode alone never makes a header trustworthy.

Usage:
    from src.domain.enums import TrustedProxyMode

    mode = TrustedProxyMode.parse(settings.trusted_proxy_mode)
"""

from enum import Enum


class TrustedProxyMode(str, Enum):
    """Which proxy header to read after provenance verification."""

    CLOUDFLARE = "cloudflare"
    """Read ``cf-connecting-ip`` (requires a Cloudflare marker header)."""

    XFF = "xff"
    """Read ``x-forwarded-for``, skipping ``trusted_hops`` entries from the right."""

    NONE = "none"
    """Never read proxy headers; use the verified peer IP only."""

    @classmethod
    def parse(cls, value: str | None) -> "TrustedProxyMode":
        """Parse a mode name, collapsing unknown or empty values to NONE.

        Args:
            value: Raw mode name from configuration.

        Returns:
            TrustedProxyMode: Parsed mode (NONE when unrecognized).
        """
        if not value:
            return cls.NONE
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.NONE
