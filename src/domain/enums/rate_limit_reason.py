"""Reasons a rate limit verdict can deny an authentication attempt."""

from enum import Enum


class RateLimitReason(str, Enum):
    """Why an attempt was denied.

    Values are stable strings suitable for logs and API payloads.
    """

    IP = "ip"
    """Per-IP threshold reached (60s or 3600s window)."""

    IDENTIFIER = "identifier"
    """Per-identifier soft limit reached; exponential backoff applies."""

    LOCKOUT = "lockout"
    """Identifier is locked after too many consecutive failures."""
