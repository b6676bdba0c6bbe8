"""Account identifier normalization for rate limiting.

Rate limit keys never contain raw account identifiers. An identifier (e.g.
an email address) is trimmed, lower-cased and hashed with SHA-256 so the
attempt store only ever sees a 64-character hex digest.

Security:
- SHA256 hash (64 hex characters)
- Not reversible
- Case and surrounding whitespace do not create distinct keys
"""

import hashlib


def normalize_identifier(raw: str) -> str:
    """Trim and lower-case an account identifier.

    Args:
        raw: Identifier as submitted (e.g. "  User@Example.COM ").

    Returns:
        Normalized identifier (e.g. "user@example.com").
    """
    return raw.strip().lower()


def hash_identifier(raw: str) -> str:
    """Normalize and hash an account identifier.

    Args:
        raw: Identifier as submitted.

    Returns:
        SHA256 hex digest (64 characters) of the normalized identifier.

    Examples:
        >>> hash_identifier("User@Example.com") == hash_identifier("user@example.com ")
        True
        >>> len(hash_identifier("user@example.com"))
        64
    """
    normalized = normalize_identifier(raw)
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()
