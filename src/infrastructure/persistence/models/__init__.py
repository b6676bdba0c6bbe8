"""Database models for persistence layer.

Models Organization:
    - auth_attempt.py: Authentication attempt counters and lock sentinels
"""

from src.infrastructure.persistence.models.auth_attempt import (
    LOCK_WINDOW_SECONDS,
    AuthAttempt,
)

__all__ = [
    "AuthAttempt",
    "LOCK_WINDOW_SECONDS",
]
