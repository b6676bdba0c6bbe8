"""Authentication attempt counters and locks.

One row per (scope, key, window_seconds) counter window. A reserved
window_seconds = 0 row per (scope, key) carries the lock instant in
lock_until_ms. All instants are epoch milliseconds.
"""

from sqlalchemy import BigInteger, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.base import BaseModel

LOCK_WINDOW_SECONDS = 0


class AuthAttempt(BaseModel):
    """Counter window or lock sentinel row.

    Attributes:
        scope: Counter namespace ("ip" or "id").
        key: IP address or identifier hash.
        window_seconds: Window length; 0 marks the lock sentinel row.
        attempt_count: Attempts in the current window.
        expires_at_ms: Window expiry; rows with expires_at_ms <= now are absent.
        lock_until_ms: Lock expiry (sentinel row only).
        updated_at_ms: Last write instant.
    """

    __tablename__ = "auth_attempts"

    scope: Mapped[str] = mapped_column(String(16), primary_key=True)
    key: Mapped[str] = mapped_column(String(128), primary_key=True)
    window_seconds: Mapped[int] = mapped_column(Integer, primary_key=True)
    attempt_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    expires_at_ms: Mapped[int] = mapped_column(BigInteger, nullable=False)
    lock_until_ms: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    updated_at_ms: Mapped[int] = mapped_column(BigInteger, nullable=False)

    __table_args__ = (Index("ix_auth_attempts_expires_at_ms", "expires_at_ms"),)

    def __repr__(self) -> str:
        return (
            f"<AuthAttempt(scope={self.scope}, window_seconds={self.window_seconds}, "
            f"attempt_count={self.attempt_count})>"
        )
