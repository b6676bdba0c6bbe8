"""add_auth_attempts_table

Revision ID: 7c1e2a4b9d30
Revises:
Create Date: 2026-10-18 09:00:00.000000+00:00

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "7c1e2a4b9d30"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create auth_attempts table."""
    op.create_table(
        "auth_attempts",
        # Counter identity; window_seconds = 0 is the lock sentinel row
        sa.Column("scope", sa.String(length=16), nullable=False),
        sa.Column("key", sa.String(length=128), nullable=False),
        sa.Column("window_seconds", sa.Integer(), nullable=False),
        # Counter state (epoch milliseconds)
        sa.Column("attempt_count", sa.Integer(), nullable=False),
        sa.Column("expires_at_ms", sa.BigInteger(), nullable=False),
        sa.Column("lock_until_ms", sa.BigInteger(), nullable=True),
        sa.Column("updated_at_ms", sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint(
            "scope", "key", "window_seconds", name=op.f("pk_auth_attempts")
        ),
    )
    op.create_index(
        "ix_auth_attempts_expires_at_ms",
        "auth_attempts",
        ["expires_at_ms"],
        unique=False,
    )


def downgrade() -> None:
    """Drop auth_attempts table."""
    op.drop_index("ix_auth_attempts_expires_at_ms", table_name="auth_attempts")
    op.drop_table("auth_attempts")
