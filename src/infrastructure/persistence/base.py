"""Declarative base for all database models.

Following hexagonal architecture:
- This is an infrastructure concern (database implementation detail)
- Domain types never inherit from this

Models here use plain SQLAlchemy types (BigInteger epoch milliseconds
instead of timezone-aware timestamps) so the same tables work on
PostgreSQL and on SQLite in tests.
"""

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class BaseModel(DeclarativeBase):
    """Base class for all database models."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)
