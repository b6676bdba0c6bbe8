"""Database persistence infrastructure.

This module provides database-related functionality including:
- Declarative base for all database models
- Database connection and session management
"""

from src.infrastructure.persistence.base import BaseModel
from src.infrastructure.persistence.database import Database

__all__ = [
    "BaseModel",
    "Database",
]
