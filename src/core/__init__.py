"""Core shared kernel.

This module provides foundational utilities used across all architectural layers:
- Result types for railway-oriented programming
- Base error classes for domain-level error handling
- IP address parsing and CIDR matching

The core module has NO dependencies on other application layers.
"""

from src.core.enums import ErrorCode
from src.core.errors import ConfigurationError, DomainError
from src.core.result import Failure, Result, Success

__all__ = [
    "ConfigurationError",
    "DomainError",
    "ErrorCode",
    "Failure",
    "Result",
    "Success",
]
