"""Domain protocols (ports) for the abuse-control subsystem.

Protocols define the interfaces infrastructure adapters implement. Using
Protocol (structural typing) instead of ABC keeps the domain free of
framework imports.
"""

from src.domain.protocols.attempt_store_protocol import AttemptStoreProtocol
from src.domain.protocols.logger_protocol import LoggerProtocol

__all__ = [
    "AttemptStoreProtocol",
    "LoggerProtocol",
]
