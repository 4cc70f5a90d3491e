"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
Currently implements an in-memory backend, but designed to be swappable.
"""

from finrecords.services.storage.interface import (
    AuditStorageInterface,
    RecordNotFoundError,
    RecordStorageInterface,
    StorageError,
)
from finrecords.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryRecordStorage,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "RecordStorageInterface",
    # Exceptions
    "RecordNotFoundError",
    "StorageError",
    # In-memory implementation
    "InMemoryAuditStorage",
    "InMemoryRecordStorage",
]
