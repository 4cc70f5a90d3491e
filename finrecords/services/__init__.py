"""Services package."""

from finrecords.services.clock import (
    Clock,
    IdGenerator,
    MonotonicClock,
    uuid4_id,
)
from finrecords.services.storage import (
    AuditStorageInterface,
    InMemoryAuditStorage,
    InMemoryRecordStorage,
    RecordNotFoundError,
    RecordStorageInterface,
    StorageError,
)

__all__ = [
    # Host collaborators
    "Clock",
    "IdGenerator",
    "MonotonicClock",
    "uuid4_id",
    # Storage services
    "AuditStorageInterface",
    "InMemoryAuditStorage",
    "InMemoryRecordStorage",
    "RecordNotFoundError",
    "RecordStorageInterface",
    "StorageError",
]
