"""
Abstract Storage Interface

We define an abstract interface for storage operations.
This allows us to:
1. Keep business logic decoupled from the map that owns the records
2. Use in-memory storage for testing
3. Swap in a durable ordered map later without touching queries

The record interface is an ordered key-value map and nothing more.
Uniqueness, timestamps and validation belong to the callers.
"""

from abc import ABC, abstractmethod

from finrecords.errors import NotFoundError
from finrecords.models.audit import AuditEvent
from finrecords.models.record import FinancialRecord


class RecordStorageInterface(ABC):
    """
    Abstract interface for the record map.

    Iteration order is insertion order. Overwriting an existing id keeps
    its position.
    """

    @abstractmethod
    def insert(self, record: FinancialRecord) -> None:
        """
        Insert or overwrite the record stored under `record.id`.

        Never fails once the record is built.
        """
        pass

    @abstractmethod
    def get(self, record_id: str) -> FinancialRecord:
        """
        Retrieve a record by its ID.

        Raises:
            NotFoundError: If no record has this ID
        """
        pass

    @abstractmethod
    def remove(self, record_id: str) -> FinancialRecord:
        """
        Delete a record and return it.

        Raises:
            NotFoundError: If no record has this ID
        """
        pass

    @abstractmethod
    def values(self) -> list[FinancialRecord]:
        """
        Snapshot of all records in map order.

        Each call takes a fresh snapshot; later mutations don't affect it.
        """
        pass

    @abstractmethod
    def contains(self, record_id: str) -> bool:
        """Check whether a record with this ID exists."""
        pass

    @abstractmethod
    def __len__(self) -> int:
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        """Get all events for a specific entity, oldest first."""
        pass

    @abstractmethod
    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """Get the most recent audit events, newest first."""
        pass


class StorageError(Exception):
    """Base exception for storage backends."""
    pass


class RecordNotFoundError(NotFoundError, StorageError):
    """No record stored under the requested ID."""

    def __init__(self, record_id: str, message: str = ""):
        super().__init__(message or f"a financial record with id={record_id} not found")
        self.record_id = record_id
