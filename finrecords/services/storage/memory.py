"""
In-Memory Storage Implementation

Records live in a plain dict, which keeps insertion order and keeps a
key's position when its value is overwritten. That is exactly the
ordered-map contract the interface asks for.

The audit trail is a bounded deque: once `max_events` is reached the
oldest events fall off.
"""

from collections import deque
from typing import Optional

from finrecords.models.audit import AuditEvent
from finrecords.models.record import FinancialRecord
from finrecords.services.storage.interface import (
    AuditStorageInterface,
    RecordNotFoundError,
    RecordStorageInterface,
)


class InMemoryRecordStorage(RecordStorageInterface):
    """Dict-backed record map."""

    def __init__(self, records: Optional[list[FinancialRecord]] = None):
        self._records: dict[str, FinancialRecord] = {}
        for record in records or []:
            self.insert(record)

    def insert(self, record: FinancialRecord) -> None:
        self._records[record.id] = record

    def get(self, record_id: str) -> FinancialRecord:
        try:
            return self._records[record_id]
        except KeyError:
            raise RecordNotFoundError(record_id) from None

    def remove(self, record_id: str) -> FinancialRecord:
        try:
            return self._records.pop(record_id)
        except KeyError:
            raise RecordNotFoundError(record_id) from None

    def values(self) -> list[FinancialRecord]:
        return list(self._records.values())

    def contains(self, record_id: str) -> bool:
        return record_id in self._records

    def __len__(self) -> int:
        return len(self._records)


class InMemoryAuditStorage(AuditStorageInterface):
    """Bounded, append-only audit trail."""

    def __init__(self, max_events: int = 5000):
        self._events: deque[AuditEvent] = deque(maxlen=max_events)

    def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        return [
            event for event in self._events
            if event.entity_type == entity_type and event.entity_id == entity_id
        ]

    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        events = list(self._events)
        events.reverse()
        return events[:limit]

    def __len__(self) -> int:
        return len(self._events)
