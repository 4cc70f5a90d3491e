"""
Audit Models for Financial Records

Every service call produces at least one AuditEvent, whether it succeeds
or fails. Audit storage only ever appends events.
"""

import json
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """What an audit event is about."""
    # Mutations
    RECORD_CREATED = "record_created"
    RECORD_UPDATED = "record_updated"
    RECORD_DELETED = "record_deleted"
    CATEGORY_RENAMED = "category_renamed"

    # Rejected input
    VALIDATION_FAILED = "validation_failed"

    # Reads
    QUERY_EXECUTED = "query_executed"
    QUERY_EMPTY = "query_empty"

    # Export
    EXPORT_COMPLETED = "export_completed"
    EXPORT_FAILED = "export_failed"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Log level the event is written at."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    One entry in the audit trail.

    Events from the same service call share a `correlation_id`.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Subject of the event
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'record', 'category', 'query')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Groups the events of one service call
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID shared by all events of one service call"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )

    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Failure details
    error_kind: Optional[str] = Field(
        default=None,
        description="validation, not_found or internal"
    )
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_kind": self.error_kind,
            "error_message": self.error_message,
        }

    def to_row(self) -> list:
        """
        Flatten to a table row for display.

        Columns: [timestamp, event_type, severity, entity_id, description,
        details_json, error_message]
        """
        return [
            self.timestamp.isoformat(),
            self.event_type.value,
            self.severity.value,
            self.entity_id or "",
            self.description,
            json.dumps(self.details) if self.details else "",
            self.error_message or "",
        ]


class AuditEventBuilder:
    """
    Factory methods, one per event type.

    Example:
        event = AuditEventBuilder.record_created(record_id, amount, category)
        event = AuditEventBuilder.query_executed("by_category", 3, correlation_id)
    """

    @staticmethod
    def record_created(
        record_id: str,
        amount: float,
        category: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_CREATED,
            entity_type="record",
            entity_id=record_id,
            correlation_id=correlation_id,
            description=f"Record created: {category} {amount:+.2f}",
            details={
                "amount": amount,
                "category": category,
            },
        )

    @staticmethod
    def record_updated(
        record_id: str,
        amount: float,
        category: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_UPDATED,
            entity_type="record",
            entity_id=record_id,
            correlation_id=correlation_id,
            description=f"Record updated: {category} {amount:+.2f}",
            details={
                "amount": amount,
                "category": category,
            },
        )

    @staticmethod
    def record_deleted(
        record_id: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_DELETED,
            entity_type="record",
            entity_id=record_id,
            correlation_id=correlation_id,
            description=f"Record deleted: {record_id}",
        )

    @staticmethod
    def category_renamed(
        old_category: str,
        new_category: str,
        record_ids: list[str],
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CATEGORY_RENAMED,
            entity_type="category",
            entity_id=old_category,
            correlation_id=correlation_id,
            description=(
                f"Category renamed: {old_category} -> {new_category} "
                f"({len(record_ids)} records)"
            ),
            details={
                "old_category": old_category,
                "new_category": new_category,
                "record_ids": record_ids,
            },
        )

    @staticmethod
    def validation_failed(
        operation: str,
        issues: list[dict],
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="operation",
            entity_id=operation,
            correlation_id=correlation_id,
            description=f"{operation} rejected with {len(issues)} validation issues",
            error_kind="validation",
            details={
                "operation": operation,
                "issues": issues,
            },
        )

    @staticmethod
    def query_executed(
        operation: str,
        result_count: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.QUERY_EXECUTED,
            severity=AuditSeverity.DEBUG,
            entity_type="query",
            entity_id=operation,
            correlation_id=correlation_id,
            description=f"Query executed: {operation} returned {result_count} results",
            details={
                "operation": operation,
                "result_count": result_count,
            },
        )

    @staticmethod
    def query_empty(
        operation: str,
        message: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.QUERY_EMPTY,
            entity_type="query",
            entity_id=operation,
            correlation_id=correlation_id,
            description=f"No data for {operation}",
            error_kind="not_found",
            error_message=message,
        )

    @staticmethod
    def export_completed(
        export_format: str,
        record_count: int,
        size_bytes: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_COMPLETED,
            entity_type="export",
            entity_id=export_format,
            correlation_id=correlation_id,
            description=f"Exported {record_count} records as {export_format}",
            details={
                "format": export_format,
                "record_count": record_count,
                "size_bytes": size_bytes,
            },
        )

    @staticmethod
    def export_failed(
        export_format: str,
        error_message: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="export",
            entity_id=export_format,
            correlation_id=correlation_id,
            description=f"Export to {export_format} failed",
            error_kind="internal",
            error_message=error_message,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_kind="internal",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
