"""
Data Models Package

This package contains all Pydantic models used by the record store.
All data flowing through the system must conform to these schemas.
"""

from finrecords.models.record import (
    ExportFormat,
    FinancialRecord,
    FinancialSummary,
    OperationResult,
    RecordPayload,
    ValidationIssue,
    datetime_to_timestamp,
    timestamp_to_datetime,
)
from finrecords.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Record models
    "ExportFormat",
    "FinancialRecord",
    "FinancialSummary",
    "OperationResult",
    "RecordPayload",
    "ValidationIssue",
    "datetime_to_timestamp",
    "timestamp_to_datetime",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
