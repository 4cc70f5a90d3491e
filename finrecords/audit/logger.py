"""
Audit Logger

Writes audit events to the structured log and, when configured, to an
audit storage backend. The log_* helpers turn service outcomes (records,
errors, result counts) into events.

A failing audit storage is logged and reported through the return value
of `log`; it never fails the operation being audited.
"""

import logging
import sys
from typing import Optional
from uuid import UUID, uuid4

import structlog

from finrecords.errors import ValidationError
from finrecords.models.audit import AuditEvent, AuditEventBuilder
from finrecords.models.record import FinancialRecord
from finrecords.services.storage import AuditStorageInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route the stdlib root logger (which structlog writes through) to stdout."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )


class AuditLogger:
    """Sends audit events to structlog and the optional audit storage."""

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("finrecords.audit")

    @property
    def storage(self) -> Optional[AuditStorageInterface]:
        return self._storage

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        severity = event.severity.value
        if severity in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif severity == "warning":
            self._logger.warning("audit_event", **log_dict)
        elif severity == "debug":
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage is not None:
            try:
                return self._storage.append_event(event)
            except Exception as e:
                # Audit persistence must not break the audited operation
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_record_created(
        self,
        record: FinancialRecord,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.record_created(
            record_id=record.id,
            amount=record.amount,
            category=record.category,
            correlation_id=correlation_id,
        ))

    def log_record_updated(
        self,
        record: FinancialRecord,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.record_updated(
            record_id=record.id,
            amount=record.amount,
            category=record.category,
            correlation_id=correlation_id,
        ))

    def log_record_deleted(
        self,
        record: FinancialRecord,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.record_deleted(
            record_id=record.id,
            correlation_id=correlation_id,
        ))

    def log_category_renamed(
        self,
        old_category: str,
        new_category: str,
        records: list[FinancialRecord],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.category_renamed(
            old_category=old_category,
            new_category=new_category,
            record_ids=[record.id for record in records],
            correlation_id=correlation_id,
        ))

    def log_validation_failed(
        self,
        operation: str,
        error: ValidationError,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        issues = [issue.model_dump() for issue in error.issues]
        self.log(AuditEventBuilder.validation_failed(
            operation=operation,
            issues=issues,
            correlation_id=correlation_id,
        ))

    def log_query_executed(
        self,
        operation: str,
        result_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.query_executed(
            operation=operation,
            result_count=result_count,
            correlation_id=correlation_id,
        ))

    def log_query_empty(
        self,
        operation: str,
        message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.query_empty(
            operation=operation,
            message=message,
            correlation_id=correlation_id,
        ))

    def log_export_completed(
        self,
        export_format: str,
        record_count: int,
        size_bytes: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.export_completed(
            export_format=export_format,
            record_count=record_count,
            size_bytes=size_bytes,
            correlation_id=correlation_id,
        ))

    def log_export_failed(
        self,
        export_format: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.export_failed(
            export_format=export_format,
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a service call and pass it to every event
    that call produces.
    """
    return uuid4()
