"""
Main Orchestrator for Financial Records

Ties the components together behind one service object that exposes
the full operation set:

    list_all, get_by_id, create, update, rename_category, delete,
    by_category, by_date_range, summary, expenses_greater_than,
    incomes_less_than, average_monthly_expenses, average_monthly_income,
    with_notes, without_notes, export, forecast_future_expenses

Each call:
1. Runs under a single lock (at most one operation in flight)
2. Is audited under its own correlation ID
3. Returns an OperationResult, never raises for expected failures

Components underneath raise typed errors. This is the only place they
are turned into results. Unexpected exceptions are audited and re-raised.
"""

import threading
from typing import Any, Callable, Optional
from uuid import UUID

from finrecords.audit import AuditLogger, configure_logging, create_correlation_id
from finrecords.config import Settings, get_settings
from finrecords.errors import InternalError, NotFoundError, ValidationError
from finrecords.models.audit import AuditEvent
from finrecords.models.record import FinancialRecord, OperationResult
from finrecords.queries import RecordAnalytics, RecordExporter, RecordQueryExecutor
from finrecords.records import RecordManager
from finrecords.records.manager import Payload
from finrecords.services.clock import Clock, IdGenerator
from finrecords.services.storage import (
    InMemoryAuditStorage,
    InMemoryRecordStorage,
    RecordStorageInterface,
)
from finrecords.validation import RecordValidator


SuccessHook = Callable[[Any, UUID], None]


class RecordService:
    """
    The record keeping service.

    Wires storage, validation, mutations, queries, analytics and export,
    and serializes every call through one re-entrant lock.
    """

    def __init__(
        self,
        storage: Optional[RecordStorageInterface] = None,
        clock: Optional[Clock] = None,
        id_generator: Optional[IdGenerator] = None,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[Settings] = None,
    ):
        settings = settings or get_settings()
        app_settings = settings.app

        self._storage = storage if storage is not None else InMemoryRecordStorage()
        validator = RecordValidator(app_settings)

        self._manager = RecordManager(
            self._storage,
            validator=validator,
            clock=clock,
            id_generator=id_generator,
            settings=app_settings,
        )
        self._queries = RecordQueryExecutor(self._storage, validator)
        self._analytics = RecordAnalytics(self._storage, validator)
        self._exporter = RecordExporter(self._storage, validator, settings.export)

        self._audit_logger = audit_logger or AuditLogger()
        self._lock = threading.RLock()

    @property
    def record_count(self) -> int:
        with self._lock:
            return len(self._storage)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def create(self, payload: Payload) -> OperationResult:
        return self._run(
            "create",
            lambda: self._manager.create(payload),
            on_success=self._audit_logger.log_record_created,
        )

    def update(self, record_id: str, payload: Payload) -> OperationResult:
        return self._run(
            "update",
            lambda: self._manager.update(record_id, payload),
            on_success=self._audit_logger.log_record_updated,
        )

    def delete(self, record_id: str) -> OperationResult:
        return self._run(
            "delete",
            lambda: self._manager.delete(record_id),
            on_success=self._audit_logger.log_record_deleted,
        )

    def rename_category(self, old_category: str, new_category: str) -> OperationResult:
        def audit(records: list[FinancialRecord], correlation_id: UUID) -> None:
            self._audit_logger.log_category_renamed(
                old_category, new_category, records, correlation_id
            )

        return self._run(
            "rename_category",
            lambda: self._manager.rename_category(old_category, new_category),
            on_success=audit,
        )

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def list_all(self) -> OperationResult:
        return self._run("list_all", self._queries.list_all)

    def get_by_id(self, record_id: str) -> OperationResult:
        return self._run("get_by_id", lambda: self._queries.get_by_id(record_id))

    def by_category(self, category: str) -> OperationResult:
        return self._run("by_category", lambda: self._queries.by_category(category))

    def by_date_range(self, start: int, end: int) -> OperationResult:
        return self._run("by_date_range", lambda: self._queries.by_date_range(start, end))

    def expenses_greater_than(self, amount: float) -> OperationResult:
        return self._run(
            "expenses_greater_than",
            lambda: self._queries.expenses_greater_than(amount),
        )

    def incomes_less_than(self, amount: float) -> OperationResult:
        return self._run(
            "incomes_less_than",
            lambda: self._queries.incomes_less_than(amount),
        )

    def with_notes(self) -> OperationResult:
        return self._run("with_notes", self._queries.with_notes)

    def without_notes(self) -> OperationResult:
        return self._run("without_notes", self._queries.without_notes)

    def categories(self) -> OperationResult:
        return self._run("categories", self._queries.categories)

    # -------------------------------------------------------------------------
    # Aggregation, forecast and export
    # -------------------------------------------------------------------------

    def summary(self) -> OperationResult:
        return self._run("summary", self._analytics.summary)

    def average_monthly_expenses(self) -> OperationResult:
        return self._run("average_monthly_expenses", self._analytics.average_monthly_expenses)

    def average_monthly_income(self) -> OperationResult:
        return self._run("average_monthly_income", self._analytics.average_monthly_income)

    def forecast_future_expenses(self, months_ahead: float) -> OperationResult:
        return self._run(
            "forecast_future_expenses",
            lambda: self._analytics.forecast_future_expenses(months_ahead),
        )

    def export(self, export_format: str) -> OperationResult:
        def audit(text: str, correlation_id: UUID) -> None:
            self._audit_logger.log_export_completed(
                export_format=export_format.lower(),
                record_count=len(self._storage),
                size_bytes=len(text.encode("utf-8")),
                correlation_id=correlation_id,
            )

        def audit_failure(error: InternalError, correlation_id: UUID) -> None:
            self._audit_logger.log_export_failed(
                export_format=str(export_format),
                error_message=str(error),
                correlation_id=correlation_id,
            )

        return self._run(
            "export",
            lambda: self._exporter.export(export_format),
            on_success=audit,
            on_internal_error=audit_failure,
        )

    # -------------------------------------------------------------------------
    # Audit trail
    # -------------------------------------------------------------------------

    def recent_audit_events(self, limit: int = 100) -> list[AuditEvent]:
        """Newest audit events first; empty when no audit storage is configured."""
        storage = self._audit_logger.storage
        if storage is None:
            return []
        return storage.get_recent_events(limit)

    # -------------------------------------------------------------------------
    # Execution
    # -------------------------------------------------------------------------

    def _run(
        self,
        operation: str,
        func: Callable[[], Any],
        on_success: Optional[SuccessHook] = None,
        on_internal_error: Optional[Callable[[InternalError, UUID], None]] = None,
    ) -> OperationResult:
        correlation_id = create_correlation_id()

        with self._lock:
            try:
                value = func()
            except ValidationError as e:
                self._audit_logger.log_validation_failed(operation, e, correlation_id)
                return OperationResult.failed(operation, e, correlation_id)
            except NotFoundError as e:
                self._audit_logger.log_query_empty(operation, str(e), correlation_id)
                return OperationResult.failed(operation, e, correlation_id)
            except InternalError as e:
                if on_internal_error:
                    on_internal_error(e, correlation_id)
                else:
                    self._audit_logger.log_error(
                        error_type=type(e).__name__,
                        error_message=str(e),
                        details={"operation": operation},
                        correlation_id=correlation_id,
                    )
                return OperationResult.failed(operation, e, correlation_id)
            except Exception as e:
                self._audit_logger.log_error(
                    error_type=type(e).__name__,
                    error_message=str(e),
                    details={"operation": operation},
                    correlation_id=correlation_id,
                )
                raise

            result = OperationResult.ok(operation, value, correlation_id)
            if on_success:
                on_success(value, correlation_id)
            else:
                self._audit_logger.log_query_executed(
                    operation, result.result_count, correlation_id
                )
            return result


def create_app_components(
    settings: Optional[Settings] = None,
    storage: Optional[RecordStorageInterface] = None,
) -> RecordService:
    """
    Factory function to create a fully wired service.

    Args:
        settings: Settings to use; defaults to the cached environment settings
        storage: Record map to use; defaults to a fresh in-memory map

    Returns:
        The RecordService, with audit storage attached when auditing is enabled
    """
    settings = settings or get_settings()

    configure_logging(settings.app.log_level)

    audit_settings = settings.audit
    audit_storage = None
    if audit_settings.enabled:
        audit_storage = InMemoryAuditStorage(max_events=audit_settings.max_events)

    return RecordService(
        storage=storage,
        audit_logger=AuditLogger(audit_storage),
        settings=settings,
    )
