"""
Tests for Financial Records

Test strategy:
1. Unit tests for individual components (models, validator, storage)
2. Component tests for mutations, queries, analytics and export
3. Service tests through RecordService with a fake clock and ids
"""

import pytest
from datetime import datetime, timezone
from uuid import uuid4

from finrecords.errors import NotFoundError, ValidationError
from finrecords.models.record import (
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


class TestRecordModels:
    """Tests for record-related Pydantic models."""

    def test_payload_creation(self):
        """Test RecordPayload model creation."""
        payload = RecordPayload(amount=-50, category="food")
        assert payload.amount == -50.0
        assert payload.category == "food"
        assert payload.notes is None

    def test_payload_rejects_zero_amount(self):
        """Test that a zero amount is rejected."""
        with pytest.raises(ValueError, match="non-zero"):
            RecordPayload(amount=0, category="food")

    def test_payload_rejects_blank_category(self):
        """Test that a whitespace-only category is rejected."""
        with pytest.raises(ValueError):
            RecordPayload(amount=10, category="   ")

    def test_record_creation(self):
        """Test FinancialRecord model creation."""
        record = FinancialRecord(
            id="rec-1",
            amount=1200.0,
            category="salary",
            created_at=1_700_000_000_000_000_000,
        )
        assert record.is_income is True
        assert record.is_expense is False
        assert record.has_notes is False
        assert record.updated_at is None

    def test_record_empty_notes_are_present(self):
        """Test that an empty note counts as having notes."""
        record = FinancialRecord(id="rec-1", amount=-5, category="misc", notes="", created_at=1)
        assert record.has_notes is True

    def test_record_is_frozen(self):
        """Test that stored records cannot be mutated in place."""
        record = FinancialRecord(id="rec-1", amount=-5, category="misc", created_at=1)
        with pytest.raises(ValueError):
            record.category = "other"

    def test_record_updated_before_created_rejected(self):
        """Test that updated_at cannot precede created_at."""
        with pytest.raises(ValueError, match="Updated timestamp cannot be before creation"):
            FinancialRecord(
                id="rec-1",
                amount=-5,
                category="misc",
                created_at=100,
                updated_at=99,
            )

    def test_record_export_dict_uses_string_timestamps(self):
        """Test that timestamps are exported as decimal strings."""
        record = FinancialRecord(
            id="rec-1",
            amount=-50,
            category="food",
            created_at=1_705_320_000_123_456_789,
            updated_at=1_705_320_000_123_456_790,
        )
        exported = record.to_export_dict()
        assert exported["createdAt"] == "1705320000123456789"
        assert exported["updatedAt"] == "1705320000123456790"
        assert exported["notes"] is None

    def test_summary_from_totals(self):
        """Test that net flow is derived from the totals."""
        summary = FinancialSummary.from_totals(total_income=500.0, total_expense=-200.0)
        assert summary.net_flow == 300.0

    def test_summary_rejects_positive_expense_total(self):
        """Test that the expense total must not be positive."""
        with pytest.raises(ValueError):
            FinancialSummary.from_totals(total_income=10.0, total_expense=5.0)


class TestTimestampHelpers:
    """Tests for nanosecond timestamp conversion."""

    def test_round_trip_whole_seconds(self):
        """Test timestamp conversion for whole seconds."""
        moment = datetime(2024, 3, 10, 8, 30, tzinfo=timezone.utc)
        assert timestamp_to_datetime(datetime_to_timestamp(moment)) == moment

    def test_naive_datetime_is_utc(self):
        """Test that naive datetimes are read as UTC."""
        naive = datetime(2024, 1, 1)
        aware = datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert datetime_to_timestamp(naive) == datetime_to_timestamp(aware)

    def test_epoch_is_zero(self):
        """Test that the Unix epoch is timestamp zero."""
        assert datetime_to_timestamp(datetime(1970, 1, 1, tzinfo=timezone.utc)) == 0


class TestOperationResult:
    """Tests for OperationResult."""

    def test_ok_result(self):
        """Test a successful OperationResult."""
        result = OperationResult.ok("list_all", ["a", "b"])
        assert result.success is True
        assert result.result_count == 2
        assert result.unwrap() == ["a", "b"]

    def test_failed_result_keeps_error_kind(self):
        """Test that a failed result keeps the error kind."""
        error = NotFoundError("no records found")
        result = OperationResult.failed("list_all", error)
        assert result.success is False
        assert result.error_kind == "not_found"
        assert result.error_message == "no records found"
        assert result.result_count == 0

    def test_failed_result_carries_issues(self):
        """Test that validation issues are copied onto the result."""
        issue = ValidationIssue(field="amount", issue_type="missing", message="amount is required")
        result = OperationResult.failed("create", ValidationError("bad", [issue]))
        assert result.error_kind == "validation"
        assert result.issues[0].field == "amount"

    def test_unwrap_reraises_original_error(self):
        """Test that unwrap raises the original error object."""
        error = ValidationError("invalid id: id is required")
        result = OperationResult.failed("delete", error)
        with pytest.raises(ValidationError) as exc_info:
            result.unwrap()
        assert exc_info.value is error


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.RECORD_CREATED,
            description="Record created",
        )
        assert event.event_type == AuditEventType.RECORD_CREATED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEventBuilder.record_created(
            record_id="rec-1",
            amount=-50.0,
            category="food",
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "record_created"
        assert log_dict["entity_id"] == "rec-1"
        assert log_dict["details"]["category"] == "food"

    def test_audit_event_to_row(self):
        """Test conversion to a display row."""
        event = AuditEventBuilder.record_deleted(record_id="rec-9")
        row = event.to_row()
        assert len(row) == 7
        assert row[1] == "record_deleted"
        assert row[3] == "rec-9"

    def test_category_renamed_event(self):
        """Test AuditEventBuilder.category_renamed."""
        correlation_id = uuid4()
        event = AuditEventBuilder.category_renamed(
            old_category="food",
            new_category="groceries",
            record_ids=["rec-1", "rec-2"],
            correlation_id=correlation_id,
        )
        assert event.event_type == AuditEventType.CATEGORY_RENAMED
        assert event.correlation_id == correlation_id
        assert event.details["record_ids"] == ["rec-1", "rec-2"]
        assert "2 records" in event.description

    def test_validation_failed_is_warning(self):
        """Test that rejected input is logged as a warning."""
        event = AuditEventBuilder.validation_failed(
            operation="create",
            issues=[{"field": "amount"}],
        )
        assert event.severity == AuditSeverity.WARNING

    def test_export_failed_is_error(self):
        """Test that a failed export is an error event."""
        event = AuditEventBuilder.export_failed("json", "boom")
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "boom"
        assert event.error_kind == "internal"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
