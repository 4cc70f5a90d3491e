"""
Core Data Models for Financial Records

These models define the schemas for every record flowing through the system.
They are designed to:
1. Enforce type safety at runtime
2. Keep the stored record immutable (updates produce a new record)
3. Be serializable for export and logging

DESIGN DECISION: Sign carries meaning. A positive amount is income,
a negative amount is an expense. There is no currency field.

Timestamps are integers (nanoseconds since the Unix epoch) supplied by the
injected clock, never datetimes.
"""

import math
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    field_validator,
    model_validator,
)


NANOS_PER_SECOND = 1_000_000_000


def timestamp_to_datetime(timestamp: int) -> datetime:
    """Convert a nanosecond timestamp to an aware UTC datetime."""
    return datetime.fromtimestamp(timestamp // NANOS_PER_SECOND, tz=timezone.utc)


def datetime_to_timestamp(moment: datetime) -> int:
    """Convert a datetime to nanoseconds since the epoch (naive = UTC)."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    delta = moment - datetime(1970, 1, 1, tzinfo=timezone.utc)
    return (
        (delta.days * 86_400 + delta.seconds) * NANOS_PER_SECOND
        + delta.microseconds * 1_000
    )


# =============================================================================
# ENUMS
# =============================================================================

class ExportFormat(str, Enum):
    """Supported export formats. Matching is case-insensitive."""
    JSON = "json"


# =============================================================================
# RECORD MODELS
# =============================================================================

class RecordPayload(BaseModel):
    """
    The client-supplied part of a record (create and update).

    `notes` left out means "no notes", which is different from "".
    """
    model_config = ConfigDict(extra="ignore")

    amount: float = Field(
        ...,
        description="Signed amount: positive = income, negative = expense"
    )
    category: str = Field(
        ...,
        min_length=1,
        description="User-defined category label"
    )
    notes: Optional[str] = Field(
        default=None,
        description="Optional free-text note"
    )

    @field_validator('amount')
    @classmethod
    def validate_amount(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("Amount must be a finite number")
        if v == 0:
            raise ValueError("Amount must be non-zero")
        return v

    @field_validator('category')
    @classmethod
    def validate_category(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Category must not be blank")
        return v


class FinancialRecord(BaseModel):
    """
    A single stored financial record.

    Records are frozen. Updates and renames build a new record and write it
    back under the same id.
    """
    model_config = ConfigDict(frozen=True)

    # Identity
    id: str = Field(
        ...,
        min_length=1,
        description="Unique record ID, assigned at creation"
    )

    # Content
    amount: float = Field(
        ...,
        description="Signed amount: positive = income, negative = expense"
    )
    category: str = Field(
        ...,
        min_length=1,
        description="User-defined category label"
    )
    notes: Optional[str] = Field(
        default=None,
        description="Optional note (None = absent)"
    )

    # Timestamps (nanoseconds since epoch)
    created_at: int = Field(
        ...,
        ge=0,
        description="Creation time, never changes"
    )
    updated_at: Optional[int] = Field(
        default=None,
        ge=0,
        description="Last update time, absent until the first update"
    )

    @model_validator(mode='after')
    def validate_timestamps(self) -> 'FinancialRecord':
        if self.updated_at is not None and self.updated_at < self.created_at:
            raise ValueError("Updated timestamp cannot be before creation timestamp")
        return self

    @property
    def is_income(self) -> bool:
        return self.amount > 0

    @property
    def is_expense(self) -> bool:
        return self.amount < 0

    @property
    def has_notes(self) -> bool:
        return self.notes is not None

    @property
    def created_datetime(self) -> datetime:
        return timestamp_to_datetime(self.created_at)

    def to_export_dict(self) -> dict:
        """
        Convert to the external JSON shape.

        Timestamps are decimal strings so 64-bit values survive JSON
        readers that parse numbers as doubles.
        """
        return {
            "id": self.id,
            "amount": self.amount,
            "category": self.category,
            "notes": self.notes,
            "createdAt": str(self.created_at),
            "updatedAt": str(self.updated_at) if self.updated_at is not None else None,
        }

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "record_id": self.id,
            "amount": self.amount,
            "category": self.category,
            "has_notes": self.has_notes,
        }


# =============================================================================
# RESULT MODELS
# =============================================================================

class FinancialSummary(BaseModel):
    """Income/expense totals over the whole store."""

    total_income: float = Field(
        ...,
        ge=0,
        description="Sum of all positive amounts"
    )
    total_expense: float = Field(
        ...,
        le=0,
        description="Sum of all negative amounts (kept negative)"
    )
    net_flow: float = Field(
        ...,
        description="total_income + total_expense"
    )
    income_count: int = Field(default=0, ge=0)
    expense_count: int = Field(default=0, ge=0)

    @classmethod
    def from_totals(
        cls,
        total_income: float,
        total_expense: float,
        income_count: int = 0,
        expense_count: int = 0,
    ) -> 'FinancialSummary':
        return cls(
            total_income=total_income,
            total_expense=total_expense,
            net_flow=total_income + total_expense,
            income_count=income_count,
            expense_count=expense_count,
        )


class ValidationIssue(BaseModel):
    """A single validation issue found in caller input."""

    field: str = Field(
        ...,
        description="Field or argument with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_type', 'out_of_range')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )


class OperationResult(BaseModel):
    """
    Outcome of one service operation.

    Either `success` is True and `value` holds the result, or `error_kind`
    and `error_message` describe the failure. `unwrap()` gives back the
    value or re-raises the original typed error.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    operation: str
    correlation_id: UUID = Field(default_factory=uuid4)
    executed_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    success: bool
    value: Any = None

    error_kind: Optional[str] = Field(
        default=None,
        pattern="^(validation|not_found|internal)$"
    )
    error_message: Optional[str] = None
    issues: list[ValidationIssue] = Field(default_factory=list)

    _error: Optional[Exception] = PrivateAttr(default=None)

    @classmethod
    def ok(
        cls,
        operation: str,
        value: Any,
        correlation_id: Optional[UUID] = None,
    ) -> 'OperationResult':
        return cls(
            operation=operation,
            correlation_id=correlation_id or uuid4(),
            success=True,
            value=value,
        )

    @classmethod
    def failed(
        cls,
        operation: str,
        error: Exception,
        correlation_id: Optional[UUID] = None,
    ) -> 'OperationResult':
        result = cls(
            operation=operation,
            correlation_id=correlation_id or uuid4(),
            success=False,
            error_kind=getattr(error, "kind", "internal"),
            error_message=str(error),
            issues=list(getattr(error, "issues", [])),
        )
        result._error = error
        return result

    @property
    def result_count(self) -> int:
        if not self.success:
            return 0
        if isinstance(self.value, list):
            return len(self.value)
        return 1

    def unwrap(self) -> Any:
        """Return the value, or raise the error this result was built from."""
        if self.success:
            return self.value
        if self._error is not None:
            raise self._error
        raise RuntimeError(self.error_message or "operation failed")
