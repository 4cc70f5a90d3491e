"""
Input Validation

Every argument that reaches the record store passes through here first.
Validation runs before the store is touched, so a rejected call never
leaves a trace in the data.

Checks are collected as ValidationIssue objects, not raised one at a
time, so the caller sees every problem with a payload at once.

IMPORTANT: Validation NEVER silently fixes input.
A blank category is rejected, not stripped into something else.
"""

import math
from collections.abc import Mapping
from typing import Any, Optional, Union

from finrecords.config import AppSettings, get_settings
from finrecords.errors import ValidationError
from finrecords.models.record import ExportFormat, RecordPayload, ValidationIssue


_MISSING = object()


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _finite_float(value: Any) -> Optional[float]:
    """`value` as a float, or None if it is NaN, infinite or too large for a float."""
    try:
        number = float(value)
    except OverflowError:
        return None
    return number if math.isfinite(number) else None


def _raise_if_issues(issues: list[ValidationIssue], context: str) -> None:
    if issues:
        summary = "; ".join(issue.message for issue in issues)
        raise ValidationError(f"{context}: {summary}", issues)


class RecordValidator:
    """
    Validates payloads and query arguments.

    Every `require_*` method returns the normalised value or raises
    ValidationError carrying the issues found.
    """

    def __init__(self, settings: Optional[AppSettings] = None):
        self._settings = settings or get_settings().app

    # -------------------------------------------------------------------------
    # Payloads
    # -------------------------------------------------------------------------

    def validate_payload(
        self,
        payload: Union[RecordPayload, Mapping, None],
    ) -> RecordPayload:
        """
        Validate a create/update payload.

        Accepts a RecordPayload or a plain mapping with the keys
        `amount`, `category` and optionally `notes`. Unknown keys are
        ignored. A missing `notes` key means "no notes".

        Raises:
            ValidationError: With one issue per problem found
        """
        if isinstance(payload, RecordPayload):
            payload = payload.model_dump()

        if not isinstance(payload, Mapping):
            _raise_if_issues([ValidationIssue(
                field="payload",
                issue_type="missing",
                message="payload is required and must be a mapping",
            )], "invalid payload")

        issues = []
        issues.extend(self._check_amount(payload.get("amount", _MISSING)))
        issues.extend(self._check_category(payload.get("category", _MISSING)))
        issues.extend(self._check_notes(payload.get("notes")))

        _raise_if_issues(issues, "invalid payload")

        return RecordPayload(
            amount=float(payload["amount"]),
            category=payload["category"],
            notes=payload.get("notes"),
        )

    def _check_amount(self, amount: Any) -> list[ValidationIssue]:
        if amount is _MISSING or amount is None:
            return [ValidationIssue(
                field="amount",
                issue_type="missing",
                message="amount is required",
            )]
        if not _is_number(amount):
            return [ValidationIssue(
                field="amount",
                issue_type="invalid_type",
                message=f"amount must be a number, got {type(amount).__name__}",
            )]
        if _finite_float(amount) is None:
            return [ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="amount must be a finite number",
            )]
        if amount == 0:
            return [ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="amount must be non-zero (positive = income, negative = expense)",
            )]
        return []

    def _check_category(
        self,
        category: Any,
        field: str = "category",
    ) -> list[ValidationIssue]:
        if category is _MISSING or category is None:
            return [ValidationIssue(
                field=field,
                issue_type="missing",
                message=f"{field} is required",
            )]
        if not isinstance(category, str):
            return [ValidationIssue(
                field=field,
                issue_type="invalid_type",
                message=f"{field} must be a string",
            )]
        if not category.strip():
            return [ValidationIssue(
                field=field,
                issue_type="empty",
                message=f"{field} must not be empty",
            )]
        max_length = self._settings.max_category_length
        if len(category) > max_length:
            return [ValidationIssue(
                field=field,
                issue_type="too_long",
                message=f"{field} must be at most {max_length} characters",
            )]
        return []

    def _check_notes(self, notes: Any) -> list[ValidationIssue]:
        # None is "absent"; "" is a present, empty note
        if notes is None:
            return []
        if not isinstance(notes, str):
            return [ValidationIssue(
                field="notes",
                issue_type="invalid_type",
                message="notes must be a string when given",
            )]
        max_length = self._settings.max_notes_length
        if len(notes) > max_length:
            return [ValidationIssue(
                field="notes",
                issue_type="too_long",
                message=f"notes must be at most {max_length} characters",
            )]
        return []

    # -------------------------------------------------------------------------
    # Arguments
    # -------------------------------------------------------------------------

    def require_id(self, record_id: Any) -> str:
        """A record id must be a non-empty string."""
        if record_id is None or record_id == "":
            _raise_if_issues([ValidationIssue(
                field="id",
                issue_type="missing",
                message="id is required",
            )], "invalid id")
        if not isinstance(record_id, str):
            _raise_if_issues([ValidationIssue(
                field="id",
                issue_type="invalid_type",
                message="id must be a string",
            )], "invalid id")
        return record_id

    def require_category(self, category: Any, field: str = "category") -> str:
        _raise_if_issues(self._check_category(category, field), f"invalid {field}")
        return category

    def require_date_range(self, start: Any, end: Any) -> tuple[int, int]:
        """
        Validate an inclusive timestamp range.

        Both bounds are nanosecond timestamps (non-negative integers).
        """
        issues = []
        for name, value in (("start", start), ("end", end)):
            if value is None:
                issues.append(ValidationIssue(
                    field=name,
                    issue_type="missing",
                    message=f"{name} date is required",
                ))
            elif not isinstance(value, int) or isinstance(value, bool):
                issues.append(ValidationIssue(
                    field=name,
                    issue_type="invalid_type",
                    message=f"{name} must be an integer timestamp",
                ))
            elif value < 0:
                issues.append(ValidationIssue(
                    field=name,
                    issue_type="out_of_range",
                    message=f"{name} must not be negative",
                ))
        _raise_if_issues(issues, "invalid date range")

        if start > end:
            _raise_if_issues([ValidationIssue(
                field="start",
                issue_type="out_of_range",
                message="start date must not be after end date",
            )], "invalid date range")
        return start, end

    def require_positive_number(self, value: Any, field: str = "amount") -> float:
        """A threshold or month count: a finite number greater than zero."""
        if value is None:
            issue = ValidationIssue(
                field=field,
                issue_type="missing",
                message=f"{field} is required",
            )
        elif not _is_number(value):
            issue = ValidationIssue(
                field=field,
                issue_type="invalid_type",
                message=f"{field} must be a number",
            )
        elif _finite_float(value) is None or value <= 0:
            issue = ValidationIssue(
                field=field,
                issue_type="out_of_range",
                message=f"{field} must be greater than zero",
            )
        else:
            return float(value)
        _raise_if_issues([issue], f"invalid {field}")

    def require_export_format(self, export_format: Any) -> ExportFormat:
        if not export_format or not isinstance(export_format, str):
            _raise_if_issues([ValidationIssue(
                field="format",
                issue_type="missing",
                message="export format is required",
            )], "invalid export format")
        try:
            return ExportFormat(export_format.lower())
        except ValueError:
            supported = ", ".join(fmt.value for fmt in ExportFormat)
            _raise_if_issues([ValidationIssue(
                field="format",
                issue_type="unsupported",
                message=f"unsupported export format '{export_format}' (supported: {supported})",
            )], "invalid export format")
