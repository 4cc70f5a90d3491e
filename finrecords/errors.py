"""
Error Taxonomy

Every failure a record operation can report falls into one of three kinds:

- ValidationError: the caller sent malformed or missing input.
  Always detected before the store is touched.
- NotFoundError: the id is unknown, or a query matched nothing.
  An empty result is reported as an error, not an empty success.
- InternalError: something broke that the caller could not have prevented
  (e.g. serialization during export).

The service facade translates these into OperationResult values.
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from finrecords.models.record import ValidationIssue


class RecordError(Exception):
    """Base exception for record operations."""

    kind = "internal"


class ValidationError(RecordError, ValueError):
    """Input failed validation. Carries the individual issues found."""

    kind = "validation"

    def __init__(
        self,
        message: str,
        issues: Optional[list["ValidationIssue"]] = None,
    ):
        super().__init__(message)
        self.issues = issues or []


class NotFoundError(RecordError, LookupError):
    """No record with the given id, or no record matched the query."""

    kind = "not_found"


class InternalError(RecordError):
    """Unexpected failure while producing a result."""

    kind = "internal"
