"""Input validation package."""

from finrecords.validation.validator import RecordValidator

__all__ = ["RecordValidator"]
