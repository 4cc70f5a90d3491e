"""Record mutation package."""

from finrecords.records.manager import RecordManager

__all__ = ["RecordManager"]
