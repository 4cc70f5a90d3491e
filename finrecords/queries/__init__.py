"""Query execution package."""

from finrecords.queries.analytics import RecordAnalytics, count_months
from finrecords.queries.executor import RecordQueryExecutor
from finrecords.queries.export import RecordExporter

__all__ = ["RecordAnalytics", "RecordExporter", "RecordQueryExecutor", "count_months"]
