"""
Shared fixtures.

Tests never use the real clock or uuid4: the clock and id generator are
injected with deterministic fakes so timestamps and ids are predictable.
"""

from datetime import datetime, timezone

import pytest

from finrecords.config import AppSettings, ExportSettings
from finrecords.models.record import datetime_to_timestamp
from finrecords.queries import RecordAnalytics, RecordExporter, RecordQueryExecutor
from finrecords.records import RecordManager
from finrecords.services.storage import InMemoryAuditStorage, InMemoryRecordStorage
from finrecords.validation import RecordValidator


def ts(year: int, month: int, day: int, hour: int = 12) -> int:
    """Nanosecond timestamp for a UTC date."""
    return datetime_to_timestamp(datetime(year, month, day, hour, tzinfo=timezone.utc))


class FakeClock:
    """Returns `now`, then advances by `step` nanoseconds."""

    def __init__(self, start: int = ts(2024, 1, 15), step: int = 1_000):
        self.now = start
        self.step = step

    def __call__(self) -> int:
        current = self.now
        self.now += self.step
        return current

    def set(self, timestamp: int) -> None:
        self.now = timestamp


class SequentialIds:
    """Produces rec-1, rec-2, ..."""

    def __init__(self, prefix: str = "rec"):
        self.prefix = prefix
        self.count = 0

    def __call__(self) -> str:
        self.count += 1
        return f"{self.prefix}-{self.count}"


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def ids():
    return SequentialIds()


@pytest.fixture
def app_settings():
    return AppSettings()


@pytest.fixture
def validator(app_settings):
    return RecordValidator(app_settings)


@pytest.fixture
def storage():
    return InMemoryRecordStorage()


@pytest.fixture
def audit_storage():
    return InMemoryAuditStorage(max_events=100)


@pytest.fixture
def manager(storage, validator, clock, ids, app_settings):
    return RecordManager(
        storage,
        validator=validator,
        clock=clock,
        id_generator=ids,
        settings=app_settings,
    )


@pytest.fixture
def queries(storage, validator):
    return RecordQueryExecutor(storage, validator)


@pytest.fixture
def analytics(storage, validator):
    return RecordAnalytics(storage, validator)


@pytest.fixture
def exporter(storage, validator):
    return RecordExporter(storage, validator, ExportSettings())
