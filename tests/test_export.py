"""Tests for RecordExporter."""

import json

import pytest

from finrecords.config import ExportSettings
from finrecords.errors import InternalError, NotFoundError, ValidationError
from finrecords.models.record import FinancialRecord
from finrecords.queries import RecordExporter

from conftest import ts


class TestJsonExport:
    """Tests for JSON export."""

    def test_export_parses_back(self, manager, exporter, clock):
        """Test that the exported JSON parses back to the records."""
        clock.set(ts(2024, 1, 15))
        manager.create({"amount": -50, "category": "food", "notes": "lunch"})
        manager.create({"amount": 1200, "category": "salary"})

        data = json.loads(exporter.export("json"))

        assert [row["id"] for row in data] == ["rec-1", "rec-2"]
        assert data[0]["amount"] == -50
        assert data[0]["notes"] == "lunch"
        assert data[1]["notes"] is None
        assert data[1]["updatedAt"] is None

    def test_timestamps_exported_as_decimal_strings(self, manager, exporter, clock):
        """Test that timestamps are exported as decimal strings."""
        clock.set(ts(2024, 1, 15))
        record = manager.create({"amount": -50, "category": "food"})
        manager.update(record.id, {"amount": -60, "category": "food"})

        row = json.loads(exporter.export("json"))[0]

        assert row["createdAt"] == str(ts(2024, 1, 15))
        assert isinstance(row["updatedAt"], str)
        assert int(row["updatedAt"]) >= int(row["createdAt"])

    def test_export_keys(self, manager, exporter):
        """Test the exported field names."""
        manager.create({"amount": -5, "category": "food"})
        row = json.loads(exporter.export("JSON"))[0]
        assert set(row) == {"id", "amount", "category", "notes", "createdAt", "updatedAt"}

    def test_compact_output(self, manager, storage, validator):
        """Test single-line output when indent is zero."""
        manager.create({"amount": -5, "category": "food"})
        exporter = RecordExporter(storage, validator, ExportSettings(indent=0))
        assert "\n" not in exporter.export("json")

    def test_sorted_keys(self, manager, storage, validator):
        """Test key sorting when configured."""
        manager.create({"amount": -5, "category": "food"})
        exporter = RecordExporter(storage, validator, ExportSettings(sort_keys=True))
        text = exporter.export("json")
        assert text.index('"amount"') < text.index('"category"') < text.index('"id"')

    def test_empty_store(self, exporter):
        """Test that an empty store is reported as not found."""
        with pytest.raises(NotFoundError, match="no financial records to export"):
            exporter.export("json")

    @pytest.mark.parametrize("fmt", ["", "csv", None])
    def test_bad_format_checked_first(self, exporter, fmt):
        """Test that the format is validated before the store is read."""
        with pytest.raises(ValidationError):
            exporter.export(fmt)

    def test_unserializable_amount_is_internal_error(self, storage, exporter):
        """Test that a serializer failure becomes InternalError."""
        storage.insert(FinancialRecord.model_construct(
            id="broken",
            amount=float("nan"),
            category="food",
            notes=None,
            created_at=1,
            updated_at=None,
        ))
        with pytest.raises(InternalError, match="failed to serialize"):
            exporter.export("json")
