"""
Record Export

Serializes the whole store to JSON text.

Timestamps go out as decimal strings ("createdAt": "1705312800000000000").
Nanosecond values exceed 2**53, and most JSON readers parse numbers as
doubles, so a numeric literal would silently lose precision.
"""

import json
from typing import Optional

from finrecords.config import ExportSettings, get_settings
from finrecords.errors import InternalError, NotFoundError
from finrecords.models.record import ExportFormat
from finrecords.services.storage import RecordStorageInterface
from finrecords.validation import RecordValidator


class RecordExporter:
    """Exports a snapshot of every record."""

    def __init__(
        self,
        storage: RecordStorageInterface,
        validator: Optional[RecordValidator] = None,
        settings: Optional[ExportSettings] = None,
    ):
        self._storage = storage
        self._validator = validator or RecordValidator()
        self._settings = settings or get_settings().export

    def export(self, export_format: str) -> str:
        """
        Serialize all records in map order.

        Args:
            export_format: Case-insensitive format name; only "json" is supported

        Returns:
            The serialized text

        Raises:
            ValidationError: If the format is empty or unsupported
            NotFoundError: If the store is empty
            InternalError: If serialization fails
        """
        fmt = self._validator.require_export_format(export_format)

        records = self._storage.values()
        if not records:
            raise NotFoundError("no financial records to export")

        if fmt is ExportFormat.JSON:
            return self._to_json([record.to_export_dict() for record in records])
        raise InternalError(f"no serializer registered for {fmt.value}")

    def _to_json(self, rows: list[dict]) -> str:
        try:
            return json.dumps(
                rows,
                indent=self._settings.json_indent,
                sort_keys=self._settings.sort_keys,
                ensure_ascii=False,
                allow_nan=False,
            )
        except (TypeError, ValueError) as e:
            raise InternalError(f"failed to serialize records to JSON: {e}") from e
