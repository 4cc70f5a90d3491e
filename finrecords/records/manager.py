"""
Record Mutations

The only code allowed to change the record map. Every mutation:
1. Validates its input (nothing touches the store on bad input)
2. Checks existence where an id is involved
3. Writes the new record back under the same id

Stored records are frozen pydantic models, so "changing" a record means
building a new one and overwriting the old entry.
"""

from collections.abc import Mapping
from typing import Optional, Union

from finrecords.config import AppSettings, get_settings
from finrecords.errors import InternalError, NotFoundError
from finrecords.models.record import FinancialRecord, RecordPayload
from finrecords.services.clock import Clock, IdGenerator, MonotonicClock, uuid4_id
from finrecords.services.storage import RecordNotFoundError, RecordStorageInterface
from finrecords.validation import RecordValidator


MAX_ID_ATTEMPTS = 5

Payload = Union[RecordPayload, Mapping]


class RecordManager:
    """
    Create, update, delete and bulk-rename records.

    The clock and id generator are injected; by default they are the
    wall clock (made monotonic) and uuid4.
    """

    def __init__(
        self,
        storage: RecordStorageInterface,
        validator: Optional[RecordValidator] = None,
        clock: Optional[Clock] = None,
        id_generator: Optional[IdGenerator] = None,
        settings: Optional[AppSettings] = None,
    ):
        self._storage = storage
        self._settings = settings or get_settings().app
        self._validator = validator or RecordValidator(self._settings)
        self._clock = clock or MonotonicClock()
        self._id_generator = id_generator or uuid4_id

    def create(self, payload: Payload) -> FinancialRecord:
        """
        Validate the payload and store it as a new record.

        The record gets a fresh id, `created_at` = now and no `updated_at`.

        Raises:
            ValidationError: If the payload is invalid
        """
        valid = self._validator.validate_payload(payload)

        record = FinancialRecord(
            id=self._new_id(),
            amount=valid.amount,
            category=valid.category,
            notes=valid.notes,
            created_at=self._clock(),
            updated_at=None,
        )
        self._storage.insert(record)
        return record

    def update(self, record_id: str, payload: Payload) -> FinancialRecord:
        """
        Overwrite amount, category and notes of an existing record.

        `id` and `created_at` are kept; `updated_at` is set to now.
        Notes left out of the payload are cleared, as the payload replaces
        the record's content as a whole.

        Raises:
            ValidationError: If the id or payload is invalid
            NotFoundError: If no record has this id
        """
        valid = self._validator.validate_payload(payload)
        record_id = self._validator.require_id(record_id)

        try:
            existing = self._storage.get(record_id)
        except RecordNotFoundError:
            raise RecordNotFoundError(
                record_id,
                f"couldn't update a financial record with id={record_id}. record not found",
            ) from None

        updated = FinancialRecord(
            id=existing.id,
            amount=valid.amount,
            category=valid.category,
            notes=valid.notes,
            created_at=existing.created_at,
            updated_at=self._touch(existing),
        )
        self._storage.insert(updated)
        return updated

    def delete(self, record_id: str) -> FinancialRecord:
        """
        Remove a record and return it.

        Raises:
            ValidationError: If the id is empty
            NotFoundError: If no record has this id
        """
        record_id = self._validator.require_id(record_id)
        try:
            return self._storage.remove(record_id)
        except RecordNotFoundError:
            raise RecordNotFoundError(
                record_id,
                f"couldn't delete a financial record with id={record_id}. record not found.",
            ) from None

    def rename_category(
        self,
        old_category: str,
        new_category: str,
    ) -> list[FinancialRecord]:
        """
        Move every record in `old_category` to `new_category`.

        All renamed records are built first and then written back. Inserts
        cannot fail once the ids are known, so the store is never left
        half-renamed.

        `updated_at` is left alone unless `rename_touches_updated_at` is set.

        Raises:
            ValidationError: If either category is empty
            NotFoundError: If no record is in `old_category`
        """
        old_category = self._validator.require_category(old_category, "old_category")
        new_category = self._validator.require_category(new_category, "new_category")

        matches = [
            record for record in self._storage.values()
            if record.category == old_category
        ]
        if not matches:
            raise NotFoundError(f"no records found in category '{old_category}'")

        renamed = []
        for record in matches:
            changes = {"category": new_category}
            if self._settings.rename_touches_updated_at:
                changes["updated_at"] = self._touch(record)
            renamed.append(record.model_copy(update=changes))

        for record in renamed:
            self._storage.insert(record)

        return renamed

    def _new_id(self) -> str:
        for _ in range(MAX_ID_ATTEMPTS):
            candidate = self._id_generator()
            if candidate and not self._storage.contains(candidate):
                return candidate
        raise InternalError(
            f"could not generate a unique record id after {MAX_ID_ATTEMPTS} attempts"
        )

    def _touch(self, record: FinancialRecord) -> int:
        """Current time, never earlier than the record's existing timestamps."""
        return max(self._clock(), record.created_at, record.updated_at or 0)
