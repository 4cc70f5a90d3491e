"""
Query Execution Engine

Read-only filters over the record map. Nothing here mutates the store.

Every query follows the same contract:
- Bad or missing arguments raise ValidationError (checked first)
- An empty result raises NotFoundError. "Nothing matched" is reported
  to the user, never returned as an empty list.
- Results keep the map's insertion order
"""

from typing import Callable, Optional

from finrecords.errors import NotFoundError
from finrecords.models.record import FinancialRecord
from finrecords.services.storage import RecordStorageInterface
from finrecords.validation import RecordValidator


class RecordQueryExecutor:
    """
    Executes record filters against storage.

    GUARANTEES:
    - Only returns records actually in storage
    - Takes a fresh snapshot per call
    - Clear "not found" error if nothing matches
    """

    def __init__(
        self,
        storage: RecordStorageInterface,
        validator: Optional[RecordValidator] = None,
    ):
        self._storage = storage
        self._validator = validator or RecordValidator()

    def list_all(self) -> list[FinancialRecord]:
        return self._matching(lambda record: True, "no financial records found")

    def get_by_id(self, record_id: str) -> FinancialRecord:
        record_id = self._validator.require_id(record_id)
        return self._storage.get(record_id)

    def by_category(self, category: str) -> list[FinancialRecord]:
        """Records whose category equals `category` exactly (case-sensitive)."""
        category = self._validator.require_category(category)
        return self._matching(
            lambda record: record.category == category,
            f"no records found in category '{category}'",
        )

    def by_date_range(self, start: int, end: int) -> list[FinancialRecord]:
        """Records created within [start, end], both bounds inclusive."""
        start, end = self._validator.require_date_range(start, end)
        return self._matching(
            lambda record: start <= record.created_at <= end,
            f"no records found between {start} and {end}",
        )

    def expenses_greater_than(self, amount: float) -> list[FinancialRecord]:
        """Expenses whose absolute value is strictly above `amount`."""
        threshold = self._validator.require_positive_number(amount, "amount")
        return self._matching(
            lambda record: record.is_expense and abs(record.amount) > threshold,
            f"no expenses greater than {threshold:g} found",
        )

    def incomes_less_than(self, amount: float) -> list[FinancialRecord]:
        """Incomes strictly below `amount`."""
        threshold = self._validator.require_positive_number(amount, "amount")
        return self._matching(
            lambda record: record.is_income and record.amount < threshold,
            f"no incomes less than {threshold:g} found",
        )

    def with_notes(self) -> list[FinancialRecord]:
        """Records that have a note, including an empty one."""
        return self._matching(
            lambda record: record.has_notes,
            "no records with notes found",
        )

    def without_notes(self) -> list[FinancialRecord]:
        return self._matching(
            lambda record: not record.has_notes,
            "no records without notes found",
        )

    def categories(self) -> list[str]:
        """Distinct categories in first-seen order."""
        records = self.list_all()
        return list(dict.fromkeys(record.category for record in records))

    def _matching(
        self,
        predicate: Callable[[FinancialRecord], bool],
        empty_message: str,
    ) -> list[FinancialRecord]:
        results = [record for record in self._storage.values() if predicate(record)]
        if not results:
            raise NotFoundError(empty_message)
        return results
