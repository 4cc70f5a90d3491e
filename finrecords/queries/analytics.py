"""
Aggregation and Forecast

Summaries, monthly averages and the naive expense forecast.

DESIGN DECISION: The month count is inclusive calendar months between
the earliest and latest record:

    month_diff = (year_latest - year_earliest) * 12
                 + (month_latest - month_earliest) + 1

Day of month is ignored, so Jan 31 -> Feb 1 counts as 2 months. This is
an approximation kept for compatibility, not a bug to fix.

The forecast is average-per-RECORD times months ahead, not
average-per-month. No trend, no seasonality.
"""

from datetime import datetime
from typing import Callable, Optional

from finrecords.errors import NotFoundError
from finrecords.models.record import FinancialRecord, FinancialSummary
from finrecords.services.storage import RecordStorageInterface
from finrecords.validation import RecordValidator


def count_months(earliest: datetime, latest: datetime) -> int:
    """Inclusive number of calendar months from `earliest` to `latest`, at least 1."""
    month_diff = (latest.year - earliest.year) * 12 + (latest.month - earliest.month) + 1
    return max(month_diff, 1)


def average_per_month(records: list[FinancialRecord]) -> float:
    """Sum of absolute amounts divided by the inclusive month span of `records`."""
    earliest = min(records, key=lambda record: record.created_at)
    latest = max(records, key=lambda record: record.created_at)

    total = sum(abs(record.amount) for record in records)
    return total / count_months(earliest.created_datetime, latest.created_datetime)


class RecordAnalytics:
    """Read-only aggregations over the record map."""

    def __init__(
        self,
        storage: RecordStorageInterface,
        validator: Optional[RecordValidator] = None,
    ):
        self._storage = storage
        self._validator = validator or RecordValidator()

    def summary(self) -> FinancialSummary:
        """
        Total income, total expense (negative) and net flow.

        Raises:
            NotFoundError: If there is no income or expense activity at all
        """
        total_income = 0.0
        total_expense = 0.0
        income_count = 0
        expense_count = 0

        for record in self._storage.values():
            if record.is_income:
                total_income += record.amount
                income_count += 1
            elif record.is_expense:
                total_expense += record.amount
                expense_count += 1

        if total_income == 0 and total_expense == 0:
            raise NotFoundError("no income or expense activity to summarize")

        return FinancialSummary.from_totals(
            total_income=total_income,
            total_expense=total_expense,
            income_count=income_count,
            expense_count=expense_count,
        )

    def average_monthly_expenses(self) -> float:
        """Average absolute expense per calendar month spanned by expenses."""
        return average_per_month(
            self._filtered(lambda record: record.is_expense, "no expense records found")
        )

    def average_monthly_income(self) -> float:
        """Average income per calendar month spanned by incomes."""
        return average_per_month(
            self._filtered(lambda record: record.is_income, "no income records found")
        )

    def forecast_future_expenses(self, months_ahead: float) -> float:
        """
        Naive forecast: average expense per record times `months_ahead`.

        Raises:
            ValidationError: If months_ahead is missing, not a number or <= 0
            NotFoundError: If there are no expense records
        """
        months_ahead = self._validator.require_positive_number(months_ahead, "months_ahead")
        expenses = self._filtered(lambda record: record.is_expense, "no expense records found")

        average_expense = sum(abs(record.amount) for record in expenses) / len(expenses)
        return average_expense * months_ahead

    def _filtered(
        self,
        predicate: Callable[[FinancialRecord], bool],
        empty_message: str,
    ) -> list[FinancialRecord]:
        records = [record for record in self._storage.values() if predicate(record)]
        if not records:
            raise NotFoundError(empty_message)
        return records
