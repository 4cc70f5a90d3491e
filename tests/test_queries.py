"""Tests for RecordQueryExecutor."""

import pytest

from finrecords.errors import NotFoundError, ValidationError

from conftest import ts


@pytest.fixture
def populated(manager, clock):
    """Four records created on known days."""
    clock.set(ts(2024, 1, 10))
    manager.create({"amount": -100, "category": "food", "notes": "groceries"})
    clock.set(ts(2024, 1, 20))
    manager.create({"amount": 2000, "category": "salary"})
    clock.set(ts(2024, 2, 5))
    manager.create({"amount": -40, "category": "transport", "notes": ""})
    clock.set(ts(2024, 3, 1))
    manager.create({"amount": 50, "category": "gift"})
    return manager


class TestListAndLookup:
    """Tests for listing and id lookup."""

    def test_list_all_in_insertion_order(self, populated, queries):
        """Test that records are listed in insertion order."""
        records = queries.list_all()
        assert [record.id for record in records] == ["rec-1", "rec-2", "rec-3", "rec-4"]

    def test_list_all_empty_store(self, queries):
        """Test that an empty store is reported as not found."""
        with pytest.raises(NotFoundError, match="no financial records found"):
            queries.list_all()

    def test_get_by_id(self, populated, queries):
        """Test lookup of an existing record."""
        assert queries.get_by_id("rec-2").category == "salary"

    def test_get_by_id_missing(self, populated, queries):
        """Test the message for a missing id."""
        with pytest.raises(NotFoundError, match="a financial record with id=rec-9 not found"):
            queries.get_by_id("rec-9")

    def test_get_by_id_empty(self, queries):
        """Test that an empty id is rejected."""
        with pytest.raises(ValidationError):
            queries.get_by_id("")

    def test_deleted_record_not_found(self, populated, queries):
        """Test that a deleted record can no longer be fetched."""
        populated.delete("rec-1")
        with pytest.raises(NotFoundError):
            queries.get_by_id("rec-1")

    def test_categories_first_seen_order(self, populated, queries):
        """Test that categories are distinct and in first-seen order."""
        populated.create({"amount": -5, "category": "food"})
        assert queries.categories() == ["food", "salary", "transport", "gift"]


class TestCategoryFilter:
    """Tests for the category filter."""

    def test_exact_match(self, populated, queries):
        """Test exact category matching."""
        assert [record.id for record in queries.by_category("food")] == ["rec-1"]

    def test_case_sensitive(self, populated, queries):
        """Test that category matching is case-sensitive."""
        with pytest.raises(NotFoundError):
            queries.by_category("Food")

    def test_empty_category(self, populated, queries):
        """Test that an empty category is rejected."""
        with pytest.raises(ValidationError):
            queries.by_category("")


class TestDateRangeFilter:
    """Tests for the creation date range filter."""

    def test_inclusive_bounds(self, populated, queries):
        """Test that both range bounds are inclusive."""
        records = queries.by_date_range(ts(2024, 1, 10), ts(2024, 2, 5))
        assert [record.id for record in records] == ["rec-1", "rec-2", "rec-3"]

    def test_single_instant(self, populated, queries):
        """Test a range where start equals end."""
        records = queries.by_date_range(ts(2024, 1, 20), ts(2024, 1, 20))
        assert [record.id for record in records] == ["rec-2"]

    def test_start_after_end(self, populated, queries):
        """Test that a reversed range is rejected."""
        with pytest.raises(ValidationError):
            queries.by_date_range(ts(2024, 3, 1), ts(2024, 1, 1))

    def test_missing_bound(self, populated, queries):
        """Test that a missing bound is rejected."""
        with pytest.raises(ValidationError):
            queries.by_date_range(None, ts(2024, 1, 1))

    def test_no_matches(self, populated, queries):
        """Test that an empty range is reported as not found."""
        with pytest.raises(NotFoundError):
            queries.by_date_range(ts(2023, 1, 1), ts(2023, 12, 31))


class TestAmountFilters:
    """Tests for the expense and income threshold filters."""

    def test_expenses_greater_than(self, populated, queries):
        """Test the strict expense threshold filter."""
        records = queries.expenses_greater_than(50)
        assert [record.id for record in records] == ["rec-1"]
        assert all(record.amount < 0 and abs(record.amount) > 50 for record in records)

    def test_expense_threshold_boundary_excluded(self, populated, queries):
        """Test that an expense equal to the threshold is excluded."""
        with pytest.raises(NotFoundError):
            queries.expenses_greater_than(100)

    @pytest.mark.parametrize("threshold", [None, 0, -10])
    def test_expense_threshold_validation(self, populated, queries, threshold):
        """Test that the expense threshold must be positive."""
        with pytest.raises(ValidationError):
            queries.expenses_greater_than(threshold)

    def test_incomes_less_than(self, populated, queries):
        """Test the strict income threshold filter."""
        records = queries.incomes_less_than(2000)
        assert [record.id for record in records] == ["rec-4"]

    def test_incomes_ignore_expenses(self, populated, queries):
        """Test that expenses never appear in income results."""
        records = queries.incomes_less_than(10_000)
        assert all(record.amount > 0 for record in records)

    @pytest.mark.parametrize("threshold", [None, 0, -1])
    def test_income_threshold_validation(self, populated, queries, threshold):
        """Test that the income threshold must be positive."""
        with pytest.raises(ValidationError):
            queries.incomes_less_than(threshold)


class TestNotesFilters:
    """Tests for the notes filters."""

    def test_with_notes_includes_empty_note(self, populated, queries):
        """Test that an empty note counts as a note."""
        assert [record.id for record in queries.with_notes()] == ["rec-1", "rec-3"]

    def test_without_notes(self, populated, queries):
        """Test records that have no note."""
        assert [record.id for record in queries.without_notes()] == ["rec-2", "rec-4"]

    def test_without_notes_empty_partition(self, manager, queries):
        """Test the message when every record has notes."""
        manager.create({"amount": -1, "category": "a", "notes": "n"})
        with pytest.raises(NotFoundError, match="no records without notes"):
            queries.without_notes()
