"""Tests for category usage statistics."""

from datetime import date
from decimal import Decimal

from tools.usage import (
    category_usage,
    dependent_expense_count,
    unused_categories,
    usage_overview,
)


class TestCategoryUsage:
    """Tests for category_usage."""

    def test_usage_of_used_category(self, ledger):
        ledger.add_expense("Lunch", Decimal("10.00"), 1, date(2024, 1, 1))
        ledger.add_expense("Dinner", Decimal("25.00"), 1, date(2024, 1, 2))
        ledger.add_expense("Bus", Decimal("3.00"), 2, date(2024, 1, 3))
        ledger.add_expense("Taxi", Decimal("12.00"), 2, date(2024, 1, 4))

        usage = category_usage(ledger.snapshot(), 1)

        assert usage.count == 2
        assert usage.total == Decimal("35.00")
        assert usage.average == Decimal("17.50")
        assert usage.share == Decimal("50")

    def test_usage_of_unused_category(self, ledger):
        ledger.add_expense("Lunch", 10, 1, date(2024, 1, 1))

        usage = category_usage(ledger.snapshot(), 8)

        assert usage.count == 0
        assert usage.total == Decimal("0")
        assert usage.average == Decimal("0")
        assert usage.share == Decimal("0")

    def test_usage_on_empty_ledger(self, ledger):
        usage = category_usage(ledger.snapshot(), 1)

        assert usage.share == Decimal("0")

    def test_share_counts_every_expense_regardless_of_date(self, ledger):
        """Test that the share is against the whole ledger, not a range."""
        ledger.add_expense("Old", 1, 1, date(2001, 1, 1))
        ledger.add_expense("New", 1, 2, date(2024, 1, 1))
        ledger.add_expense("Newer", 1, 2, date(2025, 1, 1))

        usage = category_usage(ledger.snapshot(), 1)

        assert round(usage.share, 2) == Decimal("33.33")


class TestDeletionSupport:
    """Tests for the figures used before deleting a category."""

    def test_dependent_expense_count(self, ledger):
        ledger.add_expense("Bus", 3, 2, date(2024, 1, 1))
        ledger.add_expense("Train", 9, 2, date(2024, 1, 1))

        snapshot = ledger.snapshot()

        assert dependent_expense_count(snapshot, 2) == 2
        assert dependent_expense_count(snapshot, 3) == 0

    def test_unused_categories(self, ledger):
        ledger.add_expense("Bus", 3, 2, date(2024, 1, 1))

        unused = unused_categories(ledger.snapshot())

        assert 2 not in [c.id for c in unused]
        assert len(unused) == 8


class TestUsageOverview:
    """Tests for usage_overview."""

    def test_overview_summary(self, ledger):
        ledger.add_expense("Lunch", 10, 1, date(2024, 1, 1))
        ledger.add_expense("Dinner", 20, 1, date(2024, 1, 1))
        ledger.add_expense("Flight", 400, 8, date(2024, 1, 1))

        overview = usage_overview(ledger.snapshot())

        assert overview.total_categories == 9
        assert overview.categories_in_use == 2
        assert overview.max_transactions == 2
        assert overview.max_total == Decimal("400")
        assert [c.id for c, _ in overview.usage] == list(range(1, 10))

    def test_overview_with_no_categories(self, ledger):
        for category in ledger.categories:
            ledger.delete_category(category.id)

        overview = usage_overview(ledger.snapshot())

        assert overview.total_categories == 0
        assert overview.max_transactions == 0
        assert overview.max_total == Decimal("0")
