"""Tests for spending aggregates."""

from datetime import date
from decimal import Decimal

import pytest

from tools.aggregation import (
    MONTH_LABELS,
    WEEKDAY_LABELS,
    category_series,
    daily_series,
    insights,
    monthly_series,
    total_in_range,
    totals_by_category,
    weekly_series,
)


@pytest.fixture
def spread(ledger):
    """Expenses across categories, months and years."""
    ledger.add_expense("Dinner", Decimal("30.00"), 1, date(2024, 1, 7))     # Sunday
    ledger.add_expense("Train", Decimal("12.50"), 2, date(2024, 1, 8))      # Monday
    ledger.add_expense("Shoes", Decimal("90.00"), 3, date(2024, 6, 15))     # Saturday
    ledger.add_expense("Lunch", Decimal("11.00"), 1, date(2024, 6, 17))     # Monday
    ledger.add_expense("Old bill", Decimal("40.00"), 5, date(2023, 12, 31)) # Sunday
    ledger.add_expense("Snack", Decimal("3.25"), 1, date(2025, 2, 1))       # Saturday
    return ledger


class TestScenarios:
    """End-to-end scenarios on a fresh ledger."""

    def test_single_coffee(self, ledger):
        """Test totals after adding one expense to an empty ledger."""
        ledger.add_expense("Coffee", 4.50, 1, "2024-03-01")
        snapshot = ledger.snapshot()

        assert total_in_range(snapshot) == Decimal("4.50")

        totals = totals_by_category(snapshot)
        assert len(totals) == 1
        assert totals[0].category_id == 1
        assert totals[0].name == "Food & Dining"
        assert totals[0].total == Decimal("4.50")

    def test_monthly_series_and_category_deletion(self, ledger):
        """Test monthly buckets, then regrouping once the category is gone."""
        ledger.add_expense("Fuel", 10, 2, date(2024, 1, 5))
        ledger.add_expense("Parking", 20, 2, date(2024, 2, 10))

        series = monthly_series(ledger.snapshot(), 2024)
        assert series.values[0] == 10
        assert series.values[1] == 20
        assert all(v == 0 for v in series.values[2:])

        ledger.delete_category(2)
        totals = totals_by_category(ledger.snapshot())

        assert len(totals) == 1
        assert totals[0].name == "Unknown"
        assert totals[0].total == Decimal("30")
        assert totals[0].category_id is None
        assert totals[0].color == "#9B9B9B"


class TestTotals:
    """Tests for range totals and category breakdowns."""

    def test_total_in_range_inclusive(self, spread):
        snapshot = spread.snapshot()

        assert total_in_range(snapshot, date(2024, 1, 7), date(2024, 1, 8)) == Decimal("42.50")
        assert total_in_range(snapshot, date(2024, 1, 1)) == Decimal("146.75")
        assert total_in_range(snapshot, end=date(2023, 12, 31)) == Decimal("40.00")

    def test_total_of_empty_ledger_is_zero(self, ledger):
        assert total_in_range(ledger.snapshot()) == Decimal("0")

    @pytest.mark.parametrize(
        "start,end",
        [
            (None, None),
            (date(2024, 1, 1), date(2024, 12, 31)),
            (date(2024, 6, 1), None),
            (date(2030, 1, 1), None),
        ],
    )
    def test_category_totals_sum_to_range_total(self, spread, start, end):
        """Test that the breakdown always adds up to the range total."""
        snapshot = spread.snapshot()
        spread.delete_category(5)
        after_delete = spread.snapshot()

        for snap in (snapshot, after_delete):
            grouped = sum((t.total for t in totals_by_category(snap, start, end)), Decimal("0"))
            assert grouped == total_in_range(snap, start, end)

    def test_groups_in_first_seen_order_with_counts(self, spread):
        totals = totals_by_category(spread.snapshot(), date(2024, 1, 1), date(2024, 12, 31))

        assert [(t.name, t.total, t.count) for t in totals] == [
            ("Food & Dining", Decimal("41.00"), 2),
            ("Shopping", Decimal("90.00"), 1),
            ("Transportation", Decimal("12.50"), 1),
        ]

    def test_display_metadata_is_current(self, spread):
        """Test that recoloring a category changes historical breakdowns."""
        spread.update_category(3, color="#000000", icon="👟")

        shopping = next(t for t in totals_by_category(spread.snapshot()) if t.name == "Shopping")

        assert shopping.color == "#000000"
        assert shopping.icon == "👟"

    def test_same_name_categories_share_a_group(self, ledger):
        gifts_a = ledger.add_category("Gifts", "#111111", "🎁")
        gifts_b = ledger.add_category("Gifts", "#222222", "🎀")
        ledger.add_expense("Mug", 8, gifts_b.id, date(2024, 1, 1))
        ledger.add_expense("Card", 2, gifts_a.id, date(2024, 1, 2))

        totals = totals_by_category(ledger.snapshot())

        assert len(totals) == 1
        assert totals[0].total == Decimal("10")
        assert totals[0].category_id == gifts_a.id

    def test_category_series_and_percentages(self, spread):
        totals = totals_by_category(spread.snapshot(), date(2024, 1, 1), date(2024, 12, 31))
        series = category_series(totals)

        assert series.labels == ("Food & Dining", "Shopping", "Transportation")
        assert series.total == Decimal("143.50")
        assert float(sum(t.percent_of(series.total) for t in totals)) == pytest.approx(100)


class TestSeries:
    """Tests for time series."""

    def test_monthly_series_has_twelve_buckets(self, spread):
        series = monthly_series(spread.snapshot(), 2024)

        assert len(series.values) == 12
        assert series.labels == MONTH_LABELS
        assert series.values[0] == Decimal("42.50")
        assert series.values[5] == Decimal("101.00")

    @pytest.mark.parametrize("year", [2023, 2024, 2025, 1999])
    def test_monthly_series_sums_to_year_total(self, spread, year):
        snapshot = spread.snapshot()

        series = monthly_series(snapshot, year)

        assert len(series.values) == 12
        assert series.total == total_in_range(snapshot, date(year, 1, 1), date(year, 12, 31))

    def test_weekly_series_starts_on_sunday(self, spread):
        series = weekly_series(spread.snapshot())

        assert series.labels == WEEKDAY_LABELS
        assert series.values[0] == Decimal("70.00")   # Dinner + Old bill
        assert series.values[1] == Decimal("23.50")   # Train + Lunch
        assert series.values[6] == Decimal("93.25")   # Shoes + Snack
        assert series.values[2:6] == (Decimal("0"),) * 4

    def test_weekly_series_respects_range(self, spread):
        series = weekly_series(spread.snapshot(), date(2024, 6, 1), date(2024, 6, 30))

        assert series.values[1] == Decimal("11.00")
        assert series.values[6] == Decimal("90.00")
        assert series.total == Decimal("101.00")

    def test_daily_series_length_follows_month(self, spread):
        snapshot = spread.snapshot()

        assert len(daily_series(snapshot, 2024, 2).values) == 29
        assert len(daily_series(snapshot, 2023, 2).values) == 28
        assert len(daily_series(snapshot, 2024, 6).values) == 30

    def test_daily_series_buckets(self, spread):
        series = daily_series(spread.snapshot(), 2024, 6)

        assert series.labels[0] == "1"
        assert series.values[14] == Decimal("90.00")
        assert series.values[16] == Decimal("11.00")
        assert series.total == Decimal("101.00")


class TestInsights:
    """Tests for headline insights."""

    def test_empty_ledger_has_no_insights(self, ledger):
        assert insights(ledger.snapshot()) == []

    def test_insights_for_year(self, spread):
        result = insights(
            spread.snapshot(), date(2024, 1, 1), date(2024, 12, 31), period="year"
        )

        assert [i.title for i in result] == [
            "Top Spending Category",
            "Average Daily Spending",
            "Largest Single Expense",
            "Most Frequent Category",
        ]
        top, average, largest, frequent = result

        assert top.value == "Shopping"
        assert top.amount == "$90.00"
        assert average.value == "$0.39"  # 143.50 / 365
        assert average.amount == "over 365 days"
        assert largest.value == "Shoes"
        assert largest.amount == "$90.00"
        assert frequent.value == "Food & Dining"
        assert frequent.amount == "2 transactions"

    def test_average_uses_day_of_month_for_month(self, spread):
        result = insights(
            spread.snapshot(),
            date(2024, 6, 1),
            date(2024, 6, 20),
            period="month",
            today=date(2024, 6, 20),
            currency="€",
        )
        average = next(i for i in result if i.title == "Average Daily Spending")

        assert average.value == "€5.05"  # 101.00 / 20
        assert average.amount == "over 20 days"

    def test_average_uses_seven_days_for_week(self, spread):
        result = insights(spread.snapshot(), date(2024, 6, 14), date(2024, 6, 20), period="week")
        average = next(i for i in result if i.title == "Average Daily Spending")

        assert average.value == "$14.43"  # 101.00 / 7

    def test_empty_range_keeps_only_average(self, spread):
        result = insights(spread.snapshot(), date(2030, 1, 1), date(2030, 12, 31), period="year")

        assert [i.title for i in result] == ["Average Daily Spending"]
        assert result[0].value == "$0.00"

    def test_ties_break_by_name(self, ledger):
        """Test that equal totals and counts pick the alphabetically first name."""
        ledger.add_expense("Bus", 10, 2, date(2024, 1, 1))     # Transportation
        ledger.add_expense("Film", 10, 4, date(2024, 1, 2))    # Entertainment

        top, _, _, frequent = insights(ledger.snapshot())

        assert top.value == "Entertainment"
        assert frequent.value == "Entertainment"

    def test_largest_tie_goes_to_most_recent(self, ledger):
        ledger.add_expense("Older", 50, 1, date(2024, 1, 1))
        ledger.add_expense("Newer", 50, 1, date(2024, 1, 1))

        largest = insights(ledger.snapshot())[2]

        assert largest.value == "Newer"

    def test_unknown_category_icons(self, ledger):
        ledger.add_expense("Mystery", 5, 2, date(2024, 1, 1))
        ledger.delete_category(2)

        top, _, largest, frequent = insights(ledger.snapshot())

        assert top.value == "Unknown"
        assert top.icon == "📦"
        assert largest.icon == "💰"
        assert frequent.icon == "🔄"

    def test_insights_are_deterministic(self, spread):
        snapshot = spread.snapshot()

        assert insights(snapshot) == insights(snapshot)
