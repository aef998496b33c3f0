"""Spending aggregates: totals, category breakdowns, time series and insights.

Every function is a pure computation over a LedgerSnapshot; calling one twice
on the same snapshot always gives the same answer.
"""

import calendar
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Tuple
from models.category import UNKNOWN_CATEGORY
from models.expense import Expense
from models.snapshot import LedgerSnapshot
from tools.periods import period_days
from tools.queries import ExpenseFilter, collation_key, filter_expenses

MONTH_LABELS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
                "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
WEEKDAY_LABELS = ("Sunday", "Monday", "Tuesday", "Wednesday",
                  "Thursday", "Friday", "Saturday")

_ZERO = Decimal("0")


@dataclass(frozen=True)
class Series:
    """Chart-ready data: a label per bucket and a parallel value sequence."""

    labels: Tuple[str, ...]
    values: Tuple[Decimal, ...]

    @property
    def total(self) -> Decimal:
        return sum(self.values, _ZERO)


@dataclass(frozen=True)
class CategoryTotal:
    """Spending for one category name within a date range.

    Attributes:
        name: Resolved category name ("Unknown" for deleted categories).
        total: Sum of amounts.
        count: Number of expenses.
        color: Display color from the current category table.
        icon: Display glyph from the current category table.
        category_id: ID of the first category seen with this name, or None
            for the "Unknown" group.
    """

    name: str
    total: Decimal
    count: int
    color: str
    icon: str
    category_id: Optional[int] = None

    def percent_of(self, grand_total: Decimal) -> Decimal:
        if not grand_total:
            return _ZERO
        return self.total / grand_total * 100


@dataclass(frozen=True)
class Insight:
    """One headline figure for the analytics view."""

    title: str
    value: str
    amount: str
    icon: str
    color: str


def _in_range(snapshot: LedgerSnapshot, start: Optional[date], end: Optional[date]):
    return filter_expenses(snapshot, ExpenseFilter(date_from=start, date_to=end))


def total_in_range(
    snapshot: LedgerSnapshot, start: Optional[date] = None, end: Optional[date] = None
) -> Decimal:
    """Sum of amounts for expenses dated within [start, end].

    A missing bound leaves that side open, so (None, None) is all time.
    """
    return sum((e.amount for e in _in_range(snapshot, start, end)), _ZERO)


def totals_by_category(
    snapshot: LedgerSnapshot, start: Optional[date] = None, end: Optional[date] = None
) -> List[CategoryTotal]:
    """Group spending in a date range by category name.

    Groups appear in the order their first expense is met in the ledger.
    Expenses whose category was deleted are grouped under "Unknown". Colors
    and icons come from the categories as they are now, not as they were
    when the expense was recorded.
    """
    groups: Dict[str, dict] = {}

    for expense in _in_range(snapshot, start, end):
        category = snapshot.find_category(expense.category_id)
        resolved = category or UNKNOWN_CATEGORY

        group = groups.get(resolved.name)
        if group is None:
            group = groups[resolved.name] = {
                "total": _ZERO,
                "count": 0,
                "color": resolved.color,
                "icon": resolved.icon,
                "category_id": category.id if category else None,
            }
        group["total"] += expense.amount
        group["count"] += 1

    return [CategoryTotal(name=name, **group) for name, group in groups.items()]


def category_series(totals: List[CategoryTotal]) -> Series:
    """Turn a category breakdown into chart labels and values."""
    return Series(
        labels=tuple(t.name for t in totals),
        values=tuple(t.total for t in totals),
    )


def monthly_series(snapshot: LedgerSnapshot, year: int) -> Series:
    """Spending per calendar month of a year, January first. Always 12 values."""
    buckets = [_ZERO] * 12
    for expense in snapshot.expenses:
        if expense.date.year == year:
            buckets[expense.date.month - 1] += expense.amount
    return Series(labels=MONTH_LABELS, values=tuple(buckets))


def weekly_series(
    snapshot: LedgerSnapshot, start: Optional[date] = None, end: Optional[date] = None
) -> Series:
    """Spending by day of week across a whole date range, Sunday first.

    Buckets pool every matching week together: index 1 is all Monday
    spending in the range.
    """
    buckets = [_ZERO] * 7
    for expense in _in_range(snapshot, start, end):
        # date.weekday() counts from Monday
        buckets[(expense.date.weekday() + 1) % 7] += expense.amount
    return Series(labels=WEEKDAY_LABELS, values=tuple(buckets))


def daily_series(snapshot: LedgerSnapshot, year: int, month: int) -> Series:
    """Spending per day of one month; index 0 is the 1st."""
    days_in_month = calendar.monthrange(year, month)[1]
    buckets = [_ZERO] * days_in_month
    for expense in snapshot.expenses:
        if expense.date.year == year and expense.date.month == month:
            buckets[expense.date.day - 1] += expense.amount
    return Series(
        labels=tuple(str(day) for day in range(1, days_in_month + 1)),
        values=tuple(buckets),
    )


def _money(amount: Decimal, currency: str) -> str:
    return f"{currency}{amount:.2f}"


def _top_category(totals: List[CategoryTotal]) -> Optional[CategoryTotal]:
    # Ties go to the alphabetically first name
    if not totals:
        return None
    return min(totals, key=lambda t: (-t.total, collation_key(t.name)))


def _most_frequent(totals: List[CategoryTotal]) -> Optional[CategoryTotal]:
    if not totals:
        return None
    return min(totals, key=lambda t: (-t.count, collation_key(t.name)))


def _largest(expenses: Tuple[Expense, ...]) -> Optional[Expense]:
    # max() keeps the first of equal amounts, i.e. the most recently added
    if not expenses:
        return None
    return max(expenses, key=lambda e: e.amount)


def insights(
    snapshot: LedgerSnapshot,
    start: Optional[date] = None,
    end: Optional[date] = None,
    period: str = "all",
    today: Optional[date] = None,
    currency: str = "$",
) -> List[Insight]:
    """Headline figures for a date range.

    Produces, in order: the top spending category, the average daily
    spending, the largest single expense and the most frequent category.
    The category and expense entries are left out when nothing falls in the
    range; an empty ledger gives no insights at all.

    Args:
        snapshot: Ledger state to read.
        start: Inclusive range start, None for open.
        end: Inclusive range end, None for open.
        period: Period name the range came from; picks the day count used
            for the daily average (see tools.periods.period_days).
        today: Reference day for the "month" day count.
        currency: Symbol prefixed to formatted amounts.

    Returns:
        List of Insight objects.
    """
    if not snapshot.expenses:
        return []

    results = []
    expenses = _in_range(snapshot, start, end)
    totals = totals_by_category(snapshot, start, end)

    top = _top_category(totals)
    if top is not None:
        results.append(Insight(
            title="Top Spending Category",
            value=top.name,
            amount=_money(top.total, currency),
            icon=top.icon,
            color="text-red-600",
        ))

    days = period_days(period, today)
    average = sum((e.amount for e in expenses), _ZERO) / days
    results.append(Insight(
        title="Average Daily Spending",
        value=_money(average, currency),
        amount=f"over {days} days",
        icon="📅",
        color="text-blue-600",
    ))

    largest = _largest(expenses)
    if largest is not None:
        category = snapshot.find_category(largest.category_id)
        results.append(Insight(
            title="Largest Single Expense",
            value=largest.description,
            amount=_money(largest.amount, currency),
            icon=category.icon if category else "💰",
            color="text-purple-600",
        ))

    frequent = _most_frequent(totals)
    if frequent is not None:
        results.append(Insight(
            title="Most Frequent Category",
            value=frequent.name,
            amount=f"{frequent.count} transactions",
            icon=frequent.icon if frequent.category_id is not None else "🔄",
            color="text-green-600",
        ))

    return results
