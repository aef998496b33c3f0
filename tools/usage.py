"""Per-category usage statistics for category management."""

from dataclasses import dataclass
from decimal import Decimal
from typing import List
from models.category import Category
from models.snapshot import LedgerSnapshot


@dataclass(frozen=True)
class CategoryUsage:
    """How much one category is used across the whole ledger.

    Attributes:
        count: Number of expenses referencing the category.
        total: Sum of their amounts.
        average: Mean amount, 0 when unused.
        share: Percentage of all expenses (by count) in this category.
    """

    count: int
    total: Decimal
    average: Decimal
    share: Decimal


@dataclass(frozen=True)
class UsageOverview:
    """Usage for every category plus summary figures."""

    usage: List[tuple]  # (Category, CategoryUsage) pairs in category order
    total_categories: int
    categories_in_use: int
    max_transactions: int
    max_total: Decimal


def category_usage(snapshot: LedgerSnapshot, category_id: int) -> CategoryUsage:
    """Compute usage statistics for one category.

    The share is measured against every expense in the ledger, not a
    filtered range.
    """
    amounts = [e.amount for e in snapshot.expenses if e.category_id == category_id]
    count = len(amounts)
    total = sum(amounts, Decimal("0"))
    all_count = len(snapshot.expenses)

    return CategoryUsage(
        count=count,
        total=total,
        average=total / count if count else Decimal("0"),
        share=Decimal(count * 100) / all_count if all_count else Decimal("0"),
    )


def dependent_expense_count(snapshot: LedgerSnapshot, category_id: int) -> int:
    """Number of expenses that would be left pointing at a deleted category.

    Callers use a non-zero count to warn before deleting.
    """
    return sum(1 for e in snapshot.expenses if e.category_id == category_id)


def usage_overview(snapshot: LedgerSnapshot) -> UsageOverview:
    """Compute usage for every category in the ledger."""
    usage: List[tuple] = [
        (category, category_usage(snapshot, category.id))
        for category in snapshot.categories
    ]
    stats = [u for _, u in usage]

    return UsageOverview(
        usage=usage,
        total_categories=len(usage),
        categories_in_use=sum(1 for u in stats if u.count > 0),
        max_transactions=max((u.count for u in stats), default=0),
        max_total=max((u.total for u in stats), default=Decimal("0")),
    )


def unused_categories(snapshot: LedgerSnapshot) -> List[Category]:
    """Categories no expense refers to; safe to delete without a warning."""
    used = {e.category_id for e in snapshot.expenses}
    return [c for c in snapshot.categories if c.id not in used]
