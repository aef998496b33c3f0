"""Expense list queries: filtering, sorting and filtered totals.

Nothing here mutates the ledger; every function works on a LedgerSnapshot.
"""

import locale
import unicodedata
from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from typing import Callable, Dict, Optional, Tuple
from models.expense import Expense
from models.snapshot import LedgerSnapshot

SORT_KEYS = ("date", "amount", "description", "category")


@dataclass(frozen=True)
class ExpenseFilter:
    """Filter criteria for an expense list. Unset criteria match everything.

    Attributes:
        category_id: Exact category match.
        search: Case-insensitive substring of description or notes.
        date_from: Inclusive lower bound on the expense date.
        date_to: Inclusive upper bound on the expense date.
    """

    category_id: Optional[int] = None
    search: Optional[str] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None

    def matches(self, expense: Expense) -> bool:
        if self.category_id is not None and expense.category_id != self.category_id:
            return False

        if self.search:
            needle = self.search.casefold()
            in_description = needle in expense.description.casefold()
            in_notes = bool(expense.notes) and needle in expense.notes.casefold()
            if not (in_description or in_notes):
                return False

        if self.date_from is not None and expense.date < self.date_from:
            return False
        if self.date_to is not None and expense.date > self.date_to:
            return False

        return True


@dataclass(frozen=True)
class SortState:
    """Current sort column and direction of an expense list."""

    key: str = "date"
    descending: bool = True

    def __post_init__(self):
        if self.key not in SORT_KEYS:
            raise ValueError(f"Unknown sort key: {self.key}. Use one of: {', '.join(SORT_KEYS)}")

    def toggle(self, key: str) -> "SortState":
        """Select a sort column.

        Selecting the current column flips the direction; selecting a new
        column starts it descending.
        """
        if key == self.key:
            return replace(self, descending=not self.descending)
        return SortState(key=key, descending=True)


@dataclass(frozen=True)
class QueryResult:
    """A filtered and sorted expense list with totals over the filtered set."""

    expenses: Tuple[Expense, ...]
    count: int
    total: Decimal

    @property
    def average(self) -> Decimal:
        if not self.count:
            return Decimal("0")
        return self.total / self.count


def collation_key(text: str) -> Tuple[str, str]:
    """Sort key for display text that follows the active locale.

    Accents are compared after the base letters, so "Éclair" sorts with the
    other "e" words even when the process runs under the C locale.
    """
    decomposed = unicodedata.normalize("NFKD", text.casefold())
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return locale.strxfrm(base), locale.strxfrm(decomposed)


def _sort_key(snapshot: LedgerSnapshot, key: str) -> Callable[[Expense], object]:
    keys: Dict[str, Callable[[Expense], object]] = {
        "date": lambda e: e.date,
        "amount": lambda e: e.amount,
        "description": lambda e: collation_key(e.description),
        "category": lambda e: collation_key(snapshot.category_name(e.category_id)),
    }
    return keys[key]


def filter_expenses(
    snapshot: LedgerSnapshot, criteria: Optional[ExpenseFilter] = None
) -> Tuple[Expense, ...]:
    """Get the expenses matching the criteria, in canonical order."""
    if criteria is None:
        return snapshot.expenses
    return tuple(e for e in snapshot.expenses if criteria.matches(e))


def sort_expenses(
    snapshot: LedgerSnapshot, expenses, sort: Optional[SortState] = None
) -> Tuple[Expense, ...]:
    """Sort expenses by one column.

    The sort is stable in both directions, so expenses with equal keys keep
    their canonical (most recent first) order.
    """
    sort = sort or SortState()
    return tuple(
        sorted(expenses, key=_sort_key(snapshot, sort.key), reverse=sort.descending)
    )


def query_expenses(
    snapshot: LedgerSnapshot,
    criteria: Optional[ExpenseFilter] = None,
    sort: Optional[SortState] = None,
) -> QueryResult:
    """Filter and sort the expense list.

    Args:
        snapshot: Ledger state to read.
        criteria: Optional filter; None returns every expense.
        sort: Optional sort state; defaults to date, newest first.

    Returns:
        QueryResult whose count and total cover the filtered expenses.
    """
    filtered = filter_expenses(snapshot, criteria)
    total = sum((e.amount for e in filtered), Decimal("0"))

    return QueryResult(
        expenses=sort_expenses(snapshot, filtered, sort),
        count=len(filtered),
        total=total,
    )


def recent_expenses(snapshot: LedgerSnapshot, limit: int = 5) -> Tuple[Expense, ...]:
    """Get the most recently added expenses."""
    return snapshot.expenses[:limit]
