"""Immutable view of the ledger consumed by every read-side computation."""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple
from models.budget import Budget
from models.category import Category, UNKNOWN_CATEGORY
from models.expense import Expense


@dataclass(frozen=True)
class LedgerSnapshot:
    """The ledger's collections at one instant.

    Attributes:
        expenses: Expenses in canonical order (most recently added first).
        categories: Categories in creation order.
        budgets: Budgets in creation order.
    """

    expenses: Tuple[Expense, ...] = ()
    categories: Tuple[Category, ...] = ()
    budgets: Tuple[Budget, ...] = ()
    _category_index: Dict[int, Category] = field(
        init=False, repr=False, compare=False, default_factory=dict
    )

    def __post_init__(self):
        index = {}
        for category in self.categories:
            # First definition wins if a corrupt slot ever held duplicate ids
            index.setdefault(category.id, category)
        object.__setattr__(self, "_category_index", index)

    def find_category(self, category_id: Optional[int]) -> Optional[Category]:
        """Get a category by ID, or None if it does not exist."""
        if category_id is None:
            return None
        return self._category_index.get(category_id)

    def resolve_category(self, category_id: Optional[int]) -> Category:
        """Get a category by ID, falling back to the "Unknown" category.

        Every read path goes through here so a deleted category never breaks
        a list, aggregate or export.
        """
        return self.find_category(category_id) or UNKNOWN_CATEGORY

    def category_name(self, category_id: Optional[int]) -> str:
        return self.resolve_category(category_id).name
