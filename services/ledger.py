"""Ledger service: the single owner of expenses, categories and budgets.

The ledger keeps each collection as an immutable tuple in memory and mirrors
it to a slot in the durable store. Every mutator writes the complete new
collection first and only then swaps it into memory, so a failed write
leaves both sides exactly as they were.
"""

import json
import threading
from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from typing import Callable, Dict, List, Optional, Tuple, Union
from config import get_seed_dir
from db.slots import SlotStore
from logger import get_logger
from models.budget import Budget
from models.category import Category
from models.expense import Expense
from models.snapshot import LedgerSnapshot

logger = get_logger("ledger")

EXPENSES = "expenses"
CATEGORIES = "categories"
BUDGETS = "budgets"
SEQUENCES = "sequences"

_EXPENSE_FIELDS = {"description", "amount", "category_id", "date", "notes"}
_CATEGORY_FIELDS = {"name", "color", "icon"}
_BUDGET_FIELDS = {"category_id", "amount", "period"}

# Fields that may be changed but never cleared
_EXPENSE_REQUIRED = {"description", "amount", "date"}
_CATEGORY_REQUIRED = _CATEGORY_FIELDS
_BUDGET_REQUIRED = {"amount", "period"}

Listener = Callable[[str], None]


def load_default_categories() -> List[Category]:
    """Load the default category table installed on first run."""
    seed_file = get_seed_dir() / "categories.json"
    with open(seed_file, "r", encoding="utf-8") as f:
        return [Category.from_dict(record) for record in json.load(f)]


def _to_decimal(value: Union[Decimal, int, float, str]) -> Decimal:
    # str() first so 4.5 becomes Decimal("4.5"), not its binary expansion
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _to_date(value: Union[date, str]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


class LedgerService:
    """Service owning the canonical ledger collections.

    Args:
        slot_store: Storage adapter the collections are persisted through.
        clock: Optional callable returning "now"; defaults to datetime.now.
    """

    def __init__(self, slot_store: SlotStore, clock: Callable[[], datetime] = None):
        self.slot_store = slot_store
        self._clock = clock or datetime.now
        self._lock = threading.RLock()
        self._listeners: List[Listener] = []

        self._expenses: Tuple[Expense, ...] = ()
        self._categories: Tuple[Category, ...] = ()
        self._budgets: Tuple[Budget, ...] = ()
        self._sequences: Dict[str, int] = {}

        self._hydrate()

    # -- hydration -------------------------------------------------------

    def _hydrate(self) -> None:
        """Load every slot, degrading corrupt or missing data to defaults."""
        expenses = self._load_slot(EXPENSES, Expense.from_dict)
        categories = self._load_slot(CATEGORIES, Category.from_dict)
        budgets = self._load_slot(BUDGETS, Budget.from_dict)

        if categories is None:
            logger.info("No stored categories, installing the default set")
            categories = load_default_categories()

        self._expenses = tuple(expenses or ())
        self._categories = tuple(categories)
        self._budgets = tuple(budgets or ())
        self._sequences = self._load_sequences()

        logger.debug(
            f"Ledger loaded: {len(self._expenses)} expenses, "
            f"{len(self._categories)} categories, {len(self._budgets)} budgets"
        )

    def _load_slot(self, slot: str, parse) -> Optional[list]:
        """Parse one slot.

        Returns:
            The parsed records, or None if the slot is absent or unreadable.
        """
        payload = self.slot_store.read(slot)
        if payload is None:
            return None

        try:
            data = json.loads(payload)
            if not isinstance(data, list):
                raise ValueError(f"expected a list, got {type(data).__name__}")
            return [parse(record) for record in data]
        except (ValueError, KeyError, TypeError, ArithmeticError) as e:
            logger.warning(
                f"Stored '{slot}' data is corrupt and was ignored ({e}); "
                f"starting with an empty collection"
            )
            return None

    def _load_sequences(self) -> Dict[str, int]:
        """Rebuild id counters so no id in use is ever handed out again."""
        stored = {}
        payload = self.slot_store.read(SEQUENCES)
        if payload is not None:
            try:
                stored = {k: int(v) for k, v in json.loads(payload).items()}
            except (ValueError, TypeError, AttributeError) as e:
                logger.warning(f"Stored id counters are corrupt and were rebuilt ({e})")
                stored = {}

        sequences = {}
        for slot, items in (
            (EXPENSES, self._expenses),
            (CATEGORIES, self._categories),
            (BUDGETS, self._budgets),
        ):
            highest = max((item.id for item in items), default=0)
            sequences[slot] = max(stored.get(slot, 0), highest)
        return sequences

    # -- observers -------------------------------------------------------

    def subscribe(self, listener: Listener) -> None:
        """Register a callback invoked with the slot name after each mutation."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, slot: str) -> None:
        # Runs after the change is saved; listener errors are logged, not raised
        for listener in list(self._listeners):
            try:
                listener(slot)
            except Exception:
                logger.exception(f"Listener {listener!r} failed on '{slot}' change")

    # -- reads -----------------------------------------------------------

    def snapshot(self) -> LedgerSnapshot:
        """Get an immutable view of the current ledger state."""
        with self._lock:
            return LedgerSnapshot(
                expenses=self._expenses,
                categories=self._categories,
                budgets=self._budgets,
            )

    @property
    def expenses(self) -> Tuple[Expense, ...]:
        return self._expenses

    @property
    def categories(self) -> Tuple[Category, ...]:
        return self._categories

    @property
    def budgets(self) -> Tuple[Budget, ...]:
        return self._budgets

    def find_expense(self, expense_id: int) -> Optional[Expense]:
        """Get a single expense by ID, or None if not found."""
        return next((e for e in self._expenses if e.id == expense_id), None)

    def find_category(self, category_id: int) -> Optional[Category]:
        """Get a single category by ID, or None if not found."""
        return next((c for c in self._categories if c.id == category_id), None)

    def find_budget(self, budget_id: int) -> Optional[Budget]:
        """Get a single budget by ID, or None if not found."""
        return next((b for b in self._budgets if b.id == budget_id), None)

    # -- persistence -----------------------------------------------------

    def _next_id(self, slot: str) -> int:
        return self._sequences.get(slot, 0) + 1

    def _commit(self, slot: str, items: tuple, sequences: Dict[str, int] = None) -> None:
        """Persist a whole collection, then make it the in-memory state.

        Raises:
            StorageError: If the durable store refuses the write. In-memory
                state is left untouched.
        """
        slots = {slot: [item.to_dict() for item in items]}
        if sequences is not None:
            slots[SEQUENCES] = sequences

        self.slot_store.write_many(slots)

        setattr(self, f"_{slot}", items)
        if sequences is not None:
            self._sequences = sequences

        self._notify(slot)

    def _allocate(self, slot: str) -> Tuple[int, Dict[str, int]]:
        new_id = self._next_id(slot)
        return new_id, {**self._sequences, slot: new_id}

    @staticmethod
    def _check_fields(changes: dict, allowed: set, required: set, entity: str) -> None:
        unknown = set(changes) - allowed
        if unknown:
            raise ValueError(f"Unsupported {entity} field names: {sorted(unknown)}")

        cleared = sorted(name for name in required if name in changes and changes[name] is None)
        if cleared:
            raise ValueError(f"Cannot clear required {entity} fields: {cleared}")

    # -- expenses --------------------------------------------------------

    def add_expense(
        self,
        description: str,
        amount: Union[Decimal, int, float, str],
        category_id: Optional[int],
        date: Union[date, str, None] = None,
        notes: Optional[str] = None,
    ) -> Expense:
        """Record a new expense.

        Input is taken as given; checking for an empty description or a
        non-positive amount is the caller's job.

        Args:
            description: Display text.
            amount: Positive amount.
            category_id: Category the expense belongs to.
            date: Day the expense occurred, defaults to today.
            notes: Optional free text.

        Returns:
            The created Expense, which is also now first in the collection.
        """
        with self._lock:
            now = self._clock()
            expense_id, sequences = self._allocate(EXPENSES)
            expense = Expense(
                id=expense_id,
                description=description,
                amount=_to_decimal(amount),
                category_id=category_id,
                date=_to_date(date) if date is not None else now.date(),
                notes=notes,
                created_at=now,
            )
            self._commit(EXPENSES, (expense,) + self._expenses, sequences)

        logger.debug(f"Added expense {expense.id}: {expense.description} {expense.amount}")
        return expense

    def update_expense(self, expense_id: int, **changes) -> Optional[Expense]:
        """Merge changed fields onto an existing expense.

        Args:
            expense_id: ID of the expense to change.
            **changes: Any of description, amount, category_id, date, notes.
                Fields not given keep their current values.

        Returns:
            The updated Expense, or None if no expense has that ID.

        Raises:
            ValueError: If an unsupported field name is given (id and
                created_at cannot be changed), or if description, amount or
                date is set to None.
        """
        self._check_fields(changes, _EXPENSE_FIELDS, _EXPENSE_REQUIRED, "expense")
        if "amount" in changes:
            changes["amount"] = _to_decimal(changes["amount"])
        if "date" in changes:
            changes["date"] = _to_date(changes["date"])

        with self._lock:
            current = self.find_expense(expense_id)
            if current is None:
                logger.debug(f"Update skipped, no expense with ID {expense_id}")
                return None

            updated = replace(current, **changes)
            self._commit(
                EXPENSES,
                tuple(updated if e.id == expense_id else e for e in self._expenses),
            )

        return updated

    def delete_expense(self, expense_id: int) -> bool:
        """Delete an expense by ID.

        Returns:
            True if an expense was deleted, False if none had that ID.
        """
        with self._lock:
            remaining = tuple(e for e in self._expenses if e.id != expense_id)
            if len(remaining) == len(self._expenses):
                return False
            self._commit(EXPENSES, remaining)

        logger.debug(f"Deleted expense {expense_id}")
        return True

    # -- categories ------------------------------------------------------

    def add_category(self, name: str, color: str, icon: str) -> Category:
        """Create a new category, appended after the existing ones."""
        with self._lock:
            category_id, sequences = self._allocate(CATEGORIES)
            category = Category(id=category_id, name=name, color=color, icon=icon)
            self._commit(CATEGORIES, self._categories + (category,), sequences)

        logger.debug(f"Added category {category.id}: {category.name}")
        return category

    def update_category(self, category_id: int, **changes) -> Optional[Category]:
        """Merge changed fields (name, color, icon) onto a category.

        Returns:
            The updated Category, or None if not found.
        """
        self._check_fields(changes, _CATEGORY_FIELDS, _CATEGORY_REQUIRED, "category")

        with self._lock:
            current = self.find_category(category_id)
            if current is None:
                return None

            updated = replace(current, **changes)
            self._commit(
                CATEGORIES,
                tuple(updated if c.id == category_id else c for c in self._categories),
            )

        return updated

    def delete_category(self, category_id: int) -> bool:
        """Delete a category by ID.

        Expenses that reference the category are left alone and resolve to
        "Unknown" from then on. Use reassign_category() first to move them.

        Returns:
            True if a category was deleted, False if not found.
        """
        with self._lock:
            remaining = tuple(c for c in self._categories if c.id != category_id)
            if len(remaining) == len(self._categories):
                return False
            self._commit(CATEGORIES, remaining)

        logger.debug(f"Deleted category {category_id}")
        return True

    def reassign_category(self, from_category_id: int, to_category_id: Optional[int]) -> int:
        """Move every expense in one category to another.

        Returns:
            Number of expenses moved.
        """
        with self._lock:
            moved = 0
            expenses = []
            for expense in self._expenses:
                if expense.category_id == from_category_id:
                    expense = replace(expense, category_id=to_category_id)
                    moved += 1
                expenses.append(expense)

            if moved:
                self._commit(EXPENSES, tuple(expenses))

        logger.debug(f"Moved {moved} expense(s) from category {from_category_id} to {to_category_id}")
        return moved

    # -- budgets ---------------------------------------------------------

    def add_budget(
        self,
        amount: Union[Decimal, int, float, str],
        period: str = "monthly",
        category_id: Optional[int] = None,
    ) -> Budget:
        """Create a new budget."""
        with self._lock:
            budget_id, sequences = self._allocate(BUDGETS)
            budget = Budget(
                id=budget_id,
                category_id=category_id,
                amount=_to_decimal(amount),
                period=period,
            )
            self._commit(BUDGETS, self._budgets + (budget,), sequences)

        return budget

    def update_budget(self, budget_id: int, **changes) -> Optional[Budget]:
        """Merge changed fields (category_id, amount, period) onto a budget."""
        self._check_fields(changes, _BUDGET_FIELDS, _BUDGET_REQUIRED, "budget")
        if "amount" in changes:
            changes["amount"] = _to_decimal(changes["amount"])

        with self._lock:
            current = self.find_budget(budget_id)
            if current is None:
                return None

            updated = replace(current, **changes)
            self._commit(
                BUDGETS,
                tuple(updated if b.id == budget_id else b for b in self._budgets),
            )

        return updated

    def delete_budget(self, budget_id: int) -> bool:
        """Delete a budget by ID. Returns False if not found."""
        with self._lock:
            remaining = tuple(b for b in self._budgets if b.id != budget_id)
            if len(remaining) == len(self._budgets):
                return False
            self._commit(BUDGETS, remaining)

        return True
