"""Budget model. Stored and editable, but not used by the analytics."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class Budget:
    """A spending limit for one category, or overall when category_id is None.

    Attributes:
        id: Unique identifier (assigned by the ledger).
        category_id: Optional category the budget applies to.
        amount: Limit for one period.
        period: Period descriptor, e.g. "monthly".
    """

    id: int
    category_id: Optional[int]
    amount: Decimal
    period: str = "monthly"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "category_id": self.category_id,
            "amount": str(self.amount),
            "period": self.period,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Budget":
        category_id = data.get("category_id")
        return cls(
            id=int(data["id"]),
            category_id=int(category_id) if category_id is not None else None,
            amount=Decimal(str(data["amount"])),
            period=str(data.get("period") or "monthly"),
        )
