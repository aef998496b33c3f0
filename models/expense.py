from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class Expense:
    id: int
    description: str
    amount: Decimal  # always positive
    category_id: Optional[int]  # weak reference, may dangle
    date: date  # day the money was spent, no time component
    notes: Optional[str]
    created_at: datetime

    def to_dict(self) -> dict:
        """Convert expense to a JSON-safe record for slot storage."""
        return {
            "id": self.id,
            "description": self.description,
            "amount": str(self.amount),
            "category_id": self.category_id,
            "date": self.date.isoformat(),
            "notes": self.notes,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Expense":
        """Build an expense from a stored record.

        Raises:
            KeyError, ValueError, TypeError, decimal.InvalidOperation: If the
                record does not have the expected shape.
        """
        category_id = data.get("category_id")
        return cls(
            id=int(data["id"]),
            description=str(data["description"]),
            amount=Decimal(str(data["amount"])),
            category_id=int(category_id) if category_id is not None else None,
            date=date.fromisoformat(data["date"]),
            notes=data.get("notes"),
            created_at=datetime.fromisoformat(data["created_at"]),
        )
