"""Category model for expense categorization."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Category:
    """Represents a user-defined expense category.

    Attributes:
        id: Unique identifier (assigned by the ledger).
        name: Display name. Not required to be unique.
        color: Display color token, e.g. "#FF6B6B".
        icon: Display glyph, e.g. an emoji.
    """

    id: int
    name: str
    color: str
    icon: str

    def to_dict(self) -> dict:
        """Convert category to a JSON-safe record for slot storage."""
        return {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "icon": self.icon,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Category":
        """Build a category from a stored record."""
        return cls(
            id=int(data["id"]),
            name=str(data["name"]),
            color=str(data.get("color") or UNKNOWN_COLOR),
            icon=str(data.get("icon") or UNKNOWN_ICON),
        )


UNKNOWN_NAME = "Unknown"
UNKNOWN_COLOR = "#9B9B9B"
UNKNOWN_ICON = "📦"

# Stand-in for expenses whose category no longer exists
UNKNOWN_CATEGORY = Category(id=0, name=UNKNOWN_NAME, color=UNKNOWN_COLOR, icon=UNKNOWN_ICON)
