"""Input parsing shared by the CLI commands.

The ledger accepts whatever it is given; these helpers are where user input
is checked before it reaches it.
"""

import sys
from datetime import date
from decimal import Decimal, InvalidOperation
from logger import get_logger

logger = get_logger()


def parse_amount(text: str) -> Decimal:
    """Parse a positive amount, exiting with an error message otherwise."""
    try:
        amount = Decimal(text)
    except InvalidOperation:
        logger.error(f"Invalid amount: {text}")
        sys.exit(1)

    if not amount.is_finite() or amount <= 0:
        logger.error("Amount must be greater than zero.")
        sys.exit(1)
    return amount


def parse_date(text: str) -> date:
    """Parse a YYYY-MM-DD date, exiting with an error message otherwise."""
    try:
        return date.fromisoformat(text)
    except ValueError:
        logger.error(f"Invalid date '{text}'. Use YYYY-MM-DD format.")
        sys.exit(1)


def parse_description(text: str) -> str:
    description = text.strip()
    if not description:
        logger.error("Description cannot be empty.")
        sys.exit(1)
    return description


def find_category(ledger, category_input: str):
    """Look up a category by ID, then by exact name.

    Returns:
        The Category, or None if nothing matches.
    """
    try:
        category = ledger.find_category(int(category_input))
        if category:
            return category
    except ValueError:
        pass

    # Names are not unique; the first match wins
    return next((c for c in ledger.categories if c.name == category_input), None)


def require_category(ledger, category_input: str):
    """Like find_category, but exits with an error if nothing matches."""
    category = find_category(ledger, category_input)
    if not category:
        logger.error(f"Category '{category_input}' not found.")
        logger.info("Use 'python -m cli categories list' to see available categories.")
        sys.exit(1)
    return category


def confirm(prompt: str, assume_yes: bool = False) -> bool:
    if assume_yes:
        return True
    return input(f"{prompt} (yes/no): ").strip().lower() == "yes"
