"""Expense export to CSV and JSON with resolved category names."""

import csv
import json
from typing import Optional, TextIO
from models.snapshot import LedgerSnapshot
from tools.queries import ExpenseFilter, filter_expenses

CSV_HEADER = ["id", "date", "description", "category_name", "amount", "notes", "created_at"]


def export_csv(
    snapshot: LedgerSnapshot, stream: TextIO, criteria: Optional[ExpenseFilter] = None
) -> int:
    """Write expenses as CSV rows.

    Args:
        snapshot: Ledger state to export.
        stream: Text stream opened with newline="".
        criteria: Optional filter limiting which expenses are written.

    Returns:
        Number of expense rows written (header excluded).
    """
    expenses = filter_expenses(snapshot, criteria)
    writer = csv.writer(stream)
    writer.writerow(CSV_HEADER)

    for e in expenses:
        writer.writerow(
            [
                e.id,
                e.date.isoformat(),
                e.description,
                snapshot.category_name(e.category_id),
                f"{e.amount:.2f}",
                e.notes or "",
                e.created_at.isoformat(),
            ]
        )

    return len(expenses)


def export_json(
    snapshot: LedgerSnapshot, stream: TextIO, criteria: Optional[ExpenseFilter] = None
) -> int:
    """Write expenses as a JSON array, each record with its category name.

    Returns:
        Number of expenses written.
    """
    expenses = filter_expenses(snapshot, criteria)
    records = [
        {**e.to_dict(), "category_name": snapshot.category_name(e.category_id)}
        for e in expenses
    ]
    json.dump(records, stream, indent=2, ensure_ascii=False)
    return len(records)
