"""Tests for expense export."""

import csv
import io
import json
from datetime import date
from decimal import Decimal

from tools.export import CSV_HEADER, export_csv, export_json
from tools.queries import ExpenseFilter


class TestExportCsv:
    """Tests for export_csv."""

    def test_rows_with_resolved_category_names(self, ledger):
        ledger.add_expense("Coffee", Decimal("4.5"), 1, date(2024, 3, 1), "oat milk")
        ledger.add_expense("Bus", Decimal("2"), 2, date(2024, 3, 2))
        ledger.delete_category(2)

        buffer = io.StringIO()
        count = export_csv(ledger.snapshot(), buffer)
        rows = list(csv.reader(io.StringIO(buffer.getvalue())))

        assert count == 2
        assert rows[0] == CSV_HEADER
        assert rows[1][1:6] == ["2024-03-02", "Bus", "Unknown", "2.00", ""]
        assert rows[2][1:6] == ["2024-03-01", "Coffee", "Food & Dining", "4.50", "oat milk"]

    def test_filter_limits_rows(self, ledger):
        ledger.add_expense("Coffee", 4, 1, date(2024, 3, 1))
        ledger.add_expense("Bus", 2, 2, date(2024, 3, 2))

        buffer = io.StringIO()
        count = export_csv(ledger.snapshot(), buffer, ExpenseFilter(category_id=1))

        assert count == 1
        assert "Bus" not in buffer.getvalue()

    def test_empty_ledger_writes_header_only(self, ledger):
        buffer = io.StringIO()

        assert export_csv(ledger.snapshot(), buffer) == 0
        assert buffer.getvalue().strip() == ",".join(CSV_HEADER)


class TestExportJson:
    """Tests for export_json."""

    def test_records_include_category_name(self, ledger):
        expense = ledger.add_expense("Coffee", "4.50", 1, date(2024, 3, 1))

        buffer = io.StringIO()
        count = export_json(ledger.snapshot(), buffer)
        records = json.loads(buffer.getvalue())

        assert count == 1
        assert records[0]["id"] == expense.id
        assert records[0]["amount"] == "4.50"
        assert records[0]["date"] == "2024-03-01"
        assert records[0]["category_name"] == "Food & Dining"
