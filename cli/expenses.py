#!/usr/bin/env python3

import sys
from cli.common import (
    confirm,
    parse_amount,
    parse_date,
    parse_description,
    require_category,
)
from logger import get_logger
from tools.queries import SORT_KEYS, ExpenseFilter, SortState, query_expenses

logger = get_logger()


def _log_expense(expense, snapshot, currency):
    category = snapshot.resolve_category(expense.category_id)
    line = (
        f"{expense.id:>5}  {expense.date.isoformat()}  "
        f"{currency}{expense.amount:>10.2f}  {category.icon} {category.name:<20} "
        f"{expense.description}"
    )
    if expense.notes:
        line += f"  ({expense.notes})"
    logger.info(line)


def cmd_add(args, services):
    """Record a new expense."""
    ledger = services.ledger
    description = parse_description(args.description)
    amount = parse_amount(args.amount)
    category = require_category(ledger, args.category)
    expense_date = parse_date(args.date) if args.date else None

    expense = ledger.add_expense(
        description=description,
        amount=amount,
        category_id=category.id,
        date=expense_date,
        notes=args.notes or None,
    )

    logger.info(f"✓ Expense recorded with ID: {expense.id}")
    logger.info(f"  {expense.date.isoformat()}  {expense.description}")
    logger.info(f"  Amount: {services.config.currency}{expense.amount:.2f}")
    logger.info(f"  Category: {category.icon} {category.name}")


def cmd_list(args, services):
    """List expenses with optional filters and sorting."""
    snapshot = services.ledger.snapshot()
    currency = services.config.currency

    category_id = None
    if args.category:
        category_id = require_category(services.ledger, args.category).id

    criteria = ExpenseFilter(
        category_id=category_id,
        search=args.search,
        date_from=parse_date(args.date_from) if args.date_from else None,
        date_to=parse_date(args.date_to) if args.date_to else None,
    )
    sort = SortState(key=args.sort, descending=not args.ascending)
    result = query_expenses(snapshot, criteria, sort)

    if not result.count:
        if snapshot.expenses:
            logger.info("No expenses match your current filters.")
        else:
            logger.info("No expenses recorded yet.")
        return

    for expense in result.expenses:
        _log_expense(expense, snapshot, currency)

    logger.info("-" * 80)
    logger.info(
        f"{result.count} expense(s) • Total: {currency}{result.total:.2f} "
        f"• Average: {currency}{result.average:.2f}"
    )


def cmd_edit(args, services):
    """Change fields of an existing expense."""
    ledger = services.ledger
    changes = {}

    if args.description is not None:
        changes["description"] = parse_description(args.description)
    if args.amount is not None:
        changes["amount"] = parse_amount(args.amount)
    if args.category is not None:
        changes["category_id"] = require_category(ledger, args.category).id
    if args.date is not None:
        changes["date"] = parse_date(args.date)
    if args.notes is not None:
        changes["notes"] = args.notes or None

    if not changes:
        logger.error("Nothing to change. Pass at least one field option.")
        sys.exit(1)

    expense = ledger.update_expense(args.expense_id, **changes)
    if expense is None:
        logger.error(f"Expense with ID {args.expense_id} not found.")
        sys.exit(1)

    logger.info(f"✓ Expense {expense.id} updated")
    _log_expense(expense, ledger.snapshot(), services.config.currency)


def cmd_delete(args, services):
    """Delete an expense by ID."""
    ledger = services.ledger
    expense = ledger.find_expense(args.expense_id)
    if not expense:
        logger.error(f"Expense with ID {args.expense_id} not found.")
        sys.exit(1)

    _log_expense(expense, ledger.snapshot(), services.config.currency)
    if not confirm("Are you sure you want to delete this expense?", args.yes):
        logger.info("Deletion cancelled.")
        return

    ledger.delete_expense(expense.id)
    logger.info(f"✓ Expense '{expense.description}' deleted successfully.")


def setup_parser(subparsers):
    """Setup expenses subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "expenses",
        help="Record and manage expenses",
        description="Add, list, edit and delete expenses",
    )

    expenses_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available expense commands",
        dest="subcommand",
        required=True,
    )

    # expenses add
    add_parser = expenses_subparsers.add_parser(
        "add",
        help="Record a new expense",
        epilog="""
Examples:
  python -m cli expenses add "Coffee" 4.50 --category "Food & Dining"
  python -m cli expenses add "Train ticket" 12 --category 2 --date 2024-03-01
        """,
    )
    add_parser.add_argument("description", help="What the money was spent on")
    add_parser.add_argument("amount", help="Amount spent (positive number)")
    add_parser.add_argument("--category", required=True, help="Category name or ID")
    add_parser.add_argument("--date", help="Date in YYYY-MM-DD format (default: today)")
    add_parser.add_argument("--notes", help="Optional notes")
    add_parser.set_defaults(func=cmd_add)

    # expenses list
    list_parser = expenses_subparsers.add_parser("list", help="List expenses")
    list_parser.add_argument("--category", help="Only this category (name or ID)")
    list_parser.add_argument("--search", help="Text to find in description or notes")
    list_parser.add_argument("--from", dest="date_from", help="Start date, YYYY-MM-DD")
    list_parser.add_argument("--to", dest="date_to", help="End date, YYYY-MM-DD")
    list_parser.add_argument(
        "--sort", choices=SORT_KEYS, default="date", help="Sort column (default: date)"
    )
    list_parser.add_argument(
        "--ascending", action="store_true", help="Sort ascending instead of descending"
    )
    list_parser.set_defaults(func=cmd_list)

    # expenses edit
    edit_parser = expenses_subparsers.add_parser("edit", help="Change an expense")
    edit_parser.add_argument("expense_id", type=int, help="ID of the expense")
    edit_parser.add_argument("--description", help="New description")
    edit_parser.add_argument("--amount", help="New amount")
    edit_parser.add_argument("--category", help="New category name or ID")
    edit_parser.add_argument("--date", help="New date, YYYY-MM-DD")
    edit_parser.add_argument("--notes", help="New notes (empty string clears them)")
    edit_parser.set_defaults(func=cmd_edit)

    # expenses delete
    delete_parser = expenses_subparsers.add_parser("delete", help="Delete an expense")
    delete_parser.add_argument("expense_id", type=int, help="ID of the expense")
    delete_parser.add_argument("--yes", action="store_true", help="Do not ask for confirmation")
    delete_parser.set_defaults(func=cmd_delete)
