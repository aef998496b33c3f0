#!/usr/bin/env python3

import sys
from cli.common import parse_amount, require_category
from logger import get_logger

logger = get_logger()


def cmd_list(args, services):
    """List all budgets."""
    snapshot = services.ledger.snapshot()

    if not snapshot.budgets:
        logger.info("No budgets found.")
        return

    for budget in snapshot.budgets:
        scope = (
            snapshot.category_name(budget.category_id)
            if budget.category_id is not None
            else "All categories"
        )
        logger.info(
            f"{budget.id:>5}  {services.config.currency}{budget.amount:.2f} "
            f"{budget.period}  {scope}"
        )


def cmd_add(args, services):
    """Create a budget."""
    amount = parse_amount(args.amount)
    category_id = None
    if args.category:
        category_id = require_category(services.ledger, args.category).id

    budget = services.ledger.add_budget(amount, period=args.period, category_id=category_id)
    logger.info(f"✓ Budget created with ID: {budget.id}")


def cmd_edit(args, services):
    """Change a budget's amount or period."""
    changes = {}
    if args.amount is not None:
        changes["amount"] = parse_amount(args.amount)
    if args.period is not None:
        changes["period"] = args.period

    if not changes:
        logger.error("Nothing to change. Pass --amount or --period.")
        sys.exit(1)

    if services.ledger.update_budget(args.budget_id, **changes) is None:
        logger.error(f"Budget with ID {args.budget_id} not found.")
        sys.exit(1)
    logger.info(f"✓ Budget {args.budget_id} updated")


def cmd_delete(args, services):
    """Delete a budget by ID."""
    if not services.ledger.delete_budget(args.budget_id):
        logger.error(f"Budget with ID {args.budget_id} not found.")
        sys.exit(1)
    logger.info(f"✓ Budget {args.budget_id} deleted")


def setup_parser(subparsers):
    """Setup budgets subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "budgets",
        help="Manage budgets",
        description="Create, list, edit and delete spending budgets",
    )

    budgets_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available budget commands",
        dest="subcommand",
        required=True,
    )

    list_parser = budgets_subparsers.add_parser("list", help="List all budgets")
    list_parser.set_defaults(func=cmd_list)

    add_parser = budgets_subparsers.add_parser("add", help="Create a budget")
    add_parser.add_argument("amount", help="Limit per period")
    add_parser.add_argument("--category", help="Category name or ID (default: overall)")
    add_parser.add_argument("--period", default="monthly", help="Period (default: monthly)")
    add_parser.set_defaults(func=cmd_add)

    edit_parser = budgets_subparsers.add_parser("edit", help="Change a budget")
    edit_parser.add_argument("budget_id", type=int, help="ID of the budget")
    edit_parser.add_argument("--amount", help="New limit")
    edit_parser.add_argument("--period", help="New period")
    edit_parser.set_defaults(func=cmd_edit)

    delete_parser = budgets_subparsers.add_parser("delete", help="Delete a budget")
    delete_parser.add_argument("budget_id", type=int, help="ID of the budget")
    delete_parser.set_defaults(func=cmd_delete)
