#!/usr/bin/env python3

import sys
from cli.common import confirm, require_category
from logger import get_logger
from models.category import UNKNOWN_COLOR, UNKNOWN_ICON
from tools.usage import dependent_expense_count, unused_categories, usage_overview

logger = get_logger()


def cmd_list(args, services):
    """List all categories with their usage."""
    snapshot = services.ledger.snapshot()
    currency = services.config.currency

    if not snapshot.categories:
        logger.info("No categories found.")
        return

    overview = usage_overview(snapshot)

    logger.info("\nCategories:")
    logger.info("=" * 80)
    for category, usage in overview.usage:
        logger.info(f"{category.icon} {category.name} (ID: {category.id}, color: {category.color})")
        logger.info(
            f"  {usage.count} transaction(s) • Total: {currency}{usage.total:.2f} "
            f"• Average: {currency}{usage.average:.2f}"
        )
        if snapshot.expenses:
            logger.info(f"  {usage.share:.1f}% of all expenses")
        logger.info("-" * 80)

    logger.info(f"\nTotal categories: {overview.total_categories}")
    logger.info(f"Categories in use: {overview.categories_in_use}")
    logger.info(f"Most transactions in one category: {overview.max_transactions}")
    logger.info(f"Highest category total: {currency}{overview.max_total:.2f}")

    unused = unused_categories(snapshot)
    if unused and snapshot.expenses:
        names = ", ".join(c.name for c in unused)
        logger.info(f"Unused (safe to delete): {names}")


def cmd_create(args, services):
    """Create a new category."""
    name = args.name.strip()
    if not name:
        logger.error("Category name cannot be empty.")
        sys.exit(1)

    category = services.ledger.add_category(name, args.color, args.icon)

    logger.info(f"\n✓ Category created successfully with ID: {category.id}")
    logger.info(f"  {category.icon} {category.name} ({category.color})")


def cmd_edit(args, services):
    """Change a category's name, color or icon."""
    changes = {}
    if args.name is not None:
        if not args.name.strip():
            logger.error("Category name cannot be empty.")
            sys.exit(1)
        changes["name"] = args.name.strip()
    if args.color is not None:
        changes["color"] = args.color
    if args.icon is not None:
        changes["icon"] = args.icon

    if not changes:
        logger.error("Nothing to change. Pass --name, --color or --icon.")
        sys.exit(1)

    category = services.ledger.update_category(args.category_id, **changes)
    if category is None:
        logger.error(f"Category with ID {args.category_id} not found.")
        sys.exit(1)

    logger.info(f"✓ Category updated: {category.icon} {category.name} ({category.color})")


def cmd_delete(args, services):
    """Delete a category by ID, warning when expenses still use it."""
    ledger = services.ledger
    category = ledger.find_category(args.category_id)
    if not category:
        logger.error(f"Category with ID {args.category_id} not found.")
        sys.exit(1)

    target = None
    if args.reassign_to:
        target = require_category(ledger, args.reassign_to)
        if target.id == category.id:
            logger.error("Cannot reassign expenses to the category being deleted.")
            sys.exit(1)

    in_use = dependent_expense_count(ledger.snapshot(), category.id)

    logger.info("\nCategory to delete:")
    logger.info(f"  ID: {category.id}")
    logger.info(f"  Name: {category.icon} {category.name}")

    if in_use and target is None:
        prompt = (
            f"This category has {in_use} expense(s) associated with it. They will "
            f"be shown as 'Unknown'. Are you sure you want to delete it?"
        )
    elif in_use:
        prompt = f"Move {in_use} expense(s) to '{target.name}' and delete this category?"
    else:
        prompt = "Are you sure you want to delete this category?"

    if not confirm(prompt, args.yes):
        logger.info("Deletion cancelled.")
        return

    if target is not None:
        moved = ledger.reassign_category(category.id, target.id)
        logger.info(f"✓ Moved {moved} expense(s) to '{target.name}'")

    ledger.delete_category(category.id)
    logger.info(f"✓ Category '{category.name}' deleted successfully.")


def setup_parser(subparsers):
    """Setup categories subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "categories",
        help="Manage categories",
        description="Create, list, edit and delete expense categories",
    )

    categories_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available category commands",
        dest="subcommand",
        required=True,
    )

    # categories list
    list_parser = categories_subparsers.add_parser(
        "list", help="List all categories with usage statistics"
    )
    list_parser.set_defaults(func=cmd_list)

    # categories create
    create_parser = categories_subparsers.add_parser("create", help="Create a new category")
    create_parser.add_argument("name", help="Category name")
    create_parser.add_argument("--color", default="#4F46E5", help="Display color (default: #4F46E5)")
    create_parser.add_argument("--icon", default=UNKNOWN_ICON, help="Display icon")
    create_parser.set_defaults(func=cmd_create)

    # categories edit
    edit_parser = categories_subparsers.add_parser("edit", help="Change a category")
    edit_parser.add_argument("category_id", type=int, help="ID of the category")
    edit_parser.add_argument("--name", help="New name")
    edit_parser.add_argument("--color", help=f"New display color, e.g. {UNKNOWN_COLOR}")
    edit_parser.add_argument("--icon", help="New display icon")
    edit_parser.set_defaults(func=cmd_edit)

    # categories delete
    delete_parser = categories_subparsers.add_parser(
        "delete", help="Delete a category by ID"
    )
    delete_parser.add_argument(
        "category_id",
        type=int,
        help="ID of the category to delete",
    )
    delete_parser.add_argument(
        "--reassign-to",
        help="Move the category's expenses to this category (name or ID) first",
    )
    delete_parser.add_argument("--yes", action="store_true", help="Do not ask for confirmation")
    delete_parser.set_defaults(func=cmd_delete)
