#!/usr/bin/env python3
"""
Spendlog CLI - Record expenses and see where the money goes.

Usage:
    python -m cli <command> <subcommand> [options]

Commands:
    expenses     Record and manage expenses
    categories   Manage categories
    budgets      Manage budgets
    reports      Summaries, time series and export
    migrate      Database migrations

Examples:
    python -m cli expenses add "Coffee" 4.50 --category "Food & Dining"
    python -m cli expenses list --search lunch --sort amount
    python -m cli categories list
    python -m cli reports summary --period month
    python -m cli reports export --output expenses.csv
"""

import locale
import sys
import argparse
from cli import budgets, categories, expenses, migrate, reports
from config import load_config
from db.manager import DatabaseManager
from db.slots import StorageError
from logger import get_logger, setup_logging
from services.base import Services


def _use_system_collation():
    """Sort text by the user's locale rather than the C default."""
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as e:
        get_logger("cli").debug(f"Keeping default collation: {e}")


def main():
    """Main CLI entry point with subcommands."""
    parser = argparse.ArgumentParser(
        prog="cli",
        description="Spendlog - Personal expense tracking",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
        required=True,
    )

    expenses.setup_parser(subparsers)
    categories.setup_parser(subparsers)
    budgets.setup_parser(subparsers)
    reports.setup_parser(subparsers)
    migrate.setup_parser(subparsers)

    args = parser.parse_args()

    if not hasattr(args, "func"):
        parser.print_help()
        sys.exit(1)

    try:
        config = load_config()
        setup_logging(config)
        _use_system_collation()
        db_manager = DatabaseManager(config)

        if args.command == "migrate":
            args.func(args, db_manager)
            return

        # Ledger commands always run against an up-to-date schema
        db_manager.migrate()
        services = Services(config, db_manager=db_manager)
        args.func(args, services)
    except StorageError as e:
        print(f"Error: your change was not saved. {e}")
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
