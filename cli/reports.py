#!/usr/bin/env python3

import sys
from datetime import date
from pathlib import Path
from cli.common import parse_date, require_category
from logger import get_logger
from tools.aggregation import (
    daily_series,
    insights,
    monthly_series,
    total_in_range,
    totals_by_category,
    weekly_series,
)
from tools.export import export_csv, export_json
from tools.periods import PERIODS, period_range
from tools.queries import ExpenseFilter, recent_expenses

logger = get_logger()


def _log_series(series, currency):
    width = max((len(label) for label in series.labels), default=0)
    for label, value in zip(series.labels, series.values):
        logger.info(f"  {label:<{width}}  {currency}{value:>10.2f}")
    logger.info(f"  {'Total':<{width}}  {currency}{series.total:>10.2f}")


def cmd_summary(args, services):
    """Show totals, the category breakdown and insights for a period."""
    snapshot = services.ledger.snapshot()
    currency = services.config.currency

    try:
        start, end = period_range(args.period, year=args.year)
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)

    label = "all time" if start is None else f"{start.isoformat()} to {end.isoformat()}"
    total = total_in_range(snapshot, start, end)

    logger.info(f"\nSpending summary ({label})")
    logger.info("=" * 80)
    logger.info(f"Total spent: {currency}{total:.2f}")

    totals = totals_by_category(snapshot, start, end)
    if totals:
        logger.info("\nBy category:")
        for group in sorted(totals, key=lambda t: t.total, reverse=True):
            logger.info(
                f"  {group.icon} {group.name:<24} {currency}{group.total:>10.2f}  "
                f"{group.percent_of(total):5.1f}%  ({group.count})"
            )

    found = insights(
        snapshot, start, end, period=args.period, currency=currency
    )
    if found:
        logger.info("\nInsights:")
        for insight in found:
            logger.info(f"  {insight.icon} {insight.title}: {insight.value} ({insight.amount})")

    recent = recent_expenses(snapshot)
    if recent:
        logger.info("\nRecent expenses:")
        for expense in recent:
            logger.info(
                f"  {expense.date.isoformat()}  {currency}{expense.amount:>10.2f}  "
                f"{expense.description} • {snapshot.category_name(expense.category_id)}"
            )


def cmd_monthly(args, services):
    """Show spending per month of a year."""
    year = args.year or date.today().year
    logger.info(f"\nMonthly spending for {year}")
    _log_series(monthly_series(services.ledger.snapshot(), year), services.config.currency)


def cmd_weekly(args, services):
    """Show spending by day of week over a period."""
    start, end = period_range(args.period, year=args.year)
    logger.info(f"\nSpending by day of week ({args.period})")
    _log_series(
        weekly_series(services.ledger.snapshot(), start, end), services.config.currency
    )


def cmd_daily(args, services):
    """Show spending per day of a month."""
    today = date.today()
    year = args.year or today.year
    month = args.month or today.month
    if not 1 <= month <= 12:
        logger.error("Month must be between 1 and 12")
        sys.exit(1)

    logger.info(f"\nDaily spending for {year}/{month:02d}")
    _log_series(
        daily_series(services.ledger.snapshot(), year, month), services.config.currency
    )


def cmd_export(args, services):
    """Export expenses to a CSV or JSON file."""
    category_id = None
    if args.category:
        category_id = require_category(services.ledger, args.category).id

    criteria = ExpenseFilter(
        category_id=category_id,
        search=args.search,
        date_from=parse_date(args.date_from) if args.date_from else None,
        date_to=parse_date(args.date_to) if args.date_to else None,
    )

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    snapshot = services.ledger.snapshot()

    with open(output_path, "w", newline="", encoding="utf-8") as f:
        if args.format == "json":
            count = export_json(snapshot, f, criteria)
        else:
            count = export_csv(snapshot, f, criteria)

    logger.info(f"✓ Exported {count} expense(s) to: {output_path}")


def setup_parser(subparsers):
    """Setup reports subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "reports",
        help="Spending reports and export",
        description="Summaries, time series and export of recorded expenses",
    )

    reports_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available report commands",
        dest="subcommand",
        required=True,
    )

    summary_parser = reports_subparsers.add_parser(
        "summary",
        help="Totals, category breakdown and insights",
        epilog="""
Examples:
  python -m cli reports summary --period month
  python -m cli reports summary --period year --year 2024
        """,
    )
    summary_parser.add_argument("--period", choices=PERIODS, default="month")
    summary_parser.add_argument("--year", type=int, help="Year for --period year")
    summary_parser.set_defaults(func=cmd_summary)

    monthly_parser = reports_subparsers.add_parser("monthly", help="Spending per month")
    monthly_parser.add_argument("--year", type=int, help="Year (default: current)")
    monthly_parser.set_defaults(func=cmd_monthly)

    weekly_parser = reports_subparsers.add_parser("weekly", help="Spending by day of week")
    weekly_parser.add_argument("--period", choices=PERIODS, default="all")
    weekly_parser.add_argument("--year", type=int, help="Year for --period year")
    weekly_parser.set_defaults(func=cmd_weekly)

    daily_parser = reports_subparsers.add_parser("daily", help="Spending per day of a month")
    daily_parser.add_argument("--year", type=int, help="Year (default: current)")
    daily_parser.add_argument("--month", type=int, help="Month 1-12 (default: current)")
    daily_parser.set_defaults(func=cmd_daily)

    export_parser = reports_subparsers.add_parser("export", help="Export expenses to a file")
    export_parser.add_argument("--output", required=True, help="Output file path")
    export_parser.add_argument("--format", choices=("csv", "json"), default="csv")
    export_parser.add_argument("--category", help="Only this category (name or ID)")
    export_parser.add_argument("--search", help="Text to find in description or notes")
    export_parser.add_argument("--from", dest="date_from", help="Start date, YYYY-MM-DD")
    export_parser.add_argument("--to", dest="date_to", help="End date, YYYY-MM-DD")
    export_parser.set_defaults(func=cmd_export)
