"""Named reporting periods ("week", "month", "year", "all") as date ranges."""

from datetime import date
from typing import Optional, Tuple
from dateutil.relativedelta import relativedelta

PERIODS = ("week", "month", "year", "all")

# Fixed day count used for per-day averages over a year or all time
YEAR_DAYS = 365

DateRange = Tuple[Optional[date], Optional[date]]


def period_range(
    period: str, today: Optional[date] = None, year: Optional[int] = None
) -> DateRange:
    """Get the inclusive date range a named period covers.

    Args:
        period: One of "week", "month", "year" or "all".
        today: Reference day, defaults to date.today().
        year: Calendar year for the "year" period, defaults to today's year.

    Returns:
        (start, end) tuple. Both are None for "all".

    Raises:
        ValueError: If the period name is unknown.
    """
    today = today or date.today()

    if period == "week":
        return today - relativedelta(days=7), today
    if period == "month":
        return today + relativedelta(day=1), today
    if period == "year":
        year = year or today.year
        return date(year, 1, 1), date(year, 12, 31)
    if period == "all":
        return None, None

    raise ValueError(f"Unknown period: {period}. Use one of: {', '.join(PERIODS)}")


def period_days(period: str, today: Optional[date] = None) -> int:
    """Number of days used to average spending over a period.

    Week is 7 and month is the current day of the month. Year and all-time
    use a flat 365, ignoring leap years and partial years.
    """
    if period == "week":
        return 7
    if period == "month":
        return (today or date.today()).day
    if period in ("year", "all"):
        return YEAR_DAYS

    raise ValueError(f"Unknown period: {period}. Use one of: {', '.join(PERIODS)}")
