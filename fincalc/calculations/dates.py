"""
Date Arithmetic

Day-count and month-count helpers for dated cash flows.
Year fractions use the actual/365 convention, matching Excel's XIRR().
"""

from typing import List
from datetime import date
from dateutil.relativedelta import relativedelta

DAYS_PER_YEAR = 365.0


def days_between(start: date, end: date) -> int:
    """Signed number of days from start to end."""
    return (end - start).days


def year_fraction(start: date, end: date) -> float:
    """Actual/365 year fraction from start to end."""
    return days_between(start, end) / DAYS_PER_YEAR


def months_between(start: date, end: date) -> int:
    """
    Count whole calendar months from start to end.

    Partial months are truncated toward zero, so 2025-01-31 to 2025-02-28
    is 0 months and 2025-01-15 to 2025-03-15 is 2.
    """
    delta = relativedelta(end, start)
    return delta.years * 12 + delta.months


def add_months(start: date, months: int) -> date:
    """Shift a date by whole months, clamping to the end of shorter months."""
    return start + relativedelta(months=months)


def generate_monthly_dates(start_date: date, count: int) -> List[date]:
    """Generate `count` monthly dates beginning at start_date."""
    # Offsets are taken from start_date so that a 31st does not drift to the 28th.
    return [add_months(start_date, i) for i in range(count)]
