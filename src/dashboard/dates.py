"""Calendar helpers shared by the data sources.

All dates handed to NEIS and compared against spreadsheet data are local
``YYYYMMDD`` strings.
"""

import calendar
from datetime import date, timedelta

YMD_FORMAT = "%Y%m%d"


def to_yyyymmdd(day: date) -> str:
    return day.strftime(YMD_FORMAT)


def yyyymmdd_to_date(value: str) -> date | None:
    """Parse ``YYYYMMDD`` into a date, or None when it is not a real day."""
    if len(value) != 8 or not (value.isascii() and value.isdigit()):
        return None
    try:
        return date(int(value[:4]), int(value[4:6]), int(value[6:8]))
    except ValueError:
        return None


def today_str(today: date | None = None) -> str:
    return to_yyyymmdd(today or date.today())


def date_after_days(days: int, today: date | None = None) -> str:
    """``YYYYMMDD`` of today plus ``days`` (negative goes back)."""
    return to_yyyymmdd((today or date.today()) + timedelta(days=days))


def add_months(day: date, months: int) -> date:
    """Same day ``months`` later, clamped to the end of a shorter month.

    Jan 31 + 1 month is Feb 28 (or 29), never a day in March.
    """
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def end_of_month_plus(months: int, today: date | None = None) -> str:
    """Last day of the month ``months`` after the current one.

    Used as the NEIS school-schedule query end: in March with ``months=2``
    this is May 31.
    """
    first = (today or date.today()).replace(day=1)
    target = add_months(first, months)
    last_day = calendar.monthrange(target.year, target.month)[1]
    return to_yyyymmdd(target.replace(day=last_day))


def within_event_window(
    value: str, today: date | None = None, months: int = 2
) -> bool:
    """True when ``value`` lies in today .. today + ``months`` (inclusive).

    Events that do not form a real calendar date are outside every window.
    """
    event_day = yyyymmdd_to_date(value)
    if event_day is None:
        return False
    start = today or date.today()
    return start <= event_day <= add_months(start, months)
