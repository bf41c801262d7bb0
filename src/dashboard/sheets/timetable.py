"""Build the class timetable from the default spreadsheet tab.

Expected sheet layout (row 0 is the header):

    교시, 시작, 종료, 월, 화, 수, 목, 금
    1,    9:00, 9:40, 국어, 수학, ...
    2,    9:50, 10:30, ...

Malformed rows are skipped, never repaired.
"""

import re

from src.dashboard.logging import get_logger
from src.dashboard.models import Period, TimetableData

log = get_logger(__name__)

DEFAULT_DAY_HEADERS: tuple[str, ...] = ("월", "화", "수", "목", "금")

# Columns before the first day column: period number, start, end
_DAY_COLUMN_OFFSET = 3

_TIME_RE = re.compile(r"^[0-9]{1,2}:[0-9]{2}$")


def _pad_time(value: str) -> str:
    """Zero-pad the hour: 9:00 becomes 09:00."""
    return value.zfill(5)


def _parse_period_number(value: str) -> int | None:
    value = value.strip()
    if not (value.isascii() and value.isdigit()):
        return None
    number = int(value)
    return number if number >= 1 else None


def build_timetable(rows: list[list[str]]) -> TimetableData | None:
    """Convert tokenized CSV rows into a TimetableData.

    Returns:
        The timetable, or None when there are fewer than two rows or no data
        row survives validation.
    """
    if len(rows) < 2:
        return None

    headers = [cell.strip() for cell in rows[0][_DAY_COLUMN_OFFSET:]]
    if not headers:
        headers = list(DEFAULT_DAY_HEADERS)
    day_count = len(headers)

    periods: list[Period] = []
    subjects: list[list[str]] = []
    skipped = 0

    for cols in rows[1:]:
        if len(cols) < _DAY_COLUMN_OFFSET:
            skipped += 1
            continue

        number = _parse_period_number(cols[0])
        start = cols[1].strip()
        end = cols[2].strip()
        if number is None or not _TIME_RE.match(start) or not _TIME_RE.match(end):
            skipped += 1
            continue

        start, end = _pad_time(start), _pad_time(end)
        if start >= end:
            skipped += 1
            continue

        periods.append(Period(period=number, start=start, end=end))

        day_cells = cols[_DAY_COLUMN_OFFSET : _DAY_COLUMN_OFFSET + day_count]
        row_subjects = [cell.strip() for cell in day_cells]
        row_subjects.extend([""] * (day_count - len(row_subjects)))
        subjects.append(row_subjects)

    if not periods:
        log.info("timetable_empty", rows=len(rows), skipped=skipped)
        return None

    log.debug("timetable_built", periods=len(periods), days=day_count, skipped=skipped)
    return TimetableData(headers=headers, periods=periods, subjects=subjects)
