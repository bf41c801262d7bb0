"""Normalise the date spellings found in spreadsheets to ``YYYYMMDD``.

Accepted, checked in this order:

1. ``YYYY-M-D``, ``YYYY.M.D`` or ``YYYY/M/D`` with optional whitespace around
   the separators. Matched as a prefix, so Korean-style ``2026.03.01.`` and
   ``2026-03-05 (목)`` are accepted.
2. ``YYYYMMDD`` (exactly eight digits), returned unchanged.
3. ``M/D/YYYY`` or ``MM/DD/YYYY`` as written by Google Sheets in the US locale.

Anything else returns None and the caller skips the record. Month and day
ranges are not checked here.
"""

import re

_YMD_RE = re.compile(r"^([0-9]{4})\s*[-./]\s*([0-9]{1,2})\s*[-./]\s*([0-9]{1,2})")
_COMPACT_RE = re.compile(r"^[0-9]{8}$")
_US_RE = re.compile(r"^([0-9]{1,2})/([0-9]{1,2})/([0-9]{4})$")


def normalize_date(raw: str | None) -> str | None:
    """Convert a loosely formatted date to ``YYYYMMDD``.

    Examples:
        >>> normalize_date("2026-3-5")
        '20260305'
        >>> normalize_date("20260315")
        '20260315'
        >>> normalize_date("not a date") is None
        True
    """
    if raw is None:
        return None
    raw = raw.strip()
    if not raw:
        return None

    match = _YMD_RE.match(raw)
    if match:
        year, month, day = match.groups()
        return f"{year}{month.zfill(2)}{day.zfill(2)}"

    if _COMPACT_RE.match(raw):
        return raw

    match = _US_RE.match(raw)
    if match:
        month, day, year = match.groups()
        return f"{year}{month.zfill(2)}{day.zfill(2)}"

    return None
