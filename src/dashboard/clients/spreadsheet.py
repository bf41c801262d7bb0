"""Google Sheets CSV export for the timetable, events and study-plan tabs.

The user pastes either the full sharing URL or the bare spreadsheet ID into
settings; the sheet must be shared as "anyone with the link can view".
"""

import re

from src.dashboard.clients.http import fetch_text
from src.dashboard.errors import ConfigurationError
from src.dashboard.logging import get_logger

log = get_logger(__name__)

EVENTS_SHEET = "행사"
STUDY_PLAN_SHEET = "주학습계획안"

_URL_ID_RE = re.compile(r"/spreadsheets/d/([a-zA-Z0-9_-]+)")
_BARE_ID_RE = re.compile(r"^[a-zA-Z0-9_-]{10,}$")


def extract_spreadsheet_id(value: str | None) -> str | None:
    """Spreadsheet ID from a sharing URL or a bare ID, else None.

    Examples:
        >>> extract_spreadsheet_id("https://docs.google.com/spreadsheets/d/abc123XYZ_-abcdefghij/edit")
        'abc123XYZ_-abcdefghij'
        >>> extract_spreadsheet_id("abcdefghi") is None
        True
    """
    value = (value or "").strip()
    if not value:
        return None
    match = _URL_ID_RE.search(value)
    if match:
        return match.group(1)
    if _BARE_ID_RE.match(value):
        return value
    return None


def csv_export_url(spreadsheet_id: str) -> str:
    return f"https://docs.google.com/spreadsheets/d/{spreadsheet_id}/gviz/tq"


def fetch_sheet_csv(spreadsheet_url: str, sheet: str | None = None) -> str:
    """Download one tab as CSV text (the first tab when ``sheet`` is None).

    Raises:
        ConfigurationError: If no spreadsheet ID can be extracted.
        TransientError / PermanentError: From the HTTP layer.
    """
    spreadsheet_id = extract_spreadsheet_id(spreadsheet_url)
    if spreadsheet_id is None:
        raise ConfigurationError(f"Not a spreadsheet URL or ID: {spreadsheet_url!r}")

    params = {"tqx": "out:csv"}
    if sheet:
        params["sheet"] = sheet
    text = fetch_text(csv_export_url(spreadsheet_id), params=params)
    log.debug("sheet_downloaded", sheet=sheet or "default", size=len(text))
    return text
