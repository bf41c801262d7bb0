"""Parse school events from the "행사" spreadsheet tab.

Layout: header row, then ``date, name[, detail]`` rows. Dates may use any
spelling accepted by normalize_date. Only events from today through
``window_months`` calendar months ahead are kept.
"""

from datetime import date

from src.dashboard.dates import within_event_window
from src.dashboard.logging import get_logger
from src.dashboard.models import ScheduleEvent
from src.dashboard.sheets.dates import normalize_date

log = get_logger(__name__)


def csv_to_events(
    rows: list[list[str]], today: date | None = None, window_months: int = 2
) -> list[ScheduleEvent]:
    """Convert tokenized CSV rows into window-filtered ScheduleEvents.

    Rows with fewer than two columns, a blank date or name, an unrecognised
    date, or a date outside the window are skipped.
    """
    if len(rows) < 2:
        return []

    today = today or date.today()
    events: list[ScheduleEvent] = []

    for cols in rows[1:]:
        if len(cols) < 2:
            continue
        raw_date = cols[0].strip()
        name = cols[1].strip()
        if not raw_date or not name:
            continue

        event_date = normalize_date(raw_date)
        if event_date is None:
            log.debug("sheet_event_bad_date", raw=raw_date, name=name)
            continue
        if not within_event_window(event_date, today=today, months=window_months):
            continue

        detail = cols[2].strip() if len(cols) > 2 else ""
        events.append(ScheduleEvent(date=event_date, name=name, detail=detail or None))

    return events
