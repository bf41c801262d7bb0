"""Merge school events from the NEIS API and the spreadsheet.

Both inputs are expected to be window-filtered by their producers already.
"""

from collections.abc import Iterable

from src.dashboard.models import ScheduleEvent

MAX_EVENTS = 30


def merge_events(
    *,
    official: Iterable[ScheduleEvent] | None = None,
    sheet: Iterable[ScheduleEvent] | None = None,
    limit: int = MAX_EVENTS,
) -> list[ScheduleEvent]:
    """Deduplicate, sort and cap events from both sources.

    Official (NEIS) events are read before sheet events and the first event
    seen for a ``date-name`` key wins, so an event listed in both keeps the
    official detail. The earliest ``limit`` events by date survive.

    Args:
        official: Events from the NEIS school-schedule API.
        sheet: Events from the spreadsheet "행사" tab.
        limit: Maximum number of events returned.
    """
    seen: set[str] = set()
    merged: list[ScheduleEvent] = []

    for source in (official, sheet):
        for event in source or ():
            if event.key in seen:
                continue
            seen.add(event.key)
            merged.append(event)

    # Stable sort: same-date events keep first-seen order
    merged.sort(key=lambda e: e.date)
    return merged[:limit]
