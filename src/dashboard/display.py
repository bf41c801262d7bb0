"""Formatting helpers for the dashboard widgets."""

from datetime import date, datetime
from typing import Any

from src.dashboard.clients.open_meteo import PM_LEVEL_LABELS, air_quality_level
from src.dashboard.dates import yyyymmdd_to_date
from src.dashboard.models import DashboardData, PeriodStatus, PeriodStatusType, TimetableData

# Indexed by date.weekday(): Monday = 0
DAY_NAMES_KO: tuple[str, ...] = ("월", "화", "수", "목", "금", "토", "일")

_BADGE_CLASSES: dict[PeriodStatusType, str] = {
    PeriodStatusType.IN_CLASS: "in-class",
    PeriodStatusType.BREAK: "break-time",
    PeriodStatusType.LUNCH: "break-time",
    PeriodStatusType.PREP: "prep-time",
    PeriodStatusType.BEFORE_SCHOOL: "after-school",
    PeriodStatusType.AFTER_SCHOOL: "after-school",
}


def format_date_ko(day: date) -> str:
    """2026년 3월 5일 (목)"""
    return f"{day.year}년 {day.month}월 {day.day}일 ({DAY_NAMES_KO[day.weekday()]})"


def format_clock(now: datetime) -> str:
    return now.strftime("%H:%M:%S")


def format_event_date(value: str) -> dict[str, str] | None:
    """Split ``YYYYMMDD`` into month / day / weekday labels for the event list."""
    day = yyyymmdd_to_date(value)
    if day is None:
        return None
    return {
        "month": f"{day.month}월",
        "day": str(day.day),
        "dayOfWeek": DAY_NAMES_KO[day.weekday()],
    }


def today_column(now: datetime, day_count: int = 5) -> int:
    """Timetable column of today (Monday = 0), or -1 on days not shown."""
    index = now.weekday()
    return index if index < day_count else -1


def subject_grid(timetable: TimetableData | None, rows: int = 6, days: int = 5) -> list[list[str]]:
    """Subjects of the timetable, or an empty placeholder grid."""
    if timetable is not None:
        return timetable.subjects
    return [[""] * days for _ in range(rows)]


def status_badge_class(status: PeriodStatus) -> str:
    return _BADGE_CLASSES.get(status.type, "")


def dashboard_summary(data: DashboardData, status: PeriodStatus, now: datetime) -> dict[str, Any]:
    """What the dashboard shows right now, as plain JSON-ready values.

    Used by the headless CLI in place of the rendered widgets.
    """
    day_count = len(data.timetable.headers) if data.timetable else 5
    column = today_column(now, day_count)
    grid = subject_grid(data.timetable)
    today_subjects = [row[column] if column < len(row) else "" for row in grid] if column >= 0 else []

    air = None
    if data.air_quality is not None:
        air = {
            "pm10": data.air_quality.pm10,
            "pm25": data.air_quality.pm25,
            "grade": PM_LEVEL_LABELS[air_quality_level(data.air_quality)],
        }

    events = []
    for event in data.events:
        parts = format_event_date(event.date)
        if parts is None:
            continue
        events.append({**parts, "name": event.name, "detail": event.detail})

    return {
        "date": format_date_ko(now.date()),
        "clock": format_clock(now),
        "status": status.message,
        "badge": status_badge_class(status),
        "todaySubjects": today_subjects,
        "airQuality": air,
        "events": events,
    }
