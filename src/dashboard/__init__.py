"""School dashboard engine.

Parses the class timetable, weekly study plan and events from a Google Sheets
export, merges them with NEIS school data, tracks the current class period
and fires period alarms.
"""

from src.dashboard.alarm import AlarmScheduler, FiringRecord
from src.dashboard.events import merge_events
from src.dashboard.models import (
    AlarmEvent,
    DashboardData,
    Period,
    PeriodStatus,
    ScheduleEvent,
    Settings,
    StudyPlanResult,
    TimetableData,
)
from src.dashboard.period_status import get_period_status
from src.dashboard.service import DashboardService

__all__ = [
    "AlarmEvent",
    "AlarmScheduler",
    "DashboardData",
    "DashboardService",
    "FiringRecord",
    "Period",
    "PeriodStatus",
    "ScheduleEvent",
    "Settings",
    "StudyPlanResult",
    "TimetableData",
    "get_period_status",
    "merge_events",
]
