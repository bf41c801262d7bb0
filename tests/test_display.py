from datetime import date, datetime

from src.dashboard.display import (
    dashboard_summary,
    format_clock,
    format_date_ko,
    format_event_date,
    status_badge_class,
    subject_grid,
    today_column,
)
from src.dashboard.models import (
    AirQualityData,
    DashboardData,
    Period,
    PeriodStatus,
    PeriodStatusType,
    ScheduleEvent,
    TimetableData,
)


def test_format_date_ko():
    assert format_date_ko(date(2026, 3, 5)) == "2026년 3월 5일 (목)"


def test_format_clock():
    assert format_clock(datetime(2026, 3, 5, 9, 4, 7)) == "09:04:07"


def test_format_event_date():
    assert format_event_date("20260308") == {"month": "3월", "day": "8", "dayOfWeek": "일"}
    assert format_event_date("2026-03-08") is None


def test_today_column():
    assert today_column(datetime(2026, 3, 2)) == 0
    assert today_column(datetime(2026, 3, 6)) == 4
    assert today_column(datetime(2026, 3, 7)) == -1


def test_subject_grid():
    assert subject_grid(None) == [[""] * 5 for _ in range(6)]
    timetable = TimetableData(
        headers=["월"], periods=[Period(period=1, start="09:00", end="09:40")], subjects=[["국어"]]
    )
    assert subject_grid(timetable) == [["국어"]]


def test_status_badge_class():
    lunch = PeriodStatus(type=PeriodStatusType.LUNCH, message="점심시간")
    assert status_badge_class(lunch) == "break-time"
    prep = PeriodStatus(type=PeriodStatusType.PREP, message="준비시간")
    assert status_badge_class(prep) == "prep-time"


def test_dashboard_summary():
    timetable = TimetableData(
        headers=["월", "화", "수"],
        periods=[
            Period(period=1, start="09:00", end="09:40"),
            Period(period=2, start="09:50", end="10:30"),
        ],
        subjects=[["국어", "수학", "영어"], ["체육", "음악", "과학"]],
    )
    data = DashboardData(
        timetable=timetable,
        air_quality=AirQualityData(pm10=20, pm25=40),
        events=[ScheduleEvent(date="20260305", name="학부모 상담")],
    )
    status = PeriodStatus(type=PeriodStatusType.IN_CLASS, message="1교시 수업 중 (25분 남음)")

    summary = dashboard_summary(data, status, datetime(2026, 3, 3, 9, 15))

    assert summary["date"] == "2026년 3월 3일 (화)"
    assert summary["badge"] == "in-class"
    assert summary["todaySubjects"] == ["수학", "음악"]
    assert summary["airQuality"]["grade"] == "나쁨"
    assert summary["events"] == [
        {"month": "3월", "day": "5", "dayOfWeek": "목", "name": "학부모 상담", "detail": None}
    ]


def test_dashboard_summary_on_a_day_past_the_timetable():
    timetable = TimetableData(
        headers=["월", "화", "수"],
        periods=[Period(period=1, start="09:00", end="09:40")],
        subjects=[["국어", "수학", "영어"]],
    )
    status = PeriodStatus(type=PeriodStatusType.AFTER_SCHOOL, message="하교 시간")
    summary = dashboard_summary(DashboardData(timetable=timetable), status, datetime(2026, 3, 5, 15, 0))
    assert summary["todaySubjects"] == []
    assert summary["airQuality"] is None
