from datetime import datetime

import pytest

from src.dashboard.models import Period, PeriodStatusType
from src.dashboard.period_status import get_period_status, time_to_minutes


def at(monday, hhmm, second=0):
    hour, minute = map(int, hhmm.split(":"))
    return monday.replace(hour=hour, minute=minute, second=second)


def test_time_to_minutes():
    assert time_to_minutes("00:00") == 0
    assert time_to_minutes("09:05") == 545
    assert time_to_minutes("23:59") == 1439


@pytest.mark.parametrize("day", [7, 8])
def test_weekend(periods, day):
    status = get_period_status(periods, datetime(2026, 3, day, 10, 0))
    assert status.type is PeriodStatusType.AFTER_SCHOOL
    assert status.message == "주말"


def test_no_timetable(monday):
    status = get_period_status([], at(monday, "10:00"))
    assert status.type is PeriodStatusType.BEFORE_SCHOOL
    assert status.message == "시간표 없음"


def test_before_school(periods, monday):
    status = get_period_status(periods, at(monday, "08:00"))
    assert status.type is PeriodStatusType.BEFORE_SCHOOL
    assert status.next_period == 1
    assert status.minutes_left == 60
    assert status.message == "등교 전 (1교시까지 60분)"


def test_prep_window_starts_ten_minutes_before_first_period(periods, monday):
    assert get_period_status(periods, at(monday, "08:49")).type is PeriodStatusType.BEFORE_SCHOOL

    status = get_period_status(periods, at(monday, "08:50"))
    assert status.type is PeriodStatusType.PREP
    assert status.minutes_left == 10
    assert status.message == "준비시간 (10분 전)"


def test_in_class(periods, monday):
    status = get_period_status(periods, at(monday, "09:15", second=59))
    assert status.type is PeriodStatusType.IN_CLASS
    assert status.current_period == 1
    assert status.next_period == 2
    assert status.minutes_left == 25
    assert status.message == "1교시 수업 중 (25분 남음)"


def test_start_minute_is_in_class_and_end_minute_is_not(periods, monday):
    assert get_period_status(periods, at(monday, "09:00")).type is PeriodStatusType.IN_CLASS
    assert get_period_status(periods, at(monday, "09:40")).type is PeriodStatusType.BREAK


def test_short_gap_is_break(periods, monday):
    status = get_period_status(periods, at(monday, "09:45"))
    assert status.type is PeriodStatusType.BREAK
    assert status.next_period == 2
    assert status.minutes_left == 5
    assert status.message == "쉬는시간 (2교시까지 5분)"


def test_long_gap_is_lunch(periods, monday):
    status = get_period_status(periods, at(monday, "10:40"))
    assert status.type is PeriodStatusType.LUNCH
    assert status.next_period == 3
    assert status.message == "점심시간 (3교시까지 30분)"


def test_last_period_has_no_next(periods, monday):
    status = get_period_status(periods, at(monday, "11:30"))
    assert status.current_period == 3
    assert status.next_period is None


def test_after_school(periods, monday):
    status = get_period_status(periods, at(monday, "11:50"))
    assert status.type is PeriodStatusType.AFTER_SCHOOL
    assert status.message == "하교 시간"


def test_single_period_boundaries(monday):
    only = [Period(period=1, start="09:00", end="09:40")]
    assert get_period_status(only, at(monday, "08:49")).type is PeriodStatusType.BEFORE_SCHOOL
    assert get_period_status(only, at(monday, "08:55")).type is PeriodStatusType.PREP
    in_class = get_period_status(only, at(monday, "09:00"))
    assert in_class.type is PeriodStatusType.IN_CLASS
    assert in_class.minutes_left == 40
    assert get_period_status(only, at(monday, "09:40")).type is PeriodStatusType.AFTER_SCHOOL
