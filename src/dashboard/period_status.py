"""Work out where we are in the school day.

A pure function of the period list and the wall clock, recomputed every
tick. All arithmetic is in whole minutes since midnight; seconds are ignored.
"""

from datetime import datetime

from src.dashboard.models import Period, PeriodStatus, PeriodStatusType

PREP_WINDOW_MINUTES = 10
LUNCH_GAP_MINUTES = 30


def time_to_minutes(value: str) -> int:
    """Minutes since midnight for an HH:MM string."""
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def get_period_status(periods: list[Period] | tuple[Period, ...], now: datetime) -> PeriodStatus:
    """Return the school-day state at ``now``.

    Checked in order: weekend, no timetable, before school, prep window,
    after school, in class, break or lunch between two periods.
    """
    current = now.hour * 60 + now.minute

    if now.weekday() >= 5:
        return PeriodStatus(type=PeriodStatusType.AFTER_SCHOOL, message="주말")

    if not periods:
        return PeriodStatus(type=PeriodStatusType.BEFORE_SCHOOL, message="시간표 없음")

    first = periods[0]
    first_start = time_to_minutes(first.start)
    last_end = time_to_minutes(periods[-1].end)

    if current < first_start - PREP_WINDOW_MINUTES:
        diff = first_start - current
        return PeriodStatus(
            type=PeriodStatusType.BEFORE_SCHOOL,
            next_period=first.period,
            message=f"등교 전 ({first.period}교시까지 {diff}분)",
            minutes_left=diff,
        )

    if current < first_start:
        diff = first_start - current
        return PeriodStatus(
            type=PeriodStatusType.PREP,
            next_period=first.period,
            message=f"준비시간 ({diff}분 전)",
            minutes_left=diff,
        )

    if current >= last_end:
        return PeriodStatus(type=PeriodStatusType.AFTER_SCHOOL, message="하교 시간")

    for index, period in enumerate(periods):
        start = time_to_minutes(period.start)
        end = time_to_minutes(period.end)
        following = periods[index + 1] if index + 1 < len(periods) else None

        if start <= current < end:
            remaining = end - current
            return PeriodStatus(
                type=PeriodStatusType.IN_CLASS,
                current_period=period.period,
                next_period=following.period if following else None,
                message=f"{period.period}교시 수업 중 ({remaining}분 남음)",
                minutes_left=remaining,
            )

        if following is None:
            continue

        next_start = time_to_minutes(following.start)
        if end <= current < next_start:
            diff = next_start - current
            if next_start - end >= LUNCH_GAP_MINUTES:
                return PeriodStatus(
                    type=PeriodStatusType.LUNCH,
                    next_period=following.period,
                    message=f"점심시간 ({following.period}교시까지 {diff}분)",
                    minutes_left=diff,
                )
            return PeriodStatus(
                type=PeriodStatusType.BREAK,
                next_period=following.period,
                message=f"쉬는시간 ({following.period}교시까지 {diff}분)",
                minutes_left=diff,
            )

    return PeriodStatus(type=PeriodStatusType.BREAK, message="쉬는시간")
