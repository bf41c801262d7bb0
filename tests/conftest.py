"""Shared fixtures: a controllable clock, a recording player, sample periods."""

from datetime import datetime, timedelta

import pytest

from src.dashboard.models import AlarmPhase, Period


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float = 1) -> None:
        self.now += timedelta(seconds=seconds)

    def set(self, value: datetime) -> None:
        self.now = value


class RecordingPlayer:
    """AlarmPlayer that remembers every call instead of making sound."""

    def __init__(self) -> None:
        self.tones: list[tuple[str, AlarmPhase, int]] = []
        self.audio: list[str] = []

    def play_tones(self, preset, phase, tones) -> None:
        self.tones.append((preset, phase, len(tones)))

    def play_audio(self, data_url: str) -> None:
        self.audio.append(data_url)

    @property
    def total(self) -> int:
        return len(self.tones) + len(self.audio)


# 2026-03-02 is a Monday
MONDAY = datetime(2026, 3, 2)


@pytest.fixture
def monday():
    return MONDAY


@pytest.fixture
def clock():
    return FakeClock(MONDAY.replace(hour=8))


@pytest.fixture
def player():
    return RecordingPlayer()


@pytest.fixture
def periods():
    """Three periods: a 10-minute break after 1, a 40-minute lunch after 2."""
    return [
        Period(period=1, start="09:00", end="09:40"),
        Period(period=2, start="09:50", end="10:30"),
        Period(period=3, start="11:10", end="11:50"),
    ]
