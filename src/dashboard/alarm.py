"""Class-period alarms fired at most once per day, period and phase.

AlarmScheduler.check_and_fire() is called on every one-second tick. For each
period it knows three trigger minutes: one minute before start (warning),
start and end. A trigger is only considered in the first seconds of its
minute and is claimed in the FiringRecord before anything is played, so a
jittery or duplicated tick can never play the same alarm twice. A tick that
is missed entirely (sleep, suspend) is not replayed later.
"""

import threading
from collections.abc import Callable
from datetime import date, datetime
from typing import Protocol

from src.dashboard.alarm_sounds import (
    CUSTOM_SOUND,
    DEFAULT_PRESET,
    PRESETS,
    Tone,
    decode_data_url,
    preset_tones,
)
from src.dashboard.dates import to_yyyymmdd
from src.dashboard.logging import get_logger
from src.dashboard.models import AlarmEvent, AlarmPhase, Period
from src.dashboard.period_status import time_to_minutes

log = get_logger(__name__)

# Seconds 0..2 of a minute count as "on the minute"
TRIGGER_WINDOW_SECONDS = 2


class AlarmPlayer(Protocol):
    """Audio capability supplied by the shell."""

    def play_tones(self, preset: str, phase: AlarmPhase, tones: tuple[Tone, ...]) -> None: ...

    def play_audio(self, data_url: str) -> None: ...


class LoggingPlayer:
    """Player for headless runs: records what would have been played."""

    def play_tones(self, preset: str, phase: AlarmPhase, tones: tuple[Tone, ...]) -> None:
        log.info("alarm_tones", preset=preset, phase=phase.value, tones=len(tones))

    def play_audio(self, data_url: str) -> None:
        mime_type, payload = decode_data_url(data_url)
        log.info("alarm_audio", mime_type=mime_type, size=len(payload))


class FiringRecord:
    """Keys of alarms already played today, cleared when the date changes."""

    def __init__(self) -> None:
        self._day: date | None = None
        self._keys: set[str] = set()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._keys)

    def __contains__(self, key: str) -> bool:
        return key in self._keys

    @staticmethod
    def key_for(day: date, period: int, phase: AlarmPhase) -> str:
        return f"{to_yyyymmdd(day)}-{period}-{phase.value}"

    def reset_if_new_day(self, now: datetime) -> bool:
        """Forget every key once the local date differs from the recorded one.

        Returns:
            True if the record was cleared.
        """
        with self._lock:
            today = now.date()
            if self._day == today:
                return False
            cleared = bool(self._keys)
            self._day = today
            self._keys.clear()
        if cleared:
            log.info("alarm_record_reset", day=to_yyyymmdd(today))
        return cleared

    def claim(self, key: str) -> bool:
        """Record ``key``; True only for the first caller."""
        with self._lock:
            if key in self._keys:
                return False
            self._keys.add(key)
            return True


class AlarmScheduler:
    """Decides when a period alarm fires and plays it.

    Args:
        player: Audio capability used for presets and custom sounds.
        clock: Returns the current local time (injectable for tests).
        record: Firing record; a fresh one is created when omitted.
    """

    def __init__(
        self,
        player: AlarmPlayer | None = None,
        clock: Callable[[], datetime] = datetime.now,
        record: FiringRecord | None = None,
    ) -> None:
        self.player = player or LoggingPlayer()
        self.clock = clock
        self.record = record or FiringRecord()

    @staticmethod
    def _triggers(period: Period) -> tuple[tuple[int, AlarmPhase], ...]:
        start = time_to_minutes(period.start)
        end = time_to_minutes(period.end)
        return (
            (start - 1, AlarmPhase.WARNING),
            (start, AlarmPhase.START),
            (end, AlarmPhase.END),
        )

    def check_and_fire(
        self,
        periods: list[Period] | tuple[Period, ...],
        enabled: bool,
        sound_choice: str = "classic",
        custom_sound: str = "",
    ) -> AlarmEvent | None:
        """Fire at most one due alarm for the current tick.

        Args:
            periods: Snapshot of today's periods.
            enabled: Alarm switch from settings; False makes this a no-op.
            sound_choice: Preset name or "custom".
            custom_sound: Data URL used when ``sound_choice`` is "custom".

        Returns:
            The AlarmEvent that was played, or None.
        """
        now = self.clock()
        self.record.reset_if_new_day(now)

        if not enabled or now.second > TRIGGER_WINDOW_SECONDS:
            return None

        current = now.hour * 60 + now.minute
        for period in periods:
            for minute, phase in self._triggers(period):
                if minute != current:
                    continue
                key = FiringRecord.key_for(now.date(), period.period, phase)
                if not self.record.claim(key):
                    continue
                self._play(phase, sound_choice, custom_sound)
                log.info("alarm_fired", period=period.period, phase=phase.value, key=key)
                return AlarmEvent(period=period.period, type=phase)

        return None

    def _play(self, phase: AlarmPhase, sound_choice: str, custom_sound: str) -> None:
        if sound_choice == CUSTOM_SOUND and custom_sound:
            self.player.play_audio(custom_sound)
            return
        preset = sound_choice if sound_choice in PRESETS else DEFAULT_PRESET
        self.player.play_tones(preset, phase, preset_tones(preset, phase))
