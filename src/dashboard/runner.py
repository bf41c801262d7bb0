"""The two periodic drivers of a running dashboard.

- tick (every second): period status and alarm check
- refresh (every 30 minutes): reload settings, fetch every source, swap the
  snapshot

Both run as tasks on one asyncio loop; network I/O happens in worker threads
inside DashboardService, so the tick is never delayed by a slow API.
"""

import asyncio
from collections.abc import Callable
from typing import Any

from src.dashboard.alarm import AlarmScheduler
from src.dashboard.config import DashboardConfig, get_config
from src.dashboard.logging import get_logger
from src.dashboard.models import AlarmEvent, PeriodStatus, Settings
from src.dashboard.period_status import get_period_status
from src.dashboard.service import DashboardService, DashboardSnapshot
from src.dashboard.settings_store import load_settings

log = get_logger(__name__)

StatusCallback = Callable[[PeriodStatus], None]
AlarmCallback = Callable[[AlarmEvent], None]
SnapshotCallback = Callable[[DashboardSnapshot], None]


class DashboardRunner:
    """Drives the tick and refresh loops until stopped.

    Args:
        service: Snapshot owner.
        scheduler: Alarm scheduler; shares the clock used for status.
        settings_loader: Returns the current user settings.
        config: Runtime configuration (intervals).
        on_status / on_alarm / on_refresh: UI callbacks.
    """

    def __init__(
        self,
        service: DashboardService,
        scheduler: AlarmScheduler | None = None,
        settings_loader: Callable[[], Settings] = load_settings,
        config: DashboardConfig | None = None,
        on_status: StatusCallback | None = None,
        on_alarm: AlarmCallback | None = None,
        on_refresh: SnapshotCallback | None = None,
    ) -> None:
        self.service = service
        self.scheduler = scheduler or AlarmScheduler(clock=service.clock)
        self.settings_loader = settings_loader
        self.config = config or get_config()
        self.on_status = on_status
        self.on_alarm = on_alarm
        self.on_refresh = on_refresh
        self.settings = Settings()
        self.last_status: PeriodStatus | None = None
        self._tasks: list[asyncio.Task] = []

    @staticmethod
    def _notify(name: str, callback: Callable[[Any], None] | None, value: Any) -> None:
        """Call a UI callback; a failing callback never stops the loops."""
        if callback is None:
            return
        try:
            callback(value)
        except Exception as e:
            log.error("ui_callback_failed", callback=name, error=str(e), type=type(e).__name__)

    def reload_settings(self) -> Settings:
        self.settings = self.settings_loader()
        return self.settings

    def tick(self) -> tuple[PeriodStatus, AlarmEvent | None]:
        """One status + alarm evaluation against a single snapshot read."""
        periods = self.service.periods
        now = self.service.clock()
        status = get_period_status(periods, now)

        settings = self.settings
        event = None
        try:
            event = self.scheduler.check_and_fire(
                periods,
                settings.alarm_enabled,
                settings.alarm_sound,
                settings.custom_alarm_data,
            )
        except Exception as e:
            log.error("alarm_playback_failed", error=str(e), type=type(e).__name__)

        if self.last_status is None or status != self.last_status:
            log.debug("period_status_changed", type=status.type.value, message=status.message)
        self.last_status = status

        self._notify("on_status", self.on_status, status)
        if event is not None:
            self._notify("on_alarm", self.on_alarm, event)
        return status, event

    async def refresh(self) -> DashboardSnapshot:
        settings = await asyncio.to_thread(self.reload_settings)
        snapshot = await self.service.refresh(settings)
        self._notify("on_refresh", self.on_refresh, snapshot)
        return snapshot

    async def _tick_loop(self) -> None:
        while True:
            try:
                self.tick()
            except Exception as e:
                log.error("tick_failed", error=str(e), type=type(e).__name__)
            await asyncio.sleep(self.config.tick_seconds)

    async def _refresh_loop(self) -> None:
        interval = self.config.fetch_interval_minutes * 60
        while True:
            try:
                await self.refresh()
            except Exception as e:
                # Keep the previous snapshot; try again next interval
                log.error("refresh_failed", error=str(e), type=type(e).__name__)
            await asyncio.sleep(interval)

    async def run(self) -> None:
        """Run both loops until cancelled."""
        self.reload_settings()
        self._tasks = [
            asyncio.create_task(self._refresh_loop(), name="dashboard-refresh"),
            asyncio.create_task(self._tick_loop(), name="dashboard-tick"),
        ]
        log.info(
            "dashboard_started",
            tick_seconds=self.config.tick_seconds,
            fetch_interval_minutes=self.config.fetch_interval_minutes,
        )
        try:
            await asyncio.gather(*self._tasks)
        finally:
            self.stop()

    def stop(self) -> None:
        for task in self._tasks:
            task.cancel()
        self._tasks = []
