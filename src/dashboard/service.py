"""Fetch every data source and publish an immutable dashboard snapshot.

Each source is fetched independently in a worker thread. A source that is
unconfigured or fails yields its empty value (None or []) and is logged; it
never blocks or corrupts the others. The finished snapshot replaces the old
one in a single assignment, so readers on the tick task always see either the
previous or the new periods, never a mix.
"""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, TypeVar

from src.dashboard.clients import neis, open_meteo, spreadsheet
from src.dashboard.clients.geocode import geocode_address
from src.dashboard.config import DashboardConfig, get_config
from src.dashboard.dates import date_after_days, end_of_month_plus, today_str, within_event_window
from src.dashboard.errors import DashboardError
from src.dashboard.events import merge_events
from src.dashboard.logging import bind_refresh, clear_refresh, get_logger
from src.dashboard.models import (
    AirQualityData,
    Coords,
    DashboardData,
    MealData,
    Period,
    ScheduleEvent,
    SchoolInfo,
    Settings,
    StudyPlanResult,
    TimetableData,
    WeatherData,
)
from src.dashboard.settings_store import effective_api_key
from src.dashboard.sheets import (
    build_study_plan,
    build_timetable,
    csv_to_events,
    tokenize,
)

log = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class DataSources:
    """Network collaborators; tests replace them with fakes."""

    weather: Callable[[float, float], WeatherData] = open_meteo.fetch_weather
    air_quality: Callable[[float, float], AirQualityData] = open_meteo.fetch_air_quality
    meals: Callable[[str, str, str, str, str], list[MealData]] = neis.fetch_meals
    school_events: Callable[[str, str, str, str, str], list[ScheduleEvent]] = (
        neis.fetch_school_events
    )
    sheet_csv: Callable[[str, str | None], str] = spreadsheet.fetch_sheet_csv
    search_school: Callable[[str, str], list[SchoolInfo]] = neis.search_school
    geocode: Callable[[str], Coords | None] = geocode_address


@dataclass(frozen=True)
class DashboardSnapshot:
    data: DashboardData = field(default_factory=DashboardData)
    periods: tuple[Period, ...] = ()
    refreshed_at: datetime | None = None


class DashboardService:
    """Owns the current snapshot and knows how to rebuild it.

    Args:
        config: Runtime configuration (default: environment singleton).
        sources: Network collaborators.
        clock: Local wall clock, injectable for tests.
    """

    def __init__(
        self,
        config: DashboardConfig | None = None,
        sources: DataSources | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.config = config or get_config()
        self.sources = sources or DataSources()
        self.clock = clock
        self._snapshot = DashboardSnapshot()

    @property
    def snapshot(self) -> DashboardSnapshot:
        return self._snapshot

    @property
    def periods(self) -> tuple[Period, ...]:
        return self._snapshot.periods

    async def _guarded(self, source: str, default: T, func: Callable[..., T], *args: Any) -> T:
        """Run a blocking fetch in a thread, reducing any failure to ``default``."""
        try:
            result = await asyncio.to_thread(func, *args)
        except DashboardError as e:
            log.warning("source_fetch_failed", source=source, error=str(e), type=type(e).__name__)
            return default
        except Exception as e:
            log.error("source_fetch_crashed", source=source, error=str(e), type=type(e).__name__)
            return default
        return default if result is None else result

    async def _skip(self, source: str, default: T, reason: str) -> T:
        log.info("source_skipped", source=source, reason=reason)
        return default

    # -- per-source parsing (runs in worker threads) -------------------------
    def _load_timetable(self, url: str) -> TimetableData | None:
        return build_timetable(tokenize(self.sources.sheet_csv(url, None)))

    def _load_sheet_events(self, url: str, today: date) -> list[ScheduleEvent]:
        text = self.sources.sheet_csv(url, spreadsheet.EVENTS_SHEET)
        return csv_to_events(tokenize(text), today=today, window_months=self.config.event_window_months)

    def _load_study_plan(self, url: str, today: date) -> StudyPlanResult | None:
        text = self.sources.sheet_csv(url, spreadsheet.STUDY_PLAN_SHEET)
        return build_study_plan(tokenize(text), today=today)

    def _load_official_events(self, api_key: str, settings: Settings, today: date) -> list[ScheduleEvent]:
        events = self.sources.school_events(
            api_key,
            settings.office_code,
            settings.school_code,
            today_str(today),
            end_of_month_plus(self.config.event_window_months, today),
        )
        months = self.config.event_window_months
        return [e for e in events if within_event_window(e.date, today=today, months=months)]

    def _load_meals(self, api_key: str, settings: Settings, today: date) -> list[MealData]:
        return self.sources.meals(
            api_key,
            settings.office_code,
            settings.school_code,
            today_str(today),
            date_after_days(self.config.meal_days_ahead, today),
        )

    # -- refresh -------------------------------------------------------------
    async def fetch_dashboard_data(self, settings: Settings) -> DashboardData:
        """Fetch all sources concurrently and assemble DashboardData."""
        today = self.clock().date()
        api_key = effective_api_key(settings, self.config.neis_api_key)
        lat, lon = settings.latitude, settings.longitude
        sheet_url = settings.spreadsheet_url.strip()

        if settings.has_coordinates:
            weather = self._guarded("weather", None, self.sources.weather, lat, lon)
            air = self._guarded("air_quality", None, self.sources.air_quality, lat, lon)
        else:
            weather = self._skip("weather", None, "no_coordinates")
            air = self._skip("air_quality", None, "no_coordinates")

        if api_key and settings.has_school:
            meals = self._guarded("meals", [], self._load_meals, api_key, settings, today)
            official = self._guarded(
                "official_events", [], self._load_official_events, api_key, settings, today
            )
        else:
            reason = "no_api_key" if not api_key else "no_school"
            meals = self._skip("meals", [], reason)
            official = self._skip("official_events", [], reason)

        if sheet_url:
            timetable = self._guarded("timetable", None, self._load_timetable, sheet_url)
            sheet_events = self._guarded("sheet_events", [], self._load_sheet_events, sheet_url, today)
            study_plan = self._guarded("study_plan", None, self._load_study_plan, sheet_url, today)
        else:
            timetable = self._skip("timetable", None, "no_spreadsheet")
            sheet_events = self._skip("sheet_events", [], "no_spreadsheet")
            study_plan = self._skip("study_plan", None, "no_spreadsheet")

        results = await asyncio.gather(
            weather, air, meals, official, timetable, sheet_events, study_plan
        )
        (weather_v, air_v, meals_v, official_v, timetable_v, sheet_events_v, study_plan_v) = results

        return DashboardData(
            weather=weather_v,
            air_quality=air_v,
            meals=meals_v,
            events=merge_events(
                official=official_v, sheet=sheet_events_v, limit=self.config.max_events
            ),
            timetable=timetable_v,
            study_plan=study_plan_v,
        )

    async def refresh(self, settings: Settings) -> DashboardSnapshot:
        """Rebuild and publish the snapshot."""
        started = self.clock()
        bind_refresh(started.strftime("%H%M%S"))
        try:
            data = await self.fetch_dashboard_data(settings)
        finally:
            clear_refresh()
        periods = tuple(data.timetable.periods) if data.timetable else ()
        snapshot = DashboardSnapshot(data=data, periods=periods, refreshed_at=self.clock())
        self._snapshot = snapshot
        log.info(
            "dashboard_refreshed",
            periods=len(periods),
            events=len(data.events),
            meals=len(data.meals),
            weather=data.weather is not None,
            study_plan_blocks=len(data.study_plan.blocks) if data.study_plan else 0,
        )
        return snapshot

    # -- settings-overlay helpers -------------------------------------------
    async def search_school(self, settings: Settings, name: str) -> list[SchoolInfo]:
        api_key = effective_api_key(settings, self.config.neis_api_key)
        if not api_key:
            log.warning("school_search_skipped", reason="no_api_key")
            return []
        return await self._guarded("school_search", [], self.sources.search_school, api_key, name)

    async def geocode(self, address: str) -> Coords | None:
        return await self._guarded("geocode", None, self.sources.geocode, address)
