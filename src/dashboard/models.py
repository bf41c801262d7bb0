"""Pydantic models for dashboard data.

All data structures use Pydantic v2 for validation, serialization, and type safety.
Python code uses snake_case field names; JSON uses the camelCase names the
dashboard front-end and the settings file expect (``currentIndex``,
``spreadsheetUrl`` ...). Dump with ``model_dump(by_alias=True)``.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialised with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FrozenCamelModel(CamelModel):
    """Immutable variant, safe to share between the tick and refresh tasks."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )


# ---------------------------------------------------------------------------
# Spreadsheet-derived data
# ---------------------------------------------------------------------------
class Period(FrozenCamelModel):
    """One class slot, e.g. period 1 from "09:00" to "09:40"."""

    period: int = Field(ge=1)
    start: str  # "HH:MM", zero-padded
    end: str  # "HH:MM", zero-padded


class TimetableData(CamelModel):
    """Class timetable from the default spreadsheet tab.

    ``subjects[i][d]`` is the subject of ``periods[i]`` on day ``headers[d]``;
    every subject row has exactly ``len(headers)`` cells.
    """

    headers: list[str]
    periods: list[Period]
    subjects: list[list[str]]


class StudyPlanBlock(CamelModel):
    """One week of the study plan tab."""

    title: str  # e.g. "1학기 1주차 (2026.03.01.~2026.03.08.)"
    headers: list[str]  # day names for this block
    rows: list[list[str]]  # row[0] = label, row[1:] = per-day cell text


class StudyPlanResult(CamelModel):
    blocks: list[StudyPlanBlock]
    current_index: int = -1  # block containing today, else the last block


class ScheduleEvent(FrozenCamelModel):
    """A school event from NEIS or the spreadsheet "행사" tab."""

    date: str  # "YYYYMMDD"
    name: str
    detail: str | None = None

    @property
    def key(self) -> str:
        """Deduplication identity: ``date-name``."""
        return f"{self.date}-{self.name}"


# ---------------------------------------------------------------------------
# Live status and alarms
# ---------------------------------------------------------------------------
class PeriodStatusType(str, Enum):
    BEFORE_SCHOOL = "before-school"
    PREP = "prep"
    IN_CLASS = "in-class"
    BREAK = "break"
    LUNCH = "lunch"
    AFTER_SCHOOL = "after-school"


class PeriodStatus(CamelModel):
    """Where we are in the school day. Recomputed on every tick."""

    type: PeriodStatusType
    current_period: int | None = None
    next_period: int | None = None
    message: str
    minutes_left: int | None = None


class AlarmPhase(str, Enum):
    WARNING = "warning"  # one minute before start
    START = "start"
    END = "end"


class AlarmEvent(CamelModel):
    period: int
    type: AlarmPhase


# ---------------------------------------------------------------------------
# API-derived data
# ---------------------------------------------------------------------------
class WeatherData(CamelModel):
    temperature: float
    weather_code: int
    daily_max: float = 0.0
    daily_min: float = 0.0
    precipitation_probability: float = 0.0


class AirQualityData(CamelModel):
    pm10: float
    pm25: float


class MealData(CamelModel):
    date: str  # "YYYYMMDD"
    menu: list[str]
    calories: str | None = None


class SchoolInfo(CamelModel):
    school_code: str
    office_code: str
    school_name: str
    address: str | None = None


class Coords(CamelModel):
    lat: float
    lon: float


class DashboardData(CamelModel):
    """Everything the dashboard renders; any field may be empty."""

    weather: WeatherData | None = None
    air_quality: AirQualityData | None = None
    meals: list[MealData] = Field(default_factory=list)
    events: list[ScheduleEvent] = Field(default_factory=list)
    timetable: TimetableData | None = None
    study_plan: StudyPlanResult | None = None


# ---------------------------------------------------------------------------
# User settings (persisted as JSON)
# ---------------------------------------------------------------------------
ALARM_SOUNDS: tuple[str, ...] = ("classic", "chime", "soft", "digital", "melody", "custom")


class Settings(CamelModel):
    """User settings edited in the settings overlay."""

    school_name: str = ""
    school_code: str = ""
    office_code: str = ""
    grade: int = 0
    class_num: int = 0
    latitude: float = 0.0
    longitude: float = 0.0
    spreadsheet_url: str = ""
    use_custom_api_key: bool = False
    custom_api_key: str = ""
    alarm_enabled: bool = True
    alarm_sound: str = "classic"
    custom_alarm_data: str = ""  # data URL of the uploaded sound
    custom_alarm_name: str = ""
    background_id: str = ""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )

    @field_validator("alarm_sound")
    @classmethod
    def _known_sound(cls, value: str) -> str:
        if value not in ALARM_SOUNDS:
            raise ValueError(f"unknown alarm sound {value!r}")
        return value

    @property
    def has_coordinates(self) -> bool:
        return self.latitude != 0 or self.longitude != 0

    @property
    def has_school(self) -> bool:
        return bool(self.school_code and self.office_code)
