"""NEIS open-data API (open.neis.go.kr): meals, school schedule, school search.

Every NEIS endpoint answers with ``{"<service>": [{"head": ...}, {"row": [...]}]}``
on success and ``{"RESULT": {"CODE": "INFO-200", ...}}`` when nothing matches,
so "no rows" is a normal empty result, not an error.
"""

from typing import Any

from src.dashboard.clients.http import fetch_json
from src.dashboard.errors import ConfigurationError, PermanentError
from src.dashboard.logging import get_logger
from src.dashboard.models import MealData, ScheduleEvent, SchoolInfo

log = get_logger(__name__)

NEIS_BASE = "https://open.neis.go.kr/hub"


def _rows(payload: Any, service: str) -> list[dict[str, Any]]:
    """Extract the row list of a NEIS response, [] when there is none."""
    if not isinstance(payload, dict):
        raise PermanentError(f"Unexpected NEIS payload for {service}")
    sections = payload.get(service)
    if not sections:
        result = payload.get("RESULT", {})
        log.debug("neis_no_rows", service=service, code=result.get("CODE"))
        return []
    if len(sections) < 2:
        return []
    return sections[1].get("row", []) or []


def _query(service: str, api_key: str, **params: str) -> list[dict[str, Any]]:
    if not api_key:
        raise ConfigurationError("NEIS API key is not set")
    payload = fetch_json(
        f"{NEIS_BASE}/{service}",
        params={"KEY": api_key, "Type": "json", **params},
    )
    return _rows(payload, service)


def fetch_meals(
    api_key: str, office_code: str, school_code: str, from_date: str, to_date: str
) -> list[MealData]:
    """Meals served between two ``YYYYMMDD`` dates (inclusive)."""
    rows = _query(
        "mealServiceDietInfo",
        api_key,
        ATPT_OFCDC_SC_CODE=office_code,
        SD_SCHUL_CODE=school_code,
        MLSV_FROM_YMD=from_date,
        MLSV_TO_YMD=to_date,
    )
    meals: list[MealData] = []
    for row in rows:
        menu = [item.strip() for item in row.get("DDISH_NM", "").split("<br/>")]
        meals.append(
            MealData(
                date=row.get("MLSV_YMD", ""),
                menu=[item for item in menu if item],
                calories=row.get("CAL_INFO") or None,
            )
        )
    log.debug("neis_meals", count=len(meals), from_date=from_date, to_date=to_date)
    return meals


def fetch_school_events(
    api_key: str, office_code: str, school_code: str, from_date: str, to_date: str
) -> list[ScheduleEvent]:
    """Academic-calendar events between two ``YYYYMMDD`` dates (inclusive)."""
    rows = _query(
        "SchoolSchedule",
        api_key,
        ATPT_OFCDC_SC_CODE=office_code,
        SD_SCHUL_CODE=school_code,
        AA_FROM_YMD=from_date,
        AA_TO_YMD=to_date,
    )
    events: list[ScheduleEvent] = []
    for row in rows:
        name = (row.get("EVENT_NM") or "").strip()
        event_date = (row.get("AA_YMD") or "").strip()
        if not name or not event_date:
            continue
        detail = (row.get("EVENT_CNTNT") or "").strip()
        events.append(ScheduleEvent(date=event_date, name=name, detail=detail or None))
    log.debug("neis_events", count=len(events), from_date=from_date, to_date=to_date)
    return events


def search_school(api_key: str, name: str) -> list[SchoolInfo]:
    """Schools whose name contains ``name``."""
    if not name.strip():
        return []
    rows = _query("schoolInfo", api_key, SCHUL_NM=name.strip())
    return [
        SchoolInfo(
            school_code=row.get("SD_SCHUL_CODE", ""),
            office_code=row.get("ATPT_OFCDC_SC_CODE", ""),
            school_name=row.get("SCHUL_NM", ""),
            address=row.get("ORG_RDNMA") or None,
        )
        for row in rows
    ]
