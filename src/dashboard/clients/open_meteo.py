"""Open-Meteo weather and air-quality APIs (no key required)."""

from typing import Any

from src.dashboard.clients.http import fetch_json
from src.dashboard.errors import PermanentError
from src.dashboard.models import AirQualityData, WeatherData

FORECAST_URL = "https://api.open-meteo.com/v1/forecast"
AIR_QUALITY_URL = "https://air-quality-api.open-meteo.com/v1/air-quality"
TIMEZONE = "Asia/Seoul"

# Korean (환경부) PM grading, upper bounds in µg/m³
PM10_LEVELS: tuple[tuple[float, str], ...] = ((30, "good"), (80, "moderate"), (150, "unhealthy"))
PM25_LEVELS: tuple[tuple[float, str], ...] = ((15, "good"), (35, "moderate"), (75, "unhealthy"))

_LEVEL_ORDER = ("good", "moderate", "unhealthy", "very-unhealthy")


def _first(values: list[Any] | None) -> float:
    if not values or values[0] is None:
        return 0.0
    return float(values[0])


def fetch_weather(lat: float, lon: float) -> WeatherData:
    """Current temperature and weather code plus today's max/min/precipitation."""
    payload = fetch_json(
        FORECAST_URL,
        params={
            "latitude": lat,
            "longitude": lon,
            "current_weather": "true",
            "daily": "weather_code,temperature_2m_max,temperature_2m_min,precipitation_probability_max",
            "timezone": TIMEZONE,
            "forecast_days": 1,
        },
    )
    current = payload.get("current_weather")
    if not current:
        raise PermanentError("Forecast response has no current_weather")
    daily = payload.get("daily", {})
    return WeatherData(
        temperature=current.get("temperature", 0.0),
        weather_code=current.get("weathercode", 0),
        daily_max=_first(daily.get("temperature_2m_max")),
        daily_min=_first(daily.get("temperature_2m_min")),
        precipitation_probability=_first(daily.get("precipitation_probability_max")),
    )


def fetch_air_quality(lat: float, lon: float) -> AirQualityData:
    """Current PM10 and PM2.5 concentrations."""
    payload = fetch_json(
        AIR_QUALITY_URL,
        params={
            "latitude": lat,
            "longitude": lon,
            "current": "pm10,pm2_5",
            "timezone": TIMEZONE,
        },
    )
    current = payload.get("current")
    if not current:
        raise PermanentError("Air-quality response has no current block")
    return AirQualityData(pm10=current.get("pm10") or 0.0, pm25=current.get("pm2_5") or 0.0)


PM_LEVEL_LABELS: dict[str, str] = {
    "good": "좋음",
    "moderate": "보통",
    "unhealthy": "나쁨",
    "very-unhealthy": "매우나쁨",
}


def pm_level(value: float, pollutant: str = "pm10") -> str:
    """Grade a concentration: good, moderate, unhealthy or very-unhealthy."""
    levels = PM10_LEVELS if pollutant == "pm10" else PM25_LEVELS
    for upper, level in levels:
        if value <= upper:
            return level
    return "very-unhealthy"


def air_quality_level(data: AirQualityData) -> str:
    """Worse of the PM10 and PM2.5 grades."""
    return max(
        pm_level(data.pm10, "pm10"),
        pm_level(data.pm25, "pm25"),
        key=_LEVEL_ORDER.index,
    )
