"""Dashboard runtime configuration loaded from environment variables.

These are process-level knobs (API key, intervals, logging). Per-user choices
such as the school, spreadsheet and alarm sound live in the JSON settings
file handled by src.dashboard.settings_store.
"""

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


def _default_settings_path() -> str:
    """Settings file under %APPDATA%/Wall-E, falling back to the home directory."""
    app_data = os.getenv("APPDATA")
    if not app_data:
        app_data = str(Path.home() / "AppData" / "Roaming")
    return str(Path(app_data) / "Wall-E" / "settings.json")


class DashboardConfig(BaseSettings):
    """Dashboard configuration loaded from environment variables.

    Settings are loaded from environment variables with sensible defaults.
    For local development, create a .env file in the project root.
    """

    # NEIS open-data API (built-in key; users may override it in settings)
    neis_api_key: str = Field(
        default="",
        description="Built-in NEIS open API key",
    )

    # Paths
    settings_path: str = Field(
        default_factory=_default_settings_path,
        description="Path of the user settings JSON file",
    )

    # Refresh and tick cadence
    fetch_interval_minutes: int = Field(
        default=30,
        description="Minutes between full data refreshes",
    )
    tick_seconds: float = Field(
        default=1.0,
        description="Seconds between status/alarm ticks",
    )

    # Source windows
    meal_days_ahead: int = Field(
        default=7,
        description="Days of meals fetched after today",
    )
    event_window_months: int = Field(
        default=2,
        description="Calendar months of events kept after today",
    )
    max_events: int = Field(
        default=30,
        description="Maximum number of merged events shown",
    )

    # HTTP
    http_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout for each outbound HTTP request",
    )
    http_user_agent: str = Field(
        default="Wall-E-SchoolDashboard/1.0",
        description="User-Agent sent to public APIs (Nominatim requires one)",
    )

    # Logging
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format (for production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    model_config = {
        "env_prefix": "",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


# Singleton pattern
_config: DashboardConfig | None = None


def get_config() -> DashboardConfig:
    """Get the dashboard configuration singleton.

    Returns:
        DashboardConfig: Dashboard configuration instance
    """
    global _config
    if _config is None:
        _config = DashboardConfig()
    return _config
