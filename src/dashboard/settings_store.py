"""Load and save the user settings JSON file.

A missing, empty or corrupt file yields the defaults; keys present in the
file override the defaults one by one, so older files keep working after new
settings are added.
"""

import json
import threading
from pathlib import Path

from pydantic import ValidationError

from src.dashboard.config import get_config
from src.dashboard.logging import get_logger
from src.dashboard.models import Settings

log = get_logger(__name__)

_lock = threading.Lock()


def _resolve(path: str | Path | None) -> Path:
    return Path(path) if path is not None else Path(get_config().settings_path)


def load_settings(path: str | Path | None = None) -> Settings:
    """Read settings from ``path`` (default: configured settings path)."""
    settings_path = _resolve(path)
    with _lock:
        try:
            raw = settings_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            log.debug("settings_missing", path=str(settings_path))
            return Settings()
        except OSError as e:
            log.warning("settings_unreadable", path=str(settings_path), error=str(e))
            return Settings()

    if not raw.strip():
        return Settings()

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        log.warning("settings_invalid_json", path=str(settings_path), error=str(e))
        return Settings()
    if not isinstance(data, dict):
        log.warning("settings_not_object", path=str(settings_path))
        return Settings()

    try:
        return Settings.model_validate(data)
    except ValidationError as e:
        # Keep the fields that are valid, drop the rest
        bad = {str(err["loc"][0]) for err in e.errors() if err["loc"]}
        log.warning("settings_invalid_fields", path=str(settings_path), fields=sorted(bad))
        try:
            return Settings.model_validate({k: v for k, v in data.items() if k not in bad})
        except ValidationError:
            return Settings()


def save_settings(settings: Settings, path: str | Path | None = None) -> Path:
    """Write settings as indented camelCase JSON, creating the directory.

    Returns:
        Path to the written file.
    """
    settings_path = _resolve(path)
    payload = json.dumps(settings.model_dump(by_alias=True), ensure_ascii=False, indent=2)
    with _lock:
        settings_path.parent.mkdir(parents=True, exist_ok=True)
        settings_path.write_text(payload, encoding="utf-8")
    log.info("settings_saved", path=str(settings_path))
    return settings_path


def effective_api_key(settings: Settings, built_in_key: str | None = None) -> str:
    """The user's NEIS key when enabled and set, otherwise the built-in key."""
    if settings.use_custom_api_key and settings.custom_api_key:
        return settings.custom_api_key
    return built_in_key if built_in_key is not None else get_config().neis_api_key
