import json

from src.dashboard.models import ALARM_SOUNDS, Settings
from src.dashboard.settings_store import effective_api_key, load_settings, save_settings


def test_missing_file_gives_defaults(tmp_path):
    assert load_settings(tmp_path / "nope.json") == Settings()


def test_empty_and_corrupt_files_give_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("   ", encoding="utf-8")
    assert load_settings(path) == Settings()
    path.write_text("{not json", encoding="utf-8")
    assert load_settings(path) == Settings()
    path.write_text("[1, 2]", encoding="utf-8")
    assert load_settings(path) == Settings()


def test_partial_file_overrides_only_present_keys(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"schoolName": "한빛초", "alarmSound": "chime"}), encoding="utf-8")
    settings = load_settings(path)
    assert settings.school_name == "한빛초"
    assert settings.alarm_sound == "chime"
    assert settings.alarm_enabled is True
    assert settings.spreadsheet_url == ""


def test_invalid_field_is_dropped_and_rest_kept(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"grade": "three", "classNum": 2, "unknown": 1}), encoding="utf-8")
    settings = load_settings(path)
    assert settings.grade == 0
    assert settings.class_num == 2


def test_save_writes_camel_case_and_round_trips(tmp_path):
    path = tmp_path / "Wall-E" / "settings.json"
    settings = Settings(school_name="한빛초", latitude=37.5, spreadsheet_url="abc")

    written = save_settings(settings, path)

    assert written == path
    raw = json.loads(path.read_text(encoding="utf-8"))
    assert raw["schoolName"] == "한빛초"
    assert raw["spreadsheetUrl"] == "abc"
    assert "school_name" not in raw
    assert load_settings(path) == settings


def test_effective_api_key():
    assert effective_api_key(Settings(), "built-in") == "built-in"
    custom = Settings(use_custom_api_key=True, custom_api_key="mine")
    assert effective_api_key(custom, "built-in") == "mine"
    enabled_but_blank = Settings(use_custom_api_key=True)
    assert effective_api_key(enabled_but_blank, "built-in") == "built-in"
    unused = Settings(use_custom_api_key=False, custom_api_key="mine")
    assert effective_api_key(unused, "built-in") == "built-in"


def test_unknown_alarm_sound_falls_back_to_classic(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"alarmSound": "kazoo", "alarmEnabled": False}), encoding="utf-8")
    settings = load_settings(path)
    assert settings.alarm_sound == "classic"
    assert settings.alarm_enabled is False


def test_every_listed_alarm_sound_is_accepted():
    for sound in ALARM_SOUNDS:
        assert Settings(alarm_sound=sound).alarm_sound == sound
