"""Run the school dashboard engine headless, or inspect its data as JSON.

Standalone CLI around src.dashboard. Loads the user settings file, fetches
weather, air quality, NEIS meals/events and the Google Sheets tabs, then
either keeps running (status + alarms every second, refresh every 30 minutes)
or prints one snapshot.

Run with: python scripts/run_dashboard.py
Once:     python scripts/run_dashboard.py --once
Status:   python scripts/run_dashboard.py --status
Parse:    python scripts/run_dashboard.py --parse-csv data/timetable.csv --kind timetable
Search:   python scripts/run_dashboard.py --search-school 한빛초
Geocode:  python scripts/run_dashboard.py --geocode "서울특별시 중구 세종대로 110"
Alarm:    python scripts/run_dashboard.py --alarm-file bell.mp3

Exit codes:
  0 = success (JSON on stdout, or clean shutdown of the loop)
  1 = error (message on stderr)
"""

import argparse
import asyncio
import json
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Add project root to path for src imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from src.dashboard.alarm_sounds import CUSTOM_SOUND, load_alarm_file  # noqa: E402
from src.dashboard.config import get_config  # noqa: E402
from src.dashboard.display import (  # noqa: E402
    dashboard_summary,
    format_clock,
    status_badge_class,
)
from src.dashboard.errors import PermanentError  # noqa: E402
from src.dashboard.logging import setup_logging  # noqa: E402
from src.dashboard.models import AlarmEvent, PeriodStatus  # noqa: E402
from src.dashboard.period_status import get_period_status  # noqa: E402
from src.dashboard.runner import DashboardRunner  # noqa: E402
from src.dashboard.service import DashboardService  # noqa: E402
from src.dashboard.settings_store import load_settings, save_settings  # noqa: E402
from src.dashboard.sheets import (  # noqa: E402
    build_study_plan,
    build_timetable,
    csv_to_events,
    tokenize,
)

_PARSERS = {
    "timetable": build_timetable,
    "study-plan": build_study_plan,
    "events": csv_to_events,
}


def _log(msg: str) -> None:
    """Write diagnostic messages to stderr so stdout stays clean for JSON."""
    print(msg, file=sys.stderr)


def _dump(value) -> None:
    if hasattr(value, "model_dump"):
        value = value.model_dump(by_alias=True, mode="json")
    elif isinstance(value, list):
        value = [v.model_dump(by_alias=True, mode="json") for v in value]
    print(json.dumps(value, ensure_ascii=False, indent=2))


def _parse_args() -> argparse.Namespace:
    """Parse CLI arguments using argparse."""
    parser = argparse.ArgumentParser(
        description="School dashboard engine (headless).",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--settings",
        type=str,
        default=None,
        help="Settings JSON path (default: SETTINGS_PATH or %%APPDATA%%/Wall-E/settings.json).",
    )

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--once",
        action="store_true",
        help="Fetch every source once and print DashboardData as JSON.",
    )
    mode.add_argument(
        "--status",
        action="store_true",
        help="Fetch every source once and print the current period status with today's summary.",
    )
    mode.add_argument(
        "--parse-csv",
        type=str,
        default=None,
        metavar="PATH",
        help="Parse a local CSV export and print the result as JSON.",
    )
    mode.add_argument(
        "--search-school",
        type=str,
        default=None,
        metavar="NAME",
        help="Search NEIS for schools by name.",
    )
    mode.add_argument(
        "--geocode",
        type=str,
        default=None,
        metavar="ADDRESS",
        help="Look up coordinates for an address (Korea only).",
    )
    mode.add_argument(
        "--alarm-file",
        type=str,
        default=None,
        metavar="PATH",
        help="Store an audio file as the custom alarm sound in the settings file.",
    )

    parser.add_argument(
        "--kind",
        choices=sorted(_PARSERS),
        default="timetable",
        help="How to interpret --parse-csv (default: timetable).",
    )
    return parser.parse_args()


def _parse_local_csv(path: str, kind: str) -> int:
    csv_path = Path(path)
    if not csv_path.exists():
        _log(f"ERROR: {csv_path} not found")
        return 1
    rows = tokenize(csv_path.read_text(encoding="utf-8-sig"))
    result = _PARSERS[kind](rows)
    if result is None:
        _log(f"No usable {kind} data in {csv_path}")
        return 1
    _dump(result)
    return 0


def _store_alarm_file(path: str, settings_path: str | None) -> int:
    try:
        alarm = load_alarm_file(path)
    except PermanentError as e:
        _log(f"ERROR: {e}")
        return 1
    settings = load_settings(settings_path).model_copy(
        update={
            "alarm_sound": CUSTOM_SOUND,
            "custom_alarm_data": alarm.data,
            "custom_alarm_name": alarm.name,
        }
    )
    written = save_settings(settings, settings_path)
    _log(f"Custom alarm {alarm.name} saved to {written}")
    return 0


def _print_alarm(event: AlarmEvent) -> None:
    _log(f"ALARM: {event.period}교시 {event.type.value}")


async def _run(args: argparse.Namespace) -> int:
    def settings_loader():
        return load_settings(args.settings)

    service = DashboardService()

    if args.search_school is not None:
        schools = await service.search_school(settings_loader(), args.search_school)
        _dump(schools)
        return 0

    if args.geocode is not None:
        coords = await service.geocode(args.geocode)
        if coords is None:
            _log(f"No match for {args.geocode!r}")
            return 1
        _dump(coords)
        return 0

    if args.once:
        data = await service.fetch_dashboard_data(settings_loader())
        _dump(data)
        return 0

    if args.status:
        snapshot = await service.refresh(settings_loader())
        now = service.clock()
        status = get_period_status(snapshot.periods, now)
        _dump(dashboard_summary(snapshot.data, status, now))
        return 0

    last_message: list[str] = []

    def on_status(status: PeriodStatus) -> None:
        # Only print when the badge text changes
        if last_message and last_message[-1] == status.message:
            return
        last_message[:] = [status.message]
        _log(f"{format_clock(service.clock())} [{status_badge_class(status)}] {status.message}")

    runner = DashboardRunner(
        service,
        settings_loader=settings_loader,
        on_status=on_status,
        on_alarm=_print_alarm,
    )
    await runner.run()
    return 0


def main() -> int:
    args = _parse_args()
    config = get_config()
    setup_logging(json_output=config.log_json, log_level=config.log_level)

    if args.parse_csv:
        return _parse_local_csv(args.parse_csv, args.kind)
    if args.alarm_file:
        return _store_alarm_file(args.alarm_file, args.settings)

    try:
        return asyncio.run(_run(args))
    except KeyboardInterrupt:
        _log("Stopped.")
        return 0


if __name__ == "__main__":
    sys.exit(main())
