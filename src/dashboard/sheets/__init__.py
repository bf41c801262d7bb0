"""Parsers for Google Sheets CSV exports (timetable, study plan, events)."""

from src.dashboard.sheets.dates import normalize_date
from src.dashboard.sheets.events import csv_to_events
from src.dashboard.sheets.study_plan import build_study_plan
from src.dashboard.sheets.timetable import build_timetable
from src.dashboard.sheets.tokenizer import tokenize

__all__ = [
    "build_study_plan",
    "build_timetable",
    "csv_to_events",
    "normalize_date",
    "tokenize",
]
