"""Build weekly study-plan blocks from the "주학습계획안" spreadsheet tab.

The tab repeats one block per week:

    "1학기 1주차 (2026.03.01.~2026.03.08.)", "", "", "", "", ""   <- title
    "", "월요일", "화요일", "수요일", "목요일", "금요일"              <- header
    "1교시", "국어", "", "자율활동", "자율활동", "수학"               <- data
    "", "", "", "세부내용", "세부내용", ""                           <- continuation
    ...next title starts the next block

Each row is classified by which columns are empty, then fed to a small state
machine that owns the block being built. Continuation rows extend the cells
of the previous labelled row, one line per physical spreadsheet row.
"""

import re
from dataclasses import dataclass, field
from datetime import date
from enum import Enum, auto

from src.dashboard.dates import to_yyyymmdd
from src.dashboard.logging import get_logger
from src.dashboard.models import StudyPlanBlock, StudyPlanResult
from src.dashboard.sheets.dates import normalize_date

log = get_logger(__name__)

DAY_NAMES: frozenset[str] = frozenset({"월", "화", "수", "목", "금"})

_PARENS_RE = re.compile(r"\(([^)]+)\)")


class RowKind(Enum):
    TITLE = auto()
    HEADER = auto()
    DATA = auto()
    CONTINUATION = auto()
    BLANK = auto()


def _is_day_name(cell: str) -> bool:
    return "요일" in cell or cell in DAY_NAMES


def classify_row(row: list[str]) -> RowKind:
    """Tag a spreadsheet row by its shape.

    TITLE: first cell set, all others empty. HEADER: first cell empty and a
    day name somewhere. DATA: first cell set. CONTINUATION: first cell empty,
    something else set. BLANK: nothing set.
    """
    cells = [cell.strip() for cell in row]
    if not any(cells):
        return RowKind.BLANK

    label, rest = cells[0], cells[1:]
    if label:
        return RowKind.DATA if any(rest) else RowKind.TITLE
    if any(_is_day_name(cell) for cell in rest):
        return RowKind.HEADER
    return RowKind.CONTINUATION


def extract_date_range(title: str) -> tuple[str, str] | None:
    """Pull ``(start, end)`` as ``YYYYMMDD`` out of a block title.

    "1학기 1주차 (2026.03.01.~2026.03.08.)" -> ("20260301", "20260308").
    A single date in the parentheses is both start and end. Returns None when
    there is no parenthesised range or either side is not a date.
    """
    match = _PARENS_RE.search(title)
    if not match:
        return None

    parts = match.group(1).split("~", 1)
    if len(parts) == 1:
        single = normalize_date(parts[0])
        return (single, single) if single else None

    start = normalize_date(parts[0])
    end = normalize_date(parts[1])
    if not start or not end:
        return None
    return start, end


@dataclass
class _BlockBuilder:
    """Block under construction between two title rows."""

    title: str
    date_range: tuple[str, str] | None
    headers: list[str] = field(default_factory=list)
    labels: list[str] = field(default_factory=list)
    cells: list[list[str]] = field(default_factory=list)

    @property
    def has_header(self) -> bool:
        return bool(self.headers)

    def _day_cells(self, row: list[str]) -> list[str]:
        values = [cell.strip() for cell in row[1 : len(self.headers) + 1]]
        values.extend([""] * (len(self.headers) - len(values)))
        return values

    def set_header(self, row: list[str]) -> None:
        self.headers = [cell.strip() for cell in row[1:] if cell.strip()]

    def add_data(self, row: list[str]) -> None:
        self.labels.append(row[0].strip())
        self.cells.append(self._day_cells(row))

    def add_continuation(self, row: list[str]) -> None:
        if not self.cells:
            return
        last = self.cells[-1]
        for index, value in enumerate(self._day_cells(row)):
            if not value:
                continue
            last[index] = f"{last[index]}\n{value}" if last[index] else value

    def build(self) -> StudyPlanBlock | None:
        if not self.headers or not self.labels:
            return None
        rows = [[label, *cells] for label, cells in zip(self.labels, self.cells)]
        return StudyPlanBlock(title=self.title, headers=self.headers, rows=rows)

    def contains(self, day: str) -> bool:
        if self.date_range is None:
            return False
        start, end = self.date_range
        return start <= day <= end


def _segment(rows: list[list[str]]) -> list[_BlockBuilder]:
    """Run the row state machine and return every block that was opened."""
    builders: list[_BlockBuilder] = []
    current: _BlockBuilder | None = None

    for row in rows:
        kind = classify_row(row)

        if kind is RowKind.TITLE:
            title = row[0].strip()
            current = _BlockBuilder(title=title, date_range=extract_date_range(title))
            builders.append(current)
            continue

        if current is None or kind is RowKind.BLANK:
            continue

        if not current.has_header:
            # Rows between the title and the day-name header carry no data
            if kind is RowKind.HEADER:
                current.set_header(row)
            continue

        if kind is RowKind.DATA:
            current.add_data(row)
        else:
            # HEADER repeated inside a block behaves like a continuation row
            current.add_continuation(row)

    return builders


def build_study_plan(
    rows: list[list[str]], today: date | None = None
) -> StudyPlanResult | None:
    """Segment tokenized CSV rows into weekly blocks and pick this week.

    Args:
        rows: Output of the tokenizer.
        today: Date used to select the current block (default: today).

    Returns:
        StudyPlanResult with ``current_index`` pointing at the first block
        whose date range contains today, or at the last block when none does.
        None when no complete block was found.
    """
    today_value = to_yyyymmdd(today or date.today())

    blocks: list[StudyPlanBlock] = []
    current_index = -1
    discarded = 0

    for builder in _segment(rows):
        block = builder.build()
        if block is None:
            discarded += 1
            continue
        if current_index < 0 and builder.contains(today_value):
            current_index = len(blocks)
        blocks.append(block)

    if not blocks:
        log.info("study_plan_empty", rows=len(rows), discarded=discarded)
        return None

    if current_index < 0:
        current_index = len(blocks) - 1

    log.debug(
        "study_plan_built",
        blocks=len(blocks),
        current_index=current_index,
        discarded=discarded,
    )
    return StudyPlanResult(blocks=blocks, current_index=current_index)
