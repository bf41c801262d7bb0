from datetime import date

from src.dashboard.sheets.study_plan import (
    RowKind,
    build_study_plan,
    classify_row,
    extract_date_range,
)
from src.dashboard.sheets.tokenizer import tokenize

DAYS = ["", "월요일", "화요일", "수요일", "목요일", "금요일"]


def _title(text):
    return [text, "", "", "", "", ""]


def _week(title, *rows):
    return [_title(title), DAYS, *rows]


WEEK1 = _week(
    "1학기 1주차 (2026.03.02.~2026.03.06.)",
    ["1교시", "국어", "수학", "", "영어", "체육"],
    ["", "", "", "자율활동", "세부내용", ""],
    ["2교시", "a", "b", "c", "d", "e"],
)
WEEK2 = _week(
    "1학기 2주차 (2026.03.09.~2026.03.13.)",
    ["1교시", "과학", "", "", "", "음악"],
)


def test_classify_row():
    assert classify_row(_title("1주차")) is RowKind.TITLE
    assert classify_row(DAYS) is RowKind.HEADER
    assert classify_row(["", "월", "화", "", "", ""]) is RowKind.HEADER
    assert classify_row(["1교시", "국어", ""]) is RowKind.DATA
    assert classify_row(["", "", "세부내용"]) is RowKind.CONTINUATION
    assert classify_row(["", " ", ""]) is RowKind.BLANK
    assert classify_row([]) is RowKind.BLANK


def test_extract_date_range():
    assert extract_date_range("1학기 1주차 (2026.03.01.~2026.03.08.)") == ("20260301", "20260308")
    assert extract_date_range("1주차 (2026-03-02 ~ 2026-03-06)") == ("20260302", "20260306")
    assert extract_date_range("개학 (2026.03.02.)") == ("20260302", "20260302")
    assert extract_date_range("1주차") is None
    assert extract_date_range("1주차 (미정)") is None
    assert extract_date_range("1주차 (2026.03.02.~미정)") is None


def test_continuation_row_merges_into_previous_row():
    result = build_study_plan(WEEK1, today=date(2026, 3, 3))

    assert result is not None
    block = result.blocks[0]
    assert block.title == "1학기 1주차 (2026.03.02.~2026.03.06.)"
    assert block.headers == ["월요일", "화요일", "수요일", "목요일", "금요일"]
    assert block.rows == [
        ["1교시", "국어", "수학", "자율활동", "영어\n세부내용", "체육"],
        ["2교시", "a", "b", "c", "d", "e"],
    ]


def test_current_index_follows_today():
    rows = WEEK1 + WEEK2
    assert build_study_plan(rows, today=date(2026, 3, 2)).current_index == 0
    assert build_study_plan(rows, today=date(2026, 3, 6)).current_index == 0
    assert build_study_plan(rows, today=date(2026, 3, 10)).current_index == 1


def test_current_index_defaults_to_last_block():
    rows = WEEK1 + WEEK2
    assert build_study_plan(rows, today=date(2026, 7, 1)).current_index == 1


def test_block_without_date_range_is_never_current():
    undated = _week("방학 계획", ["1교시", "독서", "", "", "", ""])
    rows = undated + WEEK1 + WEEK2
    result = build_study_plan(rows, today=date(2026, 3, 4))
    assert len(result.blocks) == 3
    assert result.current_index == 1


def test_blocks_without_header_or_rows_are_discarded():
    no_header = [_title("1주차 (2026.03.02.~2026.03.06.)"), ["1교시", "국어", "", "", "", ""]]
    no_rows = [_title("2주차 (2026.03.09.~2026.03.13.)"), DAYS]
    result = build_study_plan(no_header + no_rows + WEEK2, today=date(2026, 3, 3))

    assert [b.title for b in result.blocks] == [WEEK2[0][0]]
    assert result.current_index == 0


def test_only_invalid_blocks_returns_none():
    no_rows = [_title("2주차"), DAYS]
    assert build_study_plan(no_rows) is None
    assert build_study_plan([]) is None


def test_rows_before_first_title_and_header_are_ignored():
    rows = [
        ["학급", "3학년 2반", "", "", "", ""],
        _title("1주차 (2026.03.02.~2026.03.06.)"),
        ["", "", "안내", "", "", ""],
        DAYS,
        ["", "", "앞선 줄", "", "", ""],
        ["1교시", "국어", "", "", "", "수학"],
    ]
    result = build_study_plan(rows, today=date(2026, 3, 3))
    assert len(result.blocks) == 1
    assert result.blocks[0].rows == [["1교시", "국어", "", "", "", "수학"]]


def test_short_header_defines_column_count():
    rows = [
        _title("1주차"),
        ["", "월", "화", "수"],
        ["1교시", "국어", "수학", "영어", "넘침"],
        ["2교시", "음악"],
    ]
    block = build_study_plan(rows).blocks[0]
    assert block.headers == ["월", "화", "수"]
    assert block.rows == [["1교시", "국어", "수학", "영어"], ["2교시", "음악", "", ""]]


def test_multiline_cells_from_tokenizer():
    text = (
        '"1학기 1주차 (2026.03.02.~2026.03.06.)",,,,,\r\n'
        ",월요일,화요일,수요일,목요일,금요일\r\n"
        '1교시,"대\n체\n공\n휴\n일",,자율활동,자율활동,국어\r\n'
        ",,,세부내용,세부내용,\r\n"
    )
    block = build_study_plan(tokenize(text), today=date(2026, 3, 2)).blocks[0]
    assert block.rows[0] == ["1교시", "대\n체\n공\n휴\n일", "", "자율활동\n세부내용", "자율활동\n세부내용", "국어"]
