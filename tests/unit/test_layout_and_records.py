from __future__ import annotations

import pytest

from kofparse.common.constants import DEFAULT_HEADER
from kofparse.parsing.layout import DEFAULT_LAYOUT, FieldSpan, find_header, parse_header
from kofparse.parsing.records import RecordCode, classify_line


def test_parse_header_records_start_and_width_per_field():
    layout = parse_header(DEFAULT_HEADER)

    assert layout.order == ("name", "code", "northing", "easting", "elevation")
    assert layout.code_column == 1
    assert layout.spans["name"] == FieldSpan(start=4, width=11)
    assert layout.spans["code"] == FieldSpan(start=15, width=9)
    assert layout.spans["northing"] == FieldSpan(start=24, width=13)
    assert layout.spans["easting"] == FieldSpan(start=37, width=12)
    assert layout.spans["elevation"] == FieldSpan(start=49, width=8)


def test_parse_header_rejects_non_header_lines():
    with pytest.raises(ValueError):
        parse_header("05 P1 1 2 3")


def test_default_layout_is_the_default_header():
    assert DEFAULT_LAYOUT == parse_header(DEFAULT_HEADER)
    assert DEFAULT_LAYOUT.header == DEFAULT_HEADER


def test_row_without_leading_dash_is_shifted_left():
    layout = parse_header(DEFAULT_HEADER)

    assert layout.offset_for("05 P1") == -1
    assert layout.offset_for(" 05 P1") == 0


def test_empty_field_extracts_as_none():
    assert FieldSpan(start=10, width=5).extract("05 P1") is None


def test_find_header_anywhere_and_behind_bom():
    lines = ["00 Survey", "\ufeff-05 PPPP KKKK XXXX YYYY", "05 P1 1 2"]

    assert find_header(lines) == "-05 PPPP KKKK XXXX YYYY"
    assert find_header(["05 P1 1 2"]) is None


@pytest.mark.parametrize("raw", ["09 91", "09_91", "09.91", " 91"])
def test_start_marker_spellings_normalize(raw: str):
    row = classify_line(raw, 0)

    assert row.code is RecordCode.CONTROL
    assert row.subtype == 91
    assert row.composite_code == "09_91"


def test_classify_line_basic_codes():
    assert classify_line("   ", 0) is None
    assert classify_line("-05 PPPP", 0).code is RecordCode.IGNORED
    assert classify_line("-- remark", 0).code is RecordCode.IGNORED
    assert classify_line(" 05 P1 1 2", 0).code is RecordCode.POINT
    assert classify_line("11 fcode=1", 0).code is RecordCode.PENDING_ATTRIBUTES
    assert classify_line("42 something", 0).code is RecordCode.UNKNOWN


def test_control_row_keeps_all_subtokens():
    row = classify_line("09 91 99", 3)

    assert row.line_number == 4
    assert row.has_token(91)
    assert row.has_token(99)
    assert not row.has_token(96)


def test_comment_text_follows_record_code():
    assert classify_line("00 Oppmaaling Nord", 0).text == "Oppmaaling Nord"
