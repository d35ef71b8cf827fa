"""Record-code classification for single KOF lines."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from kofparse.common.constants import GROUP_END_LINE, GROUP_END_POLYGON, GROUP_START


class RecordCode(str, Enum):
    COMMENT = "00"
    ADMIN = "01"
    STATION = "02"
    DESCRIPTION = "03"
    INSTRUMENT = "04"
    POINT = "05"
    HEIGHT = "06"
    REMARK = "07"
    AUXILIARY = "08"
    CONTROL = "09"
    FILE_ATTRIBUTES = "10"
    PENDING_ATTRIBUTES = "11"
    FILE_PROPERTIES = "12"
    MEASUREMENT = "20"
    GROUP_ATTRIBUTES = "30"
    IGNORED = "-"
    UNKNOWN = "??"


# Recognised record types the parser does not interpret further.
PASSIVE_CODES = frozenset(
    {
        RecordCode.STATION,
        RecordCode.DESCRIPTION,
        RecordCode.INSTRUMENT,
        RecordCode.HEIGHT,
        RecordCode.REMARK,
        RecordCode.AUXILIARY,
    }
)

_KNOWN_BY_VALUE = {
    code.value: code for code in RecordCode if code not in (RecordCode.IGNORED, RecordCode.UNKNOWN)
}
_CONTROL_RE = re.compile(r"^09[\s_.]*(\d{2})(?!\d)")
_STANDALONE_CONTROL_RE = re.compile(r"^(%d|%d|%d)(?!\d)" % (GROUP_START, GROUP_END_POLYGON, GROUP_END_LINE))
_SUBTOKEN_SPLIT_RE = re.compile(r"[\s_.]+")


@dataclass(frozen=True)
class ClassifiedRow:
    line_index: int
    raw: str
    code: RecordCode
    raw_code: str
    subtype: int | None = None
    tokens: tuple[str, ...] = ()

    @property
    def line_number(self) -> int:
        return self.line_index + 1

    @property
    def composite_code(self) -> str:
        if self.code is RecordCode.CONTROL and self.subtype is not None:
            return f"09_{self.subtype:02d}"
        return self.raw_code

    @property
    def text(self) -> str:
        """Line content after the record code."""
        return self.raw.strip()[len(self.raw_code) :].strip()

    def has_token(self, token: int) -> bool:
        return f"{token:02d}" in self.tokens


def classify_line(raw: str, line_index: int) -> ClassifiedRow | None:
    trimmed = raw.strip()
    if not trimmed:
        return None
    if trimmed.startswith("-"):
        return ClassifiedRow(line_index=line_index, raw=raw, code=RecordCode.IGNORED, raw_code="-")

    standalone = _STANDALONE_CONTROL_RE.match(trimmed)
    if standalone:
        # Bare 91/96/99 lines are shorthand for the 09 control record.
        trimmed = "09 " + trimmed

    raw_code = trimmed[:2]
    code = _KNOWN_BY_VALUE.get(raw_code, RecordCode.UNKNOWN)
    if code is not RecordCode.CONTROL:
        return ClassifiedRow(line_index=line_index, raw=raw, code=code, raw_code=raw_code)

    match = _CONTROL_RE.match(trimmed)
    subtype = int(match.group(1)) if match else None
    remainder = trimmed[2:]
    tokens = tuple(token for token in _SUBTOKEN_SPLIT_RE.split(remainder) if token)
    return ClassifiedRow(
        line_index=line_index,
        raw=raw,
        code=code,
        raw_code=raw_code,
        subtype=subtype,
        tokens=tokens,
    )
