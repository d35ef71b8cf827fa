"""Fixed-column layouts derived from ``-05`` header lines."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Mapping

from kofparse.common.constants import DEFAULT_HEADER, HEADER_MARKER

FIELD_BY_LETTER = {
    "P": "name",
    "K": "code",
    "X": "northing",
    "Y": "easting",
    "Z": "elevation",
}
_TOKEN_RE = re.compile(r"\S+")
_RECORD_CODE = "05"


@dataclass(frozen=True)
class FieldSpan:
    start: int
    width: int

    @property
    def end(self) -> int:
        return self.start + self.width

    def extract(self, line: str, offset: int = 0) -> str | None:
        start = max(self.start + offset, 0)
        end = max(self.end + offset, 0)
        value = line[start:end].strip()
        return value or None


@dataclass(frozen=True)
class ColumnLayout:
    header: str
    spans: Mapping[str, FieldSpan]
    order: tuple[str, ...]
    code_column: int

    @property
    def end(self) -> int:
        return max((span.end for span in self.spans.values()), default=0)

    def offset_for(self, line: str) -> int:
        """Shift needed to align ``line`` with the header.

        The header carries a leading ``-`` before its ``05``; data rows often
        do not, so their fields sit one column further left.
        """
        row_code_column = line.find(_RECORD_CODE)
        if row_code_column < 0:
            return 0
        return row_code_column - self.code_column

    def extract(self, line: str) -> dict[str, str | None]:
        offset = self.offset_for(line)
        return {name: span.extract(line, offset) for name, span in self.spans.items()}

    def trailing(self, line: str) -> str:
        return line[max(self.end + self.offset_for(line), 0) :].strip()


def parse_header(header: str) -> ColumnLayout:
    header = header.rstrip("\r\n")
    tokens = [(m.start(), m.group()) for m in _TOKEN_RE.finditer(header)]
    if not tokens or not tokens[0][1].startswith(HEADER_MARKER):
        raise ValueError(f"Not a {HEADER_MARKER} header: {header!r}")

    code_column = tokens[0][0] + tokens[0][1].index(_RECORD_CODE)
    spans: dict[str, FieldSpan] = {}
    order: list[str] = []
    field_tokens = tokens[1:]
    for idx, (start, token) in enumerate(field_tokens):
        field = FIELD_BY_LETTER.get(token[0].upper())
        if field is None or field in spans:
            continue
        if idx + 1 < len(field_tokens):
            width = field_tokens[idx + 1][0] - start
        else:
            width = len(token)
        spans[field] = FieldSpan(start=start, width=width)
        order.append(field)

    return ColumnLayout(header=header, spans=spans, order=tuple(order), code_column=code_column)


DEFAULT_LAYOUT = parse_header(DEFAULT_HEADER)


def find_header(lines: Iterable[str]) -> str | None:
    for line in lines:
        if line.strip().lstrip("\ufeff").startswith(HEADER_MARKER):
            return line.lstrip("\ufeff")
    return None
