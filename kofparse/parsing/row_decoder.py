"""Decoding of ``05`` point observation rows.

Two strategies exist. Column mode slices fixed-width fields out of the row
using a :class:`ColumnLayout` taken from a ``-05`` header. Token mode splits
the row on whitespace and looks for the coordinate pair with a short list of
numeric heuristics. Whichever strategy fires, the candidate pair is checked
for plausibility and swapped when only the swapped order makes sense.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from kofparse.common.constants import ELEVATION_SENTINEL, EXTRA_ATTRS_KEY
from kofparse.common.models import Point
from kofparse.parsing.attributes import parse_kv_pairs
from kofparse.parsing.layout import ColumnLayout

NUMBER_RE = re.compile(r"^-?\d+(?:[.,]\d+)?$")
_DECIMAL_RE = re.compile(r"\d+[.,]\d+")
_LARGE_COORDINATE = 100000
_SMALL_ELEVATION = 1000
_ROW_CODE = "05"


@dataclass(frozen=True)
class DecodedRow:
    northing: float
    easting: float
    elevation: float
    name: str | None
    code: str | None
    strategy: str
    attributes: dict[str, Any] = field(default_factory=dict)

    @property
    def swapped(self) -> bool:
        return self.strategy.endswith("-swapped")

    def to_point(self, raw: str | None = None) -> Point:
        return Point(
            easting=self.easting,
            northing=self.northing,
            elevation=self.elevation,
            name=self.name,
            code=self.code,
            attributes=dict(self.attributes),
            raw=raw,
        )


@dataclass(frozen=True)
class MalformedRow:
    line: int
    reason: str

    @property
    def message(self) -> str:
        return f"KOF line {self.line} malformed: {self.reason}."


def is_number(token: str | None) -> bool:
    return token is not None and bool(NUMBER_RE.match(token))


def to_number(token: str) -> float:
    return float(token.replace(",", "."))


def is_plausible(north: float | None, east: float | None) -> bool:
    if north is None or east is None:
        return False
    if not float(north).is_integer():
        return True
    if abs(north) >= _LARGE_COORDINATE:
        return True
    return abs(east) >= _SMALL_ELEVATION


def _trailing_attributes(tokens: list[str]) -> dict[str, Any]:
    if not tokens:
        return {}
    pairs = parse_kv_pairs(" ".join(tokens))
    if not pairs:
        return {EXTRA_ATTRS_KEY: list(tokens)}
    return pairs


def _finalize(
    north: float,
    east: float,
    elevation: float,
    name: str | None,
    code: str | None,
    strategy: str,
    attributes: dict[str, Any],
) -> DecodedRow:
    if not is_plausible(north, east) and is_plausible(east, north):
        north, east = east, north
        strategy = f"{strategy}-swapped"
    return DecodedRow(
        northing=north,
        easting=east,
        elevation=elevation,
        name=name,
        code=code,
        strategy=strategy,
        attributes=attributes,
    )


def _row_tokens(line: str) -> list[str]:
    tokens = line.strip().split()
    if tokens and tokens[0] == _ROW_CODE:
        tokens = tokens[1:]
    return tokens


def decode_columns(line: str, line_index: int, layout: ColumnLayout) -> DecodedRow | MalformedRow:
    fields = layout.extract(line)
    north_field = fields.get("northing")
    east_field = fields.get("easting")
    if is_number(north_field) and is_number(east_field):
        elevation_field = fields.get("elevation")
        elevation = to_number(elevation_field) if is_number(elevation_field) else ELEVATION_SENTINEL
        trailing = layout.trailing(line)
        return _finalize(
            to_number(north_field),
            to_number(east_field),
            elevation,
            fields.get("name"),
            fields.get("code"),
            "columns",
            _trailing_attributes(trailing.split()),
        )

    return _decode_unaligned(line, line_index, layout)


def _decode_unaligned(line: str, line_index: int, layout: ColumnLayout) -> DecodedRow | MalformedRow:
    """Row not aligned with the header columns.

    Coordinates are anchored on the last run of numeric tokens, so a row that
    leaves out its name or code still lands in the right fields. Tokens in
    front of the coordinates fill the remaining header fields in order.
    """
    tokens = _row_tokens(line)
    numeric = [idx for idx, token in enumerate(tokens) if is_number(token)]
    if not numeric:
        return MalformedRow(line=line_index + 1, reason="invalid coordinates")

    last = numeric[-1]
    first = last
    while first > 0 and is_number(tokens[first - 1]):
        first -= 1
    run = [to_number(token) for token in tokens[first : last + 1]]

    if len(run) >= 3 and abs(run[-1]) < _SMALL_ELEVATION:
        pair, elevation, used = run[-3:-1], run[-1], 3
    elif len(run) >= 2:
        pair, elevation, used = run[-2:], ELEVATION_SENTINEL, 2
    else:
        return MalformedRow(line=line_index + 1, reason="invalid coordinates")

    horizontal = [name for name in layout.order if name in ("northing", "easting")]
    if horizontal == ["easting", "northing"]:
        east, north = pair
    else:
        north, east = pair

    leading = tokens[: last + 1 - used]
    meta_fields = [name for name in layout.order if name in ("name", "code")] or ["name", "code"]
    meta = dict(zip(meta_fields, leading))
    return _finalize(
        north,
        east,
        elevation,
        meta.get("name"),
        meta.get("code"),
        "columns-ordered",
        _trailing_attributes(tokens[last + 1 :]),
    )


def _build(
    tokens: list[str],
    north: float,
    east: float,
    elevation: float,
    meta_count: int,
    last_index: int,
    strategy: str,
    code: str | None = None,
) -> DecodedRow:
    meta = tokens[:meta_count]
    name = meta[0] if meta else None
    if code is None and len(meta) >= 2:
        code = meta[1]
    attributes = _trailing_attributes(tokens[last_index + 1 :])
    return _finalize(north, east, elevation, name, code, strategy, attributes)


def decode_tokens(line: str, line_index: int) -> DecodedRow | MalformedRow:
    tokens = _row_tokens(line)
    if not tokens:
        return MalformedRow(line=line_index + 1, reason=f"no data after '{_ROW_CODE}'")

    count = len(tokens)
    numeric = [idx for idx, token in enumerate(tokens) if is_number(token)]

    # Numeric tokens closing the row: [north, east, elev] or [code, north, east], then [north, east].
    if len(numeric) >= 2 and numeric[-1] == count - 1 and numeric[-2] == count - 2:
        if len(numeric) >= 3 and numeric[-3] == count - 3:
            a, b, c = (to_number(tokens[idx]) for idx in numeric[-3:])
            if abs(c) < _SMALL_ELEVATION and is_plausible(a, b):
                return _build(tokens, a, b, c, count - 3, count - 1, "tokens-end-3")
            if is_plausible(b, c) or is_plausible(c, b):
                return _build(
                    tokens, b, c, ELEVATION_SENTINEL, count - 3, count - 1, "tokens-end-3-large", code=tokens[count - 3]
                )
        north, east = to_number(tokens[-2]), to_number(tokens[-1])
        if is_plausible(north, east) or is_plausible(east, north):
            return _build(tokens, north, east, ELEVATION_SENTINEL, count - 2, count - 1, "tokens-end-2")

    # First token with a decimal part, plus its neighbour.
    decimal_idx = next((idx for idx, token in enumerate(tokens) if _DECIMAL_RE.search(token)), None)
    if decimal_idx is not None and decimal_idx + 1 < count and is_number(tokens[decimal_idx + 1]):
        north = to_number(tokens[decimal_idx]) if is_number(tokens[decimal_idx]) else None
        east = to_number(tokens[decimal_idx + 1])
        if north is not None and (is_plausible(north, east) or is_plausible(east, north)):
            last = decimal_idx + 1
            elevation = ELEVATION_SENTINEL
            if last + 1 < count and is_number(tokens[last + 1]):
                last += 1
                elevation = to_number(tokens[last])
            return _build(tokens, north, east, elevation, decimal_idx, last, "decimal-scan")

    # First token large enough to be a projected coordinate, plus its neighbour.
    for idx in range(count - 1):
        if not is_number(tokens[idx]) or abs(to_number(tokens[idx])) < _LARGE_COORDINATE:
            continue
        if not is_number(tokens[idx + 1]):
            continue
        north, east = to_number(tokens[idx]), to_number(tokens[idx + 1])
        if not is_plausible(north, east):
            continue
        last = idx + 1
        elevation = ELEVATION_SENTINEL
        if last + 1 < count and is_number(tokens[last + 1]):
            last += 1
            elevation = to_number(tokens[last])
        return _build(tokens, north, east, elevation, idx, last, "large-first")

    return MalformedRow(line=line_index + 1, reason="invalid coordinates")


def decode_row(line: str, line_index: int, layout: ColumnLayout | None = None) -> DecodedRow | MalformedRow:
    line = line.rstrip("\r\n")
    if layout is not None:
        return decode_columns(line, line_index, layout)
    return decode_tokens(line, line_index)
