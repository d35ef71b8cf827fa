"""Grouping of point rows into standalone points, lines and polygons.

Control records drive the state machine:

- ``09 91`` opens a group (flushing any open group first, as a line unless
  already typed).
- ``09 99`` closes the open group as a line, ``09 96`` as a polygon.
- ``09 72``..``09 79`` (saw) and ``09 82``..``09 89`` (wave) put the group in
  multi-line mode with ``code - 70`` / ``code - 80`` lines, opening a group
  when none is open.
- End of input flushes whatever is still open.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from kofparse.common.constants import GROUP_END_LINE, GROUP_END_POLYGON, GROUP_START, UNSUPPORTED_09_CODES
from kofparse.common.logging import get_logger, log_debug
from kofparse.common.models import Line, ParseResult, Point, Polygon, WarningKind
from kofparse.parsing.multiline import Algorithm, BucketAssigner, multiline_for_subtype
from kofparse.parsing.records import ClassifiedRow

MIN_LINE_POINTS = 2
MIN_POLYGON_POINTS = 3


class GroupState(str, Enum):
    IDLE = "idle"
    OPEN = "open"


class GroupType(str, Enum):
    LINE = "line"
    POLYGON = "polygon"


@dataclass
class Group:
    start_line: int
    points: list[Point] = field(default_factory=list)
    resolved_type: GroupType | None = None
    multiline: BucketAssigner[Point] | None = None

    def add(self, point: Point) -> None:
        self.points.append(point)
        if self.multiline is not None:
            self.multiline.assign(point)


def _raw_lines(points: list[Point]) -> tuple[str, ...]:
    return tuple(point.raw for point in points if point.raw is not None)


class GroupAssembler:
    def __init__(self, result: ParseResult | None = None, logger: logging.Logger | None = None):
        self.result = result if result is not None else ParseResult()
        self.logger = logger or get_logger("assembler")
        self.group: Group | None = None
        self.pending_attributes: dict[str, Any] | None = None

    @property
    def state(self) -> GroupState:
        return GroupState.OPEN if self.group is not None else GroupState.IDLE

    def set_pending_attributes(self, attributes: dict[str, Any]) -> None:
        self.pending_attributes = dict(attributes)

    def _take_pending(self) -> dict[str, Any]:
        pending = self.pending_attributes or {}
        self.pending_attributes = None
        return dict(pending)

    def add_point(self, point: Point) -> None:
        if self.group is not None:
            self.group.add(point)
            return
        self.result.add_geometry(point.with_attributes(self._take_pending()))

    def handle_control(self, row: ClassifiedRow) -> None:
        line = row.line_number
        if row.has_token(GROUP_START):
            self.start_group(row.line_index)
            if row.has_token(GROUP_END_LINE) or row.has_token(GROUP_END_POLYGON):
                self.group = None
                self.result.warn(
                    line,
                    f"KOF line {line} has both 91 and 99/96, skipping group.",
                    WarningKind.CONFLICTING_MARKER,
                )
            return

        multiline = multiline_for_subtype(row.subtype)
        if multiline is not None:
            algorithm, n = multiline
            self.start_multiline(row.line_index, algorithm, n)
        elif row.subtype == GROUP_END_LINE:
            self.end_group(row.line_index, GroupType.LINE)
        elif row.subtype == GROUP_END_POLYGON:
            self.end_group(row.line_index, GroupType.POLYGON)
        elif row.subtype in UNSUPPORTED_09_CODES:
            self.result.warn(
                line, f"KOF line {line} has unsupported code '{row.composite_code}'.", WarningKind.UNKNOWN_CODE
            )
        else:
            label = row.composite_code if row.subtype is not None else row.raw.strip()
            self.result.warn(line, f"KOF line {line} has unknown 09 code '{label}'.", WarningKind.UNKNOWN_CODE)

    def start_group(self, line_index: int) -> None:
        if self.group is not None:
            self.flush()
        self.group = Group(start_line=line_index + 1)

    def start_multiline(self, line_index: int, algorithm: Algorithm, n: int) -> None:
        if self.group is not None and self.group.points:
            self.flush()
        if self.group is None:
            self.group = Group(start_line=line_index + 1)
        self.group.multiline = BucketAssigner(algorithm, n)
        log_debug(self.logger, f"multi-line {algorithm.value} x{n}", line=line_index + 1, event="MULTILINE_START")

    def end_group(self, line_index: int, group_type: GroupType) -> None:
        line = line_index + 1
        if self.group is None:
            marker = GROUP_END_LINE if group_type is GroupType.LINE else GROUP_END_POLYGON
            self.result.warn(
                line, f"KOF line {line} has {marker} but no open group.", WarningKind.ORPHAN_CONTROL_MARKER
            )
            return
        self.group.resolved_type = group_type
        self.flush()

    def finish(self) -> None:
        if self.group is not None:
            self.flush()

    def flush(self) -> None:
        group = self.group
        self.group = None
        if group is None:
            return
        group_type = group.resolved_type or GroupType.LINE
        attributes = self._take_pending()
        if group.multiline is not None:
            self._flush_multiline(group, group_type, attributes)
        elif group_type is GroupType.LINE:
            self._emit_line(group.points, attributes, group.start_line)
        else:
            self._emit_polygon(group.points, attributes, group.start_line)

    def _emit_line(self, points: list[Point], attributes: dict[str, Any], start_line: int, label: str = "Line group") -> bool:
        if len(points) < MIN_LINE_POINTS:
            self.result.warn(
                start_line,
                f"{label} at line {start_line} has less than {MIN_LINE_POINTS} points, ignored.",
                WarningKind.SHORT_GROUP,
            )
            return False
        self.result.add_geometry(Line(points=tuple(points), attributes=dict(attributes), raw_lines=_raw_lines(points)))
        return True

    def _emit_polygon(self, points: list[Point], attributes: dict[str, Any], start_line: int) -> bool:
        if len(points) < MIN_POLYGON_POINTS:
            self.result.warn(
                start_line,
                f"Polygon group at line {start_line} has less than {MIN_POLYGON_POINTS} points, ignored.",
                WarningKind.SHORT_GROUP,
            )
            return False
        ring = Line(points=tuple(points), raw_lines=_raw_lines(points))
        self.result.add_geometry(Polygon(ring=ring, attributes=dict(attributes)))
        return True

    def _flush_multiline(self, group: Group, group_type: GroupType, attributes: dict[str, Any]) -> None:
        buckets = group.multiline.buckets
        if group_type is GroupType.LINE:
            for idx, bucket in enumerate(buckets):
                self._emit_line(bucket, attributes, group.start_line, label=f"Multi-line segment {idx} in group")
            return

        # Only the first bucket large enough to form a ring becomes the polygon.
        ring = next((bucket for bucket in buckets if len(bucket) >= MIN_POLYGON_POINTS), None)
        if ring is None:
            self.result.warn(
                group.start_line,
                f"Polygon group at line {group.start_line} has no sufficiently large multi-line ring, ignored.",
                WarningKind.SHORT_GROUP,
            )
            return
        self._emit_polygon(ring, attributes, group.start_line)
