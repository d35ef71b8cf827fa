"""Data models used across the parser."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Mapping, Union

from kofparse.common.constants import ELEVATION_SENTINEL


@dataclass(frozen=True)
class Point:
    easting: float
    northing: float
    elevation: float = ELEVATION_SENTINEL
    name: str | None = None
    code: str | None = None
    attributes: Mapping[str, Any] = field(default_factory=dict)
    raw: str | None = None

    @property
    def has_elevation(self) -> bool:
        return self.elevation != ELEVATION_SENTINEL

    @property
    def is_valid(self) -> bool:
        return not (self.northing == 0 and self.easting == 0)

    def same_position(self, other: "Point") -> bool:
        return self.easting == other.easting and self.northing == other.northing

    def coordinates(self, with_elevation: bool | None = None) -> list[float]:
        if with_elevation is None:
            with_elevation = self.has_elevation
        if with_elevation:
            return [self.easting, self.northing, self.elevation]
        return [self.easting, self.northing]

    def with_attributes(self, extra: Mapping[str, Any] | None) -> "Point":
        if not extra:
            return self
        return replace(self, attributes={**self.attributes, **extra})

    def properties(self) -> dict[str, Any]:
        props: dict[str, Any] = {"name": self.name, "fcode": self.code, "code": self.code}
        props.update(self.attributes)
        return props


@dataclass(frozen=True)
class Line:
    points: tuple[Point, ...]
    attributes: Mapping[str, Any] = field(default_factory=dict)
    raw_lines: tuple[str, ...] = ()

    @property
    def first_point(self) -> Point | None:
        return self.points[0] if self.points else None

    @property
    def name(self) -> str | None:
        if "name" in self.attributes:
            return self.attributes["name"]
        first = self.first_point
        return first.name if first is not None else None

    @property
    def code(self) -> str | None:
        for key in ("fcode", "code"):
            if key in self.attributes:
                return self.attributes[key]
        first = self.first_point
        return first.code if first is not None else None

    def properties(self) -> dict[str, Any]:
        props: dict[str, Any] = {"name": self.name, "fcode": self.code, "code": self.code}
        props.update(self.attributes)
        return props

    def __str__(self) -> str:
        return "\n".join(self.raw_lines)


@dataclass(frozen=True)
class Polygon:
    ring: Line
    attributes: Mapping[str, Any] = field(default_factory=dict)

    @property
    def name(self) -> str | None:
        if "name" in self.attributes:
            return self.attributes["name"]
        return self.ring.name

    @property
    def code(self) -> str | None:
        for key in ("fcode", "code"):
            if key in self.attributes:
                return self.attributes[key]
        return self.ring.code

    def closed_ring(self) -> tuple[Point, ...]:
        points = self.ring.points
        if len(points) < 3:
            return points
        if points[0].same_position(points[-1]):
            return points
        return points + (points[0],)

    def properties(self) -> dict[str, Any]:
        props: dict[str, Any] = {"name": self.name, "fcode": self.code, "code": self.code}
        props.update(self.attributes)
        return props


Geometry = Union[Point, Line, Polygon]


class WarningKind(str, Enum):
    MALFORMED_ROW = "MALFORMED_ROW"
    ORPHAN_CONTROL_MARKER = "ORPHAN_CONTROL_MARKER"
    CONFLICTING_MARKER = "CONFLICTING_MARKER"
    UNKNOWN_CODE = "UNKNOWN_CODE"
    IGNORED_LINES = "IGNORED_LINES"
    SHORT_GROUP = "SHORT_GROUP"
    MEASUREMENT = "MEASUREMENT"


@dataclass(frozen=True)
class ParseWarning:
    line: int
    message: str
    kind: WarningKind
    end_line: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"line": self.line, "message": self.message, "kind": self.kind.value, "end_line": self.end_line}


@dataclass(frozen=True)
class Diagnostic:
    line: int
    strategy: str

    def to_dict(self) -> dict[str, Any]:
        return {"line": self.line, "strategy": self.strategy}


@dataclass
class FileMetadata:
    file_name: str | None = None
    file_extension: str | None = None
    file_size: int | None = None
    number_of_lines: int = 0
    mode: str | None = None
    points: int = 0
    line_strings: int = 0
    line_points: int = 0
    polygons: int = 0
    polygon_points: int = 0
    feature_codes: set[str] = field(default_factory=set)
    record_code_counts: Counter = field(default_factory=Counter)
    attributes: dict[str, Any] = field(default_factory=dict)
    source_crs: str | None = None
    source_crs_description: str | None = None
    target_crs: str | None = None
    target_crs_description: str | None = None
    reprojection_error: str | None = None

    def add_geometry(self, geometry: Geometry) -> None:
        if isinstance(geometry, Point):
            self.points += 1
        elif isinstance(geometry, Line):
            self.line_strings += 1
            self.line_points += len(geometry.points)
        elif isinstance(geometry, Polygon):
            self.polygons += 1
            self.polygon_points += len(geometry.ring.points)
        else:
            raise TypeError(f"Unsupported geometry type: {type(geometry).__name__}")

    def count_record(self, code: str) -> None:
        self.record_code_counts[code] += 1

    def observe_feature_code(self, code: str | None) -> None:
        if code:
            self.feature_codes.add(code)

    def to_dict(self) -> dict[str, Any]:
        return {
            "file_name": self.file_name,
            "file_extension": self.file_extension,
            "file_size": self.file_size,
            "number_of_lines": self.number_of_lines,
            "mode": self.mode,
            "geom_counts": {
                "points": self.points,
                "line_strings": self.line_strings,
                "line_points": self.line_points,
                "polygons": self.polygons,
                "polygon_points": self.polygon_points,
            },
            "feature_codes": sorted(self.feature_codes),
            "number_of_feature_codes": len(self.feature_codes),
            "record_code_counts": dict(sorted(self.record_code_counts.items())),
            "attributes": dict(self.attributes),
            "source_crs": self.source_crs,
            "source_crs_description": self.source_crs_description,
            "target_crs": self.target_crs,
            "target_crs_description": self.target_crs_description,
            "reprojection_error": self.reprojection_error,
        }


@dataclass
class ParseResult:
    geometries: list[Geometry] = field(default_factory=list)
    warnings: list[ParseWarning] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    metadata: FileMetadata = field(default_factory=FileMetadata)
    comments: list[str] = field(default_factory=list)
    admin_blocks: list[str] = field(default_factory=list)
    file_attributes: dict[str, Any] = field(default_factory=dict)

    def add_geometry(self, geometry: Geometry) -> None:
        self.geometries.append(geometry)
        self.metadata.add_geometry(geometry)

    def warn(self, line: int, message: str, kind: WarningKind, end_line: int | None = None) -> ParseWarning:
        warning = ParseWarning(line=line, message=message, kind=kind, end_line=end_line)
        self.warnings.append(warning)
        return warning

    def add_file_attributes(self, attributes: Mapping[str, Any]) -> None:
        self.file_attributes.update(attributes)
        self.metadata.attributes.update(attributes)
