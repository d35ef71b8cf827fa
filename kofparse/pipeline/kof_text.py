"""KOF text output for parsed geometries."""

from __future__ import annotations

from typing import Iterable

from kofparse.common.constants import GROUP_END_LINE, GROUP_END_POLYGON, GROUP_START
from kofparse.common.models import Geometry, Line, ParseResult, Point, Polygon


def format_point_row(point: Point) -> str:
    """Point as a ``05`` row aligned with the default header template."""
    if point.raw is not None:
        return point.raw.rstrip()
    elevation = f"{point.elevation:8.3f}" if point.has_elevation else " " * 8
    return (
        f" 05 {(point.name or ''):<10.10} {(point.code or ''):<8.8} "
        f"{point.northing:12.3f} {point.easting:11.3f} {elevation}"
    ).rstrip()


def _group_rows(points: Iterable[Point], end_marker: int) -> list[str]:
    rows = [f" 09 {GROUP_START}"]
    rows.extend(format_point_row(point) for point in points)
    rows.append(f" 09 {end_marker}")
    return rows


def geometry_rows(geometry: Geometry) -> list[str]:
    if isinstance(geometry, Point):
        return [format_point_row(geometry)]
    if isinstance(geometry, Line):
        return _group_rows(geometry.points, GROUP_END_LINE)
    if isinstance(geometry, Polygon):
        return _group_rows(geometry.ring.points, GROUP_END_POLYGON)
    raise TypeError(f"Unsupported geometry type: {type(geometry).__name__}")


def to_kof_text(result: ParseResult | Iterable[Geometry], *, header: str | None = None) -> str:
    geometries = result.geometries if isinstance(result, ParseResult) else list(result)
    rows: list[str] = [header] if header else []
    for geometry in geometries:
        rows.extend(geometry_rows(geometry))
    return "\n".join(rows) + "\n"
