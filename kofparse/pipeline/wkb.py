"""WKB-like object graph: plain dicts mirroring the WKB geometry model."""

from __future__ import annotations

from typing import Any, Iterable

from kofparse.common.models import Geometry, Line, Point, Polygon


def _wkb_point(point: Point) -> dict[str, Any]:
    return {
        "type": "Point",
        "x": point.easting,
        "y": point.northing,
        "z": point.elevation if point.has_elevation else None,
        "meta": point.properties(),
    }


def to_wkb_geometry(geometry: Geometry) -> dict[str, Any]:
    if isinstance(geometry, Point):
        return _wkb_point(geometry)
    if isinstance(geometry, Line):
        return {
            "type": "LineString",
            "points": [_wkb_point(point) for point in geometry.points],
            "meta": geometry.properties(),
        }
    if isinstance(geometry, Polygon):
        return {
            "type": "Polygon",
            "rings": [[_wkb_point(point) for point in geometry.closed_ring()]],
            "meta": geometry.properties(),
        }
    raise TypeError(f"Unsupported geometry type: {type(geometry).__name__}")


def to_wkb_geometries(geometries: Iterable[Geometry]) -> list[dict[str, Any]]:
    return [to_wkb_geometry(geometry) for geometry in geometries]
