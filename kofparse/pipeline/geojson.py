"""GeoJSON serialization of parsed geometries."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Sequence

from kofparse.common.fs import write_json
from kofparse.common.models import Geometry, Line, Point, Polygon


def _positions(points: Sequence[Point]) -> list[list[float]]:
    # Mixed 2D/3D positions are not allowed within one geometry.
    with_elevation = bool(points) and all(point.has_elevation for point in points)
    return [point.coordinates(with_elevation) for point in points]


def geometry_for(geometry: Geometry) -> dict:
    if isinstance(geometry, Point):
        return {"type": "Point", "coordinates": geometry.coordinates()}
    if isinstance(geometry, Line):
        return {"type": "LineString", "coordinates": _positions(geometry.points)}
    if isinstance(geometry, Polygon):
        return {"type": "Polygon", "coordinates": [_positions(geometry.closed_ring())]}
    raise TypeError(f"Unsupported geometry type: {type(geometry).__name__}")


def feature_for(geometry: Geometry) -> dict:
    return {
        "type": "Feature",
        "geometry": geometry_for(geometry),
        "properties": geometry.properties(),
    }


def feature_collection(geometries: Iterable[Geometry], crs: str | None = None) -> dict:
    collection = {
        "type": "FeatureCollection",
        "features": [feature_for(geometry) for geometry in geometries],
    }
    if crs:
        collection["crs"] = {"type": "name", "properties": {"name": crs}}
    return collection


def write_geojson(path: Path, collection: dict) -> None:
    write_json(path, collection)
