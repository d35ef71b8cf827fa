"""Coordinate transformation between EPSG systems."""

from __future__ import annotations

import copy
from typing import Any, Protocol, Sequence

from pyproj import CRS, Transformer

from kofparse.common.errors import ReprojectionError


class CoordinateTransform(Protocol):
    def __call__(self, from_crs: str, to_crs: str, xy: Sequence[float]) -> Sequence[float]: ...


class PyprojTransform:
    """Transforms (x, y) pairs with pyproj, one cached Transformer per CRS pair."""

    def __init__(self):
        self._transformers: dict[tuple[str, str], Transformer] = {}

    def transformer(self, from_crs: str, to_crs: str) -> Transformer:
        key = (from_crs, to_crs)
        if key not in self._transformers:
            self._transformers[key] = Transformer.from_crs(
                CRS.from_user_input(from_crs), CRS.from_user_input(to_crs), always_xy=True
            )
        return self._transformers[key]

    def __call__(self, from_crs: str, to_crs: str, xy: Sequence[float]) -> Sequence[float]:
        x, y = self.transformer(from_crs, to_crs).transform(xy[0], xy[1])
        return [x, y]


def _transform_position(position: list, from_crs: str, to_crs: str, transform: CoordinateTransform) -> list:
    x, y = transform(from_crs, to_crs, position[:2])
    return [x, y, *position[2:]]


def _transform_coordinates(coordinates: Any, from_crs: str, to_crs: str, transform: CoordinateTransform) -> Any:
    if coordinates and isinstance(coordinates[0], (int, float)):
        return _transform_position(coordinates, from_crs, to_crs, transform)
    return [_transform_coordinates(item, from_crs, to_crs, transform) for item in coordinates]


def reproject_collection(
    collection: dict,
    from_crs: str,
    to_crs: str,
    transform: CoordinateTransform,
) -> dict:
    """Deep copy of a FeatureCollection with every position transformed.

    Elevation values ride along untouched. Any failure from the transform is
    raised as ReprojectionError.
    """
    projected = copy.deepcopy(collection)
    try:
        for feature in projected.get("features", []):
            geometry = feature.get("geometry")
            if not geometry:
                continue
            geometry["coordinates"] = _transform_coordinates(geometry["coordinates"], from_crs, to_crs, transform)
    except ReprojectionError:
        raise
    except Exception as exc:
        raise ReprojectionError(f"Reprojection {from_crs} -> {to_crs} failed: {exc}") from exc
    return projected
