"""Normalization of loosely-typed geometry into `Polygon` models."""

from __future__ import annotations

from numbers import Real
from typing import Any, List, Mapping, Sequence

from pydantic import ValidationError

from .datatypes import Point, Polygon, Ring
from .errors import InvalidInputError


def coerce_polygon(value: Any) -> Polygon:
    """Convert nested rings, a bare ring, or a GeoJSON Polygon into a `Polygon`.

    Accepted shapes:

    * a `Polygon` (returned unchanged)
    * ``[[x, y], ...]``: a single outer ring
    * ``[[[x, y], ...], ...]``: outer ring followed by holes
    * GeoJSON ``Polygon`` geometries and ``Feature`` objects wrapping one
    """

    if isinstance(value, Polygon):
        return value

    if isinstance(value, Mapping):
        geometry = _unwrap_feature(value)
        kind = geometry.get("type")
        if kind != "Polygon":
            raise InvalidInputError(f"Expected a Polygon geometry; got {kind!r}")
        return coerce_polygon(geometry.get("coordinates"))

    rings = _coerce_rings(value)
    try:
        return Polygon(rings=rings)
    except ValidationError as exc:
        raise InvalidInputError(_describe_validation_error(exc)) from exc


def coerce_polygons(value: Any) -> List[Polygon]:
    """Like `coerce_polygon` but expands GeoJSON MultiPolygons into their members."""

    if isinstance(value, Mapping):
        geometry = _unwrap_feature(value)
        if geometry.get("type") == "MultiPolygon":
            members = geometry.get("coordinates") or []
            if not members:
                raise InvalidInputError("MultiPolygon has no members")
            return [coerce_polygon(member) for member in members]
    return [coerce_polygon(value)]


def coerce_point(value: Any) -> Point:
    """Convert an (x, y) pair, an ``{"x", "y"}`` mapping or a `Point`."""

    if isinstance(value, Point):
        return value

    if isinstance(value, Mapping):
        if {"x", "y"}.issubset(value):
            x, y = value["x"], value["y"]
        elif {"lng", "lat"}.issubset(value):
            x, y = value["lng"], value["lat"]
        else:
            raise InvalidInputError(f"Cannot read a coordinate from mapping keys {sorted(value)}")
    elif _is_pair(value):
        x, y = value[0], value[1]
    else:
        raise InvalidInputError(f"Cannot read a coordinate from {value!r}")

    try:
        return Point(x=x, y=y)
    except ValidationError as exc:
        raise InvalidInputError(f"Coordinate {value!r} is not finite") from exc


def coerce_ring(value: Any) -> Ring:
    """Convert a sequence of coordinates into a tuple of points."""

    if not _is_sequence(value):
        raise InvalidInputError(f"A ring must be a sequence of coordinates; got {type(value).__name__}")
    return tuple(coerce_point(item) for item in value)


def _coerce_rings(value: Any) -> List[Ring]:
    if not _is_sequence(value):
        raise InvalidInputError(f"A polygon must be a sequence of rings; got {type(value).__name__}")
    if not value:
        raise InvalidInputError("Polygon requires at least one ring")

    # a flat list of coordinates is a polygon with a single outer ring
    if _is_point_like(value[0]):
        return [coerce_ring(value)]
    return [coerce_ring(ring) for ring in value]


def _unwrap_feature(value: Mapping[str, Any]) -> Mapping[str, Any]:
    if value.get("type") == "Feature":
        geometry = value.get("geometry")
        if not isinstance(geometry, Mapping):
            raise InvalidInputError("Feature has no geometry")
        return geometry
    return value


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def _is_pair(value: Any) -> bool:
    return (
        _is_sequence(value)
        and len(value) >= 2
        and all(isinstance(v, Real) and not isinstance(v, bool) for v in value[:2])
    )


def _is_point_like(value: Any) -> bool:
    if isinstance(value, (Point, Mapping)):
        return True
    return _is_pair(value)


def _describe_validation_error(exc: ValidationError) -> str:
    messages = []
    for error in exc.errors():
        message = str(error.get("msg", "invalid value"))
        messages.append(message.removeprefix("Value error, "))
    return "; ".join(messages) or "Invalid polygon"
