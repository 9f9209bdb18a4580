"""Planar geometry helpers used by the label search."""

from __future__ import annotations

from math import frexp, inf, isfinite, ldexp, sqrt
from typing import Iterable, Iterator, Tuple

from .datatypes import Envelope, Point, Polygon, Ring


def segment_distance_sq(point: Point, a: Point, b: Point) -> float:
    """Squared distance from ``point`` to the finite segment [a, b]."""

    x, y = a.x, a.y
    dx = b.x - x
    dy = b.y - y

    # zero-length segments measure against ``a`` directly
    if dx != 0 or dy != 0:
        t = ((point.x - x) * dx + (point.y - y) * dy) / (dx * dx + dy * dy)

        if t > 1:
            x, y = b.x, b.y
        elif t > 0:
            x += dx * t
            y += dy * t

    dx = point.x - x
    dy = point.y - y
    return dx * dx + dy * dy


def ring_edges(ring: Ring) -> Iterator[Tuple[Point, Point]]:
    """Yield the (i, i-1) vertex pairs of a ring, wrapping around."""

    j = len(ring) - 1
    for i, a in enumerate(ring):
        yield a, ring[j]
        j = i


def _crosses_ray(point: Point, a: Point, b: Point) -> bool:
    # strict comparison keeps horizontal edges from ever counting
    if (a.y > point.y) == (b.y > point.y):
        return False
    intersection_x = (b.x - a.x) * (point.y - a.y) / (b.y - a.y) + a.x
    return point.x < intersection_x


def point_in_polygon(point: Point, polygon: Polygon) -> bool:
    """Ray casting parity test folded across every ring, so holes count as outside."""

    inside = False
    for ring in polygon.rings:
        for a, b in ring_edges(ring):
            if _crosses_ray(point, a, b):
                inside = not inside
    return inside


def point_to_polygon_distance(point: Point, polygon: Polygon) -> float:
    """Signed distance from ``point`` to the polygon outline.

    Positive inside, negative outside (including inside a hole). The
    nearest edge is searched over every ring whether or not it crosses
    the parity ray.
    """

    inside = False
    min_dist_sq = inf

    for ring in polygon.rings:
        for a, b in ring_edges(ring):
            if _crosses_ray(point, a, b):
                inside = not inside
            min_dist_sq = min(min_dist_sq, segment_distance_sq(point, a, b))

    distance = sqrt(min_dist_sq)
    return distance if inside else -distance


def ring_envelope(ring: Iterable[Point]) -> Envelope:
    """Axis-aligned envelope of a ring's vertices."""

    points = list(ring)
    if not points:
        raise ValueError("Cannot compute the envelope of an empty ring")

    min_x = max_x = points[0].x
    min_y = max_y = points[0].y
    for p in points[1:]:
        if p.x < min_x:
            min_x = p.x
        if p.y < min_y:
            min_y = p.y
        if p.x > max_x:
            max_x = p.x
        if p.y > max_y:
            max_y = p.y

    return Envelope(min_x=min_x, min_y=min_y, max_x=max_x, max_y=max_y)


def ring_centroid(ring: Ring) -> Point:
    """Area-weighted centroid of a ring, or its first vertex when the area is zero.

    Sums are taken relative to the first vertex and rescaled by a power of
    two, so large or far-off rings do not overflow.
    """

    origin = ring[0]
    offsets = [(p.x - origin.x, p.y - origin.y) for p in ring]
    largest = max(max(abs(dx), abs(dy)) for dx, dy in offsets)
    if not isfinite(largest):
        return origin
    exponent = frexp(largest)[1]
    offsets = [(ldexp(dx, -exponent), ldexp(dy, -exponent)) for dx, dy in offsets]

    area = 0.0
    x = 0.0
    y = 0.0
    j = len(offsets) - 1
    for i, (ax, ay) in enumerate(offsets):
        bx, by = offsets[j]
        f = ax * by - bx * ay
        x += (ax + bx) * f
        y += (ay + by) * f
        area += f * 3
        j = i

    if area == 0:
        return origin
    return Point(
        x=origin.x + ldexp(x / area, exponent),
        y=origin.y + ldexp(y / area, exponent),
    )


def magnitude_exponent(polygon: Polygon) -> int:
    """Binary exponent of the largest absolute coordinate in the polygon."""

    largest = max(max(abs(p.x), abs(p.y)) for ring in polygon.rings for p in ring)
    return frexp(largest)[1] if largest else 0


def scale_polygon(polygon: Polygon, exponent: int) -> Polygon:
    """Multiply every coordinate by ``2 ** exponent``.

    Power-of-two scaling is exact in floating point, so distances computed
    on the scaled polygon are the originals scaled by the same factor.
    """

    if exponent == 0:
        return polygon
    return Polygon(
        rings=[
            [Point(x=ldexp(p.x, exponent), y=ldexp(p.y, exponent)) for p in ring]
            for ring in polygon.rings
        ]
    )
