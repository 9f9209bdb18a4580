"""Cell construction, subdivision and seeding."""

from __future__ import annotations

from math import isfinite
from typing import Iterator, Tuple

from .datatypes import SQRT2, Cell, Envelope, Point, Polygon
from .errors import InvalidInputError
from .geometry import point_to_polygon_distance, ring_centroid


def build_cell(center: Point, half_size: float, polygon: Polygon) -> Cell:
    """Score a square of the given half size centred on ``center``.

    ``center`` is a `Point`, which already refuses NaN and infinity.
    """

    problems = []
    if not isfinite(half_size) or half_size < 0:
        problems.append(f"half_size={half_size!r}")
    if not polygon.rings:
        problems.append("polygon has no rings")
    if problems:
        raise InvalidInputError("Invalid cell: " + ", ".join(problems))

    distance = point_to_polygon_distance(center, polygon)
    return Cell(
        center=center,
        half_size=half_size,
        distance=distance,
        upper_bound=distance + half_size * SQRT2,
    )


def subdivide(cell: Cell, polygon: Polygon) -> Tuple[Cell, Cell, Cell, Cell]:
    """Split a cell into its four quadrants."""

    h = cell.half_size / 2
    return (
        build_cell(Point(x=cell.x - h, y=cell.y - h), h, polygon),
        build_cell(Point(x=cell.x + h, y=cell.y - h), h, polygon),
        build_cell(Point(x=cell.x - h, y=cell.y + h), h, polygon),
        build_cell(Point(x=cell.x + h, y=cell.y + h), h, polygon),
    )


def grid_cells(envelope: Envelope, cell_size: float, polygon: Polygon) -> Iterator[Cell]:
    """Cover the envelope with a regular grid of square cells."""

    h = cell_size / 2
    x = envelope.min_x
    while x < envelope.max_x:
        y = envelope.min_y
        while y < envelope.max_y:
            yield build_cell(Point(x=x + h, y=y + h), h, polygon)
            y += cell_size
        x += cell_size


def centroid_cell(polygon: Polygon) -> Cell:
    """Zero-size cell at the outer ring's centroid."""
    return build_cell(ring_centroid(polygon.outer), 0, polygon)


def envelope_cell(envelope: Envelope, polygon: Polygon) -> Cell:
    """Zero-size cell at the envelope midpoint."""
    return build_cell(envelope.center, 0, polygon)
