"""Best-first search for a polygon's pole of inaccessibility."""

from __future__ import annotations

from math import ldexp, ulp
from typing import Any, Optional, Tuple, Union

from .cells import centroid_cell, envelope_cell, grid_cells, subdivide
from .datatypes import Cell, Point, PoleResult
from .errors import InvalidInputError
from .geometry import magnitude_exponent, ring_envelope, scale_polygon
from .logging_utils import get_logger
from .normalizer import coerce_polygon
from .queue import PriorityQueue

logger = get_logger("polelabel.search")


def _by_upper_bound(cell: Cell) -> float:
    return cell.upper_bound


def _validate_parameters(precision: Any, max_probes: Any) -> Tuple[float, Optional[int]]:
    try:
        precision_value = float(precision)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"precision must be a number; got {precision!r}") from exc
    if not precision_value > 0:
        raise InvalidInputError(f"precision must be positive; got {precision!r}")

    if max_probes is None:
        return precision_value, None
    try:
        max_probes_value = int(max_probes)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"max_probes must be an integer; got {max_probes!r}") from exc
    if max_probes_value <= 0:
        raise InvalidInputError(f"max_probes must be positive; got {max_probes!r}")
    return precision_value, max_probes_value


def _unscale(point: Point, exponent: int) -> Point:
    return Point(x=ldexp(point.x, exponent), y=ldexp(point.y, exponent))


def solve(polygon: Any, precision: float = 1.0, max_probes: Optional[int] = None) -> PoleResult:
    """Run the search and return the full diagnostic result.

    ``max_probes`` caps the number of cells created; once reached the search
    stops between pops and reports the best cell found so far.

    The search runs on a copy of the polygon rescaled by a power of two so
    that its coordinates lie within (-1, 1); squared distances then cannot
    overflow, and the rescaling is exact.
    """

    precision, max_probes = _validate_parameters(precision, max_probes)
    original = coerce_polygon(polygon)

    exponent = magnitude_exponent(original)
    shape = scale_polygon(original, -exponent)
    # never let the scaled tolerance underflow to zero
    scaled_precision = max(ldexp(precision, -exponent), ulp(0.0))

    envelope = ring_envelope(shape.outer)
    cell_size = min(envelope.width, envelope.height)
    if cell_size == 0:
        logger.debug(
            "degenerate_envelope",
            extra={"event": "degenerate_envelope", "envelope": envelope.model_dump()},
        )
        return PoleResult(
            point=ring_envelope(original.outer).min_corner,
            distance=0.0,
            precision=precision,
            probes=0,
            iterations=0,
        )

    queue: PriorityQueue[Cell] = PriorityQueue(_by_upper_bound, grid_cells(envelope, cell_size, shape))

    best = centroid_cell(shape)
    bbox_cell = envelope_cell(envelope, shape)
    if bbox_cell.distance > best.distance:
        best = bbox_cell

    probes = len(queue)
    iterations = 0
    exhausted = False

    while queue:
        if max_probes is not None and probes >= max_probes:
            exhausted = True
            logger.warning(
                "probe_budget_exhausted",
                extra={
                    "event": "probe_budget_exhausted",
                    "max_probes": max_probes,
                    "pending": len(queue),
                    "distance": ldexp(best.distance, exponent),
                },
            )
            break

        cell = queue.pop()
        iterations += 1

        if cell.distance > best.distance:
            best = cell
            logger.debug(
                "best_improved",
                extra={
                    "event": "best_improved",
                    "center": _unscale(cell.center, exponent),
                    "distance": ldexp(cell.distance, exponent),
                    "probes": probes,
                },
            )

        # no point in the cell can beat the best by more than the precision
        if cell.upper_bound - best.distance <= scaled_precision:
            continue

        for child in subdivide(cell, shape):
            queue.push(child)
        probes += 4

    distance = ldexp(best.distance, exponent)
    logger.debug(
        "search_complete",
        extra={
            "event": "search_complete",
            "probes": probes,
            "iterations": iterations,
            "distance": distance,
        },
    )

    return PoleResult(
        point=_unscale(best.center, exponent),
        distance=distance,
        precision=precision,
        probes=probes,
        iterations=iterations,
        budget_exhausted=exhausted,
    )


def find_pole_of_inaccessibility(
    polygon: Any,
    precision: float = 1.0,
    return_distance: bool = False,
    *,
    max_probes: Optional[int] = None,
) -> Union[Point, Tuple[Point, float]]:
    """Return the interior point farthest from the polygon outline.

    With ``return_distance`` the signed distance of that point is returned
    alongside it.
    """

    result = solve(polygon, precision, max_probes=max_probes)
    if return_distance:
        return result.as_tuple()
    return result.point


polylabel = find_pole_of_inaccessibility

__all__ = ["find_pole_of_inaccessibility", "polylabel", "solve"]
