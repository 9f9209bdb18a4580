"""Tests for the planar geometry helpers."""

from __future__ import annotations

import pytest

from polelabel.datatypes import Point, Polygon
from polelabel.geometry import (
    magnitude_exponent,
    point_in_polygon,
    point_to_polygon_distance,
    ring_centroid,
    ring_envelope,
    scale_polygon,
    segment_distance_sq,
)


def _polygon(*rings):
    return Polygon(rings=[[Point(x=x, y=y) for x, y in ring] for ring in rings])


_SQUARE = [(0, 0), (10, 0), (10, 10), (0, 10)]
_HOLE = [(3, 3), (7, 3), (7, 7), (3, 7)]


def test_segment_distance_projects_onto_segment():
    a, b = Point(x=0, y=0), Point(x=2, y=0)
    assert segment_distance_sq(Point(x=1, y=1), a, b) == pytest.approx(1.0)


def test_segment_distance_clamps_to_endpoints():
    a, b = Point(x=0, y=0), Point(x=2, y=0)
    assert segment_distance_sq(Point(x=3, y=0), a, b) == pytest.approx(1.0)
    assert segment_distance_sq(Point(x=-1, y=0), a, b) == pytest.approx(1.0)
    assert segment_distance_sq(Point(x=-3, y=4), a, b) == pytest.approx(25.0)


def test_segment_distance_handles_zero_length_segment():
    a = Point(x=1, y=1)
    assert segment_distance_sq(Point(x=4, y=5), a, a) == pytest.approx(25.0)


def test_point_in_polygon_square():
    polygon = _polygon(_SQUARE)
    assert point_in_polygon(Point(x=5, y=5), polygon) is True
    assert point_in_polygon(Point(x=11, y=5), polygon) is False


def test_point_in_polygon_treats_hole_as_outside():
    polygon = _polygon(_SQUARE, _HOLE)
    assert point_in_polygon(Point(x=5, y=5), polygon) is False
    assert point_in_polygon(Point(x=1, y=5), polygon) is True


def test_winding_direction_does_not_matter():
    clockwise = _polygon(list(reversed(_SQUARE)))
    assert point_to_polygon_distance(Point(x=5, y=5), clockwise) == pytest.approx(5.0)


def test_signed_distance_inside_and_outside():
    polygon = _polygon(_SQUARE)
    assert point_to_polygon_distance(Point(x=5, y=5), polygon) == pytest.approx(5.0)
    assert point_to_polygon_distance(Point(x=2, y=5), polygon) == pytest.approx(2.0)
    assert point_to_polygon_distance(Point(x=-3, y=5), polygon) == pytest.approx(-3.0)


def test_signed_distance_uses_edges_that_do_not_cross_the_ray():
    # the nearest edge (x=0) lies behind the rightward ray
    polygon = _polygon(_SQUARE)
    assert point_to_polygon_distance(Point(x=1, y=5), polygon) == pytest.approx(1.0)


def test_signed_distance_inside_hole_is_negative():
    polygon = _polygon(_SQUARE, _HOLE)
    assert point_to_polygon_distance(Point(x=5, y=5), polygon) == pytest.approx(-2.0)
    assert point_to_polygon_distance(Point(x=1.5, y=5), polygon) == pytest.approx(1.5)


def test_horizontal_edge_on_ray_is_not_a_crossing():
    polygon = _polygon(_SQUARE)
    point = Point(x=-5, y=0)
    assert point_in_polygon(point, polygon) is False
    assert point_to_polygon_distance(point, polygon) == pytest.approx(-5.0)


def test_closing_duplicate_vertex_is_tolerated():
    closed = _polygon(_SQUARE + [_SQUARE[0]])
    assert point_to_polygon_distance(Point(x=5, y=5), closed) == pytest.approx(5.0)
    assert point_to_polygon_distance(Point(x=1, y=2), closed) == pytest.approx(1.0)


def test_ring_envelope_uses_vertex_extremes():
    envelope = ring_envelope(_polygon([(2, -1), (8, 3), (4, 9)]).outer)
    assert (envelope.min_x, envelope.min_y, envelope.max_x, envelope.max_y) == (2, -1, 8, 9)
    assert envelope.width == 6
    assert envelope.height == 10
    assert envelope.center == Point(x=5, y=4)


def test_ring_envelope_rejects_empty_ring():
    with pytest.raises(ValueError):
        ring_envelope([])


def test_ring_centroid():
    centroid = ring_centroid(_polygon([(0, 0), (6, 0), (0, 6)]).outer)
    assert centroid.x == pytest.approx(2.0)
    assert centroid.y == pytest.approx(2.0)

    square_centroid = ring_centroid(_polygon(list(reversed(_SQUARE))).outer)
    assert square_centroid.as_tuple() == pytest.approx((5.0, 5.0))


def test_ring_centroid_falls_back_to_first_vertex_for_zero_area():
    ring = _polygon([(1, 1), (2, 2), (3, 3)]).outer
    assert ring_centroid(ring) == Point(x=1, y=1)


@pytest.mark.parametrize("scale", [1e110, 1e160, 1e300])
def test_ring_centroid_survives_large_coordinates(scale: float):
    ring = _polygon([(0, 0), (scale, 0), (scale, scale), (0, scale)]).outer
    centroid = ring_centroid(ring)
    assert centroid.x == pytest.approx(scale / 2)
    assert centroid.y == pytest.approx(scale / 2)


def test_ring_centroid_far_from_origin():
    ring = _polygon([(1e12, 1e12), (1e12 + 6, 1e12), (1e12, 1e12 + 6)]).outer
    centroid = ring_centroid(ring)
    assert centroid.x - 1e12 == pytest.approx(2.0)
    assert centroid.y - 1e12 == pytest.approx(2.0)


def test_magnitude_exponent_and_exact_rescaling():
    polygon = _polygon(_SQUARE, _HOLE)
    exponent = magnitude_exponent(polygon)
    assert exponent == 4

    scaled = scale_polygon(polygon, -exponent)
    assert all(abs(p.x) < 1 and abs(p.y) < 1 for ring in scaled.rings for p in ring)

    point = Point(x=1.5, y=5)
    assert point_to_polygon_distance(Point(x=1.5 / 16, y=5 / 16), scaled) * 16 == (
        point_to_polygon_distance(point, polygon)
    )
    assert scale_polygon(polygon, 0) is polygon
