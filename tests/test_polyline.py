"""Tests for point to segment and polyline distances."""

import math

import pytest

from shape_eval.geo.polyline import min_distance_to_polyline, perpendicular_distance


def test_point_above_segment() -> None:
    """Test perpendicular foot inside the segment."""
    assert perpendicular_distance((5.0, 3.0), (0.0, 0.0), (10.0, 0.0)) == pytest.approx(3.0)


def test_point_on_segment() -> None:
    """Test a point on the segment has zero distance."""
    assert perpendicular_distance((2.5, 2.5), (0.0, 0.0), (5.0, 5.0)) == pytest.approx(0.0)


def test_degenerate_segment() -> None:
    """Test a zero-length segment measures to its start point."""
    for point in [(3.0, 4.0), (-1.0, 2.0), (0.0, 0.0), (100.0, -7.5)]:
        expected = math.hypot(point[0] - 1.0, point[1] - 1.0)
        assert perpendicular_distance(point, (1.0, 1.0), (1.0, 1.0)) == pytest.approx(expected)


def test_before_start_uses_start() -> None:
    """Test t < 0 measures to the start point, not the infinite line."""
    dist = perpendicular_distance((-3.0, 4.0), (0.0, 0.0), (10.0, 0.0))
    assert dist == pytest.approx(5.0)
    assert dist > 4.0  # distance to the infinite line


def test_after_end_uses_end() -> None:
    """Test t > 1 measures to the end point."""
    dist = perpendicular_distance((13.0, -4.0), (0.0, 0.0), (10.0, 0.0))
    assert dist == pytest.approx(5.0)


def test_endpoint_dominance() -> None:
    """Test distances outside the segment equal the nearer endpoint distance."""
    start, end = (0.0, 0.0), (4.0, 2.0)
    for point in [(-2.0, 5.0), (-1.0, -1.0), (7.0, 1.0), (6.0, 6.0)]:
        nearest = min(math.dist(point, start), math.dist(point, end))
        assert perpendicular_distance(point, start, end) == pytest.approx(nearest)


def test_polyline_minimum() -> None:
    """Test the minimum over all segments is found."""
    polyline = [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0)]
    assert min_distance_to_polyline((5.0, 9.0), polyline) == pytest.approx(1.0)
    assert min_distance_to_polyline((12.0, 5.0), polyline) == pytest.approx(2.0)


def test_polyline_not_above_any_segment() -> None:
    """Test the polyline distance never exceeds a single segment distance."""
    polyline = [(0.0, 0.0), (3.0, 4.0), (8.0, 4.0), (9.0, -2.0), (2.0, -5.0)]
    for point in [(1.0, 1.0), (5.0, 0.0), (10.0, 10.0), (-4.0, -4.0)]:
        best = min_distance_to_polyline(point, polyline)
        for i in range(1, len(polyline)):
            assert best <= perpendicular_distance(point, polyline[i - 1], polyline[i])


def test_polyline_too_short() -> None:
    """Test polylines without segments are infinitely far away."""
    assert min_distance_to_polyline((1.0, 1.0), []) == math.inf
    assert min_distance_to_polyline((1.0, 1.0), [(1.0, 1.0)]) == math.inf
