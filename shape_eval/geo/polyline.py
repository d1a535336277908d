"""Point to segment and point to polyline distances in the plane."""

import math
from collections.abc import Sequence

Point = tuple[float, float]


def _distance(a: Point, b: Point) -> float:
    return math.hypot(b[0] - a[0], b[1] - a[1])


def perpendicular_distance(point: Point, start: Point, end: Point) -> float:
    """
    Shortest distance from `point` to the finite segment `start`-`end`.

    The point is projected onto the line through the segment with
    t = ((point - start) . (end - start)) / |end - start|^2. Outside [0, 1]
    the nearest point of the segment is the corresponding endpoint.
    """
    dx = end[0] - start[0]
    dy = end[1] - start[1]
    length_sq = dx * dx + dy * dy

    if length_sq == 0:
        return _distance(point, start)

    t = ((point[0] - start[0]) * dx + (point[1] - start[1]) * dy) / length_sq
    if t < 0:
        return _distance(point, start)
    if t > 1:
        return _distance(point, end)

    return _distance(point, (start[0] + t * dx, start[1] + t * dy))


def min_distance_to_polyline(point: Point, points: Sequence[Point]) -> float:
    """Minimum distance from `point` to any segment of the polyline, inf if it has none."""
    min_dist = math.inf

    for i in range(1, len(points)):
        dist = perpendicular_distance(point, points[i - 1], points[i])
        if dist < min_dist:
            min_dist = dist

    return min_dist
