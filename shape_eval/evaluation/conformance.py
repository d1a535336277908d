"""Trip classification against shape geometry."""

import logging
from typing import Protocol

from shape_eval.geo.polyline import Point, min_distance_to_polyline
from shape_eval.geo.projection import WebMercatorProjector
from shape_eval.gtfs.models import Classification, Feed, FeedTally, Shape, Trip

logger = logging.getLogger(__name__)


class Projector(Protocol):
    """Planar projection with a latitude dependent scale correction."""

    def convert(self, lat: float, lon: float) -> tuple[float, float]: ...

    def scale_correction(self, lat: float) -> float: ...


class ShapeCache:
    """Projected shape points, computed at most once per shape_id."""

    def __init__(self, projector: Projector) -> None:
        self.projector = projector
        self._points: dict[str, list[Point]] = {}
        self.projected_shapes = 0

    def get(self, shape: Shape) -> list[Point]:
        """Get the planar points of a shape, projecting them on first use."""
        points = self._points.get(shape.shape_id)
        if points is None:
            points = [self.projector.convert(p.lat, p.lon) for p in shape.points]
            self._points[shape.shape_id] = points
            self.projected_shapes += 1
        return points

    def __len__(self) -> int:
        return len(self._points)


class ConformanceEvaluator:
    """Classify trips by the distance of their stops to their shape."""

    def __init__(self, max_distance: float, projector: Projector | None = None) -> None:
        """Initialize evaluator with the max stop-to-shape distance in meters."""
        if max_distance < 0:
            raise ValueError(f"max_distance must be non-negative, got {max_distance}")
        self.max_distance = max_distance
        self.projector = projector if projector is not None else WebMercatorProjector()

    def classify_trip(self, trip: Trip, cache: ShapeCache) -> Classification:
        """
        Classify a single trip.

        A shape with exactly as many points as the trip has stop times is
        taken to be a straight connect-the-stops shape and reported as
        degenerate without looking at the geometry. Otherwise the trip is
        suspicious as soon as one stop lies farther than max_distance from
        the shape.
        """
        shape = trip.shape
        if shape is None:
            return Classification.NO_SHAPE

        if len(shape.points) == len(trip.stop_times):
            return Classification.DEGENERATE

        shape_points = cache.get(shape)

        for stop_time in trip.stop_times:
            stop = stop_time.stop
            point = self.projector.convert(stop.lat, stop.lon)
            dist = min_distance_to_polyline(point, shape_points)
            dist *= self.projector.scale_correction(stop.lat)

            if dist > self.max_distance:
                logger.debug(
                    f"Trip {trip.trip_id}: stop {stop.stop_id} is {dist:.1f}m "
                    f"from shape {shape.shape_id}"
                )
                return Classification.SUSPICIOUS

        return Classification.OK

    def evaluate_feed(self, feed: Feed) -> FeedTally:
        """Classify every trip of a feed with a fresh shape cache."""
        logger.info(f"Evaluating {len(feed.trips)} trips of {feed.path}")

        cache = ShapeCache(self.projector)
        tally = FeedTally(path=feed.path, trips=len(feed.trips), has_shapes=bool(feed.shapes))

        for trip in feed.trips:
            tally.counts[self.classify_trip(trip, cache)] += 1

        logger.info(
            f"Projected {cache.projected_shapes} shapes; "
            + ", ".join(f"{c.value}={n}" for c, n in tally.counts.items())
        )
        return tally
