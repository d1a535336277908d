"""Data models for GTFS entities and evaluation results."""

from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True)
class Stop:
    """GTFS stop with coordinates."""

    stop_id: str
    name: str
    lat: float
    lon: float


@dataclass(frozen=True)
class ShapePoint:
    """Single point of a GTFS shape."""

    lat: float
    lon: float
    sequence: int


@dataclass(frozen=True)
class Shape:
    """GTFS shape, points ordered by shape_pt_sequence."""

    shape_id: str
    points: tuple[ShapePoint, ...]


@dataclass(frozen=True)
class StopTime:
    """GTFS stop time resolved to its stop."""

    trip_id: str
    stop: Stop
    stop_sequence: int


@dataclass(frozen=True)
class Trip:
    """GTFS trip with its (optional) shape and ordered stop times."""

    trip_id: str
    route_id: str
    shape: Shape | None
    stop_times: tuple[StopTime, ...] = ()


@dataclass
class Feed:
    """A loaded GTFS feed."""

    path: str
    stops: dict[str, Stop] = field(default_factory=dict)
    shapes: dict[str, Shape] = field(default_factory=dict)
    trips: list[Trip] = field(default_factory=list)


class Classification(Enum):
    """Outcome of checking a trip against its shape."""

    OK = "ok"
    SUSPICIOUS = "suspicious"
    DEGENERATE = "degenerate"
    NO_SHAPE = "no_shape"


def _empty_counts() -> dict[Classification, int]:
    return {classification: 0 for classification in Classification}


@dataclass
class FeedTally:
    """Classification counts for one feed."""

    path: str
    trips: int = 0
    has_shapes: bool = False
    counts: dict[Classification, int] = field(default_factory=_empty_counts)


@dataclass
class RunCounters:
    """Counters accumulated over all feeds of one run."""

    feeds: int = 0
    feeds_with_shapes: int = 0
    trips: int = 0
    counts: dict[Classification, int] = field(default_factory=_empty_counts)

    def add(self, tally: FeedTally) -> None:
        """Fold a feed tally into the run totals."""
        self.feeds += 1
        self.trips += tally.trips
        if tally.has_shapes:
            self.feeds_with_shapes += 1
        for classification, count in tally.counts.items():
            self.counts[classification] += count


@dataclass(frozen=True)
class FeedFailure:
    """A feed source that could not be loaded."""

    path: str
    cause: str


@dataclass
class RunReport:
    """Result of evaluating a set of feed sources."""

    max_distance: float
    counters: RunCounters = field(default_factory=RunCounters)
    tallies: list[FeedTally] = field(default_factory=list)
    failures: list[FeedFailure] = field(default_factory=list)


@dataclass
class EvalConfig:
    """Configuration for an evaluation run."""

    max_distance: float = 250.0  # meters
    output_format: str = "text"  # text, json
    verbose: bool = False
