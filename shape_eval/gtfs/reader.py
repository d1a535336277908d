"""GTFS feed reader for directories and zip archives."""

import csv
import io
import logging
import zipfile
import zlib
from collections import Counter
from collections.abc import Iterator
from pathlib import Path

from shape_eval.gtfs.models import Feed, Shape, ShapePoint, Stop, StopTime, Trip

logger = logging.getLogger(__name__)

REQUIRED_FILES = ("stops.txt", "trips.txt", "stop_times.txt")

# Raised while reading a source: corrupt, encrypted or unsupported zip members included
READ_ERRORS = (
    OSError,
    csv.Error,
    UnicodeDecodeError,
    zipfile.BadZipFile,
    zlib.error,
    EOFError,
    RuntimeError,
    NotImplementedError,
)


class FeedLoadError(Exception):
    """A feed source could not be read."""


class GTFSReader:
    """
    Read the parts of a GTFS feed needed for shape evaluation.

    Rows that cannot be parsed are dropped and counted in `dropped` instead of
    failing the whole feed. Only a missing or unreadable source, or a missing
    required file, raises FeedLoadError.
    """

    def __init__(self, gtfs_path: str) -> None:
        """Initialize reader with a GTFS directory or zip path."""
        self.gtfs_path = Path(gtfs_path)
        self._zip_prefix: str | None = None

        if self.gtfs_path.is_dir():
            pass
        elif self.gtfs_path.is_file() and zipfile.is_zipfile(self.gtfs_path):
            self._zip_prefix = self._find_zip_prefix()
        elif not self.gtfs_path.exists():
            raise FeedLoadError(f"GTFS path not found: {gtfs_path}")
        else:
            raise FeedLoadError(f"GTFS path is neither a directory nor a zip archive: {gtfs_path}")

        self.stops: dict[str, Stop] = {}
        self.shapes: dict[str, Shape] = {}
        self.trips: list[Trip] = []
        self.dropped: Counter[str] = Counter()
        self.unresolved_shapes = 0

    @property
    def is_zip(self) -> bool:
        return self._zip_prefix is not None

    def read_all(self) -> None:
        """Read all files needed for evaluation."""
        logger.info(f"Reading GTFS data from {self.gtfs_path}")

        try:
            for filename in REQUIRED_FILES:
                if not self.has_file(filename):
                    raise FeedLoadError(
                        f"Required file not found: {filename} in {self.gtfs_path}"
                    )

            self.read_stops()
            self.read_shapes()
            trip_refs = self.read_trips()
            stop_times = self.read_stop_times(trip_refs)
        except READ_ERRORS as e:
            raise FeedLoadError(f"Failed to read {self.gtfs_path}: {e}") from e

        self._build_trips(trip_refs, stop_times)

        if self.dropped:
            logger.warning(
                f"Dropped malformed rows in {self.gtfs_path}: "
                + ", ".join(f"{name}={count}" for name, count in sorted(self.dropped.items()))
            )
        if self.unresolved_shapes:
            logger.warning(f"{self.unresolved_shapes} trips reference unknown shapes")

        logger.info(
            f"Loaded {len(self.stops)} stops, {len(self.shapes)} shapes, "
            f"{len(self.trips)} trips"
        )

    def to_feed(self) -> Feed:
        """Build the Feed from what has been read."""
        return Feed(
            path=str(self.gtfs_path),
            stops=self.stops,
            shapes=self.shapes,
            trips=self.trips,
        )

    def has_file(self, filename: str) -> bool:
        """Check whether the feed contains a file."""
        if self._zip_prefix is None:
            return (self.gtfs_path / filename).is_file()

        with zipfile.ZipFile(self.gtfs_path) as zf:
            return self._zip_prefix + filename in zf.namelist()

    def read_stops(self) -> None:
        """Read stops.txt."""
        for row in self._iter_rows("stops.txt"):
            try:
                stop = Stop(
                    stop_id=row["stop_id"],
                    name=row.get("stop_name") or "",
                    lat=float(row["stop_lat"]),
                    lon=float(row["stop_lon"]),
                )
            except (KeyError, TypeError, ValueError):
                self.dropped["stops.txt"] += 1
                continue

            if not stop.stop_id or not _valid_coordinates(stop.lat, stop.lon):
                self.dropped["stops.txt"] += 1
                continue

            self.stops[stop.stop_id] = stop

    def read_shapes(self) -> None:
        """Read shapes.txt if present, ordering points by shape_pt_sequence."""
        if not self.has_file("shapes.txt"):
            logger.info("shapes.txt not found, feed has no shapes")
            return

        points_by_shape: dict[str, list[ShapePoint]] = {}
        for row in self._iter_rows("shapes.txt"):
            try:
                shape_id = row["shape_id"]
                point = ShapePoint(
                    lat=float(row["shape_pt_lat"]),
                    lon=float(row["shape_pt_lon"]),
                    sequence=int(row["shape_pt_sequence"]),
                )
            except (KeyError, TypeError, ValueError):
                self.dropped["shapes.txt"] += 1
                continue

            if not shape_id or not _valid_coordinates(point.lat, point.lon):
                self.dropped["shapes.txt"] += 1
                continue

            points_by_shape.setdefault(shape_id, []).append(point)

        for shape_id, points in points_by_shape.items():
            points.sort(key=lambda p: p.sequence)
            self.shapes[shape_id] = Shape(shape_id=shape_id, points=tuple(points))

    def read_trips(self) -> dict[str, tuple[str, str]]:
        """Read trips.txt into trip_id -> (route_id, shape_id), in file order."""
        trip_refs: dict[str, tuple[str, str]] = {}
        for row in self._iter_rows("trips.txt"):
            trip_id = row.get("trip_id")
            if not trip_id or trip_id in trip_refs:
                self.dropped["trips.txt"] += 1
                continue

            route_id = row.get("route_id") or ""
            shape_id = (row.get("shape_id") or "").strip()
            trip_refs[trip_id] = (route_id, shape_id)

        return trip_refs

    def read_stop_times(self, trip_refs: dict[str, tuple[str, str]]) -> dict[str, list[StopTime]]:
        """Read stop_times.txt grouped by trip and ordered by stop_sequence."""
        by_trip: dict[str, list[StopTime]] = {}
        for row in self._iter_rows("stop_times.txt"):
            try:
                trip_id = row["trip_id"]
                stop = self.stops[row["stop_id"]]
                stop_sequence = int(row["stop_sequence"])
            except (KeyError, TypeError, ValueError):
                self.dropped["stop_times.txt"] += 1
                continue

            if trip_id not in trip_refs:
                self.dropped["stop_times.txt"] += 1
                continue

            by_trip.setdefault(trip_id, []).append(
                StopTime(trip_id=trip_id, stop=stop, stop_sequence=stop_sequence)
            )

        for stop_times in by_trip.values():
            stop_times.sort(key=lambda st: st.stop_sequence)

        return by_trip

    def _build_trips(
        self,
        trip_refs: dict[str, tuple[str, str]],
        stop_times: dict[str, list[StopTime]],
    ) -> None:
        for trip_id, (route_id, shape_id) in trip_refs.items():
            shape = None
            if shape_id:
                shape = self.shapes.get(shape_id)
                if shape is None:
                    self.unresolved_shapes += 1

            self.trips.append(
                Trip(
                    trip_id=trip_id,
                    route_id=route_id,
                    shape=shape,
                    stop_times=tuple(stop_times.get(trip_id, ())),
                )
            )

    def _iter_rows(self, filename: str) -> Iterator[dict[str, str]]:
        if self._zip_prefix is None:
            with open(self.gtfs_path / filename, encoding="utf-8-sig", newline="") as f:
                yield from csv.DictReader(f)
            return

        with zipfile.ZipFile(self.gtfs_path) as zf:
            with zf.open(self._zip_prefix + filename) as raw:
                f = io.TextIOWrapper(raw, encoding="utf-8-sig", newline="")
                yield from csv.DictReader(f)

    def _find_zip_prefix(self) -> str:
        """Find the shallowest folder inside the archive holding trips.txt."""
        try:
            with zipfile.ZipFile(self.gtfs_path) as zf:
                names = zf.namelist()
        except READ_ERRORS as e:
            raise FeedLoadError(f"Invalid zip archive {self.gtfs_path}: {e}") from e

        prefixes = [
            name[: -len("trips.txt")]
            for name in names
            if name == "trips.txt" or name.endswith("/trips.txt")
        ]
        if not prefixes:
            return ""
        return min(prefixes, key=lambda prefix: (prefix.count("/"), prefix))


def _valid_coordinates(lat: float, lon: float) -> bool:
    return -90 <= lat <= 90 and -180 <= lon <= 180


def load_feed(path: str) -> Feed:
    """Load a feed from a directory or zip archive."""
    reader = GTFSReader(path)
    reader.read_all()
    return reader.to_feed()
