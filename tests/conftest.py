"""Pytest configuration and fixtures."""

import zipfile
from pathlib import Path

import pytest

from shape_eval.gtfs.models import Shape, ShapePoint, Stop, StopTime, Trip

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_root() -> Path:
    """Folder holding all GTFS fixtures."""
    return FIXTURES


@pytest.fixture
def gtfs_shapes() -> Path:
    """Path to GTFS fixture with one trip of each classification."""
    return FIXTURES / "gtfs_shapes"


@pytest.fixture
def gtfs_noshapes() -> Path:
    """Path to GTFS fixture without shapes.txt."""
    return FIXTURES / "gtfs_noshapes"


@pytest.fixture
def gtfs_broken() -> Path:
    """Path to GTFS fixture missing required files."""
    return FIXTURES / "gtfs_broken"


@pytest.fixture
def gtfs_shapes_zip(gtfs_shapes: Path, tmp_path: Path) -> Path:
    """The shapes fixture packed in a zip, nested in a subfolder."""
    zip_path = tmp_path / "feed.zip"
    with zipfile.ZipFile(zip_path, "w") as zf:
        for file_path in sorted(gtfs_shapes.iterdir()):
            zf.write(file_path, f"export/{file_path.name}")
    return zip_path


@pytest.fixture
def gtfs_corrupt_zip(gtfs_shapes: Path, tmp_path: Path) -> Path:
    """The shapes fixture deflated in a zip whose stops.txt data is damaged."""
    zip_path = tmp_path / "corrupt.zip"
    with zipfile.ZipFile(zip_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for file_path in sorted(gtfs_shapes.iterdir()):
            zf.write(file_path, file_path.name)
        info = zf.getinfo("stops.txt")

    data = bytearray(zip_path.read_bytes())
    # Local file header: 30 fixed bytes, then file name and extra field
    name_len = int.from_bytes(data[info.header_offset + 26 : info.header_offset + 28], "little")
    extra_len = int.from_bytes(data[info.header_offset + 28 : info.header_offset + 30], "little")
    start = info.header_offset + 30 + name_len + extra_len
    for i in range(start, start + 8):
        data[i] ^= 0xFF
    zip_path.write_bytes(bytes(data))
    return zip_path


def make_shape(shape_id: str, coords: list[tuple[float, float]]) -> Shape:
    """Build a shape from (lat, lon) pairs."""
    points = tuple(ShapePoint(lat=lat, lon=lon, sequence=i) for i, (lat, lon) in enumerate(coords))
    return Shape(shape_id=shape_id, points=points)


def make_trip(
    trip_id: str,
    shape: Shape | None,
    stop_coords: list[tuple[float, float]],
) -> Trip:
    """Build a trip visiting stops at the given (lat, lon) pairs."""
    stop_times = tuple(
        StopTime(
            trip_id=trip_id,
            stop=Stop(stop_id=f"{trip_id}-{i}", name="", lat=lat, lon=lon),
            stop_sequence=i,
        )
        for i, (lat, lon) in enumerate(stop_coords)
    )
    return Trip(trip_id=trip_id, route_id="R1", shape=shape, stop_times=stop_times)
