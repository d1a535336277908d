"""Discovery of GTFS feed sources under input folders."""

import logging
from collections.abc import Iterable
from pathlib import Path

logger = logging.getLogger(__name__)

GTFS_FILES = frozenset(
    {"agency.txt", "stops.txt", "routes.txt", "trips.txt", "stop_times.txt", "shapes.txt"}
)


def is_feed_dir(path: Path) -> bool:
    """Check whether a directory directly contains GTFS files."""
    return any((path / name).is_file() for name in GTFS_FILES)


def is_feed_zip(path: Path) -> bool:
    """Check whether a path is a zip archive."""
    return path.is_file() and path.suffix.lower() == ".zip"


def discover_feeds(folders: Iterable[str]) -> list[str]:
    """
    Search folders recursively for feed sources.

    A feed source is a zip archive or a directory holding GTFS files. A
    directory recognised as a feed is not searched any further.
    """
    found: set[str] = set()

    for folder in folders:
        root = Path(folder)
        if not root.exists():
            logger.warning(f"Input folder not found: {folder}")
            continue
        found.update(_walk(root))

    feeds = sorted(found)
    logger.info(f"Found {len(feeds)} GTFS feed sources")
    return feeds


def _walk(path: Path) -> list[str]:
    if is_feed_zip(path):
        return [str(path)]
    if not path.is_dir():
        return []
    try:
        if is_feed_dir(path):
            return [str(path)]
        children = sorted(path.iterdir())
    except OSError as e:
        logger.warning(f"Cannot list {path}, skipping: {e}")
        return []

    feeds: list[str] = []
    for child in children:
        feeds.extend(_walk(child))
    return feeds
