"""Public API for gtfs-shape-eval."""

import logging
from collections.abc import Callable, Iterable
from datetime import UTC, datetime

from shape_eval.discovery import discover_feeds
from shape_eval.evaluation.conformance import ConformanceEvaluator, Projector
from shape_eval.gtfs.models import EvalConfig, Feed, FeedFailure, RunReport
from shape_eval.gtfs.reader import FeedLoadError, load_feed

logger = logging.getLogger(__name__)


class NoFeedsError(ValueError):
    """No feed source was found in the input folders."""


def run(
    feed_paths: Iterable[str],
    max_distance: float = 250.0,
    loader: Callable[[str], Feed] = load_feed,
    projector: Projector | None = None,
) -> RunReport:
    """
    Evaluate feed sources one after the other.

    Args:
        feed_paths: Feed directories or zip archives
        max_distance: Max distance in meters between a stop and its trip's shape
        loader: Callable loading a feed, raising FeedLoadError on failure
        projector: Optional projector replacing Web Mercator

    Returns:
        RunReport with run counters, per-feed tallies and load failures
    """
    evaluator = ConformanceEvaluator(max_distance, projector)
    report = RunReport(max_distance=max_distance)
    start_time = datetime.now(UTC)

    for feed_path in feed_paths:
        try:
            feed = loader(feed_path)
        except FeedLoadError as e:
            logger.error(f"Error while parsing GTFS feed '{feed_path}': {e}. Skipping...")
            report.failures.append(FeedFailure(path=feed_path, cause=str(e)))
            continue

        tally = evaluator.evaluate_feed(feed)
        report.counters.add(tally)
        report.tallies.append(tally)

    elapsed = (datetime.now(UTC) - start_time).total_seconds()
    logger.info(
        f"Analyzed {report.counters.feeds} feeds with {report.counters.trips} trips "
        f"in {elapsed:.2f}s"
    )

    return report


def evaluate(folders: Iterable[str], config: EvalConfig | None = None) -> RunReport:
    """
    Discover feeds under folders and evaluate them.

    Raises:
        NoFeedsError: if no feed source was found
    """
    if config is None:
        config = EvalConfig()

    feed_paths = discover_feeds(folders)
    if not feed_paths:
        raise NoFeedsError("No GTFS location specified, see --help")

    return run(feed_paths, config.max_distance)
