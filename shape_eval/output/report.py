"""Text and JSON rendering of run reports."""

import json
from typing import Any

from shape_eval.gtfs.models import Classification, RunReport

CLASSIFICATION_LABELS = {
    Classification.OK: "trips with OK shape",
    Classification.SUSPICIOUS: "trips with suspicious shapes",
    Classification.DEGENERATE: "trips with degenerated shapes",
    Classification.NO_SHAPE: "trips with no shapes",
}


def percentage(count: int, total: int) -> float:
    """Percentage of count in total, 0.0 for an empty total."""
    if total == 0:
        return 0.0
    return count / total * 100.0


def format_report(report: RunReport) -> str:
    """Render a report as human readable text."""
    counters = report.counters
    lines = [
        f"Analyzed {counters.feeds} feeds with {counters.trips} trips "
        f"(max distance {report.max_distance:g} m)",
        "",
        f"{counters.feeds_with_shapes} feeds had shapes "
        f"({percentage(counters.feeds_with_shapes, counters.feeds):.2f} %)",
        "",
    ]

    for classification, label in CLASSIFICATION_LABELS.items():
        count = counters.counts[classification]
        lines.append(f"{count} {label} ({percentage(count, counters.trips):.2f} %)")

    if report.failures:
        lines.append("")
        lines.append(f"Skipped {len(report.failures)} feeds that failed to load:")
        for failure in report.failures:
            lines.append(f"  - {failure.path}: {failure.cause}")

    return "\n".join(lines)


def report_to_dict(report: RunReport) -> dict[str, Any]:
    """Convert a report to JSON-serializable data."""
    counters = report.counters
    return {
        "max_distance": report.max_distance,
        "feeds": counters.feeds,
        "feeds_with_shapes": counters.feeds_with_shapes,
        "feeds_with_shapes_pct": percentage(counters.feeds_with_shapes, counters.feeds),
        "trips": counters.trips,
        "classifications": {
            classification.value: {
                "trips": counters.counts[classification],
                "pct": percentage(counters.counts[classification], counters.trips),
            }
            for classification in Classification
        },
        "per_feed": [
            {
                "path": tally.path,
                "trips": tally.trips,
                "has_shapes": tally.has_shapes,
                "counts": {c.value: n for c, n in tally.counts.items()},
            }
            for tally in report.tallies
        ],
        "failures": [{"path": f.path, "cause": f.cause} for f in report.failures],
    }


def format_json(report: RunReport) -> str:
    """Render a report as JSON."""
    return json.dumps(report_to_dict(report), indent=2, sort_keys=True)
