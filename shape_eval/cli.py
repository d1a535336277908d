"""Command-line interface for gtfs-shape-eval."""

import argparse
import logging
import sys

from shape_eval.api import NoFeedsError, evaluate
from shape_eval.gtfs.models import EvalConfig
from shape_eval.output.report import format_json, format_report
from shape_eval.version import VERSION


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def non_negative_float(value: str) -> float:
    """Parse a float that must not be negative."""
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid float value: {value!r}") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be non-negative: {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="gtfs-shape-eval",
        description="Analyze shapes.txt quality and coverage of GTFS feeds.",
        add_help=False,
    )
    parser.add_argument(
        "folders",
        nargs="*",
        metavar="FOLDER",
        help="Folder containing input GTFS feeds (searched recursively)",
    )
    parser.add_argument("-?", "--help", action="help", help="Show this message and exit")
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument(
        "-d",
        "--max-dist",
        type=non_negative_float,
        default=250.0,
        help="Max distance in meters from stop to shape (default: 250)",
    )
    parser.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Report format (default: text)",
    )
    return parser


def cmd_evaluate(args: argparse.Namespace) -> int:
    """Execute the evaluation."""
    config = EvalConfig(
        max_distance=args.max_dist,
        output_format=args.format,
        verbose=args.verbose,
    )
    setup_logging(config.verbose)

    try:
        report = evaluate(args.folders, config)
    except NoFeedsError as e:
        print(e, file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        logging.exception("Evaluation failed")
        return 1

    if config.output_format == "json":
        print(format_json(report))
    else:
        print()
        print(format_report(report))
    return 0


def main() -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args()
    sys.exit(cmd_evaluate(args))


if __name__ == "__main__":
    main()
