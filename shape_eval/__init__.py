"""GTFS Shape Eval - Check that trip stops lie on their GTFS shapes."""

from shape_eval.api import evaluate, run
from shape_eval.version import VERSION

__version__ = VERSION
__all__ = ["VERSION", "evaluate", "run"]
