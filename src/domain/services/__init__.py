"""Domain services package."""

from .delta import DeltaCalculator, compute_delta
from .latest import latest_per_investment
from .ledger import PerformanceLedger
from .locking import KeyedLock
from .rollup import RollupUpdater
from .summary import SummaryAggregator

__all__ = [
    "DeltaCalculator",
    "KeyedLock",
    "PerformanceLedger",
    "RollupUpdater",
    "SummaryAggregator",
    "compute_delta",
    "latest_per_investment",
]
