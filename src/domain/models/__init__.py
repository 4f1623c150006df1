"""Domain model package.

All domain objects are pure Python / Pydantic models with no ORM or
infrastructure dependencies.  Import from this package to avoid coupling
application code to individual module paths.
"""

from .enums import DataSource, FactorImpact, MarketConditions
from .performance import (
    Delta,
    ExternalFactor,
    HistoryPage,
    InvestmentRollup,
    LatestPerformance,
    Observation,
    ObservationMetadata,
    PerformanceSummary,
)

__all__ = [
    # enums
    "DataSource",
    "FactorImpact",
    "MarketConditions",
    # performance
    "Delta",
    "ExternalFactor",
    "HistoryPage",
    "InvestmentRollup",
    "LatestPerformance",
    "Observation",
    "ObservationMetadata",
    "PerformanceSummary",
]
