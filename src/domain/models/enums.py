"""Domain enumerations for the performance ledger.

All string-valued enums use str mixin so they serialize cleanly to JSON
and remain comparable to plain strings (Pydantic default behaviour).
Values are the exact labels stored and shown to users.
"""

from enum import Enum


class MarketConditions(str, Enum):
    BULLISH = "Bullish"
    BEARISH = "Bearish"
    NEUTRAL = "Neutral"
    VOLATILE = "Volatile"
    STABLE = "Stable"


class DataSource(str, Enum):
    """Where an observation came from."""

    MANUAL = "Manual"
    API = "API"
    IMPORT = "Import"
    SYSTEM = "System"


class FactorImpact(str, Enum):
    POSITIVE = "Positive"
    NEGATIVE = "Negative"
    NEUTRAL = "Neutral"
