"""Performance ledger domain models.

Observation: one dated market-value record for an investment (natural key:
    investment_id + performance_date).  Immutable once created;
    only verification metadata may change afterwards.
ObservationMetadata: caller-supplied descriptive fields accompanying a new observation.
Delta: change against the previous observation, computed at creation.
InvestmentRollup: the investment's cached latest value and realised ROI.
PerformanceSummary: windowed statistics over one investment's observations.
HistoryPage: one page of an investment's observation history.
"""

from __future__ import annotations

import math
from datetime import date, datetime, timezone
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .enums import DataSource, FactorImpact, MarketConditions


def truncate_to_day(value: object) -> object:
    # Time of day carries no meaning for the ledger key.
    if isinstance(value, datetime):
        return value.date()
    return value


class ExternalFactor(BaseModel):
    """A named external influence on the day's performance."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    factor: str = Field(max_length=100)
    impact: FactorImpact = FactorImpact.NEUTRAL


class ObservationMetadata(BaseModel):
    """Descriptive fields supplied alongside a new observation.

    updated_by is the actor recording the observation; the ledger does not
    authenticate it.  All value fields are non-negative and finite.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True, allow_inf_nan=False)

    updated_by: UUID
    volume: float = Field(default=0.0, ge=0.0)
    opening_value: float | None = Field(default=None, ge=0.0)
    closing_value: float | None = Field(default=None, ge=0.0)
    high_value: float | None = Field(default=None, ge=0.0)
    low_value: float | None = Field(default=None, ge=0.0)
    notes: str | None = Field(default=None, max_length=1000)
    market_conditions: MarketConditions = MarketConditions.NEUTRAL
    external_factors: list[ExternalFactor] = Field(default_factory=list)
    data_source: DataSource = DataSource.MANUAL


class Delta(BaseModel):
    """Change of a new observation against the previous one for the same investment."""

    model_config = ConfigDict(frozen=True)

    daily_change: float = 0.0
    daily_change_percent: float = 0.0

    @classmethod
    def zero(cls) -> Delta:
        return cls()


class Observation(BaseModel):
    """One dated market-value observation.

    daily_change / daily_change_percent are fixed at creation time against the
    most recent strictly-earlier observation and are never recomputed.
    daily_profit_loss mirrors daily_change for reporting.
    """

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    observation_id: UUID = Field(default_factory=uuid4)
    investment_id: UUID
    performance_date: date
    market_value: float = Field(ge=0.0)
    daily_change: float = 0.0
    daily_change_percent: float = 0.0
    daily_profit_loss: float = 0.0
    volume: float = Field(default=0.0, ge=0.0)
    opening_value: float | None = Field(default=None, ge=0.0)
    closing_value: float | None = Field(default=None, ge=0.0)
    high_value: float | None = Field(default=None, ge=0.0)
    low_value: float | None = Field(default=None, ge=0.0)
    notes: str | None = Field(default=None, max_length=1000)
    market_conditions: MarketConditions = MarketConditions.NEUTRAL
    external_factors: list[ExternalFactor] = Field(default_factory=list)
    data_source: DataSource = DataSource.MANUAL
    updated_by: UUID
    is_verified: bool = False
    verified_by: UUID | None = None
    verified_at: datetime | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("performance_date", mode="before")
    @classmethod
    def _date_only(cls, value: object) -> object:
        return truncate_to_day(value)

    @classmethod
    def create(
        cls,
        investment_id: UUID,
        performance_date: date,
        market_value: float,
        delta: Delta,
        metadata: ObservationMetadata,
    ) -> Observation:
        """Named constructor combining validated input with its computed delta."""
        return cls(
            investment_id=investment_id,
            performance_date=performance_date,
            market_value=market_value,
            daily_change=delta.daily_change,
            daily_change_percent=delta.daily_change_percent,
            daily_profit_loss=delta.daily_change,
            **metadata.model_dump(),
        )

    def verify(self, verified_by: UUID, verified_at: datetime | None = None) -> Observation:
        """Return a verified copy.  Already-verified observations are returned unchanged."""
        if self.is_verified:
            return self
        return self.model_copy(
            update={
                "is_verified": True,
                "verified_by": verified_by,
                "verified_at": verified_at or datetime.now(timezone.utc),
            }
        )


class LatestPerformance(BaseModel):
    """Denormalised snapshot of an investment's most recent observation."""

    model_config = ConfigDict(frozen=True)

    performance_date: date
    market_value: float
    daily_change: float = 0.0
    daily_change_percent: float = 0.0

    @classmethod
    def from_observation(cls, observation: Observation) -> LatestPerformance:
        return cls(
            performance_date=observation.performance_date,
            market_value=observation.market_value,
            daily_change=observation.daily_change,
            daily_change_percent=observation.daily_change_percent,
        )


class InvestmentRollup(BaseModel):
    """The cached subset of an investment that the ledger maintains.

    initial_amount belongs to the investment and is read-only here.
    latest_performance is None until the first observation is applied.
    """

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    investment_id: UUID
    initial_amount: float = Field(ge=0.0)
    current_value: float = Field(default=0.0, ge=0.0)
    actual_roi: float = 0.0
    latest_performance: LatestPerformance | None = None

    @property
    def latest_date(self) -> date | None:
        return self.latest_performance.performance_date if self.latest_performance else None

    @property
    def profit_loss(self) -> float:
        return self.current_value - self.initial_amount

    @staticmethod
    def roi(current_value: float, initial_amount: float) -> float:
        """Realised ROI in percent; 0 when there is no initial amount."""
        if initial_amount == 0:
            return 0.0
        return (current_value - initial_amount) / initial_amount * 100

    def accepts(self, observation: Observation) -> bool:
        """True when the observation is at least as recent as the stored latest date."""
        return self.latest_date is None or observation.performance_date >= self.latest_date

    def with_latest(self, observation: Observation) -> InvestmentRollup:
        return self.model_copy(
            update={
                "current_value": observation.market_value,
                "actual_roi": self.roi(observation.market_value, self.initial_amount),
                "latest_performance": LatestPerformance.from_observation(observation),
            }
        )


class PerformanceSummary(BaseModel):
    """Windowed statistics for one investment.

    average_daily_change is the mean of daily_change_percent while
    total_change_percent compares the window's first and last values.
    The two are not reconcilable and are reported as-is.
    volatility is the population standard deviation of daily_change_percent.
    """

    model_config = ConfigDict(frozen=True)

    total_days: int = 0
    total_change: float = 0.0
    total_change_percent: float = 0.0
    average_daily_change: float = 0.0
    best_day: Observation | None = None
    worst_day: Observation | None = None
    volatility: float = 0.0

    @classmethod
    def empty(cls) -> PerformanceSummary:
        return cls()


class HistoryPage(BaseModel):
    """A page of observations, newest first, with the total matching count."""

    model_config = ConfigDict(frozen=True)

    items: list[Observation] = Field(default_factory=list)
    total: int = Field(default=0, ge=0)
    limit: int = Field(gt=0)
    offset: int = Field(default=0, ge=0)

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit)
