"""Delta calculation for new observations.

    daily_change         = market_value - previous.market_value
    daily_change_percent = daily_change / previous.market_value * 100

The previous observation is the one with the greatest date strictly earlier
than the new observation's date.  With no previous observation both values
are 0; a previous value of 0 yields a percent change of 0.
"""

from __future__ import annotations

from datetime import date
from uuid import UUID

from src.domain.models.performance import Delta
from src.domain.repositories.performance import PerformanceRepository


def compute_delta(previous_value: float | None, market_value: float) -> Delta:
    """Pure delta computation against an optional previous market value."""
    if previous_value is None:
        return Delta.zero()
    change = market_value - previous_value
    percent = change / previous_value * 100 if previous_value > 0 else 0.0
    return Delta(daily_change=change, daily_change_percent=percent)


class DeltaCalculator:
    """Looks up the previous observation and computes the delta against it.

    Reads only; callers that insert the result must hold the investment's
    write lock so the previous observation cannot change underneath them.
    """

    def __init__(self, performance: PerformanceRepository) -> None:
        self._performance = performance

    async def compute_delta(self, investment_id: UUID, on: date, market_value: float) -> Delta:
        previous = await self._performance.get_previous(investment_id, before=on)
        return compute_delta(previous.market_value if previous else None, market_value)
