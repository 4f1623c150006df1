"""Windowed performance summary.

Given one investment's observations in ascending date order:

    total_change          = last.market_value - first.market_value
    total_change_percent  = total_change / first.market_value * 100   (0 if first is 0)
    average_daily_change  = mean(daily_change_percent)
    best_day / worst_day  = observation with max / min daily_change_percent
    volatility            = population std (ddof=0) of daily_change_percent

average_daily_change averages percentages while total_change_percent compares
absolute endpoints; the two intentionally differ.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Sequence

import numpy as np

from src.domain.models.performance import Observation, PerformanceSummary


def window_start(window_days: int, today: date) -> date:
    """First date (inclusive) of a trailing window of window_days ending today."""
    return today - timedelta(days=window_days)


class SummaryAggregator:
    """Pure computation of PerformanceSummary from an ordered observation sequence.

    The class is stateless; the window selection happens in the caller.
    """

    def summarize(self, observations: Sequence[Observation]) -> PerformanceSummary:
        if not observations:
            return PerformanceSummary.empty()

        first, last = observations[0], observations[-1]
        total_change = last.market_value - first.market_value
        total_change_percent = (
            total_change / first.market_value * 100 if first.market_value > 0 else 0.0
        )

        pct = np.array([o.daily_change_percent for o in observations], dtype=float)
        # argmax/argmin return the first occurrence: ties go to the earliest in scan order.
        best = observations[int(np.argmax(pct))]
        worst = observations[int(np.argmin(pct))]

        return PerformanceSummary(
            total_days=len(observations),
            total_change=total_change,
            total_change_percent=total_change_percent,
            average_daily_change=float(pct.mean()),
            best_day=best,
            worst_day=worst,
            volatility=float(pct.std(ddof=0)),
        )
