"""Latest-value resolution: the max-date observation per investment."""

from __future__ import annotations

from typing import Iterable
from uuid import UUID

from src.domain.models.performance import Observation


def latest_per_investment(
    observations: Iterable[Observation],
    investment_ids: Iterable[UUID] | None = None,
) -> dict[UUID, Observation]:
    """Group observations by investment and keep the one with the greatest date.

    Single pass with a running maximum per investment.  When two observations
    share the maximum date the first one seen is kept.  investment_ids, when
    given, restricts the result; investments without observations are absent.
    """
    wanted = set(investment_ids) if investment_ids is not None else None
    latest: dict[UUID, Observation] = {}
    for obs in observations:
        if wanted is not None and obs.investment_id not in wanted:
            continue
        current = latest.get(obs.investment_id)
        if current is None or obs.performance_date > current.performance_date:
            latest[obs.investment_id] = obs
    return latest
