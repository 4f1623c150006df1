"""Performance ledger service.

Orchestrates the ledger operations over repositories obtained from a
unit-of-work factory (see src.domain.repositories.scope).

record pipeline:
    1. validate_observation           reject bad input before touching storage
    2. per-investment lock            in-process KeyedLock plus store-level lock
    3. DeltaCalculator                previous observation to delta
    4. PerformanceRepository.create   unique key is the authoritative conflict signal
    5. commit
    6. RollupUpdater.apply_latest     separate unit of work, never undoes the observation

Reads (summarize, latest_for, history*) take no locks.  They read the
observation store only and never consult the rollup.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Any, Callable, Iterable
from uuid import UUID

import pandas as pd

from src.domain.errors import ConflictError, NotFoundError
from src.domain.models.performance import (
    HistoryPage,
    Observation,
    ObservationMetadata,
    PerformanceSummary,
)
from src.domain.repositories.scope import ScopeFactory
from src.domain.services.delta import DeltaCalculator
from src.domain.services.locking import KeyedLock
from src.domain.services.rollup import RollupUpdater
from src.domain.services.summary import SummaryAggregator, window_start
from src.domain.services.validation import (
    validate_actor,
    validate_date,
    validate_observation,
    validate_page,
    validate_window,
)

logger = logging.getLogger(__name__)

HISTORY_FRAME_COLUMNS = [
    "market_value",
    "daily_change",
    "daily_change_percent",
    "daily_profit_loss",
    "volume",
]


def _utc_today() -> date:
    return datetime.now(timezone.utc).date()


class PerformanceLedger:
    """Records dated market-value observations and answers reporting queries.

    Args:
        scope: factory for a unit of work yielding the bound repositories.
        summary_window_days: default trailing window for summarize/history_page.
        history_page_max: upper bound applied to history_page limits.
        today: clock returning the current calendar date (UTC by default).
    """

    def __init__(
        self,
        scope: ScopeFactory,
        summary_window_days: int = 30,
        history_page_max: int = 100,
        today: Callable[[], date] = _utc_today,
    ) -> None:
        self._scope = scope
        self._summary_window_days = validate_window(summary_window_days)
        self._history_page_max = history_page_max
        self._today = today
        self._locks = KeyedLock()
        self._aggregator = SummaryAggregator()

    # ------------------------------------------------------------------ #
    # Writes                                                               #
    # ------------------------------------------------------------------ #

    async def record(
        self,
        investment_id: UUID,
        performance_date: date,
        market_value: float,
        metadata: ObservationMetadata | dict[str, Any],
    ) -> Observation:
        """Record one observation and propagate it to the investment rollup.

        Raises:
            ValidationError: malformed input (negative value, missing date, ...).
            ConflictError: an observation already exists for this investment and date.
            NotFoundError: the observation was committed but its investment is gone,
                so the rollup could not be updated.
        """
        draft = validate_observation(investment_id, performance_date, market_value, metadata)

        async with self._locks.hold(draft.investment_id):
            async with self._scope() as repos:
                await repos.performance.lock_investment(draft.investment_id)
                delta = await DeltaCalculator(repos.performance).compute_delta(
                    draft.investment_id, draft.performance_date, draft.market_value
                )
                observation = Observation.create(
                    investment_id=draft.investment_id,
                    performance_date=draft.performance_date,
                    market_value=draft.market_value,
                    delta=delta,
                    metadata=draft.metadata,
                )
                try:
                    observation = await repos.performance.create(observation)
                except ConflictError:
                    logger.warning(
                        "Rejected duplicate observation for %s on %s",
                        draft.investment_id,
                        draft.performance_date,
                    )
                    raise

            logger.info(
                "Recorded %s on %s: value=%.2f change=%.4f%%",
                observation.investment_id,
                observation.performance_date,
                observation.market_value,
                observation.daily_change_percent,
            )
            await self._apply_rollup(observation)

        return observation

    async def verify(
        self,
        investment_id: UUID,
        performance_date: date,
        verified_by: UUID,
    ) -> Observation:
        """Mark an observation verified.  Computed fields are left untouched.

        Verifying an already-verified observation returns it unchanged.

        Raises:
            ValidationError: verified_by is not a UUID.
            NotFoundError: no observation exists for the investment and date.
        """
        day = validate_date(performance_date)
        verifier = validate_actor(verified_by)
        async with self._scope() as repos:
            existing = await repos.performance.get(investment_id, day)
            if existing is None:
                raise NotFoundError("Observation", f"{investment_id}@{day.isoformat()}")
            verified = existing.verify(verifier)
            if verified is existing:
                return existing
            return await repos.performance.save_verification(verified)

    async def replay_rollup(self, investment_id: UUID) -> bool:
        """Rebuild the investment rollup from the latest stored observation.

        Returns False when the investment has no observations.
        """
        async with self._scope() as repos:
            latest = await repos.performance.get_latest(investment_id)
        if latest is None:
            return False
        return await self._apply_rollup(latest)

    async def _apply_rollup(self, observation: Observation) -> bool:
        try:
            async with self._scope() as repos:
                return await RollupUpdater(repos.investments).apply_latest(
                    observation.investment_id, observation
                )
        except NotFoundError:
            logger.warning(
                "Investment %s not found; observation for %s kept without rollup update",
                observation.investment_id,
                observation.performance_date,
            )
            raise

    # ------------------------------------------------------------------ #
    # Reads                                                                #
    # ------------------------------------------------------------------ #

    async def summarize(
        self,
        investment_id: UUID,
        window_days: int | None = None,
        today: date | None = None,
    ) -> PerformanceSummary:
        """Summary statistics over the trailing window; zero-valued when empty."""
        days = self._summary_window_days if window_days is None else validate_window(window_days)
        start = window_start(days, today or self._today())
        async with self._scope() as repos:
            observations = await repos.performance.get_history(investment_id, start=start)
        return self._aggregator.summarize(observations)

    async def latest_for(self, investment_ids: Iterable[UUID]) -> dict[UUID, Observation]:
        """Most recent observation per investment; investments without data are omitted."""
        ids = set(investment_ids)
        if not ids:
            return {}
        async with self._scope() as repos:
            return await repos.performance.latest_for(ids)

    async def history(
        self,
        investment_id: UUID,
        start: date | None = None,
        end: date | None = None,
    ) -> list[Observation]:
        """All observations in [start, end] in ascending date order."""
        async with self._scope() as repos:
            return await repos.performance.get_history(investment_id, start=start, end=end)

    async def history_page(
        self,
        investment_id: UUID,
        window_days: int | None = None,
        limit: int = 50,
        offset: int = 0,
        today: date | None = None,
    ) -> HistoryPage:
        """Newest-first page of the trailing window with the total matching count."""
        days = self._summary_window_days if window_days is None else validate_window(window_days)
        limit, offset = validate_page(limit, offset, self._history_page_max)
        start = window_start(days, today or self._today())
        async with self._scope() as repos:
            items, total = await repos.performance.get_page(
                investment_id, start=start, limit=limit, offset=offset
            )
        return HistoryPage(items=items, total=total, limit=limit, offset=offset)

    async def history_frame(
        self,
        investment_id: UUID,
        start: date | None = None,
        end: date | None = None,
    ) -> pd.DataFrame:
        """History as a DataFrame indexed by performance_date, for charting."""
        observations = await self.history(investment_id, start=start, end=end)
        frame = pd.DataFrame(
            [[getattr(o, col) for col in HISTORY_FRAME_COLUMNS] for o in observations],
            columns=HISTORY_FRAME_COLUMNS,
            index=pd.DatetimeIndex(
                [pd.Timestamp(o.performance_date) for o in observations],
                name="performance_date",
            ),
            dtype=float,
        )
        return frame
