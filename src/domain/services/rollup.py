"""Rollup updater: propagates the latest observation onto its investment.

The rollup is a derived cache.  It only moves forward in time: an
observation dated before the rollup's stored latest date is ignored, so
re-applying the same or an older observation is a no-op.
"""

from __future__ import annotations

import logging
from uuid import UUID

from src.domain.errors import NotFoundError, ValidationError
from src.domain.models.performance import Observation
from src.domain.repositories.investments import InvestmentRepository

logger = logging.getLogger(__name__)


class RollupUpdater:
    def __init__(self, investments: InvestmentRepository) -> None:
        self._investments = investments

    async def apply_latest(self, investment_id: UUID, observation: Observation) -> bool:
        """Write current_value, actual_roi and latest_performance from the observation.

        Returns True when the rollup was written, False when the observation is
        older than the stored latest date.

        Raises:
            NotFoundError: the investment does not exist.
            ValidationError: the observation belongs to another investment.
        """
        if observation.investment_id != investment_id:
            raise ValidationError(
                f"Observation belongs to investment {observation.investment_id}, "
                f"not {investment_id}",
                [{"field": "investment_id", "message": "mismatch"}],
            )

        rollup = await self._investments.get_rollup(investment_id)
        if rollup is None:
            raise NotFoundError("Investment", investment_id)

        if not rollup.accepts(observation):
            logger.debug(
                "Rollup for %s left at %s; observation dated %s is older",
                investment_id,
                rollup.latest_date,
                observation.performance_date,
            )
            return False

        await self._investments.save_rollup(rollup.with_latest(observation))
        return True
