"""Investment rollup repository interface.

Investments are owned outside the ledger.  This interface exposes only the
cached rollup subset: initial_amount (read) and current_value / actual_roi /
latest_performance (written by the rollup updater).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from uuid import UUID

from src.domain.models.performance import InvestmentRollup


class InvestmentRepository(ABC):
    @abstractmethod
    async def get_rollup(self, investment_id: UUID) -> InvestmentRollup | None:
        """Return the investment's rollup, locked for update, or None if it does not exist."""

    @abstractmethod
    async def save_rollup(self, rollup: InvestmentRollup) -> InvestmentRollup:
        """Write current_value, actual_roi and latest_performance.

        Raises NotFoundError when the investment no longer exists.
        """
