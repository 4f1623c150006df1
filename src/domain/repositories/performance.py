"""Performance (observation store) repository interface.

PerformanceRepository is a specialised time-series interface and does not follow
a generic CRUD lifecycle: observations are appended once per
(investment_id, performance_date), may later be marked verified, and are
otherwise queried by investment + date range.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import Iterable
from uuid import UUID

from src.domain.models.performance import Observation


class PerformanceRepository(ABC):
    """Read/write interface for dated performance observations."""

    @abstractmethod
    async def lock_investment(self, investment_id: UUID) -> None:
        """Serialise writers for one investment until the current unit of work ends."""

    @abstractmethod
    async def get(self, investment_id: UUID, performance_date: date) -> Observation | None:
        """Return the observation at the natural key, or None."""

    @abstractmethod
    async def get_previous(self, investment_id: UUID, before: date) -> Observation | None:
        """Return the observation with the greatest date strictly earlier than `before`."""

    @abstractmethod
    async def get_latest(self, investment_id: UUID) -> Observation | None:
        """Return the observation with the greatest date for the investment, or None."""

    @abstractmethod
    async def get_history(
        self,
        investment_id: UUID,
        start: date | None = None,
        end: date | None = None,
    ) -> list[Observation]:
        """Return observations for one investment in ascending date order.

        start and end are inclusive.  When omitted the full history is returned.
        """

    @abstractmethod
    async def get_page(
        self,
        investment_id: UUID,
        start: date | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[Observation], int]:
        """Return (newest-first page, total matching count) for one investment."""

    @abstractmethod
    async def latest_for(self, investment_ids: Iterable[UUID]) -> dict[UUID, Observation]:
        """Return the max-date observation per investment in a single grouped query.

        Investments with no observations are absent from the result.
        """

    @abstractmethod
    async def create(self, observation: Observation) -> Observation:
        """Persist a new observation.

        Raises ConflictError when one already exists for
        (investment_id, performance_date); existing rows are never overwritten.
        """

    @abstractmethod
    async def save_verification(self, observation: Observation) -> Observation:
        """Persist is_verified / verified_by / verified_at for an existing observation.

        Only an unverified row is updated; when another writer verified it first
        the stored observation is returned unchanged.  Raises NotFoundError when
        the observation does not exist.
        """
