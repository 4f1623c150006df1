"""Shared fixtures: in-memory repositories and a ledger wired to them.

The in-memory store yields control inside get_previous() so concurrent
record() calls interleave exactly where an unserialised implementation
would race.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from datetime import date
from uuid import UUID, uuid4

import pytest

from src.domain.errors import ConflictError, NotFoundError
from src.domain.models.performance import InvestmentRollup, Observation
from src.domain.repositories.investments import InvestmentRepository
from src.domain.repositories.performance import PerformanceRepository
from src.domain.services.latest import latest_per_investment
from src.domain.services.ledger import PerformanceLedger

TODAY = date(2025, 3, 31)


class InMemoryPerformanceRepository(PerformanceRepository):
    def __init__(self) -> None:
        self.rows: dict[tuple[UUID, date], Observation] = {}
        self.locked: list[UUID] = []

    def _for(self, investment_id):
        return sorted(
            (o for o in self.rows.values() if o.investment_id == investment_id),
            key=lambda o: o.performance_date,
        )

    async def lock_investment(self, investment_id):
        self.locked.append(investment_id)

    async def get(self, investment_id, performance_date):
        return self.rows.get((investment_id, performance_date))

    async def get_previous(self, investment_id, before):
        await asyncio.sleep(0)
        earlier = [o for o in self._for(investment_id) if o.performance_date < before]
        return earlier[-1] if earlier else None

    async def get_latest(self, investment_id):
        rows = self._for(investment_id)
        return rows[-1] if rows else None

    async def get_history(self, investment_id, start=None, end=None):
        return [
            o
            for o in self._for(investment_id)
            if (start is None or o.performance_date >= start)
            and (end is None or o.performance_date <= end)
        ]

    async def get_page(self, investment_id, start=None, limit=50, offset=0):
        rows = list(reversed(await self.get_history(investment_id, start=start)))
        return rows[offset : offset + limit], len(rows)

    async def latest_for(self, investment_ids):
        return latest_per_investment(self.rows.values(), investment_ids)

    async def create(self, observation):
        key = (observation.investment_id, observation.performance_date)
        if key in self.rows:
            raise ConflictError(*key)
        self.rows[key] = observation
        return observation

    async def save_verification(self, observation):
        key = (observation.investment_id, observation.performance_date)
        if key not in self.rows:
            raise NotFoundError("Observation", key)
        if self.rows[key].is_verified:
            return self.rows[key]
        self.rows[key] = observation
        return observation


class InMemoryInvestmentRepository(InvestmentRepository):
    def __init__(self) -> None:
        self.rollups: dict[UUID, InvestmentRollup] = {}
        self.writes = 0

    def add(self, initial_amount: float, investment_id: UUID | None = None) -> UUID:
        investment_id = investment_id or uuid4()
        self.rollups[investment_id] = InvestmentRollup(
            investment_id=investment_id,
            initial_amount=initial_amount,
            current_value=initial_amount,
        )
        return investment_id

    async def get_rollup(self, investment_id):
        return self.rollups.get(investment_id)

    async def save_rollup(self, rollup):
        if rollup.investment_id not in self.rollups:
            raise NotFoundError("Investment", rollup.investment_id)
        self.rollups[rollup.investment_id] = rollup
        self.writes += 1
        return rollup


class InMemoryStore:
    """Both repositories plus a unit-of-work factory yielding them."""

    def __init__(self) -> None:
        self.performance = InMemoryPerformanceRepository()
        self.investments = InMemoryInvestmentRepository()
        self.scopes_opened = 0

    @asynccontextmanager
    async def scope(self):
        self.scopes_opened += 1
        yield self


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def ledger(store) -> PerformanceLedger:
    return PerformanceLedger(store.scope, today=lambda: TODAY)


@pytest.fixture
def today() -> date:
    return TODAY
