"""Concrete SQLAlchemy repository implementations.

Exports all SqlRepository classes, the get_repositories() factory, and
session_scope(), the unit of work handed to PerformanceLedger.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from .investments import SqlInvestmentRepository
from .performance import SqlPerformanceRepository


@dataclass
class Repositories:
    """All repository instances bound to a single AsyncSession."""

    performance: SqlPerformanceRepository
    investments: SqlInvestmentRepository


def get_repositories(session: AsyncSession) -> Repositories:
    """Construct all repositories bound to the given session.

        async with AsyncSessionLocal() as session, session.begin():
            repos = get_repositories(session)
            latest = await repos.performance.latest_for(investment_ids)
    """
    return Repositories(
        performance=SqlPerformanceRepository(session),
        investments=SqlInvestmentRepository(session),
    )


def session_scope_factory(sessionmaker: async_sessionmaker[AsyncSession]):
    """Return a unit-of-work factory: each scope is one session and one transaction."""

    @asynccontextmanager
    async def session_scope() -> AsyncIterator[Repositories]:
        async with sessionmaker() as session:
            async with session.begin():
                yield get_repositories(session)

    return session_scope


__all__ = [
    "SqlPerformanceRepository",
    "SqlInvestmentRepository",
    "Repositories",
    "get_repositories",
    "session_scope_factory",
]
