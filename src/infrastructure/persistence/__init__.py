"""Persistence package.

Importing this package registers every ORM mapper with Base.metadata
(required for Alembic autogenerate and SQLAlchemy mapper configuration)
and exports all repository implementations, the DI factory, and
build_ledger() for wiring the ledger at the application boundary.
"""

from src.domain.services.ledger import PerformanceLedger
from src.infrastructure.database import AsyncSessionLocal, settings
from src.infrastructure.persistence.models import *  # noqa: F401, F403
from src.infrastructure.persistence.models import __all__ as _orm_all
from src.infrastructure.persistence.repositories import (
    Repositories,
    SqlInvestmentRepository,
    SqlPerformanceRepository,
    get_repositories,
    session_scope_factory,
)


def build_ledger(sessionmaker=AsyncSessionLocal) -> PerformanceLedger:
    """Construct a PerformanceLedger backed by the configured database."""
    return PerformanceLedger(
        scope=session_scope_factory(sessionmaker),
        summary_window_days=settings.summary_window_days,
        history_page_max=settings.history_page_max,
    )


__all__ = _orm_all + [
    "Repositories",
    "SqlInvestmentRepository",
    "SqlPerformanceRepository",
    "build_ledger",
    "get_repositories",
    "session_scope_factory",
]
