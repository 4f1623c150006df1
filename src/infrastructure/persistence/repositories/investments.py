"""SQLAlchemy implementation of InvestmentRepository."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.errors import NotFoundError
from src.domain.models.performance import InvestmentRollup, LatestPerformance
from src.domain.repositories.investments import InvestmentRepository
from src.infrastructure.persistence.models.investments import Investment as OrmInvestment


def _rollup_to_domain(row: OrmInvestment) -> InvestmentRollup:
    latest = None
    if row.latest_performance_date is not None:
        latest = LatestPerformance(
            performance_date=row.latest_performance_date,
            market_value=row.latest_market_value or 0.0,
            daily_change=row.latest_daily_change or 0.0,
            daily_change_percent=row.latest_daily_change_percent or 0.0,
        )
    return InvestmentRollup(
        investment_id=row.investment_id,
        initial_amount=row.initial_amount,
        current_value=row.current_value,
        actual_roi=row.actual_roi,
        latest_performance=latest,
    )


class SqlInvestmentRepository(InvestmentRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_rollup(self, investment_id: UUID) -> InvestmentRollup | None:
        # Row lock keeps concurrent rollup writers from moving the latest date backwards.
        stmt = (
            select(OrmInvestment)
            .where(OrmInvestment.investment_id == investment_id)
            .with_for_update()
        )
        result = await self._session.execute(stmt)
        row = result.scalar_one_or_none()
        return _rollup_to_domain(row) if row else None

    async def save_rollup(self, rollup: InvestmentRollup) -> InvestmentRollup:
        latest = rollup.latest_performance
        stmt = (
            update(OrmInvestment)
            .where(OrmInvestment.investment_id == rollup.investment_id)
            .values(
                current_value=rollup.current_value,
                actual_roi=rollup.actual_roi,
                latest_performance_date=latest.performance_date if latest else None,
                latest_market_value=latest.market_value if latest else None,
                latest_daily_change=latest.daily_change if latest else None,
                latest_daily_change_percent=latest.daily_change_percent if latest else None,
            )
            .returning(OrmInvestment.investment_id)
        )
        result = await self._session.execute(stmt)
        if result.scalar_one_or_none() is None:
            raise NotFoundError("Investment", rollup.investment_id)
        return rollup
