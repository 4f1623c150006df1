"""SQLAlchemy implementation of PerformanceRepository."""

from __future__ import annotations

from datetime import date
from typing import Any, Iterable
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from src.domain.errors import ConflictError, NotFoundError
from src.domain.models.enums import DataSource, MarketConditions
from src.domain.models.performance import ExternalFactor
from src.domain.models.performance import Observation as DomainObservation
from src.domain.repositories.performance import PerformanceRepository
from src.infrastructure.persistence.models.performance import DailyPerformance as OrmPerformance

UNIQUE_KEY = "uq_daily_performances_investment_date"


class SqlPerformanceRepository(PerformanceRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @staticmethod
    def _to_domain(row: OrmPerformance) -> DomainObservation:
        return DomainObservation(
            observation_id=row.observation_id,
            investment_id=row.investment_id,
            performance_date=row.performance_date,
            market_value=row.market_value,
            daily_change=row.daily_change,
            daily_change_percent=row.daily_change_percent,
            daily_profit_loss=row.daily_profit_loss,
            volume=row.volume,
            opening_value=row.opening_value,
            closing_value=row.closing_value,
            high_value=row.high_value,
            low_value=row.low_value,
            notes=row.notes,
            market_conditions=MarketConditions(row.market_conditions),
            external_factors=[ExternalFactor(**f) for f in row.external_factors or []],
            data_source=DataSource(row.data_source),
            updated_by=row.updated_by,
            is_verified=row.is_verified,
            verified_by=row.verified_by,
            verified_at=row.verified_at,
            created_at=row.created_at,
        )

    @staticmethod
    def _to_values(obs: DomainObservation) -> dict[str, Any]:
        return {
            "observation_id": obs.observation_id,
            "investment_id": obs.investment_id,
            "performance_date": obs.performance_date,
            "market_value": obs.market_value,
            "daily_change": obs.daily_change,
            "daily_change_percent": obs.daily_change_percent,
            "daily_profit_loss": obs.daily_profit_loss,
            "volume": obs.volume,
            "opening_value": obs.opening_value,
            "closing_value": obs.closing_value,
            "high_value": obs.high_value,
            "low_value": obs.low_value,
            "notes": obs.notes,
            "market_conditions": obs.market_conditions.value,
            "external_factors": [f.model_dump(mode="json") for f in obs.external_factors],
            "data_source": obs.data_source.value,
            "updated_by": obs.updated_by,
            "is_verified": obs.is_verified,
            "verified_by": obs.verified_by,
            "verified_at": obs.verified_at,
            "created_at": obs.created_at,
        }

    async def lock_investment(self, investment_id: UUID) -> None:
        # Transaction-scoped advisory lock: released on commit or rollback.
        stmt = select(func.pg_advisory_xact_lock(func.hashtextextended(str(investment_id), 0)))
        await self._session.execute(stmt)

    async def get(self, investment_id: UUID, performance_date: date) -> DomainObservation | None:
        stmt = select(OrmPerformance).where(
            OrmPerformance.investment_id == investment_id,
            OrmPerformance.performance_date == performance_date,
        )
        result = await self._session.execute(stmt)
        row = result.scalar_one_or_none()
        return self._to_domain(row) if row else None

    async def get_previous(self, investment_id: UUID, before: date) -> DomainObservation | None:
        stmt = (
            select(OrmPerformance)
            .where(
                OrmPerformance.investment_id == investment_id,
                OrmPerformance.performance_date < before,
            )
            .order_by(OrmPerformance.performance_date.desc())
            .limit(1)
        )
        result = await self._session.execute(stmt)
        row = result.scalar_one_or_none()
        return self._to_domain(row) if row else None

    async def get_latest(self, investment_id: UUID) -> DomainObservation | None:
        stmt = (
            select(OrmPerformance)
            .where(OrmPerformance.investment_id == investment_id)
            .order_by(OrmPerformance.performance_date.desc(), OrmPerformance.created_at.desc())
            .limit(1)
        )
        result = await self._session.execute(stmt)
        row = result.scalar_one_or_none()
        return self._to_domain(row) if row else None

    async def get_history(
        self,
        investment_id: UUID,
        start: date | None = None,
        end: date | None = None,
    ) -> list[DomainObservation]:
        stmt = (
            select(OrmPerformance)
            .where(OrmPerformance.investment_id == investment_id)
            .order_by(OrmPerformance.performance_date.asc())
        )
        if start is not None:
            stmt = stmt.where(OrmPerformance.performance_date >= start)
        if end is not None:
            stmt = stmt.where(OrmPerformance.performance_date <= end)
        result = await self._session.execute(stmt)
        return [self._to_domain(row) for row in result.scalars()]

    async def get_page(
        self,
        investment_id: UUID,
        start: date | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[DomainObservation], int]:
        conditions = [OrmPerformance.investment_id == investment_id]
        if start is not None:
            conditions.append(OrmPerformance.performance_date >= start)

        count_stmt = select(func.count()).select_from(OrmPerformance).where(*conditions)
        total = (await self._session.execute(count_stmt)).scalar_one()

        stmt = (
            select(OrmPerformance)
            .where(*conditions)
            .order_by(OrmPerformance.performance_date.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(row) for row in result.scalars()], total

    async def latest_for(self, investment_ids: Iterable[UUID]) -> dict[UUID, DomainObservation]:
        ids = list(set(investment_ids))
        if not ids:
            return {}
        # One pass: rank each investment's rows newest first, keep rank 1.
        # created_at / observation_id make the pick deterministic on equal dates.
        ranked = (
            select(
                OrmPerformance,
                func.row_number()
                .over(
                    partition_by=OrmPerformance.investment_id,
                    order_by=(
                        OrmPerformance.performance_date.desc(),
                        OrmPerformance.created_at.desc(),
                        OrmPerformance.observation_id.desc(),
                    ),
                )
                .label("rn"),
            )
            .where(OrmPerformance.investment_id.in_(ids))
            .subquery()
        )
        latest = aliased(OrmPerformance, ranked)
        stmt = select(latest).where(ranked.c.rn == 1)
        result = await self._session.execute(stmt)
        return {row.investment_id: self._to_domain(row) for row in result.scalars()}

    async def create(self, observation: DomainObservation) -> DomainObservation:
        stmt = (
            pg_insert(OrmPerformance)
            .values(**self._to_values(observation))
            .on_conflict_do_nothing(constraint=UNIQUE_KEY)
            .returning(OrmPerformance.observation_id)
        )
        result = await self._session.execute(stmt)
        if result.scalar_one_or_none() is None:
            raise ConflictError(observation.investment_id, observation.performance_date)
        return observation

    async def save_verification(self, observation: DomainObservation) -> DomainObservation:
        stmt = (
            update(OrmPerformance)
            .where(
                OrmPerformance.investment_id == observation.investment_id,
                OrmPerformance.performance_date == observation.performance_date,
                OrmPerformance.is_verified.is_(False),
            )
            .values(
                is_verified=observation.is_verified,
                verified_by=observation.verified_by,
                verified_at=observation.verified_at,
            )
            .returning(OrmPerformance.observation_id)
        )
        result = await self._session.execute(stmt)
        if result.scalar_one_or_none() is not None:
            return observation
        # Nothing updated: either the row is gone or another writer verified it first.
        current = await self.get(observation.investment_id, observation.performance_date)
        if current is None:
            raise NotFoundError(
                "Observation",
                f"{observation.investment_id}@{observation.performance_date.isoformat()}",
            )
        return current
