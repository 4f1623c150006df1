"""Tests for SqlPerformanceRepository statements and row mapping."""

from datetime import date, datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from sqlalchemy.dialects import postgresql

from src.domain.errors import ConflictError, NotFoundError
from src.domain.models.enums import DataSource, FactorImpact, MarketConditions
from src.domain.models.performance import ExternalFactor, Observation
from src.infrastructure.persistence.repositories.performance import (
    UNIQUE_KEY,
    SqlPerformanceRepository,
)


def _orm_row(**overrides):
    defaults = {
        "observation_id": uuid4(),
        "investment_id": uuid4(),
        "performance_date": date(2025, 1, 2),
        "market_value": 105_000.0,
        "daily_change": 5_000.0,
        "daily_change_percent": 5.0,
        "daily_profit_loss": 5_000.0,
        "volume": 0.0,
        "opening_value": None,
        "closing_value": None,
        "high_value": None,
        "low_value": None,
        "notes": None,
        "market_conditions": "Bullish",
        "external_factors": [{"factor": "rate cut", "impact": "Positive"}],
        "data_source": "API",
        "updated_by": uuid4(),
        "is_verified": False,
        "verified_by": None,
        "verified_at": None,
        "created_at": datetime.now(timezone.utc),
    }
    defaults.update(overrides)
    return SimpleNamespace(**defaults)


def _observation(**overrides):
    defaults = dict(
        investment_id=uuid4(),
        performance_date=date(2025, 1, 2),
        market_value=100.0,
        updated_by=uuid4(),
        external_factors=[ExternalFactor(factor="tariffs", impact=FactorImpact.NEGATIVE)],
    )
    defaults.update(overrides)
    return Observation(**defaults)


def _session_returning(scalar):
    session = AsyncMock()
    result = MagicMock()
    result.scalar_one_or_none.return_value = scalar
    result.scalars.return_value = []
    session.execute.return_value = result
    return session


def _sql(session) -> str:
    stmt = session.execute.call_args.args[0]
    return str(stmt.compile(dialect=postgresql.dialect()))


# --- _to_domain mapping ---

def test_to_domain_maps_enums():
    obs = SqlPerformanceRepository._to_domain(_orm_row())
    assert obs.market_conditions == MarketConditions.BULLISH
    assert obs.data_source == DataSource.API


def test_to_domain_maps_external_factors():
    obs = SqlPerformanceRepository._to_domain(_orm_row())
    assert obs.external_factors == [
        ExternalFactor(factor="rate cut", impact=FactorImpact.POSITIVE)
    ]


def test_to_domain_handles_null_external_factors():
    assert SqlPerformanceRepository._to_domain(_orm_row(external_factors=None)).external_factors == []


def test_to_domain_maps_delta_fields():
    obs = SqlPerformanceRepository._to_domain(_orm_row())
    assert (obs.daily_change, obs.daily_change_percent) == (5_000.0, 5.0)


# --- _to_values mapping ---

def test_to_values_serialises_enums_and_factors():
    values = SqlPerformanceRepository._to_values(_observation())
    assert values["market_conditions"] == "Neutral"
    assert values["data_source"] == "Manual"
    assert values["external_factors"] == [{"factor": "tariffs", "impact": "Negative"}]


# --- create ---

async def test_create_returns_observation_when_inserted():
    obs = _observation()
    repo = SqlPerformanceRepository(_session_returning(obs.observation_id))
    assert await repo.create(obs) == obs


async def test_create_raises_conflict_when_nothing_inserted():
    obs = _observation()
    repo = SqlPerformanceRepository(_session_returning(None))
    with pytest.raises(ConflictError) as exc:
        await repo.create(obs)
    assert exc.value.performance_date == obs.performance_date


async def test_create_uses_on_conflict_do_nothing():
    session = _session_returning(uuid4())
    await SqlPerformanceRepository(session).create(_observation())
    assert f"ON CONFLICT ON CONSTRAINT {UNIQUE_KEY} DO NOTHING" in _sql(session)


# --- queries ---

async def test_latest_for_empty_ids_skips_query():
    session = AsyncMock()
    assert await SqlPerformanceRepository(session).latest_for([]) == {}
    session.execute.assert_not_awaited()


async def test_latest_for_is_a_single_grouped_query():
    session = _session_returning(None)
    await SqlPerformanceRepository(session).latest_for({uuid4(), uuid4()})
    assert session.execute.await_count == 1
    assert "row_number() OVER (PARTITION BY" in _sql(session)


async def test_latest_for_keys_by_investment():
    row = _orm_row()
    session = _session_returning(None)
    session.execute.return_value.scalars.return_value = [row]
    latest = await SqlPerformanceRepository(session).latest_for({row.investment_id})
    assert list(latest) == [row.investment_id]


async def test_get_previous_is_strictly_earlier():
    session = _session_returning(None)
    assert await SqlPerformanceRepository(session).get_previous(uuid4(), date(2025, 1, 2)) is None
    sql = _sql(session)
    assert "daily_performances.performance_date <" in sql
    assert "ORDER BY daily_performances.performance_date DESC" in sql


async def test_lock_investment_takes_advisory_lock():
    session = _session_returning(None)
    await SqlPerformanceRepository(session).lock_investment(uuid4())
    assert "pg_advisory_xact_lock" in _sql(session)


async def test_save_verification_missing_row_raises():
    repo = SqlPerformanceRepository(_session_returning(None))
    with pytest.raises(NotFoundError):
        await repo.save_verification(_observation().verify(uuid4()))


async def test_save_verification_only_updates_unverified_rows():
    session = _session_returning(uuid4())
    obs = _observation().verify(uuid4())
    assert await SqlPerformanceRepository(session).save_verification(obs) == obs
    assert "daily_performances.is_verified IS false" in _sql(session)


async def test_save_verification_keeps_earlier_verifier():
    first = uuid4()
    row = _orm_row(is_verified=True, verified_by=first, verified_at=datetime.now(timezone.utc))
    not_updated = MagicMock()
    not_updated.scalar_one_or_none.return_value = None
    reread = MagicMock()
    reread.scalar_one_or_none.return_value = row
    session = AsyncMock()
    session.execute.side_effect = [not_updated, reread]

    obs = _observation(
        investment_id=row.investment_id, performance_date=row.performance_date
    ).verify(uuid4())
    stored = await SqlPerformanceRepository(session).save_verification(obs)

    assert stored.verified_by == first
