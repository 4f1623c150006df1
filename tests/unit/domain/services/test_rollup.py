"""Tests for src/domain/services/rollup.py."""

from datetime import date
from uuid import uuid4

import pytest

from src.domain.errors import NotFoundError, ValidationError
from src.domain.models.performance import Observation
from src.domain.services.rollup import RollupUpdater


def _obs(iid, day, value):
    return Observation(
        investment_id=iid,
        performance_date=day,
        market_value=value,
        daily_change=1.0,
        daily_change_percent=0.5,
        updated_by=uuid4(),
    )


async def test_apply_latest_writes_rollup(store):
    iid = store.investments.add(100_000.0)
    written = await RollupUpdater(store.investments).apply_latest(
        iid, _obs(iid, date(2025, 1, 3), 102_000.0)
    )
    rollup = store.investments.rollups[iid]
    assert written is True
    assert rollup.current_value == 102_000.0
    assert rollup.actual_roi == pytest.approx(2.0)
    assert rollup.latest_performance.performance_date == date(2025, 1, 3)
    assert rollup.latest_performance.daily_change_percent == 0.5


async def test_older_observation_is_a_no_op(store):
    iid = store.investments.add(100_000.0)
    updater = RollupUpdater(store.investments)
    await updater.apply_latest(iid, _obs(iid, date(2025, 1, 3), 102_000.0))
    before = store.investments.rollups[iid]

    written = await updater.apply_latest(iid, _obs(iid, date(2025, 1, 2), 90_000.0))

    assert written is False
    assert store.investments.rollups[iid] == before
    assert store.investments.writes == 1


async def test_reapplying_same_date_overwrites(store):
    iid = store.investments.add(100.0)
    updater = RollupUpdater(store.investments)
    obs = _obs(iid, date(2025, 1, 3), 110.0)
    await updater.apply_latest(iid, obs)
    await updater.apply_latest(iid, obs)
    assert store.investments.rollups[iid].current_value == 110.0


async def test_missing_investment_raises_not_found(store):
    iid = uuid4()
    with pytest.raises(NotFoundError):
        await RollupUpdater(store.investments).apply_latest(
            iid, _obs(iid, date(2025, 1, 3), 1.0)
        )


async def test_observation_for_other_investment_raises(store):
    iid = store.investments.add(100.0)
    with pytest.raises(ValidationError):
        await RollupUpdater(store.investments).apply_latest(
            iid, _obs(uuid4(), date(2025, 1, 3), 1.0)
        )
