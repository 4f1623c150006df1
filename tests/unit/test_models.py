"""Unit tests for ORM model structure.

Verifies table names, nullability, constraints, and package registration.
No database connection is required.
"""

from sqlalchemy import UniqueConstraint

import src.infrastructure.persistence  # noqa: F401  registers all mappers
from src.infrastructure.database import Base
from src.infrastructure.persistence.models import __all__ as models_all
from src.infrastructure.persistence.models.investments import Investment
from src.infrastructure.persistence.models.performance import DailyPerformance


def test_daily_performance_tablename():
    assert DailyPerformance.__tablename__ == "daily_performances"


def test_investment_tablename():
    assert Investment.__tablename__ == "investments"


def test_daily_performance_unique_on_investment_and_date():
    uniques = [
        c for c in DailyPerformance.__table__.constraints if isinstance(c, UniqueConstraint)
    ]
    assert [sorted(col.name for col in c.columns) for c in uniques] == [
        ["investment_id", "performance_date"]
    ]


def test_daily_performance_investment_id_has_no_foreign_key():
    assert not DailyPerformance.__table__.c["investment_id"].foreign_keys


def test_daily_performance_optional_columns_are_nullable():
    for name in ("opening_value", "closing_value", "high_value", "low_value", "notes"):
        assert DailyPerformance.__table__.c[name].nullable is True


def test_daily_performance_required_columns_are_not_nullable():
    for name in ("market_value", "performance_date", "updated_by", "market_conditions"):
        assert DailyPerformance.__table__.c[name].nullable is False


def test_investment_latest_snapshot_is_nullable():
    assert Investment.__table__.c["latest_performance_date"].nullable is True


def test_models_package_exports():
    assert set(models_all) == {"Investment", "DailyPerformance"}


def test_all_tables_registered_with_base():
    assert set(Base.metadata.tables) == {"investments", "daily_performances"}
