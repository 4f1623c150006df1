"""Initial schema: investments rollup columns and daily_performances.

Revision ID: 0001
Revises:
Create Date: 2026-10-17
"""

from __future__ import annotations

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "investments",
        sa.Column("investment_id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("initial_amount", sa.Double, nullable=False),
        sa.Column("current_value", sa.Double, nullable=False, server_default="0"),
        sa.Column("actual_roi", sa.Double, nullable=False, server_default="0"),
        sa.Column("latest_performance_date", sa.Date, nullable=True),
        sa.Column("latest_market_value", sa.Double, nullable=True),
        sa.Column("latest_daily_change", sa.Double, nullable=True),
        sa.Column("latest_daily_change_percent", sa.Double, nullable=True),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.CheckConstraint("initial_amount >= 0", name="ck_investments_initial_amount"),
    )
    op.create_index(
        "ix_investments_latest_performance_date", "investments", ["latest_performance_date"]
    )

    op.create_table(
        "daily_performances",
        sa.Column("observation_id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("investment_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("performance_date", sa.Date, nullable=False),
        sa.Column("market_value", sa.Double, nullable=False),
        sa.Column("daily_change", sa.Double, nullable=False, server_default="0"),
        sa.Column("daily_change_percent", sa.Double, nullable=False, server_default="0"),
        sa.Column("daily_profit_loss", sa.Double, nullable=False, server_default="0"),
        sa.Column("volume", sa.Double, nullable=False, server_default="0"),
        sa.Column("opening_value", sa.Double, nullable=True),
        sa.Column("closing_value", sa.Double, nullable=True),
        sa.Column("high_value", sa.Double, nullable=True),
        sa.Column("low_value", sa.Double, nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("market_conditions", sa.Text, nullable=False, server_default="Neutral"),
        sa.Column(
            "external_factors",
            postgresql.JSONB,
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column("data_source", sa.Text, nullable=False, server_default="Manual"),
        sa.Column("updated_by", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("is_verified", sa.Boolean, nullable=False, server_default=sa.text("false")),
        sa.Column("verified_by", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("verified_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.UniqueConstraint(
            "investment_id", "performance_date", name="uq_daily_performances_investment_date"
        ),
        sa.CheckConstraint("market_value >= 0", name="ck_daily_performances_market_value"),
        sa.CheckConstraint("volume >= 0", name="ck_daily_performances_volume"),
        sa.CheckConstraint(
            "market_conditions IN ('Bullish', 'Bearish', 'Neutral', 'Volatile', 'Stable')",
            name="ck_daily_performances_market_conditions",
        ),
        sa.CheckConstraint(
            "data_source IN ('Manual', 'API', 'Import', 'System')",
            name="ck_daily_performances_data_source",
        ),
    )
    op.create_index(
        "ix_daily_performances_investment_date_desc",
        "daily_performances",
        ["investment_id", sa.text("performance_date DESC")],
    )
    op.create_index(
        "ix_daily_performances_performance_date", "daily_performances", ["performance_date"]
    )
    op.create_index(
        "ix_daily_performances_is_verified",
        "daily_performances",
        ["investment_id", "is_verified"],
    )


def downgrade() -> None:
    op.drop_table("daily_performances")
    op.drop_table("investments")
