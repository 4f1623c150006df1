"""Performance ledger ORM model: daily_performances."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Optional

from sqlalchemy import Boolean, Date, DateTime, Double, Index, Text, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database import Base


class DailyPerformance(Base):
    """One market-value observation for an investment on a calendar date.

    Unique on (investment_id, performance_date); the constraint is the
    conflict signal for concurrent writers.  investment_id carries no foreign
    key: observations outlive the investment row they reference.
    """

    __tablename__ = "daily_performances"
    __table_args__ = (
        UniqueConstraint(
            "investment_id", "performance_date", name="uq_daily_performances_investment_date"
        ),
        Index(
            "ix_daily_performances_investment_date_desc",
            "investment_id",
            "performance_date",
            postgresql_ops={"performance_date": "DESC"},
        ),
        Index("ix_daily_performances_performance_date", "performance_date"),
        Index("ix_daily_performances_is_verified", "investment_id", "is_verified"),
    )

    observation_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    investment_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    performance_date: Mapped[date] = mapped_column(Date, nullable=False)
    market_value: Mapped[float] = mapped_column(Double, nullable=False)
    daily_change: Mapped[float] = mapped_column(Double, nullable=False, default=0.0)
    daily_change_percent: Mapped[float] = mapped_column(Double, nullable=False, default=0.0)
    daily_profit_loss: Mapped[float] = mapped_column(Double, nullable=False, default=0.0)
    volume: Mapped[float] = mapped_column(Double, nullable=False, default=0.0)
    opening_value: Mapped[Optional[float]] = mapped_column(Double, nullable=True)
    closing_value: Mapped[Optional[float]] = mapped_column(Double, nullable=True)
    high_value: Mapped[Optional[float]] = mapped_column(Double, nullable=True)
    low_value: Mapped[Optional[float]] = mapped_column(Double, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    market_conditions: Mapped[str] = mapped_column(Text, nullable=False)  # Bullish / Bearish / …
    external_factors: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)
    data_source: Mapped[str] = mapped_column(Text, nullable=False)  # Manual / API / Import / System
    updated_by: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    is_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    verified_by: Mapped[Optional[uuid.UUID]] = mapped_column(UUID(as_uuid=True), nullable=True)
    verified_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
