"""Investment ORM model: the rollup columns the ledger reads and writes.

The investments table is owned by the wider application; only the columns
used by the rollup updater are mapped here.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Optional

from sqlalchemy import Date, DateTime, Double, Text, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database import Base


class Investment(Base):
    """An investment with its cached latest value and realised ROI.

    latest_* columns are the denormalised latest_performance snapshot;
    latest_performance_date is null until the first observation is applied.
    """

    __tablename__ = "investments"

    investment_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    initial_amount: Mapped[float] = mapped_column(Double, nullable=False)
    current_value: Mapped[float] = mapped_column(Double, nullable=False, default=0.0)
    actual_roi: Mapped[float] = mapped_column(Double, nullable=False, default=0.0)
    latest_performance_date: Mapped[Optional[date]] = mapped_column(
        Date, nullable=True, index=True
    )
    latest_market_value: Mapped[Optional[float]] = mapped_column(Double, nullable=True)
    latest_daily_change: Mapped[Optional[float]] = mapped_column(Double, nullable=True)
    latest_daily_change_percent: Mapped[Optional[float]] = mapped_column(Double, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
