"""ORM model registry. Imports all layer modules so every mapper class is
registered with Base.metadata before Alembic or SQLAlchemy runs.
"""

from src.infrastructure.persistence.models.investments import Investment
from src.infrastructure.persistence.models.performance import DailyPerformance

__all__ = [
    "Investment",
    "DailyPerformance",
]
