"""Domain repository interfaces.

All abstractions are defined here with abc.ABC and @abstractmethod.
Concrete implementations live in src/infrastructure/persistence/ and are
wired at the application boundary via dependency injection.

Import from this package rather than individual modules to avoid coupling
services to specific repository module paths.
"""

from .investments import InvestmentRepository
from .performance import PerformanceRepository
from .scope import RepositoryScope, ScopeFactory

__all__ = [
    "PerformanceRepository",
    "InvestmentRepository",
    "RepositoryScope",
    "ScopeFactory",
]
