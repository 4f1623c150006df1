"""Unit-of-work boundary seen by domain services.

A RepositoryScope is a set of repositories sharing one transaction.  Services
receive a factory returning an async context manager that yields a scope and
commits when the block exits cleanly (rolls back otherwise).
"""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from typing import Callable, Protocol

from .investments import InvestmentRepository
from .performance import PerformanceRepository


class RepositoryScope(Protocol):
    performance: PerformanceRepository
    investments: InvestmentRepository


ScopeFactory = Callable[[], AbstractAsyncContextManager[RepositoryScope]]
