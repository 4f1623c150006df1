"""Ledger exception taxonomy.

ValidationError: malformed input; surfaced immediately, never retried.
ConflictError: an observation already exists for (investment_id, date).
NotFoundError: a referenced investment or observation does not exist.

Storage errors raised by the database driver are not wrapped; they propagate
to the caller, which owns any retry policy.
"""

from __future__ import annotations

from datetime import date
from uuid import UUID


class LedgerError(Exception):
    """Base class for all ledger errors."""


class ValidationError(LedgerError, ValueError):
    """Input rejected before any storage access.

    errors is a list of {"field": ..., "message": ...} entries, one per problem.
    """

    def __init__(self, message: str, errors: list[dict[str, str]] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class ConflictError(LedgerError):
    def __init__(self, investment_id: UUID, performance_date: date) -> None:
        super().__init__(
            f"Observation for investment {investment_id} on {performance_date.isoformat()} "
            "already exists"
        )
        self.investment_id = investment_id
        self.performance_date = performance_date


class NotFoundError(LedgerError, LookupError):
    def __init__(self, kind: str, key: object) -> None:
        super().__init__(f"{kind} {key} not found")
        self.kind = kind
        self.key = key
