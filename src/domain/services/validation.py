"""Explicit input validation for ledger writes and queries.

Field rules (non-negative values, closed enumerations, required date and
actor, notes length) live on the Pydantic models; this module runs them
before any storage access and converts failures into the ledger's own
ValidationError so callers handle a single exception type.
"""

from __future__ import annotations

from datetime import date
from typing import Any
from uuid import UUID

import pydantic
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from src.domain.errors import ValidationError
from src.domain.models.performance import ObservationMetadata, truncate_to_day


class ObservationDraft(BaseModel):
    """A validated record() request, before its delta is known."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    investment_id: UUID
    performance_date: date
    market_value: float = Field(ge=0.0)
    metadata: ObservationMetadata

    @field_validator("performance_date", mode="before")
    @classmethod
    def _date_only(cls, value: object) -> object:
        return truncate_to_day(value)


_ACTOR = TypeAdapter(UUID)


def _field_errors(exc: pydantic.ValidationError) -> list[dict[str, str]]:
    return [
        {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
        for err in exc.errors()
    ]


def validate_observation(
    investment_id: Any,
    performance_date: Any,
    market_value: Any,
    metadata: ObservationMetadata | dict[str, Any] | None,
) -> ObservationDraft:
    """Validate a record() request.

    metadata may be an ObservationMetadata or a plain mapping of its fields.

    Raises:
        ValidationError: listing every offending field.
    """
    try:
        return ObservationDraft(
            investment_id=investment_id,
            performance_date=performance_date,
            market_value=market_value,
            metadata=metadata,
        )
    except pydantic.ValidationError as exc:
        errors = _field_errors(exc)
        fields = ", ".join(e["field"] for e in errors)
        raise ValidationError(f"Invalid observation: {fields}", errors) from exc


def validate_date(value: Any, field: str = "performance_date") -> date:
    """Return value as a calendar date; datetimes are truncated to their day."""
    value = truncate_to_day(value)
    if not isinstance(value, date):
        raise ValidationError(
            f"{field} must be a date", [{"field": field, "message": "a date is required"}]
        )
    return value


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_actor(value: Any, field: str = "verified_by") -> UUID:
    """Return value as a UUID actor id."""
    try:
        return _ACTOR.validate_python(value)
    except pydantic.ValidationError as exc:
        raise ValidationError(
            f"{field} must be a UUID", [{"field": field, "message": exc.errors()[0]["msg"]}]
        ) from exc


def validate_window(window_days: int) -> int:
    if not _is_int(window_days) or window_days < 0:
        raise ValidationError(
            "window_days must be a non-negative integer",
            [{"field": "window_days", "message": f"got {window_days!r}"}],
        )
    return window_days


def validate_page(limit: int, offset: int, max_limit: int) -> tuple[int, int]:
    """Return (limit, offset) with limit capped at max_limit."""
    errors = []
    if not _is_int(limit) or limit <= 0:
        errors.append({"field": "limit", "message": "must be a positive integer"})
    if not _is_int(offset) or offset < 0:
        errors.append({"field": "offset", "message": "must be a non-negative integer"})
    if errors:
        raise ValidationError("Invalid page request", errors)
    return min(limit, max_limit), offset
