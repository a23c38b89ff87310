"""Shared field types and helpers for GutSafe models."""

from datetime import datetime, timezone
from typing import Annotated

from pydantic import AfterValidator, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_aware(value: datetime) -> datetime:
    """Interpret naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def clamp(value: float, lower: float = 0.0, upper: float = 1.0) -> float:
    return max(lower, min(upper, value))


Ratio = Annotated[float, Field(ge=0, le=1)]
Timestamp = Annotated[datetime, AfterValidator(ensure_aware)]
