"""Time range and window models."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def _ensure_utc(value: datetime) -> datetime:
    # Naive timestamps are interpreted as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class DateRange(BaseModel):
    """Half-open ``[start, end)`` range of a retrieval run."""

    start: datetime
    end: datetime

    model_config = ConfigDict(frozen=True)

    @field_validator("start", "end")
    @classmethod
    def validate_timezone(cls, v: datetime) -> datetime:
        return _ensure_utc(v)

    @model_validator(mode="after")
    def validate_order(self) -> DateRange:
        """Validate start <= end."""
        if self.start > self.end:
            raise ValueError("start must be <= end")
        return self

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def is_empty(self) -> bool:
        return self.start == self.end


class Window(BaseModel):
    """One planned sub-window of a DateRange."""

    start: datetime
    end: datetime
    index: int = Field(0, ge=0)

    model_config = ConfigDict(frozen=True)

    @field_validator("start", "end")
    @classmethod
    def validate_timezone(cls, v: datetime) -> datetime:
        return _ensure_utc(v)

    @model_validator(mode="after")
    def validate_order(self) -> Window:
        if self.start > self.end:
            raise ValueError("window start must be <= end")
        return self

    @property
    def duration(self) -> timedelta:
        return self.end - self.start
