"""Caller-facing retrieval request with defaults and clamping.

The core never sees out-of-range parameters: RetrievalRequest resolves the
caller's values against the service limits before a run starts.

Clamping rules:
    - start_date defaults to, and is floored at, ``now - MAX_LOOKBACK``
    - end_date defaults to, and is capped at, ``now``
    - an inverted range collapses to ``start == end`` (an empty run)
    - result_size is clamped to [1, MAX_RESULT_SIZE]
    - session_size is clamped to [1, MAX_SESSION_SIZE]

Values that cannot be clamped (non-positive interval or retry limit) fail
validation.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..core.constants import (
    DEFAULT_INTERVAL_MINUTES,
    DEFAULT_QUERY_TIMEOUT,
    DEFAULT_RESULT_SIZE,
    DEFAULT_RETRY_LIMIT,
    DEFAULT_SESSION_SIZE,
    MAX_LOOKBACK,
    MAX_RESULT_SIZE,
    MAX_SESSION_SIZE,
)
from ..models import DateRange
from ..runtime.windowing import RetrievalPolicy

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class RetrievalRequest(BaseModel):
    """Parameters of one retrieval run."""

    start_date: datetime | None = None
    end_date: datetime | None = None
    interval_minutes: int = Field(DEFAULT_INTERVAL_MINUTES, ge=1)
    result_size: int = DEFAULT_RESULT_SIZE
    session_size: int = DEFAULT_SESSION_SIZE
    retry_limit: int = Field(DEFAULT_RETRY_LIMIT, ge=1)
    query_timeout: Annotated[float, Field(gt=0)] | None = DEFAULT_QUERY_TIMEOUT

    model_config = ConfigDict(frozen=True)

    @field_validator("start_date", "end_date")
    @classmethod
    def validate_timezone(cls, v: datetime | None) -> datetime | None:
        return _as_utc(v) if v is not None else None

    @field_validator("result_size")
    @classmethod
    def clamp_result_size(cls, v: int) -> int:
        return min(max(v, 1), MAX_RESULT_SIZE)

    @field_validator("session_size")
    @classmethod
    def clamp_session_size(cls, v: int) -> int:
        return min(max(v, 1), MAX_SESSION_SIZE)

    @property
    def interval(self) -> timedelta:
        return timedelta(minutes=self.interval_minutes)

    def policy(self) -> RetrievalPolicy:
        """Build the retrieval policy for this request."""
        return RetrievalPolicy(
            interval=self.interval,
            page_size=self.result_size,
            session_limit=self.session_size,
            retry_limit=self.retry_limit,
            query_timeout=self.query_timeout,
        )

    def date_range(self, now: datetime | None = None) -> DateRange:
        """Resolve the clamped date range.

        Args:
            now: Reference time (defaults to the current UTC time)

        Returns:
            DateRange with start <= end inside the retention window
        """
        now = _as_utc(now) if now is not None else datetime.now(UTC)
        floor = now - MAX_LOOKBACK

        start = self.start_date if self.start_date is not None else floor
        end = self.end_date if self.end_date is not None else now

        if start < floor:
            logger.warning(
                "start_date_clamped",
                extra={"requested": start.isoformat(), "clamped": floor.isoformat()},
            )
            start = floor
        if end > now:
            logger.warning(
                "end_date_clamped",
                extra={"requested": end.isoformat(), "clamped": now.isoformat()},
            )
            end = now
        if start > end:
            logger.warning(
                "inverted_range_clamped",
                extra={"start": start.isoformat(), "end": end.isoformat()},
            )
            start = end

        return DateRange(start=start, end=end)

    def resolve(self, now: datetime | None = None) -> tuple[DateRange, RetrievalPolicy]:
        """Resolve both the clamped range and the policy."""
        return self.date_range(now), self.policy()
