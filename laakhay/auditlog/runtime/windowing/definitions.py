"""Retrieval policy, drain state and result structures.

This module defines the data structures shared by the window planner,
the session drainer and the retrieval orchestrator.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import timedelta

from ...core.constants import (
    DEFAULT_INTERVAL_MINUTES,
    DEFAULT_QUERY_TIMEOUT,
    DEFAULT_RESULT_SIZE,
    DEFAULT_RETRY_LIMIT,
    DEFAULT_SESSION_SIZE,
)
from ...core.enums import DrainOutcome
from ...models import AuditEvent, Window

EventCallback = Callable[[AuditEvent], Awaitable[None]] | Callable[[AuditEvent], None]


@dataclass(frozen=True)
class RetrievalPolicy:
    """Limits applied to every window of a retrieval run.

    Attributes:
        interval: Duration of each planned window
        page_size: Records requested per page
        session_limit: Maximum records one session can return
        retry_limit: Empty (or timed out) pages tolerated per window
        query_timeout: Seconds before a single query counts as empty (None = no timeout)
    """

    interval: timedelta = timedelta(minutes=DEFAULT_INTERVAL_MINUTES)
    page_size: int = DEFAULT_RESULT_SIZE
    session_limit: int = DEFAULT_SESSION_SIZE
    retry_limit: int = DEFAULT_RETRY_LIMIT
    query_timeout: float | None = DEFAULT_QUERY_TIMEOUT

    def __post_init__(self) -> None:
        """Validate policy configuration."""
        if self.interval <= timedelta(0):
            raise ValueError("RetrievalPolicy interval must be positive")
        if self.page_size < 1:
            raise ValueError("RetrievalPolicy page_size must be >= 1")
        if self.session_limit < 1:
            raise ValueError("RetrievalPolicy session_limit must be >= 1")
        if self.retry_limit < 1:
            raise ValueError("RetrievalPolicy retry_limit must be >= 1")
        if self.query_timeout is not None and self.query_timeout <= 0:
            raise ValueError("RetrievalPolicy query_timeout must be positive or None")


@dataclass
class DrainState:
    """Mutable state of one window's drain.

    Attributes:
        retries: Empty or timed-out pages seen so far (never reset within a window)
        session_record_count: Records received, None until the first non-empty page
        interval_result_count: Declared (possibly clamped) interval total
        pages: Non-empty pages received
        capacity_exceeded: Declared total was clamped to the session limit
        retry_exhausted: Retry budget ran out before the total was reached
    """

    retries: int = 0
    session_record_count: int | None = None
    interval_result_count: int = 0
    pages: int = 0
    capacity_exceeded: bool = False
    retry_exhausted: bool = False

    @property
    def received(self) -> int:
        return max(self.session_record_count or 0, 0)

    @property
    def remaining(self) -> int:
        return max(self.interval_result_count - self.received, 0)

    @property
    def outcome(self) -> DrainOutcome:
        return DrainOutcome.EXHAUSTED if self.retry_exhausted else DrainOutcome.DRAINED

    def should_continue(self, retry_limit: int) -> bool:
        if self.retries >= retry_limit:
            return False
        if self.session_record_count is None:
            return True
        return self.session_record_count < self.interval_result_count


@dataclass(frozen=True)
class WindowReport:
    """Outcome of one drained window."""

    window: Window
    session_id: str
    outcome: DrainOutcome
    records: int
    interval_total: int
    retries: int
    capacity_exceeded: bool = False


@dataclass
class RetrievalSummary:
    """Totals accumulated over one orchestration run.

    Attributes:
        total_records: Records forwarded across all windows
        windows_planned: Windows produced by the planner
        windows_processed: Windows whose drain finished
        reports: Per-window reports, in window order
    """

    total_records: int = 0
    windows_planned: int = 0
    windows_processed: int = 0
    reports: list[WindowReport] = field(default_factory=list)

    @property
    def windows_exhausted(self) -> int:
        return sum(1 for r in self.reports if r.outcome == DrainOutcome.EXHAUSTED)

    @property
    def windows_over_capacity(self) -> int:
        return sum(1 for r in self.reports if r.capacity_exceeded)

    @property
    def complete(self) -> bool:
        """True when every planned window drained without loss."""
        return (
            self.windows_processed == self.windows_planned
            and self.windows_exhausted == 0
            and self.windows_over_capacity == 0
        )

    def add(self, report: WindowReport) -> None:
        self.reports.append(report)
        self.windows_processed += 1
        self.total_records += max(report.records, 0)


class SessionIdFactory:
    """Generates time-derived, strictly increasing session identifiers.

    Identifiers are nanosecond timestamps; when the clock does not advance
    between two calls the previous value is bumped by one.
    """

    def __init__(self, prefix: str = "", clock: Callable[[], int] = time.time_ns) -> None:
        self._prefix = prefix
        self._clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def __call__(self) -> str:
        with self._lock:
            value = max(self._clock(), self._last + 1)
            self._last = value
        return f"{self._prefix}{value}"
