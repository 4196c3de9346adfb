"""Retrieval orchestrator driving windows through session drains.

Architecture:
    RetrievalOrchestrator is the top-level driver. For each planned window it
    creates a fresh session id, drains the window and forwards its records
    unchanged. It also keeps the running totals.

Design Decisions:
    - Fail-soft: a window that exhausts its retry budget is reported and the
      run moves on to the next window
    - Sequential: windows in chronological order, pages in session order,
      so output follows interval order
    - Totals live on the instance (``summary``), one per run
    - Early stop: closing the iterator stops the run without querying the
      remaining windows
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import aclosing
from time import perf_counter

from ..core.base import BaseQueryExecutor
from ..models import AuditEvent, AuditRecord, DateRange
from .windowing import (
    EventCallback,
    RetrievalPolicy,
    RetrievalSummary,
    SessionDrainer,
    SessionIdFactory,
    WindowPlanner,
    WindowReport,
)
from .windowing.telemetry import emit, log_retrieval_complete, log_window_started

logger = logging.getLogger(__name__)


class RetrievalOrchestrator:
    """Enumerates every record of a date range, window by window.

    Example:
        >>> orchestrator = RetrievalOrchestrator(executor, RetrievalPolicy())
        >>> async for record in orchestrator.run(date_range):
        ...     handle(record)
        >>> orchestrator.summary.total_records
    """

    def __init__(
        self,
        executor: BaseQueryExecutor,
        policy: RetrievalPolicy | None = None,
        *,
        on_event: EventCallback | None = None,
        session_ids: Callable[[], str] | None = None,
    ) -> None:
        """Initialize retrieval orchestrator.

        Args:
            executor: Query executor for the remote service
            policy: Retrieval limits (defaults to RetrievalPolicy())
            on_event: Optional observation callback (sync or async)
            session_ids: Session id generator (defaults to SessionIdFactory())
        """
        self._policy = policy or RetrievalPolicy()
        self._on_event = on_event
        self._planner = WindowPlanner(self._policy.interval)
        self._drainer = SessionDrainer(executor, self._policy, on_event=on_event)
        self._session_ids = session_ids or SessionIdFactory()
        self.summary = RetrievalSummary()

    @property
    def policy(self) -> RetrievalPolicy:
        return self._policy

    async def run(self, date_range: DateRange) -> AsyncIterator[AuditRecord]:
        """Yield every retrievable record in ``date_range``.

        Each call resets ``summary``.

        Args:
            date_range: Range to retrieve

        Yields:
            Records in window order, then page order
        """
        started = perf_counter()
        summary = RetrievalSummary(windows_planned=self._planner.count(date_range))
        self.summary = summary
        total = summary.windows_planned

        for window in self._planner.plan(date_range):
            session_id = self._session_ids()
            log_window_started(window=window, session_id=session_id, total_windows=total)
            await emit(self._on_event, AuditEvent.progress(window.index, total))

            async with aclosing(self._drainer.drain(window, session_id)) as records:
                async for record in records:
                    yield record

            state = self._drainer.last_state
            if state is None:
                raise RuntimeError(f"Window {window.index} was not drained")
            summary.add(
                WindowReport(
                    window=window,
                    session_id=session_id,
                    outcome=state.outcome,
                    records=state.received,
                    interval_total=state.interval_result_count,
                    retries=state.retries,
                    capacity_exceeded=state.capacity_exceeded,
                )
            )

        log_retrieval_complete(
            summary=summary, total_latency_ms=(perf_counter() - started) * 1000.0
        )
        await emit(
            self._on_event,
            AuditEvent.run_completed(summary.total_records, summary.windows_processed),
        )
        if not summary.complete:
            logger.warning(
                "Retrieval finished with %d exhausted and %d over-capacity windows",
                summary.windows_exhausted,
                summary.windows_over_capacity,
            )
