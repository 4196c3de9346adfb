"""Session drain logic for fetching every record of one window.

This module provides the SessionDrainer class. It pages through a single
window under one session id until the service's declared interval total has
been received or the retry budget for empty pages is spent.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from time import perf_counter

from ...core.base import BaseQueryExecutor
from ...core.enums import ContinuationMode
from ...core.exceptions import TransientQueryError
from ...models import AuditEvent, AuditRecord, PageResult, Window
from .definitions import DrainState, EventCallback, RetrievalPolicy
from .telemetry import (
    emit,
    log_capacity_exceeded,
    log_empty_page,
    log_page_received,
    log_retry_exhausted,
    log_window_drained,
)


class SessionDrainer:
    """Drains one window completely through repeated paged queries.

    The service gives no explicit end-of-session signal, so completion is
    decided by count: the drain stops once the cumulative number of received
    records reaches the declared interval total. Empty pages (and timeouts or
    transient errors, which are treated the same) consume the retry budget;
    the service may return them mid-session before converging.
    """

    def __init__(
        self,
        executor: BaseQueryExecutor,
        policy: RetrievalPolicy | None = None,
        *,
        on_event: EventCallback | None = None,
    ) -> None:
        """Initialize session drainer.

        Args:
            executor: Query executor for the remote service
            policy: Page size, session limit, retry limit and timeout
            on_event: Optional observation callback (sync or async)
        """
        self._executor = executor
        self._policy = policy or RetrievalPolicy()
        self._on_event = on_event
        self.last_state: DrainState | None = None

    @property
    def policy(self) -> RetrievalPolicy:
        return self._policy

    async def drain(self, window: Window, session_id: str) -> AsyncIterator[AuditRecord]:
        """Yield every retrievable record of ``window`` in page order.

        The final DrainState is available as ``last_state`` once the
        iterator is exhausted.

        Args:
            window: Window to drain
            session_id: Fresh session identifier for this window

        Yields:
            Records in the order the service returned them
        """
        policy = self._policy
        state = DrainState()
        self.last_state = state

        while state.should_continue(policy.retry_limit):
            started = perf_counter()
            page, reason = await self._fetch_page(window, session_id)

            if page is None or page.is_empty:
                state.retries += 1
                log_empty_page(
                    window=window,
                    session_id=session_id,
                    retries=state.retries,
                    retry_limit=policy.retry_limit,
                    reason=reason,
                )
                await emit(
                    self._on_event,
                    AuditEvent.empty_page(window.index, session_id, state.retries, reason),
                )
                if state.retries >= policy.retry_limit:
                    await self._mark_exhausted(window, session_id, state)
                continue

            state.interval_result_count = page.interval_total
            if state.session_record_count is None:
                state.session_record_count = 0

            if state.interval_result_count > policy.session_limit:
                declared = state.interval_result_count
                state.interval_result_count = policy.session_limit
                if not state.capacity_exceeded:
                    state.capacity_exceeded = True
                    log_capacity_exceeded(
                        window=window,
                        session_id=session_id,
                        declared_total=declared,
                        session_limit=policy.session_limit,
                    )
                    await emit(
                        self._on_event,
                        AuditEvent.capacity_exceeded(
                            window.index, session_id, declared, policy.session_limit
                        ),
                    )

            # Never forward past the (possibly clamped) interval total
            forwarded = page.records[: state.remaining]
            state.session_record_count += len(forwarded)
            state.pages += 1

            log_page_received(
                window=window,
                session_id=session_id,
                records=len(forwarded),
                received=state.received,
                interval_total=state.interval_result_count,
                latency_ms=(perf_counter() - started) * 1000.0,
            )
            await emit(
                self._on_event,
                AuditEvent.page_received(
                    window.index,
                    session_id,
                    len(forwarded),
                    state.received,
                    state.interval_result_count,
                ),
            )

            for record in forwarded:
                yield record

        log_window_drained(
            window=window,
            session_id=session_id,
            outcome=state.outcome.value,
            received=state.received,
            interval_total=state.interval_result_count,
            retries=state.retries,
        )
        await emit(
            self._on_event,
            AuditEvent.window_completed(
                window.index,
                session_id,
                state.outcome.value,
                state.received,
                state.interval_result_count,
            ),
        )

    async def drain_window(
        self, window: Window, session_id: str
    ) -> tuple[list[AuditRecord], DrainState]:
        """Drain ``window`` into a list and return it with the final state."""
        records = [record async for record in self.drain(window, session_id)]
        state = self.last_state
        if state is None:
            raise RuntimeError(f"Window {window.index} was not drained")
        return records, state

    async def _fetch_page(self, window: Window, session_id: str) -> tuple[PageResult | None, str]:
        call = self._executor.query(
            window,
            session_id,
            self._policy.page_size,
            ContinuationMode.RETURN_LARGE_SET,
        )
        try:
            if self._policy.query_timeout is None:
                page = await call
            else:
                page = await asyncio.wait_for(call, timeout=self._policy.query_timeout)
        except TimeoutError:
            return None, "timeout"
        except TransientQueryError as e:
            return None, f"transient_error: {e}"
        return page, "empty"

    async def _mark_exhausted(self, window: Window, session_id: str, state: DrainState) -> None:
        state.retry_exhausted = True
        log_retry_exhausted(
            window=window,
            session_id=session_id,
            retries=state.retries,
            received=state.received,
            interval_total=state.interval_result_count,
        )
        await emit(
            self._on_event,
            AuditEvent.retry_exhausted(
                window.index,
                session_id,
                state.retries,
                state.received,
                state.interval_result_count,
            ),
        )
