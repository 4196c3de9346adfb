"""Ergonomic AuditLogAPI facade over the retrieval runtime.

Architecture:
    AuditLogAPI wires a query executor, the retrieval orchestrator and the
    optional payload decoder together. It owns the executor's lifecycle.

Design Decisions:
    - Executor injection: callers authenticate and build the executor; tests
      pass fakes
    - Context manager: the executor is closed on every exit path, including
      early termination of the consuming pipeline
    - Fresh orchestrator per fetch, so summaries never leak across runs
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import aclosing
from datetime import datetime
from typing import Any

from ..core.base import BaseQueryExecutor
from ..runtime import RecordDecoder, RetrievalOrchestrator, RetrievalSummary
from ..runtime.windowing import EventCallback
from ..sinks import StreamSink
from .request import RetrievalRequest

logger = logging.getLogger(__name__)


class AuditLogAPI:
    """High-level facade for retrieving an audit log over a date range.

    Example:
        >>> async with AuditLogAPI(RESTQueryExecutor(url, headers=auth)) as api:
        ...     request = RetrievalRequest(interval_minutes=15)
        ...     async for payload in api.fetch(request, decode=True):
        ...         handle(payload)
        ...     print(api.last_summary.total_records, api.decoder.skipped)
    """

    def __init__(
        self,
        executor: BaseQueryExecutor,
        *,
        on_event: EventCallback | None = None,
        session_ids: Callable[[], str] | None = None,
    ) -> None:
        """Initialize AuditLogAPI.

        Args:
            executor: Query executor, already authenticated
            on_event: Optional observation callback (progress, retries, ...)
            session_ids: Optional session id generator
        """
        self._executor = executor
        self._on_event = on_event
        self._session_ids = session_ids
        self._orchestrator: RetrievalOrchestrator | None = None
        self.decoder = RecordDecoder(on_event=on_event)
        self._closed = False

    @property
    def last_summary(self) -> RetrievalSummary | None:
        """Summary of the most recent fetch (None before the first one)."""
        return self._orchestrator.summary if self._orchestrator else None

    async def fetch(
        self,
        request: RetrievalRequest | None = None,
        *,
        decode: bool = False,
        now: datetime | None = None,
    ) -> AsyncIterator[Any]:
        """Yield records for a request.

        Args:
            request: Retrieval parameters (defaults to RetrievalRequest())
            decode: Yield decoded payload dicts instead of raw AuditRecords
            now: Reference time for range clamping (defaults to now)

        Yields:
            AuditRecord instances, or payload dicts when ``decode`` is set
        """
        if self._closed:
            raise RuntimeError("AuditLogAPI is closed")
        request = request or RetrievalRequest()
        date_range, policy = request.resolve(now)
        logger.debug(
            "Starting retrieval",
            extra={
                "start": date_range.start.isoformat(),
                "end": date_range.end.isoformat(),
                "interval_minutes": request.interval_minutes,
                "result_size": policy.page_size,
            },
        )

        orchestrator = RetrievalOrchestrator(
            self._executor,
            policy,
            on_event=self._on_event,
            session_ids=self._session_ids,
        )
        self._orchestrator = orchestrator

        async with aclosing(orchestrator.run(date_range)) as records:
            if decode:
                async with aclosing(self.decoder.decode_stream(records)) as payloads:
                    async for payload in payloads:
                        yield payload
            else:
                async for record in records:
                    yield record

    async def collect(
        self,
        request: RetrievalRequest | None,
        sink: StreamSink,
        *,
        decode: bool = False,
        close_sink: bool = True,
        now: datetime | None = None,
    ) -> RetrievalSummary:
        """Publish every fetched item to ``sink`` and return the run summary."""
        try:
            async with aclosing(self.fetch(request, decode=decode, now=now)) as items:
                async for item in items:
                    await sink.publish(item)
        finally:
            if close_sink:
                await sink.close()
        summary = self.last_summary
        if summary is None:
            raise RuntimeError("Retrieval finished without a summary")
        return summary

    async def close(self) -> None:
        """Close the underlying executor."""
        if self._closed:
            return
        self._closed = True
        await self._executor.close()

    async def __aenter__(self) -> AuditLogAPI:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
