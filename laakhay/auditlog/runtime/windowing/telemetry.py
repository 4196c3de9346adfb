"""Structured logging and observation hooks for retrieval operations.

Every diagnostic the runtime layer produces goes through this module so
log records share message names and ``extra`` keys.
"""

from __future__ import annotations

import inspect
import logging
from datetime import datetime

from ...models import AuditEvent, Window
from .definitions import EventCallback, RetrievalSummary

logger = logging.getLogger(__name__)


async def emit(callback: EventCallback | None, event: AuditEvent) -> None:
    """Deliver an observation to a sync or async callback."""
    if callback is None:
        return
    result = callback(event)
    if inspect.isawaitable(result):
        await result


def log_window_plan(
    *,
    total_windows: int,
    interval_seconds: int,
    start_time: datetime,
    end_time: datetime,
) -> None:
    """Log window plan creation.

    Args:
        total_windows: Number of windows planned
        interval_seconds: Configured window duration
        start_time: Range start
        end_time: Range end
    """
    logger.info(
        "window_plan_created",
        extra={
            "total_windows": total_windows,
            "interval_seconds": interval_seconds,
            "start_time": start_time.isoformat(),
            "end_time": end_time.isoformat(),
        },
    )


def log_window_started(*, window: Window, session_id: str, total_windows: int) -> None:
    logger.info(
        "window_started",
        extra={
            "window_index": window.index,
            "total_windows": total_windows,
            "session_id": session_id,
            "start_time": window.start.isoformat(),
            "end_time": window.end.isoformat(),
        },
    )


def log_page_received(
    *,
    window: Window,
    session_id: str,
    records: int,
    received: int,
    interval_total: int,
    latency_ms: float | None = None,
) -> None:
    """Log a non-empty page.

    Args:
        window: Window being drained
        session_id: Session identifier
        records: Records forwarded from this page
        received: Cumulative records received in the session
        interval_total: Declared (possibly clamped) interval total
        latency_ms: Query latency in milliseconds (optional)
    """
    logger.debug(
        "page_received",
        extra={
            "window_index": window.index,
            "session_id": session_id,
            "records": records,
            "received": received,
            "interval_total": interval_total,
            "latency_ms": latency_ms,
        },
    )


def log_empty_page(
    *,
    window: Window,
    session_id: str,
    retries: int,
    retry_limit: int,
    reason: str,
) -> None:
    logger.debug(
        "empty_page",
        extra={
            "window_index": window.index,
            "session_id": session_id,
            "retries": retries,
            "retry_limit": retry_limit,
            "reason": reason,
        },
    )


def log_retry_exhausted(
    *,
    window: Window,
    session_id: str,
    retries: int,
    received: int,
    interval_total: int,
) -> None:
    """Log that a window was abandoned with its declared total unmet."""
    logger.warning(
        "retry_exhausted",
        extra={
            "window_index": window.index,
            "session_id": session_id,
            "retries": retries,
            "received": received,
            "interval_total": interval_total,
            "start_time": window.start.isoformat(),
            "end_time": window.end.isoformat(),
        },
    )


def log_capacity_exceeded(
    *,
    window: Window,
    session_id: str,
    declared_total: int,
    session_limit: int,
) -> None:
    """Log a window whose declared total is above the session cap.

    Records beyond ``session_limit`` are not retrievable in this pass; a
    smaller interval avoids the loss.
    """
    logger.warning(
        "session_capacity_exceeded",
        extra={
            "window_index": window.index,
            "session_id": session_id,
            "declared_total": declared_total,
            "session_limit": session_limit,
            "start_time": window.start.isoformat(),
            "end_time": window.end.isoformat(),
        },
    )


def log_window_drained(
    *,
    window: Window,
    session_id: str,
    outcome: str,
    received: int,
    interval_total: int,
    retries: int,
) -> None:
    logger.info(
        "window_drained",
        extra={
            "window_index": window.index,
            "session_id": session_id,
            "outcome": outcome,
            "received": received,
            "interval_total": interval_total,
            "retries": retries,
        },
    )


def log_retrieval_complete(
    *,
    summary: RetrievalSummary,
    total_latency_ms: float | None = None,
) -> None:
    """Log completion of an orchestration run.

    Args:
        summary: Accumulated run summary
        total_latency_ms: Total latency in milliseconds (optional)
    """
    logger.info(
        "retrieval_complete",
        extra={
            "total_records": summary.total_records,
            "windows_planned": summary.windows_planned,
            "windows_processed": summary.windows_processed,
            "windows_exhausted": summary.windows_exhausted,
            "windows_over_capacity": summary.windows_over_capacity,
            "total_latency_ms": total_latency_ms,
        },
    )


def log_decode_failure(*, record_id: str | None, skipped: int, reason: str) -> None:
    """Log a record skipped because its payload could not be decoded."""
    logger.warning(
        "payload_decode_failed",
        extra={
            "record_id": record_id,
            "skipped": skipped,
            "reason": reason,
        },
    )
