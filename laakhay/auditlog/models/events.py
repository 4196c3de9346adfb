"""Side-channel observations emitted during retrieval."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from ..core.enums import AuditEventType


def _now() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class AuditEvent:
    """Structured observation for progress and diagnostics."""

    event_type: AuditEventType
    timestamp: datetime = field(default_factory=_now)
    window_index: int | None = None
    session_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def progress(cls, window_index: int, total: int) -> AuditEvent:
        """Create a progress event as window ``window_index`` (0-based) starts."""
        current = window_index + 1
        percent = round(current / total * 100, 2) if total else 100.0
        return cls(
            event_type=AuditEventType.PROGRESS,
            window_index=window_index,
            metadata={"current": current, "total": total, "percent_complete": percent},
        )

    @classmethod
    def page_received(
        cls, window_index: int, session_id: str, records: int, received: int, total: int
    ) -> AuditEvent:
        return cls(
            event_type=AuditEventType.PAGE_RECEIVED,
            window_index=window_index,
            session_id=session_id,
            metadata={"records": records, "received": received, "interval_total": total},
        )

    @classmethod
    def empty_page(
        cls, window_index: int, session_id: str, retries: int, reason: str = "empty"
    ) -> AuditEvent:
        return cls(
            event_type=AuditEventType.EMPTY_PAGE,
            window_index=window_index,
            session_id=session_id,
            metadata={"retries": retries, "reason": reason},
        )

    @classmethod
    def retry_exhausted(
        cls, window_index: int, session_id: str, retries: int, received: int, total: int
    ) -> AuditEvent:
        return cls(
            event_type=AuditEventType.RETRY_EXHAUSTED,
            window_index=window_index,
            session_id=session_id,
            metadata={"retries": retries, "received": received, "interval_total": total},
        )

    @classmethod
    def capacity_exceeded(
        cls, window_index: int, session_id: str, declared: int, limit: int
    ) -> AuditEvent:
        return cls(
            event_type=AuditEventType.CAPACITY_EXCEEDED,
            window_index=window_index,
            session_id=session_id,
            metadata={"declared_total": declared, "session_limit": limit},
        )

    @classmethod
    def window_completed(
        cls,
        window_index: int,
        session_id: str,
        outcome: str,
        received: int,
        total: int,
    ) -> AuditEvent:
        return cls(
            event_type=AuditEventType.WINDOW_COMPLETED,
            window_index=window_index,
            session_id=session_id,
            metadata={"outcome": outcome, "received": received, "interval_total": total},
        )

    @classmethod
    def decode_failed(cls, record_id: str | None, skipped: int, reason: str) -> AuditEvent:
        return cls(
            event_type=AuditEventType.DECODE_FAILED,
            metadata={"record_id": record_id, "skipped": skipped, "reason": reason},
        )

    @classmethod
    def run_completed(cls, total_records: int, windows: int) -> AuditEvent:
        return cls(
            event_type=AuditEventType.RUN_COMPLETED,
            metadata={"total_records": total_records, "windows": windows},
        )
