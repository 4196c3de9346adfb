"""Sink protocol for downstream consumers of retrieved records."""

from __future__ import annotations

from typing import Any, Protocol


class StreamSink(Protocol):
    """Protocol for sinks that receive retrieved records.

    Any class implementing ``publish`` and ``close`` can be used; there is
    no shared base class.
    """

    async def publish(self, item: Any) -> None:
        """Publish one record (raw AuditRecord or decoded payload)."""
        ...

    async def close(self) -> None:
        """Flush and release resources. Called once retrieval ends."""
        ...
