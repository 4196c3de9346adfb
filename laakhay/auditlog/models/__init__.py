"""Data models for audit-log retrieval.

Architecture:
    Pydantic v2 models for everything that crosses the executor boundary
    (ranges, windows, records, pages). All of them are frozen. Observations
    are plain frozen dataclasses since they never need validation.

Model Categories:
    - Ranges: DateRange, Window
    - Results: AuditRecord, PageResult
    - Events: AuditEvent
"""

from .events import AuditEvent
from .range import DateRange, Window
from .record import AuditRecord, PageResult

__all__ = [
    "AuditEvent",
    "AuditRecord",
    "DateRange",
    "PageResult",
    "Window",
]
