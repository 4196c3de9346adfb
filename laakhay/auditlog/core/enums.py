"""Core enumerations shared across the retrieval layers.

Key Types:
    - ContinuationMode: Server-side paging behaviour requested per query
    - DrainOutcome: How a single window's drain terminated
    - AuditEventType: Kinds of side-channel observations
"""

from enum import Enum


class ContinuationMode(str, Enum):
    """Paging mode sent with every query of a session.

    The remote service keeps continuation state per session id. Only
    ``RETURN_LARGE_SET`` supports paging past the first preview page, so it
    is the mode used by the drainer.
    """

    RETURN_LARGE_SET = "ReturnLargeSet"
    RETURN_NEXT_PREVIEW_PAGE = "ReturnNextPreviewPage"


class DrainOutcome(str, Enum):
    """Terminal state of one window drain."""

    DRAINED = "drained"
    EXHAUSTED = "exhausted"


class AuditEventType(str, Enum):
    """Types of retrieval observations."""

    PROGRESS = "progress"
    PAGE_RECEIVED = "page_received"
    EMPTY_PAGE = "empty_page"
    RETRY_EXHAUSTED = "retry_exhausted"
    CAPACITY_EXCEEDED = "capacity_exceeded"
    WINDOW_COMPLETED = "window_completed"
    DECODE_FAILED = "decode_failed"
    RUN_COMPLETED = "run_completed"
