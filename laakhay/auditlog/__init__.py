"""Laakhay AuditLog - windowed, session-paged audit log retrieval."""

from .api import AuditLogAPI, RetrievalRequest
from .core import (
    AuditEventType,
    AuditLogError,
    BaseQueryExecutor,
    ContinuationMode,
    DrainOutcome,
    PayloadDecodeError,
    QueryError,
    TransientQueryError,
)
from .io import HTTPClient, RESTQueryExecutor
from .models import AuditEvent, AuditRecord, DateRange, PageResult, Window
from .runtime import (
    DrainState,
    RecordDecoder,
    RetrievalOrchestrator,
    RetrievalPolicy,
    RetrievalSummary,
    SessionDrainer,
    SessionIdFactory,
    WindowPlanner,
    WindowReport,
)
from .sinks import InMemorySink, JSONLinesSink, StreamSink

__version__ = "0.1.0"

__all__ = [
    # API
    "AuditLogAPI",
    "RetrievalRequest",
    # Core
    "BaseQueryExecutor",
    "AuditEventType",
    "ContinuationMode",
    "DrainOutcome",
    # Models
    "AuditEvent",
    "AuditRecord",
    "DateRange",
    "PageResult",
    "Window",
    # Runtime
    "DrainState",
    "RecordDecoder",
    "RetrievalOrchestrator",
    "RetrievalPolicy",
    "RetrievalSummary",
    "SessionDrainer",
    "SessionIdFactory",
    "WindowPlanner",
    "WindowReport",
    # I/O
    "HTTPClient",
    "RESTQueryExecutor",
    # Sinks
    "InMemorySink",
    "JSONLinesSink",
    "StreamSink",
    # Exceptions
    "AuditLogError",
    "QueryError",
    "TransientQueryError",
    "PayloadDecodeError",
]
