"""Core components."""

from .base import BaseQueryExecutor
from .constants import (
    DEFAULT_INTERVAL_MINUTES,
    DEFAULT_QUERY_TIMEOUT,
    DEFAULT_RESULT_SIZE,
    DEFAULT_RETRY_LIMIT,
    DEFAULT_SESSION_SIZE,
    MAX_LOOKBACK,
    MAX_RESULT_SIZE,
    MAX_SESSION_SIZE,
)
from .enums import AuditEventType, ContinuationMode, DrainOutcome
from .exceptions import (
    AuditLogError,
    PayloadDecodeError,
    QueryError,
    TransientQueryError,
)

__all__ = [
    "BaseQueryExecutor",
    "AuditEventType",
    "ContinuationMode",
    "DrainOutcome",
    "AuditLogError",
    "QueryError",
    "TransientQueryError",
    "PayloadDecodeError",
    "DEFAULT_INTERVAL_MINUTES",
    "DEFAULT_QUERY_TIMEOUT",
    "DEFAULT_RESULT_SIZE",
    "DEFAULT_RETRY_LIMIT",
    "DEFAULT_SESSION_SIZE",
    "MAX_LOOKBACK",
    "MAX_RESULT_SIZE",
    "MAX_SESSION_SIZE",
]
