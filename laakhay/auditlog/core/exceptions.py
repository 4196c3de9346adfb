"""Custom exception hierarchy."""

from __future__ import annotations


class AuditLogError(Exception):
    """Base exception for all library errors."""

    pass


class QueryError(AuditLogError):
    """Error returned by the remote query service."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code


class TransientQueryError(QueryError):
    """Retryable query failure (throttling, gateway errors).

    The session drainer counts these against the retry budget the same way
    it counts an empty page.
    """

    pass


class PayloadDecodeError(AuditLogError):
    """Record payload could not be parsed as structured data."""

    def __init__(
        self,
        message: str,
        record_id: str | None = None,
        reason: str | None = None,
    ) -> None:
        super().__init__(message)
        self.record_id = record_id
        self.reason = reason
