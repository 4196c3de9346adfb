"""Public API layer."""

from .audit_api import AuditLogAPI
from .request import RetrievalRequest

__all__ = ["AuditLogAPI", "RetrievalRequest"]
