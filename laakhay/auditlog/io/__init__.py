"""I/O layer (query executor implementations)."""

from .rest import HTTPClient, RESTQueryExecutor

__all__ = [
    "HTTPClient",
    "RESTQueryExecutor",
]
