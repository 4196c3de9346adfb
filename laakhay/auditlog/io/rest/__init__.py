"""REST transport for the audit-log query service."""

from .executor import RESTQueryExecutor, build_query_body, parse_page
from .http_client import HTTPClient

__all__ = [
    "HTTPClient",
    "RESTQueryExecutor",
    "build_query_body",
    "parse_page",
]
