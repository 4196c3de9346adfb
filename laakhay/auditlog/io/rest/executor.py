"""REST query executor for the audit-log search endpoint.

Each call POSTs one page request for a window/session pair and converts the
response into a PageResult. Authentication is the caller's concern: pass
ready-made headers (for example a bearer token) when constructing the
executor.
"""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from ...core.base import BaseQueryExecutor
from ...core.constants import DEFAULT_QUERY_PATH
from ...core.enums import ContinuationMode
from ...core.exceptions import QueryError, TransientQueryError
from ...models import PageResult, Window
from .http_client import HTTPClient

logger = logging.getLogger(__name__)


def build_query_body(
    window: Window,
    session_id: str,
    page_size: int,
    mode: ContinuationMode,
) -> dict[str, Any]:
    """Build the request body for one page query."""
    return {
        "StartDate": window.start.isoformat(),
        "EndDate": window.end.isoformat(),
        "SessionId": session_id,
        "SessionCommand": mode.value,
        "ResultSize": page_size,
    }


def parse_page(payload: Any) -> PageResult:
    """Convert a response payload into a PageResult.

    Accepts a bare JSON list of records, an object wrapping them under
    ``value``, or null (no results).

    Raises:
        QueryError: If the payload has an unexpected shape
    """
    if payload is None:
        return PageResult()
    if isinstance(payload, dict):
        payload = payload.get("value", [])
    if not isinstance(payload, list):
        raise QueryError(f"Unexpected response payload type: {type(payload).__name__}")
    return PageResult.from_records(payload)


class RESTQueryExecutor(BaseQueryExecutor):
    """Query executor backed by an HTTP endpoint."""

    def __init__(
        self,
        base_url: str,
        *,
        path: str = DEFAULT_QUERY_PATH,
        headers: dict[str, str] | None = None,
        timeout: float = 60.0,
        http: HTTPClient | None = None,
    ) -> None:
        """Initialize REST query executor.

        Args:
            base_url: Service base URL
            path: Query endpoint path
            headers: Extra headers sent with every request (auth, tenant, ...)
            timeout: Per-request HTTP timeout in seconds
            http: Pre-built HTTP client (mainly for testing)
        """
        super().__init__("rest")
        self._path = path
        self._http = http or HTTPClient(base_url=base_url, timeout=timeout, headers=headers)

    async def query(
        self,
        window: Window,
        session_id: str,
        page_size: int,
        mode: ContinuationMode = ContinuationMode.RETURN_LARGE_SET,
    ) -> PageResult:
        body = build_query_body(window, session_id, page_size, mode)
        try:
            payload = await self._http.post(self._path, json_body=body)
        except aiohttp.ClientConnectionError as e:
            raise TransientQueryError(f"Connection error: {e}") from e
        page = parse_page(payload)
        logger.debug(
            "query_page",
            extra={"session_id": session_id, "records": len(page), "total": page.interval_total},
        )
        return page

    async def close(self) -> None:
        await self._http.close()
