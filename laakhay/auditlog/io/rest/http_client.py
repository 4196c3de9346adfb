"""HTTP client helper."""

from __future__ import annotations

from typing import Any

import aiohttp

from ...core.exceptions import QueryError, TransientQueryError

# Statuses worth another attempt within the same session
TRANSIENT_STATUSES = frozenset({408, 429, 500, 502, 503, 504})


class HTTPClient:
    """Async HTTP client wrapper."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = 30.0,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.base_url = base_url
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.headers = dict(headers or {})
        self._session: aiohttp.ClientSession | None = None

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout, headers=self.headers)
        return self._session

    def _url(self, url: str) -> str:
        # If base_url is set and url is relative, combine them
        if self.base_url and not url.startswith("http"):
            return f"{self.base_url.rstrip('/')}/{url.lstrip('/')}"
        return url

    async def get(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """GET request."""
        async with self.session.get(self._url(url), params=params, headers=headers) as response:
            await self._raise_for_status(response)
            return await response.json()

    async def post(
        self,
        url: str,
        json_body: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """POST request with a JSON body."""
        async with self.session.post(self._url(url), json=json_body, headers=headers) as response:
            await self._raise_for_status(response)
            return await response.json()

    async def _raise_for_status(self, response: aiohttp.ClientResponse) -> None:
        if response.status < 400:
            return
        text = await response.text()
        message = f"HTTP {response.status}: {text[:200]}"
        if response.status in TRANSIENT_STATUSES:
            raise TransientQueryError(message, status_code=response.status)
        raise QueryError(message, status_code=response.status)

    async def close(self) -> None:
        """Close session."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def __aenter__(self) -> HTTPClient:
        """Context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        await self.close()
