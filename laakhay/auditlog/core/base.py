"""Query executor abstract class.

Architecture:
    BaseQueryExecutor is the single boundary between the retrieval core and
    the remote audit-log service. The core only ever calls ``query``; how the
    caller authenticated or which transport carries the call is left to
    subclasses.

Design Decisions:
    - Async context manager: the remote connection is a scoped resource that
      must be released on every exit path, including early cancellation of
      the consuming pipeline
    - Result is always a PageResult whose records list holds 0..N items
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from .enums import ContinuationMode

if TYPE_CHECKING:
    from ..models import PageResult, Window


class BaseQueryExecutor(ABC):
    """Abstract base class for audit-log query executors."""

    def __init__(self, name: str) -> None:
        self.name = name

    @abstractmethod
    async def query(
        self,
        window: Window,
        session_id: str,
        page_size: int,
        mode: ContinuationMode = ContinuationMode.RETURN_LARGE_SET,
    ) -> PageResult:
        """Fetch the next page of a session.

        Args:
            window: Time window the session is scoped to
            session_id: Correlates all pages of one window's drain
            page_size: Page-size hint (records per response)
            mode: Server-side continuation mode

        Returns:
            PageResult with zero or more records and the declared interval total
        """
        pass

    async def close(self) -> None:
        """Release connections held by the executor. Override if needed."""
        pass

    async def __aenter__(self) -> BaseQueryExecutor:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
