"""In-memory queue sink."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from typing import Any

_CLOSED = object()


class InMemorySink:
    """asyncio.Queue backed sink, mostly for tests and in-process consumers."""

    def __init__(self, maxsize: int = 0) -> None:
        self._queue: asyncio.Queue[Any] = asyncio.Queue(maxsize=maxsize)
        self._closed = False

    async def publish(self, item: Any) -> None:
        if self._closed:
            raise RuntimeError("Sink is closed")
        await self._queue.put(item)

    async def get(self, timeout: float | None = None) -> Any:
        """Get the next item, waiting up to ``timeout`` seconds.

        Raises:
            RuntimeError: If the sink is closed and every item was consumed
        """
        if timeout is None:
            item = await self._queue.get()
        else:
            item = await asyncio.wait_for(self._queue.get(), timeout=timeout)
        return self._unwrap(item)

    def get_nowait(self) -> Any:
        return self._unwrap(self._queue.get_nowait())

    def _unwrap(self, item: Any) -> Any:
        if item is _CLOSED:
            # Leave the marker for other consumers
            self._queue.put_nowait(_CLOSED)
            raise RuntimeError("Sink is closed and drained")
        return item

    def qsize(self) -> int:
        return self._queue.qsize()

    def empty(self) -> bool:
        return self._queue.empty()

    async def stream(self) -> AsyncIterator[Any]:
        """Yield queued items until the sink is closed and drained."""
        while True:
            if self._closed and self._queue.empty():
                return
            item = await self._queue.get()
            if item is _CLOSED:
                return
            yield item

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        # Wake any stream() consumer; never blocks on a bounded queue
        try:
            self._queue.put_nowait(_CLOSED)
        except asyncio.QueueFull:
            pass
