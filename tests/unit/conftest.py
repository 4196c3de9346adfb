"""Shared fixtures for unit tests."""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

import pytest

from laakhay.auditlog.core import BaseQueryExecutor, ContinuationMode
from laakhay.auditlog.models import AuditRecord, PageResult, Window


@dataclass(frozen=True)
class QueryCall:
    window: Window
    session_id: str
    page_size: int
    mode: ContinuationMode


class ScriptedExecutor(BaseQueryExecutor):
    """Executor replaying scripted pages.

    Items are PageResults, exceptions (raised) or zero-argument async
    callables (awaited). Once a script runs out every query returns an
    empty page.
    """

    def __init__(self, pages=None, *, per_window=None) -> None:
        super().__init__("scripted")
        self._pages = list(pages or [])
        self._per_window = {k: list(v) for k, v in (per_window or {}).items()}
        self.calls: list[QueryCall] = []
        self.closed = False

    async def query(self, window, session_id, page_size, mode=ContinuationMode.RETURN_LARGE_SET):
        self.calls.append(QueryCall(window, session_id, page_size, mode))
        script = self._per_window.get(window.index, []) if self._per_window else self._pages
        if not script:
            return PageResult()
        item = script.pop(0)
        if isinstance(item, BaseException):
            raise item
        if callable(item):
            return await item()
        return item

    async def close(self) -> None:
        self.closed = True


def make_records(count: int, total: int, *, offset: int = 0) -> list[AuditRecord]:
    return [
        AuditRecord(
            audit_data=json.dumps({"Id": f"evt-{offset + i}", "Operation": "FileAccessed"}),
            record_type="SharePointFileOperation",
            identity=f"evt-{offset + i}",
            result_index=offset + i + 1,
            result_count=total,
        )
        for i in range(count)
    ]


def make_page(count: int, total: int, *, offset: int = 0) -> PageResult:
    return PageResult.from_records(make_records(count, total, offset=offset))


@pytest.fixture
def scripted_executor() -> type[ScriptedExecutor]:
    return ScriptedExecutor


@pytest.fixture
def page() -> Callable[..., PageResult]:
    return make_page


@pytest.fixture
def records() -> Callable[..., list[AuditRecord]]:
    return make_records


@pytest.fixture
def base_time() -> datetime:
    return datetime(2024, 1, 1, tzinfo=UTC)
