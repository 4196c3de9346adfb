"""Unit tests for the retrieval orchestrator."""

from __future__ import annotations

from datetime import timedelta

import pytest

from laakhay.auditlog.core import AuditEventType, DrainOutcome
from laakhay.auditlog.models import DateRange, PageResult
from laakhay.auditlog.runtime import RetrievalOrchestrator, RetrievalPolicy


def _policy(**kwargs) -> RetrievalPolicy:
    kwargs.setdefault("query_timeout", None)
    kwargs.setdefault("interval", timedelta(minutes=30))
    return RetrievalPolicy(**kwargs)


class TestRetrievalOrchestrator:
    """Test RetrievalOrchestrator across windows."""

    @pytest.mark.asyncio
    async def test_forwards_records_in_window_order(self, scripted_executor, page, base_time):
        executor = scripted_executor(
            per_window={0: [page(2, 2)], 1: [page(3, 3, offset=100)]}
        )
        orchestrator = RetrievalOrchestrator(executor, _policy())
        r = DateRange(start=base_time, end=base_time + timedelta(minutes=60))

        records = [rec async for rec in orchestrator.run(r)]

        assert [rec.identity for rec in records] == [
            "evt-0",
            "evt-1",
            "evt-100",
            "evt-101",
            "evt-102",
        ]
        assert orchestrator.summary.total_records == 5
        assert orchestrator.summary.windows_planned == 2
        assert orchestrator.summary.windows_processed == 2
        assert orchestrator.summary.complete

    @pytest.mark.asyncio
    async def test_fresh_session_per_window(self, scripted_executor, page, base_time):
        executor = scripted_executor(
            per_window={0: [page(1, 2), page(1, 2, offset=1)], 1: [page(1, 1)], 2: [page(1, 1)]}
        )
        orchestrator = RetrievalOrchestrator(executor, _policy())
        r = DateRange(start=base_time, end=base_time + timedelta(minutes=90))

        _ = [rec async for rec in orchestrator.run(r)]

        sessions_by_window: dict[int, set[str]] = {}
        for call in executor.calls:
            sessions_by_window.setdefault(call.window.index, set()).add(call.session_id)
        assert all(len(s) == 1 for s in sessions_by_window.values())
        all_sessions = [next(iter(s)) for s in sessions_by_window.values()]
        assert len(set(all_sessions)) == 3
        assert [r.session_id for r in orchestrator.summary.reports] == all_sessions

    @pytest.mark.asyncio
    async def test_exhausted_window_does_not_stop_run(self, scripted_executor, page, base_time):
        events = []
        executor = scripted_executor(
            per_window={0: [PageResult(), PageResult(), PageResult()], 1: [page(4, 4)]}
        )
        orchestrator = RetrievalOrchestrator(executor, _policy(), on_event=events.append)
        r = DateRange(start=base_time, end=base_time + timedelta(minutes=60))

        records = [rec async for rec in orchestrator.run(r)]

        assert len(records) == 4
        summary = orchestrator.summary
        assert summary.total_records == 4
        assert summary.windows_exhausted == 1
        assert summary.reports[0].outcome == DrainOutcome.EXHAUSTED
        assert summary.reports[0].records == 0
        assert summary.reports[1].outcome == DrainOutcome.DRAINED
        assert not summary.complete
        assert events[-1].event_type == AuditEventType.RUN_COMPLETED
        assert events[-1].metadata == {"total_records": 4, "windows": 2}

    @pytest.mark.asyncio
    async def test_total_never_negative_for_empty_windows(self, scripted_executor, base_time):
        executor = scripted_executor([])
        orchestrator = RetrievalOrchestrator(executor, _policy(retry_limit=1))
        r = DateRange(start=base_time, end=base_time + timedelta(hours=2))

        records = [rec async for rec in orchestrator.run(r)]

        assert records == []
        assert orchestrator.summary.total_records == 0
        assert orchestrator.summary.windows_exhausted == 4

    @pytest.mark.asyncio
    async def test_progress_events(self, scripted_executor, page, base_time):
        events = []
        executor = scripted_executor(per_window={i: [page(1, 1)] for i in range(3)})
        orchestrator = RetrievalOrchestrator(executor, _policy(), on_event=events.append)
        r = DateRange(start=base_time, end=base_time + timedelta(minutes=90))

        _ = [rec async for rec in orchestrator.run(r)]

        progress = [e.metadata for e in events if e.event_type == AuditEventType.PROGRESS]
        assert progress == [
            {"current": 1, "total": 3, "percent_complete": 33.33},
            {"current": 2, "total": 3, "percent_complete": 66.67},
            {"current": 3, "total": 3, "percent_complete": 100.0},
        ]

    @pytest.mark.asyncio
    async def test_empty_range(self, scripted_executor, base_time):
        executor = scripted_executor([])
        orchestrator = RetrievalOrchestrator(executor, _policy())
        r = DateRange(start=base_time, end=base_time)

        records = [rec async for rec in orchestrator.run(r)]

        assert records == []
        assert executor.calls == []
        assert orchestrator.summary.windows_planned == 0
        assert orchestrator.summary.complete

    @pytest.mark.asyncio
    async def test_early_stop_skips_remaining_windows(self, scripted_executor, page, base_time):
        executor = scripted_executor(per_window={i: [page(5, 5, offset=i * 5)] for i in range(4)})
        orchestrator = RetrievalOrchestrator(executor, _policy())
        r = DateRange(start=base_time, end=base_time + timedelta(hours=2))

        stream = orchestrator.run(r)
        taken = []
        async for rec in stream:
            taken.append(rec)
            if len(taken) == 7:
                break
        await stream.aclose()

        assert len(taken) == 7
        assert {c.window.index for c in executor.calls} == {0, 1}

    @pytest.mark.asyncio
    async def test_custom_session_ids(self, scripted_executor, page, base_time):
        ids = iter(["a", "b"])
        executor = scripted_executor(per_window={0: [page(1, 1)], 1: [page(1, 1)]})
        orchestrator = RetrievalOrchestrator(executor, _policy(), session_ids=lambda: next(ids))
        r = DateRange(start=base_time, end=base_time + timedelta(minutes=60))

        _ = [rec async for rec in orchestrator.run(r)]

        assert [c.session_id for c in executor.calls] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_summary_resets_between_runs(self, scripted_executor, page, base_time):
        executor = scripted_executor([page(2, 2), page(3, 3)])
        orchestrator = RetrievalOrchestrator(executor, _policy())
        r = DateRange(start=base_time, end=base_time + timedelta(minutes=30))

        _ = [rec async for rec in orchestrator.run(r)]
        assert orchestrator.summary.total_records == 2
        _ = [rec async for rec in orchestrator.run(r)]
        assert orchestrator.summary.total_records == 3
