"""Unit tests for the AuditLogAPI facade."""

from __future__ import annotations

import io
import json
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from laakhay.auditlog.api import AuditLogAPI, RetrievalRequest
from laakhay.auditlog.core import AuditEventType
from laakhay.auditlog.io.rest import HTTPClient, RESTQueryExecutor
from laakhay.auditlog.models import AuditRecord, PageResult
from laakhay.auditlog.sinks import InMemorySink, JSONLinesSink


@pytest.fixture
def request_1h(base_time):
    return RetrievalRequest(
        start_date=base_time,
        end_date=base_time + timedelta(hours=1),
        query_timeout=None,
    )


@pytest.fixture
def now(base_time):
    return base_time + timedelta(days=1)


class TestAuditLogAPI:
    """Test AuditLogAPI fetch and collect."""

    @pytest.mark.asyncio
    async def test_fetch_raw_records(self, scripted_executor, page, request_1h, now):
        executor = scripted_executor(per_window={0: [page(2, 2)], 1: [page(1, 1, offset=2)]})

        async with AuditLogAPI(executor) as api:
            records = [r async for r in api.fetch(request_1h, now=now)]

        assert all(isinstance(r, AuditRecord) for r in records)
        assert len(records) == 3
        assert api.last_summary.total_records == 3
        assert executor.closed

    @pytest.mark.asyncio
    async def test_fetch_decoded_skips_malformed(self, scripted_executor, request_1h, now):
        bad = AuditRecord(audit_data='{"Id": "x", "Wor', identity="bad", result_count=2)
        good = AuditRecord(audit_data='{"Id": "y"}', identity="good", result_count=2)
        executor = scripted_executor(per_window={0: [PageResult.from_records([bad, good])]})
        events = []

        async with AuditLogAPI(executor, on_event=events.append) as api:
            payloads = [p async for p in api.fetch(request_1h, decode=True, now=now)]

        assert payloads == [{"Id": "y"}]
        assert api.decoder.skipped == 1
        # The drainer still counts the malformed record as retrieved
        assert api.last_summary.total_records == 2
        assert AuditEventType.DECODE_FAILED in {e.event_type for e in events}

    @pytest.mark.asyncio
    async def test_page_size_hint_uses_clamped_result_size(
        self, scripted_executor, page, base_time, now
    ):
        executor = scripted_executor([page(1, 1)])
        request = RetrievalRequest(
            start_date=base_time,
            end_date=base_time + timedelta(minutes=30),
            result_size=100000,
        )

        async with AuditLogAPI(executor) as api:
            _ = [r async for r in api.fetch(request, now=now)]

        assert executor.calls[0].page_size == 5000

    @pytest.mark.asyncio
    async def test_collect_into_sink(self, scripted_executor, page, request_1h, now):
        executor = scripted_executor(per_window={0: [page(2, 2)], 1: [page(2, 2, offset=2)]})
        sink = InMemorySink()

        async with AuditLogAPI(executor) as api:
            summary = await api.collect(request_1h, sink, now=now)

        assert summary.total_records == 4
        received = [item async for item in sink.stream()]
        assert [r.identity for r in received] == ["evt-0", "evt-1", "evt-2", "evt-3"]

    @pytest.mark.asyncio
    async def test_collect_decoded_to_jsonl(self, scripted_executor, page, request_1h, now):
        executor = scripted_executor(per_window={0: [page(2, 2)]})
        buffer = io.StringIO()

        async with AuditLogAPI(executor) as api:
            await api.collect(request_1h, JSONLinesSink(buffer), decode=True, now=now)

        lines = [json.loads(line) for line in buffer.getvalue().splitlines()]
        assert [line["Id"] for line in lines] == ["evt-0", "evt-1"]

    @pytest.mark.asyncio
    async def test_executor_closed_on_early_exit(self, scripted_executor, page, request_1h, now):
        executor = scripted_executor(per_window={0: [page(5, 5)], 1: [page(5, 5)]})

        async with AuditLogAPI(executor) as api:
            stream = api.fetch(request_1h, now=now)
            async for _ in stream:
                break
            await stream.aclose()

        assert executor.closed
        assert len(executor.calls) == 1

    @pytest.mark.asyncio
    async def test_fetch_after_close_rejected(self, scripted_executor, request_1h):
        api = AuditLogAPI(scripted_executor([]))
        await api.close()

        with pytest.raises(RuntimeError, match="closed"):
            async for _ in api.fetch(request_1h):
                pass

    def test_last_summary_none_before_fetch(self, scripted_executor):
        assert AuditLogAPI(scripted_executor([])).last_summary is None

    @pytest.mark.asyncio
    async def test_null_payload_from_rest_is_skipped_not_fatal(self, base_time, now):
        http = MagicMock(spec=HTTPClient)
        http.post = AsyncMock(
            return_value=[
                {"AuditData": '{"Id": "a"}', "Identity": "a", "ResultCount": 2},
                {"AuditData": None, "Identity": "b", "ResultCount": 2},
            ]
        )
        http.close = AsyncMock()
        request = RetrievalRequest(
            start_date=base_time,
            end_date=base_time + timedelta(minutes=30),
            query_timeout=None,
        )

        async with AuditLogAPI(RESTQueryExecutor("https://audit.example.com", http=http)) as api:
            payloads = [p async for p in api.fetch(request, decode=True, now=now)]

        assert payloads == [{"Id": "a"}]
        assert api.decoder.skipped == 1
        assert api.last_summary.total_records == 2
        assert api.last_summary.complete

    @pytest.mark.asyncio
    async def test_null_payload_passes_through_raw(self, scripted_executor, request_1h, now):
        raw = PageResult.from_records([{"Identity": "no-payload", "ResultCount": 1}])
        executor = scripted_executor(per_window={0: [raw]})

        async with AuditLogAPI(executor) as api:
            records = [r async for r in api.fetch(request_1h, now=now)]

        assert [(r.identity, r.audit_data) for r in records] == [("no-payload", None)]

    @pytest.mark.asyncio
    async def test_collect_closes_stream_when_sink_fails(
        self, scripted_executor, page, request_1h, now, monkeypatch
    ):
        executor = scripted_executor(per_window={0: [page(3, 3)], 1: [page(3, 3)]})
        sink = AsyncMock()
        sink.publish.side_effect = RuntimeError("disk full")
        finalized = []

        async with AuditLogAPI(executor) as api:
            fetch = api.fetch

            async def tracked_fetch(*args, **kwargs):
                try:
                    async for item in fetch(*args, **kwargs):
                        yield item
                finally:
                    finalized.append(True)

            monkeypatch.setattr(api, "fetch", tracked_fetch)
            with pytest.raises(RuntimeError, match="disk full"):
                await api.collect(request_1h, sink, now=now)

            assert finalized == [True]
            sink.close.assert_awaited_once()

        assert len(executor.calls) == 1
