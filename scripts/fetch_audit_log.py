#!/usr/bin/env python3
"""Fetch an audit log range and write it as JSON lines to stdout.

Usage:
    # Last 24 hours, 30 minute windows
    python scripts/fetch_audit_log.py --base-url https://audit.example.com \\
        --start 2024-01-01T00:00:00Z --end 2024-01-02T00:00:00Z

    # Decode payloads, smaller windows for busy tenants
    python scripts/fetch_audit_log.py --base-url ... --interval-minutes 10 --decode

The bearer token is read from --token or the AUDITLOG_TOKEN environment
variable. Progress and diagnostics go to stderr.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from datetime import datetime

from laakhay.auditlog import (
    AuditEvent,
    AuditEventType,
    AuditLogAPI,
    JSONLinesSink,
    RESTQueryExecutor,
    RetrievalRequest,
)
from laakhay.auditlog.core import (
    DEFAULT_INTERVAL_MINUTES,
    DEFAULT_RESULT_SIZE,
    DEFAULT_RETRY_LIMIT,
    DEFAULT_SESSION_SIZE,
)
from laakhay.auditlog.core.constants import DEFAULT_QUERY_PATH

logger = logging.getLogger("fetch_audit_log")


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Retrieve an audit log range as JSON lines")
    p.add_argument("--base-url", required=True, help="Query service base URL")
    p.add_argument("--path", default=DEFAULT_QUERY_PATH, help="Query endpoint path")
    p.add_argument("--token", default=os.environ.get("AUDITLOG_TOKEN"), help="Bearer token")
    p.add_argument("--start", type=datetime.fromisoformat, default=None, help="ISO start date")
    p.add_argument("--end", type=datetime.fromisoformat, default=None, help="ISO end date")
    p.add_argument("--interval-minutes", type=int, default=DEFAULT_INTERVAL_MINUTES)
    p.add_argument("--result-size", type=int, default=DEFAULT_RESULT_SIZE)
    p.add_argument("--session-size", type=int, default=DEFAULT_SESSION_SIZE)
    p.add_argument("--retry-limit", type=int, default=DEFAULT_RETRY_LIMIT)
    p.add_argument("--decode", action="store_true", help="Emit decoded payloads")
    p.add_argument("-v", "--verbose", action="store_true")
    return p.parse_args()


def report(event: AuditEvent) -> None:
    if event.event_type == AuditEventType.PROGRESS:
        meta = event.metadata
        logger.info(
            "Window %d/%d (%.2f%%)", meta["current"], meta["total"], meta["percent_complete"]
        )
    elif event.event_type == AuditEventType.RETRY_EXHAUSTED:
        logger.warning(
            "Window %d gave up after %d empty pages",
            event.window_index,
            event.metadata["retries"],
        )
    elif event.event_type == AuditEventType.CAPACITY_EXCEEDED:
        logger.warning(
            "Window %d declared %d records, above the %d session cap; use a smaller interval",
            event.window_index,
            event.metadata["declared_total"],
            event.metadata["session_limit"],
        )


async def main() -> int:
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    request = RetrievalRequest(
        start_date=args.start,
        end_date=args.end,
        interval_minutes=args.interval_minutes,
        result_size=args.result_size,
        session_size=args.session_size,
        retry_limit=args.retry_limit,
    )
    headers = {"Authorization": f"Bearer {args.token}"} if args.token else None
    executor = RESTQueryExecutor(args.base_url, path=args.path, headers=headers)

    async with AuditLogAPI(executor, on_event=report) as api:
        summary = await api.collect(request, JSONLinesSink(sys.stdout), decode=args.decode)

    logger.info(
        "Retrieved %d records across %d windows (%d exhausted, %d over capacity, %d undecodable)",
        summary.total_records,
        summary.windows_processed,
        summary.windows_exhausted,
        summary.windows_over_capacity,
        api.decoder.skipped,
    )
    return 0 if summary.complete else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
