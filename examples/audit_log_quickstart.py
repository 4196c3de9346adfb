#!/usr/bin/env python3
"""Retrieve the last few hours of an audit log and print a per-window summary."""

from __future__ import annotations

import argparse
import asyncio
import os
from datetime import UTC, datetime, timedelta

from laakhay.auditlog import AuditLogAPI, InMemorySink, RESTQueryExecutor, RetrievalRequest


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Audit log retrieval quickstart")
    p.add_argument("base_url")
    p.add_argument("hours", nargs="?", type=int, default=2)
    p.add_argument("interval", nargs="?", type=int, default=30)
    return p.parse_args()


async def main() -> None:
    args = parse_args()
    token = os.environ.get("AUDITLOG_TOKEN")
    headers = {"Authorization": f"Bearer {token}"} if token else None

    end = datetime.now(UTC)
    request = RetrievalRequest(
        start_date=end - timedelta(hours=args.hours),
        end_date=end,
        interval_minutes=args.interval,
    )

    sink = InMemorySink()
    async with AuditLogAPI(RESTQueryExecutor(args.base_url, headers=headers)) as api:
        summary = await api.collect(request, sink)

    print("=" * 72)
    print(f"Records    : {summary.total_records}")
    print(f"Windows    : {summary.windows_processed}/{summary.windows_planned}")
    print(f"Complete   : {summary.complete}")
    print("=" * 72)
    print(
        f"{'Window start':27} | {'Outcome':9} | {'Records':>8} | "
        f"{'Declared':>8} | {'Retries':>7}"
    )
    print("-" * 72)
    for r in summary.reports:
        print(
            f"{r.window.start.isoformat():27} | {r.outcome.value:9} | {r.records:>8} | "
            f"{r.interval_total:>8} | {r.retries:>7}"
        )
    print("=" * 72)


if __name__ == "__main__":
    asyncio.run(main())
