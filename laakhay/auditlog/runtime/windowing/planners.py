"""Window planning logic for splitting a date range into query windows.

This module provides the WindowPlanner class that tiles a DateRange with
contiguous, non-overlapping windows of a fixed duration so that each window
can be drained under a single query session.
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import timedelta

from ...models import DateRange, Window
from .telemetry import log_window_plan


class WindowPlanner:
    """Plans fixed-duration windows over a date range.

    Window ``i`` starts at ``range.start + i * interval`` and ends at the
    earlier of ``start + interval`` and ``range.end``; only the final window
    can be shorter than the interval.
    """

    def __init__(self, interval: timedelta) -> None:
        """Initialize window planner.

        Args:
            interval: Duration of each window (must be positive)

        Raises:
            ValueError: If interval is not positive
        """
        if interval <= timedelta(0):
            raise ValueError("interval must be a positive duration")
        self._interval = interval

    @property
    def interval(self) -> timedelta:
        return self._interval

    def count(self, date_range: DateRange) -> int:
        """Number of windows ``plan`` yields for ``date_range``."""
        whole, rest = divmod(date_range.duration, self._interval)
        return whole + (1 if rest else 0)

    def plan(self, date_range: DateRange) -> Iterator[Window]:
        """Plan windows for a range.

        Each call returns a fresh lazy iterator, so a plan can be restarted
        by calling ``plan`` again.

        Args:
            date_range: Range to tile

        Returns:
            Iterator of windows in chronological order
        """
        return self._iter_windows(date_range)

    def _iter_windows(self, date_range: DateRange) -> Iterator[Window]:
        log_window_plan(
            total_windows=self.count(date_range),
            interval_seconds=int(self._interval.total_seconds()),
            start_time=date_range.start,
            end_time=date_range.end,
        )

        index = 0
        current_start = date_range.start
        while current_start < date_range.end:
            window_end = min(current_start + self._interval, date_range.end)
            yield Window(start=current_start, end=window_end, index=index)
            index += 1
            # Recompute from the origin so no drift accumulates
            current_start = date_range.start + index * self._interval
