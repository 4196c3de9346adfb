"""Time-windowed, session-paged retrieval.

This module splits a date range into windows that each fit under the
service's per-session record cap and drains every window through repeated
paged queries bound to one session id.

Architecture:
    The windowing layer consists of:
    - definitions.py: Policy, drain state and summary structures
    - planners.py: Window planning (tiles the date range)
    - drainer.py: Session drain (pages one window to its declared total)
    - telemetry.py: Structured logging and observation delivery
"""

from __future__ import annotations

from .definitions import (
    DrainState,
    EventCallback,
    RetrievalPolicy,
    RetrievalSummary,
    SessionIdFactory,
    WindowReport,
)
from .drainer import SessionDrainer
from .planners import WindowPlanner

__all__ = [
    "DrainState",
    "EventCallback",
    "RetrievalPolicy",
    "RetrievalSummary",
    "SessionDrainer",
    "SessionIdFactory",
    "WindowPlanner",
    "WindowReport",
]
