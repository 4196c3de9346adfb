"""Runtime orchestration components."""

from .decoder import RecordDecoder
from .orchestrator import RetrievalOrchestrator
from .windowing import (
    DrainState,
    RetrievalPolicy,
    RetrievalSummary,
    SessionDrainer,
    SessionIdFactory,
    WindowPlanner,
    WindowReport,
)

__all__ = [
    "DrainState",
    "RecordDecoder",
    "RetrievalOrchestrator",
    "RetrievalPolicy",
    "RetrievalSummary",
    "SessionDrainer",
    "SessionIdFactory",
    "WindowPlanner",
    "WindowReport",
]
