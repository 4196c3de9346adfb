"""Downstream sinks for retrieved records."""

from .base import StreamSink
from .in_memory import InMemorySink
from .jsonl import JSONLinesSink

__all__ = ["InMemorySink", "JSONLinesSink", "StreamSink"]
