"""Service limits and caller-facing defaults."""

from __future__ import annotations

from datetime import timedelta

# Hard limits imposed by the remote query service
MAX_RESULT_SIZE = 5000
MAX_SESSION_SIZE = 50000

# Oldest point the service retains
MAX_LOOKBACK = timedelta(days=90)

DEFAULT_INTERVAL_MINUTES = 30
DEFAULT_RESULT_SIZE = 100
DEFAULT_SESSION_SIZE = MAX_SESSION_SIZE
DEFAULT_RETRY_LIMIT = 3
DEFAULT_QUERY_TIMEOUT = 120.0

DEFAULT_QUERY_PATH = "/auditlog/query"
