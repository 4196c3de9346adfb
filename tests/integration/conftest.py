"""Shared fixtures for integration tests."""

import os

import pytest

# Skip all integration tests unless RUN_LAAKHAY_AUDITLOG_NETWORK_TESTS=1
pytestmark = pytest.mark.skipif(
    os.environ.get("RUN_LAAKHAY_AUDITLOG_NETWORK_TESTS") != "1",
    reason="Requires network access. Set RUN_LAAKHAY_AUDITLOG_NETWORK_TESTS=1 to run",
)


@pytest.fixture
def service_url() -> str:
    url = os.environ.get("AUDITLOG_BASE_URL")
    if not url:
        pytest.skip("AUDITLOG_BASE_URL not set")
    return url


@pytest.fixture
def auth_headers() -> dict[str, str] | None:
    token = os.environ.get("AUDITLOG_TOKEN")
    return {"Authorization": f"Bearer {token}"} if token else None
