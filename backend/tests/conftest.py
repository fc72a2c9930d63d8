"""Shared test configuration, pytest markers and a fresh record store per test."""

import pytest

from api.dependencies import get_record_store
from api.router import limiter
from main import app
from services.record_store import InMemoryRecordStore


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "api: exercises the FastAPI routes through TestClient"
    )
    config.addinivalue_line(
        "markers", "fuzz: range checks over extreme snapshots"
    )


@pytest.fixture(autouse=True)
def _no_rate_limits():
    limiter.enabled = False
    yield
    limiter.enabled = True


@pytest.fixture
def store():
    """An empty in-memory store wired into the app for this test only."""
    fresh = InMemoryRecordStore()
    app.dependency_overrides[get_record_store] = lambda: fresh
    yield fresh
    app.dependency_overrides.pop(get_record_store, None)
