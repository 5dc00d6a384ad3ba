"""Shared fixtures for the Pastebin Lite test suite."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from pastebin.clock import FixedClock
from pastebin.main import create_app
from pastebin.settings import Settings
from pastebin.store import PasteStore


@pytest.fixture()
def t0() -> int:
    """Reference instant (2023-11-14T22:13:20Z) in epoch milliseconds."""
    return 1_700_000_000_000


@pytest.fixture()
def clock(t0: int) -> FixedClock:
    """A clock pinned at `t0`; tests move it by assigning `instant_ms`."""
    return FixedClock(t0)


@pytest.fixture()
def store(clock: FixedClock) -> PasteStore:
    return PasteStore(clock=clock)


@pytest.fixture()
def client() -> TestClient:
    """Client for an app running in test mode with an empty store."""
    app = create_app(settings=Settings(test_mode=True), store=PasteStore())
    return TestClient(app)


@pytest.fixture()
def live_client() -> TestClient:
    """Client for an app outside test mode, driven by wall-clock time."""
    app = create_app(settings=Settings(test_mode=False), store=PasteStore())
    return TestClient(app)
