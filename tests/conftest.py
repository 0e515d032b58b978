# Area: Test Fixtures
"""Shared fixtures: a controllable local clock and in-memory adapters."""

import pytest

from periselene._store.memory import InMemoryBroadcastChannel, InMemoryStateStore

DIRECTOR_EPOCH_MS = 1_767_225_600_000  # 2026-01-01T00:00:00Z


class FakeClock:
    """Local clock a test can move by hand."""

    def __init__(self, now: int = DIRECTOR_EPOCH_MS):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return InMemoryStateStore()


@pytest.fixture
def channel():
    return InMemoryBroadcastChannel()
