"""
Shared pytest fixtures for the cache service tests.
"""

import pytest

from service_cache.app.producers import DataSource
from service_cache.app.store.client import KeyValueClient
from service_cache.app.store.memory import InMemoryStore


class FakeClock:
    """Manually advanced time source for expiry tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    """Simulated clock."""
    return FakeClock()


@pytest.fixture
def memory_store(clock):
    """In-memory store driven by the simulated clock."""
    return InMemoryStore(clock=clock)


@pytest.fixture
def kv_client(memory_store):
    """Key-value client over the in-memory store."""
    return KeyValueClient(memory_store)


@pytest.fixture
def data_source():
    """Counting data producer."""
    return DataSource()
