"""Shared fixtures: an in-memory store driven by a hand-cranked clock."""

import pytest

from memcached_cache.models import ConnectionParams, MemcachedConfig
from memcached_cache.storage.memory_store_client import MemoryStore, MemoryStoreClient


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return MemoryStore(clock=clock)


@pytest.fixture
def config():
    return MemcachedConfig(
        connections=[ConnectionParams(host="cache-1"), ConnectionParams(host="cache-2", port=11212)]
    )


@pytest.fixture
def memory_factory(store):
    return MemoryStoreClient.factory(store)
