"""End-to-end flow: cache and lock sharing one in-memory memcached."""

import pytest

from memcached_cache import (
    FileConnectionResolver,
    InvalidStateError,
    LockAcquireTimeoutError,
    MemcachedCache,
    MemcachedLock,
    MemoryStoreClient,
    load_config,
)
from memcached_cache.locking import lock_acquirer


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "memcached:\n"
        "  connections:\n"
        "    - host: cache-1\n"
        "  options:\n"
        "    retry_timeout: 125\n"
    )
    return path


def test_store_retrieve_expire(config_file, memory_factory, clock):
    cache = MemcachedCache(load_config(config_file), client_factory=memory_factory)
    cache.open("req-1")

    cache.store("req-1", "k", "v", 5000)
    assert cache.retrieve("req-1", "k") == "v"

    clock.advance(6)
    assert cache.retrieve("req-1", "k") is None

    cache.close("req-1")
    with pytest.raises(InvalidStateError):
        cache.retrieve("req-1", "k")


def test_lock_guards_cache_update(config_file, memory_factory, clock, monkeypatch):
    config = load_config(config_file)
    cache = MemcachedCache(config, client_factory=memory_factory)
    worker_a = MemcachedLock(config, client_factory=memory_factory)
    worker_b = MemcachedLock(config, client_factory=memory_factory)
    for component in (cache, worker_a, worker_b):
        component.open("boot")

    sleeps = []
    monkeypatch.setattr(lock_acquirer.time, "sleep", sleeps.append)

    with worker_a.lock("req-a", "lock:counter", ttl=10_000, timeout=0):
        with pytest.raises(LockAcquireTimeoutError):
            worker_b.acquire_lock("req-b", "lock:counter", 10_000, 0)
        cache.store("req-a", "counter", 1, 0)

    with worker_b.lock("req-b", "lock:counter", ttl=10_000, timeout=0):
        current = int(cache.retrieve("req-b", "counter"))
        cache.store("req-b", "counter", current + 1, 0)

    assert cache.retrieve("req-b", "counter") == "2"
    assert sleeps == []


def test_abandoned_lock_expires(config_file, memory_factory, clock):
    config = load_config(config_file)
    crashed, survivor = (MemcachedLock(config, client_factory=memory_factory) for _ in range(2))
    crashed.open()
    survivor.open()

    assert crashed.try_acquire_lock("req-1", "job", 3_000)
    crashed.close()

    assert not survivor.try_acquire_lock("req-2", "job", 3_000)
    clock.advance(3)
    assert survivor.try_acquire_lock("req-2", "job", 3_000)


def test_file_resolved_endpoints(tmp_path, store):
    nodes = tmp_path / "nodes.txt"
    nodes.write_text("cache-1:11211\ncache-2:11211\n")
    seen = []

    def factory(connections, options):
        seen.append([c.address for c in connections])
        return MemoryStoreClient(store)

    cache = MemcachedCache(connection_resolver=FileConnectionResolver(nodes), client_factory=factory)
    cache.open("req-1")
    cache.store("req-1", "k", {"a": 1}, 0)

    assert seen == [["cache-1:11211", "cache-2:11211"]]
    assert cache.retrieve("req-1", "k") == '{"a":1}'
