"""Tests for the in-process store and its client."""

import threading

import pytest

from memcached_cache.exceptions import StoreOperationError
from memcached_cache.models import ConnectionParams, MemcachedOptions
from memcached_cache.storage import MemoryStore, MemoryStoreClient


def test_set_get_and_expiry(store, clock):
    assert store.set("k", 5, b"v") is True
    assert store.get("k") == b"v"

    clock.advance(4.5)
    assert store.get("k") == b"v"

    clock.advance(0.5)
    assert store.get("k") is None
    assert "k" not in store


def test_zero_ttl_never_expires(store, clock):
    store.set("forever", 0, b"v")
    clock.advance(10 ** 9)
    assert store.get("forever") == b"v"


def test_add_is_insert_if_absent(store, clock):
    assert store.add("lock", 2, b"lock") is True
    assert store.add("lock", 2, b"other") is False
    assert store.get("lock") == b"lock"

    clock.advance(2)
    assert store.add("lock", 2, b"other") is True
    assert store.get("lock") == b"other"


def test_delete_reports_whether_key_existed(store, clock):
    store.set("k", 1, b"v")
    assert store.delete("k") is True
    assert store.delete("k") is False

    store.set("stale", 1, b"v")
    clock.advance(1)
    assert store.delete("stale") is False


def test_evict_expired_and_len(store, clock):
    store.set("a", 1, b"1")
    store.set("b", 5, b"2")
    store.set("c", 0, b"3")
    assert len(store) == 3

    clock.advance(1)
    assert len(store) == 2
    assert store.evict_expired() == 1
    assert store.evict_expired() == 0

    store.clear()
    assert len(store) == 0


def test_concurrent_add_has_single_winner():
    store = MemoryStore()
    barrier = threading.Barrier(16)
    results = []
    results_lock = threading.Lock()

    def contend():
        barrier.wait()
        won = store.add("contended", 30, b"lock")
        with results_lock:
            results.append(won)

    threads = [threading.Thread(target=contend) for _ in range(16)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert results.count(True) == 1
    assert results.count(False) == 15


def test_client_delegates_to_store(store):
    client = MemoryStoreClient(store)
    assert client.store is store
    assert client.set("k", 0, b"v") is True
    assert client.get("k") == b"v"
    assert client.insert_if_absent("k", 0, b"x") is False
    assert client.insert_if_absent("n", 0, b"x") is True
    assert client.delete("k") is True
    assert client.get("k") is None


def test_closed_client_raises_but_keeps_data(store):
    client = MemoryStoreClient(store)
    client.set("k", 0, b"v")
    client.close()

    assert client.is_closed
    with pytest.raises(StoreOperationError) as exc_info:
        client.get("k")
    assert exc_info.value.operation == "get"
    assert exc_info.value.key == "k"
    with pytest.raises(StoreOperationError):
        client.insert_if_absent("k", 0, b"v")

    assert store.get("k") == b"v"


def test_factory_clients_share_one_store(store):
    factory = MemoryStoreClient.factory(store)
    first = factory([ConnectionParams(host="a")], MemcachedOptions())
    second = factory([ConnectionParams(host="b")], MemcachedOptions())

    assert first is not second
    first.set("shared", 0, b"v")
    assert second.get("shared") == b"v"


def test_default_client_has_private_store():
    assert MemoryStoreClient().store is not MemoryStoreClient().store
