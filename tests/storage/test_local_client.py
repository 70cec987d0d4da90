"""Unit tests for the in-memory key-value client."""

import threading

import pytest

from kvgraph.storage.local import LocalClient


def test_get_missing_key_returns_none(client):
    assert client.get("missing") is None
    assert not client.exists("missing")


def test_set_get_roundtrip(client):
    client.set("a", b"1")

    assert client.get("a") == b"1"
    assert client.exists("a")


def test_delete_reports_whether_key_existed(client):
    client.set("a", b"1")

    assert client.delete("a") is True
    assert client.delete("a") is False
    assert not client.exists("a")


def test_incr_starts_at_one_and_counts_up(client):
    assert client.incr("counter") == 1
    assert client.incr("counter") == 2
    assert client.get("counter") == b"2"


def test_incr_continues_from_seeded_value(client):
    client.set("counter", b"41")

    assert client.incr("counter") == 42


def test_incr_is_atomic_across_threads(client):
    """CRITICAL: Concurrent allocations never hand out the same value.

    Why: Entity ids come from this counter.
    """
    results: list[int] = []
    lock = threading.Lock()

    def allocate() -> None:
        for _ in range(200):
            value = client.incr("counter")
            with lock:
                results.append(value)

    threads = [threading.Thread(target=allocate) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(results) == len(set(results)) == 1600


def test_lists_keep_push_order(client):
    client.rpush("l", [b"c", b"a"])
    client.rpush("l", [b"b"])

    assert client.lrange("l") == [b"c", b"a", b"b"]
    assert client.lrange("l", 1, 1) == [b"a"]
    assert client.lrange("l", 0, -2) == [b"c", b"a"]


def test_pushing_nothing_creates_no_key(client):
    assert client.rpush("l", []) == 0
    assert client.sadd("s", []) == 0

    assert not client.exists("l")
    assert not client.exists("s")


def test_sets_drop_duplicates(client):
    assert client.sadd("s", [b"a", b"b"]) == 2
    assert client.sadd("s", [b"a", b"c"]) == 1

    assert client.smembers("s") == {b"a", b"b", b"c"}


def test_reads_return_copies(client):
    client.rpush("l", [b"a"])
    client.lrange("l").append(b"b")

    assert client.lrange("l") == [b"a"]


def test_wrong_kind_raises(client):
    client.set("a", b"1")

    with pytest.raises(TypeError, match="holds bytes"):
        client.lrange("a")


def test_snapshot_restore_roundtrip(client):
    client.set("a", b"1")
    client.rpush("l", [b"x"])
    client.sadd("s", [b"y"])
    data = client.snapshot()

    restored = LocalClient()
    restored.restore(data)

    assert restored.get("a") == b"1"
    assert restored.lrange("l") == [b"x"]
    assert restored.smembers("s") == {b"y"}
    assert sorted(restored.keys()) == ["a", "l", "s"]
