import logging
import threading

import pytest

from gum.db.mapping_store import ADDED, DELETED, UNCHANGED, UPDATED, MappingStore
from gum.models.mapping import Mapping


def test_mapping_requires_leading_slash():
    with pytest.raises(ValueError):
        Mapping(short_path="s", permalink="/p")
    assert Mapping(short_path="/s").is_delete


def test_upsert_add_overwrite_delete():
    store = MappingStore()
    assert store.upsert(Mapping("/x", "/a")) == ADDED
    assert store.lookup("/x") == "/a"
    assert store.upsert(Mapping("/x", "/b")) == UPDATED
    assert store.lookup("/x") == "/b"
    assert store.upsert(Mapping("/x", "")) == DELETED
    assert store.lookup("/x") is None
    assert "/x" not in store


def test_delete_missing_key_is_noop():
    store = MappingStore()
    assert store.upsert(Mapping("/missing", "")) == UNCHANGED
    assert len(store) == 0


def test_same_record_twice_is_idempotent():
    store = MappingStore()
    m = Mapping("/s", "/p")
    store.upsert(m)
    before = store.snapshot()
    assert store.upsert(m) == UNCHANGED
    assert store.snapshot() == before == {"/s": "/p"}


def test_final_value_is_last_write():
    store = MappingStore()
    records = [
        Mapping("/a", "/1"),
        Mapping("/b", "/2"),
        Mapping("/a", "/3"),
        Mapping("/b", ""),
        Mapping("/c", "/4"),
        Mapping("/c", ""),
        Mapping("/c", "/5"),
    ]
    for m in records:
        store.upsert(m)
    assert store.snapshot() == {"/a": "/3", "/c": "/5"}


def test_overwrite_logs_warning(caplog):
    store = MappingStore()
    store.upsert(Mapping("/s", "/old"))
    with caplog.at_level(logging.WARNING, logger="gum.db.mapping_store"):
        store.upsert(Mapping("/s", "/new"))
    assert any("/old" in r.getMessage() and "/new" in r.getMessage() for r in caplog.records)


def test_concurrent_readers_never_see_partial_values():
    store = MappingStore()
    valid = {"/p%d" % i for i in range(50)}
    stop = threading.Event()
    bad = []

    def reader():
        while not stop.is_set():
            v = store.lookup("/k")
            if v is not None and v not in valid:
                bad.append(v)

    readers = [threading.Thread(target=reader) for _ in range(4)]
    for t in readers:
        t.start()
    for i in range(2000):
        store.upsert(Mapping("/k", "/p%d" % (i % 50)))
        if i % 7 == 0:
            store.upsert(Mapping("/k", ""))
    stop.set()
    for t in readers:
        t.join(5)
    assert bad == []
