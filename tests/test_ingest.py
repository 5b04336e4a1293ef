import queue
import threading

import pytest

from gum.db.ingest import MappingChannel, drain
from gum.db.mapping_store import MappingStore
from gum.models.mapping import Mapping


def test_channel_preserves_order():
    channel = MappingChannel()
    sender = channel.sender()
    for i in range(5):
        sender.send(Mapping("/s", "/p%d" % i))
    got = [channel.receive(timeout=1).permalink for _ in range(5)]
    assert got == ["/p0", "/p1", "/p2", "/p3", "/p4"]


def test_receive_times_out_when_empty():
    channel = MappingChannel()
    with pytest.raises(queue.Empty):
        channel.receive(timeout=0.01)


def test_sender_rejects_non_mappings():
    channel = MappingChannel()
    with pytest.raises(TypeError):
        channel.sender().send(("/s", "/p"))


def test_drain_applies_until_closed():
    channel = MappingChannel()
    store = MappingStore()
    t = threading.Thread(target=drain, args=(channel, store), daemon=True)
    t.start()

    sender = channel.sender()
    sender.send(Mapping("/x", "/a"))
    sender.send(Mapping("/x", "/b"))
    sender.send(Mapping("/y", "/c"))
    assert channel.wait_idle(timeout=2)
    assert store.snapshot() == {"/x": "/b", "/y": "/c"}

    channel.close()
    t.join(2)
    assert not t.is_alive()
    assert channel.closed


def test_many_producers_all_delivered():
    channel = MappingChannel()
    store = MappingStore()
    threading.Thread(target=drain, args=(channel, store), daemon=True).start()

    def produce(n):
        sender = channel.sender()
        for i in range(200):
            sender.send(Mapping("/p%d/%d" % (n, i), "/dest"))

    producers = [threading.Thread(target=produce, args=(n,)) for n in range(5)]
    for t in producers:
        t.start()
    for t in producers:
        t.join()
    assert channel.wait_idle(timeout=5)
    assert len(store) == 1000
    channel.close()
