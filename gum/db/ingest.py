"""Fan-in channel from mapping producers to the single store writer.

Any number of handler threads send ``Mapping`` records; one drain thread
receives them in FIFO order and applies them to the ``MappingStore``. The
queue is unbounded so bulk initial scans never wait on the consumer.
"""
from __future__ import annotations

import logging
import queue
import threading
from typing import Optional

from gum.models.mapping import Mapping

from .mapping_store import MappingStore

logger = logging.getLogger(__name__)

_STOP = object()


class MappingSender:
    """Write-only handle given to handlers. Sends never block."""

    def __init__(self, channel: "MappingChannel") -> None:
        self._channel = channel

    def send(self, mapping: Mapping) -> None:
        self._channel.put(mapping)


class MappingChannel:
    def __init__(self) -> None:
        self._queue: "queue.SimpleQueue[object]" = queue.SimpleQueue()
        self._cond = threading.Condition()
        self._sent = 0
        self._applied = 0
        self._closed = False

    def sender(self) -> MappingSender:
        return MappingSender(self)

    def put(self, mapping: Mapping) -> None:
        if not isinstance(mapping, Mapping):
            raise TypeError(f"expected Mapping, got {type(mapping).__name__}")
        with self._cond:
            self._sent += 1
        self._queue.put(mapping)

    def receive(self, timeout: Optional[float] = None) -> Optional[Mapping]:
        """Block for the next record; ``None`` once the channel is closed.

        Raises ``queue.Empty`` when ``timeout`` elapses first.
        """
        item = self._queue.get(timeout=timeout)
        if item is _STOP:
            return None
        return item  # type: ignore[return-value]

    def mark_applied(self) -> None:
        with self._cond:
            self._applied += 1
            if self._applied >= self._sent:
                self._cond.notify_all()

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """Wait until every record sent so far has been applied."""
        with self._cond:
            return self._cond.wait_for(lambda: self._applied >= self._sent, timeout=timeout)

    def close(self) -> None:
        """Stop the drain loop after the records already queued."""
        with self._cond:
            if self._closed:
                return
            self._closed = True
        self._queue.put(_STOP)

    @property
    def closed(self) -> bool:
        return self._closed


def drain(channel: MappingChannel, store: MappingStore) -> None:
    """Apply records from ``channel`` to ``store`` until the channel closes."""
    while True:
        mapping = channel.receive()
        if mapping is None:
            logger.debug("Mapping channel closed; drain loop exiting")
            return
        try:
            store.upsert(mapping)
        except Exception:
            logger.exception("Failed to apply mapping %s", mapping)
        finally:
            channel.mark_applied()
