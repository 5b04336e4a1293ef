"""Directory watching on top of watchdog.

Watchdog delivers events on its observer thread; ``DirectoryWatcher`` turns
them into ``WatchEvent`` values and queues them so a consumer thread can
iterate them as a plain, blocking sequence via ``events()``.
"""
from __future__ import annotations

import enum
import logging
import os
import queue
import threading
from dataclasses import dataclass
from typing import Dict, Iterator, List

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

logger = logging.getLogger(__name__)


class WatchKind(enum.Enum):
    CREATE = "create"
    WRITE = "write"
    REMOVE = "remove"
    RENAME = "rename"


@dataclass(frozen=True)
class WatchEvent:
    path: str
    kind: WatchKind


_STOP = object()


def to_watch_events(event: FileSystemEvent) -> List[WatchEvent]:
    """Convert a watchdog event into the events gum acts on.

    Directory modifications are dropped: on most platforms they only signal
    that an entry inside the directory changed, and that entry gets its own
    event. A move becomes a RENAME of the source and a CREATE of the
    destination, so a document renamed into place is scanned again.
    """
    kind = event.event_type
    src = os.fsdecode(event.src_path) if event.src_path else ""
    if kind == EVENT_TYPE_CREATED:
        events = [WatchEvent(src, WatchKind.CREATE)]
    elif kind == EVENT_TYPE_MODIFIED:
        events = [] if event.is_directory else [WatchEvent(src, WatchKind.WRITE)]
    elif kind == EVENT_TYPE_DELETED:
        events = [WatchEvent(src, WatchKind.REMOVE)]
    elif kind == EVENT_TYPE_MOVED:
        dest = os.fsdecode(event.dest_path) if event.dest_path else ""
        events = [WatchEvent(src, WatchKind.RENAME), WatchEvent(dest, WatchKind.CREATE)]
    else:
        events = []
    return [ev for ev in events if ev.path]


class _QueueingHandler(FileSystemEventHandler):
    def __init__(self, events: "queue.SimpleQueue[object]") -> None:
        self._events = events

    def on_any_event(self, event: FileSystemEvent) -> None:
        for ev in to_watch_events(event):
            self._events.put(ev)


class DirectoryWatcher:
    """Non-recursive watches on an explicit set of directories."""

    def __init__(self) -> None:
        self._events: "queue.SimpleQueue[object]" = queue.SimpleQueue()
        self._handler = _QueueingHandler(self._events)
        self._observer = Observer()
        self._watches: Dict[str, object] = {}
        self._lock = threading.Lock()
        self._started = False
        self._stopped = False

    def start(self) -> None:
        with self._lock:
            if self._started or self._stopped:
                return
            self._observer.start()
            self._started = True

    def add(self, directory: str) -> bool:
        """Watch ``directory``. Returns False if it was already watched or the
        watcher has been stopped.

        Raises ``OSError`` when the watch cannot be created.
        """
        key = os.path.abspath(directory)
        with self._lock:
            if self._stopped or key in self._watches:
                return False
            self._watches[key] = self._observer.schedule(self._handler, key, recursive=False)
        logger.debug("Watching %s", key)
        return True

    def watched(self) -> list:
        with self._lock:
            return sorted(self._watches)

    def events(self) -> Iterator[WatchEvent]:
        """Yield events until ``stop()`` is called."""
        while True:
            item = self._events.get()
            if item is _STOP:
                return
            yield item  # type: ignore[misc]

    def stop(self) -> None:
        self._events.put(_STOP)
        with self._lock:
            self._stopped = True
            if not self._started:
                return
            self._started = False
        self._observer.stop()
        self._observer.join(1)
