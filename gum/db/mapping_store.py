"""In-memory short path table shared by the dispatcher and the drain thread.

The table is rebuilt from handler output on every start; nothing is persisted.
Only the ingestion drain thread writes to it, while request threads read from
it concurrently through a reader/writer lock.
"""
from __future__ import annotations

import contextlib
import logging
import threading
from typing import Dict, Iterator, Optional

from gum.models.mapping import Mapping

logger = logging.getLogger(__name__)

ADDED = "added"
UPDATED = "updated"
DELETED = "deleted"
UNCHANGED = "unchanged"


class ReadWriteLock:
    """Many concurrent readers or a single writer.

    Waiting writers block new readers so lookups cannot starve the writer.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextlib.contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextlib.contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class MappingStore:
    def __init__(self) -> None:
        self._lock = ReadWriteLock()
        self._urls: Dict[str, str] = {}

    def upsert(self, mapping: Mapping) -> str:
        """Apply one mapping and return the action taken.

        An empty permalink removes the short path. A different permalink for
        an existing short path replaces it (last write wins) and logs a
        warning; conflicts are never fatal.
        """
        path, permalink = mapping.short_path, mapping.permalink
        with self._lock.write():
            current = self._urls.get(path)
            if mapping.is_delete:
                if current is None:
                    return UNCHANGED
                del self._urls[path]
                action = DELETED
            elif current is None:
                self._urls[path] = permalink
                action = ADDED
            elif current != permalink:
                self._urls[path] = permalink
                action = UPDATED
            else:
                return UNCHANGED

        if action == ADDED:
            logger.info("  %s => %s", path, permalink)
        elif action == UPDATED:
            logger.warning("Overwriting mapping for %s: %s => %s", path, current, permalink)
        else:
            logger.info("Removed mapping for %s (was %s)", path, current)
        return action

    def lookup(self, path: str) -> Optional[str]:
        with self._lock.read():
            return self._urls.get(path)

    def snapshot(self) -> Dict[str, str]:
        with self._lock.read():
            return dict(self._urls)

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._urls)

    def __contains__(self, path: object) -> bool:
        with self._lock.read():
            return path in self._urls
