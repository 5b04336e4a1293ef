"""Short links parsed from a tree of static HTML files.

Every document under the base directory is scanned for ``rel="shortlink"``
and ``rel="canonical"`` links. After the initial walk the tree is watched: a file
that is created, written or renamed into place is scanned again on its own,
and a new directory is walked, so edits take effect without a restart.

Removing or renaming a document does not remove its mappings; they stay
until another document claims the same short path.
"""
from __future__ import annotations

import logging
import os
import threading
from typing import Callable, Iterable, Optional

from gum.db.ingest import MappingSender
from gum.errors import ConfigurationError
from gum.services.html_scanner import scan_file
from gum.services.watcher import DirectoryWatcher, WatchEvent, WatchKind

from .base import Handler

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = (".html",)


class StaticHandler(Handler):
    name = "static"

    def __init__(
        self,
        base: str,
        *,
        extensions: Iterable[str] = DEFAULT_EXTENSIONS,
        watch: bool = True,
        watcher_factory: Callable[[], DirectoryWatcher] = DirectoryWatcher,
    ) -> None:
        if not os.path.exists(base):
            raise ConfigurationError(f"static base path {base!r} does not exist")
        if not os.path.isdir(base):
            raise ConfigurationError(f"static base path {base!r} is not a directory")
        self.base = os.path.abspath(base)
        self.extensions = tuple(_normalize_ext(e) for e in extensions)
        self.watch = watch
        self._watcher_factory = watcher_factory
        self._watcher: Optional[DirectoryWatcher] = None
        self._lock = threading.Lock()
        self._closed = False

    def is_document(self, path: str) -> bool:
        return os.path.splitext(path)[1].lower() in self.extensions

    # --- Handler API ---
    def mappings(self, sender: MappingSender) -> None:
        """Scan the tree, then keep rescanning changed paths until closed."""
        logger.info("Static handler added for %s", self.base)
        watcher = None
        if self.watch:
            with self._lock:
                if self._closed:
                    return
                watcher = self._watcher = self._watcher_factory()
            watcher.start()

        count = self.load_files(self.base, sender)
        logger.info("Loaded %d mappings from %s", count, self.base)

        if watcher is None:
            return
        for event in watcher.events():
            try:
                self.handle_event(event, sender)
            except Exception:
                logger.exception("Error handling watch event %s", event)

    def close(self) -> None:
        with self._lock:
            self._closed = True
            watcher, self._watcher = self._watcher, None
        if watcher is not None:
            watcher.stop()

    # --- Scanning ---
    def load_files(self, path: str, sender: MappingSender) -> int:
        """Scan ``path`` (a document or a directory tree) and send its mappings.

        Directories found along the way are watched when watching is enabled.
        Returns the number of mappings sent.
        """
        if os.path.isfile(path):
            return self._load_file(path, sender) if self.is_document(path) else 0
        if not os.path.isdir(path):
            return 0

        count = 0
        for dirpath, dirnames, filenames in os.walk(path, onerror=_log_walk_error):
            dirnames.sort()
            self._add_watch(dirpath)
            for filename in sorted(filenames):
                file_path = os.path.join(dirpath, filename)
                if self.is_document(file_path):
                    count += self._load_file(file_path, sender)
        return count

    def _load_file(self, path: str, sender: MappingSender) -> int:
        try:
            mappings = scan_file(path)
        except OSError as exc:
            logger.error("Error reading file %s: %s", path, exc)
            return 0
        except Exception:
            logger.exception("Error parsing file %s", path)
            return 0
        for mapping in mappings:
            sender.send(mapping)
        return len(mappings)

    # --- Watching ---
    def handle_event(self, event: WatchEvent, sender: MappingSender) -> None:
        """Rescan the path named by a CREATE or WRITE event.

        A directory is walked, which also watches it and everything
        below it. REMOVE and RENAME (the source side of a move) are ignored;
        the destination of a move arrives as its own CREATE.
        """
        if event.kind in (WatchKind.REMOVE, WatchKind.RENAME):
            return

        try:
            os.stat(event.path)
        except OSError as exc:
            logger.warning("Error reading file stats for %s: %s", event.path, exc)
            return

        self.load_files(event.path, sender)

    def _add_watch(self, directory: str) -> None:
        with self._lock:
            watcher = None if self._closed else self._watcher
        if watcher is None:
            return
        try:
            watcher.add(directory)
        except OSError as exc:
            logger.error("Error watching path %s: %s", directory, exc)


def _normalize_ext(ext: str) -> str:
    ext = ext.strip().lower()
    return ext if ext.startswith(".") else "." + ext


def _log_walk_error(exc: OSError) -> None:
    logger.error("Error walking %s: %s", getattr(exc, "filename", "?"), exc)
