from watchdog.events import (
    DirModifiedEvent,
    DirMovedEvent,
    FileClosedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
)

from gum.services.watcher import DirectoryWatcher, WatchEvent, WatchKind, to_watch_events


def test_file_events_map_to_kinds():
    assert to_watch_events(FileCreatedEvent("/site/a.html")) == [WatchEvent("/site/a.html", WatchKind.CREATE)]
    assert to_watch_events(FileModifiedEvent("/site/a.html")) == [WatchEvent("/site/a.html", WatchKind.WRITE)]
    assert to_watch_events(FileDeletedEvent("/site/a.html")) == [WatchEvent("/site/a.html", WatchKind.REMOVE)]


def test_directory_modification_is_dropped():
    # reported for the parent whenever an entry inside it changes
    assert to_watch_events(DirModifiedEvent("/site")) == []


def test_close_after_write_is_dropped():
    assert to_watch_events(FileClosedEvent("/site/a.html")) == []


def test_move_is_rename_of_source_and_create_of_destination():
    assert to_watch_events(FileMovedEvent("/site/.a.tmp", "/site/a.html")) == [
        WatchEvent("/site/.a.tmp", WatchKind.RENAME),
        WatchEvent("/site/a.html", WatchKind.CREATE),
    ]
    assert to_watch_events(DirMovedEvent("/tmp/drafts", "/site/drafts")) == [
        WatchEvent("/tmp/drafts", WatchKind.RENAME),
        WatchEvent("/site/drafts", WatchKind.CREATE),
    ]


def test_add_is_idempotent(tmp_path):
    watcher = DirectoryWatcher()
    watcher.start()
    try:
        assert watcher.add(str(tmp_path)) is True
        assert watcher.add(str(tmp_path)) is False
        assert watcher.watched() == [str(tmp_path)]
    finally:
        watcher.stop()


def test_stopped_watcher_refuses_new_watches(tmp_path):
    watcher = DirectoryWatcher()
    watcher.start()
    watcher.stop()
    assert watcher.add(str(tmp_path)) is False
    assert watcher.watched() == []
    assert list(watcher.events()) == []
