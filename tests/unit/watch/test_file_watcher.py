"""Tests for the watchdog-backed event stream."""

import asyncio
import os

import pytest
from watchdog.events import (
    DirModifiedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
)

from sasswatch.watch.file_watcher import FileWatcher, WatchEvent, WatchEventKind, _QueueingEventHandler


async def drain(watcher):
    """Let queued call_soon_threadsafe callbacks run, then collect events."""
    await asyncio.sleep(0)
    events = []
    while not watcher._queue.empty():
        events.append(await watcher.next_event())
    return events


class TestFileWatcherEvents:
    """Test translation of watchdog events without starting an observer."""

    @pytest.fixture
    def root(self, tmp_path):
        return tmp_path

    def run_handler(self, root, *watchdog_events):
        async def main():
            watcher = FileWatcher(root)
            watcher._loop = asyncio.get_running_loop()
            handler = _QueueingEventHandler(watcher)
            for event in watchdog_events:
                handler.dispatch(event)
            return await drain(watcher)

        return asyncio.run(main())

    def test_modified_is_changed(self, root):
        path = str(root / "_base.scss")

        events = self.run_handler(root, FileModifiedEvent(path))

        assert events == [WatchEvent(WatchEventKind.CHANGED, os.path.abspath(path))]

    def test_created_is_changed(self, root):
        path = str(root / "app.sass")

        events = self.run_handler(root, FileCreatedEvent(path))

        assert events == [WatchEvent(WatchEventKind.CHANGED, path)]

    def test_deleted_is_removed(self, root):
        path = str(root / "app.scss")

        events = self.run_handler(root, FileDeletedEvent(path))

        assert events == [WatchEvent(WatchEventKind.REMOVED, path)]

    def test_moved_is_removed_then_changed(self, root):
        src, dest = str(root / "old.scss"), str(root / "new.scss")

        events = self.run_handler(root, FileMovedEvent(src, dest))

        assert events == [
            WatchEvent(WatchEventKind.REMOVED, src),
            WatchEvent(WatchEventKind.CHANGED, dest),
        ]

    def test_non_matching_files_ignored(self, root):
        events = self.run_handler(root, FileModifiedEvent(str(root / "app.css")))

        assert events == []

    def test_directory_events_ignored(self, root):
        events = self.run_handler(root, DirModifiedEvent(str(root / "components.scss")))

        assert events == []

    def test_events_iterator_preserves_order(self, root):
        async def main():
            watcher = FileWatcher(root)
            watcher._loop = asyncio.get_running_loop()
            watcher._push(WatchEventKind.CHANGED, str(root / "a.scss"))
            watcher._push(WatchEventKind.REMOVED, str(root / "b.scss"))
            await asyncio.sleep(0)
            received = []
            async for event in watcher.events():
                received.append(event)
                if len(received) == 2:
                    break
            return received

        events = asyncio.run(main())

        assert [e.kind for e in events] == [WatchEventKind.CHANGED, WatchEventKind.REMOVED]
        assert events[1].path == str(root / "b.scss")

    def test_matches_custom_patterns(self, root):
        watcher = FileWatcher(root, patterns=["*.less"])

        assert watcher.matches("/x/site.less")
        assert not watcher.matches("/x/site.scss")


@pytest.mark.integration
class TestFileWatcherObserver:
    """Test against a real watchdog observer."""

    def test_ready_then_change(self, tmp_path):
        target = tmp_path / "_base.scss"
        target.write_text("a { b: c; }")

        async def main():
            watcher = FileWatcher(tmp_path)
            watcher.start()
            try:
                first = await asyncio.wait_for(watcher.next_event(), timeout=5)
                await asyncio.sleep(0.2)
                target.write_text("a { b: d; }")
                while True:
                    event = await asyncio.wait_for(watcher.next_event(), timeout=5)
                    if event.kind is WatchEventKind.CHANGED:
                        return first, event
            finally:
                await watcher.close()

        first, event = asyncio.run(main())

        assert first.kind is WatchEventKind.READY
        assert event.path == os.path.abspath(target)

    def test_close_is_idempotent(self, tmp_path):
        async def main():
            watcher = FileWatcher(tmp_path)
            watcher.start()
            await watcher.close()
            await watcher.close()

        asyncio.run(main())
