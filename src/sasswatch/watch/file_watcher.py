"""
Filesystem notifications as an asyncio event stream.

Wraps a watchdog Observer. The observer thread hands every relevant event
to the event loop with ``call_soon_threadsafe``; consumers read them in
arrival order from an asyncio.Queue.
"""

import asyncio
import fnmatch
import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import AsyncIterator, Optional, Sequence

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

DEFAULT_PATTERNS = ("*.scss", "*.sass")


class WatchEventKind(Enum):
    """Kinds of filesystem notifications."""

    READY = "ready"
    CHANGED = "changed"
    REMOVED = "removed"


@dataclass(frozen=True)
class WatchEvent:
    """A single notification for one path."""

    kind: WatchEventKind
    path: str


class _QueueingEventHandler(FileSystemEventHandler):
    """Forwards matching file events to the watcher's queue."""

    def __init__(self, watcher: "FileWatcher"):
        super().__init__()
        self._watcher = watcher

    def on_created(self, event: FileSystemEvent):
        if not event.is_directory:
            self._watcher._push(WatchEventKind.CHANGED, event.src_path)

    def on_modified(self, event: FileSystemEvent):
        if not event.is_directory:
            self._watcher._push(WatchEventKind.CHANGED, event.src_path)

    def on_deleted(self, event: FileSystemEvent):
        if not event.is_directory:
            self._watcher._push(WatchEventKind.REMOVED, event.src_path)

    def on_moved(self, event: FileSystemEvent):
        if not event.is_directory:
            self._watcher._push(WatchEventKind.REMOVED, event.src_path)
            self._watcher._push(WatchEventKind.CHANGED, event.dest_path)


class FileWatcher:
    """
    Recursive watcher for one root directory.

    Example usage:
        watcher = FileWatcher(Path("styles"))
        watcher.start()
        async for event in watcher.events():
            ...
        await watcher.close()
    """

    def __init__(self, root: Path, patterns: Sequence[str] = DEFAULT_PATTERNS):
        """
        Initialize file watcher.

        Args:
            root: Directory watched recursively
            patterns: File name globs that produce events
        """
        self.root = Path(os.path.abspath(root))
        self.patterns = tuple(patterns)
        self._queue: "asyncio.Queue[WatchEvent]" = asyncio.Queue()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._observer: Optional[Observer] = None

    def matches(self, path: str) -> bool:
        name = os.path.basename(path)
        return any(fnmatch.fnmatch(name, pattern) for pattern in self.patterns)

    def start(self) -> None:
        """Start the observer thread. Must be called from the event loop."""
        self._loop = asyncio.get_running_loop()
        observer = Observer()
        observer.schedule(_QueueingEventHandler(self), str(self.root), recursive=True)
        observer.start()
        self._observer = observer
        self._queue.put_nowait(WatchEvent(WatchEventKind.READY, str(self.root)))

    def _push(self, kind: WatchEventKind, path) -> None:
        # Runs on the observer thread
        path = os.fsdecode(path)
        if self._loop is None or not self.matches(path):
            return
        event = WatchEvent(kind, os.path.abspath(path))
        try:
            self._loop.call_soon_threadsafe(self._queue.put_nowait, event)
        except RuntimeError:
            logging.debug(f"Dropped {kind.value} event for {path}: event loop closed")

    async def next_event(self) -> WatchEvent:
        """Wait for the next event."""
        return await self._queue.get()

    async def events(self) -> AsyncIterator[WatchEvent]:
        while True:
            yield await self.next_event()

    async def close(self) -> None:
        """Stop the observer; returns once its thread has exited."""
        observer, self._observer = self._observer, None
        if observer is None:
            return
        observer.stop()
        await asyncio.to_thread(observer.join)
