"""
Watch mode for sasswatch.

One WatchCoordinator runs per source root. Each turns filesystem
notifications into recompiles of exactly the entry units that depend on
the changed file, using the dependency graph filled by the cold build.

State machine:
    STARTING -> READY -> (RECOMPILING -> READY)* -> CLOSING -> CLOSED
"""

import asyncio
import logging
import os
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from ..build.orchestrator import BuildOrchestrator
from ..config import EntryConfig
from ..errors import CompileError, FatalError
from .file_watcher import FileWatcher, WatchEvent, WatchEventKind


class WatchState(Enum):
    """Lifecycle of a coordinator."""

    STARTING = "starting"
    READY = "ready"
    RECOMPILING = "recompiling"
    CLOSING = "closing"
    CLOSED = "closed"


class WatchCoordinator:
    """
    Handles change events for one root, one event at a time.

    Shutdown is only observed between events, so a recompile in progress
    always finishes before the watcher is closed.
    """

    def __init__(
        self,
        entry: EntryConfig,
        orchestrator: BuildOrchestrator,
        shutdown: asyncio.Event,
        entries: Sequence[EntryConfig] = (),
        watcher_factory: Callable[[Path], FileWatcher] = FileWatcher,
    ):
        """
        Initialize watch coordinator.

        Args:
            entry: Root to watch
            orchestrator: Compiles units and records their dependencies
            shutdown: Set once to stop every coordinator
            entries: All configured roots, used to find which root a dependent belongs to
            watcher_factory: Creates the FileWatcher for the root
        """
        self.entry = entry
        self.orchestrator = orchestrator
        self.graph = orchestrator.graph
        self.shutdown = shutdown
        self.entries = list(entries) or [entry]
        self.watcher_factory = watcher_factory
        self.state = WatchState.STARTING

    async def run(self) -> None:
        """
        Watch until the shutdown event is set.

        Raises:
            FatalError: If the root cannot be watched
        """
        self.state = WatchState.STARTING
        watcher = self.watcher_factory(self.entry.source_root)
        try:
            try:
                watcher.start()
            except OSError as e:
                raise FatalError(f"Cannot watch {self.entry.source_root}: {e}") from e
            self.state = WatchState.READY
            while not self.shutdown.is_set():
                event = await self._next_event(watcher)
                if event is None:
                    break
                await self.handle_event(event)
        finally:
            self.state = WatchState.CLOSING
            await watcher.close()
            self.state = WatchState.CLOSED
            logging.debug(f"Stopped watching {self.entry.source_relative}")

    async def _next_event(self, watcher: FileWatcher) -> Optional[WatchEvent]:
        get_event = asyncio.ensure_future(watcher.next_event())
        stop = asyncio.ensure_future(self.shutdown.wait())
        done, pending = await asyncio.wait({get_event, stop}, return_when=asyncio.FIRST_COMPLETED)
        for task in pending:
            task.cancel()
        if stop in done:
            if get_event in done and not get_event.cancelled() and get_event.exception() is None:
                logging.debug(f"Shutdown requested, dropping {get_event.result()}")
            return None
        return get_event.result()

    async def handle_event(self, event: WatchEvent) -> List[str]:
        """
        React to one notification.

        Args:
            event: The notification

        Returns:
            Entry units a recompile was attempted for, in order
        """
        if event.kind is WatchEventKind.READY:
            logging.info(f"Watching changes for {self.entry.source_relative}")
            return []

        if event.kind is WatchEventKind.REMOVED:
            logging.warning(f"File {event.path} has been removed")
            return []

        logging.info(f"File changed: {event.path}")
        dependents = self.graph.dependents_of(event.path)
        if not dependents:
            return []

        self.state = WatchState.RECOMPILING
        try:
            for dependent in dependents:
                await self._recompile(dependent)
        finally:
            self.state = WatchState.READY
        return list(dependents)

    async def _recompile(self, dependent: str) -> None:
        entry = self.entry_for(dependent)
        try:
            result = await self.orchestrator.compile_entry(Path(dependent), entry)
        except CompileError as e:
            logging.error(f"Error when compiling {dependent}: {e.message}")
            return
        logging.info(f"Updated file {entry.display_source(result.from_path)}")

    def entry_for(self, path: str) -> EntryConfig:
        """Find the configured root containing ``path`` (this root if none does)."""
        path = os.path.abspath(path)
        for entry in [self.entry, *self.entries]:
            root = str(entry.source_root)
            if path == root or path.startswith(root + os.sep):
                return entry
        return self.entry


async def watch_entries(
    entries: Sequence[EntryConfig],
    orchestrator: BuildOrchestrator,
    shutdown: asyncio.Event,
    watcher_factory: Callable[[Path], FileWatcher] = FileWatcher,
) -> List[WatchCoordinator]:
    """
    Run one coordinator per root until shutdown.

    Returns:
        The coordinators, all CLOSED
    """
    logging.info("Starting Watch Mode")
    coordinators = [
        WatchCoordinator(entry, orchestrator, shutdown, entries, watcher_factory)
        for entry in entries
    ]
    tasks = [asyncio.ensure_future(c.run()) for c in coordinators]
    try:
        await asyncio.gather(*tasks)
    except BaseException:
        # Stop the other roots before propagating
        shutdown.set()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
    return coordinators
