"""Watch mode components for sasswatch."""

from .coordinator import WatchCoordinator, WatchState, watch_entries
from .file_watcher import FileWatcher, WatchEvent, WatchEventKind

__all__ = [
    "FileWatcher",
    "WatchCoordinator",
    "WatchEvent",
    "WatchEventKind",
    "WatchState",
    "watch_entries",
]
