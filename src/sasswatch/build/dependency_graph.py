"""
Reverse include index for incremental rebuilds.

Maps every file that was read while compiling an entry unit to the entry
units that read it. The compiler already flattens an entry's transitive
include closure into one list, so a single level is enough: a change to
any file invalidates exactly ``dependents_of(file)``.
"""

import os
import threading
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Tuple


def _normalize(path) -> str:
    return os.path.abspath(os.fspath(path))


class DependencyGraph:
    """Thread-safe mapping of included file -> dependent entry units.

    Dependents keep first-seen order and are never duplicated. When an
    entry is recorded again, files it no longer includes drop it.

    Example usage:
        graph = DependencyGraph()
        graph.record_dependencies("/s/app.scss", ["/s/app.scss", "/s/_base.scss"])
        graph.dependents_of("/s/_base.scss")  # ("/s/app.scss",)
    """

    def __init__(self):
        self.lock = threading.Lock()
        self._dependents: Dict[str, List[str]] = {}
        self._includes: Dict[str, List[str]] = {}

    def record_dependencies(self, entry_path, included_files: Iterable) -> None:
        """
        Record the files an entry unit read during its latest compile.

        Args:
            entry_path: The compiled entry unit
            included_files: Every file read while compiling it (entry included)
        """
        entry = _normalize(entry_path)
        fresh: List[str] = []
        for f in included_files:
            path = _normalize(f)
            if path not in fresh:
                fresh.append(path)

        with self.lock:
            # Drop the entry from files its previous compile read but this one did not
            for stale in self._includes.get(entry, []):
                if stale in fresh:
                    continue
                dependents = self._dependents.get(stale)
                if dependents and entry in dependents:
                    dependents.remove(entry)
                    if not dependents:
                        del self._dependents[stale]

            for path in fresh:
                dependents = self._dependents.setdefault(path, [])
                if entry not in dependents:
                    dependents.append(entry)

            if fresh:
                self._includes[entry] = fresh
            else:
                self._includes.pop(entry, None)

    def dependents_of(self, file_path) -> Tuple[str, ...]:
        """Entry units that read ``file_path``, in first-seen order."""
        with self.lock:
            return tuple(self._dependents.get(_normalize(file_path), ()))

    def snapshot(self) -> Mapping[str, Tuple[str, ...]]:
        """Read-only copy of the whole mapping."""
        with self.lock:
            return MappingProxyType(
                {path: tuple(deps) for path, deps in self._dependents.items()}
            )

    def to_dict(self) -> Dict[str, List[str]]:
        """JSON-friendly copy of the mapping."""
        return {path: list(deps) for path, deps in self.snapshot().items()}

    def __contains__(self, file_path) -> bool:
        with self.lock:
            return _normalize(file_path) in self._dependents

    def __len__(self) -> int:
        with self.lock:
            return len(self._dependents)
