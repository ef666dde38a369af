"""
Debug artifacts for inspecting dependency tracking.

Files written below the debug directory:
- relationships.json: included file -> dependent entry units
- relations/<unit name>.json: the files one unit read

Units sharing a file name in different directories overwrite each other's
relations file.
"""

import json
import logging
from pathlib import Path
from typing import Iterable

from .build.dependency_graph import DependencyGraph


class DebugWriter:
    """Writes dependency snapshots as pretty-printed JSON."""

    def __init__(self, debug_dir: Path):
        self.debug_dir = Path(debug_dir)

    def write_relations(self, unit_path, included_files: Iterable[str]) -> Path:
        """Write the include list of one compiled unit."""
        target = self.debug_dir / "relations" / f"{Path(unit_path).name}.json"
        self._write_json(target, list(included_files))
        return target

    def write_snapshot(self, graph: DependencyGraph) -> Path:
        """Write the whole dependency graph."""
        target = self.debug_dir / "relationships.json"
        self._write_json(target, graph.to_dict())
        logging.debug(f"Wrote dependency snapshot to {target}")
        return target

    @staticmethod
    def _write_json(target: Path, data) -> None:
        # Atomic write
        target.parent.mkdir(parents=True, exist_ok=True)
        temp_file = target.with_suffix(".tmp")
        with open(temp_file, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        temp_file.replace(target)
