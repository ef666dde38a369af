"""
Source file discovery for sasswatch.

This module handles:
- Walking a source root lazily, one file at a time
- Recognizing compilable entry units (.scss/.sass)
- Skipping partials (files whose name starts with an underscore)
"""

import os
from pathlib import Path
from typing import Iterable, Iterator

from ..errors import FatalError

ENTRY_SUFFIXES = ('.scss', '.sass')

# Directories never descended into
EXCLUDED_DIRS = {'.git', '.hg', '.svn', 'node_modules', '__pycache__', '_sasswatchDebug'}


class SourceScannerError(FatalError):
    """Raised when a source root cannot be enumerated."""
    pass


def is_entry_unit(path: Path) -> bool:
    """
    Check whether a file is a compilable entry unit.

    Partials (``_name.scss``) are include-only and never compiled on their own.

    Args:
        path: Candidate file path

    Returns:
        True if the file should be compiled to CSS
    """
    path = Path(path)
    return path.suffix.lower() in ENTRY_SUFFIXES and not path.name.startswith('_')


def filter_entry_units(paths: Iterable[Path]) -> Iterator[Path]:
    """Narrow a stream of candidate files to entry units."""
    for path in paths:
        if is_entry_unit(path):
            yield path


class SourceScanner:
    """
    Enumerates candidate files under one source root.

    Every call to ``iter_files()`` starts a fresh walk; nothing is buffered,
    so callers consuming slowly simply slow the walk down.

    Example usage:
        scanner = SourceScanner(Path("styles"))
        for unit in scanner.iter_entry_units():
            compile(unit)
    """

    def __init__(self, source_root: Path):
        """
        Initialize source scanner.

        Args:
            source_root: Directory to enumerate
        """
        self.source_root = Path(source_root)

    def iter_files(self) -> Iterator[Path]:
        """
        Yield every file below the source root, sorted per directory.

        Raises:
            SourceScannerError: If the root is missing or a directory is unreadable
        """
        if not self.source_root.is_dir():
            raise SourceScannerError(f"Source directory not found: {self.source_root}")

        def on_error(error: OSError) -> None:
            raise SourceScannerError(
                f"Failed to read {error.filename or self.source_root}: {error.strerror or error}"
            ) from error

        for dirpath, dirnames, filenames in os.walk(self.source_root, onerror=on_error):
            dirnames[:] = sorted(d for d in dirnames if d not in EXCLUDED_DIRS)
            for filename in sorted(filenames):
                yield Path(dirpath) / filename

    def iter_entry_units(self) -> Iterator[Path]:
        """Yield the entry units below the source root."""
        return filter_entry_units(self.iter_files())
