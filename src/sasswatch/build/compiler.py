"""
Sass compilation for sasswatch.

This module handles compiling one entry unit to CSS with libsass, writing
the output (and optional source map) below the entry's output root, and
reporting every file the compile read so the dependency graph can track it.
"""

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import sass

from ..config import EntryConfig
from ..errors import CompileError
from .include_resolver import IncludeResolver


@dataclass(frozen=True)
class CompileResult:
    """Outcome of a successful compile."""

    from_path: str
    to_path: str
    included_files: Tuple[str, ...]     # Entry first, then everything it loaded
    map_path: Optional[str] = None


class Transformer(ABC):
    """Turns one entry unit into an output artifact."""

    @abstractmethod
    def compile(self, path: Path, entry: EntryConfig) -> CompileResult:
        """
        Compile a single entry unit.

        Args:
            path: Entry unit below ``entry.source_root``
            entry: The root the unit belongs to

        Returns:
            CompileResult listing every file read (never empty on success)

        Raises:
            CompileError: If the unit cannot be compiled or written
        """


def output_path_for(path: Path, entry: EntryConfig) -> Path:
    """Map a source unit to its .css path below the output root."""
    relative = Path(os.path.abspath(path)).relative_to(entry.source_root)
    return entry.output_root / relative.with_suffix('.css')


class SassCompiler(Transformer):
    """
    Compiles .scss/.sass entry units with libsass.

    Example usage:
        compiler = SassCompiler()
        result = compiler.compile(Path("/proj/styles/app.scss"), entry)
        # result.to_path == "/proj/dist/app.css"
    """

    def compile(self, path: Path, entry: EntryConfig) -> CompileResult:
        source_path = Path(os.path.abspath(path))
        if not source_path.is_file():
            raise CompileError(source_path, "Source file not found")

        try:
            css_path = output_path_for(source_path, entry)
        except ValueError:
            raise CompileError(source_path, f"Not inside source directory {entry.source_root}")

        options = entry.sass
        include_paths = [str(p) for p in options.include_paths]
        map_path = None

        try:
            if options.source_map:
                map_path = Path(f"{css_path}.map")
                css, source_map = sass.compile(
                    filename=str(source_path),
                    output_style=options.output_style,
                    include_paths=include_paths,
                    precision=options.precision,
                    source_map_filename=str(map_path),
                    output_filename_hint=str(css_path),
                )
            else:
                css = sass.compile(
                    filename=str(source_path),
                    output_style=options.output_style,
                    include_paths=include_paths,
                    precision=options.precision,
                )
                source_map = None
        except sass.CompileError as e:
            raise CompileError(source_path, str(e).strip())

        try:
            css_path.parent.mkdir(parents=True, exist_ok=True)
            css_path.write_text(css, encoding='utf-8')
            if map_path is not None and source_map is not None:
                map_path.write_text(source_map, encoding='utf-8')
        except OSError as e:
            raise CompileError(source_path, f"Failed to write {css_path}: {e}")

        resolver = IncludeResolver(options.include_paths)
        return CompileResult(
            from_path=str(source_path),
            to_path=str(css_path),
            included_files=resolver.collect(source_path),
            map_path=str(map_path) if map_path is not None else None,
        )
