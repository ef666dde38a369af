"""
One-shot build orchestration for sasswatch.

This module drives the cold build: for every configured root it streams
entry units from the source scanner into the compiler, records each
successful compile in the dependency graph, and collects per-unit errors
without stopping the pass.
"""

import asyncio
import logging
from pathlib import Path
from typing import List, Optional

from ..config import EntryConfig
from ..errors import CompileError
from .compiler import CompileResult, Transformer
from .dependency_graph import DependencyGraph
from .error_collector import ErrorCollector
from .source_scanner import SourceScanner


class BuildOrchestrator:
    """
    Compiles every entry unit of every root.

    Roots are built concurrently; units within a root are compiled one after
    another in enumeration order. Failed units land in ``errors`` and never
    reach the dependency graph.

    Example usage:
        orchestrator = BuildOrchestrator(SassCompiler(), DependencyGraph())
        asyncio.run(orchestrator.run(config.entries()))
        if orchestrator.errors.has_errors():
            ...
    """

    def __init__(
        self,
        transformer: Transformer,
        graph: DependencyGraph,
        errors: Optional[ErrorCollector] = None,
        debug_writer=None,
    ):
        """
        Initialize build orchestrator.

        Args:
            transformer: Compiler invoked for each entry unit
            graph: Shared dependency graph, also used by watch mode
            errors: Collector for per-unit failures (a new one if omitted)
            debug_writer: Optional DebugWriter for per-unit relation files
        """
        self.transformer = transformer
        self.graph = graph
        self.errors = errors if errors is not None else ErrorCollector()
        self.debug_writer = debug_writer

    async def run(self, entries: List[EntryConfig]) -> None:
        """
        Build all roots.

        Args:
            entries: Configured roots

        Raises:
            FatalError: If any source root cannot be enumerated
        """
        tasks = [asyncio.ensure_future(self._build_entry(entry)) for entry in entries]
        try:
            await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    async def _build_entry(self, entry: EntryConfig) -> None:
        logging.info(f"Source dir {entry.source_relative} => Output dir {entry.output_relative}")

        scanner = SourceScanner(entry.source_root)
        for unit in scanner.iter_entry_units():
            try:
                await self.compile_entry(unit, entry)
            except CompileError as e:
                logging.debug(f"Compile failed: {e}")
                self.errors.add(e)

    async def compile_entry(self, unit: Path, entry: EntryConfig) -> CompileResult:
        """
        Compile one unit and record what it read.

        Args:
            unit: Entry unit path
            entry: Root the unit belongs to

        Returns:
            CompileResult from the transformer

        Raises:
            CompileError: If compilation fails (the graph is left untouched)
        """
        try:
            result = await asyncio.to_thread(self.transformer.compile, unit, entry)
        except CompileError:
            raise
        except Exception as e:
            raise CompileError(unit, f"{type(e).__name__}: {e}") from e

        self.graph.record_dependencies(result.from_path, result.included_files)
        logging.info(f"{entry.display_source(result.from_path)} => {entry.display_output(result.to_path)}")

        if self.debug_writer is not None:
            self.debug_writer.write_relations(result.from_path, result.included_files)

        return result
