"""
Command-line interface for sasswatch.

This module provides the `sasswatch` CLI tool for compiling Sass source trees
and recompiling dependents of changed files in watch mode.
"""

import argparse
import asyncio
import logging
import signal
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

from sasswatch import __version__
from sasswatch.build import BuildOrchestrator, DependencyGraph, ErrorCollector, SassCompiler, Transformer
from sasswatch.cli_utils import (
    EXIT_COMPILE_ERRORS,
    EXIT_SUCCESS,
    ErrorFormatter,
    PathValidator,
    setup_logging,
)
from sasswatch.config import OUTPUT_STYLES, BuildConfig, load_config
from sasswatch.debug import DebugWriter
from sasswatch.errors import FatalError
from sasswatch.watch import FileWatcher, watch_entries


@dataclass
class BuildArgs:
    """Arguments for a build (None means "not given on the command line")."""

    context: Path
    dirs: List[str] = field(default_factory=list)
    output_style: Optional[str] = None
    source_map: Optional[bool] = None
    include_paths: List[str] = field(default_factory=list)
    watch: Optional[bool] = None
    debug: Optional[bool] = None
    config: Optional[Path] = None
    verbose: bool = False

    def cli_options(self) -> dict:
        return {
            "dirs": self.dirs,
            "output_style": self.output_style,
            "source_map": self.source_map,
            "include_paths": self.include_paths,
            "watch": self.watch,
            "debug": self.debug,
        }


def install_shutdown_handler(shutdown: asyncio.Event) -> None:
    """Set ``shutdown`` on SIGINT/SIGTERM."""
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, shutdown.set)
        except (NotImplementedError, RuntimeError):
            # Windows event loops have no add_signal_handler
            signal.signal(sig, lambda signum, frame: loop.call_soon_threadsafe(shutdown.set))


async def run_build(
    config: BuildConfig,
    transformer: Optional[Transformer] = None,
    watcher_factory: Callable[[Path], FileWatcher] = FileWatcher,
    shutdown: Optional[asyncio.Event] = None,
) -> int:
    """
    Cold build followed by watch mode if enabled.

    Args:
        config: Merged configuration
        transformer: Compiler to use (SassCompiler if omitted)
        watcher_factory: Creates a FileWatcher per root in watch mode
        shutdown: Stops watch mode when set (installed on SIGINT/SIGTERM if omitted)

    Returns:
        Process exit code

    Raises:
        FatalError: If a source root cannot be enumerated
    """
    logging.info(f"Using output style {config.output_style}")
    logging.info(f"Source Map {config.source_map}")

    graph = DependencyGraph()
    debug_writer = DebugWriter(config.debug_dir) if config.debug else None
    orchestrator = BuildOrchestrator(
        transformer or SassCompiler(),
        graph,
        ErrorCollector(),
        debug_writer,
    )
    entries = config.entries()

    start_time = time.time()
    await orchestrator.run(entries)
    build_time = time.time() - start_time

    if orchestrator.errors.has_errors():
        ErrorFormatter.print_compile_errors(orchestrator.errors)
        return EXIT_COMPILE_ERRORS

    if debug_writer is not None:
        debug_writer.write_snapshot(graph)

    ErrorFormatter.print_success("All files compiled successfully!")
    print(f"Build time: {build_time:.2f}s")

    if not config.watch:
        return EXIT_SUCCESS

    if shutdown is None:
        shutdown = asyncio.Event()
        install_shutdown_handler(shutdown)

    await watch_entries(entries, orchestrator, shutdown, watcher_factory)

    if debug_writer is not None:
        debug_writer.write_snapshot(graph)
    logging.info("Graceful Shutdown")
    return EXIT_SUCCESS


def build_command(args: BuildArgs) -> None:
    """Compile Sass sources, optionally watching for changes.

    Examples:
        sasswatch styles                   # Compile styles/*.scss next to the sources
        sasswatch styles:dist              # Write CSS to dist/
        sasswatch -d a:out/a -d b:out/b    # Several roots
        sasswatch styles:dist -w           # Recompile dependents on change
        sasswatch styles:dist -s compressed --source-map
    """
    setup_logging(args.verbose)

    try:
        config = load_config(args.cli_options(), context=args.context, config_path=args.config)
        exit_code = asyncio.run(run_build(config))
        sys.exit(exit_code)

    except FatalError as e:
        ErrorFormatter.handle_fatal_error(e)
    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        ErrorFormatter.handle_unexpected_error(e, args.verbose)


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sasswatch",
        description="sasswatch - incremental Sass builds with watch mode",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"sasswatch {__version__}",
    )
    parser.add_argument(
        "dirs",
        nargs="*",
        metavar="SRC[:OUT]",
        help="Source directory and optional output directory (default output: source)",
    )
    parser.add_argument(
        "-d",
        "--dir",
        dest="extra_dirs",
        action="append",
        default=[],
        metavar="SRC[:OUT]",
        help="Additional source[:output] mapping (repeatable)",
    )
    parser.add_argument(
        "-s",
        "--output-style",
        choices=OUTPUT_STYLES,
        default=None,
        help="CSS output style (default: expanded)",
    )
    parser.add_argument(
        "--source-map",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Emit .css.map files next to the CSS",
    )
    parser.add_argument(
        "-I",
        "--include-path",
        dest="include_paths",
        action="append",
        default=[],
        help="Extra directory searched by @import/@use (repeatable)",
    )
    parser.add_argument(
        "-w",
        "--watch",
        action="store_true",
        default=None,
        help="Watch sources and recompile dependents of changed files",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=None,
        help="Write dependency tracking details to _sasswatchDebug/",
    )
    parser.add_argument(
        "-C",
        "--context",
        type=Path,
        default=Path.cwd(),
        help="Base directory for relative paths (default: current directory)",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="Config file (default: <context>/sasswatch.ini if present)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show verbose output",
    )
    return parser


def main() -> None:
    """sasswatch - compile Sass trees and keep them up to date."""
    parsed_args = create_parser().parse_args()

    PathValidator.validate_context_dir(parsed_args.context)

    build_args = BuildArgs(
        context=parsed_args.context,
        dirs=parsed_args.dirs + parsed_args.extra_dirs,
        output_style=parsed_args.output_style,
        source_map=parsed_args.source_map,
        include_paths=parsed_args.include_paths,
        watch=parsed_args.watch,
        debug=parsed_args.debug,
        config=parsed_args.config,
        verbose=parsed_args.verbose,
    )
    build_command(build_args)


if __name__ == "__main__":
    main()
