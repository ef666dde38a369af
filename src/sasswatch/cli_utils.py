"""CLI utility functions for sasswatch.

This module provides common utilities used by the CLI including:
- Logging setup with colored console output
- Error handling and formatting (exit codes)
- Context directory validation
"""

import logging
import sys
from pathlib import Path
from typing import Iterable

from sasswatch.errors import CompileError

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_COMPILE_ERRORS = 2
EXIT_INTERRUPTED = 130  # Standard exit code for SIGINT


class ColorFormatter(logging.Formatter):
    """Message-only formatter that colors records by level."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[2m",
        logging.INFO: "\033[1;34m",
        logging.WARNING: "\033[1;33m",
        logging.ERROR: "\033[1;31m",
        logging.CRITICAL: "\033[1;31m",
    }
    RESET = "\033[0m"

    def __init__(self, use_color: bool = True):
        super().__init__("%(message)s")
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        color = self.LEVEL_COLORS.get(record.levelno)
        if not self.use_color or not color:
            return message
        return f"{color}{message}{self.RESET}"


def setup_logging(verbose: bool = False) -> None:
    """Setup console logging for the CLI."""
    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    # Replace handlers from a previous call
    for handler in list(logger.handlers):
        if getattr(handler, "_sasswatch", False):
            logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(ColorFormatter(use_color=sys.stdout.isatty()))
    console_handler._sasswatch = True  # type: ignore[attr-defined]
    logger.addHandler(console_handler)

    # ConfigWarning and friends go through logging
    logging.captureWarnings(True)


class ErrorFormatter:
    """Formats and displays error messages with ANSI color codes."""

    # ANSI color codes
    RED = "\033[1;31m"
    GREEN = "\033[1;32m"
    YELLOW = "\033[1;33m"
    RESET = "\033[0m"

    @staticmethod
    def print_error(title: str, message: str) -> None:
        """Print formatted error message.

        Args:
            title: Error title (e.g., "Configuration error")
            message: Error message details
        """
        print()
        print(f"{ErrorFormatter.RED}✗ {title}{ErrorFormatter.RESET}")
        print()
        print(message)
        print()

    @staticmethod
    def print_success(message: str) -> None:
        print()
        print(f"{ErrorFormatter.GREEN}✓ {message}{ErrorFormatter.RESET}")

    @staticmethod
    def print_warning(message: str) -> None:
        print()
        print(f"{ErrorFormatter.YELLOW}✗ {message}{ErrorFormatter.RESET}")

    @staticmethod
    def handle_fatal_error(error: Exception) -> None:
        """Handle a FatalError (config or enumeration failure)."""
        ErrorFormatter.print_error("Error occurred", str(error))
        sys.exit(EXIT_FATAL)

    @staticmethod
    def print_compile_errors(errors: Iterable[CompileError]) -> None:
        """Report every unit-level compile error of a one-shot build."""
        lines = [f"{e.path}: {e.message}" for e in errors]
        ErrorFormatter.print_error(f"Errors occurred while compiling ({len(lines)}):", "\n".join(lines))

    @staticmethod
    def handle_keyboard_interrupt() -> None:
        """Handle KeyboardInterrupt with standard formatting."""
        ErrorFormatter.print_warning("Build interrupted")
        sys.exit(EXIT_INTERRUPTED)

    @staticmethod
    def handle_unexpected_error(error: Exception, verbose: bool = False) -> None:
        """Handle unexpected errors with standard formatting.

        Args:
            error: The exception to handle
            verbose: Whether to print traceback
        """
        message = f"{type(error).__name__}: {error}"
        ErrorFormatter.print_error("Unexpected error", message)

        if verbose:
            import traceback

            print("Traceback:")
            print(traceback.format_exc())

        sys.exit(EXIT_FATAL)


class PathValidator:
    """Validates the context directory."""

    @staticmethod
    def validate_context_dir(context: Path) -> None:
        """Validate that the context directory exists and is a directory.

        Raises:
            SystemExit: If path doesn't exist or isn't a directory
        """
        if not context.exists():
            print(f"{ErrorFormatter.RED}✗ Error: Path does not exist: {context}{ErrorFormatter.RESET}")
            sys.exit(EXIT_FATAL)
        if not context.is_dir():
            print(f"{ErrorFormatter.RED}✗ Error: Path is not a directory: {context}{ErrorFormatter.RESET}")
            sys.exit(EXIT_FATAL)
