"""
Exception types for sasswatch.

- FatalError: setup or enumeration failure, aborts the whole run
- ConfigError: invalid configuration (a FatalError)
- CompileError: a single entry unit failed, isolated and collected
- ConfigWarning: optional config file missing, run proceeds with defaults
"""

from pathlib import Path
from typing import Union


class FatalError(Exception):
    """Raised when the build cannot proceed at all."""
    pass


class ConfigError(FatalError):
    """Raised for invalid configuration values or files."""
    pass


class CompileError(Exception):
    """Raised when a single entry unit fails to compile.

    Attributes:
        path: The entry unit that failed
        message: Human-readable reason
    """

    def __init__(self, path: Union[str, Path], message: str):
        self.path = str(path)
        self.message = message
        super().__init__(f"{self.path}: {message}")


class ConfigWarning(UserWarning):
    """Issued when the optional config file cannot be found."""
    pass
