"""
Typed build configuration for sasswatch.

Options are merged once at startup with a fixed precedence:
command line > sasswatch.ini > built-in defaults.
"""

import os
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from ..errors import ConfigError, ConfigWarning
from .ini_parser import CONFIG_FILENAME, SassWatchIniConfig

OUTPUT_STYLES = ("compressed", "expanded")

DEFAULTS: Dict[str, Any] = {
    "dirs": [],
    "output_style": "expanded",
    "source_map": False,
    "watch": False,
    "debug": False,
    "include_paths": [],
    "precision": 5,
}


@dataclass(frozen=True)
class RootMapping:
    """A ``source[:output]`` pair as typed by the user."""

    source: str
    output: str

    @classmethod
    def parse(cls, value: str) -> "RootMapping":
        """
        Parse a root mapping.

        Args:
            value: 'styles:dist' or just 'styles' (output defaults to source)

        Raises:
            ConfigError: If the source part is empty
        """
        source, _, output = value.partition(":")
        if not source:
            raise ConfigError(f"Invalid directory mapping '{value}': source is empty")
        return cls(source=source, output=output or source)


@dataclass(frozen=True)
class SassOptions:
    """Compiler options passed through to the Sass compiler."""

    output_style: str = "expanded"
    source_map: bool = False
    include_paths: Tuple[Path, ...] = ()
    precision: int = 5


@dataclass(frozen=True)
class EntryConfig:
    """One configured source root and where its output goes."""

    source_root: Path
    output_root: Path
    source_relative: str
    output_relative: str
    sass: SassOptions = field(default_factory=SassOptions)

    def display_source(self, path) -> str:
        """Show a path relative to the source root as the user typed it."""
        return str(path).replace(str(self.source_root), self.source_relative, 1)

    def display_output(self, path) -> str:
        """Show a path relative to the output root as the user typed it."""
        return str(path).replace(str(self.output_root), self.output_relative, 1)


@dataclass(frozen=True)
class BuildConfig:
    """Validated, merged configuration for one run."""

    context: Path
    dirs: Tuple[RootMapping, ...]
    output_style: str = "expanded"
    source_map: bool = False
    include_paths: Tuple[Path, ...] = ()
    precision: int = 5
    watch: bool = False
    debug: bool = False

    def sass_options(self) -> SassOptions:
        return SassOptions(
            output_style=self.output_style,
            source_map=self.source_map,
            include_paths=self.include_paths,
            precision=self.precision,
        )

    def entries(self) -> List[EntryConfig]:
        """Create an EntryConfig for every root mapping."""
        options = self.sass_options()
        return [
            EntryConfig(
                source_root=Path(os.path.abspath(self.context / mapping.source)),
                output_root=Path(os.path.abspath(self.context / mapping.output)),
                source_relative=mapping.source,
                output_relative=mapping.output,
                sass=options,
            )
            for mapping in self.dirs
        ]

    @property
    def debug_dir(self) -> Path:
        return self.context / "_sasswatchDebug"


def load_config(
    cli_options: Dict[str, Any],
    context: Optional[Path] = None,
    config_path: Optional[Path] = None,
) -> BuildConfig:
    """
    Merge defaults, the config file and command-line options.

    Args:
        cli_options: Values from the command line; None means "not given"
        context: Base directory for relative paths (default: cwd)
        config_path: Explicit config file; a missing explicit file is an error

    Returns:
        Validated BuildConfig

    Raises:
        ConfigError: On invalid values, unknown keys or no directories at all
    """
    context = Path(os.path.abspath(context or Path.cwd()))

    file_options: Dict[str, Any] = {}
    if config_path is not None:
        file_options = SassWatchIniConfig(Path(config_path)).get_options()
    else:
        default_path = context / CONFIG_FILENAME
        if default_path.exists():
            file_options = SassWatchIniConfig(default_path).get_options()
        else:
            warnings.warn(f"No {CONFIG_FILENAME} found in {context}, using defaults", ConfigWarning)

    merged = dict(DEFAULTS)
    merged.update(file_options)
    for key, value in cli_options.items():
        if key not in DEFAULTS:
            raise ConfigError(f"Unknown option: {key}")
        # Empty lists from repeatable flags mean "not given"
        if value is None or (isinstance(value, list) and not value):
            continue
        merged[key] = value

    if merged["output_style"] not in OUTPUT_STYLES:
        raise ConfigError(
            f"Invalid output style '{merged['output_style']}'. "
            + f"Expected one of: {', '.join(OUTPUT_STYLES)}"
        )
    if merged["precision"] < 0:
        raise ConfigError(f"Invalid precision: {merged['precision']}")

    dirs = tuple(RootMapping.parse(d) for d in merged["dirs"])
    if not dirs:
        raise ConfigError("No source directories given. Use --dir SRC[:OUT] or set 'dirs' in sasswatch.ini")

    return BuildConfig(
        context=context,
        dirs=dirs,
        output_style=merged["output_style"],
        source_map=bool(merged["source_map"]),
        include_paths=tuple(Path(os.path.abspath(context / p)) for p in merged["include_paths"]),
        precision=int(merged["precision"]),
        watch=bool(merged["watch"]),
        debug=bool(merged["debug"]),
    )
