"""Configuration parsing modules for sasswatch."""

from .build_config import (
    OUTPUT_STYLES,
    BuildConfig,
    EntryConfig,
    RootMapping,
    SassOptions,
    load_config,
)
from .ini_parser import CONFIG_FILENAME, SassWatchIniConfig

__all__ = [
    "BuildConfig",
    "EntryConfig",
    "RootMapping",
    "SassOptions",
    "SassWatchIniConfig",
    "load_config",
    "CONFIG_FILENAME",
    "OUTPUT_STYLES",
]
