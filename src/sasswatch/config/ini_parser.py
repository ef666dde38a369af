"""
sasswatch.ini configuration parser.

This module reads the optional project config file and converts its values
to typed options. Only a fixed set of keys is recognized.

Example sasswatch.ini:
    [sasswatch]
    dirs =
        styles:dist
        themes
    output_style = compressed
    source_map = yes

    [sass]
    include_paths = node_modules
    precision = 8
"""

import configparser
from pathlib import Path
from typing import Any, Dict, List

from ..errors import ConfigError

CONFIG_FILENAME = "sasswatch.ini"

# section -> {key: type}
RECOGNIZED_KEYS = {
    "sasswatch": {
        "dirs": list,
        "output_style": str,
        "source_map": bool,
        "watch": bool,
        "debug": bool,
    },
    "sass": {
        "include_paths": list,
        "precision": int,
    },
}


class SassWatchIniConfig:
    """
    Parser for sasswatch.ini configuration files.

    Usage:
        config = SassWatchIniConfig(Path("sasswatch.ini"))
        options = config.get_options()
        # {'dirs': ['styles:dist'], 'output_style': 'compressed', ...}
    """

    def __init__(self, ini_path: Path):
        """
        Initialize the parser with a sasswatch.ini file.

        Args:
            ini_path: Path to the config file

        Raises:
            ConfigError: If the file doesn't exist or cannot be parsed
        """
        self.ini_path = ini_path

        if not ini_path.exists():
            raise ConfigError(f"Configuration file not found: {ini_path}")

        self.config = configparser.ConfigParser(
            allow_no_value=True, interpolation=configparser.ExtendedInterpolation()
        )

        try:
            self.config.read(ini_path, encoding="utf-8")
        except configparser.Error as e:
            raise ConfigError(f"Failed to parse {ini_path}: {e}") from e

    def get_options(self) -> Dict[str, Any]:
        """
        Get all recognized options, converted to their types.

        Returns:
            Dictionary containing only the keys present in the file

        Raises:
            ConfigError: On unknown keys or values of the wrong type
        """
        options: Dict[str, Any] = {}
        for section, keys in RECOGNIZED_KEYS.items():
            if section not in self.config:
                continue

            unknown = set(self.config[section]) - set(keys)
            if unknown:
                raise ConfigError(
                    f"Unknown option(s) in [{section}] of {self.ini_path}: "
                    + ", ".join(sorted(unknown))
                )

            for key, kind in keys.items():
                if key not in self.config[section]:
                    continue
                options[key] = self._convert(section, key, kind)
        return options

    def _convert(self, section: str, key: str, kind: type) -> Any:
        try:
            if kind is bool:
                return self.config.getboolean(section, key)
            if kind is int:
                return self.config.getint(section, key)
        except (ValueError, TypeError, AttributeError, configparser.Error) as e:
            raise ConfigError(f"Invalid value for '{key}' in {self.ini_path}: {e}") from e

        value = self.config.get(section, key) or ""
        if kind is list:
            return self._split_list(value)
        return value.strip()

    @staticmethod
    def _split_list(value: str) -> List[str]:
        # Split on newlines and commas, strip whitespace, filter empty
        items = []
        for line in value.split("\n"):
            for item in line.split(","):
                item = item.strip()
                if item:
                    items.append(item)
        return items
