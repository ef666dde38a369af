"""sasswatch - incremental Sass builds with dependency-aware watch mode."""

__version__ = "0.1.0"
