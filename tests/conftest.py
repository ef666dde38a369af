"""Shared fixtures for sasswatch tests."""

import os
from pathlib import Path

import pytest

from sasswatch.build.compiler import CompileResult, Transformer, output_path_for
from sasswatch.config import EntryConfig
from sasswatch.errors import CompileError


class FakeTransformer(Transformer):
    """Transformer double reporting configured include lists.

    Args:
        includes: entry path -> files read (defaults to just the entry)
        failing: entry paths that raise CompileError
    """

    def __init__(self, includes=None, failing=()):
        self.includes = {os.path.abspath(k): list(v) for k, v in (includes or {}).items()}
        self.failing = {os.path.abspath(p) for p in failing}
        self.calls = []

    def compile(self, path, entry):
        path = os.path.abspath(path)
        self.calls.append(path)
        if path in self.failing:
            raise CompileError(path, "Undefined variable: $missing")
        included = self.includes.get(path, [path])
        return CompileResult(
            from_path=path,
            to_path=str(output_path_for(Path(path), entry)),
            included_files=tuple(os.path.abspath(f) for f in included),
        )


@pytest.fixture
def fake_transformer():
    """The FakeTransformer class, for building doubles per test."""
    return FakeTransformer


@pytest.fixture
def make_entry(tmp_path):
    """Create an EntryConfig for a source/output pair below tmp_path."""

    def _make(source="styles", output="dist", create=True):
        source_root = tmp_path / source
        if create:
            source_root.mkdir(parents=True, exist_ok=True)
        return EntryConfig(
            source_root=Path(os.path.abspath(source_root)),
            output_root=Path(os.path.abspath(tmp_path / output)),
            source_relative=source,
            output_relative=output,
        )

    return _make
