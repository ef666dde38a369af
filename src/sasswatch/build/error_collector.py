"""Shared collector for per-unit compile errors."""

import threading
from typing import Iterator, List

from ..errors import CompileError


class ErrorCollector:
    """Accumulates CompileErrors across concurrent build tasks."""

    def __init__(self):
        self.lock = threading.Lock()
        self._errors: List[CompileError] = []

    def add(self, error: CompileError) -> None:
        with self.lock:
            self._errors.append(error)

    def has_errors(self) -> bool:
        with self.lock:
            return bool(self._errors)

    def errors(self) -> List[CompileError]:
        with self.lock:
            return list(self._errors)

    def __iter__(self) -> Iterator[CompileError]:
        return iter(self.errors())

    def __len__(self) -> int:
        with self.lock:
            return len(self._errors)
