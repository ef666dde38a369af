"""
Build system components for sasswatch.

This module provides the build system implementation including:
- Source file discovery
- Include tracking (dependency graph)
- Sass compilation
- Build orchestration
"""

from .compiler import CompileResult, SassCompiler, Transformer
from .dependency_graph import DependencyGraph
from .error_collector import ErrorCollector
from .include_resolver import IncludeResolver
from .orchestrator import BuildOrchestrator
from .source_scanner import SourceScanner, SourceScannerError, filter_entry_units, is_entry_unit

__all__ = [
    'BuildOrchestrator',
    'CompileResult',
    'DependencyGraph',
    'ErrorCollector',
    'IncludeResolver',
    'SassCompiler',
    'SourceScanner',
    'SourceScannerError',
    'Transformer',
    'filter_entry_units',
    'is_entry_unit',
]
