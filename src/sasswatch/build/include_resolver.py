"""
Include discovery for Sass sources.

Follows ``@import``, ``@use`` and ``@forward`` rules transitively and reports
every file that compiling an entry unit reads. Resolution mirrors Sass's
own lookup rules:

- the including file's directory first, then each include path
- partials: ``_name.scss`` before ``name.scss``
- extensions: ``.scss``, ``.sass``, then ``.css``
- directories: ``name/_index.scss`` / ``name/index.scss``
"""

import logging
import os
import re
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

SASS_EXTENSIONS = ('.scss', '.sass', '.css')

# Strings and url() are matched first so a "//" inside them is not a comment
_TOKEN = re.compile(
    r'"(?:\\.|[^"\\\n])*"'
    r"|'(?:\\.|[^'\\\n])*'"
    r'|url\([^)\n]*\)'
    r'|/\*.*?\*/'
    r'|//[^\n]*',
    re.DOTALL | re.IGNORECASE,
)
_RULE = re.compile(r'@(import|use|forward)\s+([^;\n]+)')
_QUOTED = re.compile(r'["\']([^"\']+)["\']')


def strip_comments(source: str) -> str:
    """Remove // and /* */ comments, leaving string literals and url() untouched."""

    def keep_non_comment(match: re.Match) -> str:
        token = match.group(0)
        return '' if token.startswith('/') else token

    return _TOKEN.sub(keep_non_comment, source)


def find_imports(source: str) -> List[Tuple[str, str]]:
    """
    Extract load rules from Sass source text.

    Args:
        source: Contents of a .scss or .sass file

    Returns:
        List of (rule, target) pairs in order of appearance,
        e.g. [('use', 'config'), ('import', 'base')]
    """
    text = strip_comments(source)

    imports = []
    for match in _RULE.finditer(text):
        rule, args = match.group(1), match.group(2).strip()
        targets = _QUOTED.findall(args)
        if not targets and rule == 'import':
            # Indented syntax allows unquoted imports
            targets = [t.strip() for t in args.split(',') if t.strip()]
        elif not targets:
            targets = [args.split()[0]]
        if rule != 'import':
            # @use/@forward take one URL followed by modifiers
            targets = targets[:1]
        for target in targets:
            imports.append((rule, target))
    return imports


def _is_external(rule: str, target: str) -> bool:
    if target.startswith('sass:') or '://' in target or target.startswith('url('):
        return True
    # Plain CSS imports are left for the browser
    return rule == 'import' and target.endswith('.css')


class IncludeResolver:
    """
    Resolves the full include closure of an entry unit.

    Example usage:
        resolver = IncludeResolver(include_paths=[Path("vendor")])
        files = resolver.collect(Path("styles/app.scss"))
        # ('/abs/styles/app.scss', '/abs/styles/_base.scss', ...)
    """

    def __init__(self, include_paths: Iterable[Path] = ()):
        """
        Initialize include resolver.

        Args:
            include_paths: Extra directories searched after the including file's directory
        """
        self.include_paths = [Path(os.path.abspath(p)) for p in include_paths]

    def resolve(self, target: str, base_dir: Path) -> Optional[Path]:
        """
        Find the file a load rule refers to.

        Args:
            target: The URL written in the rule (e.g. 'components/button')
            base_dir: Directory of the including file

        Returns:
            Absolute path of the resolved file, or None if nothing matches
        """
        for directory in [Path(base_dir), *self.include_paths]:
            found = self._resolve_in(directory / target)
            if found is not None:
                return Path(os.path.abspath(found))
        return None

    def _resolve_in(self, candidate: Path) -> Optional[Path]:
        parent, name = candidate.parent, candidate.name

        if candidate.suffix in SASS_EXTENSIONS:
            for path in (candidate, parent / f"_{name}"):
                if path.is_file():
                    return path
            return None

        for ext in SASS_EXTENSIONS:
            for path in (parent / f"_{name}{ext}", parent / f"{name}{ext}"):
                if path.is_file():
                    return path

        if candidate.is_dir():
            for ext in SASS_EXTENSIONS:
                for path in (candidate / f"_index{ext}", candidate / f"index{ext}"):
                    if path.is_file():
                        return path
        return None

    def collect(self, entry: Path) -> Tuple[str, ...]:
        """
        List every file read when compiling ``entry``.

        Args:
            entry: Entry unit path

        Returns:
            Absolute paths, entry first, deduplicated in discovery order
        """
        entry = Path(os.path.abspath(entry))
        seen: List[str] = []
        stack = [entry]

        while stack:
            path = stack.pop()
            if str(path) in seen:
                continue
            seen.append(str(path))

            try:
                source = path.read_text(encoding='utf-8', errors='replace')
            except OSError as e:
                logging.debug(f"Cannot scan {path} for imports: {e}")
                continue

            children = []
            for rule, target in find_imports(source):
                if _is_external(rule, target):
                    continue
                resolved = self.resolve(target, path.parent)
                if resolved is None:
                    logging.debug(f"Unresolved {rule} '{target}' in {path}")
                    continue
                children.append(resolved)

            # Depth-first, in source order
            stack.extend(reversed(children))

        return tuple(seen)
