# topmark:header:start
#
#   project      : Loggable
#   file         : file_resolver.py
#   file_relpath : src/loggable/file_resolver.py
#   license      : MIT
#   copyright    : (c) 2025 The Loggable Authors
#
# topmark:header:end

"""Resolve input files for Loggable based on config, paths, and filters.

This module expands positional arguments into Python source files, applies
include/exclude patterns, and returns a deterministic, sorted list of files
to expand. Globs are expanded relative to the current working directory.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from pathspec import PathSpec
from pathspec.patterns.gitwildmatch import GitWildMatchPattern

from loggable.config.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Iterable

    from loggable.config.logging import LoggableLogger
    from loggable.config.model import Config


logger: LoggableLogger = get_logger(__name__)

PYTHON_SUFFIX = ".py"


def _rel_for_match(path: Path, base: Path) -> str:
    """Return a POSIX-style relative path (or absolute as fallback) for PathSpec matching."""
    try:
        rel: Path = path.resolve().relative_to(base.resolve())
        return rel.as_posix()
    except ValueError:
        return path.as_posix()


def expand_path(p: Path) -> list[Path]:
    """Expand a base path into a list of candidate files.

    Handles globs, directories (recursively, Python files only), and files.
    Globs are expanded relative to the current working directory.

    Args:
        p (Path): Base path to expand.

    Returns:
        list[Path]: Expanded paths; empty if nothing matches.
    """
    if "*" in str(p):
        return list(Path(".").glob(str(p)))
    if p.is_dir():
        return list(p.rglob(f"*{PYTHON_SUFFIX}"))
    if p.is_file():
        return [p]
    return []


def resolve_file_list(paths: Iterable[str | Path], config: Config) -> list[Path]:
    """Return the list of Python files to expand.

    The resolver implements these semantics:
      1. **Candidate set**: expand positional paths (files, directories
         recursively, and globs).
      2. **File-only**: directories are dropped; files found by walking a
         directory or matching a glob must end in ``.py``. Files named
         explicitly are kept whatever their suffix.
      3. **Include intersection**: with include patterns, keep only files
         matching any of them.
      4. **Exclude subtraction**: drop files matching any exclude pattern.
      5. Return a **sorted** list for deterministic output.

    Patterns are gitignore-style and matched against the path relative to the
    current working directory.

    Args:
        paths (Iterable[str | Path]): Positional paths from the command line.
        config (Config): Configuration holding include/exclude patterns.

    Returns:
        list[Path]: Sorted list of files selected for expansion.
    """
    input_paths: list[Path] = [Path(p) for p in paths]
    workspace_root: Path = Path.cwd()
    logger.debug("resolve_file_list(): paths: %s", input_paths)

    candidate_set: set[Path] = set()
    unmatched_patterns: list[str] = []
    missing_literals: list[Path] = []

    for p in input_paths:
        expanded: list[Path] = expand_path(p)
        if "*" in str(p):
            if not expanded:
                unmatched_patterns.append(str(p))
            expanded = [e for e in expanded if e.suffix == PYTHON_SUFFIX]
        elif not p.exists():
            missing_literals.append(p)
        candidate_set.update(expanded)

    for up in unmatched_patterns:
        logger.warning("No matches for glob pattern: %s", up)
    for ml in missing_literals:
        logger.warning("No such file or directory: %s", ml)

    candidate_set = {p for p in candidate_set if p.is_file()}

    if config.include_patterns:
        spec_include: PathSpec = PathSpec.from_lines(
            GitWildMatchPattern, list(config.include_patterns)
        )
        candidate_set = {
            p for p in candidate_set if spec_include.match_file(_rel_for_match(p, workspace_root))
        }

    if config.exclude_patterns:
        spec_exclude: PathSpec = PathSpec.from_lines(
            GitWildMatchPattern, list(config.exclude_patterns)
        )
        candidate_set = {
            p
            for p in candidate_set
            if not spec_exclude.match_file(_rel_for_match(p, workspace_root))
        }

    files: list[Path] = sorted(candidate_set)
    logger.trace("Files to process: %d -- %s", len(files), files)
    return files


def missing_paths(paths: Iterable[str | Path]) -> list[Path]:
    """Return the literal (non-glob) paths that do not exist."""
    return [Path(p) for p in paths if "*" not in str(p) and not Path(p).exists()]
