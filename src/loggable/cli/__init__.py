# topmark:header:start
#
#   project      : Loggable
#   file         : __init__.py
#   file_relpath : src/loggable/cli/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 The Loggable Authors
#
# topmark:header:end

"""Loggable CLI package.

This package groups the Click command definitions and supporting utilities
for the Loggable command-line interface.

Typical usage:
    The console script entry point is defined in ``pyproject.toml`` as::

        [project.scripts]
        loggable = "loggable.cli.main:cli"

All subcommands live in `loggable.cli.commands`.
"""

from __future__ import annotations

__all__: list[str] = []
# Do NOT import .main or commands at module import time
