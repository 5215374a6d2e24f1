# topmark:header:start
#
#   project      : Loggable
#   file         : __init__.py
#   file_relpath : src/loggable/expansion/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 The Loggable Authors
#
# topmark:header:end

"""Call-site expansion: rewrite ``log_*`` calls into backend calls."""

from __future__ import annotations

from loggable.expansion.expander import (
    EntryPointBindings,
    entry_point_name,
    expand_file,
    expand_source,
)
from loggable.expansion.io import read_source, write_expanded
from loggable.expansion.model import ExpansionResult, ExpansionSite

__all__ = [
    "EntryPointBindings",
    "ExpansionResult",
    "ExpansionSite",
    "entry_point_name",
    "expand_file",
    "expand_source",
    "read_source",
    "write_expanded",
]
