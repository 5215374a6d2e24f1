# topmark:header:start
#
#   project      : Loggable
#   file         : __init__.py
#   file_relpath : src/loggable/diagnostic/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 The Loggable Authors
#
# topmark:header:end

"""Diagnostic primitives and helpers.

Design:
    - Diagnostics are represented by immutable `Diagnostic` instances.
    - During processing, diagnostics are accumulated in a mutable `DiagnosticLog`.
    - Frozen snapshots (e.g. `Config`, `ExpansionResult`) store an immutable
      `FrozenDiagnosticLog`.
"""

from __future__ import annotations

from loggable.diagnostic.model import (
    Diagnostic,
    DiagnosticLevel,
    DiagnosticLog,
    DiagnosticStats,
    FrozenDiagnosticLog,
    compute_diagnostic_stats,
    diagnostics_counts_to_dict,
)

__all__ = [
    "Diagnostic",
    "DiagnosticLevel",
    "DiagnosticLog",
    "DiagnosticStats",
    "FrozenDiagnosticLog",
    "compute_diagnostic_stats",
    "diagnostics_counts_to_dict",
]
