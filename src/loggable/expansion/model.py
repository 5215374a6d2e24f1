# topmark:header:start
#
#   project      : Loggable
#   file         : model.py
#   file_relpath : src/loggable/expansion/model.py
#   license      : MIT
#   copyright    : (c) 2025 The Loggable Authors
#
# topmark:header:end

"""Result types of call-site expansion.

An `ExpansionResult` is the frozen outcome of expanding one module: the
original and the expanded text, one `ExpansionSite` per rewritten call, and
the diagnostics of the call sites that could not be rewritten.
"""

from __future__ import annotations

import difflib
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from loggable.diagnostic import FrozenDiagnosticLog

if TYPE_CHECKING:
    from loggable.template.model import CompiledCall, Severity, SourceSpan


@dataclass(frozen=True, slots=True)
class ExpansionSite:
    """One rewritten call site.

    Attributes:
        entry_point (str): Name of the called entry point (e.g. ``log_info``).
        severity (Severity): Severity selected by the entry point.
        span (SourceSpan): Location of the original call.
        compiled (CompiledCall): Compiler output for the template.
        replacement (str): Source of the generated call.
    """

    entry_point: str
    severity: Severity
    span: SourceSpan
    compiled: CompiledCall
    replacement: str

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-friendly representation."""
        return {
            "entry_point": self.entry_point,
            "line": self.span.line,
            "column": self.span.column + 1,
            **self.compiled.to_dict(),
            "replacement": self.replacement,
        }


@dataclass(frozen=True, slots=True)
class ExpansionResult:
    """Outcome of expanding a single module.

    Attributes:
        path (str): File name (or pseudo name) of the module.
        original (str): Source text before expansion.
        expanded (str): Source text after expansion (equal to ``original``
            when nothing was rewritten).
        sites (tuple[ExpansionSite, ...]): Rewritten call sites in source order.
        diagnostics (FrozenDiagnosticLog): Problems found while expanding.
        read_error (str | None): Reason the file could not be read, if any.
    """

    path: str
    original: str
    expanded: str
    sites: tuple[ExpansionSite, ...] = ()
    diagnostics: FrozenDiagnosticLog = field(
        default_factory=lambda: FrozenDiagnosticLog(items=())
    )
    read_error: str | None = None

    @property
    def changed(self) -> bool:
        """Return True if expansion changed the source text."""
        return self.expanded != self.original

    @property
    def has_errors(self) -> bool:
        """Return True if any call site (or the file itself) failed."""
        return self.read_error is not None or self.diagnostics.has_error()

    def diff(self) -> list[str]:
        """Return the unified diff between the original and the expanded text."""
        return list(
            difflib.unified_diff(
                self.original.splitlines(keepends=True),
                self.expanded.splitlines(keepends=True),
                fromfile=f"{self.path} (current)",
                tofile=f"{self.path} (updated)",
                n=3,
            )
        )

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-friendly summary (without the source texts)."""
        return {
            "path": self.path,
            "changed": self.changed,
            "sites": [site.to_dict() for site in self.sites],
            "diagnostics": [d.to_dict() for d in self.diagnostics],
            "diagnostic_counts": self.diagnostics.to_dict(),
            "read_error": self.read_error,
        }
