# topmark:header:start
#
#   project      : Loggable
#   file         : model.py
#   file_relpath : src/loggable/diagnostic/model.py
#   license      : MIT
#   copyright    : (c) 2025 The Loggable Authors
#
# topmark:header:end

"""Core diagnostic types and helpers for Loggable.

Diagnostics report problems found while loading configuration or expanding
call sites. Call-site diagnostics carry the `SourceSpan` of the offending
template or placeholder so they can be printed as ``path:line:col``.

Sections:
    * DiagnosticLevel: severity levels with associated terminal colors.
    * Diagnostic: immutable structured diagnostic payload (level + message + span).
    * DiagnosticStats: aggregated per-level counts.
    * DiagnosticLog: mutable collection with helpers for adding and summarizing.
    * FrozenDiagnosticLog: immutable snapshot container.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, cast

from yachalk import chalk

from loggable.config.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator

    from loggable.config.logging import LoggableLogger
    from loggable.template.model import SourceSpan


logger: LoggableLogger = get_logger(__name__)


class DiagnosticLevel(Enum):
    """Severity levels for diagnostics collected during processing.

    Levels map to terminal colors and are ordered by importance: ERROR > WARNING > INFO.
    """

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @property
    def color(self) -> Callable[[str], str]:
        """Return the `yachalk` color function associated with this severity level.

        Intended for human-readable output only; machine formats should not use colors.

        Returns:
            Callable[[str], str]: The `yachalk` color function associated with this severity level.
        """
        return cast(
            "Callable[[str], str]",
            {
                DiagnosticLevel.INFO: chalk.blue,
                DiagnosticLevel.WARNING: chalk.yellow,
                DiagnosticLevel.ERROR: chalk.red_bright,
            }[self],
        )


@dataclass(frozen=True)
class Diagnostic:
    """Structured diagnostic with a severity level, a message and an optional location."""

    level: DiagnosticLevel
    message: str
    span: SourceSpan | None = None

    def __str__(self) -> str:
        if self.span is None:
            return f"{self.level.value}: {self.message}"
        return f"{self.span}: {self.level.value}: {self.message}"

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-friendly representation."""
        location: dict[str, object] | None = None
        if self.span is not None:
            location = {
                "path": self.span.path,
                "line": self.span.line,
                "column": self.span.column + 1,
            }
        return {"level": self.level.value, "message": self.message, "location": location}


@dataclass(frozen=True)
class DiagnosticStats:
    """Aggregated counts for diagnostics by severity level."""

    n_info: int
    n_warning: int
    n_error: int

    @property
    def total(self) -> int:
        """Return the total count of diagnostics."""
        return self.n_info + self.n_warning + self.n_error


@dataclass
class DiagnosticLog:
    """Mutable collection of diagnostics.

    Collects the diagnostics of a single unit of work (one configuration
    load, one expanded file) and exposes simple aggregation helpers.
    """

    items: list[Diagnostic] = field(default_factory=lambda: [])

    def freeze(self) -> FrozenDiagnosticLog:
        """Return an immutable snapshot of this log's diagnostics."""
        return FrozenDiagnosticLog(items=tuple(self.items))

    def add(self, diagnostic: Diagnostic) -> None:
        """Append a diagnostic to the log.

        Args:
            diagnostic: The diagnostic object.
        """
        self.items.append(diagnostic)
        logger.trace("Adding [%s]: %s", diagnostic.level.value, diagnostic)

    def add_info(self, message: str, span: SourceSpan | None = None) -> None:
        """Add an ``info`` diagnostic to the log."""
        self.add(Diagnostic(DiagnosticLevel.INFO, message, span))

    def add_warning(self, message: str, span: SourceSpan | None = None) -> None:
        """Add a ``warning`` diagnostic to the log."""
        self.add(Diagnostic(DiagnosticLevel.WARNING, message, span))

    def add_error(self, message: str, span: SourceSpan | None = None) -> None:
        """Add an ``error`` diagnostic to the log.

        Args:
            message: The diagnostic message.
            span: Location of the offending source, if any.
        """
        self.add(Diagnostic(DiagnosticLevel.ERROR, message, span))

    def extend(self, diagnostics: Iterable[Diagnostic]) -> None:
        """Append several diagnostics, keeping their order."""
        for diagnostic in diagnostics:
            self.add(diagnostic)

    def stats(self) -> DiagnosticStats:
        """Return per-level counts for diagnostics in this log."""
        return compute_diagnostic_stats(self.items)

    def has_warning(self) -> bool:
        """Return True if the log contains warning diagnostics."""
        return any(d.level == DiagnosticLevel.WARNING for d in self.items)

    def has_error(self) -> bool:
        """Return True if the log contains error diagnostics."""
        return any(d.level == DiagnosticLevel.ERROR for d in self.items)

    def to_dict(self) -> dict[str, int]:
        """Return a JSON-friendly mapping of counts by severity.

        Returns:
            Mapping with keys ``"info"``, ``"warning"``, and ``"error"``
            reflecting the number of diagnostics at each level.
        """
        return diagnostics_counts_to_dict(self.items)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


@dataclass(frozen=True, slots=True)
class FrozenDiagnosticLog:
    """Immutable counterpart to `DiagnosticLog`, stored on frozen snapshots."""

    items: tuple[Diagnostic, ...]

    def __iter__(self) -> Iterator[Diagnostic]:
        """Iterate over contained diagnostics in insertion order."""
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def has_error(self) -> bool:
        """Return True if the snapshot contains error diagnostics."""
        return any(d.level == DiagnosticLevel.ERROR for d in self.items)

    def stats(self) -> DiagnosticStats:
        """Return aggregated per-level counts for the contained diagnostics."""
        return compute_diagnostic_stats(self.items)

    def to_dict(self) -> dict[str, int]:
        """Return a JSON-friendly mapping of counts by severity."""
        return diagnostics_counts_to_dict(self.items)


def compute_diagnostic_stats(diagnostics: Iterable[Diagnostic]) -> DiagnosticStats:
    """Return per-level counts for a sequence of diagnostics.

    Args:
        diagnostics: the diagnostic log.

    Returns:
        Per-level counts for diagnostics in this log.
    """
    items = list(diagnostics)
    n_info: int = sum(1 for d in items if d.level == DiagnosticLevel.INFO)
    n_warn: int = sum(1 for d in items if d.level == DiagnosticLevel.WARNING)
    n_err: int = sum(1 for d in items if d.level == DiagnosticLevel.ERROR)
    return DiagnosticStats(n_info=n_info, n_warning=n_warn, n_error=n_err)


def diagnostics_counts_to_dict(diagnostics: Iterable[Diagnostic]) -> dict[str, int]:
    """Return a JSON-friendly mapping of counts by severity for any iterable."""
    stats: DiagnosticStats = compute_diagnostic_stats(diagnostics)
    return {
        "info": stats.n_info,
        "warning": stats.n_warning,
        "error": stats.n_error,
    }
