# topmark:header:start
#
#   project      : Loggable
#   file         : utils.py
#   file_relpath : src/loggable/cli/utils.py
#   license      : MIT
#   copyright    : (c) 2025 The Loggable Authors
#
# topmark:header:end

"""CLI rendering and machine-output helpers for Loggable.

- Human output:
  - per-file guidance lines and call-site details,
  - diagnostics (``path:line:col: level: message``),
  - colorized unified diffs (`yachalk`).

- Machine output:
  - JSON: one envelope with ``meta``, ``config``, ``results`` and ``summary``.
  - NDJSON: one ``config`` record, one ``result`` record per file, then one
    ``summary`` record.

All printing goes through the `ConsoleLike` returned by `get_console_safely`.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import TYPE_CHECKING, Sequence

import click
from yachalk import chalk

from loggable.cli.console import get_console_safely
from loggable.config.logging import get_logger
from loggable.constants import LOGGABLE_VERSION
from loggable.diagnostic import DiagnosticLevel

if TYPE_CHECKING:
    from collections.abc import Iterable

    from loggable.cli.console_api import ConsoleLike
    from loggable.config.logging import LoggableLogger
    from loggable.config.model import Config
    from loggable.diagnostic import Diagnostic
    from loggable.expansion import ExpansionResult


logger: LoggableLogger = get_logger(__name__)


class OutputFormat(str, Enum):
    """Output format for CLI rendering.

    Members:
      DEFAULT: Human-friendly text output; may include ANSI color if enabled.
      JSON: A single JSON document (machine-readable).
      NDJSON: One JSON object per line (newline-delimited JSON; machine-readable).

    Notes:
      - Machine formats (``JSON`` and ``NDJSON``) never include ANSI color or diffs.
    """

    DEFAULT = "default"
    JSON = "json"
    NDJSON = "ndjson"

    @property
    def is_machine(self) -> bool:
        """Return True for the machine-readable formats."""
        return self in (OutputFormat.JSON, OutputFormat.NDJSON)


def render_patch(patch: Sequence[str] | str, show_line_numbers: bool = False) -> str:
    """Render a colorized preview of a unified diff.

    Args:
        patch: A unified diff as **either** a list/sequence of lines **or** a single
            multiline string.
        show_line_numbers: Whether to prefix output with line numbers.

    Returns:
        The formatted, colorized diff preview.
    """
    if isinstance(patch, str):
        lines: list[str] = patch.splitlines(keepends=False)
    else:
        lines = [line.rstrip("\r\n") for line in patch]

    def process_line(line: str) -> str:
        content = line.replace("\r", "\\r")
        match line[:1]:
            case "-":
                return chalk.bold.red(content)
            case "+":
                return chalk.bold.green(content)
            case "@":
                return chalk.cyan(content)
            case _:
                return chalk.bold.white(content)

    if show_line_numbers:
        return chalk.gray(
            "".join(f"{i:04d}|{process_line(line)}\n" for i, line in enumerate(lines, 1))
        )
    return chalk.gray("".join(f"{process_line(line)}\n" for line in lines))


def render_diagnostic(diagnostic: Diagnostic) -> str:
    """Return a diagnostic as a single colorized line."""
    return diagnostic.level.color(str(diagnostic))


def emit_diagnostics(diagnostics: Iterable[Diagnostic], *, min_verbosity_info: int = 1) -> None:
    """Print diagnostics to stderr (info diagnostics only when verbose).

    Args:
        diagnostics: Diagnostics to print, in order.
        min_verbosity_info: Verbosity needed to show ``info`` diagnostics.
    """
    console: ConsoleLike = get_console_safely()
    ctx = click.get_current_context(silent=True)
    verbosity: int = int(ctx.obj.get("verbosity_level", 0)) if ctx and ctx.obj else 0
    for d in diagnostics:
        if d.level is DiagnosticLevel.ERROR:
            console.error(str(d))
        elif d.level is DiagnosticLevel.WARNING:
            console.warn(str(d))
        elif verbosity >= min_verbosity_info:
            console.print(render_diagnostic(d))


def emit_diffs(results: Iterable[ExpansionResult]) -> None:
    """Print unified diffs for changed files (human output only)."""
    console: ConsoleLike = get_console_safely()
    for r in results:
        if r.changed:
            console.print(render_patch(r.diff()), nl=False)


def build_meta_payload() -> dict[str, str]:
    """Return the ``meta`` block of machine output."""
    return {"tool": "loggable", "version": LOGGABLE_VERSION}


def build_summary_payload(results: Sequence[ExpansionResult]) -> dict[str, int]:
    """Return aggregated counts over all expanded files."""
    return {
        "files": len(results),
        "changed": sum(1 for r in results if r.changed),
        "sites": sum(len(r.sites) for r in results),
        "errors": sum(r.diagnostics.stats().n_error for r in results),
    }


def emit_results_machine(
    config: Config,
    results: Sequence[ExpansionResult],
    fmt: OutputFormat,
) -> None:
    """Emit expansion results in JSON/NDJSON format for machine consumption.

    JSON shape::

        {
          "meta": {...},
          "config": {...},
          "config_diagnostics": [...],
          "results": [ <per-file result dict> ... ],
          "summary": {"files": n, "changed": n, "sites": n, "errors": n}
        }

    NDJSON shapes:
        - First line: ``{"kind": "config", "meta": ..., "config": ...}``
        - One ``{"kind": "result", ...}`` line per file.
        - Last line: ``{"kind": "summary", "summary": {...}}``
    """
    console: ConsoleLike = get_console_safely()
    meta = build_meta_payload()
    config_diagnostics = [d.to_dict() for d in config.diagnostics]
    summary = build_summary_payload(results)

    if fmt == OutputFormat.JSON:
        envelope: dict[str, object] = {
            "meta": meta,
            "config": config.to_dict(),
            "config_diagnostics": config_diagnostics,
            "results": [r.to_dict() for r in results],
            "summary": summary,
        }
        console.print(json.dumps(envelope, indent=2))
        return

    console.print(
        json.dumps(
            {
                "kind": "config",
                "meta": meta,
                "config": config.to_dict(),
                "config_diagnostics": config_diagnostics,
            }
        )
    )
    for r in results:
        console.print(json.dumps({"kind": "result", **r.to_dict()}))
    console.print(json.dumps({"kind": "summary", "summary": summary}))
