# topmark:header:start
#
#   project      : Loggable
#   file         : expand.py
#   file_relpath : src/loggable/cli/commands/expand.py
#   license      : MIT
#   copyright    : (c) 2025 The Loggable Authors
#
# topmark:header:end

"""Loggable `expand` command.

Rewrites ``log_debug`` ... ``log_fault`` calls in Python files into calls of
the runtime backend. Performs a dry run by default and writes files when
``--apply`` is given.

Examples:
  Preview which files would change (dry run):

    $ loggable expand src

  Show the rewritten lines as a diff:

    $ loggable expand --diff src/app.py

  Rewrite files in place:

    $ loggable expand --apply src

  Print the expanded source of a single file:

    $ loggable expand --stdout src/app.py > build/app.py
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from loggable.cli.cli_types import EnumChoiceParam
from loggable.cli.config_resolver import resolve_config_from_click
from loggable.cli.errors import (
    LoggableFileNotFoundError,
    LoggableIOError,
    LoggableTemplateError,
    LoggableUsageError,
)
from loggable.cli.exit_codes import ExitCode
from loggable.cli.options import (
    CONTEXT_SETTINGS,
    common_config_options,
    common_expansion_options,
    common_file_filtering_options,
)
from loggable.cli.utils import (
    OutputFormat,
    emit_diagnostics,
    emit_diffs,
    emit_results_machine,
)
from loggable.config.logging import get_logger
from loggable.expansion import expand_file, write_expanded
from loggable.file_resolver import missing_paths, resolve_file_list

if TYPE_CHECKING:
    from pathlib import Path

    from loggable.cli.console_api import ConsoleLike
    from loggable.config.model import Config
    from loggable.expansion import ExpansionResult

logger = get_logger(__name__)


def render_per_file_guidance(
    console: ConsoleLike,
    results: list[ExpansionResult],
    *,
    apply_changes: bool,
    verbosity: int,
) -> None:
    """Echo one human guidance line per changed file (more with ``-v``)."""
    for r in results:
        if r.read_error is not None:
            continue
        if not r.changed:
            if verbosity > 0:
                console.print(f"{r.path}: nothing to expand")
            continue
        if apply_changes:
            console.print(f"✏️  Expanded {len(r.sites)} call site(s) in '{r.path}'")
        else:
            console.print(f"{r.path}: {len(r.sites)} call site(s) to expand")
            console.print(
                console.styled(
                    f"   🛠️  Run `loggable expand --apply {r.path}` to rewrite this file.",
                    fg="yellow",
                )
            )
        if verbosity > 0:
            for site in r.sites:
                console.print(
                    console.styled(
                        f"     {site.span.line}:{site.span.column + 1} "
                        f"{site.entry_point} -> {site.replacement}",
                        fg="white",
                        italic=True,
                    )
                )


def write_changed_files(results: list[ExpansionResult]) -> tuple[int, int]:
    """Write every changed result back to its file.

    Returns:
        tuple[int, int]: Number of files written and number of failed writes.
    """
    from pathlib import Path

    written = 0
    failed = 0
    for r in results:
        if not r.changed or r.read_error is not None:
            continue
        try:
            write_expanded(r, Path(r.path))
            written += 1
        except OSError as e:
            logger.error("Failed to write %s: %s", r.path, e)
            failed += 1
    return written, failed


@click.command(
    name="expand",
    help="Expand log_* calls into backend calls (dry-run). Use --apply to write files.",
    context_settings=CONTEXT_SETTINGS,
    epilog="""\
Examples:

  # Preview which files would change (dry-run)
  loggable expand src

  # Apply: rewrite files in-place
  loggable expand --apply .
""",
)
@click.argument("paths", nargs=-1, type=click.Path())
@common_config_options
@common_expansion_options
@common_file_filtering_options
@click.option(
    "--apply", "apply_changes", is_flag=True, help="Write changes to files (off by default)."
)
@click.option("--diff", is_flag=True, help="Show unified diffs (human output only).")
@click.option(
    "--stdout",
    "to_stdout",
    is_flag=True,
    help="Print the expanded source of a single file instead of reporting.",
)
@click.option(
    "--format",
    "output_format",
    type=EnumChoiceParam(OutputFormat),
    default=None,
    help=f"Output format ({', '.join(v.value for v in OutputFormat)}).",
)
def expand_command(
    *,
    paths: tuple[str, ...],
    no_config: bool,
    config_paths: tuple[str, ...],
    logger_expr: str | None,
    emit_name: str | None,
    escape_percent: bool | None,
    include_patterns: tuple[str, ...],
    exclude_patterns: tuple[str, ...],
    apply_changes: bool,
    diff: bool,
    to_stdout: bool,
    output_format: OutputFormat | None,
) -> None:
    """Expand entry-point calls in Python files.

    Args:
        paths (tuple[str, ...]): Files, directories or globs (default: ``.``).
        no_config (bool): If True, skip config discovery.
        config_paths (tuple[str, ...]): Additional config files to merge.
        logger_expr (str | None): Logger expression override.
        emit_name (str | None): Emit name override.
        escape_percent (bool | None): ``%`` escaping override.
        include_patterns (tuple[str, ...]): Patterns to keep (intersection).
        exclude_patterns (tuple[str, ...]): Patterns to drop (subtraction).
        apply_changes (bool): Write changes to files; otherwise perform a dry run.
        diff (bool): Show unified diffs (human output only).
        to_stdout (bool): Print the expanded source of the single input file.
        output_format (OutputFormat | None): ``default``, ``json`` or ``ndjson``.

    Raises:
        LoggableUsageError: On conflicting options.
        LoggableFileNotFoundError: If an input path does not exist.
        LoggableIOError: If a file could not be read or written.
        LoggableTemplateError: If any call site could not be expanded.

    Exit Status:
        SUCCESS (0): Nothing to expand, or all changes were written.
        WOULD_CHANGE (2): Dry run found files that ``--apply`` would rewrite.
        USAGE_ERROR (64): Invalid invocation.
        TEMPLATE_ERROR (65): One or more call sites could not be expanded.
        FILE_NOT_FOUND (66): An input path does not exist.
        IO_ERROR (74): A file could not be read or written.
        CONFIG_ERROR (78): Invalid configuration.
        UNEXPECTED_ERROR (255): An unhandled error occurred.
    """
    ctx = click.get_current_context()
    ctx.ensure_object(dict)
    console: ConsoleLike = ctx.obj["console"]
    verbosity: int = int(ctx.obj.get("verbosity_level", 0))

    fmt: OutputFormat = output_format or OutputFormat.DEFAULT
    if fmt.is_machine and diff:
        raise LoggableUsageError(
            f"{ctx.command.name}: --diff is not supported with machine-readable output formats."
        )
    if to_stdout and (apply_changes or diff or fmt.is_machine):
        raise LoggableUsageError(
            f"{ctx.command.name}: --stdout cannot be combined with --apply, --diff or --format."
        )

    config: Config = resolve_config_from_click(
        no_config=no_config,
        config_paths=list(config_paths),
        logger_expr=logger_expr,
        emit_name=emit_name,
        escape_percent=escape_percent,
        include_patterns=list(include_patterns),
        exclude_patterns=list(exclude_patterns),
    )
    logger.trace("Effective config: %s", config)
    if not fmt.is_machine:
        emit_diagnostics(config.diagnostics)

    inputs: list[str] = list(paths) or ["."]
    missing: list[Path] = missing_paths(inputs)
    if missing:
        raise LoggableFileNotFoundError(
            "No such file or directory: " + ", ".join(str(m) for m in missing)
        )

    file_list: list[Path] = resolve_file_list(inputs, config)
    if to_stdout and len(file_list) != 1:
        raise LoggableUsageError(
            f"{ctx.command.name}: --stdout needs exactly one input file "
            f"({len(file_list)} selected)."
        )

    if not file_list:
        if fmt.is_machine:
            emit_results_machine(config, [], fmt)
        elif verbosity >= 0:
            console.print(console.styled("ℹ️  No files to process.", fg="blue"))
        return

    if verbosity > 0 and fmt == OutputFormat.DEFAULT and not to_stdout:
        console.print(console.styled(f"🔍 Processing {len(file_list)} file(s):", fg="blue"))

    results: list[ExpansionResult] = [expand_file(path, config=config) for path in file_list]

    if to_stdout:
        emit_diagnostics(results[0].diagnostics)
        console.print(results[0].expanded, nl=False)
    elif fmt.is_machine:
        emit_results_machine(config, results, fmt)
    else:
        for r in results:
            emit_diagnostics(r.diagnostics)
        if verbosity >= 0:
            render_per_file_guidance(
                console, results, apply_changes=apply_changes, verbosity=verbosity
            )
        if diff:
            emit_diffs(results)

    if apply_changes:
        written, failed = write_changed_files(results)
        if fmt == OutputFormat.DEFAULT and verbosity >= 0:
            msg = f"✅ Applied changes to {written} file(s)." if written else "✅ No changes to apply."
            console.print(console.styled(msg, fg="green", bold=True))
        if failed:
            raise LoggableIOError(f"Failed to write {failed} file(s). See log for details.")

    # Exit code policy: I/O errors, then template errors, then pending changes.
    unreadable: list[ExpansionResult] = [r for r in results if r.read_error is not None]
    if unreadable:
        raise LoggableIOError(
            "Could not read: " + ", ".join(f"{r.path} ({r.read_error})" for r in unreadable)
        )
    n_errors: int = sum(r.diagnostics.stats().n_error for r in results)
    if n_errors:
        n_files: int = sum(1 for r in results if r.has_errors)
        raise LoggableTemplateError(
            f"{n_errors} call site(s) could not be expanded in {n_files} file(s)."
        )
    if not apply_changes and not to_stdout and any(r.changed for r in results):
        ctx.exit(ExitCode.WOULD_CHANGE)
