# topmark:header:start
#
#   project      : Loggable
#   file         : options.py
#   file_relpath : src/loggable/cli/options.py
#   license      : MIT
#   copyright    : (c) 2025 The Loggable Authors
#
# topmark:header:end

"""Common CLI option utilities for the Click-based Loggable CLI.

This module centralizes reusable options (verbosity, color, config, expansion
settings, file filters) and their resolution logic, so commands and groups can
stay thin. The helpers here are Click-aware.
"""

from __future__ import annotations

import os
import sys
from enum import Enum
from typing import Callable, ParamSpec, TypeVar

import click
from click.core import ParameterSource

from loggable.cli.errors import LoggableUsageError
from loggable.config.logging import get_logger

P = ParamSpec("P")
R = TypeVar("R")

logger = get_logger(__name__)


def resolve_verbosity(verbose_count: int, quiet_count: int) -> int:
    """Resolve the program-output verbosity from ``-v`` and ``-q`` counts.

    Args:
        verbose_count: Number of times the verbose flag (-v) is passed.
        quiet_count: Number of times the quiet flag (-q) is passed.

    Returns:
        The verbosity: ``0`` by default, positive with ``-v``, negative with ``-q``.

    Raises:
        LoggableUsageError: If both verbose and quiet flags are used simultaneously.
    """
    if verbose_count > 0 and quiet_count > 0:
        raise LoggableUsageError("The '--verbose' and '--quiet' options are mutually exclusive.")
    return verbose_count - quiet_count


#: Click context settings shared by all commands.
CONTEXT_SETTINGS = {
    "help_option_names": ["-h", "--help"],
}


def common_verbose_options(f: Callable[P, R]) -> Callable[P, R]:
    """Adds --verbose and --quiet options to a command.

    Args:
        f: The Click command function to decorate.

    Returns:
        The decorated function with verbosity options added.
    """
    f = click.option(
        "-v",
        "--verbose",
        count=True,
        help="Increase verbosity. Specify up to twice for more detail.",
    )(f)
    f = click.option(
        "-q",
        "--quiet",
        count=True,
        help="Suppress output. Specify up to twice for even less.",
    )(f)
    return f


class ColorMode(str, Enum):
    """User intent for colorized terminal output."""

    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"


def resolve_color_mode(
    *,
    cli_mode: ColorMode | None,
    output_format: str | None,
    stdout_isatty: bool | None = None,
) -> bool:
    """Determine whether color output should be enabled.

    Args:
        cli_mode: Explicit color mode from CLI options (auto, always, never).
        output_format: Output format string, e.g. "json", "ndjson".
        stdout_isatty: Whether stdout is a TTY; if None, auto-detected.

    Returns:
        True if color output should be enabled, False otherwise.

    Behavior:
        Disables color for JSON/NDJSON output formats.
        Honors --color and --no-color CLI flags.
        Honors FORCE_COLOR and NO_COLOR environment variables.
        Defaults to enabling color if stdout is a TTY.
    """
    if output_format and output_format.lower() in {"json", "ndjson"}:
        return False
    if cli_mode == ColorMode.ALWAYS:
        return True
    if cli_mode == ColorMode.NEVER:
        return False
    force_color = os.getenv("FORCE_COLOR")
    if force_color and force_color != "0":
        return True
    if os.getenv("NO_COLOR") is not None:
        return False
    if stdout_isatty is None:
        try:
            stdout_isatty = sys.stdout.isatty()
        except (AttributeError, ValueError):
            stdout_isatty = False
    return bool(stdout_isatty)


def common_color_options(f: Callable[P, R]) -> Callable[P, R]:
    """Adds --color and --no-color options to a command.

    Args:
        f: The Click command function to decorate.

    Returns:
        The decorated function with color options added.
    """
    f = click.option(
        "--color",
        "color_mode",
        type=click.Choice([m.value for m in ColorMode]),
        default=None,
        help="Color output: auto (default), always, or never.",
    )(f)
    f = click.option(
        "--no-color",
        "no_color",
        is_flag=True,
        help="Disable color output (equivalent to --color=never).",
    )(f)
    return f


def common_config_options(f: Callable[P, R]) -> Callable[P, R]:
    """Apply config discovery options (``--config``, ``--no-config``).

    Args:
        f: The Click command function to decorate.

    Returns:
        The decorated function.
    """
    f = click.option(
        "--config",
        "-c",
        "config_paths",
        multiple=True,
        metavar="FILE",
        help="Merge this config file (loggable.toml or pyproject.toml) after discovery. "
        "May be repeated.",
    )(f)
    f = click.option(
        "--no-config",
        "no_config",
        is_flag=True,
        help="Skip config discovery (explicit --config files are still merged).",
    )(f)
    f = underscored_trap_option("--no_config", flag=True)(f)
    return f


def common_expansion_options(f: Callable[P, R]) -> Callable[P, R]:
    """Apply options that override the ``[expand]`` config table.

    Args:
        f: The Click command function to decorate.

    Returns:
        The decorated function.
    """
    f = click.option(
        "--logger",
        "logger_expr",
        metavar="EXPR",
        default=None,
        help="Logger expression used by calls without 'logger=' (default: logger).",
    )(f)
    f = click.option(
        "--emit-name",
        "emit_name",
        metavar="NAME",
        default=None,
        help="Local name the runtime emit function is imported as (default: _loggable_emit).",
    )(f)
    f = underscored_trap_option("--emit_name")(f)
    f = click.option(
        "--escape-percent/--no-escape-percent",
        "escape_percent",
        default=None,
        help="Escape '%' in literal message text as '%%' (default: on).",
    )(f)
    return f


def common_file_filtering_options(f: Callable[P, R]) -> Callable[P, R]:
    """Apply ``--include`` and ``--exclude`` filter options.

    Args:
        f: The Click command function to decorate.

    Returns:
        The decorated function.
    """
    f = click.option(
        "--include",
        "-i",
        "include_patterns",
        multiple=True,
        help="Filter: keep only files matching these patterns (intersection).",
    )(f)
    f = click.option(
        "--exclude",
        "-e",
        "exclude_patterns",
        multiple=True,
        help="Filter: remove files matching these patterns (subtraction).",
    )(f)
    return f


def trap_underscored_option(ctx: click.Context, param: click.Parameter, _value: object) -> None:
    """Raise a helpful error for underscored long options (e.g., --emit_name).

    Runs during option parsing (is_eager=True) so we can show a friendly hint
    instead of the generic "No such option" error.
    """
    name = getattr(param, "name", None)
    src = ctx.get_parameter_source(name) if name else None
    if src is not ParameterSource.COMMANDLINE:
        return

    bad = param.opts[0] if param.opts else "--?"
    suggestion = bad.replace("_", "-")
    raise LoggableUsageError(f"Unknown option: {bad}. Did you mean {suggestion}?")


def underscored_trap_option(
    *names: str, flag: bool = False
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Register hidden underscored spellings that raise a helpful error.

    The hidden option gets a unique destination name so Click's parameter
    source tracking does not overlap with the real option's destination.

    Args:
        *names: One or more underscored long option names to trap,
            e.g. "--emit_name".
        flag: Trap a flag (no value) instead of an option taking a value.

    Returns:
        A decorator compatible with Click's option stacking.
    """
    if not names:
        raise ValueError("underscored_trap_option requires at least one option name")

    first = names[0]
    dest = f"_trap_{first.lstrip('-').replace('-', '_')}"

    return click.option(
        *names,
        dest,
        hidden=True,
        expose_value=False,
        is_eager=True,
        is_flag=flag,
        multiple=not flag,
        callback=trap_underscored_option,
    )
