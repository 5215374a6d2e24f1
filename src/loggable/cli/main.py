# topmark:header:start
#
#   project      : Loggable
#   file         : main.py
#   file_relpath : src/loggable/cli/main.py
#   license      : MIT
#   copyright    : (c) 2025 The Loggable Authors
#
# topmark:header:end

"""Click entry point for the Loggable CLI.

Key ideas:
- Group-level options (verbosity, color) are initialized once and placed into ``ctx.obj``.
- Subcommands read the shared console and verbosity from ``ctx.obj``.
- Errors that are not `click.ClickException` are reported as unexpected (exit code 255).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from loggable.cli.commands.compile import compile_command
from loggable.cli.commands.expand import expand_command
from loggable.cli.commands.version import version_command
from loggable.cli.console import ClickConsole
from loggable.cli.errors import LoggableUnexpectedError

# --- We use a module import here instead of relative import
from loggable.cli.options import (
    CONTEXT_SETTINGS,
    ColorMode,
    common_color_options,
    common_verbose_options,
    resolve_color_mode,
    resolve_verbosity,
)
from loggable.config.logging import get_logger, resolve_env_log_level, setup_logging

if TYPE_CHECKING:
    from loggable.cli.console_api import ConsoleLike

logger = get_logger(__name__)


class LoggableGroup(click.Group):
    """Click group that reports unhandled exceptions as `LoggableUnexpectedError`."""

    def invoke(self, ctx: click.Context) -> Any:
        """Invoke the group, wrapping unexpected exceptions."""
        try:
            return super().invoke(ctx)
        except (click.exceptions.Exit, click.ClickException, click.Abort, KeyboardInterrupt):
            raise
        except Exception as exc:
            logger.debug("Unhandled exception", exc_info=True)
            raise LoggableUnexpectedError(f"{type(exc).__name__}: {exc}") from exc


def init_common_state(
    ctx: click.Context,
    *,
    verbose: int,
    quiet: int,
    color_mode: ColorMode | None,
    no_color: bool,
) -> None:
    """Initialize shared state (verbosity & color) on the Click context.

    Args:
        ctx (click.Context): Current Click context; will have ``obj`` and ``color`` set.
        verbose (int): Count of ``-v`` flags (0..2).
        quiet (int): Count of ``-q`` flags (0..2).
        color_mode (ColorMode | None): Explicit color mode from ``--color`` (or ``None``).
        no_color (bool): Whether ``--no-color`` was passed; forces color off.
    """
    ctx.obj = ctx.obj or {}

    # Configure program-output verbosity:
    level_cli = resolve_verbosity(verbose, quiet)
    ctx.obj["verbosity_level"] = level_cli

    # Configure internal logging via env:
    level_env = resolve_env_log_level()
    ctx.obj["log_level"] = level_env
    setup_logging(level=level_env)

    effective_color_mode = ColorMode.NEVER if no_color else (color_mode or ColorMode.AUTO)
    enable_color = resolve_color_mode(cli_mode=effective_color_mode, output_format=None)
    ctx.obj["color_enabled"] = enable_color
    ctx.color = enable_color

    console = ClickConsole(enable_color=enable_color)
    ctx.obj["console"] = console


@click.group(
    cls=LoggableGroup,
    context_settings=CONTEXT_SETTINGS,
    invoke_without_command=True,  # Always invoke the cli() function
    help="Loggable CLI: expand log_* template calls into logging backend calls.",
)
@common_verbose_options
@common_color_options
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: int,
    quiet: int,
    color_mode: str | None,
    no_color: bool,
) -> None:
    """Entry point for the Loggable CLI."""
    # Initialize verbosity and color state once for all subcommands
    init_common_state(
        ctx,
        verbose=verbose,
        quiet=quiet,
        color_mode=ColorMode(color_mode) if color_mode else None,
        no_color=no_color,
    )
    console: ConsoleLike = ctx.obj["console"]

    if ctx.invoked_subcommand is None:
        console.print("Hint: use 'loggable expand [PATHS...]' to preview call-site expansion.")
        console.print()
        console.print(ctx.get_help())


cli.add_command(version_command)

cli.add_command(compile_command)

cli.add_command(expand_command)

if __name__ == "__main__":
    cli()
