# topmark:header:start
#
#   project      : Loggable
#   file         : version.py
#   file_relpath : src/loggable/cli/commands/version.py
#   license      : MIT
#   copyright    : (c) 2025 The Loggable Authors
#
# topmark:header:end

"""Loggable `version` command.

Prints the current Loggable version as installed in the active Python environment.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from loggable.cli.cli_types import EnumChoiceParam
from loggable.cli.utils import OutputFormat
from loggable.constants import LOGGABLE_VERSION

if TYPE_CHECKING:
    from loggable.cli.console_api import ConsoleLike


@click.command(
    name="version",
    help="Show the current version of Loggable.",
)
@click.option(
    "--format",
    "output_format",
    type=EnumChoiceParam(OutputFormat),
    default=None,
    help=f"Output format ({', '.join(v.value for v in OutputFormat)}).",
)
def version_command(
    *,
    output_format: OutputFormat | None = None,
) -> None:
    """Show the current version of Loggable.

    Args:
        output_format (OutputFormat | None): Optional output format (plain text or JSON).
    """
    ctx = click.get_current_context()
    ctx.ensure_object(dict)
    console: ConsoleLike = ctx.obj["console"]

    # Determine effective program-output verbosity for gating extra details
    vlevel: int = int(ctx.obj.get("verbosity_level", 0))

    fmt: OutputFormat = output_format or OutputFormat.DEFAULT
    if fmt.is_machine:
        import json

        console.print(json.dumps({"version": LOGGABLE_VERSION}))
    elif vlevel > 0:
        console.print(console.styled("Loggable version:\n", bold=True, underline=True))
        console.print(f"    {console.styled(LOGGABLE_VERSION, bold=True)}")
    else:
        console.print(console.styled(LOGGABLE_VERSION, bold=True))
