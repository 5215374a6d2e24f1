# topmark:header:start
#
#   project      : Loggable
#   file         : compile.py
#   file_relpath : src/loggable/cli/commands/compile.py
#   license      : MIT
#   copyright    : (c) 2025 The Loggable Authors
#
# topmark:header:end

"""Loggable `compile` command.

Compiles a single template, written as a Python string literal or f-string,
and prints the resulting format string and argument list.

Examples:
  $ loggable compile 'f"User {name:public} logged in with {token}"' --severity info
  format:    User %{public}s logged in with %s
  arguments: name, token
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import click

from loggable.cli.cli_types import EnumChoiceParam
from loggable.cli.errors import LoggableTemplateError
from loggable.cli.utils import OutputFormat
from loggable.constants import DEFAULT_EMIT_NAME, DEFAULT_LOGGER_EXPR
from loggable.template import (
    Severity,
    TemplateError,
    compile_template,
    parse_template_source,
    render_call,
)

if TYPE_CHECKING:
    from loggable.cli.console_api import ConsoleLike
    from loggable.template import CompiledCall, Template


@click.command(
    name="compile",
    help="Compile one template into a format string and its arguments.",
)
@click.argument("template_text", metavar="TEMPLATE")
@click.option(
    "--severity",
    "-s",
    type=EnumChoiceParam(Severity),
    required=True,
    help=f"Severity of the call ({', '.join(v.value for v in Severity)}).",
)
@click.option(
    "--escape-percent/--no-escape-percent",
    "escape_percent",
    default=True,
    help="Escape '%' in literal text as '%%' (default: on).",
)
@click.option(
    "--format",
    "output_format",
    type=EnumChoiceParam(OutputFormat),
    default=None,
    help=f"Output format ({', '.join(v.value for v in OutputFormat)}).",
)
def compile_command(
    *,
    template_text: str,
    severity: Severity,
    escape_percent: bool,
    output_format: OutputFormat | None,
) -> None:
    """Compile one template and print the result.

    Args:
        template_text (str): The template as Python source, e.g. ``'f"Count: {x}"'``.
        severity (Severity): Severity of the call.
        escape_percent (bool): Double ``%`` in literal text.
        output_format (OutputFormat | None): ``default``, ``json`` or ``ndjson``.

    Raises:
        LoggableTemplateError: If the template cannot be parsed or compiled.
    """
    ctx = click.get_current_context()
    ctx.ensure_object(dict)
    console: ConsoleLike = ctx.obj["console"]
    vlevel: int = int(ctx.obj.get("verbosity_level", 0))

    try:
        template: Template = parse_template_source(template_text, path="<template>")
        compiled: CompiledCall = compile_template(
            template, severity, escape_percent=escape_percent
        )
    except TemplateError as exc:
        raise LoggableTemplateError(str(exc)) from exc

    call: str = render_call(
        compiled, emit_name=DEFAULT_EMIT_NAME, logger_expr=DEFAULT_LOGGER_EXPR
    )

    fmt: OutputFormat = output_format or OutputFormat.DEFAULT
    if fmt.is_machine:
        console.print(json.dumps({**compiled.to_dict(), "call": call}))
        return

    console.print(f"format:    {compiled.format}")
    console.print(f"arguments: {', '.join(compiled.argument_texts)}")
    if vlevel > 0:
        console.print(console.styled(f"call:      {call}", fg="white", italic=True))
