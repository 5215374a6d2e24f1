# topmark:header:start
#
#   project      : Loggable
#   file         : compiler.py
#   file_relpath : src/loggable/template/compiler.py
#   license      : MIT
#   copyright    : (c) 2025 The Loggable Authors
#
# topmark:header:end

"""Template compiler: ``Template + Severity -> CompiledCall``.

The compiler walks the segments once, left to right:

* literal text is appended to the format string (``%`` doubled unless
  ``escape_percent`` is off);
* each placeholder appends one marker, ``%s`` or ``%{public}s``, and its
  expression to the argument list.

It never evaluates or inspects the expressions. The only failure path is a
template that breaks the parser's guarantees, reported as
`TemplateCompileError` with the offending span; no partial output is returned.

`render_call` turns a `CompiledCall` into the Python source of the generated
backend call.
"""

from __future__ import annotations

import ast
from typing import TYPE_CHECKING

from loggable.config.logging import get_logger
from loggable.constants import PUBLIC_MODIFIER
from loggable.template.errors import TemplateCompileError
from loggable.template.model import (
    CompiledCall,
    LiteralSegment,
    Modifier,
    PlaceholderSegment,
    Severity,
)

if TYPE_CHECKING:
    from loggable.config.logging import LoggableLogger
    from loggable.template.model import SourceExpression, SourceSpan, Template

logger: LoggableLogger = get_logger(__name__)

DEFAULT_MARKER: str = "%s"
PUBLIC_MARKER: str = "%{" + PUBLIC_MODIFIER + "}s"


def escape_literal(text: str) -> str:
    """Return ``text`` with ``%`` doubled so it survives printf-style rendering."""
    return text.replace("%", "%%")


def format_marker(placeholder: PlaceholderSegment, span: SourceSpan | None = None) -> str:
    """Return the format marker for a placeholder.

    Args:
        placeholder (PlaceholderSegment): The placeholder to render.
        span (SourceSpan | None): Fallback span for errors when the expression has none.

    Returns:
        str: ``%{public}s`` for public placeholders, ``%s`` otherwise.

    Raises:
        TemplateCompileError: If the modifier is not a member of `Modifier`.
    """
    modifier = placeholder.modifier
    if modifier is None:
        return DEFAULT_MARKER
    if modifier is Modifier.PUBLIC:
        return PUBLIC_MARKER
    raise TemplateCompileError(
        f"unknown placeholder modifier {modifier!r}",
        placeholder.expression.span or span,
    )


def compile_template(
    template: Template,
    severity: Severity | str,
    *,
    escape_percent: bool = True,
) -> CompiledCall:
    """Compile a template into a format string and an ordered argument list.

    Args:
        template (Template): The parsed template.
        severity (Severity | str): Severity of the entry point; passed through unchanged.
        escape_percent (bool): Double ``%`` in literal text (default: True).

    Returns:
        CompiledCall: Severity, format string and arguments.

    Raises:
        TemplateCompileError: If the severity is unknown, a segment is neither a
            literal nor a placeholder, a placeholder has no expression, or a
            modifier is outside the `Modifier` enumeration.
    """
    try:
        level = Severity(severity)
    except ValueError:
        raise TemplateCompileError(f"unknown severity {severity!r}", template.span) from None

    parts: list[str] = []
    arguments: list[SourceExpression] = []

    for index, segment in enumerate(template.segments):
        if isinstance(segment, LiteralSegment):
            parts.append(escape_literal(segment.text) if escape_percent else segment.text)
        elif isinstance(segment, PlaceholderSegment):
            expression = segment.expression
            if expression is None or not expression.text.strip():
                raise TemplateCompileError(
                    f"placeholder #{len(arguments) + 1} has no expression",
                    (expression.span if expression is not None else None) or template.span,
                )
            parts.append(format_marker(segment, template.span))
            arguments.append(expression)
        else:
            raise TemplateCompileError(
                f"segment {index} is neither literal text nor a placeholder: {segment!r}",
                template.span,
            )

    compiled = CompiledCall(severity=level, format="".join(parts), arguments=tuple(arguments))
    logger.trace(
        "Compiled %s template: %r with %d argument(s)",
        level.value,
        compiled.format,
        len(compiled.arguments),
    )
    return compiled


def _as_call_argument(text: str) -> str:
    """Return ``text`` in a form that is safe as one argument of a call.

    Bare generator expressions, ``yield`` and similar forms need parentheses
    when they are not the only argument.
    """
    try:
        expected = ast.dump(ast.parse(f"({text})", mode="eval").body)
    except SyntaxError:
        return f"({text})"
    try:
        parsed = ast.parse(f"_f(_a, {text})", mode="eval").body
    except SyntaxError:
        return f"({text})"
    if (
        isinstance(parsed, ast.Call)
        and len(parsed.args) == 2
        and not parsed.keywords
        and ast.dump(parsed.args[1]) == expected
    ):
        return text
    return f"({text})"


def render_call(
    compiled: CompiledCall,
    *,
    emit_name: str,
    logger_expr: str,
) -> str:
    """Render the generated backend call as Python source.

    The call has the shape ``emit_name(severity, logger, format, arg_1, ..., arg_n)``.

    Args:
        compiled (CompiledCall): Compiler output.
        emit_name (str): Local name bound to the runtime ``emit`` function.
        logger_expr (str): Source of the logger expression.

    Returns:
        str: The call expression source.
    """
    pieces: list[str] = [
        repr(compiled.severity.value),
        _as_call_argument(logger_expr),
        repr(compiled.format),
    ]
    pieces.extend(_as_call_argument(arg.text) for arg in compiled.arguments)
    return f"{emit_name}({', '.join(pieces)})"
