# topmark:header:start
#
#   project      : Loggable
#   file         : parser.py
#   file_relpath : src/loggable/template/parser.py
#   license      : MIT
#   copyright    : (c) 2025 The Loggable Authors
#
# topmark:header:end

"""Build a `Template` from a Python string literal or f-string.

Templates are written as ordinary f-strings. The format spec of a replacement
field selects the display policy:

    log_info(f"User {name:public} logged in, session {token}")

* ``{expr}``: default policy (the backend redacts the value);
* ``{expr:public}``: the value is shown.

Everything else a replacement field can carry is rejected here, before the
compiler sees the template: other format specs, nested specs and conversions
(``!r``, ``!s``, ``!a``). A bare ``=`` specifier (``{x=}``) implies ``!r`` and
is rejected with it. ``{x=:public}`` carries no conversion and is
indistinguishable in the AST from ``x={x:public}``, so it is accepted as the
literal ``x=`` followed by a public placeholder.
"""

from __future__ import annotations

import ast
from typing import TYPE_CHECKING

from loggable.config.logging import get_logger
from loggable.constants import PUBLIC_MODIFIER
from loggable.template.errors import TemplateParseError
from loggable.template.model import (
    LiteralSegment,
    Modifier,
    PlaceholderSegment,
    SourceExpression,
    SourceSpan,
    Template,
)

if TYPE_CHECKING:
    from loggable.config.logging import LoggableLogger
    from loggable.template.model import Segment

logger: LoggableLogger = get_logger(__name__)


def span_of(node: ast.AST, path: str, fallback: SourceSpan | None = None) -> SourceSpan | None:
    """Return the source span of an AST node, or ``fallback`` if it has no position."""
    lineno: int | None = getattr(node, "lineno", None)
    if lineno is None:
        return fallback
    return SourceSpan(
        path=path,
        line=lineno,
        column=getattr(node, "col_offset", 0),
        end_line=getattr(node, "end_lineno", None),
        end_column=getattr(node, "end_col_offset", None),
    )


def expression_text(node: ast.expr, source: str | None) -> str:
    """Return the source text of an interpolated expression.

    The exact source segment is preferred so the generated call reads like
    the original. It is only used when it parses back to the same AST;
    otherwise the expression is unparsed.
    """
    if source:
        segment: str | None = ast.get_source_segment(source, node)
        if segment and segment.strip():
            try:
                reparsed = ast.parse(f"({segment})", mode="eval").body
            except SyntaxError:
                reparsed = None
            if reparsed is not None and ast.dump(reparsed) == ast.dump(node):
                return segment
            logger.trace("Source segment %r does not match its node; unparsing", segment)
    return ast.unparse(node)


def _modifier_from_spec(
    spec: ast.expr | None,
    span: SourceSpan | None,
) -> Modifier | None:
    """Resolve the format spec of a replacement field to a modifier.

    Raises:
        TemplateParseError: If the spec is nested or names anything but ``public``.
    """
    if spec is None:
        return None
    if not isinstance(spec, ast.JoinedStr):
        raise TemplateParseError("unsupported format specifier", span)

    text_parts: list[str] = []
    for part in spec.values:
        if isinstance(part, ast.Constant) and isinstance(part.value, str):
            text_parts.append(part.value)
        else:
            raise TemplateParseError(
                "nested replacement fields are not allowed in a placeholder modifier",
                span,
            )
    text = "".join(text_parts)
    if not text:
        return None
    if text == PUBLIC_MODIFIER:
        return Modifier.PUBLIC
    raise TemplateParseError(
        f"unknown placeholder modifier {text!r} (only {PUBLIC_MODIFIER!r} is supported)",
        span,
    )


def _placeholder(
    node: ast.FormattedValue,
    *,
    source: str | None,
    path: str,
    fallback: SourceSpan | None,
) -> PlaceholderSegment:
    span = span_of(node.value, path, fallback)
    if node.conversion != -1:
        raise TemplateParseError(
            f"conversion '!{chr(node.conversion)}' is not supported in a log message "
            "(the '=' specifier implies '!r')",
            span,
        )
    modifier = _modifier_from_spec(node.format_spec, span)
    return PlaceholderSegment(
        expression=SourceExpression(text=expression_text(node.value, source), span=span),
        modifier=modifier,
    )


def parse_template(
    node: ast.expr,
    *,
    source: str | None = None,
    path: str = "<string>",
) -> Template:
    """Build a template from the AST of a string literal or f-string.

    Args:
        node (ast.expr): The template argument of a call site.
        source (str | None): Source text the node was parsed from. Used to keep
            the original spelling of interpolated expressions.
        path (str): File name used in spans.

    Returns:
        Template: The parsed template.

    Raises:
        TemplateParseError: If the node is not a string literal or f-string, or a
            replacement field uses an unsupported conversion or modifier.
    """
    template_span = span_of(node, path)

    if isinstance(node, ast.Constant):
        if not isinstance(node.value, str):
            kind = type(node.value).__name__
            raise TemplateParseError(
                f"log message must be a string literal or f-string, not a {kind} literal",
                template_span,
            )
        literal: tuple[Segment, ...] = (LiteralSegment(node.value),) if node.value else ()
        return Template(segments=literal, span=template_span)

    if not isinstance(node, ast.JoinedStr):
        raise TemplateParseError(
            "log message must be a string literal or f-string "
            f"(got {type(node).__name__} expression)",
            template_span,
        )

    segments: list[Segment] = []
    for part in node.values:
        if isinstance(part, ast.Constant) and isinstance(part.value, str):
            if part.value:
                segments.append(LiteralSegment(part.value))
        elif isinstance(part, ast.FormattedValue):
            segments.append(
                _placeholder(part, source=source, path=path, fallback=template_span)
            )
        else:
            raise TemplateParseError(
                f"unexpected f-string part: {type(part).__name__}",
                span_of(part, path, template_span),
            )

    template = Template(segments=tuple(segments), span=template_span)
    logger.trace("Parsed template at %s: %d segment(s)", template_span, len(template))
    return template


def parse_template_source(text: str, *, path: str = "<string>") -> Template:
    """Parse a template written as Python source, e.g. ``'f"Count: {x}"'``.

    Args:
        text (str): A Python string literal or f-string expression.
        path (str): File name used in spans.

    Returns:
        Template: The parsed template.

    Raises:
        TemplateParseError: If ``text`` is not valid Python or not a template.
    """
    try:
        tree = ast.parse(text.strip(), filename=path, mode="eval")
    except SyntaxError as exc:
        span = SourceSpan(path=path, line=exc.lineno or 1, column=max((exc.offset or 1) - 1, 0))
        raise TemplateParseError(f"invalid template syntax: {exc.msg}", span) from exc
    return parse_template(tree.body, source=text.strip(), path=path)
