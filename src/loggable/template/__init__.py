# topmark:header:start
#
#   project      : Loggable
#   file         : __init__.py
#   file_relpath : src/loggable/template/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 The Loggable Authors
#
# topmark:header:end

"""Template model, parser and compiler.

Design:
    - The parser turns a Python string literal or f-string into a `Template`.
    - The compiler turns a `Template` and a `Severity` into a `CompiledCall`.
    - `render_call` renders a `CompiledCall` as Python source.
"""

from __future__ import annotations

from loggable.template.compiler import (
    DEFAULT_MARKER,
    PUBLIC_MARKER,
    compile_template,
    escape_literal,
    render_call,
)
from loggable.template.errors import TemplateCompileError, TemplateError, TemplateParseError
from loggable.template.model import (
    CompiledCall,
    LiteralSegment,
    Modifier,
    PlaceholderSegment,
    Segment,
    Severity,
    SourceExpression,
    SourceSpan,
    Template,
)
from loggable.template.parser import parse_template, parse_template_source

__all__ = [
    "DEFAULT_MARKER",
    "PUBLIC_MARKER",
    "CompiledCall",
    "LiteralSegment",
    "Modifier",
    "PlaceholderSegment",
    "Segment",
    "Severity",
    "SourceExpression",
    "SourceSpan",
    "Template",
    "TemplateCompileError",
    "TemplateError",
    "TemplateParseError",
    "compile_template",
    "escape_literal",
    "parse_template",
    "parse_template_source",
    "render_call",
]
