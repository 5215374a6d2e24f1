# topmark:header:start
#
#   project      : Loggable
#   file         : errors.py
#   file_relpath : src/loggable/template/errors.py
#   license      : MIT
#   copyright    : (c) 2025 The Loggable Authors
#
# topmark:header:end

"""Exceptions raised while parsing or compiling a template.

Both carry the span of the offending source so the call-site expander can
attribute a diagnostic to it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from loggable.template.model import SourceSpan


class TemplateError(Exception):
    """Base class for template errors."""

    def __init__(self, message: str, span: SourceSpan | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.span = span

    def __str__(self) -> str:
        if self.span is None:
            return self.message
        return f"{self.span}: {self.message}"


class TemplateParseError(TemplateError):
    """The template is malformed (rejected before compilation)."""


class TemplateCompileError(TemplateError):
    """The compiler was handed a template that breaks its input contract."""
