# topmark:header:start
#
#   project      : Loggable
#   file         : model.py
#   file_relpath : src/loggable/template/model.py
#   license      : MIT
#   copyright    : (c) 2025 The Loggable Authors
#
# topmark:header:end

"""Data model for loggable message templates.

A template is the structured form of one log message: an ordered sequence of
literal text and interpolated expressions. The parser builds it from source,
the compiler consumes it exactly once, and the resulting `CompiledCall` is
re-emitted as the replacement call.

Sections:
    * Severity: the five log levels, one per entry point.
    * Modifier: the display-policy annotation of a placeholder.
    * SourceSpan / SourceExpression: opaque source text with its location.
    * LiteralSegment / PlaceholderSegment: the two segment variants.
    * Template: the ordered segment sequence.
    * CompiledCall: compiler output (severity, format string, arguments).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from collections.abc import Iterator


class Severity(str, Enum):
    """Severity of a generated log call.

    The value is the name used in generated code and by the runtime backend.
    """

    DEBUG = "debug"
    INFO = "info"
    NOTICE = "notice"
    ERROR = "error"
    FAULT = "fault"

    @property
    def entry_point(self) -> str:
        """Return the name of the entry point that logs at this severity."""
        return f"log_{self.value}"

    @classmethod
    def from_entry_point(cls, name: str) -> Severity | None:
        """Return the severity for an entry point name, or None if ``name`` is not one."""
        for severity in cls:
            if severity.entry_point == name:
                return severity
        return None


class Modifier(str, Enum):
    """Display-policy override attached to a placeholder.

    A placeholder without a modifier uses the backend default policy, which
    redacts the value.
    """

    PUBLIC = "public"


@dataclass(frozen=True, slots=True)
class SourceSpan:
    """Location of a piece of source text.

    Attributes:
        path (str): File name or pseudo name (e.g. ``<string>``).
        line (int): 1-based start line.
        column (int): 0-based start column.
        end_line (int | None): 1-based end line, if known.
        end_column (int | None): 0-based end column, if known.
    """

    path: str
    line: int
    column: int
    end_line: int | None = None
    end_column: int | None = None

    def __str__(self) -> str:
        """Render as ``path:line:col`` (1-based column, editor style)."""
        return f"{self.path}:{self.line}:{self.column + 1}"


@dataclass(frozen=True, slots=True)
class SourceExpression:
    """An interpolated expression, carried as uninterpreted source text.

    The text is never evaluated by the compiler; it is re-emitted verbatim as
    an argument of the generated call.
    """

    text: str
    span: SourceSpan | None = None

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True, slots=True)
class LiteralSegment:
    """Verbatim template text."""

    text: str


@dataclass(frozen=True, slots=True)
class PlaceholderSegment:
    """A single interpolated value with an optional display-policy modifier."""

    expression: SourceExpression
    modifier: Modifier | None = None

    @property
    def is_public(self) -> bool:
        """Return True if this placeholder is explicitly marked public."""
        return self.modifier is Modifier.PUBLIC


Segment = Union[LiteralSegment, PlaceholderSegment]


@dataclass(frozen=True, slots=True)
class Template:
    """An ordered, immutable sequence of segments.

    Attributes:
        segments (tuple[Segment, ...]): Segments in source order.
        span (SourceSpan | None): Location of the whole template literal.
    """

    segments: tuple[Segment, ...] = ()
    span: SourceSpan | None = None

    @classmethod
    def of(cls, *segments: Segment, span: SourceSpan | None = None) -> Template:
        """Build a template from segments given positionally."""
        return cls(segments=tuple(segments), span=span)

    @property
    def placeholders(self) -> tuple[PlaceholderSegment, ...]:
        """Return the placeholder segments in source order."""
        return tuple(s for s in self.segments if isinstance(s, PlaceholderSegment))

    def __iter__(self) -> Iterator[Segment]:
        return iter(self.segments)

    def __len__(self) -> int:
        return len(self.segments)


@dataclass(frozen=True, slots=True)
class CompiledCall:
    """Output of the template compiler.

    ``format`` holds one marker per placeholder, in source order, interleaved
    with the literal text; ``arguments[i]`` belongs to the ``i``-th marker.
    """

    severity: Severity
    format: str
    arguments: tuple[SourceExpression, ...] = field(default_factory=tuple)

    @property
    def argument_texts(self) -> list[str]:
        """Return the argument source texts in positional order."""
        return [arg.text for arg in self.arguments]

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-friendly representation."""
        return {
            "severity": self.severity.value,
            "format": self.format,
            "arguments": self.argument_texts,
        }
