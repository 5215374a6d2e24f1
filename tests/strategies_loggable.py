# topmark:header:start
#
#   project      : Loggable
#   file         : strategies_loggable.py
#   file_relpath : tests/strategies_loggable.py
#   license      : MIT
#   copyright    : (c) 2025 The Loggable Authors
#
# topmark:header:end

# pyright: strict

"""Hypothesis strategies for generating templates and the modules that use them.

These strategies keep literal text free of quotes, braces and backslashes so a
generated template can also be written out as an f-string in Python source.
"""

from __future__ import annotations

import keyword
import os
from collections.abc import Callable
from typing import Any

from hypothesis import settings
from hypothesis import strategies as st

from loggable.template import (
    LiteralSegment,
    Modifier,
    PlaceholderSegment,
    Segment,
    Severity,
    SourceExpression,
    Template,
)

Draw = Callable[[st.SearchStrategy[Any]], Any]

# Overridden by the `property_test` nox session for long runs
MAX_EXAMPLES: int = int(os.environ.get("LOGGABLE_HYPOTHESIS_EXAMPLES", "100"))

settings.register_profile("loggable", max_examples=MAX_EXAMPLES, deadline=None)
settings.load_profile("loggable")

BLACKLIST_CATEGORIES: tuple[str, ...] = ("Cs", "Cc")

# Literal text that can be embedded in a double-quoted f-string as is
SAFE_LITERAL_ALPHABET: st.SearchStrategy[str] = st.characters(
    exclude_categories=BLACKLIST_CATEGORIES,  # type: ignore[arg-type]
    exclude_characters='"\\{}',
)

identifiers: st.SearchStrategy[str] = st.from_regex(
    r"[a-z_][a-z0-9_]{0,7}", fullmatch=True
).filter(lambda s: not keyword.iskeyword(s))

severities: st.SearchStrategy[Severity] = st.sampled_from(list(Severity))

literal_texts: st.SearchStrategy[str] = st.text(SAFE_LITERAL_ALPHABET, min_size=1, max_size=12)


@st.composite
def placeholders(draw: Draw) -> PlaceholderSegment:
    """Draw a placeholder over a plain identifier, public or not."""
    name: str = draw(identifiers)
    modifier: Modifier | None = draw(st.sampled_from([None, Modifier.PUBLIC]))
    return PlaceholderSegment(expression=SourceExpression(name), modifier=modifier)


@st.composite
def templates(draw: Draw, max_segments: int = 8) -> Template:
    """Draw a template with literal text merged the way the parser would merge it.

    Adjacent literal segments never occur in parsed templates, so consecutive
    literals are joined.
    """
    raw: list[Segment] = draw(
        st.lists(st.one_of(literal_texts.map(LiteralSegment), placeholders()), max_size=max_segments)
    )
    segments: list[Segment] = []
    for seg in raw:
        if (
            isinstance(seg, LiteralSegment)
            and segments
            and isinstance(segments[-1], LiteralSegment)
        ):
            segments[-1] = LiteralSegment(segments[-1].text + seg.text)
        else:
            segments.append(seg)
    return Template(segments=tuple(segments))


def template_source(template: Template) -> str:
    """Return ``template`` written as an f-string literal."""
    parts: list[str] = []
    for seg in template.segments:
        if isinstance(seg, LiteralSegment):
            parts.append(seg.text)
        else:
            spec: str = ":public" if seg.is_public else ""
            parts.append("{" + seg.expression.text + spec + "}")
    return 'f"' + "".join(parts) + '"'


def literal_text(template: Template) -> str:
    """Return the concatenated literal text of ``template``."""
    return "".join(s.text for s in template.segments if isinstance(s, LiteralSegment))
