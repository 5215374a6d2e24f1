# topmark:header:start
#
#   project      : Loggable
#   file         : test_compiler_properties.py
#   file_relpath : tests/template/test_compiler_properties.py
#   license      : MIT
#   copyright    : (c) 2025 The Loggable Authors
#
# topmark:header:end

"""Property tests for the template compiler and its runtime counterpart."""

from __future__ import annotations

import re

from hypothesis import given
from hypothesis import strategies as st

from loggable.runtime import count_markers, render_message
from loggable.template import (
    LiteralSegment,
    Modifier,
    PlaceholderSegment,
    Severity,
    SourceExpression,
    Template,
    compile_template,
    parse_template_source,
)
from tests.conftest import parametrize
from tests.strategies_loggable import (
    literal_text,
    severities,
    template_source,
    templates,
)

_MARKER = re.compile(r"%%|%\{public\}s|%s")


def _ph(text: str, modifier: Modifier | None = None) -> PlaceholderSegment:
    return PlaceholderSegment(expression=SourceExpression(text), modifier=modifier)


@parametrize(
    ("template", "severity", "expected_format", "expected_args"),
    [
        (
            Template.of(LiteralSegment("Count: "), _ph("x")),
            Severity.DEBUG,
            "Count: %s",
            ["x"],
        ),
        (
            Template.of(
                LiteralSegment("User "), _ph("name", Modifier.PUBLIC), LiteralSegment(" logged in")
            ),
            Severity.INFO,
            "User %{public}s logged in",
            ["name"],
        ),
        (Template.of(LiteralSegment("static message")), Severity.FAULT, "static message", []),
        (
            Template.of(_ph("a"), LiteralSegment(","), _ph("b", Modifier.PUBLIC)),
            Severity.ERROR,
            "%s,%{public}s",
            ["a", "b"],
        ),
        (Template(), Severity.NOTICE, "", []),
    ],
)
def test_reference_scenarios(
    template: Template, severity: Severity, expected_format: str, expected_args: list[str]
) -> None:
    compiled = compile_template(template, severity)

    assert compiled.severity is severity
    assert compiled.format == expected_format
    assert compiled.argument_texts == expected_args


@given(templates(), severities)
def test_one_argument_per_placeholder_in_order(template: Template, severity: Severity) -> None:
    compiled = compile_template(template, severity)

    assert compiled.argument_texts == [p.expression.text for p in template.placeholders]
    assert count_markers(compiled.format) == len(template.placeholders)


@given(templates(), severities)
def test_modifiers_select_markers(template: Template, severity: Severity) -> None:
    compiled = compile_template(template, severity)
    markers: list[str] = [m for m in _MARKER.findall(compiled.format) if m != "%%"]

    assert markers == ["%{public}s" if p.is_public else "%s" for p in template.placeholders]


@given(templates(), severities)
def test_literal_text_passes_through(template: Template, severity: Severity) -> None:
    """Removing the markers and unescaping ``%%`` gives back the literal text."""
    compiled = compile_template(template, severity)

    def unescape(match: re.Match[str]) -> str:
        return "%" if match.group(0) == "%%" else ""

    assert _MARKER.sub(unescape, compiled.format) == literal_text(template)


@given(templates(), severities)
def test_compilation_is_deterministic(template: Template, severity: Severity) -> None:
    assert compile_template(template, severity) == compile_template(template, severity)


@given(templates())
def test_parsed_source_compiles_like_the_model(template: Template) -> None:
    """Writing a template as an f-string and parsing it back compiles identically."""
    parsed: Template = parse_template_source(template_source(template))

    expected = compile_template(template, Severity.INFO)
    actual = compile_template(parsed, Severity.INFO)

    assert actual.format == expected.format
    assert actual.argument_texts == expected.argument_texts


@given(templates(), st.data())
def test_runtime_renders_public_values_and_redacts_others(
    template: Template, data: st.DataObject
) -> None:
    compiled = compile_template(template, Severity.INFO)
    values: list[int] = [
        data.draw(st.integers(min_value=-1000, max_value=1000)) for _ in template.placeholders
    ]

    expected_parts: list[str] = []
    it = iter(values)
    for seg in template.segments:
        if isinstance(seg, LiteralSegment):
            expected_parts.append(seg.text)
        else:
            value = next(it)
            expected_parts.append(str(value) if seg.is_public else "<private>")

    assert render_message(compiled.format, values) == "".join(expected_parts)
    shown: str = render_message(compiled.format, values, show_private=True)
    assert "<private>" not in shown or "<private>" in literal_text(template)
