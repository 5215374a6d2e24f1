# topmark:header:start
#
#   project      : Loggable
#   file         : test_compiler.py
#   file_relpath : tests/template/test_compiler.py
#   license      : MIT
#   copyright    : (c) 2025 The Loggable Authors
#
# topmark:header:end

"""Unit tests for `loggable.template.compiler`."""

from __future__ import annotations

import pytest

from loggable.template import (
    DEFAULT_MARKER,
    PUBLIC_MARKER,
    CompiledCall,
    LiteralSegment,
    Modifier,
    PlaceholderSegment,
    Severity,
    SourceExpression,
    Template,
    TemplateCompileError,
    compile_template,
    escape_literal,
    render_call,
)
from tests.conftest import parametrize


def _ph(text: str, modifier: Modifier | None = None) -> PlaceholderSegment:
    return PlaceholderSegment(expression=SourceExpression(text), modifier=modifier)


def test_markers() -> None:
    assert DEFAULT_MARKER == "%s"
    assert PUBLIC_MARKER == "%{public}s"


def test_mixed_template() -> None:
    """Literal text is copied, placeholders become markers in order."""
    template = Template.of(
        LiteralSegment("User "),
        _ph("name", Modifier.PUBLIC),
        LiteralSegment(" logged in with "),
        _ph("token"),
    )

    compiled: CompiledCall = compile_template(template, Severity.INFO)

    assert compiled.severity is Severity.INFO
    assert compiled.format == "User %{public}s logged in with %s"
    assert compiled.argument_texts == ["name", "token"]


def test_empty_template() -> None:
    compiled = compile_template(Template(), Severity.DEBUG)

    assert compiled.format == ""
    assert compiled.arguments == ()


def test_literal_only() -> None:
    compiled = compile_template(Template.of(LiteralSegment("ready")), "notice")

    assert compiled.severity is Severity.NOTICE
    assert compiled.format == "ready"
    assert compiled.arguments == ()


def test_adjacent_placeholders() -> None:
    compiled = compile_template(Template.of(_ph("a"), _ph("b", Modifier.PUBLIC)), Severity.FAULT)

    assert compiled.format == "%s%{public}s"
    assert compiled.argument_texts == ["a", "b"]


def test_duplicate_expressions_are_kept() -> None:
    """The same expression twice yields two markers and two arguments."""
    compiled = compile_template(Template.of(_ph("x"), LiteralSegment(" "), _ph("x")), "error")

    assert compiled.format == "%s %s"
    assert compiled.argument_texts == ["x", "x"]


def test_expression_text_is_not_interpreted() -> None:
    text = "compute(a, b=1)['k']"

    compiled = compile_template(Template.of(_ph(text)), Severity.INFO)

    assert compiled.argument_texts == [text]
    assert compiled.arguments[0].text == text


@parametrize(
    ("escape", "expected"),
    [
        (True, "100%% of %s"),
        (False, "100% of %s"),
    ],
)
def test_percent_escaping(escape: bool, expected: str) -> None:
    template = Template.of(LiteralSegment("100% of "), _ph("n"))

    assert compile_template(template, Severity.INFO, escape_percent=escape).format == expected


def test_escape_literal() -> None:
    assert escape_literal("50% / 100%%") == "50%% / 100%%%%"


@parametrize("severity", list(Severity))
def test_severity_passes_through(severity: Severity) -> None:
    assert compile_template(Template(), severity).severity is severity


def test_unknown_severity_is_rejected() -> None:
    with pytest.raises(TemplateCompileError, match="unknown severity 'warning'"):
        compile_template(Template(), "warning")


def test_empty_expression_is_rejected() -> None:
    with pytest.raises(TemplateCompileError, match="placeholder #1 has no expression"):
        compile_template(Template.of(_ph("   ")), Severity.INFO)


def test_unknown_segment_is_rejected() -> None:
    template = Template(segments=("not a segment",))  # type: ignore[arg-type]

    with pytest.raises(TemplateCompileError, match="neither literal text nor a placeholder"):
        compile_template(template, Severity.INFO)


def test_unknown_modifier_is_rejected() -> None:
    bogus = PlaceholderSegment(expression=SourceExpression("x"), modifier="secret")  # type: ignore[arg-type]

    with pytest.raises(TemplateCompileError, match="unknown placeholder modifier"):
        compile_template(Template.of(bogus), Severity.INFO)


def test_compiled_call_to_dict() -> None:
    compiled = compile_template(Template.of(LiteralSegment("n="), _ph("n")), Severity.INFO)

    assert compiled.to_dict() == {"severity": "info", "format": "n=%s", "arguments": ["n"]}


def test_render_call() -> None:
    compiled = compile_template(
        Template.of(LiteralSegment("it's "), _ph("x", Modifier.PUBLIC)), Severity.ERROR
    )

    call: str = render_call(compiled, emit_name="_emit", logger_expr="self.log")

    assert call == "_emit('error', self.log, \"it's %{public}s\", x)"


def test_render_call_parenthesizes_generator_arguments() -> None:
    compiled = compile_template(Template.of(_ph("x for x in y")), Severity.INFO)

    call: str = render_call(compiled, emit_name="emit", logger_expr="logger")

    assert call == "emit('info', logger, '%s', (x for x in y))"
