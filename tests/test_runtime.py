# topmark:header:start
#
#   project      : Loggable
#   file         : test_runtime.py
#   file_relpath : tests/test_runtime.py
#   license      : MIT
#   copyright    : (c) 2025 The Loggable Authors
#
# topmark:header:end

"""Unit tests for the runtime backend (`loggable.runtime`)."""

from __future__ import annotations

import logging

import pytest

from loggable import runtime
from loggable.runtime import (
    NOTICE_LEVEL,
    NotExpandedError,
    count_markers,
    emit,
    level_for,
    render_message,
    resolve_logger,
    show_private_values,
)
from loggable.template import Severity
from tests.conftest import parametrize

APP_LOGGER = "loggable_tests.app"


@pytest.fixture
def app_logger() -> logging.Logger:
    log = logging.getLogger(APP_LOGGER)
    log.setLevel(logging.DEBUG)
    return log


@parametrize(
    ("severity", "level"),
    [
        (Severity.DEBUG, logging.DEBUG),
        (Severity.INFO, logging.INFO),
        (Severity.NOTICE, NOTICE_LEVEL),
        (Severity.ERROR, logging.ERROR),
        (Severity.FAULT, logging.CRITICAL),
        ("notice", NOTICE_LEVEL),
    ],
)
def test_level_for(severity: Severity | str, level: int) -> None:
    assert level_for(severity) == level


def test_notice_level_is_registered() -> None:
    assert logging.getLevelName(NOTICE_LEVEL) == "NOTICE"
    assert logging.INFO < NOTICE_LEVEL < logging.WARNING


def test_level_for_unknown_severity() -> None:
    with pytest.raises(ValueError):
        level_for("warning")


def test_count_markers() -> None:
    assert count_markers("") == 0
    assert count_markers("100%% of %s and %{public}s") == 2


def test_render_message_redacts_default_values() -> None:
    fmt = "User %{public}s logged in with %s (100%%)"

    assert render_message(fmt, ["ada", "s3cr3t"]) == "User ada logged in with <private> (100%)"
    assert (
        render_message(fmt, ["ada", "s3cr3t"], show_private=True)
        == "User ada logged in with s3cr3t (100%)"
    )


def test_render_message_arity_mismatch() -> None:
    with pytest.raises(ValueError, match="1 marker"):
        render_message("%s", [])


@parametrize(
    ("value", "expected"),
    [("1", True), ("true", True), (" Yes ", True), ("on", True), ("0", False), ("", False)],
)
def test_show_private_values(monkeypatch: pytest.MonkeyPatch, value: str, expected: bool) -> None:
    monkeypatch.setenv("LOGGABLE_SHOW_PRIVATE", value)

    assert show_private_values() is expected


def test_resolve_logger(app_logger: logging.Logger) -> None:
    assert resolve_logger(app_logger) is app_logger
    assert resolve_logger(APP_LOGGER) is app_logger
    assert resolve_logger(None).name == runtime.DEFAULT_LOGGER_NAME


def test_emit_logs_rendered_message(
    app_logger: logging.Logger, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.DEBUG, logger=APP_LOGGER):
        emit("notice", app_logger, "User %{public}s logged in with %s", "ada", "s3cr3t")

    (record,) = [r for r in caplog.records if r.name == APP_LOGGER]
    assert record.levelno == NOTICE_LEVEL
    assert record.getMessage() == "User ada logged in with <private>"


def test_emit_shows_private_values_when_enabled(
    app_logger: logging.Logger, caplog: pytest.LogCaptureFixture, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("LOGGABLE_SHOW_PRIVATE", "1")

    with caplog.at_level(logging.DEBUG, logger=APP_LOGGER):
        emit(Severity.FAULT, APP_LOGGER, "token=%s", "s3cr3t")

    (record,) = [r for r in caplog.records if r.name == APP_LOGGER]
    assert record.levelno == logging.CRITICAL
    assert record.getMessage() == "token=s3cr3t"


def test_emit_reports_the_calling_line(
    app_logger: logging.Logger, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.DEBUG, logger=APP_LOGGER):
        emit("info", app_logger, "here")

    (record,) = [r for r in caplog.records if r.name == APP_LOGGER]
    assert record.funcName == "test_emit_reports_the_calling_line"


def test_emit_checks_arity_when_disabled(app_logger: logging.Logger) -> None:
    app_logger.setLevel(logging.ERROR)

    emit("debug", app_logger, "%s", 1)
    with pytest.raises(ValueError):
        emit("debug", app_logger, "%s %s", 1)


@parametrize(
    "entry_point",
    [
        runtime.log_debug,
        runtime.log_info,
        runtime.log_notice,
        runtime.log_error,
        runtime.log_fault,
    ],
)
def test_unexpanded_entry_points_raise(entry_point: object) -> None:
    assert callable(entry_point)
    with pytest.raises(NotExpandedError, match="has not been expanded") as excinfo:
        entry_point("message")

    assert excinfo.value.entry_point == entry_point.__name__  # type: ignore[attr-defined]


def test_expanded_code_runs(
    app_logger: logging.Logger, caplog: pytest.LogCaptureFixture
) -> None:
    """Source produced by the expander runs against the runtime backend."""
    from loggable.expansion import expand_source

    src = (
        "import logging\n"
        "from loggable import log_info\n"
        f"logger = logging.getLogger({APP_LOGGER!r})\n"
        "\n"
        "def greet(name, secret):\n"
        "    log_info(f'hello {name:public}, {secret} is 100% safe')\n"
    )
    result = expand_source(src, path="<generated>")
    namespace: dict[str, object] = {}
    exec(compile(result.expanded, "<generated>", "exec"), namespace)

    with caplog.at_level(logging.DEBUG, logger=APP_LOGGER):
        namespace["greet"]("ada", "pw")  # type: ignore[operator]

    (record,) = [r for r in caplog.records if r.name == APP_LOGGER]
    assert record.getMessage() == "hello ada, <private> is 100% safe"
