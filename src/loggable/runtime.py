# topmark:header:start
#
#   project      : Loggable
#   file         : runtime.py
#   file_relpath : src/loggable/runtime.py
#   license      : MIT
#   copyright    : (c) 2025 The Loggable Authors
#
# topmark:header:end

"""Runtime backend for expanded log calls.

Expanded modules call `emit` with the severity, a logger, the compiled
format string and one argument per marker::

    _loggable_emit('info', logger, 'User %{public}s logged in with %s', name, token)

`emit` renders the message and hands it to the standard `logging` module:

* ``%{public}s`` is replaced by ``str(value)``;
* ``%s`` is replaced by ``<private>`` unless ``LOGGABLE_SHOW_PRIVATE`` is set
  to a truthy value;
* ``%%`` is replaced by ``%``.

Severities map onto logging levels as follows:

| Severity | Level             |
|----------|-------------------|
| debug    | DEBUG             |
| info     | INFO              |
| notice   | NOTICE (25)       |
| error    | ERROR             |
| fault    | CRITICAL          |

The module also defines the entry points ``log_debug`` ... ``log_fault``.
They exist so unexpanded code imports and type-checks; calling one means
the module was never expanded, and raises `NotExpandedError`.
"""

from __future__ import annotations

import logging
import os
import re
from typing import TYPE_CHECKING, Final

from loggable.constants import ENV_SHOW_PRIVATE, PRIVATE_REDACTION, PUBLIC_MODIFIER
from loggable.template.model import Severity

if TYPE_CHECKING:
    from collections.abc import Sequence

NOTICE_LEVEL: Final[int] = logging.INFO + 5

if logging.getLevelName(NOTICE_LEVEL) != "NOTICE":
    logging.addLevelName(NOTICE_LEVEL, "NOTICE")

SEVERITY_LEVELS: Final[dict[Severity, int]] = {
    Severity.DEBUG: logging.DEBUG,
    Severity.INFO: logging.INFO,
    Severity.NOTICE: NOTICE_LEVEL,
    Severity.ERROR: logging.ERROR,
    Severity.FAULT: logging.CRITICAL,
}

# Name of the logger used when a generated call passes ``None``
DEFAULT_LOGGER_NAME: Final[str] = "loggable"

_TRUTHY: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})

_MARKER_RE: Final[re.Pattern[str]] = re.compile(
    r"%(?:(?P<escape>%)|(?P<public>\{" + PUBLIC_MODIFIER + r"\}s)|(?P<default>s))"
)


class NotExpandedError(RuntimeError):
    """An entry point was called in a module that was not expanded."""

    def __init__(self, entry_point: str) -> None:
        super().__init__(
            f"{entry_point}() was called at runtime: the calling module has not been "
            "expanded (run 'loggable expand --apply' on it)"
        )
        self.entry_point = entry_point


def level_for(severity: Severity | str) -> int:
    """Return the `logging` level for a severity.

    Raises:
        ValueError: If ``severity`` is not a known severity.
    """
    return SEVERITY_LEVELS[Severity(severity)]


def show_private_values() -> bool:
    """Return True if ``LOGGABLE_SHOW_PRIVATE`` asks for private values to be shown."""
    return os.environ.get(ENV_SHOW_PRIVATE, "").strip().lower() in _TRUTHY


def count_markers(fmt: str) -> int:
    """Return the number of value markers (``%s`` and ``%{public}s``) in ``fmt``."""
    return sum(1 for m in _MARKER_RE.finditer(fmt) if m.group("escape") is None)


def _check_arity(fmt: str, args: Sequence[object]) -> None:
    expected: int = count_markers(fmt)
    if expected != len(args):
        raise ValueError(
            f"format string has {expected} marker(s) but {len(args)} value(s) were given: {fmt!r}"
        )


def render_message(fmt: str, args: Sequence[object], *, show_private: bool = False) -> str:
    """Render a compiled format string with its values.

    Args:
        fmt (str): Format string produced by the template compiler.
        args (Sequence[object]): One value per marker, in order.
        show_private (bool): Render default-policy values instead of redacting them.

    Returns:
        str: The rendered message.

    Raises:
        ValueError: If the number of values does not match the number of markers.
    """
    _check_arity(fmt, args)

    values = iter(args)

    def substitute(match: re.Match[str]) -> str:
        if match.group("escape") is not None:
            return "%"
        value = next(values)
        if match.group("public") is not None or show_private:
            return str(value)
        return PRIVATE_REDACTION

    return _MARKER_RE.sub(substitute, fmt)


def resolve_logger(logger: logging.Logger | str | None) -> logging.Logger:
    """Return the logger a generated call logs to."""
    if logger is None:
        return logging.getLogger(DEFAULT_LOGGER_NAME)
    if isinstance(logger, str):
        return logging.getLogger(logger)
    return logger


def emit(
    severity: Severity | str,
    logger: logging.Logger | str | None,
    fmt: str,
    *args: object,
) -> None:
    """Log one compiled message.

    This is the target of expanded call sites.

    Args:
        severity (Severity | str): Severity of the call site.
        logger (logging.Logger | str | None): Logger, logger name, or None for
            the ``loggable`` logger.
        fmt (str): Compiled format string.
        *args (object): Values, one per marker.

    Raises:
        ValueError: If the severity is unknown or the number of values does not
            match the number of markers.
    """
    level: int = level_for(severity)
    target: logging.Logger = resolve_logger(logger)
    if not target.isEnabledFor(level):
        _check_arity(fmt, args)
        return
    message: str = render_message(fmt, args, show_private=show_private_values())
    target.log(level, "%s", message, stacklevel=2)


def log_debug(message: str, *, logger: logging.Logger | str | None = None) -> None:
    """Log ``message`` at debug severity (replaced by the expander)."""
    raise NotExpandedError(Severity.DEBUG.entry_point)


def log_info(message: str, *, logger: logging.Logger | str | None = None) -> None:
    """Log ``message`` at info severity (replaced by the expander)."""
    raise NotExpandedError(Severity.INFO.entry_point)


def log_notice(message: str, *, logger: logging.Logger | str | None = None) -> None:
    """Log ``message`` at notice severity (replaced by the expander)."""
    raise NotExpandedError(Severity.NOTICE.entry_point)


def log_error(message: str, *, logger: logging.Logger | str | None = None) -> None:
    """Log ``message`` at error severity (replaced by the expander)."""
    raise NotExpandedError(Severity.ERROR.entry_point)


def log_fault(message: str, *, logger: logging.Logger | str | None = None) -> None:
    """Log ``message`` at fault severity (replaced by the expander)."""
    raise NotExpandedError(Severity.FAULT.entry_point)
