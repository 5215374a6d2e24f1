# topmark:header:start
#
#   project      : Loggable
#   file         : __init__.py
#   file_relpath : src/loggable/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 The Loggable Authors
#
# topmark:header:end

"""Loggable package.

Loggable turns structured log templates into printf-style logging calls at
build time. Application code writes::

    from loggable import log_info

    log_info(f"User {name:public} logged in with {token}")

and ``loggable expand --apply`` rewrites the call into::

    _loggable_emit('info', logger, 'User %{public}s logged in with %s', name, token)

The runtime backend (`loggable.runtime.emit`) renders public values and
redacts the others.
"""

from __future__ import annotations

from loggable.runtime import (
    NotExpandedError,
    emit,
    log_debug,
    log_error,
    log_fault,
    log_info,
    log_notice,
)
from loggable.template import CompiledCall, Severity, Template, compile_template

__all__ = [
    "CompiledCall",
    "NotExpandedError",
    "Severity",
    "Template",
    "compile_template",
    "emit",
    "log_debug",
    "log_error",
    "log_fault",
    "log_info",
    "log_notice",
]
