# topmark:header:start
#
#   project      : Loggable
#   file         : errors.py
#   file_relpath : src/loggable/cli/errors.py
#   license      : MIT
#   copyright    : (c) 2025 The Loggable Authors
#
# topmark:header:end

"""Exceptions for the Loggable CLI.

Usage:
    Raise these exceptions in CLI commands to signal errors with standardized
    messages and exit codes.

Styling:
    Exceptions prefer the project console if available (see `show()`); if no console
    is present in the Click context, they fall back to Click's default styling.
"""

from __future__ import annotations

from typing import IO, Any

import click

from loggable.cli.exit_codes import ExitCode


class LoggableError(click.ClickException):
    """Base class for all Loggable CLI errors."""

    exit_code = ExitCode.FAILURE

    def format_message(self) -> str:  # pragma: no cover - trivial
        """Return the plain error message text.

        Notes:
            - Unlike Click's default, this method does not add color.
            - Colorization is applied in `show()` when a project console is present.
        """
        return str(getattr(self, "message", ""))

    def show(self, file: IO[Any] | None = None) -> None:  # pragma: no cover - Click prints errors
        """Display the error using the project console if available.

        Falls back to Click's default error display when no console is present.
        """
        ctx = click.get_current_context(silent=True)
        if ctx is not None and isinstance(getattr(ctx, "obj", None), dict):
            console = ctx.obj.get("console")
            if console is not None:
                console.error(console.styled(f"Error: {self.format_message()}", fg="bright_red"))
                return
        super().show(file)


class LoggableUsageError(LoggableError):
    """Error for command-line invocation errors (invalid flags/args)."""

    exit_code = ExitCode.USAGE_ERROR


class LoggableTemplateError(LoggableError):
    """Error for templates or call sites that cannot be compiled."""

    exit_code = ExitCode.TEMPLATE_ERROR


class LoggableConfigError(LoggableError):
    """Error for configuration errors (missing/invalid/malformed config)."""

    exit_code = ExitCode.CONFIG_ERROR


class LoggableFileNotFoundError(LoggableError):
    """Error when input path does not exist."""

    exit_code = ExitCode.FILE_NOT_FOUND


class LoggableIOError(LoggableError):
    """Error for I/O errors reading/writing files."""

    exit_code = ExitCode.IO_ERROR


class LoggableUnexpectedError(LoggableError):
    """Error for unhandled/unknown errors (last-resort)."""

    exit_code = ExitCode.UNEXPECTED_ERROR
