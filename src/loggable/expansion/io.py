# topmark:header:start
#
#   project      : Loggable
#   file         : io.py
#   file_relpath : src/loggable/expansion/io.py
#   license      : MIT
#   copyright    : (c) 2025 The Loggable Authors
#
# topmark:header:end

"""Read and write module sources without altering their line endings.

Files are opened with ``newline=""`` so ``\\r\\n`` and ``\\r`` terminators
survive a read/expand/write round trip unchanged.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from loggable.config.logging import get_logger

if TYPE_CHECKING:
    from pathlib import Path

    from loggable.config.logging import LoggableLogger
    from loggable.expansion.model import ExpansionResult

logger: LoggableLogger = get_logger(__name__)


def read_source(path: Path) -> str:
    """Return the text of a UTF-8 source file with line endings untranslated.

    Raises:
        OSError: If the file cannot be read.
        UnicodeDecodeError: If the file is not valid UTF-8.
    """
    with path.open("r", encoding="utf-8", newline="") as f:
        text: str = f.read()
    logger.trace("Read %d character(s) from %s", len(text), path)
    return text


def write_expanded(result: ExpansionResult, path: Path) -> int:
    """Write the expanded text of ``result`` to ``path``.

    Args:
        result (ExpansionResult): The expansion to persist.
        path (Path): Destination file (normally the file that was expanded).

    Returns:
        int: Number of UTF-8 bytes written.

    Raises:
        OSError: If the file cannot be written.
    """
    with path.open("w", encoding="utf-8", newline="") as f:
        f.write(result.expanded)
    bytes_written: int = len(result.expanded.encode("utf-8"))
    logger.debug("Wrote %d bytes to file %s", bytes_written, path)
    return bytes_written


def detect_newline(lines: list[str]) -> str:
    r"""Detect the newline sequence used by the provided lines.

    Scans in order and returns the first encountered newline **sequence**:
    ``"\r\n"``, ``"\n"``, or ``"\r"``. Falls back to ``"\n"`` when no
    newline can be inferred (e.g., single line without terminator).

    Args:
        lines (list[str]): Lines from a file, each potentially ending with a newline.

    Returns:
        str: One of ``"\r\n"``, ``"\n"``, or ``"\r"``.
    """
    for ln in lines:
        if ln.endswith("\r\n"):
            return "\r\n"
        if ln.endswith("\n"):
            return "\n"
        if ln.endswith("\r"):
            return "\r"
    return "\n"
