# topmark:header:start
#
#   project      : Loggable
#   file         : keys.py
#   file_relpath : src/loggable/config/keys.py
#   license      : MIT
#   copyright    : (c) 2025 The Loggable Authors
#
# topmark:header:end

"""Canonical TOML section and key names for Loggable configuration.

These strings are the external configuration API, as it appears in
``loggable.toml`` and in ``[tool.loggable]`` inside ``pyproject.toml``.
Renaming or removing a key is a breaking change.
"""

from __future__ import annotations

from typing import Final


class Toml:
    """TOML section names and keys used by Loggable configuration."""

    # Root / discovery
    KEY_ROOT: Final[str] = "root"

    # [tool.loggable] in pyproject.toml
    SECTION_TOOL: Final[str] = "tool"
    SECTION_TOOL_LOGGABLE: Final[str] = "loggable"

    # [expand]
    SECTION_EXPAND: Final[str] = "expand"

    KEY_LOGGER: Final[str] = "logger"
    KEY_EMIT_NAME: Final[str] = "emit_name"
    KEY_ESCAPE_PERCENT: Final[str] = "escape_percent"

    # [files]
    SECTION_FILES: Final[str] = "files"

    KEY_INCLUDE: Final[str] = "include"
    KEY_EXCLUDE: Final[str] = "exclude"
