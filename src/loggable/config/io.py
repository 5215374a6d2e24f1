# topmark:header:start
#
#   project      : Loggable
#   file         : io.py
#   file_relpath : src/loggable/config/io.py
#   license      : MIT
#   copyright    : (c) 2025 The Loggable Authors
#
# topmark:header:end

"""Load TOML configuration sources and read typed values from them.

Parsing is done with `tomlkit` and returned as plain `dict` structures. The
``*_checked`` getters record a warning diagnostic when a key is present but
has the wrong type, and fall back to ``None``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Final, cast

import tomlkit
from tomlkit.exceptions import ParseError as TomlkitParseError

from loggable.config.keys import Toml
from loggable.config.logging import get_logger
from loggable.constants import DEFAULT_EMIT_NAME, DEFAULT_LOGGER_EXPR

if TYPE_CHECKING:
    from pathlib import Path

    from loggable.config.logging import LoggableLogger
    from loggable.diagnostic import DiagnosticLog

TomlTable = dict[str, Any]

logger: LoggableLogger = get_logger(__name__)


class ConfigLoadError(Exception):
    """A configuration file could not be read or parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


def load_defaults_dict() -> TomlTable:
    """Return Loggable's runtime defaults as a Python dict.

    This function performs no I/O. The returned value is a new dict so callers
    can mutate it safely.
    """
    return {
        Toml.SECTION_EXPAND: {
            Toml.KEY_LOGGER: DEFAULT_LOGGER_EXPR,
            Toml.KEY_EMIT_NAME: DEFAULT_EMIT_NAME,
            Toml.KEY_ESCAPE_PERCENT: True,
        },
        Toml.SECTION_FILES: {
            Toml.KEY_INCLUDE: [],
            Toml.KEY_EXCLUDE: [],
        },
    }


def load_toml_dict(path: Path) -> TomlTable:
    """Load and parse a TOML file from the filesystem.

    Args:
        path: Path to a TOML document (e.g., ``loggable.toml`` or ``pyproject.toml``).

    Returns:
        The parsed TOML content.

    Raises:
        ConfigLoadError: If the file cannot be read or is not valid TOML.
    """
    try:
        text: str = path.read_text(encoding="utf-8")
    except OSError as e:
        logger.error("Error loading TOML from %s: %s", path, e)
        raise ConfigLoadError(path, f"cannot read file ({e.strerror or e})") from e
    except UnicodeDecodeError as e:
        logger.error("Error decoding %s as UTF-8: %s", path, e)
        raise ConfigLoadError(path, "file is not valid UTF-8") from e

    try:
        doc: tomlkit.TOMLDocument = tomlkit.parse(text)
    except TomlkitParseError as e:
        logger.error("Error decoding TOML from %s: %s", path, e)
        raise ConfigLoadError(path, f"invalid TOML ({e})") from e

    data_any: Any = doc.unwrap()
    return cast("TomlTable", data_any) if isinstance(data_any, dict) else {}


def extract_loggable_section(path: Path, data: TomlTable) -> TomlTable | None:
    """Return the Loggable part of a parsed config file.

    For ``pyproject.toml`` this is the ``[tool.loggable]`` table (or None when
    absent); any other file is a Loggable config file as a whole.
    """
    if path.name != "pyproject.toml":
        return data
    tool: Any = data.get(Toml.SECTION_TOOL, {})
    if not isinstance(tool, dict):
        return None
    section: Any = cast("TomlTable", tool).get(Toml.SECTION_TOOL_LOGGABLE)
    return cast("TomlTable", section) if isinstance(section, dict) else None


def get_table_value(table: TomlTable, key: str) -> TomlTable:
    """Return a sub-table, or an empty dict when absent or not a table."""
    value: Any = table.get(key)
    return cast("TomlTable", value) if isinstance(value, dict) else {}


def get_string_value_or_none_checked(
    table: TomlTable,
    key: str,
    *,
    where: str,
    diagnostics: DiagnosticLog,
) -> str | None:
    """Return an optional string value, warning when present but not `str`."""
    value: Any | None = table.get(key)
    if value is None:
        return None
    if isinstance(value, str):
        return value

    loc: Final[str] = f"{where}.{key}"
    logger.warning("Expected string in %s, got %s: %r", loc, type(value).__name__, value)
    diagnostics.add_warning(f"Expected string in {loc}, got {type(value).__name__}: {value}")
    return None


def get_bool_value_or_none_checked(
    table: TomlTable,
    key: str,
    *,
    where: str,
    diagnostics: DiagnosticLog,
) -> bool | None:
    """Return an optional bool value, warning when present but not `bool`."""
    value: Any | None = table.get(key)
    if value is None:
        return None
    if isinstance(value, bool):
        return value

    loc: Final[str] = f"{where}.{key}"
    logger.warning("Expected boolean in %s, got %s: %r", loc, type(value).__name__, value)
    diagnostics.add_warning(f"Expected boolean in {loc}, got {type(value).__name__}: {value}")
    return None


def get_string_list_value_checked(
    table: TomlTable,
    key: str,
    *,
    where: str,
    diagnostics: DiagnosticLog,
) -> list[str]:
    """Return a list of strings, dropping (and warning about) non-string entries."""
    value: Any | None = table.get(key)
    if value is None:
        return []

    loc: Final[str] = f"{where}.{key}"
    if not isinstance(value, list):
        logger.warning("Expected list in %s, got %s: %r", loc, type(value).__name__, value)
        diagnostics.add_warning(f"Expected list in {loc}, got {type(value).__name__}: {value}")
        return []

    out: list[str] = []
    for item in cast("list[Any]", value):
        if isinstance(item, str):
            out.append(item)
        else:
            diagnostics.add_warning(
                f"Ignoring non-string entry in {loc}: {item!r} ({type(item).__name__})"
            )
    return out
