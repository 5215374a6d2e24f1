# topmark:header:start
#
#   project      : Loggable
#   file         : model.py
#   file_relpath : src/loggable/config/model.py
#   license      : MIT
#   copyright    : (c) 2025 The Loggable Authors
#
# topmark:header:end

"""Configuration model and merge policy.

This module defines:
    - `Config`: an immutable, runtime snapshot used by the expander.
    - `MutableConfig`: a mutable builder used during discovery/merge; it
      can be frozen into `Config` and thawed back for edits.

Layering (later wins):
    1. built-in defaults,
    2. discovered project config, root-most first (``pyproject.toml`` with
       ``[tool.loggable]``, then ``loggable.toml`` in the same directory),
    3. explicit config files (``--config``),
    4. CLI overrides.

Scalars are replaced by later layers; pattern lists are extended.
"""

from __future__ import annotations

import ast
import keyword
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from loggable.config.io import (
    extract_loggable_section,
    get_bool_value_or_none_checked,
    get_string_list_value_checked,
    get_string_value_or_none_checked,
    get_table_value,
    load_defaults_dict,
    load_toml_dict,
)
from loggable.config.keys import Toml
from loggable.config.logging import get_logger
from loggable.constants import (
    DEFAULT_EMIT_NAME,
    DEFAULT_LOGGER_EXPR,
    LOGGABLE_TOML_NAME,
    PYPROJECT_TOML_NAME,
)
from loggable.diagnostic import DiagnosticLog, FrozenDiagnosticLog

if TYPE_CHECKING:
    from loggable.config.io import TomlTable
    from loggable.config.logging import LoggableLogger

# ArgsLike: generic mapping accepted by `apply_cli_args` (CLI namespaces and plain dicts).
ArgsLike = Mapping[str, Any]

logger: LoggableLogger = get_logger(__name__)


def is_valid_emit_name(name: str) -> bool:
    """Return True if ``name`` can be bound by ``from ... import emit as <name>``."""
    return name.isidentifier() and not keyword.iskeyword(name)


def is_valid_logger_expr(expr: str) -> bool:
    """Return True if ``expr`` parses as a single Python expression."""
    if not expr.strip():
        return False
    try:
        ast.parse(expr.strip(), mode="eval")
    except SyntaxError:
        return False
    return True


# ------------------ Immutable runtime config ------------------


@dataclass(frozen=True, slots=True)
class Config:
    """Immutable runtime configuration for Loggable.

    Attributes:
        logger_expr (str): Logger expression used by call sites without ``logger=``.
        emit_name (str): Local name the runtime ``emit`` function is imported as.
        escape_percent (bool): Whether ``%`` in literal text is escaped as ``%%``.
        include_patterns (tuple[str, ...]): Gitignore-style patterns to keep.
        exclude_patterns (tuple[str, ...]): Gitignore-style patterns to drop.
        config_files (tuple[Path | str, ...]): Config sources used, in merge order.
        diagnostics (FrozenDiagnosticLog): Warnings collected while loading or merging.
    """

    logger_expr: str
    emit_name: str
    escape_percent: bool
    include_patterns: tuple[str, ...]
    exclude_patterns: tuple[str, ...]
    config_files: tuple[Path | str, ...]
    diagnostics: FrozenDiagnosticLog

    def thaw(self) -> MutableConfig:
        """Return a mutable copy of this config."""
        return MutableConfig(
            logger_expr=self.logger_expr,
            emit_name=self.emit_name,
            escape_percent=self.escape_percent,
            include_patterns=list(self.include_patterns),
            exclude_patterns=list(self.exclude_patterns),
            config_files=list(self.config_files),
            diagnostics=DiagnosticLog(items=list(self.diagnostics)),
        )

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-friendly representation."""
        return {
            "logger": self.logger_expr,
            "emit_name": self.emit_name,
            "escape_percent": self.escape_percent,
            "include": list(self.include_patterns),
            "exclude": list(self.exclude_patterns),
            "config_files": [str(p) for p in self.config_files],
        }


# -------------------------- Mutable builder --------------------------


@dataclass
class MutableConfig:
    """Mutable configuration used during discovery and merging.

    ``None`` means "not set by this layer"; `freeze` fills remaining gaps with
    the built-in defaults.

    Attributes:
        logger_expr (str | None): Logger expression from ``[expand] logger``.
        emit_name (str | None): From ``[expand] emit_name``.
        escape_percent (bool | None): From ``[expand] escape_percent``.
        include_patterns (list[str]): From ``[files] include``.
        exclude_patterns (list[str]): From ``[files] exclude``.
        config_files (list[Path | str]): Provenance of merged layers.
        root (bool): ``root = true`` stops upward discovery.
        diagnostics (DiagnosticLog): Warnings collected while loading or merging.
    """

    logger_expr: str | None = None
    emit_name: str | None = None
    escape_percent: bool | None = None

    include_patterns: list[str] = field(default_factory=lambda: [])
    exclude_patterns: list[str] = field(default_factory=lambda: [])

    config_files: list[Path | str] = field(default_factory=lambda: [])
    root: bool = False

    diagnostics: DiagnosticLog = field(default_factory=DiagnosticLog)

    # ---------------------------- Build/freeze ----------------------------
    def freeze(self) -> Config:
        """Freeze this mutable builder into an immutable Config.

        Raises:
            ValueError: If ``emit_name`` is not a valid identifier or
                ``logger_expr`` is not a Python expression.
        """
        emit_name: str = self.emit_name if self.emit_name is not None else DEFAULT_EMIT_NAME
        logger_expr: str = (
            self.logger_expr if self.logger_expr is not None else DEFAULT_LOGGER_EXPR
        ).strip()

        if not is_valid_emit_name(emit_name):
            raise ValueError(f"Invalid emit_name {emit_name!r}: must be a Python identifier.")
        if not is_valid_logger_expr(logger_expr):
            raise ValueError(f"Invalid logger {logger_expr!r}: must be a Python expression.")

        return Config(
            logger_expr=logger_expr,
            emit_name=emit_name,
            escape_percent=True if self.escape_percent is None else self.escape_percent,
            include_patterns=tuple(self.include_patterns),
            exclude_patterns=tuple(self.exclude_patterns),
            config_files=tuple(self.config_files),
            diagnostics=self.diagnostics.freeze(),
        )

    # --------------------------- Loaders/parsers --------------------------
    @classmethod
    def from_defaults(cls) -> MutableConfig:
        """Return a `MutableConfig` populated with the built-in defaults."""
        draft = cls.from_toml_dict(load_defaults_dict())
        draft.config_files = ["<defaults>"]
        return draft

    @classmethod
    def from_toml_dict(
        cls,
        data: TomlTable,
        *,
        config_file: Path | None = None,
    ) -> MutableConfig:
        """Build a `MutableConfig` from a parsed Loggable TOML table.

        Args:
            data (TomlTable): The Loggable table (already extracted from ``[tool.loggable]``).
            config_file (Path | None): Source file, for provenance and messages.

        Returns:
            MutableConfig: The parsed layer.
        """
        where: str = str(config_file) if config_file is not None else "<defaults>"
        diagnostics = DiagnosticLog()

        expand_tbl: TomlTable = get_table_value(data, Toml.SECTION_EXPAND)
        files_tbl: TomlTable = get_table_value(data, Toml.SECTION_FILES)

        draft = cls(
            logger_expr=get_string_value_or_none_checked(
                expand_tbl,
                Toml.KEY_LOGGER,
                where=f"{where}:[{Toml.SECTION_EXPAND}]",
                diagnostics=diagnostics,
            ),
            emit_name=get_string_value_or_none_checked(
                expand_tbl,
                Toml.KEY_EMIT_NAME,
                where=f"{where}:[{Toml.SECTION_EXPAND}]",
                diagnostics=diagnostics,
            ),
            escape_percent=get_bool_value_or_none_checked(
                expand_tbl,
                Toml.KEY_ESCAPE_PERCENT,
                where=f"{where}:[{Toml.SECTION_EXPAND}]",
                diagnostics=diagnostics,
            ),
            include_patterns=get_string_list_value_checked(
                files_tbl,
                Toml.KEY_INCLUDE,
                where=f"{where}:[{Toml.SECTION_FILES}]",
                diagnostics=diagnostics,
            ),
            exclude_patterns=get_string_list_value_checked(
                files_tbl,
                Toml.KEY_EXCLUDE,
                where=f"{where}:[{Toml.SECTION_FILES}]",
                diagnostics=diagnostics,
            ),
            root=bool(
                get_bool_value_or_none_checked(
                    data, Toml.KEY_ROOT, where=where, diagnostics=diagnostics
                )
            ),
            diagnostics=diagnostics,
        )
        if config_file is not None:
            draft.config_files = [config_file]

        known_sections = {Toml.SECTION_EXPAND, Toml.SECTION_FILES, Toml.KEY_ROOT}
        for key in data:
            if key not in known_sections:
                diagnostics.add_warning(f"Unknown key {key!r} in {where} (ignored)")
        return draft

    @classmethod
    def from_toml_file(cls, path: Path) -> MutableConfig | None:
        """Load configuration from a single TOML file.

        Supports both ``loggable.toml`` and ``pyproject.toml`` (``[tool.loggable]``).

        Args:
            path (Path): Path to the TOML file.

        Returns:
            MutableConfig | None: The parsed layer, or None for a ``pyproject.toml``
                without a ``[tool.loggable]`` table.

        Raises:
            ConfigLoadError: If the file cannot be read or parsed.
        """
        logger.debug("Creating MutableConfig from TOML config: %s", path)
        section: TomlTable | None = extract_loggable_section(path, load_toml_dict(path))
        if section is None:
            logger.debug("No [tool.loggable] section in %s", path)
            return None
        return cls.from_toml_dict(section, config_file=path)

    @classmethod
    def discover_local_config_files(cls, start: Path) -> list[Path]:
        """Return config files discovered by walking upward from ``start``.

        Files are returned **root-most first**, so a later merge gives the
        nearest directory precedence. Within one directory ``pyproject.toml``
        comes before ``loggable.toml``. Traversal stops after a directory
        whose config sets ``root = true``.

        Args:
            start (Path): Directory to start from (usually the working directory).

        Returns:
            list[Path]: Discovered config files, root-most first.
        """
        per_dir: list[list[Path]] = []
        current: Path = start.resolve()
        for directory in (current, *current.parents):
            found: list[Path] = []
            stop = False
            for name in (PYPROJECT_TOML_NAME, LOGGABLE_TOML_NAME):
                candidate = directory / name
                if not candidate.is_file():
                    continue
                layer = cls.from_toml_file(candidate)
                if layer is None:
                    continue
                found.append(candidate)
                stop = stop or layer.root
            if found:
                per_dir.append(found)
            if stop:
                logger.debug("Config discovery stopped at root config in %s", directory)
                break

        discovered: list[Path] = [p for group in reversed(per_dir) for p in group]
        logger.debug("Discovered config files: %s", discovered)
        return discovered

    @classmethod
    def load_merged(
        cls,
        *,
        start: Path | None = None,
        extra_files: Iterable[Path] = (),
        no_config: bool = False,
    ) -> MutableConfig:
        """Return defaults merged with discovered and explicit config files.

        Args:
            start (Path | None): Discovery anchor (defaults to the working directory).
            extra_files (Iterable[Path]): Explicit config files, merged last.
            no_config (bool): Skip discovery (explicit files are still merged).

        Returns:
            MutableConfig: The merged draft.

        Raises:
            ConfigLoadError: If a config file cannot be read or parsed.
        """
        merged: MutableConfig = cls.from_defaults()

        paths: list[Path] = []
        if not no_config:
            paths.extend(cls.discover_local_config_files(start or Path.cwd()))
        paths.extend(extra_files)

        for path in paths:
            layer = cls.from_toml_file(path)
            if layer is None:
                merged.diagnostics.add_warning(f"No [tool.loggable] section in {path}")
                continue
            merged = merged.merge_with(layer)
        return merged

    def merge_with(self, other: MutableConfig) -> MutableConfig:
        """Return a new draft with ``other`` layered on top of this one.

        Args:
            other (MutableConfig): The higher-precedence layer.

        Returns:
            MutableConfig: The merged draft (neither input is modified).
        """
        merged_diagnostics = DiagnosticLog(items=list(self.diagnostics))
        merged_diagnostics.extend(other.diagnostics)
        return MutableConfig(
            logger_expr=other.logger_expr if other.logger_expr is not None else self.logger_expr,
            emit_name=other.emit_name if other.emit_name is not None else self.emit_name,
            escape_percent=(
                other.escape_percent if other.escape_percent is not None else self.escape_percent
            ),
            include_patterns=[*self.include_patterns, *other.include_patterns],
            exclude_patterns=[*self.exclude_patterns, *other.exclude_patterns],
            config_files=[*self.config_files, *other.config_files],
            root=self.root or other.root,
            diagnostics=merged_diagnostics,
        )

    def apply_cli_args(self, args: ArgsLike) -> MutableConfig:
        """Apply CLI overrides in place and return ``self``.

        Recognised keys: ``logger``, ``emit_name``, ``escape_percent``,
        ``include_patterns``, ``exclude_patterns``. Missing or ``None`` values
        leave the draft unchanged.
        """
        if args.get("logger") is not None:
            self.logger_expr = str(args["logger"])
        if args.get("emit_name") is not None:
            self.emit_name = str(args["emit_name"])
        if args.get("escape_percent") is not None:
            self.escape_percent = bool(args["escape_percent"])
        self.include_patterns.extend(args.get("include_patterns") or ())
        self.exclude_patterns.extend(args.get("exclude_patterns") or ())
        logger.trace("Config after CLI overrides: %s", self)
        return self
