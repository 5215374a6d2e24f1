# topmark:header:start
#
#   project      : Loggable
#   file         : config_resolver.py
#   file_relpath : src/loggable/cli/config_resolver.py
#   license      : MIT
#   copyright    : (c) 2025 The Loggable Authors
#
# topmark:header:end

"""Resolve the Loggable configuration from Click parameters.

Bridges CLI parsing and the configuration layer: merges defaults, discovered
and explicit config files, applies CLI overrides and freezes the result. Config
failures are turned into `LoggableConfigError` (exit code 78), invalid CLI
values into `LoggableUsageError` (exit code 64).
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from loggable.cli.errors import LoggableConfigError, LoggableUsageError
from loggable.config.io import ConfigLoadError
from loggable.config.logging import get_logger
from loggable.config.model import MutableConfig, is_valid_emit_name, is_valid_logger_expr

if TYPE_CHECKING:
    from loggable.config.logging import LoggableLogger
    from loggable.config.model import ArgsLike, Config

logger: LoggableLogger = get_logger(__name__)


def validate_cli_overrides(args: ArgsLike) -> None:
    """Reject invalid ``--logger`` and ``--emit-name`` values before merging.

    Raises:
        LoggableUsageError: If a value is not a valid expression or identifier.
    """
    emit_name = args.get("emit_name")
    if emit_name is not None and not is_valid_emit_name(emit_name):
        raise LoggableUsageError(f"--emit-name: {emit_name!r} is not a valid Python identifier.")
    logger_expr = args.get("logger")
    if logger_expr is not None and not is_valid_logger_expr(logger_expr):
        raise LoggableUsageError(f"--logger: {logger_expr!r} is not a valid Python expression.")


def resolve_config_from_click(
    *,
    no_config: bool,
    config_paths: list[str],
    logger_expr: str | None = None,
    emit_name: str | None = None,
    escape_percent: bool | None = None,
    include_patterns: list[str] | None = None,
    exclude_patterns: list[str] | None = None,
) -> Config:
    """Build a frozen `Config` from Click parameters.

    Resolution order (lowest to highest precedence):
      1. Built-in defaults.
      2. Discovered project configs (root-most first), unless ``--no-config``:
         ``pyproject.toml`` (``[tool.loggable]``) then ``loggable.toml`` in each
         directory, stopping at a config that sets ``root = true``.
      3. Explicit config files passed via ``--config``, merged in order.
      4. CLI overrides.

    Args:
        no_config (bool): If True, skip config discovery.
        config_paths (list[str]): Extra config files to merge.
        logger_expr (str | None): ``--logger`` override.
        emit_name (str | None): ``--emit-name`` override.
        escape_percent (bool | None): ``--escape-percent/--no-escape-percent`` override.
        include_patterns (list[str] | None): ``--include`` patterns.
        exclude_patterns (list[str] | None): ``--exclude`` patterns.

    Returns:
        Config: The frozen configuration.

    Raises:
        LoggableUsageError: If a CLI override is invalid.
        LoggableConfigError: If a config file is missing, unreadable or invalid.
    """
    args: dict[str, object] = {
        "logger": logger_expr,
        "emit_name": emit_name,
        "escape_percent": escape_percent,
        "include_patterns": list(include_patterns or ()),
        "exclude_patterns": list(exclude_patterns or ()),
    }
    logger.trace("CLI overrides: %s", args)
    validate_cli_overrides(args)

    extra_files: list[Path] = []
    for entry in config_paths:
        p = Path(entry)
        if not p.is_file():
            raise LoggableConfigError(f"Config file not found: {p}")
        logger.info("Loading explicit config: %s", p)
        extra_files.append(p)

    try:
        draft: MutableConfig = MutableConfig.load_merged(
            start=Path.cwd(), extra_files=extra_files, no_config=no_config
        )
    except ConfigLoadError as exc:
        raise LoggableConfigError(f"Invalid configuration: {exc}") from exc

    draft.apply_cli_args(args)
    try:
        return draft.freeze()
    except ValueError as exc:
        raise LoggableConfigError(str(exc)) from exc
