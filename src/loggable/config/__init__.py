# topmark:header:start
#
#   project      : Loggable
#   file         : __init__.py
#   file_relpath : src/loggable/config/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 The Loggable Authors
#
# topmark:header:end

"""Configuration handling for Loggable.

Configuration is read from ``loggable.toml`` or from ``[tool.loggable]`` in
``pyproject.toml`` (parsed with `tomlkit`), layered over the built-in
defaults, and overridden by CLI options.

Submodules:
    - `loggable.config.model`: `MutableConfig` builder and frozen `Config`.
    - `loggable.config.io`: TOML loading and typed getters.
    - `loggable.config.keys`: canonical section and key names.
    - `loggable.config.logging`: internal logging setup.

Note:
    This package re-exports nothing. `loggable.config.logging` is imported by
    almost every module, and importing it must not pull in the configuration
    model (which itself depends on `loggable.diagnostic`).
"""
