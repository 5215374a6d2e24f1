# topmark:header:start
#
#   project      : Loggable
#   file         : constants.py
#   file_relpath : src/loggable/constants.py
#   license      : MIT
#   copyright    : (c) 2025 The Loggable Authors
#
# topmark:header:end

"""Loggable Constants."""

from __future__ import annotations

from importlib.metadata import version as get_version

LOGGABLE_VERSION: str = get_version("loggable")

# Config file names, discovered from the working directory upwards
LOGGABLE_TOML_NAME: str = "loggable.toml"
PYPROJECT_TOML_NAME: str = "pyproject.toml"

# The only recognised placeholder modifier (f-string format spec)
PUBLIC_MODIFIER: str = "public"

# Text substituted for values rendered under the default (private) policy
PRIVATE_REDACTION: str = "<private>"

# Module and attribute the generated calls are bound to
RUNTIME_MODULE: str = "loggable.runtime"
RUNTIME_EMIT: str = "emit"

DEFAULT_EMIT_NAME: str = "_loggable_emit"
DEFAULT_LOGGER_EXPR: str = "logger"

# Environment variables
ENV_LOG_LEVEL: str = "LOGGABLE_LOG_LEVEL"
ENV_SHOW_PRIVATE: str = "LOGGABLE_SHOW_PRIVATE"

