# topmark:header:start
#
#   project      : Loggable
#   file         : __main__.py
#   file_relpath : src/loggable/__main__.py
#   license      : MIT
#   copyright    : (c) 2025 The Loggable Authors
#
# topmark:header:end

"""Module entry point for running Loggable via ``python -m loggable``.

It delegates directly to `loggable.cli.main.cli`, so ``python -m loggable``
behaves exactly like the ``loggable`` console script.

Examples:
    Preview call-site expansion using the module interface::

        python -m loggable expand src
"""

from __future__ import annotations

from loggable.cli.main import cli

if __name__ == "__main__":
    # We call the Click group directly
    cli()
