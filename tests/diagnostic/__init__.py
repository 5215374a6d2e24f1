# topmark:header:start
#
#   project      : Loggable
#   file         : __init__.py
#   file_relpath : tests/diagnostic/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 The Loggable Authors
#
# topmark:header:end
