# topmark:header:start
#
#   project      : Loggable
#   file         : expander.py
#   file_relpath : src/loggable/expansion/expander.py
#   license      : MIT
#   copyright    : (c) 2025 The Loggable Authors
#
# topmark:header:end

"""Rewrite entry-point calls in Python source into generated backend calls.

Given a module such as::

    from loggable import log_info

    def login(name, token):
        log_info(f"User {name:public} logged in with {token}")

the expander produces::

    from loggable import log_info
    from loggable.runtime import emit as _loggable_emit

    def login(name, token):
        _loggable_emit('info', logger, 'User %{public}s logged in with %s', name, token)

Processing steps:
    1. Parse the module with `ast` and collect the entry-point calls
       (``log_debug`` ... ``log_fault`` imported from ``loggable``, or
       called as ``loggable.log_*``). Functions that merely share those
       names are left alone.
    2. For each call: check its shape, parse the template, compile it and
       render the replacement. A failing call becomes an error diagnostic and
       is left as is.
    3. When at least one call was rewritten, add the runtime import ahead of
       the first use of the emit name.
    4. Splice the replacements and the import into the original text, last
       edit first, so everything else (comments, formatting) is untouched.

Nested calls inside a rewritten call belong to the outer call and are not
visited. Expanding the output again finds no entry-point calls, so the
transformation is idempotent.
"""

from __future__ import annotations

import ast
import io
import re
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Final

from loggable.config.logging import get_logger
from loggable.config.model import MutableConfig
from loggable.constants import RUNTIME_EMIT, RUNTIME_MODULE
from loggable.diagnostic import DiagnosticLog
from loggable.expansion.io import detect_newline, read_source
from loggable.expansion.model import ExpansionResult, ExpansionSite
from loggable.template.compiler import compile_template, render_call
from loggable.template.errors import TemplateError, TemplateParseError
from loggable.template.model import Severity, SourceSpan
from loggable.template.parser import expression_text, parse_template, span_of

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

    from loggable.config.logging import LoggableLogger
    from loggable.config.model import Config

logger: LoggableLogger = get_logger(__name__)

LOGGABLE_MODULE: Final[str] = "loggable"
LOGGER_KEYWORD: Final[str] = "logger"

# Modules that export the entry points
ENTRY_POINT_MODULES: Final[frozenset[str]] = frozenset({LOGGABLE_MODULE, RUNTIME_MODULE})

# PEP 263 encoding declaration
_CODING_RE: Final[re.Pattern[str]] = re.compile(r"^[ \t\f]*#.*?coding[:=][ \t]*[-\w.]+")


@dataclass(frozen=True, slots=True)
class EntryPointBindings:
    """Names under which a module can reach the entry points.

    Attributes:
        names (Mapping[str, str]): Local name -> entry-point name, for names
            imported with ``from loggable import log_info [as alias]``.
        modules (frozenset[str]): Local names bound to the ``loggable``
            package itself (``loggable.log_info(...)``).
    """

    names: Mapping[str, str] = field(default_factory=dict)
    modules: frozenset[str] = frozenset({LOGGABLE_MODULE})

    @classmethod
    def from_module(cls, tree: ast.Module) -> EntryPointBindings:
        """Collect the entry-point imports of a module.

        A bare ``log_*`` name only counts when it was imported from
        ``loggable`` or ``loggable.runtime``. A star import counts for every
        entry point the module does not define itself.
        """
        names: dict[str, str] = {}
        modules: set[str] = {LOGGABLE_MODULE}
        star = False
        for node in ast.walk(tree):
            if isinstance(node, ast.ImportFrom):
                if node.level or node.module not in ENTRY_POINT_MODULES:
                    continue
                for alias in node.names:
                    if alias.name == "*":
                        star = True
                    elif Severity.from_entry_point(alias.name) is not None:
                        names[alias.asname or alias.name] = alias.name
            elif isinstance(node, ast.Import):
                for alias in node.names:
                    if alias.name == LOGGABLE_MODULE and alias.asname:
                        modules.add(alias.asname)
        if star:
            for severity in Severity:
                ep: str = severity.entry_point
                if ep not in names and not module_defines_name(tree, ep):
                    names[ep] = ep
        return cls(names=names, modules=frozenset(modules))


def entry_point_name(func: ast.expr, bindings: EntryPointBindings | None = None) -> str | None:
    """Return the entry-point name called by ``func``, or None if it is not one.

    Recognised forms are ``loggable.log_info(...)`` and a bare ``log_info(...)``
    (or an alias of it) imported from ``loggable``.
    """
    if bindings is None:
        bindings = EntryPointBindings()
    name: str | None = None
    if isinstance(func, ast.Name):
        name = bindings.names.get(func.id)
    elif (
        isinstance(func, ast.Attribute)
        and isinstance(func.value, ast.Name)
        and func.value.id in bindings.modules
    ):
        name = func.attr
    if name is not None and Severity.from_entry_point(name) is not None:
        return name
    return None


@dataclass(frozen=True, slots=True)
class _CallSite:
    node: ast.Call
    entry_point: str
    severity: Severity


class _CallSiteFinder(ast.NodeVisitor):
    """Collect entry-point calls; the arguments of a found call are not visited."""

    def __init__(self, bindings: EntryPointBindings) -> None:
        self.bindings = bindings
        self.sites: list[_CallSite] = []

    def visit_Call(self, node: ast.Call) -> None:  # noqa: N802
        name = entry_point_name(node.func, self.bindings)
        severity = Severity.from_entry_point(name) if name else None
        if name is None or severity is None:
            self.generic_visit(node)
            return
        self.sites.append(_CallSite(node=node, entry_point=name, severity=severity))


class _SourceIndex:
    """Map ``ast`` positions (1-based line, UTF-8 byte column) to string offsets."""

    def __init__(self, source: str) -> None:
        # Split on the same line terminators the tokenizer accepts.
        self.lines: list[str] = io.StringIO(source, newline="").readlines()
        self.starts: list[int] = []
        pos = 0
        for line in self.lines:
            self.starts.append(pos)
            pos += len(line)
        self.length: int = pos

    def line_start(self, lineno: int) -> int:
        """Return the offset of the first character of ``lineno`` (1-based)."""
        if lineno > len(self.lines):
            return self.length
        return self.starts[lineno - 1]

    def offset(self, lineno: int, col_offset: int) -> int:
        """Return the string offset of an ``ast`` position."""
        if lineno > len(self.lines):
            return self.length
        line: str = self.lines[lineno - 1]
        prefix: str = line.encode("utf-8")[:col_offset].decode("utf-8", errors="ignore")
        return self.starts[lineno - 1] + len(prefix)


def _call_span(node: ast.Call, path: str) -> SourceSpan:
    return SourceSpan(
        path=path,
        line=node.lineno,
        column=node.col_offset,
        end_line=node.end_lineno,
        end_column=node.end_col_offset,
    )


def expand_call(
    site: _CallSite,
    *,
    source: str,
    path: str,
    config: Config,
) -> ExpansionSite:
    """Check, parse, compile and render one call site.

    Raises:
        TemplateError: If the call has the wrong shape or its template is invalid.
    """
    node: ast.Call = site.node
    span: SourceSpan = _call_span(node, path)

    if len(node.args) != 1 or isinstance(node.args[0], ast.Starred):
        raise TemplateParseError(
            f"{site.entry_point}() takes exactly one positional argument (the message), "
            f"got {len(node.args)}",
            span,
        )

    logger_expr: str = config.logger_expr
    for kw in node.keywords:
        if kw.arg != LOGGER_KEYWORD:
            name: str = "**" if kw.arg is None else kw.arg
            raise TemplateParseError(
                f"{site.entry_point}() got an unexpected keyword argument {name!r} "
                f"(only '{LOGGER_KEYWORD}=' is allowed)",
                span_of(kw, path, span),
            )
        logger_expr = expression_text(kw.value, source)

    template = parse_template(node.args[0], source=source, path=path)
    compiled = compile_template(template, site.severity, escape_percent=config.escape_percent)
    replacement: str = render_call(compiled, emit_name=config.emit_name, logger_expr=logger_expr)
    logger.trace("%s: %s -> %s", span, site.entry_point, replacement)
    return ExpansionSite(
        entry_point=site.entry_point,
        severity=site.severity,
        span=span,
        compiled=compiled,
        replacement=replacement,
    )


def module_defines_name(tree: ast.Module, name: str) -> bool:
    """Return True if a top-level def, class or assignment of ``tree`` binds ``name``."""
    for stmt in tree.body:
        if isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)):
            if stmt.name == name:
                return True
        elif isinstance(stmt, ast.Assign):
            if any(isinstance(t, ast.Name) and t.id == name for t in stmt.targets):
                return True
        elif isinstance(stmt, ast.AnnAssign):
            if isinstance(stmt.target, ast.Name) and stmt.target.id == name:
                return True
    return False


def module_binds_name(tree: ast.Module, name: str) -> bool:
    """Return True if a top-level statement of ``tree`` binds ``name``."""
    for stmt in tree.body:
        if isinstance(stmt, (ast.Import, ast.ImportFrom)):
            for alias in stmt.names:
                if (alias.asname or alias.name.split(".")[0]) == name:
                    return True
    return module_defines_name(tree, name)


def _preamble_end(tree: ast.Module) -> ast.stmt | None:
    """Return the last statement of the docstring and ``__future__`` preamble."""
    last: ast.stmt | None = None
    body: list[ast.stmt] = tree.body
    i = 0
    if (
        body
        and isinstance(body[0], ast.Expr)
        and isinstance(body[0].value, ast.Constant)
        and isinstance(body[0].value.value, str)
    ):
        last = body[0]
        i = 1
    while i < len(body):
        stmt = body[i]
        if not (isinstance(stmt, ast.ImportFrom) and stmt.module == "__future__"):
            break
        last = stmt
        i += 1
    return last


def import_insertion_line(tree: ast.Module, lines: list[str]) -> int:
    """Return the number of leading lines the runtime import goes after.

    The import follows the module docstring and any ``from __future__``
    imports. Without those, it follows a shebang line and an encoding
    declaration, if present.
    """
    last = _preamble_end(tree)
    if last is not None:
        return last.end_lineno or last.lineno

    after = 0
    for lineno, line in enumerate(lines[:2], start=1):
        if (lineno == 1 and line.startswith("#!")) or _CODING_RE.match(line):
            after = lineno
        else:
            break
    return after


def _import_edit(
    tree: ast.Module, index: _SourceIndex, statement: str, newline: str
) -> tuple[int, int, str]:
    """Return the edit that inserts ``statement`` ahead of every use of the emit name.

    When the preamble's last statement shares its line with the next
    statement (``"Doc."; log_info(...)``), the import is chained right
    after it with ``;``. Otherwise it goes on its own line.
    """
    last = _preamble_end(tree)
    if last is not None and last.end_lineno is not None and last.end_col_offset is not None:
        position: int = tree.body.index(last)
        following: ast.stmt | None = (
            tree.body[position + 1] if position + 1 < len(tree.body) else None
        )
        if following is not None and following.lineno == last.end_lineno:
            at: int = index.offset(last.end_lineno, last.end_col_offset)
            return (at, at, "; " + statement)

    at = index.line_start(import_insertion_line(tree, index.lines) + 1)
    text: str = statement + newline
    if at == index.length and at and not index.lines[-1].endswith(("\n", "\r")):
        text = newline + text
    return (at, at, text)


def runtime_import(emit_name: str) -> str:
    """Return the import statement that binds the runtime ``emit`` to ``emit_name``."""
    if emit_name == RUNTIME_EMIT:
        return f"from {RUNTIME_MODULE} import {RUNTIME_EMIT}"
    return f"from {RUNTIME_MODULE} import {RUNTIME_EMIT} as {emit_name}"


def expand_source(
    source: str,
    *,
    path: str = "<string>",
    config: Config | None = None,
) -> ExpansionResult:
    """Expand all entry-point calls in a module's source text.

    Args:
        source (str): Module source text.
        path (str): File name used in spans and diffs.
        config (Config | None): Expansion settings; defaults when None.

    Returns:
        ExpansionResult: The expanded text, the rewritten sites and the
            diagnostics of the sites that failed. Never raises for a bad
            call site.
    """
    if config is None:
        config = MutableConfig.from_defaults().freeze()
    diagnostics = DiagnosticLog()

    try:
        tree: ast.Module = ast.parse(source, filename=path)
    except SyntaxError as exc:
        span = SourceSpan(path=path, line=exc.lineno or 1, column=max((exc.offset or 1) - 1, 0))
        diagnostics.add_error(f"cannot parse module: {exc.msg}", span)
        return ExpansionResult(
            path=path, original=source, expanded=source, diagnostics=diagnostics.freeze()
        )
    except ValueError as exc:
        diagnostics.add_error(f"cannot parse module: {exc}")
        return ExpansionResult(
            path=path, original=source, expanded=source, diagnostics=diagnostics.freeze()
        )

    finder = _CallSiteFinder(EntryPointBindings.from_module(tree))
    finder.visit(tree)
    call_sites: list[_CallSite] = sorted(
        finder.sites, key=lambda s: (s.node.lineno, s.node.col_offset)
    )
    logger.debug("%s: %d call site(s) found", path, len(call_sites))

    index = _SourceIndex(source)
    expanded_sites: list[ExpansionSite] = []
    edits: list[tuple[int, int, str]] = []
    for call_site in call_sites:
        try:
            site = expand_call(call_site, source=source, path=path, config=config)
        except TemplateError as exc:
            logger.debug("Call site not expanded: %s", exc)
            diagnostics.add_error(exc.message, exc.span or _call_span(call_site.node, path))
            continue
        node = call_site.node
        start = index.offset(node.lineno, node.col_offset)
        end = index.offset(node.end_lineno or node.lineno, node.end_col_offset or 0)
        edits.append((start, end, site.replacement))
        expanded_sites.append(site)

    if expanded_sites and not module_binds_name(tree, config.emit_name):
        statement: str = runtime_import(config.emit_name)
        edits.append(_import_edit(tree, index, statement, detect_newline(index.lines)))
        logger.debug("%s: inserting %r", path, statement)

    text: str = source
    for start, end, replacement in sorted(edits, reverse=True):
        text = text[:start] + replacement + text[end:]

    result = ExpansionResult(
        path=path,
        original=source,
        expanded=text,
        sites=tuple(expanded_sites),
        diagnostics=diagnostics.freeze(),
    )
    logger.info(
        "%s: %d call site(s) expanded, %d failed",
        path,
        len(expanded_sites),
        len(call_sites) - len(expanded_sites),
    )
    return result


def _unreadable(path: Path, reason: str) -> ExpansionResult:
    logger.error("Error reading %s: %s", path, reason)
    diagnostics = DiagnosticLog()
    diagnostics.add_error(reason, SourceSpan(path=str(path), line=1, column=0))
    return ExpansionResult(
        path=str(path),
        original="",
        expanded="",
        diagnostics=diagnostics.freeze(),
        read_error=reason,
    )


def expand_file(path: Path, *, config: Config | None = None) -> ExpansionResult:
    """Read a Python file as UTF-8 and expand it.

    A leading byte order mark is kept out of the parsed text and restored on
    both the original and the expanded text.

    Args:
        path (Path): File to expand.
        config (Config | None): Expansion settings; defaults when None.

    Returns:
        ExpansionResult: The result; read and decode failures are reported in
            ``read_error`` and as an error diagnostic.
    """
    try:
        source: str = read_source(path)
    except UnicodeDecodeError:
        return _unreadable(path, "file is not valid UTF-8")
    except OSError as exc:
        return _unreadable(path, f"cannot read file ({exc.strerror or exc})")

    bom: str = "\ufeff" if source.startswith("\ufeff") else ""
    result = expand_source(source[len(bom) :], path=str(path), config=config)
    if bom:
        result = replace(result, original=bom + result.original, expanded=bom + result.expanded)
    return result
