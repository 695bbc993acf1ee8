"""
Module source to documented declarations.

This is the parser-facing side of doclink: it turns one module's source text
into a :class:`Package` holding

- the module docstring,
- the names bound by imports (namespaces and imported symbols),
- the public top-level declarations, each with its doc text, and
- a comment map used to carry ``#`` comments into declaration output.

Names are resolved syntactically: a name is bound to a top-level declaration
of the page, to an import, or to nothing. No type inference is attempted.
"""

from __future__ import annotations

import ast
import inspect
import io
import tokenize
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Union

from .._logging import scoped_logger
from ..exceptions import SourceError

__all__ = [
    "ImportBinding",
    "DeclBinding",
    "Binding",
    "DeclKind",
    "CommentMap",
    "Declaration",
    "Package",
    "is_exported",
    "is_shown_method",
    "is_protocol",
    "base_name",
    "target_names",
]

log = scoped_logger("source")

_SHOWN_DUNDERS = frozenset({"__init__", "__call__"})
_PROTOCOL = "Protocol"


# =============================================================================
# Bindings
# =============================================================================


@dataclass(frozen=True)
class ImportBinding:
    """A name bound by an import statement.

    ``import os.path`` binds ``os`` with path ``os``; ``import numpy as np``
    binds ``np`` with path ``numpy``; ``from pathlib import Path`` binds
    ``Path`` with path ``pathlib`` and symbol ``Path``.
    """

    name: str
    path: str
    symbol: str | None = None


@dataclass(frozen=True)
class DeclBinding:
    """A name bound to a top-level declaration of the page."""

    name: str


Binding = Union[ImportBinding, DeclBinding]


class DeclKind(str, Enum):
    VALUE = "value"
    TYPE = "type"
    FUNCTION = "function"


# =============================================================================
# Name helpers
# =============================================================================


def is_exported(name: str) -> bool:
    return not name.startswith("_")


def is_shown_method(name: str) -> bool:
    return is_exported(name) or name in _SHOWN_DUNDERS


def base_name(expr: ast.expr) -> str | None:
    """Terminal name of a base class expression (``pkg.Base[T]`` -> ``Base``)."""
    while isinstance(expr, ast.Subscript):
        expr = expr.value
    if isinstance(expr, ast.Name):
        return expr.id
    if isinstance(expr, ast.Attribute):
        return expr.attr
    return None


def is_protocol(node: ast.ClassDef) -> bool:
    """True when the class derives from ``Protocol``; its bases are then
    interface extensions rather than embedded fields."""
    return any(base_name(b) == _PROTOCOL for b in node.bases)


def target_names(target: ast.expr) -> Iterator[ast.Name]:
    """Yield the Name nodes bound by an assignment target, left to right."""
    if isinstance(target, ast.Name):
        yield target
    elif isinstance(target, (ast.Tuple, ast.List)):
        for elt in target.elts:
            yield from target_names(elt)
    elif isinstance(target, ast.Starred):
        yield from target_names(target.value)


def _value_targets(stmt: ast.stmt) -> list[ast.expr]:
    if isinstance(stmt, ast.Assign):
        return list(stmt.targets)
    if isinstance(stmt, ast.AnnAssign):
        return [stmt.target]
    type_alias = getattr(ast, "TypeAlias", None)
    if type_alias is not None and isinstance(stmt, type_alias):
        return [stmt.name]
    return []


def _is_value_stmt(stmt: ast.stmt) -> bool:
    targets = _value_targets(stmt)
    return bool(targets) and all(
        isinstance(t, ast.Name) or (isinstance(t, (ast.Tuple, ast.List)) and list(target_names(t)))
        for t in targets
    )


def _first_line(node: ast.stmt) -> int:
    decorators = getattr(node, "decorator_list", None) or []
    return min([node.lineno] + [d.lineno for d in decorators])


# =============================================================================
# Comments
# =============================================================================


def _comment_text(comment: str) -> str:
    """Comment token to doc text: drop '#', a Sphinx ':' marker and one space."""
    text = comment[1:]
    if text.startswith(":"):
        text = text[1:]
    if text.startswith(" "):
        text = text[1:]
    return text.rstrip()


@dataclass(frozen=True)
class CommentMap:
    """``#`` comments of a module keyed by line number."""

    comments: dict[int, str] = field(default_factory=dict)
    code_lines: frozenset[int] = frozenset()

    @classmethod
    def from_source(cls, source: str) -> CommentMap:
        comments: dict[int, str] = {}
        code_lines: set[int] = set()
        skip = {tokenize.COMMENT, tokenize.NL, tokenize.NEWLINE, tokenize.INDENT,
                tokenize.DEDENT, tokenize.ENDMARKER}
        try:
            for tok in tokenize.generate_tokens(io.StringIO(source).readline):
                if tok.type == tokenize.COMMENT:
                    comments[tok.start[0]] = tok.string
                elif tok.type not in skip:
                    code_lines.update(range(tok.start[0], tok.end[0] + 1))
        except (tokenize.TokenError, SyntaxError) as exc:
            raise SourceError(f"cannot tokenize module source: {exc}") from exc
        return cls(comments, frozenset(code_lines))

    def leading(self, lineno: int) -> list[str]:
        """Comment-only lines directly above lineno, top to bottom."""
        out = []
        line = lineno - 1
        while line in self.comments and line not in self.code_lines:
            text = self.comments[line]
            if text.startswith("#!") or "-*- coding" in text:
                break
            out.append(text)
            line -= 1
        out.reverse()
        return out

    def trailing(self, lineno: int) -> str | None:
        """Comment sharing a line with code, if any."""
        if lineno in self.code_lines:
            return self.comments.get(lineno)
        return None


# =============================================================================
# Declarations
# =============================================================================


@dataclass
class Declaration:
    """One documented top-level construct.

    A VALUE declaration groups adjacent module-level assignments; a TYPE
    declaration holds one class; a FUNCTION declaration holds one function,
    or one method when ``receiver`` names the class it belongs to.
    """

    kind: DeclKind
    nodes: tuple[ast.stmt, ...]
    doc: str = ""
    receiver: str | None = None
    comments: CommentMap = field(default_factory=CommentMap)
    methods: list[Declaration] = field(default_factory=list)

    @property
    def names(self) -> list[str]:
        if self.kind is DeclKind.VALUE:
            return [n.id for stmt in self.nodes for t in _value_targets(stmt) for n in target_names(t)]
        return [self.nodes[0].name]

    @property
    def name(self) -> str:
        """Display name; ``Class.method`` for methods."""
        names = self.names
        first = names[0] if names else ""
        return f"{self.receiver}.{first}" if self.receiver else first

    def member_ids(self) -> dict[str, str]:
        """Member name to anchor ID (``Type.member``) for a class declaration."""
        if self.kind is not DeclKind.TYPE:
            return {}
        node = self.nodes[0]
        ids: dict[str, str] = {}
        if not is_protocol(node):
            for base in node.bases:
                name = base_name(base)
                if name:
                    ids[name] = f"{node.name}.{name}"
        for stmt in node.body:
            if isinstance(stmt, (ast.Assign, ast.AnnAssign)):
                for t in _value_targets(stmt):
                    for n in target_names(t):
                        if is_exported(n.id):
                            ids[n.id] = f"{node.name}.{n.id}"
            elif isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef)) and is_shown_method(stmt.name):
                ids[stmt.name] = f"{node.name}.{stmt.name}"
        return ids


def _docstring(node: ast.AST) -> str:
    return ast.get_docstring(node, clean=True) or ""


def _docstring_of_expr(stmt: ast.Expr) -> str:
    return inspect.cleandoc(stmt.value.value)


def _is_string_expr(stmt: ast.stmt) -> bool:
    return (
        isinstance(stmt, ast.Expr)
        and isinstance(stmt.value, ast.Constant)
        and isinstance(stmt.value.value, str)
    )


# =============================================================================
# Package
# =============================================================================


class Package:
    """The documented contents of one module, with its name bindings.

    Build one with :meth:`from_source`. A Package is read-only once built and
    may be shared by concurrent renderers.
    """

    def __init__(
        self,
        import_path: str,
        doc: str = "",
        imports: dict[str, ImportBinding] | None = None,
        declarations: list[Declaration] | None = None,
    ) -> None:
        self.import_path = import_path
        self.doc = doc
        self.imports = dict(imports or {})
        self.declarations = list(declarations or [])
        self._top_level = frozenset(n for d in self.declarations for n in d.names)

    @classmethod
    def from_source(cls, source: str, import_path: str) -> Package:
        """Parse module source text into a Package.

        Raises:
            SourceError: The source does not parse.
        """
        try:
            module = ast.parse(source)
        except SyntaxError as exc:
            raise SourceError(
                f"cannot parse {import_path}: {exc.msg}",
                details={"path": import_path, "lineno": exc.lineno},
            ) from exc
        comments = CommentMap.from_source(source)

        imports: dict[str, ImportBinding] = {}
        decls: list[Declaration] = []
        group: list[ast.stmt] = []

        def close_group() -> None:
            if group:
                doc = "\n".join(_comment_text(c) for c in comments.leading(_first_line(group[0])))
                decls.append(Declaration(DeclKind.VALUE, tuple(group), doc=doc, comments=comments))
                group.clear()

        for i, stmt in enumerate(module.body):
            if isinstance(stmt, ast.Import):
                close_group()
                for alias in stmt.names:
                    if alias.asname:
                        imports[alias.asname] = ImportBinding(alias.asname, alias.name)
                    else:
                        top = alias.name.split(".")[0]
                        imports[top] = ImportBinding(top, top)
            elif isinstance(stmt, ast.ImportFrom):
                close_group()
                path = "." * stmt.level + (stmt.module or "")
                for alias in stmt.names:
                    if alias.name == "*":
                        continue
                    name = alias.asname or alias.name
                    imports[name] = ImportBinding(name, path, alias.name)
            elif _is_value_stmt(stmt):
                names = [n.id for t in _value_targets(stmt) for n in target_names(t)]
                if not any(is_exported(n) for n in names):
                    close_group()
                    continue
                if group:
                    first = stmt.lineno - len(comments.leading(stmt.lineno))
                    if first != group[-1].end_lineno + 1:
                        close_group()
                group.append(stmt)
            elif _is_string_expr(stmt) and i > 0 and group and group[-1] is module.body[i - 1]:
                # attribute docstring documents a lone assignment
                if len(group) == 1:
                    doc = _docstring_of_expr(stmt)
                    decls.append(Declaration(DeclKind.VALUE, tuple(group), doc=doc, comments=comments))
                    group.clear()
                else:
                    close_group()
            elif isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef)):
                close_group()
                if is_exported(stmt.name):
                    decls.append(Declaration(DeclKind.FUNCTION, (stmt,), doc=_docstring(stmt), comments=comments))
            elif isinstance(stmt, ast.ClassDef):
                close_group()
                if is_exported(stmt.name):
                    decls.append(cls._class_declaration(stmt, comments))
            else:
                close_group()
        close_group()

        package = cls(import_path, _docstring(module), imports, decls)
        log.debug(
            "Loaded module",
            extra={"path": import_path, "declarations": len(decls), "imports": len(imports)},
        )
        return package

    @staticmethod
    def _class_declaration(node: ast.ClassDef, comments: CommentMap) -> Declaration:
        decl = Declaration(DeclKind.TYPE, (node,), doc=_docstring(node), comments=comments)
        if not is_protocol(node):
            for stmt in node.body:
                if isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef)) and is_shown_method(stmt.name):
                    decl.methods.append(
                        Declaration(
                            DeclKind.FUNCTION,
                            (stmt,),
                            doc=_docstring(stmt),
                            receiver=node.name,
                            comments=comments,
                        )
                    )
        return decl

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def lookup(self, name: str) -> Binding | None:
        """Binding of a module-level name, or None if unresolved."""
        if name in self._top_level:
            return DeclBinding(name)
        return self.imports.get(name)

    @property
    def namespaces(self) -> dict[str, str]:
        """Imported module names to their import paths."""
        return {b.name: b.path for b in self.imports.values() if b.symbol is None}

    @property
    def imported_symbols(self) -> dict[str, tuple[str, str]]:
        """Names bound by ``from m import x`` to ``(m, x)``."""
        return {b.name: (b.path, b.symbol) for b in self.imports.values() if b.symbol is not None}

    @property
    def anchor_targets(self) -> frozenset[str]:
        """Every anchor ID a page for this package defines."""
        targets = set(self._top_level)
        for decl in self.declarations:
            targets.update(decl.member_ids().values())
            targets.update(m.name for m in decl.methods)
        return frozenset(targets)

    def all_declarations(self) -> Iterator[Declaration]:
        """Declarations in document order, methods following their class."""
        for decl in self.declarations:
            yield decl
            yield from decl.methods

    def __repr__(self) -> str:
        return f"Package({self.import_path!r}, declarations={len(self.declarations)})"
