"""
Identifier occurrences of a printed declaration.

A declaration is printed to display text, and that text is parsed again.
:func:`collect_occurrences` walks the resulting tree and records, for every
identifier it meets, the anchor the identifier defines (if any) and the link
it carries (if any), keyed by the ``(row, col)`` where the identifier starts.
The annotator then looks tokens up by position, so the two passes never need
to agree on an ordering. Columns count characters, as :mod:`tokenize` does,
not the UTF-8 bytes :mod:`ast` reports.
"""

from __future__ import annotations

import ast
import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Protocol

from ..exceptions import IdentifierError
from ..source.package import (
    Binding,
    DeclBinding,
    ImportBinding,
    base_name,
    is_protocol,
    target_names,
)
from .resolver import BUILTINS, IdentifierResolver, is_predeclared

__all__ = ["Kind", "AnchorPoint", "Occurrence", "Scope", "collect_occurrences", "safe_id"]

Position = tuple[int, int]

_BAD_ID_RE = re.compile(r"[^\w.]")


class Kind(str, Enum):
    CONSTANT = "constant"
    VARIABLE = "variable"
    TYPE = "type"
    FUNCTION = "function"
    METHOD = "method"
    FIELD = "field"


def safe_id(s: str) -> str:
    """Return s if it only holds identifier characters and dots.

    Raises:
        IdentifierError: s contains any other character.
    """
    m = _BAD_ID_RE.search(s)
    if m:
        raise IdentifierError(
            f"invalid character {m.group()!r} in anchor ID {s!r}", details={"id": s}
        )
    return s


@dataclass(frozen=True)
class AnchorPoint:
    """An addressable location in the rendered declaration."""

    id: str
    kind: Kind

    def __post_init__(self) -> None:
        safe_id(self.id)


@dataclass(frozen=True)
class Occurrence:
    name: str
    position: Position
    anchor: AnchorPoint | None = None
    href: str | None = None


class Scope(Protocol):
    def lookup(self, name: str) -> Binding | None: ...


def _value_kind(stmt: ast.stmt, name: str) -> Kind:
    type_alias = getattr(ast, "TypeAlias", None)
    if type_alias is not None and isinstance(stmt, type_alias):
        return Kind.TYPE
    if isinstance(stmt, ast.AnnAssign):
        hint = base_name(stmt.annotation)
        if hint == "TypeAlias":
            return Kind.TYPE
        if hint == "Final":
            return Kind.CONSTANT
    if name.isupper():
        return Kind.CONSTANT
    return Kind.VARIABLE


def _attr_position(node: ast.Attribute) -> Position:
    return (node.end_lineno, node.end_col_offset - len(node.attr.encode("utf-8")))


def _name_position(expr: ast.expr) -> Position | None:
    """Position of the terminal name of a base class expression."""
    while isinstance(expr, ast.Subscript):
        expr = expr.value
    if isinstance(expr, ast.Name):
        return (expr.lineno, expr.col_offset)
    if isinstance(expr, ast.Attribute):
        return _attr_position(expr)
    return None


class _OccurrenceCollector(ast.NodeVisitor):
    def __init__(self, scope: Scope, resolver: IdentifierResolver, receiver: str | None) -> None:
        self.scope = scope
        self.resolver = resolver
        self.receiver = receiver
        self.occurrences: dict[Position, Occurrence] = {}
        self._locals: list[set[str]] = []
        self._class: str | None = None

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _add(self, name: str, position: Position, anchor: AnchorPoint | None = None,
             href: str | None = None) -> None:
        self.occurrences[position] = Occurrence(name, position, anchor, href)

    def _is_local(self, name: str) -> bool:
        return any(name in frame for frame in self._locals)

    def _href(self, name: str) -> str | None:
        binding = self.scope.lookup(name)
        if binding is None:
            return self.resolver.to_url(BUILTINS, name) if is_predeclared(name) else None
        if isinstance(binding, DeclBinding):
            return "#" + name
        if isinstance(binding, ImportBinding) and binding.symbol:
            return self.resolver.to_url(binding.path, binding.symbol)
        return None

    def _namespace(self, name: str) -> str | None:
        if self._is_local(name):
            return None
        binding = self.scope.lookup(name)
        if isinstance(binding, ImportBinding) and binding.symbol is None:
            return binding.path
        return None

    def _type_params(self, node: ast.AST) -> None:
        for param in getattr(node, "type_params", None) or ():
            offset = {"ParamSpec": 2, "TypeVarTuple": 1}.get(type(param).__name__, 0)
            self._add(param.name, (param.lineno, param.col_offset + offset))
            for attr in ("bound", "default_value"):
                value = getattr(param, attr, None)
                if value is not None:
                    self.visit(value)

    def _value_statement(self, stmt: ast.stmt) -> None:
        if isinstance(stmt, ast.Assign):
            targets, annotation = stmt.targets, None
        elif isinstance(stmt, ast.AnnAssign):
            targets, annotation = [stmt.target], stmt.annotation
        else:
            targets, annotation = [stmt.name], None
            self._type_params(stmt)
        for target in targets:
            names = list(target_names(target))
            if not names:
                self.visit(target)
                continue
            for n in names:
                if self._class is not None:
                    anchor = AnchorPoint(f"{self._class}.{n.id}", Kind.FIELD)
                else:
                    anchor = AnchorPoint(n.id, _value_kind(stmt, n.id))
                self._add(n.id, (n.lineno, n.col_offset), anchor)
        if annotation is not None:
            self.visit(annotation)
        if stmt.value is not None:
            self.visit(stmt.value)

    # -------------------------------------------------------------------------
    # Statements
    # -------------------------------------------------------------------------

    def visit_Assign(self, node: ast.Assign) -> None:
        self._value_statement(node)

    def visit_AnnAssign(self, node: ast.AnnAssign) -> None:
        self._value_statement(node)

    def visit_TypeAlias(self, node: ast.AST) -> None:
        self._value_statement(node)

    def _function(self, node: ast.FunctionDef | ast.AsyncFunctionDef, keyword: str) -> None:
        if self._class is not None:
            anchor = AnchorPoint(f"{self._class}.{node.name}", Kind.METHOD)
        elif self.receiver:
            anchor = AnchorPoint(f"{self.receiver}.{node.name}", Kind.METHOD)
        else:
            anchor = AnchorPoint(node.name, Kind.FUNCTION)
        self._add(node.name, (node.lineno, node.col_offset + len(keyword)), anchor)
        for decorator in node.decorator_list:
            self.visit(decorator)
        self._type_params(node)
        self.visit(node.args)
        if node.returns is not None:
            self.visit(node.returns)

    def visit_FunctionDef(self, node: ast.FunctionDef) -> None:
        self._function(node, "def ")

    def visit_AsyncFunctionDef(self, node: ast.AsyncFunctionDef) -> None:
        self._function(node, "async def ")

    def visit_ClassDef(self, node: ast.ClassDef) -> None:
        position = (node.lineno, node.col_offset + len("class "))
        for decorator in node.decorator_list:
            self.visit(decorator)
        if self._class is not None:
            # nested class stub
            self._add(node.name, position)
            for base in node.bases:
                self.visit(base)
            for kw in node.keywords:
                self.visit(kw)
            return

        self._add(node.name, position, AnchorPoint(node.name, Kind.TYPE))
        self._type_params(node)
        protocol = is_protocol(node)
        for base in node.bases:
            self.visit(base)
            name, pos = base_name(base), _name_position(base)
            if protocol or name is None or pos not in self.occurrences:
                continue
            self.occurrences[pos] = replace(
                self.occurrences[pos], anchor=AnchorPoint(f"{node.name}.{name}", Kind.FIELD)
            )
        for kw in node.keywords:
            self.visit(kw)

        self._class = node.name
        try:
            for stmt in node.body:
                self.visit(stmt)
        finally:
            self._class = None

    # -------------------------------------------------------------------------
    # Expressions
    # -------------------------------------------------------------------------

    def visit_Name(self, node: ast.Name) -> None:
        position = (node.lineno, node.col_offset)
        if not isinstance(node.ctx, ast.Load) or self._is_local(node.id):
            self._add(node.id, position)
        else:
            self._add(node.id, position, href=self._href(node.id))

    def visit_Attribute(self, node: ast.Attribute) -> None:
        if isinstance(node.value, ast.Name):
            path = self._namespace(node.value.id)
            if path is not None:
                self._add(node.value.id, (node.value.lineno, node.value.col_offset),
                          href=self.resolver.to_url(path))
                self._add(node.attr, _attr_position(node), href=self.resolver.to_url(path, node.attr))
                return
        self.visit(node.value)
        self._add(node.attr, _attr_position(node))

    def visit_arg(self, node: ast.arg) -> None:
        self._add(node.arg, (node.lineno, node.col_offset))
        if node.annotation is not None:
            self.visit(node.annotation)

    def visit_keyword(self, node: ast.keyword) -> None:
        if node.arg is not None:
            self._add(node.arg, (node.lineno, node.col_offset))
        self.visit(node.value)

    def visit_Lambda(self, node: ast.Lambda) -> None:
        args = node.args
        names = {a.arg for a in args.posonlyargs + args.args + args.kwonlyargs}
        names.update(a.arg for a in (args.vararg, args.kwarg) if a is not None)
        self._locals.append(names)
        try:
            self.generic_visit(node)
        finally:
            self._locals.pop()

    def _comprehension(self, node: ast.AST) -> None:
        names = {n.id for gen in node.generators for n in ast.walk(gen.target) if isinstance(n, ast.Name)}
        self._locals.append(names)
        try:
            self.generic_visit(node)
        finally:
            self._locals.pop()

    visit_ListComp = _comprehension
    visit_SetComp = _comprehension
    visit_DictComp = _comprehension
    visit_GeneratorExp = _comprehension

    def visit_JoinedStr(self, node: ast.JoinedStr) -> None:
        # f-string internals are not tokenized as names on every version
        return


def _char_columns(source: str) -> Callable[[Position], Position]:
    """Map ast positions (UTF-8 byte columns) to tokenize positions (characters)."""
    lines = [line.encode("utf-8") for line in source.split("\n")]

    def convert(position: Position) -> Position:
        row, col = position
        if row > len(lines):
            return position
        return (row, len(lines[row - 1][:col].decode("utf-8", errors="replace")))

    return convert


def collect_occurrences(
    tree: ast.Module,
    source: str,
    scope: Scope,
    resolver: IdentifierResolver,
    receiver: str | None = None,
) -> dict[Position, Occurrence]:
    """Map the start position of each identifier in tree to its Occurrence.

    Args:
        tree: Parse of a printed declaration.
        source: The printed declaration tree was parsed from. Positions are
            reported as character columns of this text.
        scope: Resolves module-level names to bindings.
        resolver: Builds hrefs for bound and builtin names.
        receiver: Class name when the declaration is a method.

    Raises:
        IdentifierError: An anchor ID would contain invalid characters.
    """
    collector = _OccurrenceCollector(scope, resolver, receiver)
    collector.visit(tree)
    convert = _char_columns(source)
    occurrences = {}
    for position, occ in collector.occurrences.items():
        position = convert(position)
        occurrences[position] = replace(occ, position=position)
    return dict(sorted(occurrences.items()))
