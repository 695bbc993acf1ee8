"""
Canonical display text for declarations.

Functions and methods print as a one-line signature ending in ``...``.
Classes print their header, their public fields and, for protocols, their
method stubs; other methods are documented as separate declarations.
Value groups print each assignment with the ``#`` comments that sat on and
above it in the module, plus any notes left by the literal trimmer.
"""

from __future__ import annotations

import ast
import copy

from .package import (
    CommentMap,
    DeclKind,
    Declaration,
    is_exported,
    is_protocol,
    is_shown_method,
    target_names,
)
from .trim import statement_notes

__all__ = ["print_declaration", "synopsis", "FILTERED_NOTE", "INDENT"]

INDENT = "    "
FILTERED_NOTE = "# contains filtered or private members"


def _header(node: ast.FunctionDef | ast.AsyncFunctionDef | ast.ClassDef) -> list[str]:
    """Decorator and definition lines of node, without its body."""
    stub = copy.copy(node)
    stub.body = [ast.Pass()]
    lines = ast.unparse(stub).strip("\n").split("\n")
    return lines[:-1]


def _stub(node: ast.FunctionDef | ast.AsyncFunctionDef | ast.ClassDef) -> list[str]:
    lines = _header(node)
    lines[-1] += " ..."
    return lines


def _trailing(stmt: ast.stmt, comments: CommentMap) -> str:
    parts = []
    comment = comments.trailing(stmt.end_lineno)
    if comment:
        parts.append(comment)
    parts.extend(f"# {note}" for note in statement_notes(stmt))
    return "  " + "  ".join(parts) if parts else ""


def _statement(stmt: ast.stmt, comments: CommentMap, indent: str, leading: bool = True) -> list[str]:
    lines = [indent + c for c in comments.leading(stmt.lineno)] if leading else []
    body = ast.unparse(stmt).split("\n")
    body[-1] += _trailing(stmt, comments)
    lines.extend(indent + line for line in body)
    return lines


def _public_value(stmt: ast.stmt) -> bool:
    targets = stmt.targets if isinstance(stmt, ast.Assign) else [stmt.target]
    names = [n.id for t in targets for n in target_names(t)]
    return bool(names) and all(is_exported(n) for n in names)


def _class_lines(node: ast.ClassDef, comments: CommentMap) -> list[str]:
    lines = _header(node)
    protocol = is_protocol(node)
    body: list[str] = []
    filtered = False
    for stmt in node.body:
        if isinstance(stmt, (ast.Assign, ast.AnnAssign)):
            if _public_value(stmt):
                body.extend(_statement(stmt, comments, INDENT))
            else:
                filtered = True
        elif isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef)):
            if not is_shown_method(stmt.name):
                filtered = True
            elif protocol:
                first = min([stmt.lineno] + [d.lineno for d in stmt.decorator_list])
                body.extend(INDENT + c for c in comments.leading(first))
                body.extend(INDENT + line for line in _stub(stmt))
        elif isinstance(stmt, ast.ClassDef):
            if is_exported(stmt.name):
                body.extend(INDENT + line for line in _stub(stmt))
            else:
                filtered = True
        elif isinstance(stmt, (ast.Expr, ast.Pass)):
            # docstrings, bare ellipses and pass
            continue
        else:
            filtered = True
    if filtered:
        body.append(INDENT + FILTERED_NOTE)
    if not body:
        body.append(INDENT + "...")
    return lines + body


def print_declaration(decl: Declaration, nodes: list[ast.stmt] | tuple[ast.stmt, ...] | None = None) -> str:
    """Render decl as display source text.

    Args:
        decl: The declaration to print.
        nodes: Replacement statements, typically a trimmed copy of
            ``decl.nodes``. Defaults to ``decl.nodes``.

    Returns:
        Source text that parses as a Python module, without a trailing newline.
    """
    nodes = decl.nodes if nodes is None else nodes
    comments = decl.comments
    if decl.kind is DeclKind.FUNCTION:
        lines = _stub(nodes[0])
    elif decl.kind is DeclKind.TYPE:
        lines = _class_lines(nodes[0], comments)
    else:
        lines = []
        for i, stmt in enumerate(nodes):
            # leading comments of the first statement are the group's doc
            lines.extend(_statement(stmt, comments, "", leading=i > 0))
    return "\n".join(lines)


def synopsis(decl: Declaration) -> str:
    """One-line summary of decl for indexes.

    ``def name(args) -> ret`` for functions, ``class Name(bases)`` for
    classes, and the first assignment with its value elided for values.
    """
    node = decl.nodes[0]
    if decl.kind is not DeclKind.VALUE:
        return _header(node)[-1].removesuffix(":")
    if isinstance(node, ast.AnnAssign):
        text = f"{ast.unparse(node.target)}: {ast.unparse(node.annotation)}"
        return text + " = ..." if node.value is not None else text
    if isinstance(node, ast.Assign):
        return " = ".join(ast.unparse(t) for t in node.targets) + " = ..."
    # type X = ...
    return f"type {node.name.id} = ..."
