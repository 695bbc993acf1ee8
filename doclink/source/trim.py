"""
Elision of oversized literals in assignment values.

Long string constants and big list, tuple, set and dict displays make a
declaration unreadable. :class:`LiteralTrimmer` empties them in place and
records a short note on the owning statement, which the printer emits as a
trailing comment.
"""

from __future__ import annotations

import ast

from ..config import config

__all__ = ["LiteralTrimmer", "trim_literals", "statement_notes", "NOTES_ATTR"]

NOTES_ATTR = "doclink_notes"


def statement_notes(stmt: ast.stmt) -> list[str]:
    """Notes recorded on stmt by the trimmer, oldest first."""
    return getattr(stmt, NOTES_ATTR, [])


def _add_note(stmt: ast.stmt, note: str) -> None:
    notes = getattr(stmt, NOTES_ATTR, None)
    if notes is None:
        notes = []
        setattr(stmt, NOTES_ATTR, notes)
    notes.append(note)


class LiteralTrimmer(ast.NodeVisitor):
    """Replace oversized literal values of assignments, in place.

    Only the value expressions of ``Assign`` and ``AnnAssign`` statements are
    considered, in module bodies and class bodies alike. Running the trimmer
    twice over the same tree changes nothing the second time.

    Callers own the tree: run it over a copy when the original must survive.
    """

    def __init__(self, max_string_size: int | None = None, max_elements: int | None = None) -> None:
        self.max_string_size = config.max_string_size if max_string_size is None else max_string_size
        self.max_elements = config.max_elements if max_elements is None else max_elements

    def visit_Assign(self, node: ast.Assign) -> None:
        target = node.targets[0] if len(node.targets) == 1 else None
        if (
            isinstance(target, ast.Tuple)
            and isinstance(node.value, ast.Tuple)
            and len(target.elts) == len(node.value.elts)
        ):
            node.value.elts = [self._trim(node, v) for v in node.value.elts]
        else:
            node.value = self._trim(node, node.value)

    def visit_AnnAssign(self, node: ast.AnnAssign) -> None:
        if node.value is not None:
            node.value = self._trim(node, node.value)

    def _trim(self, stmt: ast.stmt, value: ast.expr) -> ast.expr:
        if isinstance(value, ast.Constant) and isinstance(value.value, (str, bytes)):
            raw = value.value
            size = len(raw.encode("utf-8")) if isinstance(raw, str) else len(raw)
            if size > self.max_string_size:
                _add_note(stmt, f"{size}-byte string literal not displayed")
                value.value = "" if isinstance(raw, str) else b""
                value.kind = None
            return value

        if isinstance(value, (ast.List, ast.Tuple, ast.Set)):
            count = len(value.elts)
            if count > self.max_elements:
                _add_note(stmt, f"{count} elements not displayed")
                if isinstance(value, ast.Set):
                    # an empty set display would read as a dict
                    empty = ast.Call(func=ast.Name(id="set", ctx=ast.Load()), args=[], keywords=[])
                    return ast.copy_location(empty, value)
                value.elts = []
            return value

        if isinstance(value, ast.Dict):
            count = len(value.keys)
            if count > self.max_elements:
                _add_note(stmt, f"{count} elements not displayed")
                value.keys = []
                value.values = []
        return value


def trim_literals(
    nodes: list[ast.stmt] | tuple[ast.stmt, ...],
    max_string_size: int | None = None,
    max_elements: int | None = None,
) -> None:
    """Run a :class:`LiteralTrimmer` over every statement in nodes."""
    trimmer = LiteralTrimmer(max_string_size, max_elements)
    for node in nodes:
        trimmer.visit(node)
