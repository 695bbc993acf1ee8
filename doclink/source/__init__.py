"""
Module source model: declarations, name bindings and display text.
"""

from .package import (
    Binding,
    CommentMap,
    DeclBinding,
    Declaration,
    DeclKind,
    ImportBinding,
    Package,
)
from .printer import print_declaration, synopsis
from .trim import LiteralTrimmer, statement_notes, trim_literals

__all__ = [
    "Package",
    "Declaration",
    "DeclKind",
    "Binding",
    "ImportBinding",
    "DeclBinding",
    "CommentMap",
    "print_declaration",
    "synopsis",
    "LiteralTrimmer",
    "trim_literals",
    "statement_notes",
]
