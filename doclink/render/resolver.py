"""
Resolution of words and bound names to URLs.

The resolver is the one place where page-relative anchors, other packages'
pages and the builtins page are turned into hrefs. Both the prose linker and
the declaration annotator go through it.
"""

from __future__ import annotations

import builtins
from typing import AbstractSet, Callable, Mapping

from .._html import escape, link_html

__all__ = ["IdentifierResolver", "BUILTINS", "PREDECLARED", "is_predeclared", "default_package_url"]

BUILTINS = "builtins"
PREDECLARED = frozenset(name for name in dir(builtins) if not name.startswith("_"))


def is_predeclared(name: str) -> bool:
    """True for public names of the builtins module."""
    return name in PREDECLARED


def default_package_url(path: str) -> str:
    return "/" + path


class IdentifierResolver:
    """Maps words found in prose, and names found in code, to links.

    Args:
        namespaces: Imported module name to import path (``np`` -> ``numpy``).
        anchor_targets: Anchor IDs defined on the page being rendered.
        package_url: Import path to the URL of its documentation page.
        member_ids: Bare member name to anchor ID for the declaration being
            documented, so that ``field`` in a class doc links ``#Cls.field``.
        symbols: Name bound by ``from m import x`` to ``(m, x)``.
    """

    def __init__(
        self,
        namespaces: Mapping[str, str] | None = None,
        anchor_targets: AbstractSet[str] = frozenset(),
        package_url: Callable[[str], str] = default_package_url,
        member_ids: Mapping[str, str] | None = None,
        symbols: Mapping[str, tuple[str, str]] | None = None,
    ) -> None:
        self.namespaces = dict(namespaces or {})
        self.anchor_targets = anchor_targets
        self.package_url = package_url
        self.member_ids = dict(member_ids or {})
        self.symbols = dict(symbols or {})

    def with_members(self, member_ids: Mapping[str, str]) -> IdentifierResolver:
        """Copy of this resolver scoped to one declaration's members."""
        return IdentifierResolver(
            self.namespaces, self.anchor_targets, self.package_url, member_ids, self.symbols
        )

    def to_url(self, path: str, symbol: str = "") -> str:
        """URL of symbol on the page of path; ``#symbol`` when path is empty."""
        url = self.package_url(path) if path else ""
        if symbol:
            url += "#" + symbol
        return url

    def to_html(self, word: str) -> str:
        """Render a matched word, linked when it resolves.

        Lookup order: ``namespace.name``, an anchor on this page, a member of
        the current declaration, an imported symbol, a builtin. Anything else
        is escaped text.
        """
        head, dot, rest = word.partition(".")
        if dot and head in self.namespaces:
            path = self.namespaces[head]
            return link_html(self.to_url(path), head) + "." + link_html(self.to_url(path, rest), rest)
        if word in self.anchor_targets:
            return link_html("#" + word, word)
        if word in self.member_ids:
            return link_html("#" + self.member_ids[word], word)
        if word in self.symbols:
            return link_html(self.to_url(*self.symbols[word]), word)
        if is_predeclared(word):
            return link_html(self.to_url(BUILTINS, word), word)
        return escape(word)
