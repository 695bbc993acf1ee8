"""
Renderer: HTML for the doc comments, declarations and examples of one page.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .._html import escape
from .._logging import scoped_logger
from ..comment import Heading, Link, Paragraph, doc_to_blocks, lines_to_html, split_links
from ..exceptions import FormatError
from ..source.package import Declaration, Package
from ..source.printer import synopsis
from .decl import declaration_html
from .examples import Example, example_html
from .options import RenderOptions
from .resolver import IdentifierResolver

__all__ = ["Renderer", "DeclHTML", "heading_id"]

log = scoped_logger("render")

_HEADING_ID_RE = re.compile(r"[^a-zA-Z0-9]")


def heading_id(title: str) -> str:
    """Stable fragment ID of a heading title."""
    return "hdr-" + _HEADING_ID_RE.sub("_", title)


@dataclass(frozen=True)
class DeclHTML:
    """Rendered doc comment and declaration of one documented construct."""

    doc: str
    decl: str


class Renderer:
    """
    Render the parts of one package page.

    A Renderer is bound to a :class:`~doclink.source.Package`, whose names it
    resolves. Apart from :attr:`links`, which collects the entries of every
    ``Links`` section passed through :meth:`doc_html`, it holds no mutable
    state.

    Example:
        >>> pkg = Package.from_source(source, "example.com/shapes")
        >>> r = Renderer(pkg, RenderOptions(enable_command_toc=True))
        >>> page_doc = r.doc_html(pkg.doc)
        >>> parts = [r.decl_html(d.doc, d) for d in pkg.all_declarations()]
    """

    def __init__(self, package: Package, options: RenderOptions | None = None) -> None:
        self.package = package
        self.options = options if options is not None else RenderOptions()
        self.links: list[Link] = []
        self.resolver = IdentifierResolver(
            namespaces=package.namespaces,
            anchor_targets=package.anchor_targets,
            package_url=self.options.package_url,
            symbols=package.imported_symbols,
        )

    def __repr__(self) -> str:
        return f"Renderer({self.package.import_path!r})"

    # -------------------------------------------------------------------------
    # Doc comments
    # -------------------------------------------------------------------------

    def _heading_html(self, title: str) -> str:
        tag = "h3" if self.options.enable_command_toc else "h4"
        hid = heading_id(title)
        permalink = "" if self.options.disable_permalinks else (
            f'<a class="Documentation-idLink" href="#{hid}">¶</a>'
        )
        return f'<{tag} id="{hid}">{escape(title)}{permalink}</{tag}>'

    def _doc_html(self, doc: str, resolver: IdentifierResolver, extract_links: bool) -> str:
        blocks = doc_to_blocks(doc)
        if extract_links:
            blocks, links = split_links(blocks)
            self.links.extend(links)
        parts = []
        for block in blocks:
            if isinstance(block, Heading):
                parts.append(self._heading_html(block.title))
            elif isinstance(block, Paragraph):
                body = lines_to_html(block.lines, resolver, self.options.enable_hotlinking)
                parts.append(f"<p>{body}</p>")
            else:
                parts.append(f"<pre>{lines_to_html(block.lines)}</pre>")
        return "\n".join(parts)

    def doc_html(self, doc: str) -> str:
        """Render a package-level doc comment.

        Entries of a ``Links`` section are removed from the output and
        appended to :attr:`links`.
        """
        return self._doc_html(doc, self.resolver, extract_links=True)

    # -------------------------------------------------------------------------
    # Declarations and examples
    # -------------------------------------------------------------------------

    def decl_html(self, doc: str, decl: Declaration) -> DeclHTML:
        """Render the doc comment and the declaration of decl.

        Words in doc also resolve against decl's own members. A declaration
        that cannot be formatted renders as its bracketed error message.
        """
        resolver = self.resolver.with_members(decl.member_ids())
        doc_part = self._doc_html(doc, resolver, extract_links=False)
        try:
            decl_part = declaration_html(decl, self.package, self.resolver, self.options)
        except FormatError as err:
            log.warning("Declaration not formatted", extra={"decl": decl.name, "code": err.code})
            decl_part = escape(f"[{err}]")
        return DeclHTML(doc=doc_part, decl=decl_part)

    def code_html(self, example: Example | None) -> str:
        """Render example code; a fixed placeholder when it has no code."""
        return example_html(example)

    def synopsis(self, decl: Declaration) -> str:
        """One-line summary of decl."""
        return synopsis(decl)
