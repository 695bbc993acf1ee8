"""HTML fragment helpers shared by the prose and declaration renderers."""

from __future__ import annotations

import html

__all__ = ["escape", "escape_attr", "link_html", "anchor_open", "COMMENT_OPEN", "SPAN_CLOSE"]

COMMENT_OPEN = '<span class="comment">'
SPAN_CLOSE = "</span>"


def escape(text: str) -> str:
    """Escape text content (&, < and >)."""
    return html.escape(text, quote=False)


def escape_attr(text: str) -> str:
    """Escape an attribute value, quotes included."""
    return html.escape(text, quote=True)


def link_html(href: str, text: str) -> str:
    """Render ``<a href="href">text</a>``."""
    return f'<a href="{escape_attr(href)}">{escape(text)}</a>'


def anchor_open(anchor_id: str, kind: str) -> str:
    """Open the inline wrapper carrying an anchor ID and its kind."""
    return f'<span id="{escape_attr(anchor_id)}" data-kind="{escape_attr(kind)}">'
