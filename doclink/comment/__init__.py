"""
Doc comment prose: block segmentation and inline hyperlinking.
"""

from .blocks import (
    Block,
    Heading,
    Link,
    Paragraph,
    Preformat,
    doc_to_blocks,
    parse_link,
    parse_links,
    split_links,
)
from .linkify import convert_quotes, format_line, lines_to_html

__all__ = [
    "Block",
    "Heading",
    "Paragraph",
    "Preformat",
    "Link",
    "doc_to_blocks",
    "split_links",
    "parse_link",
    "parse_links",
    "format_line",
    "lines_to_html",
    "convert_quotes",
]
