"""
HTML rendering of doc comments, declarations and examples.
"""

from .anchors import AnchorPoint, Kind, Occurrence, collect_occurrences, safe_id
from .decl import declaration_html
from .examples import (
    EXAMPLE_ERROR_HTML,
    CodeSegment,
    Example,
    example_id,
    example_output,
    format_example,
    segments_html,
)
from .options import DEFAULT_ANCHOR_KINDS, RenderOptions
from .renderer import DeclHTML, Renderer, heading_id
from .resolver import IdentifierResolver, is_predeclared

__all__ = [
    "Renderer",
    "RenderOptions",
    "DeclHTML",
    "Kind",
    "AnchorPoint",
    "Occurrence",
    "IdentifierResolver",
    "CodeSegment",
    "Example",
    "DEFAULT_ANCHOR_KINDS",
    "EXAMPLE_ERROR_HTML",
    "collect_occurrences",
    "declaration_html",
    "format_example",
    "example_output",
    "example_id",
    "segments_html",
    "heading_id",
    "is_predeclared",
    "safe_id",
]
