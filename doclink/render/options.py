"""Per-renderer options."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from ..config import check_threshold, config
from ..exceptions import ValidationError
from .anchors import Kind
from .resolver import default_package_url

__all__ = ["RenderOptions", "DEFAULT_ANCHOR_KINDS"]

DEFAULT_ANCHOR_KINDS = frozenset({Kind.CONSTANT, Kind.VARIABLE, Kind.FIELD, Kind.METHOD})


@dataclass(frozen=True)
class RenderOptions:
    """
    Options for one :class:`~doclink.render.Renderer`.

    Attributes
    ----------
    package_url : Callable[[str], str]
        Maps an import path to the URL of its documentation page.
    enable_hotlinking : bool
        Link identifiers in prose. URLs and RFCs are linked regardless.
    disable_permalinks : bool
        Omit the pilcrow link after headings.
    enable_command_toc : bool
        Render headings as ``h3`` instead of ``h4``.
    max_string_size : int
        UTF-8 size above which string literals are elided. Defaults to
        ``doclink.config.max_string_size``.
    max_elements : int
        Element count above which container literals are emptied. Defaults
        to ``doclink.config.max_elements``.
    anchor_kinds : frozenset[Kind]
        Kinds of anchor points wrapped in an ID-carrying span.
    wrap_receiver_methods : bool
        Wrap anchors inside method declarations too.
    """

    package_url: Callable[[str], str] = default_package_url
    enable_hotlinking: bool = True
    disable_permalinks: bool = False
    enable_command_toc: bool = False
    max_string_size: int = field(default_factory=lambda: config.max_string_size)
    max_elements: int = field(default_factory=lambda: config.max_elements)
    anchor_kinds: frozenset[Kind] = DEFAULT_ANCHOR_KINDS
    wrap_receiver_methods: bool = False

    def __post_init__(self) -> None:
        if not callable(self.package_url):
            raise ValidationError(
                "package_url must be callable",
                details={"param": "package_url", "value": repr(self.package_url)},
            )
        check_threshold("max_string_size", self.max_string_size)
        check_threshold("max_elements", self.max_elements)
        try:
            kinds = frozenset(Kind(k) for k in self.anchor_kinds)
        except (TypeError, ValueError) as exc:
            raise ValidationError(
                f"anchor_kinds must hold Kind values: {exc}",
                details={"param": "anchor_kinds"},
            ) from exc
        object.__setattr__(self, "anchor_kinds", kinds)

    def wraps(self, kind: Kind, has_receiver: bool) -> bool:
        """True when an anchor of kind gets an inline wrapper."""
        if has_receiver and not self.wrap_receiver_methods:
            return False
        return kind in self.anchor_kinds
