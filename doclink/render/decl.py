"""
Declaration display source to annotated HTML.

The display text of a declaration is tokenized; each line collects its HTML
fragments, the anchors defined on it, and whether it holds code, comments or
both. Anchors are then hoisted so that an identifier preceded by its own
comment block is addressed at the top of that block, and every line is
emitted with its anchors wrapped around it.
"""

from __future__ import annotations

import ast
import copy
import enum
import io
import tokenize
from dataclasses import dataclass, field
from typing import Callable

from .._html import COMMENT_OPEN, SPAN_CLOSE, anchor_open, escape, link_html
from .._logging import scoped_logger
from ..comment import format_line
from ..exceptions import FormatError
from ..source.package import Declaration
from ..source.printer import print_declaration
from ..source.trim import trim_literals
from .anchors import AnchorPoint, Occurrence, Position, Scope, collect_occurrences
from .options import RenderOptions
from .resolver import IdentifierResolver

__all__ = ["LineType", "LineAnnotation", "annotate_source", "hoist_anchors", "emit_lines", "declaration_html"]

log = scoped_logger("render")


class LineType(enum.IntFlag):
    NONE = 0
    CODE = 1
    COMMENT = 2


@dataclass
class LineAnnotation:
    fragments: list[str] = field(default_factory=list)
    anchors: list[AnchorPoint] = field(default_factory=list)
    kind: LineType = LineType.NONE


def _split_after_newlines(text: str) -> list[str]:
    """Split text after each newline; the last piece follows the last newline."""
    pieces = text.split("\n")
    return [p + "\n" for p in pieces[:-1]] + [pieces[-1]]


def annotate_source(
    src: str,
    occurrences: dict[Position, Occurrence],
    format_comment: Callable[[str], str],
) -> list[LineAnnotation]:
    """Tokenize src into per-line fragments, anchors and line types.

    Text between consumed tokens is escaped and attributed to the line it
    sits on. Comments are wrapped in a comment span, names with an href are
    linked and names defining an anchor register it on their line.

    Raises:
        FormatError: src does not tokenize.
    """
    starts = [0]
    for i, ch in enumerate(src):
        if ch == "\n":
            starts.append(i + 1)
    lines = [LineAnnotation() for _ in starts]

    def offset(row: int, col: int) -> int:
        if row - 1 >= len(starts):
            return len(src)
        return min(starts[row - 1] + col, len(src))

    def add_text(text: str, line: int) -> None:
        pieces = _split_after_newlines(text)
        for i, piece in enumerate(pieces):
            n = max(line - len(pieces) + i + 1, 0)
            if piece:
                lines[n].fragments.append(escape(piece))

    last = 0
    try:
        for tok in tokenize.generate_tokens(io.StringIO(src).readline):
            line = min(tok.start[0], len(lines)) - 1
            off = offset(*tok.start)
            add_text(src[last:off], line)
            last = max(last, off)

            if tok.type == tokenize.ENDMARKER:
                break
            kind = LineType.NONE
            if tok.type == tokenize.COMMENT:
                kind = LineType.COMMENT
                lines[line].fragments.extend([COMMENT_OPEN, format_comment(tok.string), SPAN_CLOSE])
                last = off + len(tok.string)
            elif tok.type == tokenize.NAME:
                kind = LineType.CODE
                occ = occurrences.get(tok.start)
                if occ is not None:
                    if occ.anchor is not None:
                        lines[line].anchors.append(occ.anchor)
                    if occ.href is not None:
                        lines[line].fragments.append(link_html(occ.href, tok.string))
                        last = off + len(tok.string)
            elif tok.type not in (tokenize.NL, tokenize.NEWLINE, tokenize.INDENT, tokenize.DEDENT):
                kind = LineType.CODE

            if kind:
                for row in range(tok.start[0], min(tok.end[0], len(lines)) + 1):
                    lines[row - 1].kind |= kind
    except (tokenize.TokenError, SyntaxError) as exc:
        raise FormatError(f"cannot tokenize declaration: {exc}") from exc

    add_text(src[last:], len(lines) - 1)
    return lines


def hoist_anchors(lines: list[LineAnnotation]) -> None:
    """Move anchors up to the top of the comment block directly above them.

    Only the last line of a run of anchored lines is hoisted, so a line whose
    successor also defines anchors keeps its own.
    """
    for i in range(len(lines)):
        if i + 1 < len(lines) and lines[i + 1].anchors:
            continue
        j = i
        while j > 0 and lines[j - 1].kind == LineType.COMMENT:
            j -= 1
        lines[i].anchors, lines[j].anchors = lines[j].anchors, lines[i].anchors


def emit_lines(lines: list[LineAnnotation], options: RenderOptions, has_receiver: bool = False) -> str:
    """Concatenate lines, wrapping each in spans for its wrapped anchors."""
    out: list[str] = []
    for line in lines:
        opened = 0
        for anchor in line.anchors:
            if options.wraps(anchor.kind, has_receiver):
                out.append(anchor_open(anchor.id, anchor.kind.value))
                opened += 1
        out.extend(line.fragments)
        out.append(SPAN_CLOSE * opened)
    return "".join(out)


def declaration_html(
    decl: Declaration,
    scope: Scope,
    resolver: IdentifierResolver,
    options: RenderOptions,
) -> str:
    """Render decl as annotated HTML.

    The declaration is deep-copied and trimmed before printing, so decl
    itself is never modified.

    Raises:
        FormatError: The printed declaration does not parse or tokenize.
        IdentifierError: An anchor ID would contain invalid characters.
    """
    nodes = copy.deepcopy(decl.nodes)
    trim_literals(nodes, options.max_string_size, options.max_elements)
    src = print_declaration(decl, nodes)
    try:
        tree = ast.parse(src)
    except SyntaxError as exc:
        raise FormatError(f"cannot parse declaration {decl.name}: {exc.msg}") from exc

    occurrences = collect_occurrences(tree, src, scope, resolver, decl.receiver)

    def format_comment(text: str) -> str:
        return format_line(text, resolver, options.enable_hotlinking)

    lines = annotate_source(src, occurrences, format_comment)
    hoist_anchors(lines)
    log.debug("Rendered declaration", extra={"decl": decl.name, "lines": len(lines)})
    return emit_lines(lines, options, decl.receiver is not None)
