"""
Grouping of doc comment lines into headings, paragraphs and preformatted blocks.

A single forward pass over the unindented lines:

- blank lines close the current paragraph,
- runs of indented lines become a preformatted block,
- a lone line surrounded by blank lines and followed by prose may be a heading,
- everything else is paragraph text.

A heading titled ``Links`` turns the blocks that follow it into link lists
(``- text, href`` bullets) until the next heading; see :func:`split_links`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

__all__ = [
    "Heading",
    "Paragraph",
    "Preformat",
    "Block",
    "Link",
    "doc_to_blocks",
    "split_links",
    "parse_link",
    "parse_links",
]

LINKS_HEADING = "Links"


@dataclass(frozen=True)
class Heading:
    title: str


@dataclass(frozen=True)
class Paragraph:
    lines: tuple[str, ...]


@dataclass(frozen=True)
class Preformat:
    lines: tuple[str, ...]


Block = Union[Heading, Paragraph, Preformat]


@dataclass(frozen=True)
class Link:
    """A hyperlink: visible text and destination."""

    text: str
    href: str


def _indent_len(line: str) -> int:
    return len(line) - len(line.lstrip(" \t"))


def _is_blank(line: str) -> bool:
    return not line.strip()


def _common_prefix(a: str, b: str) -> str:
    i = 0
    while i < len(a) and i < len(b) and a[i] == b[i]:
        i += 1
    return a[:i]


def _unindent(lines: list[str]) -> list[str]:
    """Remove the longest common whitespace prefix of the non-blank lines."""
    prefix: str | None = None
    for line in lines:
        if _is_blank(line):
            continue
        indent = line[: _indent_len(line)]
        prefix = indent if prefix is None else _common_prefix(prefix, indent)
    n = len(prefix or "")
    return ["" if _is_blank(line) else line[n:] for line in lines]


_HEADING_BAD_CHARS = frozenset(';:!?+*/=[]{}_^°&§~%#@<">\\')


def _heading(line: str) -> str | None:
    """Return the heading title if line looks like one, else None."""
    line = line.strip()
    if not line:
        return None
    if not (line[0].isalpha() and line[0].isupper()):
        return None
    if not (line[-1].isalpha() or line[-1].isdigit()):
        return None
    if any(c in _HEADING_BAD_CHARS for c in line):
        return None

    # "'" only as a possessive "'s"
    rest = line
    while (i := rest.find("'")) >= 0:
        if i + 1 >= len(rest) or rest[i + 1] != "s" or (i + 2 < len(rest) and rest[i + 2] != " "):
            return None
        rest = rest[i + 2 :]

    # "." only when followed by a non-space (e.g. "Python 3.12")
    rest = line
    while (i := rest.find(".")) >= 0:
        if i + 1 >= len(rest) or rest[i + 1] == " ":
            return None
        rest = rest[i + 1 :]

    return line


def doc_to_blocks(text: str) -> list[Block]:
    """Split comment text into Heading, Paragraph and Preformat blocks.

    Lines of the returned blocks have the surrounding indentation removed.
    A heading is never the first block.
    """
    lines = _unindent(text.strip("\n").split("\n"))

    out: list[Block] = []
    para: list[str] = []
    last_was_blank = False
    last_was_heading = False

    def close() -> None:
        if para:
            out.append(Paragraph(tuple(para)))
            para.clear()

    i = 0
    while i < len(lines):
        line = lines[i]
        if _is_blank(line):
            close()
            i += 1
            last_was_blank = True
            continue

        if _indent_len(line) > 0:
            close()
            j = i + 1
            while j < len(lines) and (_is_blank(lines[j]) or _indent_len(lines[j]) > 0):
                j += 1
            # no trailing blank lines in the block
            while j > i and _is_blank(lines[j - 1]):
                j -= 1
            out.append(Preformat(tuple(_unindent(lines[i:j]))))
            i = j
            last_was_heading = False
            continue

        if (
            last_was_blank
            and not last_was_heading
            and i + 2 < len(lines)
            and _is_blank(lines[i + 1])
            and not _is_blank(lines[i + 2])
            and _indent_len(lines[i + 2]) == 0
        ):
            title = _heading(line)
            if title is not None:
                close()
                out.append(Heading(title))
                i += 2
                last_was_heading = True
                continue

        last_was_blank = False
        last_was_heading = False
        para.append(line)
        i += 1

    close()
    return out


def parse_link(line: str) -> Link | None:
    """Parse a ``- text, href`` bullet line.

    Returns None unless the line starts with a dash followed by a space or
    tab and contains a comma separating the text from the href.
    """
    if not (line.startswith("- ") or line.startswith("-\t")):
        return None
    text, sep, href = line[2:].partition(",")
    if not sep:
        return None
    return Link(text=text.strip(), href=href.strip())


def parse_links(lines: tuple[str, ...] | list[str]) -> list[Link]:
    """Collect the links of every bullet line in lines."""
    links = []
    for line in lines:
        link = parse_link(line)
        if link is not None:
            links.append(link)
    return links


def split_links(blocks: list[Block]) -> tuple[list[Block], list[Link]]:
    """Separate a ``Links`` section from the other blocks.

    The ``Links`` heading starts link-collection mode; every paragraph or
    preformatted block up to the next heading is parsed for bullet links
    and removed from the output.
    """
    kept: list[Block] = []
    links: list[Link] = []
    in_links = False
    for block in blocks:
        if isinstance(block, Heading):
            in_links = block.title == LINKS_HEADING
            if not in_links:
                kept.append(block)
        elif in_links:
            links.extend(parse_links(block.lines))
        else:
            kept.append(block)
    return kept, links
