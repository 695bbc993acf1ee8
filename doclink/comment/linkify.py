"""
Inline hyperlinking of one line of prose.

URLs link to themselves, ``RFC 1234[, Section 5.1]`` links to the RFC
editor, and identifiers are handed to an identifier resolver. Identifier
links are only attempted where the surrounding characters make a code
reference likely and never inside an open double-quoted span, trading a few
missed links for the absence of false ones.
"""

from __future__ import annotations

import re
from typing import Protocol

from .._html import escape, link_html

__all__ = ["WordResolver", "format_line", "lines_to_html", "convert_quotes"]


class WordResolver(Protocol):
    """Anything able to turn a matched word into HTML."""

    def to_html(self, word: str) -> str: ...


# Protocol (e.g. "http").
_PROTO = r"(?:https?|s?ftps?|file|gopher|mailto|nntp)"
# Host (e.g. "www.example.com" or "[::1]:8080").
_HOST = r"[a-zA-Z0-9_@\-.\[\]:]+"
# Optional path, query, fragment. ".,:;?!" may appear inside but not at the
# end, so that sentences can end in a URL.
_PATH = r"(?:[.,:;?!]*[a-zA-Z0-9$'()*+&#=@~_/\-\[\]%])*"
_URL = _PROTO + "://" + _HOST + _PATH

_RFC = r"RFC\s+[0-9]{3,5}(?:,?\s+[Ss]ection\s+[0-9]+(?:\.[0-9]+)*)?"

_IDENT = r"[^\W\d]\w*"
_QUAL_IDENT = _IDENT + r"(?:\." + _IDENT + r")*"

MATCH_RE = re.compile(_URL + "|" + _RFC + "|" + _QUAL_IDENT)
_RFC_SPLIT_RE = re.compile(r"[^\w.]+|_+")

RFC_URL = "https://rfc-editor.org/rfc/rfc{number}.html"

# Characters allowed around an identifier for it to be linked.
_VALID_PREFIX = "\x00 \t()[]*\n"
_VALID_SUFFIX = "\x00 \t()[]:;,.'\n"

_QUOTES = '"“”'
_MAX_BRACKET_FIXES = 10


def convert_quotes(text: str) -> str:
    """Turn ``\\`\\``` into “ and ``''`` into ”."""
    return text.replace("``", "“").replace("''", "”")


def _count_quotes(text: str) -> int:
    return sum(text.count(q) for q in _QUOTES)


def _rfc_fields(word: str) -> list[str]:
    return [f for f in _RFC_SPLIT_RE.split(word) if f]


def _trim_url(line: str, start: int, end: int) -> int:
    """Return the end of the URL match with unbalanced closers removed."""
    for opener, closer in ("()", "[]"):
        word = line[start:end]
        i = word.find(closer)
        if 0 <= i < word.find(opener):
            end = start + i
    for pair in ("()", "[]"):
        opener, closer = pair
        for _ in range(_MAX_BRACKET_FIXES):
            word = line[start:end]
            if word.count(opener) == word.count(closer):
                break
            end = max(line.rfind(opener, start, end), line.rfind(closer, start, end))
    return end


def format_line(
    line: str,
    resolver: WordResolver | None = None,
    hotlink: bool = True,
) -> str:
    """Format one line of prose as HTML with URLs, RFCs and identifiers linked.

    Args:
        line: Raw text of the line.
        resolver: Turns eligible identifiers into HTML. When None, identifiers
            are escaped verbatim (URLs and RFCs are still linked).
        hotlink: When False, identifiers are never linked.

    Returns:
        HTML fragment.
    """
    out: list[str] = []
    last_char = "\x00"
    num_quotes = 0

    line = convert_quotes(line)
    while line:
        m = MATCH_RE.search(line)
        m0, m1 = (m.start(), m.end()) if m else (len(line), len(line))

        if m0 > 0:
            non_word = line[:m0]
            out.append(escape(non_word))
            last_char = non_word[-1]
            num_quotes += _count_quotes(non_word)

        if m1 > m0:
            word = line[m0:m1]
            next_char = line[m1] if m1 < len(line) else "\x00"

            valid_prefix = last_char in _VALID_PREFIX
            valid_suffix = next_char in _VALID_SUFFIX
            forbid_linking = not valid_prefix or not valid_suffix or num_quotes % 2 != 0

            if "://" in word:
                m1 = _trim_url(line, m0, m1)
                word = line[m0:m1]
                out.append(link_html(word, word))
            elif word.startswith("RFC") and len(word) > 3 and word[3].isspace():
                fields = _rfc_fields(word)
                if len(fields) >= 4:
                    href = RFC_URL.format(number=fields[1]) + f"#section-{fields[3]}"
                    out.append(link_html(href, word))
                elif len(fields) >= 2:
                    out.append(link_html(RFC_URL.format(number=fields[1]), word))
                else:
                    out.append(escape(word))
            elif not forbid_linking and hotlink and resolver is not None:
                out.append(resolver.to_html(word))
            else:
                out.append(escape(word))

            num_quotes += _count_quotes(word)

        line = line[m1:]
    return "".join(out)


def lines_to_html(
    lines: tuple[str, ...] | list[str],
    resolver: WordResolver | None = None,
    hotlink: bool = True,
) -> str:
    """Format each line and terminate it with a newline."""
    return "".join(format_line(line, resolver, hotlink) + "\n" for line in lines)
