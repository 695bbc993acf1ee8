"""
Example code to display segments.

Example code arrives either as a bare statement list or wrapped in the
``def`` of the example function. The wrapper is dropped, the body dedented,
and the code is split into alternating code and comment segments so the page
can style comments. An ``# Output:`` comment ends the displayed code; the
expected output it introduces is available through :func:`example_output`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from pygments import token
from pygments.lexers import PythonLexer

from .._html import COMMENT_OPEN, SPAN_CLOSE, escape
from .._logging import scoped_logger
from ..exceptions import ExampleError
from .anchors import safe_id

__all__ = [
    "CodeSegment",
    "Example",
    "format_example",
    "example_output",
    "example_id",
    "segments_html",
    "EXAMPLE_ERROR_HTML",
]

log = scoped_logger("examples")

OUTPUT_RE = re.compile(r"#\s*(unordered )?output:", re.IGNORECASE)
_TRAILING_BLANK_RE = re.compile(r"(?:\n[ \t]*)+\Z")
_WRAPPER_RE = re.compile(r"\A(?:async\s+)?def\s+\w+\s*\(.*?\)\s*(?:->[^\n]*?)?:[ \t]*\n", re.DOTALL)

_PRE_OPEN = '<pre class="Documentation-exampleCode">'
EXAMPLE_ERROR_HTML = _PRE_OPEN + "Error rendering example code.</pre>"

_LEXER = PythonLexer(stripnl=False, ensurenl=False)


@dataclass(frozen=True)
class CodeSegment:
    text: str
    comment: bool = False


@dataclass(frozen=True)
class Example:
    """A runnable example attached to a package or one of its declarations.

    ``output`` and ``unordered`` describe the expected output, as declared by
    an ``# Output:`` or ``# Unordered output:`` comment in the code.
    """

    code: str | None
    name: str = ""
    suffix: str = ""
    doc: str = ""
    output: str = ""
    unordered: bool = False

    @classmethod
    def from_code(cls, code: str, name: str = "", suffix: str = "", doc: str = "") -> Example:
        output, unordered = example_output(code)
        return cls(code=code, name=name, suffix=suffix, doc=doc, output=output, unordered=unordered)


def _unwrap(src: str) -> tuple[str, str]:
    """Drop an enclosing ``def`` line and return (body, body indent)."""
    src = src.strip("\n")
    m = _WRAPPER_RE.match(src)
    if m:
        src = src[m.end():].strip("\n")
    stripped = src.lstrip(" \t")
    indent = src[: len(src) - len(stripped)]
    return stripped, indent


def format_example(code: str | None) -> list[CodeSegment]:
    """Split example code into display segments.

    The first line's indentation is removed from every line outside string
    literals; string contents are kept verbatim. Comment segments carry the
    comment text alone. Everything from an output marker comment on is
    dropped, as are trailing blank lines.

    Raises:
        ExampleError: code is None or blank.
    """
    if code is None or not code.strip():
        raise ExampleError()

    src, indent = _unwrap(code)
    indent_nl = "\n" + indent

    segments: list[CodeSegment] = []
    pending: list[str] = []
    code_run: list[str] = []

    def end_run() -> None:
        if code_run:
            pending.append("".join(code_run).replace(indent_nl, "\n"))
            code_run.clear()

    def flush() -> None:
        end_run()
        if pending:
            segments.append(CodeSegment("".join(pending)))
            pending.clear()

    for _index, ttype, value in _LEXER.get_tokens_unprocessed(src):
        if ttype in token.Comment:
            flush()
            if OUTPUT_RE.match(value):
                break
            segments.append(CodeSegment(value, comment=True))
        elif ttype in token.String:
            end_run()
            pending.append(value)
        else:
            code_run.append(value)
    else:
        flush()

    if segments and not segments[-1].comment:
        text = _TRAILING_BLANK_RE.sub("", segments[-1].text)
        segments[-1] = CodeSegment(text)
        if not text:
            segments.pop()
    return segments


def example_output(code: str | None) -> tuple[str, bool]:
    """Expected output declared by an output marker comment.

    Returns:
        ``(output, unordered)``. Output is the text of the marker comment and
        of the comment lines following it, one line each; empty when the
        code has no marker.
    """
    if not code:
        return "", False
    lines: list[str] = []
    unordered = False
    found = False
    for _index, ttype, value in _LEXER.get_tokens_unprocessed(code):
        if not found:
            m = OUTPUT_RE.match(value) if ttype in token.Comment else None
            if m:
                found = True
                unordered = m.group(1) is not None
                lines.append(value[m.end():].strip())
            continue
        if ttype in token.Comment:
            text = value[1:]
            lines.append(text[1:] if text.startswith(" ") else text)
        elif value.strip():
            break
    if not found:
        return "", False
    output = "\n".join(lines).strip("\n")
    return (output + "\n" if output else ""), unordered


def example_id(parent: str, suffix: str) -> str:
    """Anchor ID of an example.

    ``example-package`` for package-level examples with no parent, otherwise
    ``example-<parent>``; a non-empty suffix is appended as ``-<suffix>``.
    """
    parts = ["example", safe_id(parent) if parent else "package"]
    if suffix:
        parts.append(safe_id(suffix))
    return "-".join(parts)


def segments_html(segments: list[CodeSegment]) -> str:
    """Render segments in the example code block."""
    out = [_PRE_OPEN]
    for seg in segments:
        if seg.comment:
            out.extend([COMMENT_OPEN, escape(seg.text), SPAN_CLOSE])
        else:
            out.append(escape(seg.text))
    out.append("</pre>")
    return "".join(out)


def example_html(example: Example | None) -> str:
    """Render an example, or a fixed placeholder when it has no code."""
    try:
        segments = format_example(example.code if example is not None else None)
    except ExampleError as err:
        log.warning("Example not rendered", extra={"code": err.code, "example": getattr(example, "name", "")})
        return EXAMPLE_ERROR_HTML
    return segments_html(segments)
