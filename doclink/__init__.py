"""
Doclink - HTML rendering for Python API documentation pages.

Doclink turns the doc comments, declarations and examples of a Python module
into HTML fragments with cross-references: identifiers link to the page that
documents them, declarations carry anchors that other pages can link to, and
oversized literals are elided.

Quick Start
-----------

    >>> from doclink import Package, Renderer
    >>>
    >>> pkg = Package.from_source(source, "example.com/shapes")
    >>> r = Renderer(pkg)
    >>> print(r.doc_html(pkg.doc))
    <p>Package shapes draws <a href="#Circle">Circle</a> values.
    </p>

Declarations:

    >>> for decl in pkg.all_declarations():
    ...     part = r.decl_html(decl.doc, decl)
    ...     print(part.decl)

Examples:

    >>> ex = Example.from_code("def example():\\n    print(area(2))\\n    # Output: 12.56\\n")
    >>> r.code_html(ex)
    '<pre class="Documentation-exampleCode">print(area(2))</pre>'
    >>> ex.output
    '12.56\\n'


Options
-------

Per-renderer behavior lives in `RenderOptions`:

- `package_url` - import path to the URL of its page
- `enable_hotlinking` - link identifiers found in prose
- `disable_permalinks`, `enable_command_toc` - heading markup
- `max_string_size`, `max_elements` - literal elision thresholds
- `anchor_kinds`, `wrap_receiver_methods` - which anchors get an inline span

Process-wide defaults for the thresholds are in `doclink.config.config`.


Logging
-------

Doclink logs through the standard ``logging`` module under the ``doclink``
logger. Use `setup_logging()` or the ``DOCLINK_LOG_LEVEL`` and
``DOCLINK_LOG_FORMAT`` environment variables.
"""

from doclink._logging import setup_logging
from doclink._version import __version__ as __version__

# Comment prose
from doclink.comment import Link

# Configuration
from doclink.config import config

# Exceptions
from doclink.exceptions import (
    DoclinkError,
    ExampleError,
    FormatError,
    IdentifierError,
    SourceError,
    ValidationError,
)

# Rendering
from doclink.render import (
    CodeSegment,
    DeclHTML,
    Example,
    Kind,
    Renderer,
    RenderOptions,
)

# Source model
from doclink.source import Declaration, DeclKind, Package

__all__ = [
    # Source
    "Package",
    "Declaration",
    "DeclKind",
    # Rendering
    "Renderer",
    "RenderOptions",
    "DeclHTML",
    "Kind",
    "Example",
    "CodeSegment",
    "Link",
    # Configuration
    "config",
    "setup_logging",
    # Exceptions
    "DoclinkError",
    "ValidationError",
    "SourceError",
    "ExampleError",
    "FormatError",
    "IdentifierError",
]
