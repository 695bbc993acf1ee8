"""
Doclink exceptions.

This module defines the exception hierarchy for doclink:

    DoclinkError (base)
    ├── ValidationError - Invalid option or parameter value
    ├── SourceError - Module source that cannot be parsed
    ├── ExampleError - Example without code
    ├── FormatError - Declaration could not be printed or re-tokenized
    └── IdentifierError - Anchor ID built from invalid characters

Usage:
    try:
        html = renderer.code_html(example)
    except doclink.ExampleError as e:
        print(f"Error {e.code}: {e}")

``ExampleError`` and ``FormatError`` are recovered by the renderer (the
fragment is degraded, the page continues). ``IdentifierError`` signals a
broken invariant of the source layer and is never caught by doclink.
"""

from typing import Any

__all__ = [
    "DoclinkError",
    "ValidationError",
    "SourceError",
    "ExampleError",
    "FormatError",
    "IdentifierError",
]


class DoclinkError(Exception):
    """
    Base exception for all doclink errors.

    Attributes
    ----------
    message : str
        Human-readable error description.
    code : str
        Stable, string-based error code (e.g., "EXAMPLE_MISSING_CODE").
        Use this for programmatic error handling.
    details : dict[str, Any]
        Structured context (e.g., {"param": "max_elements"}).

    Example
    -------
    >>> try:
    ...     Package.from_source("def (", "example.com/m")
    ... except DoclinkError as e:
    ...     print(e.code)
    SOURCE_SYNTAX
    """

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.details = details or {}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.args[0]!r}, code={self.code!r})"


class ValidationError(DoclinkError, ValueError):
    """
    Invalid parameter value.

    This exception inherits from both DoclinkError and ValueError, so both work::

        except doclink.DoclinkError:   # catches all doclink errors
        except ValueError:             # catches validation errors (Pythonic)
    """

    def __init__(
        self,
        message: str,
        code: str = "INVALID_ARGUMENT",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code, details)


class SourceError(DoclinkError, SyntaxError):
    """Module source could not be parsed into declarations."""

    def __init__(
        self,
        message: str,
        code: str = "SOURCE_SYNTAX",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code, details)


class ExampleError(DoclinkError):
    """
    Example carries no code to display.

    The renderer replaces the example with a fixed placeholder fragment.
    """

    def __init__(
        self,
        message: str = "Please include an example with code",
        code: str = "EXAMPLE_MISSING_CODE",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code, details)


class FormatError(DoclinkError, RuntimeError):
    """A declaration could not be printed or re-tokenized."""

    def __init__(
        self,
        message: str,
        code: str = "DECL_FORMAT",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code, details)


class IdentifierError(DoclinkError, ValueError):
    """
    Anchor ID contains characters other than identifier characters and dots.

    The source layer only ever hands out valid Python identifiers, so this
    is an internal fault rather than a recoverable condition.
    """

    def __init__(
        self,
        message: str,
        code: str = "INVALID_IDENTIFIER",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code, details)
