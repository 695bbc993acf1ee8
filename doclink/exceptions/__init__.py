"""
Doclink exceptions.

    DoclinkError (base)
    ├── ValidationError - Invalid option or parameter value
    ├── SourceError - Module source that cannot be parsed
    ├── ExampleError - Example without code
    ├── FormatError - Declaration formatting failure
    └── IdentifierError - Invalid anchor ID
"""

from .exceptions import (
    DoclinkError,
    ExampleError,
    FormatError,
    IdentifierError,
    SourceError,
    ValidationError,
)

__all__ = [
    "DoclinkError",
    "ValidationError",
    "SourceError",
    "ExampleError",
    "FormatError",
    "IdentifierError",
]
