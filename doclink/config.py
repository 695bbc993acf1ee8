"""
Process-wide rendering defaults.

Settings can be modified programmatically; every ``RenderOptions`` built
afterwards picks them up.

Example:
    >>> from doclink.config import config
    >>> config.max_string_size = 80
"""

from .exceptions import ValidationError

DEFAULT_MAX_STRING_SIZE = 125
DEFAULT_MAX_ELEMENTS = 100


def check_threshold(name: str, value: object) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValidationError(
            f"{name} must be int, got {type(value).__name__}",
            code="INVALID_ARGUMENT",
            details={"param": name, "type": type(value).__name__},
        )
    if value < 0:
        raise ValidationError(
            f"{name} must be >= 0, got {value}",
            code="INVALID_ARGUMENT",
            details={"param": name, "value": value},
        )
    return value


class _RenderConfig:
    """
    Singleton configuration for literal trimming thresholds.

    This is a singleton - import and modify `config` directly:

        from doclink.config import config
        config.max_elements = 50

    Attributes
    ----------
        max_string_size: String literals longer than this many bytes are
            replaced by an empty literal in declaration output.
        max_elements: List, tuple, set and dict displays with more elements
            than this are emptied in declaration output.
    """

    __slots__ = ("_max_string_size", "_max_elements")

    def __init__(self) -> None:
        self._max_string_size = DEFAULT_MAX_STRING_SIZE
        self._max_elements = DEFAULT_MAX_ELEMENTS

    @property
    def max_string_size(self) -> int:
        """Largest string literal (in bytes) shown verbatim."""
        return self._max_string_size

    @max_string_size.setter
    def max_string_size(self, value: int) -> None:
        self._max_string_size = check_threshold("max_string_size", value)

    @property
    def max_elements(self) -> int:
        """Largest element count of a displayed container literal."""
        return self._max_elements

    @max_elements.setter
    def max_elements(self, value: int) -> None:
        self._max_elements = check_threshold("max_elements", value)

    def reset(self) -> None:
        """Restore the built-in defaults."""
        self._max_string_size = DEFAULT_MAX_STRING_SIZE
        self._max_elements = DEFAULT_MAX_ELEMENTS

    def __repr__(self) -> str:
        return (
            f"RenderConfig(max_string_size={self._max_string_size}, "
            f"max_elements={self._max_elements})"
        )


# Module-level singleton
config = _RenderConfig()
