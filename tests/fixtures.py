"""
Shared fixtures for doclink tests.

Registered from the root conftest.py so every test directory can use them.
"""

import pytest

from doclink.config import config
from doclink.source import Package

SHAPES_SOURCE = '''\
"""Package shapes draws Circle and Square values.

Use Circle.area to measure a circle, or math.pi directly.

Links

- Shapes guide, https://example.com/guide
"""

import math
from collections import OrderedDict
from typing import Protocol

# Scale multiplies every area.
SCALE = 2
offset = 0.5  # added last

# Registry maps names to shapes.
registry: OrderedDict = OrderedDict()


class Shape(Protocol):
    """Shape is anything with an area."""

    sides: int

    # area returns the surface.
    def area(self) -> float: ...


class Circle:
    """Circle is a round Shape with a radius."""

    # radius of the circle
    radius: float
    name: str = "circle"
    _hidden: int = 0

    def __init__(self, radius: float) -> None:
        self.radius = radius

    def area(self) -> float:
        """area returns pi times radius squared."""
        return math.pi * self.radius ** 2

    def _secret(self):
        pass


def largest(shapes: list[Shape], key=lambda s: s.area()) -> Shape:
    """largest returns the biggest shape."""
    return max(shapes, key=key)


def _helper():
    pass
'''

ACCENTS_SOURCE = '''\
class Point:
    pass


LABELS = {"café": Point}

α, β = 1, 2


def naïve(p: Point = Point.origin) -> Point:
    """naïve returns p unchanged."""
    return p
'''


@pytest.fixture
def shapes_source():
    """Source text of the sample shapes module."""
    return SHAPES_SOURCE


@pytest.fixture
def shapes():
    """Package loaded from the sample shapes module."""
    return Package.from_source(SHAPES_SOURCE, "example.com/shapes")


@pytest.fixture
def accents():
    """Package whose declarations hold non-ASCII names and strings."""
    return Package.from_source(ACCENTS_SOURCE, "example.com/accents")


@pytest.fixture
def load():
    """Factory building a Package from source text."""

    def _load(source, import_path="example.com/m"):
        return Package.from_source(source, import_path)

    return _load


@pytest.fixture
def restore_config():
    """Reset process-wide defaults after the test."""
    yield config
    config.reset()
