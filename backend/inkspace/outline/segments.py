"""Typed outline segments and the glyph-source protocol.

Font backends expose a glyph as a pull-based iterator of segments, so the
synthesizer never depends on how a particular backend walks its outlines.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import NamedTuple, Protocol, Union

Point = tuple[float, float]


class MoveTo(NamedTuple):
    pt: Point


class LineTo(NamedTuple):
    pt: Point


class QuadTo(NamedTuple):
    control: Point
    pt: Point


class CurveTo(NamedTuple):
    control1: Point
    control2: Point
    pt: Point


class ClosePath(NamedTuple):
    pass


PathSegment = Union[MoveTo, LineTo, QuadTo, CurveTo, ClosePath]


class GlyphSource(Protocol):
    """Anything that can measure and outline single characters."""

    # True when outline coordinates grow upward (font units); False for Y-down data.
    y_up: bool

    def advance(self, char: str) -> float:
        """Measured horizontal advance of ``char`` in canvas points."""
        ...

    def outline(self, char: str) -> Iterator[PathSegment]:
        """Outline segments of ``char`` in canvas points, relative to the pen position.

        Raises GlyphMissingError when the character has no outline.
        """
        ...
