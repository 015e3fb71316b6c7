"""Glyph outline backends behind a common segment-iterator protocol."""

from inkspace.outline.font_source import FontGlyphSource, default_font_path
from inkspace.outline.segments import (
    ClosePath,
    CurveTo,
    GlyphSource,
    LineTo,
    MoveTo,
    PathSegment,
    QuadTo,
)
from inkspace.outline.svg_source import SvgGlyphSource

__all__ = [
    "ClosePath",
    "CurveTo",
    "FontGlyphSource",
    "GlyphSource",
    "LineTo",
    "MoveTo",
    "PathSegment",
    "QuadTo",
    "SvgGlyphSource",
    "default_font_path",
]
