"""Stroke-font glyphs described as SVG path data, parsed with svgpathtools."""

from __future__ import annotations

from collections.abc import Iterator, Mapping

import numpy as np
from svgpathtools import Arc, CubicBezier, Line, QuadraticBezier, parse_path

from inkspace.errors import GlyphMissingError
from inkspace.outline.segments import ClosePath, CurveTo, LineTo, MoveTo, PathSegment, Point, QuadTo

# Moveto discontinuity / closure tolerance, in path units.
_JOIN_EPS = 1e-6
# Arcs have no segment type of their own; they are flattened into this many lines.
_ARC_STEPS = 10


class SvgGlyphSource:
    """Glyphs given as ``{char: "M0 0 L10 20 ..."}`` in Y-down path units.

    Advances default to the right edge of the glyph's bounding box; a glyph
    with no path data at all measures ``default_advance``.
    """

    y_up = False

    def __init__(
        self,
        glyphs: Mapping[str, str],
        advances: Mapping[str, float] | None = None,
        scale: float = 1.0,
        default_advance: float = 20.0,
    ) -> None:
        self._glyphs = dict(glyphs)
        self._advances = dict(advances or {})
        self.scale = scale
        self.default_advance = default_advance

    def advance(self, char: str) -> float:
        if char in self._advances:
            return self._advances[char] * self.scale
        d = self._glyphs.get(char)
        if not d:
            return self.default_advance
        path = parse_path(d)
        if len(path) == 0:
            return self.default_advance
        _, xmax, _, _ = path.bbox()
        return float(xmax) * self.scale

    def outline(self, char: str) -> Iterator[PathSegment]:
        d = self._glyphs.get(char)
        if not d:
            raise GlyphMissingError(char)
        path = parse_path(d)
        if len(path) == 0:
            raise GlyphMissingError(char)
        return iter(self._segments(path))

    def _pt(self, z: complex) -> Point:
        return (z.real * self.scale, z.imag * self.scale)

    def _segments(self, path) -> list[PathSegment]:
        segments: list[PathSegment] = []
        start: complex | None = None
        end: complex | None = None

        for seg in path:
            if end is None or abs(seg.start - end) > _JOIN_EPS:
                segments.append(MoveTo(self._pt(seg.start)))
                start = seg.start

            if isinstance(seg, Line):
                segments.append(LineTo(self._pt(seg.end)))
            elif isinstance(seg, QuadraticBezier):
                segments.append(QuadTo(self._pt(seg.control), self._pt(seg.end)))
            elif isinstance(seg, CubicBezier):
                segments.append(CurveTo(self._pt(seg.control1), self._pt(seg.control2), self._pt(seg.end)))
            elif isinstance(seg, Arc):
                for t in np.linspace(0.0, 1.0, _ARC_STEPS + 1)[1:]:
                    segments.append(LineTo(self._pt(seg.point(t))))
            end = seg.end

            if start is not None and abs(end - start) <= _JOIN_EPS:
                segments.append(ClosePath())
                end = None

        return segments
