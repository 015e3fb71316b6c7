"""TrueType/OpenType glyph outlines via fontTools."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

from fontTools.pens.basePen import BasePen
from fontTools.ttLib import TTFont

from inkspace.errors import GlyphMissingError
from inkspace.outline.segments import ClosePath, CurveTo, LineTo, MoveTo, PathSegment, Point, QuadTo

logger = logging.getLogger(__name__)

DEFAULT_FONT_FAMILY = "DejaVu Sans"
DEFAULT_FONT_SIZE = 30.0


def default_font_path(family: str = DEFAULT_FONT_FAMILY) -> str:
    """Locate a font file for ``family`` through matplotlib's font manager.

    matplotlib bundles DejaVu Sans, so this always resolves to a real file.
    """
    from matplotlib import font_manager

    return font_manager.findfont(font_manager.FontProperties(family=family))


class _SegmentPen(BasePen):
    """Collects outline segments scaled from font units to points.

    BasePen splits TrueType implied on-curve runs and super-beziers into
    single quadratic / cubic segments before they reach us.
    """

    def __init__(self, glyph_set, scale: float) -> None:
        super().__init__(glyph_set)
        self.segments: list[PathSegment] = []
        self._scale = scale

    def _scaled(self, pt) -> Point:
        return (pt[0] * self._scale, pt[1] * self._scale)

    def _moveTo(self, pt) -> None:
        self.segments.append(MoveTo(self._scaled(pt)))

    def _lineTo(self, pt) -> None:
        self.segments.append(LineTo(self._scaled(pt)))

    def _qCurveToOne(self, pt1, pt2) -> None:
        self.segments.append(QuadTo(self._scaled(pt1), self._scaled(pt2)))

    def _curveToOne(self, pt1, pt2, pt3) -> None:
        self.segments.append(CurveTo(self._scaled(pt1), self._scaled(pt2), self._scaled(pt3)))

    def _closePath(self) -> None:
        self.segments.append(ClosePath())


class FontGlyphSource:
    """Glyph outlines and advances from a font file, scaled to ``size`` points."""

    y_up = True

    def __init__(self, font_path: str | Path | None = None, size: float = DEFAULT_FONT_SIZE) -> None:
        path = str(font_path) if font_path else default_font_path()
        self.font_path = path
        self.size = size
        self._font = TTFont(path)
        self._cmap: dict[int, str] = self._font.getBestCmap() or {}
        self._glyph_set = self._font.getGlyphSet()
        self._scale = size / self._font["head"].unitsPerEm
        logger.debug("Loaded font %s (%d mapped characters)", path, len(self._cmap))

    def glyph_name(self, char: str) -> str | None:
        return self._cmap.get(ord(char))

    def advance(self, char: str) -> float:
        if not char.isprintable():
            # Control characters take no room, even when the font maps them
            return 0.0
        name = self.glyph_name(char) or ".notdef"
        metrics = self._font["hmtx"].metrics
        if name not in metrics:
            return 0.0
        return metrics[name][0] * self._scale

    def outline(self, char: str) -> Iterator[PathSegment]:
        name = self.glyph_name(char)
        if name is None:
            raise GlyphMissingError(char)

        pen = _SegmentPen(self._glyph_set, self._scale)
        self._glyph_set[name].draw(pen)
        if not pen.segments:
            raise GlyphMissingError(char)
        return iter(pen.segments)
