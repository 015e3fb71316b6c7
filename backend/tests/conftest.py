"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen

from inkspace.engine.config import LayoutConfig
from inkspace.engine.context import Stroke, stroke_from_rect
from inkspace.errors import GlyphMissingError
from inkspace.outline.segments import ClosePath, LineTo, MoveTo, PathSegment, QuadTo
from inkspace.utils.geometry import Rect


# Tiny test font, 1000 units per em:
#   "I"  one rectangular contour of straight lines (4 on-curve points)
#   "O"  one contour made of a single quadratic curve
#   "H"  two separate bars (two contours)
#   "E"  mapped but empty outline
FONT_UNITS_PER_EM = 1000
FONT_ADVANCES = {".notdef": 500, "space": 250, "I": 300, "O": 600, "H": 600, "E": 400}


def _draw_bar(pen: TTGlyphPen, x0: int, x1: int, top: int = 700) -> None:
    pen.moveTo((x0, 0))
    pen.lineTo((x0, top))
    pen.lineTo((x1, top))
    pen.lineTo((x1, 0))
    pen.closePath()


def build_test_font(path) -> None:
    fb = FontBuilder(FONT_UNITS_PER_EM, isTTF=True)
    glyph_order = list(FONT_ADVANCES)
    fb.setupGlyphOrder(glyph_order)
    fb.setupCharacterMap({ord(" "): "space", ord("I"): "I", ord("O"): "O", ord("H"): "H", ord("E"): "E"})

    glyphs = {}
    pen = TTGlyphPen(None)
    glyphs[".notdef"] = pen.glyph()
    pen = TTGlyphPen(None)
    glyphs["space"] = pen.glyph()

    pen = TTGlyphPen(None)
    _draw_bar(pen, 100, 200)
    glyphs["I"] = pen.glyph()

    pen = TTGlyphPen(None)
    pen.moveTo((0, 0))
    pen.qCurveTo((250, 500), (500, 0))
    pen.closePath()
    glyphs["O"] = pen.glyph()

    pen = TTGlyphPen(None)
    _draw_bar(pen, 50, 150)
    _draw_bar(pen, 400, 500)
    glyphs["H"] = pen.glyph()

    pen = TTGlyphPen(None)
    glyphs["E"] = pen.glyph()

    fb.setupGlyf(glyphs)
    # lsb must match xMin or the glyph set shifts outlines horizontally
    glyf = fb.font["glyf"]
    fb.setupHorizontalMetrics({name: (adv, getattr(glyf[name], "xMin", 0)) for name, adv in FONT_ADVANCES.items()})
    fb.setupHorizontalHeader(ascent=800, descent=-200)
    fb.setupNameTable({"familyName": "InkspaceTest", "styleName": "Regular"})
    fb.setupOS2(sTypoAscender=800, sTypoDescender=-200, usWinAscent=800, usWinDescent=200)
    fb.setupPost()
    fb.save(str(path))


@pytest.fixture(scope="session")
def test_font_path(tmp_path_factory) -> str:
    path = tmp_path_factory.mktemp("fonts") / "inkspace-test.ttf"
    build_test_font(path)
    return str(path)


class FakeGlyphSource:
    """Y-down glyph source: every known char is one 10-unit vertical line.

    "Q" is drawn as a single quadratic curve; chars outside ``known`` have no
    outline but still measure ``advance_width``.
    """

    y_up = False

    def __init__(self, known: str = "abcdefghijklmnopqrstuvwxyzQ", advance_width: float = 10.0) -> None:
        self.known = set(known)
        self.advance_width = advance_width

    def advance(self, char: str) -> float:
        return self.advance_width

    def outline(self, char: str) -> Iterator[PathSegment]:
        if char not in self.known:
            raise GlyphMissingError(char)
        if char == "Q":
            return iter([MoveTo((0.0, 0.0)), QuadTo((5.0, -10.0), (10.0, 0.0))])
        return iter([MoveTo((0.0, 0.0)), LineTo((0.0, -10.0)), ClosePath()])


@pytest.fixture
def fake_source() -> FakeGlyphSource:
    return FakeGlyphSource()


@pytest.fixture
def config() -> LayoutConfig:
    return LayoutConfig()


def rect_strokes(*rects: tuple[float, float, float, float]) -> list[Stroke]:
    """User strokes whose bounds are exactly the given (x, y, w, h) rects."""
    return [stroke_from_rect(Rect(*r)) for r in rects]
