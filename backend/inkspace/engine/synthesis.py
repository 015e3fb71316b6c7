"""Glyph stroke synthesis: text to line-wrapped vector ink, one group per character.

Each glyph outline is pulled from a GlyphSource as typed segments and
tessellated: straight segments are kept, quadratic and cubic curves are sampled
at 11 evenly spaced parameters. Every move starts a new stroke; a close or the
next move ends it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

import numpy as np
from numpy.typing import NDArray

from inkspace.engine.config import LayoutConfig
from inkspace.engine.context import SYNTHESIZED_INK, Ink, Stroke, StrokeGroup, StrokePoint
from inkspace.errors import GlyphMissingError
from inkspace.outline.segments import (
    ClosePath,
    CurveTo,
    GlyphSource,
    LineTo,
    MoveTo,
    PathSegment,
    QuadTo,
)
from inkspace.utils.bezier import cubic_points, quadratic_points

logger = logging.getLogger(__name__)

# Fewer points than this cannot be drawn as a stroke.
_MIN_STROKE_POINTS = 2


def wrap_text(
    text: str,
    max_width: float,
    measure: Callable[[str], float],
    space_width: float,
) -> list[str]:
    """Greedy word wrap on single spaces.

    A word starts a new line when the current line is non-empty and adding the
    separating space plus the word would exceed ``max_width``. A word wider than
    ``max_width`` gets a line of its own and is never split.
    """
    lines: list[str] = []
    current: list[str] = []
    width = 0.0

    for word in text.split(" "):
        word_width = measure(word)
        needed = word_width if not current else width + space_width + word_width
        if current and needed > max_width:
            lines.append(" ".join(current))
            current = [word]
            width = word_width
        else:
            current.append(word)
            width = needed

    if current:
        lines.append(" ".join(current))
    return lines


def tessellate(segments: Iterable[PathSegment]) -> list[NDArray[np.float64]]:
    """Flatten outline segments into polylines (Nx2 arrays), one per subpath."""
    polylines: list[NDArray[np.float64]] = []
    current: list[tuple[float, float]] = []

    def flush() -> None:
        if len(current) >= _MIN_STROKE_POINTS:
            polylines.append(np.array(current, dtype=np.float64))
        current.clear()

    for seg in segments:
        if isinstance(seg, MoveTo):
            flush()
            current.append(seg.pt)
        elif isinstance(seg, LineTo):
            current.append(seg.pt)
        elif isinstance(seg, QuadTo):
            if current:
                pts = quadratic_points(current[-1], seg.control, seg.pt)
                current.extend((float(x), float(y)) for x, y in pts)
        elif isinstance(seg, CurveTo):
            if current:
                pts = cubic_points(current[-1], seg.control1, seg.control2, seg.pt)
                current.extend((float(x), float(y)) for x, y in pts)
        elif isinstance(seg, ClosePath):
            flush()

    flush()
    return polylines


def build_stroke(
    polyline: NDArray[np.float64],
    offset: tuple[float, float],
    config: LayoutConfig,
    ink: Ink = SYNTHESIZED_INK,
) -> Stroke:
    """Wrap a polyline as a stroke shifted by ``offset`` with fixed weight and timing."""
    ox, oy = offset
    size = (config.stroke_width, config.stroke_width)
    points = tuple(
        StrokePoint(
            x=float(x) + ox,
            y=float(y) + oy,
            time_offset=i * config.point_time_step,
            size=size,
        )
        for i, (x, y) in enumerate(polyline)
    )
    return Stroke(points=points, ink=ink)


class GlyphSynthesizer:
    """Turns text into stroke groups using one glyph source."""

    def __init__(
        self,
        source: GlyphSource,
        config: LayoutConfig | None = None,
        ink: Ink = SYNTHESIZED_INK,
    ) -> None:
        self.source = source
        self.config = config or LayoutConfig()
        self.ink = ink

    def advance(self, char: str) -> float:
        """Cursor advance for one character: measured width plus glyph spacing.

        Control characters such as newlines leave no ink and do not move the pen.
        """
        if char == " ":
            return self.config.space_width
        if not char.isprintable():
            return 0.0
        return self.source.advance(char) + self.config.glyph_spacing

    def word_width(self, word: str) -> float:
        return sum(self.advance(c) for c in word)

    def wrap(self, text: str, max_width: float) -> list[str]:
        return wrap_text(text, max_width, self.word_width, self.config.space_width)

    def glyph_strokes(self, char: str, pen: tuple[float, float]) -> StrokeGroup:
        """Strokes for one character with its origin at ``pen`` (on the baseline)."""
        try:
            segments = self.source.outline(char)
        except GlyphMissingError:
            logger.debug("No outline for %r, emitting empty group", char)
            return ()

        strokes = []
        for polyline in tessellate(segments):
            if self.source.y_up:
                polyline = polyline * np.array([1.0, -1.0])
            strokes.append(build_stroke(polyline, pen, self.config, self.ink))
        return tuple(strokes)

    def synthesize(
        self,
        text: str,
        origin: tuple[float, float],
        max_width: float,
    ) -> list[StrokeGroup]:
        """Lay out ``text`` from ``origin``, wrapped to ``max_width``, one group per character."""
        ox, oy = origin
        groups: list[StrokeGroup] = []
        lines = self.wrap(text, max_width)

        for line_index, line in enumerate(lines):
            x = ox
            y = oy + line_index * self.config.line_height
            for char in line:
                if char == " ":
                    groups.append(())
                else:
                    groups.append(self.glyph_strokes(char, (x, y)))
                x += self.advance(char)

        logger.debug(
            "Synthesized %d groups (%d strokes) on %d lines",
            len(groups),
            sum(len(g) for g in groups),
            len(lines),
        )
        return groups
