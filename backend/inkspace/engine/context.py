"""Ink data model: strokes, canvas metadata and placements.

Strokes are produced by the capture surface (user ink) or the synthesizer
(generated ink). Everything here is immutable; metadata is rebuilt from scratch
on every analysis.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import numpy as np

from inkspace.utils.geometry import Rect


@dataclass(frozen=True)
class Ink:
    """Visual identity of a stroke."""

    color: str = "#000000"
    width: float = 2.0
    tool: str = "pen"


USER_INK = Ink(color="#000000", width=2.0)
# Pink marks generated content so it reads apart from the user's black ink.
SYNTHESIZED_INK = Ink(color="#FF2D55", width=2.5)


@dataclass(frozen=True)
class StrokePoint:
    """One sample along a stroke."""

    x: float
    y: float
    time_offset: float = 0.0
    size: tuple[float, float] = (2.0, 2.0)
    opacity: float = 1.0
    force: float = 1.0
    azimuth: float = 0.0
    altitude: float = 0.0

    @property
    def location(self) -> tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True)
class Stroke:
    """A continuous ink mark.

    ``bounds`` may be supplied by the capture surface. When omitted it is
    derived from the point locations, grown by half the largest point size.
    """

    points: tuple[StrokePoint, ...]
    ink: Ink = USER_INK
    bounds: Rect | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "points", tuple(self.points))
        if self.bounds is None:
            object.__setattr__(self, "bounds", _render_bounds(self.points))

    def __len__(self) -> int:
        return len(self.points)


def _render_bounds(points: tuple[StrokePoint, ...]) -> Rect:
    if not points:
        return Rect(0.0, 0.0, 0.0, 0.0)
    xy = np.array([p.location for p in points], dtype=np.float64)
    half = max(max(p.size) for p in points) / 2
    return Rect.from_bounds(
        float(np.min(xy[:, 0])) - half,
        float(np.min(xy[:, 1])) - half,
        float(np.max(xy[:, 0])) + half,
        float(np.max(xy[:, 1])) + half,
    )


def stroke_from_rect(r: Rect, ink: Ink = USER_INK) -> Stroke:
    """A stroke whose bounds are exactly ``r`` (a diagonal across it)."""
    points = (StrokePoint(r.min_x, r.min_y), StrokePoint(r.max_x, r.max_y, time_offset=0.01))
    return Stroke(points=points, ink=ink, bounds=r)


# One rendered character; empty = space or glyph without outline.
StrokeGroup = tuple[Stroke, ...]


@dataclass(frozen=True)
class CanvasMetadata:
    """Snapshot of the canvas layout at one point in time."""

    canvas_origin: tuple[float, float]
    canvas_size: tuple[float, float]
    # One rect per stroke, in stroke order
    occupied_regions: tuple[Rect, ...] = ()
    # Tight union of the most recent strokes
    recent_writing_region: Rect | None = None
    empty_regions: tuple[Rect, ...] = ()
    grid_cell_size: float = 100.0
    recent_count: int = 0

    @property
    def canvas_rect(self) -> Rect:
        return Rect(*self.canvas_origin, *self.canvas_size)

    def largest_empty_regions(self, count: int) -> list[Rect]:
        """Empty regions sorted by area, largest first."""
        return sorted(self.empty_regions, key=lambda r: r.area, reverse=True)[:count]

    def describe(self) -> str:
        w, h = self.canvas_size
        return (
            f"Canvas: {int(w)}×{int(h)}, "
            f"Occupied: {len(self.occupied_regions)}, "
            f"Empty spaces: {len(self.empty_regions)}"
        )

    def summary(self, max_regions: int = 5) -> dict[str, Any]:
        """Plain-dict view handed to the reasoning service alongside the image."""
        recent = self.recent_writing_region
        return {
            "canvas_size": [round(self.canvas_size[0]), round(self.canvas_size[1])],
            "occupied_regions": len(self.occupied_regions),
            "recent_writing_region": [round(v) for v in recent.as_tuple()] if recent else None,
            "largest_empty_regions": [
                [round(v) for v in r.as_tuple()] for r in self.largest_empty_regions(max_regions)
            ],
        }


@dataclass(frozen=True)
class Placement:
    """Where a new content block goes."""

    x: float
    y: float
    width: float
    height: float
    reasoning: str = ""
    # Index into CanvasMetadata.empty_regions of the region holding the placement
    chosen_region: int | None = None
    # True when every candidate collided and the block overlaps existing ink
    degraded: bool = False
    anchor: str | None = None
    position: str | None = None
    # "anchor:position" labels in the order they were tried
    attempts: tuple[str, ...] = field(default_factory=tuple)

    @property
    def origin(self) -> tuple[float, float]:
        return (self.x, self.y)

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)
