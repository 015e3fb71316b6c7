"""Leaf-node rectangle algebra. No engine imports."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from shapely.geometry import Polygon, box


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle: origin (x, y) is the top-left corner, Y grows down."""

    x: float
    y: float
    width: float
    height: float

    @property
    def min_x(self) -> float:
        return self.x

    @property
    def min_y(self) -> float:
        return self.y

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def center(self) -> tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)

    @property
    def origin(self) -> tuple[float, float]:
        return (self.x, self.y)

    @classmethod
    def from_bounds(cls, min_x: float, min_y: float, max_x: float, max_y: float) -> Rect:
        """Build from (xmin, ymin, xmax, ymax), the layout used by ``bbox`` helpers."""
        return cls(min_x, min_y, max(0.0, max_x - min_x), max(0.0, max_y - min_y))

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.x, self.y, self.width, self.height)


def union(a: Rect, b: Rect) -> Rect:
    """Smallest rectangle containing both."""
    return Rect.from_bounds(
        min(a.min_x, b.min_x),
        min(a.min_y, b.min_y),
        max(a.max_x, b.max_x),
        max(a.max_y, b.max_y),
    )


def union_all(rects: Iterable[Rect]) -> Rect | None:
    """Union of every rectangle, or None for an empty iterable."""
    result: Rect | None = None
    for r in rects:
        result = r if result is None else union(result, r)
    return result


def intersects(a: Rect, b: Rect) -> bool:
    """Strict overlap test.

    Rectangles sharing only an edge do not intersect. A zero-area rectangle
    intersects nothing except an identical rectangle.
    """
    if a == b:
        return True
    if a.area == 0 or b.area == 0:
        return False
    return a.min_x < b.max_x and b.min_x < a.max_x and a.min_y < b.max_y and b.min_y < a.max_y


def intersection(a: Rect, b: Rect) -> Rect | None:
    """Overlapping part of two rectangles, None when they do not intersect."""
    if not intersects(a, b):
        return None
    return Rect.from_bounds(
        max(a.min_x, b.min_x),
        max(a.min_y, b.min_y),
        min(a.max_x, b.max_x),
        min(a.max_y, b.max_y),
    )


def inset(r: Rect, dx: float, dy: float | None = None) -> Rect:
    """Shrink by dx/dy on each side (negative values grow the rectangle).

    Shrinking past zero collapses that axis to a zero-length span at the centre.
    """
    if dy is None:
        dy = dx
    cx, cy = r.center
    width = r.width - 2 * dx
    height = r.height - 2 * dy
    x = r.x + dx if width >= 0 else cx
    y = r.y + dy if height >= 0 else cy
    return Rect(x, y, max(0.0, width), max(0.0, height))


def overlap_ratio(r: Rect, reference: Rect) -> float:
    """Intersection area divided by the reference area (0.0 for zero-area references)."""
    if reference.area <= 0:
        return 0.0
    inter = intersection(r, reference)
    if inter is None:
        return 0.0
    return inter.area / reference.area


def contains(outer: Rect, inner: Rect) -> bool:
    """True if inner lies entirely within outer (edges may touch)."""
    return (
        outer.min_x <= inner.min_x
        and outer.min_y <= inner.min_y
        and inner.max_x <= outer.max_x
        and inner.max_y <= outer.max_y
    )


def to_box(r: Rect) -> Polygon:
    """Shapely polygon for spatial indexing."""
    return box(r.min_x, r.min_y, r.max_x, r.max_y)
