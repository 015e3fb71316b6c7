"""Region analysis: occupied, recent and empty areas of the canvas.

Empty space is found with a greedy grid flood: the working area is cut into
square cells, cells near ink are marked occupied, and each free cell seeds a
rectangle that grows right as far as possible and then down for as long as the
whole width stays free. This is O(rows × cols) and can miss a larger rectangle
reachable with a narrower width; that trade-off is accepted.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

import numpy as np
from numpy.typing import NDArray
from shapely import STRtree

from inkspace.engine.config import LayoutConfig
from inkspace.engine.context import CanvasMetadata, Stroke
from inkspace.errors import InputError
from inkspace.utils.geometry import Rect, inset, intersection, intersects, to_box, union_all

logger = logging.getLogger(__name__)


def working_area(strokes: Sequence[Stroke], config: LayoutConfig | None = None) -> Rect:
    """Union of all stroke bounds grown by the canvas padding, origin clamped to ≥ 0."""
    config = config or LayoutConfig()
    content = union_all(s.bounds for s in strokes)
    if content is None:
        size = config.default_canvas_size
        return Rect(0.0, 0.0, size, size)

    pad = config.canvas_padding
    return Rect.from_bounds(
        max(0.0, content.min_x - pad),
        max(0.0, content.min_y - pad),
        content.max_x + pad,
        content.max_y + pad,
    )


def occupancy_grid(
    area: Rect,
    occupied: Sequence[Rect],
    cell_size: float,
    margin: float,
) -> NDArray[np.bool_]:
    """Boolean rows × cols grid, True where a cell touches margin-expanded ink."""
    rows = max(0, math.ceil(area.height / cell_size))
    cols = max(0, math.ceil(area.width / cell_size))
    grid = np.zeros((rows, cols), dtype=np.bool_)
    if not occupied or rows == 0 or cols == 0:
        return grid

    expanded = [inset(r, -margin) for r in occupied]
    tree = STRtree([to_box(r) for r in expanded])

    for row in range(rows):
        for col in range(cols):
            cell = _cell_rect(area, row, col, 1, 1, cell_size)
            candidates = tree.query(to_box(cell))
            grid[row, col] = any(intersects(cell, expanded[int(i)]) for i in candidates)
    return grid


def find_empty_regions(
    grid: NDArray[np.bool_],
    area: Rect,
    cell_size: float,
) -> list[Rect]:
    """Greedy maximal rectangles over the free cells of ``grid``, in row-major seed order.

    Cells already claimed by an earlier rectangle block growth, so the result is
    pairwise disjoint. Rectangles are clipped to ``area`` and dropped when
    smaller than one cell in either dimension.
    """
    rows, cols = grid.shape
    blocked = grid.copy()
    regions: list[Rect] = []

    for r0 in range(rows):
        for c0 in range(cols):
            if blocked[r0, c0]:
                continue

            width = 0
            while c0 + width < cols and not blocked[r0, c0 + width]:
                width += 1

            height = 1
            while r0 + height < rows and not blocked[r0 + height, c0 : c0 + width].any():
                height += 1

            blocked[r0 : r0 + height, c0 : c0 + width] = True

            region = intersection(_cell_rect(area, r0, c0, width, height, cell_size), area)
            if region is not None and region.width >= cell_size and region.height >= cell_size:
                regions.append(region)

    return regions


def analyze(
    strokes: Sequence[Stroke],
    recent_count: int,
    config: LayoutConfig | None = None,
) -> CanvasMetadata:
    """Build canvas metadata for the given strokes.

    ``recent_count`` is how many of the newest strokes count as the latest
    writing. Values below 1 fall back to 1.
    """
    config = config or LayoutConfig()
    if recent_count < 1:
        logger.warning("%s", InputError(f"recent_count={recent_count}, using 1"))
        recent_count = 1

    area = working_area(strokes, config)
    occupied = tuple(s.bounds for s in strokes)
    recent_count = min(recent_count, len(occupied))
    recent = union_all(occupied[-recent_count:]) if recent_count else None

    grid = occupancy_grid(area, occupied, config.grid_cell_size, config.proximity_margin)
    empty = find_empty_regions(grid, area, config.grid_cell_size)

    metadata = CanvasMetadata(
        canvas_origin=area.origin,
        canvas_size=(area.width, area.height),
        occupied_regions=occupied,
        recent_writing_region=recent,
        empty_regions=tuple(empty),
        grid_cell_size=config.grid_cell_size,
        recent_count=recent_count,
    )
    logger.debug("Analyzed %d strokes: %s", len(strokes), metadata.describe())
    return metadata


def _cell_rect(area: Rect, row: int, col: int, width: int, height: int, cell_size: float) -> Rect:
    return Rect(
        area.x + col * cell_size,
        area.y + row * cell_size,
        width * cell_size,
        height * cell_size,
    )
