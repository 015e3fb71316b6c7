"""Placement solver: first-fit rectangle next to the latest writing.

Anchors are tried in order (the user's latest writing, then the most recent
earlier response if one can be spotted), and around each anchor the positions
below, right, above and left. The first candidate that no occupied rectangle
overlaps by more than the collision threshold wins.
"""

from __future__ import annotations

import logging

from inkspace.engine.config import LayoutConfig
from inkspace.engine.context import CanvasMetadata, Placement
from inkspace.utils.geometry import Rect, contains, inset, intersection, overlap_ratio

logger = logging.getLogger(__name__)

POSITIONS = ("below", "right", "above", "left")

RECENT_ANCHOR = "recent_writing"
PRIOR_RESPONSE_ANCHOR = "prior_response"


def find_prior_response(
    metadata: CanvasMetadata,
    config: LayoutConfig | None = None,
) -> Rect | None:
    """Most recent wide region standing apart from the latest writing.

    There is no provenance on strokes, so earlier responses are recognised by
    shape alone: wider than ``prior_response_min_width`` and overlapping the
    recent region by less than ``prior_response_max_overlap`` of their width.
    """
    config = config or LayoutConfig()
    recent = metadata.recent_writing_region
    if recent is None or len(metadata.occupied_regions) <= 1:
        return None

    for region in reversed(metadata.occupied_regions):
        inter = intersection(region, recent)
        separate = inter is None or inter.width < region.width * config.prior_response_max_overlap
        if separate and region.width > config.prior_response_min_width:
            logger.debug("Prior response candidate at %s", region)
            return region
    return None


def candidate_rects(
    anchor: Rect,
    content_size: tuple[float, float],
    padding: float,
) -> list[tuple[str, Rect]]:
    """Candidate boxes around ``anchor`` in priority order."""
    w, h = content_size
    return [
        ("below", Rect(anchor.min_x, anchor.max_y + padding, w, h)),
        ("right", Rect(anchor.max_x + padding, anchor.min_y, w, h)),
        ("above", Rect(anchor.min_x, anchor.min_y - h - padding, w, h)),
        ("left", Rect(anchor.min_x - w - padding, anchor.min_y, w, h)),
    ]


def collides(
    candidate: Rect,
    occupied: tuple[Rect, ...],
    config: LayoutConfig | None = None,
) -> bool:
    """True if any breathing-room-expanded occupied rect covers too much of ``candidate``."""
    config = config or LayoutConfig()
    for region in occupied:
        expanded = inset(region, -config.breathing_room)
        if overlap_ratio(expanded, candidate) > config.collision_overlap:
            return True
    return False


def place(
    metadata: CanvasMetadata,
    content_size: tuple[float, float] | None = None,
    config: LayoutConfig | None = None,
) -> Placement:
    """Pick a rectangle of ``content_size`` for new content. Never fails."""
    config = config or LayoutConfig()
    if content_size is None:
        content_size = (config.content_width, config.content_height)
    w, h = content_size

    recent = metadata.recent_writing_region
    if recent is None:
        x, y = config.default_origin
        logger.debug("No recent writing, using default placement (%.0f, %.0f)", x, y)
        return Placement(
            x=x,
            y=y,
            width=w,
            height=h,
            reasoning="No recent writing; default placement near the canvas origin",
            chosen_region=_containing_region(Rect(x, y, w, h), metadata),
        )

    anchors: list[tuple[str, Rect]] = [(RECENT_ANCHOR, recent)]
    prior = find_prior_response(metadata, config)
    if prior is not None:
        anchors.append((PRIOR_RESPONSE_ANCHOR, prior))

    attempts: list[str] = []
    for anchor_name, anchor in anchors:
        for position, candidate in candidate_rects(anchor, content_size, config.placement_padding):
            attempts.append(f"{anchor_name}:{position}")
            if collides(candidate, metadata.occupied_regions, config):
                logger.debug("  %s of %s: collision", position, anchor_name)
                continue

            logger.info("Placed %s of %s at (%.0f, %.0f)", position, anchor_name, candidate.x, candidate.y)
            return Placement(
                x=candidate.x,
                y=candidate.y,
                width=w,
                height=h,
                reasoning=f"{position} {anchor_name.replace('_', ' ')}: no collisions",
                chosen_region=_containing_region(candidate, metadata),
                anchor=anchor_name,
                position=position,
                attempts=tuple(attempts),
            )

    # Every candidate collides: go below the latest writing and let the canvas grow.
    fallback = candidate_rects(recent, content_size, config.placement_padding)[0][1]
    logger.warning(
        "All %d candidates collide, placing below recent writing at (%.0f, %.0f)",
        len(attempts),
        fallback.x,
        fallback.y,
    )
    return Placement(
        x=fallback.x,
        y=fallback.y,
        width=w,
        height=h,
        reasoning="All candidate positions collide; placed below recent writing anyway",
        chosen_region=_containing_region(fallback, metadata),
        degraded=True,
        anchor=RECENT_ANCHOR,
        position="below",
        attempts=tuple(attempts),
    )


def _containing_region(r: Rect, metadata: CanvasMetadata) -> int | None:
    for i, region in enumerate(metadata.empty_regions):
        if contains(region, r):
            return i
    return None
