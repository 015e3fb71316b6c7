"""Tests for the placement solver."""

import pytest

from inkspace.engine.config import LayoutConfig
from inkspace.engine.context import CanvasMetadata
from inkspace.engine.placement import candidate_rects, collides, find_prior_response, place
from inkspace.engine.regions import analyze
from inkspace.utils.geometry import Rect, inset, overlap_ratio
from tests.conftest import rect_strokes


ANCHOR = Rect(100, 100, 200, 50)
CONTENT = (500, 80)

# 200-wide blockers sitting on each candidate around ANCHOR; too narrow to
# count as an earlier response.
BLOCK_BELOW = Rect(100, 190, 200, 80)
BLOCK_RIGHT = Rect(340, 100, 200, 80)
BLOCK_ABOVE = Rect(100, -20, 200, 80)
BLOCK_LEFT = Rect(-440, 100, 200, 80)


def _metadata(*others: Rect, recent: Rect = ANCHOR) -> CanvasMetadata:
    occupied = (recent, *others)
    return CanvasMetadata(
        canvas_origin=(0, 0),
        canvas_size=(1000, 1000),
        occupied_regions=occupied,
        recent_writing_region=recent,
    )


class TestCandidates:
    def test_order_and_positions(self):
        cands = candidate_rects(ANCHOR, CONTENT, 40)
        assert [name for name, _ in cands] == ["below", "right", "above", "left"]
        assert cands[0][1] == Rect(100, 190, 500, 80)
        assert cands[1][1] == Rect(340, 100, 500, 80)
        assert cands[2][1] == Rect(100, -20, 500, 80)
        assert cands[3][1] == Rect(-440, 100, 500, 80)

    def test_collision_threshold(self):
        candidate = Rect(0, 0, 100, 100)
        # Expanded by 10 on each side: a 22-wide strip across the candidate, 22%
        assert collides(candidate, (Rect(10, -50, 2, 200),))
        # 10-wide strip after expansion, 10%
        assert not collides(candidate, (Rect(-15, -50, 15, 200),))


class TestPlace:
    def test_no_recent_writing_uses_default(self):
        meta = analyze([], recent_count=1)
        placement = place(meta, CONTENT)
        assert placement.origin == (50, 50)
        assert (placement.width, placement.height) == CONTENT
        assert not placement.degraded
        assert placement.chosen_region == 0

    def test_below_when_free(self):
        placement = place(_metadata(), CONTENT)
        assert placement.origin == (100, 190)
        assert placement.position == "below"
        assert placement.attempts == ("recent_writing:below",)
        assert not placement.degraded

    def test_only_right_free(self):
        placement = place(_metadata(BLOCK_BELOW, BLOCK_ABOVE, BLOCK_LEFT), CONTENT)
        assert placement.position == "right"
        assert placement.origin == (340, 100)

    def test_above_then_left(self):
        placement = place(_metadata(BLOCK_BELOW, BLOCK_RIGHT), CONTENT)
        assert placement.position == "above"
        assert placement.origin == (100, -20)

        placement = place(_metadata(BLOCK_BELOW, BLOCK_RIGHT, BLOCK_ABOVE), CONTENT)
        assert placement.position == "left"
        assert placement.origin == (-440, 100)

    def test_large_blocker_over_below_and_right(self):
        placement = place(_metadata(Rect(100, 170, 800, 200), Rect(330, 90, 600, 60)), CONTENT)
        assert placement.position == "above"

    def test_all_collide_is_degraded_below(self, caplog):
        meta = _metadata(BLOCK_BELOW, BLOCK_RIGHT, BLOCK_ABOVE, BLOCK_LEFT)
        assert find_prior_response(meta) is None
        placement = place(meta, CONTENT)
        assert placement.degraded
        assert placement.origin == (100, 190)
        assert placement.position == "below"
        assert len(placement.attempts) == 4
        assert "collide" in caplog.text

    def test_recent_anchor_exhausted_before_prior_response(self):
        prior = Rect(1000, 1000, 300, 50)
        meta = _metadata(prior, BLOCK_BELOW, BLOCK_RIGHT, BLOCK_ABOVE, BLOCK_LEFT)
        assert find_prior_response(meta) == prior
        placement = place(meta, CONTENT)
        assert placement.attempts == (
            "recent_writing:below",
            "recent_writing:right",
            "recent_writing:above",
            "recent_writing:left",
            "prior_response:below",
        )
        assert placement.anchor == "prior_response"
        assert placement.origin == (1000, 1090)
        assert not placement.degraded

    def test_content_size_defaults_from_config(self):
        config = LayoutConfig(content_width=300, content_height=60)
        placement = place(_metadata(), config=config)
        assert (placement.width, placement.height) == (300, 60)


class TestPriorResponse:
    def test_needs_more_than_one_region(self):
        assert find_prior_response(_metadata()) is None

    def test_narrow_regions_do_not_qualify(self):
        assert find_prior_response(_metadata(Rect(500, 500, 150, 40))) is None

    def test_mostly_overlapping_recent_does_not_qualify(self):
        # Overlaps the recent region across 200 of its 250 units of width
        assert find_prior_response(_metadata(Rect(100, 120, 250, 60))) is None

    def test_most_recent_qualifying_region_wins(self):
        older, newer = Rect(0, 400, 300, 40), Rect(0, 600, 300, 40)
        assert find_prior_response(_metadata(older, newer)) == newer

    def test_flat_stroke_across_recent_region_qualifies(self):
        underline = Rect(0, 125, 300, 0)
        assert find_prior_response(_metadata(underline)) == underline


@pytest.mark.parametrize(
    "layout",
    [
        [(100, 100, 200, 50)],
        [(100, 100, 200, 50), (90, 200, 520, 90)],
        [(100, 100, 200, 50), (80, 180, 700, 100), (320, 60, 400, 120)],
        [(400, 400, 60, 60), (100, 420, 280, 40), (480, 300, 40, 500), (380, 320, 60, 40)],
        [(50, 50, 900, 30), (50, 120, 900, 30), (50, 190, 900, 30), (500, 260, 40, 40)],
    ],
)
def test_placement_never_overlaps_more_than_threshold(layout):
    meta = analyze(rect_strokes(*layout), recent_count=1)
    placement = place(meta, CONTENT)
    if placement.degraded:
        return
    for region in meta.occupied_regions:
        assert overlap_ratio(inset(region, -10), placement.rect) <= 0.2
