"""Tests for rectangle geometry and Bezier sampling."""

import numpy as np
import pytest

from inkspace.utils.bezier import SAMPLES_PER_CURVE, cubic_points, quadratic_points
from inkspace.utils.geometry import (
    Rect,
    contains,
    inset,
    intersection,
    intersects,
    overlap_ratio,
    union,
    union_all,
)


class TestRect:
    def test_edges_and_area(self):
        r = Rect(10, 20, 30, 40)
        assert (r.min_x, r.min_y, r.max_x, r.max_y) == (10, 20, 40, 60)
        assert r.area == 1200
        assert r.center == (25, 40)

    def test_from_bounds(self):
        assert Rect.from_bounds(1, 2, 4, 8) == Rect(1, 2, 3, 6)


class TestIntersects:
    def test_overlapping(self):
        assert intersects(Rect(0, 0, 10, 10), Rect(5, 5, 10, 10))

    def test_shared_edge_is_not_intersection(self):
        assert not intersects(Rect(0, 0, 10, 10), Rect(10, 0, 10, 10))
        assert intersection(Rect(0, 0, 10, 10), Rect(0, 10, 10, 10)) is None

    def test_zero_area_only_intersects_itself(self):
        point = Rect(5, 5, 0, 0)
        assert intersects(point, Rect(5, 5, 0, 0))
        assert not intersects(point, Rect(0, 0, 10, 10))

    def test_zero_height_line_has_no_intersection(self):
        line = Rect(0, 50, 300, 0)
        assert not intersects(line, Rect(0, 0, 100, 100))
        assert intersection(line, Rect(0, 0, 100, 100)) is None

    def test_intersection_rect(self):
        assert intersection(Rect(0, 0, 10, 10), Rect(5, 5, 10, 10)) == Rect(5, 5, 5, 5)


def test_union_and_union_all():
    assert union(Rect(0, 0, 10, 10), Rect(20, 5, 10, 10)) == Rect(0, 0, 30, 15)
    assert union_all([]) is None
    assert union_all([Rect(0, 0, 1, 1), Rect(4, 4, 1, 1), Rect(-1, 2, 1, 1)]) == Rect(-1, 0, 6, 5)


def test_inset_grows_and_collapses():
    assert inset(Rect(10, 10, 20, 20), -5) == Rect(5, 5, 30, 30)
    collapsed = inset(Rect(0, 0, 10, 10), 8)
    assert collapsed.width == 0 and collapsed.height == 0
    assert collapsed.origin == (5, 5)


def test_overlap_ratio_uses_reference_area():
    ref = Rect(0, 0, 10, 10)
    assert overlap_ratio(Rect(5, 0, 10, 10), ref) == pytest.approx(0.5)
    assert overlap_ratio(Rect(20, 20, 5, 5), ref) == 0.0
    assert overlap_ratio(ref, Rect(0, 0, 0, 0)) == 0.0


def test_contains_allows_touching_edges():
    assert contains(Rect(0, 0, 10, 10), Rect(0, 0, 10, 5))
    assert not contains(Rect(0, 0, 10, 10), Rect(5, 5, 10, 1))


class TestBezier:
    def test_quadratic_sample_count_and_formula(self):
        p0, p1, p2 = (0.0, 0.0), (5.0, 10.0), (10.0, 0.0)
        pts = quadratic_points(p0, p1, p2)
        assert pts.shape == (SAMPLES_PER_CURVE, 2)
        for i, t in enumerate(np.arange(11) / 10):
            x = (1 - t) ** 2 * p0[0] + 2 * (1 - t) * t * p1[0] + t**2 * p2[0]
            y = (1 - t) ** 2 * p0[1] + 2 * (1 - t) * t * p1[1] + t**2 * p2[1]
            assert pts[i] == pytest.approx((x, y), abs=1e-9)

    def test_cubic_sample_count_and_endpoints(self):
        pts = cubic_points((0, 0), (0, 10), (10, 10), (10, 0))
        assert pts.shape == (11, 2)
        assert pts[0] == pytest.approx((0, 0))
        assert pts[-1] == pytest.approx((10, 0))
        # t = 0.5: (0 + 3*0 + 3*10 + 10) / 8, (0 + 30 + 30 + 0) / 8
        assert pts[5] == pytest.approx((5.0, 7.5))
