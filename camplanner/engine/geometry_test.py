"""Tests for the geometry primitives."""

import math

import numpy as np
import pytest

from camplanner.engine.geometry import (
    normalize_angle,
    rect_corners,
    segment_intersection,
)


class TestRectCorners:
    def test_axis_aligned(self):
        corners = rect_corners(10, 5, 10, 5, 0.0)
        assert corners == [(0, 0), (20, 0), (20, 10), (0, 10)]

    def test_rotated_90(self):
        corners = rect_corners(0, 0, 2, 1, math.pi / 2)
        expected = [(1, -2), (1, 2), (-1, 2), (-1, -2)]
        for (x, y), (ex, ey) in zip(corners, expected):
            assert x == pytest.approx(ex, abs=1e-12)
            assert y == pytest.approx(ey, abs=1e-12)

    def test_positive_angle_is_clockwise_on_screen(self):
        # Quarter turn: the right-hand side (local +x) swings down to +y
        corners = rect_corners(0, 0, 2, 1, math.pi / 2)
        assert corners[1][1] == pytest.approx(2)
        assert corners[2][1] == pytest.approx(2)
        assert corners[0][1] == pytest.approx(-2)
        assert corners[3][1] == pytest.approx(-2)

    def test_rotated_45_matches_formula(self):
        cx, cy, hw, hh = 10.0, 5.0, 10.0, 5.0
        rot = math.radians(45)
        c, s = math.cos(rot), math.sin(rot)
        corners = rect_corners(cx, cy, hw, hh, rot)
        local = [(-hw, -hh), (hw, -hh), (hw, hh), (-hw, hh)]
        for (x, y), (lx, ly) in zip(corners, local):
            assert x == pytest.approx(cx + lx * c - ly * s)
            assert y == pytest.approx(cy + lx * s + ly * c)

    def test_rotation_preserves_center(self):
        corners = rect_corners(3, 4, 7, 2, 1.1)
        assert sum(x for x, _ in corners) / 4 == pytest.approx(3)
        assert sum(y for _, y in corners) / 4 == pytest.approx(4)


class TestSegmentIntersection:
    def test_crossing(self):
        hit = segment_intersection(0, 0, 10, 0, 5, -5, 5, 5)
        assert hit is not None
        assert hit[0] == pytest.approx(5)
        assert hit[1] == pytest.approx(0)

    def test_miss_short_of_segment(self):
        # First segment stops at x=4, second sits at x=5
        assert segment_intersection(0, 0, 4, 0, 5, -5, 5, 5) is None

    def test_miss_beside_segment(self):
        assert segment_intersection(0, 0, 10, 0, 5, 1, 5, 5) is None

    def test_parallel(self):
        assert segment_intersection(0, 0, 10, 0, 0, 1, 10, 1) is None

    def test_collinear_treated_as_parallel(self):
        assert segment_intersection(0, 0, 10, 0, 2, 0, 8, 0) is None

    def test_endpoint_touch_counts(self):
        hit = segment_intersection(0, 0, 10, 0, 5, 0, 5, 5)
        assert hit is not None
        assert hit[0] == pytest.approx(5)

    def test_zero_length_segment_never_hit(self):
        assert segment_intersection(0, 0, 10, 0, 5, 0, 5, 0) is None

    def test_tolerance_is_absolute(self):
        # A tiny crossing segment: denominator 1e-5 is below the default
        # 1e-4 even though the segments do cross
        tiny = (0.5, -5e-6, 0.5, 5e-6)
        assert segment_intersection(0, 0, 1, 0, *tiny) is None
        hit = segment_intersection(0, 0, 1, 0, *tiny, parallel_epsilon=1e-6)
        assert hit is not None
        assert hit[0] == pytest.approx(0.5)


class TestNormalizeAngle:
    def test_in_range_unchanged(self):
        assert normalize_angle(1.0) == pytest.approx(1.0)
        assert normalize_angle(-1.0) == pytest.approx(-1.0)

    def test_pi_stays_positive(self):
        assert normalize_angle(math.pi) == pytest.approx(math.pi)

    def test_minus_pi_maps_to_pi(self):
        assert normalize_angle(-math.pi) == pytest.approx(math.pi)

    def test_wraps_large_angles(self):
        assert normalize_angle(3 * math.pi / 2) == pytest.approx(-math.pi / 2)
        assert normalize_angle(5 * math.pi / 2) == pytest.approx(math.pi / 2)
        assert normalize_angle(-7 * math.pi / 4) == pytest.approx(math.pi / 4)

    def test_returns_float_for_scalar(self):
        assert isinstance(normalize_angle(0.5), float)

    def test_elementwise_on_arrays(self):
        out = normalize_angle(np.array([0.0, 2 * math.pi, -3 * math.pi / 2]))
        assert isinstance(out, np.ndarray)
        assert out == pytest.approx([0.0, 0.0, math.pi / 2])
