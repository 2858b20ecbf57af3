"""Tests for the seat geometry engine."""
import math
import pathlib
import random
import sys
from itertools import combinations

import pytest

# Ensure src package is on path
sys.path.append(str(pathlib.Path(__file__).resolve().parents[1] / "src"))

from seat_maker.geometry import (
    compute_positions,
    perimeter_offset,
    polygon_layout,
    resolve_overlaps,
    round_layout,
)
from seat_maker.models import TableShape

CANVAS = (600, 400)


def _min_gap(positions):
    return min(
        (math.hypot(a.x - b.x, a.y - b.y) for a, b in combinations(positions, 2)),
        default=math.inf,
    )


class FixedRandom:
    """Stands in for random.Random, returning preset values in turn."""

    def __init__(self, values):
        self._values = iter(values)

    def random(self):
        return next(self._values)


@pytest.mark.parametrize("shape", list(TableShape))
def test_count_matches_seats(shape):
    for n in range(0, 31):
        positions = compute_positions(shape, CANVAS, n, 30, rng=random.Random(1))
        assert len(positions) == n
        assert [p.seat_index for p in positions] == list(range(n))
        for p in positions:
            assert not math.isnan(p.x) and not math.isnan(p.y)


def test_zero_seats_is_empty():
    assert compute_positions(TableShape.ROUND, CANVAS, 0, 30) == []


@pytest.mark.parametrize("shape", list(TableShape))
@pytest.mark.parametrize("icon", [18, 24, 32, 40])
def test_seats_do_not_overlap_at_normal_density(shape, icon):
    for n in range(2, 13):
        positions = compute_positions(shape, CANVAS, n, icon)
        assert _min_gap(positions) >= icon * 1.05 - 1e-6


def test_low_density_is_deterministic():
    first = compute_positions(TableShape.ROUND, (400, 400), 6, 30)
    second = compute_positions(TableShape.ROUND, (400, 400), 6, 30)
    assert first == second


def test_round_starts_at_top_and_runs_clockwise():
    positions = compute_positions(TableShape.ROUND, (400, 400), 4, 30)
    top, right, bottom, left = positions
    assert top.x == pytest.approx(200)
    assert top.y < 200
    assert right.x > 200 and right.y == pytest.approx(200)
    assert bottom.y > 200
    assert left.x < 200
    radius = 0.85 * 200 + perimeter_offset(TableShape.ROUND, 4, 30)
    assert 200 - top.y == pytest.approx(radius)


def test_offsets_grow_with_seat_count():
    for shape in TableShape:
        assert perimeter_offset(shape, 10, 30) > perimeter_offset(shape, 2, 30)
    assert perimeter_offset(TableShape.ROUND, 0, 100) == pytest.approx(40.5)
    assert perimeter_offset(TableShape.RECTANGLE, 5, 10) == pytest.approx(7.0)
    assert perimeter_offset(TableShape.SQUARE, 5, 10) == pytest.approx(4.5)


def test_rectangle_one_seat_per_side():
    positions = compute_positions(TableShape.RECTANGLE, CANVAS, 4, 20)
    off = perimeter_offset(TableShape.RECTANGLE, 4, 20)
    top, right, bottom, left = positions
    assert (top.x, top.y) == pytest.approx((300, 200 - 120 - off))
    assert (right.x, right.y) == pytest.approx((300 + 255 + off, 200))
    assert (bottom.x, bottom.y) == pytest.approx((300, 200 + 120 + off))
    assert (left.x, left.y) == pytest.approx((300 - 255 - off, 200))


def test_rectangle_two_seats_per_side():
    positions = compute_positions(TableShape.RECTANGLE, CANVAS, 8, 20)
    assert positions[0].y == pytest.approx(positions[1].y)
    assert positions[0].x < positions[1].x
    assert positions[1].x - positions[0].x == pytest.approx(0.85 * 600 / 3)
    # right side walked top to bottom
    assert positions[2].x == pytest.approx(positions[3].x)
    assert positions[2].y < positions[3].y


def test_partial_side_tier_uses_leading_sides():
    pts = polygon_layout(0, 0, 100, 100, 3, 10)
    assert pts == [(0, -60), (60, 0), (0, 60)]


def test_square_perimeter_tier_stays_outside_outline():
    positions = compute_positions(TableShape.SQUARE, (500, 500), 12, 20)
    half = 0.85 * 500 / 2
    for p in positions:
        assert max(abs(p.x - 250), abs(p.y - 250)) > half


def test_round_layout_equal_spacing():
    pts = round_layout(200, 200, 8, 0)
    gaps = [math.dist(pts[i], pts[(i + 1) % 8]) for i in range(8)]
    assert max(gaps) == pytest.approx(min(gaps))


class TestResolveOverlaps:
    def test_close_pair_pushed_to_min_distance(self):
        out = resolve_overlaps([(0, 0), (10, 0)], 31.5)
        assert out[0] == pytest.approx((-10.75, 0))
        assert out[1] == pytest.approx((20.75, 0))

    def test_coincident_points_are_separated(self):
        out = resolve_overlaps([(5, 5), (5, 5)], 20)
        assert math.dist(out[0], out[1]) == pytest.approx(20)
        assert all(not math.isnan(c) for p in out for c in p)

    def test_separated_points_untouched(self):
        pts = [(0, 0), (100, 0), (0, 100)]
        assert resolve_overlaps(pts, 30) == pts

    def test_crowded_points_spread_out(self):
        pts = [(float(i), 0.0) for i in range(10)]
        out = resolve_overlaps(pts, 20, rng=random.Random(3))
        assert len(out) == 10
        xs = [x for x, _ in out]
        assert max(xs) - min(xs) > 9
        assert all(math.isfinite(c) for p in out for c in p)

    def test_random_nudge_magnitude_and_angle(self):
        # angle 0, magnitude 8 + 8 * 0 = 8: the pair ends 16 apart and the final pass stays idle
        out = resolve_overlaps([(0.0, 0.0), (0.0, 0.0)], 16, rng=FixedRandom([0.0, 0.0]), max_passes=0)
        assert out[0] == pytest.approx((8.0, 0.0))
        assert out[1] == pytest.approx((-8.0, 0.0))

    def test_index_angle_nudge_after_random_nudge(self):
        # random nudge: angle pi/2, magnitude 12; still closer than 30, so the
        # final pass moves the pair by 15 along (pi/4) * (0 - 1)
        out = resolve_overlaps([(0.0, 0.0), (10.0, 0.0)], 30, rng=FixedRandom([0.25, 0.5]), max_passes=0)
        d = 15 * math.sqrt(0.5)
        assert out[0] == pytest.approx((d, 12 - d))
        assert out[1] == pytest.approx((10 - d, -12 + d))

    def test_fallback_is_reproducible_with_seed(self):
        pts = [(0.0, 0.0)] * 12
        a = resolve_overlaps(pts, 40, rng=random.Random(7), max_passes=1)
        b = resolve_overlaps(pts, 40, rng=random.Random(7), max_passes=1)
        assert a == b


def test_dense_table_never_produces_nan():
    positions = compute_positions(TableShape.RECTANGLE, (120, 80), 40, 40, rng=random.Random(0))
    assert len(positions) == 40
    assert all(math.isfinite(p.x) and math.isfinite(p.y) for p in positions)
