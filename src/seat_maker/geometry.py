"""
Seat geometry engine.

Places N seats around a round, square or rectangular table outline drawn
in the middle of a canvas:

    round:      seats spaced evenly by angle, clockwise from the top.
    rectangle:  0.85 * width by 0.6 * height outline.
    square:     0.85 * min(width, height) outline.

Rectangles and squares are tiered by seat count: up to 4 seats get one seat
centred per side, up to 8 get two per side, more are spread at equal arc
length around the perimeter. Every seat is pushed outward from the outline by
an offset that grows with seat count and icon size. A pairwise relaxation then
separates seats that the closed-form layouts put closer than the icon size.
Coordinates are screen coordinates, y grows downward.
"""
from __future__ import annotations

import logging
import math
import random
from typing import List, Optional, Sequence, Tuple

from .models import SeatPosition, TableShape

logger = logging.getLogger(__name__)

Point = Tuple[float, float]

# (base factor, per seat factor, scale) for the perimeter offset
_OFFSET_FACTORS = {
    TableShape.ROUND: (0.45, 0.02, 0.9),
    TableShape.RECTANGLE: (0.5, 0.04, 1.0),
    TableShape.SQUARE: (0.35, 0.02, 1.0),
}

OUTLINE_RATIO = 0.85
RECTANGLE_HEIGHT_RATIO = 0.6
MIN_DISTANCE_RATIO = 1.05
MAX_RELAXATION_PASSES = 8
_EPS = 1e-9


# ----------------------------- public API -----------------------------
def compute_positions(
    shape: TableShape,
    canvas_size: Tuple[float, float],
    seat_count: int,
    icon_size: float,
    rng: Optional[random.Random] = None,
) -> List[SeatPosition]:
    """Return ``seat_count`` seat centres for a table drawn on ``canvas_size``.

    Index 0 is the first seat of the base layout. ``rng`` only feeds the
    randomized overlap fallback, which does not fire at normal densities.
    """
    if seat_count <= 0:
        return []
    shape = TableShape(shape)
    width, height = canvas_size
    offset = perimeter_offset(shape, seat_count, icon_size)

    if shape == TableShape.ROUND:
        base = round_layout(width, height, seat_count, offset)
    elif shape == TableShape.RECTANGLE:
        base = polygon_layout(
            width / 2, height / 2,
            OUTLINE_RATIO * width, RECTANGLE_HEIGHT_RATIO * height,
            seat_count, offset,
        )
    else:
        side = OUTLINE_RATIO * min(width, height)
        base = polygon_layout(width / 2, height / 2, side, side, seat_count, offset)

    points = resolve_overlaps(base, icon_size * MIN_DISTANCE_RATIO, rng=rng)
    return [SeatPosition(seat_index=i, x=x, y=y) for i, (x, y) in enumerate(points)]


def perimeter_offset(shape: TableShape, seat_count: int, icon_size: float) -> float:
    """Outward distance between the outline and a seat centre."""
    base, per_seat, scale = _OFFSET_FACTORS[TableShape(shape)]
    return icon_size * (base + per_seat * seat_count) * scale


# ----------------------------- base layouts -----------------------------
def round_layout(width: float, height: float, seat_count: int, offset: float) -> List[Point]:
    cx, cy = width / 2, height / 2
    radius = OUTLINE_RATIO * min(width, height) / 2 + offset
    pts = []
    for i in range(seat_count):
        theta = -math.pi / 2 + 2 * math.pi * i / seat_count
        pts.append((cx + radius * math.cos(theta), cy + radius * math.sin(theta)))
    return pts


def polygon_layout(
    cx: float, cy: float, w: float, h: float, seat_count: int, offset: float
) -> List[Point]:
    """Seats around a ``w`` by ``h`` outline centred on ``(cx, cy)``."""
    if seat_count <= 4:
        return side_slots(cx, cy, w, h, offset, (0.5,))[:seat_count]
    if seat_count <= 8:
        return side_slots(cx, cy, w, h, offset, (1 / 3, 2 / 3))[:seat_count]
    return perimeter_slots(cx, cy, w, h, seat_count, offset)


def side_slots(
    cx: float, cy: float, w: float, h: float, offset: float, fractions: Sequence[float]
) -> List[Point]:
    """Seats at fixed fractions of each side, sides in order top, right, bottom, left.

    Each side is walked clockwise.
    """
    left, right = cx - w / 2, cx + w / 2
    top, bottom = cy - h / 2, cy + h / 2
    pts: List[Point] = []
    pts.extend((left + f * w, top - offset) for f in fractions)
    pts.extend((right + offset, top + f * h) for f in fractions)
    pts.extend((right - f * w, bottom + offset) for f in fractions)
    pts.extend((left - offset, bottom - f * h) for f in fractions)
    return pts


def perimeter_slots(
    cx: float, cy: float, w: float, h: float, seat_count: int, offset: float
) -> List[Point]:
    """Seats at equal arc length, clockwise from the top-left corner."""
    left, right = cx - w / 2, cx + w / 2
    top, bottom = cy - h / 2, cy + h / 2
    step = 2 * (w + h) / seat_count
    pts: List[Point] = []
    for i in range(seat_count):
        d = (i + 0.5) * step
        if d < w:
            pts.append((left + d, top - offset))
        elif d < w + h:
            pts.append((right + offset, top + (d - w)))
        elif d < 2 * w + h:
            pts.append((right - (d - w - h), bottom + offset))
        else:
            pts.append((left - offset, bottom - (d - 2 * w - h)))
    return pts


# ----------------------------- relaxation -----------------------------
def _index_angle(i: int, j: int) -> float:
    return (math.pi / 4) * (i - j)


def _too_close(pts: List[List[float]], i: int, j: int, min_distance: float) -> bool:
    return math.hypot(pts[j][0] - pts[i][0], pts[j][1] - pts[i][1]) < min_distance - _EPS


def _nudge(pts: List[List[float]], i: int, j: int, angle: float, magnitude: float) -> None:
    dx = magnitude * math.cos(angle)
    dy = magnitude * math.sin(angle)
    pts[i][0] += dx
    pts[i][1] += dy
    pts[j][0] -= dx
    pts[j][1] -= dy


def _relaxation_pass(pts: List[List[float]], min_distance: float) -> bool:
    """Push every overlapping pair apart along its centre line. Returns True if anything moved."""
    moved = False
    n = len(pts)
    for i in range(n):
        for j in range(i + 1, n):
            dx = pts[j][0] - pts[i][0]
            dy = pts[j][1] - pts[i][1]
            dist = math.hypot(dx, dy)
            if dist >= min_distance - _EPS:
                continue
            push = (min_distance - dist) / 2
            if dist == 0:
                # Coincident seats have no centre line
                _nudge(pts, j, i, _index_angle(i, j), push)
            else:
                ux, uy = dx / dist, dy / dist
                pts[i][0] -= ux * push
                pts[i][1] -= uy * push
                pts[j][0] += ux * push
                pts[j][1] += uy * push
            moved = True
    return moved


def resolve_overlaps(
    points: Sequence[Point],
    min_distance: float,
    rng: Optional[random.Random] = None,
    max_passes: int = MAX_RELAXATION_PASSES,
) -> List[Point]:
    """Separate seats closer than ``min_distance``; order is preserved.

    Runs up to ``max_passes`` relaxation passes. Pairs still overlapping get
    one random nudge of 8 to 16 units, then a final nudge along an angle
    derived from their indices.
    """
    pts = [[float(x), float(y)] for x, y in points]
    n = len(pts)

    passes = 0
    while passes < max_passes:
        passes += 1
        if not _relaxation_pass(pts, min_distance):
            break
    logger.debug("relaxation finished after %d passes for %d seats", passes, n)

    fallback_pairs = [
        (i, j) for i in range(n) for j in range(i + 1, n) if _too_close(pts, i, j, min_distance)
    ]
    if fallback_pairs:
        logger.warning("%d seat pairs still overlap after relaxation, nudging randomly", len(fallback_pairs))
        rng = rng or random.Random()
        for i, j in fallback_pairs:
            if _too_close(pts, i, j, min_distance):
                _nudge(pts, i, j, rng.random() * 2 * math.pi, 8 + 8 * rng.random())

    for i in range(n):
        for j in range(i + 1, n):
            if _too_close(pts, i, j, min_distance):
                _nudge(pts, i, j, _index_angle(i, j), min_distance / 2)

    return [(x, y) for x, y in pts]
