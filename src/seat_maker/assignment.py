"""
Guest assignment engine.

Distributes a flat guest list over a computed number of tables:

    1. table count from people per table (or a manual count), never letting a
       table need more than TABLE_CAP seats.
    2. VIP phase: one VIP per table, leftovers into the first table with room.
    3. non-VIP phase, by group constraint:
         keep_together   each group goes to one table where it fits.
         spread_across   groups are dealt one member at a time.
         none            fill_in_order or round_robin over the shuffled list.

Guests that do not fit are dropped and returned in ``Distribution.dropped``.
Shuffling draws from the ``rng`` argument so callers can seed it.
"""
from __future__ import annotations

import logging
import math
import random
from typing import Dict, List, Optional, Sequence, Tuple

from .models import (
    TABLE_CAP,
    AssignmentMode,
    Distribution,
    GroupConstraint,
    Guest,
    SeatingSettings,
    TableAssignment,
)

logger = logging.getLogger(__name__)


# ----------------------------- sizing -----------------------------
def plan_tables(total: int, settings: SeatingSettings) -> Tuple[int, int]:
    """Return ``(table_count, per_table)`` for ``total`` guests."""
    requested = min(TABLE_CAP, max(1, settings.people_per_table))
    min_tables = math.ceil(total / TABLE_CAP)
    if settings.manual_table_count_enabled:
        count = max(min_tables, max(1, settings.manual_table_count))
        target = requested
    else:
        target = min(requested, max(1, total))
        count = max(min_tables, math.ceil(total / target))
    per_table = min(TABLE_CAP, max(1, target))
    return max(1, count), per_table


def table_count(total: int, settings: SeatingSettings) -> int:
    return plan_tables(total, settings)[0]


# ----------------------------- helpers -----------------------------
def _next_open(tables: TableAssignment, start: int, per_table: int) -> Optional[int]:
    """First table with room scanning cyclically from ``start``, or None."""
    count = len(tables)
    idx = start % count
    for _ in range(count):
        if len(tables[idx]) < per_table:
            return idx
        idx = (idx + 1) % count
    return None


def _seat_vips(
    tables: TableAssignment, vips: List[Guest], per_table: int
) -> List[Guest]:
    """One VIP per table, then the first table with room. Returns unplaced VIPs."""
    queue = list(vips)
    for table in tables:
        if not queue:
            break
        table.append(queue.pop(0))
    while queue:
        idx = next((i for i, t in enumerate(tables) if len(t) < per_table), None)
        if idx is None:
            break
        tables[idx].append(queue.pop(0))
    return queue


def _buckets(guests: Sequence[Guest], key) -> List[List[Guest]]:
    grouped: Dict[object, List[Guest]] = {}
    for g in guests:
        grouped.setdefault(key(g), []).append(g)
    return list(grouped.values())


def _keep_together(
    tables: TableAssignment, guests: List[Guest], per_table: int, rng: random.Random
) -> List[Guest]:
    dropped: List[Guest] = []
    buckets = _buckets(guests, lambda g: g.group or "")
    rng.shuffle(buckets)
    for members in buckets:
        idx = next((i for i, t in enumerate(tables) if len(t) + len(members) <= per_table), None)
        if idx is None:
            idx = next((i for i, t in enumerate(tables) if len(t) < per_table), 0)
        for pos, member in enumerate(members):
            idx = _next_open(tables, idx, per_table)
            if idx is None:
                dropped.extend(members[pos:])
                break
            tables[idx].append(member)
    return dropped


def _spread_across(
    tables: TableAssignment, guests: List[Guest], per_table: int, rng: random.Random
) -> List[Guest]:
    # Ungrouped guests each get a bucket of their own
    buckets = _buckets(guests, lambda g: g.group or object())
    rng.shuffle(buckets)
    pointer = 0
    placed = True
    while placed:
        placed = False
        for bucket in buckets:
            if not bucket:
                continue
            idx = _next_open(tables, pointer, per_table)
            if idx is None:
                continue
            tables[idx].append(bucket.pop(0))
            pointer = (idx + 1) % len(tables)
            placed = True
    return [g for bucket in buckets for g in bucket]


def _fill_in_order(tables: TableAssignment, guests: List[Guest], per_table: int) -> List[Guest]:
    idx = 0
    for pos, guest in enumerate(guests):
        while idx < len(tables) and len(tables[idx]) >= per_table:
            idx += 1
        if idx >= len(tables):
            return guests[pos:]
        tables[idx].append(guest)
    return []


def _round_robin(tables: TableAssignment, guests: List[Guest], per_table: int) -> List[Guest]:
    dropped: List[Guest] = []
    pointer = 0
    for guest in guests:
        idx = _next_open(tables, pointer, per_table)
        if idx is None:
            dropped.append(guest)
        else:
            tables[idx].append(guest)
            pointer = idx
        pointer = (pointer + 1) % len(tables)
    return dropped


# ----------------------------- distribute -----------------------------
def distribute(
    guests: Sequence[Guest],
    settings: SeatingSettings,
    rng: Optional[random.Random] = None,
) -> Distribution:
    """Assign ``guests`` to tables. Every call builds a fresh result.

    Not idempotent: guest and group order is shuffled with ``rng``.
    """
    rng = rng or random.Random()
    count, per_table = plan_tables(len(guests), settings)
    logger.debug("distributing %d guests over %d tables of %d", len(guests), count, per_table)
    tables: TableAssignment = [[] for _ in range(count)]

    vips = [g for g in guests if g.is_vip]
    non_vips = [g for g in guests if not g.is_vip]
    rng.shuffle(vips)
    rng.shuffle(non_vips)

    dropped = _seat_vips(tables, vips, per_table)

    constraint = GroupConstraint(settings.group_constraint)
    if constraint == GroupConstraint.KEEP_TOGETHER:
        dropped += _keep_together(tables, non_vips, per_table, rng)
    elif constraint == GroupConstraint.SPREAD_ACROSS:
        dropped += _spread_across(tables, non_vips, per_table, rng)
    elif AssignmentMode(settings.assignment_mode) == AssignmentMode.FILL_IN_ORDER:
        dropped += _fill_in_order(tables, non_vips, per_table)
    else:
        dropped += _round_robin(tables, non_vips, per_table)

    if dropped:
        logger.warning("%d guests did not fit %d tables of %d and were dropped", len(dropped), count, per_table)
    return Distribution(tables=tables, dropped=dropped)
