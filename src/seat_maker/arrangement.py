"""Turn a distribution into seated tables, and export them."""
from __future__ import annotations

import io
import random
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Set, Tuple

import pandas as pd

from .geometry import compute_positions
from .models import (
    Distribution,
    Guest,
    SeatLabels,
    SeatPosition,
    SeatingSettings,
    ShapeRotation,
    TableShape,
)

# Canonical canvas shared by the map and layout exports
CANVAS_SIZE = (2000, 1200)
ICON_SIZE = 64

_SHUFFLE_ATTEMPTS = 12


@dataclass
class SeatedTable:
    """One table with its guests and their seat numbers."""

    title: str
    shape: TableShape
    guests: List[Guest] = field(default_factory=list)
    seat_assignments: Dict[str, int] = field(default_factory=dict)
    locked: Set[str] = field(default_factory=set)
    event_title: Optional[str] = None

    def ordered_guests(self) -> List[Guest]:
        return sorted(self.guests, key=lambda g: self.seat_assignments.get(g.id, 0))


def shape_for_table(index: int, settings: SeatingSettings) -> TableShape:
    if not settings.shapes:
        return TableShape.ROUND
    if ShapeRotation(settings.rotation) == ShapeRotation.STATIC:
        return TableShape(settings.shapes[0])
    return TableShape(settings.shapes[index % len(settings.shapes)])


def seat_label(index: int, mode: SeatLabels = SeatLabels.NUMERIC) -> str:
    """Label for seat ``index`` (0-based): ``1, 2, ...`` or ``A, B, ..., Z, AA, ...``."""
    if SeatLabels(mode) == SeatLabels.NUMERIC:
        return str(index + 1)
    label = ""
    n = index + 1
    while n > 0:
        n, rem = divmod(n - 1, 26)
        label = chr(ord("A") + rem) + label
    return label


def build_tables(
    distribution: Distribution,
    settings: SeatingSettings,
    event_title: Optional[str] = None,
) -> List[SeatedTable]:
    """Seat each distributed table in list order, titled ``Table 1..N``."""
    tables = []
    for i, guests in enumerate(distribution.tables):
        tables.append(
            SeatedTable(
                title=f"Table {i + 1}",
                shape=shape_for_table(i, settings),
                guests=list(guests),
                seat_assignments={g.id: seat for seat, g in enumerate(guests)},
                event_title=event_title,
            )
        )
    return tables


def shuffle_seats(table: SeatedTable, rng: Optional[random.Random] = None) -> SeatedTable:
    """Re-seat unlocked guests on the free seats. Locked guests keep their seat.

    Tries a few permutations until at least one unlocked guest moves, then
    falls back to swapping the first two unlocked guests.
    """
    unlocked = [g for g in table.guests if g.id not in table.locked]
    if len(table.guests) <= 1 or not unlocked:
        return table
    rng = rng or random.Random()
    current = table.seat_assignments
    taken = {current[g.id] for g in table.guests if g.id in table.locked and g.id in current}
    free = [s for s in range(len(table.guests)) if s not in taken]

    seats: Dict[str, int] = {}
    changed = False
    for _ in range(_SHUFFLE_ATTEMPTS):
        rng.shuffle(free)
        seats = {g.id: current[g.id] for g in table.guests if g.id in table.locked and g.id in current}
        seats.update({g.id: seat for g, seat in zip(unlocked, free)})
        changed = any(seats.get(g.id) != current.get(g.id) for g in unlocked)
        if changed:
            break
    if not changed and len(unlocked) > 1:
        a, b = unlocked[0].id, unlocked[1].id
        seats[a], seats[b] = current.get(b, 1), current.get(a, 0)

    result = replace(table, seat_assignments=seats, guests=list(table.guests), locked=set(table.locked))
    result.guests = result.ordered_guests()
    return result


def layout_table(
    table: SeatedTable,
    canvas_size: Tuple[float, float] = CANVAS_SIZE,
    icon_size: float = ICON_SIZE,
    labels: SeatLabels = SeatLabels.NUMERIC,
) -> List[Tuple[Guest, SeatPosition, str]]:
    """Guests with their seat positions and labels, in seat order."""
    positions = compute_positions(table.shape, canvas_size, len(table.guests), icon_size)
    out = []
    for guest in table.ordered_guests():
        seat = table.seat_assignments.get(guest.id)
        if seat is None or not 0 <= seat < len(positions):
            continue
        out.append((guest, positions[seat], seat_label(seat, labels)))
    return out


# ----------------------------- export -----------------------------
def _people(count: int) -> str:
    return "1 person" if count == 1 else f"{count} people"


def export_summary(tables: List[SeatedTable], event_title: Optional[str] = None) -> str:
    """Plain text summary of all non-empty tables."""
    non_empty = [t for t in tables if t.guests]
    lines = []
    if event_title:
        lines.append(f"Event: {event_title}")
    lines.append(f"People: {sum(len(t.guests) for t in non_empty)}")
    lines.append(f"Tables: {len(non_empty)}")
    lines.append("")
    for display_id, table in enumerate(non_empty, start=1):
        name = table.title.strip() or f"Table {display_id}"
        lines.append(f"▸ {name} ({_people(len(table.guests))})")
        for guest in table.ordered_guests():
            seat = table.seat_assignments.get(guest.id)
            if seat is None:
                continue
            lock = " (locked)" if guest.id in table.locked else ""
            lines.append(f"  {seat + 1}. {guest.name}{lock}")
        lines.append("")
    return "\n".join(lines)


def export_csv(tables: List[SeatedTable]) -> str:
    """One row per seated guest; empty tables get a single row without a guest."""
    rows = []
    for table in tables:
        base = {"table": table.title, "shape": table.shape.value, "people": len(table.guests)}
        if not table.guests:
            rows.append({**base, "guest": "", "seat": "", "locked": ""})
            continue
        for guest in table.ordered_guests():
            seat = table.seat_assignments.get(guest.id)
            rows.append({
                **base,
                "guest": guest.name,
                "seat": "" if seat is None else str(seat + 1),
                "locked": "Yes" if guest.id in table.locked else "No",
            })
    df = pd.DataFrame(rows, columns=["table", "shape", "people", "guest", "seat", "locked"])
    buf = io.StringIO()
    df.to_csv(buf, index=False)
    return buf.getvalue()
