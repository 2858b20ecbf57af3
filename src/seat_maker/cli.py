"""Command line interface for Seat Maker."""
from __future__ import annotations

import argparse
import csv
import logging
import random
from pathlib import Path
from typing import List, Sequence

from .arrangement import (
    CANVAS_SIZE,
    ICON_SIZE,
    SeatedTable,
    build_tables,
    export_csv,
    export_summary,
    layout_table,
    shuffle_seats,
)
from .assignment import distribute
from .csv_loader import load_guests
from .models import AssignmentMode, GroupConstraint, SeatLabels, SeatingSettings, ShapeRotation, TableShape


def _choices(enum) -> List[str]:
    return [m.value for m in enum]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Table seating from a guest list")
    parser.add_argument("--guests", required=True, help="Path to the guest list CSV")
    parser.add_argument("--people-per-table", type=int, default=8,
                        help="Target guests per table (1 to 20).")
    parser.add_argument("--tables", type=int,
                        help="Use this many tables instead of computing the count.")
    parser.add_argument("--group-constraint", choices=_choices(GroupConstraint), default="none",
                        help="Keep groups together, spread them across tables, or ignore them.")
    parser.add_argument("--assignment-mode", choices=_choices(AssignmentMode), default="round_robin",
                        help="How ungrouped guests are dealt when groups are ignored.")
    parser.add_argument("--shape", dest="shapes", action="append", choices=_choices(TableShape),
                        help="Table shape; repeat with --rotation cycle to alternate shapes.")
    parser.add_argument("--rotation", choices=_choices(ShapeRotation), default="static",
                        help="Use the first shape for every table or cycle through them.")
    parser.add_argument("--seat-labels", choices=_choices(SeatLabels), default="numeric",
                        help="Label seats 1..N or A..N.")
    parser.add_argument("--event", default=None, help="Event title for the summary.")
    parser.add_argument("--shuffle-seats", action="store_true",
                        help="Shuffle seat order within every table after assignment.")
    parser.add_argument("--seed", type=int, help="Seed for reproducible shuffles.")
    parser.add_argument("--out-assignments", type=Path,
                        help="Write assignments CSV: table,shape,people,guest,seat,locked.")
    parser.add_argument("--out-layout", type=Path,
                        help="Write seat coordinates CSV: table,seat,label,guest,x,y.")
    parser.add_argument("--out-summary", type=Path, help="Write the plain text summary.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    return parser


def settings_from_args(args: argparse.Namespace) -> SeatingSettings:
    return SeatingSettings(
        people_per_table=min(20, max(1, args.people_per_table)),
        manual_table_count_enabled=args.tables is not None,
        manual_table_count=args.tables or 0,
        group_constraint=GroupConstraint(args.group_constraint),
        assignment_mode=AssignmentMode(args.assignment_mode),
        shapes=[TableShape(s) for s in (args.shapes or ["round"])],
        rotation=ShapeRotation(args.rotation),
        seat_labels=SeatLabels(args.seat_labels),
    )


def write_layout(path: Path, tables: List[SeatedTable], labels: SeatLabels) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="") as f:
        w = csv.writer(f)
        w.writerow(["table", "seat", "label", "guest", "x", "y"])
        for table in tables:
            for guest, pos, label in layout_table(table, CANVAS_SIZE, ICON_SIZE, labels):
                w.writerow([table.title, pos.seat_index + 1, label, guest.name,
                            f"{pos.x:.2f}", f"{pos.y:.2f}"])


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point used by ``python -m seat_maker.cli``."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        guests = load_guests(args.guests)
    except ValueError as e:
        parser.error(str(e))

    settings = settings_from_args(args)
    rng = random.Random(args.seed)
    distribution = distribute(guests, settings, rng=rng)
    tables = build_tables(distribution, settings, event_title=args.event)
    if args.shuffle_seats:
        tables = [shuffle_seats(t, rng=rng) for t in tables]

    # Print simple assignments
    for table in tables:
        for guest in table.ordered_guests():
            print(f"{guest.name},{table.title}")

    for table in tables:
        print(f"[REPORT] {table.title} shape={table.shape.value} people={len(table.guests)}")
    if distribution.dropped:
        print(f"[REPORT] dropped={distribution.dropped_count} "
              + "|".join(g.name for g in distribution.dropped))

    # Optional outputs
    if args.out_assignments:
        args.out_assignments.parent.mkdir(parents=True, exist_ok=True)
        args.out_assignments.write_text(export_csv(tables), encoding="utf-8")
    if args.out_layout:
        write_layout(args.out_layout, tables, settings.seat_labels)
    if args.out_summary:
        args.out_summary.parent.mkdir(parents=True, exist_ok=True)
        args.out_summary.write_text(export_summary(tables, args.event), encoding="utf-8")


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    main()
