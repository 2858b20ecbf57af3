"""Seat Maker package."""
from .models import (
    TABLE_CAP,
    AssignmentMode,
    Distribution,
    GroupConstraint,
    Guest,
    SeatLabels,
    SeatPosition,
    SeatingSettings,
    ShapeRotation,
    TableShape,
)
from .csv_loader import load_guests
from .geometry import compute_positions
from .assignment import distribute, table_count
from .arrangement import (
    SeatedTable,
    build_tables,
    export_csv,
    export_summary,
    layout_table,
    shuffle_seats,
)

__all__ = [
    "TABLE_CAP",
    "AssignmentMode",
    "Distribution",
    "GroupConstraint",
    "Guest",
    "SeatLabels",
    "SeatPosition",
    "SeatingSettings",
    "ShapeRotation",
    "TableShape",
    "load_guests",
    "compute_positions",
    "distribute",
    "table_count",
    "SeatedTable",
    "build_tables",
    "export_csv",
    "export_summary",
    "layout_table",
    "shuffle_seats",
]
