"""Data models for Seat Maker."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional
import math
import uuid


# Hard maximum of guests at any one table.
TABLE_CAP = 20


def parse_list(value: object, sep: str = ",") -> List[str]:
    """Split a separated string into a list of trimmed, non-empty parts.

    Empty values such as ``""`` or ``None`` return an empty list.
    ``pandas`` often provides ``float('nan')`` for missing values which is
    also treated as empty.
    """
    if value is None:
        return []
    if isinstance(value, float) and math.isnan(value):
        return []
    text = str(value).strip()
    if not text or text.lower() == "nan":
        return []
    return [part.strip() for part in text.split(sep) if part.strip()]


def parse_vip(value: object) -> bool:
    """Parse the VIP column: ``yes``, ``y``, ``1`` and ``vip`` are truthy."""
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return False
    text = str(value).strip().lower()
    return text.startswith("y") or text == "1" or text == "vip"


def _new_id() -> str:
    return str(uuid.uuid4())


class TableShape(str, Enum):
    ROUND = "round"
    SQUARE = "square"
    RECTANGLE = "rectangle"


class GroupConstraint(str, Enum):
    NONE = "none"
    KEEP_TOGETHER = "keep_together"
    SPREAD_ACROSS = "spread_across"


class AssignmentMode(str, Enum):
    FILL_IN_ORDER = "fill_in_order"
    ROUND_ROBIN = "round_robin"


class ShapeRotation(str, Enum):
    STATIC = "static"
    CYCLE = "cycle"


class SeatLabels(str, Enum):
    NUMERIC = "numeric"
    ALPHABETIC = "alphabetic"


@dataclass
class Guest:
    """A guest on the imported list.

    ``keep_apart_tags`` and ``keep_with_names`` are captured from the import
    but are not consulted by the assignment engine.
    """

    name: str
    id: str = field(default_factory=_new_id)
    is_vip: bool = False
    group: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    keep_apart_tags: List[str] = field(default_factory=list)
    keep_with_names: List[str] = field(default_factory=list)
    dietary: List[str] = field(default_factory=list)
    notes: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


@dataclass
class SeatingSettings:
    """Options for one distribution run."""

    people_per_table: int = 8
    manual_table_count_enabled: bool = False
    manual_table_count: int = 0
    group_constraint: GroupConstraint = GroupConstraint.NONE
    assignment_mode: AssignmentMode = AssignmentMode.ROUND_ROBIN
    # Presentation only, ignored by the engines
    shapes: List[TableShape] = field(default_factory=lambda: [TableShape.ROUND])
    rotation: ShapeRotation = ShapeRotation.STATIC
    seat_labels: SeatLabels = SeatLabels.NUMERIC


@dataclass(frozen=True)
class SeatPosition:
    """Centre of one seat on the canvas."""

    seat_index: int
    x: float
    y: float


# Outer index is the table number, inner order is seating order.
TableAssignment = List[List[Guest]]


@dataclass
class Distribution:
    """Result of distributing guests over tables."""

    tables: TableAssignment
    dropped: List[Guest] = field(default_factory=list)

    @property
    def table_count(self) -> int:
        return len(self.tables)

    @property
    def seated_count(self) -> int:
        return sum(len(t) for t in self.tables)

    @property
    def dropped_count(self) -> int:
        return len(self.dropped)
