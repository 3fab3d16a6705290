"""Data models for the seating optimizer."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
import math


CONSTRAINT_TYPES = (
    "must_sit_together",
    "must_not_sit_together",
    "same_table",
    "different_table",
    "near_front",
    "accessibility",
)

PRIORITIES = ("required", "preferred", "optional")

RSVP_STATUSES = ("pending", "confirmed", "declined")


def parse_pipe_list(value: object) -> List[str]:
    """Split a pipe separated string into a list.

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
    return [part.strip() for part in text.split("|") if part.strip()]


def parse_optional_text(value: object) -> Optional[str]:
    """Return stripped text or ``None`` for blank and NaN cells."""
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    text = str(value).strip()
    if not text or text.lower() == "nan":
        return None
    return text


@dataclass
class Relationship:
    """A directional relationship declared by one guest toward another."""

    guest_id: str
    type: str = "friend"
    strength: float = 0

    @property
    def is_avoid(self) -> bool:
        return self.type == "avoid"


@dataclass
class Guest:
    """A person to be seated."""

    id: str
    first_name: str = ""
    last_name: str = ""
    group: Optional[str] = None
    industry: Optional[str] = None
    interests: List[str] = field(default_factory=list)
    relationships: List[Relationship] = field(default_factory=list)
    rsvp_status: str = "confirmed"
    table_id: Optional[str] = None

    def __post_init__(self) -> None:
        if self.rsvp_status not in RSVP_STATUSES:
            raise ValueError(f"Unknown RSVP status for guest {self.id}: {self.rsvp_status}")

    @property
    def name(self) -> str:
        full = f"{self.first_name} {self.last_name}".strip()
        return full or self.id


@dataclass
class Table:
    """A seating unit. Capacity is a hard ceiling."""

    id: str
    capacity: int
    name: str = ""

    def __post_init__(self) -> None:
        if isinstance(self.capacity, bool) or not isinstance(self.capacity, int) or self.capacity < 1:
            raise ValueError(f"Table {self.id} needs a positive integer capacity, got {self.capacity!r}")
        if not self.name:
            self.name = self.id


@dataclass
class Constraint:
    """A planner authored seating rule over two or more guests."""

    id: str
    type: str
    guest_ids: List[str]
    priority: str = "preferred"
    description: str = ""

    def __post_init__(self) -> None:
        if self.type not in CONSTRAINT_TYPES:
            raise ValueError(f"Unknown constraint type for {self.id}: {self.type}")
        if self.priority not in PRIORITIES:
            raise ValueError(f"Unknown constraint priority for {self.id}: {self.priority}")
        if len(self.guest_ids) < 2:
            raise ValueError(f"Constraint {self.id} must reference at least two guests")

    @property
    def is_required(self) -> bool:
        return self.priority == "required"


@dataclass(frozen=True)
class Violation:
    """Diagnostic record describing a shortfall in a seating result.

    ``message`` is the text shown to planners. The remaining fields say what
    the message is about so callers do not have to parse it.
    """

    kind: str
    message: str
    group: Optional[str] = None
    constraint_id: Optional[str] = None
    guest_ids: Tuple[str, ...] = ()
    count: int = 0

    def __str__(self) -> str:
        return self.message


@dataclass
class OptimizationResult:
    """Output of one optimizer run."""

    assignments: Dict[str, str] = field(default_factory=dict)
    score: float = 0
    violations: List[Violation] = field(default_factory=list)

    @property
    def messages(self) -> List[str]:
        return [v.message for v in self.violations]

    def guests_at(self, table_id: str) -> List[str]:
        """Guest ids seated at ``table_id`` in placement order."""
        return [gid for gid, tid in self.assignments.items() if tid == table_id]
