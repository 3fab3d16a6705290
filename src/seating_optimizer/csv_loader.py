"""CSV loading utilities."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import IO, Any, Iterable, List, Optional, Set, Union

import pandas as pd

from .models import (
    Constraint,
    Guest,
    Relationship,
    Table,
    parse_optional_text,
    parse_pipe_list,
)

logger = logging.getLogger(__name__)

Source = Union[Path, str, IO[Any]]


def _text(row: pd.Series, column: str, default: str = "") -> str:
    value = parse_optional_text(row.get(column))
    return value if value is not None else default


def _require_columns(df: pd.DataFrame, required: Iterable[str], label: str) -> None:
    missing = [col for col in required if col not in df.columns]
    if missing:
        raise ValueError(f"{label}: missing columns: {', '.join(missing)}")


def load_guests(path: Source) -> List[Guest]:
    """Load guests from ``guests.csv``.

    Relationships live in their own file; see :func:`load_relationships`.
    """
    df = pd.read_csv(path, dtype=str)
    _require_columns(df, ["id"], "guests.csv")
    guests: List[Guest] = []
    seen: Set[str] = set()
    for _, row in df.iterrows():
        gid = _text(row, "id")
        if not gid:
            raise ValueError("guests.csv: row without an id")
        if gid in seen:
            raise ValueError(f"guests.csv: duplicate guest id: {gid}")
        seen.add(gid)
        guests.append(
            Guest(
                id=gid,
                first_name=_text(row, "first_name"),
                last_name=_text(row, "last_name"),
                group=parse_optional_text(row.get("group")),
                industry=parse_optional_text(row.get("industry")),
                interests=parse_pipe_list(row.get("interests")),
                rsvp_status=_text(row, "rsvp_status", "confirmed").lower(),
            )
        )
    return guests


def load_tables(path: Source) -> List[Table]:
    """Load table definitions."""
    df = pd.read_csv(path, dtype=str)
    _require_columns(df, ["id", "capacity"], "tables.csv")
    tables: List[Table] = []
    seen: Set[str] = set()
    for _, row in df.iterrows():
        tid = _text(row, "id")
        if not tid:
            raise ValueError("tables.csv: row without an id")
        if tid in seen:
            raise ValueError(f"tables.csv: duplicate table id: {tid}")
        seen.add(tid)
        try:
            capacity = int(_text(row, "capacity"))
        except ValueError:
            raise ValueError(f"tables.csv: bad capacity for table {tid}: {row.get('capacity')}") from None
        tables.append(Table(id=tid, capacity=capacity, name=_text(row, "name")))
    return tables


def load_relationships(path: Source, guests: List[Guest], guest_ids: Optional[Set[str]] = None) -> List[Guest]:
    """Attach directional relationships from ``relationships.csv`` to ``guests``.

    Each row is declared by ``guest_id`` toward ``other_id`` and is appended to
    that guest's list in file order. If ``guest_ids`` is provided it validates
    that both endpoints exist. Returns the same guest list.
    """
    df = pd.read_csv(path, dtype=str)
    _require_columns(df, ["guest_id", "other_id", "type"], "relationships.csv")
    by_id = {g.id: g for g in guests}
    for _, row in df.iterrows():
        a = _text(row, "guest_id")
        b = _text(row, "other_id")
        if guest_ids is not None and (a not in guest_ids or b not in guest_ids):
            raise ValueError(f"Relationship references unknown guest: {a}, {b}")
        owner = by_id.get(a)
        if owner is None:
            logger.warning("skipping relationship from unknown guest %s", a)
            continue
        try:
            strength = float(_text(row, "strength", "0"))
        except ValueError:
            raise ValueError(f"relationships.csv: bad strength for {a} -> {b}: {row.get('strength')}") from None
        owner.relationships.append(
            Relationship(guest_id=b, type=_text(row, "type", "friend").lower(), strength=strength)
        )
    return guests


def load_constraints(path: Source) -> List[Constraint]:
    """Load planner constraints. ``guest_ids`` is pipe separated."""
    df = pd.read_csv(path, dtype=str)
    _require_columns(df, ["id", "type", "guest_ids"], "constraints.csv")
    constraints: List[Constraint] = []
    for _, row in df.iterrows():
        constraints.append(
            Constraint(
                id=_text(row, "id"),
                type=_text(row, "type"),
                guest_ids=parse_pipe_list(row.get("guest_ids")),
                priority=_text(row, "priority", "preferred"),
                description=_text(row, "description"),
            )
        )
    return constraints


def load_all(
    guests_path: Source,
    tables_path: Source,
    relationships_path: Optional[Source] = None,
    constraints_path: Optional[Source] = None,
):
    """Convenience wrapper returning guests, tables and constraints."""
    guests = load_guests(guests_path)
    if relationships_path is not None:
        load_relationships(relationships_path, guests, {g.id for g in guests})
    tables = load_tables(tables_path)
    constraints = load_constraints(constraints_path) if constraints_path is not None else []
    return guests, tables, constraints


def attending(guests: Iterable[Guest]) -> List[Guest]:
    """Drop guests who declined, the usual filter before optimizing."""
    return [g for g in guests if g.rsvp_status != "declined"]
