"""
Per-table summary of an optimization result.

Pair score between two tablemates is what each declares toward the other:
    avoid: -10
    any other relationship: +strength
    nothing declared: 0
Tables are graded A to F on the mean pair score among everyone seated there:
    A: >= 2.5, e.g. most pairs share a one-way friendship of strength 3
    B: >= 1.5
    C: >= 0.8
    D: >= 0.2, a few ties among mostly strangers
    F: below that; one avoid at a table of four (-10 over 6 pairs) is enough
Strengths run 1 to 5 per direction, so a mutual pair scores up to 10, and
strangers score 0.
"""
from __future__ import annotations

from itertools import combinations
from typing import Callable, Dict, Iterable, List

from .models import Guest, OptimizationResult, Table
from .optimizer import AVOID_PENALTY


def declared_value(guest: Guest, other_id: str) -> float:
    """Sum of ``guest``'s relationships toward ``other_id``."""
    total: float = 0
    for rel in guest.relationships:
        if rel.guest_id != other_id:
            continue
        total += -AVOID_PENALTY if rel.is_avoid else rel.strength
    return total


def pair_value_lookup(guests: Iterable[Guest]) -> Callable[[str, str], float]:
    by_id = {g.id: g for g in guests}

    def pair_value(a: str, b: str) -> float:
        value: float = 0
        if a in by_id:
            value += declared_value(by_id[a], b)
        if b in by_id:
            value += declared_value(by_id[b], a)
        return value

    return pair_value


def compute_table_stats(members: List[str], pair_value: Callable[[str, str], float]) -> Dict[str, int | float]:
    """Compute total and mean pair scores plus sign breakdown for a set of members."""
    total: float = 0
    pos = neg = neu = 0
    pairs = 0
    for a, b in combinations(members, 2):
        v = pair_value(a, b)
        total += v
        pairs += 1
        if v > 0:
            pos += 1
        elif v < 0:
            neg += 1
        else:
            neu += 1
    mean = total / pairs if pairs else 0.0
    return {
        "total_score": total,
        "mean_score": mean,
        "pair_count": pairs,
        "pos_pairs": pos,
        "neg_pairs": neg,
        "neu_pairs": neu,
    }


def grade(mean: float) -> str:
    if mean >= 2.5:
        return "A"
    if mean >= 1.5:
        return "B"
    if mean >= 0.8:
        return "C"
    if mean >= 0.2:
        return "D"
    return "F"


def table_report(result: OptimizationResult, guests: Iterable[Guest], tables: Iterable[Table]) -> List[Dict[str, object]]:
    """One row per table, in table order."""
    pair_value = pair_value_lookup(guests)
    rows = []
    for table in tables:
        members = result.guests_at(table.id)
        row: Dict[str, object] = {
            "table": table.id,
            "name": table.name,
            "capacity": table.capacity,
            "occupancy": len(members),
            "free": table.capacity - len(members),
            "members": members,
        }
        stats = compute_table_stats(members, pair_value)
        row.update(stats)
        row["grade"] = grade(stats["mean_score"])
        rows.append(row)
    return rows


def unseated_guests(result: OptimizationResult, guests: Iterable[Guest]) -> List[Guest]:
    return [g for g in guests if g.id not in result.assignments]
