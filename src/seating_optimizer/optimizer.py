"""
Greedy seating optimizer.

Guests are placed in four passes, each one only filling seats the earlier
passes left free:

    1. bail out when there are no tables
    2. affinity groups, whole group at the first table with room, else split
    3. required ``same_table`` constraints, pulling unseated members next to a
       member who is already seated
    4. everyone else, one at a time, at the best scoring table

The result is audited afterwards for broken ``same_table`` and
``different_table`` constraints and for guests who could not be seated.
Nothing here backtracks, and ties always go to the earlier table, so the
output depends on input order and on nothing else.

Table score for a candidate guest:
    shared interest with a tablemate: +2 each
    same industry as a minority of tablemates: +1
    declared relationship to a tablemate: +strength, or -10 for avoid
"""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from .models import Constraint, Guest, OptimizationResult, Table, Violation

logger = logging.getLogger(__name__)


INTEREST_MATCH_POINTS = 2
NETWORKING_BONUS = 1
AVOID_PENALTY = 10

BASE_SCORE = 100
UNSEATED_PENALTY = 5
VIOLATION_PENALTY = 10
GROUP_TOGETHER_BONUS = 3

NO_TABLES_MESSAGE = "No tables available"
DIFFERENT_TABLE_MESSAGE = "Constraint violated: Some guests who should be at different tables are together"
SAME_TABLE_MESSAGE = "Constraint violated: Some guests who should be together are at different tables"


def _unique(ids: Iterable[str]) -> List[str]:
    seen = set()
    out = []
    for gid in ids:
        if gid not in seen:
            seen.add(gid)
            out.append(gid)
    return out


def clamp_score(score: float) -> float:
    return max(0, min(BASE_SCORE, score))


class SeatingOptimizer:
    """Four pass greedy seating optimizer.

    ``build`` stores the inputs, ``solve`` computes a fresh
    :class:`OptimizationResult`. Inputs are never modified, so one instance can
    be solved repeatedly and gives the same answer each time.
    """

    def __init__(self) -> None:
        self.guests: List[Guest] = []
        self.tables: List[Table] = []
        self.constraints: List[Constraint] = []
        self.guest_by_id: Dict[str, Guest] = {}

    def build(
        self,
        guests: Iterable[Guest],
        tables: Iterable[Table],
        constraints: Iterable[Constraint] = (),
    ) -> "SeatingOptimizer":
        """Store model data."""
        self.guests = list(guests)
        self.tables = list(tables)
        self.constraints = list(constraints)
        self.guest_by_id = {}
        for g in self.guests:
            if g.id in self.guest_by_id:
                raise ValueError(f"Duplicate guest id: {g.id}")
            self.guest_by_id[g.id] = g
        table_ids = set()
        for t in self.tables:
            if t.id in table_ids:
                raise ValueError(f"Duplicate table id: {t.id}")
            table_ids.add(t.id)
        return self

    # ----------------------------- internals -----------------------------
    def _partition(self) -> Tuple[Dict[str, List[Guest]], List[Guest]]:
        """Split guests into affinity groups (first seen order) and loners."""
        groups: Dict[str, List[Guest]] = {}
        ungrouped: List[Guest] = []
        for g in self.guests:
            if g.group:
                groups.setdefault(g.group, []).append(g)
            else:
                ungrouped.append(g)
        return groups, ungrouped

    def _tablemates(self, table_id: str, assignments: Dict[str, str]) -> List[Guest]:
        return [g for g in self.guests if assignments.get(g.id) == table_id]

    def _place_group(
        self,
        name: str,
        members: List[Guest],
        assignments: Dict[str, str],
        occupancy: Dict[str, int],
    ) -> Optional[Violation]:
        """Seat a whole group at the first table with room, or split it."""
        for table in self.tables:
            if occupancy[table.id] + len(members) <= table.capacity:
                for g in members:
                    assignments[g.id] = table.id
                occupancy[table.id] += len(members)
                logger.debug("group %r (%d) seated at %s", name, len(members), table.id)
                return None

        for g in members:
            for table in self.tables:
                if occupancy[table.id] < table.capacity:
                    assignments[g.id] = table.id
                    occupancy[table.id] += 1
                    break
        logger.debug("group %r (%d) split across tables", name, len(members))
        return Violation(
            kind="group_split",
            message=f'Group "{name}" had to be split across tables',
            group=name,
            guest_ids=tuple(g.id for g in members),
            count=len(members),
        )

    def _member_ids(self, constraint: Constraint) -> List[str]:
        """Constraint guest ids that exist in this run, deduplicated."""
        return [gid for gid in _unique(constraint.guest_ids) if gid in self.guest_by_id]

    def _apply_same_table(
        self,
        constraint: Constraint,
        assignments: Dict[str, str],
        occupancy: Dict[str, int],
    ) -> None:
        """Join unseated members to the first table already holding one of them."""
        ids = self._member_ids(constraint)
        unseated = [gid for gid in ids if gid not in assignments]
        for table in self.tables:
            already_here = sum(1 for gid in ids if assignments.get(gid) == table.id)
            if already_here > 0 and occupancy[table.id] + len(unseated) <= table.capacity:
                for gid in unseated:
                    assignments[gid] = table.id
                    occupancy[table.id] += 1
                if unseated:
                    logger.debug("constraint %s pulled %d guest(s) to %s", constraint.id, len(unseated), table.id)
                return
        logger.debug("constraint %s left unresolved", constraint.id)

    def table_score(self, guest: Guest, tablemates: List[Guest]) -> float:
        """Score seating ``guest`` next to ``tablemates``."""
        score: float = 0

        if guest.interests:
            wanted = [i.lower() for i in guest.interests]
            for mate in tablemates:
                theirs = {i.lower() for i in mate.interests}
                shared = sum(1 for i in wanted if i in theirs)
                score += shared * INTEREST_MATCH_POINTS

        # A few peers from the same industry is good, a majority is not.
        if guest.industry:
            same = sum(1 for mate in tablemates if mate.industry == guest.industry)
            if same > 0 and same * 2 < len(tablemates):
                score += NETWORKING_BONUS

        mate_ids = {mate.id for mate in tablemates}
        for rel in guest.relationships:
            if rel.guest_id not in mate_ids:
                continue
            if rel.is_avoid:
                score -= AVOID_PENALTY
            else:
                score += rel.strength
        return score

    def _best_table(self, guest: Guest, assignments: Dict[str, str], occupancy: Dict[str, int]) -> Optional[Table]:
        best_table: Optional[Table] = None
        best_score: float = 0
        for table in self.tables:
            if occupancy[table.id] >= table.capacity:
                continue
            score = self.table_score(guest, self._tablemates(table.id, assignments))
            if best_table is None or score > best_score:
                best_table = table
                best_score = score
        return best_table

    def _audit(self, assignments: Dict[str, str]) -> List[Violation]:
        """Report broken same/different table constraints, any priority."""
        found: List[Violation] = []
        for c in self.constraints:
            if c.type not in ("same_table", "different_table"):
                continue
            ids = self._member_ids(c)
            seated = [assignments[gid] for gid in ids if gid in assignments]
            distinct = len(set(seated))
            if c.type == "different_table" and distinct < len(seated):
                found.append(Violation(
                    kind="different_table",
                    message=DIFFERENT_TABLE_MESSAGE,
                    constraint_id=c.id,
                    guest_ids=tuple(ids),
                    count=len(seated) - distinct,
                ))
            elif c.type == "same_table" and distinct > 1:
                found.append(Violation(
                    kind="same_table",
                    message=SAME_TABLE_MESSAGE,
                    constraint_id=c.id,
                    guest_ids=tuple(ids),
                    count=distinct,
                ))
        return found

    # ----------------------------- main solve -----------------------------
    def solve(self) -> OptimizationResult:
        """Assign guests to tables and score the outcome."""
        if not self.tables:
            logger.debug("no tables, nothing to optimize")
            return OptimizationResult(
                assignments={},
                score=0,
                violations=[Violation(kind="no_tables", message=NO_TABLES_MESSAGE)],
            )

        assignments: Dict[str, str] = {}
        occupancy: Dict[str, int] = {t.id: 0 for t in self.tables}
        violations: List[Violation] = []

        groups, ungrouped = self._partition()
        for name, members in groups.items():
            split = self._place_group(name, members, assignments, occupancy)
            if split is not None:
                violations.append(split)

        for c in self.constraints:
            if c.is_required and c.type == "same_table":
                self._apply_same_table(c, assignments, occupancy)

        for guest in ungrouped:
            if guest.id in assignments:
                continue
            table = self._best_table(guest, assignments, occupancy)
            if table is not None:
                assignments[guest.id] = table.id
                occupancy[table.id] += 1

        violations.extend(self._audit(assignments))

        unseated = [g.id for g in self.guests if g.id not in assignments]
        if unseated:
            violations.append(Violation(
                kind="unseated",
                message=f"{len(unseated)} guest(s) could not be assigned",
                guest_ids=tuple(unseated),
                count=len(unseated),
            ))

        together = 0
        for members in groups.values():
            if all(g.id in assignments for g in members) and len({assignments[g.id] for g in members}) == 1:
                together += 1

        score = (
            BASE_SCORE
            - UNSEATED_PENALTY * len(unseated)
            - VIOLATION_PENALTY * len(violations)
            + GROUP_TOGETHER_BONUS * together
        )
        score = clamp_score(score)
        logger.debug(
            "seated %d/%d guests, %d violation(s), %d group(s) together, score %s",
            len(assignments), len(self.guests), len(violations), together, score,
        )
        return OptimizationResult(assignments=assignments, score=score, violations=violations)


def optimize(
    guests: Iterable[Guest],
    tables: Iterable[Table],
    constraints: Iterable[Constraint] = (),
) -> OptimizationResult:
    """Seat ``guests`` at ``tables`` honouring ``constraints`` where possible.

    Never raises for infeasible input; shortfalls come back as violations.
    """
    return SeatingOptimizer().build(guests, tables, constraints).solve()
