"""Command line interface for the seating optimizer."""
from __future__ import annotations

import argparse
import csv
import logging
import sys
from pathlib import Path
from typing import Sequence

from .csv_loader import attending, load_all
from .optimizer import optimize
from .report import table_report, unseated_guests


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Event seating optimizer")
    parser.add_argument("--guests", required=True, type=Path, help="Path to guests.csv")
    parser.add_argument("--tables", required=True, type=Path, help="Path to tables.csv")
    parser.add_argument("--relationships", type=Path, help="Path to relationships.csv")
    parser.add_argument("--constraints", type=Path, help="Path to constraints.csv")
    parser.add_argument("--include-declined", action="store_true",
                        help="Seat guests whose RSVP is declined as well.")
    parser.add_argument("--out-assignments", type=Path,
                        help="Write assignments CSV: guest,table.")
    parser.add_argument("--out-report", type=Path,
                        help="Write per-table report CSV with scores and grades.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log optimizer passes.")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point used by ``seating-optimizer`` and ``python -m seating_optimizer.cli``."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        guests, tables, constraints = load_all(args.guests, args.tables, args.relationships, args.constraints)
    except (ValueError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not args.include_declined:
        guests = attending(guests)

    result = optimize(guests, tables, constraints)

    for guest_id, table_id in result.assignments.items():
        print(f"{guest_id},{table_id}")

    print(f"[SCORE] {result.score}/100")
    for v in result.violations:
        print(f"[WARN] {v}")
    for g in unseated_guests(result, guests):
        print(f"[UNSEATED] {g.id} {g.name}")

    if args.out_assignments:
        args.out_assignments.parent.mkdir(parents=True, exist_ok=True)
        with args.out_assignments.open("w", newline="") as f:
            w = csv.writer(f)
            w.writerow(["guest", "table"])
            for guest_id, table_id in result.assignments.items():
                w.writerow([guest_id, table_id])

    rows = table_report(result, guests, tables)
    for r in rows:
        print(f"[REPORT] {r['table']} {r['occupancy']}/{r['capacity']} grade={r['grade']} "
              f"mean={r['mean_score']:.2f} pairs={r['pair_count']} pos={r['pos_pairs']} "
              f"neg={r['neg_pairs']} neu={r['neu_pairs']}")

    if args.out_report:
        args.out_report.parent.mkdir(parents=True, exist_ok=True)
        with args.out_report.open("w", newline="") as f:
            w = csv.DictWriter(f, fieldnames=[
                "table", "name", "capacity", "occupancy", "grade", "mean_score",
                "total_score", "pair_count", "pos_pairs", "neg_pairs", "neu_pairs", "members",
            ])
            w.writeheader()
            for r in rows:
                w.writerow({
                    "table": r["table"],
                    "name": r["name"],
                    "capacity": r["capacity"],
                    "occupancy": r["occupancy"],
                    "grade": r["grade"],
                    "mean_score": f"{r['mean_score']:.4f}",
                    "total_score": r["total_score"],
                    "pair_count": r["pair_count"],
                    "pos_pairs": r["pos_pairs"],
                    "neg_pairs": r["neg_pairs"],
                    "neu_pairs": r["neu_pairs"],
                    "members": "|".join(r["members"]),
                })
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
