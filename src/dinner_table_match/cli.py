"""Command line interface for DinnerTableMatch."""
from __future__ import annotations

import argparse
import csv
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence

from .csv_loader import load_coordinates, load_guests, merge_guest_lists, parse_age, save_guests
from .geo import CoordinateResolver
from .models import Guest
from .report import table_report
from .solver import SeatingModel
from .utils import setup_logging

REPORT_FIELDS = [
    "table", "status", "count", "min_age", "max_age", "age_range",
    "avg_age", "avg_distance_miles", "pair_count", "members",
]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Dinner table assignment by age and distance")
    parser.add_argument("--guests", required=True, type=Path, help="Path to guests.csv")
    parser.add_argument("--coordinates", type=Path,
                        help="Path to a location,lat,lng CSV. Defaults to the built-in registry.")
    parser.add_argument("--add", nargs=3, metavar=("NAME", "AGE", "LOCATION"),
                        help="Seat one new guest at the best table.")
    parser.add_argument("--reoptimize", action="store_true",
                        help="Reassign every guest to balanced tables.")
    parser.add_argument("--out-guests", type=Path,
                        help="Write the updated guest list CSV.")
    parser.add_argument("--out-report", type=Path,
                        help="Write per-table report CSV.")
    parser.add_argument("--verbose", action="store_true", help="Log every accepted swap.")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point used by ``python -m dinner_table_match.cli``."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        guests = load_guests(args.guests)
        registry = load_coordinates(args.coordinates) if args.coordinates else None
        new_guest = None
        if args.add:
            name, age, location = args.add
            new_guest = Guest(
                name=name,
                age=parse_age(age, name),
                location=location,
                submitted_at=datetime.now(timezone.utc).isoformat(),
            )
    except ValueError as e:
        print(f"Input validation error: {e}", file=sys.stderr)
        return 1

    resolver = CoordinateResolver(registry)
    model = SeatingModel(resolver=resolver)
    status = 0

    if new_guest is not None:
        seated = model.assign_incoming(new_guest, guests)
        guests = merge_guest_lists(guests, [seated])

    if args.reoptimize:
        result = model.reoptimize_all(guests)
        for d in result.diagnostics:
            print(f"[{d.kind}] {d.message}", file=sys.stderr)
        if result.accepted:
            guests = result.guests
        else:
            status = 1

    for g in sorted(guests, key=lambda g: (g.table or "", g.name)):
        print(f"{g.name},{g.table or ''}")

    stats = table_report(guests, resolver)
    for s in stats:
        print(f"[REPORT] {s['table']} status={s['status']} count={s['count']} "
              f"ages={s['min_age']}-{s['max_age']} avg_age={s['avg_age']:.1f} "
              f"avg_miles={s['avg_distance_miles']:.2f}")

    if args.out_guests:
        save_guests(guests, args.out_guests)

    if args.out_report:
        args.out_report.parent.mkdir(parents=True, exist_ok=True)
        with args.out_report.open("w", newline="") as f:
            w = csv.DictWriter(f, fieldnames=REPORT_FIELDS)
            w.writeheader()
            for s in stats:
                row = dict(s)
                row["avg_age"] = f"{s['avg_age']:.2f}"
                row["avg_distance_miles"] = f"{s['avg_distance_miles']:.4f}"
                w.writerow(row)

    return status


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
