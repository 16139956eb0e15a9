"""Per-table statistics for the admin view and the CLI report."""
from __future__ import annotations

from itertools import combinations
from typing import Dict, Iterable, List, Optional, Sequence

from .defaults import MAX_TABLE_SIZE, MIN_TABLE_SIZE
from .geo import CoordinateResolver, distance_miles
from .models import Guest
from .utils import group_by_table


def size_status(count: int) -> str:
    if count < MIN_TABLE_SIZE:
        return "small"
    if count > MAX_TABLE_SIZE:
        return "large"
    return "valid"


def table_description(guests: Iterable[Guest], label: str) -> str:
    """Short age summary such as ``Ages 25 to 31``."""
    ages = [g.age for g in guests if g.table == label]
    if not ages:
        return "Empty table"
    if min(ages) == max(ages):
        return f"Age {min(ages)}"
    return f"Ages {min(ages)} to {max(ages)}"


def compute_table_stats(
    label: str, members: Sequence[Guest], resolver: CoordinateResolver
) -> Dict[str, int | float | str]:
    """Age spread, mean pair distance in miles and size status for one table."""
    ages = [m.age for m in members]
    coords = [resolver.resolve(m.location) for m in members]
    total = 0.0
    pairs = 0
    for a, b in combinations(coords, 2):
        total += distance_miles(a, b)
        pairs += 1
    return {
        "table": label,
        "count": len(members),
        "min_age": min(ages),
        "max_age": max(ages),
        "age_range": max(ages) - min(ages),
        "avg_age": sum(ages) / len(ages),
        "avg_distance_miles": total / pairs if pairs else 0.0,
        "pair_count": pairs,
        "status": size_status(len(members)),
        "members": "|".join(m.name for m in members),
    }


def table_report(
    guests: Iterable[Guest], resolver: Optional[CoordinateResolver] = None
) -> List[Dict[str, int | float | str]]:
    resolver = resolver or CoordinateResolver()
    return [
        compute_table_stats(label, members, resolver)
        for label, members in group_by_table(guests).items()
    ]


def summarize_tables(guests: Sequence[Guest]) -> Dict[str, int | bool]:
    """Counts of valid, small and large tables."""
    counts = [len(members) for members in group_by_table(guests).values()]
    small = sum(1 for n in counts if n < MIN_TABLE_SIZE)
    large = sum(1 for n in counts if n > MAX_TABLE_SIZE)
    return {
        "total_tables": len(counts),
        "valid_tables": len(counts) - small - large,
        "small_tables": small,
        "large_tables": large,
        "all_valid": small == 0 and large == 0,
        "not_enough_guests": 0 < len(guests) < MIN_TABLE_SIZE,
    }
