"""
Scoring primitives shared by incremental placement and reoptimization.

Incremental placement ranks a candidate table with

    3 * age range increase
    + distance from the table's average age
    - 0.5 * current occupants
    + 4 * min(10, mean km to the occupants / 5)

and reoptimization ranks a whole seating with

    3 * sum of table age ranges + 40 * min(10, sum of mean pair km / tables / 5)

Lower is better for both.
"""
from __future__ import annotations

from itertools import combinations
from typing import Iterable, Sequence

from .defaults import (
    AGE_CENTER_WEIGHT,
    AGE_RANGE_WEIGHT,
    GEO_NORMALIZATION_CEILING,
    GEO_NORMALIZATION_DIVISOR_KM,
    GEO_WEIGHT,
    OCCUPANCY_WEIGHT,
    TOTAL_AGE_RANGE_WEIGHT,
    TOTAL_GEO_WEIGHT,
)
from .geo import distance_km
from .models import Coordinate


def age_range(ages: Sequence[int]) -> int:
    return max(ages) - min(ages) if ages else 0


def age_range_increase(age: int, ages: Sequence[int]) -> int:
    """How much seating ``age`` would widen the table's age range."""
    if not ages:
        return 0
    return age_range(list(ages) + [age]) - age_range(ages)


def age_distance_from_avg(age: int, ages: Sequence[int]) -> float:
    if not ages:
        return 0.0
    return abs(age - sum(ages) / len(ages))


def mean_geo_distance(point: Coordinate, occupants: Sequence[Coordinate]) -> float:
    """Mean km from ``point`` to each occupant."""
    if not occupants:
        return 0.0
    return sum(distance_km(point, other) for other in occupants) / len(occupants)


def normalized_geo(km: float) -> float:
    return min(GEO_NORMALIZATION_CEILING, km / GEO_NORMALIZATION_DIVISOR_KM)


def composite_score(
    age_increase: float,
    age_distance: float,
    occupant_count: int,
    mean_distance_km: float,
) -> float:
    return (
        AGE_RANGE_WEIGHT * age_increase
        + AGE_CENTER_WEIGHT * age_distance
        - OCCUPANCY_WEIGHT * occupant_count
        + GEO_WEIGHT * normalized_geo(mean_distance_km)
    )


def pairwise_mean_distance(points: Sequence[Coordinate]) -> float:
    """Mean km over every unordered pair. Zero with fewer than two points."""
    total = 0.0
    pairs = 0
    for a, b in combinations(points, 2):
        total += distance_km(a, b)
        pairs += 1
    return total / pairs if pairs else 0.0


def reoptimization_score(age_ranges: Iterable[int], mean_distances: Sequence[float]) -> float:
    """Objective of a full seating. One entry per table in each argument."""
    if not mean_distances:
        return TOTAL_AGE_RANGE_WEIGHT * sum(age_ranges)
    geo = min(
        GEO_NORMALIZATION_CEILING,
        sum(mean_distances) / len(mean_distances) / GEO_NORMALIZATION_DIVISOR_KM,
    )
    return TOTAL_AGE_RANGE_WEIGHT * sum(age_ranges) + TOTAL_GEO_WEIGHT * geo
