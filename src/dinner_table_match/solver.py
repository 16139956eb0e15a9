"""
Age and distance aware seating solver.

Two entry points:
    assign_incoming: seat one new RSVP at the best open table, or open a new one.
    reoptimize_all: re-cluster everyone with an age sorted round robin seed and a
        pairwise swap hill climb, then label tables by median age.

Tables are never stored. They are rebuilt from the ``table`` field of the guest
list on every call.
"""
from __future__ import annotations

import logging
import math
from dataclasses import replace
from itertools import combinations
from typing import Dict, List, Optional, Sequence, Tuple

from .defaults import (
    IMPROVEMENT_EPSILON,
    MAX_PASSES,
    MAX_TABLE_SIZE,
    MIN_GUESTS_TO_REOPTIMIZE,
    MIN_TABLE_SIZE,
    TARGET_TABLE_SIZE,
)
from .geo import CoordinateResolver, distance_km
from .models import (
    Diagnostic,
    Guest,
    INSUFFICIENT_GUESTS,
    REOPTIMIZATION_REJECTED,
    ReoptimizationResult,
    ReoptimizationStatus,
    SearchStats,
    TableScore,
)
from .scoring import (
    age_distance_from_avg,
    age_range,
    age_range_increase,
    composite_score,
    mean_geo_distance,
    normalized_geo,
    reoptimization_score,
)
from .utils import group_by_table, label_sort_key, next_table_label, table_counts, table_label

logger = logging.getLogger(__name__)


# ----------------------------- model -----------------------------
class SeatingModel:
    """Incremental placement plus swap based reoptimization."""

    def __init__(
        self,
        resolver: Optional[CoordinateResolver] = None,
        min_table_size: int = MIN_TABLE_SIZE,
        target_table_size: int = TARGET_TABLE_SIZE,
        max_table_size: int = MAX_TABLE_SIZE,
        min_guests: int = MIN_GUESTS_TO_REOPTIMIZE,
        max_passes: int = MAX_PASSES,
    ) -> None:
        self.resolver = resolver or CoordinateResolver()
        self.min_table_size = min_table_size
        self.target_table_size = target_table_size
        self.max_table_size = max_table_size
        self.min_guests = min_guests
        self.max_passes = max_passes

    # ----------------------------- incremental -----------------------------
    def score_tables(self, new_guest: Guest, existing_guests: Sequence[Guest]) -> List[TableScore]:
        """Score every table with a free seat, best first."""
        point = self.resolver.resolve(new_guest.location)
        scores: List[TableScore] = []
        for label, members in group_by_table(g for g in existing_guests if g is not new_guest).items():
            count = len(members)
            if count >= self.max_table_size:
                continue
            ages = [m.age for m in members]
            coords = [self.resolver.resolve(m.location) for m in members]
            increase = age_range_increase(new_guest.age, ages)
            distance_from_avg = age_distance_from_avg(new_guest.age, ages)
            avg_km = mean_geo_distance(point, coords)
            scores.append(
                TableScore(
                    table=label,
                    count=count,
                    age_range=age_range(ages),
                    avg_age=sum(ages) / count,
                    age_range_increase=increase,
                    age_distance_from_avg=distance_from_avg,
                    avg_distance_km=avg_km,
                    normalized_distance=normalized_geo(avg_km),
                    score=composite_score(increase, distance_from_avg, count, avg_km),
                )
            )
        # Stable sort keeps the label order from group_by_table for equal scores
        scores.sort(key=lambda s: s.score)
        return scores

    def assign_incoming(self, new_guest: Guest, existing_guests: Sequence[Guest]) -> Guest:
        """Return ``new_guest`` with a table label. The inputs are not modified."""
        others = [g for g in existing_guests if g is not new_guest]
        labels = list(group_by_table(others))
        if not labels:
            return replace(new_guest, table=table_label(1))

        scores = self.score_tables(new_guest, others)
        if not scores:
            label = next_table_label(labels)
            logger.info("All %d tables full, opening %s for %s", len(labels), label, new_guest.name)
            return replace(new_guest, table=label)

        best = scores[0]
        logger.info(
            "Assigned %s (age %d, %s) to %s",
            new_guest.name, new_guest.age, new_guest.location, best.table,
        )
        logger.info(
            "Score: %.2f, Age distance: %.2f, Geo distance: %.2fkm",
            best.score, best.age_distance_from_avg, best.avg_distance_km,
        )
        return replace(new_guest, table=best.table)

    # ----------------------------- reoptimization -----------------------------
    def _distance_matrix(self, guests: Sequence[Guest]) -> List[List[float]]:
        coords = [self.resolver.resolve(g.location) for g in guests]
        n = len(coords)
        matrix = [[0.0] * n for _ in range(n)]
        for i, j in combinations(range(n), 2):
            d = distance_km(coords[i], coords[j])
            matrix[i][j] = d
            matrix[j][i] = d
        return matrix

    @staticmethod
    def _objective(tables: List[List[int]], ages: List[int], matrix: List[List[float]]) -> float:
        ranges = []
        distances = []
        for members in tables:
            ranges.append(age_range([ages[i] for i in members]))
            pairs = list(combinations(members, 2))
            distances.append(sum(matrix[a][b] for a, b in pairs) / len(pairs) if pairs else 0.0)
        return reoptimization_score(ranges, distances)

    def improve_tables(self, tables: Sequence[Sequence[Guest]]) -> Tuple[List[List[Guest]], SearchStats]:
        """First improvement hill climb over single guest swaps between tables.

        Every swap is applied and kept only if the objective drops, otherwise
        it is undone before the next one is tried. The climb stops after a
        pass without accepted swaps or after ``max_passes`` passes. Table
        sizes never change.
        """
        guests = [g for members in tables for g in members]
        ages = [g.age for g in guests]
        matrix = self._distance_matrix(guests)

        work: List[List[int]] = []
        start = 0
        for members in tables:
            work.append(list(range(start, start + len(members))))
            start += len(members)

        stats = SearchStats(score=self._objective(work, ages, matrix))
        while stats.passes < self.max_passes:
            stats.passes += 1
            improved = False
            for t1 in range(len(work)):
                for t2 in range(t1 + 1, len(work)):
                    for g1 in range(len(work[t1])):
                        for g2 in range(len(work[t2])):
                            a, b = work[t1][g1], work[t2][g2]
                            work[t1][g1], work[t2][g2] = b, a
                            candidate = self._objective(work, ages, matrix)
                            if candidate < stats.score - IMPROVEMENT_EPSILON:
                                logger.debug(
                                    "Pass %d: improved score from %.2f to %.2f",
                                    stats.passes, stats.score, candidate,
                                )
                                stats.score = candidate
                                stats.swaps += 1
                                improved = True
                            else:
                                work[t1][g1], work[t2][g2] = a, b
            if not improved:
                stats.converged = True
                break

        logger.info(
            "Optimization finished after %d passes with %d swaps (score %.2f)",
            stats.passes, stats.swaps, stats.score,
        )
        return [[guests[i] for i in members] for members in work], stats

    def seed_tables(self, guests: Sequence[Guest]) -> List[List[Guest]]:
        """Age sorted round robin over ``ceil(n / target_table_size)`` tables."""
        ordered = sorted(guests, key=lambda g: g.age)
        table_count = math.ceil(len(ordered) / self.target_table_size)
        tables: List[List[Guest]] = [[] for _ in range(table_count)]
        for i, guest in enumerate(ordered):
            tables[i % table_count].append(guest)
        return tables

    @staticmethod
    def label_tables(tables: Sequence[Sequence[Guest]]) -> List[Guest]:
        """Name each table ``{median age}-{position}`` and flatten."""
        reassigned: List[Guest] = []
        for index, members in enumerate(tables):
            ages = sorted(g.age for g in members)
            label = f"{ages[len(ages) // 2]}-{index + 1}"
            reassigned.extend(replace(g, table=label) for g in members)
        return reassigned

    def reoptimize_all(self, guests: Sequence[Guest]) -> ReoptimizationResult:
        """Re-cluster every guest. Rejected runs hand back the original guests."""
        original = list(guests)
        if len(original) < self.min_guests:
            message = (
                f"Not enough RSVPs to optimize tables. Need at least {self.min_guests} RSVPs, "
                f"have {len(original)}."
            )
            logger.warning(message)
            return ReoptimizationResult(
                guests=original,
                status=ReoptimizationStatus.INSUFFICIENT_GUESTS,
                diagnostics=[Diagnostic(kind=INSUFFICIENT_GUESTS, message=message)],
            )

        seen = len(self.resolver.diagnostics)
        seeded = self.seed_tables(original)
        logger.info("Reassigning %d guests across %d tables", len(original), len(seeded))
        tables, stats = self.improve_tables(seeded)
        reassigned = self.label_tables(tables)
        diagnostics = list(self.resolver.diagnostics[seen:])

        counts: Dict[str, int] = table_counts(reassigned)
        bad = {
            label: n for label, n in counts.items()
            if not self.min_table_size <= n <= self.max_table_size
        }
        if bad:
            sizes = ", ".join(f"{label}={bad[label]}" for label in sorted(bad, key=label_sort_key))
            message = (
                f"Table constraints violated after reassignment ({sizes}); "
                f"keeping the previous seating"
            )
            logger.error(message)
            diagnostics.append(Diagnostic(kind=REOPTIMIZATION_REJECTED, message=message))
            return ReoptimizationResult(
                guests=original,
                status=ReoptimizationStatus.CONSTRAINT_VIOLATION,
                diagnostics=diagnostics,
                passes=stats.passes,
                swaps=stats.swaps,
                score=stats.score,
            )

        return ReoptimizationResult(
            guests=reassigned,
            status=ReoptimizationStatus.OK,
            diagnostics=diagnostics,
            passes=stats.passes,
            swaps=stats.swaps,
            score=stats.score,
        )


# ----------------------------- module helpers -----------------------------
def assign_incoming(new_guest: Guest, existing_guests: Sequence[Guest]) -> Guest:
    """Seat one guest with a default ``SeatingModel``."""
    return SeatingModel().assign_incoming(new_guest, existing_guests)


def reoptimize_all(guests: Sequence[Guest]) -> ReoptimizationResult:
    """Re-cluster all guests with a default ``SeatingModel``."""
    return SeatingModel().reoptimize_all(guests)
