"""Data models for DinnerTableMatch."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional
import math


def parse_text(value: object) -> str:
    """Return a stripped string for a CSV cell.

    ``pandas`` often provides ``float('nan')`` for missing values which is
    treated as empty.
    """
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    text = str(value).strip()
    if text.lower() == "nan":
        return ""
    return text


def parse_table(value: object) -> Optional[str]:
    """Parse the ``table`` column. Blank cells mean unassigned."""
    return parse_text(value) or None


@dataclass(frozen=True)
class Coordinate:
    """Latitude and longitude in decimal degrees."""

    lat: float
    lng: float


@dataclass(frozen=True)
class Guest:
    """Representation of a dinner guest."""

    name: str
    age: int
    location: str = ""
    table: Optional[str] = None
    submitted_at: str = ""

    @property
    def key(self) -> str:
        """Identity used to de-duplicate RSVPs."""
        return f"{self.name}|{self.age}|{self.location}"


@dataclass(frozen=True)
class Diagnostic:
    """A non-fatal condition reported to the caller."""

    kind: str
    message: str
    subject: str = ""


UNRESOLVED_LOCATION = "unresolved_location"
INSUFFICIENT_GUESTS = "insufficient_guests"
REOPTIMIZATION_REJECTED = "reoptimization_rejected"


@dataclass
class TableScore:
    """Breakdown of the composite score for seating one guest at a table."""

    table: str
    count: int
    age_range: int
    avg_age: float
    age_range_increase: int
    age_distance_from_avg: float
    avg_distance_km: float
    normalized_distance: float
    score: float


@dataclass
class SearchStats:
    """Outcome of the swap hill climb."""

    passes: int = 0
    swaps: int = 0
    converged: bool = False
    score: float = 0.0


class ReoptimizationStatus(Enum):
    OK = "ok"
    INSUFFICIENT_GUESTS = "insufficient_guests"
    CONSTRAINT_VIOLATION = "constraint_violation"


@dataclass
class ReoptimizationResult:
    """Guest list produced by a global reoptimization.

    When the run is rejected ``guests`` holds the caller's original guests.
    """

    guests: List[Guest]
    status: ReoptimizationStatus
    diagnostics: List[Diagnostic] = field(default_factory=list)
    passes: int = 0
    swaps: int = 0
    score: float = 0.0

    @property
    def accepted(self) -> bool:
        return self.status is ReoptimizationStatus.OK
