"""CSV loading utilities."""
from __future__ import annotations

from pathlib import Path
from typing import IO, Any, Dict, Iterable, List

import pandas as pd

from .models import Coordinate, Guest, parse_table, parse_text

MIN_AGE = 18
MAX_AGE = 120

GUEST_COLUMNS = ["name", "age", "location", "table", "submitted_at"]


def _require_columns(df: pd.DataFrame, required: List[str], label: str) -> None:
    missing = [col for col in required if col not in df.columns]
    if missing:
        raise ValueError(f"{label} is missing columns: {', '.join(missing)}")


def parse_age(value: object, name: str) -> int:
    """Parse an age cell and check it lies in [18, 120]."""
    try:
        age = int(float(str(value).strip()))
    except (ValueError, OverflowError):
        raise ValueError(f"Invalid age for {name}: {value!r}") from None
    if not MIN_AGE <= age <= MAX_AGE:
        raise ValueError(f"Age for {name} must be between {MIN_AGE} and {MAX_AGE}, got {age}")
    return age


def merge_guest_lists(current: Iterable[Guest], incoming: Iterable[Guest]) -> List[Guest]:
    """De-duplicate by ``Guest.key``. Later entries replace earlier ones in place."""
    merged: Dict[str, Guest] = {}
    for guest in current:
        merged[guest.key] = guest
    for guest in incoming:
        merged[guest.key] = guest
    return list(merged.values())


def load_guests(path: Path | str | IO[Any]) -> List[Guest]:
    """Load guests from ``guests.csv``.

    ``name`` and ``age`` are required, ``location``, ``table`` and
    ``submitted_at`` are optional. Duplicate RSVPs collapse to the last row.
    """
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    _require_columns(df, ["name", "age"], "guests.csv")
    guests: List[Guest] = []
    for _, row in df.iterrows():
        name = parse_text(row["name"])
        if not name:
            raise ValueError("Guest row without a name")
        guests.append(
            Guest(
                name=name,
                age=parse_age(row["age"], name),
                location=parse_text(row.get("location", "")),
                table=parse_table(row.get("table", "")),
                submitted_at=parse_text(row.get("submitted_at", "")),
            )
        )
    return merge_guest_lists([], guests)


def guests_to_frame(guests: Iterable[Guest]) -> pd.DataFrame:
    rows = [
        {
            "name": g.name,
            "age": g.age,
            "location": g.location,
            "table": g.table or "",
            "submitted_at": g.submitted_at,
        }
        for g in guests
    ]
    return pd.DataFrame(rows, columns=GUEST_COLUMNS)


def save_guests(guests: Iterable[Guest], path: Path | str | IO[Any]) -> None:
    """Write guests with the columns ``load_guests`` reads."""
    if isinstance(path, (str, Path)):
        Path(path).parent.mkdir(parents=True, exist_ok=True)
    guests_to_frame(guests).to_csv(path, index=False)


def load_coordinates(path: Path | str | IO[Any]) -> Dict[str, Coordinate]:
    """Load the ``location,lat,lng`` table written by the offline geocoder."""
    df = pd.read_csv(path)
    _require_columns(df, ["location", "lat", "lng"], "coordinates.csv")
    registry: Dict[str, Coordinate] = {}
    for _, row in df.iterrows():
        location = parse_text(row["location"])
        if not location:
            continue
        lat, lng = row["lat"], row["lng"]
        try:
            if pd.isna(lat) or pd.isna(lng):
                raise ValueError
            registry[location] = Coordinate(lat=float(lat), lng=float(lng))
        except ValueError:
            raise ValueError(f"Invalid coordinates for {location}: {lat}, {lng}") from None
    return registry
