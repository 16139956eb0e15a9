"""Location lookup and great-circle distances."""
from __future__ import annotations

import logging
import math
from typing import Dict, List, Mapping, Optional

from .defaults import DEFAULT_LOCATION, EARTH_RADIUS_KM, KM_TO_MILES, LOCATION_COORDINATES
from .models import Coordinate, Diagnostic, UNRESOLVED_LOCATION

logger = logging.getLogger(__name__)

NULL_ISLAND = Coordinate(0.0, 0.0)


def distance_km(a: Coordinate, b: Coordinate) -> float:
    """Haversine distance in kilometres."""
    lat1 = math.radians(a.lat)
    lat2 = math.radians(b.lat)
    d_lat = math.radians(b.lat - a.lat)
    d_lon = math.radians(b.lng - a.lng)
    h = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_KM * c


def distance_miles(a: Coordinate, b: Coordinate) -> float:
    return distance_km(a, b) * KM_TO_MILES


def city_region(location: str) -> str:
    """Reduce ``"City, Region, Country, ..."`` to ``"City, Region"``."""
    parts = location.split(",")
    city = parts[0].strip()
    if len(parts) > 1 and parts[1].strip():
        city += ", " + parts[1].strip()
    return city


class CoordinateResolver:
    """Resolve free-text locations against a static coordinate registry.

    Lookups never fail. Unknown locations fall back to the coordinate of
    ``default_location`` and are recorded in ``diagnostics``.
    """

    def __init__(
        self,
        registry: Optional[Mapping[str, Coordinate]] = None,
        default_location: str = DEFAULT_LOCATION,
    ) -> None:
        self.registry: Dict[str, Coordinate] = dict(LOCATION_COORDINATES if registry is None else registry)
        self.default_location = default_location
        self.default = self.registry.get(default_location, LOCATION_COORDINATES[DEFAULT_LOCATION])
        self.diagnostics: List[Diagnostic] = []

    def resolve(self, location: str) -> Coordinate:
        if not location:
            return NULL_ISLAND

        coords = self.registry.get(location)
        if coords is not None:
            return coords

        coords = self.registry.get(city_region(location))
        if coords is not None:
            return coords

        message = f"No coordinates found for {location}, using {self.default_location} as default"
        logger.warning(message)
        self.diagnostics.append(Diagnostic(kind=UNRESOLVED_LOCATION, message=message, subject=location))
        return self.default

    def is_known(self, location: str) -> bool:
        """True when ``location`` resolves without the fallback."""
        return bool(location) and (location in self.registry or city_region(location) in self.registry)
