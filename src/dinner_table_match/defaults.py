"""Default configuration constants for DinnerTableMatch."""
from __future__ import annotations

from typing import Dict

from .models import Coordinate

# Table size band
MIN_TABLE_SIZE = 4
TARGET_TABLE_SIZE = 5   # guests per table used to size the reoptimization seed
MAX_TABLE_SIZE = 6

# Reoptimization
MIN_GUESTS_TO_REOPTIMIZE = 8
MAX_PASSES = 100
IMPROVEMENT_EPSILON = 1e-9  # float noise below this is not an improvement

# Incremental placement weights (lower score is better)
AGE_RANGE_WEIGHT = 3.0
AGE_CENTER_WEIGHT = 1.0
OCCUPANCY_WEIGHT = 0.5
GEO_WEIGHT = 4.0

# Reoptimization objective weights
TOTAL_AGE_RANGE_WEIGHT = 3.0
TOTAL_GEO_WEIGHT = 40.0

# Geo normalization: km / divisor, capped (about 50 km is the worst case)
GEO_NORMALIZATION_DIVISOR_KM = 5.0
GEO_NORMALIZATION_CEILING = 10.0

# Geodesy
EARTH_RADIUS_KM = 6371.0
KM_TO_MILES = 0.621371

# Labels
TABLE_LABEL_PREFIX = "Table"

# Location registry, filled offline from a geocoding service
DEFAULT_LOCATION = "Phoenix, AZ"
LOCATION_COORDINATES: Dict[str, Coordinate] = {
    "Phoenix, AZ": Coordinate(33.4484367, -112.074141),
    "Scottsdale, AZ": Coordinate(33.4942, -111.9261),
    "Tempe, AZ": Coordinate(33.4255, -111.9400),
    "Mesa, AZ": Coordinate(33.4152, -111.8315),
    "Chandler, AZ": Coordinate(33.3062, -111.8413),
    "Gilbert, AZ": Coordinate(33.3528, -111.7890),
    "Glendale, AZ": Coordinate(33.5387, -112.1860),
    "Peoria, AZ": Coordinate(33.5806, -112.2374),
    "Surprise, AZ": Coordinate(33.6292, -112.3680),
    "Goodyear, AZ": Coordinate(33.4353, -112.3576),
    "Avondale, AZ": Coordinate(33.4356, -112.3497),
    "Paradise Valley, AZ": Coordinate(33.5312, -111.9426),
    "Cave Creek, AZ": Coordinate(33.8336, -111.9506),
    "Carefree, AZ": Coordinate(33.8233, -111.9189),
    "Fountain Hills, AZ": Coordinate(33.6043, -111.7224),
    "Apache Junction, AZ": Coordinate(33.4150485, -111.549577),
    "Queen Creek, AZ": Coordinate(33.2483858, -111.634158),
}
