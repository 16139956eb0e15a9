"""DinnerTableMatch package."""
from .models import Coordinate, Diagnostic, Guest, ReoptimizationResult, ReoptimizationStatus
from .geo import CoordinateResolver, distance_km, distance_miles
from .csv_loader import load_coordinates, load_guests, save_guests
from .solver import SeatingModel, assign_incoming, reoptimize_all

__all__ = [
    "Coordinate",
    "Diagnostic",
    "Guest",
    "ReoptimizationResult",
    "ReoptimizationStatus",
    "CoordinateResolver",
    "distance_km",
    "distance_miles",
    "load_coordinates",
    "load_guests",
    "save_guests",
    "SeatingModel",
    "assign_incoming",
    "reoptimize_all",
]
