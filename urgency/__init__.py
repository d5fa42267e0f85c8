"""
Fleet maintenance urgency models.

This package classifies and ranks vehicle maintenance deadlines:
- UrgencyLevel: Severity buckets (EXPIRED, CRITICAL, WARNING, SOON, OK)
- UrgencyResult: One classified maintenance fact
- classify_by_date / classify_by_mileage: Deadline classifiers
- Vehicle / VehicleUrgency: Vehicle record and its four classified facts
- select_most_urgent / rank_vehicles: Selection and fleet ranking
- load_vehicle / load_fleet: YAML vehicle store
"""

from .level import UrgencyLevel
from .errors import InvalidArgumentError
from .result import NOT_TRACKED, UrgencyResult
from .classifier import (
    classify_by_date,
    classify_by_mileage,
    days_between,
    format_days_remaining,
)
from .ranker import SortKey, select_most_urgent, rank_vehicles, count_by_level
from .vehicle import Vehicle, VehicleUrgency, evaluate_vehicle, evaluate_fleet
from .loader import (
    load_vehicle,
    load_fleet,
    save_current_mileage,
    save_maintenance_date,
    save_next_service_mileage,
)

__all__ = [
    "UrgencyLevel",
    "InvalidArgumentError",
    "NOT_TRACKED",
    "UrgencyResult",
    "classify_by_date",
    "classify_by_mileage",
    "days_between",
    "format_days_remaining",
    "SortKey",
    "select_most_urgent",
    "rank_vehicles",
    "count_by_level",
    "Vehicle",
    "VehicleUrgency",
    "evaluate_vehicle",
    "evaluate_fleet",
    "load_vehicle",
    "load_fleet",
    "save_current_mileage",
    "save_maintenance_date",
    "save_next_service_mileage",
]
