"""Vehicle record and its per-vehicle urgency bundle."""

from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional, Tuple, TYPE_CHECKING

from .classifier import classify_by_date, classify_by_mileage
from .ranker import select_most_urgent
from .result import UrgencyResult

if TYPE_CHECKING:
    from .ranker import SortKey

# Evaluation order of the four facts; also the tie-break order for most_urgent
FACT_NAMES = ("inspection", "tires", "insurance", "service")

FACT_LABELS = {
    "inspection": "Inspection",
    "tires": "Tires",
    "insurance": "Insurance",
    "service": "Service",
}


class Vehicle:
    """Fleet vehicle with the maintenance fields the urgency engine reads."""

    def __init__(
        self,
        vehicle_id: str,
        license_plate: str,
        make: str,
        model: str,
        year: Optional[int],
        current_mileage: float,
        inspection_expiry: Optional[date] = None,
        tires_next_change_date: Optional[date] = None,
        insurance_expiry: Optional[date] = None,
        next_service_mileage: Optional[float] = None,
    ):
        self.vehicle_id = vehicle_id
        self.license_plate = license_plate
        self.make = make
        self.model = model
        self.year = year
        self.current_mileage = current_mileage
        self.inspection_expiry = inspection_expiry
        self.tires_next_change_date = tires_next_change_date
        self.insurance_expiry = insurance_expiry
        self.next_service_mileage = next_service_mileage

    @property
    def name(self) -> str:
        """Human-readable vehicle name."""
        base = f"{self.make} {self.model}"
        if self.year:
            base = f"{self.year} {base}"
        return f"{base} ({self.license_plate})"


@dataclass
class VehicleUrgency:
    """Classified maintenance facts for one vehicle."""

    vehicle_id: str
    inspection: UrgencyResult
    tires: UrgencyResult
    insurance: UrgencyResult
    service: UrgencyResult
    most_urgent: UrgencyResult
    vehicle: Optional[Vehicle] = None

    @property
    def facts(self) -> List[Tuple[str, UrgencyResult]]:
        """(fact name, result) pairs in evaluation order."""
        return [(name, getattr(self, name)) for name in FACT_NAMES]

    @property
    def most_urgent_fact(self) -> str:
        """
        Name of the fact selected as most urgent.

        First fact equal to most_urgent in evaluation order, which is the
        same order select_most_urgent breaks exact ties in. If none is equal
        (most_urgent replaced by hand), the selection is redone.
        """
        facts = self.facts
        for name, result in facts:
            if result == self.most_urgent:
                return name
        results = [result for _, result in facts]
        return FACT_NAMES[results.index(select_most_urgent(results))]

    def result_for(self, key: "SortKey") -> UrgencyResult:
        return getattr(self, key.value)


def evaluate_vehicle(vehicle: Vehicle, today: date) -> VehicleUrgency:
    """Classify all four facts of a vehicle and select the most urgent."""
    inspection = classify_by_date(vehicle.inspection_expiry, today)
    tires = classify_by_date(vehicle.tires_next_change_date, today)
    insurance = classify_by_date(vehicle.insurance_expiry, today)
    service = classify_by_mileage(
        vehicle.current_mileage, vehicle.next_service_mileage
    )
    return VehicleUrgency(
        vehicle_id=vehicle.vehicle_id,
        inspection=inspection,
        tires=tires,
        insurance=insurance,
        service=service,
        most_urgent=select_most_urgent([inspection, tires, insurance, service]),
        vehicle=vehicle,
    )


def evaluate_fleet(vehicles: Iterable[Vehicle], today: date) -> List[VehicleUrgency]:
    """Evaluate every vehicle against the same 'today'."""
    return [evaluate_vehicle(v, today) for v in vehicles]
