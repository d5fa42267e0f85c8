"""YAML loading and saving utilities for fleet vehicle files."""

import logging
import math
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from dateutil.parser import isoparse

from .vehicle import Vehicle

logger = logging.getLogger(__name__)

# Vehicle attribute -> YAML key for each maintenance date
DATE_FIELDS = {
    "inspection": "inspectionExpiry",
    "tires": "tiresNextChangeDate",
    "insurance": "insuranceExpiry",
}


def parse_date(value: Any) -> Optional[date]:
    """
    Parse a YAML date value.

    Accepts YAML dates, timestamps (time of day dropped) and ISO strings.
    Empty values mean "not set".
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return isoparse(str(value)).date()


def _parse_vehicle(vehicle_id: str, dct: Dict[str, Any]) -> Vehicle:
    """Parse a vehicle file's mapping into a Vehicle."""
    return Vehicle(
        vehicle_id,
        dct.get("licensePlate") or vehicle_id,
        dct["make"],
        dct["model"],
        dct.get("year"),
        dct.get("currentMileage") or 0,
        parse_date(dct.get("inspectionExpiry")),
        parse_date(dct.get("tiresNextChangeDate")),
        parse_date(dct.get("insuranceExpiry")),
        dct.get("nextServiceMileage"),
    )


def load_vehicle(filename: Union[str, Path]) -> Vehicle:
    """Load a vehicle from a YAML file. The file stem is the vehicle id."""
    path = Path(filename)
    with open(path, "rb") as fp:
        data = yaml.load(fp, Loader=yaml.SafeLoader) or {}
    vehicle = _parse_vehicle(path.stem, data)
    logger.debug("Loaded vehicle %s from %s", vehicle.vehicle_id, path)
    return vehicle


def get_vehicle_files(directory: Union[str, Path]) -> List[Path]:
    """All vehicle YAML files in a fleet directory, sorted by name."""
    directory = Path(directory)
    return sorted(list(directory.glob("*.yaml")) + list(directory.glob("*.yml")))


def find_vehicle_file(directory: Union[str, Path], vehicle_id: str) -> Optional[Path]:
    """Path of a vehicle's file (.yaml, then .yml), or None if there is none."""
    directory = Path(directory)
    for suffix in (".yaml", ".yml"):
        path = directory / f"{vehicle_id}{suffix}"
        if path.exists():
            return path
    return None


def load_fleet(directory: Union[str, Path]) -> List[Vehicle]:
    """Load every vehicle file in a fleet directory."""
    vehicles = [load_vehicle(path) for path in get_vehicle_files(directory)]
    logger.debug("Loaded %d vehicles from %s", len(vehicles), directory)
    return vehicles


def _update_file(filename: Union[str, Path], key: str, value: Any) -> None:
    """
    Set a single top-level key in a vehicle YAML file.

    Loads the raw YAML, replaces the key and writes back, leaving all other
    keys as they were.
    """
    with open(filename, "r") as fp:
        data = yaml.load(fp, Loader=yaml.SafeLoader) or {}

    data[key] = value

    with open(filename, "w") as fp:
        yaml.dump(
            data,
            fp,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
            width=120,
        )
    logger.info("Set %s=%r in %s", key, value, filename)


def _check_mileage(mileage: float) -> None:
    if not math.isfinite(mileage) or mileage < 0:
        raise ValueError(f"Mileage must be a finite number >= 0, got {mileage}")


def save_current_mileage(filename: Union[str, Path], mileage: float) -> None:
    """Update the current odometer reading of a vehicle file."""
    _check_mileage(mileage)
    _update_file(filename, "currentMileage", mileage)


def save_next_service_mileage(
    filename: Union[str, Path], mileage: Optional[float]
) -> None:
    """Update (or clear, with None) the mileage at which service is due."""
    if mileage is not None:
        _check_mileage(mileage)
    _update_file(filename, "nextServiceMileage", mileage)


def save_maintenance_date(
    filename: Union[str, Path], fact: str, value: Optional[date]
) -> None:
    """
    Update (or clear, with None) one of the maintenance dates.

    Args:
        fact: "inspection", "tires" or "insurance"
    """
    if fact not in DATE_FIELDS:
        raise ValueError(
            f"Unknown date field '{fact}' (expected one of: {', '.join(DATE_FIELDS)})"
        )
    _update_file(
        filename, DATE_FIELDS[fact], value.isoformat() if value is not None else None
    )
