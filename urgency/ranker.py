"""Selection of the most urgent fact and ranking of the fleet."""

from enum import Enum
from typing import Dict, Iterable, List, Sequence, TYPE_CHECKING, Union

from .errors import InvalidArgumentError
from .level import UrgencyLevel
from .result import UrgencyResult

if TYPE_CHECKING:
    from .vehicle import VehicleUrgency


class SortKey(Enum):
    """Maintenance fact used to rank the fleet. Values match bundle attributes."""

    INSPECTION = "inspection"
    TIRES = "tires"
    INSURANCE = "insurance"
    SERVICE = "service"

    @classmethod
    def parse(cls, value: Union["SortKey", str]) -> "SortKey":
        """Accept a SortKey or its name (case-insensitive)."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            choices = ", ".join(k.value for k in cls)
            raise InvalidArgumentError(
                f"Unknown sort key '{value}' (expected one of: {choices})"
            ) from None


def _urgency_key(result: UrgencyResult):
    return (result.level.priority, result.remaining)


def select_most_urgent(results: Sequence[UrgencyResult]) -> UrgencyResult:
    """
    Pick the most urgent result: lowest level priority, then lowest remaining.

    Folds left to right and only replaces the current best when strictly more
    urgent, so exact ties go to the earliest result (for a vehicle bundle:
    inspection, tires, insurance, service).
    """
    if not results:
        raise InvalidArgumentError("select_most_urgent needs at least one result")
    best = results[0]
    for result in results[1:]:
        if result.level.priority < best.level.priority:
            best = result
        elif (
            result.level.priority == best.level.priority
            and result.remaining < best.remaining
        ):
            best = result
    return best


def rank_vehicles(
    bundles: Iterable["VehicleUrgency"], sort_key: Union[SortKey, str]
) -> List["VehicleUrgency"]:
    """
    Order bundles by the fact named by sort_key: level first (EXPIRED first),
    then remaining ascending. Stable, so full ties keep input order.

    Returns a new list; the input is not modified.
    """
    key = SortKey.parse(sort_key)
    return sorted(bundles, key=lambda b: _urgency_key(b.result_for(key)))


def count_by_level(bundles: Iterable["VehicleUrgency"]) -> Dict[UrgencyLevel, int]:
    """Count vehicles by the level of their most urgent fact."""
    counts = {level: 0 for level in UrgencyLevel}
    for bundle in bundles:
        counts[bundle.most_urgent.level] += 1
    return counts
