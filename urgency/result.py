"""UrgencyResult dataclass for a single classified maintenance fact."""

import sys
from dataclasses import dataclass

from .level import UrgencyLevel

# Remaining value for facts that are not tracked (no date / no target mileage)
NOT_TRACKED = sys.maxsize


@dataclass(frozen=True)
class UrgencyResult:
    """Classified urgency of one maintenance fact."""

    level: UrgencyLevel
    remaining: int
    label: str
    severity_token: str

    @property
    def is_tracked(self) -> bool:
        return self.remaining != NOT_TRACKED

    @property
    def is_due(self) -> bool:
        return self.level is not UrgencyLevel.OK
