"""UrgencyLevel enum for maintenance urgency buckets."""

from enum import Enum


class UrgencyLevel(Enum):
    """Maintenance urgency levels. Lower value = more urgent."""

    EXPIRED = 0
    CRITICAL = 1
    WARNING = 2
    SOON = 3
    OK = 4

    @property
    def priority(self) -> int:
        return self.value

    @property
    def token(self) -> str:
        """Severity token used by the display layer to pick a color."""
        return self.name.lower()
