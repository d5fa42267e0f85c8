"""
Urgency classification for date-based and mileage-based maintenance facts.

Both classifiers are pure: "today" is always passed in by the caller, so the
result only depends on the arguments. Thresholds are fixed.
"""

import math
from datetime import date, datetime
from typing import Optional, Union

from .errors import InvalidArgumentError
from .level import UrgencyLevel
from .result import NOT_TRACKED, UrgencyResult

DateLike = Union[date, datetime]

# Upper bound (inclusive) of days remaining for each level
CRITICAL_DAYS = 7
WARNING_DAYS = 30
SOON_DAYS = 60

# Upper bound (inclusive) of km remaining for each level
CRITICAL_KM = 500
WARNING_KM = 1000
SOON_KM = 2000

EARLIEST_TODAY = date(1970, 1, 1)

NOT_SET_LABEL = "not set"


def _to_date(value: DateLike) -> date:
    """Drop the time of day (datetime is a date subclass, so check it first)."""
    if isinstance(value, datetime):
        return value.date()
    return value


def _result(level: UrgencyLevel, remaining: int, label: str) -> UrgencyResult:
    return UrgencyResult(
        level=level, remaining=remaining, label=label, severity_token=level.token
    )


def not_tracked() -> UrgencyResult:
    """Result for a fact with no date or target mileage."""
    return _result(UrgencyLevel.OK, NOT_TRACKED, NOT_SET_LABEL)


def days_between(expiry: DateLike, today: DateLike) -> int:
    """Whole days from today to expiry (negative when expiry is in the past)."""
    return (_to_date(expiry) - _to_date(today)).days


def classify_by_date(expiry: Optional[DateLike], today: DateLike) -> UrgencyResult:
    """
    Classify an expiry date relative to today.

    - No date: OK, not tracked
    - Past: EXPIRED ("expired N days ago")
    - Same day: EXPIRED ("expires today")
    - Within 7 / 30 / 60 days: CRITICAL / WARNING / SOON
    - Later: OK
    """
    if _to_date(today) < EARLIEST_TODAY:
        raise InvalidArgumentError(f"today {today} is before {EARLIEST_TODAY}")
    if expiry is None:
        return not_tracked()

    remaining = days_between(expiry, today)
    if remaining < 0:
        return _result(
            UrgencyLevel.EXPIRED, remaining, f"expired {-remaining} days ago"
        )
    if remaining == 0:
        return _result(UrgencyLevel.EXPIRED, 0, "expires today")

    label = f"{remaining} days"
    if remaining <= CRITICAL_DAYS:
        return _result(UrgencyLevel.CRITICAL, remaining, label)
    if remaining <= WARNING_DAYS:
        return _result(UrgencyLevel.WARNING, remaining, label)
    if remaining <= SOON_DAYS:
        return _result(UrgencyLevel.SOON, remaining, label)
    return _result(UrgencyLevel.OK, remaining, label)


def classify_by_mileage(current: float, target: Optional[float]) -> UrgencyResult:
    """
    Classify a service-due mileage relative to the current odometer reading.

    Unlike dates there is no separate "today" case: reaching the target
    mileage exactly is already EXPIRED.
    """
    if not math.isfinite(current) or current < 0:
        raise InvalidArgumentError(f"current mileage must be >= 0, got {current}")
    if target is None:
        return not_tracked()
    if not math.isfinite(target):
        raise InvalidArgumentError(f"target mileage must be finite, got {target}")

    remaining = int(target - current)
    if remaining <= 0:
        return _result(UrgencyLevel.EXPIRED, remaining, f"overdue by {-remaining} km")

    label = f"{remaining} km"
    if remaining <= CRITICAL_KM:
        return _result(UrgencyLevel.CRITICAL, remaining, label)
    if remaining <= WARNING_KM:
        return _result(UrgencyLevel.WARNING, remaining, label)
    if remaining <= SOON_KM:
        return _result(UrgencyLevel.SOON, remaining, label)
    return _result(UrgencyLevel.OK, remaining, label)


def format_days_remaining(days: int) -> str:
    """Long-form countdown (e.g., 'expires tomorrow', 'expires in 5 weeks')."""
    if days == NOT_TRACKED:
        return NOT_SET_LABEL
    if days < 0:
        return f"expired {abs(days)} days ago"
    if days == 0:
        return "expires today"
    if days == 1:
        return "expires tomorrow"
    if days <= 30:
        return f"expires in {days} days"
    if days <= 60:
        return f"expires in {days // 7} weeks"
    return f"expires in {days // 30} months"
