"""
Membership date arithmetic.

Plans are calendar durations. Adding months clamps to the last day of the
target month, so a monthly plan bought on 2024-01-31 ends on 2024-02-29 and a
yearly plan bought on 2024-02-29 ends on 2025-02-28.
"""
import math
import os
from dataclasses import dataclass
from datetime import date, datetime, time, timezone

from dateutil.relativedelta import relativedelta

EXPIRY_WARNING_DAYS = int(os.getenv("EXPIRY_WARNING_DAYS", "30"))

PLAN_DURATIONS = {
    "monthly": relativedelta(months=1),
    "quarterly": relativedelta(months=3),
    "yearly": relativedelta(years=1),
}

SECONDS_PER_DAY = 24 * 60 * 60


@dataclass(frozen=True)
class MembershipWindow:
    start_date: date
    end_date: date


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def compute_window(plan: str, reference_start: date) -> MembershipWindow:
    try:
        duration = PLAN_DURATIONS[plan]
    except KeyError:
        raise ValueError(f"Unknown membership plan: {plan!r}") from None
    return MembershipWindow(start_date=reference_start, end_date=reference_start + duration)


def _as_utc_datetime(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


def days_remaining(end_date: date | datetime | None, now: date | datetime) -> int:
    """Whole days left until ``end_date`` (rounded up), never negative."""
    if end_date is None:
        return 0
    delta = _as_utc_datetime(end_date) - _as_utc_datetime(now)
    days = math.ceil(delta.total_seconds() / SECONDS_PER_DAY)
    return max(days, 0)


def is_expiring_soon(remaining: int, threshold: int = EXPIRY_WARNING_DAYS) -> bool:
    return remaining <= threshold
