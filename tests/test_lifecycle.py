from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from services.membership_service.lifecycle import (
    compute_window,
    days_remaining,
    is_expiring_soon,
)

REFERENCE_DATES = [
    date(2024, 1, 1),
    date(2024, 1, 31),
    date(2024, 2, 29),
    date(2023, 11, 30),
    date(2025, 12, 31),
]


@pytest.mark.parametrize("plan", ["monthly", "quarterly", "yearly"])
@pytest.mark.parametrize("start", REFERENCE_DATES)
def test_window_starts_on_reference_and_ends_after_it(plan, start):
    window = compute_window(plan, start)
    assert window.start_date == start
    assert window.end_date > window.start_date


def test_monthly_from_month_end_clamps_to_last_day_of_february():
    assert compute_window("monthly", date(2024, 1, 31)).end_date == date(2024, 2, 29)
    assert compute_window("monthly", date(2023, 1, 31)).end_date == date(2023, 2, 28)


def test_quarterly_adds_three_calendar_months():
    assert compute_window("quarterly", date(2024, 3, 15)).end_date == date(2024, 6, 15)
    assert compute_window("quarterly", date(2023, 11, 30)).end_date == date(2024, 2, 29)


def test_yearly_from_leap_day_clamps():
    assert compute_window("yearly", date(2024, 2, 29)).end_date == date(2025, 2, 28)
    assert compute_window("yearly", date(2024, 3, 1)).end_date == date(2025, 3, 1)


def test_unknown_plan_is_rejected():
    with pytest.raises(ValueError):
        compute_window("weekly", date(2024, 1, 1))


def test_days_remaining_rounds_partial_days_up():
    end = date(2024, 4, 1)
    now = datetime(2024, 3, 30, 12, 0, tzinfo=timezone.utc)
    assert days_remaining(end, now) == 2


def test_days_remaining_whole_days():
    assert days_remaining(date(2024, 4, 1), date(2024, 3, 1)) == 31


def test_days_remaining_is_clamped_at_zero():
    end = date(2024, 4, 1)
    assert days_remaining(end, datetime(2024, 4, 1, tzinfo=timezone.utc)) == 0
    assert days_remaining(end, datetime(2024, 4, 1, 0, 0, 1, tzinfo=timezone.utc)) == 0
    assert days_remaining(end, datetime(2025, 1, 1, tzinfo=timezone.utc)) == 0


def test_days_remaining_without_end_date_is_zero():
    assert days_remaining(None, datetime(2024, 1, 1, tzinfo=timezone.utc)) == 0


def test_days_remaining_treats_naive_now_as_utc():
    end = date(2024, 4, 1)
    assert days_remaining(end, datetime(2024, 3, 31, 6, 0)) == days_remaining(
        end, datetime(2024, 3, 31, 6, 0, tzinfo=timezone.utc)
    )


def test_days_remaining_never_increases_as_time_passes():
    end = date(2024, 4, 1)
    now = datetime(2024, 2, 20, 9, 30, tzinfo=timezone.utc)
    previous = days_remaining(end, now)
    for _ in range(60 * 4):
        now += timedelta(hours=6)
        current = days_remaining(end, now)
        assert current <= previous
        previous = current
    assert previous == 0


def test_expiry_warning_threshold():
    assert is_expiring_soon(30)
    assert is_expiring_soon(0)
    assert not is_expiring_soon(31)
    assert is_expiring_soon(7, threshold=7)
