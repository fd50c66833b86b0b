from datetime import date, time

import pytest

from app.services.booking_pricing import compute_end_time, compute_total_price, ends_next_day

DAY = date(2030, 3, 14)


@pytest.mark.parametrize(
    "hourly_rate,duration,expected",
    [
        (40.0, 60, 40.0),
        (40.0, 90, 60.0),
        (35.0, 45, 26.25),
        (25.0, 30, 12.5),
    ],
)
def test_total_price_is_rate_times_minutes_over_sixty(hourly_rate, duration, expected):
    assert compute_total_price(hourly_rate, duration) == expected


def test_total_price_is_not_rounded():
    assert compute_total_price(33.0, 50) == 33.0 * 50 / 60


def test_missing_hourly_rate_prices_at_zero():
    assert compute_total_price(None, 120) == 0


def test_end_time_rolls_over_hours():
    assert compute_end_time(DAY, time(14, 45), 90) == time(16, 15)


def test_end_time_wraps_past_midnight_without_date():
    assert compute_end_time(DAY, time(23, 30), 60) == time(0, 30)
    assert ends_next_day(DAY, time(23, 30), 60) is True


def test_same_day_session_is_not_flagged():
    assert ends_next_day(DAY, time(9, 0), 240) is False
