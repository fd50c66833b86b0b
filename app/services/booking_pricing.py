# app/services/booking_pricing.py
"""
Price and end-time arithmetic shared by every booking entry point.

Both values are derived from (hourly_rate, date, start_time, duration) and are
recomputed on each create/update; nothing else may set them.
"""
from datetime import date, datetime, time, timedelta
from typing import Optional

MIN_DURATION = 30
MAX_DURATION = 240


def compute_total_price(hourly_rate: Optional[float], duration: int) -> float:
    """hourly_rate * duration / 60, unrounded. A missing rate prices at 0."""
    return (hourly_rate or 0) * duration / 60


def session_bounds(day: date, start_time: time, duration: int):
    start = datetime.combine(day, start_time)
    return start, start + timedelta(minutes=duration)


def compute_end_time(day: date, start_time: time, duration: int) -> time:
    """
    Time of day at which the session ends.

    Only the time component is kept: 23:30 + 60 minutes gives 00:30 and the
    booking's date still refers to the start day.
    """
    _, end = session_bounds(day, start_time, duration)
    return end.time()


def ends_next_day(day: date, start_time: time, duration: int) -> bool:
    start, end = session_bounds(day, start_time, duration)
    return end.date() > start.date()
