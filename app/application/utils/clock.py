from __future__ import annotations

from datetime import date, time

MINUTES_PER_DAY = 24 * 60


def to_minutes(value: time) -> int:
    return value.hour * 60 + value.minute


def from_minutes(minutes: int) -> time:
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise ValueError(f"{minutes} minutes is outside a single day")
    return time(hour=minutes // 60, minute=minutes % 60)


def truncate_to_minute(value: time) -> time:
    return value.replace(second=0, microsecond=0, tzinfo=None)


def parse_clock(value: str | time) -> time:
    """Parse "HH:MM" or "HH:MM:SS" into a minute-precision time."""
    if isinstance(value, time):
        return truncate_to_minute(value)
    parts = str(value).strip().split(":")
    if len(parts) < 2:
        raise ValueError(f"Invalid clock time: {value!r}")
    return time(hour=int(parts[0]), minute=int(parts[1]))


def format_clock(value: time) -> str:
    return value.strftime("%H:%M")


def day_of_week(on_date: date) -> int:
    """Day index with Sunday as 0, matching the availability table."""
    return (on_date.weekday() + 1) % 7
