"""
Slot generation.

Turns weekly availability windows, blocked dates and the start times already
held by active appointments into the start times a client may pick for a
booking of a given total duration. Storage access stays with the caller.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from datetime import date, time

from app.application.utils.clock import day_of_week, from_minutes, to_minutes, truncate_to_minute
from app.domain.entities.availability import AvailabilityWindow

DEFAULT_SLOT_INTERVAL_MINUTES = 30


def required_slot_count(duration_minutes: int, slot_interval: int) -> int:
    """Number of contiguous granularity units a booking of this duration occupies."""
    if slot_interval <= 0:
        raise ValueError("slot_interval must be greater than zero")
    span = max(duration_minutes or 0, slot_interval)
    return max(1, math.ceil(span / slot_interval))


def generate_slots(
    on_date: date,
    required_duration_minutes: int,
    windows: Iterable[AvailabilityWindow],
    blocked_dates: Iterable[date],
    booked_times: Iterable[time],
    slot_interval: int = DEFAULT_SLOT_INTERVAL_MINUTES,
) -> list[time]:
    """
    Feasible start times for on_date, ascending and without duplicates.

    A candidate is feasible when the whole span fits in its window and none of
    the granularity units it covers is an already-booked start time. Existing
    bookings count as a single unit each, whatever their own duration.
    """
    required_slots = required_slot_count(required_duration_minutes, slot_interval)

    if on_date in set(blocked_dates):
        return []

    dow = day_of_week(on_date)
    todays = [w for w in windows if w.day_of_week == dow]
    if not todays:
        return []

    booked = {to_minutes(truncate_to_minute(t)) for t in booked_times}
    span = required_slots * slot_interval

    feasible: set[int] = set()
    for window in todays:
        start = to_minutes(window.start)
        end = to_minutes(window.end)
        cur = start
        while cur + span <= end:
            covered = (cur + i * slot_interval for i in range(required_slots))
            if not any(minute in booked for minute in covered):
                feasible.add(cur)
            cur += slot_interval

    return [from_minutes(minute) for minute in sorted(feasible)]
