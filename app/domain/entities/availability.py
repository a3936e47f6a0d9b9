from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time


@dataclass(frozen=True)
class AvailabilityWindow:
    day_of_week: int  # 0 = Sunday ... 6 = Saturday
    start: time
    end: time
    id: str | None = None

    def __post_init__(self) -> None:
        if not 0 <= self.day_of_week <= 6:
            raise ValueError(f"day_of_week must be in 0..6, got {self.day_of_week}")
        if self.start >= self.end:
            raise ValueError("Availability window start must be before its end")


@dataclass(frozen=True)
class BlockedDate:
    date: date
    note: str | None = None
    id: str | None = None
