from __future__ import annotations

import logging
import uuid
from datetime import date, time

from app.application.ports.calendar_rules import CalendarRulesPort
from app.domain.entities.availability import AvailabilityWindow, BlockedDate

# Monday to Saturday, 09:00-17:00
DEFAULT_WINDOWS = [
    AvailabilityWindow(day_of_week=dow, start=time(9, 0), end=time(17, 0), id=f"default-{dow}")
    for dow in range(1, 7)
]


class MemoryCalendarRules(CalendarRulesPort):
    def __init__(
        self,
        windows: list[AvailabilityWindow] | None = None,
        blocked_dates: list[BlockedDate] | None = None,
        slot_interval: int | None = None,
    ) -> None:
        self._windows: dict[str, AvailabilityWindow] = {}
        for window in DEFAULT_WINDOWS if windows is None else windows:
            self._store_window(window)
        self._blocked: dict[str, BlockedDate] = {}
        for blocked in blocked_dates or []:
            key = blocked.id or str(uuid.uuid4())
            self._blocked[key] = BlockedDate(date=blocked.date, note=blocked.note, id=key)
        self._slot_interval = slot_interval
        self._logger = logging.getLogger(__name__)

    def _store_window(self, window: AvailabilityWindow) -> AvailabilityWindow:
        key = window.id or str(uuid.uuid4())
        stored = AvailabilityWindow(day_of_week=window.day_of_week, start=window.start, end=window.end, id=key)
        self._windows[key] = stored
        return stored

    def list_windows(self, day_of_week: int | None = None) -> list[AvailabilityWindow]:
        rows = [w for w in self._windows.values() if day_of_week is None or w.day_of_week == day_of_week]
        return sorted(rows, key=lambda w: (w.day_of_week, w.start))

    def list_blocked_dates(self) -> list[BlockedDate]:
        return sorted(self._blocked.values(), key=lambda b: b.date)

    def get_slot_interval(self) -> int | None:
        return self._slot_interval

    def set_slot_interval(self, minutes: int | None) -> None:
        self._slot_interval = minutes

    def add_window(self, day_of_week: int, start: time, end: time) -> AvailabilityWindow:
        window = self._store_window(AvailabilityWindow(day_of_week=day_of_week, start=start, end=end))
        self._logger.info("Availability window added", extra={"reason": f"dow={day_of_week}"})
        return window

    def delete_window(self, window_id: str) -> bool:
        return self._windows.pop(window_id, None) is not None

    def add_blocked_date(self, blocked: date, note: str | None = None) -> BlockedDate:
        for existing in self._blocked.values():
            if existing.date == blocked:
                return existing
        key = str(uuid.uuid4())
        entry = BlockedDate(date=blocked, note=note, id=key)
        self._blocked[key] = entry
        self._logger.info("Date blocked", extra={"date": blocked.isoformat()})
        return entry

    def delete_blocked_date(self, blocked_id: str) -> bool:
        return self._blocked.pop(blocked_id, None) is not None
