from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, time

from app.domain.entities.availability import AvailabilityWindow, BlockedDate


class CalendarRulesPort(ABC):
    @abstractmethod
    def list_windows(self, day_of_week: int | None = None) -> list[AvailabilityWindow]:
        """Weekly availability windows, optionally for one day (0 = Sunday)."""
        raise NotImplementedError

    @abstractmethod
    def list_blocked_dates(self) -> list[BlockedDate]:
        raise NotImplementedError

    @abstractmethod
    def get_slot_interval(self) -> int | None:
        """Configured slot interval in minutes, or None if unset."""
        raise NotImplementedError

    @abstractmethod
    def add_window(self, day_of_week: int, start: time, end: time) -> AvailabilityWindow:
        raise NotImplementedError

    @abstractmethod
    def delete_window(self, window_id: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def add_blocked_date(self, blocked: date, note: str | None = None) -> BlockedDate:
        raise NotImplementedError

    @abstractmethod
    def delete_blocked_date(self, blocked_id: str) -> bool:
        raise NotImplementedError
