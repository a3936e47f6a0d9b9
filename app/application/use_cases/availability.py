from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, time, timedelta

from app.application.ports.calendar_rules import CalendarRulesPort
from app.application.ports.ledger import ReservationLedgerPort
from app.application.ports.service_catalog import ServiceCatalogPort
from app.application.utils.clock import day_of_week
from app.application.utils.slot_generator import DEFAULT_SLOT_INTERVAL_MINUTES, generate_slots
from app.domain.entities.service_item import ServiceItem


@dataclass(frozen=True)
class TimeOptions:
    date: date
    times: list[time]
    slot_interval: int
    total_duration_mins: int
    services: list[ServiceItem]


class AvailabilityUseCase:
    def __init__(
        self,
        rules: CalendarRulesPort,
        ledger: ReservationLedgerPort,
        catalog: ServiceCatalogPort,
        default_slot_interval: int = DEFAULT_SLOT_INTERVAL_MINUTES,
        booking_window_days: int = 30,
    ) -> None:
        self._rules = rules
        self._ledger = ledger
        self._catalog = catalog
        self._default_slot_interval = default_slot_interval
        self._booking_window_days = booking_window_days
        self._logger = logging.getLogger(__name__)

    def list_services(self) -> list[ServiceItem]:
        return self._catalog.list_active()

    def selected_services(self, service_ids: list[str]) -> list[ServiceItem]:
        return [s for s in self._catalog.get_many(list(dict.fromkeys(service_ids))) if s.active]

    def resolve_slot_interval(self) -> int:
        """Configured interval, or the default when the setting is unreadable or unusable."""
        try:
            value = self._rules.get_slot_interval()
        except Exception as e:
            self._logger.warning(
                "Slot interval lookup failed; using default",
                extra={"reason": "rules_lookup", "error": str(e)},
            )
            return self._default_slot_interval
        if value is None:
            return self._default_slot_interval
        try:
            interval = int(value)
        except (TypeError, ValueError):
            interval = 0
        if interval <= 0:
            self._logger.warning(
                "Ignoring invalid slot interval", extra={"reason": "rules_lookup", "error": repr(value)}
            )
            return self._default_slot_interval
        return interval

    def booked_times(self, on_date: date) -> set[time]:
        try:
            return self._ledger.booked_times(on_date)
        except Exception as e:
            # Advisory only; the ledger still rejects a taken slot at insert time
            self._logger.warning(
                "Booked times lookup failed; treating date as free",
                extra={"date": on_date.isoformat(), "error": str(e)},
            )
            return set()

    def time_options(self, on_date: date, service_ids: list[str]) -> TimeOptions:
        services = self.selected_services(service_ids)
        total = total_duration(services)
        interval = self.resolve_slot_interval()

        windows = self._rules.list_windows(day_of_week(on_date))
        blocked = [b.date for b in self._rules.list_blocked_dates()]
        times = generate_slots(
            on_date,
            total,
            windows,
            blocked,
            self.booked_times(on_date),
            interval,
        )
        self._logger.info(
            "Time options computed",
            extra={"date": on_date.isoformat(), "outcome": f"{len(times)} slots"},
        )
        return TimeOptions(
            date=on_date,
            times=times,
            slot_interval=interval,
            total_duration_mins=total,
            services=services,
        )

    def date_options(self, today: date, days: int | None = None) -> list[date]:
        """Upcoming dates, starting today, that are not blocked."""
        count = days if days is not None else self._booking_window_days
        blocked = {b.date for b in self._rules.list_blocked_dates()}
        candidates = (today + timedelta(days=i) for i in range(count))
        return [d for d in candidates if d not in blocked]


def total_duration(services: list[ServiceItem]) -> int:
    return sum(s.duration_mins or 0 for s in services)


def total_price(services: list[ServiceItem]) -> int:
    return sum(s.price_cents or 0 for s in services)
