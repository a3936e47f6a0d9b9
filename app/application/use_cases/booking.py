from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, time
from enum import Enum

from app.application.exceptions import LedgerError, PartialFailureError
from app.application.ports.ledger import ReservationLedgerPort
from app.application.ports.service_catalog import ServiceCatalogPort
from app.application.use_cases.availability import total_duration, total_price
from app.application.use_cases.notify import NotifyUseCase
from app.application.utils.clock import format_clock, truncate_to_minute
from app.application.utils.saga import run_compensated
from app.domain.entities.appointment import AppointmentStatus, Contact, NewAppointment
from app.domain.entities.notification import NotificationEvent, NotificationType


class CommitOutcome(str, Enum):
    booked = "booked"
    precondition_failed = "precondition_failed"
    unique_conflict = "unique_conflict"
    partial_failure = "partial_failure"
    failed = "failed"
    already_submitted = "already_submitted"


@dataclass(frozen=True)
class CommitResult:
    outcome: CommitOutcome
    appointment_id: str | None = None
    message: str | None = None
    missing_fields: list[str] = field(default_factory=list)
    time_options: list[time] | None = None

    @property
    def ok(self) -> bool:
        return self.outcome == CommitOutcome.booked

    @property
    def should_reselect_time(self) -> bool:
        """The caller must re-run slot generation and ask for another time."""
        return self.outcome == CommitOutcome.unique_conflict


class BookingCommitter:
    def __init__(
        self,
        ledger: ReservationLedgerPort,
        catalog: ServiceCatalogPort,
        notifier: NotifyUseCase,
        admin_email: str | None = None,
    ) -> None:
        self._ledger = ledger
        self._catalog = catalog
        self._notifier = notifier
        self._admin_email = admin_email
        self._logger = logging.getLogger(__name__)

    def commit(
        self,
        service_ids: list[str],
        on_date: date | None,
        at_time: time | None,
        contact: Contact,
    ) -> CommitResult:
        """
        Reserve a slot and attach the selected services.

        The appointment insert is optimistic: the ledger's uniqueness constraint
        decides whether the slot is still free. A failed link insert removes the
        appointment again so no booking is left without services.
        """
        ids = list(dict.fromkeys(sid for sid in service_ids if sid))
        missing = []
        if not ids:
            missing.append("service_ids")
        if on_date is None:
            missing.append("date")
        if at_time is None:
            missing.append("time")
        missing.extend(contact.missing_required())
        if missing:
            return CommitResult(
                outcome=CommitOutcome.precondition_failed,
                message="Please complete the booking details.",
                missing_fields=missing,
            )

        services = self._catalog.get_many(ids)
        known = {s.id for s in services if s.active}
        unavailable = [sid for sid in ids if sid not in known]
        if unavailable:
            return CommitResult(
                outcome=CommitOutcome.precondition_failed,
                message="Some selected services are no longer offered.",
                missing_fields=[f"service:{sid}" for sid in unavailable],
            )

        at_time = truncate_to_minute(at_time)
        log_extra = {"date": on_date.isoformat(), "time": format_clock(at_time)}

        # Step 1: reserve the appointment row
        try:
            inserted = self._ledger.insert_if_absent(
                NewAppointment(
                    date=on_date,
                    time=at_time,
                    contact=contact,
                    service_id=ids[0],
                    status=AppointmentStatus.pending,
                )
            )
        except LedgerError as e:
            self._logger.error("Appointment insert failed", extra={**log_extra, "error": str(e)})
            return CommitResult(
                outcome=CommitOutcome.failed,
                message="We could not save your booking. Please try again.",
            )

        if not inserted.inserted:
            self._logger.info("Slot already taken", extra={**log_extra, "outcome": "unique_conflict"})
            return CommitResult(
                outcome=CommitOutcome.unique_conflict,
                message="That slot was just booked, please choose another time.",
            )

        appointment_id = inserted.appointment_id

        # Step 2: attach service line items, undoing step 1 on failure
        try:
            run_compensated(
                lambda: self._ledger.attach_services(appointment_id, ids),
                lambda: self._ledger.delete_appointment(appointment_id),
                description="attach services",
                context={**log_extra, "appointment_id": appointment_id},
            )
        except PartialFailureError:
            return CommitResult(
                outcome=CommitOutcome.partial_failure,
                message="Booking failed while attaching services. Please try again.",
            )

        self._logger.info(
            "Booking committed",
            extra={**log_extra, "appointment_id": appointment_id, "outcome": "booked"},
        )

        self._notifier.execute(
            NotificationEvent(
                type=NotificationType.booking_confirmed,
                appointment_id=appointment_id,
                date=on_date,
                time=at_time,
                contact=contact,
                service_names=[s.name for s in services],
                total_price_cents=total_price(services),
                total_duration_mins=total_duration(services),
                admin_email=self._admin_email,
            )
        )
        return CommitResult(outcome=CommitOutcome.booked, appointment_id=appointment_id)
