from __future__ import annotations

import logging

from app.application.exceptions import AppointmentNotFoundError, InvalidStatusError
from app.application.ports.ledger import ReservationLedgerPort
from app.application.ports.service_catalog import ServiceCatalogPort
from app.application.use_cases.availability import total_duration, total_price
from app.application.use_cases.notify import NotifyUseCase
from app.domain.entities.appointment import Appointment, AppointmentStatus, normalize_status
from app.domain.entities.notification import NotificationEvent, NotificationType
from app.domain.entities.service_item import ServiceItem


class UpdateAppointmentStatusUseCase:
    def __init__(
        self,
        ledger: ReservationLedgerPort,
        catalog: ServiceCatalogPort,
        notifier: NotifyUseCase,
        fallback_service_label: str = "Nurse Service",
        admin_email: str | None = None,
    ) -> None:
        self._ledger = ledger
        self._catalog = catalog
        self._notifier = notifier
        self._fallback_service_label = fallback_service_label
        self._admin_email = admin_email
        self._logger = logging.getLogger(__name__)

    def execute(self, appointment_id: str, new_status: str | AppointmentStatus) -> Appointment:
        """
        Set an appointment's status. Every status is reachable from every other one.
        Raises InvalidStatusError, AppointmentNotFoundError or SlotConflictError.
        """
        status = normalize_status(new_status)
        if status is None:
            raise InvalidStatusError(f"Unknown appointment status: {new_status!r}")

        updated = self._ledger.update_status(appointment_id, status)
        if updated is None:
            raise AppointmentNotFoundError(f"Appointment {appointment_id} not found")

        self._logger.info(
            "Appointment status changed",
            extra={"appointment_id": appointment_id, "status": status.value},
        )

        services = self.resolve_services(updated)
        names = [s.name for s in services] or [self._fallback_service_label]
        self._notifier.execute(
            NotificationEvent(
                type=NotificationType.status_changed,
                appointment_id=updated.id,
                date=updated.date,
                time=updated.time,
                contact=updated.contact,
                service_names=names,
                status=status,
                total_price_cents=total_price(services) if services else None,
                total_duration_mins=total_duration(services) if services else None,
                admin_email=self._admin_email,
            )
        )
        return updated

    def resolve_services(self, appointment: Appointment) -> list[ServiceItem]:
        """Services from the link rows, falling back to the legacy single service."""
        linked = self._catalog.get_many(self._ledger.linked_service_ids(appointment.id))
        if linked:
            return linked
        if appointment.service_id:
            legacy = self._catalog.get_service(appointment.service_id)
            if legacy:
                return [legacy]
        return []

    def list_appointments(self, status: str | None = None) -> list[Appointment]:
        wanted = None
        if status:
            wanted = normalize_status(status)
            if wanted is None:
                raise InvalidStatusError(f"Unknown appointment status: {status!r}")
        return self._ledger.list_appointments(wanted)

    def status_counts(self) -> dict[str, int]:
        counts = self._ledger.status_counts()
        return {s.value: counts.get(s, 0) for s in AppointmentStatus}
