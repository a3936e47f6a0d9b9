from __future__ import annotations

import threading
import uuid
from datetime import date, datetime, time

from app.application.exceptions import SlotConflictError
from app.application.ports.ledger import InsertOutcome, InsertResult, ReservationLedgerPort
from app.domain.entities.appointment import Appointment, AppointmentStatus, NewAppointment


class MemoryReservationLedger(ReservationLedgerPort):
    def __init__(self) -> None:
        self._appointments: dict[str, Appointment] = {}
        self._links: dict[str, list[str]] = {}
        self._lock = threading.Lock()

    def _active_holder(self, on_date: date, at_time: time, exclude: str | None = None) -> str | None:
        """Id of the active appointment holding (date, time). Call with the lock held."""
        for appt in self._appointments.values():
            if appt.id == exclude:
                continue
            if appt.date == on_date and appt.time == at_time and appt.status.is_active:
                return appt.id
        return None

    def insert_if_absent(self, appointment: NewAppointment) -> InsertResult:
        with self._lock:
            if appointment.status.is_active and self._active_holder(appointment.date, appointment.time):
                return InsertResult(outcome=InsertOutcome.conflict)
            appointment_id = str(uuid.uuid4())
            contact = appointment.contact
            self._appointments[appointment_id] = Appointment(
                id=appointment_id,
                date=appointment.date,
                time=appointment.time,
                status=appointment.status,
                full_name=contact.full_name,
                phone=contact.phone,
                email=contact.email,
                address=contact.address,
                service_id=appointment.service_id,
                created_at=datetime.now(),
            )
            return InsertResult(outcome=InsertOutcome.inserted, appointment_id=appointment_id)

    def attach_services(self, appointment_id: str, service_ids: list[str]) -> None:
        with self._lock:
            links = self._links.setdefault(appointment_id, [])
            for service_id in service_ids:
                if service_id not in links:
                    links.append(service_id)

    def delete_appointment(self, appointment_id: str) -> bool:
        with self._lock:
            self._links.pop(appointment_id, None)
            return self._appointments.pop(appointment_id, None) is not None

    def booked_times(self, on_date: date) -> set[time]:
        with self._lock:
            return {
                appt.time
                for appt in self._appointments.values()
                if appt.date == on_date and appt.status.is_active
            }

    def get_appointment(self, appointment_id: str) -> Appointment | None:
        return self._appointments.get(appointment_id)

    def linked_service_ids(self, appointment_id: str) -> list[str]:
        return list(self._links.get(appointment_id, []))

    def update_status(self, appointment_id: str, status: AppointmentStatus) -> Appointment | None:
        with self._lock:
            current = self._appointments.get(appointment_id)
            if current is None:
                return None
            if status.is_active and self._active_holder(current.date, current.time, exclude=appointment_id):
                raise SlotConflictError(
                    f"Another active appointment already holds {current.date} {current.time:%H:%M}"
                )
            updated = Appointment(
                id=current.id,
                date=current.date,
                time=current.time,
                status=status,
                full_name=current.full_name,
                phone=current.phone,
                email=current.email,
                address=current.address,
                service_id=current.service_id,
                created_at=current.created_at,
            )
            self._appointments[appointment_id] = updated
            return updated

    def list_appointments(self, status: AppointmentStatus | None = None) -> list[Appointment]:
        rows = [a for a in self._appointments.values() if status is None or a.status == status]
        return sorted(rows, key=lambda a: (a.date, a.time))

    def status_counts(self) -> dict[AppointmentStatus, int]:
        counts = {s: 0 for s in AppointmentStatus}
        for appt in self._appointments.values():
            counts[appt.status] += 1
        return counts
