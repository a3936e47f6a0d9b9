from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, time
from enum import Enum

from app.domain.entities.appointment import Appointment, AppointmentStatus, NewAppointment


class InsertOutcome(str, Enum):
    inserted = "inserted"
    conflict = "conflict"


@dataclass(frozen=True)
class InsertResult:
    outcome: InsertOutcome
    appointment_id: str | None = None

    @property
    def inserted(self) -> bool:
        return self.outcome == InsertOutcome.inserted


class ReservationLedgerPort(ABC):
    @abstractmethod
    def insert_if_absent(self, appointment: NewAppointment) -> InsertResult:
        """
        Insert an appointment unless another active appointment holds its (date, time).
        Returns a conflict result instead of raising when the slot is taken.
        Raises LedgerError for any other failure.
        """
        raise NotImplementedError

    @abstractmethod
    def attach_services(self, appointment_id: str, service_ids: list[str]) -> None:
        """Insert one link row per service id. Raises LedgerError on failure."""
        raise NotImplementedError

    @abstractmethod
    def delete_appointment(self, appointment_id: str) -> bool:
        """Delete an appointment and its links. Returns True if a row was removed."""
        raise NotImplementedError

    @abstractmethod
    def booked_times(self, on_date: date) -> set[time]:
        """Start times held by active appointments on a date."""
        raise NotImplementedError

    @abstractmethod
    def get_appointment(self, appointment_id: str) -> Appointment | None:
        raise NotImplementedError

    @abstractmethod
    def linked_service_ids(self, appointment_id: str) -> list[str]:
        raise NotImplementedError

    @abstractmethod
    def update_status(self, appointment_id: str, status: AppointmentStatus) -> Appointment | None:
        """
        Change an appointment's status. Returns None if the appointment does not exist.
        Raises SlotConflictError if re-activating it would collide with another active one.
        """
        raise NotImplementedError

    @abstractmethod
    def list_appointments(self, status: AppointmentStatus | None = None) -> list[Appointment]:
        raise NotImplementedError

    @abstractmethod
    def status_counts(self) -> dict[AppointmentStatus, int]:
        raise NotImplementedError
