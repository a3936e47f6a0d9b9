from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum


class AppointmentStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    in_progress = "in_progress"
    finished = "finished"
    cancelled = "cancelled"

    @property
    def is_active(self) -> bool:
        return self in ACTIVE_STATUSES


# Active statuses occupy a slot; the ledger's uniqueness constraint is scoped to them.
ACTIVE_STATUSES = frozenset(
    {AppointmentStatus.pending, AppointmentStatus.confirmed, AppointmentStatus.in_progress}
)

_STATUS_ALIASES = {
    "in progress": AppointmentStatus.in_progress,
    "in-progress": AppointmentStatus.in_progress,
    "canceled": AppointmentStatus.cancelled,
}


def normalize_status(value: str | AppointmentStatus | None) -> AppointmentStatus | None:
    """Map legacy Title Case and spelling variants onto the canonical status set."""
    if isinstance(value, AppointmentStatus):
        return value
    lowered = str(value or "").strip().lower()
    if not lowered:
        return None
    if lowered in _STATUS_ALIASES:
        return _STATUS_ALIASES[lowered]
    try:
        return AppointmentStatus(lowered)
    except ValueError:
        return None


@dataclass(frozen=True)
class Contact:
    full_name: str | None = None
    phone: str | None = None
    email: str | None = None
    address: str | None = None

    def missing_required(self) -> list[str]:
        missing = []
        if not (self.full_name or "").strip():
            missing.append("full_name")
        if not (self.phone or "").strip():
            missing.append("phone")
        return missing


@dataclass(frozen=True)
class NewAppointment:
    date: date
    time: time
    contact: Contact
    service_id: str  # legacy primary service, first selected item
    status: AppointmentStatus = AppointmentStatus.pending


@dataclass(frozen=True)
class Appointment:
    id: str
    date: date
    time: time
    status: AppointmentStatus
    full_name: str | None = None
    phone: str | None = None
    email: str | None = None
    address: str | None = None
    service_id: str | None = None
    created_at: datetime | None = None

    @property
    def contact(self) -> Contact:
        return Contact(
            full_name=self.full_name,
            phone=self.phone,
            email=self.email,
            address=self.address,
        )
