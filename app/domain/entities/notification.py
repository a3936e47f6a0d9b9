from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time
from enum import Enum
from typing import Any

from app.domain.entities.appointment import AppointmentStatus, Contact


class NotificationType(str, Enum):
    booking_confirmed = "booking_confirmed"
    status_changed = "status_changed"


@dataclass(frozen=True)
class NotificationEvent:
    type: NotificationType
    appointment_id: str
    date: date
    time: time
    contact: Contact = Contact()
    service_names: list[str] = field(default_factory=list)
    status: AppointmentStatus | None = None
    total_price_cents: int | None = None
    total_duration_mins: int | None = None
    admin_email: str | None = None

    def to_payload(self) -> dict[str, Any]:
        """Wire shape expected by the e-mail webhook (camelCase keys)."""
        payload: dict[str, Any] = {
            "type": self.type.value,
            "appointmentId": self.appointment_id,
            "serviceNames": list(self.service_names),
            "date": self.date.isoformat(),
            "time": self.time.strftime("%H:%M"),
            "fullName": self.contact.full_name,
            "phone": self.contact.phone,
            "email": self.contact.email,
            "address": self.contact.address,
            "adminEmail": self.admin_email,
        }
        if self.status is not None:
            payload["status"] = self.status.value
        if self.total_price_cents is not None:
            payload["totalPriceCents"] = self.total_price_cents
        if self.total_duration_mins is not None:
            payload["totalDurationMins"] = self.total_duration_mins
        return payload
