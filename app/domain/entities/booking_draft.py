from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time

from app.domain.entities.appointment import Contact

DRAFT_SCHEMA_VERSION = 2


@dataclass(frozen=True)
class BookingDraft:
    version: int = DRAFT_SCHEMA_VERSION
    service_ids: tuple[str, ...] = ()
    service_names: tuple[str, ...] = ()
    # Legacy single-service fields, kept aligned with the first selected id
    service_id: str | None = None
    service_name: str | None = None
    date: date | None = None
    time: time | None = None
    full_name: str | None = None
    phone: str | None = None
    email: str | None = None
    address: str | None = None
    submitted: bool = False
    submitted_at: str | None = None  # ISO timestamp

    @property
    def contact(self) -> Contact:
        return Contact(
            full_name=self.full_name,
            phone=self.phone,
            email=self.email,
            address=self.address,
        )
