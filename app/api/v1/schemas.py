from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, Field, field_serializer

from app.application.use_cases.booking import CommitOutcome
from app.domain.entities.appointment import Appointment
from app.domain.entities.availability import AvailabilityWindow, BlockedDate
from app.domain.entities.booking_draft import BookingDraft
from app.domain.entities.service_item import ServiceItem


class ServiceSchema(BaseModel):
    id: str
    name: str
    description: str | None = None
    price_cents: int
    duration_mins: int

    @classmethod
    def from_entity(cls, item: ServiceItem) -> "ServiceSchema":
        return cls(
            id=item.id,
            name=item.name,
            description=item.description,
            price_cents=item.price_cents,
            duration_mins=item.duration_mins,
        )


class DateOptionsSchema(BaseModel):
    dates: list[dt.date]


class TimeOptionsSchema(BaseModel):
    date: dt.date
    times: list[dt.time]
    slot_interval: int
    total_duration_mins: int

    @field_serializer("times")
    def _times(self, value: list[dt.time]) -> list[str]:
        return [t.strftime("%H:%M") for t in value]


class ContactSchema(BaseModel):
    full_name: str | None = None
    phone: str | None = None
    email: str | None = None
    address: str | None = None


class BookingRequestSchema(BaseModel):
    service_ids: list[str] = Field(default_factory=list)
    date: dt.date | None = None
    time: dt.time | None = None
    contact: ContactSchema = Field(default_factory=ContactSchema)


class CommitResponseSchema(BaseModel):
    outcome: CommitOutcome
    appointment_id: str | None = None
    message: str | None = None
    missing_fields: list[str] = Field(default_factory=list)
    time_options: list[dt.time] | None = None

    @field_serializer("time_options")
    def _time_options(self, value: list[dt.time] | None) -> list[str] | None:
        if value is None:
            return None
        return [t.strftime("%H:%M") for t in value]


class DraftSchema(BaseModel):
    service_ids: list[str]
    service_names: list[str]
    date: dt.date | None = None
    time: dt.time | None = None
    full_name: str | None = None
    phone: str | None = None
    email: str | None = None
    address: str | None = None
    submitted: bool = False
    submitted_at: str | None = None

    @field_serializer("time")
    def _time(self, value: dt.time | None) -> str | None:
        return value.strftime("%H:%M") if value else None

    @classmethod
    def from_entity(cls, draft: BookingDraft) -> "DraftSchema":
        return cls(
            service_ids=list(draft.service_ids),
            service_names=list(draft.service_names),
            date=draft.date,
            time=draft.time,
            full_name=draft.full_name,
            phone=draft.phone,
            email=draft.email,
            address=draft.address,
            submitted=draft.submitted,
            submitted_at=draft.submitted_at,
        )


class DraftViewSchema(BaseModel):
    draft: DraftSchema
    time_options: list[dt.time] = Field(default_factory=list)
    notice: str | None = None

    @field_serializer("time_options")
    def _time_options(self, value: list[dt.time]) -> list[str]:
        return [t.strftime("%H:%M") for t in value]


class SelectDateSchema(BaseModel):
    date: dt.date


class SelectTimeSchema(BaseModel):
    time: dt.time | None = None


class StatusChangeSchema(BaseModel):
    id: str = Field(min_length=1)
    status: str = Field(min_length=1)


class AppointmentSchema(BaseModel):
    id: str
    date: dt.date
    time: dt.time
    status: str
    full_name: str | None = None
    phone: str | None = None
    email: str | None = None
    address: str | None = None
    service_id: str | None = None

    @field_serializer("time")
    def _time(self, value: dt.time) -> str:
        return value.strftime("%H:%M")

    @classmethod
    def from_entity(cls, appt: Appointment) -> "AppointmentSchema":
        return cls(
            id=appt.id,
            date=appt.date,
            time=appt.time,
            status=appt.status.value,
            full_name=appt.full_name,
            phone=appt.phone,
            email=appt.email,
            address=appt.address,
            service_id=appt.service_id,
        )


class AvailabilityWindowSchema(BaseModel):
    id: str | None = None
    day_of_week: int = Field(ge=0, le=6)
    start_time: dt.time
    end_time: dt.time

    @field_serializer("start_time", "end_time")
    def _clock(self, value: dt.time) -> str:
        return value.strftime("%H:%M")

    @classmethod
    def from_entity(cls, window: AvailabilityWindow) -> "AvailabilityWindowSchema":
        return cls(id=window.id, day_of_week=window.day_of_week, start_time=window.start, end_time=window.end)


class BlockedDateSchema(BaseModel):
    id: str | None = None
    date: dt.date
    note: str | None = None

    @classmethod
    def from_entity(cls, blocked: BlockedDate) -> "BlockedDateSchema":
        return cls(id=blocked.id, date=blocked.date, note=blocked.note)
