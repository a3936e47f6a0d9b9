from __future__ import annotations

import logging
import re
import uuid
from datetime import date, time

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from app.application.exceptions import LedgerError, SlotConflictError
from app.application.ports.ledger import InsertOutcome, InsertResult, ReservationLedgerPort
from app.application.utils.clock import truncate_to_minute
from app.domain.entities.appointment import (
    ACTIVE_STATUSES,
    Appointment,
    AppointmentStatus,
    NewAppointment,
    normalize_status,
)
from app.infrastructure.sql.models import ACTIVE_SLOT_INDEX, AppointmentRow, AppointmentServiceRow

_UNIQUE_MESSAGE = re.compile(r"duplicate key value|unique constraint", re.IGNORECASE)


def is_unique_violation(error: IntegrityError) -> bool:
    """True if the error comes from the active-slot uniqueness index."""
    orig = getattr(error, "orig", None)
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code == "23505":
        return True
    message = str(orig if orig is not None else error)
    return ACTIVE_SLOT_INDEX in message or bool(_UNIQUE_MESSAGE.search(message))


def _to_entity(row: AppointmentRow) -> Appointment:
    return Appointment(
        id=row.id,
        date=row.date,
        time=truncate_to_minute(row.time),
        status=normalize_status(row.status) or AppointmentStatus.pending,
        full_name=row.full_name,
        phone=row.phone,
        email=row.email,
        address=row.address,
        service_id=row.service_id,
        created_at=row.created_at,
    )


class SqlReservationLedger(ReservationLedgerPort):
    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory
        self._logger = logging.getLogger(__name__)

    def insert_if_absent(self, appointment: NewAppointment) -> InsertResult:
        appointment_id = str(uuid.uuid4())
        contact = appointment.contact
        row = AppointmentRow(
            id=appointment_id,
            date=appointment.date,
            time=truncate_to_minute(appointment.time),
            status=appointment.status.value,
            full_name=contact.full_name,
            phone=contact.phone,
            email=contact.email,
            address=contact.address,
            service_id=appointment.service_id,
        )
        with self._session_factory() as session:
            try:
                session.add(row)
                session.commit()
            except IntegrityError as e:
                session.rollback()
                if is_unique_violation(e):
                    self._logger.info(
                        "Active slot already held",
                        extra={"date": appointment.date.isoformat(), "outcome": "unique_conflict"},
                    )
                    return InsertResult(outcome=InsertOutcome.conflict)
                raise LedgerError(f"Appointment insert rejected: {e.orig}") from e
            except SQLAlchemyError as e:
                session.rollback()
                raise LedgerError(f"Appointment insert failed: {e}") from e
        return InsertResult(outcome=InsertOutcome.inserted, appointment_id=appointment_id)

    def attach_services(self, appointment_id: str, service_ids: list[str]) -> None:
        with self._session_factory() as session:
            try:
                session.add_all(
                    AppointmentServiceRow(appointment_id=appointment_id, service_id=service_id)
                    for service_id in dict.fromkeys(service_ids)
                )
                session.commit()
            except SQLAlchemyError as e:
                session.rollback()
                raise LedgerError(f"Service link insert failed: {e}") from e

    def delete_appointment(self, appointment_id: str) -> bool:
        with self._session_factory() as session:
            try:
                session.execute(
                    delete(AppointmentServiceRow).where(AppointmentServiceRow.appointment_id == appointment_id)
                )
                result = session.execute(delete(AppointmentRow).where(AppointmentRow.id == appointment_id))
                session.commit()
            except SQLAlchemyError as e:
                session.rollback()
                raise LedgerError(f"Appointment delete failed: {e}") from e
            return result.rowcount > 0

    def booked_times(self, on_date: date) -> set[time]:
        active = [s.value for s in ACTIVE_STATUSES]
        with self._session_factory() as session:
            rows = session.scalars(
                select(AppointmentRow.time).where(
                    AppointmentRow.date == on_date,
                    AppointmentRow.status.in_(active),
                )
            ).all()
        return {truncate_to_minute(t) for t in rows}

    def get_appointment(self, appointment_id: str) -> Appointment | None:
        with self._session_factory() as session:
            row = session.get(AppointmentRow, appointment_id)
            return _to_entity(row) if row else None

    def linked_service_ids(self, appointment_id: str) -> list[str]:
        with self._session_factory() as session:
            return list(
                session.scalars(
                    select(AppointmentServiceRow.service_id).where(
                        AppointmentServiceRow.appointment_id == appointment_id
                    )
                ).all()
            )

    def update_status(self, appointment_id: str, status: AppointmentStatus) -> Appointment | None:
        with self._session_factory() as session:
            row = session.get(AppointmentRow, appointment_id)
            if row is None:
                return None
            slot = f"{row.date} {row.time:%H:%M}"
            try:
                row.status = status.value
                session.commit()
            except IntegrityError as e:
                session.rollback()
                if is_unique_violation(e):
                    raise SlotConflictError(
                        f"Another active appointment already holds {slot}"
                    ) from e
                raise LedgerError(f"Status update rejected: {e.orig}") from e
            except SQLAlchemyError as e:
                session.rollback()
                raise LedgerError(f"Status update failed: {e}") from e
            return _to_entity(row)

    def list_appointments(self, status: AppointmentStatus | None = None) -> list[Appointment]:
        query = select(AppointmentRow).order_by(AppointmentRow.date, AppointmentRow.time)
        if status is not None:
            query = query.where(AppointmentRow.status == status.value)
        with self._session_factory() as session:
            return [_to_entity(row) for row in session.scalars(query).all()]

    def status_counts(self) -> dict[AppointmentStatus, int]:
        counts = {s: 0 for s in AppointmentStatus}
        with self._session_factory() as session:
            rows = session.execute(
                select(AppointmentRow.status, func.count()).group_by(AppointmentRow.status)
            ).all()
        for raw_status, count in rows:
            status = normalize_status(raw_status)
            if status is not None:
                counts[status] += count
        return counts
