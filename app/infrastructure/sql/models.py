from __future__ import annotations

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Time,
    func,
    text,
)

from app.infrastructure.sql.database import Base

ACTIVE_SLOT_INDEX = "uq_appointments_active_slot"
_ACTIVE_PREDICATE = "status IN ('pending', 'confirmed', 'in_progress')"


class ServiceRow(Base):
    __tablename__ = "services"

    id = Column(String(64), primary_key=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    price_cents = Column(Integer, nullable=False, default=0)
    duration_mins = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)


class AvailabilityRow(Base):
    __tablename__ = "availability"

    id = Column(String(36), primary_key=True)
    day_of_week = Column(Integer, nullable=False, index=True)  # 0 = Sunday
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)


class BlockedDateRow(Base):
    __tablename__ = "blocked_dates"

    id = Column(String(36), primary_key=True)
    date = Column(Date, nullable=False, unique=True)
    note = Column(Text, nullable=True)


class PublicSettingsRow(Base):
    __tablename__ = "public_settings"

    id = Column(Integer, primary_key=True)
    slot_interval_minutes = Column(Integer, nullable=True)


class AppointmentRow(Base):
    __tablename__ = "appointments"
    __table_args__ = (
        # At most one active appointment per (date, time)
        Index(
            ACTIVE_SLOT_INDEX,
            "date",
            "time",
            unique=True,
            sqlite_where=text(_ACTIVE_PREDICATE),
            postgresql_where=text(_ACTIVE_PREDICATE),
        ),
    )

    id = Column(String(36), primary_key=True)
    date = Column(Date, nullable=False)
    time = Column(Time, nullable=False)
    status = Column(String(20), nullable=False, default="pending")
    full_name = Column(String(200), nullable=True)
    phone = Column(String(50), nullable=True)
    email = Column(String(200), nullable=True)
    address = Column(Text, nullable=True)
    service_id = Column(String(64), ForeignKey("services.id", ondelete="SET NULL"), nullable=True)  # legacy
    created_at = Column(DateTime, nullable=False, server_default=func.now())


class AppointmentServiceRow(Base):
    __tablename__ = "appointment_services"

    appointment_id = Column(
        String(36), ForeignKey("appointments.id", ondelete="CASCADE"), primary_key=True
    )
    service_id = Column(String(64), ForeignKey("services.id"), primary_key=True)
