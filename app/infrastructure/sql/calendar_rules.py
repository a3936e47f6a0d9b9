from __future__ import annotations

import logging
import uuid
from datetime import date, time

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from app.application.exceptions import RulesLookupError
from app.application.ports.calendar_rules import CalendarRulesPort
from app.application.utils.clock import truncate_to_minute
from app.domain.entities.availability import AvailabilityWindow, BlockedDate
from app.infrastructure.sql.models import AvailabilityRow, BlockedDateRow, PublicSettingsRow


class SqlCalendarRules(CalendarRulesPort):
    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory
        self._logger = logging.getLogger(__name__)

    def list_windows(self, day_of_week: int | None = None) -> list[AvailabilityWindow]:
        query = select(AvailabilityRow).order_by(AvailabilityRow.day_of_week, AvailabilityRow.start_time)
        if day_of_week is not None:
            query = query.where(AvailabilityRow.day_of_week == day_of_week)
        with self._session_factory() as session:
            rows = session.scalars(query).all()
        windows = []
        for row in rows:
            try:
                windows.append(
                    AvailabilityWindow(
                        day_of_week=row.day_of_week,
                        start=truncate_to_minute(row.start_time),
                        end=truncate_to_minute(row.end_time),
                        id=row.id,
                    )
                )
            except ValueError as e:
                self._logger.warning("Skipping invalid availability row", extra={"reason": row.id, "error": str(e)})
        return windows

    def list_blocked_dates(self) -> list[BlockedDate]:
        with self._session_factory() as session:
            rows = session.scalars(select(BlockedDateRow).order_by(BlockedDateRow.date)).all()
        return [BlockedDate(date=row.date, note=row.note, id=row.id) for row in rows]

    def get_slot_interval(self) -> int | None:
        try:
            with self._session_factory() as session:
                return session.scalars(select(PublicSettingsRow.slot_interval_minutes).limit(1)).first()
        except SQLAlchemyError as e:
            raise RulesLookupError(f"Could not read slot interval: {e}") from e

    def set_slot_interval(self, minutes: int | None) -> None:
        with self._session_factory() as session:
            row = session.scalars(select(PublicSettingsRow).limit(1)).first()
            if row is None:
                row = PublicSettingsRow(id=1)
                session.add(row)
            row.slot_interval_minutes = minutes
            session.commit()

    def add_window(self, day_of_week: int, start: time, end: time) -> AvailabilityWindow:
        window = AvailabilityWindow(day_of_week=day_of_week, start=start, end=end, id=str(uuid.uuid4()))
        with self._session_factory() as session:
            session.add(
                AvailabilityRow(
                    id=window.id,
                    day_of_week=window.day_of_week,
                    start_time=window.start,
                    end_time=window.end,
                )
            )
            session.commit()
        self._logger.info("Availability window added", extra={"reason": f"dow={day_of_week}"})
        return window

    def delete_window(self, window_id: str) -> bool:
        with self._session_factory() as session:
            result = session.execute(delete(AvailabilityRow).where(AvailabilityRow.id == window_id))
            session.commit()
            return result.rowcount > 0

    def add_blocked_date(self, blocked: date, note: str | None = None) -> BlockedDate:
        with self._session_factory() as session:
            existing = session.scalars(select(BlockedDateRow).where(BlockedDateRow.date == blocked)).first()
            if existing:
                return BlockedDate(date=existing.date, note=existing.note, id=existing.id)
            row = BlockedDateRow(id=str(uuid.uuid4()), date=blocked, note=note)
            session.add(row)
            session.commit()
        self._logger.info("Date blocked", extra={"date": blocked.isoformat()})
        return BlockedDate(date=blocked, note=note, id=row.id)

    def delete_blocked_date(self, blocked_id: str) -> bool:
        with self._session_factory() as session:
            result = session.execute(delete(BlockedDateRow).where(BlockedDateRow.id == blocked_id))
            session.commit()
            return result.rowcount > 0
