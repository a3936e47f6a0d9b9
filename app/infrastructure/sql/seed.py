from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.orm import sessionmaker

from app.infrastructure.calendar.memory_rules import DEFAULT_WINDOWS
from app.infrastructure.knowledge.service_catalog_data import SERVICE_CATALOG
from app.infrastructure.sql.calendar_rules import SqlCalendarRules
from app.infrastructure.sql.models import AvailabilityRow, ServiceRow
from app.infrastructure.sql.service_catalog import SqlServiceCatalog

logger = logging.getLogger(__name__)


def seed_demo_data(session_factory: sessionmaker) -> None:
    """Load the demo catalog and weekday windows into empty tables."""
    with session_factory() as session:
        has_services = session.scalar(select(func.count()).select_from(ServiceRow)) > 0
        has_windows = session.scalar(select(func.count()).select_from(AvailabilityRow)) > 0

    if not has_services:
        catalog = SqlServiceCatalog(session_factory)
        for item in SERVICE_CATALOG.values():
            catalog.upsert(item)
    if not has_windows:
        rules = SqlCalendarRules(session_factory)
        for window in DEFAULT_WINDOWS:
            rules.add_window(window.day_of_week, window.start, window.end)
    logger.info("Demo data seeded", extra={"reason": f"services={not has_services} windows={not has_windows}"})
