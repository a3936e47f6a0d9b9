"""
Pytest configuration and fixtures.

Wires the booking use cases against the in-memory adapters.
"""

from __future__ import annotations

import sys
from datetime import date, time
from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from app.application.use_cases.availability import AvailabilityUseCase
from app.application.use_cases.booking import BookingCommitter
from app.application.use_cases.draft_session import DraftSessionUseCase
from app.application.use_cases.notify import NotifyUseCase
from app.application.use_cases.update_status import UpdateAppointmentStatusUseCase
from app.domain.entities.appointment import Contact
from app.domain.entities.availability import AvailabilityWindow
from app.domain.entities.service_item import ServiceItem
from app.infrastructure.calendar.memory_rules import MemoryCalendarRules
from app.infrastructure.knowledge.service_catalog_store import ServiceCatalogStore
from app.infrastructure.notifications.mock_sink import LoggingNotificationSink
from app.infrastructure.store.memory_draft_store import MemoryDraftStore
from app.infrastructure.store.memory_ledger import MemoryReservationLedger

MONDAY = date(2026, 3, 2)
SUNDAY = date(2026, 3, 1)


@pytest.fixture
def services() -> dict[str, ServiceItem]:
    return {
        "wound": ServiceItem(id="wound", name="Wound Care", price_cents=120000, duration_mins=45),
        "iv": ServiceItem(id="iv", name="IV Therapy", price_cents=250000, duration_mins=45),
        "vitals": ServiceItem(id="vitals", name="Vital Signs", price_cents=50000, duration_mins=30),
        "retired": ServiceItem(id="retired", name="Retired Service", price_cents=1, duration_mins=30, active=False),
    }


@pytest.fixture
def catalog(services) -> ServiceCatalogStore:
    return ServiceCatalogStore(services)


@pytest.fixture
def rules() -> MemoryCalendarRules:
    return MemoryCalendarRules(
        windows=[AvailabilityWindow(day_of_week=1, start=time(9, 0), end=time(12, 0), id="mon-am")],
    )


@pytest.fixture
def ledger() -> MemoryReservationLedger:
    return MemoryReservationLedger()


@pytest.fixture
def sink() -> LoggingNotificationSink:
    return LoggingNotificationSink()


@pytest.fixture
def availability(rules, ledger, catalog) -> AvailabilityUseCase:
    return AvailabilityUseCase(rules=rules, ledger=ledger, catalog=catalog)


@pytest.fixture
def committer(ledger, catalog, sink) -> BookingCommitter:
    return BookingCommitter(ledger=ledger, catalog=catalog, notifier=NotifyUseCase(sink))


@pytest.fixture
def draft_store() -> MemoryDraftStore:
    return MemoryDraftStore()


@pytest.fixture
def draft_session(draft_store, availability, committer) -> DraftSessionUseCase:
    return DraftSessionUseCase(store=draft_store, availability=availability, committer=committer)


@pytest.fixture
def status_use_case(ledger, catalog, sink) -> UpdateAppointmentStatusUseCase:
    return UpdateAppointmentStatusUseCase(ledger=ledger, catalog=catalog, notifier=NotifyUseCase(sink))


@pytest.fixture
def contact() -> Contact:
    return Contact(full_name="Juan Dela Cruz", phone="+639170000000", email="juan@example.com")
