"""
Tests for the SQLAlchemy-backed ledger, calendar rules and catalog.

Runs against a temporary SQLite file so the partial unique index and the
foreign keys are enforced by the database itself.
"""

from __future__ import annotations

import threading
from datetime import date, time

import pytest

from app.application.exceptions import SlotConflictError
from app.application.ports.ledger import InsertOutcome
from app.application.use_cases.availability import AvailabilityUseCase
from app.application.use_cases.booking import BookingCommitter, CommitOutcome
from app.application.use_cases.notify import NotifyUseCase
from app.domain.entities.appointment import AppointmentStatus, Contact, NewAppointment
from app.domain.entities.service_item import ServiceItem
from app.infrastructure.knowledge.service_catalog_store import ServiceCatalogStore
from app.infrastructure.notifications.mock_sink import LoggingNotificationSink
from app.infrastructure.sql.calendar_rules import SqlCalendarRules
from app.infrastructure.sql.database import build_session_factory, create_db_engine, init_schema
from app.infrastructure.sql.ledger import SqlReservationLedger
from app.infrastructure.sql.seed import seed_demo_data
from app.infrastructure.sql.service_catalog import SqlServiceCatalog

MONDAY = date(2026, 3, 2)
CONTACT = Contact(full_name="Ana Reyes", phone="+639171111111")


@pytest.fixture
def session_factory(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'booking.db'}")
    init_schema(engine)
    factory = build_session_factory(engine)
    seed_demo_data(factory)
    yield factory
    engine.dispose()


@pytest.fixture
def sql_ledger(session_factory):
    return SqlReservationLedger(session_factory)


@pytest.fixture
def sql_catalog(session_factory):
    return SqlServiceCatalog(session_factory)


def _new(at_time: time, service_id: str = "wound-care") -> NewAppointment:
    return NewAppointment(date=MONDAY, time=at_time, contact=CONTACT, service_id=service_id)


def test_seed_loads_catalog_and_windows(session_factory, sql_catalog):
    names = [s.name for s in sql_catalog.list_active()]
    assert names == sorted(names)
    assert "elderly-companion" not in {s.id for s in sql_catalog.list_active()}
    assert sql_catalog.get_service("elderly-companion").active is False

    rules = SqlCalendarRules(session_factory)
    assert len(rules.list_windows()) == 6
    assert rules.list_windows(0) == []

    # Seeding twice does not duplicate rows
    seed_demo_data(session_factory)
    assert len(rules.list_windows()) == 6


def test_unique_index_rejects_second_active_appointment(sql_ledger):
    first = sql_ledger.insert_if_absent(_new(time(9, 0)))
    second = sql_ledger.insert_if_absent(_new(time(9, 0), service_id="iv-therapy"))

    assert first.outcome == InsertOutcome.inserted
    assert second.outcome == InsertOutcome.conflict
    assert len(sql_ledger.list_appointments()) == 1


def test_cancelled_appointment_frees_slot(sql_ledger):
    first = sql_ledger.insert_if_absent(_new(time(9, 0)))
    sql_ledger.update_status(first.appointment_id, AppointmentStatus.cancelled)

    second = sql_ledger.insert_if_absent(_new(time(9, 0)))

    assert second.inserted
    assert sql_ledger.booked_times(MONDAY) == {time(9, 0)}
    assert len(sql_ledger.list_appointments()) == 2


def test_finished_appointment_frees_slot(sql_ledger):
    first = sql_ledger.insert_if_absent(_new(time(10, 0)))
    sql_ledger.update_status(first.appointment_id, AppointmentStatus.finished)

    assert sql_ledger.booked_times(MONDAY) == set()


def test_reactivating_into_taken_slot_is_a_conflict(sql_ledger):
    first = sql_ledger.insert_if_absent(_new(time(9, 0)))
    sql_ledger.update_status(first.appointment_id, AppointmentStatus.cancelled)
    sql_ledger.insert_if_absent(_new(time(9, 0)))

    with pytest.raises(SlotConflictError):
        sql_ledger.update_status(first.appointment_id, AppointmentStatus.confirmed)

    assert sql_ledger.get_appointment(first.appointment_id).status == AppointmentStatus.cancelled


def test_update_status_of_missing_appointment_returns_none(sql_ledger):
    assert sql_ledger.update_status("missing", AppointmentStatus.confirmed) is None


def test_links_and_delete(sql_ledger):
    result = sql_ledger.insert_if_absent(_new(time(9, 0)))
    sql_ledger.attach_services(result.appointment_id, ["wound-care", "iv-therapy", "wound-care"])

    assert sorted(sql_ledger.linked_service_ids(result.appointment_id)) == ["iv-therapy", "wound-care"]
    assert sql_ledger.delete_appointment(result.appointment_id) is True
    assert sql_ledger.linked_service_ids(result.appointment_id) == []
    assert sql_ledger.delete_appointment(result.appointment_id) is False


def test_status_counts_cover_every_status(sql_ledger):
    a = sql_ledger.insert_if_absent(_new(time(9, 0)))
    sql_ledger.insert_if_absent(_new(time(9, 30)))
    sql_ledger.update_status(a.appointment_id, AppointmentStatus.in_progress)

    counts = sql_ledger.status_counts()

    assert counts[AppointmentStatus.in_progress] == 1
    assert counts[AppointmentStatus.pending] == 1
    assert counts[AppointmentStatus.cancelled] == 0
    assert len(sql_ledger.list_appointments(AppointmentStatus.pending)) == 1


def test_commit_against_database(sql_ledger, sql_catalog):
    sink = LoggingNotificationSink()
    committer = BookingCommitter(ledger=sql_ledger, catalog=sql_catalog, notifier=NotifyUseCase(sink))

    first = committer.commit(["wound-care", "iv-therapy"], MONDAY, time(9, 0), CONTACT)
    second = committer.commit(["vital-signs"], MONDAY, time(9, 0), CONTACT)

    assert first.outcome == CommitOutcome.booked
    assert second.outcome == CommitOutcome.unique_conflict
    assert sorted(sql_ledger.linked_service_ids(first.appointment_id)) == ["iv-therapy", "wound-care"]
    assert len(sink.events) == 1


def test_concurrent_commits_against_database_book_once(sql_ledger, sql_catalog):
    """Racing clients each use their own connection; the partial unique index admits one."""
    committer = BookingCommitter(
        ledger=sql_ledger, catalog=sql_catalog, notifier=NotifyUseCase(LoggingNotificationSink())
    )
    workers = 4
    barrier = threading.Barrier(workers)
    outcomes = []
    outcomes_lock = threading.Lock()

    def book():
        barrier.wait()
        result = committer.commit(["wound-care"], MONDAY, time(11, 0), CONTACT)
        with outcomes_lock:
            outcomes.append(result.outcome)

    threads = [threading.Thread(target=book) for _ in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert outcomes.count(CommitOutcome.booked) == 1
    assert outcomes.count(CommitOutcome.unique_conflict) == workers - 1
    assert sql_ledger.booked_times(MONDAY) == {time(11, 0)}
    assert len(sql_ledger.list_appointments()) == 1


def test_failed_link_insert_leaves_no_orphan(sql_ledger):
    """A service the database does not know breaks the link insert; the appointment is removed."""
    catalog = ServiceCatalogStore(
        {
            "wound-care": ServiceItem(id="wound-care", name="Wound Care", price_cents=1, duration_mins=45),
            "ghost": ServiceItem(id="ghost", name="Ghost", price_cents=1, duration_mins=30),
        }
    )
    committer = BookingCommitter(
        ledger=sql_ledger, catalog=catalog, notifier=NotifyUseCase(LoggingNotificationSink())
    )

    result = committer.commit(["wound-care", "ghost"], MONDAY, time(9, 0), CONTACT)

    assert result.outcome == CommitOutcome.partial_failure
    assert sql_ledger.list_appointments() == []
    assert sql_ledger.booked_times(MONDAY) == set()


def test_slot_interval_setting_drives_time_options(session_factory, sql_ledger, sql_catalog):
    rules = SqlCalendarRules(session_factory)
    availability = AvailabilityUseCase(rules=rules, ledger=sql_ledger, catalog=sql_catalog)
    assert availability.resolve_slot_interval() == 30

    rules.set_slot_interval(60)
    options = availability.time_options(MONDAY, ["vital-signs"])

    assert options.slot_interval == 60
    assert options.times[0] == time(9, 0)
    assert options.times[1] == time(10, 0)
    assert options.times[-1] == time(16, 0)


def test_blocked_dates_are_unique_and_removable(session_factory):
    rules = SqlCalendarRules(session_factory)
    first = rules.add_blocked_date(MONDAY, "Holiday")
    again = rules.add_blocked_date(MONDAY, "Duplicate")

    assert again.id == first.id
    assert [b.date for b in rules.list_blocked_dates()] == [MONDAY]
    assert rules.delete_blocked_date(first.id) is True
    assert rules.list_blocked_dates() == []
