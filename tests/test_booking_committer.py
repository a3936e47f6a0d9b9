"""
Tests for the booking commit path.
"""

from __future__ import annotations

import threading
from datetime import time

from app.application.exceptions import LedgerError
from app.application.ports.notification_sink import NotificationSinkPort
from app.application.use_cases.booking import BookingCommitter, CommitOutcome
from app.application.use_cases.notify import NotifyUseCase
from app.domain.entities.appointment import AppointmentStatus, Contact
from app.domain.entities.notification import NotificationType
from app.infrastructure.store.memory_ledger import MemoryReservationLedger

from conftest import MONDAY


class _LinkFailingLedger(MemoryReservationLedger):
    def attach_services(self, appointment_id, service_ids):
        raise LedgerError("link table unavailable")


class _InsertFailingLedger(MemoryReservationLedger):
    def insert_if_absent(self, appointment):
        raise LedgerError("connection reset")


class _BrokenSink(NotificationSinkPort):
    def emit(self, event):
        raise RuntimeError("webhook down")


def test_commit_books_slot_and_links_services(committer, ledger, sink, contact):
    result = committer.commit(["wound", "iv"], MONDAY, time(9, 0), contact)

    assert result.ok
    assert result.outcome == CommitOutcome.booked
    appointment = ledger.get_appointment(result.appointment_id)
    assert appointment.status == AppointmentStatus.pending
    assert appointment.service_id == "wound"
    assert ledger.linked_service_ids(result.appointment_id) == ["wound", "iv"]
    assert ledger.booked_times(MONDAY) == {time(9, 0)}


def test_commit_emits_booking_confirmed_with_totals(committer, sink, contact):
    result = committer.commit(["wound", "vitals"], MONDAY, time(10, 0), contact)

    assert result.ok
    assert len(sink.events) == 1
    event = sink.events[0]
    assert event.type == NotificationType.booking_confirmed
    assert event.service_names == ["Wound Care", "Vital Signs"]
    assert event.total_price_cents == 170000
    assert event.total_duration_mins == 75


def test_missing_fields_are_reported_without_writing(committer, ledger):
    result = committer.commit([], MONDAY, None, Contact(full_name=" ", phone=None))

    assert result.outcome == CommitOutcome.precondition_failed
    assert result.missing_fields == ["service_ids", "time", "full_name", "phone"]
    assert ledger.list_appointments() == []


def test_inactive_service_is_a_precondition_failure(committer, ledger, contact):
    result = committer.commit(["wound", "retired"], MONDAY, time(9, 0), contact)

    assert result.outcome == CommitOutcome.precondition_failed
    assert "service:retired" in result.missing_fields
    assert ledger.list_appointments() == []


def test_second_commit_for_same_slot_is_a_conflict(committer, ledger, contact):
    first = committer.commit(["wound"], MONDAY, time(9, 0), contact)
    second = committer.commit(["vitals"], MONDAY, time(9, 0), Contact(full_name="Other", phone="123"))

    assert first.ok
    assert second.outcome == CommitOutcome.unique_conflict
    assert second.should_reselect_time
    assert second.message == "That slot was just booked, please choose another time."
    assert len(ledger.list_appointments()) == 1


def test_concurrent_commits_for_one_slot_book_exactly_once(committer, ledger, contact):
    """Several clients racing for the same slot: one wins, the rest see a conflict."""
    workers = 8
    barrier = threading.Barrier(workers)
    results = []
    results_lock = threading.Lock()

    def book():
        barrier.wait()
        result = committer.commit(["wound"], MONDAY, time(11, 0), contact)
        with results_lock:
            results.append(result.outcome)

    threads = [threading.Thread(target=book) for _ in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert results.count(CommitOutcome.booked) == 1
    assert results.count(CommitOutcome.unique_conflict) == workers - 1
    active = [a for a in ledger.list_appointments() if a.status.is_active]
    assert len(active) == 1


def test_cancelled_appointment_frees_its_slot(committer, ledger, contact):
    first = committer.commit(["wound"], MONDAY, time(9, 0), contact)
    ledger.update_status(first.appointment_id, AppointmentStatus.cancelled)

    second = committer.commit(["wound"], MONDAY, time(9, 0), contact)

    assert second.ok
    assert len(ledger.list_appointments()) == 2


def test_link_failure_removes_the_appointment(catalog, sink, contact):
    ledger = _LinkFailingLedger()
    committer = BookingCommitter(ledger=ledger, catalog=catalog, notifier=NotifyUseCase(sink))

    result = committer.commit(["wound"], MONDAY, time(9, 0), contact)

    assert result.outcome == CommitOutcome.partial_failure
    assert result.message == "Booking failed while attaching services. Please try again."
    assert ledger.list_appointments() == []
    assert ledger.booked_times(MONDAY) == set()
    assert sink.events == []


def test_ledger_error_on_insert_is_a_failure(catalog, sink, contact):
    committer = BookingCommitter(ledger=_InsertFailingLedger(), catalog=catalog, notifier=NotifyUseCase(sink))

    result = committer.commit(["wound"], MONDAY, time(9, 0), contact)

    assert result.outcome == CommitOutcome.failed
    assert not result.ok


def test_notification_failure_does_not_undo_booking(ledger, catalog, contact):
    committer = BookingCommitter(ledger=ledger, catalog=catalog, notifier=NotifyUseCase(_BrokenSink()))

    result = committer.commit(["wound"], MONDAY, time(9, 0), contact)

    assert result.ok
    assert ledger.get_appointment(result.appointment_id) is not None


def test_time_is_truncated_to_minute(committer, ledger, contact):
    result = committer.commit(["wound"], MONDAY, time(9, 0, 42), contact)

    assert ledger.get_appointment(result.appointment_id).time == time(9, 0)
