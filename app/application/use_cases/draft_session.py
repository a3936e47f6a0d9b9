from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from datetime import date, datetime, time

from app.application.ports.draft_store import DraftStorePort
from app.application.use_cases.availability import AvailabilityUseCase
from app.application.use_cases.booking import BookingCommitter, CommitOutcome, CommitResult
from app.application.utils.clock import truncate_to_minute
from app.application.utils.draft_migration import draft_from_document, draft_to_document
from app.domain.entities.booking_draft import BookingDraft
from app.domain.entities.service_item import ServiceItem

DRAFT_KEY = "booking_draft"

TIME_CLEARED_NOTICE = (
    "Your previously selected time no longer fits your selected services. Please choose another slot."
)
SLOT_TAKEN_NOTICE = "That slot was just booked, please choose another time."

# Shared across use case instances, which are built per request
_submit_locks: dict[str, threading.Lock] = {}
_submit_locks_guard = threading.Lock()


def _submit_lock(key: str) -> threading.Lock:
    with _submit_locks_guard:
        return _submit_locks.setdefault(key, threading.Lock())


def _already_submitted() -> CommitResult:
    return CommitResult(
        outcome=CommitOutcome.already_submitted,
        message="This booking has already been submitted.",
    )


@dataclass(frozen=True)
class DraftView:
    draft: BookingDraft
    time_options: list[time]
    notice: str | None = None


class DraftSessionUseCase:
    """Resumable in-progress booking for one client session."""

    def __init__(
        self,
        store: DraftStorePort,
        availability: AvailabilityUseCase,
        committer: BookingCommitter,
    ) -> None:
        self._store = store
        self._availability = availability
        self._committer = committer
        self._logger = logging.getLogger(__name__)

    def _key(self, session_id: str) -> str:
        return f"{DRAFT_KEY}_{session_id}"

    def load(self, session_id: str) -> BookingDraft:
        """Load the draft, upgrading older document shapes once and persisting the result."""
        raw = self._store.load(self._key(session_id))
        draft = draft_from_document(raw or {})
        if raw is not None and raw != draft_to_document(draft):
            self._save(session_id, draft)
        return draft

    def _save(self, session_id: str, draft: BookingDraft) -> BookingDraft:
        self._store.save(self._key(session_id), draft_to_document(draft))
        return draft

    def toggle_service(self, session_id: str, service: ServiceItem) -> BookingDraft:
        draft = self.load(session_id)
        names = dict(zip(draft.service_ids, draft.service_names))
        ids = list(draft.service_ids)

        if service.id in names:
            ids.remove(service.id)
            names.pop(service.id)
        else:
            ids.append(service.id)
            names[service.id] = service.name

        next_names = []
        for service_id in ids:
            name = names.get(service_id)
            if not name:
                known = self._availability.selected_services([service_id])
                name = known[0].name if known else ""
            next_names.append(name)

        primary_id = ids[0] if ids else None
        primary_name = next_names[0] if next_names else None
        return self._save(
            session_id,
            replace(
                draft,
                service_ids=tuple(ids),
                service_names=tuple(next_names),
                service_id=primary_id,
                service_name=primary_name or None,
            ),
        )

    def select_date(self, session_id: str, on_date: date) -> BookingDraft:
        draft = self.load(session_id)
        return self._save(session_id, replace(draft, date=on_date))

    def select_time(self, session_id: str, at_time: time | None) -> BookingDraft:
        draft = self.load(session_id)
        value = truncate_to_minute(at_time) if at_time else None
        return self._save(session_id, replace(draft, time=value))

    def update_contact(
        self,
        session_id: str,
        full_name: str | None = None,
        phone: str | None = None,
        email: str | None = None,
        address: str | None = None,
    ) -> BookingDraft:
        draft = self.load(session_id)
        changes = {
            key: value
            for key, value in (
                ("full_name", full_name),
                ("phone", phone),
                ("email", email),
                ("address", address),
            )
            if value is not None
        }
        return self._save(session_id, replace(draft, **changes))

    def refresh(self, session_id: str) -> DraftView:
        """
        Recompute feasible times for the draft and clear a chosen time that
        no longer fits.
        """
        draft = self.load(session_id)
        if not draft.date:
            return DraftView(draft=draft, time_options=[])

        options = self._availability.time_options(draft.date, list(draft.service_ids))
        if draft.time and draft.time not in options.times:
            self._logger.info(
                "Clearing selected time that is no longer feasible",
                extra={"session_id": session_id, "date": draft.date.isoformat(), "time": draft.time.strftime("%H:%M")},
            )
            draft = self._save(session_id, replace(draft, time=None))
            return DraftView(draft=draft, time_options=options.times, notice=TIME_CLEARED_NOTICE)
        return DraftView(draft=draft, time_options=options.times)

    def submit(self, session_id: str) -> CommitResult:
        """Commit the draft. Overlapping submits for one session run one at a time."""
        with _submit_lock(self._key(session_id)):
            return self._submit(session_id)

    def _submit(self, session_id: str) -> CommitResult:
        draft = self.load(session_id)
        if draft.submitted:
            return _already_submitted()

        service_ids = list(draft.service_ids) or ([draft.service_id] if draft.service_id else [])
        result = self._committer.commit(service_ids, draft.date, draft.time, draft.contact)

        if result.outcome == CommitOutcome.booked:
            self._save(
                session_id,
                replace(draft, submitted=True, submitted_at=datetime.now().isoformat(timespec="seconds")),
            )
            return result

        if result.outcome == CommitOutcome.unique_conflict:
            # Another worker may have booked this draft meanwhile
            if self.load(session_id).submitted:
                return _already_submitted()
            view = self.refresh(session_id)
            return replace(result, time_options=view.time_options, message=SLOT_TAKEN_NOTICE)

        return result

    def abandon(self, session_id: str) -> None:
        self._store.delete(self._key(session_id))
        self._logger.info("Draft abandoned", extra={"session_id": session_id})
