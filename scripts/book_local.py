#!/usr/bin/env python3
"""
Local booking walkthrough (no HTTP).

Usage:
  python3 scripts/book_local.py --date 2026-03-02 --services wound-care iv-therapy

What it does:
- Builds the in-memory calendar, catalog and ledger
- Prints the feasible start times for the chosen services and date
- Books the first time (or --time) through the draft session and prints the outcome
- With --race, books the same slot twice to show the conflict path
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.application.use_cases.availability import AvailabilityUseCase
from app.application.use_cases.booking import BookingCommitter
from app.application.use_cases.draft_session import DraftSessionUseCase
from app.application.use_cases.notify import NotifyUseCase
from app.application.utils.clock import format_clock, parse_clock
from app.infrastructure.calendar.memory_rules import MemoryCalendarRules
from app.infrastructure.knowledge.service_catalog_store import ServiceCatalogStore
from app.infrastructure.notifications.mock_sink import LoggingNotificationSink
from app.infrastructure.store.memory_draft_store import MemoryDraftStore
from app.infrastructure.store.memory_ledger import MemoryReservationLedger


def _build(interval: int | None) -> tuple[DraftSessionUseCase, ServiceCatalogStore, LoggingNotificationSink]:
    catalog = ServiceCatalogStore()
    ledger = MemoryReservationLedger()
    sink = LoggingNotificationSink()
    availability = AvailabilityUseCase(
        rules=MemoryCalendarRules(slot_interval=interval),
        ledger=ledger,
        catalog=catalog,
    )
    committer = BookingCommitter(ledger=ledger, catalog=catalog, notifier=NotifyUseCase(sink))
    return DraftSessionUseCase(MemoryDraftStore(), availability, committer), catalog, sink


def _book(session: DraftSessionUseCase, catalog: ServiceCatalogStore, session_id: str, args) -> None:
    for service_id in args.services:
        service = catalog.get_service(service_id)
        if service is None:
            print(f"Unknown service: {service_id}")
            continue
        session.toggle_service(session_id, service)
    session.select_date(session_id, args.date)
    session.update_contact(session_id, full_name=args.name, phone=args.phone)

    view = session.refresh(session_id)
    times = [format_clock(t) for t in view.time_options]
    print(f"[{session_id}] options: {', '.join(times) or 'none'}")
    if not view.time_options:
        return

    chosen = parse_clock(args.time) if args.time else view.time_options[0]
    session.select_time(session_id, chosen)
    result = session.submit(session_id)
    print(f"[{session_id}] {format_clock(chosen)} -> {result.outcome.value} {result.appointment_id or ''}")
    if result.message:
        print(f"[{session_id}] {result.message}")
    if result.time_options is not None:
        print(f"[{session_id}] new options: {', '.join(format_clock(t) for t in result.time_options)}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Book a slot against the in-memory adapters.")
    parser.add_argument("--date", type=date.fromisoformat, default=date.today())
    parser.add_argument("--services", nargs="+", default=["wound-care"])
    parser.add_argument("--time", default=None, help="HH:MM; defaults to the first free slot")
    parser.add_argument("--interval", type=int, default=None)
    parser.add_argument("--name", default="Juan Dela Cruz")
    parser.add_argument("--phone", default="+639170000000")
    parser.add_argument("--race", action="store_true", help="book the same slot from two sessions")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(name)s:%(message)s")

    session, catalog, sink = _build(args.interval)
    _book(session, catalog, "local-1", args)
    if args.race:
        if not args.time:
            first = session.load("local-1")
            args.time = format_clock(first.time) if first.time else None
        _book(session, catalog, "local-2", args)

    print(f"notifications emitted: {len(sink.events)}")


if __name__ == "__main__":
    main()
