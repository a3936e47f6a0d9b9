"""
Booking draft documents and their forward migration.

Drafts are stored as camelCase JSON documents so they stay readable by the
browser client that originally wrote them. Documents without a version tag
are the legacy single-service shape (version 1).
"""

from __future__ import annotations

from datetime import date, time
from typing import Any

from app.application.utils.clock import format_clock, parse_clock
from app.domain.entities.booking_draft import DRAFT_SCHEMA_VERSION, BookingDraft


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _upgrade_v1_to_v2(doc: dict[str, Any]) -> dict[str, Any]:
    upgraded = dict(doc)
    service_ids = _as_list(upgraded.get("serviceIds"))
    service_names = _as_list(upgraded.get("serviceNames"))

    # Promote the single legacy service into the list shape
    if not service_ids and upgraded.get("serviceId"):
        service_ids = [upgraded["serviceId"]]
        service_names = [upgraded["serviceName"]] if upgraded.get("serviceName") else []

    upgraded["serviceIds"] = service_ids
    upgraded["serviceNames"] = service_names
    upgraded["version"] = 2
    return upgraded


_MIGRATIONS = {
    1: _upgrade_v1_to_v2,
}


def migrate_draft(document: dict[str, Any] | None) -> dict[str, Any]:
    """Apply every pending migration step to a raw draft document."""
    doc = dict(document or {})
    version = doc.get("version")
    if not isinstance(version, int) or version < 1:
        version = 1
    while version < DRAFT_SCHEMA_VERSION:
        doc = _MIGRATIONS[version](doc)
        version = doc["version"]
    return doc


def _parse_date(value: Any) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        return None


def _parse_time(value: Any) -> time | None:
    if not value:
        return None
    try:
        return parse_clock(str(value))
    except ValueError:
        return None


def draft_from_document(document: dict[str, Any]) -> BookingDraft:
    doc = migrate_draft(document)
    # Client-held documents may carry any shape; non-lists count as empty
    service_ids = tuple(str(x) for x in _as_list(doc.get("serviceIds")) if x)
    names = [str(x) if x is not None else "" for x in _as_list(doc.get("serviceNames"))]
    # Names are positional companions of ids
    names = (names + [""] * len(service_ids))[: len(service_ids)]
    return BookingDraft(
        version=DRAFT_SCHEMA_VERSION,
        service_ids=service_ids,
        service_names=tuple(names),
        service_id=doc.get("serviceId") or (service_ids[0] if service_ids else None),
        service_name=doc.get("serviceName"),
        date=_parse_date(doc.get("date")),
        time=_parse_time(doc.get("time")),
        full_name=doc.get("fullName"),
        phone=doc.get("phone"),
        email=doc.get("email"),
        address=doc.get("address"),
        submitted=bool(doc.get("submitted", False)),
        submitted_at=doc.get("submittedAt"),
    )


def draft_to_document(draft: BookingDraft) -> dict[str, Any]:
    return {
        "version": draft.version,
        "serviceIds": list(draft.service_ids),
        "serviceNames": list(draft.service_names),
        "serviceId": draft.service_id,
        "serviceName": draft.service_name,
        "date": draft.date.isoformat() if draft.date else None,
        "time": format_clock(draft.time) if draft.time else None,
        "fullName": draft.full_name,
        "phone": draft.phone,
        "email": draft.email,
        "address": draft.address,
        "submitted": draft.submitted,
        "submittedAt": draft.submitted_at,
    }
