from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from app.api.security import require_admin
from app.api.v1.schemas import (
    AppointmentSchema,
    AvailabilityWindowSchema,
    BlockedDateSchema,
    StatusChangeSchema,
)
from app.application.exceptions import (
    AppointmentNotFoundError,
    InvalidStatusError,
    LedgerError,
    SlotConflictError,
)
from app.application.ports.calendar_rules import CalendarRulesPort
from app.application.use_cases.update_status import UpdateAppointmentStatusUseCase
from app.wiring.dependencies import get_calendar_rules, get_update_status_use_case

router = APIRouter(dependencies=[Depends(require_admin)])
logger = logging.getLogger(__name__)


@router.post("/appointments/status")
def set_appointment_status(
    req: StatusChangeSchema,
    uc: UpdateAppointmentStatusUseCase = Depends(get_update_status_use_case),
):
    try:
        updated = uc.execute(req.id, req.status)
    except InvalidStatusError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except AppointmentNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SlotConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except LedgerError as e:
        logger.exception("Status update failed", extra={"appointment_id": req.id, "error": str(e)})
        raise HTTPException(status_code=500, detail=str(e))
    return {"ok": True, "status": updated.status.value}


@router.get("/appointments", response_model=list[AppointmentSchema])
def list_appointments(
    status: str | None = Query(None),
    uc: UpdateAppointmentStatusUseCase = Depends(get_update_status_use_case),
):
    try:
        rows = uc.list_appointments(status)
    except InvalidStatusError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return [AppointmentSchema.from_entity(a) for a in rows]


@router.get("/appointments/status-counts")
def status_counts(uc: UpdateAppointmentStatusUseCase = Depends(get_update_status_use_case)) -> dict[str, int]:
    return uc.status_counts()


@router.get("/availability", response_model=list[AvailabilityWindowSchema])
def list_windows(rules: CalendarRulesPort = Depends(get_calendar_rules)):
    return [AvailabilityWindowSchema.from_entity(w) for w in rules.list_windows()]


@router.post("/availability", response_model=AvailabilityWindowSchema, status_code=201)
def add_window(req: AvailabilityWindowSchema, rules: CalendarRulesPort = Depends(get_calendar_rules)):
    try:
        window = rules.add_window(req.day_of_week, req.start_time, req.end_time)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return AvailabilityWindowSchema.from_entity(window)


@router.delete("/availability/{window_id}", status_code=204)
def delete_window(window_id: str, rules: CalendarRulesPort = Depends(get_calendar_rules)):
    if not rules.delete_window(window_id):
        raise HTTPException(status_code=404, detail="Availability window not found")
    return Response(status_code=204)


@router.get("/blocked-dates", response_model=list[BlockedDateSchema])
def list_blocked_dates(rules: CalendarRulesPort = Depends(get_calendar_rules)):
    return [BlockedDateSchema.from_entity(b) for b in rules.list_blocked_dates()]


@router.post("/blocked-dates", response_model=BlockedDateSchema, status_code=201)
def add_blocked_date(req: BlockedDateSchema, rules: CalendarRulesPort = Depends(get_calendar_rules)):
    return BlockedDateSchema.from_entity(rules.add_blocked_date(req.date, req.note))


@router.delete("/blocked-dates/{blocked_id}", status_code=204)
def delete_blocked_date(blocked_id: str, rules: CalendarRulesPort = Depends(get_calendar_rules)):
    if not rules.delete_blocked_date(blocked_id):
        raise HTTPException(status_code=404, detail="Blocked date not found")
    return Response(status_code=204)
