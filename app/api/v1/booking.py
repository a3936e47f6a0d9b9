from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from app.api.v1.schemas import (
    BookingRequestSchema,
    CommitResponseSchema,
    DateOptionsSchema,
    ServiceSchema,
    TimeOptionsSchema,
)
from app.application.use_cases.availability import AvailabilityUseCase
from app.application.use_cases.booking import BookingCommitter, CommitOutcome, CommitResult
from app.domain.entities.appointment import Contact
from app.wiring.dependencies import get_availability_use_case, get_booking_committer

router = APIRouter()

_OUTCOME_STATUS = {
    CommitOutcome.booked: 201,
    CommitOutcome.precondition_failed: 422,
    CommitOutcome.unique_conflict: 409,
    CommitOutcome.already_submitted: 409,
    CommitOutcome.partial_failure: 503,
    CommitOutcome.failed: 503,
}


def commit_response(result: CommitResult) -> JSONResponse:
    body = CommitResponseSchema(
        outcome=result.outcome,
        appointment_id=result.appointment_id,
        message=result.message,
        missing_fields=result.missing_fields,
        time_options=result.time_options,
    )
    return JSONResponse(status_code=_OUTCOME_STATUS[result.outcome], content=body.model_dump(mode="json"))


@router.get("/services", response_model=list[ServiceSchema])
def list_services(uc: AvailabilityUseCase = Depends(get_availability_use_case)):
    return [ServiceSchema.from_entity(s) for s in uc.list_services()]


@router.get("/availability/dates", response_model=DateOptionsSchema)
def date_options(
    start: date | None = Query(None),
    uc: AvailabilityUseCase = Depends(get_availability_use_case),
):
    return DateOptionsSchema(dates=uc.date_options(start or date.today()))


@router.get("/availability/slots", response_model=TimeOptionsSchema)
def time_options(
    on_date: date = Query(..., alias="date"),
    service_ids: list[str] | None = Query(None),
    uc: AvailabilityUseCase = Depends(get_availability_use_case),
):
    options = uc.time_options(on_date, service_ids or [])
    return TimeOptionsSchema(
        date=options.date,
        times=options.times,
        slot_interval=options.slot_interval,
        total_duration_mins=options.total_duration_mins,
    )


@router.post("/bookings", response_model=CommitResponseSchema)
def create_booking(
    req: BookingRequestSchema,
    committer: BookingCommitter = Depends(get_booking_committer),
):
    result = committer.commit(
        service_ids=req.service_ids,
        on_date=req.date,
        at_time=req.time,
        contact=Contact(**req.contact.model_dump()),
    )
    return commit_response(result)
