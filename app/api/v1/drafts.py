from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response

from app.api.v1.booking import commit_response
from app.api.v1.schemas import (
    ContactSchema,
    DraftSchema,
    DraftViewSchema,
    SelectDateSchema,
    SelectTimeSchema,
)
from app.application.ports.service_catalog import ServiceCatalogPort
from app.application.use_cases.draft_session import DraftSessionUseCase
from app.wiring.dependencies import get_draft_session_use_case, get_service_catalog

router = APIRouter()


@router.get("/drafts/{session_id}", response_model=DraftSchema)
def get_draft(session_id: str, uc: DraftSessionUseCase = Depends(get_draft_session_use_case)):
    return DraftSchema.from_entity(uc.load(session_id))


@router.get("/drafts/{session_id}/view", response_model=DraftViewSchema)
def view_draft(session_id: str, uc: DraftSessionUseCase = Depends(get_draft_session_use_case)):
    view = uc.refresh(session_id)
    return DraftViewSchema(draft=DraftSchema.from_entity(view.draft), time_options=view.time_options, notice=view.notice)


@router.post("/drafts/{session_id}/services/{service_id}", response_model=DraftSchema)
def toggle_service(
    session_id: str,
    service_id: str,
    uc: DraftSessionUseCase = Depends(get_draft_session_use_case),
    catalog: ServiceCatalogPort = Depends(get_service_catalog),
):
    service = catalog.get_service(service_id)
    if service is None or not service.active:
        raise HTTPException(status_code=404, detail="Service not found")
    return DraftSchema.from_entity(uc.toggle_service(session_id, service))


@router.put("/drafts/{session_id}/date", response_model=DraftSchema)
def select_date(
    session_id: str,
    req: SelectDateSchema,
    uc: DraftSessionUseCase = Depends(get_draft_session_use_case),
):
    return DraftSchema.from_entity(uc.select_date(session_id, req.date))


@router.put("/drafts/{session_id}/time", response_model=DraftSchema)
def select_time(
    session_id: str,
    req: SelectTimeSchema,
    uc: DraftSessionUseCase = Depends(get_draft_session_use_case),
):
    return DraftSchema.from_entity(uc.select_time(session_id, req.time))


@router.put("/drafts/{session_id}/contact", response_model=DraftSchema)
def update_contact(
    session_id: str,
    req: ContactSchema,
    uc: DraftSessionUseCase = Depends(get_draft_session_use_case),
):
    return DraftSchema.from_entity(uc.update_contact(session_id, **req.model_dump()))


@router.post("/drafts/{session_id}/submit")
def submit_draft(session_id: str, uc: DraftSessionUseCase = Depends(get_draft_session_use_case)):
    return commit_response(uc.submit(session_id))


@router.delete("/drafts/{session_id}", status_code=204)
def abandon_draft(session_id: str, uc: DraftSessionUseCase = Depends(get_draft_session_use_case)):
    uc.abandon(session_id)
    return Response(status_code=204)
