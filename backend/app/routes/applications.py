from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.auth.identity import Identity
from app.core.database import get_db
from app.dependencies.auth import get_current_identity
from app.models.application import ApplicationStatus
from app.schemas.application import (
    ApplicationCreate,
    ApplicationDetailOut,
    ApplicationListOut,
    ApplicationOut,
    ApplicationStatisticsOut,
    ApplicationUpdate,
    KanbanOut,
    StatusUpdate,
)
from app.schemas.common import Envelope, MessageOut, ok
from app.services import applications as application_service
from app.services.applications import ApplicationFilters

router = APIRouter(
    prefix="/applications",
    tags=["applications"],
    dependencies=[Depends(get_current_identity)],
)


@router.get("/statistics", response_model=Envelope[ApplicationStatisticsOut])
def application_statistics(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    return ok(application_service.application_statistics(db, identity.user_id))


@router.get("/kanban", response_model=Envelope[KanbanOut])
def kanban(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    return ok(application_service.applications_by_status(db, identity.user_id))


@router.post("/", response_model=Envelope[ApplicationOut], status_code=status.HTTP_201_CREATED)
def create_application(
    payload: ApplicationCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    row = application_service.create_application(db, identity.user_id, payload.model_dump())
    return ok(row, "Application created successfully")


@router.get("/", response_model=Envelope[ApplicationListOut])
def list_applications(
    status_filter: ApplicationStatus | None = Query(default=None, alias="status"),
    company_name: str | None = Query(default=None, alias="companyName"),
    position_title: str | None = Query(default=None, alias="positionTitle"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    filters = ApplicationFilters(
        status=status_filter,
        company_name=company_name,
        position_title=position_title,
    )
    result = application_service.list_applications(db, identity.user_id, filters, page=page, limit=limit)
    return ok({"applications": result.items, "pagination": result.pagination()})


@router.get("/{application_id}", response_model=Envelope[ApplicationDetailOut])
def get_application(
    application_id: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    return ok(application_service.get_application_for_user(db, application_id, identity.user_id))


@router.put("/{application_id}", response_model=Envelope[ApplicationOut])
def update_application(
    application_id: str,
    payload: ApplicationUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    data = payload.model_dump(exclude_unset=True)
    row = application_service.update_application(db, application_id, identity.user_id, data)
    return ok(row, "Application updated successfully")


@router.patch("/{application_id}/status", response_model=Envelope[ApplicationOut])
def update_application_status(
    application_id: str,
    payload: StatusUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    row = application_service.update_status(db, application_id, identity.user_id, payload.status)
    return ok(row, "Application status updated successfully")


@router.delete("/{application_id}", response_model=MessageOut)
def delete_application(
    application_id: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    application_service.delete_application(db, application_id, identity.user_id)
    return ok(message="Application deleted successfully")
