from __future__ import annotations

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.orm import Session

from app.auth.identity import Identity
from app.core.database import get_db
from app.dependencies.auth import get_current_identity
from app.schemas.common import Envelope, MessageOut, ok
from app.schemas.cv import (
    CVCreate,
    CVDetailOut,
    CVOut,
    CVStatisticsOut,
    CVUpdate,
    DuplicateIn,
    cv_fields,
)
from app.services import cvs as cv_service

router = APIRouter(prefix="/cvs", tags=["cvs"], dependencies=[Depends(get_current_identity)])


@router.get("/statistics", response_model=Envelope[CVStatisticsOut])
def cv_statistics(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    return ok(cv_service.cv_statistics(db, identity.user_id))


@router.get("/default", response_model=Envelope[CVOut])
def get_default_cv(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    return ok(cv_service.get_default_cv(db, identity.user_id))


@router.post("/", response_model=Envelope[CVOut], status_code=status.HTTP_201_CREATED)
def create_cv(
    payload: CVCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    cv = cv_service.create_cv(db, identity.user_id, cv_fields(payload))
    return ok(cv, "CV created successfully")


@router.get("/", response_model=Envelope[list[CVOut]])
def list_cvs(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    return ok(cv_service.list_cvs(db, identity.user_id))


@router.get("/{cv_id}", response_model=Envelope[CVDetailOut])
def get_cv(
    cv_id: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    return ok(cv_service.get_cv_for_user(db, cv_id, identity.user_id))


@router.put("/{cv_id}", response_model=Envelope[CVOut])
def update_cv(
    cv_id: str,
    payload: CVUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    cv = cv_service.update_cv(db, cv_id, identity.user_id, cv_fields(payload))
    return ok(cv, "CV updated successfully")


@router.patch("/{cv_id}/default", response_model=Envelope[CVOut])
def set_default_cv(
    cv_id: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    cv = cv_service.set_default_cv(db, cv_id, identity.user_id)
    return ok(cv, "Default CV updated successfully")


@router.post("/{cv_id}/duplicate", response_model=Envelope[CVOut], status_code=status.HTTP_201_CREATED)
def duplicate_cv(
    cv_id: str,
    payload: DuplicateIn | None = Body(default=None),
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    title = payload.title if payload else None
    cv = cv_service.duplicate_cv(db, cv_id, identity.user_id, title)
    return ok(cv, "CV duplicated successfully")


@router.delete("/{cv_id}", response_model=MessageOut)
def delete_cv(
    cv_id: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    cv_service.delete_cv(db, cv_id, identity.user_id)
    return ok(message="CV deleted successfully")
