from __future__ import annotations

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.orm import Session

from app.auth.identity import Identity
from app.core.database import get_db
from app.dependencies.auth import get_current_identity
from app.schemas.common import Envelope, MessageOut, ok
from app.schemas.cover_letter import (
    CoverLetterCreate,
    CoverLetterOut,
    CoverLetterStatisticsOut,
    CoverLetterUpdate,
    GenerateIn,
    RefineIn,
)
from app.schemas.cv import DuplicateIn
from app.services import cover_letters as cover_letter_service
from app.services.ai_drafting import CoverLetterDrafter, get_cover_letter_drafter

router = APIRouter(
    prefix="/anschreiben",
    tags=["anschreiben"],
    dependencies=[Depends(get_current_identity)],
)


@router.get("/statistics", response_model=Envelope[CoverLetterStatisticsOut])
def cover_letter_statistics(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    return ok(cover_letter_service.cover_letter_statistics(db, identity.user_id))


@router.post("/generate", response_model=Envelope[CoverLetterOut], status_code=status.HTTP_201_CREATED)
def generate_cover_letter(
    payload: GenerateIn,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
    drafter: CoverLetterDrafter = Depends(get_cover_letter_drafter),
):
    letter = cover_letter_service.generate_cover_letter(
        db, identity.user_id, payload.model_dump(), drafter
    )
    return ok(letter, "Cover letter generated successfully")


@router.get("/application/{application_id}", response_model=Envelope[list[CoverLetterOut]])
def list_for_application(
    application_id: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    return ok(cover_letter_service.list_for_application(db, application_id, identity.user_id))


@router.post("/", response_model=Envelope[CoverLetterOut], status_code=status.HTTP_201_CREATED)
def create_cover_letter(
    payload: CoverLetterCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    letter = cover_letter_service.create_cover_letter(db, identity.user_id, payload.model_dump())
    return ok(letter, "Cover letter created successfully")


@router.get("/", response_model=Envelope[list[CoverLetterOut]])
def list_cover_letters(
    is_template: bool | None = Query(default=None, alias="isTemplate"),
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    return ok(cover_letter_service.list_cover_letters(db, identity.user_id, is_template=is_template))


@router.get("/{cover_letter_id}", response_model=Envelope[CoverLetterOut])
def get_cover_letter(
    cover_letter_id: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    return ok(cover_letter_service.get_cover_letter_for_user(db, cover_letter_id, identity.user_id))


@router.put("/{cover_letter_id}", response_model=Envelope[CoverLetterOut])
def update_cover_letter(
    cover_letter_id: str,
    payload: CoverLetterUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    data = payload.model_dump(exclude_unset=True)
    letter = cover_letter_service.update_cover_letter(db, cover_letter_id, identity.user_id, data)
    return ok(letter, "Cover letter updated successfully")


@router.post(
    "/{cover_letter_id}/duplicate",
    response_model=Envelope[CoverLetterOut],
    status_code=status.HTTP_201_CREATED,
)
def duplicate_cover_letter(
    cover_letter_id: str,
    payload: DuplicateIn | None = Body(default=None),
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    title = payload.title if payload else None
    letter = cover_letter_service.duplicate_cover_letter(db, cover_letter_id, identity.user_id, title)
    return ok(letter, "Cover letter duplicated successfully")


@router.post("/{cover_letter_id}/refine", response_model=Envelope[CoverLetterOut])
def refine_cover_letter(
    cover_letter_id: str,
    payload: RefineIn,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
    drafter: CoverLetterDrafter = Depends(get_cover_letter_drafter),
):
    letter = cover_letter_service.refine_cover_letter(
        db, cover_letter_id, identity.user_id, payload.improvement_instructions, drafter
    )
    return ok(letter, "Cover letter refined successfully")


@router.delete("/{cover_letter_id}", response_model=MessageOut)
def delete_cover_letter(
    cover_letter_id: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    cover_letter_service.delete_cover_letter(db, cover_letter_id, identity.user_id)
    return ok(message="Cover letter deleted successfully")
