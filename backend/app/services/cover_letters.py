from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import desc
from sqlalchemy.orm import Session, joinedload

from app.core.errors import AIServiceNotConfigured, ValidationError
from app.models.application import Application
from app.models.cover_letter import CoverLetter
from app.services import ownership
from app.services.ai_drafting import CoverLetterDrafter, CoverLetterFacts

logger = logging.getLogger(__name__)

_FACT_FIELDS = (
    "job_description",
    "company_name",
    "position_title",
    "applicant_name",
    "applicant_email",
    "applicant_phone",
    "experience",
    "skills",
    "education",
    "motivation",
)


def generated_title(position_title: str, company_name: str) -> str:
    return f"Anschreiben - {position_title} bei {company_name}"


def get_cover_letter_for_user(db: Session, cover_letter_id: str, user_id: str) -> CoverLetter:
    letter = (
        ownership.cover_letters.query(db, user_id)
        .options(joinedload(CoverLetter.application).joinedload(Application.job))
        .filter(CoverLetter.id == cover_letter_id)
        .first()
    )
    if letter is None:
        raise ownership.cover_letters.not_found()
    return letter


def _ensure_application(db: Session, application_id: str | None, user_id: str) -> str | None:
    if application_id:
        ownership.applications.ensure_owned(db, application_id, user_id)
        return application_id
    return None


def generate_cover_letter(
    db: Session,
    user_id: str,
    data: dict[str, Any],
    drafter: CoverLetterDrafter,
) -> CoverLetter:
    """
    Draft a letter with the AI collaborator and store it as received.

    The application reference is checked before the (slow, paid) AI call.
    """
    if not drafter.is_configured:
        raise AIServiceNotConfigured()

    application_id = _ensure_application(db, data.get("application_id"), user_id)
    facts = CoverLetterFacts(**{k: data.get(k) for k in _FACT_FIELDS})
    content = drafter.generate_cover_letter(facts)

    letter = ownership.cover_letters.add(
        db,
        user_id,
        application_id=application_id,
        title=generated_title(facts.position_title, facts.company_name),
        content=content,
        is_template=bool(data.get("save_as_template")),
    )
    db.commit()
    db.refresh(letter)
    logger.info("Cover letter generated user_id=%s cover_letter_id=%s", user_id, letter.id)
    return letter


def create_cover_letter(db: Session, user_id: str, data: dict[str, Any]) -> CoverLetter:
    application_id = _ensure_application(db, data.get("application_id"), user_id)
    letter = ownership.cover_letters.add(
        db,
        user_id,
        application_id=application_id,
        title=data["title"].strip(),
        content=data["content"],
        is_template=bool(data.get("is_template")),
    )
    db.commit()
    db.refresh(letter)
    return letter


def list_cover_letters(db: Session, user_id: str, *, is_template: bool | None = None) -> list[CoverLetter]:
    qry = ownership.cover_letters.query(db, user_id).options(
        joinedload(CoverLetter.application).joinedload(Application.job)
    )
    if is_template is not None:
        qry = qry.filter(CoverLetter.is_template.is_(is_template))
    return qry.order_by(desc(CoverLetter.is_template), desc(CoverLetter.updated_at)).all()


def list_for_application(db: Session, application_id: str, user_id: str) -> list[CoverLetter]:
    ownership.applications.ensure_owned(db, application_id, user_id)
    return (
        ownership.cover_letters.query(db, user_id)
        .filter(CoverLetter.application_id == application_id)
        .order_by(desc(CoverLetter.created_at))
        .all()
    )


def update_cover_letter(db: Session, cover_letter_id: str, user_id: str, data: dict[str, Any]) -> CoverLetter:
    if not data:
        raise ValidationError("At least one field must be provided for update")

    letter = get_cover_letter_for_user(db, cover_letter_id, user_id)

    if data.get("title"):
        letter.title = data["title"].strip()
    if data.get("content"):
        letter.content = data["content"]
    if data.get("is_template") is not None:
        letter.is_template = bool(data["is_template"])
    if "application_id" in data:
        letter.application_id = _ensure_application(db, data["application_id"], user_id)

    db.commit()
    db.refresh(letter)
    return letter


def delete_cover_letter(db: Session, cover_letter_id: str, user_id: str) -> None:
    letter = ownership.cover_letters.get(db, cover_letter_id, user_id)
    db.delete(letter)
    db.commit()


def duplicate_cover_letter(
    db: Session, cover_letter_id: str, user_id: str, title: str | None = None
) -> CoverLetter:
    original = ownership.cover_letters.get(db, cover_letter_id, user_id)
    copy = ownership.cover_letters.add(
        db,
        user_id,
        title=(title or "").strip() or f"{original.title} (Copy)",
        content=original.content,
        is_template=original.is_template,
        application_id=None,
    )
    db.commit()
    db.refresh(copy)
    return copy


def refine_cover_letter(
    db: Session,
    cover_letter_id: str,
    user_id: str,
    instructions: str,
    drafter: CoverLetterDrafter,
) -> CoverLetter:
    if not drafter.is_configured:
        raise AIServiceNotConfigured()

    letter = get_cover_letter_for_user(db, cover_letter_id, user_id)
    letter.content = drafter.refine_cover_letter(letter.content, instructions)
    db.commit()
    db.refresh(letter)
    logger.info("Cover letter refined user_id=%s cover_letter_id=%s", user_id, letter.id)
    return letter


def cover_letter_statistics(db: Session, user_id: str) -> dict[str, int]:
    total = ownership.cover_letters.count(db, user_id)
    templates = ownership.cover_letters.count(db, user_id, CoverLetter.is_template.is_(True))
    linked = ownership.cover_letters.count(db, user_id, CoverLetter.application_id.isnot(None))
    return {
        "total": total,
        "templates": templates,
        "linked_to_applications": linked,
        "not_linked": total - linked,
    }
