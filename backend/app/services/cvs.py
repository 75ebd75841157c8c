from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import desc
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import ConflictError, CVNotFound, ValidationError
from app.models.cv import CV
from app.services import ownership

logger = logging.getLogger(__name__)

SECTION_FIELDS = ("experience", "education", "skills", "languages")

DEFAULT_CONFLICT_MESSAGE = "Another CV was made default at the same time. Please retry."


def get_cv_for_user(db: Session, cv_id: str, user_id: str) -> CV:
    return ownership.cvs.get(db, cv_id, user_id)


def _clear_other_defaults(db: Session, user_id: str, keep_id: str | None = None) -> None:
    """
    Lock the user's CV rows and unset every default except `keep_id`.

    Must run inside the same transaction that sets the new default; the
    flush orders the UPDATEs so the one-default index never sees two.
    """
    locked = ownership.cvs.query(db, user_id).with_for_update().all()
    for other in locked:
        if other.id != keep_id and other.is_default:
            other.is_default = False
    db.flush()


def _commit_default_change(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError(DEFAULT_CONFLICT_MESSAGE) from exc


def create_cv(db: Session, user_id: str, data: dict[str, Any]) -> CV:
    make_default = bool(data.get("is_default"))
    if make_default:
        _clear_other_defaults(db, user_id)

    cv = ownership.cvs.add(
        db,
        user_id,
        title=data["title"].strip(),
        personal_info=data["personal_info"],
        experience=data.get("experience") or [],
        education=data.get("education") or [],
        skills=data.get("skills") or [],
        languages=data.get("languages") or [],
        is_default=make_default,
    )
    _commit_default_change(db)
    db.refresh(cv)
    if make_default:
        logger.info("Default CV set user_id=%s cv_id=%s", user_id, cv.id)
    return cv


def list_cvs(db: Session, user_id: str) -> list[CV]:
    return (
        ownership.cvs.query(db, user_id)
        .order_by(desc(CV.is_default), desc(CV.updated_at))
        .all()
    )


def get_default_cv(db: Session, user_id: str) -> CV:
    cv = ownership.cvs.query(db, user_id).filter(CV.is_default.is_(True)).first()
    if cv is None:
        raise CVNotFound("No default CV found")
    return cv


def update_cv(db: Session, cv_id: str, user_id: str, data: dict[str, Any]) -> CV:
    if not data:
        raise ValidationError("At least one field must be provided for update")

    cv = get_cv_for_user(db, cv_id, user_id)

    if data.get("title"):
        cv.title = data["title"].strip()
    if data.get("personal_info"):
        cv.personal_info = data["personal_info"]
    for key in SECTION_FIELDS:
        if key in data and data[key] is not None:
            setattr(cv, key, data[key])

    becomes_default = data.get("is_default") is True and not cv.is_default
    if data.get("is_default") is True:
        _clear_other_defaults(db, user_id, keep_id=cv.id)
        cv.is_default = True
    elif data.get("is_default") is False:
        cv.is_default = False

    _commit_default_change(db)
    db.refresh(cv)
    if becomes_default:
        logger.info("Default CV set user_id=%s cv_id=%s", user_id, cv.id)
    return cv


def set_default_cv(db: Session, cv_id: str, user_id: str) -> CV:
    cv = get_cv_for_user(db, cv_id, user_id)
    _clear_other_defaults(db, user_id, keep_id=cv.id)
    cv.is_default = True
    _commit_default_change(db)
    db.refresh(cv)
    logger.info("Default CV set user_id=%s cv_id=%s", user_id, cv.id)
    return cv


def delete_cv(db: Session, cv_id: str, user_id: str) -> None:
    cv = get_cv_for_user(db, cv_id, user_id)
    # Applications keep existing with cv_id cleared.
    db.delete(cv)
    db.commit()


def duplicate_cv(db: Session, cv_id: str, user_id: str, title: str | None = None) -> CV:
    original = get_cv_for_user(db, cv_id, user_id)
    copy = ownership.cvs.add(
        db,
        user_id,
        title=(title or "").strip() or f"{original.title} (Copy)",
        personal_info=dict(original.personal_info or {}),
        experience=list(original.experience or []),
        education=list(original.education or []),
        skills=list(original.skills or []),
        languages=list(original.languages or []),
        is_default=False,
    )
    db.commit()
    db.refresh(copy)
    return copy


def cv_statistics(db: Session, user_id: str) -> dict[str, Any]:
    total = ownership.cvs.count(db, user_id)
    default_cv = (
        db.query(CV.id, CV.title)
        .filter(CV.user_id == user_id, CV.is_default.is_(True))
        .first()
    )
    with_applications = ownership.cvs.count(db, user_id, CV.applications.any())
    return {
        "total": total,
        "default_cv": {"id": default_cv.id, "title": default_cv.title} if default_cv else None,
        "with_applications": with_applications,
        "without_applications": total - with_applications,
    }
