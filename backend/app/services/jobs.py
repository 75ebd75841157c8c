from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import String, cast, desc, or_
from sqlalchemy.orm import Session

from app.core.errors import ValidationError
from app.models.job import Job
from app.services import ownership
from app.services.pagination import DEFAULT_LIMIT, DEFAULT_PAGE, Page, paginate

# Only replaced by non-empty values on update.
_REQUIRED_ON_UPDATE = ("company_name", "position_title", "tech_stack")

_UPDATABLE = (
    "company_name",
    "position_title",
    "job_description",
    "location",
    "salary_range",
    "tech_stack",
    "source_url",
    "source_platform",
    "is_saved",
)


@dataclass
class JobFilters:
    company_name: str | None = None
    position_title: str | None = None
    location: str | None = None
    tech_stack: list[str] = field(default_factory=list)
    is_saved: bool | None = None


def normalize_tech_stack(raw) -> list[str]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        return []
    out: list[str] = []
    for t in raw:
        if t is None:
            continue
        s = str(t).strip()
        if s:
            out.append(s)
    return out


def get_job_for_user(db: Session, job_id: str, user_id: str) -> Job:
    return ownership.jobs.get(db, job_id, user_id)


def create_job(db: Session, user_id: str, data: dict[str, Any]) -> Job:
    job = ownership.jobs.add(
        db,
        user_id,
        company_name=data["company_name"].strip(),
        position_title=data["position_title"].strip(),
        job_description=data.get("job_description") or None,
        location=data.get("location") or None,
        salary_range=data.get("salary_range") or None,
        tech_stack=normalize_tech_stack(data.get("tech_stack")),
        source_url=data.get("source_url") or None,
        source_platform=data.get("source_platform") or None,
        is_saved=True if data.get("is_saved") is None else bool(data["is_saved"]),
    )
    db.commit()
    db.refresh(job)
    return job


def list_jobs(
    db: Session,
    user_id: str,
    filters: JobFilters | None = None,
    *,
    page: int = DEFAULT_PAGE,
    limit: int = DEFAULT_LIMIT,
) -> Page[Job]:
    filters = filters or JobFilters()
    qry = ownership.jobs.query(db, user_id)  # ✅ scope

    if filters.company_name:
        qry = qry.filter(Job.company_name.icontains(filters.company_name.strip(), autoescape=True))
    if filters.position_title:
        qry = qry.filter(Job.position_title.icontains(filters.position_title.strip(), autoescape=True))
    if filters.location:
        qry = qry.filter(Job.location.icontains(filters.location.strip(), autoescape=True))

    # Tech stack filter (any-of, exact entries). Matches the JSON-encoded
    # element inside the stored array so it works on every backend.
    techs = normalize_tech_stack(filters.tech_stack)
    if techs:
        as_text = cast(Job.tech_stack, String)
        qry = qry.filter(or_(*[as_text.contains(json.dumps(t), autoescape=True) for t in techs]))

    if filters.is_saved is not None:
        qry = qry.filter(Job.is_saved.is_(filters.is_saved))

    return paginate(qry.order_by(desc(Job.created_at)), page=page, limit=limit)


def update_job(db: Session, job_id: str, user_id: str, data: dict[str, Any]) -> Job:
    if not data:
        raise ValidationError("At least one field must be provided for update")

    job = get_job_for_user(db, job_id, user_id)

    for key in _UPDATABLE:
        if key not in data:
            continue
        value = data[key]
        if key in _REQUIRED_ON_UPDATE and not value:
            continue
        if key == "is_saved" and value is None:
            continue
        if key == "tech_stack":
            value = normalize_tech_stack(value)
        elif isinstance(value, str):
            value = value.strip()
        setattr(job, key, value)

    db.commit()
    db.refresh(job)
    return job


def delete_job(db: Session, job_id: str, user_id: str) -> None:
    job = get_job_for_user(db, job_id, user_id)
    # Applications go with it (ORM cascade + ON DELETE CASCADE).
    db.delete(job)
    db.commit()


def job_statistics(db: Session, user_id: str) -> dict[str, int]:
    total = ownership.jobs.count(db, user_id)
    saved = ownership.jobs.count(db, user_id, Job.is_saved.is_(True))
    with_applications = ownership.jobs.count(db, user_id, Job.applications.any())
    return {
        "total": total,
        "saved": saved,
        "unsaved": total - saved,
        "with_applications": with_applications,
        "without_applications": total - with_applications,
    }


def search_jobs(db: Session, user_id: str, keyword: str, limit: int = 10) -> list[Job]:
    """
    Case-insensitive substring match on company, position or description.
    """
    term = (keyword or "").strip()
    qry = ownership.jobs.query(db, user_id)
    if term:
        qry = qry.filter(
            or_(
                Job.company_name.icontains(term, autoescape=True),
                Job.position_title.icontains(term, autoescape=True),
                Job.job_description.icontains(term, autoescape=True),
            )
        )
    normalized_limit = max(1, min(int(10 if limit is None else limit), 100))
    return qry.order_by(desc(Job.created_at)).limit(normalized_limit).all()
